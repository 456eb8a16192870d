"""Tests for infrastructure.i18n.packs module."""

import json

import pytest

from infrastructure.i18n import (
    FormatError,
    NotFoundError,
    PackSerializer,
    TranslationStatus,
)
from tests.factories.i18n import make_language, make_pack


@pytest.fixture
def packs(populated_store, registry):
    return PackSerializer(populated_store, registry, version="2.1.0")


@pytest.mark.unit
class TestBuildPack:
    """Tests for pack assembly."""

    def test_pack_shape(self, packs, french):
        """A pack holds the language, grouped translations and metadata."""
        pack = packs.build_pack(french)

        assert pack["language"]["code"] == "fr"
        assert pack["translations"] == {
            "auth": {"failed": "Identifiants invalides.", "throttle": None}
        }
        metadata = pack["metadata"]
        assert metadata["total_strings"] == 2
        assert metadata["completed_strings"] == 1
        assert metadata["approved_strings"] == 0
        assert metadata["version"] == "2.1.0"
        assert "exported_at" in metadata

    def test_only_completed(self, packs):
        """only_completed drops pending and empty records."""
        pack = packs.build_pack("fr", only_completed=True)
        assert pack["translations"] == {"auth": {"failed": "Identifiants invalides."}}
        assert pack["metadata"]["total_strings"] == 1


@pytest.mark.unit
class TestExportPack:
    """Tests for rendered exports."""

    def test_json_export(self, packs):
        """JSON exports name the file after the language and timestamp."""
        artifact = packs.export_pack("en", "json")

        assert artifact.filename.startswith("language_pack_en_")
        assert artifact.filename.endswith(".json")
        data = json.loads(artifact.content)
        assert data["translations"]["messages"] == {"welcome": "Welcome"}
        assert artifact.statistics["approved_strings"] == 3

    def test_source_export_extension(self, packs):
        """Source exports use the .py extension."""
        assert packs.export_pack("en", "source").filename.endswith(".py")

    def test_export_unsupported_format(self, packs):
        """csv cannot hold a pack."""
        with pytest.raises(FormatError):
            packs.export_pack("en", "csv")

    def test_export_unknown_language(self, packs):
        """Unknown languages raise NotFoundError."""
        with pytest.raises(NotFoundError):
            packs.export_pack("xx")


@pytest.mark.unit
class TestImportPack:
    """Tests for pack import."""

    def test_import_creates_approved(self, packs, registry, populated_store):
        """Missing keys are created approved and stats recomputed."""
        german = registry.add(make_language(code="de", locale="de_DE", name="Deutsch", english_name="German"))

        result = packs.import_pack(german, make_pack())

        assert result.to_dict() == {"created": 3, "updated": 0, "skipped": 0, "total_processed": 3}
        assert populated_store.count(german, status=TranslationStatus.APPROVED) == 3
        assert registry.find("de").completion_percentage == 100.0

    def test_import_skips_existing(self, packs, populated_store):
        """Existing keys are left alone without overwrite."""
        result = packs.import_pack("fr", make_pack())
        assert (result.created, result.updated, result.skipped) == (1, 0, 2)
        assert populated_store.find("fr", "auth", "failed").value == "Identifiants invalides."

    def test_import_overwrite(self, packs, populated_store):
        """With overwrite, existing keys are replaced and approved."""
        result = packs.import_pack("fr", make_pack(), overwrite=True)

        assert (result.created, result.updated, result.skipped) == (1, 2, 0)
        throttle = populated_store.find("fr", "auth", "throttle")
        assert throttle.value == "Trop de tentatives."
        assert throttle.status is TranslationStatus.APPROVED

    def test_import_from_yaml_bytes(self, packs, populated_store):
        """Serialized payloads are parsed with the given format."""
        payload = b"translations:\n  errors:\n    required: Obligatoire\n"
        result = packs.import_pack("fr", payload, "yaml")
        assert result.created == 1
        assert populated_store.find("fr", "errors", "required").value == "Obligatoire"

    @pytest.mark.parametrize(
        "payload",
        [
            {"language": {"code": "fr"}},
            {"translations": ["not", "a", "mapping"]},
            {"translations": {"auth": {"failed": {"nested": "dict"}}}},
        ],
    )
    def test_invalid_payload_changes_nothing(self, packs, populated_store, payload):
        """Malformed packs raise FormatError before any write."""
        before = populated_store.count()
        with pytest.raises(FormatError):
            packs.import_pack("fr", payload)
        assert populated_store.count() == before

    def test_invalid_json_text(self, packs):
        """Unparseable text raises FormatError."""
        with pytest.raises(FormatError):
            packs.import_pack("fr", "{broken", "json")

    def test_json_round_trip(self, packs, registry, populated_store):
        """Exporting then importing into a new language recreates every key."""
        artifact = packs.export_pack("en", "json")
        spanish = registry.add(make_language(code="es", locale="es_ES", name="Español", english_name="Spanish"))

        result = packs.import_pack(spanish, artifact.content, "json")

        assert result.created == artifact.statistics["total_strings"]
        assert populated_store.find(spanish, "messages", "welcome").value == "Welcome"


@pytest.mark.unit
class TestExportOccurrences:
    """Tests for extracted key exports."""

    def test_filename_and_statistics(self):
        """Occurrence exports carry the given statistics."""
        artifact = PackSerializer.export_occurrences([], "csv", statistics={"total_keys": 0})
        assert artifact.filename.startswith("extracted_keys_")
        assert artifact.filename.endswith(".csv")
        assert artifact.statistics == {"total_keys": 0}
        assert artifact.content.decode("utf-8") == "Key,File,Line,Type,Context\n"
