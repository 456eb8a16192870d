"""Language pack export and import.

A pack is the complete set of one language's translations:

    {
        "language": {...},
        "translations": {group: {key: value}},
        "metadata": {"exported_at", "total_strings", "completed_strings",
                     "approved_strings", "version"},
    }
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from infrastructure.i18n.errors import FormatError
from infrastructure.i18n.formats import (
    PackFormat,
    deserialize_pack,
    parse_format,
    serialize_occurrences,
    serialize_pack,
    timestamp_slug,
)
from infrastructure.i18n.languages import LanguageRef, LanguageRegistry
from infrastructure.i18n.models import ExtractedKey, TranslationStatus, utcnow
from infrastructure.i18n.store import TranslationStore
from infrastructure.logging import bind_operation_context, get_module_logger

logger = get_module_logger()


class PackPayload(BaseModel):
    """Shape an imported pack must have; other top-level keys are ignored."""

    translations: Dict[str, Dict[str, Optional[str]]]

    model_config = ConfigDict(extra="allow")


@dataclass
class ExportArtifact:
    """Rendered export, ready to be written by the caller.

    Attributes:
        filename: Suggested file name.
        content: Encoded file content.
        statistics: Pack metadata, or extraction stats for key exports.
    """

    filename: str
    content: bytes
    statistics: Dict[str, Any]


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total_processed(self) -> int:
        return self.created + self.updated + self.skipped

    def to_dict(self) -> Dict[str, int]:
        return {**asdict(self), "total_processed": self.total_processed}


class PackSerializer:
    """Exports languages to packs and imports packs back into the store.

    Args:
        store: Translation store.
        registry: Language registry.
        version: Version tag written into pack metadata.
    """

    def __init__(self, store: TranslationStore, registry: LanguageRegistry, version: str = "1.0.0"):
        self.store = store
        self.registry = registry
        self.version = version

    def build_pack(self, language: LanguageRef, only_completed: bool = False) -> Dict[str, Any]:
        """Assemble the pack mapping for a language."""
        target = self.registry.find(language)
        translations = self.store.query(
            language=target, completed=True if only_completed else None
        )

        grouped: Dict[str, Dict[str, Optional[str]]] = {}
        for translation in translations:
            grouped.setdefault(translation.group, {})[translation.key] = translation.value

        return {
            "language": target.to_dict(),
            "translations": grouped,
            "metadata": {
                "exported_at": utcnow().isoformat(),
                "total_strings": len(translations),
                "completed_strings": sum(1 for t in translations if t.is_completed),
                "approved_strings": sum(1 for t in translations if t.is_approved),
                "version": self.version,
            },
        }

    def export_pack(
        self,
        language: LanguageRef,
        format: "PackFormat | str" = PackFormat.JSON,
        only_completed: bool = False,
    ) -> ExportArtifact:
        """Render a language pack.

        Raises:
            FormatError: If the format cannot hold a pack.
            NotFoundError: If the language is unknown.
        """
        fmt = parse_format(format)
        target = self.registry.find(language)
        with bind_operation_context(operation="export_pack", language=target.code):
            pack = self.build_pack(target, only_completed=only_completed)
            content = serialize_pack(pack, fmt)
            filename = f"language_pack_{target.code}_{timestamp_slug()}.{fmt.extension}"
            logger.info(
                "language_pack_exported",
                filename=filename,
                format=fmt.value,
                total_strings=pack["metadata"]["total_strings"],
            )
        return ExportArtifact(filename=filename, content=content, statistics=pack["metadata"])

    def import_pack(
        self,
        language: LanguageRef,
        data: "bytes | str | Dict[str, Any]",
        format: "PackFormat | str" = PackFormat.JSON,
        overwrite: bool = False,
    ) -> ImportResult:
        """Load a pack into a language.

        Existing keys are skipped unless ``overwrite`` is set, in which case
        their value is replaced and they become approved. Missing keys are
        created approved. Statistics are recomputed once at the end.

        Raises:
            FormatError: If the payload is malformed (nothing is changed).
            NotFoundError: If the language is unknown.
        """
        fmt = parse_format(format)
        target = self.registry.find(language)
        with bind_operation_context(operation="import_pack", language=target.code):
            raw = data if isinstance(data, dict) else deserialize_pack(data, fmt)
            try:
                payload = PackPayload.model_validate(raw)
            except ValidationError as e:
                raise FormatError(
                    f"Invalid language pack format: {e.error_count()} error(s)",
                    format=fmt.value,
                ) from e

            result = ImportResult()
            with self.store.batch():
                for group, entries in payload.translations.items():
                    for key, value in entries.items():
                        existing = self.store.find(target, group, key)
                        if existing is not None and not overwrite:
                            result.skipped += 1
                        elif existing is not None:
                            self.store.update(
                                existing, value=value, status=TranslationStatus.APPROVED
                            )
                            result.updated += 1
                        else:
                            self.store.create(
                                target, group, key, value, status=TranslationStatus.APPROVED
                            )
                            result.created += 1
                self.store.touch(target.id)

            logger.info("language_pack_imported", overwrite=overwrite, **result.to_dict())
        return result

    @staticmethod
    def export_occurrences(
        occurrences: List[ExtractedKey],
        format: "PackFormat | str" = PackFormat.JSON,
        statistics: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> ExportArtifact:
        """Render extracted key occurrences.

        Raises:
            FormatError: If the format cannot hold extracted keys.
        """
        fmt = parse_format(format)
        content = serialize_occurrences(occurrences, fmt, **options)
        filename = f"extracted_keys_{timestamp_slug()}.{fmt.extension}"
        return ExportArtifact(filename=filename, content=content, statistics=statistics or {})
