"""Tests for infrastructure.i18n.factory module."""

import pytest

from infrastructure.configuration import Settings
from infrastructure.i18n import (
    InMemoryTranslationRepository,
    LocalizationService,
    create_extractor,
    create_localization_service,
)


@pytest.mark.unit
class TestCreateExtractor:
    """Tests for create_extractor."""

    def test_settings_applied(self, monkeypatch):
        """Extraction settings configure the extractor."""
        monkeypatch.setenv("EXTRACTION_CONTEXT_RADIUS", "10")
        monkeypatch.setenv("EXTRACTION_MAX_WORKERS", "4")
        monkeypatch.setenv("EXTRACTION_EXCLUDE_DIRECTORIES", "build, .cache")

        extractor = create_extractor(Settings())

        assert extractor.context_radius == 10
        assert extractor.max_workers == 4
        assert "build" in extractor.exclude_directories
        assert ".cache" in extractor.exclude_directories
        assert "vendor" in extractor.exclude_directories


@pytest.mark.unit
class TestCreateLocalizationService:
    """Tests for create_localization_service."""

    def test_returns_wired_service(self, app_settings):
        """The service is seeded with English by default."""
        service = create_localization_service(settings=app_settings)
        assert isinstance(service, LocalizationService)
        assert service.registry.default().code == "en"
        assert service.registry.fallback().code == "en"

    def test_seed_disabled(self, app_settings):
        """seed=False leaves the registry empty."""
        service = create_localization_service(settings=app_settings, seed=False)
        assert len(service.registry) == 0

    def test_seed_setting(self, monkeypatch):
        """I18N_SEED_DEFAULT_LANGUAGE controls seeding."""
        monkeypatch.setenv("I18N_SEED_DEFAULT_LANGUAGE", "false")
        service = create_localization_service(settings=Settings())
        assert len(service.registry) == 0

    def test_custom_repository(self, app_settings):
        """A supplied repository backs the store."""
        repository = InMemoryTranslationRepository()
        service = create_localization_service(settings=app_settings, repository=repository)
        service.store.create("en", None, "hello", "Hello")
        assert repository.count() == 1

    def test_settings_defaults_flow_through(self, monkeypatch):
        """Group and pack version come from localization settings."""
        monkeypatch.setenv("I18N_DEFAULT_GROUP", "messages")
        monkeypatch.setenv("I18N_PACK_VERSION", "3.0.0")
        service = create_localization_service(settings=Settings())

        translation = service.store.create("en", None, "hello", "Hello")

        assert translation.group == "messages"
        assert service.export_pack("en").statistics["version"] == "3.0.0"

    def test_stats_pushed_to_registry(self, app_settings):
        """Store mutations update language completion."""
        service = create_localization_service(settings=app_settings)
        service.store.create("en", None, "hello", "Hello", status="translated")
        assert service.registry.find("en").completion_percentage == 100.0
