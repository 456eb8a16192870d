"""Unit tests for infrastructure.configuration.settings module.

Tests cover:
- ExtractionSettings validation and defaults
- LocalizationSettings defaults and overrides
- Settings class initialization
- Integration with Pydantic BaseSettings
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import (
    ExtractionSettings,
    LocalizationSettings,
    Settings,
)
from infrastructure.services.providers import get_settings


@pytest.mark.unit
class TestExtractionSettings:
    """Test suite for ExtractionSettings configuration."""

    def test_extraction_settings_defaults(self):
        """ExtractionSettings uses correct default values."""
        extraction = ExtractionSettings()

        assert extraction.context_radius == 50
        assert extraction.max_workers == 1
        assert extraction.default_kind == "php"
        assert extraction.sort_field == "key"
        assert extraction.exclude_directories == []

    def test_extraction_settings_custom_values(self, monkeypatch):
        """ExtractionSettings reads its environment variables."""
        monkeypatch.setenv("EXTRACTION_CONTEXT_RADIUS", "80")
        monkeypatch.setenv("EXTRACTION_MAX_WORKERS", "8")
        monkeypatch.setenv("EXTRACTION_DEFAULT_KIND", "python")
        monkeypatch.setenv("EXTRACTION_SORT_FIELD", "file")

        extraction = ExtractionSettings()

        assert extraction.context_radius == 80
        assert extraction.max_workers == 8
        assert extraction.default_kind == "python"
        assert extraction.sort_field == "file"

    def test_exclude_directories_parsed(self, monkeypatch):
        """Comma-separated exclusions are split and trimmed."""
        monkeypatch.setenv("EXTRACTION_EXCLUDE_DIRECTORIES", " build ,, tmp/cache ")

        assert ExtractionSettings().exclude_directories == ["build", "tmp/cache"]

    def test_invalid_sort_field(self, monkeypatch):
        """Only occurrence fields are accepted as sort field."""
        monkeypatch.setenv("EXTRACTION_SORT_FIELD", "size")

        with pytest.raises(ValidationError):
            ExtractionSettings()

    @pytest.mark.parametrize("name,value", [("EXTRACTION_MAX_WORKERS", "0"), ("EXTRACTION_CONTEXT_RADIUS", "-1")])
    def test_bounds_validated(self, monkeypatch, name, value):
        """Workers must be positive and the radius non-negative."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            ExtractionSettings()

    def test_populate_by_name(self):
        """Fields can be set by name as well as by alias."""
        assert ExtractionSettings(context_radius=3).context_radius == 3


@pytest.mark.unit
class TestLocalizationSettings:
    """Test suite for LocalizationSettings configuration."""

    def test_localization_settings_defaults(self):
        """LocalizationSettings uses correct default values."""
        localization = LocalizationSettings()

        assert localization.default_group == "default"
        assert localization.default_plural_rule == "one_other"
        assert localization.seed_default_language is True
        assert localization.pack_version == "1.0.0"
        assert localization.export_dir == "storage/translations"

    def test_localization_settings_partial_override(self, monkeypatch):
        """Overrides leave other defaults in place."""
        monkeypatch.setenv("I18N_DEFAULT_GROUP", "messages")
        monkeypatch.setenv("I18N_SEED_DEFAULT_LANGUAGE", "false")

        localization = LocalizationSettings()

        assert localization.default_group == "messages"
        assert localization.seed_default_language is False
        assert localization.pack_version == "1.0.0"


@pytest.mark.unit
class TestSettings:
    """Test suite for main Settings class."""

    def test_settings_includes_feature_sections(self):
        """Settings aggregates extraction and i18n sections."""
        settings = Settings()

        assert isinstance(settings.extraction, ExtractionSettings)
        assert isinstance(settings.i18n, LocalizationSettings)

    def test_settings_accepts_section_overrides(self):
        """Explicit sections replace the environment-built ones."""
        settings = Settings(extraction=ExtractionSettings(max_workers=4))

        assert settings.extraction.max_workers == 4

    def test_is_production(self, monkeypatch):
        """An empty PREFIX means production."""
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False

    def test_settings_singleton_behavior(self):
        """get_settings returns the same instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert isinstance(settings1, Settings)
        assert settings1 is settings2
