"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
translation manager using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    ExtractionSettings: Key extraction settings class
    LocalizationSettings: Translation store / pack settings class

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    radius = settings.extraction.context_radius
    version = settings.i18n.pack_version
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import (
    ExtractionSettings,
    LocalizationSettings,
)

__all__ = ["Settings", "settings", "ExtractionSettings", "LocalizationSettings"]
