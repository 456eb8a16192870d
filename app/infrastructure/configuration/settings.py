"""Translation manager configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Feature settings
from infrastructure.configuration.features import (
    ExtractionSettings,
    LocalizationSettings,
)


class Settings(BaseSettings):
    """Translation manager configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object:

    - **extraction**: Key extractor behaviour (context radius, workers, excludes)
    - **i18n**: Translation store and language pack behaviour

    Environment Variables:
        PREFIX: Environment prefix; empty means production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        ```python
        from infrastructure.configuration import settings

        radius = settings.extraction.context_radius
        version = settings.i18n.pack_version

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    # Feature settings
    extraction: ExtractionSettings
    i18n: LocalizationSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "extraction": ExtractionSettings,
            "i18n": LocalizationSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
