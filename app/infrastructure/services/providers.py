"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.i18n.factory import create_localization_service
from infrastructure.i18n.service import LocalizationService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Usage:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_localization_service() -> LocalizationService:
    """
    Get application-scoped localization service singleton.

    Returns:
        LocalizationService: Cached service wired from application settings.

    Usage:
        service = get_localization_service()
        artifact = service.export_pack("fr")
    """
    return create_localization_service(settings=get_settings())
