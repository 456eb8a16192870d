"""
Dependency injection services.

Provides cached provider functions for application-scoped singletons.
"""

from infrastructure.services.providers import (
    get_settings,
    get_localization_service,
)

__all__ = [
    "get_settings",
    "get_localization_service",
]
