"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.extraction import ExtractionSettings
from infrastructure.configuration.features.localization import LocalizationSettings

__all__ = [
    "ExtractionSettings",
    "LocalizationSettings",
]
