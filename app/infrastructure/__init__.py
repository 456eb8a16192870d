"""Infrastructure modules for the translation manager.

Centralized infrastructure components:
- configuration: Settings management (settings, ExtractionSettings, LocalizationSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- i18n: Translation management and key extraction
- operations: Operation results for batch outcomes
- services: Cached providers (get_settings, get_localization_service)
"""
