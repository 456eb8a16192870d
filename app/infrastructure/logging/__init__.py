"""Structured logging infrastructure.

This package provides centralized logging configuration and utilities
for the translation manager using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_logger(): Get a logger instance with a specific name
    - get_module_logger(): Get a logger for the calling module
    - bind_operation_context(): Context manager for operation-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_operation_context(): Clear all operation context

Formatters:
    - add_app_info(): Processor to add app name/version
    - truncate_large_values(): Processor to limit string lengths

Example:
    from infrastructure.logging import (
        configure_logging,
        get_module_logger,
        bind_operation_context,
    )

    # At application startup
    configure_logging()

    # In a module
    logger = get_module_logger()
    logger.info("module_initialized")

    # Around an operation
    with bind_operation_context(operation="extract_keys"):
        logger.info("scanning_paths")
"""

# Core logging setup
from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)

# Operation context binding
from infrastructure.logging.context import (
    bind_operation_context,
    get_correlation_id,
    clear_operation_context,
)

# Log formatters/processors
from infrastructure.logging.formatters import (
    add_app_info,
    truncate_large_values,
)

__all__ = [
    # Setup
    "configure_logging",
    "get_logger",
    "get_module_logger",
    # Context
    "bind_operation_context",
    "get_correlation_id",
    "clear_operation_context",
    # Formatters
    "add_app_info",
    "truncate_large_values",
]
