"""Custom log formatters for structured logging.

This module provides formatters that can be used as structlog processors
to customize log output format.

Usage:
    from infrastructure.logging.formatters import add_app_info, truncate_large_values

Dependencies:
    - structlog processors
"""

from typing import Any


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Create a processor that adds application info to log entries.

    Args:
        app_name: Name of the application.
        app_version: Version string for the application.

    Returns:
        A structlog processor function.

    Example:
        configure_logging(
            extra_processors=[add_app_info("translation-manager", "1.5.0")]
        )
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def truncate_large_values(max_length: int = 500):
    """Create a processor that truncates overly large string values.

    Extraction logs can carry source snippets and file contents; this keeps
    a single entry bounded.

    Args:
        max_length: Maximum string length before truncation.

    Returns:
        A structlog processor function.

    Example:
        configure_logging(
            extra_processors=[truncate_large_values(max_length=1000)]
        )
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
