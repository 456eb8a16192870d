"""Structlog configuration and logger setup.

This module provides the core logging configuration for the application.
It configures structlog with processors for debugging context, proper
exception formatting, and environment-aware rendering.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    # Configure logging at app startup
    configure_logging()

    # Get a logger for your module
    logger = get_module_logger()
    logger.info("event_name", key="value")

Dependencies:
    - infrastructure.configuration.Settings
"""

import inspect
import logging
import sys
from typing import Any, Callable, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import Settings
from infrastructure.configuration import settings as app_settings
from infrastructure.logging.formatters import truncate_large_values


def _is_test_environment() -> bool:
    """Detect if running in a test environment.

    Returns:
        True if pytest is in sys.modules, False otherwise
    """
    return "pytest" in sys.modules


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    extra_processors: Optional[List[Callable[..., Any]]] = None,
) -> BoundLogger:
    """Configure structured logging.

    Configures structlog with:
    - Context variable merging for correlation IDs and operation context
    - File/line/function call-site information
    - Exception formatting with stack traces
    - Truncation of oversized values (source snippets, file contents)
    - Test environment detection for log suppression

    Args:
        settings: Settings instance to read LOG_LEVEL/is_production from.
            Defaults to the application settings singleton.
        log_level: Optional override for log level (DEBUG, INFO, WARNING, etc).
        is_production: Optional override for production mode. Controls JSON
            vs console output.
        extra_processors: Additional processors inserted before rendering.

    Returns:
        Configured logger instance
    """
    settings = settings or app_settings

    # Suppress all logging during tests
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)

        # Minimal processors: logs won't be emitted because the root level
        # is above CRITICAL
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    prod_mode = is_production if is_production is not None else settings.is_production

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        truncate_large_values(),
    ]
    processors.extend(extra_processors or [])

    if not prod_mode:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    effective_log_level = log_level or settings.LOG_LEVEL
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, effective_log_level.upper(), logging.INFO),
    )

    return structlog.stdlib.get_logger()


# Module-level logger (auto-configured on import)
logger: BoundLogger = configure_logging()


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a logger instance bound to a name.

    Args:
        name: Optional logger name (typically __name__ in calling module).
            The calling module is detected when omitted.

    Returns:
        Configured logger instance with context
    """
    if name:
        return logger.bind(logger_name=name)

    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    frame = current_frame.f_back
    if frame is None:
        return logger

    module = inspect.getmodule(frame)
    if module:
        return logger.bind(logger_name=module.__name__)

    return logger.bind(logger_name="unknown")


def get_module_logger() -> BoundLogger:
    """Get a logger for the calling module with full path context.

    Automatically detects the calling module and binds component
    and module_path context for structured logging.

    Returns:
        Configured logger instance with module context

    Example:
        # In infrastructure/i18n/store.py
        logger = get_module_logger()
        # context: {"component": "store", "module_path": "infrastructure.i18n.store"}

        logger.info("translation_approved", translation_id=12)
    """
    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    frame = current_frame.f_back
    if frame is None:
        return logger

    module = inspect.getmodule(frame)
    if module:
        module_name = module.__name__
        parts = module_name.split(".")
        context = {
            "component": parts[-1],
            "module_path": module_name,
        }
        return logger.bind(**context)

    return logger.bind(component="unknown")
