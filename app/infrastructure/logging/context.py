"""Operation context binding for structured logging.

Binds operation-scoped context (correlation id, operation name, language)
to every log entry emitted while an extraction, import or export runs.

Usage:
    from infrastructure.logging import bind_operation_context

    with bind_operation_context(operation="import_pack", language="fr"):
        logger.info("pack_import_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_operation_context(
    correlation_id: Optional[str] = None,
    operation: Optional[str] = None,
    language: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind operation-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique operation identifier. Auto-generated if not provided.
        operation: Operation name (e.g., "extract_keys", "export_pack").
        language: Language code the operation works on, if any.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id bound for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if operation is not None:
        context["operation"] = operation

    if language is not None:
        context["language"] = language

    context.update(extra_context)

    tokens = structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        # Restores whatever an enclosing operation had bound
        structlog.contextvars.reset_contextvars(**tokens)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_operation_context() -> None:
    """Clear all operation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
