"""Exceptions for the translation management system.

Every error raised to callers inherits from I18nError and carries the
identifier that caused it, so the calling layer can act on it without
parsing messages.
"""

from typing import Any, Optional


class I18nError(Exception):
    """Base exception for all translation-management errors.

    Example:
        try:
            store.approve(translation, reviewer_id=7)
        except I18nError as e:
            logger.error("i18n_error", error=str(e))
    """

    pass


class NotFoundError(I18nError):
    """Raised when a language or translation has no matching record.

    Attributes:
        entity: Kind of record looked up ("language" or "translation").
        identifier: The id, code, locale or composite key that was not found.
    """

    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity.capitalize()} not found: {identifier!r}")
        self.entity = entity
        self.identifier = identifier


class DuplicateKeyError(I18nError):
    """Raised when a write would violate a uniqueness constraint.

    Attributes:
        key: The duplicated key (a (language_id, group, key) tuple for
            translations, the code/locale for languages).
    """

    def __init__(self, key: Any, message: Optional[str] = None):
        super().__init__(message or f"Duplicate key: {key!r}")
        self.key = key


class PolicyViolationError(I18nError):
    """Raised when a registry or workflow rule forbids an operation.

    Example:
        >>> registry.delete(default_language)
        Traceback (most recent call last):
        ...
        PolicyViolationError: Cannot delete the default language.

    Attributes:
        subject: Identifier of the language or translation involved.
    """

    def __init__(self, message: str, subject: Any = None):
        super().__init__(message)
        self.subject = subject


class FormatError(I18nError):
    """Raised for a malformed pack payload or an unsupported format.

    Attributes:
        format: The format tag involved, when known.
    """

    def __init__(self, message: str, format: Optional[str] = None):
        super().__init__(message)
        self.format = format


class ExtractionWarning(I18nError):
    """Raised when a path given to the extractor is missing or unreadable.

    The extractor logs and skips these; they never abort a scan.

    Attributes:
        path: The offending path.
    """

    def __init__(self, path: Any, reason: str):
        super().__init__(f"Cannot extract from {path}: {reason}")
        self.path = path
        self.reason = reason
