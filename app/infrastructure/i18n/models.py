"""Translation models for the i18n system.

Defines the core records: languages, per-language translations and the
transient key occurrences produced by the extractor.

These are plain dataclasses (no runtime validation); invariants that span
records (single default language, stats recompute, workflow timestamps) are
enforced by the registry and the store, not here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from infrastructure.i18n.formatting import DateLike, format_decimal, format_php_date


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for every record timestamp."""
    return datetime.now(timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def get_path(data: Optional[Dict[str, Any]], path: str, default: Any = None) -> Any:
    """Read a dot-separated path from a nested dict.

    Args:
        data: Nested dict (may be None).
        path: Dot-separated path (e.g., "review.notes").
        default: Value returned when any segment is missing.

    Returns:
        The value at path, or default.
    """
    current: Any = data or {}
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return default
        current = current[segment]
    return current


def set_path(data: Optional[Dict[str, Any]], path: str, value: Any) -> Dict[str, Any]:
    """Write a value at a dot-separated path, creating intermediate dicts.

    Args:
        data: Nested dict to update (None starts a new dict).
        path: Dot-separated path.
        value: Value to store.

    Returns:
        The updated dict.
    """
    result = data if data is not None else {}
    current = result
    segments = path.split(".")
    for segment in segments[:-1]:
        if not isinstance(current.get(segment), dict):
            current[segment] = {}
        current = current[segment]
    current[segments[-1]] = value
    return result


class TranslationStatus(str, Enum):
    """Workflow status of a translation.

    pending -> translated -> reviewed -> approved | rejected
    """

    PENDING = "pending"
    TRANSLATED = "translated"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"


# Statuses that record a completed review; editing the value reopens them
REVIEWED_STATUSES = frozenset({TranslationStatus.REVIEWED, TranslationStatus.APPROVED})


@dataclass
class Language:
    """A language translations can be written in.

    Attributes:
        code: Short identifier (e.g., "en", "fr").
        locale: Full locale tag (e.g., "en_US").
        name: Native language name.
        english_name: Language name in English.
        id: Registry-assigned identifier (None until registered).
        is_default: Whether this is the default language (at most one).
        is_fallback: Whether this is the fallback language (at most one).
        total_strings: Number of translation records for the language.
        translated_strings: Number of completed translation records.
        date_format: PHP-style date pattern (e.g., "m/d/Y").
        time_format: PHP-style time pattern (e.g., "g:i A").
        number_format: Babel locale used for numbers; empty uses locale.
        completion_percentage: translated_strings / total_strings * 100.
        metadata: Free-form language-specific data.
    """

    code: str
    locale: str
    name: str
    english_name: str
    id: Optional[int] = None
    iso_code: Optional[str] = None
    flag_emoji: Optional[str] = None
    country_code: Optional[str] = None
    is_rtl: bool = False
    date_format: str = "Y-m-d"
    time_format: str = "H:i"
    number_format: str = "en"
    is_active: bool = True
    is_default: bool = False
    is_fallback: bool = False
    sort_order: int = 0
    total_strings: int = 0
    translated_strings: int = 0
    completion_percentage: float = 0.0
    last_updated_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def direction(self) -> str:
        """Text direction derived from is_rtl."""
        return "rtl" if self.is_rtl else "ltr"

    @property
    def display_name(self) -> str:
        """Native name, prefixed with the flag emoji when one is set."""
        if self.flag_emoji:
            return f"{self.flag_emoji} {self.name}"
        return self.name

    @property
    def completion_status(self) -> str:
        """Descriptive label for the completion percentage."""
        percentage = self.completion_percentage
        if percentage >= 100:
            return "Complete"
        if percentage >= 90:
            return "Nearly Complete"
        if percentage >= 75:
            return "Mostly Complete"
        if percentage >= 50:
            return "Partially Complete"
        if percentage >= 25:
            return "In Progress"
        if percentage > 0:
            return "Started"
        return "Not Started"

    def format_date(self, value: DateLike) -> str:
        """Format a date with the language's date_format."""
        return format_php_date(value, self.date_format)

    def format_time(self, value: DateLike) -> str:
        return format_php_date(value, self.time_format)

    def format_datetime(self, value: DateLike) -> str:
        """Date and time patterns joined by a space."""
        return format_php_date(value, f"{self.date_format} {self.time_format}")

    def format_number(self, number: float, decimals: int = 0) -> str:
        """Format a number for number_format, or the language locale when unset.

        Raises:
            babel.UnknownLocaleError: If the locale is not known to Babel.
        """
        return format_decimal(number, self.number_format or self.locale, decimals)

    def get_metadata(self, path: str, default: Any = None) -> Any:
        """Read a metadata value by dot-separated path."""
        return get_path(self.metadata, path, default)

    def set_metadata(self, path: str, value: Any) -> None:
        """Write a metadata value by dot-separated path."""
        self.metadata = set_path(self.metadata, path, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the API/pack representation."""
        return {
            "id": self.id,
            "code": self.code,
            "locale": self.locale,
            "name": self.name,
            "english_name": self.english_name,
            "flag_emoji": self.flag_emoji,
            "is_rtl": self.is_rtl,
            "direction": self.direction,
            "is_active": self.is_active,
            "is_default": self.is_default,
            "completion_percentage": self.completion_percentage,
            "completion_status": self.completion_status,
        }


@dataclass
class Translation:
    """A translated string for one (language, group, key).

    Attributes:
        language_id: Owning language id.
        group: Namespace the key belongs to (e.g., "auth").
        key: Key identifier inside the group.
        value: Translated text (None or "" when missing).
        plurals: Plural category -> text (e.g., {"one": ..., "other": ...}).
        plural_rule: Name of a registered plural rule overriding the default.
        status: Workflow status.
        quality_score: 0-100, clamped by the store.
        translator_id: Opaque id of the translating user (not dereferenced).
        reviewer_id: Opaque id of the reviewing user (not dereferenced).
        usage_count: Times the translation was resolved.
    """

    language_id: int
    group: str
    key: str
    value: Optional[str] = None
    id: Optional[int] = None
    plurals: Optional[Dict[str, str]] = None
    plural_rule: Optional[str] = None
    context: Optional[str] = None
    comment: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: TranslationStatus = TranslationStatus.PENDING
    needs_review: bool = False
    is_fuzzy: bool = False
    quality_score: Optional[float] = None
    source_value: Optional[str] = None
    source_updated_at: Optional[datetime] = None
    is_outdated: bool = False
    translator_id: Optional[Any] = None
    reviewer_id: Optional[Any] = None
    translated_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    usage_count: int = 0
    last_used_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.status = TranslationStatus(self.status)
        if self.quality_score is not None:
            self.quality_score = max(0.0, min(100.0, float(self.quality_score)))

    @property
    def unique_key(self) -> tuple:
        """Composite identity (language_id, group, key)."""
        return (self.language_id, self.group, self.key)

    @property
    def is_translated(self) -> bool:
        """True when a non-empty value is present."""
        return bool(self.value)

    @property
    def is_approved(self) -> bool:
        return self.status == TranslationStatus.APPROVED

    @property
    def is_completed(self) -> bool:
        """Completed means a non-empty value that has left the pending state."""
        return self.is_translated and self.status != TranslationStatus.PENDING

    def get_metadata(self, path: str, default: Any = None) -> Any:
        """Read a metadata value by dot-separated path."""
        return get_path(self.metadata, path, default)

    def to_dict(self, language_code: Optional[str] = None) -> Dict[str, Any]:
        """Convert to the API representation."""
        return {
            "id": self.id,
            "language_code": language_code,
            "group": self.group,
            "key": self.key,
            "value": self.value,
            "plurals": self.plurals,
            "context": self.context,
            "status": self.status.value,
            "needs_review": self.needs_review,
            "is_fuzzy": self.is_fuzzy,
            "is_outdated": self.is_outdated,
            "quality_score": self.quality_score,
            "usage_count": self.usage_count,
            "translated_at": _isoformat(self.translated_at),
            "reviewed_at": _isoformat(self.reviewed_at),
            "last_used_at": _isoformat(self.last_used_at),
        }


@dataclass(frozen=True)
class ExtractedKey:
    """One occurrence of a translation key found in source text.

    Frozen so occurrences can be shared between grouping and statistics
    without copying.

    Attributes:
        key: The literal key argument (e.g., "auth.failed").
        file: Path of the scanned file, None for raw content.
        line: 1-based line of the key.
        type: Source kind the pattern belongs to (e.g., "php", "vue").
        pattern: Regular expression that matched.
        context: Source text around the match.
    """

    key: str
    file: Optional[str]
    line: int
    type: str
    pattern: str
    context: str

    @property
    def namespace(self) -> str:
        """Part of the key before the first dot, or "default"."""
        if "." in self.key:
            return self.key.split(".", 1)[0]
        return "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "file": self.file,
            "line": self.line,
            "type": self.type,
            "pattern": self.pattern,
            "context": self.context,
        }
