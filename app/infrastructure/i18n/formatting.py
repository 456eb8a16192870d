"""Date and number formatting for language records.

Languages store their date and time patterns with PHP-style format
characters ("m/d/Y", "g:i A"), the convention language packs are authored
in. Numbers are formatted through Babel for the language's number locale.
"""

from datetime import date, datetime
from typing import Callable, Dict, Union

from babel import numbers

DateLike = Union[date, datetime, str]


def _twelve_hour(value: datetime) -> int:
    return value.hour % 12 or 12


_CODES: Dict[str, Callable[[datetime], str]] = {
    # Day
    "d": lambda v: f"{v.day:02d}",
    "j": lambda v: str(v.day),
    "D": lambda v: v.strftime("%a"),
    "l": lambda v: v.strftime("%A"),
    # Month
    "m": lambda v: f"{v.month:02d}",
    "n": lambda v: str(v.month),
    "M": lambda v: v.strftime("%b"),
    "F": lambda v: v.strftime("%B"),
    # Year
    "Y": lambda v: f"{v.year:04d}",
    "y": lambda v: f"{v.year % 100:02d}",
    # Time
    "H": lambda v: f"{v.hour:02d}",
    "G": lambda v: str(v.hour),
    "h": lambda v: f"{_twelve_hour(v):02d}",
    "g": lambda v: str(_twelve_hour(v)),
    "i": lambda v: f"{v.minute:02d}",
    "s": lambda v: f"{v.second:02d}",
    "A": lambda v: "AM" if v.hour < 12 else "PM",
    "a": lambda v: "am" if v.hour < 12 else "pm",
}


def to_datetime(value: DateLike) -> datetime:
    """Coerce an ISO 8601 string, date or datetime to a datetime.

    Raises:
        ValueError: If a string is not ISO 8601.
    """
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def format_php_date(value: DateLike, pattern: str) -> str:
    """Render a date with a PHP date() pattern.

    Unknown characters are copied as-is; a backslash copies the next
    character literally.
    """
    moment = to_datetime(value)
    parts = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _CODES:
            parts.append(_CODES[char](moment))
        else:
            parts.append(char)
    return "".join(parts)


def format_decimal(number: float, locale: str, decimals: int = 0) -> str:
    """Grouped number with exactly ``decimals`` fraction digits for a locale."""
    pattern = "#,##0" + ("." + "0" * decimals if decimals > 0 else "")
    return numbers.format_decimal(number, format=pattern, locale=locale)
