"""Language registry.

Holds the language records, keeps the default and fallback flags unique and
maintains each language's completion statistics.
"""

import copy
import itertools
import threading
from typing import Any, Callable, Dict, List, Optional

from infrastructure.i18n.errors import (
    DuplicateKeyError,
    NotFoundError,
    PolicyViolationError,
)
from infrastructure.i18n.models import Language, utcnow
from infrastructure.logging import get_module_logger

logger = get_module_logger()

LanguageRef = Language | int | str
DeleteListener = Callable[[Language], None]

DEFAULT_LANGUAGE_SEED: Dict[str, Any] = {
    "code": "en",
    "locale": "en_US",
    "name": "English",
    "english_name": "English",
    "iso_code": "eng",
    "flag_emoji": "🇺🇸",
    "country_code": "US",
    "is_rtl": False,
    "date_format": "m/d/Y",
    "time_format": "g:i A",
    "number_format": "en_US",
    "is_active": True,
    "is_default": True,
    "is_fallback": True,
    "sort_order": 1,
}


def compute_completion(total: int, translated: int) -> float:
    """Completion percentage rounded to two decimals, 0 for an empty language."""
    if total <= 0:
        return 0.0
    return round(translated / total * 100, 2)


class LanguageRegistry:
    """Thread-safe registry of languages.

    Languages are looked up by id, code or locale. At most one language
    carries ``is_default`` and at most one ``is_fallback``; flag changes are
    applied under the registry lock so no reader ever observes two.

    Every method returns a copy of the stored record. Changes go through
    the registry methods, never through a returned instance.

    Attributes:
        _languages: Language records by id.
        _delete_listeners: Callbacks invoked after a language is removed.
        _lock: Re-entrant lock guarding all registry state.
    """

    def __init__(self):
        self._languages: Dict[int, Language] = {}
        self._ids = itertools.count(1)
        self._delete_listeners: List[DeleteListener] = []
        self._lock = threading.RLock()

    def add_delete_listener(self, listener: DeleteListener) -> None:
        """Register a callback run after a language is deleted."""
        self._delete_listeners.append(listener)

    # Creation and updates

    def create(self, code: str, locale: str, name: str, english_name: str, **attributes) -> Language:
        """Create and register a language."""
        return self.add(
            Language(
                code=code,
                locale=locale,
                name=name,
                english_name=english_name,
                **attributes,
            )
        )

    def add(self, language: Language) -> Language:
        """Register a language, assigning its id.

        A language flagged default or fallback takes the flag over from the
        current holder.

        Raises:
            DuplicateKeyError: If the code or locale is already registered.
        """
        with self._lock:
            self._ensure_unique(language)
            language = copy.deepcopy(language)
            language.id = next(self._ids)
            is_default, is_fallback = language.is_default, language.is_fallback
            language.is_default = False
            language.is_fallback = False
            self._languages[language.id] = language
            if is_default:
                self._flag(language, "is_default")
            if is_fallback:
                self._flag(language, "is_fallback")
            logger.info(
                "language_registered",
                language_id=language.id,
                code=language.code,
                locale=language.locale,
            )
            return copy.deepcopy(language)

    def update(self, language: LanguageRef, **attributes) -> Language:
        """Update language attributes.

        ``is_default``/``is_fallback`` set to True take the flag over as in
        ``set_default``/``set_fallback``; clearing them directly is refused
        since the registry would be left without a holder.

        Raises:
            DuplicateKeyError: If a new code or locale is taken.
            PolicyViolationError: If the update clears the default or fallback flag.
            ValueError: If an attribute does not exist on Language.
        """
        with self._lock:
            target = self._find(language)
            make_default = attributes.pop("is_default", None)
            make_fallback = attributes.pop("is_fallback", None)
            if make_default is False and target.is_default:
                raise PolicyViolationError(
                    "Cannot unset the default language; set another default instead.",
                    subject=target.code,
                )
            if make_fallback is False and target.is_fallback:
                raise PolicyViolationError(
                    "Cannot unset the fallback language; set another fallback instead.",
                    subject=target.code,
                )
            for name in attributes:
                if not hasattr(target, name) or name == "id":
                    raise ValueError(f"Unknown language attribute: {name}")

            candidate = copy.copy(target)
            for name, value in attributes.items():
                setattr(candidate, name, value)
            self._ensure_unique(candidate, exclude_id=target.id)

            for name, value in attributes.items():
                setattr(target, name, value)
            target.updated_at = utcnow()
            if make_default:
                self._flag(target, "is_default")
            if make_fallback:
                self._flag(target, "is_fallback")
            return copy.deepcopy(target)

    def set_default(self, language: LanguageRef) -> Language:
        """Make a language the (active) default, clearing the flag elsewhere."""
        with self._lock:
            target = self._find(language)
            self._flag(target, "is_default")
            logger.info("default_language_set", code=target.code)
            return copy.deepcopy(target)

    def set_fallback(self, language: LanguageRef) -> Language:
        """Make a language the (active) fallback, clearing the flag elsewhere."""
        with self._lock:
            target = self._find(language)
            self._flag(target, "is_fallback")
            logger.info("fallback_language_set", code=target.code)
            return copy.deepcopy(target)

    def toggle_active(self, language: LanguageRef) -> Language:
        """Flip ``is_active``.

        Raises:
            PolicyViolationError: If the language is the active default.
        """
        with self._lock:
            target = self._find(language)
            if target.is_default and target.is_active:
                raise PolicyViolationError(
                    "Cannot deactivate the default language.", subject=target.code
                )
            target.is_active = not target.is_active
            target.updated_at = utcnow()
            logger.info(
                "language_active_toggled", code=target.code, is_active=target.is_active
            )
            return copy.deepcopy(target)

    def delete(self, language: LanguageRef) -> None:
        """Remove a language and notify delete listeners.

        Raises:
            PolicyViolationError: If the language is the default or fallback.
        """
        with self._lock:
            target = self._find(language)
            if target.is_default:
                raise PolicyViolationError(
                    "Cannot delete the default language.", subject=target.code
                )
            if target.is_fallback:
                raise PolicyViolationError(
                    "Cannot delete the fallback language.", subject=target.code
                )
            del self._languages[target.id]
        logger.info("language_deleted", language_id=target.id, code=target.code)
        for listener in self._delete_listeners:
            listener(target)

    def update_stats(self, language: LanguageRef, total: int, translated: int) -> Language:
        """Store string counts and recompute the completion percentage."""
        with self._lock:
            target = self._find(language)
            target.total_strings = total
            target.translated_strings = translated
            target.completion_percentage = compute_completion(total, translated)
            target.last_updated_at = utcnow()
            logger.debug(
                "language_stats_updated",
                code=target.code,
                total_strings=total,
                translated_strings=translated,
                completion_percentage=target.completion_percentage,
            )
            return copy.deepcopy(target)

    def seed_defaults(self) -> Language:
        """Register English as default and fallback unless a language with its code exists."""
        with self._lock:
            existing = self._match(lambda lang: lang.code == DEFAULT_LANGUAGE_SEED["code"])
            if existing is not None:
                return copy.deepcopy(existing)
            return self.add(Language(**DEFAULT_LANGUAGE_SEED))

    # Lookups

    def get(self, language_id: int) -> Optional[Language]:
        with self._lock:
            return _snapshot(self._languages.get(language_id))

    def find(self, identifier: LanguageRef) -> Language:
        """Resolve a language from an instance, id, code or locale.

        Raises:
            NotFoundError: If nothing matches.
        """
        with self._lock:
            return copy.deepcopy(self._find(identifier))

    def find_by_code(self, code: str) -> Optional[Language]:
        with self._lock:
            return _snapshot(self._match(lambda lang: lang.code == code))

    def find_by_locale(self, locale: str) -> Optional[Language]:
        with self._lock:
            return _snapshot(self._match(lambda lang: lang.locale == locale))

    def default(self) -> Optional[Language]:
        with self._lock:
            return _snapshot(self._match(lambda lang: lang.is_default))

    def fallback(self) -> Optional[Language]:
        with self._lock:
            return _snapshot(self._match(lambda lang: lang.is_fallback))

    def all(self) -> List[Language]:
        with self._lock:
            return [copy.deepcopy(lang) for lang in sorted(self._languages.values(), key=_ordering)]

    def active(self) -> List[Language]:
        """Active languages ordered by sort_order, then English name."""
        return [lang for lang in self.all() if lang.is_active]

    def rtl(self) -> List[Language]:
        return [lang for lang in self.all() if lang.is_rtl]

    def __len__(self) -> int:
        return len(self._languages)

    # Internals

    def _find(self, identifier: LanguageRef) -> Language:
        language: Optional[Language] = None
        if isinstance(identifier, Language):
            language = self._languages.get(identifier.id)
        elif isinstance(identifier, int):
            language = self._languages.get(identifier)
        elif isinstance(identifier, str):
            language = self._match(lambda lang: lang.code == identifier) or self._match(
                lambda lang: lang.locale == identifier
            )
        if language is None:
            label = identifier.code if isinstance(identifier, Language) else identifier
            raise NotFoundError("language", label)
        return language

    def _match(self, predicate: Callable[[Language], bool]) -> Optional[Language]:
        return next((lang for lang in self._languages.values() if predicate(lang)), None)

    def _flag(self, target: Language, flag: str) -> None:
        for language in self._languages.values():
            if language.id != target.id and getattr(language, flag):
                setattr(language, flag, False)
                language.updated_at = utcnow()
        setattr(target, flag, True)
        target.is_active = True
        target.updated_at = utcnow()

    def _ensure_unique(self, language: Language, exclude_id: Optional[int] = None) -> None:
        for other in self._languages.values():
            if other.id == exclude_id:
                continue
            if other.code == language.code:
                raise DuplicateKeyError(
                    language.code, f"Language code already registered: {language.code}"
                )
            if other.locale == language.locale:
                raise DuplicateKeyError(
                    language.locale,
                    f"Language locale already registered: {language.locale}",
                )


def _snapshot(language: Optional[Language]) -> Optional[Language]:
    return copy.deepcopy(language) if language is not None else None

def _ordering(language: Language):
    return (language.sort_order, language.english_name)
