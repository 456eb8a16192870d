"""Translation persistence.

Defines the keyed-store contract the translation store works against and a
thread-safe in-memory implementation. Records are unique on
(language_id, group, key).
"""

import copy
import itertools
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from infrastructure.i18n.errors import DuplicateKeyError, NotFoundError
from infrastructure.i18n.models import Translation, TranslationStatus, utcnow
from infrastructure.logging import get_module_logger

logger = get_module_logger()

TranslationKey = Tuple[int, str, str]


@dataclass
class TranslationQuery:
    """Filter and ordering for translation listings.

    Every filter left as None is ignored. ``search`` is a case-insensitive
    substring match over key, value and group.
    """

    language_id: Optional[int] = None
    group: Optional[str] = None
    status: Optional[TranslationStatus | str] = None
    search: Optional[str] = None
    needs_review: Optional[bool] = None
    is_fuzzy: Optional[bool] = None
    is_outdated: Optional[bool] = None
    completed: Optional[bool] = None
    missing: Optional[bool] = None
    keys: Optional[Iterable[str]] = None
    ids: Optional[Iterable[int]] = None
    sort_by: Optional[str] = None
    descending: bool = False

    def matches(self, translation: Translation) -> bool:
        if self.language_id is not None and translation.language_id != self.language_id:
            return False
        if self.group is not None and translation.group != self.group:
            return False
        if self.status is not None and translation.status != TranslationStatus(
            self.status
        ):
            return False
        if self.needs_review is not None and translation.needs_review != self.needs_review:
            return False
        if self.is_fuzzy is not None and translation.is_fuzzy != self.is_fuzzy:
            return False
        if self.is_outdated is not None and translation.is_outdated != self.is_outdated:
            return False
        if self.completed is not None and translation.is_completed != self.completed:
            return False
        if self.missing is not None and (not translation.value) != self.missing:
            return False
        if self.keys is not None and translation.key not in set(self.keys):
            return False
        if self.ids is not None and translation.id not in set(self.ids):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (translation.key, translation.value or "", translation.group)
            if not any(needle in field.lower() for field in haystack):
                return False
        return True


def sort_translations(
    translations: List[Translation], sort_by: Optional[str], descending: bool = False
) -> List[Translation]:
    """Order translations by an attribute, None values last in either direction.

    Without a sort field, records are ordered by (group, key).
    """
    if not sort_by:
        return sorted(
            translations, key=lambda t: (t.group, t.key), reverse=descending
        )

    present = [t for t in translations if getattr(t, sort_by, None) is not None]
    absent = [t for t in translations if getattr(t, sort_by, None) is None]

    def sort_key(translation: Translation) -> Any:
        value = getattr(translation, sort_by)
        if isinstance(value, TranslationStatus):
            return value.value
        return value

    return sorted(present, key=sort_key, reverse=descending) + absent


class TranslationRepository(ABC):
    """Abstract keyed store for translation records.

    Implementations must enforce uniqueness on (language_id, group, key) and
    hand out records that callers may mutate freely; changes only persist
    through ``save``, ``add`` or ``upsert``.
    """

    @abstractmethod
    def get(self, translation_id: int) -> Optional[Translation]:
        """Return the record with the given id, or None."""
        pass

    @abstractmethod
    def get_by_key(self, language_id: int, group: str, key: str) -> Optional[Translation]:
        """Return the record for (language_id, group, key), or None."""
        pass

    @abstractmethod
    def list(self, query: Optional[TranslationQuery] = None) -> List[Translation]:
        """Return all records matching the query, ordered by its sort field."""
        pass

    @abstractmethod
    def count(self, query: Optional[TranslationQuery] = None) -> int:
        pass

    @abstractmethod
    def add(self, translation: Translation) -> Translation:
        """Insert a new record and assign its id.

        Raises:
            DuplicateKeyError: If (language_id, group, key) already exists.
        """
        pass

    @abstractmethod
    def save(self, translation: Translation) -> Translation:
        """Persist changes to an existing record.

        Raises:
            NotFoundError: If the record id is unknown.
            DuplicateKeyError: If the change collides with another record's key.
        """
        pass

    @abstractmethod
    def upsert(self, translation: Translation) -> Tuple[Translation, bool]:
        """Insert or replace the record for the translation's composite key.

        Concurrent upserts on one key resolve last-writer-wins.

        Returns:
            Tuple of (stored record, created flag).
        """
        pass

    @abstractmethod
    def delete(self, translation_id: int) -> bool:
        """Remove a record. Returns False when the id is unknown."""
        pass

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold exclusive access to the store for a batch of operations."""
        pass


class InMemoryTranslationRepository(TranslationRepository):
    """Thread-safe in-memory translation store.

    Attributes:
        _records: Records by id.
        _index: Record id by composite key.
        _lock: Re-entrant lock shared by single operations and transactions.
    """

    def __init__(self):
        self._records: Dict[int, Translation] = {}
        self._index: Dict[TranslationKey, int] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def get(self, translation_id: int) -> Optional[Translation]:
        with self._lock:
            record = self._records.get(translation_id)
            return copy.deepcopy(record) if record else None

    def get_by_key(self, language_id: int, group: str, key: str) -> Optional[Translation]:
        with self._lock:
            translation_id = self._index.get((language_id, group, key))
            if translation_id is None:
                return None
            return copy.deepcopy(self._records[translation_id])

    def list(self, query: Optional[TranslationQuery] = None) -> List[Translation]:
        query = query or TranslationQuery()
        with self._lock:
            matched = [
                copy.deepcopy(record)
                for record in self._records.values()
                if query.matches(record)
            ]
        return sort_translations(matched, query.sort_by, query.descending)

    def count(self, query: Optional[TranslationQuery] = None) -> int:
        query = query or TranslationQuery()
        with self._lock:
            return sum(1 for record in self._records.values() if query.matches(record))

    def add(self, translation: Translation) -> Translation:
        with self._lock:
            if translation.unique_key in self._index:
                raise DuplicateKeyError(translation.unique_key)
            translation.id = next(self._ids)
            self._store(translation)
            logger.debug(
                "translation_added",
                translation_id=translation.id,
                language_id=translation.language_id,
                group=translation.group,
                key=translation.key,
            )
            return copy.deepcopy(translation)

    def save(self, translation: Translation) -> Translation:
        with self._lock:
            current = self._records.get(translation.id)
            if current is None:
                raise NotFoundError("translation", translation.id)
            owner = self._index.get(translation.unique_key)
            if owner is not None and owner != translation.id:
                raise DuplicateKeyError(translation.unique_key)
            if current.unique_key != translation.unique_key:
                del self._index[current.unique_key]
            translation.updated_at = utcnow()
            self._store(translation)
            return copy.deepcopy(translation)

    def upsert(self, translation: Translation) -> Tuple[Translation, bool]:
        with self._lock:
            existing_id = self._index.get(translation.unique_key)
            if existing_id is None:
                return self.add(translation), True
            translation.id = existing_id
            translation.created_at = self._records[existing_id].created_at
            return self.save(translation), False

    def delete(self, translation_id: int) -> bool:
        with self._lock:
            record = self._records.pop(translation_id, None)
            if record is None:
                return False
            self._index.pop(record.unique_key, None)
            logger.debug("translation_deleted", translation_id=translation_id)
            return True

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def _store(self, translation: Translation) -> None:
        stored = copy.deepcopy(translation)
        self._records[stored.id] = stored
        self._index[stored.unique_key] = stored.id
