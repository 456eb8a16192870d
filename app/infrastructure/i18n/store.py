"""Translation store.

Owns translation records keyed by (language, group, key): the review
workflow, plural selection, fallback resolution, usage tracking and bulk
actions. Completion statistics are pushed to registered stats listeners
after every mutation (batched per language inside ``batch()``).
"""

import dataclasses
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from infrastructure.i18n.errors import I18nError, NotFoundError, PolicyViolationError
from infrastructure.i18n.languages import LanguageRef, LanguageRegistry
from infrastructure.i18n.models import (
    REVIEWED_STATUSES,
    Translation,
    TranslationStatus,
    set_path,
    utcnow,
)
from infrastructure.i18n.plurals import DEFAULT_PLURAL_RULE, get_plural_rule
from infrastructure.i18n.repository import TranslationQuery, TranslationRepository
from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult

logger = get_module_logger()

StatsListener = Callable[[int, int, int], None]

BULK_ACTIONS = ("approve", "reject", "delete", "mark_fuzzy", "mark_outdated")

# Fields callers may not change through update()
_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})
_EDITABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(Translation) if f.name not in _PROTECTED_FIELDS
)


@dataclass
class BulkActionResult:
    """Outcome of a bulk workflow action.

    Attributes:
        action: The action applied.
        results: One OperationResult per requested id, in request order.
    """

    action: str
    results: List[OperationResult] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(1 for result in self.results if result.is_success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.processed

    @property
    def failures(self) -> List[OperationResult]:
        return [result for result in self.results if not result.is_success]


class TranslationStore:
    """Workflow and lookup operations over a translation repository.

    Args:
        repository: Keyed store holding the records.
        registry: Language registry used to resolve language references.
        default_group: Group used when callers do not name one.
        default_plural_rule: Plural rule used when a record names none.
    """

    def __init__(
        self,
        repository: TranslationRepository,
        registry: LanguageRegistry,
        default_group: str = "default",
        default_plural_rule: str = DEFAULT_PLURAL_RULE,
    ):
        self._repository = repository
        self._registry = registry
        self.default_group = default_group
        self.default_plural_rule = default_plural_rule
        self._listeners: List[StatsListener] = []
        self._local = threading.local()

    @property
    def repository(self) -> TranslationRepository:
        return self._repository

    # Stats hook

    def add_listener(self, listener: StatsListener) -> None:
        """Register a callback receiving (language_id, total, completed) after mutations."""
        self._listeners.append(listener)

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Defer stats recomputation until the outermost batch exits.

        Every language touched inside the block is recomputed exactly once
        on exit, even when the block raises.
        """
        state = self._batch_state()
        state.depth += 1
        try:
            yield
        finally:
            state.depth -= 1
            if state.depth == 0:
                touched, state.touched = state.touched, set()
                for language_id in sorted(touched):
                    self._recompute(language_id)

    def touch(self, language_id: int) -> None:
        """Mark a language's statistics stale (recomputed now, or at batch exit)."""
        state = self._batch_state()
        if state.depth:
            state.touched.add(language_id)
        else:
            self._recompute(language_id)

    def completion_counts(self, language: LanguageRef) -> Tuple[int, int]:
        """Return (total, completed) record counts for a language."""
        language_id = self._language_id(language)
        total = self._repository.count(TranslationQuery(language_id=language_id))
        completed = self._repository.count(
            TranslationQuery(language_id=language_id, completed=True)
        )
        return total, completed

    # Lookups

    def get(self, translation_id: int) -> Translation:
        """Return a translation by id.

        Raises:
            NotFoundError: If the id is unknown.
        """
        translation = self._repository.get(translation_id)
        if translation is None:
            raise NotFoundError("translation", translation_id)
        return translation

    def find(self, language: LanguageRef, group: Optional[str], key: str) -> Optional[Translation]:
        language_id = self._language_id(language)
        return self._repository.get_by_key(language_id, group or self.default_group, key)

    def query(
        self,
        language: Optional[LanguageRef] = None,
        group: Optional[str] = None,
        status: Optional[TranslationStatus | str] = None,
        search: Optional[str] = None,
        needs_review: Optional[bool] = None,
        is_fuzzy: Optional[bool] = None,
        is_outdated: Optional[bool] = None,
        completed: Optional[bool] = None,
        missing: Optional[bool] = None,
        keys: Optional[Iterable[str]] = None,
        sort_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Translation]:
        """List translations matching every given filter.

        Args:
            language: Language instance, id, code or locale.
            search: Case-insensitive substring over key, value and group.
            completed: Restrict to (non-)completed records.
            missing: Restrict to records with (or without) an empty value.
            sort_by: Translation attribute to order by; (group, key) when omitted.
        """
        return self._repository.list(
            TranslationQuery(
                language_id=self._language_id(language) if language is not None else None,
                group=group,
                status=status,
                search=search,
                needs_review=needs_review,
                is_fuzzy=is_fuzzy,
                is_outdated=is_outdated,
                completed=completed,
                missing=missing,
                keys=keys,
                sort_by=sort_by,
                descending=descending,
            )
        )

    def count(self, language: Optional[LanguageRef] = None, **filters: Any) -> int:
        """Count translations matching the same filters as ``query``."""
        language_id = self._language_id(language) if language is not None else None
        return self._repository.count(TranslationQuery(language_id=language_id, **filters))

    def resolve(
        self,
        key: str,
        language: LanguageRef,
        group: Optional[str] = None,
        fallback_languages: Iterable[LanguageRef] = (),
    ) -> Optional[Translation]:
        """Find the first usable translation along a fallback chain.

        The language is tried first, then each fallback in order. A record is
        usable when its value is non-empty; usage is recorded on the record
        returned. Unknown languages in the chain are skipped.

        Returns:
            The usable translation, or None when the chain has none.
        """
        group = group or self.default_group
        for candidate in (language, *fallback_languages):
            try:
                language_id = self._language_id(candidate)
            except NotFoundError:
                logger.debug("resolve_language_skipped", language=str(candidate))
                continue
            translation = self._repository.get_by_key(language_id, group, key)
            if translation is not None and translation.value:
                return self.record_usage(translation)
        logger.debug("translation_unresolved", key=key, group=group)
        return None

    # Authoring

    def create(
        self,
        language: LanguageRef,
        group: Optional[str],
        key: str,
        value: Optional[str] = None,
        **attributes: Any,
    ) -> Translation:
        """Create a new translation (status pending unless given).

        Raises:
            DuplicateKeyError: If the (language, group, key) record exists.
            ValueError: If an attribute is not a translation field.
        """
        self._check_fields(attributes)
        identity = {"language_id", "group", "key", "value"} & set(attributes)
        if identity:
            raise ValueError(f"Pass {', '.join(sorted(identity))} positionally")
        language_id = self._language_id(language)
        status = TranslationStatus(attributes.pop("status", TranslationStatus.PENDING))
        translation = Translation(
            language_id=language_id,
            group=group or self.default_group,
            key=key,
            value=value,
            **attributes,
        )
        self._transition(translation, status, force=True)
        created = self._repository.add(translation)
        logger.info(
            "translation_created",
            translation_id=created.id,
            language_id=language_id,
            group=created.group,
            key=key,
        )
        self.touch(language_id)
        return created

    def upsert(
        self,
        language: LanguageRef,
        group: Optional[str],
        key: str,
        value: Optional[str],
        **attributes: Any,
    ) -> Translation:
        """Create or update the unique (language, group, key) record.

        New records start as translated with ``translated_at`` set; existing
        records are updated through the value-edit rules of ``update``.
        """
        self._check_fields(attributes)
        language_id = self._language_id(language)
        group = group or self.default_group
        with self._repository.transaction():
            existing = self._repository.get_by_key(language_id, group, key)
            if existing is None:
                attributes.setdefault("status", TranslationStatus.TRANSLATED)
                return self.create(language_id, group, key, value, **attributes)
            return self.update(existing, value=value, **attributes)

    def update(self, translation: Translation | int, **changes: Any) -> Translation:
        """Apply attribute changes to a translation.

        A value change sends the record back to pending and clears any
        previous review. An explicit ``status`` in changes wins.

        Raises:
            NotFoundError: If the translation no longer exists.
            ValueError: If a change names a protected or unknown field.
        """
        self._check_fields(changes)
        with self._repository.transaction():
            current = self._current(translation)
            previous_language = current.language_id

            status = changes.pop("status", None)
            if "value" in changes and changes["value"] != current.value:
                current.status = TranslationStatus.PENDING
                current.reviewed_at = None
                current.reviewer_id = None
            for name, value in changes.items():
                setattr(current, name, value)
            if status is not None:
                self._transition(current, TranslationStatus(status))
            if current.quality_score is not None:
                current.quality_score = _clamp_score(current.quality_score)

            saved = self._repository.save(current)

        logger.debug("translation_updated", translation_id=saved.id, fields=sorted(changes))
        self.touch(saved.language_id)
        if previous_language != saved.language_id:
            self.touch(previous_language)
        return saved

    def delete(self, translation: Translation | int) -> None:
        """Remove a translation and recompute its language's statistics."""
        with self._repository.transaction():
            current = self._current(translation)
            self._repository.delete(current.id)
        logger.info("translation_removed", translation_id=current.id, key=current.key)
        self.touch(current.language_id)

    def delete_for_language(self, language_id: int) -> int:
        """Remove every translation of a language without a stats recompute.

        Returns:
            Number of records removed.
        """
        with self._repository.transaction():
            doomed = self._repository.list(TranslationQuery(language_id=language_id))
            for translation in doomed:
                self._repository.delete(translation.id)
        logger.info(
            "language_translations_deleted", language_id=language_id, count=len(doomed)
        )
        return len(doomed)

    # Workflow

    def approve(self, translation: Translation | int, reviewer_id: Any = None) -> Translation:
        """Approve a translation, clearing its review flags.

        Raises:
            PolicyViolationError: If it is already approved (record untouched).
        """
        with self._repository.transaction():
            current = self._current(translation)
            if current.status == TranslationStatus.APPROVED:
                raise PolicyViolationError(
                    "Translation is already approved.", subject=current.id
                )
            self._transition(current, TranslationStatus.APPROVED)
            current.needs_review = False
            current.is_fuzzy = False
            current.reviewer_id = reviewer_id
            saved = self._repository.save(current)
        logger.info("translation_approved", translation_id=saved.id, reviewer_id=reviewer_id)
        self.touch(saved.language_id)
        return saved

    def reject(
        self,
        translation: Translation | int,
        reviewer_id: Any = None,
        comment: Optional[str] = None,
    ) -> Translation:
        """Reject a translation, replacing its comment when one is given.

        Raises:
            PolicyViolationError: If it is already rejected.
        """
        with self._repository.transaction():
            current = self._current(translation)
            if current.status == TranslationStatus.REJECTED:
                raise PolicyViolationError(
                    "Translation is already rejected.", subject=current.id
                )
            current.status = TranslationStatus.REJECTED
            current.needs_review = False
            current.reviewer_id = reviewer_id
            current.reviewed_at = utcnow()
            if comment:
                current.comment = comment
            saved = self._repository.save(current)
        logger.info("translation_rejected", translation_id=saved.id, reviewer_id=reviewer_id)
        self.touch(saved.language_id)
        return saved

    def mark_fuzzy(self, translation: Translation | int) -> Translation:
        return self._flag(translation, "is_fuzzy")

    def mark_outdated(self, translation: Translation | int) -> Translation:
        return self._flag(translation, "is_outdated")

    def apply_bulk(
        self,
        ids: Iterable[int],
        action: str,
        reviewer_id: Any = None,
        comment: Optional[str] = None,
    ) -> BulkActionResult:
        """Apply one workflow action to many translations.

        Runs inside a single repository transaction. Item failures are
        reported, not rolled back; statistics are recomputed once per
        affected language when the batch ends.

        Raises:
            ValueError: If the action is unknown (nothing is touched).
        """
        if action not in BULK_ACTIONS:
            raise ValueError(
                f"Unknown bulk action '{action}'. Expected one of: {', '.join(BULK_ACTIONS)}"
            )

        handlers: Dict[str, Callable[[int], Any]] = {
            "approve": lambda tid: self.approve(tid, reviewer_id=reviewer_id),
            "reject": lambda tid: self.reject(tid, reviewer_id=reviewer_id, comment=comment),
            "delete": self.delete,
            "mark_fuzzy": self.mark_fuzzy,
            "mark_outdated": self.mark_outdated,
        }
        handler = handlers[action]
        outcome = BulkActionResult(action=action)

        with self.batch(), self._repository.transaction():
            for translation_id in ids:
                try:
                    handler(translation_id)
                    outcome.results.append(
                        OperationResult.success(
                            data={"id": translation_id}, message=f"{action} applied"
                        )
                    )
                except NotFoundError as e:
                    outcome.results.append(
                        OperationResult.not_found(str(e), data={"id": translation_id})
                    )
                except PolicyViolationError as e:
                    outcome.results.append(
                        OperationResult.policy_violation(str(e), data={"id": translation_id})
                    )
                except I18nError as e:
                    outcome.results.append(
                        OperationResult.permanent_error(
                            str(e), error_code=type(e).__name__, data={"id": translation_id}
                        )
                    )

        logger.info(
            "bulk_action_completed",
            action=action,
            processed=outcome.processed,
            failed=outcome.failed,
        )
        return outcome

    # Usage, quality and metadata

    def record_usage(self, translation: Translation | int) -> Translation:
        """Increment the usage counter and stamp ``last_used_at``."""
        with self._repository.transaction():
            current = self._current(translation)
            current.usage_count += 1
            current.last_used_at = utcnow()
            return self._repository.save(current)

    def update_quality_score(self, translation: Translation | int, score: float) -> Translation:
        """Store a quality score clamped to 0-100."""
        with self._repository.transaction():
            current = self._current(translation)
            current.quality_score = _clamp_score(score)
            return self._repository.save(current)

    def set_metadata(self, translation: Translation | int, path: str, value: Any) -> Translation:
        """Write a metadata value by dot-separated path."""
        with self._repository.transaction():
            current = self._current(translation)
            current.metadata = set_path(current.metadata, path, value)
            return self._repository.save(current)

    def plural_form_for(self, translation: Translation, count: int) -> Optional[str]:
        """Select the text for a count.

        Without plural forms the value is returned. Otherwise the count is
        mapped through the record's plural rule (or the store default) and
        the matching form is returned, falling back to "other", then value.
        """
        if not translation.plurals:
            return translation.value
        rule = get_plural_rule(translation.plural_rule, self.default_plural_rule)
        category = rule(count)
        form = translation.plurals.get(category)
        if form is None:
            form = translation.plurals.get("other")
        return form if form is not None else translation.value

    # Reports

    def missing_translations(
        self,
        language: LanguageRef,
        reference: Optional[LanguageRef] = None,
        group: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Keys present in the reference language but absent from a language.

        The default language is the reference when none is given.

        Raises:
            NotFoundError: If either language (or a default) cannot be found.
        """
        language_id = self._language_id(language)
        if reference is None:
            default = self._registry.default()
            if default is None:
                raise NotFoundError("language", "default")
            reference_id = default.id
        else:
            reference_id = self._language_id(reference)

        missing = []
        for ref in self._repository.list(
            TranslationQuery(language_id=reference_id, group=group)
        ):
            if self._repository.get_by_key(language_id, ref.group, ref.key) is None:
                missing.append(
                    {
                        "key": ref.key,
                        "group": ref.group,
                        "reference_value": ref.value,
                        "context": ref.context,
                    }
                )
        return missing

    def statistics(
        self, language: Optional[LanguageRef] = None, group: Optional[str] = None
    ) -> Dict[str, Any]:
        """Aggregate counts over the translations matching language/group.

        ``by_status`` buckets: pending (needs review), approved (completed),
        rejected, fuzzy and outdated.
        """
        language_id = self._language_id(language) if language is not None else None
        records = self._repository.list(
            TranslationQuery(language_id=language_id, group=group)
        )

        by_language: Dict[int, int] = {}
        by_group: Dict[str, int] = {}
        for record in records:
            by_language[record.language_id] = by_language.get(record.language_id, 0) + 1
            by_group[record.group] = by_group.get(record.group, 0) + 1

        languages = []
        for lang_id, count in sorted(by_language.items()):
            registered = self._registry.get(lang_id)
            languages.append(
                {
                    "language": registered.to_dict() if registered else {"id": lang_id},
                    "count": count,
                }
            )

        return {
            "total": len(records),
            "by_status": {
                "pending": sum(1 for r in records if r.needs_review),
                "approved": sum(1 for r in records if r.is_completed),
                "rejected": sum(
                    1 for r in records if r.status == TranslationStatus.REJECTED
                ),
                "fuzzy": sum(1 for r in records if r.is_fuzzy),
                "outdated": sum(1 for r in records if r.is_outdated),
            },
            "by_language": languages,
            "by_group": [
                {"group": name, "count": count}
                for name, count in sorted(by_group.items(), key=lambda item: -item[1])
            ],
        }

    # Internals

    def _language_id(self, language: LanguageRef) -> int:
        return self._registry.find(language).id

    def _current(self, translation: Translation | int) -> Translation:
        translation_id = translation.id if isinstance(translation, Translation) else translation
        return self.get(translation_id)

    def _flag(self, translation: Translation | int, flag: str) -> Translation:
        with self._repository.transaction():
            current = self._current(translation)
            setattr(current, flag, True)
            current.needs_review = True
            saved = self._repository.save(current)
        logger.info("translation_flagged", translation_id=saved.id, flag=flag)
        self.touch(saved.language_id)
        return saved

    @staticmethod
    def _transition(
        translation: Translation, status: TranslationStatus, force: bool = False
    ) -> None:
        if translation.status == status and not force:
            return
        translation.status = status
        if status == TranslationStatus.TRANSLATED:
            translation.translated_at = utcnow()
        elif status in REVIEWED_STATUSES:
            translation.reviewed_at = utcnow()

    @staticmethod
    def _check_fields(changes: Dict[str, Any]) -> None:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot set translation fields: {', '.join(sorted(unknown))}")

    def _recompute(self, language_id: int) -> None:
        total = self._repository.count(TranslationQuery(language_id=language_id))
        completed = self._repository.count(
            TranslationQuery(language_id=language_id, completed=True)
        )
        for listener in self._listeners:
            listener(language_id, total, completed)

    def _batch_state(self):
        state = self._local
        if not hasattr(state, "depth"):
            state.depth = 0
            state.touched = set()
        return state


def _clamp_score(score: float) -> float:
    return max(0.0, min(100.0, float(score)))
