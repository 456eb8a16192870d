"""Reconcile extracted keys against stored translations."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional

from infrastructure.i18n.languages import LanguageRef
from infrastructure.i18n.models import ExtractedKey, TranslationStatus, set_path, utcnow
from infrastructure.i18n.store import TranslationStore
from infrastructure.logging import get_module_logger

logger = get_module_logger()


@dataclass
class ReconciliationReport:
    extracted: int = 0
    created: int = 0
    existing: int = 0
    marked_unused: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def reconcile_keys(
    store: TranslationStore,
    occurrences: Iterable[ExtractedKey],
    language: LanguageRef,
    group: Optional[str] = None,
    create_missing: bool = True,
    mark_unused: bool = False,
    translator_id: Any = None,
) -> ReconciliationReport:
    """Feed extracted keys into a language's group.

    With ``create_missing``, every key without a record gets one whose value
    is the key itself (status pending, context taken from the occurrence).
    With ``mark_unused``, records in the group whose key was not extracted
    are tagged ``metadata.marked_unused`` with a timestamp; nothing is
    deleted. Statistics are recomputed once.

    Args:
        store: Translation store to reconcile against.
        occurrences: Extracted key occurrences.
        language: Target language (instance, id, code or locale).
        group: Target group; the store default when omitted.
        create_missing: Create records for keys not yet stored.
        mark_unused: Tag stored keys absent from the extraction.
        translator_id: Opaque user id recorded on created records.

    Returns:
        Counts of extracted, created, existing and marked-unused keys.
    """
    occurrences = list(occurrences)
    group = group or store.default_group
    report = ReconciliationReport(extracted=len(occurrences))

    with store.batch():
        if create_missing:
            for occurrence in occurrences:
                if store.find(language, group, occurrence.key) is not None:
                    report.existing += 1
                    continue
                store.create(
                    language,
                    group,
                    occurrence.key,
                    occurrence.key,
                    status=TranslationStatus.PENDING,
                    context=occurrence.context,
                    translator_id=translator_id,
                )
                report.created += 1

        if mark_unused:
            extracted_keys = {occurrence.key for occurrence in occurrences}
            timestamp = utcnow().isoformat()
            for translation in store.query(language=language, group=group):
                if translation.key in extracted_keys:
                    continue
                metadata = set_path(translation.metadata, "marked_unused", True)
                metadata = set_path(metadata, "marked_unused_at", timestamp)
                store.update(translation, metadata=metadata)
                report.marked_unused += 1

    logger.info("keys_reconciled", group=group, **report.to_dict())
    return report
