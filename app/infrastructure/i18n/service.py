"""Localization service.

Provides one class-based entry point to the translation system for the CLI
and for dependency injection in tests.
"""

from typing import Any, Dict, Iterable, List, Optional

from infrastructure.i18n.extractor import ExtractionOptions, TranslationExtractor
from infrastructure.i18n.formats import PackFormat
from infrastructure.i18n.languages import LanguageRef, LanguageRegistry
from infrastructure.i18n.models import ExtractedKey
from infrastructure.i18n.packs import ExportArtifact, ImportResult, PackSerializer
from infrastructure.i18n.reconciliation import reconcile_keys
from infrastructure.i18n.store import TranslationStore
from infrastructure.logging import bind_operation_context, get_module_logger

logger = get_module_logger()


class LocalizationService:
    """Facade over the registry, store, extractor and pack serializer.

    This is a thin facade; the actual work is delegated to the components
    assembled by ``create_localization_service``.

    Usage:
        from infrastructure.services import get_localization_service

        service = get_localization_service()
        report = service.extract_keys(["src"], language="fr", group="app",
                                      create_missing=True)
        artifact = service.export_pack("fr", format="json")
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        store: TranslationStore,
        extractor: TranslationExtractor,
        packs: PackSerializer,
    ):
        self._registry = registry
        self._store = store
        self._extractor = extractor
        self._packs = packs

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    @property
    def store(self) -> TranslationStore:
        return self._store

    @property
    def extractor(self) -> TranslationExtractor:
        return self._extractor

    @property
    def packs(self) -> PackSerializer:
        return self._packs

    def scan(
        self, paths: Iterable[str], options: Optional[ExtractionOptions] = None
    ) -> List[ExtractedKey]:
        """Extract key occurrences without touching the store."""
        with bind_operation_context(operation="extract_keys"):
            return self._extractor.extract(paths, options)

    def extract_keys(
        self,
        paths: Iterable[str],
        language: Optional[LanguageRef] = None,
        group: Optional[str] = None,
        create_missing: bool = False,
        mark_unused: bool = False,
        translator_id: Any = None,
        options: Optional[ExtractionOptions] = None,
    ) -> Dict[str, Any]:
        """Extract keys and optionally reconcile them with a language.

        Args:
            paths: Files and directories to scan.
            language: Language to reconcile against (required when
                create_missing or mark_unused is set).
            group: Group the keys belong to.
            create_missing: Create pending records for new keys.
            mark_unused: Tag stored keys that were not extracted.
            translator_id: Opaque user id recorded on created records.
            options: Extraction post-processing options.

        Returns:
            Dict with extracted_keys, created_translations,
            existing_translations, marked_unused, statistics and warnings.

        Raises:
            ValueError: If reconciliation is requested without a language.
        """
        if (create_missing or mark_unused) and language is None:
            raise ValueError("A language is required to reconcile extracted keys")

        paths = list(paths)
        language_code = self._registry.find(language).code if language is not None else None
        with bind_operation_context(operation="extract_keys", language=language_code):
            occurrences = self._extractor.extract(paths, options)
            summary: Dict[str, Any] = {
                "extracted_keys": len(occurrences),
                "created_translations": 0,
                "existing_translations": 0,
                "marked_unused": 0,
            }
            if create_missing or mark_unused:
                report = reconcile_keys(
                    self._store,
                    occurrences,
                    language,
                    group=group,
                    create_missing=create_missing,
                    mark_unused=mark_unused,
                    translator_id=translator_id,
                )
                summary["created_translations"] = report.created
                summary["existing_translations"] = report.existing
                summary["marked_unused"] = report.marked_unused
            summary["statistics"] = self._extractor.generate_stats(occurrences)
            summary["warnings"] = [str(w) for w in self._extractor.last_warnings]
        return summary

    def export_keys(
        self,
        occurrences: List[ExtractedKey],
        format: "PackFormat | str" = PackFormat.JSON,
        **options: Any,
    ) -> ExportArtifact:
        """Render extracted occurrences together with their statistics."""
        return self._packs.export_occurrences(
            occurrences,
            format,
            statistics=self._extractor.generate_stats(occurrences),
            **options,
        )

    def export_pack(
        self,
        language: LanguageRef,
        format: "PackFormat | str" = PackFormat.JSON,
        only_completed: bool = False,
    ) -> ExportArtifact:
        return self._packs.export_pack(language, format, only_completed=only_completed)

    def import_pack(
        self,
        language: LanguageRef,
        data: "bytes | str | Dict[str, Any]",
        format: "PackFormat | str" = PackFormat.JSON,
        overwrite: bool = False,
    ) -> ImportResult:
        return self._packs.import_pack(language, data, format, overwrite=overwrite)

    def missing_translations(
        self,
        language: LanguageRef,
        reference: Optional[LanguageRef] = None,
        group: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Report keys the reference language (default: the default language) has and this one lacks."""
        target = self._registry.find(language)
        reference_language = (
            self._registry.find(reference) if reference is not None else self._registry.default()
        )
        missing = self._store.missing_translations(target, reference_language, group=group)
        return {
            "language": target.to_dict(),
            "reference_language": reference_language.to_dict() if reference_language else None,
            "missing_translations": missing,
            "count": len(missing),
        }

    def statistics(
        self, language: Optional[LanguageRef] = None, group: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._store.statistics(language=language, group=group)

    def translate(
        self,
        key: str,
        language: LanguageRef,
        group: Optional[str] = None,
        fallback_languages: Optional[Iterable[LanguageRef]] = None,
        count: Optional[int] = None,
    ) -> Optional[str]:
        """Resolve the text for a key along a fallback chain.

        Without an explicit chain, the registry's fallback language is used.
        With a count, the plural form for that count is returned.

        Returns:
            The text, or None when no language in the chain has a value.
        """
        if fallback_languages is None:
            fallback = self._registry.fallback()
            fallback_languages = [fallback] if fallback is not None else []
        translation = self._store.resolve(key, language, group, fallback_languages)
        if translation is None:
            return None
        if count is not None:
            return self._store.plural_form_for(translation, count)
        return translation.value
