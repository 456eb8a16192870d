"""i18n system - translation management and key extraction.

Discovers translatable keys in source files, stores per-language
translations with a review workflow, and exports/imports language packs.

Main components:
- models: Language, Translation, ExtractedKey, TranslationStatus
- formatting: PHP-style date patterns and Babel number formatting
- languages: LanguageRegistry with default/fallback flags and statistics
- repository: TranslationRepository and InMemoryTranslationRepository
- store: TranslationStore with workflow, plurals, fallback resolution
- extractor: TranslationExtractor driven by the pattern table in patterns
- reconciliation: reconcile_keys (create missing / mark unused)
- formats: PackFormat and the serializer dispatch tables
- packs: PackSerializer for language pack export/import
- service: LocalizationService facade, built by factory
"""

from infrastructure.i18n.errors import (
    DuplicateKeyError,
    ExtractionWarning,
    FormatError,
    I18nError,
    NotFoundError,
    PolicyViolationError,
)
from infrastructure.i18n.extractor import ExtractionOptions, TranslationExtractor
from infrastructure.i18n.factory import create_extractor, create_localization_service
from infrastructure.i18n.filesystem import FileSystem, LocalFileSystem
from infrastructure.i18n.formats import PackFormat
from infrastructure.i18n.languages import LanguageRegistry
from infrastructure.i18n.models import (
    ExtractedKey,
    Language,
    Translation,
    TranslationStatus,
)
from infrastructure.i18n.packs import ExportArtifact, ImportResult, PackSerializer
from infrastructure.i18n.plurals import register_plural_rule
from infrastructure.i18n.reconciliation import ReconciliationReport, reconcile_keys
from infrastructure.i18n.repository import (
    InMemoryTranslationRepository,
    TranslationQuery,
    TranslationRepository,
)
from infrastructure.i18n.service import LocalizationService
from infrastructure.i18n.store import BulkActionResult, TranslationStore

__all__ = [
    # Errors
    "I18nError",
    "NotFoundError",
    "DuplicateKeyError",
    "PolicyViolationError",
    "FormatError",
    "ExtractionWarning",
    # Models
    "Language",
    "Translation",
    "TranslationStatus",
    "ExtractedKey",
    # Components
    "LanguageRegistry",
    "TranslationRepository",
    "InMemoryTranslationRepository",
    "TranslationQuery",
    "TranslationStore",
    "BulkActionResult",
    "register_plural_rule",
    "FileSystem",
    "LocalFileSystem",
    "TranslationExtractor",
    "ExtractionOptions",
    "ReconciliationReport",
    "reconcile_keys",
    "PackFormat",
    "PackSerializer",
    "ExportArtifact",
    "ImportResult",
    # Service
    "LocalizationService",
    "create_localization_service",
    "create_extractor",
]
