"""Factory functions for creating i18n components.

Wires the registry, store, extractor and pack serializer together with the
settings-driven defaults suitable for the application.
"""

from typing import Optional

from infrastructure.configuration import Settings
from infrastructure.i18n.extractor import TranslationExtractor
from infrastructure.i18n.filesystem import FileSystem
from infrastructure.i18n.languages import LanguageRegistry
from infrastructure.i18n.packs import PackSerializer
from infrastructure.i18n.repository import (
    InMemoryTranslationRepository,
    TranslationRepository,
)
from infrastructure.i18n.service import LocalizationService
from infrastructure.i18n.store import TranslationStore
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def create_extractor(
    settings: Optional[Settings] = None, filesystem: Optional[FileSystem] = None
) -> TranslationExtractor:
    """Create an extractor configured from extraction settings."""
    settings = settings or Settings()
    extraction = settings.extraction
    return TranslationExtractor(
        filesystem=filesystem,
        context_radius=extraction.context_radius,
        max_workers=extraction.max_workers,
        default_kind=extraction.default_kind,
        exclude_directories=extraction.exclude_directories,
    )


def create_localization_service(
    settings: Optional[Settings] = None,
    repository: Optional[TranslationRepository] = None,
    filesystem: Optional[FileSystem] = None,
    seed: Optional[bool] = None,
) -> LocalizationService:
    """Create and wire a LocalizationService.

    The store pushes completion counts to the registry after every mutation
    and the registry cascades language deletion to the store.

    Args:
        settings: Application settings (default: loaded from environment).
        repository: Translation store backend (default: in-memory).
        filesystem: File access for the extractor (default: local disk).
        seed: Register English as default and fallback language
            (default: I18N_SEED_DEFAULT_LANGUAGE).

    Returns:
        LocalizationService: Configured service instance.

    Usage:
        service = create_localization_service()
        service.registry.create("fr", "fr_FR", "Français", "French")
    """
    settings = settings or Settings()
    localization = settings.i18n

    registry = LanguageRegistry()
    store = TranslationStore(
        repository=repository or InMemoryTranslationRepository(),
        registry=registry,
        default_group=localization.default_group,
        default_plural_rule=localization.default_plural_rule,
    )
    store.add_listener(registry.update_stats)
    registry.add_delete_listener(lambda language: store.delete_for_language(language.id))

    if localization.seed_default_language if seed is None else seed:
        registry.seed_defaults()

    service = LocalizationService(
        registry=registry,
        store=store,
        extractor=create_extractor(settings, filesystem),
        packs=PackSerializer(store, registry, version=localization.pack_version),
    )
    logger.info(
        "localization_service_created",
        languages=len(registry),
        default_group=localization.default_group,
    )
    return service
