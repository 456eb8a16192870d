"""Shared fixtures for the translation manager test suite."""

import pytest

from infrastructure.configuration import Settings
from infrastructure.i18n import (
    InMemoryTranslationRepository,
    LanguageRegistry,
    TranslationExtractor,
    TranslationStore,
    create_localization_service,
)
from tests.factories.i18n import make_language


@pytest.fixture
def app_settings():
    """Settings built from defaults, independent of the developer's .env."""
    return Settings(_env_file=None)


@pytest.fixture
def registry():
    """Registry seeded with English as default and fallback."""
    registry = LanguageRegistry()
    registry.seed_defaults()
    return registry


@pytest.fixture
def english(registry):
    return registry.find("en")


@pytest.fixture
def french(registry):
    """French registered next to the seeded English."""
    return registry.add(make_language(sort_order=2))


@pytest.fixture
def repository():
    return InMemoryTranslationRepository()


@pytest.fixture
def store(repository, registry):
    """Store wired to push completion counts into the registry."""
    store = TranslationStore(repository=repository, registry=registry)
    store.add_listener(registry.update_stats)
    registry.add_delete_listener(lambda language: store.delete_for_language(language.id))
    return store


@pytest.fixture
def extractor():
    return TranslationExtractor()


@pytest.fixture
def service(app_settings):
    """Fully wired localization service with English seeded."""
    return create_localization_service(settings=app_settings, seed=True)
