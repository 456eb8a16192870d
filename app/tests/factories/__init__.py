"""Deterministic test data factories."""

from tests.factories.i18n import (
    make_language,
    make_occurrence,
    make_pack,
    make_translation,
)

__all__ = [
    "make_language",
    "make_occurrence",
    "make_pack",
    "make_translation",
]
