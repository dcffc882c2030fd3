"""YAML spec document storage."""

from evolvedash.core.spec.store import (
    SpecDocument,
    SpecStore,
    default_document,
    feature_name_from_description,
)

__all__ = [
    "SpecDocument",
    "SpecStore",
    "default_document",
    "feature_name_from_description",
]
