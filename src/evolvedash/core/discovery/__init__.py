"""
Discovery of generated UI components.

- ComponentScanner: read-only scan of the components directory
- GenerationManifest: generation timestamps recorded by the orchestrator
- FeatureRegistry: in-memory view served by the API
"""

from evolvedash.core.discovery.manifest import GenerationManifest
from evolvedash.core.discovery.models import FeatureStatus, GeneratedFeature
from evolvedash.core.discovery.registry import FeatureRegistry
from evolvedash.core.discovery.scanner import (
    ComponentScanner,
    extract_description,
    has_default_export,
    has_named_export,
)

__all__ = [
    "ComponentScanner",
    "FeatureRegistry",
    "FeatureStatus",
    "GeneratedFeature",
    "GenerationManifest",
    "extract_description",
    "has_default_export",
    "has_named_export",
]
