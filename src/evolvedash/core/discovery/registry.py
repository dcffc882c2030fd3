"""
In-memory feature registry.

Holds the result of the last component scan keyed by feature id. The
composition root populates it at startup and the orchestrator refreshes it
after each successful generation, so API reads never touch the filesystem.
"""

import logging
import threading

from evolvedash.core.discovery.models import GeneratedFeature
from evolvedash.core.discovery.scanner import ComponentScanner
from evolvedash.core.errors import NotFoundError

logger = logging.getLogger(__name__)


class FeatureRegistry:
    """
    Mapping of feature id to GeneratedFeature, refreshed from a scanner.

    Example:
        >>> registry = FeatureRegistry(scanner)
        >>> registry.refresh()
        >>> registry.lookup("clockpanel").component_path
        './generated/ClockPanel'
    """

    def __init__(self, scanner: ComponentScanner) -> None:
        self.scanner = scanner
        self._features: list[GeneratedFeature] = []
        self._by_id: dict[str, GeneratedFeature] = {}
        self._lock = threading.Lock()

    def refresh(self) -> list[GeneratedFeature]:
        """Rescan the components directory and replace the registry contents."""
        features = self.scanner.scan()
        by_id = {feature.id: feature for feature in features}
        with self._lock:
            self._features = features
            self._by_id = by_id
        logger.debug("Feature registry refreshed: %d components", len(features))
        return list(features)

    def all(self) -> list[GeneratedFeature]:
        """Registered features in discovery order (newest first)."""
        with self._lock:
            return list(self._features)

    def lookup(self, feature_id: str) -> GeneratedFeature:
        """
        Get one feature by id.

        Raises:
            NotFoundError: If no feature has this id
        """
        with self._lock:
            feature = self._by_id.get(feature_id.lower())
        if feature is None:
            raise NotFoundError("Feature", feature_id)
        return feature

    def __len__(self) -> int:
        with self._lock:
            return len(self._features)
