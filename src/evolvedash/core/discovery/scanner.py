"""
Component scanner.

Lists the UI components a generator has written into the components
directory. The scan is flat (no recursion) and read-only:

- a file qualifies when its suffix is one of the configured extensions, it
  is not a test file, and its name contains no denylisted token
- the description comes from the file's first block comment
- a component is active when it is exported under its own name or as the
  default export

Results are ordered newest first by the generation manifest timestamp,
falling back to the file's modification time, with ties broken by filename.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from evolvedash.core.config.models import DiscoveryConfig
from evolvedash.core.discovery.manifest import GenerationManifest
from evolvedash.core.discovery.models import FeatureStatus, GeneratedFeature

logger = logging.getLogger(__name__)

COMPONENT_IMPORT_PREFIX = "./generated"

_BLOCK_COMMENT = re.compile(r"/\*+(.*?)\*/", re.DOTALL)
_DEFAULT_EXPORT = re.compile(r"\bexport\s+default\b")


def extract_description(source: str) -> str | None:
    """
    Return the first non-empty line of the first block comment.

    Example:
        >>> extract_description("/**\\n * Shows the time.\\n */\\nexport const Clock = ...")
        'Shows the time.'
    """
    match = _BLOCK_COMMENT.search(source)
    if not match:
        return None
    for line in match.group(1).splitlines():
        text = line.strip().lstrip("*").strip()
        if text:
            return text
    return None


def has_named_export(source: str, name: str) -> bool:
    """Whether the source exports a binding called `name`."""
    escaped = re.escape(name)
    declaration = re.compile(
        rf"\bexport\s+(?:const|let|var|function|class)\s+{escaped}\b"
    )
    if declaration.search(source):
        return True
    export_list = re.compile(rf"\bexport\s*\{{[^}}]*\b{escaped}\b[^}}]*\}}")
    return export_list.search(source) is not None


def has_default_export(source: str) -> bool:
    """Whether the source has a default export."""
    return _DEFAULT_EXPORT.search(source) is not None


class ComponentScanner:
    """
    Scan a components directory for generated UI components.

    Example:
        >>> scanner = ComponentScanner(Path("frontend/src/components/generated"))
        >>> for feature in scanner.scan():
        ...     print(f"{feature.name}: {feature.status.value}")
    """

    def __init__(
        self,
        components_dir: Path,
        config: DiscoveryConfig | None = None,
        manifest: GenerationManifest | None = None,
    ) -> None:
        self.components_dir = Path(components_dir)
        self.config = config or DiscoveryConfig()
        self.manifest = manifest

    def is_component_file(self, path: Path) -> bool:
        """Apply the extension, test-suffix and denylist rules to a filename."""
        filename = path.name
        if path.suffix not in self.config.extensions:
            return False
        if any(filename.endswith(suffix) for suffix in self.config.test_suffixes):
            return False
        if any(token in filename for token in self.config.denylist):
            return False
        return True

    def scan(self) -> list[GeneratedFeature]:
        """
        List qualifying components, newest first.

        A missing directory yields an empty list. Unreadable files are logged
        and skipped.
        """
        if not self.components_dir.is_dir():
            logger.debug("Components directory %s does not exist", self.components_dir)
            return []

        recorded = self.manifest.load() if self.manifest else {}

        features: list[GeneratedFeature] = []
        for path in self.components_dir.iterdir():
            if not path.is_file() or not self.is_component_file(path):
                continue
            feature = self._parse_component(path, recorded.get(path.name))
            if feature is not None:
                features.append(feature)

        # Two stable sorts: filename ascending, then newest first
        features.sort(key=lambda f: f.file_path)
        features.sort(key=lambda f: f.created_at.timestamp(), reverse=True)
        return features

    def _parse_component(
        self, path: Path, recorded_at: datetime | None
    ) -> GeneratedFeature | None:
        try:
            source = path.read_text(encoding="utf-8")
            mtime = path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable component %s: %s", path, e)
            return None

        name = path.stem
        named = has_named_export(source, name)
        default = has_default_export(source)

        return GeneratedFeature(
            id=name.lower(),
            name=name,
            component_path=f"{COMPONENT_IMPORT_PREFIX}/{name}",
            description=extract_description(source) or f"Generated component: {name}",
            status=FeatureStatus.ACTIVE if (named or default) else FeatureStatus.INACTIVE,
            created_at=recorded_at or datetime.fromtimestamp(mtime, tz=timezone.utc),
            file_path=path.name,
            has_named_export=named,
            has_default_export=default,
        )
