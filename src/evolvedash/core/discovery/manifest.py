"""
Generation manifest.

A small JSON file recording when the orchestrator accepted each generated
file, keyed by path relative to the components directory:

    {
      "ClockPanel.tsx": "2026-03-01T12:00:00+00:00"
    }

Discovery prefers these timestamps over file modification times, which
editors and checkouts rewrite freely.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


class GenerationManifest:
    """
    Read and update the generation manifest file.

    Example:
        >>> manifest = GenerationManifest(Path(".evolvedash/components.json"))
        >>> manifest.record(["ClockPanel.tsx"])
        >>> "ClockPanel.tsx" in manifest.load()
        True
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, datetime]:
        """
        Load recorded timestamps.

        A missing file is an empty manifest. A corrupt file is logged and
        treated as empty so discovery keeps working on modification times.
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable generation manifest %s: %s", self.path, e)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Ignoring generation manifest %s: not a JSON object", self.path)
            return {}

        entries: dict[str, datetime] = {}
        for name, value in raw.items():
            try:
                stamp = datetime.fromisoformat(str(value))
            except ValueError:
                logger.warning("Skipping manifest entry %s with bad timestamp %r", name, value)
                continue
            if stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=timezone.utc)
            entries[str(name)] = stamp
        return entries

    def record(self, files: Iterable[str], at: datetime | None = None) -> None:
        """
        Stamp files with a generation time and rewrite the manifest.

        Args:
            files: Paths relative to the components directory
            at: Timestamp to record (defaults to now, UTC)
        """
        stamp = (at or datetime.now(timezone.utc)).isoformat()
        current = {name: ts.isoformat() for name, ts in self.load().items()}
        for name in files:
            current[name] = stamp
        self._write(current)

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".components_", suffix=".json.tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
