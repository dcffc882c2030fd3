"""
Bounded in-memory operation log.

Keeps the most recent orchestrator events for `GET /api/logs`. Once the
capacity is reached the oldest entry is evicted. Every entry is also sent
to the standard logger, so nothing here needs to outlive the process.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class OperationLogEntry(BaseModel):
    """One operation log entry."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    level: str = "info"
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class OperationLog:
    """
    Ring buffer of recent operation entries, newest first on read.

    Example:
        >>> oplog = OperationLog(capacity=2)
        >>> oplog.add("info", "first")
        >>> oplog.add("info", "second")
        >>> oplog.add("error", "third", request_id="abc")
        >>> [e.message for e in oplog.entries()]
        ['third', 'second']
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError("Operation log capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[OperationLogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def add(self, level: str, message: str, **metadata: Any) -> OperationLogEntry:
        """
        Append an entry and mirror it to the standard logger.

        Raises:
            ValueError: If the level is not one of debug/info/warning/error
        """
        level = level.lower()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        entry = OperationLogEntry(level=level, message=message, metadata=metadata)
        with self._lock:
            self._entries.append(entry)

        if metadata:
            logger.log(LEVELS[level], "%s %s", message, metadata)
        else:
            logger.log(LEVELS[level], "%s", message)
        return entry

    def entries(
        self, limit: int | None = None, level: str | None = None
    ) -> list[OperationLogEntry]:
        """
        Recent entries, newest first.

        Args:
            limit: Maximum number of entries to return
            level: Only return entries with this level
        """
        with self._lock:
            selected = list(reversed(self._entries))
        if level:
            selected = [entry for entry in selected if entry.level == level.lower()]
        if limit is not None:
            selected = selected[:limit]
        return selected

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
