"""
Feature request log backed by SQLite.

Append-only history of feature requests. Rows are created once and updated
once by the orchestrator; this module never deletes them.

Example:
    >>> from evolvedash.core.db import init_db
    >>> log = FeatureRequestLog(init_db(":memory:"))
    >>> request_id = log.create("Add a weather widget")
    >>> log.update(request_id, FeatureRequestStatus.COMPLETED, ["WeatherWidget.tsx"])
    >>> log.get(request_id).generated_components
    ['WeatherWidget.tsx']
"""

import json
import logging
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from evolvedash.core.db.connection import execute_one, execute_query
from evolvedash.core.errors import NotFoundError
from evolvedash.core.requests.models import (
    FeatureRequest,
    FeatureRequestStats,
    FeatureRequestStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_request(row: dict[str, Any]) -> FeatureRequest:
    generated: list[str] = []
    if row.get("generated_files"):
        try:
            parsed = json.loads(row["generated_files"])
            if isinstance(parsed, list):
                generated = [str(item) for item in parsed]
        except json.JSONDecodeError:
            logger.warning("Corrupt generated_files for feature request %s", row["id"])

    return FeatureRequest(
        id=row["id"],
        description=row["description"],
        status=FeatureRequestStatus(row["status"]),
        timestamp=datetime.fromisoformat(row["created_at"]),
        generated_components=generated,
        completed_at=(
            datetime.fromisoformat(row["completed_at"]) if row.get("completed_at") else None
        ),
        error=row.get("error_message"),
    )


class FeatureRequestLog:
    """
    Repository for the feature_requests table.

    Takes an open connection from the composition root. All statements go
    through one lock so worker threads sharing the connection never interleave
    a write with another statement.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._lock = threading.Lock()

    def create(self, description: str) -> str:
        """
        Record a new pending feature request.

        Args:
            description: Request text (already validated)

        Returns:
            The new request id
        """
        request_id = str(uuid.uuid4())
        with self._lock:
            self.conn.execute(
                """
                INSERT INTO feature_requests (id, description, status, created_at, generated_files)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    request_id,
                    description,
                    FeatureRequestStatus.PENDING.value,
                    _now().isoformat(),
                    json.dumps([]),
                ),
            )
            self.conn.commit()

        logger.debug("Created feature request %s", request_id)
        return request_id

    def update(
        self,
        request_id: str,
        status: FeatureRequestStatus | str,
        generated_files: list[str] | None = None,
        error: str | None = None,
    ) -> None:
        """
        Move a request to a new status.

        Args:
            request_id: Request to update
            status: New status
            generated_files: Replaces the stored file list when given
            error: Failure reason to store

        Raises:
            NotFoundError: If no request has this id
        """
        status = FeatureRequestStatus(status)

        fields = ["status = ?"]
        params: list[Any] = [status.value]

        if status.is_terminal:
            fields.append("completed_at = ?")
            params.append(_now().isoformat())

        if generated_files is not None:
            fields.append("generated_files = ?")
            params.append(json.dumps(list(generated_files)))

        if error is not None:
            fields.append("error_message = ?")
            params.append(error)

        params.append(request_id)

        with self._lock:
            cursor = self.conn.execute(
                f"UPDATE feature_requests SET {', '.join(fields)} WHERE id = ?",
                tuple(params),
            )
            if cursor.rowcount == 0:
                self.conn.rollback()
                raise NotFoundError("Feature request", request_id)
            self.conn.commit()

        logger.debug("Feature request %s -> %s", request_id, status.value)

    def get(self, request_id: str) -> FeatureRequest | None:
        """Fetch one request, or None if the id is unknown."""
        with self._lock:
            row = execute_one(
                self.conn, "SELECT * FROM feature_requests WHERE id = ?", (request_id,)
            )
        return _row_to_request(row) if row else None

    def list(
        self,
        status: FeatureRequestStatus | str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[FeatureRequest]:
        """
        List requests newest first.

        Args:
            status: Only return requests in this status
            limit: Maximum number of requests to return

        Returns:
            Requests ordered by creation time, newest first
        """
        if status is not None:
            status = FeatureRequestStatus(status)
            query = """
                SELECT * FROM feature_requests
                WHERE status = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
            """
            params: tuple[Any, ...] = (status.value, limit)
        else:
            query = """
                SELECT * FROM feature_requests
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
            """
            params = (limit,)

        with self._lock:
            rows = execute_query(self.conn, query, params)
        return [_row_to_request(row) for row in rows]

    def count(self, status: FeatureRequestStatus | str | None = None) -> int:
        """Count requests, optionally restricted to one status."""
        with self._lock:
            if status is None:
                row = execute_one(self.conn, "SELECT COUNT(*) AS n FROM feature_requests")
            else:
                row = execute_one(
                    self.conn,
                    "SELECT COUNT(*) AS n FROM feature_requests WHERE status = ?",
                    (FeatureRequestStatus(status).value,),
                )
        return int(row["n"]) if row else 0

    def stats(self) -> FeatureRequestStats:
        """Count requests per status."""
        with self._lock:
            rows = execute_query(
                self.conn,
                "SELECT status, COUNT(*) AS n FROM feature_requests GROUP BY status",
            )
        counts = {row["status"]: int(row["n"]) for row in rows}
        return FeatureRequestStats(total=sum(counts.values()), **counts)
