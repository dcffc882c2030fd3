"""
System API routes.

- GET /api/health - Service health
- GET /api/logs - Recent operation log entries
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query

from evolvedash.api.deps import get_services
from evolvedash.core.errors import StoreError
from evolvedash.core.services import Services

logger = logging.getLogger(__name__)

router = APIRouter()


def _database_ok(services: Services) -> bool:
    try:
        services.conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as e:
        logger.warning("Health check: database unavailable: %s", e)
        return False
    return True


def _spec_store_ok(services: Services) -> bool:
    try:
        services.spec_store.read_spec()
    except StoreError as e:
        logger.warning("Health check: spec store unavailable: %s", e)
        return False
    return True


@router.get("/health")
def health(services: Services = Depends(get_services)) -> dict[str, Any]:
    """
    Report service health.

    `status` is "healthy" when the database and spec document are usable,
    "degraded" otherwise. Generator availability is reported but does not
    affect the status.

    Example response:
        {
          "status": "healthy",
          "timestamp": "2026-03-01T12:00:00+00:00",
          "uptimeSeconds": 12.5,
          "logsCount": 4,
          "services": {
            "database": "ok",
            "specStore": "ok",
            "generator": {"name": "claude-cli", "available": true,
                          "version": "2.0.1 (Claude Code)"}
          }
        }
    """
    database = _database_ok(services)
    spec_store = _spec_store_ok(services)
    generator_available = services.generator.is_available()

    return {
        "status": "healthy" if database and spec_store else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptimeSeconds": round(services.uptime_seconds, 3),
        "logsCount": len(services.oplog),
        "services": {
            "database": "ok" if database else "error",
            "specStore": "ok" if spec_store else "error",
            "generator": {
                "name": services.generator.name,
                "available": generator_available,
                "version": services.generator.version() if generator_available else None,
            },
        },
    }


@router.get("/logs")
def get_logs(
    limit: int = Query(default=50, ge=1, le=1000, description="Maximum entries to return"),
    level: Literal["debug", "info", "warning", "error"] | None = Query(
        default=None, description="Only return entries with this level"
    ),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """
    Get recent operation log entries, newest first.

    `total` is the number of entries held, `filtered` the number returned.
    """
    entries = services.oplog.entries(limit=limit, level=level)
    return {
        "logs": [entry.model_dump(mode="json") for entry in entries],
        "total": len(services.oplog),
        "filtered": len(entries),
    }
