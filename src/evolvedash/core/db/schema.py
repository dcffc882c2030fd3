"""
SQLite schema for the evolvedash database.

Only the feature request lifecycle is persisted here. Generated components
are discovered from the filesystem and the spec document lives in YAML.

Schema Design:
- feature_requests: One row per submitted feature request
- schema_info: Version tracking for migrations

Statuses:
- pending: Recorded, generator not finished yet
- processing: Reserved for callers that track in-flight work
- completed: Generator succeeded; generated_files holds a JSON list
- failed: Generator failed; error_message holds the reason
"""

import sqlite3

# Schema version for migrations
SCHEMA_VERSION = 1


SCHEMA_DDL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_info (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    description TEXT
);

-- Feature request history
CREATE TABLE IF NOT EXISTS feature_requests (
    id TEXT PRIMARY KEY,
    description TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK(status IN ('pending', 'processing', 'completed', 'failed')),

    -- Timestamps (ISO 8601, UTC)
    created_at TIMESTAMP NOT NULL,
    completed_at TIMESTAMP,

    -- JSON list of generated file paths
    generated_files JSON,

    error_message TEXT
);

CREATE INDEX IF NOT EXISTS idx_feature_requests_status ON feature_requests(status);
CREATE INDEX IF NOT EXISTS idx_feature_requests_created_at ON feature_requests(created_at);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create the database schema.

    Idempotent - safe to call multiple times.

    Args:
        conn: SQLite database connection

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> create_schema(conn)
        >>> cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        >>> tables = [row[0] for row in cursor.fetchall()]
        >>> assert "feature_requests" in tables
    """
    conn.executescript(SCHEMA_DDL)

    conn.execute(
        """
        INSERT OR REPLACE INTO schema_info (version, description)
        VALUES (?, ?)
        """,
        (SCHEMA_VERSION, "Feature request history"),
    )

    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """
    Get the current schema version from the database.

    Returns:
        Current schema version, or None if schema_info table doesn't exist
    """
    try:
        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_info")
        row = cursor.fetchone()
    except sqlite3.OperationalError:
        # schema_info table doesn't exist
        return None

    if not row:
        return None
    # Rows may come back as dicts when dict_factory is configured
    value = row["version"] if isinstance(row, dict) else row[0]
    return int(value) if value is not None else None


def needs_migration(conn: sqlite3.Connection) -> bool:
    """
    Check if database needs migration to current schema version.

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> assert needs_migration(conn) is True  # No schema yet
        >>> create_schema(conn)
        >>> assert needs_migration(conn) is False  # Up to date
    """
    current_version = get_schema_version(conn)
    if current_version is None:
        return True
    return current_version < SCHEMA_VERSION
