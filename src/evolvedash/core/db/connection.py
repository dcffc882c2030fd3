"""
Database connection management for evolvedash.

The process owns exactly one connection: the composition root opens it at
startup with `init_db()` and closes it at shutdown. Repositories receive the
connection explicitly; nothing in this package keeps a global handle.

Connection settings:
- WAL mode for readers alongside the single writer
- Row factory for dict-like access
- check_same_thread disabled so the API worker threads can share the handle
  (repositories serialize their own access)

Usage:
    from contextlib import closing
    from evolvedash.core.db import init_db

    with closing(init_db(Path(".evolvedash/dashboard.db"))) as conn:
        rows = execute_query(conn, "SELECT * FROM feature_requests")
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from evolvedash.core.db.schema import create_schema, needs_migration

MEMORY_DB = ":memory:"


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """
    Row factory that returns rows as dictionaries.

    Enables row["column_name"] instead of row[0].
    """
    fields = [column[0] for column in cursor.description]
    return dict(zip(fields, row))


def configure_connection(conn: sqlite3.Connection) -> None:
    """
    Configure a SQLite connection with the settings evolvedash expects.

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = dict_factory


def init_db(db_path: Path | str) -> sqlite3.Connection:
    """
    Open (and if needed create) the evolvedash database.

    Creates the database file and parent directory if they don't exist,
    applies the schema, and returns a configured connection. Pass ":memory:"
    for a throwaway in-memory database.

    Args:
        db_path: Path to the SQLite database file, or ":memory:"

    Returns:
        Configured SQLite connection (caller closes it)

    Example:
        >>> conn = init_db(":memory:")
        >>> conn.execute("SELECT COUNT(*) AS n FROM feature_requests").fetchone()
        {'n': 0}
        >>> conn.close()
    """
    if str(db_path) == MEMORY_DB:
        conn = sqlite3.connect(MEMORY_DB, check_same_thread=False)
    else:
        db_path = Path(db_path)

        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path), check_same_thread=False)

    configure_connection(conn)

    if needs_migration(conn):
        create_schema(conn)

    return conn


@contextmanager
def get_connection(db_path: Path | str) -> Iterator[sqlite3.Connection]:
    """
    Open a short-lived connection as a context manager.

    Used by one-shot CLI commands. The connection is closed when the context
    exits and rolled back if an exception escapes.

    Args:
        db_path: Path to the SQLite database file

    Yields:
        Configured SQLite connection
    """
    conn = init_db(db_path)

    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute_query(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Execute a query and return all results as a list of dicts.

    Args:
        conn: SQLite connection
        query: SQL query string
        params: Query parameters (tuple or dict)

    Returns:
        List of row dictionaries
    """
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    return cursor.fetchall()


def execute_one(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | dict[str, Any] | None = None,
) -> dict[str, Any] | None:
    """
    Execute a query and return the first result as a dict.

    Returns:
        First row as dictionary, or None if no results
    """
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    result = cursor.fetchone()
    # fetchone() returns dict[str, Any] or None when dict_factory is configured
    return result  # type: ignore[no-any-return]
