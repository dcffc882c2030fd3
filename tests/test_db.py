"""
Tests for database connection setup and schema.
"""

import sqlite3

import pytest

from evolvedash.core.db import SCHEMA_VERSION, execute_one, get_connection, init_db
from evolvedash.core.db.schema import get_schema_version, needs_migration


class TestInitDb:
    def test_memory_database_has_schema(self):
        conn = init_db(":memory:")
        try:
            row = execute_one(conn, "SELECT COUNT(*) AS n FROM feature_requests")
            assert row == {"n": 0}
            assert get_schema_version(conn) == SCHEMA_VERSION
            assert needs_migration(conn) is False
        finally:
            conn.close()

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "state" / "dashboard.db"
        conn = init_db(db_path)
        conn.close()
        assert db_path.exists()

    def test_reopen_keeps_data(self, tmp_path):
        db_path = tmp_path / "dashboard.db"
        conn = init_db(db_path)
        conn.execute(
            "INSERT INTO feature_requests (id, description, status, created_at) "
            "VALUES ('a', 'x', 'pending', '2026-01-01T00:00:00+00:00')"
        )
        conn.commit()
        conn.close()

        with get_connection(db_path) as conn:
            assert execute_one(conn, "SELECT COUNT(*) AS n FROM feature_requests") == {"n": 1}

    def test_status_check_constraint(self):
        conn = init_db(":memory:")
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO feature_requests (id, description, status, created_at) "
                    "VALUES ('a', 'x', 'exploded', '2026-01-01T00:00:00+00:00')"
                )
        finally:
            conn.close()


def test_needs_migration_on_empty_database():
    conn = sqlite3.connect(":memory:")
    try:
        assert needs_migration(conn) is True
    finally:
        conn.close()
