"""
Database layer for evolvedash.

Provides the SQLite schema and connection helpers behind the feature request
log.

Main components:
- schema.py: SQL schema definitions and migrations
- connection.py: Connection setup and query helpers
"""

from evolvedash.core.db.connection import execute_one, execute_query, get_connection, init_db
from evolvedash.core.db.schema import SCHEMA_VERSION, create_schema

__all__ = [
    "execute_one",
    "execute_query",
    "get_connection",
    "init_db",
    "create_schema",
    "SCHEMA_VERSION",
]
