"""
Database module - engine, sessions and table definitions.
"""
from internhub.db.session import get_db_session, init_schema, test_database_connection

__all__ = [
    "get_db_session",
    "init_schema",
    "test_database_connection",
]
