"""
Database module - PostgreSQL connection and sessions.
"""
from visadocs.db.postgres import get_db_session, init_db, test_postgres_connection

__all__ = [
    "get_db_session",
    "init_db",
    "test_postgres_connection",
]
