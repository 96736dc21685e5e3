"""
Database module - relational store (PostgreSQL) and media store (MongoDB GridFS).
"""
from app.db.postgres import get_db_session, execute_raw_sql, test_postgres_connection
from app.db.mongodb import get_mongo_db, test_mongo_connection

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "test_postgres_connection",
    "get_mongo_db",
    "test_mongo_connection"
]
