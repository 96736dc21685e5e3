from contextlib import contextmanager

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.db.tables import metadata

settings = get_settings()
logger = structlog.get_logger(__name__)

_engine: Engine = None
_session_factory: sessionmaker = None


def get_engine() -> Engine:
    """
    Get or create the SQLAlchemy engine (singleton pattern).

    PostgreSQL gets a connection pool (5 ready, 10 overflow).
    SQLite URLs (used by the test suite) skip the pool sizing and allow
    connections to cross threads.
    """
    global _engine, _session_factory
    if _engine is None:
        url = settings.sqlalchemy_url
        if url.startswith("sqlite"):
            _engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=settings.debug
            )
        else:
            _engine = create_engine(
                url,
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                echo=settings.debug  # Log SQL queries in debug mode
            )
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    get_engine()
    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the relational store is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("database_connection_failed", error=str(e))
        return False


def execute_raw_sql(sql: str, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    This is useful for complex queries and joins.
    """
    with get_db_session() as db:
        result = db.execute(text(sql), params or {})
        columns = result.keys()
        return [dict(zip(columns, row)) for row in result.fetchall()]


def init_postgres_schema():
    """
    Create all tables that do not exist yet.
    Call this once during app startup.
    """
    metadata.create_all(get_engine())
    logger.info("database_schema_ready", tables=len(metadata.tables))
