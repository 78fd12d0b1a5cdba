import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, select, literal
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from internhub.core.config import get_settings
from internhub.db.tables import metadata

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None

# Session factory, bound lazily to the engine on first use
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_engine() -> Engine:
    """
    Create the engine on first use.
    PostgreSQL gets a connection pool:
    pool_size=5: maintain 5 connections ready
    max_overflow=10: allow 10 extra connections under load
    """
    global _engine
    if _engine is None:
        settings = get_settings()
        if settings.is_sqlite:
            _engine = create_engine(
                settings.database_url,
                connect_args={"check_same_thread": False},
            )
        else:
            _engine = create_engine(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
            )
        SessionLocal.configure(bind=_engine)
    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the engine (shutdown, tests)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


def init_schema() -> None:
    """Create all tables that do not exist yet."""
    metadata.create_all(get_engine())
    logger.info("Database schema ready")


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(select(accounts))
    """
    get_engine()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_database_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            return db.execute(select(literal(1))).scalar() == 1
    except Exception:
        logger.exception("Database connection failed")
        return False

