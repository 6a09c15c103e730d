"""
Database Configuration
SQLite connection, session management, and initialization
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from EquipTrack.config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# ENGINE / SESSION FACTORY
# ============================================================================


def create_db_engine(database_url: str, echo: bool = False):
    """
    Create an engine for the given URL.

    SQLite connections are shared with the asyncio worker code, so
    ``check_same_thread`` is disabled. In-memory databases use a single
    static connection, otherwise every session would see an empty database.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """Create the engine, make sure the tables exist, return a session factory."""
    engine = create_db_engine(database_url, echo=echo)
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


# Default engine for the configured database
# engine = the actual connection to SQLite
# SessionLocal = used to talk to the database
engine = create_db_engine(settings.DATABASE_URL, echo=settings.ENVIRONMENT == "debug")
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def get_db_context(session_factory: sessionmaker = None) -> Generator[Session, None, None]:
    """
    Context manager for database session.

    Usage in services:
        with get_db_context() as db:
            item = get_item(db, "@equipment_data")
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
    except Exception as e:
        db.rollback()
        logger.error(f"Database error: {str(e)}")
        raise
    finally:
        db.close()


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================


def init_db(bind=None):
    """
    Initialize database - create all tables.

    Safe to call multiple times (idempotent).
    """
    from EquipTrack.database import Base
    # Registers the models with the ORM metadata
    from EquipTrack.database.models import StorageItem  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("[OK] Database tables created successfully")
    except Exception as e:
        logger.error(f"[ERROR] Failed to initialize database: {str(e)}")
        raise


def health_check_db(session_factory: sessionmaker = None) -> bool:
    """Check if the database is accessible."""
    try:
        with get_db_context(session_factory) as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False
