import os
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from core.settings import DATABASE_URL
from core.exceptions import NotInitializedError

logger = logging.getLogger(__name__)


def _make_engine(url: str):
    if url.startswith("sqlite:///"):
        # Make sure data/ exists for file-backed databases
        db_dir = os.path.dirname(url[len("sqlite:///"):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return create_engine(url, connect_args={"check_same_thread": False})


# Create engine
engine = _make_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()

_initialized = False


def configure_database(url: str):
    """Point the session factory at a different database.

    The store has to be initialised again with init_db() afterwards.
    """
    global engine, _initialized
    engine.dispose()
    engine = _make_engine(url)
    SessionLocal.configure(bind=engine)
    _initialized = False
    return engine


def init_db():
    """Create all tables (if missing) and mark the store as ready."""
    global _initialized
    # Import models so every table is registered on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    _initialized = True
    logger.info("Ward database ready at %s", engine.url)


def is_initialized() -> bool:
    return _initialized


def _require_initialized():
    if not _initialized:
        raise NotInitializedError("Database is not initialized yet.")


def get_db():
    """
    Generator used by dependency-style callers.
    The session is closed once the caller is done with it.
    """
    _require_initialized()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    """
    Context manager for database sessions.
    Automatically closes session when done.

    Usage:
        with get_db_context() as db:
            result = db.query(Model).all()
    """
    _require_initialized()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
