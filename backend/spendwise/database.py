import logging
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine import Engine

from .models import Base

logger = logging.getLogger(__name__)

# Global state for the open database
_current_engine: Engine | None = None
_current_session_factory: sessionmaker | None = None


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign keys for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def open_database(db_path: Path) -> None:
    """
    Open the SQLite database file.

    Creates the file and tables if it doesn't exist.
    """
    global _current_engine, _current_session_factory

    if _current_engine is not None:
        close_database()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_url = f"sqlite:///{db_path}"
    _current_engine = create_engine(db_url, echo=False)
    _current_session_factory = sessionmaker(bind=_current_engine)

    # Create tables if they don't exist
    Base.metadata.create_all(_current_engine)
    logger.info("Opened database %s", db_path)


def close_database() -> None:
    """Close the open database."""
    global _current_engine, _current_session_factory

    if _current_engine is not None:
        _current_engine.dispose()
        _current_engine = None
        _current_session_factory = None


def get_session() -> Session:
    """Get a database session."""
    if _current_session_factory is None:
        raise RuntimeError("No database is currently open")
    return _current_session_factory()


def get_db():
    """FastAPI dependency for database sessions."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def is_database_open() -> bool:
    """Check if a database is currently open."""
    return _current_engine is not None
