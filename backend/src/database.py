"""Database session factory and configuration.

Provides connectivity to the cached platform catalog and the correction
feedback tables.
"""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import Settings, get_settings


SessionFactory = Callable[[], Session]


def create_engine_from_url(database_url: str) -> Engine:
    """Create an engine with pool settings suited to the backend.

    In-memory SQLite gets a StaticPool so every thread sees the same
    database.
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


def create_engine_from_settings(settings: Optional[Settings] = None) -> Engine:
    settings = settings or get_settings()
    return create_engine_from_url(settings.DATABASE_URL)


def build_session_factory(engine: Engine) -> SessionFactory:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: SessionFactory) -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with session_scope(SessionLocal) as session:
            session.add(row)

    Automatically commits on success, rolls back on exception.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """Create the catalog and correction tables if missing.

    Used for SQLite development databases and tests; production schemas are
    managed by the catalog sync deployment.
    """
    from models import Base
    from feedback.models import MatchCorrection  # noqa: F401 (registers the table)

    Base.metadata.create_all(engine)
