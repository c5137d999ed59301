"""
Database Configuration and Session Management
============================================

Engine and session factory construction for the Planmoni backend. The
database URL is passed in explicitly; Config.DATABASE_URL is only the
fallback used by the default factory at the application edge.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Type
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from config import Config
from models import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, with SQLite specifics handled"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            # One shared connection so every session sees the same in-memory DB
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,    # Validate connections before use
        pool_recycle=3600,     # Recycle connections every hour
        echo=echo,
    )


def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """Build a session factory bound to a fresh engine for database_url"""
    engine = create_db_engine(database_url, echo=echo)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet"""
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created")


_default_factory: Optional[sessionmaker] = None


def get_session_factory() -> sessionmaker:
    """Default session factory built lazily from Config.DATABASE_URL"""
    global _default_factory
    if _default_factory is None:
        _default_factory = create_session_factory(Config.DATABASE_URL, echo=Config.DATABASE_ECHO)
    return _default_factory


@contextmanager
def managed_session(
    factory: Optional[sessionmaker] = None,
    expected_errors: Tuple[Type[BaseException], ...] = (),
) -> Iterator[Session]:
    """Sync context manager for database sessions

    expected_errors are rolled back and re-raised without an error log;
    the HTTP layer passes its client error type here.
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except expected_errors as e:
        session.rollback()
        logger.debug(f"Session rolled back: {e!r}")
        raise
    except Exception as e:
        session.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        session.close()


def test_connection(factory: Optional[sessionmaker] = None) -> bool:
    """Return True when the database answers a trivial query"""
    try:
        with managed_session(factory) as session:
            session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        return False
