"""
Engine and session management for the food database.

A derivation run reads catalogs, checks codes and writes foods through one
SQLAlchemy session per transaction; session_scope() is the only place that
commits or rolls back. The engine is created lazily from the configured
database URL (a SQLite file by default, any SQLAlchemy URL via
FOOD_LOCALES_DATABASE_URL).

SQLite connections get foreign keys switched on so that local food rows
cannot point at foods, locales or FCT records that do not exist.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, close_all_sessions, sessionmaker
from sqlalchemy.pool import StaticPool

from food_locales.models.base import Base
from food_locales.utils.config import get_config

logger = logging.getLogger(__name__)

# Tables a usable food database must have
REQUIRED_TABLES = ("locales", "foods", "foods_local", "foods_local_lists")

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _configure_sqlite_connection(dbapi_connection, connection_record):
    """Apply SQLite pragmas to each new connection; other drivers are untouched."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    cursor = dbapi_connection.cursor()
    # Off by default in SQLite
    cursor.execute("PRAGMA foreign_keys=ON")
    # Lets the CLI read while another run is writing
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_memory(database_url: str) -> bool:
    return ":memory:" in database_url or "mode=memory" in database_url


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the food database.

    Args:
        database_url: SQLAlchemy URL; defaults to the configured database
        echo: Log every SQL statement

    Returns:
        Engine ready for use
    """
    if database_url is None:
        database_url = get_config().database_url

    logger.info(f"Creating database engine: {database_url}")

    if not _is_sqlite(database_url):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if _is_memory(database_url):
        # One shared connection, or each session would see an empty database
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": 30},
    )


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing food database tables. Existing tables are left alone."""
    if engine is None:
        engine = get_engine()

    # Registers every model on Base.metadata
    from food_locales import models  # noqa: F401

    logger.info("Creating food database tables")
    Base.metadata.create_all(engine)


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """
    Return the process-wide session factory.

    Sessions do not expire objects on commit, so Locale and Food objects
    returned by the services stay readable after their session closes.
    """
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    """Open a new session. Prefer session_scope(), which also commits and closes."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Run a block of database work as one transaction.

    Commits when the block finishes, rolls back if it raises (the exception
    is re-raised unchanged) and closes the session either way.

    Example:
        with session_scope() as session:
            store.add_foods_to_locale(["24APJU"], "en_NZ", session)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """Return True if the database can be reached and has the core food tables."""
    try:
        tables = set(inspect(get_engine()).get_table_names())
    except Exception as e:
        logger.error(f"Cannot inspect food database: {e}")
        return False

    missing = [table for table in REQUIRED_TABLES if table not in tables]
    if missing:
        logger.warning(f"Food database is missing tables: {', '.join(missing)}")
        return False

    return True


def reset_database(confirm: bool = False) -> None:
    """
    Drop and recreate every table. All foods and locales are lost.

    Raises:
        ValueError: Unless confirm is True
    """
    if not confirm:
        raise ValueError("reset_database() deletes every food and locale; pass confirm=True")

    engine = get_engine()

    from food_locales import models  # noqa: F401

    logger.warning("Dropping all food database tables")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.info("Food database tables recreated")


def close_connections() -> None:
    """Close open sessions and dispose of the engine."""
    global _engine, _SessionFactory

    if _SessionFactory is not None:
        close_all_sessions()
        _SessionFactory = None

    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Make sure the configured database exists and has its tables."""
    config = get_config()

    if config.database_exists():
        logger.info(f"Using food database at: {config.database_url}")
    else:
        logger.info(f"Creating food database at: {config.database_path}")

    init_database(get_engine())

    if not verify_database():
        logger.warning("Food database tables could not be verified")
