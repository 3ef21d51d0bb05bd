"""Tests for engine creation and transactional scope."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker

from food_locales.models import Locale
from food_locales.services import database
from food_locales.services.database import create_database_engine, init_database, session_scope


@pytest.fixture
def memory_engine(monkeypatch):
    """Install a fresh in-memory engine as the process-wide engine."""
    engine = create_database_engine("sqlite:///:memory:")
    monkeypatch.setattr(database, "_engine", engine)
    monkeypatch.setattr(database, "_SessionFactory", None)
    return engine


def test_init_database_creates_tables():
    engine = create_database_engine("sqlite:///:memory:")
    init_database(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"foods", "foods_local", "locales", "foods_local_lists"} <= tables


def test_session_scope_commits(test_db):
    with session_scope() as session:
        session.add(Locale(id="en_AU", english_name="Australia", local_name="Australia"))

    with session_scope() as session:
        assert session.get(Locale, "en_AU") is not None


def test_session_scope_rolls_back_on_error(test_db):
    with pytest.raises(RuntimeError):
        with session_scope() as session:
            session.add(Locale(id="en_AU", english_name="Australia", local_name="Australia"))
            session.flush()
            raise RuntimeError("boom")

    with session_scope() as session:
        assert session.get(Locale, "en_AU") is None


def test_verify_database(memory_engine):
    assert database.verify_database() is False

    init_database(memory_engine)

    assert database.verify_database() is True


def test_reset_database_requires_confirmation():
    with pytest.raises(ValueError):
        database.reset_database()


def test_reset_database_removes_rows(memory_engine):
    init_database(memory_engine)
    session = sessionmaker(bind=memory_engine)()
    session.add(Locale(id="en_AU", english_name="Australia", local_name="Australia"))
    session.commit()
    session.close()

    database.reset_database(confirm=True)

    session = sessionmaker(bind=memory_engine)()
    assert session.query(Locale).count() == 0
    session.close()


def test_close_connections_forgets_engine(memory_engine):
    database.close_connections()

    assert database._engine is None
    assert database._SessionFactory is None
