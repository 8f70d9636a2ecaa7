# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for tracking store connection management."""

from collections.abc import Generator

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.core.config.settings import DatabaseSettings, Settings
from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)


@pytest.fixture
def memory_settings() -> Settings:
    """Settings pointing at an in-memory database."""
    return Settings(database=DatabaseSettings(url="sqlite:///:memory:"))


@pytest.fixture
def initialized(memory_settings: Settings) -> Generator[None, None, None]:
    """Initialize the module-level database and tear it down afterwards."""
    init_database(memory_settings)
    yield
    close_database()


class TestDatabaseError:
    """Tests for DatabaseError."""

    def test_str_includes_original_error(self) -> None:
        """Test string form with an underlying error."""
        error = DatabaseError("Query failed", ValueError("boom"))

        assert str(error) == "Query failed: boom"
        assert error.message == "Query failed"

    def test_str_without_original_error(self) -> None:
        """Test string form without an underlying error."""
        assert str(DatabaseError("Not initialized")) == "Not initialized"


class TestUninitialized:
    """Tests for access before init_database()."""

    def test_get_engine_raises(self) -> None:
        """Test get_engine before initialization."""
        close_database()

        with pytest.raises(DatabaseError):
            get_engine()

    def test_get_sessionmaker_raises(self) -> None:
        """Test get_sessionmaker before initialization."""
        close_database()

        with pytest.raises(DatabaseError):
            get_sessionmaker()

    def test_check_connection_false(self) -> None:
        """Test connection check before initialization."""
        close_database()

        assert check_database_connection() is False


@pytest.mark.usefixtures("initialized")
class TestInitialized:
    """Tests for an initialized database."""

    def test_check_connection_true(self) -> None:
        """Test connection check succeeds."""
        assert check_database_connection() is True

    def test_get_session_executes(self) -> None:
        """Test a session can run a query."""
        with get_session() as session:
            assert session.execute(text("SELECT 1")).scalar() == 1

    def test_get_session_wraps_sqlalchemy_errors(self) -> None:
        """Test SQLAlchemy errors become DatabaseError."""
        with pytest.raises(DatabaseError) as exc_info:
            with get_session() as session:
                session.execute(text("SELECT * FROM missing_table"))

        assert isinstance(exc_info.value.original_error, SQLAlchemyError)

    def test_get_session_reraises_other_errors(self) -> None:
        """Test non-database errors propagate unchanged."""
        with pytest.raises(KeyError):
            with get_session():
                raise KeyError("oops")

    def test_close_resets_state(self) -> None:
        """Test close_database forgets the engine."""
        close_database()

        with pytest.raises(DatabaseError):
            get_engine()
