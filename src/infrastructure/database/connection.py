# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tracking store database connection management using SQLAlchemy.

This module provides synchronous database connections to the LMS database
that holds SCORM activities, their SCOs and the learners' tracking records.
A report pass is a short series of read-only queries, so a plain engine and
sessionmaker are all that is needed.

Example:
    from src.infrastructure.database.connection import (
        init_database,
        get_session,
    )

    # Initialize at application startup
    init_database(settings)

    # Use around a report pass
    with get_session() as session:
        scoes = session.execute(select(ScormSco)).scalars().all()
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Module-level state for the tracking store connection
_engine: Optional[Engine] = None
_sessionmaker: Optional[sessionmaker[Session]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


def create_database_engine(url: str, echo: bool = False, pool_pre_ping: bool = True) -> Engine:
    """Create an engine for the given URL.

    In-memory SQLite databases share a single connection so that every
    session sees the same schema and rows.

    Args:
        url: SQLAlchemy connection URL.
        echo: Whether to echo SQL statements.
        pool_pre_ping: Whether to test connections before use.

    Returns:
        A configured SQLAlchemy engine.
    """
    if url.startswith("sqlite") and (url.endswith(":memory:") or url == "sqlite://"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_pre_ping=pool_pre_ping)


def init_database(settings: "Settings") -> None:
    """Initialize the tracking store connection pool.

    This should be called once at application startup.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If engine creation fails.
    """
    global _engine, _sessionmaker

    try:
        _engine = create_database_engine(
            settings.database.url,
            echo=settings.database.echo,
            pool_pre_ping=settings.database.pool_pre_ping,
        )
        _sessionmaker = sessionmaker(
            bind=_engine,
            class_=Session,
            expire_on_commit=False,
            autoflush=False,
        )
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


def close_database() -> None:
    """Dispose of the connection pool.

    This should be called at application shutdown.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> Engine:
    """Get the tracking store engine.

    Returns:
        The SQLAlchemy engine.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _engine is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _engine


def get_sessionmaker() -> sessionmaker[Session]:
    """Get the tracking store sessionmaker.

    Returns:
        The SQLAlchemy sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _sessionmaker


@contextmanager
def get_session() -> Iterator[Session]:
    """Get a session for the tracking store.

    The session is always closed when the block exits, including early
    returns. Nothing is committed since report passes only read; any
    failure rolls the transaction back.

    Yields:
        Session for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    factory = get_sessionmaker()

    with factory() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            session.rollback()
            raise


def check_database_connection() -> bool:
    """Check if the tracking store is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _engine is None:
        return False

    try:
        with _engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
