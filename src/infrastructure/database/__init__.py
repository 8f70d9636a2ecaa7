# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the LMS tracking store.

This package provides SQLAlchemy connections and the ORM models of the
tables the trends report reads.

Example:
    from src.infrastructure.database import init_database, get_session

    init_database(settings)
    with get_session() as session:
        result = session.execute(select(ScormSco))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    create_database_engine,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
