# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Report settings and captured log output
- An in-memory SQLite tracking store with the LMS schema
- Seeding helpers for activities, SCOs, tracks and capabilities
"""

import io
import logging
from collections.abc import Callable, Generator

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from src.core.config.settings import Settings, TrendsReportSettings, clear_settings_cache
from src.infrastructure.database.connection import create_database_engine
from src.infrastructure.database.models import (
    Base,
    CapabilityGrant,
    GroupMember,
    Scorm,
    ScormSco,
    ScormScoTrack,
)
from src.utils.logging import setup_logging


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Make every test load settings from scratch."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def report_settings() -> TrendsReportSettings:
    """Provide default report settings."""
    return TrendsReportSettings(
        interaction_prefix="cmi.interactions_",
        capability="mod/scorm:savetrack",
        strict_key_matching=False,
        question_label="Question {index}",
        no_activity_message="Nothing to report",
        table_id_prefix="mod-scorm-trends-report-",
    )


@pytest.fixture
def log_stream() -> Generator[io.StringIO, None, None]:
    """Capture JSON log lines rendered by setup_logging."""
    stream = io.StringIO()
    handler = setup_logging(
        Settings(environment="production", debug=False, log_level="DEBUG"),
        stream=stream,
    )
    yield stream
    logging.getLogger().removeHandler(handler)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Create an in-memory SQLite engine with the LMS schema."""
    engine = create_database_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Provide a session on the in-memory database."""
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def sample_activity(db_session: Session) -> Scorm:
    """Create a SCORM activity with one launchable SCO and one organisation item."""
    scorm = Scorm(id=1, course_id=10, name="Safety induction")
    db_session.add(scorm)
    db_session.add_all(
        [
            ScormSco(id=10, scorm_id=1, identifier="ORG", title="Organisation", launch=""),
            ScormSco(id=11, scorm_id=1, identifier="SCO1", title="Quiz one", launch="quiz1.html"),
        ]
    )
    db_session.commit()
    return scorm


@pytest.fixture
def add_tracks(db_session: Session) -> Callable[..., None]:
    """Return a helper that records element/value pairs for one attempt."""

    def _add(
        user_id: str,
        sco_id: int,
        elements: dict[str, str],
        attempt: int | None = 1,
        scorm_id: int = 1,
    ) -> None:
        for element, value in elements.items():
            db_session.add(
                ScormScoTrack(
                    user_id=user_id,
                    scorm_id=scorm_id,
                    sco_id=sco_id,
                    attempt=attempt,
                    element=element,
                    value=value,
                )
            )
        db_session.commit()

    return _add


@pytest.fixture
def grant_capability(db_session: Session) -> Callable[..., None]:
    """Return a helper that grants a capability and optional group membership."""

    def _grant(
        user_id: str,
        context_id: int = 100,
        capability: str = "mod/scorm:savetrack",
        group_id: int | None = None,
    ) -> None:
        db_session.add(
            CapabilityGrant(context_id=context_id, user_id=user_id, capability=capability)
        )
        if group_id is not None:
            db_session.add(GroupMember(group_id=group_id, user_id=user_id))
        db_session.commit()

    return _grant
