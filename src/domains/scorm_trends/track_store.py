# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only access to SCORM tracking data.

TrackStore describes what the report needs from the LMS tracking store.
SqlTrackStore implements it over the scorm, scorm_scoes and
scorm_scoes_track tables.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.domains.scorm_trends.models import Attempt, InteractionObject
from src.infrastructure.database.models import ScormSco, ScormScoTrack

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


class TrackStore(Protocol):
    """Read-only view of the tracking store used by the report."""

    def get_interaction_objects(self, activity_id: int) -> list[InteractionObject]:
        """List launchable SCOs of an activity, ordered by id."""
        ...

    def get_attempts(self, user_ids: Iterable[str], sco_id: int) -> list[Attempt]:
        """List distinct attempts of the given users at one SCO."""
        ...

    def get_tracking_data(self, sco_id: int, user_id: str, attempt_number: int) -> dict[str, str]:
        """Get the element -> value mapping recorded during one attempt."""
        ...

    def iter_interaction_id_elements(self, sco_id: int, prefix: str) -> Iterator[str]:
        """Iterate every ``<prefix>*.id`` element recorded for a SCO."""
        ...


def escape_like(fragment: str) -> str:
    """Escape LIKE wildcards so fragment matches literally."""
    return (
        fragment.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SqlTrackStore:
    """TrackStore backed by a SQLAlchemy session.

    Attributes:
        session: Open database session. The caller owns its lifetime.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the store.

        Args:
            session: Database session for the LMS database.
        """
        self.session = session

    def get_interaction_objects(self, activity_id: int) -> list[InteractionObject]:
        """List launchable SCOs of an activity.

        SCOs without a launch reference (organisations, aggregations)
        cannot be attempted and are left out.

        Args:
            activity_id: SCORM activity id.

        Returns:
            InteractionObjects ordered by id.
        """
        stmt = (
            select(ScormSco)
            .where(
                ScormSco.scorm_id == activity_id,
                ScormSco.launch.is_not(None),
                ScormSco.launch != "",
            )
            .order_by(ScormSco.id)
        )
        scoes = self.session.execute(stmt).scalars().all()
        return [
            InteractionObject(
                id=sco.id,
                title=sco.title,
                activity_id=sco.scorm_id,
                launch=sco.launch,
            )
            for sco in scoes
        ]

    def get_attempts(self, user_ids: Iterable[str], sco_id: int) -> list[Attempt]:
        """List distinct (user, attempt) pairs tracked for a SCO.

        A missing attempt number counts as attempt 0.

        Args:
            user_ids: Users to restrict the attempts to.
            sco_id: SCO id.

        Returns:
            Attempts ordered by user and attempt number.
        """
        users = list(user_ids)
        if not users:
            return []

        attempt_number = func.coalesce(ScormScoTrack.attempt, 0)
        stmt = (
            select(ScormScoTrack.user_id, attempt_number)
            .distinct()
            .where(
                ScormScoTrack.user_id.in_(users),
                ScormScoTrack.sco_id == sco_id,
            )
            .order_by(ScormScoTrack.user_id, attempt_number)
        )
        rows = self.session.execute(stmt).all()
        logger.debug("Loaded attempts: sco=%s, rows=%d", sco_id, len(rows))

        attempts: dict[str, Attempt] = {}
        for user_id, number in rows:
            attempt = Attempt(
                user_id=str(user_id),
                attempt_number=int(number),
                interaction_object_id=sco_id,
            )
            attempts.setdefault(attempt.unique_id, attempt)
        return list(attempts.values())

    def get_tracking_data(self, sco_id: int, user_id: str, attempt_number: int) -> dict[str, str]:
        """Get the tracked elements of one attempt.

        When an element was written more than once the latest value wins.

        Args:
            sco_id: SCO id.
            user_id: User id.
            attempt_number: Attempt number (0 matches a missing attempt).

        Returns:
            Mapping of element to value, empty when nothing was tracked.
        """
        stmt = (
            select(ScormScoTrack.element, ScormScoTrack.value)
            .where(
                ScormScoTrack.sco_id == sco_id,
                ScormScoTrack.user_id == user_id,
                func.coalesce(ScormScoTrack.attempt, 0) == attempt_number,
            )
            .order_by(ScormScoTrack.element, ScormScoTrack.id)
        )
        return {element: value for element, value in self.session.execute(stmt)}

    def iter_interaction_id_elements(self, sco_id: int, prefix: str) -> Iterator[str]:
        """Iterate interaction id elements recorded for a SCO.

        Matches ``%<prefix>%.id`` case-insensitively, so both
        ``cmi.interactions_3.id`` and ``CMI.Interactions_3.ID`` are seen.
        The result cursor is closed however iteration ends.

        Args:
            sco_id: SCO id.
            prefix: Element prefix preceding the slot index.

        Yields:
            Matching element names.
        """
        pattern = f"%{escape_like(prefix)}%.id"
        stmt = (
            select(ScormScoTrack.element)
            .where(
                ScormScoTrack.sco_id == sco_id,
                ScormScoTrack.element.ilike(pattern, escape=LIKE_ESCAPE),
            )
            .order_by(ScormScoTrack.element)
        )
        result = self.session.scalars(stmt)
        try:
            yield from result
        finally:
            result.close()
