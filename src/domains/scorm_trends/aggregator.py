# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Interaction frequency aggregation.

For every interaction slot of a SCO this module counts how often each
recorded value appears for the ``type``, ``student_response`` and
``result`` elements across all attempts.

Element matching is loose by default: an element is counted for slot i
and field f whenever it contains ``<prefix><i>.<f>`` anywhere,
case-insensitively. An element that happens to contain the text of more
than one field is counted under each of them. Strict matching, where the
element must end with ``<prefix><i>.<f>`` after a dot, is available with
``strict=True``.

Usage:
    from src.domains.scorm_trends import TrendsAggregator

    aggregator = TrendsAggregator(store, prefix="interactions_")
    rows = aggregator.aggregate(sco, slot_count=3, attempts=attempts)
"""

import logging
from collections.abc import Iterable

from src.domains.scorm_trends.models import (
    TRACKED_FIELDS,
    Attempt,
    InteractionObject,
    RowData,
)
from src.domains.scorm_trends.track_store import TrackStore

logger = logging.getLogger(__name__)


def element_matches(element: str, needle: str, strict: bool = False) -> bool:
    """Check whether a tracked element belongs to a slot field.

    Args:
        element: Tracked element name, e.g. ``cmi.interactions_0.type``.
        needle: Lowercased ``<prefix><slot>.<field>`` to look for.
        strict: Require the element to be the needle, optionally
            preceded by a dotted namespace.

    Returns:
        True if the element counts for the slot field.
    """
    element = element.lower()
    if strict:
        return element == needle or element.endswith("." + needle)
    return needle in element


class TrendsAggregator:
    """Builds per-slot frequency tables for a SCO.

    Attributes:
        store: Tracking store the attempts are read from.
        prefix: Element prefix preceding the slot index.
        strict: Whether to use strict element matching.
    """

    def __init__(self, store: TrackStore, prefix: str, strict: bool = False) -> None:
        """Initialize the aggregator.

        Args:
            store: Tracking store.
            prefix: Element prefix preceding the slot index.
            strict: Whether to use strict element matching.
        """
        self.store = store
        self.prefix = prefix
        self.strict = strict

    def aggregate(
        self,
        sco: InteractionObject,
        slot_count: int,
        attempts: Iterable[Attempt],
    ) -> list[RowData]:
        """Tally recorded values per slot and field.

        Tracking data is fetched once per attempt and reused for every
        slot. Attempts without tracking data are skipped.

        Args:
            sco: The SCO being reported.
            slot_count: Number of interaction slots.
            attempts: Attempts at the SCO.

        Returns:
            Exactly slot_count RowData, in slot order. Slots with
            nothing recorded are present and empty.
        """
        if slot_count <= 0:
            return []

        tracks: list[dict[str, str]] = []
        for attempt in attempts:
            data = self.store.get_tracking_data(sco.id, attempt.user_id, attempt.attempt_number)
            if data:
                tracks.append(data)

        rows: list[RowData] = []
        for slot in range(slot_count):
            needles = [
                (field_name, f"{self.prefix}{slot}.{field_name}".lower())
                for field_name in TRACKED_FIELDS
            ]
            row = RowData()
            for data in tracks:
                for element, value in data.items():
                    for field_name, needle in needles:
                        if element_matches(element, needle, self.strict):
                            row.tally(field_name, value)
            rows.append(row)

        logger.debug(
            "Aggregated interactions: sco=%s, slots=%d, attempts_with_data=%d",
            sco.id,
            slot_count,
            len(tracks),
        )
        return rows
