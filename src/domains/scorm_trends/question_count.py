# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Interaction slot counting for a SCO.

A SCO records one ``<prefix><index>.id`` element per interaction it
reports. The number of slots to tabulate is the highest index ever seen
plus one, because slots start at 0.
"""

import logging
import math
import re
from collections.abc import Iterable

from src.domains.scorm_trends.track_store import TrackStore

logger = logging.getLogger(__name__)

# Integers, decimals and exponent forms with an optional sign
_NUMERIC = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_numeric(fragment: str) -> bool:
    """Check whether fragment is a plain decimal number."""
    return _NUMERIC.fullmatch(fragment) is not None


def _id_element_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(re.escape(prefix) + r"(.*)\.id$", re.IGNORECASE)


def count_slots(elements: Iterable[str], prefix: str) -> int:
    """Count interaction slots from ``<prefix><index>.id`` element names.

    Fragments between the prefix and ``.id`` that are not numeric are
    skipped, but their element still marks the SCO as having
    interactions. A fractional highest index rounds up before the
    extra slot is added.

    Args:
        elements: Element names to inspect. Names not ending in
            ``<prefix>...id`` are ignored.
        prefix: Element prefix preceding the slot index.

    Returns:
        Number of slots, 0 when no interaction id element was seen.
    """
    pattern = _id_element_pattern(prefix)
    matched = False
    highest = 0.0

    for element in elements:
        found = pattern.search(element)
        if found is None:
            continue
        matched = True
        fragment = found.group(1).strip()
        if not is_numeric(fragment):
            logger.debug("Skipping non-numeric interaction index: element=%s", element)
            continue
        index = float(fragment)
        if not math.isfinite(index):
            continue
        if index > highest:
            highest = index

    if not matched:
        return 0
    return math.ceil(highest) + 1


def estimate_question_count(store: TrackStore, sco_id: int, prefix: str) -> int:
    """Determine how many interaction slots a SCO has recorded.

    Args:
        store: Tracking store to scan.
        sco_id: SCO id.
        prefix: Element prefix preceding the slot index.

    Returns:
        Number of slots to report, 0 if the SCO recorded no interactions.
    """
    count = count_slots(store.iter_interaction_id_elements(sco_id, prefix), prefix)
    logger.debug("Estimated question count: sco=%s, count=%d", sco_id, count)
    return count
