# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SCORM interaction trends report.

This module aggregates learner interaction tracking of a SCORM activity
into frequency tables per question, per SCO:
- Allowed-user resolution (capability and group membership)
- Interaction slot counting
- Frequency aggregation of type, student_response and result
- Rendering through a report sink

Usage:
    from src.domains.scorm_trends import (
        RichTableSink,
        TrendsReportRequest,
        TrendsReportService,
    )

    with get_session() as session:
        service = TrendsReportService.from_session(session)
        request = TrendsReportRequest(activity_id=4, context_id=27)
        result = service.display(request, RichTableSink())
"""

from src.domains.scorm_trends.aggregator import TrendsAggregator, element_matches
from src.domains.scorm_trends.allowed_users import (
    AllowedUserResolver,
    CapabilityService,
    SqlCapabilityService,
)
from src.domains.scorm_trends.models import (
    TRACKED_FIELDS,
    Attempt,
    FrequencyTable,
    InteractionObject,
    RowData,
    TrendsReportRequest,
    TrendsReportResult,
)
from src.domains.scorm_trends.presentation import (
    CollectingSink,
    ReportSink,
    RichTableSink,
    TableRow,
    build_rows,
)
from src.domains.scorm_trends.question_count import count_slots, estimate_question_count
from src.domains.scorm_trends.service import TrendsReportService, run_trends_report
from src.domains.scorm_trends.track_store import SqlTrackStore, TrackStore

__all__ = [
    # Models
    "TRACKED_FIELDS",
    "Attempt",
    "FrequencyTable",
    "InteractionObject",
    "RowData",
    "TrendsReportRequest",
    "TrendsReportResult",
    # Collaborators
    "TrackStore",
    "SqlTrackStore",
    "CapabilityService",
    "SqlCapabilityService",
    "AllowedUserResolver",
    # Aggregation
    "count_slots",
    "estimate_question_count",
    "element_matches",
    "TrendsAggregator",
    # Presentation
    "ReportSink",
    "CollectingSink",
    "RichTableSink",
    "TableRow",
    "build_rows",
    # Service
    "TrendsReportService",
    "run_trends_report",
]
