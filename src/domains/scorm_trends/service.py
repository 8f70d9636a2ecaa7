# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Trends report orchestration.

TrendsReportService drives one report pass over every launchable SCO
of a SCORM activity:

1. Resolve the users that may be reported (optionally within a group).
   If there are none, emit a single notice and stop.
2. For each SCO: emit its heading, load the allowed users' attempts,
   count the interaction slots, aggregate the frequencies and emit the
   non-empty rows as one table.

Usage:
    from src.domains.scorm_trends import TrendsReportService, RichTableSink

    with get_session() as session:
        service = TrendsReportService.from_session(session, settings.report)
        result = service.display(request, RichTableSink())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.config.settings import TrendsReportSettings, get_settings
from src.domains.scorm_trends.aggregator import TrendsAggregator
from src.domains.scorm_trends.allowed_users import AllowedUserResolver, SqlCapabilityService
from src.domains.scorm_trends.models import (
    Attempt,
    FrequencyTable,
    InteractionObject,
    RowData,
    TrendsReportRequest,
    TrendsReportResult,
)
from src.domains.scorm_trends.presentation import ReportSink, build_rows
from src.domains.scorm_trends.question_count import estimate_question_count
from src.domains.scorm_trends.track_store import SqlTrackStore, TrackStore
from src.infrastructure.database.connection import DatabaseError, get_session
from src.utils.logging import log_context

logger = logging.getLogger(__name__)


class TrendsReportService:
    """Service producing the SCORM interaction trends report.

    Attributes:
        store: Tracking store.
        resolver: Allowed-user resolver.
        settings: Report settings.
        aggregator: Per-SCO frequency aggregator.
    """

    def __init__(
        self,
        store: TrackStore,
        resolver: AllowedUserResolver,
        settings: TrendsReportSettings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Tracking store.
            resolver: Allowed-user resolver.
            settings: Report settings, the application settings by default.
        """
        self.store = store
        self.resolver = resolver
        self.settings = settings or get_settings().report
        self.aggregator = TrendsAggregator(
            store,
            prefix=self.settings.interaction_prefix,
            strict=self.settings.strict_key_matching,
        )

    @classmethod
    def from_session(
        cls,
        session: Session,
        settings: TrendsReportSettings | None = None,
    ) -> "TrendsReportService":
        """Build a service reading from a database session.

        Args:
            session: Open database session.
            settings: Report settings.

        Returns:
            A service wired to SQL-backed collaborators.
        """
        settings = settings or get_settings().report
        resolver = AllowedUserResolver(SqlCapabilityService(session), settings.capability)
        return cls(SqlTrackStore(session), resolver, settings)

    def get_table_data(
        self,
        sco: InteractionObject,
        attempts: Iterable[Attempt],
    ) -> list[RowData]:
        """Count slots and aggregate frequencies for one SCO.

        Args:
            sco: The SCO.
            attempts: Attempts at the SCO.

        Returns:
            One RowData per interaction slot.
        """
        slot_count = estimate_question_count(
            self.store, sco.id, self.settings.interaction_prefix
        )
        return self.aggregator.aggregate(sco, slot_count, attempts)

    def build_frequency_table(self, request: TrendsReportRequest) -> FrequencyTable:
        """Aggregate every launchable SCO without rendering.

        Args:
            request: Report parameters.

        Returns:
            RowData per SCO. Empty when no user may be reported.
        """
        allowed = self.resolver.resolve(request.context_id, request.group_id)
        if not allowed:
            return {}

        table: FrequencyTable = {}
        for sco in self.store.get_interaction_objects(request.activity_id):
            attempts = self.store.get_attempts(allowed, sco.id)
            table[sco] = self.get_table_data(sco, attempts)
        return table

    def display(self, request: TrendsReportRequest, sink: ReportSink) -> TrendsReportResult:
        """Run one report pass and write it to sink.

        Args:
            request: Report parameters.
            sink: Output sink.

        Returns:
            TrendsReportResult. Database failures are logged and reported
            through success=False instead of being raised.
        """
        with log_context(activity_id=request.activity_id, group_id=request.group_id):
            try:
                return self._display(request, sink)
            except (DatabaseError, SQLAlchemyError) as e:
                logger.error(
                    "Trends report failed: activity=%s, error=%s",
                    request.activity_id,
                    str(e),
                    exc_info=True,
                )
                return TrendsReportResult(
                    success=False,
                    activity_id=request.activity_id,
                    error=str(e),
                )

    def _display(self, request: TrendsReportRequest, sink: ReportSink) -> TrendsReportResult:
        allowed = self.resolver.resolve(request.context_id, request.group_id)
        if not allowed:
            message = self.settings.no_activity_message
            sink.notice(message)
            logger.info("No users to report: activity=%s", request.activity_id)
            return TrendsReportResult(
                success=True,
                activity_id=request.activity_id,
                notice=message,
            )

        if request.download:
            # Export formats are produced by the caller from the sink output
            logger.info("Download requested: format=%s", request.download)

        objects_processed = 0
        objects_reported = 0
        rows_emitted = 0

        for sco in self.store.get_interaction_objects(request.activity_id):
            objects_processed += 1
            sink.heading(sco.title)

            attempts = self.store.get_attempts(allowed, sco.id)
            table_rows = build_rows(
                self.get_table_data(sco, attempts),
                self.settings.question_label,
            )
            if not table_rows:
                continue

            sink.table(f"{self.settings.table_id_prefix}{sco.id}", table_rows)
            objects_reported += 1
            rows_emitted += len(table_rows)

        logger.info(
            "Trends report complete: activity=%s, objects=%d, reported=%d, rows=%d",
            request.activity_id,
            objects_processed,
            objects_reported,
            rows_emitted,
        )

        return TrendsReportResult(
            success=True,
            activity_id=request.activity_id,
            objects_processed=objects_processed,
            objects_reported=objects_reported,
            rows_emitted=rows_emitted,
        )


def run_trends_report(
    request: TrendsReportRequest,
    sink: ReportSink,
    settings: TrendsReportSettings | None = None,
) -> TrendsReportResult:
    """Run a report pass in its own database session.

    The database must have been initialized with init_database().

    Args:
        request: Report parameters.
        sink: Output sink.
        settings: Report settings.

    Returns:
        TrendsReportResult of the pass.
    """
    try:
        with get_session() as session:
            service = TrendsReportService.from_session(session, settings)
            return service.display(request, sink)
    except DatabaseError as e:
        logger.error("Trends report could not start: error=%s", str(e))
        return TrendsReportResult(success=False, activity_id=request.activity_id, error=str(e))
