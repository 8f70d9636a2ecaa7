# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the SCORM trends report.

This module defines:
- The report request passed in by the reporting page
- Interaction objects (SCOs) and attempts read from the tracking store
- RowData, the per-slot frequency record
- TrendsReportResult, the outcome of a report pass
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

TRACKED_FIELDS: tuple[str, ...] = ("type", "student_response", "result")


class TrendsReportRequest(BaseModel):
    """Parameters of a single report pass.

    Attributes:
        activity_id: SCORM activity whose SCOs are reported.
        context_id: Module context used for capability checks.
        course_id: Course the activity belongs to.
        group_id: Selected group; None or 0 means no group restriction.
        download: Requested download format, empty for on-screen output.
    """

    activity_id: int
    context_id: int
    course_id: int = 0
    group_id: int | None = Field(default=None, ge=0)
    download: str = ""

    @property
    def group_selected(self) -> bool:
        """Whether a specific group restricts the report."""
        return bool(self.group_id)


@dataclass(frozen=True)
class InteractionObject:
    """A reportable SCO."""

    id: int
    title: str
    activity_id: int = 0
    launch: str = ""


@dataclass(frozen=True)
class Attempt:
    """One user's attempt at an interaction object."""

    user_id: str
    attempt_number: int
    interaction_object_id: int

    @property
    def unique_id(self) -> str:
        """Key that identifies the attempt within its object."""
        return f"{self.user_id}#{self.attempt_number}"


@dataclass
class RowData:
    """Frequency of each observed value for one interaction slot.

    Each field maps a recorded value to the number of times it was seen.
    Mappings keep first-occurrence order.
    """

    type: dict[str, int] = field(default_factory=dict)
    student_response: dict[str, int] = field(default_factory=dict)
    result: dict[str, int] = field(default_factory=dict)

    def tally(self, field_name: str, value: str) -> None:
        """Count one occurrence of value under field_name."""
        counts: dict[str, int] = getattr(self, field_name)
        counts[value] = counts.get(value, 0) + 1

    def fields(self) -> Iterator[tuple[str, dict[str, int]]]:
        """Iterate (field name, counts) in display order."""
        for name in TRACKED_FIELDS:
            yield name, getattr(self, name)

    @property
    def is_empty(self) -> bool:
        """Whether no value was counted for any field."""
        return not (self.type or self.student_response or self.result)

    def to_dict(self) -> dict[str, dict[str, int]]:
        """Convert to dictionary."""
        return {name: dict(counts) for name, counts in self.fields()}


FrequencyTable = dict[InteractionObject, list[RowData]]


class TrendsReportResult:
    """Result of a report pass.

    Attributes:
        success: Whether the pass completed.
        activity_id: Reported activity.
        objects_processed: Interaction objects examined.
        objects_reported: Interaction objects that produced a table.
        rows_emitted: Table rows handed to the sink.
        notice: Notice shown instead of tables, if any.
        error: Error message if failed.
    """

    def __init__(
        self,
        success: bool,
        activity_id: int | None = None,
        objects_processed: int = 0,
        objects_reported: int = 0,
        rows_emitted: int = 0,
        notice: str | None = None,
        error: str | None = None,
    ) -> None:
        """Initialize report result.

        Args:
            success: Whether the pass completed.
            activity_id: Reported activity.
            objects_processed: Interaction objects examined.
            objects_reported: Interaction objects that produced a table.
            rows_emitted: Table rows handed to the sink.
            notice: Notice shown instead of tables, if any.
            error: Error message if failed.
        """
        self.success = success
        self.activity_id = activity_id
        self.objects_processed = objects_processed
        self.objects_reported = objects_reported
        self.rows_emitted = rows_emitted
        self.notice = notice
        self.error = error

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "activity_id": self.activity_id,
            "objects_processed": self.objects_processed,
            "objects_reported": self.objects_reported,
            "rows_emitted": self.rows_emitted,
            "notice": self.notice,
            "error": self.error,
        }
