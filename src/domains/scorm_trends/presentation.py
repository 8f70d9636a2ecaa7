# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Output sinks for the trends report.

A sink receives, in order, a heading per SCO, at most one table per SCO
and, when there is nothing to report at all, a single notice.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NamedTuple, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.domains.scorm_trends.models import RowData


class TableRow(NamedTuple):
    """One rendered row: question label, element, value and its frequency."""

    label: str
    sub_label: str
    value: str
    frequency: int


class ReportSink(Protocol):
    """Receives the rendered report."""

    def heading(self, title: str) -> None:
        """Start the section of a SCO."""
        ...

    def table(self, table_id: str, rows: Sequence[TableRow]) -> None:
        """Emit the frequency table of a SCO."""
        ...

    def notice(self, message: str) -> None:
        """Emit a notice instead of any table."""
        ...


def build_rows(rows: Sequence[RowData], label_template: str) -> list[TableRow]:
    """Flatten per-slot frequencies into table rows.

    Args:
        rows: RowData in slot order.
        label_template: Label format, ``{index}`` is the slot index.

    Returns:
        Table rows; empty slots contribute nothing.
    """
    table_rows: list[TableRow] = []
    for index, row in enumerate(rows):
        label = label_template.format(index=index)
        for field_name, counts in row.fields():
            for value, frequency in counts.items():
                table_rows.append(TableRow(label, field_name, value, frequency))
    return table_rows


@dataclass
class CollectingSink:
    """Keeps everything it receives, in order.

    Attributes:
        events: (kind, payload) pairs where kind is heading, table or notice.
    """

    events: list[tuple[str, object]] = field(default_factory=list)

    def heading(self, title: str) -> None:
        self.events.append(("heading", title))

    def table(self, table_id: str, rows: Sequence[TableRow]) -> None:
        self.events.append(("table", (table_id, list(rows))))

    def notice(self, message: str) -> None:
        self.events.append(("notice", message))

    @property
    def tables(self) -> dict[str, list[TableRow]]:
        """Tables keyed by table id."""
        return {
            payload[0]: payload[1]  # type: ignore[index]
            for kind, payload in self.events
            if kind == "table"
        }

    @property
    def notices(self) -> list[str]:
        """All notices received."""
        return [str(payload) for kind, payload in self.events if kind == "notice"]


class RichTableSink:
    """Renders the report to a terminal with rich.

    Attributes:
        console: Console to print to.
    """

    COLUMNS = ("Question", "Element", "Value", "Frequency")

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the sink.

        Args:
            console: Console to print to, stdout by default.
        """
        self.console = console or Console()

    def heading(self, title: str) -> None:
        self.console.rule(f"[bold]{escape(title)}[/bold]")

    def table(self, table_id: str, rows: Sequence[TableRow]) -> None:
        table = Table(title=table_id, show_lines=False)
        for column in self.COLUMNS:
            table.add_column(column, justify="right" if column == "Frequency" else "left")
        for row in rows:
            table.add_row(
                escape(row.label),
                f"- {escape(row.sub_label)}",
                escape(row.value),
                str(row.frequency),
            )
        self.console.print(table)

    def notice(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")
