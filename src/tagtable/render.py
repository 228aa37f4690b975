"""Turn a merged table and its column widths into terminal lines.

Line construction lives in :class:`TableRenderer`; how a finished line
reaches the terminal is up to the sink.  ``StreamSink`` appends lines in
scroll order and is safe to pipe.  ``OverwriteSink`` clears each terminal
row before writing it, for interactive truncated tables.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType

from tagtable.models import MergedTable, Row, TableOptions

COL_SEP = "|"
RULE_CHAR = "-"
BANNER_PREFIX = "QUERY: "


def format_cell(text: str, width: int, *, truncate: bool) -> str:
    """Cut *text* to *width* when truncating, then pad it to *width*."""
    if truncate and len(text) > width:
        return text[:width]
    return text.ljust(width)


def banner_lines(query: str, rule_width: int) -> Iterator[str]:
    """Query banner and the rule under it."""
    yield f"{BANNER_PREFIX}{query}"
    yield RULE_CHAR * max(0, rule_width)


def summary_line(displayed: int, total: int) -> str:
    return f"Displaying {displayed} out of {total} total items."


class TableRenderer:
    """Build the text lines for one query's table.

    ``displayed`` and ``total`` are valid once :meth:`lines` has been
    fully consumed.
    """

    def __init__(
        self,
        query: str,
        table: MergedTable,
        widths: Sequence[int],
        options: TableOptions,
        *,
        rule_width: int,
    ) -> None:
        self.query = query
        self.table = table
        self.widths = list(widths)
        self.options = options
        self.rule_width = max(0, rule_width)
        self.displayed = 0
        self.total = len(table.data_rows)

    def format_row(self, row: Row) -> list[str]:
        truncate = self.options.truncate_long_items
        return [
            format_cell(text, self.widths[i], truncate=truncate)
            for i, text in enumerate(row)
        ]

    def is_empty(self, cells: Sequence[str]) -> bool:
        """True when every non-label cell is blank."""
        skip = 1 if self.options.show_file_labels else 0
        return all(not c.strip() for c in cells[skip:])

    def body(self) -> Iterator[str]:
        """Header, data rows and summary; everything after the banner."""
        rule = RULE_CHAR * self.rule_width
        labels = self.options.show_file_labels
        self.displayed = 0

        if self.table.column_count:
            yield COL_SEP.join(self.format_row(self.table.header))
            yield rule

        previous_label = ""
        for row in self.table.data_rows:
            if labels and row:
                # Fill-down: continuation rows of a document carry its label.
                if not row[0]:
                    row = (previous_label, *row[1:])
                previous_label = row[0]

            cells = self.format_row(row)
            if self.is_empty(cells) and not self.options.display_empty_rows:
                continue

            self.displayed += 1
            yield COL_SEP.join(cells)

        yield rule
        yield summary_line(self.displayed, self.total)

    def lines(self) -> Iterator[str]:
        yield from banner_lines(self.query, self.rule_width)
        yield from self.body()


def render(
    query: str,
    table: MergedTable,
    widths: Sequence[int],
    options: TableOptions,
    *,
    rule_width: int,
) -> Iterator[str]:
    """Lazily produce every line of the table for *query*."""
    return TableRenderer(query, table, widths, options, rule_width=rule_width).lines()


# Sinks ───────────────────────────────────────────────────────────────────────


class LineSink(Protocol):
    def write(self, line: str) -> None: ...


class StreamSink:
    """Append lines to the console in natural scroll order."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def write(self, line: str) -> None:
        self.console.out(line, highlight=False)


class OverwriteSink(StreamSink):
    """Rewrite each terminal row in place.

    Not meant for redirected output; off a terminal it streams instead.
    """

    _CLEAR_ROW = Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))

    def write(self, line: str) -> None:
        if self.console.is_terminal:
            self.console.control(self._CLEAR_ROW)
        super().write(line)


def make_sink(console: Console, *, truncate: bool) -> LineSink:
    return OverwriteSink(console) if truncate else StreamSink(console)
