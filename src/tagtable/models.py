"""Immutable data models: TableOptions, DocumentMatrix, MergedTable, etc."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tagtable.config import Settings

FILE_NAME_HEADER = "File Name"

Row = tuple[str, ...]


def cell_text(value: object) -> str:
    """Cell string for a match value; ``None`` is an empty cell."""
    return "" if value is None else str(value)


@dataclass(frozen=True)
class TableOptions:
    """Per-query rendering switches, fixed for the life of a query."""

    show_file_labels: bool = False
    display_empty_rows: bool = False
    flatten_results: bool = False
    truncate_long_items: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> TableOptions:
        return cls(
            show_file_labels=settings.show_file_labels,
            display_empty_rows=settings.display_empty_rows,
            flatten_results=settings.flatten_results,
            truncate_long_items=settings.truncate_long_items,
        )


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem tied to one document."""

    label: str
    reason: str

    def __str__(self) -> str:
        return f"{self.label}: {self.reason}"


@dataclass(frozen=True)
class DocumentMatrix:
    """Query matches for one document, row-major, absent cells as ``""``.

    ``rows`` may be empty when the document matched nothing.
    """

    label: str
    rows: tuple[Row, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)


@dataclass(frozen=True)
class MergedTable:
    """All documents for one query stacked into one grid.

    Row 0 is the header row.  Every row has ``column_count`` cells.
    """

    rows: tuple[Row, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def header(self) -> Row:
        return self.rows[0] if self.rows else ()

    @property
    def data_rows(self) -> tuple[Row, ...]:
        return self.rows[1:]

    @property
    def column_count(self) -> int:
        return len(self.header)


@dataclass(frozen=True)
class QueryReport:
    query: str
    documents: int
    failed: int
    displayed: int
    total: int
    errors: list[str] = field(default_factory=list)


def matrix_from_groups(
    groups: Mapping[str, Sequence[object]],
) -> tuple[list[str], list[Row], bool]:
    """Turn grouped matches into column names and row-major cells.

    Group *k*, item *i* becomes cell ``(row=i, col=k)``.  Groups shorter
    than the longest one are padded with empty cells.

    Returns:
        ``(names, rows, ragged)`` where *ragged* is True when padding
        was needed.
    """
    names = list(groups)
    columns = [[cell_text(value) for value in groups[name]] for name in names]
    height = max((len(c) for c in columns), default=0)
    ragged = any(len(c) != height for c in columns)
    rows = [
        tuple(c[i] if i < len(c) else "" for c in columns) for i in range(height)
    ]
    return names, rows, ragged
