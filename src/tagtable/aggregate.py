"""Stack per-document query matches into one table.

A ``QueryResult`` accumulates one query's matches as documents are
evaluated, then ``merge`` turns it into an immutable ``MergedTable``:
header row first, then each document's rows in processing order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from tagtable.models import (
    FILE_NAME_HEADER,
    Diagnostic,
    DocumentMatrix,
    MergedTable,
    Row,
    TableOptions,
    cell_text,
    matrix_from_groups,
)

logger = logging.getLogger(__name__)

FLATTEN_SEP = ", "


def single_line(text: str | None) -> str:
    """Drop newline and carriage-return characters."""
    if not text:
        return ""
    return text.replace("\n", "").replace("\r", "")


def flatten_matrix(rows: Sequence[Row]) -> tuple[Row, ...]:
    """Reduce a multi-row matrix to one row.

    Each column becomes the distinct non-empty values of that column,
    in first-seen order, joined with ``", "``.  Matrices with zero or one
    row are returned unchanged.
    """
    if len(rows) <= 1:
        return tuple(rows)

    width = max(len(r) for r in rows)
    cells: list[str] = []
    for col in range(width):
        values = (single_line(r[col]) for r in rows if col < len(r))
        distinct = dict.fromkeys(v for v in values if v)
        cells.append(FLATTEN_SEP.join(distinct))
    return (tuple(cells),)


class QueryResult:
    """Accumulating state for one query across a batch of documents.

    Headers are taken from the first document that matches anything and
    are never replaced afterwards.
    """

    def __init__(self, query: str, options: TableOptions | None = None) -> None:
        self.query = query
        self.options = options or TableOptions()
        self._headers: tuple[str, ...] | None = None
        self._documents: list[DocumentMatrix] = []
        self.diagnostics: list[Diagnostic] = []

    @property
    def headers(self) -> tuple[str, ...]:
        return self._headers or ()

    @property
    def has_headers(self) -> bool:
        return self._headers is not None

    def set_headers(self, headers: Iterable[str]) -> bool:
        """Fix the column names.  Returns False if they were already set."""
        if self._headers is not None:
            return False
        self._headers = tuple(headers)
        return True

    @property
    def documents(self) -> tuple[DocumentMatrix, ...]:
        return tuple(self._documents)

    @property
    def file_labels(self) -> list[str]:
        return [d.label for d in self._documents]

    @property
    def total_rows(self) -> int:
        if self.options.flatten_results:
            return len(self._documents)
        # A document with no matches still claims one (blank) row.
        return sum(max(d.row_count, 1) for d in self._documents)

    @property
    def total_cols(self) -> int:
        n = len(self.headers)
        return n + 1 if self.options.show_file_labels else n

    def add_document(
        self,
        label: str,
        groups: Mapping[str, Sequence[object]],
    ) -> DocumentMatrix:
        """Record one document's grouped matches.

        Args:
            label: Document label, e.g. the file name.
            groups: Matches keyed by field/tag name, each group in
                sibling order.  Groups are read positionally.

        Returns:
            The stored matrix.
        """
        names, rows, ragged = matrix_from_groups(groups)
        if ragged:
            lengths = ", ".join(f"{n}={len(groups[n])}" for n in names)
            self._diagnose(label, f"groups have different lengths ({lengths})")
        if names and not self.set_headers(names) and len(names) != len(self.headers):
            self._diagnose(
                label,
                f"matched {len(names)} groups, expected {len(self.headers)}",
            )
        return self.add_matrix(label, rows)

    def add_matrix(
        self,
        label: str,
        rows: Iterable[Sequence[object]],
    ) -> DocumentMatrix:
        """Record an already shaped matrix for one document."""
        matrix = DocumentMatrix(
            label=label,
            rows=tuple(tuple(cell_text(c) for c in row) for row in rows),
        )
        self._documents.append(matrix)
        logger.debug(
            "%s: %d rows for %r", label, matrix.row_count, self.query
        )
        return matrix

    def merge(self) -> MergedTable:
        return merge(self)

    def _diagnose(self, label: str, reason: str) -> None:
        logger.warning("%s: %s", label, reason)
        self.diagnostics.append(Diagnostic(label=label, reason=reason))


def _copy_cells(
    rows: Sequence[Row],
    grid: list[list[str]],
    row_offset: int,
    col_offset: int,
) -> int:
    """Copy *rows* into *grid* at the offsets.  Returns cells skipped."""
    skipped = 0
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            r = i + row_offset
            c = j + col_offset
            if r >= len(grid) or c >= len(grid[r]):
                skipped += 1
                continue
            grid[r][c] = single_line(value)
    return skipped


def merge(result: QueryResult) -> MergedTable:
    """Stack every document of *result* into one rectangular table.

    Row 0 holds ``"File Name"`` (when labels are shown) and the headers.
    Flattening, when enabled, is applied per document so the label column
    still identifies each row.  Cells that do not fit the declared column
    count are skipped and reported, never raised.
    """
    options = result.options
    col_offset = 1 if options.show_file_labels else 0
    n_cols = result.total_cols

    grid = [[""] * n_cols for _ in range(result.total_rows + 1)]
    header = [FILE_NAME_HEADER] if options.show_file_labels else []
    grid[0] = [*header, *result.headers]

    diagnostics = list(result.diagnostics)
    cursor = 1
    for doc in result.documents:
        rows = doc.rows
        if options.flatten_results and len(rows) > 1:
            rows = flatten_matrix(rows)

        if options.show_file_labels:
            grid[cursor][0] = single_line(doc.label)

        skipped = _copy_cells(rows, grid, cursor, col_offset)
        if skipped:
            reason = (
                f"{skipped} cell{'s' if skipped != 1 else ''} not displayed "
                "because the data shape is different"
            )
            logger.warning("%s: %s", doc.label, reason)
            diagnostics.append(Diagnostic(label=doc.label, reason=reason))

        cursor += max(len(rows), 1)

    return MergedTable(
        rows=tuple(tuple(r) for r in grid),
        diagnostics=tuple(diagnostics),
    )
