"""Column width allocation under a fixed terminal width."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tagtable.models import MergedTable

logger = logging.getLogger(__name__)

MIN_SHRINK_WIDTH = 2


def column_needs(table: MergedTable, *, truncate: bool) -> list[int]:
    """Longest cell per column.

    The header row only counts when *truncate* is off; in truncate mode
    long headers are cut like any other cell.
    """
    rows = table.data_rows if truncate else table.rows
    return [
        max((len(row[c]) for row in rows), default=0)
        for c in range(table.column_count)
    ]


def fit_widths(needs: Sequence[int], total_width: int) -> list[int]:
    """Split *total_width* between columns, shortest need first.

    One character per column boundary is reserved for the separator.
    Each column in ascending order of need takes ``min(share, need)``
    where *share* is the remaining space divided by the columns still
    waiting, so space a narrow column does not use flows to the wider
    ones.  If the result still overshoots, columns wider than
    :data:`MIN_SHRINK_WIDTH` lose one character at a time, in index
    order, until it fits or nothing is left to shrink.
    """
    n = len(needs)
    if n == 0:
        return []

    available = total_width - (n - 1)
    widths = [0] * n
    remaining = available
    share = available // n
    cols_left = n

    for col in sorted(range(n), key=lambda c: needs[c]):
        width = max(0, min(share, needs[col]))
        widths[col] = width
        remaining -= width
        cols_left -= 1
        if cols_left:
            share = round(remaining / cols_left)

    _shrink(widths, available)
    return widths


def _shrink(widths: list[int], available: int) -> None:
    """Trim widths in place until ``sum(widths) <= available``."""
    while sum(widths) > available:
        shrunk = False
        for i, w in enumerate(widths):
            if w <= MIN_SHRINK_WIDTH:
                continue
            widths[i] = w - 1
            shrunk = True
            if sum(widths) <= available:
                return
        if not shrunk:
            logger.debug(
                "Width budget %d too small for %d columns", available, len(widths)
            )
            return


def allocate_widths(
    table: MergedTable,
    total_width: int,
    *,
    truncate: bool,
) -> list[int]:
    """Display width per column of *table*, in column order."""
    return fit_widths(column_needs(table, truncate=truncate), total_width)
