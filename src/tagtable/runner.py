"""Run queries over a batch of documents and print one table per query.

Document reading and query evaluation are supplied by the caller as an
``evaluate(document, query)`` callable returning matches grouped by
field/tag name.  Match values are shown via ``str()``.  A document whose
evaluation raises, or whose matches cannot be read as groups, is reported
under the query banner and skipped; the rest of the batch still renders.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from itertools import islice
from pathlib import PurePath
from typing import Any

from rich.console import Console

from tagtable.aggregate import QueryResult
from tagtable.config import Settings
from tagtable.models import QueryReport, TableOptions
from tagtable.render import TableRenderer, banner_lines, make_sink
from tagtable.widths import allocate_widths

logger = logging.getLogger(__name__)

Groups = Mapping[str, Sequence[object]]
Evaluator = Callable[[Any, str], Groups]


def document_label(document: object) -> str:
    """File name for paths, ``.name`` when present, else ``str()``."""
    if isinstance(document, PurePath):
        return document.name
    name = getattr(document, "name", None)
    return str(name) if name is not None else str(document)


def run_query(
    query: str,
    documents: Iterable[Any],
    evaluate: Evaluator,
    *,
    options: TableOptions | None = None,
    console: Console | None = None,
    width: int | None = None,
    label: Callable[[Any], str] = document_label,
    skip: int = 0,
    take: int | None = None,
) -> QueryReport:
    """Evaluate *query* on each document and print the merged table.

    Args:
        query: Query expression, printed verbatim in the banner.
        documents: Documents in processing order.
        evaluate: ``evaluate(document, query)`` returning grouped matches.
        options: Layout switches.  Defaults to all off.
        console: Output console.  Defaults to a new stdout console.
        width: Total table width.  Defaults to the console width.
        label: Label for the file name column and diagnostics.
        skip: Documents to skip from the start of the batch.
        take: Maximum documents to process after skipping.

    Returns:
        Counts and per-document errors for this query.

    Raises:
        ValueError: If *skip* or *take* is negative.
    """
    if skip < 0 or (take is not None and take < 0):
        msg = f"skip and take must not be negative: skip={skip}, take={take}"
        raise ValueError(msg)

    options = options or TableOptions()
    console = console or Console()
    stop = None if take is None else skip + take
    batch = list(islice(documents, skip, stop))

    if not batch:
        logger.info("No documents for query %r", query)
        console.out("No documents to query.", highlight=False)
        return QueryReport(query=query, documents=0, failed=0, displayed=0, total=0)

    logger.info("Running %r over %d documents", query, len(batch))
    total_width = width if width is not None else console.width
    truncate = options.truncate_long_items
    sink = make_sink(console, truncate=truncate)
    for line in banner_lines(query, total_width):
        sink.write(line)

    result = QueryResult(query, options)
    failed = 0
    errors: list[str] = []

    for document in batch:
        name = label(document)
        try:
            result.add_document(name, evaluate(document, query))
        except Exception as exc:  # noqa: BLE001
            failed += 1
            errors.append(f"{name}: {exc}")
            logger.warning("Query %r failed on %s: %s", query, name, exc)
            console.out(f"{name} -> Failed! Error: {exc}", highlight=False)

    table = result.merge()
    errors.extend(str(d) for d in table.diagnostics)

    widths = allocate_widths(table, total_width, truncate=truncate)

    renderer = TableRenderer(query, table, widths, options, rule_width=total_width)
    for line in renderer.body():
        sink.write(line)

    logger.debug(
        "Displayed %d of %d rows for %r", renderer.displayed, renderer.total, query
    )
    return QueryReport(
        query=query,
        documents=len(batch) - failed,
        failed=failed,
        displayed=renderer.displayed,
        total=renderer.total,
        errors=errors,
    )


def run_queries(
    queries: Iterable[str],
    documents: Iterable[Any],
    evaluate: Evaluator,
    *,
    settings: Settings | None = None,
    console: Console | None = None,
    label: Callable[[Any], str] = document_label,
    skip: int = 0,
    take: int | None = None,
) -> list[QueryReport]:
    """Run each query in turn over the same documents.

    Each query starts from fresh state.  A blank line follows each table.
    """
    settings = settings or Settings()
    console = console or Console()
    options = TableOptions.from_settings(settings)
    docs = list(documents)

    reports: list[QueryReport] = []
    for query in queries:
        reports.append(
            run_query(
                query,
                docs,
                evaluate,
                options=options,
                console=console,
                width=settings.terminal_width,
                label=label,
                skip=skip,
                take=take,
            )
        )
        console.out("", highlight=False)
    return reports
