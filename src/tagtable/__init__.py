from __future__ import annotations

from importlib.metadata import version

from tagtable.aggregate import QueryResult, flatten_matrix, merge
from tagtable.config import Settings, configure_logging, load_settings
from tagtable.models import MergedTable, QueryReport, TableOptions
from tagtable.render import TableRenderer, render
from tagtable.runner import run_queries, run_query
from tagtable.widths import allocate_widths

__version__ = version("tagtable")

__all__ = [
    "MergedTable",
    "QueryReport",
    "QueryResult",
    "Settings",
    "TableOptions",
    "TableRenderer",
    "__version__",
    "allocate_widths",
    "configure_logging",
    "flatten_matrix",
    "load_settings",
    "merge",
    "render",
    "run_queries",
    "run_query",
]
