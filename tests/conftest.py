from __future__ import annotations

import io
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from rich.console import Console

from tagtable.aggregate import QueryResult
from tagtable.models import TableOptions

Groups = Mapping[str, Sequence[str | None]]

# Two documents, one query: a.xml matches twice, b.xml matches nothing.
SAMPLE_MATCHES: dict[str, dict[str, list[str | None]]] = {
    "a.xml": {"Id": ["1", "2"], "Name": ["Foo", "Bar"]},
    "b.xml": {},
}


@pytest.fixture()
def console() -> Console:
    """Non-interactive console writing into a string buffer."""
    return Console(
        file=io.StringIO(),
        width=40,
        force_terminal=False,
        color_system=None,
    )


@pytest.fixture()
def sample_documents() -> list[Path]:
    return [Path("docs") / name for name in SAMPLE_MATCHES]


@pytest.fixture()
def sample_evaluate() -> Callable[[Path, str], Groups]:
    def evaluate(document: Path, query: str) -> Groups:
        return SAMPLE_MATCHES[document.name]

    return evaluate


@pytest.fixture()
def sample_result() -> Callable[[TableOptions], QueryResult]:
    """Build the two-document result for the given options."""

    def build(options: TableOptions) -> QueryResult:
        result = QueryResult("//Title/*", options)
        for name, groups in SAMPLE_MATCHES.items():
            result.add_document(name, groups)
        return result

    return build
