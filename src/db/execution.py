"""Statement execution shared by one-shot pool queries and checked-out clients."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import Executable

from src.core.exceptions import QueryError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]
Parameters = Optional[Mapping[str, Any]]

PREVIEW_LENGTH = 100


@dataclass
class QueryResult:
    """Rows as plain dicts (column name -> value) plus the driver's row count."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0


def statement_preview(statement: Statement) -> str:
    return str(statement)[:PREVIEW_LENGTH]


@contextmanager
def query_errors(statement: Statement) -> Iterator[None]:
    """Re-raise anything SQLAlchemy throws as a QueryError (original kept as __cause__)."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise QueryError(
            f"Query failed: {statement_preview(statement)!r} ({exc.__class__.__name__})"
        ) from exc


async def run_statement(
    connection: AsyncConnection, statement: Statement, parameters: Parameters = None
) -> QueryResult:
    """Execute on an already checked-out connection. Does not commit."""
    executable = text(statement) if isinstance(statement, str) else statement
    with query_errors(statement):
        if parameters:
            result = await connection.execute(executable, dict(parameters))
        else:
            result = await connection.execute(executable)

        rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        rowcount = result.rowcount if result.rowcount >= 0 else len(rows)
    return QueryResult(rows=rows, rowcount=rowcount)


def log_if_slow(statement: Statement, started: float, threshold_ms: float) -> None:
    """`started` comes from time.perf_counter(). Never changes the outcome of the query."""
    duration_ms = (time.perf_counter() - started) * 1000
    if duration_ms > threshold_ms:
        logger.warning(
            "Slow query (%dms): %s", duration_ms, statement_preview(statement)
        )
