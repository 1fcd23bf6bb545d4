"""Pooled connection provider: one-shot queries and scoped client checkout on top of an async SQLAlchemy engine."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolCheckoutTimeout
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from src.core.config import Settings
from src.core.exceptions import PoolTimeoutError, QueryError
from src.db.execution import (
    Parameters,
    QueryResult,
    Statement,
    log_if_slow,
    query_errors,
    run_statement,
)
from src.db.scoped_client import ScopedClient

logger = logging.getLogger(__name__)

PROBE_STATEMENT = "SELECT CURRENT_TIMESTAMP AS now"


def to_async_url(database_url: str) -> URL:
    """Plain postgres URLs (as found in DATABASE_URL) are pointed at the asyncpg driver."""
    url = make_url(database_url)
    if url.drivername in ("postgresql", "postgres"):
        url = url.set(drivername="postgresql+asyncpg")
    return url


def create_pool_engine(
    database_url: str,
    max_size: int = 20,
    idle_timeout: float = 30.0,
    connect_timeout: float = 2.0,
    echo: bool = False,
) -> AsyncEngine:
    """
    Engine backed by a bounded queue pool.
    ----
    - never more than `max_size` connections (no overflow)
    - a checkout on a saturated pool waits at most `connect_timeout` seconds
    - connections idle longer than `idle_timeout` are recycled on their next checkout
    """
    return create_async_engine(
        to_async_url(database_url),
        poolclass=AsyncAdaptedQueuePool,
        pool_size=max_size,
        max_overflow=0,
        pool_timeout=connect_timeout,
        pool_recycle=int(idle_timeout),
        connect_args={"timeout": connect_timeout},
        echo=echo,
    )


class Database:
    """Shared, bounded set of database connections with two access patterns: query() and acquire_client()."""

    def __init__(
        self,
        engine: AsyncEngine,
        checkout_timeout: float = 30.0,
        slow_query_ms: float = 100.0,
        connect_timeout: float = 2.0,
    ) -> None:
        self.engine = engine
        self.checkout_timeout = checkout_timeout
        self.slow_query_ms = slow_query_ms
        self.connect_timeout = connect_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_pool_engine(
            settings.database_url,
            max_size=settings.pool_max_size,
            idle_timeout=settings.pool_idle_timeout,
            connect_timeout=settings.pool_connect_timeout,
        )
        return cls(
            engine,
            checkout_timeout=settings.checkout_timeout,
            slow_query_ms=settings.slow_query_ms,
            connect_timeout=settings.pool_connect_timeout,
        )

    # -- Access patterns --
    async def query(self, statement: Statement, parameters: Parameters = None) -> QueryResult:
        """Run one statement in its own transaction on whichever pooled connection is free."""
        started = time.perf_counter()
        connection = await self._checkout()
        try:
            result = await run_statement(connection, statement, parameters)
            with query_errors(statement):
                await connection.commit()
        finally:
            # Uncommitted work is rolled back on close
            await connection.close()
        log_if_slow(statement, started, self.slow_query_ms)
        return result

    async def acquire_client(self) -> ScopedClient:
        """Exclusive connection for several statements. The caller must release() it (or use client())."""
        connection = await self._checkout()
        return ScopedClient(
            connection,
            timeout=self.checkout_timeout,
            slow_query_ms=self.slow_query_ms,
        )

    @asynccontextmanager
    async def client(self) -> AsyncIterator[ScopedClient]:
        """acquire_client() as a scope: released on every exit path."""
        scoped = await self.acquire_client()
        try:
            yield scoped
        finally:
            await scoped.release()

    # -- Lifecycle --
    async def verify_connectivity(self) -> Any:
        """One trivial round trip. Returns the server's current timestamp."""
        result = await self.query(PROBE_STATEMENT)
        now = result.rows[0]["now"]
        logger.info("Connected to PostgreSQL at: %s", now)
        return now

    async def dispose(self) -> None:
        await self.engine.dispose()

    def pool_status(self) -> dict[str, int]:
        pool = self.engine.pool
        return {
            "size": pool.size(),  # type: ignore[attr-defined]
            "checked_out": pool.checkedout(),  # type: ignore[attr-defined]
            "checked_in": pool.checkedin(),  # type: ignore[attr-defined]
        }

    # -- Internal helpers --
    async def _checkout(self) -> AsyncConnection:
        try:
            return await self.engine.connect()
        except PoolCheckoutTimeout as exc:
            raise PoolTimeoutError(
                f"No database connection available within {self.connect_timeout}s."
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise QueryError(f"Could not connect to the database: {exc}") from exc
