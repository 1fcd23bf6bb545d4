"""
Exclusive, time-bounded loan of one pooled connection.

A ScopedClient is handed out by Database.acquire_client() / Database.client() for work that needs
several statements on the same connection (i.e. a transaction).
The connection goes back to the pool exactly once: either when release() is called, or when the
safety deadline fires because nobody called it. After that, every call on the handle raises ClientReleasedError.
"""

import asyncio
import logging
import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from src.core.exceptions import ClientReleasedError
from src.db.execution import (
    Parameters,
    QueryResult,
    Statement,
    log_if_slow,
    query_errors,
    run_statement,
)

logger = logging.getLogger(__name__)


class ScopedClient:
    """Checked-out connection plus its release obligation."""

    def __init__(
        self,
        connection: AsyncConnection,
        timeout: float = 30.0,
        slow_query_ms: float = 100.0,
    ) -> None:
        self._connection = connection
        self._timeout = timeout
        self._slow_query_ms = slow_query_ms
        self._released = False
        self._forced_release: Optional[asyncio.Task[None]] = None
        self._deadline = asyncio.get_running_loop().call_later(
            timeout, self._on_deadline
        )

    @property
    def released(self) -> bool:
        return self._released

    @property
    def force_released(self) -> bool:
        """True if the safety deadline (not the caller) gave the connection back."""
        return self._forced_release is not None

    async def query(self, statement: Statement, parameters: Parameters = None) -> QueryResult:
        self._ensure_active()
        started = time.perf_counter()
        result = await run_statement(self._connection, statement, parameters)
        log_if_slow(statement, started, self._slow_query_ms)
        return result

    async def commit(self) -> None:
        self._ensure_active()
        with query_errors("COMMIT"):
            await self._connection.commit()

    async def rollback(self) -> None:
        self._ensure_active()
        with query_errors("ROLLBACK"):
            await self._connection.rollback()

    async def release(self) -> None:
        """Return the connection to the pool. Uncommitted work is rolled back. Safe to call twice."""
        if self._released:
            if self._forced_release is not None:
                await self._forced_release
            return

        self._released = True
        self._deadline.cancel()
        await self._connection.close()

    # -- Internal helpers --
    def _ensure_active(self) -> None:
        if not self._released:
            return
        if self.force_released:
            raise ClientReleasedError(
                f"Client was released by the {self._timeout}s checkout timeout and can no longer be used."
            )
        raise ClientReleasedError("Client was already released back to the pool.")

    def _on_deadline(self) -> None:
        if self._released:
            return
        logger.warning("Client checkout timeout (%ss) - releasing", self._timeout)
        self._released = True
        self._forced_release = asyncio.ensure_future(self._close_after_deadline())

    async def _close_after_deadline(self) -> None:
        """Runs detached from any caller, so failures end up in the log only."""
        try:
            await self._connection.close()
        except SQLAlchemyError:
            logger.exception("Could not return timed-out client to the pool, discarding it")
            await self._connection.invalidate()
