"""Retry wrapper for transient store errors on read paths.

Writes are never retried here: a failed settlement write is left for the
next cron pass, which re-reads the market from scratch.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from asyncpg.exceptions import InterfaceError, PostgresConnectionError
from sqlalchemy.exc import DBAPIError, OperationalError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# asyncpg raises the driver errors unwrapped while opening a pooled connection
# (e.g. ConnectionRefusedError when the server is down).
_TRANSIENT_ERRORS = (
    OperationalError,
    OSError,
    asyncio.TimeoutError,
    PostgresConnectionError,
    InterfaceError,
)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, _TRANSIENT_ERRORS):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


async def with_db_retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int | None = None,
    wait: wait_base | None = None,
) -> T:
    """Await fn(), retrying transient connection errors with backoff."""
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts or settings.DB_RETRY_ATTEMPTS),
        wait=wait or wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await fn()
    raise AssertionError("unreachable")  # pragma: no cover
