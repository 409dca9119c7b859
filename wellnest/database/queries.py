"""
Database query utilities with retry logic

Reads retry a single statement, rolling the session back first so the next
attempt gets a new connection. Writes retry the whole transaction on a fresh
session via ``run_in_transaction``: a transaction whose connection dropped
cannot be continued.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def is_transient_error(error: Exception) -> bool:
    """Pool exhaustion, dropped connections and timeouts are worth another attempt"""
    message = str(error).lower()
    error_type = type(error).__name__

    is_pool_error = (
        "maxclientsinsessionmode" in message or
        "max clients reached" in message or
        "connection pool" in message
    )
    is_connection_error = "connection" in message and (
        "closed" in message or "lost" in message or "reset" in message
    )
    is_timeout = error_type == "TimeoutError" or "timeout" in message
    return is_pool_error or is_connection_error or is_timeout


def _should_retry(error: Exception, attempt: int, max_retries: int) -> bool:
    error_type = type(error).__name__
    logger.warning(
        "Database error on attempt %d/%d: %s: %s",
        attempt + 1, max_retries, error_type, str(error)[:200]
    )
    if not is_transient_error(error):
        logger.error("Non-retryable error: %s", error_type)
        return False
    if attempt == max_retries - 1:
        logger.error("Max retries reached, failing with: %s", error_type)
        return False
    return True


async def _backoff(attempt: int, initial_delay: float) -> None:
    # Exponential backoff: 0.5s, 1s, 2s
    delay = initial_delay * (2 ** attempt)
    logger.info("Retrying after %ss...", delay)
    await asyncio.sleep(delay)


async def execute_with_retry(
    session: AsyncSession,
    query: Any,
    max_retries: int = 3,
    initial_delay: float = 0.5
) -> Any:
    """
    Execute query with retry logic for transient database errors

    Only for statements outside an explicit ``session.begin()`` block; the
    session is rolled back before each new attempt.

    Args:
        session: Database session
        query: SQLAlchemy statement
        max_retries: Maximum number of attempts
        initial_delay: Initial delay between retries (exponential backoff)

    Returns:
        Query result
    """
    for attempt in range(max_retries):
        try:
            return await session.execute(query)
        except Exception as e:
            if not _should_retry(e, attempt, max_retries):
                raise
            await session.rollback()
            await _backoff(attempt, initial_delay)

    raise RuntimeError("execute_with_retry called with max_retries < 1")


async def run_in_transaction(
    session_maker: async_sessionmaker,
    work: Callable[[AsyncSession], Awaitable[Any]],
    max_retries: int = 3,
    initial_delay: float = 0.5
) -> Any:
    """
    Run ``work(session)`` in one transaction, retrying the whole unit on
    transient database errors

    Every attempt opens a new session, so nothing from a failed attempt is
    committed or reused. Errors wrapped by the service layer are judged by
    their database cause.

    Returns:
        Whatever ``work`` returns
    """
    for attempt in range(max_retries):
        try:
            async with session_maker() as session:
                async with session.begin():
                    return await work(session)
        except Exception as e:
            cause = e if isinstance(e, SQLAlchemyError) else e.__cause__
            if not isinstance(cause, SQLAlchemyError) or not _should_retry(cause, attempt, max_retries):
                raise
            await _backoff(attempt, initial_delay)

    raise RuntimeError("run_in_transaction called with max_retries < 1")
