"""
Bounded Retry for Backend Calls

Wraps a backend coroutine in a tenacity retry loop: retries only
BackendCommandError, never waits between attempts and re-raises the last
failure once the attempt budget is spent.

Retries carry no delay. This is safe because every retried write is a
conditional SET (NX/XX) or a plain overwrite of the same value, so a repeated
attempt cannot produce a different end state.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from redis_manager.core.config.constants import Stage
from redis_manager.core.exceptions import BackendCommandError
from redis_manager.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _log_retry(description: str) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Backend call failed, retrying",
            stage=Stage.RETRY,
            operation=description,
            attempt=retry_state.attempt_number,
            error=str(exc),
        )

    return before_sleep


def create_backend_retrying(max_retries: int, description: str = "backend call") -> AsyncRetrying:
    """
    Build the retry controller shared by all manager operations.

    Args:
        max_retries: Retries after the initial attempt (total attempts = max_retries + 1)
        description: Operation label used in retry log events

    Returns:
        AsyncRetrying: tenacity controller, iterated with ``async for attempt in ...``
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    return AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_none(),
        retry=retry_if_exception_type(BackendCommandError),
        before_sleep=_log_retry(description),
        reraise=True,
    )


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int,
    description: str = "backend call",
) -> T:
    """
    Run ``operation`` until it succeeds or the retry budget is exhausted.

    Returns:
        The first successful result

    Raises:
        BackendCommandError: The final failure after ``max_retries + 1`` attempts
        Exception: Any other exception, immediately and without retry
    """
    async for attempt in create_backend_retrying(max_retries, description):
        with attempt:
            return await operation()
    raise AssertionError("unreachable: tenacity reraises on exhaustion")
