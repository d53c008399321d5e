"""Bounded retry combinator built on tenacity."""

from typing import Awaitable, Callable, Tuple, Type, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_before_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "retrying_after_error",
        attempt=retry_state.attempt_number,
        error=str(exc) if exc else None,
    )


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    retry_on: Tuple[Type[BaseException], ...],
    max_attempts: int = 2,
    backoff_seconds: float = 2.0,
) -> T:
    """Await ``func`` up to ``max_attempts`` times with a fixed backoff.

    Only exceptions listed in ``retry_on`` trigger another attempt; the
    last failure is re-raised unchanged once attempts are exhausted.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        retry_on: Exception types that are worth retrying
        max_attempts: Total number of attempts, including the first
        backoff_seconds: Fixed wait between attempts

    Returns:
        Result of the first successful attempt
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(backoff_seconds),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_before_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await func()
    return result
