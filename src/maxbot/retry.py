"""Retry policy for MaxBot API calls.

Wraps a zero-argument coroutine factory (one Transport round-trip, or a
composite of them) and re-invokes it under a bounded attempt budget with
fixed delays. Only errors classified as retryable (network, rate-limited,
server) are retried; everything else is surfaced on first occurrence.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from maxbot.config import RetryConfig
from maxbot.exceptions import MaxBotError, OperationCancelledError, RateLimitError
from maxbot.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
SleepFunc = Callable[[float], Awaitable[None]]


def is_retryable(exc: BaseException) -> bool:
    """Whether a failed attempt may be retried."""
    return isinstance(exc, MaxBotError) and exc.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts with context.

    Args:
        retry_state: Current retry state from tenacity.
    """
    logger.info(
        "Retrying request",
        attempt=retry_state.attempt_number,
        delay=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class RetryPolicy:
    """Bounded, fixed-delay retry for API operations.

    Example:
        ```python
        policy = RetryPolicy(RetryConfig(max_attempts=3))
        chat = await policy.run(lambda: transport.execute("GET", path, response_model=ChatInfo))
        ```
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """Initialize the retry policy.

        Args:
            config: Attempt budget and delays. Defaults to RetryConfig().
            sleep: Awaitable sleep used between attempts (tests inject a fake).
        """
        self._config = config or RetryConfig()
        self._sleep = sleep or asyncio.sleep

    @property
    def config(self) -> RetryConfig:
        return self._config

    def delay_for(self, error: BaseException | None) -> float:
        """Delay before the attempt that follows ``error``."""
        if isinstance(error, RateLimitError):
            return self._config.rate_limit_delay
        return self._config.retry_delay

    def _wait(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        return self.delay_for(outcome.exception() if outcome is not None else None)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        cancel: asyncio.Event | None = None,
    ) -> T:
        """Run ``operation`` until it succeeds or the budget is spent.

        Args:
            operation: Zero-argument callable returning a fresh awaitable
                for each attempt.
            cancel: Optional cancellation signal, checked before every
                attempt and interrupting the wait between attempts.

        Returns:
            The operation's result.

        Raises:
            OperationCancelledError: If ``cancel`` was set before an attempt.
            MaxBotError: The most recent error, after a non-retryable
                failure or once attempts are exhausted.
        """

        async def sleep(seconds: float) -> None:
            if cancel is None:
                await self._sleep(seconds)
                return
            sleeper = asyncio.ensure_future(self._sleep(seconds))
            stopper = asyncio.ensure_future(cancel.wait())
            try:
                await asyncio.wait({sleeper, stopper}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                sleeper.cancel()
                stopper.cancel()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(is_retryable),
            before_sleep=_log_retry,
            sleep=sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                if cancel is not None and cancel.is_set():
                    raise OperationCancelledError()
                result = await operation()
        return result
