"""Retry policy for remote API calls.

One small unit composed of four parts, shared by every Leon API call:

1. ``raise_for_retryable_status`` turns an HTTP response into a typed
   failure. 429 is raised as ``TooManyRequestsError``; any other status of
   400 or above as ``RemoteCallError`` carrying the status and headers.
2. ``is_retryable`` accepts a failure only if it is a ``RemoteCallError``
   with a status in 400..499. Every client error is retried, not only 429.
   Network errors have no status and 5xx are out of range, so both
   propagate after the first attempt.
3. Backoff is exponential from ``base_delay``: 1s, 2s, 4s, ...
4. ``max_attempts`` counts total attempts. Running out raises
   ``RetryExhaustedError`` chained to the last failure.
"""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import AppSettings, get_settings
from .errors import RemoteCallError, RetryExhaustedError, TooManyRequestsError
from .harvest_logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

TOO_MANY_REQUESTS = 429

RetryHook = Callable[[BaseException, int, float], None]


def _response_url(response: httpx.Response) -> str:
    try:
        return str(response.request.url)
    except RuntimeError:
        # Response built without a request
        return ""


def raise_for_retryable_status(response: httpx.Response) -> httpx.Response:
    """Raise a typed failure for error statuses, return the response otherwise."""
    url = _response_url(response)
    if response.status_code == TOO_MANY_REQUESTS:
        raise TooManyRequestsError(url=url, headers=response.headers)
    if response.status_code >= 400:
        raise RemoteCallError(
            f"HTTP {response.status_code} {response.reason_phrase}".strip(),
            url=url,
            status_code=response.status_code,
            headers=response.headers,
        )
    return response


def is_retryable(error: BaseException) -> bool:
    """Client errors (4xx, 429 included) are retried; everything else is not."""
    return (
        isinstance(error, RemoteCallError)
        and error.status_code is not None
        and 400 <= error.status_code <= 499
    )


class RetryPolicy:
    """Exponential backoff retry for async remote calls."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_retry: Optional[RetryHook] = None,
    ):
        """
        Args:
            max_attempts: Total attempts, the first call included
            base_delay: Delay before the second attempt, doubled afterwards
            sleep: Awaitable used to wait between attempts
            on_retry: Called with (error, attempt number, delay) before each retry
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep
        self.on_retry = on_retry

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None, **kwargs: Any) -> "RetryPolicy":
        settings = settings or get_settings()
        return cls(
            max_attempts=settings.RETRY_MAX,
            base_delay=settings.RETRY_BASE_DELAY,
            **kwargs,
        )

    def delay_for(self, attempt_number: int) -> float:
        """Delay waited after a failed ``attempt_number`` (1-based)."""
        return self.base_delay * (2 ** (attempt_number - 1))

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Retrying request after exception",
            error=str(error),
            attempt=retry_state.attempt_number,
            max_attempts=self.max_attempts,
            delay_s=delay,
        )
        if self.on_retry is not None:
            self.on_retry(error, retry_state.attempt_number, delay)

    def _exhausted(self, retry_state: RetryCallState) -> Any:
        error = retry_state.outcome.exception()
        raise RetryExhaustedError(retry_state.attempt_number, error) from error

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay),
            retry=retry_if_exception(is_retryable),
            before_sleep=self._before_sleep,
            retry_error_callback=self._exhausted,
            sleep=self.sleep,
        )

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)`` under this policy."""
        return await self._retrying()(func, *args, **kwargs)

    def wrap(self, func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Decorator form of :meth:`call`."""
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await self.call(func, *args, **kwargs)
        return wrapper
