"""
Delivery Transport
==================
Single logical HTTP request with exponential backoff and jitter.

Responses below 500 are returned to the caller as-is, so 4xx answers are
never retried. Connection-level failures and 5xx answers are retried until
the attempt budget is spent, then the last failure propagates.
"""

import random
from typing import Any, Optional

import httpx
import structlog
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt
from tenacity.wait import wait_base

from .config import RetryConfig

logger = structlog.get_logger(__name__)


class RetryableStatusError(Exception):
    """Raised for a 5xx response so that tenacity schedules another attempt."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.status_code = response.status_code
        super().__init__(f"HTTP {response.status_code}")


def compute_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """
    Delay before the retry that follows ``attempt`` (0-based).

    The exponential delay is capped at ``max_delay`` and then up to the same
    amount of random jitter is added on top, so the result lies in
    ``[capped, 2 * capped)``.
    """
    capped = min(base_delay * (2 ** attempt), max_delay)
    return capped + random.random() * capped


class wait_capped_jitter(wait_base):
    """Tenacity wait strategy wrapping :func:`compute_delay`."""

    def __init__(self, base_delay: float, max_delay: float):
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __call__(self, retry_state: RetryCallState) -> float:
        return compute_delay(retry_state.attempt_number - 1, self.base_delay, self.max_delay)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying request after failure",
        attempt=retry_state.attempt_number,
        delay=round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
        error=str(error),
    )


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    retry: Optional[RetryConfig] = None,
    **kwargs: Any,
) -> httpx.Response:
    """
    Send a request, retrying transport failures and 5xx responses.

    Args:
        client: HTTP client used for every attempt
        method: HTTP method
        url: Absolute URL or a path relative to the client's base URL
        retry: Attempt budget and backoff settings
        **kwargs: Passed through to ``httpx.AsyncClient.request``

    Returns:
        The first response with a status below 500

    Raises:
        httpx.TransportError: If the final attempt failed at network level
        RetryableStatusError: If the final attempt answered with 5xx
    """
    retry = retry or RetryConfig()

    retrying = AsyncRetrying(
        retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
        stop=stop_after_attempt(retry.max_attempts),
        wait=wait_capped_jitter(retry.base_delay, retry.max_delay),
        before_sleep=_log_retry,
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            response = await client.request(method, url, **kwargs)
            if response.status_code >= 500:
                raise RetryableStatusError(response)

    return response
