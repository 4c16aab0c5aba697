from __future__ import annotations

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hotspot_gate.core.logging import get_logger

logger = get_logger(__name__)

RETRYABLE_ERRORS = (httpx.TransportError, httpx.TimeoutException)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome is not None else None
    logger.info(
        "upstream_retry",
        attempt=state.attempt_number,
        error=exc.__class__.__name__ if exc is not None else None,
    )


def with_retry(max_retries: int = 3, backoff_factor: float = 0.5, max_wait: float = 5.0):
    """Back off on transport failures; upstream HTTP statuses are returned as-is."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(max(1, max_retries)),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        before_sleep=_log_retry,
        reraise=True,
    )
