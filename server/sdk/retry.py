# Retry policy
# Auth failures are never retried; timeouts, network errors and 5xx are

import logging
from typing import Any, Awaitable, Callable

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
RETRYABLE_CODES = ("TIMEOUT", "NETWORK_ERROR")


def is_retryable(error: BaseException) -> bool:
    """
    Classify a failure for retrying.

    Works on anything with ``status`` and/or ``code`` attributes
    (ApiClientError, CheckoutError, BackendError).
    """
    status = getattr(error, "status", None)
    code = getattr(error, "code", None)

    if status in (401, 403):
        return False
    if code in RETRYABLE_CODES:
        return True
    return isinstance(status, int) and status >= 500


def log_retry_attempt(retry_state):
    error = retry_state.outcome.exception()
    logger.info(
        f"Attempt {retry_state.attempt_number} failed "
        f"({getattr(error, 'code', type(error).__name__)}), retrying"
    )


async def with_retry(
    operation: Callable[[], Awaitable[Any]],
    attempts: int = DEFAULT_ATTEMPTS,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    delay_seconds: float = 0.0
) -> Any:
    """
    Run an async operation, retrying failures the classifier accepts

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        attempts: Total attempts, at least 1
        should_retry: Failure classifier
        delay_seconds: Pause between attempts

    Returns:
        Result of the first successful attempt

    Raises:
        The last failure when attempts run out or it is not retryable
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception(should_retry),
        before_sleep=log_retry_attempt,
        reraise=True,
    )
    return await retrying(operation)
