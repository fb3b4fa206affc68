"""Retry controller for samhook.

Runs a send attempt repeatedly, consulting the ErrorClassifier to decide
whether a failure is worth retrying and the RetryPolicy to decide how long to
wait in between.
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional, TypeVar

from samhook.core.cancellation import CancelToken
from samhook.core.errors import WebhookError
from samhook.core.execution.error_classifier import ErrorClassifier
from samhook.core.logging import logger
from samhook.core.retry_config import DEFAULT_RETRY_POLICY, RetryPolicy

T = TypeVar("T")

RetryCallback = Callable[[int, WebhookError, float], None]


class RetryController:
    """Executes attempts with retry and backoff.

    Only WebhookErrors classified as retryable are retried. Any other
    exception, and any non-retryable WebhookError, propagates on the spot.
    The controller holds no per-call state, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize RetryController.

        Args:
            policy: RetryPolicy to apply (DEFAULT_RETRY_POLICY if None)
            rng: Optional Random instance used for backoff jitter
        """
        self.policy = policy or DEFAULT_RETRY_POLICY
        self.rng = rng

    def _next_delay(self, attempt: int, error: WebhookError) -> Optional[float]:
        """Return the wait before the next attempt, or None to stop retrying."""
        if not ErrorClassifier.is_retryable(error):
            logger.info(
                "webhook_retry_skipped",
                target=error.target,
                code=error.code.value,
                attempt=attempt + 1,
            )
            return None

        if attempt >= self.policy.max_retries:
            logger.warning(
                "webhook_retry_exhausted",
                target=error.target,
                code=error.code.value,
                attempts=attempt + 1,
                max_retries=self.policy.max_retries,
            )
            return None

        delay = self.policy.delay_for(attempt, rng=self.rng)
        logger.info(
            "webhook_retry_scheduled",
            target=error.target,
            code=error.code.value,
            status_code=error.status_code,
            retry=attempt + 1,
            max_retries=self.policy.max_retries,
            delay_seconds=round(delay, 3),
        )
        return delay

    @staticmethod
    def _cancelled(target: str, token: CancelToken) -> WebhookError:
        logger.info("webhook_retry_cancelled", target=target, reason=token.reason)
        return ErrorClassifier.network(target, token.error())

    def execute(
        self,
        attempt_fn: Callable[[], T],
        token: Optional[CancelToken] = None,
        on_retry: Optional[RetryCallback] = None,
        target: str = "",
    ) -> T:
        """Run ``attempt_fn`` until it succeeds or retrying stops.

        Args:
            attempt_fn: Performs one full send; returns on success, raises on failure
            token: Optional CancelToken that interrupts waits between attempts
            on_retry: Optional callback(attempt, error, delay) before each wait
            target: Webhook URL reported when the token fires before any attempt

        Returns:
            Whatever the first successful attempt returned

        Raises:
            WebhookError: Last classified failure, or a NETWORK_TIMEOUT error
                when the token fires
            Exception: Any unclassified failure from ``attempt_fn``, unchanged
        """
        attempt = 0
        while True:
            if token is not None and token.cancelled:
                raise self._cancelled(target, token)
            try:
                return attempt_fn()
            except WebhookError as e:
                error = e
                target = e.target or target

            delay = self._next_delay(attempt, error)
            if delay is None:
                raise error

            if on_retry:
                on_retry(attempt, error, delay)

            if token is not None:
                if token.wait(delay):
                    raise self._cancelled(target, token)
            else:
                time.sleep(delay)

            attempt += 1

    async def execute_async(
        self,
        attempt_fn: Callable[[], Awaitable[T]],
        token: Optional[CancelToken] = None,
        on_retry: Optional[RetryCallback] = None,
        target: str = "",
    ) -> T:
        """Async counterpart of execute(); ``attempt_fn`` returns an awaitable."""
        attempt = 0
        while True:
            if token is not None and token.cancelled:
                raise self._cancelled(target, token)
            try:
                return await attempt_fn()
            except WebhookError as e:
                error = e
                target = e.target or target

            delay = self._next_delay(attempt, error)
            if delay is None:
                raise error

            if on_retry:
                on_retry(attempt, error, delay)

            if token is not None:
                if await token.wait_async(delay):
                    raise self._cancelled(target, token)
            else:
                await asyncio.sleep(delay)

            attempt += 1


def execute_with_retry(
    attempt_fn: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    token: Optional[CancelToken] = None,
    on_retry: Optional[RetryCallback] = None,
    target: str = "",
) -> T:
    """Execute ``attempt_fn`` with retry; see RetryController.execute."""
    return RetryController(policy).execute(
        attempt_fn, token=token, on_retry=on_retry, target=target
    )


async def execute_with_retry_async(
    attempt_fn: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    token: Optional[CancelToken] = None,
    on_retry: Optional[RetryCallback] = None,
    target: str = "",
) -> T:
    """Execute coroutine-returning ``attempt_fn`` with retry."""
    return await RetryController(policy).execute_async(
        attempt_fn, token=token, on_retry=on_retry, target=target
    )
