"""Cooperative cancellation for samhook.

A CancelToken combines an explicit cancel signal with an optional deadline.
It is threaded through send attempts and the waits between retries so that a
caller can abort a long retry sequence from another thread.
"""

import asyncio
import threading
import time
from typing import Optional

# Granularity for async waits, which cannot block on a threading.Event
_ASYNC_POLL_INTERVAL = 0.05


class OperationCancelled(Exception):
    """Raised when a CancelToken fires before an operation completed."""

    def __init__(self, reason: str = "cancelled"):
        super().__init__(f"operation {reason}")
        self.reason = reason

    @property
    def deadline_exceeded(self) -> bool:
        return self.reason == CancelToken.DEADLINE_EXCEEDED


class CancelToken:
    """Thread-safe cancellation signal with an optional monotonic deadline."""

    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline exceeded"

    def __init__(self, timeout: Optional[float] = None):
        """Initialize CancelToken.

        Args:
            timeout: Seconds from now after which the token counts as expired
                (None = no deadline)
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @classmethod
    def with_timeout(cls, timeout: float) -> "CancelToken":
        return cls(timeout=timeout)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.deadline_exceeded

    @property
    def deadline_exceeded(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def reason(self) -> Optional[str]:
        if self._event.is_set():
            return self.CANCELLED
        if self.deadline_exceeded:
            return self.DEADLINE_EXCEEDED
        return None

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, clamped at 0 (None when there is no deadline)."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def bound(self, timeout: Optional[float]) -> Optional[float]:
        """Clamp a timeout so it never outlives the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        if timeout is None:
            return remaining
        return min(timeout, remaining)

    def error(self) -> OperationCancelled:
        return OperationCancelled(self.reason or self.CANCELLED)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise self.error()

    def wait(self, seconds: float) -> bool:
        """Block for up to ``seconds``.

        Returns:
            True if the token fired before the time elapsed, False otherwise
        """
        if self.cancelled:
            return True
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            return True
        return self._event.wait(max(0.0, seconds))

    async def wait_async(self, seconds: float) -> bool:
        """Async counterpart of wait(); polls the event between short sleeps."""
        loop = asyncio.get_running_loop()
        end = loop.time() + max(0.0, seconds)
        while True:
            if self.cancelled:
                return True
            left = end - loop.time()
            if left <= 0:
                return False
            step = min(left, _ASYNC_POLL_INTERVAL)
            remaining = self.remaining()
            if remaining is not None:
                step = min(step, remaining)
            await asyncio.sleep(step)
