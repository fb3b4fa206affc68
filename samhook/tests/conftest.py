"""Shared fixtures: a scripted stand-in for requests.Session."""

import threading
import time
from typing import Any, List

import pytest

from samhook import set_logger


class FakeResponse:
    """Minimal requests.Response stand-in."""

    def __init__(self, status_code: int = 200, text: str = "ok"):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Replays scripted outcomes and records every POST.

    Each outcome is a FakeResponse, an int status, or an exception instance
    to raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Any, delay: float = 0.0):
        self.outcomes: List[Any] = list(outcomes) or [FakeResponse()]
        self.delay = delay
        self.calls: List[dict] = []
        self._lock = threading.Lock()

    def post(self, url, data=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
            index = min(len(self.calls), len(self.outcomes)) - 1
            outcome = self.outcomes[index]
        if self.delay:
            time.sleep(self.delay)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return FakeResponse(outcome, "" if outcome == 200 else f"status {outcome}")
        return outcome

    @property
    def call_count(self) -> int:
        return len(self.calls)


class RecordingRequestLogger:
    """Request logger that keeps every call for assertions."""

    def __init__(self):
        self.records = []

    def log_request(self, url, method, duration, error):
        self.records.append((url, method, duration, error))


@pytest.fixture(autouse=True)
def reset_request_logger():
    """Keep the process-wide request logger isolated between tests."""
    set_logger(None)
    yield
    set_logger(None)


@pytest.fixture
def recording_logger():
    logger = RecordingRequestLogger()
    set_logger(logger)
    return logger


@pytest.fixture
def webhook_url():
    return "https://hooks.example.com/services/T000/B000/XXXX"
