"""Per-request logging sink for samhook.

Every send attempt reports (url, method, duration, error) to the currently
installed RequestLogger. The sink is process-wide and can be replaced while
requests are in flight; readers always see either the old or the new logger.
"""

import threading
from datetime import datetime
from typing import Optional, Protocol, TextIO, runtime_checkable

import structlog


@runtime_checkable
class RequestLogger(Protocol):
    """Interface for request logging sinks."""

    def log_request(
        self, url: str, method: str, duration: float, error: Optional[BaseException]
    ) -> None:
        ...


class NoOpRequestLogger:
    """Discards everything. Installed by default."""

    def log_request(self, url, method, duration, error) -> None:
        return None


class WriterRequestLogger:
    """Writes one human-readable line per request to a text stream."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()

    def log_request(self, url, method, duration, error) -> None:
        timestamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        status = "error" if error is not None else "success"
        lines = [f"{timestamp} [samhook] {method} {url} - {status} - duration: {duration:.3f}s\n"]
        if error is not None:
            lines.append(f"{timestamp} [samhook] error: {error}\n")

        with self._lock:
            self._stream.write("".join(lines))
            flush = getattr(self._stream, "flush", None)
            if flush:
                flush()


class StructlogRequestLogger:
    """Emits a ``webhook_request`` event through structlog."""

    def __init__(self, logger=None):
        self._logger = logger or structlog.get_logger("samhook.requests")

    def log_request(self, url, method, duration, error) -> None:
        fields = {
            "url": url,
            "method": method,
            "duration_ms": round(duration * 1000, 2),
            "status": "error" if error is not None else "success",
        }
        if error is None:
            self._logger.info("webhook_request", **fields)
            return

        code = getattr(error, "code", None)
        self._logger.warning(
            "webhook_request",
            error=str(error),
            error_code=getattr(code, "value", code),
            **fields,
        )


_NOOP = NoOpRequestLogger()
_swap_lock = threading.Lock()
_current: RequestLogger = _NOOP


def set_logger(logger: Optional[RequestLogger]) -> None:
    """Install a request logger (None restores the no-op logger)."""
    global _current
    if logger is not None and not isinstance(logger, RequestLogger):
        raise TypeError("logger must provide log_request(url, method, duration, error)")
    with _swap_lock:
        _current = logger if logger is not None else _NOOP


def set_logger_writer(stream: Optional[TextIO]) -> None:
    """Install a WriterRequestLogger over ``stream`` (None restores the no-op logger)."""
    set_logger(WriterRequestLogger(stream) if stream is not None else None)


def get_request_logger() -> RequestLogger:
    """Return the currently installed request logger."""
    return _current
