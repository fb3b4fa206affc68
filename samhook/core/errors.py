"""Structured error types for samhook.

Every failure surfaced by the send and retry layers is a WebhookError carrying
a category discriminant, a fine-grained code and the request context.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Coarse error categories. Exactly one applies to every WebhookError.

    - NETWORK: Transport-level failures (timeout, DNS, connection refused)
    - SERIALIZATION: Payload could not be encoded
    - API: Endpoint answered with a non-success status
    - UNKNOWN: Anything else
    """

    NETWORK = "network"
    SERIALIZATION = "serialization"
    API = "api"
    UNKNOWN = "unknown"


class ErrorCode(str, Enum):
    """Fine-grained error codes callers can branch on."""

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    NETWORK_CONNECTION = "NETWORK_CONNECTION"
    NETWORK_DNS = "NETWORK_DNS"
    SERIALIZATION_JSON = "SERIALIZATION_JSON"
    API_UNAUTHORIZED = "API_UNAUTHORIZED"
    API_FORBIDDEN = "API_FORBIDDEN"
    API_NOT_FOUND = "API_NOT_FOUND"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    UNKNOWN = "UNKNOWN"


class WebhookError(Exception):
    """Error raised by webhook operations.

    Instances are built by the ErrorClassifier factories and are read-only
    once constructed. ``status_code`` and ``response_body`` are only ever set
    on API errors.
    """

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        target: str = "",
        cause: Optional[BaseException] = None,
    ):
        """Initialize WebhookError.

        Args:
            category: Error category
            message: Human-readable summary
            code: Explicit error code (derived from category/status/cause if omitted)
            status_code: HTTP status (API errors only)
            response_body: Raw response payload (API errors only)
            target: Webhook URL the request was sent to
            cause: Underlying exception, if any

        Raises:
            ValueError: If status_code or response_body is given for a non-API error
        """
        category = ErrorCategory(category)
        if category is not ErrorCategory.API and (
            status_code is not None or response_body is not None
        ):
            raise ValueError("status_code and response_body are only valid for API errors")
        if category is ErrorCategory.API and status_code is None:
            raise ValueError("API errors require a status_code")

        if code is None:
            # Local import: the classifier builds WebhookError instances itself
            from samhook.core.execution.error_classifier import ErrorClassifier

            code = ErrorClassifier.derive_code(category, status_code, cause)

        super().__init__(message)
        fields = {
            "category": category,
            "code": ErrorCode(code),
            "message": message,
            "status_code": status_code,
            "response_body": response_body if category is ErrorCategory.API else None,
            "target": target or "",
            "cause": cause,
        }
        for name, value in fields.items():
            object.__setattr__(self, f"_{name}", value)
        self.__cause__ = cause

    def __setattr__(self, name: str, value: Any) -> None:
        # Traceback machinery still needs to write these dunders
        if name.startswith("__") and name.endswith("__"):
            object.__setattr__(self, name, value)
            return
        raise AttributeError(f"WebhookError is read-only; cannot set '{name}'")

    @property
    def category(self) -> ErrorCategory:
        return self._category

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def response_body(self) -> Optional[str]:
        return self._response_body

    @property
    def target(self) -> str:
        return self._target

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    def is_network_error(self) -> bool:
        return self._category is ErrorCategory.NETWORK

    def is_serialization_error(self) -> bool:
        return self._category is ErrorCategory.SERIALIZATION

    def is_api_error(self) -> bool:
        return self._category is ErrorCategory.API

    def is_unknown_error(self) -> bool:
        return self._category is ErrorCategory.UNKNOWN

    def __str__(self) -> str:
        parts = [f"[{self._category.value}]"]
        if self._status_code is not None:
            parts.append(f"HTTP {self._status_code}")
        parts.append(self._message)
        if self._target:
            parts.append(f"(URL: {self._target})")
        if self._cause is not None:
            parts.append(f"caused by: {self._cause}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"WebhookError(category={self._category.value!r}, code={self._code.value!r}, "
            f"status_code={self._status_code!r}, target={self._target!r})"
        )

    def __reduce__(self):
        return (
            _rebuild_webhook_error,
            (
                self._category,
                self._message,
                self._code,
                self._status_code,
                self._response_body,
                self._target,
                self._cause,
            ),
        )

    def detailed_message(self) -> str:
        """Return a multi-line description of the error for logs and reports."""
        lines = [f"Webhook Error [{self._category.value}]"]
        if self._status_code is not None:
            lines.append(f"  Status Code: {self._status_code}")
        lines.append(f"  Message: {self._message}")
        if self._target:
            lines.append(f"  URL: {self._target}")
        if self._response_body:
            lines.append(f"  Response: {self._response_body}")
        if self._cause is not None:
            lines.append(f"  Cause: {self._cause}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the error into a dict suitable for structured logging."""
        return {
            "category": self._category.value,
            "code": self._code.value,
            "status_code": self._status_code,
            "message": self._message,
            "response_body": self._response_body,
            "target": self._target,
            "cause": repr(self._cause) if self._cause is not None else None,
        }


def _rebuild_webhook_error(category, message, code, status_code, response_body, target, cause):
    return WebhookError(
        category,
        message,
        code=code,
        status_code=status_code,
        response_body=response_body,
        target=target,
        cause=cause,
    )
