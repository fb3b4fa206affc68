"""Error classifier for samhook.

Maps raw transport failures, HTTP statuses and encoder errors into
WebhookError values with stable categories and codes.
"""

import socket
from typing import Iterator, Optional

import httpx
import requests
import urllib3.exceptions

from samhook.core.cancellation import OperationCancelled
from samhook.core.errors import ErrorCategory, ErrorCode, WebhookError

_API_STATUS_CODES = {
    401: ErrorCode.API_UNAUTHORIZED,
    403: ErrorCode.API_FORBIDDEN,
    404: ErrorCode.API_NOT_FOUND,
    429: ErrorCode.API_RATE_LIMIT,
    500: ErrorCode.API_SERVER_ERROR,
    502: ErrorCode.API_SERVER_ERROR,
    503: ErrorCode.API_SERVER_ERROR,
    504: ErrorCode.API_SERVER_ERROR,
}

_TIMEOUT_TYPES = (
    requests.exceptions.Timeout,
    httpx.TimeoutException,
    urllib3.exceptions.ReadTimeoutError,
    TimeoutError,  # socket.timeout is an alias
    OperationCancelled,
)

_DNS_TYPES = (socket.gaierror, urllib3.exceptions.NameResolutionError)

_DNS_MESSAGES = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "failed to resolve",
    "no address associated with hostname",
)

_CONNECTION_TYPES = (
    requests.exceptions.ConnectionError,
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.ChunkedEncodingError,
    httpx.TransportError,
    httpx.InvalidURL,
    urllib3.exceptions.HTTPError,
    OSError,
)

# Failures that unambiguously come from the network stack
_TRANSPORT_TYPES = (
    requests.exceptions.ConnectionError,
    httpx.TransportError,
    urllib3.exceptions.HTTPError,
    ConnectionError,
)

_MESSAGE_PREFIXES = {
    ErrorCode.NETWORK_TIMEOUT: "network timeout",
    ErrorCode.NETWORK_DNS: "DNS resolution failed",
    ErrorCode.NETWORK_CONNECTION: "connection failed",
}

_MAX_CHAIN_DEPTH = 16


def _cause_chain(error: BaseException) -> Iterator[BaseException]:
    """Walk an exception and everything it wraps.

    Follows ``__cause__``/``__context__`` plus the ``reason`` attribute and
    wrapped first argument that requests/urllib3 use instead of chaining.
    """
    pending = [error]
    seen = set()
    while pending and len(seen) < _MAX_CHAIN_DEPTH:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        for linked in (
            current.__cause__,
            current.__context__,
            getattr(current, "reason", None),
            current.args[0] if current.args else None,
        ):
            if isinstance(linked, BaseException):
                pending.append(linked)


class ErrorClassifier:
    """Classifies failures into WebhookError values.

    Static methods for stateless classification; safe to share across threads.
    """

    @staticmethod
    def network_code(cause: Optional[BaseException]) -> ErrorCode:
        """Pick the network error code for a transport failure.

        Args:
            cause: Exception raised by the transport (may be None)

        Returns:
            NETWORK_TIMEOUT, NETWORK_DNS or NETWORK_CONNECTION
        """
        if cause is None:
            return ErrorCode.NETWORK_CONNECTION

        # Direct timeout
        if isinstance(cause, _TIMEOUT_TYPES):
            return ErrorCode.NETWORK_TIMEOUT

        chain = list(_cause_chain(cause))

        # Name resolution anywhere in the chain
        for link in chain:
            if isinstance(link, _DNS_TYPES):
                return ErrorCode.NETWORK_DNS
        error_str = str(cause).lower()
        if any(marker in error_str for marker in _DNS_MESSAGES):
            return ErrorCode.NETWORK_DNS

        # Connection/operation failure, unless it wraps a timeout
        if isinstance(cause, _CONNECTION_TYPES):
            if any(isinstance(link, _TIMEOUT_TYPES) for link in chain[1:]):
                return ErrorCode.NETWORK_TIMEOUT
            return ErrorCode.NETWORK_CONNECTION

        return ErrorCode.NETWORK_CONNECTION

    @staticmethod
    def api_code(status_code: int) -> ErrorCode:
        """Map an HTTP status to an API error code.

        Unmapped statuses (including 4xx such as 400) fall into API_SERVER_ERROR.
        """
        return _API_STATUS_CODES.get(status_code, ErrorCode.API_SERVER_ERROR)

    @staticmethod
    def derive_code(
        category: ErrorCategory,
        status_code: Optional[int],
        cause: Optional[BaseException],
    ) -> ErrorCode:
        """Derive the error code from category, status and cause."""
        if category is ErrorCategory.NETWORK:
            return ErrorClassifier.network_code(cause)
        if category is ErrorCategory.API:
            return ErrorClassifier.api_code(status_code)
        if category is ErrorCategory.SERIALIZATION:
            return ErrorCode.SERIALIZATION_JSON
        return ErrorCode.UNKNOWN

    @staticmethod
    def is_transport_failure(error: BaseException) -> bool:
        """Check whether an exception came from the network layer."""
        return isinstance(error, _TIMEOUT_TYPES + _DNS_TYPES + _TRANSPORT_TYPES)

    @staticmethod
    def network(target: str, cause: Optional[BaseException]) -> WebhookError:
        """Build a NETWORK error, classifying the cause into a specific code."""
        code = ErrorClassifier.network_code(cause)
        return WebhookError(
            ErrorCategory.NETWORK,
            f"{_MESSAGE_PREFIXES[code]}: {cause}",
            code=code,
            target=target,
            cause=cause,
        )

    @staticmethod
    def serialization(cause: Optional[BaseException]) -> WebhookError:
        """Build a SERIALIZATION error for a payload that failed to encode."""
        return WebhookError(
            ErrorCategory.SERIALIZATION,
            f"serialization error: {cause}",
            code=ErrorCode.SERIALIZATION_JSON,
            cause=cause,
        )

    @staticmethod
    def api(target: str, status_code: int, response_body: str = "") -> WebhookError:
        """Build an API error from a non-success response.

        Args:
            target: Webhook URL
            status_code: HTTP status returned by the endpoint
            response_body: Raw response text (appended to the message when non-empty)

        Returns:
            WebhookError with category API
        """
        response_body = response_body or ""
        message = f"API returned status {status_code}"
        if response_body:
            message = f"{message}: {response_body}"

        return WebhookError(
            ErrorCategory.API,
            message,
            code=ErrorClassifier.api_code(status_code),
            status_code=status_code,
            response_body=response_body,
            target=target,
        )

    @staticmethod
    def generic(target: str, error: Optional[BaseException]) -> Optional[WebhookError]:
        """Classify an arbitrary exception.

        WebhookError inputs are returned unchanged. Transport failures become
        NETWORK errors; everything else is wrapped as UNKNOWN.
        """
        if error is None:
            return None

        if isinstance(error, WebhookError):
            return error

        if ErrorClassifier.is_transport_failure(error):
            return ErrorClassifier.network(target, error)

        return WebhookError(
            ErrorCategory.UNKNOWN,
            str(error) or type(error).__name__,
            code=ErrorCode.UNKNOWN,
            target=target,
            cause=error,
        )

    @staticmethod
    def is_retryable(error: WebhookError) -> bool:
        """Decide whether repeating the request may succeed.

        - NETWORK: always
        - API: 5xx and 429
        - Everything else: never
        """
        if error.is_network_error():
            return True
        if error.is_api_error() and error.status_code is not None:
            return error.status_code >= 500 or error.status_code == 429
        return False
