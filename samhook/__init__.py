"""samhook - post Slack-style messages to incoming webhooks.

Sends are classified into a stable error taxonomy (WebhookError) and can be
retried with exponential backoff, bounded by timeouts and cancel tokens.
"""

from samhook.config import DEFAULT_TIMEOUT, ClientConfig, Config
from samhook.core.cancellation import CancelToken, OperationCancelled
from samhook.core.errors import ErrorCategory, ErrorCode, WebhookError
from samhook.core.execution import (
    ErrorClassifier,
    RetryController,
    execute_with_retry,
    execute_with_retry_async,
)
from samhook.core.logging import configure_logging
from samhook.core.request_logger import (
    NoOpRequestLogger,
    RequestLogger,
    StructlogRequestLogger,
    WriterRequestLogger,
    get_request_logger,
    set_logger,
    set_logger_writer,
)
from samhook.core.retry_config import DEFAULT_RETRY_POLICY, BackoffPolicy, RetryPolicy
from samhook.models import DANGER, GOOD, WARNING, Attachment, AttachmentField, Message
from samhook.utils import (
    InvalidWebhookURL,
    encode_message,
    send,
    send_async,
    send_reader,
    send_with_context,
    send_with_options,
    send_with_retry,
    send_with_retry_async,
    validate_webhook_url,
)

__version__ = "1.0.0"

__all__ = [
    # Messages
    "Message",
    "Attachment",
    "AttachmentField",
    "GOOD",
    "WARNING",
    "DANGER",
    # Sending
    "send",
    "send_reader",
    "send_with_options",
    "send_with_context",
    "send_with_retry",
    "send_async",
    "send_with_retry_async",
    "encode_message",
    "validate_webhook_url",
    "InvalidWebhookURL",
    # Configuration
    "Config",
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    # Errors
    "WebhookError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorClassifier",
    # Retry
    "RetryPolicy",
    "BackoffPolicy",
    "DEFAULT_RETRY_POLICY",
    "RetryController",
    "execute_with_retry",
    "execute_with_retry_async",
    # Cancellation
    "CancelToken",
    "OperationCancelled",
    # Logging
    "configure_logging",
    "RequestLogger",
    "NoOpRequestLogger",
    "WriterRequestLogger",
    "StructlogRequestLogger",
    "set_logger",
    "set_logger_writer",
    "get_request_logger",
]
