"""Utility modules for samhook.

Webhook delivery and URL validation helpers.
"""

from samhook.utils.validator import InvalidWebhookURL, validate_webhook_url
from samhook.utils.webhooks import (
    encode_message,
    send,
    send_async,
    send_reader,
    send_with_context,
    send_with_options,
    send_with_retry,
    send_with_retry_async,
)

__all__ = [
    "InvalidWebhookURL",
    "validate_webhook_url",
    "encode_message",
    "send",
    "send_async",
    "send_reader",
    "send_with_context",
    "send_with_options",
    "send_with_retry",
    "send_with_retry_async",
]
