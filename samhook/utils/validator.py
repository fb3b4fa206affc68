"""Webhook URL validation."""

from urllib.parse import urlparse


class InvalidWebhookURL(ValueError):
    """Raised when a webhook URL is malformed or uses an unsupported scheme."""


def validate_webhook_url(webhook_url: str) -> None:
    """Check that a webhook URL is an absolute http(s) URL with a host.

    Args:
        webhook_url: URL to validate

    Raises:
        InvalidWebhookURL: If the URL is empty, unparsable, not http/https, or has no host
    """
    if not webhook_url:
        raise InvalidWebhookURL("webhook URL cannot be empty")

    try:
        parsed = urlparse(webhook_url)
        # Accessing the port validates it
        parsed.port
    except ValueError as e:
        raise InvalidWebhookURL(f"invalid URL format: {e}") from e

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        raise InvalidWebhookURL(f"URL scheme must be http or https, got: {parsed.scheme}")

    if not parsed.netloc or not parsed.hostname:
        raise InvalidWebhookURL("URL must have a host")
