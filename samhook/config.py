"""Configuration management for samhook.

Centralizes environment variable access and the explicit client configuration
passed to send operations.
"""

import os
from dataclasses import dataclass
from typing import Optional

import httpx
import requests

DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_MAX_RETRIES = 3
DEFAULT_LOG_LEVEL = "INFO"

_FALSY = {"0", "false", "no", "off"}


class Config:
    """Library defaults loaded from environment variables."""

    @staticmethod
    def default_timeout() -> float:
        """Get the per-request timeout in seconds (SAMHOOK_TIMEOUT)."""
        raw = os.environ.get("SAMHOOK_TIMEOUT")
        try:
            value = float(raw) if raw else DEFAULT_TIMEOUT
        except ValueError:
            return DEFAULT_TIMEOUT
        return value if value > 0 else DEFAULT_TIMEOUT

    @staticmethod
    def max_retries() -> int:
        """Get the default retry count (SAMHOOK_MAX_RETRIES)."""
        raw = os.environ.get("SAMHOOK_MAX_RETRIES")
        try:
            value = int(raw) if raw else DEFAULT_MAX_RETRIES
        except ValueError:
            return DEFAULT_MAX_RETRIES
        return value if value >= 0 else DEFAULT_MAX_RETRIES

    @staticmethod
    def log_level() -> str:
        """Get the structured log level (SAMHOOK_LOG_LEVEL)."""
        level = (os.environ.get("SAMHOOK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return DEFAULT_LOG_LEVEL
        return level

    @staticmethod
    def log_json() -> bool:
        """Whether logs render as JSON (SAMHOOK_LOG_JSON, default true)."""
        raw = (os.environ.get("SAMHOOK_LOG_JSON") or "").strip().lower()
        return raw not in _FALSY


@dataclass
class ClientConfig:
    """Options for a single send.

    Attributes:
        timeout: Request timeout in seconds
        session: requests.Session to use for sync sends (module default if None)
        client: httpx.AsyncClient to use for async sends (one-off client if None)
    """

    timeout: float = DEFAULT_TIMEOUT
    session: Optional[requests.Session] = None
    client: Optional[httpx.AsyncClient] = None

    def __post_init__(self):
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(timeout=Config.default_timeout())


# Singleton instance for easy access
config = Config()
