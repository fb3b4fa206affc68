"""Execution module for samhook.

Provides error classification and the retry controller.
"""

from samhook.core.execution.error_classifier import ErrorClassifier
from samhook.core.execution.error_handler import (
    RetryController,
    execute_with_retry,
    execute_with_retry_async,
)

__all__ = [
    "ErrorClassifier",
    "RetryController",
    "execute_with_retry",
    "execute_with_retry_async",
]
