"""Webhook delivery for samhook.

One attempt encodes the message, POSTs it as JSON and maps the outcome onto
the WebhookError taxonomy. Sync sends go through requests, async sends
through httpx.
"""

import asyncio
import contextlib
import json
import threading
import time
from typing import Any, Dict, Optional, Union

import httpx
import requests
from pydantic import BaseModel

from samhook.config import ClientConfig
from samhook.core.cancellation import CancelToken, OperationCancelled
from samhook.core.execution.error_classifier import ErrorClassifier
from samhook.core.execution.error_handler import (
    RetryCallback,
    execute_with_retry,
    execute_with_retry_async,
)
from samhook.core.logging import logger
from samhook.core.request_logger import get_request_logger
from samhook.core.retry_config import RetryPolicy

MessageLike = Union[BaseModel, Dict[str, Any]]

_HEADERS = {"Content-Type": "application/json"}
_METHOD = "POST"

# How often an in-flight request checks its CancelToken
_CANCEL_POLL_INTERVAL = 0.02


def _short_url(url: str) -> str:
    """Trim a webhook URL for logs; the path usually embeds the secret token."""
    return url if len(url) <= 50 else url[:50] + "..."


def encode_message(message: MessageLike) -> bytes:
    """Serialize a message to JSON bytes.

    Args:
        message: Message model or plain dict

    Returns:
        UTF-8 encoded JSON payload

    Raises:
        WebhookError: SERIALIZATION error if the message cannot be encoded
    """
    try:
        if isinstance(message, BaseModel):
            payload = message.model_dump(mode="json", exclude_defaults=True)
        else:
            payload = message
        return json.dumps(payload, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ErrorClassifier.serialization(e) from e


def _check_status(url: str, status_code: int, body: str) -> None:
    if not 200 <= status_code < 300:
        raise ErrorClassifier.api(url, status_code, body)


def _post_interruptible(post, url: str, body: bytes, timeout: Optional[float], token: CancelToken):
    """Run ``post`` on its own daemon thread and give up as soon as the token fires.

    An abandoned request keeps running in the background until its own
    timeout; its result is discarded. Each call gets a fresh thread so no
    caller queues behind another caller's request.
    """
    token.raise_if_cancelled()
    outcome: Dict[str, Any] = {}
    finished = threading.Event()

    def run():
        try:
            outcome["response"] = post(url, data=body, headers=_HEADERS, timeout=timeout)
        except BaseException as e:
            outcome["error"] = e
        finally:
            finished.set()

    threading.Thread(target=run, name="samhook-send", daemon=True).start()
    while not finished.wait(_CANCEL_POLL_INTERVAL):
        if token.cancelled:
            raise token.error()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["response"]


def _post(url: str, body: bytes, config: ClientConfig, token: Optional[CancelToken]):
    post = config.session.post if config.session is not None else requests.post
    try:
        if token is None:
            return post(url, data=body, headers=_HEADERS, timeout=config.timeout)
        return _post_interruptible(post, url, body, token.bound(config.timeout), token)
    except (requests.exceptions.RequestException, OperationCancelled) as e:
        raise ErrorClassifier.network(url, e) from e


def _deliver(
    url: str, body: bytes, config: ClientConfig, token: Optional[CancelToken] = None
) -> None:
    """Perform one POST and report it to the request logger."""
    started = time.monotonic()
    error: Optional[BaseException] = None
    try:
        response = _post(url, body, config, token)
        _check_status(url, response.status_code, response.text)
        logger.debug(
            "webhook_delivered",
            webhook_url=_short_url(url),
            status_code=response.status_code,
        )
    except BaseException as e:
        error = e
        raise
    finally:
        get_request_logger().log_request(url, _METHOD, time.monotonic() - started, error)


def send(url: str, message: MessageLike) -> None:
    """Send a message with default client settings.

    Example:
        >>> send("https://hooks.slack.com/services/...", Message(text="deploy finished"))
    """
    send_with_options(url, message)


def send_reader(url: str, reader: Any, config: Optional[ClientConfig] = None) -> None:
    """POST a pre-encoded JSON body.

    Args:
        url: Webhook URL
        reader: File-like object with read(), bytes, or str
        config: Optional client configuration
    """
    body = reader.read() if hasattr(reader, "read") else reader
    if isinstance(body, str):
        body = body.encode("utf-8")
    _deliver(url, body or b"", config or ClientConfig.from_env())


def send_with_options(url: str, message: MessageLike, config: Optional[ClientConfig] = None) -> None:
    """Send a message using an explicit client configuration.

    Raises:
        WebhookError: On encoding, transport, or non-2xx response failures
    """
    _deliver(url, encode_message(message), config or ClientConfig.from_env())


def send_with_context(
    token: CancelToken,
    url: str,
    message: MessageLike,
    config: Optional[ClientConfig] = None,
) -> None:
    """Send a message that can be cancelled through ``token``.

    The request timeout is bounded by the token's deadline, and a cancel
    aborts an in-flight request with a NETWORK_TIMEOUT error.
    """
    _deliver(url, encode_message(message), config or ClientConfig.from_env(), token)


def send_with_retry(
    url: str,
    message: MessageLike,
    policy: Optional[RetryPolicy] = None,
    config: Optional[ClientConfig] = None,
    token: Optional[CancelToken] = None,
    on_retry: Optional[RetryCallback] = None,
) -> None:
    """Send a message, retrying transient failures.

    Args:
        url: Webhook URL
        message: Message model or plain dict
        policy: RetryPolicy (RetryPolicy.from_env() if None)
        config: Optional client configuration
        token: Optional CancelToken covering every attempt and wait
        on_retry: Optional callback(attempt, error, delay) before each wait

    Raises:
        WebhookError: The last failure once retrying stops
    """
    body = encode_message(message)
    config = config or ClientConfig.from_env()
    execute_with_retry(
        lambda: _deliver(url, body, config, token),
        policy or RetryPolicy.from_env(),
        token=token,
        on_retry=on_retry,
        target=url,
    )


async def _post_async(url: str, body: bytes, config: ClientConfig, timeout: Optional[float]):
    if config.client is not None:
        return await config.client.post(url, content=body, headers=_HEADERS, timeout=timeout)
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.post(url, content=body, headers=_HEADERS)


async def _deliver_async(
    url: str, body: bytes, config: ClientConfig, token: Optional[CancelToken] = None
) -> None:
    """Async counterpart of _deliver()."""
    started = time.monotonic()
    error: Optional[BaseException] = None
    try:
        try:
            if token is None:
                response = await _post_async(url, body, config, config.timeout)
            else:
                token.raise_if_cancelled()
                task = asyncio.ensure_future(
                    _post_async(url, body, config, token.bound(config.timeout))
                )
                try:
                    while True:
                        done, _ = await asyncio.wait({task}, timeout=_CANCEL_POLL_INTERVAL)
                        if done:
                            response = task.result()
                            break
                        if token.cancelled:
                            task.cancel()
                            with contextlib.suppress(asyncio.CancelledError):
                                await task
                            raise token.error()
                finally:
                    # The caller itself may have been cancelled mid-wait
                    if not task.done():
                        task.cancel()
        except (httpx.RequestError, httpx.InvalidURL, OperationCancelled) as e:
            raise ErrorClassifier.network(url, e) from e

        _check_status(url, response.status_code, response.text)
        logger.debug(
            "webhook_delivered",
            webhook_url=_short_url(url),
            status_code=response.status_code,
        )
    except BaseException as e:
        error = e
        raise
    finally:
        get_request_logger().log_request(url, _METHOD, time.monotonic() - started, error)


async def send_async(
    url: str,
    message: MessageLike,
    config: Optional[ClientConfig] = None,
    token: Optional[CancelToken] = None,
) -> None:
    """Send a message over httpx.

    Raises:
        WebhookError: On encoding, transport, or non-2xx response failures
    """
    await _deliver_async(url, encode_message(message), config or ClientConfig.from_env(), token)


async def send_with_retry_async(
    url: str,
    message: MessageLike,
    policy: Optional[RetryPolicy] = None,
    config: Optional[ClientConfig] = None,
    token: Optional[CancelToken] = None,
    on_retry: Optional[RetryCallback] = None,
) -> None:
    """Async counterpart of send_with_retry()."""
    body = encode_message(message)
    config = config or ClientConfig.from_env()
    await execute_with_retry_async(
        lambda: _deliver_async(url, body, config, token),
        policy or RetryPolicy.from_env(),
        token=token,
        on_retry=on_retry,
        target=url,
    )
