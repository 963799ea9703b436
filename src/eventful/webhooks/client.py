"""Webhook client for sending form-encoded HTTP POST requests.

This module provides the WebhookClient class that delivers one prepared
request per call with:
- application/x-www-form-urlencoded bodies
- Optional basic-auth header supplied by the caller
- Both synchronous and asynchronous interfaces
- Delivery result tracking for diagnostics

Delivery is best effort: there are no retries, and transport errors are
turned into failed results instead of being raised.

Example:
    >>> client = WebhookClient()
    >>> request = WebhookRequest(
    ...     kind=EventKind.MESSAGE,
    ...     url="https://example.com/webhook",
    ...     body="from=a&to=b&type=&subject=&body=hi&thread=",
    ... )
    >>> result = client.post_form_sync(request)
    >>> print(result.success)
    True
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..events import FORM_CONTENT_TYPE, EventKind

logger = logging.getLogger(__name__)

HEADER_CONTENT_TYPE = "Content-Type"

# Longest response body excerpt kept in results and logs
MAX_RESPONSE_EXCERPT = 200


# =============================================================================
# Exceptions
# =============================================================================


class WebhookError(Exception):
    """Base exception for webhook-related errors."""

    pass


class WebhookDeliveryError(WebhookError):
    """Error during webhook delivery.

    Attributes:
        url: The webhook URL that failed.
        status_code: HTTP status code if available.
        message: Error description.
        response_body: Response body if available.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.message = message
        self.response_body = response_body

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.url:
            parts.append(f"url={self.url}")
        if self.status_code:
            parts.append(f"status={self.status_code}")
        return " ".join(parts)


class WebhookTimeoutError(WebhookError):
    """Webhook delivery timed out.

    Attributes:
        url: The webhook URL that timed out.
    """

    def __init__(self, url: str) -> None:
        super().__init__(f"Webhook delivery timed out: {url}")
        self.url = url


class WebhookConnectionError(WebhookError):
    """Failed to connect to webhook endpoint.

    Attributes:
        url: The webhook URL that couldn't be reached.
        original_error: The underlying connection error.
    """

    def __init__(self, url: str, original_error: Exception) -> None:
        super().__init__(f"Failed to connect to webhook: {url}")
        self.url = url
        self.original_error = original_error


# =============================================================================
# Request and Result Types
# =============================================================================


@dataclass(frozen=True)
class WebhookRequest:
    """A prepared POST: destination, encoded body and extra headers.

    Attributes:
        kind: The event kind the request reports.
        url: Destination webhook URL.
        body: Form-urlencoded body.
        headers: Extra headers (e.g. Authorization). Content-Type is added
            by the client.
    """

    kind: EventKind
    url: str
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    def all_headers(self) -> dict[str, str]:
        return {HEADER_CONTENT_TYPE: FORM_CONTENT_TYPE, **self.headers}

    def __repr__(self) -> str:
        """Return a representation without header values (they carry credentials)."""
        return (
            f"WebhookRequest(kind={self.kind.short_name}, url={self.url!r}, "
            f"headers={sorted(self.headers)})"
        )


@dataclass
class WebhookDeliveryResult:
    """Result of a webhook delivery attempt.

    Attributes:
        success: Whether the delivery was successful (2xx response).
        status_code: HTTP status code from the response.
        response_body: Response body content.
        delivery_time_ms: Time taken for delivery in milliseconds.
        error: Description of the failure, if any.
    """

    success: bool
    status_code: int | None = None
    response_body: str | None = None
    delivery_time_ms: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for logging/serialization."""
        return {
            "success": self.success,
            "status_code": self.status_code,
            "delivery_time_ms": self.delivery_time_ms,
            "error": self.error,
        }


# =============================================================================
# WebhookClient
# =============================================================================


class WebhookClient:
    """HTTP client for posting webhook notifications.

    Attributes:
        timeout: Request timeout in seconds, or None for the httpx default.
        verify_ssl: Whether to verify SSL certificates.

    Example:
        >>> client = WebhookClient()
        >>> result = await client.post_form(request)
    """

    def __init__(self, timeout: float | None = None, verify_ssl: bool = True) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def _request_kwargs(self, request: WebhookRequest) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "content": request.body.encode("utf-8"),
            "headers": request.all_headers(),
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    async def post_form(self, request: WebhookRequest) -> WebhookDeliveryResult:
        """Post a prepared request asynchronously.

        Returns:
            WebhookDeliveryResult describing the outcome. Never raises for
            HTTP or transport failures.
        """
        start_time = time.time()
        async with httpx.AsyncClient(verify=self.verify_ssl) as client:
            try:
                response = await client.post(request.url, **self._request_kwargs(request))
            except httpx.HTTPError as e:
                return self._failure(request, e, start_time)
        return self._result(request, response, start_time)

    def post_form_sync(self, request: WebhookRequest) -> WebhookDeliveryResult:
        """Post a prepared request synchronously.

        Synchronous version of post_form() for worker threads.
        """
        start_time = time.time()
        with httpx.Client(verify=self.verify_ssl) as client:
            try:
                response = client.post(request.url, **self._request_kwargs(request))
            except httpx.HTTPError as e:
                return self._failure(request, e, start_time)
        return self._result(request, response, start_time)

    def _result(
        self, request: WebhookRequest, response: httpx.Response, start_time: float
    ) -> WebhookDeliveryResult:
        delivery_time_ms = (time.time() - start_time) * 1000
        body = response.text

        logger.debug(
            "Webhook response for %s: %s %s",
            request.kind,
            response.status_code,
            body[:MAX_RESPONSE_EXCERPT],
            extra={
                "url": request.url,
                "status": response.status_code,
                "delivery_time_ms": delivery_time_ms,
            },
        )

        if 200 <= response.status_code < 300:
            return WebhookDeliveryResult(
                success=True,
                status_code=response.status_code,
                response_body=body,
                delivery_time_ms=delivery_time_ms,
            )

        error = WebhookDeliveryError(
            f"Webhook returned {response.status_code}",
            url=request.url,
            status_code=response.status_code,
            response_body=body,
        )
        return WebhookDeliveryResult(
            success=False,
            status_code=response.status_code,
            response_body=body,
            delivery_time_ms=delivery_time_ms,
            error=str(error),
        )

    def _failure(
        self, request: WebhookRequest, exc: httpx.HTTPError, start_time: float
    ) -> WebhookDeliveryResult:
        error: WebhookError
        if isinstance(exc, httpx.TimeoutException):
            error = WebhookTimeoutError(request.url)
        elif isinstance(exc, httpx.ConnectError):
            error = WebhookConnectionError(request.url, exc)
        else:
            error = WebhookDeliveryError(f"Request failed: {exc}", url=request.url)

        return WebhookDeliveryResult(
            success=False,
            delivery_time_ms=(time.time() - start_time) * 1000,
            error=str(error),
        )

    def __repr__(self) -> str:
        """Return string representation of the client."""
        return f"WebhookClient(timeout={self.timeout}, verify_ssl={self.verify_ssl})"


__all__ = [
    "WebhookClient",
    "WebhookConnectionError",
    "WebhookDeliveryError",
    "WebhookDeliveryResult",
    "WebhookError",
    "WebhookRequest",
    "WebhookTimeoutError",
]
