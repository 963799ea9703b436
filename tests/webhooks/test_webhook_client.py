"""Tests for webhook client module.

Tests cover:
- Request headers (form content type, caller-supplied auth)
- Async and sync delivery methods
- Non-2xx replies and transport errors turned into failed results
- WebhookDeliveryResult and error classes
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from eventful.events import FORM_CONTENT_TYPE, EventKind
from eventful.webhooks.client import (
    HEADER_CONTENT_TYPE,
    WebhookClient,
    WebhookConnectionError,
    WebhookDeliveryError,
    WebhookDeliveryResult,
    WebhookRequest,
    WebhookTimeoutError,
)

URL = "https://hooks.example.com/message"
BODY = "from=alice%40example.com&to=bob%40example.com&type=&subject=&body=hi&thread="


def make_request(headers: dict[str, str] | None = None) -> WebhookRequest:
    return WebhookRequest(kind=EventKind.MESSAGE, url=URL, body=BODY, headers=headers or {})


def make_response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


# =============================================================================
# Test: WebhookRequest
# =============================================================================


class TestWebhookRequest:
    """Tests for the prepared request."""

    def test_all_headers_adds_content_type(self) -> None:
        request = make_request({"Authorization": "Basic c3ZjOnB3"})

        assert request.all_headers() == {
            HEADER_CONTENT_TYPE: FORM_CONTENT_TYPE,
            "Authorization": "Basic c3ZjOnB3",
        }

    def test_content_type_value(self) -> None:
        assert FORM_CONTENT_TYPE == "application/x-www-form-urlencoded"

    def test_repr_hides_header_values(self) -> None:
        text = repr(make_request({"Authorization": "Basic c3ZjOnB3"}))

        assert "Authorization" in text
        assert "c3ZjOnB3" not in text


# =============================================================================
# Test: Sync Delivery
# =============================================================================


class TestSyncPost:
    """Tests for post_form_sync."""

    def test_success(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(200, "ok")

            result = client.post_form_sync(make_request())

        assert result.success is True
        assert result.status_code == 200
        assert result.response_body == "ok"
        assert result.error is None

    def test_posts_encoded_body_and_headers(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(204)

            client.post_form_sync(make_request({"Authorization": "Basic c3ZjOnB3"}))

        assert mock_post.call_args.args[0] == URL
        kwargs = mock_post.call_args.kwargs
        assert kwargs["content"] == BODY.encode("utf-8")
        assert kwargs["headers"][HEADER_CONTENT_TYPE] == FORM_CONTENT_TYPE
        assert kwargs["headers"]["Authorization"] == "Basic c3ZjOnB3"

    def test_default_timeout_left_to_httpx(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(200)
            client.post_form_sync(make_request())

        assert "timeout" not in mock_post.call_args.kwargs

    def test_explicit_timeout_passed(self) -> None:
        client = WebhookClient(timeout=2.5)

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(200)
            client.post_form_sync(make_request())

        assert mock_post.call_args.kwargs["timeout"] == 2.5

    def test_non_2xx_is_failed_result(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(500, "Internal Server Error")

            result = client.post_form_sync(make_request())

        assert result.success is False
        assert result.status_code == 500
        assert result.response_body == "Internal Server Error"
        assert result.error is not None
        assert "500" in result.error

    def test_single_attempt_per_call(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = make_response(503)
            client.post_form_sync(make_request())

        assert mock_post.call_count == 1

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (httpx.ReadTimeout("slow"), "timed out"),
            (httpx.ConnectError("refused"), "Failed to connect"),
            (httpx.RemoteProtocolError("bad reply"), "Request failed"),
        ],
    )
    def test_transport_errors_become_failed_results(
        self, exc: httpx.HTTPError, expected: str
    ) -> None:
        client = WebhookClient()

        with patch.object(httpx.Client, "post", side_effect=exc):
            result = client.post_form_sync(make_request())

        assert result.success is False
        assert result.status_code is None
        assert expected in (result.error or "")


# =============================================================================
# Test: Async Delivery
# =============================================================================


class TestAsyncPost:
    """Tests for post_form."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(200, "ok")

            result = await client.post_form(make_request())

        assert result.success is True
        assert result.status_code == 200
        assert mock_post.call_args.kwargs["content"] == BODY.encode("utf-8")

    @pytest.mark.asyncio
    async def test_client_error(self) -> None:
        client = WebhookClient()

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(401, "Unauthorized")

            result = await client.post_form(make_request())

        assert result.success is False
        assert result.status_code == 401

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        client = WebhookClient(timeout=1.0)

        with patch.object(
            httpx.AsyncClient,
            "post",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectTimeout("timed out"),
        ):
            result = await client.post_form(make_request())

        assert result.success is False
        assert "timed out" in (result.error or "")


# =============================================================================
# Test: Result and Error Classes
# =============================================================================


class TestDeliveryResult:
    """Tests for WebhookDeliveryResult."""

    def test_to_dict(self) -> None:
        result = WebhookDeliveryResult(
            success=False, status_code=404, response_body="nope", delivery_time_ms=12.5, error="x"
        )

        assert result.to_dict() == {
            "success": False,
            "status_code": 404,
            "delivery_time_ms": 12.5,
            "error": "x",
        }


class TestErrors:
    """Tests for webhook error classes."""

    def test_delivery_error_str(self) -> None:
        error = WebhookDeliveryError("Webhook returned 500", url=URL, status_code=500)
        assert str(error) == f"Webhook returned 500 url={URL} status=500"

    def test_delivery_error_minimal(self) -> None:
        assert str(WebhookDeliveryError("failed")) == "failed"

    def test_timeout_error(self) -> None:
        error = WebhookTimeoutError(URL)
        assert error.url == URL
        assert URL in str(error)

    def test_connection_error_keeps_original(self) -> None:
        original = ConnectionRefusedError("refused")
        error = WebhookConnectionError(URL, original)

        assert error.original_error is original
        assert URL in str(error)
