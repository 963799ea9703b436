"""Webhook delivery for the eventful plugin.

This package posts classified events to their configured webhooks. It
includes:

- WebhookClient: HTTP client posting form-encoded bodies (sync and async)
- WebhookWorker: per-deployment queue that prepares events one at a time
  and fires their POSTs without waiting for the reply
- build_request: turns an event plus configuration into a WebhookRequest

Usage:
    from eventful.webhooks import WebhookWorker

    worker = WebhookWorker(config)
    worker.start()
    worker.submit(event)
"""

from __future__ import annotations

from eventful.webhooks.client import (
    WebhookClient,
    WebhookConnectionError,
    WebhookDeliveryError,
    WebhookDeliveryResult,
    WebhookError,
    WebhookRequest,
    WebhookTimeoutError,
)
from eventful.webhooks.worker import WebhookWorker, build_request

__all__ = [
    # Client
    "WebhookClient",
    "WebhookRequest",
    "WebhookDeliveryResult",
    "WebhookError",
    "WebhookDeliveryError",
    "WebhookTimeoutError",
    "WebhookConnectionError",
    # Worker
    "WebhookWorker",
    "build_request",
]
