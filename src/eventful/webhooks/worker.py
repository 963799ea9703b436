"""Webhook worker - per-deployment dispatch queue.

Host hooks run on many threads at once. They hand classified events to the
worker through ``submit()``, which only enqueues and returns. A single
consumer thread turns each event into a request (URL lookup, form body,
auth header) and hands the POST to a thread pool, so it never waits for a
remote reply. Replies and transport errors are only logged.

Usage:
    worker = WebhookWorker(config)
    worker.start()
    worker.submit(event)      # from any hook thread
    worker.stop()             # drains accepted events first
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from ..config import EventfulConfig
from ..events import WebhookEvent
from ..exceptions import ModuleStateError
from .client import WebhookClient, WebhookDeliveryResult, WebhookRequest

logger = logging.getLogger(__name__)

# Seconds stop() waits for the consumer thread by default
DEFAULT_STOP_TIMEOUT = 10.0

# Queue sentinel asking the consumer thread to exit
_STOP = object()


def build_request(event: WebhookEvent, config: EventfulConfig) -> WebhookRequest | None:
    """Prepare the POST for an event.

    Returns:
        The request, or None when no URL is configured for the event kind.
    """
    url = config.url_for(event.kind)
    if url is None:
        return None
    return WebhookRequest(
        kind=event.kind,
        url=url,
        body=event.to_form(),
        headers=config.auth_header(),
    )


class WebhookWorker:
    """Serializes event preparation for one deployment and fires the POSTs.

    Attributes:
        config: The deployment's immutable configuration.
        client: Client used for the POSTs.
    """

    def __init__(
        self,
        config: EventfulConfig,
        client: WebhookClient | None = None,
        name: str = "eventful",
    ) -> None:
        self.config = config
        self.client = client or WebhookClient()
        self.name = name
        self._queue: queue.Queue[object] = queue.Queue(maxsize=config.max_queue_size)
        self._executor: ThreadPoolExecutor | None = None
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._stopped = False
        self._state_lock = threading.Lock()
        self._pending: set[Future[WebhookDeliveryResult]] = set()
        self._pending_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def stopped(self) -> bool:
        """True once stop() has run; a stopped worker cannot be restarted."""
        return self._stopped

    @property
    def pending_count(self) -> int:
        """Number of POSTs still in flight."""
        with self._pending_lock:
            return len(self._pending)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the consumer thread. Starting a running worker is a no-op.

        Raises:
            ModuleStateError: If the worker was already stopped.
        """
        if self._stopped:
            raise ModuleStateError(f"Worker {self.name} was stopped and cannot be restarted")
        if self.running:
            return

        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_concurrent_posts,
            thread_name_prefix=f"{self.name}-post",
        )
        self._thread = threading.Thread(target=self._run, name=f"{self.name}-worker", daemon=True)
        self._running.set()
        self._thread.start()
        logger.info("Webhook worker %s started: %r", self.name, self.config)

    def stop(self, timeout: float = DEFAULT_STOP_TIMEOUT) -> None:
        """Stop accepting events, drain the queue and wait for in-flight POSTs."""
        # Once the flag is cleared under the lock no submit can enqueue, so the
        # sentinel lands behind every accepted event
        with self._state_lock:
            if not self.running:
                return
            self._running.clear()
            self._stopped = True
        self._queue.put(_STOP)
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Webhook worker %s did not stop within %.1fs", self.name, timeout)
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        logger.info("Webhook worker %s stopped", self.name)

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self, event: WebhookEvent) -> bool:
        """Queue an event for dispatch without blocking.

        Returns:
            True if the event was accepted, False if it was dropped because
            the worker is not running or the queue is full.
        """
        with self._state_lock:
            if not self.running:
                logger.warning(
                    "Webhook worker %s not running, dropping %s event", self.name, event.kind
                )
                return False
            try:
                self._queue.put_nowait(event)
            except queue.Full:
                logger.warning(
                    "Webhook queue full (%d), dropping %s event",
                    self.config.max_queue_size,
                    event.kind,
                    extra={"worker": self.name},
                )
                return False
        return True

    def dispatch(self, event: WebhookEvent) -> Future[WebhookDeliveryResult] | None:
        """Prepare an event and fire its POST.

        Returns:
            The pending POST, or None when the event kind has no URL.
        """
        if self._executor is None:
            raise ModuleStateError(f"Worker {self.name} has not been started")

        request = build_request(event, self.config)
        if request is None:
            logger.debug("No webhook configured for %s, skipping", event.kind)
            return None

        logger.info(
            "Triggered post from event: %s, Data: %s",
            event.kind,
            request.body,
            extra={"url": request.url},
        )

        future = self._executor.submit(self.client.post_form_sync, request)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(lambda f: self._on_done(request, f))
        return future

    # =========================================================================
    # Internals
    # =========================================================================

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self.dispatch(item)  # type: ignore[arg-type]
            except Exception as e:
                # One bad event must not stop the consumer thread
                logger.warning("Failed to dispatch webhook event: %s", e, exc_info=True)
            finally:
                self._queue.task_done()

    def _on_done(self, request: WebhookRequest, future: Future[WebhookDeliveryResult]) -> None:
        with self._pending_lock:
            self._pending.discard(future)

        exc = future.exception()
        if exc is not None:
            logger.warning("Webhook post for %s raised: %s", request.kind, exc, extra={"url": request.url})
            return

        result = future.result()
        if result.success:
            logger.debug(
                "Webhook delivered: %s (%s)",
                request.kind,
                result.status_code,
                extra={"url": request.url, **result.to_dict()},
            )
        else:
            logger.warning(
                "Webhook delivery failed: %s - %s",
                request.kind,
                result.error,
                extra={"url": request.url, **result.to_dict()},
            )

    def __repr__(self) -> str:
        state = "running" if self.running else ("stopped" if self._stopped else "idle")
        return f"WebhookWorker(name={self.name!r}, state={state}, pending={self.pending_count})"


__all__ = [
    "DEFAULT_STOP_TIMEOUT",
    "WebhookWorker",
    "build_request",
]
