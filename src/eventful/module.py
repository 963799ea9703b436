"""Eventful Module - plugin lifecycle and host hook handlers.

One EventfulModule is activated per deployment (virtual host). Activation
starts its webhook worker and subscribes three handlers to host hooks;
deactivation unsubscribes them and stops the worker.

Handlers classify the notification, queue each resulting event and return.
They never raise into the host: any failure is logged and swallowed so the
host's message and presence processing always continues.
"""

from __future__ import annotations

import logging
from typing import Any

from . import classifier
from .config import EventfulConfig
from .events import WebhookEvent
from .host import DEFAULT_HOOK_PRIORITY, HookRegistry, HostHook, SessionQuery
from .webhooks import WebhookWorker

logger = logging.getLogger(__name__)


class EventfulModule:
    """The plugin as activated for one deployment.

    Usage:
        module = EventfulModule("example.com", config, hooks, sessions)
        module.start()
        ...
        module.stop()
    """

    def __init__(
        self,
        host: str,
        config: EventfulConfig,
        hooks: HookRegistry,
        sessions: SessionQuery,
        worker: WebhookWorker | None = None,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        """Initialize the module.

        Args:
            host: Name of the deployment (virtual host) this module serves.
            config: Immutable configuration for this deployment.
            hooks: Host hook registry the handlers are subscribed to.
            sessions: Host session queries used for online/offline detection.
            worker: Optional worker; one is created from config if None.
            priority: Priority the handlers are registered with.
        """
        self.host = host
        self.config = config
        self.hooks = hooks
        self.sessions = sessions
        self._owns_worker = worker is None
        self.worker = worker or self._new_worker()
        self.priority = priority
        self._handles: list[Any] = []

    def _new_worker(self) -> WebhookWorker:
        return WebhookWorker(self.config, name=f"eventful-{self.host}")

    @property
    def started(self) -> bool:
        return bool(self._handles)

    def _hook_table(self) -> list[tuple[HostHook, Any]]:
        return [
            (HostHook.USER_SEND_PACKET, self.send_message),
            (HostHook.SET_PRESENCE, self.set_presence_log),
            (HostHook.UNSET_PRESENCE, self.unset_presence_log),
        ]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the worker and subscribe the hook handlers."""
        if self.started:
            return
        # A stopped worker cannot run again; reactivation gets a fresh one
        if self.worker.stopped and self._owns_worker:
            self.worker = self._new_worker()
        self.worker.start()
        for hook, handler in self._hook_table():
            self._handles.append(self.hooks.subscribe(hook, handler, self.priority))
        logger.info(
            "eventful started for %s (%s)",
            self.host,
            ", ".join(k.short_name for k in self.config.enabled_kinds()) or "no webhooks",
        )

    def stop(self) -> None:
        """Unsubscribe the hook handlers and stop the worker."""
        if not self.started:
            return
        while self._handles:
            self.hooks.unsubscribe(self._handles.pop())
        self.worker.stop()
        logger.info("eventful stopped for %s", self.host)

    def __enter__(self) -> EventfulModule:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # =========================================================================
    # Hook handlers
    # =========================================================================

    def send_message(self, sender: Any, recipient: Any, packet: Any) -> None:
        """user_send_packet handler."""
        try:
            event = classifier.classify_message(sender, recipient, packet)
            if event is not None:
                self._submit(event)
        except Exception as e:
            logger.warning("eventful: failed to handle outgoing packet: %s", e, exc_info=True)

    def set_presence_log(self, user: str, server: str, resource: str, presence: Any) -> None:
        """set_presence_hook handler."""
        try:
            for event in classifier.classify_presence_set(
                user, server, resource, presence, self.sessions
            ):
                self._submit(event)
        except Exception as e:
            logger.warning("eventful: failed to handle presence set: %s", e, exc_info=True)

    def unset_presence_log(self, user: str, server: str, resource: str, status: str) -> None:
        """unset_presence_hook handler."""
        try:
            for event in classifier.classify_presence_unset(
                user, server, resource, status, self.sessions
            ):
                self._submit(event)
        except Exception as e:
            logger.warning("eventful: failed to handle presence unset: %s", e, exc_info=True)

    def _submit(self, event: WebhookEvent) -> None:
        # Kinds without a URL never reach the queue
        if self.config.url_for(event.kind) is None:
            return
        self.worker.submit(event)

    def __repr__(self) -> str:
        return f"EventfulModule(host={self.host!r}, started={self.started}, worker={self.worker!r})"


__all__ = ["EventfulModule"]
