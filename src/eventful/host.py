"""Host collaborator surface.

The XMPP server owns hook dispatch and session tracking. This module names
the hooks the plugin subscribes to and the calls it makes back into the
host, as protocols the host implements.

``LocalHookRegistry`` and ``LocalSessionTable`` are small in-memory
implementations of those protocols for embedding hosts, the CLI and tests.
"""

from __future__ import annotations

import itertools
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

# Priority the plugin's handlers are registered with
DEFAULT_HOOK_PRIORITY = 50


class HostHook(str, Enum):
    """Host hooks the plugin subscribes to."""

    USER_SEND_PACKET = "user_send_packet"
    SET_PRESENCE = "set_presence_hook"
    UNSET_PRESENCE = "unset_presence_hook"

    def __str__(self) -> str:
        return self.value


HookHandler = Callable[..., Any]


# =============================================================================
# Protocols
# =============================================================================


class HookRegistry(Protocol):
    """Hook subscription interface exposed by the host."""

    def subscribe(self, hook: HostHook, handler: HookHandler, priority: int) -> Any:
        """Register handler for hook and return a handle for unsubscribe()."""
        ...

    def unsubscribe(self, handle: Any) -> None:
        """Remove a handler registered by subscribe()."""
        ...


class SessionQuery(Protocol):
    """Live session queries answered by the host's session manager."""

    def resource_count(self, user: str, server: str) -> int:
        """Return the number of live resources for user@server."""
        ...

    def user_resources(self, user: str, server: str) -> list[str]:
        """Return the live resources for user@server."""
        ...


# =============================================================================
# In-memory implementations
# =============================================================================


@dataclass(frozen=True)
class Subscription:
    """Handle returned by LocalHookRegistry.subscribe()."""

    hook: HostHook
    priority: int
    seq: int
    handler: HookHandler = field(compare=False)


class LocalHookRegistry:
    """Priority-ordered hook table.

    Handlers for a hook run in ascending priority order; handlers with the
    same priority run in subscription order.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[HostHook, list[Subscription]] = defaultdict(list)
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def subscribe(
        self, hook: HostHook, handler: HookHandler, priority: int = DEFAULT_HOOK_PRIORITY
    ) -> Subscription:
        sub = Subscription(hook=hook, priority=priority, seq=next(self._seq), handler=handler)
        with self._lock:
            subs = self._subscriptions[hook]
            subs.append(sub)
            subs.sort(key=lambda s: (s.priority, s.seq))
        return sub

    def unsubscribe(self, handle: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(handle.hook, [])
            if handle in subs:
                subs.remove(handle)

    def handlers(self, hook: HostHook) -> list[HookHandler]:
        with self._lock:
            return [s.handler for s in self._subscriptions.get(hook, [])]

    def run(self, hook: HostHook, *args: Any) -> None:
        """Run every handler subscribed to hook with the given arguments."""
        for handler in self.handlers(hook):
            handler(*args)


class LocalSessionTable:
    """Tracks live resources per user@server."""

    def __init__(self) -> None:
        self._resources: dict[tuple[str, str], list[str]] = defaultdict(list)
        self._lock = threading.Lock()

    def connect(self, user: str, server: str, resource: str) -> None:
        with self._lock:
            resources = self._resources[(user, server)]
            if resource not in resources:
                resources.append(resource)

    def disconnect(self, user: str, server: str, resource: str) -> None:
        with self._lock:
            resources = self._resources.get((user, server), [])
            if resource in resources:
                resources.remove(resource)

    def resource_count(self, user: str, server: str) -> int:
        with self._lock:
            return len(self._resources.get((user, server), []))

    def user_resources(self, user: str, server: str) -> list[str]:
        with self._lock:
            return list(self._resources.get((user, server), []))


__all__ = [
    "DEFAULT_HOOK_PRIORITY",
    "HookHandler",
    "HookRegistry",
    "HostHook",
    "LocalHookRegistry",
    "LocalSessionTable",
    "SessionQuery",
    "Subscription",
]
