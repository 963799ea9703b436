"""eventful - post XMPP server events to webhooks.

The plugin subscribes to the host's outgoing-message, presence-set and
presence-unset hooks and posts a form-encoded summary of each event to the
webhook configured for its kind.

Usage:
    from eventful import EventfulModule, load_config

    module = EventfulModule("example.com", load_config(), hooks, sessions)
    module.start()
"""

from __future__ import annotations

from eventful.config import EventfulConfig
from eventful.config_loader import load_config
from eventful.events import EventKind, MessageEvent, PresenceEvent
from eventful.exceptions import ConfigError, EventfulError
from eventful.module import EventfulModule

__version__ = "0.3.0"

__all__ = [
    "ConfigError",
    "EventKind",
    "EventfulConfig",
    "EventfulError",
    "EventfulModule",
    "MessageEvent",
    "PresenceEvent",
    "load_config",
    "__version__",
]
