"""Eventful Exception Classes - errors raised at configuration time.

Nothing in the event path raises: delivery problems are described by the
webhook error types in ``eventful.webhooks.client`` and only logged.
"""

from pathlib import Path


class EventfulError(Exception):
    """Base exception for the eventful plugin."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(EventfulError):
    """Raised when the configuration file or module options are invalid."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class ModuleStateError(EventfulError):
    """Raised when a worker is used before start() or after stop()."""

    pass
