"""Plugin configuration model with Pydantic validation.

This module defines the EventfulConfig model holding everything one
deployment needs to post events:

- One webhook URL per event kind (a kind without a URL is disabled)
- Optional basic-auth credentials, enabled only when both are set
- Worker tuning (queue size, concurrent POSTs)

The model is frozen: it is built once when the module is activated and
never changes for the lifetime of that activation.

Example:
    >>> from eventful.config import EventfulConfig
    >>> config = EventfulConfig.from_module_opts({
    ...     "url": {"message_hook": "https://example.com/messages"},
    ...     "user": "svc",
    ...     "password": "pw",
    ... })
    >>> config.url_for("message")
    'https://example.com/messages'
    >>> config.auth_header()
    {'Authorization': 'Basic c3ZjOnB3'}
"""

from __future__ import annotations

import base64
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .events import EventKind

# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_MAX_QUEUE_SIZE = 1000
DEFAULT_MAX_CONCURRENT_POSTS = 8

AUTHORIZATION_HEADER = "Authorization"


# =============================================================================
# EventfulConfig Model
# =============================================================================


class EventfulConfig(BaseModel):
    """Configuration for one deployment of the plugin.

    Attributes:
        urls: Webhook URL per event kind. Kinds without a URL are not posted.
        user: Basic-auth user name.
        password: Basic-auth password.
        max_queue_size: Events the worker buffers before dropping new ones.
        max_concurrent_posts: POST requests allowed in flight at once.
    """

    model_config = ConfigDict(frozen=True)

    urls: dict[EventKind, str] = Field(
        default_factory=dict,
        description="Webhook URL per event kind.",
    )
    user: str | None = Field(
        default=None,
        description="Basic-auth user name.",
    )
    password: str | None = Field(
        default=None,
        description="Basic-auth password.",
    )
    max_queue_size: int = Field(
        default=DEFAULT_MAX_QUEUE_SIZE,
        ge=1,
        description="Events buffered before new ones are dropped.",
    )
    max_concurrent_posts: int = Field(
        default=DEFAULT_MAX_CONCURRENT_POSTS,
        ge=1,
        le=64,
        description="POST requests allowed in flight at once.",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("urls", mode="before")
    @classmethod
    def normalize_urls(cls, v: Any) -> dict[EventKind, str]:
        """Normalize URL keys to EventKind and drop empty URLs.

        Keys may be EventKind members, hook values ("message_hook") or short
        names ("message").

        Raises:
            ValueError: If a key is not an event kind or a URL is not http(s).
        """
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"url must be a mapping of event kind to URL, got: {type(v)}")

        normalized: dict[EventKind, str] = {}
        for key, url in v.items():
            if isinstance(key, EventKind):
                kind = key
            elif isinstance(key, str):
                try:
                    kind = EventKind.from_string(key)
                except ValueError as e:
                    raise ValueError(
                        f"Invalid event kind: {key}. Valid kinds: {[k.value for k in EventKind]}"
                    ) from e
            else:
                raise ValueError(f"Event kind must be a string, got: {type(key)}")

            if not url:
                continue
            if not isinstance(url, str) or not url.startswith(("http://", "https://")):
                raise ValueError(f"Webhook URL must start with http:// or https://, got: {url}")
            normalized[kind] = url
        return normalized

    @field_validator("user", "password", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    # =========================================================================
    # Lookups
    # =========================================================================

    def url_for(self, kind: EventKind | str) -> str | None:
        """Return the webhook URL for an event kind, or None if disabled."""
        if isinstance(kind, str) and not isinstance(kind, EventKind):
            try:
                kind = EventKind.from_string(kind)
            except ValueError:
                return None
        return self.urls.get(kind)

    @property
    def has_auth(self) -> bool:
        """Basic auth is on only when both user and password are set."""
        return self.user is not None and self.password is not None

    def auth_header(self) -> dict[str, str]:
        """Return the Authorization header, or an empty dict without auth."""
        if not self.has_auth:
            return {}
        token = base64.b64encode(f"{self.user}:{self.password}".encode()).decode("ascii")
        return {AUTHORIZATION_HEADER: f"Basic {token}"}

    def enabled_kinds(self) -> list[EventKind]:
        return [kind for kind in EventKind if kind in self.urls]

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_module_opts(cls, opts: dict[str, Any]) -> EventfulConfig:
        """Create a config from the host's module options.

        The options use ``url`` for the URL mapping, alongside ``user`` and
        ``password``. A ``urls`` key is accepted as well.

        Raises:
            ValidationError: If the options are invalid.
        """
        data = dict(opts)
        if "url" in data:
            data["urls"] = data.pop("url")
        return cls.model_validate(data)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_module_opts(self, mask_password: bool = False) -> dict[str, Any]:
        """Convert to the module-options shape used in config files."""
        password = self.password
        if mask_password and password is not None:
            password = "***"
        return {
            "url": {kind.value: url for kind, url in self.urls.items()},
            "user": self.user,
            "password": password,
            "max_queue_size": self.max_queue_size,
            "max_concurrent_posts": self.max_concurrent_posts,
        }

    def to_safe_dict(self) -> dict[str, Any]:
        """Module options with the password masked, for logging and display."""
        return self.to_module_opts(mask_password=True)

    def __repr__(self) -> str:
        """Return a safe string representation (password masked)."""
        kinds = ", ".join(kind.short_name for kind in self.enabled_kinds()) or "none"
        return f"EventfulConfig(kinds=[{kinds}], user={self.user!r}, has_auth={self.has_auth})"


__all__ = [
    "AUTHORIZATION_HEADER",
    "DEFAULT_MAX_CONCURRENT_POSTS",
    "DEFAULT_MAX_QUEUE_SIZE",
    "EventfulConfig",
]
