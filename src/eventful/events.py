"""Webhook event kinds and event data structures.

This module defines the event kinds that can be posted to webhooks and the
records that carry their fields. Events follow a consistent pattern with:

- Event kind enum whose values double as the configuration keys
- One record per field set (message events, presence events)
- Form encoding in a fixed field order per event kind

Supported Event Kinds:
    - message_hook: A message stanza was sent by a local user
    - set_presence_hook: A resource set its presence
    - unset_presence_hook: A resource went unavailable
    - online_hook: The user's first resource came online
    - offline_hook: The user's last resource went away

Example:
    >>> from eventful.events import MessageEvent
    >>> event = MessageEvent(from_jid="alice@example.com", to_jid="bob@example.com", body="hi")
    >>> event.to_form()
    'from=alice%40example.com&to=bob%40example.com&type=&subject=&body=hi&thread='
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, unquote

# Characters left unescaped besides ASCII letters, digits and "_.-"
FORM_SAFE_CHARS = "/:"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# =============================================================================
# Event Kind Enum
# =============================================================================


class EventKind(str, Enum):
    """Webhook event kinds.

    The value of each member is the key used for its URL in the module
    options, the short name is the spelling used on the command line and in
    environment variables.

    Attributes:
        MESSAGE: A message stanza sent by a local user.
        PRESENCE_SET: A resource set its presence.
        PRESENCE_UNSET: A resource unset its presence.
        ONLINE: Derived from PRESENCE_SET when it is the user's only resource.
        OFFLINE: Derived from PRESENCE_UNSET when no other resource remains.
    """

    MESSAGE = "message_hook"
    PRESENCE_SET = "set_presence_hook"
    PRESENCE_UNSET = "unset_presence_hook"
    ONLINE = "online_hook"
    OFFLINE = "offline_hook"

    @property
    def short_name(self) -> str:
        """Return the lowercase member name (e.g. "presence_set")."""
        return self.name.lower()

    @classmethod
    def from_string(cls, value: str) -> EventKind:
        """Convert a string to an EventKind.

        Args:
            value: Either the hook value ("set_presence_hook") or the short
                name ("presence_set").

        Returns:
            The corresponding EventKind enum value.

        Raises:
            ValueError: If the string doesn't match any event kind.
        """
        for kind in cls:
            if value in (kind.value, kind.short_name):
                return kind
        raise ValueError(f"Unknown event kind: {value}")

    def __str__(self) -> str:
        """Return the event kind string value."""
        return self.value


PRESENCE_KINDS = frozenset(
    {EventKind.PRESENCE_SET, EventKind.PRESENCE_UNSET, EventKind.ONLINE, EventKind.OFFLINE}
)


# =============================================================================
# Form Encoding
# =============================================================================


def url_encode(value: str) -> str:
    """Percent-encode a single form value.

    Non-ASCII characters are encoded as UTF-8 bytes. Space becomes ``%20``
    and ``~`` becomes ``%7E`` (quote() leaves it alone).
    """
    return quote(value, safe=FORM_SAFE_CHARS).replace("~", "%7E")


def encode_form(fields: list[tuple[str, str]]) -> str:
    """Join ordered (name, value) pairs into a form-urlencoded body."""
    return "&".join(f"{name}={url_encode(value)}" for name, value in fields)


def decode_form(body: str) -> list[tuple[str, str]]:
    """Split a body produced by encode_form back into (name, value) pairs."""
    if not body:
        return []
    pairs = []
    for part in body.split("&"):
        name, _, value = part.partition("=")
        pairs.append((unquote(name), unquote(value)))
    return pairs


# =============================================================================
# Event Records
# =============================================================================


@dataclass(frozen=True)
class MessageEvent:
    """A message stanza sent by a local user.

    Attributes:
        from_jid: Full JID of the sender.
        to_jid: Full JID of the recipient.
        type: The stanza's type attribute ("" when missing).
        subject: Text of the subject child ("" when missing).
        body: Text of the body child ("" when missing).
        thread: Text of the thread child ("" when missing).
    """

    from_jid: str
    to_jid: str
    type: str = ""
    subject: str = ""
    body: str = ""
    thread: str = ""

    @property
    def kind(self) -> EventKind:
        return EventKind.MESSAGE

    def fields(self) -> list[tuple[str, str]]:
        """Return the form fields in wire order."""
        return [
            ("from", self.from_jid),
            ("to", self.to_jid),
            ("type", self.type),
            ("subject", self.subject),
            ("body", self.body),
            ("thread", self.thread),
        ]

    def to_form(self) -> str:
        return encode_form(self.fields())


@dataclass(frozen=True)
class PresenceEvent:
    """A presence change for one resource of a local user.

    Attributes:
        kind: One of PRESENCE_SET, ONLINE, PRESENCE_UNSET or OFFLINE.
        user: Local part of the user's JID.
        server: Domain of the user's JID.
        resource: The resource that changed.
        message: Serialized presence stanza, or the status text on unset.
    """

    kind: EventKind
    user: str
    server: str
    resource: str
    message: str = ""

    def __post_init__(self) -> None:
        """Validate the event kind."""
        if self.kind not in PRESENCE_KINDS:
            raise ValueError(f"Not a presence event kind: {self.kind}")

    def fields(self) -> list[tuple[str, str]]:
        """Return the form fields in wire order."""
        return [
            ("user", self.user),
            ("server", self.server),
            ("resource", self.resource),
            ("message", self.message),
        ]

    def to_form(self) -> str:
        return encode_form(self.fields())

    def derive(self, kind: EventKind) -> PresenceEvent:
        """Return a copy of this event with another kind and the same fields."""
        return PresenceEvent(
            kind=kind,
            user=self.user,
            server=self.server,
            resource=self.resource,
            message=self.message,
        )


WebhookEvent = MessageEvent | PresenceEvent


__all__ = [
    "EventKind",
    "FORM_CONTENT_TYPE",
    "MessageEvent",
    "PresenceEvent",
    "WebhookEvent",
    "decode_form",
    "encode_form",
    "url_encode",
]
