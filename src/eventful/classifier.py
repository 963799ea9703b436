"""Event classifier - turn host notifications into reportable events.

A single notification produces zero, one or two events:

- An outgoing stanza yields one message event when it is a ``<message/>``,
  nothing otherwise.
- A presence set always yields a presence_set event, plus an online event
  when the host reports exactly one live resource for the user.
- A presence unset always yields a presence_unset event, plus an offline
  event when no resource remains, or the only one listed is the resource
  going away (the host may not have removed it yet).

None of these functions raise on malformed stanzas: missing pieces read as
empty strings and non-message stanzas are ignored. A failing session
query is logged and only costs the derived online/offline event.
"""

from __future__ import annotations

import logging
from typing import Any

from . import stanza as xmlutil
from .events import EventKind, MessageEvent, PresenceEvent
from .host import SessionQuery

logger = logging.getLogger(__name__)


def classify_message(sender: Any, recipient: Any, packet: xmlutil.Stanza) -> MessageEvent | None:
    """Build the message event for an outgoing stanza.

    Args:
        sender: Sender JID; its string form is reported.
        recipient: Recipient JID; its string form is reported.
        packet: The stanza as an element or XML text.

    Returns:
        The message event, or None when the stanza is not a message.
    """
    element = xmlutil.parse(packet)
    if element is None or not isinstance(element.tag, str):
        return None
    if xmlutil.local_name(element.tag) != "message":
        return None

    return MessageEvent(
        from_jid=str(sender),
        to_jid=str(recipient),
        type=xmlutil.get_attr(element, "type"),
        subject=xmlutil.get_child_cdata(element, "subject"),
        body=xmlutil.get_child_cdata(element, "body"),
        thread=xmlutil.get_child_cdata(element, "thread"),
    )


def classify_presence_set(
    user: str,
    server: str,
    resource: str,
    presence: xmlutil.Stanza,
    sessions: SessionQuery,
) -> list[PresenceEvent]:
    """Build the events for a resource setting its presence.

    Args:
        user: Local part of the user's JID.
        server: The user's domain.
        resource: The resource setting presence.
        presence: The presence stanza; it is reported serialized.
        sessions: Host session query used to detect the first connection.

    Returns:
        ``[presence_set]`` or ``[presence_set, online]``.
    """
    event = PresenceEvent(
        kind=EventKind.PRESENCE_SET,
        user=user,
        server=server,
        resource=resource,
        message=xmlutil.to_string(presence),
    )
    events = [event]

    try:
        count = sessions.resource_count(user, server)
    except Exception as e:
        logger.warning("Session query failed for %s@%s, no online check: %s", user, server, e)
        return events

    # First connection, so the user has just come online
    if count == 1:
        events.append(event.derive(EventKind.ONLINE))

    return events


def classify_presence_unset(
    user: str,
    server: str,
    resource: str,
    status: str,
    sessions: SessionQuery,
) -> list[PresenceEvent]:
    """Build the events for a resource unsetting its presence.

    Args:
        user: Local part of the user's JID.
        server: The user's domain.
        resource: The resource going unavailable.
        status: Status text sent with the unavailable presence.
        sessions: Host session query used to detect the last connection.

    Returns:
        ``[presence_unset]`` or ``[presence_unset, offline]``.
    """
    event = PresenceEvent(
        kind=EventKind.PRESENCE_UNSET,
        user=user,
        server=server,
        resource=resource,
        message=status or "",
    )
    events = [event]

    try:
        remaining = list(sessions.user_resources(user, server))
    except Exception as e:
        logger.warning("Session query failed for %s@%s, no offline check: %s", user, server, e)
        return events

    # Empty: the session timed out. [resource]: the user logged this one out.
    if not remaining or remaining == [resource]:
        events.append(event.derive(EventKind.OFFLINE))
    else:
        logger.debug(
            "%s@%s still has %d live resources, no offline event",
            user,
            server,
            len(remaining),
        )

    return events


__all__ = [
    "classify_message",
    "classify_presence_set",
    "classify_presence_unset",
]
