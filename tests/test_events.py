"""Tests for webhook event kinds, records and form encoding.

Tests cover:
- EventKind values, short names and string conversion
- Field order of message and presence events
- Percent-encoding rules and decoding back to the original values
"""

from __future__ import annotations

import pytest

from eventful.events import (
    EventKind,
    MessageEvent,
    PresenceEvent,
    decode_form,
    encode_form,
    url_encode,
)

# =============================================================================
# Test: EventKind
# =============================================================================


class TestEventKind:
    """Tests for the EventKind enum."""

    def test_values_are_hook_names(self) -> None:
        """Test that values match the keys used in module options."""
        assert EventKind.MESSAGE.value == "message_hook"
        assert EventKind.PRESENCE_SET.value == "set_presence_hook"
        assert EventKind.PRESENCE_UNSET.value == "unset_presence_hook"
        assert EventKind.ONLINE.value == "online_hook"
        assert EventKind.OFFLINE.value == "offline_hook"

    def test_short_names(self) -> None:
        assert [k.short_name for k in EventKind] == [
            "message",
            "presence_set",
            "presence_unset",
            "online",
            "offline",
        ]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("message_hook", EventKind.MESSAGE),
            ("message", EventKind.MESSAGE),
            ("set_presence_hook", EventKind.PRESENCE_SET),
            ("presence_set", EventKind.PRESENCE_SET),
            ("offline", EventKind.OFFLINE),
        ],
    )
    def test_from_string(self, value: str, expected: EventKind) -> None:
        assert EventKind.from_string(value) is expected

    def test_from_string_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown event kind"):
            EventKind.from_string("presence")

    def test_str_returns_value(self) -> None:
        assert str(EventKind.ONLINE) == "online_hook"


# =============================================================================
# Test: Event Records
# =============================================================================


class TestMessageEvent:
    """Tests for MessageEvent."""

    def test_kind_is_message(self) -> None:
        event = MessageEvent(from_jid="a@x", to_jid="b@x")
        assert event.kind is EventKind.MESSAGE

    def test_fields_in_wire_order(self) -> None:
        event = MessageEvent(
            from_jid="a@x/r",
            to_jid="b@x",
            type="chat",
            subject="s",
            body="b",
            thread="t",
        )

        assert event.fields() == [
            ("from", "a@x/r"),
            ("to", "b@x"),
            ("type", "chat"),
            ("subject", "s"),
            ("body", "b"),
            ("thread", "t"),
        ]

    def test_missing_fields_default_to_empty(self) -> None:
        event = MessageEvent(from_jid="a@x", to_jid="b@x")
        assert event.type == event.subject == event.body == event.thread == ""

    def test_to_form_matches_known_body(self) -> None:
        """Test the alice-to-bob example body."""
        event = MessageEvent(from_jid="alice@example.com", to_jid="bob@example.com", body="hi")

        assert event.to_form() == (
            "from=alice%40example.com&to=bob%40example.com&type=&subject=&body=hi&thread="
        )

    def test_is_frozen(self) -> None:
        event = MessageEvent(from_jid="a@x", to_jid="b@x")
        with pytest.raises(AttributeError):
            event.body = "changed"  # type: ignore[misc]


class TestPresenceEvent:
    """Tests for PresenceEvent."""

    def test_fields_in_wire_order(self) -> None:
        event = PresenceEvent(
            kind=EventKind.PRESENCE_SET,
            user="carol",
            server="example.com",
            resource="phone",
            message="<presence/>",
        )

        assert event.fields() == [
            ("user", "carol"),
            ("server", "example.com"),
            ("resource", "phone"),
            ("message", "<presence/>"),
        ]

    def test_message_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="Not a presence event kind"):
            PresenceEvent(kind=EventKind.MESSAGE, user="u", server="s", resource="r")

    def test_derive_keeps_fields(self) -> None:
        event = PresenceEvent(
            kind=EventKind.PRESENCE_UNSET,
            user="carol",
            server="example.com",
            resource="phone",
            message="bye",
        )

        offline = event.derive(EventKind.OFFLINE)

        assert offline.kind is EventKind.OFFLINE
        assert offline.fields() == event.fields()

    def test_to_form(self) -> None:
        event = PresenceEvent(
            kind=EventKind.ONLINE,
            user="carol",
            server="example.com",
            resource="my phone",
            message="",
        )

        assert event.to_form() == "user=carol&server=example.com&resource=my%20phone&message="


# =============================================================================
# Test: Form Encoding
# =============================================================================


class TestUrlEncode:
    """Tests for percent-encoding of single values."""

    @pytest.mark.parametrize(
        ("raw", "encoded"),
        [
            ("hello world", "hello%20world"),
            ("a&b", "a%26b"),
            ("a=b", "a%3Db"),
            ("100%", "100%25"),
            ("alice@example.com", "alice%40example.com"),
            ("a+b", "a%2Bb"),
            ("é", "%C3%A9"),
            ("Az09_.-", "Az09_.-"),
            ("~user", "%7Euser"),
            ("http://x/y", "http://x/y"),
        ],
    )
    def test_encoding_rules(self, raw: str, encoded: str) -> None:
        assert url_encode(raw) == encoded

    def test_empty_value(self) -> None:
        assert url_encode("") == ""


class TestEncodeDecode:
    """Tests for whole-body encoding and decoding."""

    def test_encode_form_joins_in_order(self) -> None:
        assert encode_form([("b", "2"), ("a", "1")]) == "b=2&a=1"

    def test_decode_reconstructs_tricky_values(self) -> None:
        """Test that decoding a body gives back exactly the original values."""
        event = MessageEvent(
            from_jid="alice@example.com/Home Office",
            to_jid="bob@example.com",
            type="chat",
            subject="50% off & more = fun",
            body="line one\nline two ☃ <b>bold</b> +plus",
            thread="th#1?x=y",
        )

        assert decode_form(event.to_form()) == event.fields()

    def test_decode_empty_body(self) -> None:
        assert decode_form("") == []
