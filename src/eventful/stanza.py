"""XML stanza helpers.

Stanzas arrive from the host either as parsed ``ElementTree`` elements or as
their serialized text. These helpers read them without ever raising on an
unexpected shape: missing attributes and children read as empty strings.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)

Stanza = ET.Element | str | bytes


def parse(stanza: Stanza) -> ET.Element | None:
    """Return the stanza as an element, or None if it cannot be parsed."""
    if isinstance(stanza, ET.Element):
        return stanza
    if not isinstance(stanza, str | bytes):
        logger.debug("Ignoring stanza of unsupported type %s", type(stanza).__name__)
        return None
    try:
        return ET.fromstring(stanza)
    except ET.ParseError as e:
        logger.debug("Ignoring unparseable stanza: %s", e)
        return None


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    if tag.startswith("{"):
        return tag.rpartition("}")[2]
    return tag


def get_attr(element: ET.Element, name: str) -> str:
    return element.get(name, "")


def find_child(element: ET.Element, name: str) -> ET.Element | None:
    """Return the first direct child with the given local name."""
    for child in element:
        if isinstance(child.tag, str) and local_name(child.tag) == name:
            return child
    return None


def get_cdata(element: ET.Element) -> str:
    """Return the character data directly inside an element.

    Text of nested elements is skipped; text following them (their tails) is
    kept, so ``<body>a<b>x</b>c</body>`` reads as ``"ac"``.
    """
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts)


def get_child_cdata(element: ET.Element, name: str) -> str:
    """Return the character data of a direct child, or "" if it is missing."""
    child = find_child(element, name)
    if child is None:
        return ""
    return get_cdata(child)


def to_string(stanza: Stanza) -> str:
    """Serialize a stanza to text.

    Text input is returned unchanged (bytes are decoded as UTF-8).
    """
    if isinstance(stanza, ET.Element):
        return ET.tostring(stanza, encoding="unicode")
    if isinstance(stanza, bytes):
        return stanza.decode("utf-8", errors="replace")
    return str(stanza)
