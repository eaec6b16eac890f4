"""
Streaming event source for feed documents.

Wraps lxml.etree.iterparse() so the extractor sees a flat sequence of
start/end events with namespace-qualified tag names, followed by a single
end-of-document sentinel. Syntax errors surface as FeedParsingError with the
position reported by libxml2.
"""

import io
import logging
import re

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from lxml import etree

from ..exceptions import FeedParsingError


START = "start"
END = "end"
EOF = "eof"

ATOM_NS = "http://www.w3.org/2005/Atom"
YOUTUBE_NS = "http://www.youtube.com/xml/schemas/2015"
MEDIA_NS = "http://search.yahoo.com/mrss/"

# Namespace URI -> prefix used in qualified tag names. Atom is the default
# namespace of a YouTube feed, so its elements keep their bare local name.
NAMESPACE_PREFIXES = {
    ATOM_NS: "",
    YOUTUBE_NS: "yt",
    MEDIA_NS: "media",
}

# libxml2 messages already end with the position carried on the exception
_TRAILING_POSITION = re.compile(r",\s*line \d+,\s*column \d+\s*$")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedEvent:
    """
    One structural event from a feed document.

    Attributes:
        kind: START, END or EOF
        tag: Qualified tag name (e.g. "entry", "yt:videoId", "media:group")
        element: Underlying lxml element (None for EOF)
    """
    kind: str
    tag: Optional[str] = None
    element: Any = None


def qualified_tag(tag: Any) -> str:
    """
    Convert an lxml tag into the qualified name used for dispatch.

    Args:
        tag: Raw tag, usually Clark notation ("{uri}local") or a bare name

    Returns:
        "local" for Atom or un-namespaced elements, "yt:local" / "media:local"
        for the YouTube and Media RSS namespaces, Clark notation otherwise.
        Non-string tags (entities, processing instructions) map to "".
    """
    if not isinstance(tag, str):
        return ""
    if not tag.startswith("{"):
        return tag
    end_ns = tag.find("}")
    if end_ns < 0:
        return tag
    uri, local = tag[1:end_ns], tag[end_ns + 1:]
    prefix = NAMESPACE_PREFIXES.get(uri)
    if prefix is None:
        return tag
    return f"{prefix}:{local}" if prefix else local


def element_text(element: Any) -> str:
    """Return the element's inner text (descendant text joined), stripped."""
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def clean_xml_bytes(data: bytes) -> bytes:
    """
    Strip a UTF-8 byte order mark and leading whitespace/control bytes.

    libxml2 rejects an XML declaration that is not the very first thing in
    the document, which is common in feeds saved by hand.
    """
    if data.startswith(b"\xef\xbb\xbf"):
        data = data[3:]
        logger.debug("Removed UTF-8 BOM from feed content")
    start = 0
    while start < len(data) and data[start] <= 32:
        start += 1
    return data[start:]


def iter_events(data: bytes, source_path: Optional[str] = None) -> Iterator[FeedEvent]:
    """
    Yield structural events for a feed document.

    Args:
        data: Raw document bytes
        source_path: Optional path used in error reports

    Yields:
        FeedEvent for every element open and close, then one EOF event

    Raises:
        FeedParsingError: If libxml2 reports a syntax error (including a
                          document truncated before its closing tags)
    """
    cleaned = clean_xml_bytes(data or b"")
    if not cleaned:
        raise FeedParsingError("Feed document is empty", source_path)

    context = etree.iterparse(
        io.BytesIO(cleaned),
        events=(START, END),
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )
    try:
        for event, element in context:
            yield FeedEvent(event, qualified_tag(element.tag), element)
    except etree.XMLSyntaxError as e:
        line = getattr(e, "lineno", None)
        column = getattr(e, "offset", None)
        message = _TRAILING_POSITION.sub("", e.msg or "")
        raise FeedParsingError(f"XML syntax error: {message}", source_path, line, column) from e

    yield FeedEvent(EOF)
