"""Conversion of a raw feed body into the document tree the extractors read.

The tree has a fixed shape:

- the root element is wrapped once: ``{"rss": {...}}``
- child elements are grouped by tag into lists, in document order
- attributes live under ``"$"``; text lives under ``"_"`` when the element
  also has attributes or children
- an element with only text collapses to the string (whitespace included),
  an empty one to ``""``
- qualified names are kept literally: ``"itunes:author"``, ``"xmlns:itunes"``

Namespace processing is off, so a prefix is just part of the name and feeds
that use ``itunes:`` without declaring it still parse.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

# Bandit: parsing handled via defusedxml safe APIs
from xml.sax import InputSource, SAXException  # nosec B406
from xml.sax.handler import ContentHandler  # nosec B406

from defusedxml import DefusedXmlException
from defusedxml.sax import parse as safe_sax_parse

from .config_constants import ATTRIBUTES_KEY, TEXT_KEY
from .exceptions import FeedParseError

logger = logging.getLogger(__name__)


def _finish_node(node: Dict[str, Any], text: str) -> Any:
    if text.strip():
        if not node:
            return text
        node[TEXT_KEY] = text
        return node
    # Whitespace-only text is kept only when the element has nothing else
    return node or text


class _TreeBuilder(ContentHandler):
    """SAX handler that builds the document tree with an explicit element stack."""

    def __init__(self) -> None:
        super().__init__()
        self._open: List[Tuple[Dict[str, Any], List[str]]] = []
        self.root_name: Optional[str] = None
        self.root: Any = None

    def startElement(self, name, attrs):  # noqa: N802
        node: Dict[str, Any] = {}
        if attrs.getLength():
            node[ATTRIBUTES_KEY] = {key: attrs.getValue(key) for key in attrs.getNames()}
        self._open.append((node, []))

    def characters(self, content):
        if self._open:
            self._open[-1][1].append(content)

    def endElement(self, name):  # noqa: N802
        node, text_parts = self._open.pop()
        value = _finish_node(node, "".join(text_parts))
        if self._open:
            self._open[-1][0].setdefault(name, []).append(value)
        else:
            self.root_name, self.root = name, value


def _input_source(feed_text: Union[str, bytes]) -> InputSource:
    source = InputSource()
    if isinstance(feed_text, bytes):
        source.setByteStream(io.BytesIO(feed_text))
    else:
        source.setCharacterStream(io.StringIO(feed_text))
    return source


def parse_feed_xml(feed_text: Union[str, bytes]) -> Dict[str, Any]:
    """Parse a feed body into a document tree.

    Args:
        feed_text: Raw feed body. Bytes are decoded using the document's own
            encoding declaration.

    Returns:
        ``{root_tag: root_node}``

    Raises:
        FeedParseError: If the body is not well-formed XML, or uses DTD entity
            or external-reference constructs that are refused for safety.
    """
    builder = _TreeBuilder()
    try:
        safe_sax_parse(_input_source(feed_text), builder)
    except (SAXException, DefusedXmlException) as exc:
        raise FeedParseError(f"Failed to parse feed XML: {exc}") from exc

    if builder.root_name is None:
        raise FeedParseError("Failed to parse feed XML: document has no root element")

    logger.debug("Parsed feed XML with root <%s>", builder.root_name)
    return {builder.root_name: builder.root}
