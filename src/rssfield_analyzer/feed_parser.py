"""Structural parsing and dialect detection for RSS/Atom documents."""

import io
import logging
import re
from dataclasses import dataclass

import feedparser
from lxml import etree

from rssfield_analyzer.exceptions import ParseError
from rssfield_analyzer.models import FeedType

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "UTF-8"
DEFAULT_RSS_VERSION = "2.0"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_DECLARED_ENCODING = re.compile(r"""encoding\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


@dataclass
class ParsedDocument:
    """A well-formed feed document, valid for one analysis call."""

    root: etree._Element
    encoding: str
    content: bytes


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        recover=False,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def parse_document(raw: str | bytes) -> ParsedDocument:
    """Parse raw feed content into a document tree.

    Args:
        raw: Feed content as text or bytes.

    Returns:
        ParsedDocument with the root element and the declared encoding.

    Raises:
        ParseError: If the content is empty or not well-formed markup.
    """
    if raw is None or not raw.strip():
        raise ParseError("Invalid XML: document is empty", diagnostic="empty document")

    if isinstance(raw, str):
        text = raw.lstrip("\ufeff \t\r\n")
        declaration = _XML_DECLARATION.match(text)
        declared = None
        if declaration:
            found = _DECLARED_ENCODING.search(declaration.group(0))
            declared = found.group(1) if found else None
            # lxml refuses unicode input that still declares an encoding
            text = text[declaration.end():]
        content = text.encode("utf-8")
    else:
        content = raw.lstrip(b" \t\r\n")
        declared = None

    try:
        root = etree.fromstring(content, parser=_make_parser())
    except etree.XMLSyntaxError as e:
        logger.warning("Feed content is not well-formed: %s", e)
        raise ParseError(f"Invalid XML: {e}", diagnostic=str(e)) from e

    if declared is None:
        declared = root.getroottree().docinfo.encoding
    encoding = (declared or DEFAULT_ENCODING).upper()

    return ParsedDocument(root=root, encoding=encoding, content=content)


def local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def detect_feed_type(root: etree._Element) -> FeedType:
    """Classify a document by its root element. Never raises."""
    name = local_name(root)
    if name == "rss":
        return FeedType.RSS2
    if name == "feed":
        return FeedType.ATOM
    if name == "RDF":
        return FeedType.RSS1
    return FeedType.UNKNOWN


def detect_feed_version(root: etree._Element, feed_type: FeedType) -> str | None:
    """Declared RSS version, e.g. "2.0" or "0.91"."""
    if feed_type is FeedType.RSS2:
        return root.get("version") or DEFAULT_RSS_VERSION
    if feed_type is FeedType.RSS1:
        return "1.0"
    return None


def find_items(root: etree._Element, feed_type: FeedType) -> list[etree._Element]:
    """All item (or Atom entry) elements in document order."""
    return list(root.iter("{*}" + feed_type.item_tag))


def extract_namespaces(root: etree._Element) -> dict[str, str]:
    """Prefixed namespace declarations on the root element."""
    return {prefix: uri for prefix, uri in root.nsmap.items() if prefix}


def extract_channel_info(document: ParsedDocument, feed_type: FeedType) -> dict[str, str | None]:
    """Read channel/feed metadata with feedparser.

    Atom feeds report title, subtitle, updated, id and link; RSS feeds report
    title, description, link, language and their build/publish dates.
    """
    parsed = feedparser.parse(io.BytesIO(document.content))
    feed = parsed.feed

    if feed_type is FeedType.ATOM:
        keys = ("title", "subtitle", "updated", "id", "link")
    else:
        keys = ("title", "description", "link", "language", "updated", "published")

    info: dict[str, str | None] = {}
    for key in keys:
        value = feed.get(key)
        if isinstance(value, str) and value.strip():
            info[key] = value.strip()
    return info
