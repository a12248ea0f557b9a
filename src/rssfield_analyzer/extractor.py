"""Field discovery for a single feed item or Atom entry.

Extraction runs in layers, each adding names to the same ordered mapping:

1. the standard RSS/Atom vocabulary, by local name of direct children;
2. ``link`` re-resolved so Atom's ``href`` attribute wins over text;
3. well-known extension elements (content, dc, media, itunes, enclosure),
   flattened to ``prefix_localname``;
4. an optional deep scan that turns every remaining leaf element into an
   ``auto_<tag>`` field (plus ``auto_<tag>_attrs``);
5. ``<img>`` tags found in the richest HTML body, as ``extracted_images``.
"""

import logging
import re

from lxml import etree

from rssfield_analyzer.models import ItemFields

logger = logging.getLogger(__name__)

STANDARD_FIELDS = (
    "title",
    "link",
    "description",
    "pubDate",
    "published",
    "updated",
    "summary",
    "content",
    "author",
    "creator",
    "category",
    "guid",
    "id",
    "comments",
    "source",
)

NAMESPACE_URIS = {
    "atom": "http://www.w3.org/2005/Atom",
    "content": "http://purl.org/rss/1.0/modules/content/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "media": "http://search.yahoo.com/mrss/",
    "itunes": "http://www.itunes.com/dtds/podcast-1.0.dtd",
}

# (field name, prefix, local name) in lookup order
NAMESPACED_FIELDS = (
    ("content_encoded", "content", "encoded"),
    ("dc_creator", "dc", "creator"),
    ("dc_date", "dc", "date"),
    ("media_content", "media", "content"),
    ("media_thumbnail", "media", "thumbnail"),
    ("enclosure", None, "enclosure"),
    ("itunes_image", "itunes", "image"),
    ("itunes_summary", "itunes", "summary"),
    ("itunes_subtitle", "itunes", "subtitle"),
)

# Extension vocabularies whose local names collide with standard fields
# (media:content, itunes:summary, itunes:author, ...).
_EXTENSION_PREFIXES = {"content", "media", "itunes"}

ENCLOSURE_ATTRIBUTES = ("url", "type", "length")
MEDIA_ATTRIBUTES = ("url", "medium", "width", "height", "type")

_IMG_TAG = re.compile(r"""<img[^>]+src=["']([^"']+)["'][^>]*>""", re.IGNORECASE)
_IMG_ALT = re.compile(r"""alt=["']([^"']+)["']""", re.IGNORECASE)
_IMG_WIDTH = re.compile(r"""width=["'](\d+)["']""", re.IGNORECASE)
_IMG_HEIGHT = re.compile(r"""height=["'](\d+)["']""", re.IGNORECASE)


def _local(element: etree._Element) -> str:
    return etree.QName(element).localname


def _namespace(element: etree._Element) -> str | None:
    return etree.QName(element).namespace


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def _in_vocabulary(element: etree._Element, prefix: str) -> bool:
    return element.prefix == prefix or _namespace(element) == NAMESPACE_URIS.get(prefix)


def _is_extension(element: etree._Element) -> bool:
    return any(_in_vocabulary(element, prefix) for prefix in _EXTENSION_PREFIXES)


def _child_elements(item: etree._Element):
    return (child for child in item if isinstance(child.tag, str))


def _find_standard(item: etree._Element, name: str) -> etree._Element | None:
    for child in _child_elements(item):
        if _local(child) == name and not _is_extension(child):
            return child
    return None


def _find_namespaced(item: etree._Element, prefix: str | None, name: str) -> etree._Element | None:
    for element in item.iterdescendants():
        if not isinstance(element.tag, str) or _local(element) != name:
            continue
        if prefix is None or _in_vocabulary(element, prefix):
            return element
    return None


def flat_tag(element: etree._Element) -> str:
    """Tag name with any namespace prefix flattened, e.g. ``dc_creator``."""
    name = _local(element)
    return f"{element.prefix}_{name}" if element.prefix else name


def _attribute_name(element: etree._Element, name: str) -> str:
    if not name.startswith("{"):
        return name
    qname = etree.QName(name)
    for prefix, uri in element.nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _record(element: etree._Element, attributes: tuple[str, ...]) -> dict:
    return {name: element.get(name) for name in attributes}


def _extract_standard(item: etree._Element, fields: ItemFields) -> None:
    for name in STANDARD_FIELDS:
        element = _find_standard(item, name)
        if element is not None:
            text = _text(element)
            if text:
                fields[name] = text


def _extract_link(item: etree._Element, fields: ItemFields) -> None:
    element = _find_standard(item, "link")
    if element is None:
        return

    value = element.get("href") or _text(element)
    if value:
        fields["link"] = value.strip()
    if element.get("rel"):
        fields["link_rel"] = element.get("rel")
    if element.get("type"):
        fields["link_type"] = element.get("type")


def _extract_namespaced(item: etree._Element, fields: ItemFields) -> None:
    for field_name, prefix, name in NAMESPACED_FIELDS:
        element = _find_namespaced(item, prefix, name)
        if element is None:
            continue

        if _local(element) == "enclosure" and prefix is None:
            fields[field_name] = _record(element, ENCLOSURE_ATTRIBUTES)
        elif _in_vocabulary(element, "media"):
            fields[field_name] = _record(element, MEDIA_ATTRIBUTES)
        else:
            value = _text(element) or element.get("url") or element.get("href")
            if value:
                fields[field_name] = value


def _deep_scan(item: etree._Element, fields: ItemFields) -> None:
    for element in item.iterdescendants():
        if not isinstance(element.tag, str) or len(element):
            continue

        tag = flat_tag(element).lower()
        key = f"auto_{tag}"
        if tag in fields or key in fields:
            continue

        text = _text(element)
        if not text:
            continue

        fields[key] = text
        if element.attrib:
            fields[f"{key}_attrs"] = {
                _attribute_name(element, name): value
                for name, value in element.attrib.items()
            }


def extract_images_from_html(html: str) -> list[dict]:
    """Find ``<img>`` tags in an HTML fragment.

    Returns a list of ``{"src", "alt", "width", "height"}`` records in
    document order; width and height are ints or None.
    """
    images = []
    for match in _IMG_TAG.finditer(html):
        tag = match.group(0)
        alt = _IMG_ALT.search(tag)
        width = _IMG_WIDTH.search(tag)
        height = _IMG_HEIGHT.search(tag)
        images.append({
            "src": match.group(1),
            "alt": alt.group(1) if alt else None,
            "width": int(width.group(1)) if width else None,
            "height": int(height.group(1)) if height else None,
        })
    return images


def _extract_images(fields: ItemFields) -> None:
    for name in ("content_encoded", "content", "description"):
        body = fields.get(name)
        if isinstance(body, str) and body:
            images = extract_images_from_html(body)
            if images:
                fields["extracted_images"] = images
            return


def extract_fields(item: etree._Element, deep_scan: bool = True) -> ItemFields:
    """Discover every field present on one item or entry.

    Args:
        item: The ``item``/``entry`` element.
        deep_scan: Also capture unrecognized leaf elements as ``auto_*`` fields.

    Returns:
        Ordered mapping of field name to text or structured value. Fields that
        are missing or empty on this item are absent.
    """
    fields: ItemFields = {}

    _extract_standard(item, fields)
    _extract_link(item, fields)
    _extract_namespaced(item, fields)
    if deep_scan:
        _deep_scan(item, fields)
    _extract_images(fields)

    logger.debug("Extracted %d fields from <%s>", len(fields), _local(item))
    return fields
