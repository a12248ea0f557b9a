"""Incremental classification of the values seen for a field."""

import re
from dataclasses import replace

from dateutil import parser as date_parser

from rssfield_analyzer.models import FieldPattern, FieldValue

_HTML_TAG = re.compile(r"<[^>]+>")
_URL = re.compile(r"https?://\S+")


def looks_like_date(value: str) -> bool:
    """True if dateutil can read the whole string as a date."""
    if not value.strip():
        return False
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def observe(value: FieldValue, prior: FieldPattern | None = None) -> FieldPattern:
    """Fold one observed value into a field pattern.

    The prior pattern is left untouched; a new pattern is returned. Average
    length is a running mean over text values only, so it equals the
    arithmetic mean regardless of observation order.
    """
    pattern = prior or FieldPattern()
    types = set(pattern.types)
    formats = set(pattern.formats)
    has_html, has_url, has_date = pattern.has_html, pattern.has_url, pattern.has_date
    avg_length, text_samples = pattern.avg_length, pattern.text_samples

    if isinstance(value, str):
        types.add("string")
        if _HTML_TAG.search(value):
            has_html = True
            formats.add("html")
        if _URL.search(value):
            has_url = True
            formats.add("url")
        if looks_like_date(value):
            has_date = True
            formats.add("date")
        avg_length = (avg_length * text_samples + len(value)) / (text_samples + 1)
        text_samples += 1
    else:
        types.add("object")
        formats.add("structured")

    return replace(
        pattern,
        types=types,
        formats=formats,
        has_html=has_html,
        has_url=has_url,
        has_date=has_date,
        avg_length=avg_length,
        samples=pattern.samples + 1,
        text_samples=text_samples,
    )
