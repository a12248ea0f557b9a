"""LangChain tool wrappers around the feed analyzer."""

import json

from langchain_core.tools import tool

from rssfield_analyzer.analyzer import analyze
from rssfield_analyzer.exceptions import MissingMappingError
from rssfield_analyzer.fetcher import Fetcher
from rssfield_analyzer.instructions import generate_parsing_instructions
from rssfield_analyzer.models import FailureReport
from rssfield_analyzer.schema import build_mapping_schema

# Module-level fetch collaborator, None means the default httpx fetch
_fetch: Fetcher | None = None


def set_fetcher(fetch: Fetcher | None) -> None:
    """Set the fetch collaborator used by all tools."""
    global _fetch
    _fetch = fetch


@tool
def analyze_feed(feed_url: str, sample_size: int = 5, deep_scan: bool = True) -> str:
    """Analyze an RSS or Atom feed and recommend how its fields map to
    title, link, description, content, date, image, author and category.

    Args:
        feed_url: The URL of the RSS or Atom feed to analyze.
        sample_size: Number of items to inspect (default 5).
        deep_scan: Whether to capture unrecognized elements as auto_* fields.
    """
    report = analyze(feed_url, sample_size=sample_size, deep_scan=deep_scan, fetch=_fetch)
    if isinstance(report, FailureReport):
        return json.dumps({
            "status": "error",
            "message": report.error,
            "details": report.details,
        })

    return json.dumps({
        "status": "analyzed",
        "feed_type": report.analysis.feed_type.value,
        "item_count": report.analysis.item_count,
        "quality_score": report.validation.quality_score,
        "is_valid": report.validation.is_valid,
        "is_compatible": report.compatibility.is_compatible,
        "schema": build_mapping_schema(report),
        "issues": [f.message for f in report.validation.issues],
        "warnings": [f.message for f in report.validation.warnings],
    })


@tool
def suggest_parsing_instructions(feed_url: str, sample_size: int = 5) -> str:
    """Generate XPath extraction instructions for each mapped field of a feed.

    Args:
        feed_url: The URL of the RSS or Atom feed.
        sample_size: Number of items to inspect (default 5).
    """
    report = analyze(feed_url, sample_size=sample_size, fetch=_fetch)
    if isinstance(report, FailureReport):
        return json.dumps({
            "status": "error",
            "message": report.error,
        })

    try:
        instructions = generate_parsing_instructions(report.recommended_mappings)
    except MissingMappingError as e:
        return json.dumps({
            "status": "error",
            "message": str(e),
            "missing": e.slots,
        })

    return json.dumps({
        "status": "success",
        "instructions": {
            slot: instruction.to_dict() if instruction else None
            for slot, instruction in instructions.items()
        },
    })
