"""Feed-wide structure analysis: sampling, reliability, and patterns."""

import logging
from dataclasses import dataclass

from rssfield_analyzer.exceptions import ValidationError
from rssfield_analyzer.extractor import extract_fields
from rssfield_analyzer.feed_parser import (
    detect_feed_type,
    detect_feed_version,
    extract_channel_info,
    extract_namespaces,
    find_items,
    parse_document,
)
from rssfield_analyzer.models import (
    AnalysisResult,
    FieldPattern,
    FieldValue,
    ItemAnalysis,
    ItemFields,
)
from rssfield_analyzer.patterns import observe

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 5
MAX_SAMPLES_PER_FIELD = 3


@dataclass
class FieldStatistics:
    """Occurrence-based statistics over a set of sampled items."""

    unique_fields: list[str]
    reliability: dict[str, float]
    samples: dict[str, list[FieldValue]]
    patterns: dict[str, FieldPattern]


def aggregate_fields(items: list[ItemFields]) -> FieldStatistics:
    """Compute reliability, representative samples and patterns per field.

    Reliability is the share of sampled items carrying the field, in percent.
    Samples are the first three non-empty values in item order.
    """
    occurrences: dict[str, int] = {}
    samples: dict[str, list[FieldValue]] = {}
    patterns: dict[str, FieldPattern] = {}

    for fields in items:
        for name, value in fields.items():
            occurrences[name] = occurrences.get(name, 0) + 1
            kept = samples.setdefault(name, [])
            if value and len(kept) < MAX_SAMPLES_PER_FIELD:
                kept.append(value)
            if value:
                patterns[name] = observe(value, patterns.get(name))

    total = len(items)
    reliability = {
        name: count / total * 100 for name, count in occurrences.items()
    }

    return FieldStatistics(
        unique_fields=list(occurrences),
        reliability=reliability,
        samples=samples,
        patterns=patterns,
    )


def analyze_content(
    raw: str | bytes,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    deep_scan: bool = True,
) -> AnalysisResult:
    """Analyze the structure of raw feed content.

    Args:
        raw: Feed document as text or bytes.
        sample_size: Maximum number of items to inspect, from the top.
        deep_scan: Capture unrecognized leaf elements as ``auto_*`` fields.

    Returns:
        AnalysisResult describing every field seen in the sampled items.

    Raises:
        ValidationError: If sample_size is below 1.
        ParseError: If the content is not well-formed markup.
    """
    if sample_size < 1:
        raise ValidationError("sample_size must be at least 1")

    document = parse_document(raw)
    feed_type = detect_feed_type(document.root)
    nodes = find_items(document.root, feed_type)

    sampled = nodes[:sample_size]
    item_fields = [extract_fields(node, deep_scan) for node in sampled]
    stats = aggregate_fields(item_fields)

    logger.info(
        "Analyzed %s feed: %d items, %d sampled, %d fields",
        feed_type.value, len(nodes), len(sampled), len(stats.unique_fields),
    )

    return AnalysisResult(
        feed_type=feed_type,
        feed_version=detect_feed_version(document.root, feed_type),
        channel_info=extract_channel_info(document, feed_type),
        item_count=len(nodes),
        samples_analyzed=len(sampled),
        unique_fields=stats.unique_fields,
        field_reliability=stats.reliability,
        field_samples=stats.samples,
        field_patterns=stats.patterns,
        items=[ItemAnalysis(index=i, fields=f) for i, f in enumerate(item_fields)],
        namespaces=extract_namespaces(document.root),
        encoding=document.encoding,
    )
