"""Public entry point: fetch, analyze, recommend, validate."""

import logging

from rssfield_analyzer.analysis import DEFAULT_SAMPLE_SIZE, analyze_content
from rssfield_analyzer.exceptions import FeedAnalysisError
from rssfield_analyzer.fetcher import Fetcher, fetch_feed, validate_url
from rssfield_analyzer.mapping import recommend
from rssfield_analyzer.models import AnalysisReport, AnalysisResult, FailureReport
from rssfield_analyzer.quality import check_compatibility, validate_quality

logger = logging.getLogger(__name__)


def build_report(feed_url: str, analysis: AnalysisResult) -> AnalysisReport:
    """Derive mappings, validation and compatibility from an analysis."""
    mappings = recommend(analysis)
    return AnalysisReport(
        feed_url=feed_url,
        analysis=analysis,
        recommended_mappings=mappings,
        validation=validate_quality(analysis),
        compatibility=check_compatibility(analysis, mappings),
    )


def analyze(
    feed_url: str,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    deep_scan: bool = True,
    fetch: Fetcher | None = None,
) -> AnalysisReport | FailureReport:
    """Analyze the feed at a URL and recommend a field mapping.

    Args:
        feed_url: The feed URL to analyze (required).
        sample_size: Number of items to sample, from the top of the feed.
        deep_scan: Capture unrecognized leaf elements as ``auto_*`` fields.
        fetch: Fetch collaborator; defaults to an httpx GET.

    Returns:
        AnalysisReport on success. Validation, fetch and parse failures are
        returned as a FailureReport rather than raised.
    """
    try:
        validate_url(feed_url)
        raw = fetch_feed(feed_url, fetch)
        analysis = analyze_content(raw, sample_size=sample_size, deep_scan=deep_scan)
    except FeedAnalysisError as e:
        logger.warning("Analysis of %s failed: %s", feed_url, e)
        return FailureReport(error=str(e), details=e.details())
    except Exception as e:
        logger.exception("Unexpected error analyzing %s", feed_url)
        return FailureReport(
            error=str(e) or "Failed to analyze feed",
            details={"type": type(e).__name__},
        )

    return build_report(feed_url, analysis)
