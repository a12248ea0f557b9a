"""Data quality validation and downstream compatibility checks."""

from rssfield_analyzer.mapping import recommend
from rssfield_analyzer.models import (
    AnalysisResult,
    CompatibilityReport,
    FeedType,
    Finding,
    Mappings,
    ProcessingNote,
    Recommendation,
    ValidationReport,
)

REQUIRED_FIELDS = ("title", "link", "description")
DATE_FIELDS = ("pubDate", "published", "updated", "dc_date")
IMAGE_FIELDS = ("media_content", "media_thumbnail", "enclosure", "extracted_images")
SUPPORTED_NAMESPACES = ("dc", "content", "media", "atom")
HTML_EXPECTED_FIELDS = ("content", "description")

MIN_ITEMS = 5
REQUIRED_RELIABILITY = 50
DATE_RELIABILITY = 70
IMAGE_RELIABILITY = 30
WEAK_MAPPING_RELIABILITY = 50

ISSUE_PENALTY = 20
WARNING_PENALTY = 5


def calculate_quality_score(issues: list, warnings: list) -> int:
    """100, minus 20 per issue and 5 per warning, clamped to [0, 100]."""
    score = 100 - len(issues) * ISSUE_PENALTY - len(warnings) * WARNING_PENALTY
    return max(0, min(100, score))


def _is_utf8(encoding: str) -> bool:
    return encoding.upper().replace("_", "-") in ("UTF-8", "UTF8")


def validate_quality(analysis: AnalysisResult) -> ValidationReport:
    """Check an analyzed feed for missing, unreliable, or suspicious data.

    Every rule is evaluated; issues make the feed invalid, warnings and
    suggestions only lower the score or inform.
    """
    issues: list[Finding] = []
    warnings: list[Finding] = []
    suggestions: list[Finding] = []

    if analysis.item_count == 0:
        issues.append(Finding("error", "Feed contains no items", "items"))
    elif analysis.item_count < MIN_ITEMS:
        warnings.append(Finding(
            "warning", f"Feed only contains {analysis.item_count} items", "items",
        ))

    for name in REQUIRED_FIELDS:
        reliability = analysis.reliability(name)
        if reliability < REQUIRED_RELIABILITY:
            issues.append(Finding(
                "error", f"Missing or unreliable field: {name}", name, reliability,
            ))

    if not any(analysis.reliability(name) > DATE_RELIABILITY for name in DATE_FIELDS):
        warnings.append(Finding("warning", "No reliable date field found", "date"))

    if not any(analysis.reliability(name) > IMAGE_RELIABILITY for name in IMAGE_FIELDS):
        suggestions.append(Finding("info", "No image sources found in feed", "image"))

    title_pattern = analysis.field_patterns.get("title")
    if title_pattern and title_pattern.has_html:
        warnings.append(Finding("warning", "Title field contains HTML markup", "title"))

    if not _is_utf8(analysis.encoding):
        warnings.append(Finding(
            "warning",
            f"Feed uses {analysis.encoding} encoding instead of UTF-8",
            "encoding",
        ))

    return ValidationReport(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        suggestions=suggestions,
        quality_score=calculate_quality_score(issues, warnings),
    )


def check_compatibility(
    analysis: AnalysisResult,
    mappings: Mappings | None = None,
) -> CompatibilityReport:
    """Flag what a downstream ingester must handle specially.

    Args:
        analysis: The analyzed feed.
        mappings: Recommended mappings; computed from the analysis if omitted.
    """
    report = CompatibilityReport()

    if analysis.feed_type is FeedType.UNKNOWN:
        report.is_compatible = False
        report.requires_processing.append(ProcessingNote(
            issue="Unknown feed type",
            solution="Manual parsing may be required",
        ))

    for prefix in analysis.namespaces:
        if prefix not in SUPPORTED_NAMESPACES:
            report.recommendations.append(Recommendation(
                message=f"Custom namespace '{prefix}' detected - may need special handling",
                namespace=prefix,
            ))

    if mappings is None:
        mappings = recommend(analysis)
    for slot, mapping in mappings.items():
        if mapping is None or mapping.reliability < WEAK_MAPPING_RELIABILITY:
            report.requires_processing.append(ProcessingNote(
                issue=f"Weak mapping for {slot}",
                solution=f"Consider fallback processing for {slot}",
            ))

    for name, pattern in analysis.field_patterns.items():
        if pattern.has_html and name not in HTML_EXPECTED_FIELDS:
            report.recommendations.append(Recommendation(
                message="Contains HTML - consider stripping tags",
                field=name,
            ))

    return report
