"""Recommend which feed field fills each slot of the item schema."""

from rssfield_analyzer.models import MAPPING_SLOTS, AnalysisResult, FieldMapping, Mappings

# slot -> (candidates in priority order, reliability threshold)
SLOT_CANDIDATES: dict[str, tuple[tuple[str, ...], float]] = {
    "title": (("title", "auto_title"), 90),
    "link": (("link", "guid", "id", "auto_link"), 90),
    "description": (
        ("description", "summary", "content", "content_encoded", "auto_description"),
        70,
    ),
    "content": (("content_encoded", "content", "description"), 50),
    "date": (("pubDate", "published", "updated", "dc_date", "auto_pubdate"), 70),
    "author": (("author", "dc_creator", "creator", "auto_author"), 30),
    "category": (("category", "auto_category", "tags"), 30),
}

# (field, image kind, minimum reliability), in precedence order
IMAGE_SOURCES = (
    ("media_content", "media", 50),
    ("media_thumbnail", "media", 50),
    ("enclosure", "enclosure", 50),
    ("extracted_images", "html_extraction", 30),
    ("itunes_image", "itunes", 50),
)


def find_best_field(
    candidates: tuple[str, ...] | list[str],
    reliability: dict[str, float],
    threshold: float,
) -> str | None:
    """Pick a source field from an ordered candidate list.

    The first candidate at or above the threshold wins. Otherwise the
    candidate with the strictly highest reliability is returned (earlier
    candidates win ties), or None if every candidate is at zero.
    """
    for name in candidates:
        if reliability.get(name, 0) >= threshold:
            return name

    best = None
    best_score = 0.0
    for name in candidates:
        score = reliability.get(name, 0)
        if score > best_score:
            best, best_score = name, score
    return best


def _is_image_enclosure(sample) -> bool:
    # Only the first representative sample is checked, not every enclosure.
    if not isinstance(sample, dict):
        return False
    return (sample.get("type") or "").startswith("image")


def find_image_mapping(analysis: AnalysisResult) -> FieldMapping | None:
    """Choose the image source for the feed.

    Sources are tried in precedence order: dedicated media elements, then
    image enclosures, then images scraped from the HTML body, then podcast
    art. The first source above its reliability floor wins, even when a later
    source is more reliable.
    """
    for name, kind, minimum in IMAGE_SOURCES:
        score = analysis.reliability(name)
        if score <= minimum:
            continue
        if kind == "enclosure" and not _is_image_enclosure(analysis.first_sample(name)):
            continue
        return FieldMapping(
            field=name,
            reliability=score,
            sample=analysis.first_sample(name),
            kind=kind,
        )
    return None


def recommend(analysis: AnalysisResult) -> Mappings:
    """Recommend a source field for every schema slot.

    Returns:
        Mapping of slot name to FieldMapping, or None when no candidate field
        was seen at all.
    """
    mappings: Mappings = {}
    for slot in MAPPING_SLOTS:
        if slot == "image":
            mappings[slot] = find_image_mapping(analysis)
            continue

        candidates, threshold = SLOT_CANDIDATES[slot]
        name = find_best_field(candidates, analysis.field_reliability, threshold)
        if name is None:
            mappings[slot] = None
            continue

        mappings[slot] = FieldMapping(
            field=name,
            reliability=analysis.reliability(name),
            sample=analysis.first_sample(name),
        )
    return mappings
