"""Data models for RSS field analysis."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

# A field value is either text or a structured record: an enclosure/media
# attribute record, an attribute mapping, or a list of image records.
StructuredValue = dict | list[dict]
FieldValue = str | StructuredValue
ItemFields = dict[str, FieldValue]

MAPPING_SLOTS = (
    "title",
    "link",
    "description",
    "content",
    "date",
    "image",
    "author",
    "category",
)


class FeedType(str, Enum):
    """Feed dialect, detected from the document root."""

    RSS1 = "rss1.0"
    RSS2 = "rss2.0"
    ATOM = "atom"
    UNKNOWN = "unknown"

    @property
    def item_tag(self) -> str:
        return "entry" if self is FeedType.ATOM else "item"


@dataclass
class FieldPattern:
    """Running summary of the values observed for one field."""

    types: set[str] = field(default_factory=set)
    formats: set[str] = field(default_factory=set)
    has_html: bool = False
    has_url: bool = False
    has_date: bool = False
    avg_length: float = 0.0
    samples: int = 0
    text_samples: int = 0

    def to_dict(self) -> dict:
        return {
            "types": sorted(self.types),
            "formats": sorted(self.formats),
            "has_html": self.has_html,
            "has_url": self.has_url,
            "has_date": self.has_date,
            "avg_length": self.avg_length,
            "samples": self.samples,
        }


@dataclass(frozen=True)
class ItemAnalysis:
    """Fields discovered on one sampled item."""

    index: int
    fields: ItemFields

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "fields": self.fields,
            "field_count": self.field_count,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Structure of a feed as seen across its sampled items."""

    feed_type: FeedType
    channel_info: dict[str, str | None]
    item_count: int
    samples_analyzed: int
    unique_fields: list[str]
    field_reliability: dict[str, float]
    field_samples: dict[str, list[FieldValue]]
    field_patterns: dict[str, FieldPattern]
    items: list[ItemAnalysis]
    namespaces: dict[str, str]
    encoding: str = "UTF-8"
    feed_version: str | None = None

    def reliability(self, field_name: str) -> float:
        """Reliability of a field, 0 when it was never seen."""
        return self.field_reliability.get(field_name, 0.0)

    def first_sample(self, field_name: str) -> FieldValue | None:
        samples = self.field_samples.get(field_name)
        return samples[0] if samples else None

    def to_dict(self) -> dict:
        return {
            "feed_type": self.feed_type.value,
            "feed_version": self.feed_version,
            "channel_info": self.channel_info,
            "item_count": self.item_count,
            "samples_analyzed": self.samples_analyzed,
            "unique_fields": self.unique_fields,
            "field_reliability": self.field_reliability,
            "field_samples": self.field_samples,
            "field_patterns": {
                name: pattern.to_dict() for name, pattern in self.field_patterns.items()
            },
            "items": [item.to_dict() for item in self.items],
            "namespaces": self.namespaces,
            "encoding": self.encoding,
        }


@dataclass(frozen=True)
class FieldMapping:
    """Recommended source field for one target slot."""

    field: str
    reliability: float
    sample: FieldValue | None = None
    kind: str | None = None

    def to_dict(self) -> dict:
        data = {
            "field": self.field,
            "reliability": self.reliability,
            "sample": self.sample,
        }
        if self.kind:
            data["kind"] = self.kind
        return data


Mappings = dict[str, FieldMapping | None]


def mappings_to_dict(mappings: Mappings) -> dict:
    return {
        slot: mapping.to_dict() if mapping else None
        for slot, mapping in mappings.items()
    }


@dataclass(frozen=True)
class Finding:
    """One validation issue, warning, or suggestion."""

    level: str
    message: str
    field: str
    reliability: float | None = None

    def to_dict(self) -> dict:
        data = {"level": self.level, "message": self.message, "field": self.field}
        if self.reliability is not None:
            data["reliability"] = self.reliability
        return data


@dataclass
class ValidationReport:
    """Data quality verdict for an analyzed feed."""

    is_valid: bool
    issues: list[Finding]
    warnings: list[Finding]
    suggestions: list[Finding]
    quality_score: int

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "issues": [f.to_dict() for f in self.issues],
            "warnings": [f.to_dict() for f in self.warnings],
            "suggestions": [f.to_dict() for f in self.suggestions],
            "quality_score": self.quality_score,
        }


@dataclass(frozen=True)
class ProcessingNote:
    issue: str
    solution: str

    def to_dict(self) -> dict:
        return {"issue": self.issue, "solution": self.solution}


@dataclass(frozen=True)
class Recommendation:
    message: str
    field: str | None = None
    namespace: str | None = None

    def to_dict(self) -> dict:
        data = {"message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.namespace is not None:
            data["namespace"] = self.namespace
        return data


@dataclass
class CompatibilityReport:
    """What a downstream ingester has to handle specially for this feed."""

    is_compatible: bool = True
    requires_processing: list[ProcessingNote] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_compatible": self.is_compatible,
            "requires_processing": [n.to_dict() for n in self.requires_processing],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class AnalysisReport:
    """Successful result of analyzing a feed URL."""

    feed_url: str
    analysis: AnalysisResult
    recommended_mappings: Mappings
    validation: ValidationReport
    compatibility: CompatibilityReport
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    success: bool = True

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "feed_url": self.feed_url,
            "analysis": self.analysis.to_dict(),
            "recommended_mappings": mappings_to_dict(self.recommended_mappings),
            "validation": self.validation.to_dict(),
            "compatibility": self.compatibility.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class FailureReport:
    """Result of an analysis that was aborted by an error."""

    error: str
    details: dict | None = None
    success: bool = False

    def to_dict(self) -> dict:
        return {"success": self.success, "error": self.error, "details": self.details}
