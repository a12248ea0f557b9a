"""Payloads for callers that persist mapping configuration.

Nothing here writes anywhere: these functions only build and merge the
JSON-ready documents a caller stores alongside its feed records.
"""

import copy
from datetime import datetime, timezone

from rssfield_analyzer.exceptions import ValidationError
from rssfield_analyzer.models import (
    MAPPING_SLOTS,
    AnalysisReport,
    FieldMapping,
    FieldValue,
    mappings_to_dict,
)

SCHEMA_VERSION = 1
MAPPING_TYPES = ("auto", "manual", "static")
SAMPLE_PREVIEW_LENGTH = 200

_IMAGE_ATTRIBUTES = {"media": "url", "enclosure": "url", "itunes": "href"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_mapping_record(feed_id: str, report: AnalysisReport) -> dict:
    """The record a caller stores for a feed after analysis."""
    analysis = report.analysis
    return {
        "feed_id": feed_id,
        "mappings": mappings_to_dict(report.recommended_mappings),
        "field_list": list(analysis.unique_fields),
        "reliability_scores": dict(analysis.field_reliability),
        "analyzed_at": report.timestamp.isoformat(),
        "quality_score": report.validation.quality_score,
    }


def _sample_preview(value: FieldValue | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        value = value[0] if value else None
        return value.get("src") if value else None
    if isinstance(value, dict):
        return value.get("url") or value.get("href") or value.get("src")
    return value[:SAMPLE_PREVIEW_LENGTH]


def _available_field(report: AnalysisReport, name: str) -> dict:
    analysis = report.analysis
    sample = analysis.first_sample(name)
    pattern = analysis.field_patterns.get(name)

    entry = {
        "name": name,
        "sample": _sample_preview(sample),
        "type": "string" if isinstance(sample, str) else "structured",
        "reliability": analysis.reliability(name),
        "has_html": bool(pattern and pattern.has_html),
    }
    if isinstance(sample, dict):
        entry["attributes"] = [key for key, value in sample.items() if value is not None]
    return entry


def _auto_mapping(slot: str, mapping: FieldMapping | None) -> dict:
    if mapping is None:
        return {
            "source_field": None,
            "source_attribute": None,
            "mapping_type": "auto",
            "confidence": 0,
        }
    attribute = _IMAGE_ATTRIBUTES.get(mapping.kind) if slot == "image" else None
    return {
        "source_field": mapping.field,
        "source_attribute": attribute,
        "mapping_type": "auto",
        "confidence": mapping.reliability,
    }


def build_mapping_schema(report: AnalysisReport) -> dict:
    """Describe the feed's fields and the recommended mappings as an editable schema."""
    return {
        "version": SCHEMA_VERSION,
        "analyzed_at": report.timestamp.isoformat(),
        "modified_at": None,
        "feed_type": report.analysis.feed_type.value,
        "available_fields": [
            _available_field(report, name) for name in report.analysis.unique_fields
        ],
        "mappings": {
            slot: _auto_mapping(slot, report.recommended_mappings.get(slot))
            for slot in MAPPING_SLOTS
        },
    }


def update_mappings(schema: dict, updates: dict[str, dict]) -> dict:
    """Apply manual or static mapping overrides to a schema.

    Args:
        schema: A schema from build_mapping_schema.
        updates: slot -> mapping with ``mapping_type`` and either
            ``source_field`` (manual) or ``static_value`` (static).

    Returns:
        A new schema with the overrides applied and ``modified_at`` set.

    Raises:
        ValidationError: For unknown slots, mapping types or source fields.
    """
    known_fields = {f["name"] for f in schema.get("available_fields", [])}
    updated = copy.deepcopy(schema)

    for slot, mapping in updates.items():
        if slot not in MAPPING_SLOTS:
            raise ValidationError(f"Unknown mapping slot: {slot}")

        mapping_type = mapping.get("mapping_type", "manual")
        if mapping_type not in MAPPING_TYPES:
            raise ValidationError(f"Unknown mapping type for {slot}: {mapping_type}")

        source_field = mapping.get("source_field")
        if mapping_type == "static":
            if mapping.get("static_value") is None:
                raise ValidationError(f"Static mapping for {slot} needs a static_value")
        elif source_field is not None and source_field not in known_fields:
            raise ValidationError(f"Field '{source_field}' was not found in the feed")

        updated["mappings"][slot] = {
            "source_field": source_field,
            "source_attribute": mapping.get("source_attribute"),
            "mapping_type": mapping_type,
            "confidence": mapping.get("confidence"),
            **({"static_value": mapping["static_value"]} if mapping_type == "static" else {}),
        }

    updated["modified_at"] = _now()
    return updated


def merge_mapping_schema(previous: dict, fresh: dict, preserve_manual: bool = True) -> dict:
    """Combine a re-analysis with a previously stored schema.

    Manual and static mappings survive the re-analysis when preserve_manual
    is set; automatic mappings are always replaced by the fresh ones.

    Returns:
        ``{"schema", "preserved_mappings", "new_fields_found"}``.
    """
    merged = copy.deepcopy(fresh)
    merged["version"] = previous.get("version", SCHEMA_VERSION) + 1
    merged["modified_at"] = previous.get("modified_at")

    preserved = []
    if preserve_manual:
        for slot, mapping in previous.get("mappings", {}).items():
            if mapping.get("mapping_type") in ("manual", "static"):
                merged["mappings"][slot] = copy.deepcopy(mapping)
                preserved.append(slot)

    previous_fields = {f["name"] for f in previous.get("available_fields", [])}
    new_fields = [
        f["name"] for f in fresh.get("available_fields", []) if f["name"] not in previous_fields
    ]

    return {
        "schema": merged,
        "preserved_mappings": preserved if preserve_manual else None,
        "new_fields_found": len(new_fields),
        "new_fields": new_fields,
    }
