"""Tests for feed-wide aggregation and structure analysis."""

import pytest

from rssfield_analyzer.analysis import aggregate_fields, analyze_content
from rssfield_analyzer.exceptions import ParseError, ValidationError
from rssfield_analyzer.models import FeedType


class TestAggregateFields:
    def test_reliability_percentages(self):
        stats = aggregate_fields([
            {"title": "a", "link": "x"},
            {"title": "b"},
            {"title": "c", "link": "y"},
            {"title": "d"},
        ])
        assert stats.reliability == {"title": 100, "link": 50}
        assert stats.unique_fields == ["title", "link"]

    def test_keeps_first_three_samples_in_item_order(self):
        stats = aggregate_fields([{"title": t} for t in ["one", "two", "three", "four"]])
        assert stats.samples["title"] == ["one", "two", "three"]

    def test_patterns_per_field(self):
        stats = aggregate_fields([{"title": "<b>x</b>"}, {"title": "y"}])
        assert stats.patterns["title"].has_html
        assert stats.patterns["title"].samples == 2


class TestAnalyzeContent:
    def test_rich_rss(self, sample_rich_rss_xml):
        analysis = analyze_content(sample_rich_rss_xml)
        assert analysis.feed_type is FeedType.RSS2
        assert analysis.feed_version == "2.0"
        assert analysis.item_count == 4
        assert analysis.samples_analyzed == 4
        assert analysis.field_reliability["title"] == 100
        assert analysis.field_reliability["media_content"] == 75
        assert analysis.field_reliability["category"] == 50
        assert analysis.field_reliability["extracted_images"] == 25
        assert analysis.channel_info["title"] == "Civic News"
        assert set(analysis.namespaces) == {"content", "dc", "media"}
        assert analysis.encoding == "UTF-8"

    def test_never_over_samples(self, sample_rich_rss_xml):
        analysis = analyze_content(sample_rich_rss_xml, sample_size=50)
        assert analysis.samples_analyzed == analysis.item_count == 4
        assert len(analysis.items) == 4

    def test_sample_size_limits_items(self, sample_rich_rss_xml):
        analysis = analyze_content(sample_rich_rss_xml, sample_size=2)
        assert analysis.item_count == 4
        assert analysis.samples_analyzed == 2
        assert analysis.field_reliability["media_content"] == 100

    def test_reliability_bounds(self, sample_rich_rss_xml, sample_podcast_xml, sample_custom_xml):
        for xml in (sample_rich_rss_xml, sample_podcast_xml, sample_custom_xml):
            analysis = analyze_content(xml)
            assert all(0 <= value <= 100 for value in analysis.field_reliability.values())

    def test_samples_capped_at_three(self, sample_rich_rss_xml):
        analysis = analyze_content(sample_rich_rss_xml)
        assert analysis.field_samples["title"] == [
            "Council approves budget",
            "Library hours extended",
            "Road repairs scheduled",
        ]

    def test_item_analysis(self, sample_rss_xml):
        analysis = analyze_content(sample_rss_xml, deep_scan=False)
        assert [item.index for item in analysis.items] == [0, 1]
        assert analysis.items[0].field_count == 5

    def test_empty_feed_is_not_an_error(self, sample_empty_rss_xml):
        analysis = analyze_content(sample_empty_rss_xml)
        assert analysis.item_count == 0
        assert analysis.samples_analyzed == 0
        assert analysis.field_reliability == {}

    def test_unknown_dialect(self, sample_custom_xml):
        analysis = analyze_content(sample_custom_xml)
        assert analysis.feed_type is FeedType.UNKNOWN
        assert analysis.field_reliability["auto_headline"] == 100
        assert analysis.field_reliability["auto_permalink"] == 50

    def test_latin1_encoding(self, sample_latin1_rss):
        analysis = analyze_content(sample_latin1_rss)
        assert analysis.encoding == "ISO-8859-1"
        assert analysis.field_samples["title"] == ["Menú del día"]

    def test_parse_error(self, sample_malformed_xml):
        with pytest.raises(ParseError):
            analyze_content(sample_malformed_xml)

    def test_invalid_sample_size(self, sample_rss_xml):
        with pytest.raises(ValidationError):
            analyze_content(sample_rss_xml, sample_size=0)

    def test_to_dict(self, sample_rich_rss_xml):
        data = analyze_content(sample_rich_rss_xml).to_dict()
        assert data["feed_type"] == "rss2.0"
        assert data["field_patterns"]["content_encoded"]["has_html"] is True
        assert data["items"][0]["field_count"] == len(data["items"][0]["fields"])
