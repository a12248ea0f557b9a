"""Shared test fixtures for RSS field analyzer tests."""

import pytest

from rssfield_analyzer.fetcher import FetchResponse
from rssfield_analyzer.models import AnalysisResult, FeedType


SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <item>
      <title>First Article</title>
      <link>https://example.com/article-1</link>
      <guid>article-1</guid>
      <description>Description of the first article</description>
      <pubDate>Thu, 13 Feb 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <guid>article-2</guid>
      <description>Description of the second article</description>
      <pubDate>Thu, 13 Feb 2026 09:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_RICH_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Civic News</title>
    <link>https://news.example.com</link>
    <description>Local civic news</description>
    <language>en-us</language>
    <item>
      <title>Council approves budget</title>
      <link>https://news.example.com/budget</link>
      <description>The council voted on the budget.</description>
      <content:encoded><![CDATA[<p>Full story</p><img src="https://img.example.com/budget.jpg" alt="Budget" width="640" height="480">]]></content:encoded>
      <dc:creator>Jane Doe</dc:creator>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <category>Politics</category>
      <media:content url="https://img.example.com/budget-large.jpg" medium="image" width="1200" height="800" type="image/jpeg"/>
      <guid>budget-2024</guid>
    </item>
    <item>
      <title>Library hours extended</title>
      <link>https://news.example.com/library</link>
      <description>Branches will stay open later.</description>
      <content:encoded><![CDATA[<p>Longer hours</p>]]></content:encoded>
      <dc:creator>John Roe</dc:creator>
      <pubDate>Tue, 02 Jan 2024 11:00:00 GMT</pubDate>
      <media:content url="https://img.example.com/library.jpg" medium="image" type="image/jpeg"/>
      <guid>library-hours</guid>
    </item>
    <item>
      <title>Road repairs scheduled</title>
      <link>https://news.example.com/roads</link>
      <description>Crews start work next week.</description>
      <dc:creator>Jane Doe</dc:creator>
      <pubDate>Wed, 03 Jan 2024 12:00:00 GMT</pubDate>
      <category>Transit</category>
      <media:content url="https://img.example.com/roads.jpg" medium="image" type="image/jpeg"/>
      <guid>road-repairs</guid>
    </item>
    <item>
      <title>Park cleanup volunteers needed</title>
      <link>https://news.example.com/park</link>
      <description>Sign up at city hall.</description>
      <pubDate>Thu, 04 Jan 2024 13:00:00 GMT</pubDate>
      <guid>park-cleanup</guid>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <subtitle>A test Atom feed</subtitle>
  <entry>
    <title>Atom Entry 1</title>
    <link rel="alternate" type="text/html" href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T10:00:00Z</updated>
    <author><name>Ada</name></author>
  </entry>
</feed>"""

SAMPLE_RSS1_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns="http://purl.org/rss/1.0/"
         xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel rdf:about="https://example.com/">
    <title>RDF Feed</title>
    <link>https://example.com/</link>
    <description>An RSS 1.0 feed</description>
  </channel>
  <item rdf:about="https://example.com/1">
    <title>RDF Item</title>
    <link>https://example.com/1</link>
    <dc:date>2024-01-01T10:00:00Z</dc:date>
  </item>
</rdf:RDF>"""

SAMPLE_PODCAST_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>City Podcast</title>
    <link>https://pod.example.com</link>
    <description>Weekly civic podcast</description>
    <item>
      <title>Episode 1</title>
      <link>https://pod.example.com/1</link>
      <description>First episode</description>
      <pubDate>Tue, 02 Jan 2024 08:00:00 GMT</pubDate>
      <enclosure url="https://pod.example.com/1.mp3" type="audio/mpeg" length="1234"/>
      <itunes:image href="https://pod.example.com/1.jpg"/>
      <itunes:duration>00:30:00</itunes:duration>
    </item>
    <item>
      <title>Episode 2</title>
      <link>https://pod.example.com/2</link>
      <description>Second episode</description>
      <pubDate>Tue, 09 Jan 2024 08:00:00 GMT</pubDate>
      <enclosure url="https://pod.example.com/2.mp3" type="audio/mpeg" length="5678"/>
      <itunes:image href="https://pod.example.com/2.jpg"/>
      <itunes:duration>00:45:00</itunes:duration>
    </item>
  </channel>
</rss>"""

SAMPLE_HTML_IMAGES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Photo Blog</title>
    <link>https://photos.example.com</link>
    <description>Photos</description>
    <item>
      <title>Sunrise</title>
      <link>https://photos.example.com/sunrise</link>
      <description>&lt;p&gt;Early&lt;/p&gt;&lt;img src="https://photos.example.com/sunrise.jpg" alt="Sunrise"&gt;</description>
      <pubDate>Fri, 05 Jan 2024 06:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Sunset</title>
      <link>https://photos.example.com/sunset</link>
      <description>&lt;img src='https://photos.example.com/sunset.jpg' width='800' height='600'&gt;</description>
      <pubDate>Fri, 05 Jan 2024 18:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_CUSTOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<export>
  <item>
    <headline>Custom one</headline>
    <permalink kind="web">https://custom.example.com/1</permalink>
  </item>
  <item>
    <headline>Custom two</headline>
  </item>
</export>"""

SAMPLE_EMPTY_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Empty Feed</title>
    <link>https://example.com</link>
    <description>Nothing here yet</description>
  </channel>
</rss>"""

SAMPLE_LATIN1_RSS = (
    b'<?xml version="1.0" encoding="ISO-8859-1"?>\n'
    b'<rss version="2.0"><channel><title>Caf\xe9</title>'
    b"<item><title>Men\xfa del d\xeda</title><link>https://example.com/menu</link></item>"
    b"</channel></rss>"
)

SAMPLE_MALFORMED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <link>https://example.com</link>
    <item>
      <title>Good Item</title>
      <guid>good-item</guid>
    </item>
    <item>
      <title>Bad Item</title>
      <!-- Missing closing tags intentionally -->
"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_rich_rss_xml():
    """RSS 2.0 with content, dc and media namespaces across four items."""
    return SAMPLE_RICH_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample valid Atom XML."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_rss1_xml():
    """Sample RSS 1.0 (RDF) XML."""
    return SAMPLE_RSS1_XML


@pytest.fixture
def sample_podcast_xml():
    """Podcast feed with audio enclosures and itunes images."""
    return SAMPLE_PODCAST_XML


@pytest.fixture
def sample_html_images_xml():
    """Feed whose only images are embedded in escaped HTML descriptions."""
    return SAMPLE_HTML_IMAGES_XML


@pytest.fixture
def sample_custom_xml():
    """XML in an unrecognized dialect that still uses item elements."""
    return SAMPLE_CUSTOM_XML


@pytest.fixture
def sample_empty_rss_xml():
    """Well-formed RSS with no items."""
    return SAMPLE_EMPTY_RSS_XML


@pytest.fixture
def sample_latin1_rss():
    """ISO-8859-1 encoded RSS bytes."""
    return SAMPLE_LATIN1_RSS


@pytest.fixture
def sample_malformed_xml():
    """Sample malformed RSS XML."""
    return SAMPLE_MALFORMED_XML


@pytest.fixture
def sample_not_a_feed_xml():
    """Sample XML that is not a feed."""
    return SAMPLE_NOT_A_FEED_XML


@pytest.fixture
def fake_fetch():
    """Build a fetch collaborator that serves fixed content and records calls."""

    def factory(body: str | bytes = SAMPLE_RSS_XML, status: int = 200):
        calls = []

        def fetch(url, headers, timeout):
            calls.append({"url": url, "headers": headers, "timeout": timeout})
            content = body.encode("utf-8") if isinstance(body, str) else body
            return FetchResponse(success=200 <= status < 300, status=status, body=content)

        fetch.calls = calls
        return fetch

    return factory


@pytest.fixture
def make_analysis():
    """Build an AnalysisResult from reliability scores, for rule-level tests."""

    def factory(
        reliability: dict | None = None,
        samples: dict | None = None,
        patterns: dict | None = None,
        feed_type: FeedType = FeedType.RSS2,
        item_count: int = 10,
        namespaces: dict | None = None,
        encoding: str = "UTF-8",
    ) -> AnalysisResult:
        reliability = reliability or {}
        return AnalysisResult(
            feed_type=feed_type,
            channel_info={},
            item_count=item_count,
            samples_analyzed=min(item_count, 5),
            unique_fields=list(reliability),
            field_reliability=dict(reliability),
            field_samples=samples or {},
            field_patterns=patterns or {},
            items=[],
            namespaces=namespaces or {},
            encoding=encoding,
        )

    return factory
