"""Shared fixtures and test utilities for podcast_feed_parser tests.

This module contains:
- Test constants
- Sample feed XML and document-tree builders
- Mock HTTP response class
- Network isolation for every test

All test files can import from this module using pytest's conftest.py mechanism.
"""

import socket

import pytest

# Test constants
TEST_BASE_URL = "https://example.com"
TEST_FEED_URL = "https://example.com/feed.xml"
TEST_FEED_TITLE = "Test Feed"
TEST_FEED_AUTHOR = "Jane Host"
TEST_OWNER_NAME = "Jane Smith"
TEST_OWNER_EMAIL = "jane@example.com"
TEST_IMAGE_URL = f"{TEST_BASE_URL}/artwork.jpg"
TEST_MEDIA_URL = f"{TEST_BASE_URL}/episode.mp3"
TEST_MEDIA_TYPE_MP3 = "audio/mpeg"
TEST_TRANSCRIPT_URL = f"{TEST_BASE_URL}/transcript.vtt"
TEST_TRANSCRIPT_TYPE_VTT = "text/vtt"
TEST_FUNDING_URL = f"{TEST_BASE_URL}/donate"
TEST_CHAPTERS_URL = f"{TEST_BASE_URL}/chapters.json"
TEST_EPISODE_TITLE = "Episode Title"
TEST_NODE_ADDRESS = "02d5c1bf8b940dc9cadca86d1b0a3c37fbe39cee4c7e839e33bef9174531d27f52"

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
PODCAST_NS = "https://podcastindex.org/namespace/1.0"


def build_podcast_rss_xml(items_xml=None, channel_extra=""):
    """Build a podcast RSS feed using the iTunes and Podcasting 2.0 namespaces.

    Args:
        items_xml: XML for the <item> elements. Defaults to two sample episodes.
        channel_extra: Additional XML placed inside <channel>.

    Returns:
        RSS XML string
    """
    if items_xml is None:
        items_xml = SAMPLE_ITEMS_XML
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="{ITUNES_NS}" xmlns:podcast="{PODCAST_NS}">
  <channel>
    <title>{TEST_FEED_TITLE}</title>
    <link>{TEST_BASE_URL}</link>
    <description>A show about tests.</description>
    <language>en-us</language>
    <generator>hand written</generator>
    <lastBuildDate>Mon, 01 Jun 2020 10:00:00 GMT</lastBuildDate>
    <itunes:author>{TEST_FEED_AUTHOR}</itunes:author>
    <itunes:block>No</itunes:block>
    <itunes:complete>Yes</itunes:complete>
    <itunes:explicit>clean</itunes:explicit>
    <itunes:type>episodic</itunes:type>
    <itunes:image href="{TEST_IMAGE_URL}"/>
    <itunes:category text="Technology">
      <itunes:category text="Software How-To"/>
    </itunes:category>
    <itunes:category text="Education"/>
    <itunes:owner>
      <itunes:name>{TEST_OWNER_NAME}</itunes:name>
      <itunes:email>{TEST_OWNER_EMAIL}</itunes:email>
    </itunes:owner>
    <podcast:locked owner="{TEST_OWNER_EMAIL}">yes</podcast:locked>
    <podcast:funding url="{TEST_FUNDING_URL}">Support the show</podcast:funding>
    <podcast:value type="lightning" method="keysend" suggested="0.00000005000">
      <podcast:valueRecipient name="Host" type="node" address="{TEST_NODE_ADDRESS}" split="99"/>
      <podcast:valueRecipient name="App" type="node" address="{TEST_NODE_ADDRESS}" split="1" fee="true"/>
    </podcast:value>
    {channel_extra}
    {items_xml}
  </channel>
</rss>"""


SAMPLE_ITEMS_XML = f"""
    <item>
      <title>Episode 1</title>
      <guid isPermaLink="false">ep-1</guid>
      <pubDate>Fri, 01 May 2020 10:00:00 GMT</pubDate>
      <enclosure url="{TEST_MEDIA_URL}" length="1234" type="{TEST_MEDIA_TYPE_MP3}"/>
      <itunes:duration>01:02:03</itunes:duration>
      <itunes:episode>1</itunes:episode>
      <itunes:season>2</itunes:season>
      <itunes:explicit>yes</itunes:explicit>
      <podcast:transcript url="{TEST_TRANSCRIPT_URL}" type="{TEST_TRANSCRIPT_TYPE_VTT}" language="en"/>
      <podcast:soundbite startTime="0" duration="30.5">Cold open</podcast:soundbite>
      <podcast:soundbite startTime="12" duration="0">Broken</podcast:soundbite>
      <podcast:chapters url="{TEST_CHAPTERS_URL}" type="application/json+chapters"/>
    </item>
    <item>
      <title>Episode 2</title>
      <guid isPermaLink="false">ep-2</guid>
      <pubDate>Mon, 01 Jun 2020 10:00:00 GMT</pubDate>
      <itunes:duration>125</itunes:duration>
    </item>
"""


def build_channel_tree(**children):
    """Build a document tree ``{"rss": {"channel": [channel]}}``.

    Args:
        **children: Channel children in parsed form (lists of strings/mappings).

    Returns:
        Parsed document tree
    """
    return {"rss": {"$": {"version": "2.0"}, "channel": [dict(children)]}}


def build_episode_record(order=None, pub_date=None, title=None):
    """Build an episode record with only the sort keys set."""
    return {"order": order, "pubDate": pub_date, "title": title}


class MockHTTPResponse:
    """Simple mock for HTTP responses returned by a requests session."""

    def __init__(self, *, content=b"", url="", status_code=200, headers=None):
        self.content = content
        self.url = url
        self.status_code = status_code
        self.headers = headers or {}
        self.closed = False

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)
        return None

    def close(self):
        self.closed = True


def create_feed_response(feed_xml, url=TEST_FEED_URL, status_code=200):
    """Create a mock HTTP response carrying a feed body."""
    body = feed_xml.encode("utf-8") if isinstance(feed_xml, str) else feed_xml
    return MockHTTPResponse(
        content=body,
        url=url,
        status_code=status_code,
        headers={"Content-Type": "application/rss+xml"},
    )


class NetworkCallDetectedError(Exception):
    """Raised when a test attempts to open a network connection."""

    def __init__(self, address):
        self.address = address
        super().__init__(
            f"Network call detected in test: socket.connect({address!r})\n"
            f"Tests must not make network calls. Use mocks instead."
        )


@pytest.fixture(autouse=True)
def block_network_calls(monkeypatch):
    """Fail any test that tries to open a socket connection."""

    def _blocked_connect(self, address, *args, **kwargs):
        raise NetworkCallDetectedError(address)

    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)
    monkeypatch.setattr(socket.socket, "connect_ex", _blocked_connect)
    yield
