#!/usr/bin/env python3
"""Tests for the podcast extraction entry points."""

import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from podcast_feed_parser import feed, get_podcast_from_feed, get_podcast_from_url
from podcast_feed_parser.exceptions import (
    FeedAuthError,
    FeedParseError,
    InvalidOptionsError,
    RequiredFieldMissingError,
)
from podcast_feed_parser.models import Podcast

# Add tests directory to path for conftest import
tests_dir = Path(__file__).resolve().parents[2]
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from conftest import (  # noqa: E402
    build_channel_tree,
    build_podcast_rss_xml,
    TEST_CHAPTERS_URL,
    TEST_FEED_AUTHOR,
    TEST_FEED_TITLE,
    TEST_FEED_URL,
    TEST_FUNDING_URL,
    TEST_IMAGE_URL,
    TEST_MEDIA_TYPE_MP3,
    TEST_MEDIA_URL,
    TEST_NODE_ADDRESS,
    TEST_OWNER_EMAIL,
    TEST_OWNER_NAME,
    TEST_TRANSCRIPT_TYPE_VTT,
    TEST_TRANSCRIPT_URL,
)


class TestGetChannel(unittest.TestCase):
    """Tests for get_channel function."""

    def test_returns_first_channel(self):
        tree = build_channel_tree(title=["Show"])
        self.assertEqual(feed.get_channel(tree), {"title": ["Show"]})

    def test_missing_channel(self):
        for tree in ({}, {"rss": ""}, {"rss": {"channel": []}}, {"feed": {"entry": []}}):
            with self.subTest(tree=tree):
                with self.assertRaises(FeedParseError):
                    feed.get_channel(tree)

    def test_empty_channel_element(self):
        self.assertEqual(feed.get_channel({"rss": {"channel": [""]}}), {})


class TestExtractPodcast(unittest.TestCase):
    """Tests for extract_podcast function."""

    def test_minimal_tree(self):
        tree = build_channel_tree(title=["Show"])
        podcast = feed.extract_podcast(tree, {"fields": {"meta": ["title"]}})
        self.assertIsInstance(podcast, Podcast)
        self.assertEqual(podcast.meta, {"title": "Show"})
        self.assertEqual(podcast.episodes, [])

    def test_episodes_are_sorted(self):
        tree = build_channel_tree(
            item=[
                {"title": ["B"], "itunes:order": ["2"], "pubDate": ["2020-01-01"]},
                {"title": ["A"], "pubDate": ["2020-06-01"]},
            ]
        )
        podcast = feed.extract_podcast(tree)
        self.assertEqual([ep["title"] for ep in podcast.episodes], ["A", "B"])

    def test_tree_is_not_modified(self):
        tree = build_channel_tree(title=["Show"], item=[{"title": ["Ep"]}])
        feed.extract_podcast(tree)
        self.assertEqual(tree, build_channel_tree(title=["Show"], item=[{"title": ["Ep"]}]))

    def test_required_meta_missing(self):
        tree = build_channel_tree(title=["Show"])
        options = {"fields": {"meta": ["title"]}, "required": {"meta": ["copyright"]}}
        with self.assertRaises(RequiredFieldMissingError) as ctx:
            feed.extract_podcast(tree, options)
        self.assertEqual(ctx.exception.scope, "meta")
        self.assertEqual(ctx.exception.missing, ("copyright",))

    def test_invalid_options(self):
        with self.assertRaises(InvalidOptionsError):
            feed.extract_podcast(build_channel_tree(), {"fields": "all"})

    def test_to_dict(self):
        podcast = feed.extract_podcast(build_channel_tree(title=["Show"]), {"fields": {"meta": ["title"]}})
        self.assertEqual(podcast.to_dict(), {"meta": {"title": "Show"}, "episodes": []})


@pytest.mark.integration
class TestGetPodcastFromFeed(unittest.TestCase):
    """End-to-end extraction from a Podcasting 2.0 feed body."""

    def setUp(self):
        self.podcast = get_podcast_from_feed(build_podcast_rss_xml())
        self.meta = self.podcast.meta

    def test_meta_field_order_follows_defaults(self):
        from podcast_feed_parser.config_constants import DEFAULT_META_FIELDS

        self.assertEqual(tuple(self.meta), DEFAULT_META_FIELDS)

    def test_meta_values(self):
        self.assertEqual(self.meta["title"], TEST_FEED_TITLE)
        self.assertEqual(self.meta["author"], [TEST_FEED_AUTHOR])
        self.assertIs(self.meta["blocked"], False)
        self.assertIs(self.meta["complete"], True)
        self.assertIs(self.meta["explicit"], False)
        self.assertEqual(self.meta["imageURL"], TEST_IMAGE_URL)
        self.assertEqual(self.meta["language"], "en-us")
        self.assertEqual(self.meta["type"], "episodic")
        self.assertEqual(self.meta["owner"], {"name": TEST_OWNER_NAME, "email": TEST_OWNER_EMAIL})
        self.assertEqual(self.meta["locked"], {"value": "yes", "owner": TEST_OWNER_EMAIL})
        self.assertIsNone(self.meta["docs"])

    def test_meta_uncleaned_fields(self):
        self.assertEqual(self.meta["categories"], ["Technology>Software How-To", "Education"])
        self.assertEqual(
            self.meta["funding"], [{"value": "Support the show", "url": TEST_FUNDING_URL}]
        )
        value = self.meta["value"]
        self.assertEqual(len(value), 1)
        self.assertEqual(value[0]["type"], "lightning")
        self.assertEqual(value[0]["method"], "keysend")
        self.assertEqual([r["split"] for r in value[0]["recipients"]], ["99", "1"])
        self.assertEqual(value[0]["recipients"][1]["fee"], "true")
        self.assertEqual(value[0]["recipients"][0]["address"], TEST_NODE_ADDRESS)

    def test_episodes_newest_first(self):
        self.assertEqual(
            [ep["title"] for ep in self.podcast.episodes], ["Episode 2", "Episode 1"]
        )

    def test_episode_values(self):
        episode = self.podcast.episodes[1]
        self.assertEqual(episode["guid"], "ep-1")
        self.assertEqual(episode["duration"], 3723)
        self.assertEqual(episode["episode"], 1)
        self.assertEqual(episode["season"], 2)
        self.assertIs(episode["explicit"], True)
        self.assertEqual(
            episode["enclosure"],
            {"length": "1234", "type": TEST_MEDIA_TYPE_MP3, "url": TEST_MEDIA_URL},
        )
        self.assertEqual(
            episode["chapters"],
            {"type": "application/json+chapters", "url": TEST_CHAPTERS_URL},
        )
        self.assertEqual(
            episode["transcript"],
            [
                {
                    "language": "en",
                    "rel": None,
                    "type": TEST_TRANSCRIPT_TYPE_VTT,
                    "url": TEST_TRANSCRIPT_URL,
                }
            ],
        )
        self.assertEqual(
            episode["soundbite"], [{"duration": 30.5, "startTime": 0.0, "title": "Cold open"}]
        )
        self.assertIsNone(episode["value"])

    def test_episode_defaults_when_absent(self):
        episode = self.podcast.episodes[0]
        self.assertEqual(episode["duration"], 125)
        self.assertIsNone(episode["enclosure"])
        self.assertEqual(episode["transcript"], [])
        self.assertEqual(episode["soundbite"], [])
        self.assertEqual(episode["funding"], [])

    def test_extra_fields_with_default_token(self):
        podcast = get_podcast_from_feed(
            build_podcast_rss_xml(),
            {"fields": {"meta": ["default", "podcast:locked"], "episodes": ["title"]}},
        )
        self.assertIn("podcast:locked", podcast.meta)
        self.assertEqual(list(podcast.episodes[0]), ["title"])

    def test_undeclared_namespace_prefix(self):
        podcast = get_podcast_from_feed(
            "<rss><channel><title>T</title><itunes:author>A</itunes:author></channel></rss>",
            {"fields": {"meta": ["title", "author"]}},
        )
        self.assertEqual(podcast.meta, {"title": "T", "author": ["A"]})

    def test_deeply_nested_body(self):
        depth = 5000
        body = "<rss><channel><title>T</title>" + "<x>" * depth + "</x>" * depth
        body += "</channel></rss>"
        podcast = get_podcast_from_feed(body, {"fields": {"meta": ["title"]}})
        self.assertEqual(podcast.meta, {"title": "T"})

    def test_malformed_body(self):
        with self.assertRaises(FeedParseError):
            get_podcast_from_feed("<rss><channel>")

    def test_not_rss(self):
        with self.assertRaises(FeedParseError):
            get_podcast_from_feed("<feed><entry/></feed>")


class TestGetPodcastFromURL(unittest.TestCase):
    """Tests for get_podcast_from_url function."""

    @patch("podcast_feed_parser.downloader.fetch_feed")
    def test_fetches_and_extracts(self, mock_fetch):
        mock_fetch.return_value = build_podcast_rss_xml().encode("utf-8")
        podcast = get_podcast_from_url(
            {"url": TEST_FEED_URL, "headers": {"Authorization": "Bearer t"}},
            {"fields": {"meta": ["title"]}},
            timeout=5,
        )
        self.assertEqual(podcast.meta, {"title": TEST_FEED_TITLE})
        self.assertEqual(len(podcast.episodes), 2)

        mock_fetch.assert_called_once()
        args, kwargs = mock_fetch.call_args
        self.assertEqual(args[0], TEST_FEED_URL)
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer t"})
        self.assertEqual(kwargs["timeout"], 5)

    @patch("podcast_feed_parser.downloader.fetch_feed")
    def test_fetch_errors_propagate(self, mock_fetch):
        mock_fetch.side_effect = FeedAuthError(url=TEST_FEED_URL)
        with self.assertRaises(FeedAuthError):
            get_podcast_from_url(TEST_FEED_URL)

    @patch("podcast_feed_parser.downloader.fetch_feed")
    def test_invalid_options_fail_before_fetch(self, mock_fetch):
        with self.assertRaises(InvalidOptionsError):
            get_podcast_from_url(TEST_FEED_URL, {"unknown": {}})
        mock_fetch.assert_not_called()

    @patch("podcast_feed_parser.downloader.fetch_feed")
    def test_invalid_url(self, mock_fetch):
        with self.assertRaises(ValueError):
            get_podcast_from_url("ftp://example.com/feed.xml")
        mock_fetch.assert_not_called()


if __name__ == "__main__":
    unittest.main()
