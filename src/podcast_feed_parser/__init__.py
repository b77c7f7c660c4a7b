"""Podcast Feed Parser - Extract podcast metadata and episodes from RSS feeds.

This package turns an RSS / Podcasting 2.0 feed into:
- A ``meta`` record with the feed-level fields you ask for
- A list of ``episode`` records, sorted by order hint, date and title

Programmatic API Example:
    >>> import podcast_feed_parser
    >>>
    >>> podcast = podcast_feed_parser.get_podcast_from_url(
    ...     "https://example.com/feed.xml",
    ...     {"fields": {"meta": ["title", "imageURL"], "episodes": ["default"]}},
    ... )
    >>> print(podcast.meta["title"], len(podcast.episodes))

Working on an already parsed document tree:
    >>> tree = podcast_feed_parser.parse_feed_xml(feed_bytes)
    >>> podcast = podcast_feed_parser.extract_podcast(tree)

CLI Usage:
    $ podcast-feed-parser https://example.com/feed.xml
    $ podcast-feed-parser ./feed.xml --file --episode-fields title pubDate
    $ podcast-feed-parser --list-fields
"""

from __future__ import annotations

from .config import build_options, DEFAULT_OPTIONS, FeedRequest, load_options_file, Options
from .exceptions import (
    FeedAuthError,
    FeedFetchError,
    FeedParseError,
    InvalidOptionsError,
    PodcastFeedError,
    RequiredFieldMissingError,
)
from .feed import extract_podcast, get_podcast_from_feed, get_podcast_from_url
from .models import AttributeItem, Podcast
from .registry import describe_field, FieldDescriptor, get_field_value, known_fields
from .xml_tree import parse_feed_xml

__all__ = [
    "AttributeItem",
    "build_options",
    "DEFAULT_OPTIONS",
    "describe_field",
    "extract_podcast",
    "FeedAuthError",
    "FeedFetchError",
    "FeedParseError",
    "FeedRequest",
    "FieldDescriptor",
    "get_field_value",
    "get_podcast_from_feed",
    "get_podcast_from_url",
    "InvalidOptionsError",
    "known_fields",
    "load_options_file",
    "Options",
    "parse_feed_xml",
    "Podcast",
    "PodcastFeedError",
    "RequiredFieldMissingError",
    "__version__",
]
# Note: 'cli' is available via __getattr__ for lazy loading
__version__ = "1.0.0"

_import_cache: dict[str, object] = {}


def __getattr__(name: str):
    if name in _import_cache:
        return _import_cache[name]

    if name == "cli":
        import importlib

        _cli = importlib.import_module(f"{__name__}.cli")
        _import_cache[name] = _cli
        return _cli
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
