"""Configuration constants for podcast_feed_parser.

This module holds the namespaced tag names the getters read, the default
field selections, and the HTTP defaults used by the downloader and CLI.

All option-related constants are re-exported from config.py for convenience.
"""

import os

# General defaults
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_TIMEOUT_SECONDS = 20
MIN_TIMEOUT_SECONDS = 1
DEFAULT_USER_AGENT = "podcast-feed-parser/1.0 (+https://github.com/podcast-feed-parser)"
DEFAULT_JSON_INDENT = 2

# Environment overrides for fetch settings
ENV_TIMEOUT = "PODCAST_FEED_TIMEOUT"
ENV_USER_AGENT = "PODCAST_FEED_USER_AGENT"

# Reserved field-list entry that expands to the default list
DEFAULT_FIELDS_TOKEN = "default"

# Keys used by the parsed document tree
ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"

# iTunes namespace tags
ITUNES_AUTHOR = "itunes:author"
ITUNES_BLOCK = "itunes:block"
ITUNES_CATEGORY = "itunes:category"
ITUNES_COMPLETE = "itunes:complete"
ITUNES_DURATION = "itunes:duration"
ITUNES_EMAIL = "itunes:email"
ITUNES_EXPLICIT = "itunes:explicit"
ITUNES_EPISODE = "itunes:episode"
ITUNES_SEASON = "itunes:season"
ITUNES_IMAGE = "itunes:image"
ITUNES_KEYWORDS = "itunes:keywords"
ITUNES_NAME = "itunes:name"
ITUNES_ORDER = "itunes:order"
ITUNES_OWNER = "itunes:owner"
ITUNES_SUBTITLE = "itunes:subtitle"
ITUNES_SUMMARY = "itunes:summary"
ITUNES_TYPE = "itunes:type"

# Podcasting 2.0 namespace tags
PODCAST_CHAPTERS = "podcast:chapters"
PODCAST_FUNDING = "podcast:funding"
PODCAST_LOCKED = "podcast:locked"
PODCAST_SOUNDBITE = "podcast:soundbite"
PODCAST_TRANSCRIPT = "podcast:transcript"
PODCAST_VALUE = "podcast:value"
PODCAST_VALUE_RECIPIENT = "podcast:valueRecipient"

# Default field selections
DEFAULT_META_FIELDS = (
    "title",
    "author",
    "blocked",
    "categories",
    "complete",
    "description",
    "docs",
    "editor",
    "explicit",
    "episode",
    "season",
    "funding",
    "generator",
    "guid",
    "imageURL",
    "keywords",
    "language",
    "lastBuildDate",
    "link",
    "locked",
    "pubDate",
    "owner",
    "subtitle",
    "summary",
    "type",
    "value",
    "webMaster",
)

DEFAULT_EPISODE_FIELDS = (
    "title",
    "author",
    "blocked",
    "chapters",
    "description",
    "duration",
    "enclosure",
    "explicit",
    "season",
    "episode",
    "funding",
    "guid",
    "imageURL",
    "keywords",
    "language",
    "link",
    "order",
    "pubDate",
    "soundbite",
    "subtitle",
    "summary",
    "transcript",
    "value",
)

DEFAULT_REQUIRED_META: tuple = ()
DEFAULT_REQUIRED_EPISODES: tuple = ()

DEFAULT_UNCLEANED_META = ("categories", "funding", "guid", "value")
DEFAULT_UNCLEANED_EPISODES = ("funding", "guid", "soundbite", "transcript", "value")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_timeout_seconds() -> int:
    """Timeout from the environment, falling back to the default."""
    return _env_int(ENV_TIMEOUT, DEFAULT_TIMEOUT_SECONDS)


def env_user_agent() -> str:
    """User agent from the environment, falling back to the default."""
    return os.environ.get(ENV_USER_AGENT, "").strip() or DEFAULT_USER_AGENT
