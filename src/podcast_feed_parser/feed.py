"""Podcast extraction entry points.

``extract_podcast`` works on an already parsed document tree. The
``get_podcast_from_*`` helpers add XML parsing and HTTP fetching in front of
it; their errors are raised unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from . import downloader
from .config import build_feed_request, build_options, FeedRequest, Options
from .exceptions import FeedParseError
from .models import Podcast
from .records import build_episodes, build_meta
from .sorting import sort_episodes
from .xml_tree import parse_feed_xml

logger = logging.getLogger(__name__)

OptionsInput = Union[None, Options, Mapping[str, Any]]


def get_channel(tree: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return ``tree["rss"]["channel"][0]``.

    Raises:
        FeedParseError: If the tree is not an RSS document with a channel.
    """
    rss = tree.get("rss") if isinstance(tree, Mapping) else None
    channels = rss.get("channel") if isinstance(rss, Mapping) else None
    if not isinstance(channels, list) or not channels:
        raise FeedParseError(
            "Feed is not an RSS document: missing rss/channel",
            suggestion="Check that the URL points at an RSS feed",
        )
    channel = channels[0]
    return channel if isinstance(channel, Mapping) else {}


def extract_podcast(tree: Mapping[str, Any], options: OptionsInput = None) -> Podcast:
    """Extract feed metadata and sorted episodes from a parsed document tree.

    Args:
        tree: Document tree as produced by ``parse_feed_xml``.
        options: Field selection overrides (see ``build_options``).

    Returns:
        Podcast with the meta record and the sorted episode records.

    Raises:
        InvalidOptionsError: If the options are malformed.
        RequiredFieldMissingError: If a required field is missing from the meta
            record or from any episode.
        FeedParseError: If the tree has no ``rss/channel``.
    """
    resolved = build_options(options)
    channel = get_channel(tree)

    meta = build_meta(channel, resolved)
    episodes = sort_episodes(build_episodes(channel, resolved))
    logger.debug("Extracted podcast with %d episode(s)", len(episodes))
    return Podcast(meta=meta, episodes=episodes)


def get_podcast_from_feed(feed_text: Union[str, bytes], options: OptionsInput = None) -> Podcast:
    """Parse a raw feed body and extract the podcast from it."""
    resolved = build_options(options)
    tree = parse_feed_xml(feed_text)
    return extract_podcast(tree, resolved)


def get_podcast_from_url(
    request: Union[str, FeedRequest, Mapping[str, Any]],
    options: OptionsInput = None,
    *,
    timeout: Optional[int] = None,
) -> Podcast:
    """Fetch a feed over HTTP and extract the podcast from it.

    Args:
        request: Feed URL, ``FeedRequest``, or a mapping with ``url``,
            ``headers``, ``timeout`` and ``user_agent``.
        options: Field selection overrides (see ``build_options``).
        timeout: Overrides the request timeout in seconds.

    Raises:
        ValueError: If the request is malformed.
        FeedAuthError: If the server answers HTTP 401.
        FeedFetchError: If the feed cannot be downloaded.
        FeedParseError: If the body is not an RSS document.
    """
    resolved = build_options(options)
    feed_request = build_feed_request(request, timeout=timeout)
    logger.info("Fetching podcast feed %s", feed_request.url)
    body = downloader.fetch_feed(
        feed_request.url,
        headers=feed_request.headers,
        timeout=feed_request.timeout,
        user_agent=feed_request.user_agent,
    )
    return get_podcast_from_feed(body, resolved)
