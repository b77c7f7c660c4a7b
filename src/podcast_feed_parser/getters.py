"""Raw-value getters for channel and item fields.

A getter receives a channel or item node from the document tree and returns
the raw value of one field, or None when the source element is absent. Fields
without an entry in GETTERS are read with default_getter.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import config_constants as ns
from .attributes import extract_items
from .config_constants import ATTRIBUTES_KEY, TEXT_KEY
from .utils import parse_float_prefix

logger = logging.getLogger(__name__)

Getter = Callable[[Mapping[str, Any]], Any]

CATEGORY_SEPARATOR = ">"


def default_getter(node: Mapping[str, Any], field: str) -> Any:
    """Direct lookup of ``field`` on the node; empty values read as None."""
    value = node.get(field)
    if value is None or value == "":
        return None
    return value


def _first_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(value, list) and value and isinstance(value[0], Mapping):
        return value[0]
    return None


def get_author(node: Mapping[str, Any]) -> Any:
    return node.get("author") or node.get(ns.ITUNES_AUTHOR) or None


def get_blocked(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_BLOCK)


def get_categories(node: Mapping[str, Any]) -> List[str]:
    """Build ``"primary"`` or ``"primary>sub"`` strings from itunes:category.

    Categories without a text attribute are skipped.
    """
    categories = node.get(ns.ITUNES_CATEGORY)
    if not isinstance(categories, list):
        return []

    result: List[str] = []
    for category in categories:
        if not isinstance(category, Mapping):
            continue
        primary = (category.get(ATTRIBUTES_KEY) or {}).get("text")
        if not primary:
            continue
        sub = _first_mapping(category.get(ns.ITUNES_CATEGORY))
        sub_text = (sub.get(ATTRIBUTES_KEY) or {}).get("text") if sub else None
        result.append(f"{primary}{CATEGORY_SEPARATOR}{sub_text}" if sub_text else primary)
    return result


def get_chapters(node: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    items = extract_items(node.get(ns.PODCAST_CHAPTERS))
    if not items:
        return None
    attrs = items[0].attributes
    return {"type": attrs.get("type"), "url": attrs.get("url")}


def get_complete(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_COMPLETE)


def get_duration(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_DURATION)


def get_editor(node: Mapping[str, Any]) -> Any:
    return node.get("managingEditor")


def get_explicit(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_EXPLICIT)


def get_season(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_SEASON)


def get_episode(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_EPISODE)


def get_funding(node: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return [
        {"value": item.value, "url": item.attributes.get("url")}
        for item in extract_items(node.get(ns.PODCAST_FUNDING))
    ]


def get_guid(node: Mapping[str, Any]) -> Optional[str]:
    guid = node.get("guid")
    if isinstance(guid, str):
        return guid or None
    first = _first_mapping(guid)
    if first is not None and first.get(TEXT_KEY):
        return first[TEXT_KEY]
    return None


def get_image_url(node: Mapping[str, Any]) -> Optional[str]:
    """Return the episode or channel artwork URL.

    Tries ``itunes:image`` href, a plain-string ``itunes:image``, then the RSS
    ``image/url`` element.
    """
    itunes_image = node.get(ns.ITUNES_IMAGE)
    first = _first_mapping(itunes_image)
    if first is not None:
        href = (first.get(ATTRIBUTES_KEY) or {}).get("href")
        if href:
            return href

    if isinstance(itunes_image, str) and itunes_image:
        return itunes_image

    image = _first_mapping(node.get("image"))
    if image is not None:
        url = image.get("url")
        if isinstance(url, list) and url and url[0]:
            return url[0]

    return None


def get_keywords(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_KEYWORDS)


def get_locked(node: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    items = extract_items(node.get(ns.PODCAST_LOCKED))
    if not items:
        return None
    return {"value": items[0].value, "owner": items[0].attributes.get("owner")}


def get_order(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_ORDER)


def get_owner(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_OWNER)


def get_soundbite(node: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Collect soundbites with a positive duration and non-negative start time."""
    soundbites: List[Dict[str, Any]] = []
    for item in extract_items(node.get(ns.PODCAST_SOUNDBITE)):
        duration = parse_float_prefix(item.attributes.get("duration"))
        start_time = parse_float_prefix(item.attributes.get("startTime"))

        if duration is None or not duration > 0:
            logger.debug("Dropping soundbite with invalid duration: %r", item.attributes)
            continue
        if start_time is None or not start_time >= 0:
            logger.debug("Dropping soundbite with invalid startTime: %r", item.attributes)
            continue

        soundbites.append({"duration": duration, "startTime": start_time, "title": item.value})
    return soundbites


def get_subtitle(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_SUBTITLE)


def get_summary(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_SUMMARY)


def get_transcript(node: Mapping[str, Any]) -> List[Dict[str, Any]]:
    transcripts: List[Dict[str, Any]] = []
    for item in extract_items(node.get(ns.PODCAST_TRANSCRIPT)):
        attrs = item.attributes
        transcripts.append(
            {
                "language": attrs.get("language"),
                "rel": attrs.get("rel"),
                "type": attrs.get("type"),
                "url": attrs.get("url"),
            }
        )
    return transcripts


def get_type(node: Mapping[str, Any]) -> Any:
    return node.get(ns.ITUNES_TYPE)


def get_value(node: Mapping[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Return podcast:value blocks with their recipients.

    Returns:
        None when the node has no value block, otherwise one dict per block with
        ``method``, ``suggested``, ``type`` and ``recipients`` (each recipient's
        attributes passed through unchanged).
    """
    blocks = extract_items(node.get(ns.PODCAST_VALUE), [ns.PODCAST_VALUE_RECIPIENT])
    if not blocks:
        return None

    values: List[Dict[str, Any]] = []
    for block in blocks:
        nested = block.nested_elements or {}
        recipients = nested.get(ns.PODCAST_VALUE_RECIPIENT, [])
        values.append(
            {
                "method": block.attributes.get("method"),
                "suggested": block.attributes.get("suggested"),
                "type": block.attributes.get("type"),
                "recipients": [dict(recipient.attributes) for recipient in recipients],
            }
        )
    return values


GETTERS: Mapping[str, Getter] = MappingProxyType(
    {
        "author": get_author,
        "blocked": get_blocked,
        "categories": get_categories,
        "chapters": get_chapters,
        "complete": get_complete,
        "duration": get_duration,
        "editor": get_editor,
        "explicit": get_explicit,
        "season": get_season,
        "episode": get_episode,
        "funding": get_funding,
        "guid": get_guid,
        "imageURL": get_image_url,
        "keywords": get_keywords,
        "locked": get_locked,
        "order": get_order,
        "owner": get_owner,
        "soundbite": get_soundbite,
        "subtitle": get_subtitle,
        "summary": get_summary,
        "transcript": get_transcript,
        "type": get_type,
        "value": get_value,
    }
)
