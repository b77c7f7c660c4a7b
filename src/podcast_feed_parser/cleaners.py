"""Cleaners that normalize raw field values into their final form.

A cleaner is only called with a raw value that is not None. Fields without an
entry in CLEANERS are cleaned with default_cleaner, which unwraps the
single-element list every parsed element turns into.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from . import config_constants as ns
from .config_constants import ATTRIBUTES_KEY, TEXT_KEY
from .utils import parse_int_prefix

logger = logging.getLogger(__name__)

Cleaner = Callable[[Any], Any]

SECONDS_PER_MINUTE = 60
DURATION_SEPARATOR = ":"

EXPLICIT_TRUE_VALUES = frozenset({"yes", "explicit", "true"})
EXPLICIT_FALSE_VALUES = frozenset({"clean", "no", "false"})


def default_cleaner(value: Any) -> Any:
    """Return the first element of a non-empty list, otherwise ``value`` itself."""
    if isinstance(value, list) and value and value[0] is not None:
        return value[0]
    return value


def _first_text(value: Any) -> Optional[str]:
    """Text of a single-element value, whether plain or carrying attributes."""
    first = default_cleaner(value)
    if isinstance(first, Mapping):
        first = first.get(TEXT_KEY)
    if isinstance(first, str):
        return first
    return None


def clean_identity(value: Any) -> Any:
    return value


def clean_flag(value: Any) -> bool:
    """``yes`` (any case) means the flag is set; anything else means it is not."""
    text = _first_text(value)
    return text is not None and text.strip().lower() == "yes"


def clean_duration(value: Any) -> Optional[int]:
    """Convert an itunes:duration value to seconds.

    Accepts plain seconds (``"125"``) as well as ``"M:S"`` and ``"H:M:S"``.
    Segments are folded right to left, each worth 60 times the previous one.
    """
    text = _first_text(value)
    if text is None:
        return None

    segments = text.strip().split(DURATION_SEPARATOR)
    total = 0
    multiplier = 1
    while segments:
        seconds = parse_int_prefix(segments.pop())
        if seconds is None:
            logger.debug("Unparseable duration %r", text)
            return None
        total += multiplier * seconds
        multiplier *= SECONDS_PER_MINUTE
    return total


def clean_enclosure(value: Any) -> Optional[Dict[str, Any]]:
    first = default_cleaner(value)
    attrs = first.get(ATTRIBUTES_KEY) if isinstance(first, Mapping) else None
    if not isinstance(attrs, Mapping):
        return None
    return {"length": attrs.get("length"), "type": attrs.get("type"), "url": attrs.get("url")}


def clean_explicit(value: Any) -> Optional[bool]:
    text = _first_text(value)
    if text is None:
        return None
    lowered = text.strip().lower()
    if lowered in EXPLICIT_TRUE_VALUES:
        return True
    if lowered in EXPLICIT_FALSE_VALUES:
        return False
    return None


def clean_number(value: Any) -> Optional[int]:
    return parse_int_prefix(_first_text(value))


def clean_owner(value: Any) -> Optional[Dict[str, Any]]:
    """Extract name and email; keys are left out when their element is absent."""
    first = default_cleaner(value)
    if not isinstance(first, Mapping):
        return None

    owner: Dict[str, Any] = {}
    if ns.ITUNES_NAME in first:
        owner["name"] = default_cleaner(first[ns.ITUNES_NAME])
    if ns.ITUNES_EMAIL in first:
        owner["email"] = default_cleaner(first[ns.ITUNES_EMAIL])
    return owner


CLEANERS: Mapping[str, Cleaner] = MappingProxyType(
    {
        "author": clean_identity,
        "blocked": clean_flag,
        "complete": clean_flag,
        "duration": clean_duration,
        "enclosure": clean_enclosure,
        "explicit": clean_explicit,
        "episode": clean_number,
        "season": clean_number,
        "imageURL": clean_identity,
        "owner": clean_owner,
    }
)
