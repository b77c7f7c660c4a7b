"""Lenient scalar parsing for feed text values.

Feed values are free text written by many different publishing tools, so
these helpers read the leading number the way a browser's ``parseInt`` /
``parseFloat`` would and return None instead of raising.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int_prefix(value: Any) -> Optional[int]:
    """Return the integer at the start of ``value``, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else None


def parse_float_prefix(value: Any) -> Optional[float]:
    """Return the number at the start of ``value``, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else None


def parse_feed_date(value: Any) -> Optional[datetime]:
    """Parse an RFC 822 (RSS) or ISO 8601 (Atom) date into an aware datetime.

    Naive results are assumed to be UTC so that any two parsed dates compare.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    parsed: Optional[datetime] = None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
