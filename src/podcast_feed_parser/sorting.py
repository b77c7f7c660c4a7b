"""Episode ordering.

Episodes are ordered by their ``itunes:order`` hint, then newest ``pubDate``
first, then by title in descending order. An episode without an order hint
sorts before one that has it.
"""

from __future__ import annotations

import logging
import math
from functools import cmp_to_key
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config_constants import TEXT_KEY
from .utils import parse_feed_date

logger = logging.getLogger(__name__)

FIRST = -1
SECOND = 1
TIE = 0


def _scalar(value: Any) -> Any:
    """Unwrap raw (uncleaned) values so cleaned and raw records compare alike."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, Mapping):
        value = value.get(TEXT_KEY)
    if value == "":
        return None
    return value


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except ValueError:
        return None
    # NaN is unordered
    return None if math.isnan(number) else number


def _order_key(order: Any) -> Tuple[int, Any]:
    """Numeric orders sort before textual ones; each group in ascending order."""
    number = _as_number(order)
    if number is not None:
        return (0, number)
    return (1, str(order))


def _compare_orders(order_a: Any, order_b: Any) -> int:
    left, right = _order_key(order_a), _order_key(order_b)
    if left < right:
        return FIRST
    if left > right:
        return SECOND
    return TIE


def _date_key(date: Any) -> Tuple[int, Any]:
    """Rank parsed dates above unparseable ones, and both above missing dates."""
    if date is None:
        return (0, "")
    parsed = parse_feed_date(date)
    if parsed is not None:
        return (2, parsed)
    return (1, str(date))


def _compare_dates(date_a: Any, date_b: Any) -> int:
    """Descending comparison: the later date sorts first, undated last."""
    left, right = _date_key(date_a), _date_key(date_b)
    if left > right:
        return FIRST
    if left < right:
        return SECOND
    return TIE


def _compare_titles(title_a: Any, title_b: Any) -> int:
    """Descending comparison: the greater title sorts first, untitled last."""
    if title_a is None and title_b is None:
        return TIE
    if title_b is None:
        return FIRST
    if title_a is None:
        return SECOND
    left, right = str(title_a), str(title_b)
    if left > right:
        return FIRST
    if left < right:
        return SECOND
    return TIE


def compare_episodes(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
    """Three-way comparison of two episode records (negative: ``a`` first)."""
    order_a, order_b = _scalar(a.get("order")), _scalar(b.get("order"))

    if order_a is not None and order_b is not None:
        result = _compare_orders(order_a, order_b)
        if result != TIE:
            return result
    elif order_a is not None:
        return SECOND
    elif order_b is not None:
        return FIRST

    result = _compare_dates(_scalar(a.get("pubDate")), _scalar(b.get("pubDate")))
    if result != TIE:
        return result

    return _compare_titles(_scalar(a.get("title")), _scalar(b.get("title")))


def sort_episodes(episodes: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the episodes in display order.

    The sort is stable: episodes that compare equal on every key (for example
    when ``order``, ``pubDate`` and ``title`` were not extracted) keep their
    document order.
    """
    ordered = sorted(episodes, key=cmp_to_key(compare_episodes))
    logger.debug("Sorted %d episode(s)", len(ordered))
    return ordered
