"""Record building for feed metadata and episodes."""

from __future__ import annotations

import logging
from typing import AbstractSet, Any, Dict, List, Mapping, Sequence

from .config import Options
from .exceptions import RequiredFieldMissingError
from .registry import get_field_value

logger = logging.getLogger(__name__)


def build_record(
    node: Mapping[str, Any],
    field_list: Sequence[str],
    required: AbstractSet[str] | Sequence[str] = (),
    uncleaned: AbstractSet[str] | Sequence[str] = (),
    *,
    scope: str = "meta",
) -> Dict[str, Any]:
    """Extract ``field_list`` from ``node`` into a record.

    Every requested field gets a key, None when the value is absent. Required
    fields are checked by key presence once all fields are processed.

    Args:
        node: Channel or item node of the document tree. Never modified.
        field_list: Field names in record order.
        required: Names that must be keys of the finished record.
        uncleaned: Names whose raw getter value is kept.
        scope: ``"meta"`` or ``"episodes"``, used in error messages.

    Returns:
        Mapping of field name to extracted value.

    Raises:
        RequiredFieldMissingError: If a required name is not a key of the record.
    """
    uncleaned_set = frozenset(uncleaned)
    record: Dict[str, Any] = {}
    for field in field_list:
        record[field] = get_field_value(node, field, uncleaned=field in uncleaned_set)

    missing = [name for name in required if name not in record]
    if missing:
        logger.debug("Required %s field(s) missing: %s", scope, ", ".join(missing))
        raise RequiredFieldMissingError(scope=scope, missing=missing)
    return record


def build_meta(channel: Mapping[str, Any], options: Options) -> Dict[str, Any]:
    return build_record(
        channel,
        options.fields.meta,
        options.required.meta,
        options.uncleaned.meta,
        scope="meta",
    )


def build_episodes(channel: Mapping[str, Any], options: Options) -> List[Dict[str, Any]]:
    """Build one record per ``item`` of the channel, in document order.

    A channel without items (or whose ``item`` key is not a list) has no
    episodes. An empty ``<item/>`` is read as a node without children.
    """
    items = channel.get("item")
    if not isinstance(items, list):
        return []

    episodes = [
        build_record(
            item if isinstance(item, Mapping) else {},
            options.fields.episodes,
            options.required.episodes,
            options.uncleaned.episodes,
            scope="episodes",
        )
        for item in items
        if item is not None
    ]
    logger.debug("Built %d episode record(s)", len(episodes))
    return episodes
