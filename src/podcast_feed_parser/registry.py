"""Field registry: dispatch from field name to getter and cleaner.

Meta and episode fields share one registry. Names either mean the same thing
at both levels (``title``, ``imageURL``) or only occur at one of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

from . import config_constants
from .cleaners import CLEANERS, default_cleaner
from .getters import default_getter, GETTERS


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one extractable field.

    Attributes:
        name: Field name as used in options and records.
        has_custom_getter: Field has an entry in GETTERS.
        has_custom_cleaner: Field has an entry in CLEANERS.
        uncleaned_by_default_meta: Field is in the default meta uncleaned set.
        uncleaned_by_default_episodes: Field is in the default episode uncleaned set.
        meta_default: Field is requested for meta by default.
        episode_default: Field is requested for episodes by default.
    """

    name: str
    has_custom_getter: bool
    has_custom_cleaner: bool
    uncleaned_by_default_meta: bool
    uncleaned_by_default_episodes: bool
    meta_default: bool
    episode_default: bool

    @property
    def is_uncleaned_by_default(self) -> bool:
        return self.uncleaned_by_default_meta or self.uncleaned_by_default_episodes


def get_raw_value(node: Mapping[str, Any], field: str) -> Any:
    getter = GETTERS.get(field)
    if getter is not None:
        return getter(node)
    return default_getter(node, field)


def clean_value(field: str, value: Any) -> Any:
    cleaner = CLEANERS.get(field, default_cleaner)
    return cleaner(value)


def get_field_value(node: Mapping[str, Any], field: str, uncleaned: bool = False) -> Any:
    """Read ``field`` from ``node`` and clean it unless ``uncleaned`` is set.

    Args:
        node: Channel or item node of the document tree.
        field: Field name.
        uncleaned: Return the raw getter value without cleaning.

    Returns:
        The (cleaned) value, or None when the source element is absent.
    """
    raw = get_raw_value(node, field)
    if uncleaned or raw is None:
        return raw
    return clean_value(field, raw)


def describe_field(name: str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        has_custom_getter=name in GETTERS,
        has_custom_cleaner=name in CLEANERS,
        uncleaned_by_default_meta=name in config_constants.DEFAULT_UNCLEANED_META,
        uncleaned_by_default_episodes=name in config_constants.DEFAULT_UNCLEANED_EPISODES,
        meta_default=name in config_constants.DEFAULT_META_FIELDS,
        episode_default=name in config_constants.DEFAULT_EPISODE_FIELDS,
    )


def known_fields() -> List[str]:
    """All field names with custom handling or requested by default."""
    names = set(GETTERS) | set(CLEANERS)
    names.update(config_constants.DEFAULT_META_FIELDS)
    names.update(config_constants.DEFAULT_EPISODE_FIELDS)
    return sorted(names)
