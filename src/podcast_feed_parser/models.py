from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class AttributeItem:
    """One occurrence of a repeatable, attribute-bearing feed element.

    Elements such as ``<podcast:funding>`` or ``<podcast:soundbite>`` may appear
    several times and carry both text and attributes. The attribute extractor
    normalizes every occurrence into this shape.

    Attributes:
        value: Text content of the element, or None when it has none.
        attributes: Attribute name to value mapping (empty when none).
        nested_elements: Items of requested nested tags, keyed by tag name.
            None when no nested tag was requested or none was found.

    Example:
        >>> item = AttributeItem(
        ...     value="Support the show",
        ...     attributes={"url": "https://example.com/donate"},
        ... )
    """

    value: Optional[str]
    attributes: Dict[str, str] = field(default_factory=dict)
    nested_elements: Optional[Dict[str, List["AttributeItem"]]] = None


@dataclass
class Podcast:
    """Extraction result: feed-level metadata plus the ordered episode list.

    Attributes:
        meta: Mapping of requested meta field names to extracted values.
        episodes: Episode records, sorted by order hint, date and title.

    Example:
        >>> podcast = Podcast(meta={"title": "My Show"}, episodes=[])
        >>> podcast.to_dict()
        {'meta': {'title': 'My Show'}, 'episodes': []}
    """

    meta: Dict[str, Any]
    episodes: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"meta": self.meta, "episodes": self.episodes}
