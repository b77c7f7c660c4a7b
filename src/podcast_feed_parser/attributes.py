"""Normalization of repeatable, attribute-bearing elements."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from .config_constants import ATTRIBUTES_KEY, TEXT_KEY
from .models import AttributeItem


def extract_items(node: Any, nested_tag_names: Sequence[str] = ()) -> List[AttributeItem]:
    """Convert a list of parsed elements into AttributeItem records.

    Args:
        node: Value of an element key in the document tree. Anything other than
            a list yields no items.
        nested_tag_names: Child tags to extract recursively from each element.

    Returns:
        One AttributeItem per string or mapping element, in document order.
        None elements and elements of any other type are skipped.
    """
    if not isinstance(node, list):
        return []

    items: List[AttributeItem] = []
    for element in node:
        if isinstance(element, str):
            items.append(AttributeItem(value=element, attributes={}))
        elif isinstance(element, Mapping):
            items.append(
                AttributeItem(
                    value=element.get(TEXT_KEY),
                    attributes=_attributes_of(element),
                    nested_elements=_nested_items(element, nested_tag_names),
                )
            )
    return items


def _attributes_of(element: Mapping[str, Any]) -> Dict[str, str]:
    attrs = element.get(ATTRIBUTES_KEY)
    return dict(attrs) if isinstance(attrs, Mapping) else {}


def _nested_items(element: Mapping[str, Any], nested_tag_names: Sequence[str]):
    nested: Dict[str, List[AttributeItem]] = {}
    for tag in nested_tag_names or ():
        found = extract_items(element.get(tag))
        if found:
            nested[tag] = found
    return nested or None
