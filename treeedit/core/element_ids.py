"""Opaque tagging of item ids embedded in rendered element ids.

Rendered elements carry ids like ``tree-item-42``. Drag events report
those element ids; these helpers convert them back to item ids.
"""

from typing import Iterable, Optional

from ..config import ItemId


TREE_ITEM_ID_PREFIX = 'tree-item-'


def element_id(item_id: ItemId, prefix: str = TREE_ITEM_ID_PREFIX) -> str:
    """Tag an item id for use as an element id."""
    return f"{prefix}{item_id}"


def strip_element_id(raw: Optional[str], prefix: str = TREE_ITEM_ID_PREFIX) -> Optional[str]:
    """Remove the tag prefix, leaving the item id as text (None when empty)."""
    if raw is None:
        return None
    raw = str(raw)
    if prefix and raw.startswith(prefix):
        raw = raw[len(prefix):]
    return raw or None


def parse_element_id(raw: Optional[str], prefix: str = TREE_ITEM_ID_PREFIX) -> Optional[ItemId]:
    """Recover an item id from a tagged element id.

    The prefix is stripped when present and numeric ids are converted back
    to int, since tagging turned them into strings. Collections whose ids
    are digit strings should resolve against the items instead, see
    ``DropZoneResolver``.

    Args:
        raw: Element id as reported by the host, may be None or empty
        prefix: Tag prefix

    Returns:
        The item id, or None when nothing usable remains
    """
    text = strip_element_id(raw, prefix)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return text


def find_element_id(chain: Iterable[Optional[str]]) -> Optional[str]:
    """First non-empty element id of an innermost-to-outermost chain.

    Pointer events usually hit a nested element without an id; walking up
    to the closest ancestor with one finds the tree item element.
    """
    for candidate in chain:
        if candidate:
            return candidate
    return None
