"""Conversion between nested and flat tree storage.

The engine stores trees flat: one list, relations through parent ids.
Hosts holding nested data (each item owning a ``children`` list) convert
once with flatten(); hosts rendering nested data build a view with
unflatten().
"""

from typing import Any, Iterable, List, Optional, Sequence

from ..config import ItemId, TreeItem, TreeOptions


def flatten(
    nested: Iterable[TreeItem],
    options: Optional[TreeOptions] = None,
) -> List[TreeItem]:
    """Convert a nested tree into flat storage.

    Items are emitted pre-order (parent before its children), their
    children sequences are removed, and each child's parent id is set to
    its container's id.

    Args:
        nested: Root items, each optionally holding a children sequence
        options: Field mapping (defaults to TreeOptions())

    Returns:
        New flat list; the item dicts themselves are reused
    """
    options = options or TreeOptions()
    flat: List[TreeItem] = []

    def visit(items: Iterable[TreeItem], parent_id: Optional[ItemId]) -> None:
        for item in items:
            children = item.pop(options.children, None) or []
            if parent_id:
                item[options.parent_id] = parent_id
            flat.append(item)
            visit(children, item.get(options.id))

    visit(nested, None)
    return flat


def unflatten(
    items: Sequence[TreeItem],
    options: Optional[TreeOptions] = None,
) -> List[TreeItem]:
    """Build a nested view of a flat tree.

    Returns dict copies so the flat collection is left untouched.
    Items whose parent id references a missing item are treated as roots.

    Args:
        items: Flat collection
        options: Field mapping (defaults to TreeOptions())

    Returns:
        List of root copies; parents carry a children list
    """
    options = options or TreeOptions()
    copies: List[TreeItem] = []
    for item in items:
        node = dict(item)
        node.pop(options.children, None)
        copies.append(node)
    by_id = {c.get(options.id): c for c in copies if c.get(options.id)}

    roots: List[TreeItem] = []
    for node in copies:
        parent_id: Any = node.get(options.parent_id)
        parent = by_id.get(parent_id) if parent_id else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.setdefault(options.children, []).append(node)
    return roots
