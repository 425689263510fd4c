"""Lookup, ancestry and depth over a flat tree collection.

The collection is a single ordered list of items; parent/child relations
are derived from parent ids on every call. Nothing is cached, so the
index always reflects the live list, including changes the host makes
between (or during) asynchronous operations.
"""

import logging
from typing import Iterator, List, MutableSequence, Optional, Set

from ..config import ItemId, TreeItem
from .accessor import FieldAccessor


logger = logging.getLogger(__name__)


class TreeIndex:
    """Recursive-style queries over the live flat collection.

    Attributes:
        tree: The host-owned list of items (never replaced)
        accessor: Field accessor resolving ids and parent ids
    """

    def __init__(self, tree: MutableSequence[TreeItem], accessor: FieldAccessor):
        self.tree = tree
        self.accessor = accessor

    def find(self, item_id: Optional[ItemId]) -> Optional[TreeItem]:
        """Locate the item with the given id.

        Args:
            item_id: Identifier to look up; empty or absent ids never match

        Returns:
            The matching item or None
        """
        if not item_id:
            return None
        get_id = self.accessor.get_id
        for item in self.tree:
            if get_id(item) == item_id:
                return item
        return None

    def index_of(self, item_id: Optional[ItemId]) -> int:
        """Position of the item in the collection, -1 if absent."""
        if not item_id:
            return -1
        get_id = self.accessor.get_id
        for i, item in enumerate(self.tree):
            if get_id(item) == item_id:
                return i
        return -1

    def children(self, item: TreeItem) -> List[TreeItem]:
        """Direct children of an item, in collection order."""
        item_id = self.accessor.get_id(item)
        if not item_id:
            return []
        get_parent_id = self.accessor.get_parent_id
        return [child for child in self.tree if get_parent_id(child) == item_id]

    def has_children(self, item: TreeItem) -> bool:
        item_id = self.accessor.get_id(item)
        if not item_id:
            return False
        get_parent_id = self.accessor.get_parent_id
        return any(get_parent_id(child) == item_id for child in self.tree)

    def roots(self) -> List[TreeItem]:
        """Items without a parent, in collection order."""
        return [item for item in self.tree if self.accessor.is_root(item)]

    def parent(self, item: TreeItem) -> Optional[TreeItem]:
        return self.find(self.accessor.get_parent_id(item))

    def iter_ancestors(self, item: TreeItem) -> Iterator[TreeItem]:
        """Yield parent, grandparent, ... up to the root.

        The walk is bounded by the collection size and stops on a revisited
        id, so cyclic or dangling parent chains terminate.
        """
        seen: Set[ItemId] = {self.accessor.get_id(item)}
        current = item
        for _ in range(len(self.tree)):
            parent = self.parent(current)
            if parent is None:
                return
            parent_id = self.accessor.get_id(parent)
            if parent_id in seen:
                logger.warning(f"Cyclic parent chain detected at id {parent_id!r}")
                return
            seen.add(parent_id)
            yield parent
            current = parent

    def ancestors(self, item: TreeItem) -> List[TreeItem]:
        return list(self.iter_ancestors(item))

    def depth(self, item: TreeItem) -> int:
        """Depth of an item: 0 for a root, 1 + depth(parent) otherwise.

        An item whose parent id points at a missing item counts one level
        for that dangling reference. Cycles are cut by the bounded walk in
        iter_ancestors, so the result is always finite.

        Args:
            item: Item to measure

        Returns:
            Depth level (0 for root)
        """
        if self.accessor.is_root(item):
            return 0
        depth = 0
        last = item
        for ancestor in self.iter_ancestors(item):
            depth += 1
            last = ancestor
        if not self.accessor.is_root(last):
            # Dangling or cyclic chain: count the unresolved parent reference
            if self.parent(last) is None:
                logger.warning(
                    f"Item {self.accessor.get_id(last)!r} references missing parent "
                    f"{self.accessor.get_parent_id(last)!r}"
                )
            depth += 1
        return depth

    def iter_descendants(self, item: TreeItem) -> Iterator[TreeItem]:
        """Yield every transitive descendant, breadth first."""
        seen: Set[ItemId] = {self.accessor.get_id(item)}
        queue = [item]
        while queue:
            current = queue.pop(0)
            for child in self.children(current):
                child_id = self.accessor.get_id(child)
                if child_id in seen:
                    continue
                seen.add(child_id)
                yield child
                queue.append(child)

    def descendants(self, item: TreeItem) -> List[TreeItem]:
        return list(self.iter_descendants(item))

    def is_descendant(self, candidate: TreeItem, ancestor: TreeItem) -> bool:
        """True if ``candidate`` sits somewhere below ``ancestor``."""
        ancestor_id = self.accessor.get_id(ancestor)
        return any(
            self.accessor.get_id(a) == ancestor_id
            for a in self.iter_ancestors(candidate)
        )

    def __len__(self) -> int:
        return len(self.tree)

    def __contains__(self, item_id: ItemId) -> bool:
        return self.find(item_id) is not None
