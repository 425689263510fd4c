"""Expand/collapse state tracking.

Reads and writes go through the FieldAccessor's open-state store, so the
same calls work for persisted fields, external stores and ephemeral
engine-local flags.
"""

import logging

from ..config import TreeItem
from .accessor import FieldAccessor
from .index import TreeIndex


logger = logging.getLogger(__name__)


class ExpandState:
    """Tracks which items are expanded."""

    def __init__(self, index: TreeIndex, accessor: FieldAccessor):
        self.index = index
        self.accessor = accessor

    def is_expanded(self, item: TreeItem) -> bool:
        """True iff the item has children and is flagged open."""
        return self.index.has_children(item) and self.accessor.get_open(item)

    def toggle(self, item: TreeItem) -> bool:
        """Flip the open flag of an item that has children.

        Childless items are left untouched.

        Returns:
            True if the flag was flipped
        """
        if not self.index.has_children(item):
            return False
        is_open = self.accessor.get_open(item)
        self.accessor.set_open(item, not is_open)
        logger.debug(f"Toggled {self.accessor.get_id(item)!r} to {'closed' if is_open else 'open'}")
        return True

    def force_open(self, item: TreeItem) -> None:
        """Set the open flag; never closes."""
        if not self.accessor.get_open(item):
            self.accessor.set_open(item, True)

    def collapse_all(self) -> None:
        """Close every item currently flagged open."""
        for item in self.index.tree:
            if self.accessor.get_open(item):
                self.accessor.set_open(item, False)
