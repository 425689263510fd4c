"""Advisory capability gates for the presentation layer.

The engine trusts the mutations it is asked to perform. Hosts consult
these gates to decide which affordances (create, delete, drag) to offer.
"""

from ..config import TreeItem, TreeOptions
from .index import TreeIndex


class CapabilityGates:
    """Answers "may the user do X here?" from options and tree shape."""

    def __init__(self, options: TreeOptions, index: TreeIndex):
        self.options = options
        self.index = index

    @property
    def editable(self):
        return self.options.editable

    def is_empty(self) -> bool:
        return len(self.index.tree) == 0

    def can_create_root(self) -> bool:
        """Creating a root needs create rights and room for another root."""
        if not self.editable.can_create:
            return False
        return self.options.multiple_roots or not self.index.roots()

    def can_add_child(self, item: TreeItem) -> bool:
        """A child may be added while its depth stays within max_depth."""
        if not self.editable.can_create:
            return False
        return self.index.depth(item) < self.options.depth_limit

    def can_delete(self, item: TreeItem) -> bool:
        """Parents are deletable only when can_delete_parent is set."""
        if not self.editable.can_delete:
            return False
        return self.editable.can_delete_parent or not self.index.has_children(item)

    def can_update(self) -> bool:
        return self.editable.can_update

    def can_drag(self) -> bool:
        """Dragging is an update (move), so it follows can_update."""
        return self.editable.can_update
