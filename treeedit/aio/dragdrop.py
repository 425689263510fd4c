"""Drag-and-drop reordering for TreeEdit.

The host captures pointer events and hands over already computed
geometry: the bounding box of the element under the pointer and the
pointer's vertical coordinate. The resolver turns that into a drop
location, checks whether the gesture is legal, and performs the move.

Gesture states:

    idle --drag_start--> dragging --drag_over--> dragging
                            |--drag_leave--> (affordance cleared)
                            |--drop / drag_end--> idle
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import DropLocation, ItemId, TreeItem, UpdateAction
from ..core.element_ids import TREE_ITEM_ID_PREFIX, parse_element_id, strip_element_id
from .hook_policies import BEFORE
from .hooks import resolve

if TYPE_CHECKING:
    from .engine import TreeEngine


@dataclass(frozen=True)
class DropGeometry:
    """Bounding box of the drop target and the pointer position."""

    top: float
    height: float
    pointer_y: float

    @property
    def is_usable(self) -> bool:
        """Finite coordinates and a box with positive height."""
        coords = (self.top, self.height, self.pointer_y)
        return all(math.isfinite(value) for value in coords) and self.height > 0


@dataclass(frozen=True)
class DropZone:
    """Outcome of classifying a drag-over position.

    Attributes:
        target_id: Item under the pointer (None for the container itself)
        location: Classified drop location (None when unclassifiable)
        valid: Whether dropping here would be accepted
    """

    target_id: Optional[ItemId]
    location: Optional[DropLocation]
    valid: bool


REJECTED = DropZone(target_id=None, location=None, valid=False)


def classify_drop(geometry: Optional[DropGeometry]) -> Optional[DropLocation]:
    """Classify the pointer position into thirds of the target's height.

    Top third is ``above``, middle third ``as_child``, bottom third
    ``below``. Pointers outside the box clamp to the nearest edge.

    Returns:
        DropLocation, or None when the geometry is missing or degenerate
    """
    if geometry is None or not geometry.is_usable:
        return None
    offset = geometry.pointer_y - geometry.top
    third = geometry.height / 3
    if offset < third:
        return DropLocation.ABOVE
    if offset < 2 * third:
        return DropLocation.AS_CHILD
    return DropLocation.BELOW


class DropZoneResolver:
    """Tracks one drag gesture at a time and applies the resulting move.

    Attributes:
        engine: Owning TreeEngine
        prefix: Tag prefix of element ids reported by the host
    """

    def __init__(self, engine: 'TreeEngine', prefix: str = TREE_ITEM_ID_PREFIX):
        self.engine = engine
        self.prefix = prefix

    @property
    def state(self):
        return self.engine.state

    def _resolve_element(self, raw: Optional[str]) -> Optional[ItemId]:
        """Item id named by an element id, matched against the live collection.

        Tagging loses the id's type, so the stripped text is tried first
        and its numeric form second.
        """
        text = strip_element_id(raw, self.prefix)
        if text is None:
            return None
        if self.engine.find(text) is not None:
            return text
        return parse_element_id(text, prefix='')

    # === Gesture events ===

    def drag_start(self, element_id: Optional[str]) -> Optional[ItemId]:
        """Record the dragged item.

        Args:
            element_id: Element id of the dragged element (tagged or raw)

        Returns:
            The source item id, or None if it does not identify an item
        """
        source_id = self._resolve_element(element_id)
        if source_id is None or self.engine.find(source_id) is None:
            self.engine.log.debug(f"drag_start: no item for element {element_id!r}")
            return None
        self.state.drag_source_id = source_id
        self.state.clear_drop_affordance()
        self.engine.log.debug(f"drag_start: {source_id!r}")
        return source_id

    async def drag_over(
        self,
        target_element_id: Optional[str],
        geometry: Optional[DropGeometry],
    ) -> DropZone:
        """Classify the position under the pointer and check its validity.

        A valid zone is remembered as the current drop affordance; an
        invalid one clears it.
        """
        source = self.engine.find(self.state.drag_source_id)
        target_id = self._resolve_element(target_element_id)
        location = classify_drop(geometry)
        if source is None or target_id is None or location is None:
            self.state.clear_drop_affordance()
            return DropZone(target_id=target_id, location=location, valid=False)

        target = self.engine.find(target_id)
        valid = target is not None and await self.is_valid_target(source, target, location)

        # The hook may have suspended; only keep feedback for the live gesture
        if valid and self.state.drag_source_id == self.engine.accessor.get_id(source):
            self.state.drop_target_id = target_id
            self.state.drop_location = location
        else:
            self.state.clear_drop_affordance()
        return DropZone(target_id=target_id, location=location, valid=valid)

    def drag_leave(self) -> None:
        """Pointer left a candidate target; the drag itself continues."""
        self.state.clear_drop_affordance()

    def drag_end(self) -> None:
        """Gesture finished or aborted without a drop."""
        self.state.end_drag()

    async def drop(
        self,
        target_element_id: Optional[str] = None,
        geometry: Optional[DropGeometry] = None,
        transfer_data: Optional[str] = None,
        over_container: bool = False,
    ) -> bool:
        """Complete the gesture.

        Args:
            target_element_id: Element id under the pointer, if any
            geometry: Target bounding box and pointer position
            transfer_data: Source element id carried by the drag event;
                defaults to the id recorded at drag_start
            over_container: True when the pointer is over the tree
                container itself; a drop there without an identifiable
                target moves the source to the end of the roots

        Returns:
            True if the source was moved
        """
        try:
            return await self._drop(target_element_id, geometry, transfer_data, over_container)
        finally:
            self.state.end_drag()

    async def _drop(
        self,
        target_element_id: Optional[str],
        geometry: Optional[DropGeometry],
        transfer_data: Optional[str],
        over_container: bool,
    ) -> bool:
        source_id = self._resolve_element(transfer_data) if transfer_data else self.state.drag_source_id
        source = self.engine.find(source_id)
        if source is None:
            self.engine.log.debug(f"drop: no source for {transfer_data!r}")
            return False

        target_id = self._resolve_element(target_element_id)
        target = self.engine.find(target_id)
        if target is None:
            if not over_container:
                self.engine.log.debug(f"drop: no target for element {target_element_id!r}")
                return False
            if not self.is_legal(source, None, None):
                return False
            self.engine.log.debug(f"drop: {source_id!r} to root")
            return await self.engine.move(source_id, None, None)

        location = classify_drop(geometry)
        if location is None:
            self.engine.log.debug(f"drop: unusable geometry {geometry!r}")
            return False
        if not self.is_legal(source, target, location):
            return False

        self.engine.log.debug(f"drop: {source_id!r} {location.value} {target_id!r}")
        moved = await self.engine.move(source_id, target_id, location)
        if moved and location is DropLocation.AS_CHILD:
            parent = self.engine.find(target_id)
            if parent is not None:
                self.engine.expand.force_open(parent)
        return moved

    # === Validation ===

    def prospective_parent(self, target: Optional[TreeItem], location: Optional[DropLocation]) -> Optional[TreeItem]:
        """Parent the source would get: the target for as_child, else the target's parent."""
        if target is None:
            return None
        if location is DropLocation.AS_CHILD:
            return target
        return self.engine.index.parent(target)

    def is_legal(
        self,
        source: TreeItem,
        target: Optional[TreeItem],
        location: Optional[DropLocation],
    ) -> bool:
        """Structural checks, without consulting hooks.

        Rejects dropping an item on itself or inside its own subtree,
        exceeding max_depth, and adding a root when multiple_roots is off.
        A missing target means root placement.
        """
        accessor = self.engine.accessor
        index = self.engine.index
        options = self.engine.options

        if target is None:
            return options.multiple_roots

        if accessor.get_id(source) == accessor.get_id(target):
            return False
        if index.is_descendant(target, source):
            return False

        new_parent = self.prospective_parent(target, location)
        if new_parent is None:
            return options.multiple_roots or accessor.is_root(source)

        new_depth = index.depth(new_parent) + 1
        return new_depth <= options.depth_limit

    async def is_valid_target(
        self,
        source: TreeItem,
        target: Optional[TreeItem],
        location: Optional[DropLocation],
    ) -> bool:
        """Structural checks plus the ``on_before_update`` veto."""
        if not self.is_legal(source, target, location):
            return False
        hook = self.engine.options.on_before_update
        if hook is None:
            return True
        new_parent = self.prospective_parent(target, location)
        try:
            verdict = await resolve(hook(source, UpdateAction.MOVE, new_parent))
        except Exception as e:
            verdict = self.engine.policy.handle(e, 'move', BEFORE, source)
        return verdict is not False
