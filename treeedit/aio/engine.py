"""Mutation engine for TreeEdit.

TreeEngine owns the operations a host issues against its tree:
create, delete (cascading), update, move, select and toggle. Each
mutation runs through a HookPipeline so that a before-hook can veto it
and an after-hook observes it.

The host's list is mutated in place and never replaced. Identifiers are
re-resolved after every hook suspension point, since the host may change
the list while a hook is pending.
"""

import logging
import uuid
from typing import Any, Callable, List, Mapping, MutableSequence, Optional, Set, Union

from ..config import DropLocation, ItemId, TreeItem, TreeOptions, UpdateAction
from ..core import (
    CapabilityGates,
    EngineState,
    EphemeralStore,
    ExpandState,
    FieldAccessor,
    TreeIndex,
)
from ..exceptions import ConfigurationError
from .hook_policies import AFTER, HookErrorPolicy, FailFastPolicy
from .dragdrop import DropZoneResolver
from .hooks import HookPipeline, resolve


logger = logging.getLogger(__name__)

ItemOrId = Union[TreeItem, ItemId]


class TreeEngine:
    """Hierarchical-tree mutation engine over a flat collection.

    Example:
        tree = [{'id': 1, 'parentId': None, 'name': 'root'}]
        engine = TreeEngine(tree, TreeOptions(on_before_delete=confirm))
        await engine.create(1)          # add a child under item 1
        await engine.move(3, 5, 'above')
        await engine.delete(1)          # removes 1 and its whole subtree

    Attributes:
        tree: Host-owned list of items, mutated in place
        options: Immutable TreeOptions
        accessor: FieldAccessor for the configured field names
        index: TreeIndex over the live list
        state: EngineState (selection, drag bookkeeping)
        expand: ExpandState for open/closed flags
        gates: CapabilityGates for the presentation layer
        drag: DropZoneResolver for drag-and-drop gestures
    """

    def __init__(
        self,
        tree: MutableSequence[TreeItem],
        options: Union[TreeOptions, Mapping[str, Any], None] = None,
        log: Optional[logging.Logger] = None,
        hook_error_policy: Optional[HookErrorPolicy] = None,
    ):
        """Initialize the engine.

        Args:
            tree: The host's list of items (flat storage)
            options: TreeOptions or a mapping accepted by TreeOptions.from_dict
            log: Logger to use instead of this module's logger
            hook_error_policy: What a raising hook means (default FailFastPolicy)

        Raises:
            ConfigurationError: If the tree is not a mutable sequence or the
                options are malformed
        """
        if not isinstance(tree, MutableSequence):
            raise ConfigurationError(
                f"tree must be a mutable sequence, got {type(tree).__name__}"
            )
        if options is None:
            options = TreeOptions()
        elif isinstance(options, Mapping):
            options = TreeOptions.from_dict(options)

        self.tree = tree
        self.options = options
        self.log = log or logger
        self.policy = hook_error_policy or FailFastPolicy()

        self.accessor = FieldAccessor(options)
        self.index = TreeIndex(tree, self.accessor)
        self.state = EngineState()
        self.expand = ExpandState(self.index, self.accessor)
        self.gates = CapabilityGates(options, self.index)

        self._create_pipeline = self._pipeline(
            'create', self._append_item, options.on_before_create, self._after_create
        )
        self._delete_pipeline = self._pipeline(
            'delete', self._remove_subtree, options.on_before_delete, options.on_delete
        )
        self._update_pipeline = self._pipeline(
            'update', self._replace_item, options.on_before_update, options.on_update
        )

        self.drag = DropZoneResolver(self)

    def _pipeline(
        self,
        operation: str,
        mutate: Callable[..., Optional[bool]],
        before: Optional[Callable],
        after: Optional[Callable],
    ) -> HookPipeline:
        return HookPipeline(operation, mutate, before, after, policy=self.policy, log=self.log)

    # === Lookup ===

    def find(self, item_id: Optional[ItemId]) -> Optional[TreeItem]:
        return self.index.find(item_id)

    def children(self, item: ItemOrId) -> List[TreeItem]:
        resolved = self._resolve(item)
        return self.index.children(resolved) if resolved is not None else []

    def has_children(self, item: ItemOrId) -> bool:
        resolved = self._resolve(item)
        return resolved is not None and self.index.has_children(resolved)

    def depth(self, item: ItemOrId) -> int:
        """Depth of an item (0 for roots); -1 for an unknown id."""
        resolved = self._resolve(item)
        return self.index.depth(resolved) if resolved is not None else -1

    def roots(self) -> List[TreeItem]:
        return self.index.roots()

    def _resolve(self, item: Optional[ItemOrId]) -> Optional[TreeItem]:
        if isinstance(item, Mapping):
            return item
        return self.index.find(item)

    # === Create ===

    async def create(self, parent_id: Optional[ItemId] = None) -> Optional[TreeItem]:
        """Create a new item, as a root or as the last child of a parent.

        The item is built by the configured factory ``create(parent, depth)``,
        where depth is the new item's depth (``-1`` for roots), or by the
        default factory. On success the item is appended, selected, and its
        parent is forced open.

        Args:
            parent_id: Parent to create under; absent/empty creates a root

        Returns:
            The created item, or None if the parent is unknown, the factory
            produced nothing, or the creation was vetoed
        """
        parent = None
        if parent_id:
            parent = self.index.find(parent_id)
            if parent is None:
                self.log.debug(f"create: unknown parent {parent_id!r}")
                return None

        depth = self.index.depth(parent) + 1 if parent is not None else -1
        if self.options.create is not None:
            item = await resolve(self.options.create(parent, depth))
        else:
            item = self._default_item(parent)

        if item is None:
            self.log.warning("create: factory returned no item")
            return None

        self.log.debug(f"create: {self.accessor.get_id(item)!r} under {parent_id!r}")
        created = await self._create_pipeline(item)
        return item if created else None

    def _default_item(self, parent: Optional[TreeItem]) -> TreeItem:
        parent_id = self.accessor.get_id(parent) if parent is not None else None
        return self.accessor.make_item(str(uuid.uuid4()), parent_id, self.options.default_name)

    def _append_item(self, item: TreeItem) -> bool:
        parent_id = self.accessor.get_parent_id(item)
        if parent_id and self.index.find(parent_id) is None:
            # Parent disappeared while the before-hook was pending
            self.log.debug(f"create: parent {parent_id!r} no longer exists")
            return False
        self.tree.append(item)
        return True

    async def _after_create(self, item: TreeItem) -> None:
        parent = self.index.find(self.accessor.get_parent_id(item))
        if parent is not None:
            self.expand.force_open(parent)
        await self.select(self.accessor.get_id(item), True)
        if self.options.on_create is not None:
            await resolve(self.options.on_create(item))

    # === Delete ===

    async def delete(self, item_id: Optional[ItemId]) -> bool:
        """Delete an item together with all its descendants.

        Whether parents may be deleted at all is a presentation decision
        (see CapabilityGates.can_delete); once invoked, delete cascades.

        Returns:
            True if the item was found and removed
        """
        item = self.index.find(item_id)
        if item is None:
            self.log.debug(f"delete: unknown id {item_id!r}")
            return False
        self.log.debug(f"delete: {item_id!r}")
        return await self._delete_pipeline(item)

    def _remove_subtree(self, item: TreeItem) -> bool:
        item_id = self.accessor.get_id(item)
        current = self.index.find(item_id)
        if current is None:
            return False

        doomed: Set[ItemId] = {item_id}
        doomed.update(self.accessor.get_id(d) for d in self.index.iter_descendants(current))

        get_id = self.accessor.get_id
        self.tree[:] = [i for i in self.tree if get_id(i) not in doomed]

        open_state = self.accessor.open_state
        if isinstance(open_state, EphemeralStore):
            for doomed_id in doomed:
                open_state.forget(doomed_id)
        if self.state.selected_id in doomed:
            self.state.selected_id = None
        if self.state.drag_source_id in doomed:
            self.state.end_drag()

        self.log.debug(f"delete: removed {len(doomed)} item(s)")
        return True

    # === Update ===

    async def update(
        self,
        item: TreeItem,
        action: Union[UpdateAction, str] = UpdateAction.EDIT,
        new_parent: Optional[TreeItem] = None,
    ) -> bool:
        """Replace the stored item that has the same id, keeping its position.

        Args:
            item: Updated item
            action: Reported to the update hooks
            new_parent: Reported to the update hooks

        Returns:
            True if an item was replaced
        """
        item_id = self.accessor.get_id(item)
        if self.index.find(item_id) is None:
            self.log.debug(f"update: unknown id {item_id!r}")
            return False
        self.log.debug(f"update: {item_id!r} ({UpdateAction(action).value})")
        return await self._update_pipeline(item, UpdateAction(action), new_parent)

    def _replace_item(self, item: TreeItem, action: UpdateAction, new_parent: Optional[TreeItem]) -> bool:
        position = self.index.index_of(self.accessor.get_id(item))
        if position < 0:
            return False
        self.tree[position] = item
        return True

    # === Move ===

    async def move(
        self,
        source_id: ItemId,
        target_id: Optional[ItemId] = None,
        drop_location: Union[DropLocation, str, None] = DropLocation.AS_CHILD,
    ) -> bool:
        """Move an item relative to a target.

        ``above``/``below`` make the source a sibling placed immediately
        before/after the target; ``as_child`` makes it the last child of
        the target. Without a target the source becomes the last root.
        Depth limits are not enforced here; DropZoneResolver validates
        gestures before calling this.

        Args:
            source_id: Item to move
            target_id: Reference item, or None for root placement
            drop_location: DropLocation (or its string value)

        Returns:
            True if the item was moved
        """
        location = DropLocation(drop_location) if drop_location is not None else DropLocation.AS_CHILD
        source = self.index.find(source_id)
        if source is None:
            self.log.debug(f"move: unknown source {source_id!r}")
            return False

        target = None
        if target_id:
            if target_id == source_id:
                self.log.debug(f"move: {source_id!r} onto itself")
                return False
            target = self.index.find(target_id)
            if target is None:
                self.log.debug(f"move: unknown target {target_id!r}")
                return False

        new_parent = self._new_parent(target, location)
        self.log.debug(f"move: {source_id!r} {location.value} {target_id!r}")

        def mutate(item: TreeItem, action: UpdateAction, parent: Optional[TreeItem]) -> bool:
            return self._reposition(source_id, target_id, location)

        pipeline = self._pipeline('move', mutate, self.options.on_before_update, self.options.on_update)
        return await pipeline(source, UpdateAction.MOVE, new_parent)

    def _new_parent(self, target: Optional[TreeItem], location: DropLocation) -> Optional[TreeItem]:
        if target is None:
            return None
        if location is DropLocation.AS_CHILD:
            return target
        return self.index.parent(target)

    def _reposition(self, source_id: ItemId, target_id: Optional[ItemId], location: DropLocation) -> bool:
        """Remove the source and reinsert it at the position implied by the target.

        Reordering among siblings and reparenting share this single path.
        """
        position = self.index.index_of(source_id)
        if position < 0:
            return False

        target = None
        if target_id:
            target = self.index.find(target_id)
            if target is None:
                return False

        if target is None:
            new_parent_id = None
        elif location is DropLocation.AS_CHILD:
            new_parent_id = self.accessor.get_id(target)
        else:
            new_parent_id = self.accessor.get_parent_id(target)

        source = self.tree.pop(position)
        if target is None or location is DropLocation.AS_CHILD:
            insert_at = len(self.tree)
        else:
            insert_at = self.index.index_of(target_id)
            if location is DropLocation.BELOW:
                insert_at += 1
        self.tree.insert(insert_at, source)
        self.accessor.set_parent_id(source, new_parent_id)
        return True

    # === Selection and expansion ===

    async def select(self, item_id: Optional[ItemId], is_selected: bool = True) -> bool:
        """Select or deselect an item and notify ``on_select(item, is_selected)``.

        Returns:
            False if the id is unknown
        """
        item = self.index.find(item_id)
        if item is None:
            return False
        if is_selected:
            self.state.selected_id = item_id
        elif self.state.selected_id == item_id:
            self.state.selected_id = None
        self.log.debug(f"select: {item_id!r} {'on' if is_selected else 'off'}")

        if self.options.on_select is not None:
            try:
                await resolve(self.options.on_select(item, is_selected))
            except Exception as e:
                self.policy.handle(e, 'select', AFTER, item)
        return True

    async def toggle_selection(self, item_id: Optional[ItemId]) -> bool:
        """Click behaviour: select the item unless it is already selected."""
        return await self.select(item_id, self.state.selected_id != item_id)

    @property
    def selected(self) -> Optional[TreeItem]:
        return self.index.find(self.state.selected_id)

    def toggle(self, item: ItemOrId) -> bool:
        """Flip the open flag of an item with children."""
        resolved = self._resolve(item)
        if resolved is None:
            return False
        return self.expand.toggle(resolved)

    def is_expanded(self, item: ItemOrId) -> bool:
        resolved = self._resolve(item)
        return resolved is not None and self.expand.is_expanded(resolved)

    def force_open(self, item: ItemOrId) -> None:
        resolved = self._resolve(item)
        if resolved is not None:
            self.expand.force_open(resolved)

    def __len__(self) -> int:
        return len(self.tree)

    def __repr__(self) -> str:
        return f"TreeEngine({len(self.tree)} items, {self.accessor!r})"
