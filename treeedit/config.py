"""Configuration system for TreeEdit.

This module defines how hosts describe their tree items (which keys hold
the id, parent id, name and open flag), which editing capabilities are
offered, and which hooks gate or observe each mutation.
"""

import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


TreeItem = Dict[str, Any]
ItemId = Union[str, int]

# Signature of an external open-state store: store(id, 'get') -> bool,
# store(id, 'set', value) -> None
OpenStateStoreFn = Callable[..., Optional[bool]]


class DropLocation(str, Enum):
    """Where a dragged item lands relative to the drop target."""
    ABOVE = "above"          # Sibling, immediately before the target
    AS_CHILD = "as_child"    # Last child of the target
    BELOW = "below"          # Sibling, immediately after the target


class UpdateAction(str, Enum):
    """Kind of update passed to the update hooks."""
    EDIT = "edit"
    MOVE = "move"


@dataclass(frozen=True)
class EditableOptions:
    """Capability flags offered to the presentation layer.

    These are advisory: the engine exposes them through its capability
    gates but does not refuse a mutation that the host requests directly.
    """

    can_create: bool = False
    can_delete: bool = False
    can_update: bool = False
    can_delete_parent: bool = False  # Deleting a parent cascades to its subtree


_HOOK_SLOTS = (
    'create',
    'on_before_create',
    'on_create',
    'on_before_delete',
    'on_delete',
    'on_before_update',
    'on_update',
    'on_select',
)

# camelCase spellings accepted by TreeOptions.from_dict
_CAMEL_CASE_KEYS = {
    'parentId': 'parent_id',
    'isOpen': 'is_open',
    'maxDepth': 'max_depth',
    'multipleRoots': 'multiple_roots',
    'defaultName': 'default_name',
    'onBeforeCreate': 'on_before_create',
    'onCreate': 'on_create',
    'onBeforeDelete': 'on_before_delete',
    'onDelete': 'on_delete',
    'onBeforeUpdate': 'on_before_update',
    'onUpdate': 'on_update',
    'onSelect': 'on_select',
    'canCreate': 'can_create',
    'canDelete': 'can_delete',
    'canUpdate': 'can_update',
    'canDeleteParent': 'can_delete_parent',
}

# Accepted for compatibility and ignored; pass a logger to TreeEngine instead
_IGNORED_KEYS = frozenset({'logging'})


@dataclass(frozen=True)
class TreeOptions:
    """Immutable configuration for one TreeEngine instance.

    Field mapping:
        id, parent_id, name, children: keys looked up on every tree item.
        is_open: key of a persisted open flag, None for ephemeral
            engine-local expansion state, or a callable store
            ``store(id, action, value=None)`` for externally persisted state.

    Limits:
        max_depth: deepest level new items may be created or moved to
            (1 allows children only, 2 grandchildren, ...). None is unbounded.
        multiple_roots: whether more than one root item is permitted.

    Hooks (all optional, sync or async):
        create(parent, depth) -> item: factory for new items.
        on_before_create(item), on_before_delete(item),
        on_before_update(item, action, new_parent): return False to veto.
        on_create(item), on_delete(item), on_update(item, action, new_parent),
        on_select(item, is_selected): notifications.
    """

    id: str = 'id'
    parent_id: str = 'parentId'
    name: str = 'name'
    children: str = 'children'
    is_open: Union[str, None, OpenStateStoreFn] = 'isOpen'
    max_depth: Optional[int] = None
    multiple_roots: bool = True
    editable: EditableOptions = field(default_factory=EditableOptions)
    placeholder: str = 'Create your first item'
    default_name: str = 'New...'

    create: Optional[Callable] = None
    on_before_create: Optional[Callable] = None
    on_create: Optional[Callable] = None
    on_before_delete: Optional[Callable] = None
    on_delete: Optional[Callable] = None
    on_before_update: Optional[Callable] = None
    on_update: Optional[Callable] = None
    on_select: Optional[Callable] = None

    def __post_init__(self):
        for key in ('id', 'parent_id', 'name', 'children'):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(
                    f"Field name '{key}' must be a non-empty string, got {value!r}"
                )

        if self.is_open is not None and not callable(self.is_open):
            if not isinstance(self.is_open, str) or not self.is_open:
                raise ConfigurationError(
                    f"is_open must be a field name, None or a store callable, got {self.is_open!r}"
                )

        if self.max_depth is not None:
            # bool is an int subclass but never a meaningful depth
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise ConfigurationError(f"max_depth must be an int, got {self.max_depth!r}")
            if self.max_depth < 1:
                raise ConfigurationError(f"max_depth must be positive, got {self.max_depth}")

        if not isinstance(self.editable, EditableOptions):
            raise ConfigurationError(
                f"editable must be EditableOptions, got {type(self.editable).__name__}"
            )

        for slot in _HOOK_SLOTS:
            hook = getattr(self, slot)
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"Hook '{slot}' must be callable, got {hook!r}")

    @property
    def depth_limit(self) -> float:
        """max_depth as a comparable number (infinity when unbounded)."""
        return float('inf') if self.max_depth is None else self.max_depth

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'TreeOptions':
        """Build options from a mapping using camelCase or snake_case keys.

        The boolean ``logging`` option is accepted and ignored; logging is
        configured by passing a logger to TreeEngine.

        Args:
            options: Mapping such as ``{'parentId': 'parent', 'editable':
                {'canCreate': True}}``

        Returns:
            Validated TreeOptions

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            if key in _IGNORED_KEYS:
                logger.debug(f"Ignoring tree option {key!r}; use TreeEngine(log=...)")
                continue
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown tree option: {key!r}")
            kwargs[name] = value

        editable = kwargs.get('editable')
        if isinstance(editable, Mapping):
            flags = {}
            editable_fields = {f.name for f in fields(EditableOptions)}
            for key, value in editable.items():
                name = _CAMEL_CASE_KEYS.get(key, key)
                if name not in editable_fields:
                    raise ConfigurationError(f"Unknown editable option: {key!r}")
                flags[name] = bool(value)
            kwargs['editable'] = EditableOptions(**flags)

        return cls(**kwargs)
