"""Field access for configurable tree items.

Tree items are plain mappings whose keys are chosen by the host. The
FieldAccessor resolves the configured keys once, at construction, into
small getter/setter functions so that the rest of the engine never
performs ad hoc string lookups.

Open state (expanded/collapsed) is stored according to one of three
policies, selected once from ``TreeOptions.is_open``:

    PersistedFieldStore   is_open is a key: read/write it on the item
    ExternalStore         is_open is a callable: delegate every read/write
    EphemeralStore        is_open is None: engine-local dict keyed by id
"""

from abc import ABC, abstractmethod
from operator import itemgetter
from typing import Any, Callable, Dict, Optional

from ..config import ItemId, OpenStateStoreFn, TreeItem, TreeOptions


class OpenStateStore(ABC):
    """Base class for open-state storage policies."""

    def __init__(self, get_id: Callable[[TreeItem], Optional[ItemId]]):
        self._get_id = get_id

    @abstractmethod
    def get(self, item: TreeItem) -> bool:
        """Return True if the item is flagged open."""
        pass

    @abstractmethod
    def set(self, item: TreeItem, value: bool) -> None:
        """Flag the item open or closed."""
        pass

    @property
    def persisted(self) -> bool:
        """Whether the state outlives the engine instance."""
        return True


class PersistedFieldStore(OpenStateStore):
    """Open flag kept as a field on the item itself."""

    def __init__(self, get_id: Callable[[TreeItem], Optional[ItemId]], field_name: str):
        super().__init__(get_id)
        self.field_name = field_name

    def get(self, item: TreeItem) -> bool:
        return bool(item.get(self.field_name, False))

    def set(self, item: TreeItem, value: bool) -> None:
        item[self.field_name] = bool(value)

    def __repr__(self) -> str:
        return f"PersistedFieldStore({self.field_name!r})"


class ExternalStore(OpenStateStore):
    """Open flag owned by the host through a ``store(id, action, value)`` callable."""

    def __init__(self, get_id: Callable[[TreeItem], Optional[ItemId]], store: OpenStateStoreFn):
        super().__init__(get_id)
        self.store = store

    def get(self, item: TreeItem) -> bool:
        return bool(self.store(self._get_id(item), 'get'))

    def set(self, item: TreeItem, value: bool) -> None:
        self.store(self._get_id(item), 'set', bool(value))

    def __repr__(self) -> str:
        return f"ExternalStore({self.store!r})"


class EphemeralStore(OpenStateStore):
    """Open flags held only in memory for the lifetime of one engine."""

    def __init__(self, get_id: Callable[[TreeItem], Optional[ItemId]]):
        super().__init__(get_id)
        self.flags: Dict[ItemId, bool] = {}

    def get(self, item: TreeItem) -> bool:
        return self.flags.get(self._get_id(item), False)

    def set(self, item: TreeItem, value: bool) -> None:
        self.flags[self._get_id(item)] = bool(value)

    def forget(self, item_id: ItemId) -> None:
        """Drop the flag of an item that no longer exists."""
        self.flags.pop(item_id, None)

    def clear(self) -> None:
        self.flags.clear()

    @property
    def persisted(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"EphemeralStore({len(self.flags)} flags)"


def create_open_state_store(
    options: TreeOptions,
    get_id: Callable[[TreeItem], Optional[ItemId]],
) -> OpenStateStore:
    """Select the open-state policy described by ``options.is_open``."""
    is_open = options.is_open
    if is_open is None:
        return EphemeralStore(get_id)
    if callable(is_open):
        return ExternalStore(get_id, is_open)
    return PersistedFieldStore(get_id, is_open)


def _safe_getter(key: str) -> Callable[[TreeItem], Any]:
    """Like itemgetter, but missing keys read as None."""
    strict = itemgetter(key)

    def getter(item: TreeItem) -> Any:
        try:
            return strict(item)
        except KeyError:
            return None

    return getter


class FieldAccessor:
    """Resolves identity, parent, name and open state of tree items.

    All getters are pure functions of the item (plus the open-state store).
    Absent values read as None, absent open flags as closed.

    Example:
        >>> accessor = FieldAccessor(TreeOptions(id='key', parent_id='up'))
        >>> accessor.get_id({'key': 7, 'up': 3})
        7
    """

    def __init__(self, options: TreeOptions):
        """Initialize accessor from configuration.

        Args:
            options: Tree options carrying the field mapping
        """
        self.options = options
        self.id_field = options.id
        self.parent_id_field = options.parent_id
        self.name_field = options.name
        self.children_field = options.children

        self.get_id: Callable[[TreeItem], Optional[ItemId]] = _safe_getter(options.id)
        self.get_parent_id: Callable[[TreeItem], Optional[ItemId]] = _safe_getter(options.parent_id)
        self.get_name: Callable[[TreeItem], Any] = _safe_getter(options.name)
        self.open_state = create_open_state_store(options, self.get_id)

    def set_parent_id(self, item: TreeItem, parent_id: Optional[ItemId]) -> None:
        """Point an item at a new parent; None turns it into a root.

        Falsy root markers other than None (e.g. 0) are stored unchanged so
        the host's own convention survives a move among roots.
        """
        item[self.parent_id_field] = parent_id

    def is_root(self, item: TreeItem) -> bool:
        """Roots carry an absent or falsy parent id."""
        return not self.get_parent_id(item)

    def get_open(self, item: TreeItem) -> bool:
        return self.open_state.get(item)

    def set_open(self, item: TreeItem, value: bool) -> None:
        self.open_state.set(item, value)

    def make_item(self, item_id: ItemId, parent_id: Optional[ItemId], name: Any) -> TreeItem:
        """Build a fresh item using the configured field names."""
        return {
            self.id_field: item_id,
            self.parent_id_field: parent_id if parent_id else None,
            self.name_field: name,
        }

    def __repr__(self) -> str:
        return (
            f"FieldAccessor(id={self.id_field!r}, parent_id={self.parent_id_field!r}, "
            f"name={self.name_field!r}, open_state={self.open_state!r})"
        )
