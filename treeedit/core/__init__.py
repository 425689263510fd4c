"""Core, I/O-free components of TreeEdit.

Everything here is synchronous and operates on the live flat collection:
field access, lookup and depth, expansion state, capability gates and
storage conversion.
"""

from .accessor import (
    FieldAccessor,
    OpenStateStore,
    PersistedFieldStore,
    ExternalStore,
    EphemeralStore,
    create_open_state_store,
)
from .index import TreeIndex
from .state import EngineState
from .expand import ExpandState
from .gates import CapabilityGates
from .convert import flatten, unflatten

__all__ = [
    # Field access
    'FieldAccessor',
    'OpenStateStore',
    'PersistedFieldStore',
    'ExternalStore',
    'EphemeralStore',
    'create_open_state_store',
    # Lookup
    'TreeIndex',
    # State
    'EngineState',
    'ExpandState',
    'CapabilityGates',
    # Storage conversion
    'flatten',
    'unflatten',
]
