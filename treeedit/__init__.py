"""TreeEdit - Hierarchical Tree Mutation Engine.

TreeEdit manipulates a host-owned, flat list of tree items whose id,
parent and name fields are configurable. It provides create, cascading
delete, update and move operations gated by optional (async) veto hooks,
drag-and-drop reordering from pre-computed geometry, and expand/collapse
state tracking. Rendering is left entirely to the host.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treeedit import TreeEngine, TreeOptions

    tree = [{'id': 1, 'parentId': None, 'name': 'Root'}]
    engine = TreeEngine(tree, TreeOptions(max_depth=3))
    await engine.create(1)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import (
    TreeOptions,
    EditableOptions,
    DropLocation,
    UpdateAction,
)
from .exceptions import (
    TreeEditError,
    ConfigurationError,
    HookErrorThresholdExceeded,
)
from .core import flatten, unflatten
from .core.element_ids import (
    TREE_ITEM_ID_PREFIX,
    element_id,
    parse_element_id,
    strip_element_id,
    find_element_id,
)
from .aio import (
    TreeEngine,
    DropGeometry,
    DropZone,
    FailFastPolicy,
    VetoOnErrorPolicy,
    ThresholdPolicy,
)

__all__ = [
    "__version__",
    # Configuration
    "TreeOptions",
    "EditableOptions",
    "DropLocation",
    "UpdateAction",
    # Errors
    "TreeEditError",
    "ConfigurationError",
    "HookErrorThresholdExceeded",
    # Engine
    "TreeEngine",
    "DropGeometry",
    "DropZone",
    "FailFastPolicy",
    "VetoOnErrorPolicy",
    "ThresholdPolicy",
    # Helpers
    "flatten",
    "unflatten",
    "TREE_ITEM_ID_PREFIX",
    "element_id",
    "parse_element_id",
    "strip_element_id",
    "find_element_id",
]
