"""Asynchronous implementation of TreeEdit.

Mutations are coroutines because hosts may gate them with asynchronous
hooks (confirmation dialogs, server round trips). The tree itself is
only touched synchronously, between suspension points.
"""

# Hook pipeline
from .hooks import HookPipeline, resolve

# Hook error policies
from .hook_policies import (
    HookErrorPolicy,
    FailFastPolicy,
    VetoOnErrorPolicy,
    ThresholdPolicy,
)

# Engine
from .engine import TreeEngine

# Drag and drop
from .dragdrop import (
    DropGeometry,
    DropZone,
    DropZoneResolver,
    classify_drop,
)

__all__ = [
    # Hook pipeline
    'HookPipeline',
    'resolve',
    # Policies
    'HookErrorPolicy',
    'FailFastPolicy',
    'VetoOnErrorPolicy',
    'ThresholdPolicy',
    # Engine
    'TreeEngine',
    # Drag and drop
    'DropGeometry',
    'DropZone',
    'DropZoneResolver',
    'classify_drop',
]
