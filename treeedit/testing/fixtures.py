"""Test fixtures for TreeEdit consumers.

These helpers build small known trees and record hook invocations, so
host test suites can assert on engine behaviour without wiring up a UI.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from ..config import TreeItem


def sample_tree() -> List[TreeItem]:
    """Build a flat tree with known shape.

    Structure (collection order 1..7):
    1
    ├── 2
    │   └── 4
    │       └── 7
    └── 3
    5
    6
    """
    return [
        {'id': 1, 'parentId': 0, 'title': 'My id is 1'},
        {'id': 2, 'parentId': 1, 'title': 'My id is 2'},
        {'id': 3, 'parentId': 1, 'title': 'My id is 3'},
        {'id': 4, 'parentId': 2, 'title': 'My id is 4'},
        {'id': 5, 'parentId': 0, 'title': 'My id is 5'},
        {'id': 6, 'parentId': 0, 'title': 'My id is 6'},
        {'id': 7, 'parentId': 4, 'title': 'My id is 7'},
    ]


def ids(tree: List[TreeItem], key: str = 'id') -> List[Any]:
    """Ids of a collection, in order."""
    return [item.get(key) for item in tree]


class HookRecorder:
    """Records hook calls and answers before-hooks with a fixed verdict.

    Example:
        hooks = HookRecorder(verdict=False, delay=0.01)
        options = TreeOptions(**hooks.options())
        ...
        assert hooks.names() == ['on_before_create']
    """

    def __init__(self, verdict: Optional[bool] = None, delay: Optional[float] = None):
        """Initialize the recorder.

        Args:
            verdict: Value returned by every before-hook (None permits)
            delay: If set, hooks are coroutines that sleep this long first
        """
        self.verdict = verdict
        self.delay = delay
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _hook(self, name: str, is_before: bool):
        if self.delay is None:
            def hook(*args):
                self.calls.append((name, args))
                return self.verdict if is_before else None
            return hook

        async def async_hook(*args):
            await asyncio.sleep(self.delay)
            self.calls.append((name, args))
            return self.verdict if is_before else None
        return async_hook

    def options(self) -> Dict[str, Any]:
        """Hook slots for TreeOptions(**recorder.options())."""
        return {
            'on_before_create': self._hook('on_before_create', True),
            'on_create': self._hook('on_create', False),
            'on_before_delete': self._hook('on_before_delete', True),
            'on_delete': self._hook('on_delete', False),
            'on_before_update': self._hook('on_before_update', True),
            'on_update': self._hook('on_update', False),
            'on_select': self._hook('on_select', False),
        }

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def calls_to(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for n, args in self.calls if n == name]
