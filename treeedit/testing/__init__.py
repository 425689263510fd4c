"""Testing utilities for TreeEdit."""

from .fixtures import HookRecorder, ids, sample_tree

__all__ = ['HookRecorder', 'ids', 'sample_tree']
