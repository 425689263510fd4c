"""Shared fixtures for the TreeEdit test suite."""

import pytest

from treeedit import TreeEngine, TreeOptions
from treeedit.testing import sample_tree


@pytest.fixture
def tree():
    """Fresh copy of the sample tree (see treeedit.testing.sample_tree)."""
    return sample_tree()


@pytest.fixture
def engine(tree):
    """Engine with default options over the sample tree."""
    return TreeEngine(tree, TreeOptions(name='title'))
