"""
Tests for drop-zone classification, validity and drop handling.
"""

import math

import pytest
from unittest.mock import AsyncMock, Mock

from treeedit import (
    DropGeometry,
    DropLocation,
    TreeEngine,
    TreeOptions,
    element_id,
)
from treeedit.aio import classify_drop
from treeedit.testing import ids


def at(fraction: float, top: float = 200.0, height: float = 30.0) -> DropGeometry:
    """Geometry with the pointer at a fraction of the target's height."""
    return DropGeometry(top=top, height=height, pointer_y=top + fraction * height)


class TestClassifyDrop:
    """Thirds of the target's bounding box."""

    @pytest.mark.parametrize("fraction,expected", [
        (0.0, DropLocation.ABOVE),
        (0.1, DropLocation.ABOVE),
        (0.3, DropLocation.ABOVE),
        (0.4, DropLocation.AS_CHILD),
        (0.5, DropLocation.AS_CHILD),
        (0.6, DropLocation.AS_CHILD),
        (0.7, DropLocation.BELOW),
        (0.99, DropLocation.BELOW),
    ])
    def test_thirds(self, fraction, expected):
        assert classify_drop(at(fraction)) is expected

    def test_pointer_outside_box_clamps(self):
        assert classify_drop(at(-0.5)) is DropLocation.ABOVE
        assert classify_drop(at(1.5)) is DropLocation.BELOW

    def test_degenerate_geometry(self):
        assert classify_drop(None) is None
        assert classify_drop(DropGeometry(top=10, height=0, pointer_y=10)) is None

    @pytest.mark.parametrize("geometry", [
        DropGeometry(top=0, height=30, pointer_y=math.nan),
        DropGeometry(top=math.nan, height=30, pointer_y=15),
        DropGeometry(top=0, height=math.inf, pointer_y=15),
    ])
    def test_non_finite_geometry(self, geometry):
        assert not geometry.is_usable
        assert classify_drop(geometry) is None


class TestDragStart:
    """Recording the drag source."""

    def test_prefixed_element_id(self, engine):
        assert engine.drag.drag_start('tree-item-3') == 3
        assert engine.state.drag_source_id == 3
        assert engine.state.is_dragging

    def test_unknown_element(self, engine):
        assert engine.drag.drag_start('tree-item-99') is None
        assert engine.drag.drag_start(None) is None
        assert not engine.state.is_dragging

    def test_drag_end_returns_to_idle(self, engine):
        engine.drag.drag_start(element_id(3))
        engine.drag.drag_end()
        assert not engine.state.is_dragging


class TestDragOver:
    """Feedback while hovering a candidate target."""

    @pytest.mark.asyncio
    async def test_valid_zone_sets_affordance(self, engine):
        engine.drag.drag_start(element_id(3))
        zone = await engine.drag.drag_over(element_id(5), at(0.5))

        assert zone.valid
        assert zone.location is DropLocation.AS_CHILD
        assert zone.target_id == 5
        assert engine.state.drop_target_id == 5
        assert engine.state.drop_location is DropLocation.AS_CHILD

    @pytest.mark.asyncio
    async def test_self_target_is_invalid(self, engine):
        engine.drag.drag_start(element_id(3))
        zone = await engine.drag.drag_over(element_id(3), at(0.5))

        assert not zone.valid
        assert engine.state.drop_location is None

    @pytest.mark.asyncio
    async def test_descendant_target_is_invalid(self, engine):
        engine.drag.drag_start(element_id(2))
        for fraction in (0.1, 0.5, 0.9):
            zone = await engine.drag.drag_over(element_id(7), at(fraction))
            assert not zone.valid

    @pytest.mark.asyncio
    async def test_veto_hook_consulted_with_prospective_parent(self, tree):
        before = Mock(return_value=False)
        engine = TreeEngine(tree, TreeOptions(on_before_update=before))
        engine.drag.drag_start(element_id(3))

        zone = await engine.drag.drag_over(element_id(4), at(0.1))
        assert not zone.valid
        before.assert_called_once_with(engine.find(3), 'move', engine.find(2))

        await engine.drag.drag_over(element_id(4), at(0.5))
        before.assert_called_with(engine.find(3), 'move', engine.find(4))

    @pytest.mark.asyncio
    async def test_without_drag_source(self, engine):
        zone = await engine.drag.drag_over(element_id(5), at(0.5))
        assert not zone.valid

    @pytest.mark.asyncio
    async def test_drag_leave_clears_affordance_only(self, engine):
        engine.drag.drag_start(element_id(3))
        await engine.drag.drag_over(element_id(5), at(0.9))
        engine.drag.drag_leave()

        assert engine.state.drop_location is None
        assert engine.state.drop_target_id is None
        assert engine.state.drag_source_id == 3


class TestDrop:
    """Completing a gesture."""

    @pytest.mark.asyncio
    async def test_drop_above_places_before_target_as_sibling(self, tree, engine):
        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(4), at(0.1)) is True

        assert ids(tree) == [1, 2, 3, 4, 5, 6, 7]
        assert engine.find(3)['parentId'] == engine.find(4)['parentId'] == 2
        assert not engine.state.is_dragging

    @pytest.mark.asyncio
    async def test_drop_above_root_target(self, tree, engine):
        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(5), at(0.1)) is True

        order = ids(tree)
        assert order.index(3) == order.index(5) - 1
        assert engine.find(3)['parentId'] == engine.find(5)['parentId']
        assert engine.find(3)['parentId'] != 5

    @pytest.mark.asyncio
    async def test_drop_as_child_opens_target(self, tree, engine):
        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(5), at(0.5)) is True

        assert engine.find(3)['parentId'] == 5
        assert engine.find(5)['isOpen'] is True
        assert engine.is_expanded(5)

    @pytest.mark.asyncio
    async def test_drop_below(self, tree, engine):
        engine.drag.drag_start(element_id(6))
        assert await engine.drag.drop(element_id(2), at(0.9)) is True

        order = ids(tree)
        assert order.index(6) == order.index(2) + 1
        assert engine.find(6)['parentId'] == 1

    @pytest.mark.asyncio
    async def test_drop_uses_transfer_data(self, tree, engine):
        assert await engine.drag.drop(element_id(5), at(0.5), transfer_data=element_id(6)) is True
        assert engine.find(6)['parentId'] == 5

    @pytest.mark.asyncio
    async def test_vetoed_drop_leaves_tree_unchanged(self, tree):
        engine = TreeEngine(tree, TreeOptions(on_before_update=AsyncMock(return_value=False)))
        before = [dict(item) for item in tree]

        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(5), at(0.5)) is False

        assert tree == before
        assert not engine.state.is_dragging

    @pytest.mark.asyncio
    async def test_drop_consults_veto_once(self, tree):
        before = Mock(return_value=None)
        engine = TreeEngine(tree, TreeOptions(on_before_update=before))

        engine.drag.drag_start(element_id(3))
        await engine.drag.drop(element_id(5), at(0.5))
        assert before.call_count == 1

    @pytest.mark.asyncio
    async def test_drop_on_self_rejected(self, tree, engine):
        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(3), at(0.5)) is False
        assert ids(tree) == [1, 2, 3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    async def test_drop_into_own_subtree_rejected(self, tree, engine):
        engine.drag.drag_start(element_id(1))
        assert await engine.drag.drop(element_id(4), at(0.5)) is False
        assert engine.find(1)['parentId'] == 0

    @pytest.mark.asyncio
    async def test_drop_without_source_rejected(self, tree, engine):
        assert await engine.drag.drop(element_id(5), at(0.5)) is False
        assert ids(tree) == [1, 2, 3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    async def test_drop_without_geometry_rejected(self, tree, engine):
        engine.drag.drag_start(element_id(3))
        assert await engine.drag.drop(element_id(5), None) is False
        assert engine.find(3)['parentId'] == 1

    @pytest.mark.asyncio
    async def test_drop_on_container_moves_to_root(self, tree, engine):
        engine.drag.drag_start(element_id(4))
        assert await engine.drag.drop(None, over_container=True) is True

        assert ids(tree)[-1] == 4
        assert not engine.find(4)['parentId']

    @pytest.mark.asyncio
    async def test_drop_outside_container_rejected(self, tree, engine):
        engine.drag.drag_start(element_id(4))
        assert await engine.drag.drop(None) is False
        assert engine.find(4)['parentId'] == 2


class TestDropLimits:
    """max_depth and multiple_roots constraints."""

    @pytest.mark.asyncio
    async def test_max_depth_blocks_deep_drop(self, tree):
        engine = TreeEngine(tree, TreeOptions(max_depth=2))
        engine.drag.drag_start(element_id(6))

        # 4 sits at depth 2, so a child of 4 would be at depth 3
        assert await engine.drag.drop(element_id(4), at(0.5)) is False
        assert engine.find(6)['parentId'] == 0

        engine.drag.drag_start(element_id(6))
        assert await engine.drag.drop(element_id(4), at(0.1)) is True
        assert engine.find(6)['parentId'] == 2

    @pytest.mark.asyncio
    async def test_single_root_rejects_root_drop(self):
        tree = [{'id': 1}, {'id': 2, 'parentId': 1}, {'id': 3, 'parentId': 1}]
        engine = TreeEngine(tree, TreeOptions(multiple_roots=False))

        engine.drag.drag_start(element_id(2))
        assert await engine.drag.drop(None, over_container=True) is False

        engine.drag.drag_start(element_id(2))
        assert await engine.drag.drop(element_id(1), at(0.1)) is False
        assert engine.find(2)['parentId'] == 1

        engine.drag.drag_start(element_id(2))
        assert await engine.drag.drop(element_id(3), at(0.5)) is True
        assert engine.find(2)['parentId'] == 3


class TestDigitStringIds:
    """Ids stored as strings of digits survive element id tagging."""

    @pytest.fixture
    def string_tree(self):
        return [{'id': '10'}, {'id': '20'}]

    def test_drag_start_keeps_string_id(self, string_tree):
        engine = TreeEngine(string_tree)
        assert engine.drag.drag_start(element_id('10')) == '10'
        assert engine.state.drag_source_id == '10'

    @pytest.mark.asyncio
    async def test_drag_over_and_drop(self, string_tree):
        engine = TreeEngine(string_tree)
        engine.drag.drag_start(element_id('10'))

        zone = await engine.drag.drag_over(element_id('20'), DropGeometry(0, 30, 15))
        assert zone.valid
        assert zone.target_id == '20'

        moved = await engine.drag.drop(element_id('20'), DropGeometry(0, 30, 15),
                                       transfer_data=element_id('10'))

        assert moved is True
        assert ids(string_tree) == ['20', '10']
        assert string_tree[1]['parentId'] == '20'

    def test_numeric_ids_still_resolve(self, engine):
        assert engine.drag.drag_start(element_id(4)) == 4


class TestNonFiniteDrop:
    """Unusable geometry never moves anything."""

    @pytest.mark.asyncio
    async def test_nan_pointer_rejected(self, tree, engine):
        before = ids(tree)
        engine.drag.drag_start(element_id(3))

        moved = await engine.drag.drop(element_id(5), DropGeometry(0, 30, math.nan))

        assert moved is False
        assert ids(tree) == before
        assert engine.find(3)['parentId'] == 1
