"""
Unit and integration tests for the four general packing strategies.

Run with:
    python -m pytest tests/test_strategies.py -v

Tests cover:
- Strategy registration (all 4 are in the registry, hyphenated names work)
- Every item ends up in exactly one of packed / unpacked
- Containment and non-overlap for every strategy
- Strategy-specific placement rules
"""

import pytest

from config import Container, Item
from geometry import box_within, boxes_overlap
from strategies import STRATEGY_REGISTRY, get_strategy
from strategies.base_strategy import normalize_name
from strategies.corner_first import corner_score
from strategies.layer_building import group_by_height, pack_layer
from strategies.spatial_index.strategy import (
    FreeSpace, SpatialIndex, can_merge, merge_spaces,
)


ALL_STRATEGIES = ["wall_building", "corner_first", "layer_building", "spatial_index"]


@pytest.fixture
def container():
    return Container("c", "test", 1200, 1000, 1000)


def cubes(n, size=500, weight=1.0):
    return [Item(f"cube{i}", size, size, size, weight) for i in range(n)]


def assert_physically_valid(outcome, container, items):
    ids = sorted([p.id for p in outcome.packed] + [i.id for i in outcome.unpacked])
    assert ids == sorted(i.id for i in items)
    for i, p in enumerate(outcome.packed):
        assert box_within(p.bounds(), container.length, container.width, container.height)
        for q in outcome.packed[i + 1:]:
            assert not boxes_overlap(p.bounds(), q.bounds()), f"{p.id} overlaps {q.id}"


# ---------------------------------------------------------------------------
# 1. Registration
# ---------------------------------------------------------------------------

class TestRegistration:
    def test_all_strategies_registered(self):
        for name in ALL_STRATEGIES:
            assert name in STRATEGY_REGISTRY, (
                f"Strategy '{name}' not found in STRATEGY_REGISTRY."
            )

    @pytest.mark.parametrize("spelling,expected", [
        ("wall-building", "wall_building"),
        ("Corner-First", "corner_first"),
        (" spatial_index ", "spatial_index"),
    ])
    def test_name_spellings(self, spelling, expected):
        assert normalize_name(spelling) == expected
        assert get_strategy(spelling).name == expected

    def test_unknown_strategy_raises(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            get_strategy("tetris")


# ---------------------------------------------------------------------------
# 2. Shared invariants
# ---------------------------------------------------------------------------

class TestInvariants:
    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_mixed_items(self, name, mixed_items, container):
        outcome = get_strategy(name).pack(mixed_items, container)
        assert outcome.packed
        assert_physically_valid(outcome, container, mixed_items)

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_without_rotation(self, name, mixed_items, container):
        outcome = get_strategy(name).pack(mixed_items, container, allow_rotation=False)
        assert_physically_valid(outcome, container, mixed_items)
        for p in outcome.packed:
            assert p.rotation == (0, 0, 0)

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_overfull_container(self, name, container):
        items = cubes(12)
        outcome = get_strategy(name).pack(items, container)
        assert_physically_valid(outcome, container, items)
        assert len(outcome.packed) <= 8
        assert outcome.unpacked

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_oversized_item_is_unpacked(self, name, container):
        items = [Item("huge", 2000, 2000, 2000)] + cubes(2, size=100)
        outcome = get_strategy(name).pack(items, container)
        assert [i.id for i in outcome.unpacked] == ["huge"]
        assert len(outcome.packed) == 2

    @pytest.mark.parametrize("name", ALL_STRATEGIES)
    def test_empty_input(self, name, container):
        outcome = get_strategy(name).pack([], container)
        assert outcome.packed == [] and outcome.unpacked == []


# ---------------------------------------------------------------------------
# 3. Strategy specifics
# ---------------------------------------------------------------------------

class TestWallBuilding:
    def test_walls_fill_width_then_height_then_depth(self):
        container = Container("c", "t", 1000, 1000, 1000)
        outcome = get_strategy("wall_building").pack(cubes(8), container,
                                                    allow_rotation=False)
        positions = [(p.x, p.y, p.z) for p in outcome.packed]
        assert positions == [
            (0, 0, 0), (0, 500, 0), (0, 0, 500), (0, 500, 500),
            (500, 0, 0), (500, 500, 0), (500, 0, 500), (500, 500, 500),
        ]

    def test_tallest_items_first(self, container):
        items = [Item("short", 200, 200, 100), Item("tall", 200, 200, 400)]
        outcome = get_strategy("wall_building").pack(items, container)
        assert outcome.packed[0].id == "tall"


class TestCornerFirst:
    def test_first_item_at_origin(self, mixed_items, container):
        outcome = get_strategy("corner_first").pack(mixed_items, container)
        first = outcome.packed[0]
        assert (first.x, first.y, first.z) == (0, 0, 0)
        assert first.id == "i5"

    def test_score_prefers_origin_floor(self):
        origin = corner_score((0, 0, 0), 1000, 1000, 1000)
        middle = corner_score((500, 500, 0), 1000, 1000, 1000)
        raised = corner_score((0, 0, 500), 1000, 1000, 1000)
        assert origin == pytest.approx(-0.4)
        assert origin < raised < middle


class TestLayerBuilding:
    def test_groups_by_height(self):
        items = [Item("a", 100, 100, 200), Item("b", 100, 100, 100),
                 Item("c", 100, 100, 100.05)]
        groups = group_by_height(items)
        assert [len(g.items) for g in groups] == [2, 1]
        assert groups[0].thickness == pytest.approx(100.05)

    def test_pack_layer_guillotine(self):
        packed, unpacked = pack_layer(cubes(5), 1000, 1000, z=0)
        assert len(packed) == 4
        assert [i.id for i in unpacked] == ["cube4"]
        assert {(p.x, p.y) for p in packed} == {(0, 0), (500, 0), (0, 500), (500, 500)}

    def test_layers_stack(self):
        container = Container("c", "t", 1000, 1000, 1000)
        outcome = get_strategy("layer_building").pack(cubes(8), container)
        assert len(outcome.packed) == 8
        assert sorted({p.z for p in outcome.packed}) == [0, 500]


class TestSpatialIndex:
    def test_merge_adjacent_spaces(self):
        a = FreeSpace(0, 0, 0, 100, 200, 300)
        b = FreeSpace(100, 0, 0, 50, 200, 300)
        assert can_merge(a, b)
        merged = merge_spaces(a, b)
        assert (merged.x, merged.length, merged.width, merged.height) == (0, 150, 200, 300)

    def test_no_merge_for_different_sections(self):
        a = FreeSpace(0, 0, 0, 100, 200, 300)
        b = FreeSpace(100, 0, 0, 50, 100, 300)
        assert not can_merge(a, b)

    def test_split_leaves_three_pieces(self):
        index = SpatialIndex(1000, 1000, 1000)
        found = index.find_best_placement(Item("a", 500, 400, 300), allow_rotation=False)
        placed = index.add_item(Item("a", 500, 400, 300), *found)
        assert (placed.x, placed.y, placed.z) == (0, 0, 0)
        assert len(index.free_spaces) == 3
        free_volume = sum(s.volume for s in index.free_spaces)
        assert free_volume == pytest.approx(1000 ** 3 - 500 * 400 * 300)
