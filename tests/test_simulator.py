"""
Tests for the heightmap state, the group packer and the pack validator.

Run with:
    python -m pytest tests/test_simulator.py -v

Tests cover:
- Heightmap queries and updates
- Bottom-left placement order and layer bookkeeping
- Containment / non-overlap / gravity on mixed jobs
- Partial fits, invalid input and weight limits (never raise)
- Validator errors on hand-made bad placements
"""

import pytest

from config import CartonGroup, Container, EngineConfig, Placement
from monitoring.step_logger import StepLogger
from simulator import (
    FloatingError, HeightmapState, OutOfBoundsError, OverlapError,
    pack_groups, validate_pack_result,
)
from simulator.validator import check_bounds, check_gravity, check_overlap


def make_placement(x, y, z, l, w, h, gid="g", idx=0):
    return Placement(group_id=gid, index_in_group=idx, x=x, y=y, z=z,
                     length=l, width=w, height=h, orientation="upright",
                     layer_index=0)


# ---------------------------------------------------------------------------
# 1. HeightmapState
# ---------------------------------------------------------------------------

class TestHeightmapState:
    def test_empty_state(self):
        state = HeightmapState(1000, 1000, 1000, 50)
        assert state.heightmap.shape == (20, 20)
        assert state.get_max_height() == 0.0
        assert state.get_fill_rate() == 0.0

    def test_base_heights_shape(self):
        state = HeightmapState(1000, 1000, 1000, 50)
        assert state.base_heights(100, 100).shape == (19, 19)
        assert state.base_heights(1000, 1000).shape == (1, 1)
        assert state.base_heights(1001, 100).size == 0

    def test_apply_placement_raises_surface(self):
        state = HeightmapState(1000, 1000, 1000, 50)
        state.apply_placement(make_placement(0, 0, 0, 100, 100, 100))
        assert state.get_height_at(0, 0, 100, 100) == 100
        assert state.get_height_at(100, 0, 100, 100) == 0
        assert state.get_height_at(50, 50, 100, 100) == 100
        assert state.get_fill_rate() == pytest.approx(0.001)
        assert state.base_heights(100, 100)[0, 0] == 100
        assert state.base_heights(100, 100)[2, 0] == 0

    def test_copy_is_independent(self):
        state = HeightmapState(1000, 1000, 1000, 50)
        clone = state.copy()
        clone.apply_placement(make_placement(0, 0, 0, 100, 100, 100))
        assert state.get_max_height() == 0.0
        assert len(state.placements) == 0
        assert clone.get_max_height() == 100


# ---------------------------------------------------------------------------
# 2. Group packer
# ---------------------------------------------------------------------------

class TestPackGroups:
    @pytest.fixture
    def big_cubes(self):
        return [CartonGroup("cube", "Cube", 500, 500, 500, quantity=10, weight=10)]

    def test_bottom_left_order(self, big_cubes, cube_container):
        result = pack_groups(big_cubes, cube_container)
        positions = [(p.x, p.y, p.z) for p in result.placements()]
        assert positions == [
            (0, 0, 0), (0, 500, 0), (500, 0, 0), (500, 500, 0),
            (0, 0, 500), (0, 500, 500), (500, 0, 500), (500, 500, 500),
        ]

    def test_partial_fit_is_reported(self, big_cubes, cube_container):
        result = pack_groups(big_cubes, cube_container)
        group = result.groups[0]
        assert group.placed_qty == 8
        assert group.unplaced_qty == 2
        assert result.total_cartons == 8
        assert result.fill_rate == pytest.approx(1.0)

    def test_layers_and_world_coordinates(self, big_cubes, cube_container):
        result = pack_groups(big_cubes, cube_container)
        placements = list(result.placements())
        assert result.total_layers == 2
        assert [p.layer_index for p in placements] == [0] * 4 + [1] * 4
        first = placements[0]
        assert (first.world_x, first.world_y, first.world_z) == (-250, -250, 350)
        assert (result.used_l, result.used_w, result.used_h) == (1000, 1000, 1000)

    def test_pallet_base_height_is_configurable(self, big_cubes, cube_container):
        config = EngineConfig(pallet_base_height=0)
        result = pack_groups(big_cubes, cube_container, config=config)
        assert next(result.placements()).world_z == 250

    def test_mixed_job_is_physically_valid(self, mixed_groups, euro_container):
        result = pack_groups(mixed_groups, euro_container)
        assert result.total_cartons > 0
        assert validate_pack_result(result)
        for group, requested in zip(result.groups, mixed_groups):
            assert group.placed_qty <= requested.quantity

    def test_mixed_job_without_flip_is_physically_valid(self, mixed_groups, euro_container):
        result = pack_groups(mixed_groups, euro_container, allow_vertical_flip=False)
        assert validate_pack_result(result)
        assert all(p.orientation.startswith("upright") for p in result.placements())

    def test_odd_sizes_are_physically_valid(self, cube_container):
        groups = [
            CartonGroup("odd", "Odd", 333, 217, 121, quantity=40),
            CartonGroup("tiny", "Tiny", 77, 61, 45, quantity=60),
        ]
        result = pack_groups(groups, cube_container)
        assert validate_pack_result(result)

    def test_vertical_flip_unlocks_long_cartons(self):
        container = Container("tall", "tall", 1000, 1000, 1500)
        groups = [CartonGroup("rod", "Rod", 1200, 100, 100, quantity=3)]
        assert pack_groups(groups, container, allow_vertical_flip=False).total_cartons == 0
        flipped = pack_groups(groups, container, allow_vertical_flip=True)
        assert flipped.total_cartons == 3
        assert all(p.height == 1200 for p in flipped.placements())

    @pytest.mark.parametrize("dims", [(0, 1000, 1000), (-5, 1000, 1000),
                                      (float("nan"), 1000, 1000), (1000, None, 1000)])
    def test_invalid_container_gives_empty_result(self, big_cubes, dims):
        container = Container("bad", "bad", *dims)
        result = pack_groups(big_cubes, container)
        assert result.total_cartons == 0
        assert result.groups == ()

    def test_invalid_groups_place_nothing(self, cube_container):
        groups = [
            CartonGroup("zero", "Zero", 100, 100, 100, quantity=0),
            CartonGroup("neg", "Negative", -100, 100, 100, quantity=5),
            CartonGroup("ok", "Ok", 100, 100, 100, quantity=2),
        ]
        result = pack_groups(groups, cube_container)
        assert [g.placed_qty for g in result.groups] == [0, 0, 2]

    def test_oversized_group_is_logged(self, cube_container):
        logger = StepLogger()
        groups = [CartonGroup("huge", "Huge", 2000, 2000, 2000, quantity=1)]
        result = pack_groups(groups, cube_container, logger=logger)
        assert result.groups[0].placed_qty == 0
        stops = logger.get_records("stopped")
        assert stops[0]["reason"] == "does not fit container"

    def test_logger_records_every_placement(self, big_cubes, cube_container):
        logger = StepLogger()
        result = pack_groups(big_cubes, cube_container, logger=logger)
        assert len(logger.get_records("placed")) == result.total_cartons
        assert logger.get_records("stopped")[0]["reason"] == "no position left"

    def test_overweight_flag(self, cube_container):
        container = Container("c", "c", 1000, 1000, 1000, weight_limit=20)
        groups = [CartonGroup("g", "G", 100, 100, 100, quantity=5, weight=8)]
        result = pack_groups(groups, container)
        assert result.total_cartons == 5
        assert result.overweight

    def test_weight_limit_enforced_when_configured(self):
        container = Container("c", "c", 1000, 1000, 1000, weight_limit=20)
        groups = [CartonGroup("g", "G", 100, 100, 100, quantity=5, weight=8)]
        result = pack_groups(groups, container, config=EngineConfig(enforce_weight_limit=True))
        assert result.total_cartons == 2
        assert not result.overweight

    def test_deterministic(self, mixed_groups, euro_container):
        first = pack_groups(mixed_groups, euro_container)
        second = pack_groups(mixed_groups, euro_container)
        assert first == second


# ---------------------------------------------------------------------------
# 3. Validator
# ---------------------------------------------------------------------------

class TestValidator:
    def test_out_of_bounds(self):
        with pytest.raises(OutOfBoundsError):
            check_bounds([make_placement(950, 0, 0, 100, 100, 100)], 1000, 1000, 1000)

    def test_overlap(self):
        placements = [make_placement(0, 0, 0, 100, 100, 100, idx=0),
                      make_placement(50, 50, 0, 100, 100, 100, idx=1)]
        with pytest.raises(OverlapError):
            check_overlap(placements)

    def test_touching_faces_are_not_overlap(self):
        placements = [make_placement(0, 0, 0, 100, 100, 100, idx=0),
                      make_placement(100, 0, 0, 100, 100, 100, idx=1)]
        assert check_overlap(placements)

    def test_floating(self):
        placements = [make_placement(0, 0, 0, 100, 100, 100, idx=0),
                      make_placement(300, 300, 100, 100, 100, 100, idx=1)]
        with pytest.raises(FloatingError):
            check_gravity(placements)

    def test_supported_stack(self):
        placements = [make_placement(0, 0, 0, 100, 100, 100, idx=0),
                      make_placement(50, 50, 100, 100, 100, 100, idx=1)]
        assert check_gravity(placements)
