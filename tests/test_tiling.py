"""
Tests for orientation generation, the three layer tilers and best-tile selection.

Run with:
    python -m pytest tests/test_tiling.py -v
"""

import math

import pytest

from config import Carton, EngineConfig, Orientation
from geometry import rects_overlap
from tiling import TILER_REGISTRY, best_tile, get_tiler
from tiling.load_summary import summarize_load
from tiling.orientations import (
    all_permutations, generate_orientations, unique_orientations,
)
from tiling.pinwheel import PINWHEEL_STRATEGIES, PinwheelTiler, grid_cell_size
from tiling.mixed_rows import MixedRowTiler
from tiling.uniform import UniformTiler


def upright(l, w, h):
    return Orientation(l, w, h, "upright")


# ---------------------------------------------------------------------------
# 1. Orientations
# ---------------------------------------------------------------------------

class TestOrientations:
    def test_upright_pair_without_flip(self):
        orientations = generate_orientations(300, 200, 100, allow_vertical_flip=False)
        assert [o.label for o in orientations] == ["upright", "upright-rotated"]
        assert [(o.length, o.width, o.height) for o in orientations] == [
            (300, 200, 100), (200, 300, 100),
        ]

    def test_six_with_flip_in_fixed_order(self):
        orientations = generate_orientations(300, 200, 100)
        assert len(orientations) == 6
        assert [(o.length, o.width, o.height) for o in orientations] == [
            (300, 200, 100), (200, 300, 100),
            (200, 100, 300), (300, 100, 200),
            (100, 300, 200), (100, 200, 300),
        ]

    def test_every_orientation_keeps_the_volume(self):
        for o in generate_orientations(320, 210, 95):
            assert math.isclose(o.length * o.width * o.height, 320 * 210 * 95)

    def test_cube_collapses_to_one_unique(self):
        assert len(generate_orientations(100, 100, 100)) == 6
        assert len(unique_orientations(100, 100, 100)) == 1

    @pytest.mark.parametrize("dims,rotate,expected", [
        ((100, 200, 300), True, 6),
        ((100, 100, 300), True, 3),
        ((100, 100, 100), True, 1),
        ((100, 200, 300), False, 1),
    ])
    def test_all_permutations_deduplicated(self, dims, rotate, expected):
        assert len(all_permutations(*dims, allow_rotation=rotate)) == expected


# ---------------------------------------------------------------------------
# 2. Individual tilers
# ---------------------------------------------------------------------------

class TestUniformTiler:
    def test_grid_counts(self):
        result = UniformTiler().fit(upright(300, 200, 100), 1000, 700, 250)
        assert (result.count_l, result.count_w, result.layers) == (3, 3, 2)
        assert result.per_layer == 9
        assert result.total == 18
        assert (result.used_l, result.used_w, result.used_h) == (900, 600, 200)
        assert result.pattern == "upright"

    def test_too_large_returns_none(self):
        assert UniformTiler().fit(upright(1300, 200, 100), 1200, 800, 1000) is None

    def test_swapped_suffix(self):
        result = UniformTiler().fit(upright(300, 200, 100), 700, 1000, 100, swapped=True)
        assert result.pattern == "upright-pallet-swapped"
        assert result.pallet_swapped


class TestMixedRowTiler:
    def test_square_footprint_skipped(self):
        assert MixedRowTiler().fit(upright(200, 200, 100), 1000, 1000, 100) is None

    def test_alternating_rows_fill_the_strip(self):
        result = MixedRowTiler().fit(upright(300, 200, 100), 1000, 700, 100)
        assert [r.rotated for r in result.pattern_rows] == [False, True, False]
        assert [r.count_l for r in result.pattern_rows] == [3, 5, 3]
        assert result.per_layer == 11
        assert result.used_w == 700
        assert result.count_l is None and result.count_w is None

    def test_total_is_per_layer_times_layers(self):
        result = MixedRowTiler().fit(upright(300, 200, 100), 1000, 700, 350)
        assert result.layers == 3
        assert result.total == result.per_layer * result.layers


class TestPinwheelTiler:
    def test_cell_is_gcd_of_footprints(self):
        assert grid_cell_size(300, 200, 1000, 700, 250_000) == 100

    def test_cell_coarsened_above_limit(self):
        cell = grid_cell_size(1, 1, 1000, 1000, max_cells=100)
        assert (1000 // cell) * (1000 // cell) <= 100

    def test_best_of_three_strategies(self):
        result = PinwheelTiler().fit(upright(300, 200, 100), 1000, 700, 100)
        assert result.per_layer == 11
        assert len(result.box_positions) == 11
        assert any(p.rotated for p in result.box_positions)

    def test_strategies_return_disjoint_positions(self):
        for strategy in PINWHEEL_STRATEGIES:
            positions = strategy(10, 7, 3, 2)
            rects = [(x, y, x + a, y + b) for x, y, a, b, _ in positions]
            for i, r in enumerate(rects):
                assert r[2] <= 10 and r[3] <= 7
                for other in rects[i + 1:]:
                    assert not rects_overlap(r, other)

    @pytest.mark.parametrize("box,space", [
        ((300, 200), (1000, 700)),
        ((400, 300), (1200, 1000)),
        ((370, 260), (1200, 800)),
        ((600, 400), (2438, 6058)),
    ])
    def test_layer_positions_fit_and_do_not_overlap(self, box, space):
        result = PinwheelTiler().fit(upright(box[0], box[1], 100), space[0], space[1], 100)
        assert result is not None
        rects = [(p.x, p.y, p.x + p.length, p.y + p.width) for p in result.box_positions]
        for i, r in enumerate(rects):
            assert r[2] <= space[0] + 1e-6 and r[3] <= space[1] + 1e-6
            for other in rects[i + 1:]:
                assert not rects_overlap(r, other)

    def test_square_footprint_skipped(self):
        assert PinwheelTiler().fit(upright(200, 200, 100), 1000, 1000, 100) is None


class TestRegistry:
    def test_all_tilers_registered(self):
        assert {"uniform", "mixed", "pinwheel"} <= set(TILER_REGISTRY)

    def test_unknown_tiler_raises(self):
        with pytest.raises(ValueError, match="Unknown tiler"):
            get_tiler("hexagonal")


# ---------------------------------------------------------------------------
# 3. Best-tile selection
# ---------------------------------------------------------------------------

class TestBestTile:
    def test_cube_in_cube(self):
        result = best_tile(100, 100, 100, 1000, 1000, 1000, False)
        assert result.total == 1000
        assert result.pattern == "upright"
        assert (result.count_l, result.count_w, result.layers) == (10, 10, 10)

    def test_mixed_beats_uniform(self):
        result = best_tile(300, 200, 100, 1000, 700, 100, False)
        assert result.total == 11
        assert result.pattern == "mixed-upright"

    def test_uniform_only_config(self):
        config = EngineConfig(enabled_tilers=("uniform",))
        result = best_tile(300, 200, 100, 1000, 700, 100, False, config)
        assert result.total == 10

    def test_flip_never_hurts(self):
        without = best_tile(300, 200, 100, 1000, 700, 250, False)
        with_flip = best_tile(300, 200, 100, 1000, 700, 250, True)
        assert with_flip.total >= without.total

    def test_deterministic(self):
        first = best_tile(370, 260, 180, 1200, 800, 1400)
        for _ in range(3):
            assert best_tile(370, 260, 180, 1200, 800, 1400) == first

    @pytest.mark.parametrize("extra", [1, 90, 180, 500])
    def test_taller_space_never_loses_cartons(self, extra):
        base = best_tile(370, 260, 180, 1200, 800, 1400)
        taller = best_tile(370, 260, 180, 1200, 800, 1400 + extra)
        assert taller.total >= base.total

    @pytest.mark.parametrize("dims", [
        (300, 200, 100, 1000, 700, 100),
        (1300, 200, 100, 1200, 800, 1000),
        (250, 250, 2000, 1200, 800, 1000),
        (120, 80, 60, 1200, 1000, 1600),
    ])
    def test_none_pattern_iff_zero_total(self, dims):
        result = best_tile(*dims)
        assert result.total >= 0
        assert (result.pattern == "none") == (result.total == 0)

    @pytest.mark.parametrize("dims", [
        (0, 200, 100, 1200, 800, 1000),
        (300, -1, 100, 1200, 800, 1000),
        (300, 200, float("nan"), 1200, 800, 1000),
        (300, 200, 100, float("inf"), 800, 1000),
        (300, 200, 100, 1200, 800, None),
        ("300", 200, 100, 1200, 800, 1000),
    ])
    def test_invalid_input_gives_empty_sentinel(self, dims):
        result = best_tile(*dims)
        assert result.pattern == "none"
        assert result.total == 0
        assert result.is_empty

    def test_nothing_fits_gives_empty_sentinel(self):
        result = best_tile(2000, 2000, 2000, 1200, 800, 1000)
        assert result.pattern == "none"

    def test_total_matches_layers(self):
        result = best_tile(400, 300, 250, 1200, 1000, 1200)
        assert result.total == result.per_layer * result.layers
        assert result.used_h <= 1200


# ---------------------------------------------------------------------------
# 4. Load summary
# ---------------------------------------------------------------------------

class TestLoadSummary:
    @pytest.fixture
    def cube_tile(self):
        return best_tile(100, 100, 100, 1000, 1000, 1000, False)

    @pytest.fixture
    def carton(self):
        return Carton(100, 100, 100, weight=2.0, inner_units=6)

    def test_full_capacity(self, cube_tile, carton):
        summary = summarize_load(cube_tile, carton)
        assert summary.capacity == 1000
        assert summary.effective_cartons == 1000
        assert summary.total_weight == 2000.0
        assert summary.total_inner_units == 6000
        assert summary.volume_usage == pytest.approx(100.0)

    def test_desired_count_below_capacity(self, cube_tile, carton):
        summary = summarize_load(cube_tile, carton, desired_cartons=500)
        assert summary.effective_cartons == 500
        assert not summary.desired_too_high
        assert summary.volume_usage == pytest.approx(50.0)

    def test_desired_count_clamped(self, cube_tile, carton):
        summary = summarize_load(cube_tile, carton, desired_cartons=2000)
        assert summary.effective_cartons == 1000
        assert summary.desired_too_high

    def test_usage_against_explicit_space(self, cube_tile, carton):
        summary = summarize_load(cube_tile, carton, space_volume=2e9)
        assert summary.volume_usage == pytest.approx(50.0)

    def test_weight_limits(self, cube_tile, carton):
        summary = summarize_load(cube_tile, carton, pallet_weight_limit=1500,
                                 carton_weight_limit=1.0)
        assert summary.pallet_overweight
        assert summary.carton_overweight

    def test_empty_tile(self, carton):
        summary = summarize_load(best_tile(0, 0, 0, 1, 1, 1), carton)
        assert summary.capacity == 0
        assert summary.volume_usage == 0.0
