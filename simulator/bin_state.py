"""
Heightmap state — tracks the surface of one container while it is filled.

The HeightmapState is the data object the group packer queries and
updates.  It provides:

  Spatial queries:
    .base_heights(l, w)           — resting z for every grid-aligned footprint
    .get_height_at(x, y, l, w)    — max height in one footprint region
    .get_fill_rate()              — volumetric utilisation
    .get_max_height()             — peak height anywhere

  Full 3D state:
    .placements                   — List[Placement] in placement order
    .heightmap                    — np.ndarray of current top heights

Cells are ``resolution`` mm square and anchored at the container origin.
A footprint covers every cell it touches, so the last partial cell along
each axis is included (ceil), which keeps the base-height query
conservative for carton sizes that are not multiples of the resolution.
"""

import math
from typing import List, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from config import Placement


class HeightmapState:
    """
    Surface of a single container as a 2D grid of top heights.

    ``heightmap[i, j]`` is the highest occupied z over cell
    ``[i*res, (i+1)*res) x [j*res, (j+1)*res)``.
    """

    __slots__ = ("length", "width", "height", "resolution",
                 "heightmap", "placements", "_volume")

    def __init__(self, length: float, width: float, height: float,
                 resolution: float = 50.0) -> None:
        self.length = length
        self.width = width
        self.height = height
        self.resolution = resolution
        self.heightmap: np.ndarray = np.zeros(
            (max(1, math.ceil(length / resolution)),
             max(1, math.ceil(width / resolution))),
            dtype=np.float64,
        )
        self.placements: List[Placement] = []
        self._volume = 0.0

    # ── Coordinate conversion ────────────────────────────────────────────

    def _cells(self, extent: float) -> int:
        """Number of cells covered by an extent starting on a cell edge."""
        return max(1, math.ceil(extent / self.resolution - 1e-9))

    def _span(self, start: float, extent: float) -> Tuple[int, int]:
        lo = int(math.floor(start / self.resolution + 1e-9))
        hi = int(math.ceil((start + extent) / self.resolution - 1e-9))
        return lo, max(hi, lo + 1)

    # ── Spatial queries ──────────────────────────────────────────────────

    def base_heights(self, length: float, width: float) -> np.ndarray:
        """
        Resting z for a ``length x width`` footprint at every grid position.

        Entry ``[i, j]`` is the base height with the footprint's corner at
        ``(i*res, j*res)``.  Only positions with ``x + length <= L`` and
        ``y + width <= W`` are included, so the result may be empty.
        """
        res = self.resolution
        n_i = int(math.floor((self.length - length) / res + 1e-9)) + 1
        n_j = int(math.floor((self.width - width) / res + 1e-9)) + 1
        if length > self.length or width > self.width or n_i <= 0 or n_j <= 0:
            return np.empty((0, 0))

        win_l = min(self._cells(length), self.heightmap.shape[0])
        win_w = min(self._cells(width), self.heightmap.shape[1])
        # separable max: along length first, then along width
        rows = sliding_window_view(self.heightmap, win_l, axis=0).max(axis=-1)
        maxima = sliding_window_view(rows, win_w, axis=1).max(axis=-1)
        return maxima[:n_i, :n_j]

    def get_height_at(self, x: float, y: float, length: float, width: float) -> float:
        """
        Maximum height in the footprint [x, x+length) x [y, y+width).
        This is the z at which a box placed here would rest.
        """
        gx, gx_end = self._span(x, length)
        gy, gy_end = self._span(y, width)
        gx_end = min(gx_end, self.heightmap.shape[0])
        gy_end = min(gy_end, self.heightmap.shape[1])
        if gx >= gx_end or gy >= gy_end:
            return 0.0
        return float(np.max(self.heightmap[gx:gx_end, gy:gy_end]))

    def get_fill_rate(self) -> float:
        """Volumetric fill rate = placed_volume / container_volume."""
        volume = self.length * self.width * self.height
        if volume <= 0:
            return 0.0
        return self._volume / volume

    def get_max_height(self) -> float:
        """Current peak height anywhere in the container."""
        return float(np.max(self.heightmap))

    @property
    def placed_volume(self) -> float:
        return self._volume

    # ── State mutation ───────────────────────────────────────────────────

    def apply_placement(self, placement: Placement) -> None:
        """Raise the heightmap under *placement* to its top face and record it."""
        gx, gx_end = self._span(placement.x, placement.length)
        gy, gy_end = self._span(placement.y, placement.width)
        gx_end = min(gx_end, self.heightmap.shape[0])
        gy_end = min(gy_end, self.heightmap.shape[1])

        new_top = placement.z + placement.height
        self.heightmap[gx:gx_end, gy:gy_end] = np.maximum(
            self.heightmap[gx:gx_end, gy:gy_end], new_top,
        )
        self.placements.append(placement)
        self._volume += placement.volume

    def copy(self) -> "HeightmapState":
        clone = HeightmapState(self.length, self.width, self.height, self.resolution)
        clone.heightmap = self.heightmap.copy()
        clone.placements = list(self.placements)
        clone._volume = self._volume
        return clone

    # ── Representation ───────────────────────────────────────────────────

    def __repr__(self) -> str:
        return (
            f"HeightmapState(boxes={len(self.placements)}, "
            f"fill={self.get_fill_rate():.1%}, "
            f"max_h={self.get_max_height():.1f}/{self.height})"
        )
