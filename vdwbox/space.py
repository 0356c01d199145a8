#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Simulation Space: Spatial Grid and Boundary
================================================================================

Project:        Van der Waals Box
Module:         space.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

SpatialGrid buckets particles into cubic cells so that each particle only
needs to look at the (2*reach + 1)^3 block of cells around its own. This
brings neighbor search from O(N^2) down to O(N * k), where k is the average
block occupancy. Any two particles closer than unit_size * reach are always
found; particles further apart than that never interact.

Boundary is the box [0, x] x [0, y] x [0, z] with its lower corner pinned at
the origin. Particles that leave the box are pushed back by a stiff spring:

    F = DEFLECT_STR * penetration

The total boundary impulse over a frame, divided by the surface area, is the
instantaneous pressure sample.
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterator


class Grid:
    """
    Occupancy of a SpatialGrid for one snapshot of positions.

    Cell coordinates are re-based so the smallest occupied index on every axis
    is 0. Occupied cells are stored sparsely, sorted by flat index.
    """

    def __init__(self, cells: np.ndarray, reach: int):
        self.reach = reach
        self.n_particles = cells.shape[0]

        if self.n_particles == 0:
            self.cells = cells.reshape(0, 3)
            self.dims = np.zeros(3, dtype=np.int64)
            self._occupied = np.zeros(0, dtype=np.int64)
            self._starts = np.zeros(0, dtype=np.int64)
            self._counts = np.zeros(0, dtype=np.int64)
            self._order = np.zeros(0, dtype=np.int64)
            return

        cells = cells - cells.min(axis=0)
        self.cells = cells
        self.dims = cells.max(axis=0) + 1

        flat = self._flatten(cells)
        self._order = np.argsort(flat, kind="stable")
        self._occupied, self._starts, self._counts = np.unique(
            flat[self._order], return_index=True, return_counts=True
        )

    def _flatten(self, cells: np.ndarray) -> np.ndarray:
        ny, nz = int(self.dims[1]), int(self.dims[2])
        return (cells[..., 0] * ny + cells[..., 1]) * nz + cells[..., 2]

    @property
    def n_occupied(self) -> int:
        return len(self._occupied)

    def occupied_cells(self) -> np.ndarray:
        """Coordinates (M, 3) of every non-empty cell, in flat-index order."""
        ny, nz = int(self.dims[1]), int(self.dims[2])
        keys = self._occupied
        return np.stack([keys // (ny * nz), (keys // nz) % ny, keys % nz], axis=-1)

    def members(self, k: int) -> np.ndarray:
        """Particles in the k-th occupied cell."""
        start = self._starts[k]
        return self._order[start:start + self._counts[k]]

    def candidates(self, cell) -> np.ndarray:
        """
        Indices of all particles in cells within Chebyshev distance `reach`
        of `cell`, clipped to the grid (no wraparound).
        """
        if self.n_particles == 0:
            return np.zeros(0, dtype=np.int64)

        cell = np.asarray(cell, dtype=np.int64)
        lo = np.maximum(cell - self.reach, 0)
        hi = np.minimum(cell + self.reach, self.dims - 1)
        if np.any(hi < lo):
            return np.zeros(0, dtype=np.int64)

        xs = np.arange(lo[0], hi[0] + 1)
        ys = np.arange(lo[1], hi[1] + 1)
        zs = np.arange(lo[2], hi[2] + 1)
        ny, nz = int(self.dims[1]), int(self.dims[2])
        keys = ((xs[:, None, None] * ny + ys[None, :, None]) * nz + zs[None, None, :]).ravel()

        keys = keys[np.isin(keys, self._occupied)]
        if len(keys) == 0:
            return np.zeros(0, dtype=np.int64)

        k = np.searchsorted(self._occupied, keys)
        return np.concatenate([
            self._order[self._starts[i]:self._starts[i] + self._counts[i]] for i in k
        ])

    def neighbors_of(self, cell) -> Iterator[int]:
        """Iterate over candidate particle indices around `cell`."""
        return (int(i) for i in self.candidates(cell))


@dataclass(frozen=True)
class SpatialGrid:
    """
    Parameters of the uniform cell partition.

    Attributes:
        unit_size: Edge length of one cubic cell
        reach: Interaction cutoff measured in whole cells
    """
    unit_size: float = 1.0
    reach: int = 1

    @property
    def cutoff_range(self) -> float:
        """Physical interaction cutoff covered by the grid."""
        return self.unit_size * self.reach

    def cell_coordinates(self, positions: np.ndarray) -> np.ndarray:
        """Integer cell coordinates floor(position / unit_size)."""
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        return np.floor(positions / self.unit_size).astype(np.int64)

    def build(self, positions: np.ndarray) -> Grid:
        """Bucket-sort positions (N, 3) into cells."""
        return Grid(self.cell_coordinates(positions), self.reach)


@dataclass
class Boundary:
    """
    Axis-aligned box with its lower corner at the origin.

    Attributes:
        x, y, z: Extents of the box along each axis
    """
    x: float = 5.0
    y: float = 5.0
    z: float = 5.0

    MIN_LEN = 2.0
    DEFLECT_STR = 10000.0

    def is_valid(self) -> bool:
        return self.x >= self.MIN_LEN and self.y >= self.MIN_LEN and self.z >= self.MIN_LEN

    @property
    def extents(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def lo_corner(self) -> np.ndarray:
        return np.zeros(3)

    def hi_corner(self) -> np.ndarray:
        return self.extents

    def center(self) -> np.ndarray:
        return 0.5 * self.extents

    def surface_area(self) -> float:
        return 2.0 * (self.x * self.y + self.y * self.z + self.z * self.x)

    def volume(self) -> float:
        return self.x * self.y * self.z

    def box_size(self) -> float:
        """Characteristic edge length, the cube root of the volume."""
        return self.volume() ** (1.0 / 3.0)

    def bound_check(self, positions: np.ndarray) -> np.ndarray:
        """
        Penetration vectors pointing back into the box.

        Zero inside the box. A position 10 units past the +x wall gives
        (-10, 0, 0); one 2 units below the floor gives (0, 0, 2).
        """
        positions = np.asarray(positions, dtype=np.float64)
        below = np.maximum(-positions, 0.0)
        above = np.minimum(self.extents - positions, 0.0)
        return below + above

    def contains(self, positions: np.ndarray) -> np.ndarray:
        """True for positions inside the box (walls included)."""
        penetration = self.bound_check(positions)
        return np.all(penetration == 0.0, axis=-1)

    def force(self, positions: np.ndarray) -> np.ndarray:
        """Restoring force on each position, DEFLECT_STR * penetration."""
        return self.DEFLECT_STR * self.bound_check(positions)

    def impulse(self, forces: np.ndarray, dt: float) -> float:
        """Total impulse sum(|F_i|) * dt delivered by the walls."""
        return float(np.sum(np.linalg.norm(forces, axis=-1))) * dt

    def expand(self, rate: float, dt: float) -> None:
        """
        Grow (rate > 0) or shrink (rate < 0) every extent by rate * dt,
        never going below MIN_LEN.
        """
        delta = rate * dt
        self.x = max(self.x + delta, self.MIN_LEN)
        self.y = max(self.y + delta, self.MIN_LEN)
        self.z = max(self.z + delta, self.MIN_LEN)
