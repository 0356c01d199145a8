#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Initial Condition Generators
================================================================================

Project:        Van der Waals Box
Module:         generators.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Builders for common starting configurations. All positions are produced
inside the given boundary so the result always passes validation.
"""

import numpy as np
from typing import List, Optional

from . import rotations
from .particle import Particle
from .space import Boundary


def prune(positions: np.ndarray, min_separation: float) -> np.ndarray:
    """
    Indices of a subset of positions in which no two are closer than
    min_separation. Earlier positions win.
    """
    kept: List[int] = []
    min_sq = min_separation * min_separation
    for i, p in enumerate(positions):
        if kept:
            d = positions[kept] - p
            if np.min(np.sum(d * d, axis=1)) < min_sq:
                continue
        kept.append(i)
    return np.array(kept, dtype=np.int64)


def _thermal_velocities(
    rng: np.random.Generator, n: int, temperature: float, zero_momentum: bool = False
) -> np.ndarray:
    velocities = rng.standard_normal((n, 3)) * temperature
    if zero_momentum and n > 1:
        # Remove center of mass velocity
        velocities -= np.mean(velocities, axis=0)
    return velocities


def _orientations(rng: np.random.Generator, n: int, random_orientation: bool) -> np.ndarray:
    if random_orientation:
        return rotations.random(rng, n)
    return rotations.identity(n)


def generate_spherical_cloud(
    boundary: Boundary,
    n: int,
    sigma: float,
    temperature: float,
    rng: Optional[np.random.Generator] = None,
    min_separation: float = 0.15,
    random_orientation: bool = False,
) -> List[Particle]:
    """
    Gaussian cloud of particles around the center of the box.

    Positions outside the box are clamped onto its walls, then particles
    closer than min_separation to an earlier one are dropped, so fewer than
    n particles may be returned.

    Args:
        boundary: Box to fill
        n: Number of particles to draw
        sigma: Spread of the cloud
        temperature: Standard deviation of each velocity component
        rng: Random generator (default: fresh default_rng())
        min_separation: Minimum distance between kept particles
        random_orientation: Draw uniformly random rotations instead of identity
    """
    rng = rng or np.random.default_rng()

    positions = rng.standard_normal((n, 3)) * sigma + boundary.center()
    positions = np.clip(positions, boundary.lo_corner(), boundary.hi_corner())
    velocities = _thermal_velocities(rng, n, temperature)

    orientations = _orientations(rng, n, random_orientation)

    keep = prune(positions, min_separation)
    return [
        Particle()
        .set_translation(*positions[i])
        .set_rotation(orientations[i])
        .set_linear_velocity(*velocities[i])
        for i in keep
    ]


def generate_lattice(
    boundary: Boundary,
    n_side: int,
    spacing: float,
    temperature: float,
    rng: Optional[np.random.Generator] = None,
    random_orientation: bool = False,
) -> List[Particle]:
    """
    Simple cubic lattice of n_side^3 particles centered in the box.

    Args:
        boundary: Box to fill; must be larger than (n_side - 1) * spacing
        n_side: Particles along each edge
        spacing: Lattice spacing
        temperature: Standard deviation of each velocity component
        rng: Random generator (default: fresh default_rng())
        random_orientation: Draw uniformly random rotations instead of identity
    """
    rng = rng or np.random.default_rng()

    offsets = (np.arange(n_side) - 0.5 * (n_side - 1)) * spacing
    gx, gy, gz = np.meshgrid(offsets, offsets, offsets, indexing="ij")
    positions = np.stack([gx.ravel(), gy.ravel(), gz.ravel()], axis=1) + boundary.center()
    velocities = _thermal_velocities(rng, positions.shape[0], temperature, zero_momentum=True)
    orientations = _orientations(rng, positions.shape[0], random_orientation)

    return [
        Particle().set_translation(*p).set_rotation(q).set_linear_velocity(*v)
        for p, q, v in zip(positions, orientations, velocities)
    ]
