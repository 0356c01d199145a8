#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Pair Interaction Laws
================================================================================

Project:        Van der Waals Box
Module:         physics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This module implements the short-range pair interactions between particles.
Every law maps two poses and a cutoff range to

    (force, torque, potential, neighbor)

acting on the first particle. The default law is the Lennard-Jones 12-6
potential written in units of a single length scale R0:

    V(r) = 4 R0 [(1/u)^12 - (1/u)^6],     u = r / R0
    F(r) = 24 [2/u^14 - 1/u^8] u_vec

The potential is shifted by its value at the cutoff, so a pair separated by
exactly the cutoff contributes nothing, and halved because each particle of
a pair counts it once. Beyond the cutoff every output is zero.

Coincident particles (r = 0) are not guarded against: the force is infinite
and the resulting NaN/inf values propagate into the particle state.
"""

import numpy as np
from numba import jit
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional, Type

from . import rotations
from .particle import Pose
from .parallel import ParallelMap
from .space import Grid


# Spatial scale of the interaction; roughly how close two particles get
# before they are repelled
R0 = 0.15

# Particles closer than NEIGHBOR_FACTOR * R0 count as neighbors
NEIGHBOR_FACTOR = 2.0


class PairResult(NamedTuple):
    """Effect of one particle on another."""
    force: np.ndarray
    torque: np.ndarray
    potential: float
    neighbor: int


class ForceResult(NamedTuple):
    """Per-particle totals of one force pass."""
    forces: np.ndarray
    torques: np.ndarray
    potentials: np.ndarray
    neighbors: np.ndarray

    @property
    def potential_energy(self) -> float:
        return float(np.sum(self.potentials))


ZERO_PAIR = PairResult(np.zeros(3), np.zeros(3), 0.0, 0)


# --- Compiled Lennard-Jones kernels ---
# Kept as module-level functions over scalars and arrays so Numba can compile
# them in nopython mode. nogil lets the thread pool run them concurrently.

@jit(nopython=True, cache=True)
def lennard_jones_potential(r: float, r0: float, strength: float) -> float:
    """
    Raw (unshifted, full) Lennard-Jones potential.

    V(r) = 4 R0 s [(R0/r)^12 - (R0/r)^6]

    Minimum of -R0 * s at r = 2^(1/6) R0, zero at r = R0.
    """
    u6 = (r / r0) ** 6
    return 4.0 * r0 * strength * (1.0 / (u6 * u6) - 1.0 / u6)


@jit(nopython=True, cache=True)
def lennard_jones_force_magnitude(r: float, r0: float, strength: float) -> float:
    """
    Radial force -dV/dr. Positive values are repulsive.

    F(r) = 24 s [2 (R0/r)^13 - (R0/r)^7]
    """
    u = r / r0
    u6 = u ** 6
    return 24.0 * strength * (2.0 / (u6 * u6 * u) - 1.0 / (u6 * u))


@jit(nopython=True, nogil=True, cache=True, error_model="numpy")
def lennard_jones_pair(dx, dy, dz, cutoff, r0, strength, repulsion, attraction):
    """
    Force, shifted half-potential and neighbor flag on the particle at the
    tail of displacement (dx, dy, dz) = pos_i - pos_j.
    """
    r_sq = dx * dx + dy * dy + dz * dz
    if r_sq > cutoff * cutoff:
        return 0.0, 0.0, 0.0, 0.0, 0

    u2 = r_sq / (r0 * r0)
    u6 = u2 * u2 * u2
    u8 = u2 * u6
    u12 = u6 * u6
    u14 = u6 * u8

    # Force along the scaled displacement
    coeff = 24.0 * strength * (2.0 * repulsion / u14 - attraction / u8)
    fx = coeff * dx / r0
    fy = coeff * dy / r0
    fz = coeff * dz / r0

    # Value at the cutoff, subtracted so the potential is continuous there
    rc6 = (cutoff / r0) ** 6
    rc12 = rc6 * rc6
    free_potential = 4.0 * r0 * strength * (repulsion / rc12 - attraction / rc6)
    potential = 4.0 * r0 * strength * (repulsion / u12 - attraction / u6)

    neighbor = 0
    if r_sq < NEIGHBOR_FACTOR * NEIGHBOR_FACTOR * r0 * r0:
        neighbor = 1

    return fx, fy, fz, 0.5 * (potential - free_potential), neighbor


@jit(nopython=True, nogil=True, cache=True, error_model="numpy")
def lennard_jones_accumulate(
    targets, candidates, positions, cutoff, r0, strength, repulsion, attraction,
    forces, potentials, neighbors
):
    """
    Sum the Lennard-Jones interaction of every candidate on every target.

    Writes rows `targets` of forces, potentials and neighbors and nothing else.
    """
    for a in range(targets.shape[0]):
        i = targets[a]
        px = positions[i, 0]
        py = positions[i, 1]
        pz = positions[i, 2]

        fx = 0.0
        fy = 0.0
        fz = 0.0
        potential = 0.0
        count = 0

        for b in range(candidates.shape[0]):
            j = candidates[b]
            if j == i:
                continue
            ax, ay, az, p, n = lennard_jones_pair(
                px - positions[j, 0], py - positions[j, 1], pz - positions[j, 2],
                cutoff, r0, strength, repulsion, attraction
            )
            fx += ax
            fy += ay
            fz += az
            potential += p
            count += n

        forces[i, 0] = fx
        forces[i, 1] = fy
        forces[i, 2] = fz
        potentials[i] = potential
        neighbors[i] = count


# --- Pluggable laws ---

class PairLaw(ABC):
    """
    Interaction law between two particles.

    Subclasses implement `evaluate`. `accumulate` has a generic per-pair
    implementation; laws with a compiled kernel override it.
    """

    name = "abstract"
    uses_orientation = False

    @abstractmethod
    def evaluate(self, pose_i: Pose, pose_j: Pose, cutoff_range: float) -> PairResult:
        """Effect of particle j on particle i."""

    def accumulate(
        self,
        targets: np.ndarray,
        candidates: np.ndarray,
        positions: np.ndarray,
        orientations: np.ndarray,
        cutoff_range: float,
        out: ForceResult,
    ) -> None:
        """
        Sum the effect of every candidate on every target into rows
        `targets` of `out`. A target never interacts with itself.
        """
        for i in targets:
            pose_i = Pose(positions[i], orientations[i])
            force = np.zeros(3)
            torque = np.zeros(3)
            potential = 0.0
            count = 0
            for j in candidates:
                if j == i:
                    continue
                result = self.evaluate(pose_i, Pose(positions[j], orientations[j]), cutoff_range)
                force += result.force
                torque += result.torque
                potential += result.potential
                count += result.neighbor
            out.forces[i] = force
            out.torques[i] = torque
            out.potentials[i] = potential
            out.neighbors[i] = count


@dataclass
class LennardJonesLaw(PairLaw):
    """
    Isotropic Lennard-Jones law with independently weighted terms.

    Attributes:
        r0: Length scale (zero crossing of the potential)
        strength: Overall energy/force scale
        repulsion: Weight of the r^-12 term
        attraction: Weight of the r^-6 term
    """
    r0: float = R0
    strength: float = 1.0
    repulsion: float = 1.0
    attraction: float = 1.0

    name = "lennard-jones"
    uses_orientation = False

    @property
    def r_min(self) -> float:
        """Separation of the potential minimum for equal weights."""
        return self.r0 * (2.0 * self.repulsion / self.attraction) ** (1.0 / 6.0)

    def evaluate(self, pose_i: Pose, pose_j: Pose, cutoff_range: float) -> PairResult:
        d = np.asarray(pose_i.translation, dtype=np.float64) - np.asarray(pose_j.translation, dtype=np.float64)
        fx, fy, fz, potential, neighbor = lennard_jones_pair(
            d[0], d[1], d[2], cutoff_range,
            self.r0, self.strength, self.repulsion, self.attraction
        )
        return PairResult(np.array([fx, fy, fz]), np.zeros(3), potential, neighbor)

    def accumulate(self, targets, candidates, positions, orientations, cutoff_range, out):
        lennard_jones_accumulate(
            np.ascontiguousarray(targets, dtype=np.int64),
            np.ascontiguousarray(candidates, dtype=np.int64),
            positions, float(cutoff_range),
            self.r0, self.strength, self.repulsion, self.attraction,
            out.forces, out.potentials, out.neighbors
        )


def _sigmoid(x: float, depth: float) -> float:
    return depth / (1.0 + np.exp(-x)) + 1.0 - depth


def _d_sigmoid(x: float, depth: float) -> float:
    exp_x = np.exp(x)
    return depth * exp_x / (1.0 + exp_x) ** 2


def _remap_cuboid(x: float) -> float:
    # Moves the cuboid factor onto the steep part of the logistic curve
    return -80.0 * (x - 0.98)


D_REMAP_CUBOID = -80.0


def cuboid_factor(orientation: np.ndarray, vec: np.ndarray):
    """
    Cuboid factor of `vec` seen from a particle with the given orientation.

    The factor is the largest absolute component of the unit vector in the
    particle's body frame; it ranges from 3^(-1/2) (towards a cube corner) to
    1 (towards a face center).

    Returns:
        (factor, gradient) where gradient is d(factor)/d(vec) in the world frame
    """
    body = rotations.rotate(rotations.conjugate(orientation), vec)
    length = np.linalg.norm(body)
    unit = body / length
    abs_unit = np.abs(unit)

    m = int(np.argmax(abs_unit))
    factor = abs_unit[m]
    sign = 1.0 if unit[m] >= 0.0 else -1.0

    gradient = -body * body[m] / length ** 3
    gradient[m] = 1.0 / length - body[m] ** 2 / length ** 3
    gradient *= sign

    return factor, rotations.rotate(orientation, gradient)


@dataclass
class CuboidRepulsionLaw(PairLaw):
    """
    Anisotropic law with cube-shaped repulsion.

    Attraction is the plain r^-6 term. Repulsion is split into one r^-12 term
    per particle, each scaled by a logistic function of that particle's cuboid
    factor, so particles repel more strongly across their faces than across
    their corners. The orientation dependence produces a torque on the target.
    """
    r0: float = R0
    repulsion: float = 0.3
    cuboid_depth: float = 1.0
    intensity: float = 24.0

    name = "cuboid"
    uses_orientation = True

    def evaluate(self, pose_i: Pose, pose_j: Pose, cutoff_range: float) -> PairResult:
        r = np.asarray(pose_i.translation, dtype=np.float64) - np.asarray(pose_j.translation, dtype=np.float64)
        r_sq = float(np.dot(r, r))
        if r_sq > cutoff_range ** 2:
            return ZERO_PAIR

        r0 = self.r0
        rs = r / r0
        rs2 = r_sq / (r0 * r0)
        rs6 = rs2 ** 3
        rs8 = rs2 * rs6
        rs12 = rs6 * rs6
        rs14 = rs6 * rs8
        depth = self.cuboid_depth
        scale = self.intensity * self.repulsion

        # Attraction
        force = -self.intensity / rs8 * rs

        # Repulsion shaped by the other particle's orientation
        cf_other, grad_other = cuboid_factor(pose_j.rotation, r)
        x_other = _remap_cuboid(cf_other)
        coef_other = scale / rs12 / 12.0 * r0 * _d_sigmoid(x_other, depth) * D_REMAP_CUBOID
        force = force + scale * _sigmoid(x_other, depth) / rs14 * rs
        force = force - coef_other * grad_other

        # Repulsion shaped by the target's own orientation; d/dr of the
        # target's factor is minus its gradient because it sees -r
        cf_targ, grad_targ = cuboid_factor(pose_i.rotation, -r)
        x_targ = _remap_cuboid(cf_targ)
        coef_targ = scale / rs12 / 12.0 * r0 * _d_sigmoid(x_targ, depth) * D_REMAP_CUBOID
        force = force + scale * _sigmoid(x_targ, depth) / rs14 * rs
        force = force + coef_targ * grad_targ
        torque = coef_targ * np.cross(-r, grad_targ)

        # Potential, shifted by its value at the cutoff for the same orientations
        def potential_at(scaled_sq: float) -> float:
            s6 = scaled_sq ** 3
            s12 = s6 * s6
            value = -self.intensity / s6 / 6.0 * r0
            value += scale * _sigmoid(x_other, depth) / s12 / 12.0 * r0
            value += scale * _sigmoid(x_targ, depth) / s12 / 12.0 * r0
            return value

        free_potential = potential_at((cutoff_range / r0) ** 2)
        potential = 0.5 * (potential_at(rs2) - free_potential)

        neighbor = 1 if r_sq < (NEIGHBOR_FACTOR * r0) ** 2 else 0
        return PairResult(force, torque, float(potential), neighbor)


def _default_sites() -> np.ndarray:
    return np.array([[0.0, 0.0, 0.05], [0.0, 0.0, -0.05]])


def _default_charges() -> np.ndarray:
    return np.array([1.0, -1.0])


@dataclass
class MultiSiteChargeLaw(PairLaw):
    """
    Lennard-Jones core plus screened charges on body-fixed sites.

    Each particle carries point charges at fixed offsets in its body frame
    (a dipole along z by default). Site pairs interact through a Yukawa
    potential k q_a q_b exp(-kappa d) / d. Forces on off-center sites
    produce torques.

    The site energy is shifted by the full site sum the same two particles
    would have at the cutoff along the same direction, so the potential goes
    to zero at the cutoff for any orientations. As with the cuboid law, the
    gradient of that shift is not part of the force.
    """
    r0: float = R0
    strength: float = 1.0
    sites: np.ndarray = field(default_factory=_default_sites)
    charges: np.ndarray = field(default_factory=_default_charges)
    coulomb: float = 0.02
    screening: float = 10.0

    name = "multi-site"
    uses_orientation = True

    def _site_separations(self, r: np.ndarray, offsets_i: np.ndarray, offsets_j: np.ndarray):
        # (S, S, 3) separations between site a of i and site b of j
        sep = (r + offsets_i)[:, None, :] - offsets_j[None, :, :]
        return sep, np.linalg.norm(sep, axis=-1)

    def site_energy(self, r: np.ndarray, offsets_i: np.ndarray, offsets_j: np.ndarray) -> float:
        """Unshifted sum of site pair energies for center separation r."""
        _, d = self._site_separations(r, offsets_i, offsets_j)
        qq = self.coulomb * np.outer(self.charges, self.charges)
        return float(np.sum(qq * np.exp(-self.screening * d) / d))

    def evaluate(self, pose_i: Pose, pose_j: Pose, cutoff_range: float) -> PairResult:
        r = np.asarray(pose_i.translation, dtype=np.float64) - np.asarray(pose_j.translation, dtype=np.float64)
        r_sq = float(np.dot(r, r))
        if r_sq > cutoff_range ** 2:
            return ZERO_PAIR

        fx, fy, fz, potential, neighbor = lennard_jones_pair(
            r[0], r[1], r[2], cutoff_range, self.r0, self.strength, 1.0, 1.0
        )
        force = np.array([fx, fy, fz])

        offsets_i = rotations.rotate(pose_i.rotation, self.sites)
        offsets_j = rotations.rotate(pose_j.rotation, self.sites)

        sep, d = self._site_separations(r, offsets_i, offsets_j)
        qq = self.coulomb * np.outer(self.charges, self.charges)
        decay = np.exp(-self.screening * d)

        # -dV/dd along the separation
        magnitude = qq * decay * (self.screening * d + 1.0) / d ** 2
        site_forces = (magnitude / d)[..., None] * sep

        per_site = site_forces.sum(axis=1)
        force = force + per_site.sum(axis=0)
        torque = np.cross(offsets_i, per_site).sum(axis=0)

        at_cutoff = r * (cutoff_range / np.sqrt(r_sq))
        free_potential = self.site_energy(at_cutoff, offsets_i, offsets_j)
        potential += 0.5 * (float(np.sum(qq * decay / d)) - free_potential)

        return PairResult(force, torque, potential, neighbor)


LAWS: Dict[str, Type[PairLaw]] = {
    LennardJonesLaw.name: LennardJonesLaw,
    CuboidRepulsionLaw.name: CuboidRepulsionLaw,
    MultiSiteChargeLaw.name: MultiSiteChargeLaw,
}


def make_law(name: str, **kwargs) -> PairLaw:
    """Instantiate a registered law by name."""
    try:
        law_cls = LAWS[name]
    except KeyError:
        raise ValueError(f"Unknown interaction law '{name}'. Choose from: {', '.join(LAWS)}") from None
    return law_cls(**kwargs)


# --- Force pass ---

def empty_force_result(n_particles: int) -> ForceResult:
    return ForceResult(
        forces=np.zeros((n_particles, 3)),
        torques=np.zeros((n_particles, 3)),
        potentials=np.zeros(n_particles),
        neighbors=np.zeros(n_particles, dtype=np.int64),
    )


def compute_pair_forces(
    law: PairLaw,
    positions: np.ndarray,
    orientations: np.ndarray,
    cutoff_range: float,
    grid: Optional[Grid] = None,
    pool: Optional[ParallelMap] = None,
) -> ForceResult:
    """
    Compute total pair force, torque, potential and neighbor count per particle.

    With a grid, each occupied cell evaluates its members against the
    particles in the surrounding block of cells; cells are distributed over
    the pool. Without a grid every pair is checked (O(N^2)), which is the
    reference the grid approximation must agree with.

    Args:
        law: Interaction law
        positions: (N, 3) positions, read only
        orientations: (N, 4) quaternions, read only
        cutoff_range: Interaction cutoff
        grid: Cell occupancy built from `positions`, or None for direct summation
        pool: Worker pool, or None to run inline

    Returns:
        ForceResult with one row per particle
    """
    n_particles = positions.shape[0]
    out = empty_force_result(n_particles)
    pool = pool or ParallelMap(1)

    if grid is None:
        everyone = np.arange(n_particles)

        def direct_chunk(start: int, stop: int) -> None:
            law.accumulate(everyone[start:stop], everyone, positions, orientations, cutoff_range, out)

        pool.for_each_chunk(n_particles, direct_chunk)
        return out

    cells = grid.occupied_cells()

    def cell_chunk(start: int, stop: int) -> None:
        for k in range(start, stop):
            candidates = grid.candidates(cells[k])
            law.accumulate(grid.members(k), candidates, positions, orientations, cutoff_range, out)

    pool.for_each_chunk(grid.n_occupied, cell_chunk)
    return out
