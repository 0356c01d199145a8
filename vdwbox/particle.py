#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Record
================================================================================

Project:        Van der Waals Box
Module:         particle.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

A particle is a point mass with an optional orientation. Particles are only
used to describe initial conditions and to hand out snapshots; the running
simulation keeps the population in flat NumPy arrays.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import NamedTuple

from . import rotations


class Pose(NamedTuple):
    """Position and orientation of one particle."""
    translation: np.ndarray
    rotation: np.ndarray


def _zeros() -> np.ndarray:
    return np.zeros(3)


@dataclass
class Particle:
    """
    Simulated particle.

    A fresh particle has unit mass and inertia, sits at the origin with the
    identity orientation and is at rest. The set_* builders update the
    record in place and return it so calls can be chained:

        Particle().set_mass(2.0).set_translation(1.0, 1.0, 1.0)
    """
    mass: float = 1.0
    moment_of_inertia: float = 1.0
    translation: np.ndarray = field(default_factory=_zeros)
    rotation: np.ndarray = field(default_factory=rotations.identity)
    linear_velocity: np.ndarray = field(default_factory=_zeros)
    angular_velocity: np.ndarray = field(default_factory=_zeros)
    neighbor_count: int = 0

    def set_mass(self, mass: float) -> "Particle":
        self.mass = float(mass)
        return self

    def set_moment_of_inertia(self, moment_of_inertia: float) -> "Particle":
        self.moment_of_inertia = float(moment_of_inertia)
        return self

    def set_translation(self, x: float, y: float, z: float) -> "Particle":
        self.translation = np.array([x, y, z], dtype=np.float64)
        return self

    def set_rotation(self, rotation: np.ndarray) -> "Particle":
        self.rotation = rotations.normalize(rotation)
        return self

    def set_linear_velocity(self, x: float, y: float, z: float) -> "Particle":
        self.linear_velocity = np.array([x, y, z], dtype=np.float64)
        return self

    def set_angular_velocity(self, x: float, y: float, z: float) -> "Particle":
        self.angular_velocity = np.array([x, y, z], dtype=np.float64)
        return self

    @property
    def pose(self) -> Pose:
        return Pose(self.translation, self.rotation)

    @property
    def kinetic_energy(self) -> float:
        """Translational kinetic energy 0.5 * m * |v|^2."""
        return 0.5 * self.mass * float(np.dot(self.linear_velocity, self.linear_velocity))
