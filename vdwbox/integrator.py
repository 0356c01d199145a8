#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Leapfrog Integrator
================================================================================

Project:        Van der Waals Box
Module:         integrator.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Drift-kick-drift leapfrog with a heat injection stage. One step is:

1. x(t + dt/2) = x(t) + (dt/2) * v(t)
2. a = F(x(t + dt/2)) / m + a_ext
3. v' = v(t) + dt * a
4. v(t + dt) = v' + dt * h * v'          (heat injection, h per frame)
5. x(t + dt) = x(t + dt/2) + (dt/2) * v(t + dt)

Oriented particles advance their rotation and angular velocity the same way,
with torque / moment of inertia as the angular acceleration. With h = 0 and
a conservative law the scheme is symplectic. Step 4 is a deliberate
non-conservative forcing: it neither conserves momentum nor energy.
"""

import numpy as np
from typing import Any, Callable, Optional, Tuple

from . import rotations


# force_pass(positions, orientations) -> (acceleration, angular_acceleration, extra)
ForcePass = Callable[[np.ndarray, np.ndarray], Tuple[np.ndarray, Optional[np.ndarray], Any]]


class LeapfrogIntegrator:
    """
    Advances a SimulationState in place.

    Args:
        dt: Time step
        oriented: Whether rotations and angular velocities are integrated
    """

    def __init__(self, dt: float, oriented: bool = False):
        self.dt = dt
        self.oriented = oriented

    def drift(self, state, coeff: float = 0.5) -> None:
        """Move poses along the current velocities for coeff * dt."""
        span = self.dt * coeff
        state.positions += state.velocities * span
        if self.oriented:
            state.orientations[:] = rotations.integrate(
                state.orientations, state.angular_velocities, span
            )

    def kick(self, state, acceleration: np.ndarray, angular_acceleration: Optional[np.ndarray]) -> None:
        state.velocities += acceleration * self.dt
        if self.oriented and angular_acceleration is not None:
            state.angular_velocities += angular_acceleration * self.dt

    def inject_heat(self, state, amount: float) -> None:
        """Scale velocities by (1 + amount * dt)."""
        if amount == 0.0:
            return
        state.velocities += state.velocities * amount * self.dt
        if self.oriented:
            state.angular_velocities += state.angular_velocities * amount * self.dt

    def step(self, state, force_pass: ForcePass, heat_amount: float = 0.0) -> Any:
        """
        Perform one leapfrog step.

        Args:
            state: State holding positions, orientations and velocities
            force_pass: Computes accelerations from the half-drifted poses
            heat_amount: Heat injection rate h held for this frame

        Returns:
            The extra value returned by force_pass
        """
        self.drift(state, 0.5)

        acceleration, angular_acceleration, extra = force_pass(
            state.positions, state.orientations
        )

        self.kick(state, acceleration, angular_acceleration)
        self.inject_heat(state, heat_amount)
        self.drift(state, 0.5)

        return extra
