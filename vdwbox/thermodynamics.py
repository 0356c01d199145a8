#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Thermodynamic Bookkeeping and Pressure Control
================================================================================

Project:        Van der Waals Box
Module:         thermodynamics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This module handles the derived quantities of the simulation, updated once
per displayed frame:
- Kinetic and potential energy
- Temperature and the heat injection amount
- Pressure from boundary impulse, averaged over a fixed physical time
- Bounded energy/pressure histories for plotting
- The pressure pinning controller that drives the boundary rate

Temperature is measured per particle, T = KE / N (k_B = 1).
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List, Optional

from .ring_buffer import RingBuffer

logger = logging.getLogger("vdwbox")


# Physical time spanned by the pressure averaging window
PRESSURE_SAMPLING_PERIOD = 1.0

# Fraction of the box size that bounds the pinned boundary rate
BOUND_RATE_CLAMP_FRACTION = 0.01


@dataclass
class Energy:
    """Energy of the system at the end of a frame."""
    kinetic: float = 0.0
    potential: float = 0.0

    @property
    def total(self) -> float:
        return self.kinetic + self.potential


@dataclass
class PressurePinned:
    """
    Pressure set point controlled by the host.

    Attributes:
        is_pinned: Whether the controller drives the boundary rate
        previous_state: is_pinned as of the previous frame (edge detection)
        at_value: Target pressure
    """
    is_pinned: bool = False
    previous_state: bool = False
    at_value: float = 0.0


def calculate_kinetic_energy(
    velocities: np.ndarray,
    masses: Optional[np.ndarray] = None,
    angular_velocities: Optional[np.ndarray] = None,
    moments_of_inertia: Optional[np.ndarray] = None,
) -> float:
    """
    Calculate total kinetic energy.

    KE = sum 0.5 m |v|^2  (+ sum 0.5 I |w|^2 for rotating particles)

    Args:
        velocities: Nx3 array of linear velocities
        masses: Optional array of masses (default: all 1.0)
        angular_velocities: Optional Nx3 array of angular velocities
        moments_of_inertia: Moments of inertia, required with angular_velocities

    Returns:
        Total kinetic energy
    """
    if masses is None:
        masses = np.ones(velocities.shape[0])

    v_sq = np.sum(velocities ** 2, axis=1)
    kinetic = 0.5 * np.sum(masses * v_sq)

    if angular_velocities is not None:
        w_sq = np.sum(angular_velocities ** 2, axis=1)
        kinetic += 0.5 * np.sum(moments_of_inertia * w_sq)

    return float(kinetic)


def calculate_temperature(kinetic_energy: float, n_particles: int) -> float:
    """Temperature as kinetic energy per particle; 0 for an empty system."""
    if n_particles <= 0:
        return 0.0
    return kinetic_energy / n_particles


def heat_injection_amount(target_temp: float, current_temp: float, inject_rate: float) -> float:
    """
    Velocity scaling rate that pushes the temperature toward the target.

    Positive when the system is colder than the target. Applied as
    v += v * amount * dt, so it heats or damps in proportion to speed.
    """
    return (target_temp - current_temp) * inject_rate


def pressure_window(sampling_period: float, dt: float, steps_per_frame: int) -> int:
    """Number of per-frame samples spanning `sampling_period` of time."""
    return max(1, int(round(sampling_period / dt / steps_per_frame)))


class PressureSampler:
    """
    Moving average of boundary impulse per unit area.

    One sample is pushed per frame. The average divides the running sum by
    the full window length, so it ramps up while the window is filling.

    Args:
        capacity: Number of samples in the window
        sample_dt: Time spanned by one sample (dt * steps_per_frame)
    """

    def __init__(self, capacity: int, sample_dt: float):
        self.samples: RingBuffer[float] = RingBuffer(capacity, track_sum=True)
        self.sample_dt = sample_dt

    @property
    def capacity(self) -> int:
        return self.samples.capacity

    def push_sample(self, impulse_per_area: float) -> None:
        self.samples.push(impulse_per_area)

    def get_average(self) -> float:
        """Mean impulse per area per sample, over the full window."""
        return self.samples.total / self.capacity

    def get_pressure(self) -> float:
        """Average pressure (force per area)."""
        return self.get_average() / self.sample_dt


class PressureController:
    """
    Feedback law pinning the measured pressure at a set point.

    While pinned:

        delta = at_value - pressure
        slope = pressure - pressure(lookback frames ago)
        bound_rate = clamp(slope - delta, -f * box_size, +f * box_size)

    A pressure above the set point, or a rising pressure, grows the box.
    On the pinned -> unpinned transition bound_rate is reset to zero once,
    after which the host owns it again.

    Args:
        lookback: Frames between the two pressures used for the slope
        clamp_fraction: f, the bound on |bound_rate| relative to box size
    """

    def __init__(self, lookback: int = 10, clamp_fraction: float = BOUND_RATE_CLAMP_FRACTION):
        self.lookback = lookback
        self.clamp_fraction = clamp_fraction

    def update(
        self,
        pinned: PressurePinned,
        pressure_history: RingBuffer,
        box_size: float,
        bound_rate: float,
    ) -> float:
        """
        Return the boundary rate for the next frame.

        `pressure_history` must already hold the current pressure as its
        newest entry.
        """
        if pinned.is_pinned:
            current = pressure_history.peek()
            if current is not None:
                past = pressure_history.lookback(self.lookback)
                delta = pinned.at_value - current
                slope = current - past
                limit = self.clamp_fraction * box_size
                bound_rate = float(np.clip(slope - delta, -limit, limit))
        elif pinned.previous_state:
            logger.debug("Pressure unpinned, resetting boundary rate")
            bound_rate = 0.0

        pinned.previous_state = pinned.is_pinned
        return bound_rate


class ThermodynamicsTracker:
    """
    Per-frame derived quantities.

    Holds the last frame's energy, the pressure sampler, the heat injection
    amount used by the next frame's steps, and the display histories. The
    histories are only read by hosts; nothing in the dynamics depends on them.

    Args:
        pressure_capacity: Samples in the pressure averaging window
        sample_dt: Simulated time per frame
        history_length: Frames kept in the energy/pressure histories
    """

    def __init__(self, pressure_capacity: int, sample_dt: float, history_length: int = 1000):
        self.energy = Energy()
        self.pressure = PressureSampler(pressure_capacity, sample_dt)
        self.energy_history: RingBuffer[Energy] = RingBuffer(history_length)
        self.pressure_history: RingBuffer[float] = RingBuffer(history_length)
        self.heat_amount = 0.0
        self.temperature = 0.0

    def end_frame(
        self,
        kinetic: float,
        potential: float,
        frame_impulse: float,
        surface_area: float,
        n_particles: int,
        target_temp: float,
        inject_rate: float,
    ) -> None:
        """Fold one frame's measurements into the tracked state."""
        self.energy = Energy(kinetic=kinetic, potential=potential)
        self.temperature = calculate_temperature(kinetic, n_particles)
        self.heat_amount = heat_injection_amount(target_temp, self.temperature, inject_rate)

        self.pressure.push_sample(frame_impulse / surface_area)

        self.energy_history.push(self.energy)
        self.pressure_history.push(self.pressure.get_pressure())

    def current_pressure(self) -> float:
        return self.pressure.get_pressure()

    def kinetic_history(self) -> List[float]:
        return [e.kinetic for e in self.energy_history]

    def potential_history(self) -> List[float]:
        return [e.potential for e in self.energy_history]

    def total_history(self) -> List[float]:
        return [e.total for e in self.energy_history]
