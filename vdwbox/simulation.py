#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Molecular Dynamics Simulation Engine
================================================================================

Project:        Van der Waals Box
Module:         simulation.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Core simulation driver. A StatePrototype collects initial conditions,
validates all of them at once and compiles into a Simulation. The
Simulation owns the particle arrays, the boundary, the grid parameters and
all tracker state. Hosts read snapshots between frames and write only the
live ControlParameters.

One frame is `steps_per_frame` leapfrog steps followed by a single update
of energy, temperature, heat injection, pressure and the pressure pin.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from . import rotations
from .errors import BuildResult, ErrorKind, InvalidParamError
from .generators import generate_lattice, generate_spherical_cloud
from .integrator import LeapfrogIntegrator
from .parallel import ParallelMap
from .particle import Particle
from .physics import ForceResult, LennardJonesLaw, PairLaw, compute_pair_forces
from .ring_buffer import RingBuffer
from .space import Boundary, SpatialGrid
from .thermodynamics import (
    PRESSURE_SAMPLING_PERIOD,
    Energy,
    PressureController,
    PressurePinned,
    ThermodynamicsTracker,
    calculate_kinetic_energy,
    calculate_temperature,
    heat_injection_amount,
    pressure_window,
)

logger = logging.getLogger("vdwbox")


@dataclass
class SimulationConfig:
    """Configuration for the simulation."""
    # Box extents (lower corner at the origin)
    boundary: Tuple[float, float, float] = (10.0, 10.0, 10.0)

    # Neighbor grid; the interaction cutoff is unit_size * reach
    grid_unit_size: float = 0.5
    grid_reach: int = 1

    # Time integration
    dt: float = 0.001
    steps_per_frame: int = 50
    external_acceleration: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    # Initial values of the live controls
    target_temp: float = 0.0
    inject_rate: float = 0.0

    # Tracking
    pressure_sampling_period: float = PRESSURE_SAMPLING_PERIOD
    pressure_lookback: int = 10
    history_length: int = 1000

    # Performance settings
    workers: int = 1

    # Interaction law
    law: PairLaw = field(default_factory=LennardJonesLaw)

    @property
    def cutoff_range(self) -> float:
        return self.grid_unit_size * self.grid_reach


@dataclass
class ControlParameters:
    """
    Live knobs a host may change between frames.

    bound_rate is overwritten by the pressure controller while pinned.
    """
    target_temp: float = 0.0
    inject_rate: float = 0.0
    bound_rate: float = 0.0
    pressure_pinned: PressurePinned = field(default_factory=PressurePinned)


@dataclass
class SimulationState:
    """Particle population in structure-of-arrays form."""
    positions: np.ndarray
    orientations: np.ndarray
    velocities: np.ndarray
    angular_velocities: np.ndarray
    masses: np.ndarray
    moments_of_inertia: np.ndarray
    neighbor_counts: np.ndarray
    time: float = 0.0
    step: int = 0
    frame: int = 0

    @property
    def n_particles(self) -> int:
        return self.positions.shape[0]

    @classmethod
    def from_particles(cls, particles: Sequence[Particle]) -> "SimulationState":
        n = len(particles)
        if n == 0:
            return cls(
                positions=np.zeros((0, 3)),
                orientations=np.zeros((0, 4)),
                velocities=np.zeros((0, 3)),
                angular_velocities=np.zeros((0, 3)),
                masses=np.zeros(0),
                moments_of_inertia=np.zeros(0),
                neighbor_counts=np.zeros(0, dtype=np.int64),
            )
        return cls(
            positions=np.array([p.translation for p in particles], dtype=np.float64),
            orientations=rotations.normalize(np.array([p.rotation for p in particles], dtype=np.float64)),
            velocities=np.array([p.linear_velocity for p in particles], dtype=np.float64),
            angular_velocities=np.array([p.angular_velocity for p in particles], dtype=np.float64),
            masses=np.array([p.mass for p in particles], dtype=np.float64),
            moments_of_inertia=np.array([p.moment_of_inertia for p in particles], dtype=np.float64),
            neighbor_counts=np.array([p.neighbor_count for p in particles], dtype=np.int64),
        )


class StatePrototype:
    """
    Initial conditions of a simulation.

    Start from the defaults (or a config), adjust with the chainable set_*
    builders, then compile:

        result = (StatePrototype()
                  .set_boundary(10.0, 10.0, 10.0)
                  .set_particles(particles)
                  .compile())
        if result.ok:
            sim = result.simulation
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.particles: List[Particle] = []

    # --- Boundary ---

    def set_bound_x(self, val: float) -> "StatePrototype":
        x, y, z = self.config.boundary
        self.config.boundary = (val, y, z)
        return self

    def set_bound_y(self, val: float) -> "StatePrototype":
        x, y, z = self.config.boundary
        self.config.boundary = (x, val, z)
        return self

    def set_bound_z(self, val: float) -> "StatePrototype":
        x, y, z = self.config.boundary
        self.config.boundary = (x, y, val)
        return self

    def set_boundary(self, x: float, y: float, z: float) -> "StatePrototype":
        self.config.boundary = (x, y, z)
        return self

    # --- Temperature control ---

    def set_target_temp(self, target_temp: float) -> "StatePrototype":
        self.config.target_temp = target_temp
        return self

    def set_inject_rate(self, inject_rate: float) -> "StatePrototype":
        self.config.inject_rate = inject_rate
        return self

    # --- Grid ---

    def set_grid_unit_size(self, unit_size: float) -> "StatePrototype":
        self.config.grid_unit_size = unit_size
        return self

    def set_grid_reach(self, reach: int) -> "StatePrototype":
        self.config.grid_reach = reach
        return self

    # --- Everything else ---

    def set_dt(self, dt: float) -> "StatePrototype":
        self.config.dt = dt
        return self

    def set_steps_per_frame(self, steps_per_frame: int) -> "StatePrototype":
        self.config.steps_per_frame = steps_per_frame
        return self

    def set_external_acceleration(self, x: float, y: float, z: float) -> "StatePrototype":
        self.config.external_acceleration = (x, y, z)
        return self

    def set_law(self, law: PairLaw) -> "StatePrototype":
        self.config.law = law
        return self

    def set_workers(self, workers: int) -> "StatePrototype":
        self.config.workers = workers
        return self

    def set_particles(self, particles: Sequence[Particle]) -> "StatePrototype":
        self.particles = list(particles)
        return self

    def get_bound(self) -> Boundary:
        return Boundary(*self.config.boundary)

    # --- Compilation ---

    def validate(self) -> List[ErrorKind]:
        """Every violated constraint, in a fixed order."""
        cfg = self.config
        errors = []

        if not self.get_bound().is_valid():
            errors.append(ErrorKind.INVALID_BOUNDARY)
        if not cfg.grid_unit_size > 0.0:
            errors.append(ErrorKind.INVALID_GRID_UNIT_SIZE)
        if cfg.grid_reach < 1:
            errors.append(ErrorKind.INVALID_GRID_REACH)
        if not cfg.dt > 0.0:
            errors.append(ErrorKind.INVALID_TIMESTEP)
        if cfg.steps_per_frame < 1:
            errors.append(ErrorKind.INVALID_STEPS_PER_FRAME)
        if cfg.target_temp < 0.0 or cfg.inject_rate < 0.0:
            errors.append(ErrorKind.INVALID_TEMPERATURE_OR_INJECT_RATE)

        if self.particles:
            bound = self.get_bound()
            positions = np.array([p.translation for p in self.particles], dtype=np.float64)
            if not np.all(bound.contains(positions)):
                errors.append(ErrorKind.PARTICLE_OUT_OF_BOUNDS)

            masses = np.array([p.mass for p in self.particles])
            bad_mass = np.any(masses <= 0.0)
            if cfg.law.uses_orientation:
                moments = np.array([p.moment_of_inertia for p in self.particles])
                bad_mass = bad_mass or np.any(moments <= 0.0)
            if bad_mass:
                errors.append(ErrorKind.INVALID_PARTICLE_MASS)

        return errors

    def compile(self) -> BuildResult:
        """
        Check every constraint and build a Simulation.

        Returns:
            BuildResult holding either the simulation or an InvalidParamError
            listing all violated constraints
        """
        errors = self.validate()
        if errors:
            error = InvalidParamError(errors)
            logger.warning("Simulation rejected: %s", error)
            return BuildResult(error=error)

        simulation = Simulation(self.config, self.particles)
        logger.info(
            "Compiled simulation: %d particles, box %s, cutoff %.3f, law %s",
            simulation.n_particles, self.config.boundary,
            self.config.cutoff_range, self.config.law.name,
        )
        return BuildResult(simulation=simulation)


class Simulation:
    """
    Simulation driver.

    Only StatePrototype.compile() should construct one; the constructor
    assumes the parameters were validated.
    """

    def __init__(self, config: SimulationConfig, particles: Sequence[Particle]):
        self.config = config
        self.law = config.law
        self.state = SimulationState.from_particles(particles)
        self.boundary = Boundary(*config.boundary)
        self.grid = SpatialGrid(config.grid_unit_size, config.grid_reach)
        self.dt = config.dt
        self.steps_per_frame = config.steps_per_frame
        self.external_acceleration = np.asarray(config.external_acceleration, dtype=np.float64)

        self.controls = ControlParameters(
            target_temp=config.target_temp,
            inject_rate=config.inject_rate,
        )
        self.integrator = LeapfrogIntegrator(config.dt, oriented=self.law.uses_orientation)
        self.tracker = ThermodynamicsTracker(
            pressure_capacity=pressure_window(config.pressure_sampling_period, config.dt, config.steps_per_frame),
            sample_dt=config.dt * config.steps_per_frame,
            history_length=config.history_length,
        )
        self.controller = PressureController(lookback=config.pressure_lookback)
        self._pool = ParallelMap(config.workers)

        # Initial energy and neighbor counts
        initial = self._pair_forces(self.state.positions, self.state.orientations)
        self.state.neighbor_counts[:] = initial.neighbors
        self._potential = initial.potential_energy
        kinetic = self.kinetic_energy()
        self.tracker.energy = Energy(kinetic=kinetic, potential=self._potential)
        self.tracker.temperature = calculate_temperature(kinetic, self.n_particles)
        self.tracker.heat_amount = heat_injection_amount(
            self.controls.target_temp, self.tracker.temperature, self.controls.inject_rate
        )

    # --- Stepping ---

    def _pair_forces(self, positions: np.ndarray, orientations: np.ndarray) -> ForceResult:
        grid = self.grid.build(positions)
        return compute_pair_forces(
            self.law, positions, orientations, self.grid.cutoff_range, grid, self._pool
        )

    def _force_pass(self, positions: np.ndarray, orientations: np.ndarray):
        pair = self._pair_forces(positions, orientations)
        boundary_forces = self.boundary.force(positions)

        masses = self.state.masses[:, None]
        acceleration = (pair.forces + boundary_forces) / masses + self.external_acceleration

        angular_acceleration = None
        if self.law.uses_orientation:
            angular_acceleration = pair.torques / self.state.moments_of_inertia[:, None]

        return acceleration, angular_acceleration, (pair, boundary_forces)

    def step(self) -> float:
        """
        Advance one time step.

        Returns:
            Impulse delivered by the boundary during the step
        """
        self.boundary.expand(self.controls.bound_rate, self.dt)

        pair, boundary_forces = self.integrator.step(
            self.state, self._force_pass, self.tracker.heat_amount
        )

        self.state.neighbor_counts[:] = pair.neighbors
        self._potential = pair.potential_energy
        self.state.time += self.dt
        self.state.step += 1

        return self.boundary.impulse(boundary_forces, self.dt)

    def advance_frame(self) -> None:
        """Run steps_per_frame steps, then update the per-frame quantities."""
        total_impulse = 0.0
        for _ in range(self.steps_per_frame):
            total_impulse += self.step()

        self.tracker.end_frame(
            kinetic=self.kinetic_energy(),
            potential=self._potential,
            frame_impulse=total_impulse,
            surface_area=self.boundary.surface_area(),
            n_particles=self.n_particles,
            target_temp=self.controls.target_temp,
            inject_rate=self.controls.inject_rate,
        )
        self.controls.bound_rate = self.controller.update(
            self.controls.pressure_pinned,
            self.tracker.pressure_history,
            self.boundary.box_size(),
            self.controls.bound_rate,
        )
        self.state.frame += 1

        logger.debug(
            "Frame %d: KE=%.5f PE=%.5f T=%.5f P=%.5f bound_rate=%.5f",
            self.state.frame, self.energy.kinetic, self.energy.potential,
            self.temperature, self.pressure, self.controls.bound_rate,
        )

    def run(self, n_frames: int) -> SimulationState:
        """Run simulation for n_frames frames."""
        for _ in range(n_frames):
            self.advance_frame()
        return self.state

    # --- Derived quantities ---

    def kinetic_energy(self) -> float:
        if self.law.uses_orientation:
            return calculate_kinetic_energy(
                self.state.velocities, self.state.masses,
                self.state.angular_velocities, self.state.moments_of_inertia,
            )
        return calculate_kinetic_energy(self.state.velocities, self.state.masses)

    @property
    def n_particles(self) -> int:
        return self.state.n_particles

    @property
    def time(self) -> float:
        return self.state.time

    @property
    def frame(self) -> int:
        return self.state.frame

    @property
    def step_count(self) -> int:
        return self.state.step

    @property
    def energy(self) -> Energy:
        """Energy as of the last completed frame."""
        return self.tracker.energy

    @property
    def total_energy(self) -> float:
        return self.tracker.energy.total

    @property
    def temperature(self) -> float:
        return self.tracker.temperature

    @property
    def pressure(self) -> float:
        """Averaged pressure as of the last completed frame."""
        return self.tracker.current_pressure()

    @property
    def volume(self) -> float:
        return self.boundary.volume()

    @property
    def surface_area(self) -> float:
        return self.boundary.surface_area()

    @property
    def compressibility_factor(self) -> float:
        """PV / (2/3 KE), 1 for an ideal gas."""
        kinetic = self.tracker.energy.kinetic
        if kinetic <= 0.0:
            return 0.0
        return self.pressure * self.volume / (2.0 / 3.0) / kinetic

    @property
    def energy_history(self) -> RingBuffer:
        return self.tracker.energy_history

    @property
    def pressure_history(self) -> RingBuffer:
        return self.tracker.pressure_history

    # --- Snapshots ---

    @property
    def positions(self) -> np.ndarray:
        return self.state.positions.copy()

    @property
    def orientations(self) -> np.ndarray:
        return self.state.orientations.copy()

    @property
    def neighbor_counts(self) -> np.ndarray:
        return self.state.neighbor_counts.copy()

    @property
    def bound_extents(self) -> np.ndarray:
        return self.boundary.extents

    def particles(self) -> List[Particle]:
        """Independent Particle records for the current state."""
        s = self.state
        return [
            Particle(
                mass=float(s.masses[i]),
                moment_of_inertia=float(s.moments_of_inertia[i]),
                translation=s.positions[i].copy(),
                rotation=s.orientations[i].copy(),
                linear_velocity=s.velocities[i].copy(),
                angular_velocity=s.angular_velocities[i].copy(),
                neighbor_count=int(s.neighbor_counts[i]),
            )
            for i in range(s.n_particles)
        ]

    # --- Resources ---

    def close(self) -> None:
        self._pool.close()

    def __enter__(self) -> "Simulation":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def create_cloud_simulation(
    n_particles: int = 1000,
    box_size: float = 10.0,
    sigma: float = 1.0,
    temperature: float = 0.0,
    law: Optional[PairLaw] = None,
    seed: Optional[int] = None,
    **config_kwargs,
) -> Simulation:
    """
    Create a simulation of a Gaussian particle cloud in a cubic box.

    Args:
        n_particles: Particles drawn before pruning overlaps
        box_size: Edge length of the box
        sigma: Spread of the cloud
        temperature: Standard deviation of each initial velocity component
        law: Interaction law (default: Lennard-Jones)
        seed: Random seed
        **config_kwargs: Further SimulationConfig fields

    Returns:
        Compiled Simulation

    Raises:
        InvalidParamError: If the parameters are invalid
    """
    config = SimulationConfig(boundary=(box_size, box_size, box_size), **config_kwargs)
    if law is not None:
        config.law = law
    prototype = StatePrototype(config)

    rng = np.random.default_rng(seed)
    particles = generate_spherical_cloud(
        prototype.get_bound(), n_particles, sigma, temperature, rng=rng,
        random_orientation=config.law.uses_orientation,
    )
    return prototype.set_particles(particles).compile().unwrap()


def create_lattice_simulation(
    n_side: int = 8,
    box_size: float = 10.0,
    spacing: float = 0.2,
    temperature: float = 0.0,
    law: Optional[PairLaw] = None,
    seed: Optional[int] = None,
    **config_kwargs,
) -> Simulation:
    """
    Create a simulation with particles on a cubic lattice in the box center.

    Raises:
        InvalidParamError: If the parameters are invalid
    """
    config = SimulationConfig(boundary=(box_size, box_size, box_size), **config_kwargs)
    if law is not None:
        config.law = law
    prototype = StatePrototype(config)

    rng = np.random.default_rng(seed)
    particles = generate_lattice(
        prototype.get_bound(), n_side, spacing, temperature, rng=rng,
        random_orientation=config.law.uses_orientation,
    )
    return prototype.set_particles(particles).compile().unwrap()
