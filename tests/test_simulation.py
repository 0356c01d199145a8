#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Simulation Module Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
License:        MIT License
================================================================================
"""

import logging
import numpy as np
import pytest
from vdwbox import rotations
from vdwbox.errors import BuildResult, ErrorKind, InvalidParamError
from vdwbox.integrator import LeapfrogIntegrator
from vdwbox.logger_setup import setup_logging
from vdwbox.particle import Particle
from vdwbox.physics import R0, CuboidRepulsionLaw, LennardJonesLaw
from vdwbox.simulation import (
    ControlParameters, SimulationConfig, SimulationState, StatePrototype,
    create_cloud_simulation, create_lattice_simulation
)


def particle_at(x, y, z, vx=0.0, vy=0.0, vz=0.0):
    return Particle().set_translation(x, y, z).set_linear_velocity(vx, vy, vz)


def compile_ok(prototype):
    result = prototype.compile()
    assert result.ok, result.error
    return result.simulation


class TestSimulationConfig:
    """Tests for simulation configuration."""

    def test_default_config(self):
        """Test default configuration values."""
        config = SimulationConfig()
        assert config.boundary == (10.0, 10.0, 10.0)
        assert config.dt == 0.001
        assert config.steps_per_frame == 50
        assert config.cutoff_range == pytest.approx(0.5)
        assert isinstance(config.law, LennardJonesLaw)

    def test_custom_config(self):
        """Test custom configuration."""
        config = SimulationConfig(boundary=(4.0, 5.0, 6.0), dt=0.002, workers=2)
        assert config.boundary == (4.0, 5.0, 6.0)
        assert config.dt == 0.002
        assert config.workers == 2

    def test_control_defaults(self):
        """Test the live controls start idle."""
        controls = ControlParameters()
        assert controls.bound_rate == 0.0
        assert not controls.pressure_pinned.is_pinned


class TestStatePrototype:
    """Tests for the builder and its validation."""

    def test_defaults_compile(self):
        """Test the default prototype is valid."""
        result = StatePrototype().compile()
        assert isinstance(result, BuildResult)
        assert result.ok
        assert result.simulation.n_particles == 0

    def test_builder_chain(self):
        """Test set_* methods chain and land in the config."""
        prototype = (StatePrototype()
                     .set_bound_x(6.0)
                     .set_bound_y(7.0)
                     .set_bound_z(8.0)
                     .set_dt(0.002)
                     .set_steps_per_frame(10)
                     .set_grid_unit_size(0.25)
                     .set_grid_reach(2)
                     .set_target_temp(1.0)
                     .set_inject_rate(0.5)
                     .set_external_acceleration(0.0, 0.0, -1.0))
        config = prototype.config

        assert config.boundary == (6.0, 7.0, 8.0)
        assert config.dt == 0.002
        assert config.steps_per_frame == 10
        assert config.cutoff_range == pytest.approx(0.5)
        assert config.external_acceleration == (0.0, 0.0, -1.0)
        assert prototype.get_bound().volume() == pytest.approx(336.0)

    def test_all_errors_reported(self):
        """Test every violated constraint is reported at once."""
        result = (StatePrototype()
                  .set_dt(-1.0)
                  .set_grid_reach(0)
                  .set_bound_x(1.0)
                  .compile())

        assert not result.ok
        assert result.simulation is None
        assert ErrorKind.INVALID_TIMESTEP in result.error
        assert ErrorKind.INVALID_GRID_REACH in result.error
        assert ErrorKind.INVALID_BOUNDARY in result.error
        assert len(result.error) == 3

    def test_each_constraint(self):
        """Test each constraint individually."""
        cases = [
            (StatePrototype().set_grid_unit_size(0.0), ErrorKind.INVALID_GRID_UNIT_SIZE),
            (StatePrototype().set_steps_per_frame(0), ErrorKind.INVALID_STEPS_PER_FRAME),
            (StatePrototype().set_target_temp(-1.0), ErrorKind.INVALID_TEMPERATURE_OR_INJECT_RATE),
            (StatePrototype().set_inject_rate(-0.1), ErrorKind.INVALID_TEMPERATURE_OR_INJECT_RATE),
            (StatePrototype().set_particles([particle_at(11.0, 1.0, 1.0)]), ErrorKind.PARTICLE_OUT_OF_BOUNDS),
            (StatePrototype().set_particles([particle_at(1.0, 1.0, 1.0).set_mass(0.0)]),
             ErrorKind.INVALID_PARTICLE_MASS),
        ]
        for prototype, kind in cases:
            assert prototype.validate() == [kind]

    def test_inertia_checked_for_oriented_laws(self):
        """Test moment of inertia only matters when rotations are integrated."""
        particles = [particle_at(1.0, 1.0, 1.0).set_moment_of_inertia(0.0)]
        assert StatePrototype().set_particles(particles).validate() == []

        prototype = StatePrototype().set_particles(particles).set_law(CuboidRepulsionLaw())
        assert prototype.validate() == [ErrorKind.INVALID_PARTICLE_MASS]

    def test_unwrap_raises(self):
        """Test unwrap raises the collected error."""
        with pytest.raises(InvalidParamError) as info:
            StatePrototype().set_dt(0.0).compile().unwrap()
        assert info.value.kinds == (ErrorKind.INVALID_TIMESTEP,)

    def test_error_deduplicated(self):
        """Test kinds appear once each."""
        error = InvalidParamError([ErrorKind.INVALID_TIMESTEP, ErrorKind.INVALID_TIMESTEP])
        assert len(error) == 1
        assert "INVALID_TIMESTEP" in str(error)

    def test_compile_logs(self, caplog, monkeypatch):
        """Test compilation outcomes are logged."""
        monkeypatch.setattr(logging.getLogger("vdwbox"), "propagate", True)
        with caplog.at_level(logging.INFO, logger="vdwbox"):
            StatePrototype().compile()
            StatePrototype().set_dt(0.0).compile()
        assert "Compiled simulation" in caplog.text
        assert "rejected" in caplog.text


class TestIntegrator:
    """Tests for the leapfrog stepping."""

    def make_state(self, positions, velocities):
        n = len(positions)
        return SimulationState(
            positions=np.array(positions, dtype=np.float64),
            orientations=rotations.identity(n),
            velocities=np.array(velocities, dtype=np.float64),
            angular_velocities=np.zeros((n, 3)),
            masses=np.ones(n),
            moments_of_inertia=np.ones(n),
            neighbor_counts=np.zeros(n, dtype=np.int64),
        )

    def test_free_flight(self):
        """Test a particle without forces moves v * dt."""
        state = self.make_state([[1.0, 1.0, 1.0]], [[2.0, 0.0, -1.0]])
        integrator = LeapfrogIntegrator(0.01)
        integrator.step(state, lambda x, q: (np.zeros_like(x), None, None))
        assert np.allclose(state.positions, [[1.02, 1.0, 0.99]])

    def test_constant_acceleration_exact(self):
        """Test leapfrog is exact under constant acceleration."""
        state = self.make_state([[0.0, 0.0, 0.0]], [[0.0, 0.0, 0.0]])
        integrator = LeapfrogIntegrator(0.1)
        gravity = np.array([[0.0, 0.0, -10.0]])
        for _ in range(10):
            integrator.step(state, lambda x, q: (gravity, None, None))

        assert state.positions[0, 2] == pytest.approx(-0.5 * 10.0 * 1.0 ** 2)
        assert state.velocities[0, 2] == pytest.approx(-10.0)

    def test_heat_injection_scales_velocity(self):
        """Test v is scaled by 1 + h dt."""
        state = self.make_state([[0.0, 0.0, 0.0]], [[1.0, 2.0, 0.0]])
        integrator = LeapfrogIntegrator(0.01)
        integrator.step(state, lambda x, q: (np.zeros_like(x), None, None), heat_amount=5.0)
        assert np.allclose(state.velocities, [[1.05, 2.1, 0.0]])

    def test_force_sees_half_drift(self):
        """Test forces are evaluated at the mid-step positions."""
        state = self.make_state([[0.0, 0.0, 0.0]], [[1.0, 0.0, 0.0]])
        seen = []

        def force_pass(x, q):
            seen.append(x.copy())
            return np.zeros_like(x), None, None

        LeapfrogIntegrator(0.2).step(state, force_pass)
        assert np.allclose(seen[0], [[0.1, 0.0, 0.0]])

    def test_oriented_spin(self):
        """Test orientations advance when the integrator is oriented."""
        state = self.make_state([[0.0, 0.0, 0.0]], [[0.0, 0.0, 0.0]])
        state.angular_velocities[0] = [0.0, 0.0, np.pi / 2]
        integrator = LeapfrogIntegrator(0.1, oriented=True)
        for _ in range(10):
            integrator.step(state, lambda x, q: (np.zeros_like(x), np.zeros_like(x), None))

        assert np.allclose(rotations.rotate(state.orientations[0], [1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])


class TestSimulation:
    """Tests for the simulation driver."""

    def test_counters(self):
        """Test time, step and frame counters."""
        sim = compile_ok(StatePrototype().set_particles([particle_at(5.0, 5.0, 5.0)]))
        sim.run(2)
        assert sim.frame == 2
        assert sim.step_count == 100
        assert sim.time == pytest.approx(0.1)

    def test_pair_repels(self):
        """Test two particles at R0 push apart symmetrically."""
        particles = [particle_at(5.0, 5.0, 5.0), particle_at(5.0 + R0, 5.0, 5.0)]
        sim = compile_ok(StatePrototype().set_particles(particles))

        assert sim.energy.potential > 0
        assert list(sim.neighbor_counts) == [1, 1]

        sim.advance_frame()
        positions = sim.positions
        assert positions[1, 0] - positions[0, 0] > R0
        assert np.allclose(positions.mean(axis=0), [5.0 + R0 / 2, 5.0, 5.0])
        assert np.allclose(sim.state.velocities.sum(axis=0), 0.0, atol=1e-9)

    def test_pair_beyond_cutoff(self):
        """Test separated particles feel nothing."""
        particles = [particle_at(4.0, 5.0, 5.0), particle_at(6.0, 5.0, 5.0)]
        sim = compile_ok(StatePrototype().set_particles(particles))
        before = sim.positions
        sim.advance_frame()

        assert np.allclose(sim.positions, before)
        assert sim.energy.potential == 0.0
        assert list(sim.neighbor_counts) == [0, 0]

    def test_energy_conservation(self):
        """Test total energy stays constant without heat injection."""
        sim = create_lattice_simulation(n_side=2, box_size=4.0, spacing=0.2, temperature=0.0)
        e0 = sim.total_energy
        assert e0 < 0

        # 5000 leapfrog steps
        sim.run(100)
        assert sim.total_energy == pytest.approx(e0, rel=0.01)
        assert len(sim.energy_history) == 100

    def test_wall_bounce(self):
        """Test a particle bounces off a wall and registers pressure."""
        sim = compile_ok(StatePrototype().set_particles([particle_at(9.9, 5.0, 5.0, vx=5.0)]))
        sim.run(2)

        assert sim.state.velocities[0, 0] == pytest.approx(-5.0, rel=0.05)
        assert sim.positions[0, 0] < 10.0
        # Impulse 2 m v spread over a 20 sample window of 0.05 time units
        assert sim.pressure == pytest.approx(10.0 / 600.0 / 20 / 0.05, rel=0.1)

    def test_pressure_pin_grows_box(self):
        """Test pinning below the measured pressure expands the box."""
        sim = compile_ok(StatePrototype().set_particles([particle_at(9.9, 5.0, 5.0, vx=5.0)]))
        sim.controls.pressure_pinned.is_pinned = True
        sim.controls.pressure_pinned.at_value = 0.0
        sim.run(2)

        assert 0.0 < sim.controls.bound_rate <= 0.01 * sim.boundary.box_size()
        sim.advance_frame()
        assert sim.bound_extents[0] > 10.0

        sim.controls.pressure_pinned.is_pinned = False
        sim.advance_frame()
        assert sim.controls.bound_rate == 0.0

    def test_host_bound_rate(self):
        """Test the host can shrink the box directly."""
        sim = compile_ok(StatePrototype())
        sim.controls.bound_rate = -2.0
        sim.advance_frame()
        assert np.allclose(sim.bound_extents, 10.0 - 2.0 * 0.05)

    def test_heat_injection_warms(self):
        """Test heat injection raises the temperature toward the target."""
        sim = create_lattice_simulation(
            n_side=3, box_size=10.0, spacing=1.0, temperature=0.1, seed=0,
            target_temp=1.0, inject_rate=5.0
        )
        t0 = sim.temperature
        sim.run(5)
        assert t0 < sim.temperature < 1.0

    def test_external_acceleration(self):
        """Test a uniform field accelerates free particles."""
        prototype = (StatePrototype()
                     .set_particles([particle_at(5.0, 5.0, 5.0)])
                     .set_external_acceleration(0.0, 0.0, -1.0))
        sim = compile_ok(prototype)
        sim.advance_frame()
        assert sim.state.velocities[0, 2] == pytest.approx(-0.05)

    def test_workers_agree(self):
        """Test threaded force passes give the same trajectory."""
        a = create_cloud_simulation(n_particles=200, sigma=0.8, seed=3)
        b = create_cloud_simulation(n_particles=200, sigma=0.8, seed=3, workers=3)
        with a, b:
            a.run(2)
            b.run(2)
            assert np.allclose(a.positions, b.positions)

    def test_oriented_law(self):
        """Test an oriented law keeps unit rotations."""
        sim = create_cloud_simulation(n_particles=30, sigma=0.5, seed=1, law=CuboidRepulsionLaw())
        sim.run(1)
        assert np.allclose(np.linalg.norm(sim.orientations, axis=1), 1.0)

    def test_compressibility_factor(self):
        """Test PV/NkT is zero without motion and positive for a gas."""
        cold = compile_ok(StatePrototype().set_particles([particle_at(5.0, 5.0, 5.0)]))
        assert cold.compressibility_factor == 0.0

        sim = compile_ok(StatePrototype().set_particles([particle_at(9.9, 5.0, 5.0, vx=5.0)]))
        sim.run(2)
        assert sim.compressibility_factor > 0.0

    def test_particle_snapshots(self):
        """Test snapshots are detached from the simulation."""
        sim = compile_ok(StatePrototype().set_particles([particle_at(5.0, 5.0, 5.0, vx=1.0)]))
        snapshot = sim.particles()
        snapshot[0].translation[0] = 0.0
        positions = sim.positions
        positions[0, 1] = 0.0

        assert sim.state.positions[0, 0] == 5.0
        assert sim.state.positions[0, 1] == 5.0
        assert snapshot[0].kinetic_energy == pytest.approx(0.5)

    def test_empty_simulation(self):
        """Test a simulation without particles runs."""
        with compile_ok(StatePrototype()) as sim:
            sim.run(3)
            assert sim.temperature == 0.0
            assert sim.pressure == 0.0
            assert sim.total_energy == 0.0


class TestLoggingSetup:
    """Tests for logger configuration."""

    def test_setup_logging(self, tmp_path, monkeypatch):
        """Test the dedicated logger gets console and file handlers."""
        logger = logging.getLogger("vdwbox")
        monkeypatch.setattr(logger, "propagate", logger.propagate)
        level = logger.level
        monkeypatch.setattr(logger, "handlers", [])

        assert setup_logging("DEBUG", log_dir=str(tmp_path)) is logger
        try:
            assert logger.name == "vdwbox"
            assert not logger.propagate
            assert len(logger.handlers) == 2
            assert (tmp_path / "simulation.log").exists()

            # Calling again replaces the handlers
            setup_logging("INFO")
            assert len(logger.handlers) == 1
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.setLevel(level)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
