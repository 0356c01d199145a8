#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Initial Condition Generator Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
License:        MIT License
================================================================================
"""

import numpy as np
import pytest
from vdwbox.generators import generate_lattice, generate_spherical_cloud, prune
from vdwbox.particle import Particle
from vdwbox.space import Boundary


class TestPrune:
    """Tests for overlap removal."""

    def test_earlier_points_win(self):
        """Test the later point of a close pair is dropped."""
        positions = np.array([[0.0, 0.0, 0.0], [0.1, 0.0, 0.0], [1.0, 0.0, 0.0]])
        assert list(prune(positions, 0.15)) == [0, 2]

    def test_min_separation(self):
        """Test no kept pair is closer than the separation."""
        rng = np.random.default_rng(4)
        positions = rng.uniform(0.0, 1.0, (200, 3))
        kept = positions[prune(positions, 0.15)]

        d = np.linalg.norm(kept[:, None, :] - kept[None, :, :], axis=-1)
        np.fill_diagonal(d, np.inf)
        assert np.min(d) >= 0.15


class TestSphericalCloud:
    """Tests for the Gaussian cloud."""

    def test_inside_boundary(self):
        """Test all particles start inside the box."""
        bound = Boundary(4.0, 4.0, 4.0)
        particles = generate_spherical_cloud(bound, 300, 3.0, 0.5, rng=np.random.default_rng(0))
        positions = np.array([p.translation for p in particles])

        assert 0 < len(particles) <= 300
        assert np.all(bound.contains(positions))

    def test_centered(self):
        """Test the cloud is centered on the box."""
        bound = Boundary(10.0, 10.0, 10.0)
        particles = generate_spherical_cloud(bound, 500, 1.0, 0.0, rng=np.random.default_rng(1))
        positions = np.array([p.translation for p in particles])
        assert np.allclose(positions.mean(axis=0), bound.center(), atol=0.2)

    def test_cold_cloud_at_rest(self):
        """Test zero temperature gives zero velocities."""
        particles = generate_spherical_cloud(Boundary(), 20, 1.0, 0.0, rng=np.random.default_rng(2))
        assert all(np.all(p.linear_velocity == 0.0) for p in particles)

    def test_velocity_spread_is_temperature(self):
        """Test each velocity component has standard deviation equal to the temperature."""
        particles = generate_spherical_cloud(
            Boundary(50.0, 50.0, 50.0), 2000, 5.0, 2.0, rng=np.random.default_rng(6), min_separation=0.0
        )
        velocities = np.array([p.linear_velocity for p in particles])

        assert len(particles) == 2000
        assert np.std(velocities) == pytest.approx(2.0, rel=0.05)

    def test_velocities_are_raw_draw(self):
        """Test cloud velocities are scaled normals with no momentum removed."""
        particles = generate_spherical_cloud(
            Boundary(50.0, 50.0, 50.0), 20, 1.0, 3.0, rng=np.random.default_rng(8), min_separation=0.0
        )
        velocities = np.array([p.linear_velocity for p in particles])

        rng = np.random.default_rng(8)
        rng.standard_normal((20, 3))
        expected = rng.standard_normal((20, 3)) * 3.0

        assert np.allclose(velocities, expected)
        assert not np.allclose(velocities.sum(axis=0), 0.0)

    def test_seeded(self):
        """Test the same seed gives the same cloud."""
        a = generate_spherical_cloud(Boundary(), 50, 1.0, 1.0, rng=np.random.default_rng(9))
        b = generate_spherical_cloud(Boundary(), 50, 1.0, 1.0, rng=np.random.default_rng(9))
        assert len(a) == len(b)
        assert all(np.array_equal(p.translation, q.translation) for p, q in zip(a, b))

    def test_random_orientation(self):
        """Test oriented clouds carry unit rotations."""
        particles = generate_spherical_cloud(
            Boundary(), 30, 1.0, 0.0, rng=np.random.default_rng(3), random_orientation=True
        )
        rotations = np.array([p.rotation for p in particles])
        assert np.allclose(np.linalg.norm(rotations, axis=1), 1.0)
        assert not np.allclose(rotations, [1.0, 0.0, 0.0, 0.0])


class TestLattice:
    """Tests for the cubic lattice."""

    def test_count_and_spacing(self):
        """Test n_side^3 particles at the given spacing."""
        particles = generate_lattice(Boundary(10.0, 10.0, 10.0), 3, 0.5, 0.0)
        positions = np.array([p.translation for p in particles])

        assert len(particles) == 27
        assert np.allclose(np.unique(positions[:, 0]), [4.5, 5.0, 5.5])

    def test_zero_momentum(self):
        """Test the center of mass is at rest."""
        particles = generate_lattice(Boundary(), 4, 0.3, 1.0, rng=np.random.default_rng(5))
        velocities = np.array([p.linear_velocity for p in particles])
        assert np.allclose(velocities.sum(axis=0), 0.0)
        assert np.any(velocities != 0.0)

    def test_velocity_spread_is_temperature(self):
        """Test lattice velocities keep the temperature as their spread."""
        particles = generate_lattice(Boundary(20.0, 20.0, 20.0), 12, 1.0, 0.5, rng=np.random.default_rng(5))
        velocities = np.array([p.linear_velocity for p in particles])
        assert np.std(velocities) == pytest.approx(0.5, rel=0.05)


class TestParticle:
    """Tests for the particle record."""

    def test_defaults(self):
        """Test a fresh particle is a unit mass at rest at the origin."""
        p = Particle()
        assert p.mass == 1.0
        assert np.all(p.translation == 0.0)
        assert np.allclose(p.rotation, [1.0, 0.0, 0.0, 0.0])
        assert p.kinetic_energy == 0.0

    def test_builder_chain(self):
        """Test the set_* methods chain."""
        p = Particle().set_mass(2.0).set_translation(1.0, 2.0, 3.0).set_linear_velocity(1.0, 0.0, 0.0)
        assert p.mass == 2.0
        assert np.allclose(p.pose.translation, [1.0, 2.0, 3.0])
        assert p.kinetic_energy == pytest.approx(1.0)

    def test_rotation_normalized(self):
        """Test rotations are stored as unit quaternions."""
        p = Particle().set_rotation(np.array([2.0, 0.0, 0.0, 0.0]))
        assert np.allclose(p.rotation, [1.0, 0.0, 0.0, 0.0])

    def test_independent_defaults(self):
        """Test particles do not share default arrays."""
        a, b = Particle(), Particle()
        a.translation[0] = 5.0
        assert b.translation[0] == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
