#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Quaternion Rotation Algebra
================================================================================

Project:        Van der Waals Box
Module:         rotations.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Unit quaternions describe particle orientation. They are stored as plain
NumPy arrays ordered (w, x, y, z) so that a whole population fits in one
(N, 4) array. Functions accept a single quaternion of shape (4,) or a stack
of shape (..., 4) unless noted otherwise.
"""

import numpy as np
from typing import Optional


IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])


def identity(n: Optional[int] = None) -> np.ndarray:
    """Identity rotation, or an (n, 4) stack of them."""
    if n is None:
        return IDENTITY.copy()
    return np.tile(IDENTITY, (n, 1))


def normalize(q: np.ndarray) -> np.ndarray:
    """Scale quaternion(s) back to unit length."""
    q = np.asarray(q, dtype=np.float64)
    return q / np.linalg.norm(q, axis=-1, keepdims=True)


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Hamilton product a * b (apply b first, then a).

    Args:
        a: Quaternion(s) (..., 4)
        b: Quaternion(s) (..., 4)

    Returns:
        Product quaternion(s)
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    w1, x1, y1, z1 = a[..., 0], a[..., 1], a[..., 2], a[..., 3]
    w2, x2, y2, z2 = b[..., 0], b[..., 1], b[..., 2], b[..., 3]
    return np.stack([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ], axis=-1)


def conjugate(q: np.ndarray) -> np.ndarray:
    """Conjugate, which is the inverse for unit quaternions."""
    q = np.asarray(q, dtype=np.float64)
    return q * np.array([1.0, -1.0, -1.0, -1.0])


def rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """
    Rotate vector(s) v by unit quaternion(s) q.

    Uses v' = v + 2w(u x v) + 2u x (u x v) where q = (w, u).
    """
    q = np.asarray(q, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    w = q[..., :1]
    u = q[..., 1:]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Create a quaternion from a rotation axis and angle (radians)."""
    axis = np.asarray(axis, dtype=np.float64)
    axis = axis / np.linalg.norm(axis)
    half_angle = 0.5 * angle
    return np.concatenate([[np.cos(half_angle)], axis * np.sin(half_angle)])


def integrate(q: np.ndarray, omega: np.ndarray, dt: float) -> np.ndarray:
    """
    Advance orientation(s) q by world-frame angular velocity omega over dt.

    The increment is the exact exponential map exp(omega * dt / 2) applied on
    the left. Rows with zero angular velocity are left unchanged.

    Args:
        q: Orientations (N, 4)
        omega: Angular velocities (N, 3)
        dt: Time span

    Returns:
        Updated orientations (N, 4), renormalized
    """
    q = np.asarray(q, dtype=np.float64)
    omega = np.asarray(omega, dtype=np.float64)

    speed = np.linalg.norm(omega, axis=-1, keepdims=True)
    half_angle = 0.5 * speed * dt
    safe_speed = np.where(speed > 0.0, speed, 1.0)
    axis = omega / safe_speed

    increment = np.concatenate([np.cos(half_angle), axis * np.sin(half_angle)], axis=-1)
    return normalize(multiply(increment, q))


def random(rng: np.random.Generator, n: int) -> np.ndarray:
    """n rotations drawn uniformly from SO(3) (Shoemake's method)."""
    u1, u2, u3 = rng.random((3, n))
    a = np.sqrt(1.0 - u1)
    b = np.sqrt(u1)
    return np.stack([
        a * np.sin(2.0 * np.pi * u2),
        a * np.cos(2.0 * np.pi * u2),
        b * np.sin(2.0 * np.pi * u3),
        b * np.cos(2.0 * np.pi * u3),
    ], axis=1)
