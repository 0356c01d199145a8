#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Construction Errors
================================================================================

Project:        Van der Waals Box
Module:         errors.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Validation of initial conditions is exhaustive: every violated constraint
is collected and reported together. Compilation hands back a BuildResult
instead of raising, so callers can inspect all problems at once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

if TYPE_CHECKING:
    from .simulation import Simulation


class ErrorKind(Enum):
    """Kinds of invalid construction parameters."""
    INVALID_BOUNDARY = "boundary extent below minimum length"
    INVALID_GRID_UNIT_SIZE = "grid unit size must be positive"
    INVALID_GRID_REACH = "grid reach must be at least 1"
    INVALID_TIMESTEP = "time step must be positive"
    INVALID_STEPS_PER_FRAME = "steps per frame must be at least 1"
    INVALID_TEMPERATURE_OR_INJECT_RATE = "target temperature and inject rate must be non-negative"
    PARTICLE_OUT_OF_BOUNDS = "particle outside the boundary"
    INVALID_PARTICLE_MASS = "particle mass and moment of inertia must be positive"


class InvalidParamError(Exception):
    """Raised (or returned) when one or more construction constraints fail."""

    def __init__(self, kinds: Iterable[ErrorKind]):
        unique = []
        for kind in kinds:
            if kind not in unique:
                unique.append(kind)
        self.kinds: Tuple[ErrorKind, ...] = tuple(unique)
        message = "; ".join(f"{k.name}: {k.value}" for k in self.kinds)
        super().__init__(f"InvalidParamError: {message}")

    def __contains__(self, kind: ErrorKind) -> bool:
        return kind in self.kinds

    def __len__(self) -> int:
        return len(self.kinds)


@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of compiling a StatePrototype.

    Exactly one of `simulation` and `error` is set.
    """
    simulation: Optional["Simulation"] = None
    error: Optional[InvalidParamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> "Simulation":
        """Return the simulation, or raise the collected error."""
        if self.error is not None:
            raise self.error
        return self.simulation
