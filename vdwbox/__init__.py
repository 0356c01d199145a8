#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Van der Waals Box
================================================================================

Project:        Van der Waals Box
Description:    3D particle simulation of short-range pair interactions in a
                soft-walled box with temperature and pressure control

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

This package implements a molecular dynamics sandbox featuring:
- Lennard-Jones and orientation-dependent pair laws
- Uniform grid neighbor search with Numba-compiled force kernels
- Leapfrog integration with heat injection toward a target temperature
- Pressure measured from wall impulse, with an optional pressure pin

Modules:
    - physics: Pair laws and the force pass
    - space: Spatial grid and the soft boundary
    - integrator: Drift-kick-drift leapfrog stepping
    - thermodynamics: Energy, temperature, pressure and pressure control
    - simulation: Builder, configuration and the simulation driver
    - generators: Initial particle configurations
    - rotations: Quaternion helpers
"""

__version__ = "1.0.0"
__author__ = "Ryan Kamp"
