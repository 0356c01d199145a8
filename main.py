#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Van der Waals Box - Command Line Interface
================================================================================

Project:        Van der Waals Box
Module:         main.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Command line interface for running headless Van der Waals Box scenarios.
"""

import argparse
import logging
import time
import numpy as np

from vdwbox.logger_setup import setup_logging
from vdwbox.physics import LAWS, make_law
from vdwbox.simulation import Simulation, create_cloud_simulation, create_lattice_simulation

logger = logging.getLogger("vdwbox")


def build_simulation(args: argparse.Namespace) -> Simulation:
    """Create the simulation described by the command line options."""
    law = make_law(args.law)
    common = dict(
        box_size=args.box,
        temperature=args.temperature,
        law=law,
        seed=args.seed,
        dt=args.dt,
        steps_per_frame=args.steps_per_frame,
        target_temp=args.target_temp,
        inject_rate=args.inject_rate,
        workers=args.workers,
    )

    if args.lattice:
        n_side = max(1, int(round(args.particles ** (1.0 / 3.0))))
        return create_lattice_simulation(n_side=n_side, spacing=args.spacing, **common)
    return create_cloud_simulation(n_particles=args.particles, sigma=args.sigma, **common)


def run_scenario(sim: Simulation, n_frames: int, pin_pressure=None, log_every: int = 10) -> None:
    """
    Advance the simulation and log a summary every few frames.

    Args:
        sim: Simulation to run
        n_frames: Number of frames
        pin_pressure: Pressure set point, or None to leave the box free
        log_every: Frames between summaries
    """
    if pin_pressure is not None:
        sim.controls.pressure_pinned.is_pinned = True
        sim.controls.pressure_pinned.at_value = pin_pressure

    logger.info("Running %d frames with %d particles...", n_frames, sim.n_particles)
    t_start = time.time()
    initial_energy = sim.total_energy

    for frame in range(n_frames):
        sim.advance_frame()
        if frame % log_every == 0 or frame == n_frames - 1:
            logger.info(
                "Frame %5d: T = %.4f, E = %.4f, P = %.4f, V = %.2f, PV/NkT = %.3f",
                sim.frame, sim.temperature, sim.total_energy,
                sim.pressure, sim.volume, sim.compressibility_factor,
            )

    elapsed = time.time() - t_start
    logger.info("Completed in %.2f seconds (%.1f frames/s)", elapsed, n_frames / max(elapsed, 1e-9))

    if initial_energy != 0.0:
        drift = abs(sim.total_energy - initial_energy) / abs(initial_energy)
        logger.info("Energy drift: %.4f%%", drift * 100)


def plot_history(sim: Simulation, path: str) -> None:
    """Save the energy and pressure history buffers as a figure."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    frames = np.arange(len(sim.energy_history))
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    # Energy plot
    ax = axes[0]
    ax.plot(frames, sim.tracker.kinetic_history(), 'r-', label='Kinetic')
    ax.plot(frames, sim.tracker.potential_history(), 'b-', label='Potential')
    ax.plot(frames, sim.tracker.total_history(), 'k-', label='Total', linewidth=2)
    ax.set_xlabel('Frame')
    ax.set_ylabel('Energy')
    ax.set_title('Energy vs Frame')
    ax.legend()
    ax.grid(True, alpha=0.3)

    # Pressure plot
    ax = axes[1]
    ax.plot(np.arange(len(sim.pressure_history)), list(sim.pressure_history), 'g-')
    if sim.controls.pressure_pinned.is_pinned:
        ax.axhline(y=sim.controls.pressure_pinned.at_value, color='red',
                   linestyle='--', alpha=0.5, label='Pinned')
        ax.legend()
    ax.set_xlabel('Frame')
    ax.set_ylabel('Pressure')
    ax.set_title('Pressure vs Frame')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Plot saved to %s", path)


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Van der Waals Box - 3D pair interaction simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  Gaussian cloud, 100 frames
  python main.py --lattice -n 512 --frames 500    Cubic lattice
  python main.py --target-temp 0.5 --inject-rate 1.0
  python main.py --pin-pressure 2.0 --plot history.png
        """
    )

    parser.add_argument('--law', choices=sorted(LAWS), default='lennard-jones',
                        help='Interaction law (default: lennard-jones)')
    parser.add_argument('--particles', '-n', type=int, default=500,
                        help='Number of particles (default: 500)')
    parser.add_argument('--frames', '-f', type=int, default=100,
                        help='Number of frames (default: 100)')
    parser.add_argument('--box', type=float, default=10.0,
                        help='Box edge length (default: 10.0)')
    parser.add_argument('--lattice', action='store_true',
                        help='Start from a cubic lattice instead of a cloud')
    parser.add_argument('--sigma', type=float, default=1.0,
                        help='Cloud spread (default: 1.0)')
    parser.add_argument('--spacing', type=float, default=0.2,
                        help='Lattice spacing (default: 0.2)')
    parser.add_argument('--temperature', type=float, default=0.0,
                        help='Initial temperature (default: 0.0)')
    parser.add_argument('--target-temp', type=float, default=0.0,
                        help='Heat injection target temperature (default: 0.0)')
    parser.add_argument('--inject-rate', type=float, default=0.0,
                        help='Heat injection rate (default: 0.0, off)')
    parser.add_argument('--pin-pressure', type=float, default=None,
                        help='Pin the pressure at this value')
    parser.add_argument('--dt', type=float, default=0.001,
                        help='Time step (default: 0.001)')
    parser.add_argument('--steps-per-frame', type=int, default=50,
                        help='Steps per frame (default: 50)')
    parser.add_argument('--workers', type=int, default=1,
                        help='Force pass worker threads (default: 1)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed')
    parser.add_argument('--log-level', default='INFO',
                        help='Logging level (default: INFO)')
    parser.add_argument('--log-dir', default=None,
                        help='Directory for the run log file')
    parser.add_argument('--plot', default=None, metavar='PATH',
                        help='Save an energy/pressure history plot')

    args = parser.parse_args()
    setup_logging(args.log_level, log_dir=args.log_dir)

    with build_simulation(args) as sim:
        run_scenario(sim, args.frames, pin_pressure=args.pin_pressure)
        if args.plot:
            plot_history(sim, args.plot)


if __name__ == "__main__":
    main()
