"""Simulation state and the main time-stepping loop."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Union

from .grid import Grid
from .particle import FluidProperties

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class Arguments:
    """What a simulation run is asked to do."""

    iterations: int
    input_file: PathLike
    output_file: PathLike


@dataclass
class Simulation:
    """Everything a running simulation needs: its arguments, fluid and grid."""

    arguments: Arguments
    fluid_properties: FluidProperties
    grid: Grid


def run_simulation(simulation: Simulation) -> Simulation:
    """Advance the simulation by the requested number of iterations.

    Particles are redistributed into blocks at the start of every iteration
    but the first, since the grid is built with them already in place.
    """
    grid = simulation.grid
    for iteration in range(simulation.arguments.iterations):
        if iteration > 0:
            grid.repositioning()
        grid.calculate_accelerations(simulation.fluid_properties)
        grid.process_collisions()
        grid.move_particles()
        grid.process_limits()
    return simulation