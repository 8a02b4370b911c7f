"""The spatial grid of blocks that partitions the simulation box."""

from __future__ import annotations

import itertools
import logging
import math
from typing import Iterable, Iterator

from .block import Block
from .boundaries import Limit
from .particle import FluidProperties, Particle, PhysicsConstants, Vec3

_log = logging.getLogger(__name__)

_AXIS_FACES = ((Limit.CX0, Limit.CXN), (Limit.CY0, Limit.CYN), (Limit.CZ0, Limit.CZN))


def _cell(value: float, count: int) -> int:
    """Clamp a fractional cell coordinate into ``[0, count - 1]``."""
    if value < 0:
        return 0
    if value >= count:
        return count - 1
    return int(math.floor(value))


class Grid:
    """A regular grid of blocks covering the box between the bottom and top limits.

    Each block knows the adjacent blocks with a higher index, so every pair of
    neighbouring blocks is visited exactly once, and blocks on the faces of the
    box know which faces they touch.
    """

    def __init__(self, particles: Iterable[Particle], smoothing: float, constants: PhysicsConstants) -> None:
        if not smoothing > 0:
            raise ValueError(f"smoothing length must be positive, got {smoothing}")
        self.constants = constants
        extent = constants.top_limit - constants.bottom_limit
        self.grid_size: tuple[int, int, int] = tuple(math.floor(length / smoothing) for length in extent)
        if any(n <= 0 for n in self.grid_size):
            raise ValueError(
                f"smoothing length {smoothing} is larger than the simulation box; grid size {self.grid_size}"
            )
        self.block_size = Vec3(*(length / n for length, n in zip(extent, self.grid_size)))
        nx, ny, nz = self.grid_size
        self.num_blocks = nx * ny * nz
        self.blocks: list[Block] = [Block() for _ in range(self.num_blocks)]

        for particle in particles:
            self.blocks[self.block_index(particle.position)].add_particle(particle, constants.gravity)

        self.adjacent_blocks: list[list[int]] = [[] for _ in range(self.num_blocks)]
        self.limits: dict[int, set[Limit]] = {}
        for index in range(self.num_blocks):
            self._link_block(index)

        _log.info("Grid size: %s", self.grid_size)
        _log.info("Number of blocks: %s", self.num_blocks)
        _log.info("Block size: %s", tuple(self.block_size))

    def repositioning(self) -> None:
        """Redistribute every particle into the block that holds its current position."""
        fresh = [Block() for _ in range(self.num_blocks)]
        gravity = self.constants.gravity
        for particle in self.particles():
            fresh[self.block_index(particle.position)].add_particle(particle, gravity)
        self.blocks = fresh

    def calculate_accelerations(self, fluid_properties: FluidProperties) -> None:
        """Compute all densities, then all accelerations, across the grid."""
        for block, adjacent in zip(self.blocks, self.adjacent_blocks):
            block.calc_densities(fluid_properties, adjacent, self.blocks)
        for block, adjacent in zip(self.blocks, self.adjacent_blocks):
            block.calc_accelerations(fluid_properties, adjacent, self.blocks)

    def process_collisions(self) -> None:
        """Apply wall collision forces in every block that touches a face of the box."""
        for index, faces in self.limits.items():
            self.blocks[index].process_collisions(faces, self.constants)

    def move_particles(self) -> None:
        """Advance every particle one time step."""
        for block in self.blocks:
            block.move_particles(self.constants)

    def process_limits(self) -> None:
        """Reflect particles that crossed a face, in every block that touches one."""
        for index, faces in self.limits.items():
            self.blocks[index].process_limits(faces, self.constants)

    def block_index(self, position: Vec3) -> int:
        """Index of the block containing ``position``, clamped to the grid."""
        nx, ny, nz = self.grid_size
        bottom = self.constants.bottom_limit
        i = _cell((position.x - bottom.x) / self.block_size.x, nx)
        j = _cell((position.y - bottom.y) / self.block_size.y, ny)
        k = _cell((position.z - bottom.z) / self.block_size.z, nz)
        return i + j * nx + k * nx * ny

    def particles(self) -> Iterator[Particle]:
        """Yield every particle in the grid, block by block."""
        for block in self.blocks:
            yield from block.particles

    def _in_bounds(self, cell: tuple[int, int, int]) -> bool:
        return all(0 <= c < n for c, n in zip(cell, self.grid_size))

    def _link_block(self, index: int) -> None:
        nx, ny, _ = self.grid_size
        position = (index % nx, index // nx % ny, index // (nx * ny))
        for offset in itertools.product((-1, 0, 1), repeat=3):
            if offset == (0, 0, 0):
                continue
            neighbour = tuple(p + o for p, o in zip(position, offset))
            if self._in_bounds(neighbour):
                neighbour_index = neighbour[0] + neighbour[1] * nx + neighbour[2] * nx * ny
                if neighbour_index > index:
                    self.adjacent_blocks[index].append(neighbour_index)
            else:
                self._add_limits(index, neighbour)

    def _add_limits(self, index: int, neighbour: tuple[int, int, int]) -> None:
        faces = self.limits.setdefault(index, set())
        for coordinate, count, (lower, upper) in zip(neighbour, self.grid_size, _AXIS_FACES):
            if coordinate < 0:
                faces.add(lower)
            elif coordinate >= count:
                faces.add(upper)