"""A cell of the spatial grid holding the particles that currently lie in it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Iterable, Sequence

from .boundaries import Limit, apply_collisions, apply_limits
from .particle import (
    FluidProperties,
    Particle,
    PhysicsConstants,
    Vec3,
    increment_accelerations,
    increment_densities,
)


@dataclass
class Block:
    """A grid cell: a list of particles and the per-cell simulation steps."""

    particles: list[Particle] = field(default_factory=list)

    def add_particle(self, particle: Particle, gravity: Vec3) -> None:
        """Place a particle in the block, resetting its acceleration and density."""
        particle.acceleration = gravity.copy()
        particle.density = 0.0
        self.particles.append(particle)

    def _neighbours(self, adjacent: Iterable[int], blocks: Sequence[Block]) -> Iterable[Particle]:
        for index in adjacent:
            yield from blocks[index].particles

    def calc_densities(
        self, properties: FluidProperties, adjacent: Iterable[int], blocks: Sequence[Block]
    ) -> None:
        """Accumulate pair densities within this block and with higher adjacent blocks.

        Each particle of this block is transformed into its physical density once
        its own pairs have been visited.
        """
        adjacent = tuple(adjacent)
        for i, particle in enumerate(self.particles):
            for other in self.particles[i + 1 :]:
                increment_densities(properties, particle, other)
            for other in self._neighbours(adjacent, blocks):
                increment_densities(properties, particle, other)
            particle.transform_density(properties)

    def calc_accelerations(
        self, properties: FluidProperties, adjacent: Iterable[int], blocks: Sequence[Block]
    ) -> None:
        """Accumulate pair accelerations within this block and with adjacent blocks."""
        adjacent = tuple(adjacent)
        for i, particle in enumerate(self.particles):
            for other in self.particles[i + 1 :]:
                increment_accelerations(properties, particle, other)
            for other in self._neighbours(adjacent, blocks):
                increment_accelerations(properties, particle, other)

    def process_collisions(self, limits: AbstractSet[Limit], constants: PhysicsConstants) -> None:
        """Apply wall collision forces to every particle against the given faces."""
        for particle in self.particles:
            apply_collisions(particle, limits, constants)

    def process_limits(self, limits: AbstractSet[Limit], constants: PhysicsConstants) -> None:
        """Reflect every particle that has crossed one of the given faces."""
        for particle in self.particles:
            apply_limits(particle, limits, constants)

    def move_particles(self, constants: PhysicsConstants) -> None:
        """Advance every particle one time step."""
        dt = constants.time_step
        dt2 = constants.squared_time_step
        for particle in self.particles:
            hv = particle.hv
            acceleration = particle.acceleration
            particle.position = particle.position + hv * dt + acceleration * dt2
            particle.velocity = hv + (acceleration * dt) / 2
            particle.hv = hv + acceleration * dt