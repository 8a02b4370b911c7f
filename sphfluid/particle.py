"""Particles, fluid properties and the pairwise SPH interaction kernels."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class Vec3:
    """A mutable three-component vector of floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def copy(self) -> Vec3:
        """Return an independent copy of this vector."""
        return Vec3(self.x, self.y, self.z)


def squared_distance(a: Vec3, b: Vec3) -> float:
    """Squared Euclidean distance between two points."""
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return dx * dx + dy * dy + dz * dz


@dataclass(frozen=True)
class PhysicsConstants:
    """Physical and domain constants that drive the simulation."""

    mul_rad: float
    density: float
    pressure: float
    goo: float
    gravity: Vec3
    time_step: float
    particle_size: float
    collision: float
    damping: float
    min_collision_diff: float
    min_distance: float
    bottom_limit: Vec3
    top_limit: Vec3

    @property
    def squared_time_step(self) -> float:
        return self.time_step * self.time_step

    @property
    def pi_times_64(self) -> float:
        return 64 * math.pi

    @property
    def density_times_2(self) -> float:
        return 2 * self.density

    @property
    def min_distance_sqrt(self) -> float:
        return math.sqrt(self.min_distance)


@dataclass(frozen=True)
class FluidProperties:
    """Quantities derived from the particles-per-metre resolution."""

    particles_per_meter: float
    smoothing: float
    smoothing_pow_2: float
    smoothing_pow_6: float
    smoothing_pow_9: float
    mass: float
    f45_pi_smooth_6: float
    mass_pressure_05: float
    mass_goo: float
    transform_density_constant: float
    constants: PhysicsConstants


@dataclass
class Particle:
    """A fluid particle with its kinematic state and density."""

    id: int = 0
    position: Vec3 = field(default_factory=Vec3)
    hv: Vec3 = field(default_factory=Vec3)
    velocity: Vec3 = field(default_factory=Vec3)
    acceleration: Vec3 = field(default_factory=Vec3)
    density: float = 0.0

    def transform_density(self, properties: FluidProperties) -> None:
        """Turn the accumulated raw density into the physical density."""
        self.density = (self.density + properties.smoothing_pow_6) * properties.transform_density_constant


def fluid_properties(ppm: float, constants: PhysicsConstants) -> FluidProperties:
    """Derive the fluid properties for a given particles-per-metre value."""
    smoothing = constants.mul_rad / ppm
    mass = constants.density / ppm**3
    smoothing_pow_2 = smoothing**2
    smoothing_pow_6 = smoothing**6
    smoothing_pow_9 = smoothing**9

    _log.info("Particles per meter: %s", ppm)
    _log.info("Smoothing length: %s", smoothing)
    _log.info("Particles Mass: %s", mass)

    return FluidProperties(
        particles_per_meter=ppm,
        smoothing=smoothing,
        smoothing_pow_2=smoothing_pow_2,
        smoothing_pow_6=smoothing_pow_6,
        smoothing_pow_9=smoothing_pow_9,
        mass=mass,
        f45_pi_smooth_6=45 / (math.pi * smoothing_pow_6),
        mass_pressure_05=mass * constants.pressure * 0.5,
        mass_goo=mass * constants.goo,
        transform_density_constant=(315.0 / (constants.pi_times_64 * smoothing_pow_9)) * mass,
        constants=constants,
    )


def density_increment(properties: FluidProperties, squared_distance: float) -> float:
    """Kernel contribution to density for a pair at the given squared distance."""
    return (properties.smoothing_pow_2 - squared_distance) ** 3


def acceleration_increment(
    properties: FluidProperties,
    particle_i: Particle,
    particle_j: Particle,
    squared_distance: float,
) -> Vec3:
    """Acceleration that particle_j exerts on particle_i."""
    constants = properties.constants
    if squared_distance > constants.min_distance:
        distance = math.sqrt(squared_distance)
    else:
        distance = constants.min_distance_sqrt
    left = (
        (particle_i.position - particle_j.position)
        * properties.mass_pressure_05
        * ((properties.smoothing - distance) ** 2 / distance)
        * (particle_i.density + particle_j.density - constants.density_times_2)
    )
    right = (particle_j.velocity - particle_i.velocity) * properties.mass_goo
    denominator = particle_i.density * particle_j.density
    return (left + right) * properties.f45_pi_smooth_6 / denominator


def increment_densities(properties: FluidProperties, particle_i: Particle, particle_j: Particle) -> None:
    """Add the mutual density contribution of two particles within range."""
    dist2 = squared_distance(particle_i.position, particle_j.position)
    if dist2 < properties.smoothing_pow_2:
        increment = density_increment(properties, dist2)
        particle_i.density += increment
        particle_j.density += increment


def increment_accelerations(properties: FluidProperties, particle_i: Particle, particle_j: Particle) -> None:
    """Add the mutual acceleration of two particles within range."""
    dist2 = squared_distance(particle_i.position, particle_j.position)
    if dist2 < properties.smoothing_pow_2:
        increment = acceleration_increment(properties, particle_i, particle_j, dist2)
        particle_i.acceleration = particle_i.acceleration + increment
        particle_j.acceleration = particle_j.acceleration - increment