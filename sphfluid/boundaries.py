"""Wall collisions and reflections for particles in boundary blocks."""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet

from .particle import Particle, PhysicsConstants


class Limit(Enum):
    """A face of the simulation box: the lower (0) or upper (N) side of an axis."""

    CX0 = ("x", False)
    CXN = ("x", True)
    CY0 = ("y", False)
    CYN = ("y", True)
    CZ0 = ("z", False)
    CZN = ("z", True)

    @property
    def axis(self) -> str:
        """Name of the vector component this face bounds."""
        return self.value[0]

    @property
    def is_upper(self) -> bool:
        """True for the face at the top limit of its axis."""
        return self.value[1]


_AXES = (
    ("x", Limit.CX0, Limit.CXN),
    ("y", Limit.CY0, Limit.CYN),
    ("z", Limit.CZ0, Limit.CZN),
)


def _collide_axis(
    particle: Particle, axis: str, upper: bool, constants: PhysicsConstants
) -> None:
    position = getattr(particle.position, axis)
    hv = getattr(particle.hv, axis)
    velocity = getattr(particle.velocity, axis)
    predicted = position + hv * constants.time_step
    if upper:
        diff = constants.particle_size - (getattr(constants.top_limit, axis) - predicted)
    else:
        diff = constants.particle_size - (predicted - getattr(constants.bottom_limit, axis))
    if diff <= constants.min_collision_diff:
        return
    acceleration = getattr(particle.acceleration, axis)
    if upper:
        acceleration -= constants.collision * diff + constants.damping * velocity
    else:
        acceleration += constants.collision * diff - constants.damping * velocity
    setattr(particle.acceleration, axis, acceleration)


def _reflect_axis(
    particle: Particle, axis: str, upper: bool, constants: PhysicsConstants
) -> None:
    position = getattr(particle.position, axis)
    if upper:
        top = getattr(constants.top_limit, axis)
        overshoot = top - position
        if overshoot >= 0:
            return
        new_position = top + overshoot
    else:
        bottom = getattr(constants.bottom_limit, axis)
        overshoot = position - bottom
        if overshoot >= 0:
            return
        new_position = bottom - overshoot
    setattr(particle.position, axis, new_position)
    setattr(particle.velocity, axis, -getattr(particle.velocity, axis))
    setattr(particle.hv, axis, -getattr(particle.hv, axis))


def apply_collisions(
    particle: Particle, limits: AbstractSet[Limit], constants: PhysicsConstants
) -> None:
    """Add wall collision forces to the particle's acceleration for each bounding face.

    On each axis the lower face takes precedence when both faces are present.
    """
    for axis, lower, upper in _AXES:
        if lower in limits:
            _collide_axis(particle, axis, False, constants)
        elif upper in limits:
            _collide_axis(particle, axis, True, constants)


def apply_limits(
    particle: Particle, limits: AbstractSet[Limit], constants: PhysicsConstants
) -> None:
    """Reflect a particle that has crossed a bounding face back into the box.

    On each axis the lower face takes precedence when both faces are present.
    """
    for axis, lower, upper in _AXES:
        if lower in limits:
            _reflect_axis(particle, axis, False, constants)
        elif upper in limits:
            _reflect_axis(particle, axis, True, constants)