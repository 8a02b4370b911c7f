"""Reading and writing the binary FLD particle file format.

The file starts with a header holding the particles-per-metre resolution as a
32-bit float and the particle count as a 32-bit signed integer. Then follow
the particles, each as nine 32-bit floats: position, half-step velocity and
velocity, three components each.
"""

from __future__ import annotations

import math
import struct
from typing import BinaryIO, Iterable

from .grid import Grid
from .particle import Particle, PhysicsConstants, Vec3, fluid_properties
from .simulator import Arguments, Simulation

HEADER_SIZE = 8
PARTICLE_COMPONENTS = 9
_FLOAT_SIZE = 4

_HEADER = struct.Struct("<fi")
_RECORD = struct.Struct("<" + "f" * PARTICLE_COMPONENTS)
_F32 = struct.Struct("<f")


class FldError(Exception):
    """Raised when an FLD file cannot be read or written."""


def _stream_length(stream: BinaryIO) -> int:
    stream.seek(0, 2)
    length = stream.tell()
    stream.seek(0)
    return length


def read_header(stream: BinaryIO) -> float:
    """Read and validate the header, returning the particles-per-metre value."""
    try:
        length = _stream_length(stream)
        raw = stream.read(HEADER_SIZE)
    except OSError as error:
        raise FldError("Exception raised reading header") from error
    if len(raw) < HEADER_SIZE:
        raise FldError("Exception raised reading header")

    particles_per_meter, count = _HEADER.unpack(raw)
    if count <= 0:
        raise FldError(f"Invalid number of particles: {count}")

    found = (length - HEADER_SIZE) // _FLOAT_SIZE // PARTICLE_COMPONENTS
    if found != count:
        raise FldError(
            f"Number of particles is not coherent with header\nExpected: {count}\n Found: {found}\n"
        )
    return particles_per_meter


def read_particles(stream: BinaryIO) -> list[Particle]:
    """Read every complete particle record, numbering them from zero.

    Returns an empty list if the stream cannot be read.
    """
    try:
        stream.seek(HEADER_SIZE)
        data = stream.read()
    except OSError:
        return []
    usable = len(data) - len(data) % _RECORD.size
    return [
        Particle(
            id=index,
            position=Vec3(*values[0:3]),
            hv=Vec3(*values[3:6]),
            velocity=Vec3(*values[6:9]),
        )
        for index, values in enumerate(_RECORD.iter_unpack(data[:usable]))
    ]


def _pack_f32(value: float) -> bytes:
    try:
        return _F32.pack(value)
    except OverflowError:
        return _F32.pack(math.copysign(math.inf, value))


def write_header(stream: BinaryIO, count: int, ppm: float) -> None:
    """Write the header: resolution as a 32-bit float and the particle count."""
    stream.write(_pack_f32(ppm))
    stream.write(struct.pack("<i", count))


def write_particles(stream: BinaryIO, particles: Iterable[Particle]) -> None:
    """Write each particle's position, half-step velocity and velocity as 32-bit floats."""
    for particle in particles:
        for vector in (particle.position, particle.hv, particle.velocity):
            stream.write(b"".join(_pack_f32(component) for component in vector))


def read_input_file(arguments: Arguments, constants: PhysicsConstants) -> Simulation:
    """Load the input file named in the arguments and build a ready simulation."""
    try:
        with open(arguments.input_file, "rb") as stream:
            particles_per_meter = read_header(stream)
            particles = read_particles(stream)
    except OSError as error:
        raise FldError(f"Cannot open input file {arguments.input_file}: {error}") from error
    if not particles:
        raise FldError("No particles could be read from the input file")

    return Simulation(
        arguments=arguments,
        fluid_properties=fluid_properties(particles_per_meter, constants),
        grid=Grid(particles, constants.mul_rad / particles_per_meter, constants),
    )


def write_output(simulation: Simulation) -> Simulation:
    """Write every particle, ordered by id, to the output file named in the arguments."""
    by_id = {particle.id: particle for particle in simulation.grid.particles()}
    ordered = [by_id[key] for key in sorted(by_id)]
    try:
        with open(simulation.arguments.output_file, "wb") as stream:
            write_header(stream, len(ordered), simulation.fluid_properties.particles_per_meter)
            write_particles(stream, ordered)
    except OSError as error:
        raise FldError(str(error)) from error
    return simulation