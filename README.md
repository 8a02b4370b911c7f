# sphfluid

A smoothed-particle hydrodynamics (SPH) fluid simulator. Particles live in a
box that is divided into a uniform grid of blocks. Each block is about one
smoothing length wide. Each simulation step does the following:

1. Re-bins the particles into blocks. This is skipped on the first step.
2. Accumulates the densities, then the pressure and viscosity accelerations,
   over each block and its neighbouring blocks.
3. Applies the wall collision forces to particles in blocks on the faces of the
   grid.
4. Integrates the positions, velocities and half-step velocities.
5. Reflects any particle that has left the box back inside it.

## Installation

Install the package with your usual Python package installer. It needs only
the standard library and Python 3.10 or later. The `test` extra adds `pytest`.

## Physical constants

The package has no built-in set of physical constants. Every run takes a
`sphfluid.particle.PhysicsConstants`, and you must give all of its fields:

- `mul_rad`: the smoothing length multiplier. The smoothing length is
  `mul_rad / particles_per_meter`.
- `density`: the reference fluid density.
- `pressure`: the pressure stiffness.
- `goo`: the viscosity.
- `gravity`: the acceleration that every particle starts each step with, as a `Vec3`.
- `time_step`: the integration step.
- `particle_size`, `collision`, `damping` and `min_collision_diff`: these
  control the wall collision forces.
- `min_distance`: the squared distance below which a pair is treated as being
  at `sqrt(min_distance)`.
- `bottom_limit` and `top_limit`: the corners of the box, as `Vec3`.

`PhysicsConstants` also derives `squared_time_step`, `pi_times_64`,
`density_times_2` and `min_distance_sqrt` from these fields.

## Usage

The constant values below are only an illustration.

```python
from sphfluid.particle import PhysicsConstants, Vec3
from sphfluid.simulator import Arguments, run_simulation
from sphfluid.fld import read_input_file, write_output, FldError

constants = PhysicsConstants(
    mul_rad=1.695,
    density=1000.0,
    pressure=3.0,
    goo=0.4,
    gravity=Vec3(0.0, -9.8, 0.0),
    time_step=1e-3,
    particle_size=2e-4,
    collision=3e4,
    damping=128.0,
    min_collision_diff=1e-10,
    min_distance=1e-12,
    bottom_limit=Vec3(-0.065, -0.08, -0.065),
    top_limit=Vec3(0.065, 0.1, 0.065),
)

arguments = Arguments(iterations=5, input_file="small.fld", output_file="small-5.fld")

try:
    simulation = read_input_file(arguments, constants)
    simulation = run_simulation(simulation)
    write_output(simulation)
except FldError as error:
    print(f"Simulation failed: {error}")
```

The package reports the particles per metre, the smoothing length, the particle
mass, the grid size, the number of blocks and the block size. It sends these
through the standard `logging` module at INFO level.

The package has these modules:

- `sphfluid.particle`
  - `Vec3` is a mutable vector. It supports `+`, `-`, `*` and `/` by a scalar,
    unary `-`, iteration and `copy()`.
  - `Particle` holds `id`, `position`, `hv`, `velocity`, `acceleration` and
    `density`. `Particle.transform_density(properties)` turns the accumulated
    raw density into the physical density.
  - `FluidProperties` and `fluid_properties(ppm, constants)`. The function
    derives the smoothing length, the particle mass and the kernel constants
    from a particles-per-metre value.
  - `squared_distance`, `density_increment` and `acceleration_increment`.
  - The pairwise kernels `increment_densities` and `increment_accelerations`.
- `sphfluid.boundaries`
  - `Limit` names a face of the box: `CX0`, `CXN`, `CY0`, `CYN`, `CZ0` or `CZN`.
  - `apply_collisions(particle, limits, constants)` applies the wall forces to
    one particle.
  - `apply_limits(particle, limits, constants)` reflects one particle back into
    the box.
- `sphfluid.block`
  - `Block` holds the particles of one grid cell. It runs the per-block steps:
    `add_particle`, `calc_densities`, `calc_accelerations`,
    `process_collisions`, `process_limits` and `move_particles`.
- `sphfluid.grid`
  - `Grid(particles, smoothing, constants)` builds the block layout, the
    neighbour lists and the face sets. It raises `ValueError` if the smoothing
    length is not positive or is larger than the box.
  - `Grid.particles()` yields every particle.
  - `Grid.block_index(position)` maps a position to its block. A position
    outside the box maps to the nearest block.
- `sphfluid.simulator`
  - `Arguments` holds `iterations`, `input_file` and `output_file`.
  - `Simulation` holds `arguments`, `fluid_properties` and `grid`.
  - `run_simulation(simulation)` runs the time-stepping loop.
- `sphfluid.fld`
  - `read_header`, `read_particles`, `write_header` and `write_particles` work
    on binary streams.
  - `read_input_file(arguments, constants)` and `write_output(simulation)` work
    on the files named in the arguments.
  - `FldError` is raised for the errors listed below.

## FLD file format

Every value in the file is little-endian.

| Offset | Type | Meaning |
|--------|------|---------|
| 0 | float32 | particles per metre |
| 4 | int32 | number of particles |
| 8 | 9 × float32 per particle | position (x, y, z), half-step velocity (x, y, z), velocity (x, y, z) |

A particle's id is its position in the input file. Output files list the
particles in id order.

`FldError` is raised in these cases:

- The header cannot be read, or the file is shorter than the header.
- The particle count in the header is not positive.
- The count does not match the length of the file.
- The input file cannot be opened, or it contains no particles.
- The output file cannot be written.

## What the package does not do

The package has no command-line program. To run a simulation from files, call
`read_input_file`, `run_simulation` and `write_output` from Python, as the
usage example shows. You must also supply the physical constants yourself.