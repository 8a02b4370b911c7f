import pytest

from sphfluid.grid import Grid
from sphfluid.particle import Particle, PhysicsConstants, Vec3, fluid_properties
from sphfluid.simulator import Arguments, Simulation, run_simulation

CONSTANTS = PhysicsConstants(
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

PPM = 204.0


def make_simulation(particles, iterations):
    properties = fluid_properties(PPM, CONSTANTS)
    grid = Grid(particles, properties.smoothing, CONSTANTS)
    return Simulation(
        arguments=Arguments(iterations=iterations, input_file="in.fld", output_file="out.fld"),
        fluid_properties=properties,
        grid=grid,
    )


def cluster():
    particles = []
    ident = 0
    for i in range(3):
        for j in range(3):
            for k in range(2):
                particles.append(
                    Particle(id=ident, position=Vec3(0.002 * i, 0.002 * j, 0.002 * k))
                )
                ident += 1
    return particles


def test_zero_iterations_leaves_particles_unchanged():
    simulation = make_simulation([Particle(id=0, position=Vec3(0.01, 0.02, 0.0))], 0)
    result = run_simulation(simulation)
    (particle,) = list(result.grid.particles())
    assert particle.position == Vec3(0.01, 0.02, 0.0)
    assert particle.velocity == Vec3(0.0, 0.0, 0.0)


def test_returns_same_simulation():
    simulation = make_simulation([Particle(id=0)], 1)
    assert run_simulation(simulation) is simulation


def test_lone_particle_falls_under_gravity():
    simulation = make_simulation([Particle(id=0, position=Vec3(0.0, 0.0, 0.0))], 1)
    run_simulation(simulation)
    (particle,) = list(simulation.grid.particles())
    assert particle.position.y < 0.0
    assert particle.position.x == 0.0
    assert particle.position.z == 0.0
    assert particle.hv.y == pytest.approx(-9.8 * CONSTANTS.time_step)


def test_particle_count_preserved_over_iterations():
    particles = cluster()
    simulation = make_simulation(particles, 4)
    run_simulation(simulation)
    ids = sorted(p.id for p in simulation.grid.particles())
    assert ids == list(range(len(particles)))


def test_more_iterations_move_particle_further():
    one = make_simulation([Particle(id=0, position=Vec3(0.0, 0.0, 0.0))], 1)
    three = make_simulation([Particle(id=0, position=Vec3(0.0, 0.0, 0.0))], 3)
    run_simulation(one)
    run_simulation(three)
    (p1,) = list(one.grid.particles())
    (p3,) = list(three.grid.particles())
    assert p3.position.y < p1.position.y


def test_particles_stay_inside_box():
    simulation = make_simulation(cluster(), 5)
    run_simulation(simulation)
    bottom, top = CONSTANTS.bottom_limit, CONSTANTS.top_limit
    for particle in simulation.grid.particles():
        assert bottom.x <= particle.position.x <= top.x
        assert bottom.y <= particle.position.y <= top.y
        assert bottom.z <= particle.position.z <= top.z