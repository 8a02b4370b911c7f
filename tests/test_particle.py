import math

import pytest

from sphfluid.particle import (
    FluidProperties,
    Particle,
    PhysicsConstants,
    Vec3,
    acceleration_increment,
    density_increment,
    fluid_properties,
    increment_accelerations,
    increment_densities,
    squared_distance,
)


@pytest.fixture
def constants():
    return PhysicsConstants(
        mul_rad=2.0,
        density=1000.0,
        pressure=3.0,
        goo=0.4,
        gravity=Vec3(0.0, -9.8, 0.0),
        time_step=0.001,
        particle_size=0.0002,
        collision=30000.0,
        damping=128.0,
        min_collision_diff=1e-10,
        min_distance=1e-12,
        bottom_limit=Vec3(-1.0, -1.0, -1.0),
        top_limit=Vec3(1.0, 1.0, 1.0),
    )


@pytest.fixture
def props(constants):
    return fluid_properties(10.0, constants)


def test_vec3_add_sub_round_trip():
    a = Vec3(1.5, -2.0, 3.25)
    b = Vec3(0.5, 4.0, -1.0)
    assert (a + b) - b == a


def test_vec3_scale_round_trip_and_negation():
    a = Vec3(1.0, -3.0, 8.0)
    assert (a * 4.0) / 4.0 == a
    assert -(-a) == a
    assert 2.0 * a == a * 2.0


def test_vec3_copy_is_independent():
    a = Vec3(1.0, 2.0, 3.0)
    b = a.copy()
    b.x = 9.0
    assert a.x == 1.0
    assert list(b) == [9.0, 2.0, 3.0]


def test_squared_distance_pinned_and_symmetric():
    origin = Vec3()
    point = Vec3(3.0, 4.0, 0.0)
    assert squared_distance(origin, point) == 25.0
    assert squared_distance(point, origin) == squared_distance(origin, point)
    assert squared_distance(point, point) == 0.0


def test_constants_derived_values(constants):
    assert constants.pi_times_64 == pytest.approx(64 * math.pi)
    assert constants.density_times_2 == 2 * constants.density
    assert constants.min_distance_sqrt ** 2 == pytest.approx(constants.min_distance)
    assert constants.squared_time_step == pytest.approx(constants.time_step ** 2)


def test_fluid_properties_invariants(props, constants):
    assert props.particles_per_meter == 10.0
    assert props.smoothing * props.particles_per_meter == pytest.approx(constants.mul_rad)
    assert props.smoothing_pow_6 == pytest.approx(props.smoothing_pow_2 ** 3)
    assert props.smoothing_pow_9 == pytest.approx(props.smoothing_pow_6 * props.smoothing_pow_2 * props.smoothing)
    assert props.mass * props.particles_per_meter ** 3 == pytest.approx(constants.density)
    assert props.mass_goo / props.mass == pytest.approx(constants.goo)
    assert props.constants is constants


def test_fluid_properties_is_frozen(props, constants):
    original = props.mass
    with pytest.raises(AttributeError):
        props.mass = 1.0
    assert props.mass == original
    assert props.mass * 1000.0 == pytest.approx(constants.density)


def test_density_increment_bounds(props):
    assert density_increment(props, 0.0) == pytest.approx(props.smoothing_pow_6)
    assert density_increment(props, props.smoothing_pow_2) == 0.0
    assert density_increment(props, props.smoothing_pow_2 / 2) < props.smoothing_pow_6


def test_increment_densities_in_range_is_symmetric(props):
    a = Particle(id=0, position=Vec3(0.0, 0.0, 0.0))
    b = Particle(id=1, position=Vec3(props.smoothing / 2, 0.0, 0.0))
    increment_densities(props, a, b)
    assert a.density > 0.0
    assert a.density == b.density


def test_increment_densities_out_of_range_unchanged(props):
    a = Particle(id=0, position=Vec3(0.0, 0.0, 0.0))
    b = Particle(id=1, position=Vec3(props.smoothing * 2, 0.0, 0.0))
    increment_densities(props, a, b)
    assert a.density == 0.0
    assert b.density == 0.0


def test_transform_density_is_monotonic(props):
    low = Particle(density=0.0)
    high = Particle(density=props.smoothing_pow_6)
    low.transform_density(props)
    high.transform_density(props)
    assert low.density > 0.0
    assert high.density == pytest.approx(2 * low.density)


def _pair(props, offset):
    a = Particle(id=0, position=Vec3(0.0, 0.0, 0.0), velocity=Vec3(0.1, 0.0, 0.0))
    b = Particle(id=1, position=offset, velocity=Vec3(-0.1, 0.2, 0.0))
    increment_densities(props, a, b)
    a.transform_density(props)
    b.transform_density(props)
    return a, b


def test_increment_accelerations_conserves_momentum(props):
    a, b = _pair(props, Vec3(props.smoothing / 3, props.smoothing / 4, 0.0))
    a.acceleration = Vec3(0.0, -9.8, 0.0)
    b.acceleration = Vec3(0.0, -9.8, 0.0)
    increment_accelerations(props, a, b)
    total = a.acceleration + b.acceleration
    assert total.x == pytest.approx(0.0, abs=1e-9)
    assert total.y == pytest.approx(-19.6)
    assert total.z == pytest.approx(0.0, abs=1e-9)
    assert a.acceleration != Vec3(0.0, -9.8, 0.0)


def test_acceleration_increment_antisymmetric(props):
    a, b = _pair(props, Vec3(props.smoothing / 3, 0.0, props.smoothing / 5))
    d2 = squared_distance(a.position, b.position)
    forward = acceleration_increment(props, a, b, d2)
    backward = acceleration_increment(props, b, a, d2)
    for f, r in zip(forward, backward):
        assert f == pytest.approx(-r)


def test_acceleration_increment_coincident_particles_is_finite(props):
    a, b = _pair(props, Vec3(0.0, 0.0, 0.0))
    result = acceleration_increment(props, a, b, 0.0)
    assert all(math.isfinite(c) for c in result)
    assert result.y > 0.0


def test_increment_accelerations_out_of_range_unchanged(props):
    a = Particle(id=0, position=Vec3(0.0, 0.0, 0.0), acceleration=Vec3(0.0, -9.8, 0.0), density=1.0)
    b = Particle(id=1, position=Vec3(0.0, props.smoothing * 3, 0.0), acceleration=Vec3(0.0, -9.8, 0.0), density=1.0)
    increment_accelerations(props, a, b)
    assert a.acceleration == Vec3(0.0, -9.8, 0.0)
    assert b.acceleration == Vec3(0.0, -9.8, 0.0)


def test_fluid_properties_type(props):
    assert isinstance(props, FluidProperties)
    assert props.f45_pi_smooth_6 * math.pi * props.smoothing_pow_6 == pytest.approx(45.0)