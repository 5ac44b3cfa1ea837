import math

import numpy as np
import pytest

from config import planets as config
from planets import (
    CollisionPolicy,
    IntegrationScheme,
    Integrator,
    PlanetPool,
    PlanetSpec,
    PoolClosedError,
    UnresolvedCollisionError,
    step,
)
from planets.physics import kinetic_energy, total_momentum

SCHEMES = list(IntegrationScheme)


def reference_pairwise(bodies, G):
    """Plain-Python version of one pairwise tick on [mass, [x, y], [vx, vy]] lists."""
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            m1, p1, v1 = bodies[i]
            m2, p2, v2 = bodies[j]
            dx = p2[0] - p1[0]
            dy = p2[1] - p1[1]
            dist = math.sqrt(dx * dx + dy * dy)
            if dist == 0.0:
                continue
            force = G * m1 * m2 / (dist * dist)
            ux, uy = dx / dist, dy / dist
            v1[0] += force * ux / m1
            v1[1] += force * uy / m1
            v2[0] += -force * ux / m2
            v2[1] += -force * uy / m2
            p1[0] += v1[0]
            p1[1] += v1[1]
            p2[0] += v2[0]
            p2[1] += v2[1]


def snapshot(pool):
    records = pool.live_records()
    return records["pos"].copy(), records["velo"].copy()


def build_pool(specs, capacity=10):
    pool = PlanetPool(capacity)
    for spec in specs:
        pool.insert(spec)
    return pool


def test_isolated_pair_exact_update(pool):
    pool.insert(PlanetSpec("a", 2.0, 1.0, (0.0, 0.0)))
    pool.insert(PlanetSpec("b", 4.0, 1.0, (4.0, 3.0)))

    result = step(pool, gravity=10.0)

    # F = 10 * 2 * 4 / 25 = 3.2 along (0.8, 0.6)
    a, b = pool.planet(0), pool.planet(1)
    assert result.ok
    assert a.velocity == pytest.approx((1.28, 0.96))
    assert b.velocity == pytest.approx((-0.64, -0.48))
    assert a.position == pytest.approx((1.28, 0.96))
    assert b.position == pytest.approx((3.36, 2.52))


@pytest.mark.parametrize("scheme", SCHEMES)
def test_momentum_pairing(pool, scheme):
    pool.insert(PlanetSpec("a", 3.0, 1.0, (0.0, 0.0), (1.0, 2.0)))
    pool.insert(PlanetSpec("b", 7.0, 1.0, (10.0, -4.0), (-1.0, 0.5)))
    (_, v_before) = snapshot(pool)

    step(pool, gravity=10.0, scheme=scheme)

    (_, v_after) = snapshot(pool)
    dv = v_after - v_before
    assert 3.0 * dv[0] + 7.0 * dv[1] == pytest.approx(np.zeros(2), abs=1e-12)
    assert np.any(dv != 0.0)


def test_isolated_pair_moves_by_its_new_velocity(pool):
    pool.insert(PlanetSpec("a", 3.0, 1.0, (0.0, 0.0), (1.0, 2.0)))
    pool.insert(PlanetSpec("b", 7.0, 1.0, (10.0, -4.0), (-1.0, 0.5)))
    p_before, _ = snapshot(pool)

    step(pool, gravity=10.0)

    p_after, v_after = snapshot(pool)
    assert p_after - p_before == pytest.approx(v_after, rel=1e-12)


@pytest.mark.parametrize("scheme", SCHEMES)
def test_zero_distance_is_skipped(pool, scheme):
    pool.insert(PlanetSpec("a", 5.0, 1.0, (5.0, 5.0), (0.5, 0.0)))
    pool.insert(PlanetSpec("b", 5.0, 1.0, (5.0, 5.0), (0.0, -0.5)))
    p_before, v_before = snapshot(pool)

    result = step(pool, gravity=10.0, scheme=scheme)

    p_after, v_after = snapshot(pool)
    assert result.degenerate_pairs == [(0, 1)]
    assert not result.ok
    assert np.all(np.isfinite(p_after)) and np.all(np.isfinite(v_after))
    np.testing.assert_array_equal(v_after, v_before)
    if scheme is IntegrationScheme.PAIRWISE:
        np.testing.assert_array_equal(p_after, p_before)


def test_zero_distance_pair_does_not_block_others(pool):
    pool.insert(PlanetSpec("a", 5.0, 1.0, (0.0, 0.0)))
    pool.insert(PlanetSpec("b", 5.0, 1.0, (0.0, 0.0)))
    pool.insert(PlanetSpec("c", 5.0, 1.0, (10.0, 0.0)))

    result = step(pool, gravity=1.0)

    assert result.degenerate_pairs == [(0, 1)]
    p_after, v_after = snapshot(pool)
    assert np.all(np.isfinite(p_after)) and np.all(np.isfinite(v_after))
    # Both coincident bodies were pulled towards c
    assert v_after[0, 0] > 0 and v_after[1, 0] > 0
    assert v_after[2, 0] < 0


def test_single_planet_does_not_move(pool):
    pool.insert(PlanetSpec("lonely", 1.0, 1.0, (1.0, 1.0), (3.0, 3.0)))
    result = step(pool, gravity=10.0)
    assert result.ok
    assert pool.planet(0).position == (1.0, 1.0)


def test_empty_pool_step(pool):
    result = step(pool)
    assert result.ok and result.collisions == []


def test_three_body_scenario(solar_pool):
    bodies = [[p.mass, list(p.position), list(p.velocity)] for p in solar_pool]

    step(solar_pool, gravity=10.0)
    reference_pairwise(bodies, 10.0)

    for planet, (_, pos, vel) in zip(solar_pool, bodies):
        assert planet.position == pytest.approx(tuple(pos), rel=1e-12)
        assert planet.velocity == pytest.approx(tuple(vel), rel=1e-12)

    sun, earth, mars = list(solar_pool)
    # Earth pulls harder than Mars, so the Sun drifts towards +x/+y
    assert sun.velocity[0] > 0 and sun.velocity[1] > 0
    # Earth is nudged once per pair it is part of
    assert earth.position != pytest.approx((150.0 + earth.velocity[0], 150.0 + earth.velocity[1]))
    assert mars.position[0] < -150.0


def test_many_ticks_match_reference(solar_pool):
    bodies = [[p.mass, list(p.position), list(p.velocity)] for p in solar_pool]
    for _ in range(100):
        step(solar_pool, gravity=10.0)
        reference_pairwise(bodies, 10.0)

    for planet, (_, pos, vel) in zip(solar_pool, bodies):
        assert planet.position == pytest.approx(tuple(pos), rel=1e-9)
        assert planet.velocity == pytest.approx(tuple(vel), rel=1e-9)


@pytest.mark.parametrize("scheme", SCHEMES)
def test_runs_are_deterministic(scheme):
    specs = [
        PlanetSpec("Sun", 500.0, 75.0, (0.0, 0.0)),
        PlanetSpec("Earth", 20.0, 30.0, (150.0, 150.0), (-2.5, 3.5)),
        PlanetSpec("Mars", 10.0, 25.0, (-150.0, -150.0), (-1.5, 2.5)),
        PlanetSpec("Default", 20.0, 30.0, (300.0, -40.0), (-0.5, 1.5)),
    ]
    with build_pool(specs) as first, build_pool(specs) as second:
        for _ in range(200):
            step(first, gravity=10.0, scheme=scheme)
            step(second, gravity=10.0, scheme=scheme)
        p1, v1 = snapshot(first)
        p2, v2 = snapshot(second)

    np.testing.assert_array_equal(p1, p2)
    np.testing.assert_array_equal(v1, v2)


def test_two_pass_matches_pairwise_for_a_single_pair():
    specs = [
        PlanetSpec("a", 3.0, 1.0, (0.0, 0.0), (1.0, 2.0)),
        PlanetSpec("b", 7.0, 1.0, (10.0, -4.0), (-1.0, 0.5)),
    ]
    with build_pool(specs) as pairwise, build_pool(specs) as two_pass:
        step(pairwise, gravity=10.0, scheme="pairwise")
        step(two_pass, gravity=10.0, scheme="two_pass")
        p1, v1 = snapshot(pairwise)
        p2, v2 = snapshot(two_pass)

    assert p2 == pytest.approx(p1, rel=1e-12)
    assert v2 == pytest.approx(v1, rel=1e-12)


def test_two_pass_differs_from_pairwise_with_three_bodies(solar_pool):
    specs = [PlanetSpec(p.name, p.mass, p.diameter, p.position, p.velocity) for p in solar_pool]
    with build_pool(specs) as two_pass:
        step(solar_pool, gravity=10.0, scheme=IntegrationScheme.PAIRWISE)
        step(two_pass, gravity=10.0, scheme=IntegrationScheme.TWO_PASS)
        p1, _ = snapshot(solar_pool)
        p2, _ = snapshot(two_pass)

    assert not np.array_equal(p1, p2)


def test_two_pass_is_order_independent():
    specs = [
        PlanetSpec("Sun", 500.0, 75.0, (0.0, 0.0)),
        PlanetSpec("Earth", 20.0, 30.0, (150.0, 150.0), (-2.5, 3.5)),
        PlanetSpec("Mars", 10.0, 25.0, (-150.0, -150.0), (-1.5, 2.5)),
    ]
    with build_pool(specs) as forward, build_pool(specs[::-1]) as backward:
        for _ in range(10):
            step(forward, gravity=10.0, scheme="two_pass")
            step(backward, gravity=10.0, scheme="two_pass")
        p1, v1 = snapshot(forward)
        p2, v2 = snapshot(backward)

    assert p2[::-1] == pytest.approx(p1, rel=1e-9)
    assert v2[::-1] == pytest.approx(v1, rel=1e-9)


def test_two_pass_conserves_momentum(solar_pool):
    before = total_momentum(solar_pool)
    for _ in range(20):
        step(solar_pool, gravity=10.0, scheme="two_pass")
    assert total_momentum(solar_pool) == pytest.approx(before, abs=1e-9)


def test_diagnostics(pool):
    pool.insert(PlanetSpec("a", 2.0, 1.0, (0.0, 0.0), (3.0, 0.0)))
    pool.insert(PlanetSpec("b", 4.0, 1.0, (50.0, 0.0), (0.0, -1.0)))
    assert total_momentum(pool) == pytest.approx((6.0, -4.0))
    assert kinetic_energy(pool) == pytest.approx(0.5 * 2.0 * 9.0 + 0.5 * 4.0 * 1.0)


def test_step_on_closed_pool():
    pool = PlanetPool(2)
    pool.close()
    with pytest.raises(PoolClosedError):
        step(pool)


def test_integrator_defaults_from_config():
    integrator = Integrator()
    assert integrator.gravity == config.GRAVITY
    assert integrator.collision is CollisionPolicy.parse(config.SIMULATION["collision"])
    assert integrator.scheme is IntegrationScheme.parse(config.SIMULATION["scheme"])


def test_integrator_overrides(pool):
    pool.insert(PlanetSpec("a", 2.0, 1.0, (0.0, 0.0)))
    pool.insert(PlanetSpec("b", 4.0, 1.0, (4.0, 3.0)))
    integrator = Integrator(gravity=20.0, collision="detect", scheme="two-pass")
    assert integrator.scheme is IntegrationScheme.TWO_PASS

    integrator.step(pool)
    # Twice the force constant of the exact-update case
    assert pool.planet(0).velocity == pytest.approx((2.56, 1.92))


def test_unknown_scheme():
    with pytest.raises(ValueError):
        IntegrationScheme.parse("leapfrog")
    with pytest.raises(ValueError):
        Integrator(scheme="leapfrog")


def test_step_reads_config_at_call_time(pool, monkeypatch):
    monkeypatch.setattr(config, "GRAVITY", 20.0)
    monkeypatch.setitem(config.SIMULATION, "collision", "fatal")
    pool.insert(PlanetSpec("a", 2.0, 1.0, (0.0, 0.0)))
    pool.insert(PlanetSpec("b", 4.0, 3.0, (4.0, 3.0)))

    with pytest.raises(UnresolvedCollisionError):
        step(pool)
    assert pool.planet(0).velocity == pytest.approx((2.56, 1.92))
