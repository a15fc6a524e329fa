import math

import numpy as np
import pytest
from nbody_sim.constants import SOFTENING
from nbody_sim.core.forces import accelerations
from nbody_sim.core.integrators import INTEGRATORS, step, verlet_step
from nbody_sim.presets import generate
from nbody_sim.types import INTEGRATOR_KINDS, Body


@pytest.mark.parametrize("kind", ["rk4", "verlet"])
def test_step_preserves_identity(kind):
    """Only position, velocity and force change; count/ids/masses/colors/radii are kept."""
    bodies = generate("Sun Earth Moon", 4.0)
    out = step(bodies, 0.01, kind)

    assert len(out) == len(bodies)
    for before, after in zip(bodies, out):
        assert after.id == before.id
        assert after.mass == before.mass
        assert after.color == before.color
        assert after.radius == before.radius
        assert after.force is not None


@pytest.mark.parametrize("kind", ["rk4", "verlet"])
def test_step_returns_independent_copies(kind):
    bodies = generate("Figure 8", 4.0)
    x0 = [b.position.copy() for b in bodies]
    v0 = [b.velocity.copy() for b in bodies]

    out = step(bodies, 0.01, kind)

    # Input untouched
    for b, x, v in zip(bodies, x0, v0):
        assert np.array_equal(b.position, x)
        assert np.array_equal(b.velocity, v)
        assert b.force is None

    # No aliasing with the input
    for b, o in zip(bodies, out):
        assert o is not b
        assert not np.shares_memory(o.position, b.position)
        assert not np.shares_memory(o.velocity, b.velocity)


@pytest.mark.parametrize("kind", ["rk4", "verlet"])
def test_isolated_body_moves_uniformly(kind):
    """Zero net force with one body: v unchanged, x advances by v*dt."""
    body = Body(id="solo", mass=3.0, position=(1.0, 2.0, 3.0), velocity=(0.5, -0.25, 2.0))
    dt = 0.02

    out = step([body], dt, kind)[0]

    assert np.array_equal(out.velocity, body.velocity)
    assert np.allclose(out.position, body.position + body.velocity * dt, rtol=0, atol=1e-15)
    assert np.array_equal(out.force, np.zeros(3))


def test_empty_body_set():
    assert step([], 0.01, "rk4") == []
    assert step([], 0.01, "verlet") == []


def test_unknown_integrator():
    with pytest.raises(ValueError):
        step(generate("Figure 8"), 0.01, "euler")


@pytest.mark.parametrize("kind", ["rk4", "verlet"])
def test_force_is_acceleration_at_returned_positions(kind):
    """Both integrators report a(x(t + dt)), so overlays line up with the new positions."""
    bodies = generate("Pythagorean", 4.0)
    out = step(bodies, 0.01, kind)
    assert np.allclose([b.force for b in out], accelerations(out), rtol=0, atol=1e-14)
    assert not np.allclose([b.force for b in out], accelerations(bodies), rtol=0, atol=1e-9)


def test_verlet_matches_hand_computation():
    """
    Velocity Verlet, written out:
      v½ = v + ½ a(x) dt;  x' = x + v½ dt;  v' = v½ + ½ a(x') dt
    """
    bodies = generate("Pythagorean", 4.0)
    dt = 0.05

    x = np.array([b.position for b in bodies])
    v = np.array([b.velocity for b in bodies])
    a0 = accelerations(bodies)
    v_half = v + 0.5 * dt * a0
    x1 = x + dt * v_half
    moved = [b.evolved(position=x1[i], velocity=v_half[i]) for i, b in enumerate(bodies)]
    a1 = accelerations(moved)
    v1 = v_half + 0.5 * dt * a1

    out = verlet_step(bodies, dt)

    assert np.allclose([b.position for b in out], x1, rtol=0, atol=1e-14)
    assert np.allclose([b.velocity for b in out], v1, rtol=0, atol=1e-14)
    assert np.allclose([b.force for b in out], a1, rtol=0, atol=1e-14)


def _circular_pair():
    """
    Equal unit masses 2 apart on a circular orbit about their barycenter.

    Each body sees a = m d / (d² + ε²)^(3/2) at radius r = 1, so v = sqrt(a r).
    """
    d = 2.0
    a = d / (d * d + SOFTENING ** 2) ** 1.5
    v = math.sqrt(a * 1.0)
    period = 2.0 * math.pi / v
    bodies = [
        Body(id="a", mass=1.0, position=(1.0, 0.0, 0.0), velocity=(0.0, v, 0.0)),
        Body(id="b", mass=1.0, position=(-1.0, 0.0, 0.0), velocity=(0.0, -v, 0.0)),
    ]
    return bodies, period


@pytest.mark.parametrize("kind,tol", [("rk4", 1e-5), ("verlet", 1e-3)])
def test_circular_orbit_returns_after_one_period(kind, tol):
    bodies, period = _circular_pair()
    n = 1000
    dt = period / n

    state = bodies
    for _ in range(n):
        state = step(state, dt, kind)

    err = max(np.linalg.norm(s.position - b.position) for s, b in zip(state, bodies))
    print(kind, "position error after one period", err)
    assert err <= tol


def test_integrator_kinds_match_registry():
    assert tuple(INTEGRATORS) == INTEGRATOR_KINDS
