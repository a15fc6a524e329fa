import numpy as np
import pytest
from nbody_sim.constants import (
    WORMHOLE_CAPTURE_RADIUS,
    WORMHOLE_EJECTION_SPEED,
    WORMHOLE_EXIT_DISTANCE,
    WORMHOLE_JITTER,
    WORMHOLE_SOFTENING,
)
from nbody_sim.core.perturbations import (
    Wormhole,
    apply_perturbations,
    is_captured,
    spawn_wormhole_pair,
    wormhole_kick,
)
from nbody_sim.types import Body


def test_kick_points_at_source():
    """Δv = G_w M / (d² + s) * dt toward the source."""
    source = Wormhole(position=(0.0, 0.0, 0.0), target=(10.0, 0.0, 0.0), mass=5.0)
    body = Body(id="b", mass=1.0, position=(3.0, 0.0, 0.0))
    dt = 0.1

    dv = wormhole_kick(body, source, dt)

    expected = 5.0 / (9.0 + WORMHOLE_SOFTENING) * dt
    assert dv == pytest.approx([-expected, 0.0, 0.0])


def test_kick_changes_velocity_only():
    source = Wormhole(position=(0.0, 4.0, 0.0), target=(0.0, -4.0, 0.0))
    bodies = [Body(id="b", mass=1.0, position=(0.0, 0.0, 0.0), velocity=(1.0, 0.0, 0.0))]

    out = apply_perturbations(bodies, [source], 0.05)

    assert np.array_equal(out[0].position, bodies[0].position)
    assert out[0].velocity[1] > 0.0
    assert out[0].velocity[0] == 1.0
    # Input untouched
    assert np.array_equal(bodies[0].velocity, [1.0, 0.0, 0.0])


def test_no_sources_returns_copies():
    bodies = [Body(id="b", mass=1.0, position=(1.0, 2.0, 3.0), velocity=(0.1, 0.2, 0.3))]
    out = apply_perturbations(bodies, [], 0.1)

    assert out[0] is not bodies[0]
    assert np.array_equal(out[0].position, bodies[0].position)
    assert np.array_equal(out[0].velocity, bodies[0].velocity)


def test_capture_teleports_to_target():
    source = Wormhole(position=(0.0, 0.0, 0.0), target=(10.0, 0.0, 0.0))
    body = Body(id="b", mass=2.0, position=(0.1, 0.0, 0.0), velocity=(-1.0, 0.0, 0.0), color="#123456")
    assert is_captured(body, source)

    out = apply_perturbations([body], [source], 0.01, rng=np.random.default_rng(1))[0]

    offset = out.position - source.target
    max_jitter = WORMHOLE_JITTER * np.sqrt(3.0)
    assert WORMHOLE_EXIT_DISTANCE - max_jitter <= np.linalg.norm(offset) <= WORMHOLE_EXIT_DISTANCE + max_jitter
    assert np.linalg.norm(out.velocity) == pytest.approx(WORMHOLE_EJECTION_SPEED)
    # Ejected outward from the exit
    assert np.dot(offset, out.velocity) > 0.0
    # Identity kept
    assert (out.id, out.mass, out.color) == ("b", 2.0, "#123456")


def test_teleport_is_seeded():
    source = Wormhole(position=(0.0, 0.0, 0.0), target=(10.0, 0.0, 0.0))
    body = Body(id="b", mass=1.0, position=(0.2, 0.1, 0.0))

    a = apply_perturbations([body], [source], 0.01, rng=np.random.default_rng(5))[0]
    b = apply_perturbations([body], [source], 0.01, rng=np.random.default_rng(5))[0]

    assert np.array_equal(a.position, b.position)
    assert np.array_equal(a.velocity, b.velocity)


def test_wormhole_pair():
    a, b = spawn_wormhole_pair(4.0)

    assert a.position == pytest.approx([-6.0, 0.0, 0.0])
    assert b.position == pytest.approx([6.0, 0.0, 0.0])
    assert np.array_equal(a.target, b.position)
    assert np.array_equal(b.target, a.position)


def test_exit_lies_outside_paired_capture_radius():
    """A body sent through one mouth is not immediately swallowed by the other."""
    pair = spawn_wormhole_pair(4.0)
    rng = np.random.default_rng(11)
    for _ in range(50):
        body = Body(id="b", mass=1.0, position=pair[0].position + 0.1)
        out = apply_perturbations([body], pair, 0.01, rng=rng)[0]
        distance = np.linalg.norm(out.position - pair[1].position)
        assert distance > WORMHOLE_CAPTURE_RADIUS


def test_wormholes_compare_by_value():
    assert spawn_wormhole_pair(4.0) == spawn_wormhole_pair(4.0)
    assert spawn_wormhole_pair(4.0) != spawn_wormhole_pair(5.0)
