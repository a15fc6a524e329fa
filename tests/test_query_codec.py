import math

import numpy as np
import pytest
from nbody_sim.constants import MAX_BODIES
from nbody_sim.io import IMPORT_COLORS, decode, encode, parse_number
from nbody_sim.presets import generate
from nbody_sim.types import SystemConfig


def test_decode_single_body():
    config = decode("n=1&m=5&p=0,0,0&v=0,0,0")

    assert config is not None
    assert len(config.bodies) == 1
    body = config.bodies[0]
    assert body.mass == 5.0
    assert np.array_equal(body.position, np.zeros(3))
    assert np.array_equal(body.velocity, np.zeros(3))
    assert body.id == "imported-0"
    assert body.radius == pytest.approx(0.5)
    assert config.integrator == "rk4"
    assert config.time_step == 0.01
    assert config.camera_position is None
    assert config.camera_target is None


@pytest.mark.parametrize("text", [
    "n=1&m=5&p=0,0,0",
    "m=5&p=0,0,0&v=0,0,0",
    "n=1&p=0,0,0&v=0,0,0",
    "n=1&m=5&v=0,0,0",
    "",
    "garbage",
])
def test_decode_rejects_missing_required_keys(text):
    assert decode(text) is None


def test_decode_accepts_links():
    for text in ("?n=1&m=2&p=1,2,3&v=0,0,0",
                 "https://example.org/sim?n=1&m=2&p=1,2,3&v=0,0,0",
                 "https://example.org/sim?n=1&m=2&p=1,2,3&v=0,0,0#top"):
        config = decode(text)
        assert config is not None
        assert config.bodies[0].position == pytest.approx([1.0, 2.0, 3.0])


@pytest.mark.parametrize("im,expected", [
    ("verlet", "verlet"),
    ("Verlet", "rk4"),
    ("rk4", "rk4"),
    ("", "rk4"),
    ("euler", "rk4"),
])
def test_integrator_selector(im, expected):
    config = decode(f"n=1&m=1&p=0,0,0&v=0,0,0&im={im}")
    assert config.integrator == expected


@pytest.mark.parametrize("dt,expected", [
    ("0.005", 0.005),
    ("abc", 0.01),
    ("", 0.01),
    ("-1", 0.01),
    ("0", 0.01),
])
def test_time_step(dt, expected):
    config = decode(f"n=1&m=1&p=0,0,0&v=0,0,0&dt={dt}")
    assert config.time_step == expected


def test_lenient_components():
    """Missing masses default to 1, missing coordinates to 0."""
    config = decode("n=2&m=3&p=1,2,3&v=")

    a, b = config.bodies
    assert a.mass == 3.0 and b.mass == 1.0
    assert a.position == pytest.approx([1.0, 2.0, 3.0])
    assert np.array_equal(b.position, np.zeros(3))
    assert np.array_equal(a.velocity, np.zeros(3))
    assert b.radius == pytest.approx(0.2)


def test_zero_or_garbage_mass_defaults_to_one():
    config = decode("n=2&m=0,x&p=&v=")
    assert [b.mass for b in config.bodies] == [1.0, 1.0]


def test_body_count_parsing():
    assert len(decode("n=&m=1&p=&v=").bodies) == 3
    assert len(decode("n=2.9&m=1&p=&v=").bodies) == 2
    assert decode("n=x&m=1&p=&v=").bodies == []
    assert decode("n=-4&m=1&p=&v=").bodies == []


def test_oversized_body_count_is_rejected(caplog):
    """A count beyond MAX_BODIES is a rejection, however many digits it has."""
    caplog.set_level("INFO", logger="nbody_sim.io.query_codec")

    assert decode("n=" + "1" * 5000 + "&m=1&p=0,0,0&v=0,0,0") is None
    assert decode("n=1000000000&m=&p=&v=") is None
    assert decode(f"n={MAX_BODIES + 1}&m=&p=&v=") is None
    assert "exceeds" in caplog.text


def test_body_count_at_limit():
    assert len(decode(f"n={MAX_BODIES}&m=&p=&v=").bodies) == MAX_BODIES
    assert len(decode("n=" + "0" * 5000 + "4&m=&p=&v=").bodies) == 4


def test_colors_cycle_and_ids():
    config = decode("n=7&m=&p=&v=")
    assert [b.id for b in config.bodies] == [f"imported-{i}" for i in range(7)]
    assert config.bodies[6].color == config.bodies[0].color == IMPORT_COLORS[0]
    assert config.bodies[2].color == IMPORT_COLORS[2]


def test_camera_hints():
    config = decode("n=1&m=1&p=0,0,0&v=0,0,0&cp=0,5,20&ct=1,2")
    assert config.camera_position == pytest.approx([0.0, 5.0, 20.0])
    assert config.camera_target is None

    config = decode("n=1&m=1&p=0,0,0&v=0,0,0&cp=0,x,20&ct=1,2,3")
    assert config.camera_position is None
    assert config.camera_target == pytest.approx([1.0, 2.0, 3.0])


def test_parse_number():
    assert parse_number("1.5abc") == 1.5
    assert parse_number(" -2e-3") == -0.002
    assert parse_number(".5") == 0.5
    assert math.isnan(parse_number("abc"))
    assert math.isnan(parse_number(""))


def test_round_trip_three_bodies():
    """encode → decode reproduces masses, positions, velocities exactly."""
    bodies = generate("Figure 8", 4.0)
    config = SystemConfig(bodies=bodies, integrator="rk4", time_step=0.01)

    decoded = decode(encode(config))

    assert decoded.integrator == "rk4"
    assert decoded.time_step == 0.01
    assert len(decoded.bodies) == 3
    for original, restored in zip(bodies, decoded.bodies):
        assert restored.mass == original.mass
        assert np.array_equal(restored.position, original.position)
        assert np.array_equal(restored.velocity, original.velocity)


def test_round_trip_verlet_and_camera():
    bodies = generate("Random Chaos", 4.0, rng=np.random.default_rng(3))
    config = SystemConfig(bodies=bodies, integrator="verlet", time_step=0.0025,
                          camera_position=(0.0, 5.0, 20.0), camera_target=(1e-7, -3.5, 0.0))

    decoded = decode(encode(config, base_url="https://example.org/"))

    assert decoded.integrator == "verlet"
    assert decoded.time_step == 0.0025
    assert np.array_equal(decoded.camera_position, config.camera_position)
    assert np.array_equal(decoded.camera_target, config.camera_target)
    for original, restored in zip(bodies, decoded.bodies):
        assert restored.mass == original.mass
        assert np.array_equal(restored.position, original.position)
        assert np.array_equal(restored.velocity, original.velocity)


def test_encode_format():
    config = decode("n=1&m=5&p=0,0,0&v=0,0,0")
    assert encode(config) == "n=1&m=5&p=0,0,0&v=0,0,0&im=rk4&dt=0.01"
    assert encode(config, base_url="https://example.org/").startswith("https://example.org/?n=1&")
