# MIT License (see LICENSE)
"""
Named initial-condition generators.

Each preset is a pure function of a scale ("spread") parameter returning a
freshly allocated body list; nothing is shared between calls. The only
exception to reproducibility is "Random Chaos", which draws new positions,
velocities and masses on every call unless a seeded generator is passed.

Presets:
    Figure 8        Chenciner-Montgomery periodic three-body orbit.
    Random Chaos    Three random bodies in a cube of half-width `scale`.
    Sun Earth Moon  Schematic hierarchical system on circular orbits.
    Pythagorean     Burrau's 3-4-5 problem, starting at rest.
    Lagrange        Equilateral triangle in rigid rotation.

Gravitational scaling: if lengths grow by s, velocities must shrink by
1/√s for the orbit to keep its shape (v² ~ GM/r).
"""
from __future__ import annotations
import logging
import math
from typing import Callable

import numpy as np

from .constants import DEFAULT_SPREAD, G
from .types import Body

logger = logging.getLogger(__name__)

PRESET_COLORS = ("#00f3ff", "#7000ff", "#ff003c")

PresetFn = Callable[[float, "np.random.Generator | None"], list[Body]]


def figure_eight(scale: float = DEFAULT_SPREAD, rng: np.random.Generator | None = None) -> list[Body]:
    """
    Three unit masses on the figure-eight choreography.

    Reference values (G = 1, unit masses):
        x1 = -x2 = (0.97000436, -0.24308753),  x3 = 0
        v1 = v2 = (0.4662036850, 0.4323657300), v3 = -2 v1
    """
    s = scale
    vs = 1.0 / math.sqrt(s)
    vx, vy = 0.4662036850 * vs, 0.4323657300 * vs
    return [
        Body(id="1", mass=1.0, position=(0.97000436 * s, -0.24308753 * s, 0.0),
             velocity=(vx, vy, 0.0), radius=0.2, color=PRESET_COLORS[0]),
        Body(id="2", mass=1.0, position=(-0.97000436 * s, 0.24308753 * s, 0.0),
             velocity=(vx, vy, 0.0), radius=0.2, color=PRESET_COLORS[1]),
        Body(id="3", mass=1.0, position=(0.0, 0.0, 0.0),
             velocity=(-2 * vx, -2 * vy, 0.0), radius=0.2, color=PRESET_COLORS[2]),
    ]


def random_chaos(scale: float = DEFAULT_SPREAD, rng: np.random.Generator | None = None) -> list[Body]:
    """Three bodies with masses in [1, 2), positions in [-scale, scale)³ and small velocities."""
    rng = rng or np.random.default_rng()
    bodies = []
    for i in range(3):
        mass = 1.0 + rng.random()
        position = (rng.random(3) - 0.5) * 2.0 * scale
        velocity = (rng.random(3) - 0.5) * 0.5
        bodies.append(Body(id=str(i + 1), mass=mass, position=position, velocity=velocity,
                           radius=0.3, color=PRESET_COLORS[i]))
    return bodies


def sun_earth_moon(scale: float = DEFAULT_SPREAD, rng: np.random.Generator | None = None) -> list[Body]:
    """
    Schematic star / planet / satellite hierarchy in the XY plane.

    Not to scale, but each tier starts on a circular orbit about the mass it
    encloses: v = sqrt(G M / r). The moon's speed is the earth's plus its
    own circular speed about the earth.
    """
    s = scale * 0.5

    m_sun, m_earth, m_moon = 100.0, 1.0, 0.01
    r_earth = 10.0 * s
    r_moon = 1.0 * s

    v_earth = math.sqrt(G * m_sun / r_earth)
    v_moon_local = math.sqrt(G * m_earth / r_moon)

    return [
        Body(id="Sun", mass=m_sun, position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0),
             radius=1.5, color="#fbbf24"),
        Body(id="Earth", mass=m_earth, position=(r_earth, 0.0, 0.0), velocity=(0.0, v_earth, 0.0),
             radius=0.4, color="#3b82f6"),
        Body(id="Moon", mass=m_moon, position=(r_earth + r_moon, 0.0, 0.0),
             velocity=(0.0, v_earth + v_moon_local, 0.0), radius=0.1, color="#9ca3af"),
    ]


def pythagorean(scale: float = DEFAULT_SPREAD, rng: np.random.Generator | None = None) -> list[Body]:
    """Masses 3, 4, 5 at the vertices of a 3-4-5 right triangle, at rest."""
    s = scale * 0.5
    return [
        Body(id="1", mass=3.0, position=(1 * s, 3 * s, 0.0), radius=0.4, color=PRESET_COLORS[0]),
        Body(id="2", mass=4.0, position=(-2 * s, -1 * s, 0.0), radius=0.5, color=PRESET_COLORS[1]),
        Body(id="3", mass=5.0, position=(1 * s, -1 * s, 0.0), radius=0.6, color=PRESET_COLORS[2]),
    ]


def lagrange(scale: float = DEFAULT_SPREAD, rng: np.random.Generator | None = None) -> list[Body]:
    """
    Three unit masses on an equilateral triangle of circumradius `scale`.

    Rigid rotation requires ω² = G M_total / L³ with side L = √3 R, giving a
    tangential speed v = sqrt(G m / (√3 R)). Softening makes this slightly
    off-equilibrium, and the configuration is unstable for equal masses, so
    it holds for a few revolutions before breaking up.
    """
    s = scale
    mass = 1.0
    v = math.sqrt(G * mass / (math.sqrt(3.0) * s))
    bodies = []
    for i in range(3):
        theta = 2.0 * math.pi * i / 3.0
        c, sn = math.cos(theta), math.sin(theta)
        bodies.append(Body(id=str(i + 1), mass=mass,
                           position=(s * c, s * sn, 0.0),
                           velocity=(-v * sn, v * c, 0.0),
                           radius=0.3, color=PRESET_COLORS[i]))
    return bodies


PRESETS: dict[str, PresetFn] = {
    "Figure 8": figure_eight,
    "Random Chaos": random_chaos,
    "Sun Earth Moon": sun_earth_moon,
    "Pythagorean": pythagorean,
    "Lagrange": lagrange,
}

PRESET_NAMES: tuple[str, ...] = tuple(PRESETS)
DEFAULT_PRESET = "Figure 8"


def resolve_preset(name: str) -> str:
    """The preset `name` refers to: itself if known, else DEFAULT_PRESET (logged)."""
    if name in PRESETS:
        return name
    logger.warning("unknown preset %r, falling back to %r", name, DEFAULT_PRESET)
    return DEFAULT_PRESET


def generate(
    name: str,
    scale: float = DEFAULT_SPREAD,
    rng: np.random.Generator | None = None,
) -> list[Body]:
    """
    Generate the initial bodies of a named preset.

    Unknown names fall back to the default preset (Figure 8).

    Args:
        name: One of PRESET_NAMES.
        scale: Characteristic length ("spread").
        rng: Generator for randomized presets; ignored by deterministic ones.
    """
    return PRESETS[resolve_preset(name)](float(scale), rng)
