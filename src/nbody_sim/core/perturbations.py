# MIT License (see LICENSE)
"""
External perturbation sources (wormholes).

A wormhole is a point-mass influence that lives outside the n-body pairwise
system. Before each integration sub-step it applies an explicit Euler
velocity kick to every body:

    Δv = (G_w * M_w / (|d|² + s)) * dt * d̂,    d = x_wormhole - x_body

where s is WORMHOLE_SOFTENING (added to the squared distance). The kick is
decoupled from the integrator's internal stages: it is composed before
each step() call, never evaluated inside RK4/Verlet.

A body that falls inside the capture radius is teleported: it reappears
near the wormhole's paired target with a little random jitter and an
outward ejection velocity of fixed magnitude. This is a discrete,
non-physical transition, not a force.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np

from ..constants import (
    DEFAULT_SPREAD,
    WORMHOLE_CAPTURE_RADIUS,
    WORMHOLE_EJECTION_SPEED,
    WORMHOLE_EXIT_DISTANCE,
    WORMHOLE_G,
    WORMHOLE_JITTER,
    WORMHOLE_MASS,
    WORMHOLE_SOFTENING,
    WORMHOLE_SPREAD_FACTOR,
)
from ..types import Body
from ..util import add, f64, norm2, random_unit, scale, sub, unit, vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Wormhole:
    """
    A perturbation source with a linked exit.

    Attributes:
        position: Location of the wormhole mouth.
        target: Exit location bodies are sent to when captured (usually the
                paired wormhole's position).
        mass: Source mass used by the impulse kick.
        label: Optional display label.
        color: Presentation color for the rendering layer.
    """
    position: np.ndarray
    target: np.ndarray
    mass: float = WORMHOLE_MASS
    label: str | None = None
    color: str = "#a855f7"

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", f64(self.position))
        object.__setattr__(self, "target", f64(self.target))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Wormhole):
            return NotImplemented
        return (
            (self.mass, self.label, self.color) == (other.mass, other.label, other.color)
            and np.array_equal(self.position, other.position)
            and np.array_equal(self.target, other.target)
        )


def wormhole_kick(body: Body, source: Wormhole, dt: float) -> np.ndarray:
    """
    Velocity increment a source imparts on a body over dt.

    Returns the Δv vector, directed from the body toward the source.
    """
    d = sub(source.position, body.position)
    dist_sq = norm2(d)
    magnitude = WORMHOLE_G * source.mass / (dist_sq + WORMHOLE_SOFTENING) * dt
    return unit(d) * magnitude


def is_captured(body: Body, source: Wormhole) -> bool:
    """True when the body is inside the source's capture radius."""
    return norm2(sub(source.position, body.position)) < WORMHOLE_CAPTURE_RADIUS ** 2


def teleport(body: Body, source: Wormhole, rng: np.random.Generator) -> Body:
    """
    Relocate a captured body next to the source's exit.

    The body leaves along a random direction: it is placed
    WORMHOLE_EXIT_DISTANCE from the target (plus jitter) and given
    WORMHOLE_EJECTION_SPEED along the same direction.
    """
    direction = random_unit(rng)
    jitter = rng.uniform(-WORMHOLE_JITTER, WORMHOLE_JITTER, size=3)
    position = add(add(source.target, scale(direction, WORMHOLE_EXIT_DISTANCE)), jitter)
    velocity = scale(direction, WORMHOLE_EJECTION_SPEED)
    logger.debug("body %s teleported to %s", body.id, np.round(position, 3).tolist())
    return body.evolved(position=position, velocity=velocity, force=body.force)


def apply_perturbations(
    bodies: list[Body],
    sources: list[Wormhole],
    dt: float,
    rng: np.random.Generator | None = None,
) -> list[Body]:
    """
    Apply every source's kick and capture rule to the body set.

    Kicks from all sources are summed first; the first source whose capture
    radius contains the body then teleports it.

    Args:
        bodies: Current body set (not modified).
        sources: Active perturbation sources.
        dt: Sub-step duration the kick is integrated over.
        rng: Generator for teleport jitter and ejection direction.

    Returns:
        New body list (copies even when there are no sources).
    """
    if not sources:
        return [b.copy() for b in bodies]

    rng = rng or np.random.default_rng()
    out = []
    for b in bodies:
        velocity = b.velocity.copy()
        for s in sources:
            velocity += wormhole_kick(b, s, dt)
        nudged = b.evolved(position=b.position.copy(), velocity=velocity, force=b.force)

        for s in sources:
            if is_captured(nudged, s):
                nudged = teleport(nudged, s, rng)
                break
        out.append(nudged)
    return out


def spawn_wormhole_pair(spread: float = DEFAULT_SPREAD) -> list[Wormhole]:
    """
    Create two linked wormholes on the x axis, each exiting at the other.

    Args:
        spread: Preset scale; the pair sits at ±WORMHOLE_SPREAD_FACTOR * spread.
    """
    offset = WORMHOLE_SPREAD_FACTOR * spread
    a = vec3(-offset, 0.0, 0.0)
    b = vec3(offset, 0.0, 0.0)
    return [
        Wormhole(position=a, target=b, label="ALPHA", color="#a855f7"),
        Wormhole(position=b, target=a, label="OMEGA", color="#22d3ee"),
    ]
