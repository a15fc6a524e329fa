# MIT License (see LICENSE)
"""
Core type definitions for the n-body simulation.

Defines the fundamental data structures:
- Body: one point mass with kinematic state and presentation attributes.
- SystemConfig: a complete, shareable initial condition (bodies,
  integrator choice, time step, optional camera hints).

Bodies obey Newtonian point-mass dynamics:
  dx/dt = v
  dv/dt = a   (a from the softened pairwise force law, see core/forces.py)

Only position, velocity and the diagnostic force vector change during a
step; id, mass, radius and color are fixed for the lifetime of a body.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from .constants import DEFAULT_TIME_STEP
from .util import f64, norm


Vector3 = np.ndarray

IntegratorKind = Literal["rk4", "verlet"]
INTEGRATOR_KINDS: tuple[str, ...] = ("rk4", "verlet")


def _vector(value, name: str) -> np.ndarray:
    v = f64(value)
    if v.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {v.shape}")
    return v


# =============================================================================
# Body
# =============================================================================

@dataclass(eq=False)
class Body:
    """
    A point mass taking part in the gravitational interaction.

    Attributes:
        id: Stable unique identifier, never reused within a run.
        mass: Mass in simulation units. Expected > 0; not validated, the
              force softening keeps degenerate input finite.
        position: Position [x, y, z].
        velocity: Velocity [vx, vy, vz].
        radius: Visual radius, derived from mass by whoever creates the body.
                Has no effect on dynamics.
        color: Presentation color (CSS hex string).
        force: Net acceleration at the body's current position, computed by the
               last step for vector overlays and telemetry. None until the
               body has been stepped.

    Note:
        Position, velocity and force are converted to float64 arrays on init.
    """
    id: str
    mass: float
    position: Vector3 | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: Vector3 | tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius: float = 0.2
    color: str = "#00f3ff"
    force: Vector3 | None = None

    def __post_init__(self) -> None:
        self.mass = float(self.mass)
        self.position = _vector(self.position, "position")
        self.velocity = _vector(self.velocity, "velocity")
        if self.force is not None:
            self.force = _vector(self.force, "force")

    def __eq__(self, other: object) -> bool:
        """Field-wise equality; arrays compare element by element."""
        if not isinstance(other, Body):
            return NotImplemented
        if (self.id, self.mass, self.radius, self.color) != (other.id, other.mass, other.radius, other.color):
            return False
        if (self.force is None) != (other.force is None):
            return False
        return (
            np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
            and (self.force is None or np.array_equal(self.force, other.force))
        )

    def copy(self) -> "Body":
        """Return an independent copy (no shared arrays)."""
        return Body(
            id=self.id,
            mass=self.mass,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            radius=self.radius,
            color=self.color,
            force=None if self.force is None else self.force.copy(),
        )

    def evolved(
        self,
        position: np.ndarray,
        velocity: np.ndarray,
        force: np.ndarray | None = None,
    ) -> "Body":
        """Return a new body with this body's identity and the given state."""
        return Body(
            id=self.id,
            mass=self.mass,
            position=position,
            velocity=velocity,
            radius=self.radius,
            color=self.color,
            force=force,
        )

    @property
    def momentum(self) -> np.ndarray:
        return self.mass * self.velocity

    @property
    def speed(self) -> float:
        return norm(self.velocity)


# =============================================================================
# System configuration
# =============================================================================

@dataclass
class SystemConfig:
    """
    A complete initial condition for the simulation.

    Produced by the preset library or by decoding a shared configuration
    string, then handed to the driver as the new authoritative state. The
    driver replaces its body set with these bodies; it never merges.

    Attributes:
        bodies: Ordered body list.
        integrator: "rk4" (default) or "verlet".
        time_step: Positive simulation time step.
        camera_position: Optional camera position hint.
        camera_target: Optional camera look-at hint.
    """
    bodies: list[Body] = field(default_factory=list)
    integrator: IntegratorKind = "rk4"
    time_step: float = DEFAULT_TIME_STEP
    camera_position: Vector3 | None = None
    camera_target: Vector3 | None = None

    def __post_init__(self) -> None:
        if self.camera_position is not None:
            self.camera_position = _vector(self.camera_position, "camera_position")
        if self.camera_target is not None:
            self.camera_target = _vector(self.camera_target, "camera_target")


# =============================================================================
# Body creation helpers
# =============================================================================

def imported_radius(mass: float) -> float:
    """Radius heuristic for decoded bodies, floored at a visible size."""
    return max(0.2, mass * 0.1)


def injected_radius(mass: float) -> float:
    """Radius heuristic for manually injected bodies, clamped to [0.1, 0.5]."""
    return max(0.1, min(0.5, mass * 0.1))


_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def new_body_id(prefix: str = "manual", rng: np.random.Generator | None = None) -> str:
    """Synthesize an id of the form '<prefix>-<9 base-36 chars>'."""
    rng = rng or np.random.default_rng()
    suffix = "".join(_ID_ALPHABET[i] for i in rng.integers(0, len(_ID_ALPHABET), size=9))
    return f"{prefix}-{suffix}"


def make_body(
    mass: float,
    position: tuple[float, float, float] | np.ndarray = (0.0, 0.0, 0.0),
    velocity: tuple[float, float, float] | np.ndarray = (0.0, 0.0, 0.0),
    color: str = "#3b82f6",
    id: str | None = None,
    rng: np.random.Generator | None = None,
) -> Body:
    """
    Build a fully formed body for injection into a running simulation.

    Args:
        mass: Body mass.
        position: Initial position.
        velocity: Initial velocity.
        color: Presentation color.
        id: Explicit id; a random 'manual-…' id is generated when omitted.
        rng: Generator used for the id suffix.
    """
    return Body(
        id=id if id is not None else new_body_id("manual", rng),
        mass=mass,
        position=position,
        velocity=velocity,
        radius=injected_radius(float(mass)),
        color=color,
    )
