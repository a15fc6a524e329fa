# MIT License (see LICENSE)
"""
The simulation driver and frame loop.

The Simulation class owns the live body set and advances it once per
rendered frame. It manages:
- The body list and how it is replaced (preset, decoded configuration,
  reset) or extended (body injection).
- Driver parameters (integrator, speed multiplier, pause, sub-steps).
- Optional wormhole perturbation sources.
- The frame loop (advance), which for every sub-step:
    1. Applies perturbation kicks and teleports (if any sources exist).
    2. Integrates one step (RK4 or Verlet).
  and then hands a snapshot to the metrics callback.

Structure:
    - User creates a Simulation (from_preset / from_config).
    - User calls sim.advance(frame_delta) once per frame.
    - Renderers and telemetry read the returned snapshot; they never write
      simulation state.

Bodies are only added or replaced between advance() calls. step() assumes
a fixed-length, fixed-identity body list for its whole duration.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Callable

import numpy as np

from .constants import DEFAULT_SPREAD, SUBSTEPS_PER_FRAME, TIME_STEP_PER_SPEED
from .core.integrators import step
from .core.perturbations import Wormhole, apply_perturbations, spawn_wormhole_pair
from .io.query_codec import encode
from .presets import DEFAULT_PRESET, generate, resolve_preset
from .profiler import Profiler
from .types import INTEGRATOR_KINDS, Body, SystemConfig

logger = logging.getLogger(__name__)

FrameCallback = Callable[[list[Body]], None]


@dataclass
class Simulation:
    """
    Frame-driven n-body simulation.

    Attributes:
        bodies: Live body set, exclusively owned by the simulation.
        integrator: Integration scheme ("rk4" or "verlet").
        speed: Simulated seconds per real second. Each frame advances
               frame_delta * speed, split into `substeps` equal steps.
        paused: When True, advance() performs no sub-steps.
        substeps: Integration sub-steps per frame. Default: 4.
        wormholes: Active perturbation sources.
        spread: Scale used for preset generation and wormhole placement.
        on_frame: Metrics sink called with a snapshot after every frame.
        profiler: Optional Profiler instance for timing statistics.
        rng: Generator for randomized presets and wormhole teleports.
        camera_position: Camera hint carried by a loaded configuration.
        camera_target: Camera look-at hint carried by a loaded configuration.
    """
    bodies: list[Body] = field(default_factory=list)
    integrator: str = "rk4"
    speed: float = 1.0
    paused: bool = False
    substeps: int = SUBSTEPS_PER_FRAME
    wormholes: list[Wormhole] = field(default_factory=list)
    spread: float = DEFAULT_SPREAD
    on_frame: FrameCallback | None = None
    profiler: Profiler | None = None
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    camera_position: np.ndarray | None = None
    camera_target: np.ndarray | None = None

    # Internal state
    time: float = 0.0
    frame: int = 0

    def __post_init__(self) -> None:
        """Validate driver parameters and remember the initial state for reset()."""
        if self.integrator not in INTEGRATOR_KINDS:
            raise ValueError(f"Unknown integrator: {self.integrator}")
        if self.substeps < 1:
            raise ValueError(f"substeps must be >= 1, got {self.substeps}")
        initial = [b.copy() for b in self.bodies]
        self._initial: Callable[[], list[Body]] = lambda: [b.copy() for b in initial]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_preset(cls, name: str = DEFAULT_PRESET, spread: float = DEFAULT_SPREAD, **kwargs) -> "Simulation":
        """Create a simulation running a named preset."""
        sim = cls(spread=spread, **kwargs)
        sim.load_preset(name, spread)
        return sim

    @classmethod
    def from_config(cls, config: SystemConfig, **kwargs) -> "Simulation":
        """Create a simulation from a decoded or generated configuration."""
        sim = cls(**kwargs)
        sim.load_config(config)
        return sim

    # -------------------------------------------------------------------------
    # Body set mutation (between frames only)
    # -------------------------------------------------------------------------

    def load_preset(self, name: str, spread: float | None = None) -> None:
        """Replace the body set with a freshly generated preset."""
        if spread is not None:
            self.spread = float(spread)
        spread = self.spread
        name = resolve_preset(name)
        self._initial = lambda: generate(name, spread, self.rng)
        self._replace(self._initial())
        logger.info("loaded preset %r (spread=%.2f, %d bodies)", name, spread, len(self.bodies))

    def load_config(self, config: SystemConfig) -> None:
        """
        Make a configuration the new authoritative state.

        Replaces (never merges with) the current bodies and adopts the
        configuration's integrator, time step and camera hints.
        """
        if config.integrator not in INTEGRATOR_KINDS:
            raise ValueError(f"Unknown integrator: {config.integrator}")
        initial = [b.copy() for b in config.bodies]
        self._initial = lambda: [b.copy() for b in initial]
        self.integrator = config.integrator
        self.speed = config.time_step / TIME_STEP_PER_SPEED
        self.camera_position = None if config.camera_position is None else config.camera_position.copy()
        self.camera_target = None if config.camera_target is None else config.camera_target.copy()
        self._replace(self._initial())
        logger.info("loaded configuration (%d bodies, %s, dt=%g)",
                    len(self.bodies), self.integrator, config.time_step)

    def reset(self) -> None:
        """Regenerate the last loaded preset or configuration."""
        self._replace(self._initial())
        logger.info("simulation reset (%d bodies)", len(self.bodies))

    def _replace(self, bodies: list[Body]) -> None:
        self.bodies = bodies
        self.time = 0.0
        self.frame = 0

    def add_body(self, body: Body) -> None:
        """
        Inject a fully formed body into the live set.

        Args:
            body: Body with its own unique id.

        Raises:
            ValueError: If a body with the same id is already present.
        """
        if any(b.id == body.id for b in self.bodies):
            raise ValueError(f"Duplicate body id: {body.id!r}")
        self.bodies.append(body.copy())
        logger.debug("injected body %s (mass=%g)", body.id, body.mass)

    def spawn_wormholes(self) -> list[Wormhole]:
        """Add a linked wormhole pair scaled to the current spread."""
        pair = spawn_wormhole_pair(self.spread)
        self.wormholes.extend(pair)
        logger.debug("spawned wormhole pair at ±%.2f", abs(pair[0].position[0]))
        return pair

    def clear_wormholes(self) -> None:
        self.wormholes.clear()

    # -------------------------------------------------------------------------
    # Frame loop
    # -------------------------------------------------------------------------

    @property
    def time_step(self) -> float:
        """Configuration time step equivalent to the current speed."""
        return self.speed * TIME_STEP_PER_SPEED

    def _substep(self, h: float) -> None:
        prof = self.profiler
        bodies = self.bodies

        if self.wormholes:
            if prof:
                with prof.section("perturb"):
                    bodies = apply_perturbations(bodies, self.wormholes, h, self.rng)
            else:
                bodies = apply_perturbations(bodies, self.wormholes, h, self.rng)

        if prof:
            with prof.section("integrate"):
                bodies = step(bodies, h, self.integrator)
        else:
            bodies = step(bodies, h, self.integrator)

        self.bodies = bodies

    def advance(self, frame_delta: float) -> list[Body]:
        """
        Advance the simulation by one rendered frame.

        Architecture:
        1. Return immediately with a snapshot when paused (zero-duration frame).
        2. Split frame_delta * speed into `substeps` equal sub-steps.
        3. Notify the metrics sink with the post-frame snapshot.

        Args:
            frame_delta: Real time elapsed since the previous frame.

        Returns:
            Snapshot of the bodies after the frame.
        """
        if self.paused:
            return self.snapshot()

        h = (frame_delta * self.speed) / self.substeps
        if h != 0.0:
            for _ in range(self.substeps):
                self._substep(h)
            self.time += frame_delta * self.speed
        self.frame += 1

        snapshot = self.snapshot()
        if self.on_frame is not None:
            self.on_frame(snapshot)
        return snapshot

    def run(self, frames: int, frame_delta: float) -> list[Body]:
        """Advance `frames` frames of equal duration and return the final snapshot."""
        snapshot = self.snapshot()
        for _ in range(frames):
            snapshot = self.advance(frame_delta)
        return snapshot

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def snapshot(self) -> list[Body]:
        """Independent copies of the current bodies."""
        return [b.copy() for b in self.bodies]

    def to_config(self) -> SystemConfig:
        """Capture the current state as a configuration."""
        return SystemConfig(
            bodies=self.snapshot(),
            integrator=self.integrator,
            time_step=self.time_step,
            camera_position=self.camera_position,
            camera_target=self.camera_target,
        )

    def share_link(self, base_url: str | None = None) -> str:
        """Encode the current state as query text (or a full link)."""
        return encode(self.to_config(), base_url=base_url)
