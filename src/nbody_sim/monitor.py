# MIT License (see LICENSE)
"""
Per-frame telemetry for a running simulation.

SystemMonitor is a metrics sink: pass it as Simulation.on_frame and it
receives a snapshot after every frame. For each body it reports speed,
distance to the nearest neighbour and a coarse stability status:

    nearest neighbour < 0.6     CHAOTIC       (close encounter in progress)
    nearest neighbour < 1.5     TRANSITIONAL
    otherwise                   STABLE

The thresholds are display heuristics for unit-scale masses, not a
dynamical stability criterion. System-wide energy and momentum are
recorded as well, which makes integrator drift visible at a glance.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from enum import Enum
import math

import numpy as np

from .constants import CHAOTIC_DISTANCE, TRANSITIONAL_DISTANCE
from .core.invariants import linear_momentum, total_energy
from .types import Body
from .util import norm, sub


class Stability(str, Enum):
    CHAOTIC = "CHAOTIC ERA"
    TRANSITIONAL = "TRANSITIONAL"
    STABLE = "STABLE ERA"


def nearest_distance(body: Body, others: list[Body]) -> float:
    """Distance to the closest other body (inf when there are none)."""
    d = math.inf
    for other in others:
        d = min(d, norm(sub(body.position, other.position)))
    return d


def stability_status(body: Body, others: list[Body]) -> Stability:
    """Classify a body by its distance to the nearest other body."""
    d = nearest_distance(body, others)
    if d < CHAOTIC_DISTANCE:
        return Stability.CHAOTIC
    if d < TRANSITIONAL_DISTANCE:
        return Stability.TRANSITIONAL
    return Stability.STABLE


@dataclass(frozen=True)
class BodyReport:
    id: str
    mass: float
    speed: float
    min_distance: float
    status: Stability


@dataclass(frozen=True)
class FrameReport:
    frame: int
    bodies: tuple[BodyReport, ...]
    energy: float
    momentum: np.ndarray

    def status_of(self, body_id: str) -> Stability | None:
        for r in self.bodies:
            if r.id == body_id:
                return r.status
        return None


def report_bodies(bodies: list[Body]) -> tuple[BodyReport, ...]:
    reports = []
    for body in bodies:
        others = [b for b in bodies if b.id != body.id]
        d = nearest_distance(body, others)
        reports.append(BodyReport(
            id=body.id,
            mass=body.mass,
            speed=body.speed,
            min_distance=d,
            status=stability_status(body, others),
        ))
    return tuple(reports)


class SystemMonitor:
    """
    Metrics sink recording a FrameReport per frame.

    Usage:
        monitor = SystemMonitor()
        sim = Simulation.from_preset("Pythagorean", on_frame=monitor)
        sim.run(600, 1 / 60)
        print(monitor.latest.bodies, monitor.energy_drift())
    """

    def __init__(self, history: int = 1000) -> None:
        self.history: deque[FrameReport] = deque(maxlen=history)
        self.latest: FrameReport | None = None
        self._initial_energy: float | None = None
        self._frames = 0

    def __call__(self, bodies: list[Body]) -> None:
        report = FrameReport(
            frame=self._frames,
            bodies=report_bodies(bodies),
            energy=total_energy(bodies),
            momentum=linear_momentum(bodies),
        )
        if self._initial_energy is None:
            self._initial_energy = report.energy
        self._frames += 1
        self.latest = report
        self.history.append(report)

    def energy_drift(self) -> float:
        """
        Relative energy change between the first and the latest frame.

        Returns 0 before any frame has been recorded.
        """
        if self.latest is None or self._initial_energy is None:
            return 0.0
        e0 = self._initial_energy
        return abs(self.latest.energy - e0) / max(1e-12, abs(e0))

    def reset(self) -> None:
        """Forget all recorded frames (call after the simulation is reset)."""
        self.history.clear()
        self.latest = None
        self._initial_energy = None
        self._frames = 0
