# MIT License (see LICENSE)
"""
Read-only frame consumers.

A renderer receives the snapshot Simulation.advance() returns and turns it
into output of some kind: text, a recorded history, or nothing at all. It
may read every presentation attribute of a body (position, velocity,
force, color, radius) but never writes back into the simulation; the
snapshot bodies are copies, so nothing a renderer does can leak into the
next step.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, TextIO
import sys

from ..types import Body

if TYPE_CHECKING:
    from ..simulation import Simulation


class RendererAdapter(ABC):
    """
    Frame protocol shared by all renderers.

    A frame is begin_frame(time), one draw_body() per body in snapshot
    order, then end_frame(). render_bodies() and render_simulation() drive
    that sequence:

        snapshot = sim.advance(1 / 60)
        renderer.render_bodies(snapshot, sim.time)
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        """Start a frame at simulation time `time`."""

    @abstractmethod
    def draw_body(self, body: Body) -> None:
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_bodies(self, bodies: list[Body], time: float) -> None:
        self.begin_frame(time)
        for body in bodies:
            self.draw_body(body)
        self.end_frame()

    def render_simulation(self, sim: "Simulation") -> None:
        """Take a snapshot of `sim` and render it."""
        self.render_bodies(sim.snapshot(), sim.time)


def _triple(v) -> str:
    x, y, z = v
    return f"({x:.2f}, {y:.2f}, {z:.2f})"


class DebugRenderer(RendererAdapter):
    """
    Plain-text frames for terminals and logs.

        === Frame t=0.0167 ===
        [1] m=1.00 @ (3.88, -0.97, 0.00) v=(0.23, 0.22, 0.00) a=(-0.08, 0.02, 0.00)

    Args:
        output: Stream to write to (sys.stdout when None).
        verbose: Append the velocity.
        show_force: Append the last computed acceleration, once a body has one.
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True, show_force: bool = False):
        self.output = output if output is not None else sys.stdout
        self.verbose = verbose
        self.show_force = show_force

    def begin_frame(self, time: float) -> None:
        print(f"=== Frame t={time:.4f} ===", file=self.output)

    def draw_body(self, body: Body) -> None:
        parts = [f"[{body.id}] m={body.mass:.2f} @ {_triple(body.position)}"]
        if self.verbose:
            parts.append(f"v={_triple(body.velocity)}")
        if self.show_force and body.force is not None:
            parts.append(f"a={_triple(body.force)}")
        print(" ".join(parts), file=self.output)

    def end_frame(self) -> None:
        print(file=self.output)
        self.output.flush()


class NullRenderer(RendererAdapter):
    """Discards every frame. Used to time the loop without output cost."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_body(self, body: Body) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Keeps rendered frames in memory as plain dicts.

    Each frame is {"time": t, "bodies": [{"id", "position", "velocity",
    "force", "color", "radius"}, ...]} with lists instead of arrays, ready
    for JSON or plotting. `max_frames` bounds the history, dropping the
    oldest frames first; trail() reads a body's path back out of it.
    """

    def __init__(self, max_frames: int | None = None) -> None:
        self.frames: deque[dict] = deque(maxlen=max_frames)
        self._pending: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._pending = {"time": time, "bodies": []}

    def draw_body(self, body: Body) -> None:
        if self._pending is None:
            return
        self._pending["bodies"].append({
            "id": body.id,
            "position": body.position.tolist(),
            "velocity": body.velocity.tolist(),
            "force": body.force.tolist() if body.force is not None else None,
            "color": body.color,
            "radius": body.radius,
        })

    def end_frame(self) -> None:
        if self._pending is None:
            return
        self.frames.append(self._pending)
        self._pending = None

    def trail(self, body_id: str) -> list[list[float]]:
        """Positions of `body_id` across the buffered frames, oldest first."""
        points = []
        for frame in self.frames:
            for entry in frame["bodies"]:
                if entry["id"] == body_id:
                    points.append(entry["position"])
        return points

    def clear(self) -> None:
        self.frames.clear()
