# MIT License (see LICENSE)
"""
Wall-clock timing of the frame loop phases.

Simulation.advance() times each sub-step under two section names when a
Profiler is attached:

    perturb     wormhole kicks and teleports (only while wormholes exist)
    integrate   one RK4 or Verlet step of the whole body set

Example:
    profiler = Profiler()
    sim = Simulation.from_preset("Figure 8", profiler=profiler)
    sim.run(60, 1 / 60)
    print(profiler.report())
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
import time
from typing import Iterator


@dataclass
class ProfileStats:
    """Raw per-section samples, in seconds, in recording order."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, seconds: float) -> None:
        self.samples.setdefault(name, []).append(seconds)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            {name: {"n", "mean_ms", "max_ms", "total_ms"}} for every section
            that has at least one sample.
        """
        result = {}
        for name, seconds in self.samples.items():
            total = sum(seconds)
            result[name] = {
                "n": len(seconds),
                "mean_ms": 1e3 * total / len(seconds),
                "max_ms": 1e3 * max(seconds),
                "total_ms": 1e3 * total,
            }
        return result

    def clear(self) -> None:
        self.samples.clear()


class Profiler:
    """
    Collects section timings into a ProfileStats.

    Usage:
        with profiler.section("integrate"):
            bodies = step(bodies, dt, "verlet")
    """

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the enclosed block under `name`, also when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - start)

    def report(self) -> str:
        """One line per section, slowest total first."""
        rows = sorted(self.stats.summary().items(), key=lambda kv: kv[1]["total_ms"], reverse=True)
        return "\n".join(
            f"{name:<10} n={s['n']:<6} mean={s['mean_ms']:.3f} ms  max={s['max_ms']:.3f} ms  "
            f"total={s['total_ms']:.1f} ms"
            for name, s in rows
        )

    def reset(self) -> None:
        self.stats.clear()
