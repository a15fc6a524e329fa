"""
Microbenchmark: time per step vs number of bodies.
Run:
  python benchmarks/bench_steps.py
"""
import time
import numpy as np
from nbody_sim.core.integrators import step
from nbody_sim.profiler import Profiler
from nbody_sim.types import Body

def make_bodies(n: int):
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)
    return [
        Body(id=str(i), mass=1.0 + float(rng.random()),
             position=(rng.random(3) - 0.5) * 20.0,
             velocity=(rng.random(3) - 0.5) * 0.5)
        for i in range(n)
    ]

def run(n: int, kind: str, steps: int = 200):
    prof = Profiler()
    bodies = make_bodies(n)

    # warmup
    for _ in range(10):
        bodies = step(bodies, 1/240, kind)

    t0 = time.perf_counter()
    for _ in range(steps):
        with prof.section(kind):
            bodies = step(bodies, 1/240, kind)
    t1 = time.perf_counter()

    per_step = (t1 - t0) / steps
    return per_step, prof.stats.summary()

if __name__ == "__main__":
    for n in [3, 10, 50, 100, 250, 500]:
        for kind in ["rk4", "verlet"]:
            per_step, summary = run(n, kind)
            print(f"N={n:4d}  {kind:<6} step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}"
                  f"  max={summary[kind]['max_ms']:.3f} ms")
        print()
