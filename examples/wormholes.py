from nbody_sim.simulation import Simulation
from nbody_sim.types import make_body
from nbody_sim.monitor import SystemMonitor
import numpy as np

monitor = SystemMonitor()
sim = Simulation.from_preset("Random Chaos", rng=np.random.default_rng(7), on_frame=monitor)
alpha, omega = sim.spawn_wormholes()
print("ALPHA", alpha.position, "-> OMEGA", omega.position)

# a comet aimed straight at ALPHA
sim.add_body(make_body(0.5, position=alpha.position + (0.0, 3.0, 0.0), velocity=(0.0, -1.5, 0.0), id="comet"))

for _ in range(300):
    sim.advance(1/60)

for r in monitor.latest.bodies:
    print(f"{r.id:>6} {r.status.value:<13} speed={r.speed:.2f} nearest={r.min_distance:.2f}")
