# examples/figure_eight.py
from nbody_sim.simulation import Simulation
from nbody_sim.monitor import SystemMonitor

monitor = SystemMonitor()
sim = Simulation.from_preset("Figure 8", spread=4.0, on_frame=monitor)

# ten seconds at 60 fps
sim.run(600, 1/60)

print("t:", sim.time)
for b in sim.bodies:
    print(b.id, "pos:", b.position, "vel:", b.velocity)
print("energy drift:", monitor.energy_drift())
print("momentum:", monitor.latest.momentum)
