from nbody_sim.simulation import Simulation
from nbody_sim.io import decode, encode

sim = Simulation.from_preset("Lagrange", spread=3.0)
sim.integrator = "verlet"
sim.run(120, 1/60)

link = sim.share_link("https://example.org/")
print("link:", link)

config = decode(link)
print("bodies:", [b.id for b in config.bodies], "integrator:", config.integrator, "dt:", config.time_step)

# a loaded link continues exactly where the sender stopped
other = Simulation.from_config(config)
print("same start:", encode(other.to_config()) == encode(sim.to_config()))
