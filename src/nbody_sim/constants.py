# MIT License (see LICENSE)
"""
Simulation constants shared by the force model, presets and driver.

All values are in dimensionless simulation units with G = 1, which keeps
preset orbits readable (unit masses, distances of a few units).
"""
from __future__ import annotations

# Gravitational constant in simulation units.
G: float = 1.0

# Softening length for the pairwise force law: r² → r² + ε².
# Bounds the acceleration as two bodies approach coincidence.
SOFTENING: float = 0.05

# Integration defaults
DEFAULT_TIME_STEP: float = 0.01
SUBSTEPS_PER_FRAME: int = 4

# A shared configuration's time step maps onto the driver's speed multiplier:
# speed = time_step / TIME_STEP_PER_SPEED (dt=0.01 ↔ speed 1.0).
TIME_STEP_PER_SPEED: float = 0.01

# Preset scale ("spread") used when none is given.
DEFAULT_SPREAD: float = 4.0

# Wormhole perturbation sources.
# Effective coupling of the impulse kick; independent of the n-body G.
WORMHOLE_G: float = 1.0
WORMHOLE_MASS: float = 5.0
# Added (unsquared) to the squared distance in the kick.
WORMHOLE_SOFTENING: float = 0.5
# Event-horizon radius; bodies inside it are teleported.
WORMHOLE_CAPTURE_RADIUS: float = 0.8
# Exit point offset from the paired target, kept outside the capture radius.
WORMHOLE_EXIT_DISTANCE: float = 1.5
# Half-width of the uniform positional jitter at the exit.
WORMHOLE_JITTER: float = 0.1
WORMHOLE_EJECTION_SPEED: float = 2.0
# Wormhole pairs sit at ±WORMHOLE_SPREAD_FACTOR * spread on the x axis.
WORMHOLE_SPREAD_FACTOR: float = 1.5

# System monitor distance thresholds (minimum separation to any other body).
CHAOTIC_DISTANCE: float = 0.6
TRANSITIONAL_DISTANCE: float = 1.5

# Largest body count a decoded configuration may declare.
MAX_BODIES: int = 1000
