# MIT License (see LICENSE)
"""
Core physics simulation components.

This subpackage provides:
    - Force model: Softened pairwise Newtonian gravity.
    - Integrators: RK4 and velocity Verlet over the whole body set.
    - Invariants: Energy, momentum and center-of-mass diagnostics.
    - Perturbations: Wormhole impulse sources and teleport transitions.

Typical usage:
    from nbody_sim.core import step, apply_perturbations

    bodies = apply_perturbations(bodies, wormholes, dt)
    bodies = step(bodies, dt, "verlet")
"""
from .forces import accelerations, pairwise_accelerations
from .integrators import INTEGRATORS, rk4_step, step, verlet_step
from .invariants import (
    angular_momentum,
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    potential_energy,
    total_energy,
)
from .perturbations import Wormhole, apply_perturbations, spawn_wormhole_pair

__all__ = [
    # Forces
    "accelerations",
    "pairwise_accelerations",
    # Integrators
    "INTEGRATORS",
    "rk4_step",
    "verlet_step",
    "step",
    # Invariants
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "linear_momentum",
    "angular_momentum",
    "center_of_mass",
    # Perturbations
    "Wormhole",
    "apply_perturbations",
    "spawn_wormhole_pair",
]
