# MIT License (see LICENSE)
"""
Conserved quantities of a body set: energy, momentum, center of mass.

Used for verifying simulation correctness and for telemetry. In a closed
system without perturbation sources, total energy, linear momentum and
angular momentum should remain constant (within integration error).

The potential energy uses the same softening as the force law, so it is
the exact potential of the forces the integrators apply:
    U = -Σ_{i<j} G m_i m_j / sqrt(|r_ij|² + ε²)
"""
from __future__ import annotations
import numpy as np

from ..constants import G, SOFTENING
from ..types import Body


def kinetic_energy(bodies: list[Body]) -> float:
    """
    Total kinetic energy of the body set.

    T = Σ 0.5 * m * v²
    """
    ke = 0.0
    for b in bodies:
        ke += 0.5 * b.mass * float(np.dot(b.velocity, b.velocity))
    return ke


def potential_energy(bodies: list[Body], g: float = G, eps: float = SOFTENING) -> float:
    """
    Calculate the softened gravitational potential energy of the system.

    Args:
        bodies: List of bodies.
        g: Gravitational constant.
        eps: Softening length (must match the force law to be conserved).
    """
    pe = 0.0
    n = len(bodies)
    eps2 = eps * eps
    for i in range(n):
        bi = bodies[i]
        for j in range(i + 1, n):
            bj = bodies[j]
            r = bj.position - bi.position
            pe -= g * bi.mass * bj.mass / np.sqrt(float(np.dot(r, r)) + eps2)
    return float(pe)


def total_energy(bodies: list[Body], g: float = G, eps: float = SOFTENING) -> float:
    """Kinetic plus softened potential energy."""
    return kinetic_energy(bodies) + potential_energy(bodies, g=g, eps=eps)


def linear_momentum(bodies: list[Body]) -> np.ndarray:
    """
    Total linear momentum of the body set.

    P = Σ (m * v)
    """
    p = np.zeros(3, dtype=np.float64)
    for b in bodies:
        p += b.mass * b.velocity
    return p


def angular_momentum(bodies: list[Body]) -> np.ndarray:
    """
    Calculate the total angular momentum about the origin.

    L = Σ m (x × v)
    """
    L = np.zeros(3, dtype=np.float64)
    for b in bodies:
        L += b.mass * np.cross(b.position, b.velocity)
    return L


def center_of_mass(bodies: list[Body]) -> np.ndarray:
    """Mass-weighted mean position. Returns the origin for an empty or massless set."""
    total = sum(b.mass for b in bodies)
    if total == 0:
        return np.zeros(3, dtype=np.float64)
    c = np.zeros(3, dtype=np.float64)
    for b in bodies:
        c += b.mass * b.position
    return c / total
