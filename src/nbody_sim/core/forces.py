# MIT License (see LICENSE)
"""
Gravitational force model for n-body simulation.

Computes the net acceleration of every body from all pairwise Newtonian
interactions. See the equation below; G and the softening length come from
constants.py.

    a_i = Σ_{j≠i} G * m_j * r_ij / (|r_ij|² + ε²)^(3/2),   r_ij = x_j - x_i

Key concepts:
- Softening ε bounds the acceleration as two bodies approach coincidence,
  so coincident bodies produce a finite (zero) contribution instead of a
  division by zero.
- Direct summation is O(N²). Body counts are tens, not thousands; a tree
  approximation (Barnes-Hut) would change numerical results.
- Pure functions: inputs are never mutated.
"""
from __future__ import annotations

import numpy as np

from ..constants import G, SOFTENING
from ..types import Body


def pairwise_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    g: float = G,
    eps: float = SOFTENING,
) -> np.ndarray:
    """
    Compute softened gravitational accelerations for all bodies.

    Args:
        positions: Array [N, 3] of body positions.
        masses: Array [N] of body masses.
        g: Gravitational constant.
        eps: Softening length. The effective distance is sqrt(r² + eps²).

    Returns:
        Array [N, 3] of accelerations, same order as the inputs.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    n = positions.shape[0]
    if n == 0:
        return np.zeros((0, 3), dtype=np.float64)

    # r[i, j] = x_j - x_i
    r = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    dist_sq = np.einsum("ijk,ijk->ij", r, r)
    with np.errstate(divide="ignore"):
        inv_r3 = (dist_sq + eps * eps) ** -1.5

    # Exclude self-interaction (the diagonal is inf when eps == 0)
    np.fill_diagonal(inv_r3, 0.0)

    weights = g * masses[np.newaxis, :] * inv_r3
    return np.einsum("ij,ijk->ik", weights, r)


def accelerations(bodies: list[Body], g: float = G, eps: float = SOFTENING) -> np.ndarray:
    """Accelerations [N, 3] for a body list (reads positions and masses only)."""
    if not bodies:
        return np.zeros((0, 3), dtype=np.float64)
    positions = np.array([b.position for b in bodies], dtype=np.float64)
    masses = np.array([b.mass for b in bodies], dtype=np.float64)
    return pairwise_accelerations(positions, masses, g=g, eps=eps)
