# MIT License (see LICENSE)
"""
Utility functions for 3D vector math.

Provides the small vector toolkit the force model, integrators and
perturbation sources are written against. All functions operate on 3D
vectors represented as numpy arrays of shape (3,).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Coerce a tuple, list or array to a new float64 array.

    Always copies, so a Body never shares an array with the caller's input.
    """
    return np.array(x, dtype=np.float64)


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Build a 3D vector from components."""
    return np.array([x, y, z], dtype=np.float64)


def add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + b


def sub(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a - b


def scale(a: np.ndarray, s: float) -> np.ndarray:
    return a * s


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 3D vector. Avoids sqrt for performance."""
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3D vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Direction of v as a unit vector.

    A vector shorter than eps has no direction; the zero vector is returned.
    """
    n = norm(v)
    if n < eps:
        return np.zeros(3, dtype=np.float64)
    return v / n


def random_unit(rng: np.random.Generator) -> np.ndarray:
    """
    Draw a direction uniformly distributed on the unit sphere.

    Normalizes a standard normal sample; the Gaussian is isotropic so the
    result has no preferred axis.
    """
    while True:
        d = rng.standard_normal(3)
        n = norm(d)
        if n > 1e-9:
            return d / n
