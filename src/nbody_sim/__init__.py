# MIT License (see LICENSE)
"""
nbody_sim - Gravitational n-body simulation with shareable configurations.

This package simulates a small number of point masses under mutual,
softened Newtonian gravity and drives them frame by frame for an
interactive viewer.

Main entry points:
    - Simulation: The frame-driven driver owning the live body set.
    - Body: A point mass with kinematic state and presentation attributes.
    - SystemConfig: A complete, shareable initial condition.
    - generate: Named preset generators (Figure 8, Lagrange, ...).
    - decode / encode: Query-string codec for shareable links.

Submodules:
    - core: Force model, integrators, invariants, wormhole perturbations.
    - io: Query-string encoding/decoding of configurations.
    - monitor: Per-frame telemetry sink.
    - renderer: Optional read-only visualization adapters.

Example:
    from nbody_sim import Simulation

    sim = Simulation.from_preset("Figure 8", spread=4.0)
    for _ in range(600):
        snapshot = sim.advance(1 / 60)
"""
from .simulation import Simulation
from .types import Body, SystemConfig, make_body
from .presets import PRESET_NAMES, generate
from .io import decode, encode

__all__ = [
    # Simulation
    "Simulation",
    # Data model
    "Body",
    "SystemConfig",
    "make_body",
    # Presets
    "PRESET_NAMES",
    "generate",
    # Configuration codec
    "decode",
    "encode",
]
