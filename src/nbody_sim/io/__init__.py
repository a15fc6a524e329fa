# MIT License (see LICENSE)
"""
Input/Output utilities for the n-body simulation.

This subpackage provides:
    - Query-string codec: Encode a system configuration into a shareable
      link and decode it back.
    - Round-trip support: Masses, positions, velocities, integrator and time
      step survive encode → decode unchanged.

Typical usage:
    from nbody_sim.io import decode, encode

    config = decode("n=1&m=5&p=0,0,0&v=0,0,0")
    if config is None:
        ...  # invalid text, fall back to a preset
    link = encode(config, base_url="https://example.org/")
"""
from .query_codec import (
    IMPORT_COLORS,
    decode,
    encode,
    parse_number,
)

__all__ = [
    # Decoding
    "decode",
    "parse_number",
    # Encoding
    "encode",
    # Palette of decoded bodies
    "IMPORT_COLORS",
]
