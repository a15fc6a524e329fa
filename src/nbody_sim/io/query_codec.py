# MIT License (see LICENSE)
"""
Query-string encoding of a system configuration (shareable links).

A configuration travels as flat key/value pairs so that it fits in a URL:

Format Overview:
----------------
  n   body count                      required  integer
  m   masses                          required  comma list, length n
  p   positions, row-major per body   required  comma list, length 3n
  v   velocities                      required  comma list, length 3n
  im  integrator                      optional  "verlet", anything else → rk4
  dt  time step                       optional  real, default 0.01
  cp  camera position                 optional  exactly 3 values
  ct  camera target                   optional  exactly 3 values

Example:
  n=2&m=1,1&p=-1,0,0,1,0,0&v=0,-0.5,0,0,0.5,0&im=verlet&dt=0.005

Parsing is lenient inside the numeric lists: a missing or unparsable mass
becomes 1 and a missing or unparsable coordinate becomes 0, so a
truncated link still loads. Only a missing required key or a body count
above MAX_BODIES rejects the text.
Ids, colors and radii are not carried; they are synthesized on decode.
"""
from __future__ import annotations
import logging
import math
import re
from urllib.parse import parse_qs, urlencode

import numpy as np

from ..constants import DEFAULT_TIME_STEP, MAX_BODIES
from ..types import Body, SystemConfig, imported_radius

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("n", "m", "p", "v")

IMPORT_COLORS = ("#FF4500", "#32CD32", "#1E90FF", "#FFD700", "#FF69B4", "#00FFFF")

# Leading numeric prefix, the way a lenient float/int reader sees it.
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_number(token: str) -> float:
    """
    Parse the leading numeric prefix of a token ("1.5abc" → 1.5).

    Returns NaN when no number is present.
    """
    match = _FLOAT_PREFIX.match(token)
    if match is None:
        return math.nan
    return float(match.group(1))


def parse_list(text: str | None) -> list[float]:
    """Split a comma list into numbers (NaN for unparsable entries)."""
    if text is None:
        return []
    return [parse_number(t) for t in text.split(",")]


def _component(values: list[float], index: int, default: float) -> float:
    """Entry `index` of values, or default when missing, NaN or zero."""
    if index >= len(values):
        return default
    x = values[index]
    if not math.isfinite(x) or x == 0:
        return default
    return x


def _parse_count(text: str) -> int | None:
    """Body count from `n`; None when it exceeds MAX_BODIES."""
    if text == "":
        return 3
    match = _INT_PREFIX.match(text)
    if match is None:
        return 0
    digits = match.group(1).lstrip("+")
    if digits.startswith("-"):
        return 0
    # Long digit strings are rejected before int() sees them.
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(MAX_BODIES)):
        return None
    n = int(digits)
    return n if n <= MAX_BODIES else None


def _parse_triple(text: str | None) -> np.ndarray | None:
    if text is None:
        return None
    values = parse_list(text)
    if len(values) != 3 or not all(math.isfinite(x) for x in values):
        return None
    return np.array(values, dtype=np.float64)


def _query_part(text: str) -> str:
    """Strip everything up to the first '?' so full URLs are accepted."""
    text = text.strip()
    if "?" in text:
        text = text.split("?", 1)[1]
    return text.split("#", 1)[0]


def decode(text: str) -> SystemConfig | None:
    """
    Decode a configuration from query-string text.

    Args:
        text: Query string, with or without a leading '?', or a full URL.

    Returns:
        The decoded SystemConfig, or None when a required key (n, m, p, v)
        is absent or n exceeds MAX_BODIES. None means "invalid input";
        callers fall back to a default preset.
    """
    params = {k: vals[0] for k, vals in parse_qs(_query_part(text), keep_blank_values=True).items()}

    missing = [k for k in REQUIRED_KEYS if k not in params]
    if missing:
        logger.info("rejecting configuration: missing %s", ", ".join(missing))
        return None

    n = _parse_count(params["n"])
    if n is None:
        logger.info("rejecting configuration: body count exceeds %d", MAX_BODIES)
        return None
    masses = parse_list(params["m"])
    positions = parse_list(params["p"])
    velocities = parse_list(params["v"])

    integrator = "verlet" if params.get("im") == "verlet" else "rk4"

    dt = parse_number(params["dt"]) if params.get("dt") else DEFAULT_TIME_STEP
    if not math.isfinite(dt) or dt <= 0:
        dt = DEFAULT_TIME_STEP

    bodies = []
    for i in range(n):
        mass = _component(masses, i, 1.0)
        bodies.append(Body(
            id=f"imported-{i}",
            mass=mass,
            position=[_component(positions, 3 * i + k, 0.0) for k in range(3)],
            velocity=[_component(velocities, 3 * i + k, 0.0) for k in range(3)],
            radius=imported_radius(mass),
            color=IMPORT_COLORS[i % len(IMPORT_COLORS)],
        ))

    return SystemConfig(
        bodies=bodies,
        integrator=integrator,
        time_step=dt,
        camera_position=_parse_triple(params.get("cp")),
        camera_target=_parse_triple(params.get("ct")),
    )


def format_number(x: float) -> str:
    """Shortest text that reads back to the same float ('1', '-0.25', '1e-05')."""
    x = float(x)
    if x.is_integer() and abs(x) < 1e15:
        return str(int(x))
    return repr(x)


def _join(values) -> str:
    return ",".join(format_number(x) for x in values)


def encode(config: SystemConfig, base_url: str | None = None) -> str:
    """
    Encode a configuration as query-string text.

    Args:
        config: Configuration to encode.
        base_url: When given, the result is a full link 'base_url?query'.

    Returns:
        The query string (without a leading '?') or the full link.
    """
    bodies = config.bodies
    params = {
        "n": str(len(bodies)),
        "m": _join(b.mass for b in bodies),
        "p": _join(x for b in bodies for x in b.position),
        "v": _join(x for b in bodies for x in b.velocity),
        "im": config.integrator,
        "dt": format_number(config.time_step),
    }
    if config.camera_position is not None:
        params["cp"] = _join(config.camera_position)
    if config.camera_target is not None:
        params["ct"] = _join(config.camera_target)

    query = urlencode(params, safe=",")
    if base_url is None:
        return query
    return f"{base_url.rstrip('?')}?{query}"
