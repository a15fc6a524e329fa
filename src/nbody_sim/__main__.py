# MIT License (see LICENSE)
"""
Headless command-line driver.

Runs a preset or a shared configuration for a fixed number of frames and
prints the bodies through DebugRenderer, followed by a monitor summary.

Run:
  python -m nbody_sim --preset "Pythagorean" --frames 600 --print-every 120
  python -m nbody_sim --config "n=1&m=5&p=0,0,0&v=0,0,0" --share https://example.org/
"""
from __future__ import annotations
import argparse
import logging
import os
import sys

import numpy as np

from .constants import DEFAULT_SPREAD
from .io import decode
from .monitor import SystemMonitor
from .presets import DEFAULT_PRESET, PRESET_NAMES
from .profiler import Profiler
from .renderer import DebugRenderer
from .simulation import Simulation
from .types import INTEGRATOR_KINDS

logger = logging.getLogger("nbody_sim")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_log_level() -> str:
    level = os.environ.get("NBODY_SIM_LOG_LEVEL", "WARNING").upper()
    return level if level in LOG_LEVELS else "WARNING"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbody-sim",
        description="Run a gravitational n-body simulation headlessly.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", choices=PRESET_NAMES, default=DEFAULT_PRESET,
                        help="initial condition preset (default: %(default)s)")
    source.add_argument("--config", metavar="TEXT",
                        help="shared configuration (query string or full link)")
    parser.add_argument("--integrator", choices=INTEGRATOR_KINDS,
                        help="override the integrator")
    parser.add_argument("--spread", type=float, default=DEFAULT_SPREAD,
                        help="preset scale (default: %(default)s)")
    parser.add_argument("--speed", type=float,
                        help="simulated time per real second (default: 1, or dt*100 of a config)")
    parser.add_argument("--frames", type=int, default=600, help="frames to run (default: %(default)s)")
    parser.add_argument("--fps", type=float, default=60.0, help="frame rate (default: %(default)s)")
    parser.add_argument("--wormholes", action="store_true", help="spawn a linked wormhole pair")
    parser.add_argument("--seed", type=int, help="seed for randomized presets and wormholes")
    parser.add_argument("--print-every", type=int, default=0, metavar="K",
                        help="print bodies every K frames (0: only the last frame)")
    parser.add_argument("--profile", action="store_true", help="print frame loop timings")
    parser.add_argument("--share", metavar="BASE_URL",
                        help="print a shareable link for the final state")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=_default_log_level(),
                        help="logging level (default: $NBODY_SIM_LOG_LEVEL or WARNING)")
    return parser


def make_simulation(args: argparse.Namespace) -> Simulation:
    rng = np.random.default_rng(args.seed)
    sim = None
    if args.config is not None:
        config = decode(args.config)
        if config is not None:
            sim = Simulation.from_config(config, spread=args.spread, rng=rng)
        else:
            logger.warning("invalid configuration, falling back to %r", DEFAULT_PRESET)
    if sim is None:
        sim = Simulation.from_preset(args.preset, spread=args.spread, rng=rng)

    if args.integrator is not None:
        sim.integrator = args.integrator
    if args.speed is not None:
        sim.speed = args.speed
    if args.wormholes:
        sim.spawn_wormholes()
    return sim


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    monitor = SystemMonitor()
    sim = make_simulation(args)
    sim.on_frame = monitor
    if args.profile:
        sim.profiler = Profiler()
    renderer = DebugRenderer(show_force=True)

    frame_delta = 1.0 / args.fps
    for i in range(1, args.frames + 1):
        snapshot = sim.advance(frame_delta)
        if args.print_every and i % args.print_every == 0:
            renderer.render_bodies(snapshot, sim.time)
    if not args.print_every:
        renderer.render_simulation(sim)

    if monitor.latest is not None:
        for r in monitor.latest.bodies:
            print(f"[{r.id}] {r.status.value:<13} speed={r.speed:.3f} nearest={r.min_distance:.3f}")
        print(f"energy drift: {monitor.energy_drift():.3e}")

    if sim.profiler is not None:
        print(sim.profiler.report())
    if args.share is not None:
        print(sim.share_link(args.share))
    return 0


if __name__ == "__main__":
    sys.exit(main())
