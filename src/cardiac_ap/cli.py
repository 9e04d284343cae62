from __future__ import annotations
import argparse
import logging
import sys
from typing import Iterable, Optional

import matplotlib

from .app import SimulationApp
from .config import SimulationConfig
from .constants import (
    BACKEND, BACKENDS, BLOCK_SIZE, GRID_SIZE, PLOT_FREQ, SNAPSHOT_DIR, T_FINAL,
)
from .errors import CardiacSimError, ConfigurationError
from .viz import PlotSink


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cardiac-ap",
        description="Simulate Aliev-Panfilov cardiac excitation on a 2-D grid.",
    )
    parser.add_argument("-n", type=int, default=GRID_SIZE, help="interior cells per side")
    parser.add_argument("-t", type=float, default=T_FINAL, help="simulated-time horizon")
    parser.add_argument(
        "-p", "--plot-freq", type=float, default=PLOT_FREQ,
        help="snapshot period in simulated time (0 disables)",
    )
    parser.add_argument(
        "-b", "--block-size", type=int, default=BLOCK_SIZE,
        help="work-group sizing hint for the kernel launch",
    )
    parser.add_argument("--backend", choices=BACKENDS, default=BACKEND)
    parser.add_argument(
        "-o", "--outdir", default=SNAPSHOT_DIR, help="directory for snapshot PNGs"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG"
    )
    return parser.parse_args(argv)


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=_log_level(args.verbose),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        cfg = SimulationConfig(
            t_final=args.t,
            n=args.n,
            plot_freq=args.plot_freq,
            block_size=args.block_size,
            backend=args.backend,
        )
    except ConfigurationError as exc:
        print(f"cardiac-ap: error: {exc}", file=sys.stderr)
        return 2

    sink = None
    if cfg.plot_freq > 0:
        # Batch runs only write files.
        matplotlib.use("Agg")
        sink = PlotSink(args.outdir)
    try:
        SimulationApp(cfg, sink=sink).run()
    except CardiacSimError as exc:
        print(f"cardiac-ap: fatal: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
