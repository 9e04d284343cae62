from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Optional

from .config import SimulationConfig, StepParams, snapshot_due
from .device import DeviceBuffer, domain_for, synchronize, upload_fields
from .errors import ConfigurationError
from .grid import FieldSet, Grid, initialize_fields
from .kernel import get_kernel
from .stats import PerformanceReport, compute_stats
from .viz import SnapshotSink

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    niter: int
    t: float
    elapsed_s: float
    max_value: float
    l2norm: float
    field: Grid
    cells: int

    @property
    def performance(self) -> PerformanceReport:
        return PerformanceReport(self.niter, self.elapsed_s, self.cells)


class AlievPanfilovSolver:
    """Owns the three fields and advances them in simulated time.

    The fields live on the execution domain of the configured backend for the
    whole run; each :meth:`step` launches the kernel over the full interior,
    waits for it to finish, then swaps the current and previous excitation
    handles.

    Parameters
    ----------
    config : SimulationConfig
        Run configuration.
    sink : SnapshotSink, optional
        Receives periodic excitation snapshots when ``config.plot_freq > 0``.
    fields : FieldSet[Grid], optional
        Host initial condition. Defaults to :func:`initialize_fields`.
    """

    def __init__(
        self,
        config: SimulationConfig,
        sink: Optional[SnapshotSink] = None,
        fields: Optional[FieldSet[Grid]] = None,
    ) -> None:
        self.cfg = config
        self.params = StepParams.from_config(config)
        self.sink = sink
        self.domain = domain_for(config.backend)
        self.kernel = get_kernel(config.backend)

        if fields is None:
            fields = initialize_fields(config.rows, config.cols)
        elif fields.e.shape != (config.rows + 2, config.cols + 2):
            raise ConfigurationError(
                f"Initial fields have shape {fields.e.shape}, "
                f"expected {(config.rows + 2, config.cols + 2)}."
            )
        self.fields: FieldSet[DeviceBuffer] = upload_fields(fields, self.domain)

        self.t = 0.0
        self.niter = 0

    @property
    def dt(self) -> float:
        return self.params.dt

    def step(self) -> None:
        """Advance one timestep."""
        self.niter += 1
        self.t = self.niter * self.params.dt
        f = self.fields
        self.kernel(f.e.array, f.e_prev.array, f.r.array, self.params, self.cfg.block_size)
        synchronize(self.domain)
        f.swap()

    def field(self, name: str) -> Grid:
        """Download ``"e"``, ``"e_prev"`` or ``"r"`` to a new host grid."""
        return getattr(self.fields, name).to_grid()

    def _maybe_snapshot(self) -> None:
        if self.sink is None or not snapshot_due(self.t, self.params.dt, self.cfg.plot_freq):
            return
        host = self.field("e_prev")
        logger.debug("Snapshot at t=%.4f niter=%d", self.t, self.niter)
        self.sink.export(host.data, self.t, self.niter, self.cfg.rows, self.cfg.cols)

    def run(self) -> RunResult:
        """Step until the simulated-time horizon is reached."""
        cfg = self.cfg
        logger.info(
            "Running %dx%d grid to t=%g with dt=%.6g on '%s'",
            cfg.rows, cfg.cols, cfg.t_final, self.params.dt, cfg.backend,
        )
        t0 = time.perf_counter()
        while self.t < cfg.t_final:
            self.step()
            self._maybe_snapshot()
        synchronize(self.domain)
        elapsed = time.perf_counter() - t0

        final = self.field("e_prev")
        mx, l2 = compute_stats(final)
        logger.info("Finished %d iterations in %.3f s", self.niter, elapsed)
        return RunResult(
            niter=self.niter,
            t=self.t,
            elapsed_s=elapsed,
            max_value=mx,
            l2norm=l2,
            field=final,
            cells=cfg.cells,
        )
