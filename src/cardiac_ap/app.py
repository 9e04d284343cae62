from __future__ import annotations
from typing import Optional

from .config import SimulationConfig
from .solver import AlievPanfilovSolver, RunResult
from .viz import SnapshotSink


class SimulationApp:
    """High-level orchestrator: run the solver and print a summary."""

    def __init__(self, config: SimulationConfig, sink: Optional[SnapshotSink] = None) -> None:
        self.cfg = config
        self.solver = AlievPanfilovSolver(config, sink=sink)

    def settings_lines(self) -> list[str]:
        cfg, p = self.cfg, self.solver.params
        plot = f"every {cfg.plot_freq:g} time units" if cfg.plot_freq > 0 else "off"
        return [
            f"Grid size                   : {cfg.rows} x {cfg.cols}",
            f"Simulated time horizon      : {cfg.t_final:g}",
            f"dt / dx / alpha             : {p.dt:.6g} / {p.dx:.6g} / {p.alpha:.6g}",
            f"Backend / block size        : {cfg.backend} / {cfg.block_size}",
            f"Snapshots                   : {plot}",
        ]

    def summary_lines(self, result: RunResult) -> list[str]:
        perf = result.performance
        return [
            f"Number of Iterations        : {result.niter}",
            f"Elapsed Time (sec)          : {result.elapsed_s:.6f}",
            f"Sustained Gflops Rate       : {perf.gflops:.4f}",
            f"Sustained Bandwidth (GB/sec): {perf.bandwidth_gbs:.4f}",
            f"Max: {result.max_value:.10g} L2norm: {result.l2norm:.10g}",
        ]

    def run(self) -> RunResult:
        for line in self.settings_lines():
            print(line)
        print()
        result = self.solver.run()
        for line in self.summary_lines(result):
            print(line)
        return result
