from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .constants import BYTES_PER_SAMPLE, FIELDS_PER_CELL, FLOPS_PER_CELL
from .grid import Grid


def compute_stats(grid: Grid) -> Tuple[float, float]:
    """Return ``(max, l2norm)`` over the interior of ``grid``.

    ``l2norm`` is the root-mean-square ``sqrt(sum(E²) / (M*N))``; ghost cells
    are excluded. The reduction always runs on the host.

    Parameters
    ----------
    grid : Grid
        Host grid, typically the final previous-excitation field.

    Returns
    -------
    tuple[float, float]
        Maximum interior sample and its L2 norm normalised by cell count.
    """
    interior = grid.interior
    mx = float(np.max(interior))
    l2 = math.sqrt(float(np.sum(interior * interior)) / (grid.rows * grid.cols))
    return mx, l2


@dataclass(frozen=True)
class PerformanceReport:
    """Advisory throughput estimates for a finished run."""

    niter: int
    elapsed_s: float
    cells: int

    @property
    def gflops(self) -> float:
        if self.elapsed_s <= 0:
            return 0.0
        return self.niter * 1e-9 * self.cells * FLOPS_PER_CELL / self.elapsed_s

    @property
    def bandwidth_gbs(self) -> float:
        if self.elapsed_s <= 0:
            return 0.0
        return (
            self.niter * 1e-9 * self.cells * FIELDS_PER_CELL * BYTES_PER_SAMPLE
            / self.elapsed_s
        )
