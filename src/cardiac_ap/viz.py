from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Protocol, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap

from .constants import IMSHOW_INTERPOLATION, SNAPSHOT_DIR

logger = logging.getLogger(__name__)


class SnapshotSink(Protocol):
    """Receives excitation snapshots; must not touch the simulation state."""

    def export(
        self, field: np.ndarray, t: float, niter: int, rows: int, cols: int
    ) -> None:
        ...


def excitation_colormap() -> LinearSegmentedColormap:
    return LinearSegmentedColormap.from_list(
        "blue_white_red",
        [(0.0, "blue"), (0.75, "white"), (1.0, "red")],
    )


class PlotSink:
    """Write each snapshot as a PNG heat map of the interior.

    Parameters
    ----------
    outdir : str or Path, optional
        Target directory, created on first use. Default is ``"snapshots"``.
    dpi : int, optional
        Output resolution. Default is 100.
    """

    def __init__(self, outdir: Union[str, Path] = SNAPSHOT_DIR, dpi: int = 100):
        self.outdir = Path(outdir)
        self.dpi = dpi
        self.written: List[Path] = []

    def export(
        self, field: np.ndarray, t: float, niter: int, rows: int, cols: int
    ) -> None:
        self.outdir.mkdir(parents=True, exist_ok=True)
        fig, ax = plt.subplots(figsize=(6, 6))
        img = ax.imshow(
            field[1:rows + 1, 1:cols + 1],
            cmap=excitation_colormap(),
            interpolation=IMSHOW_INTERPOLATION,
            vmin=0.0,
            vmax=1.0,
        )
        fig.colorbar(img, ax=ax, ticks=[0.0, 0.75, 1.0])
        ax.set_title(f"Excitation t={t:.2f} iter={niter} ({rows}x{cols})")
        ax.set_xticks([])
        ax.set_yticks([])
        fig.tight_layout()
        path = self.outdir / f"snapshot_{niter:06d}.png"
        fig.savefig(path, dpi=self.dpi)
        plt.close(fig)
        self.written.append(path)
        logger.debug("Wrote snapshot %s", path)


class SnapshotRecorder:
    """Keep ``(t, niter, interior)`` for every snapshot in memory."""

    def __init__(self):
        self.records: List[Tuple[float, int, np.ndarray]] = []

    def export(
        self, field: np.ndarray, t: float, niter: int, rows: int, cols: int
    ) -> None:
        self.records.append((t, niter, np.array(field[1:rows + 1, 1:cols + 1])))

    @property
    def times(self) -> List[float]:
        return [rec[0] for rec in self.records]
