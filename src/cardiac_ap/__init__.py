from .constants import (
    A, B, KK, M1, M2, EPSILON, D,
    T_FINAL, GRID_SIZE, PLOT_FREQ, BLOCK_SIZE, BACKEND, BACKENDS,
    SAFETY_FACTOR,
)

from .errors import (
    CardiacSimError, ConfigurationError, ResourceExhaustedError,
    TransferError, BackendUnavailableError,
)
from .config import (
    ModelParams, SimulationConfig, StepParams, stability_timestep, snapshot_due,
)
from .grid import Grid, FieldSet, initialize_fields, zero_fields
from .device import DeviceBuffer, upload_fields
from .boundary import mirror_ghosts
from .kernel import (
    stencil_reaction_numpy, stencil_reaction_numba, stencil_reaction_cuda,
    get_kernel,
)
from .stats import compute_stats, PerformanceReport
from .viz import SnapshotSink, PlotSink, SnapshotRecorder
from .solver import AlievPanfilovSolver, RunResult
from .app import SimulationApp

__all__ = [
    # constants
    "A", "B", "KK", "M1", "M2", "EPSILON", "D",
    "T_FINAL", "GRID_SIZE", "PLOT_FREQ", "BLOCK_SIZE", "BACKEND", "BACKENDS",
    "SAFETY_FACTOR",
    # errors
    "CardiacSimError", "ConfigurationError", "ResourceExhaustedError",
    "TransferError", "BackendUnavailableError",
    # modules
    "ModelParams", "SimulationConfig", "StepParams", "stability_timestep",
    "snapshot_due",
    "Grid", "FieldSet", "initialize_fields", "zero_fields",
    "DeviceBuffer", "upload_fields", "mirror_ghosts",
    "stencil_reaction_numpy", "stencil_reaction_numba", "stencil_reaction_cuda",
    "get_kernel",
    "compute_stats", "PerformanceReport",
    "SnapshotSink", "PlotSink", "SnapshotRecorder",
    "AlievPanfilovSolver", "RunResult", "SimulationApp",
]
