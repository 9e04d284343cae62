from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    A, B, KK, M1, M2, EPSILON, D,
    T_FINAL, GRID_SIZE, PLOT_FREQ, BLOCK_SIZE, BACKEND, BACKENDS,
    SAFETY_FACTOR,
)
from .errors import ConfigurationError


@dataclass(frozen=True)
class ModelParams:
    """Aliev-Panfilov reaction constants and the diffusion coefficient."""

    a: float = A
    b: float = B
    kk: float = KK
    m1: float = M1
    m2: float = M2
    epsilon: float = EPSILON
    d: float = D


@dataclass(frozen=True)
class SimulationConfig:
    t_final: float = T_FINAL
    n: int = GRID_SIZE
    m: Optional[int] = None

    # IO
    plot_freq: float = PLOT_FREQ

    # Launch shaping; never changes results
    block_size: int = BLOCK_SIZE
    backend: str = BACKEND

    model: ModelParams = field(default_factory=ModelParams)

    def __post_init__(self) -> None:
        if self.n < 2 or self.rows < 2:
            raise ConfigurationError(
                f"Grid must have at least 2x2 interior cells, got {self.rows}x{self.n}."
            )
        if not self.t_final > 0:
            raise ConfigurationError(f"t_final must be positive, got {self.t_final}.")
        if self.plot_freq < 0:
            raise ConfigurationError(f"plot_freq must be >= 0, got {self.plot_freq}.")
        if self.block_size < 1:
            raise ConfigurationError(f"block_size must be >= 1, got {self.block_size}.")
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown backend '{self.backend}'. Choose from {', '.join(BACKENDS)}."
            )

    @property
    def rows(self) -> int:
        return self.n if self.m is None else self.m

    @property
    def cols(self) -> int:
        return self.n

    @property
    def cells(self) -> int:
        return self.rows * self.cols


def stability_timestep(
    model: ModelParams, dx: float, safety: float = SAFETY_FACTOR
) -> float:
    """Return the largest stable explicit timestep scaled by ``safety``.

    The diffusion-limited bound is ``dx² / (4d + dx²(rp + kk))`` and the
    reaction-limited bound is ``1 / (epsilon + (m1/m2) rp)`` with
    ``rp = kk (b+1)² / 4``. The smaller of the two is multiplied by
    ``safety``.

    Parameters
    ----------
    model : ModelParams
        Reaction and diffusion constants.
    dx : float
        Grid spacing.
    safety : float, optional
        Safety factor applied to the bound. Default is 0.95.

    Returns
    -------
    float
        Timestep length ``dt``.
    """
    rp = model.kk * (model.b + 1.0) * (model.b + 1.0) / 4.0
    dte = (dx * dx) / (model.d * 4.0 + (dx * dx) * (rp + model.kk))
    dtr = 1.0 / (model.epsilon + (model.m1 / model.m2) * rp)
    return safety * min(dte, dtr)


@dataclass(frozen=True)
class StepParams:
    """Per-run scalars handed to every kernel launch."""

    dt: float
    dx: float
    alpha: float
    a: float
    b: float
    kk: float
    m1: float
    m2: float
    epsilon: float

    @classmethod
    def from_config(cls, cfg: SimulationConfig) -> "StepParams":
        model = cfg.model
        dx = 1.0 / (cfg.cols - 1)
        dt = stability_timestep(model, dx)
        return cls(
            dt=dt,
            dx=dx,
            alpha=model.d * dt / (dx * dx),
            a=model.a,
            b=model.b,
            kk=model.kk,
            m1=model.m1,
            m2=model.m2,
            epsilon=model.epsilon,
        )

    def expected_iterations(self, t_final: float) -> int:
        return math.ceil(t_final / self.dt)


def snapshot_due(t: float, dt: float, plot_freq: float) -> bool:
    """Best-effort periodic trigger: true roughly once every ``plot_freq``."""
    if plot_freq <= 0:
        return False
    k = math.floor(t / plot_freq)
    return (t - k * plot_freq) < dt
