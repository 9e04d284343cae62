"""Stencil-reaction kernels.

Every backend performs, for each interior cell ``(row, col)``:

1. refresh the mirrored ghost values the cell reads,
2. the explicit diffusion update
   ``e = Ep + alpha * (Ep[E] + Ep[W] + Ep[N] + Ep[S] - 4 Ep)``,
3. the explicit Euler reaction update on ``e`` and the recovery ``r``:
   ``e' = e - dt (kk e (e-a)(e-1) + e r)`` and
   ``r' = r + dt (epsilon + m1 r / (e + m2)) (-r - kk e (e-b-1))``,

writing ``e'`` into the current excitation field and ``r'`` back into the
recovery field. Cells are independent, so the launch shape (``block_size``)
never changes the result.
"""
from __future__ import annotations
import functools
import logging
from typing import Callable, Dict

import numba
import numpy as np

from .boundary import mirror_cell, mirror_ghosts
from .config import StepParams
from .device import require_cupy
from .errors import BackendUnavailableError, ConfigurationError, TransferError

logger = logging.getLogger(__name__)

KernelFn = Callable[..., None]


def stencil_reaction_numpy(e, e_prev, r, p: StepParams, block_size: int = 1) -> None:
    """Vectorised host kernel; mirrors the ghosts as a separate phase."""
    mirror_ghosts(e_prev)
    ep = e_prev[1:-1, 1:-1]
    lap = (
        e_prev[1:-1, 2:]
        + e_prev[1:-1, :-2]
        + e_prev[:-2, 1:-1]
        + e_prev[2:, 1:-1]
        - 4.0 * ep
    )
    ed = ep + p.alpha * lap
    ri = r[1:-1, 1:-1]
    e[1:-1, 1:-1] = ed - p.dt * (p.kk * ed * (ed - p.a) * (ed - 1.0) + ed * ri)
    ri += p.dt * (p.epsilon + p.m1 * ri / (ed + p.m2)) * (-ri - p.kk * ed * (ed - p.b - 1.0))


@numba.njit(parallel=True, cache=True)
def _stencil_reaction_rows(e, e_prev, r, alpha, dt, kk, a, b, epsilon, m1, m2, block_rows):
    m = e.shape[0] - 2
    n = e.shape[1] - 2
    nblocks = (m + block_rows - 1) // block_rows
    for blk in numba.prange(nblocks):
        row_lo = 1 + blk * block_rows
        row_hi = min(row_lo + block_rows, m + 1)
        for row in range(row_lo, row_hi):
            for col in range(1, n + 1):
                mirror_cell(e_prev, row, col, m, n)
                c = e_prev[row, col]
                ed = c + alpha * (
                    e_prev[row, col + 1]
                    + e_prev[row, col - 1]
                    + e_prev[row - 1, col]
                    + e_prev[row + 1, col]
                    - 4.0 * c
                )
                rr = r[row, col]
                e[row, col] = ed - dt * (kk * ed * (ed - a) * (ed - 1.0) + ed * rr)
                r[row, col] = rr + dt * (epsilon + m1 * rr / (ed + m2)) * (
                    -rr - kk * ed * (ed - b - 1.0)
                )


def stencil_reaction_numba(e, e_prev, r, p: StepParams, block_size: int = 16) -> None:
    """Parallel host kernel: one ``prange`` task per ``block_size`` rows."""
    _stencil_reaction_rows(
        e, e_prev, r,
        p.alpha, p.dt, p.kk, p.a, p.b, p.epsilon, p.m1, p.m2,
        max(1, int(block_size)),
    )


_CUDA_SOURCE = r"""
extern "C" __global__
void stencil_reaction(double* E, double* E_prev, double* R,
                      const int m, const int n,
                      const double alpha, const double dt,
                      const double kk, const double a, const double b,
                      const double epsilon, const double M1, const double M2)
{
    const int col = blockIdx.x * blockDim.x + threadIdx.x + 1;
    const int row = blockIdx.y * blockDim.y + threadIdx.y + 1;
    if (row > m || col > n) return;

    const int w = n + 2;
    if (row == 1) E_prev[col] = E_prev[2 * w + col];
    if (row == m) E_prev[(m + 1) * w + col] = E_prev[(m - 1) * w + col];
    if (col == 1) E_prev[row * w] = E_prev[row * w + 2];
    if (col == n) E_prev[row * w + n + 1] = E_prev[row * w + n - 1];

    const int idx = row * w + col;
    const double c = E_prev[idx];
    const double e = c + alpha * (E_prev[idx + 1] + E_prev[idx - 1]
                                  + E_prev[idx - w] + E_prev[idx + w] - 4.0 * c);
    const double r = R[idx];
    E[idx] = e - dt * (kk * e * (e - a) * (e - 1.0) + e * r);
    R[idx] = r + dt * (epsilon + M1 * r / (e + M2)) * (-r - kk * e * (e - b - 1.0));
}
"""


@functools.lru_cache(maxsize=None)
def _cuda_kernel():
    cp = require_cupy()
    return cp.RawKernel(_CUDA_SOURCE, "stencil_reaction")


def stencil_reaction_cuda(e, e_prev, r, p: StepParams, block_size: int = 16) -> None:
    """One CUDA thread per interior cell on a ``block_size``² thread block."""
    cp = require_cupy()
    m = e.shape[0] - 2
    n = e.shape[1] - 2
    bs = max(1, int(block_size))
    grid = ((n + bs - 1) // bs, (m + bs - 1) // bs)
    try:
        _cuda_kernel()(
            grid, (bs, bs),
            (
                e, e_prev, r,
                np.int32(m), np.int32(n),
                np.float64(p.alpha), np.float64(p.dt),
                np.float64(p.kk), np.float64(p.a), np.float64(p.b),
                np.float64(p.epsilon), np.float64(p.m1), np.float64(p.m2),
            ),
        )
    except cp.cuda.compiler.CompileException as exc:
        raise BackendUnavailableError(f"CUDA kernel failed to compile: {exc}") from exc
    except (cp.cuda.driver.CUDADriverError, cp.cuda.runtime.CUDARuntimeError) as exc:
        raise TransferError(f"Kernel launch failed: {exc}") from exc


KERNELS: Dict[str, KernelFn] = {
    "numpy": stencil_reaction_numpy,
    "numba": stencil_reaction_numba,
    "cuda": stencil_reaction_cuda,
}


def get_kernel(backend: str) -> KernelFn:
    try:
        return KERNELS[backend]
    except KeyError:
        raise ConfigurationError(
            f"Unknown backend '{backend}'. Choose from {', '.join(KERNELS)}."
        ) from None
