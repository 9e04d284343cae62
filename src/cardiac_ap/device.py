"""Domain-resident copies of host grids.

Two execution domains exist: ``"host"`` (numpy memory, used by the numpy and
numba kernels) and ``"cuda"`` (cupy device memory). A :class:`DeviceBuffer`
always holds its own storage; uploads and downloads copy, they never alias
the host :class:`~cardiac_ap.grid.Grid`.
"""
from __future__ import annotations
import logging
from typing import Tuple

import numpy as np

from .errors import (
    BackendUnavailableError, ConfigurationError, ResourceExhaustedError, TransferError,
)
from .grid import FieldSet, Grid

logger = logging.getLogger(__name__)

HOST = "host"
CUDA = "cuda"

_BACKEND_DOMAINS = {"numpy": HOST, "numba": HOST, "cuda": CUDA}


def domain_for(backend: str) -> str:
    return _BACKEND_DOMAINS[backend]


def require_cupy():
    try:
        import cupy
    except ImportError as exc:
        raise BackendUnavailableError(
            "The 'cuda' backend needs cupy; install with `pip install cardiac-ap[cuda]`."
        ) from exc
    try:
        ndev = cupy.cuda.runtime.getDeviceCount()
    except cupy.cuda.runtime.CUDARuntimeError as exc:
        raise BackendUnavailableError(f"No usable CUDA device: {exc}") from exc
    if ndev < 1:
        raise BackendUnavailableError("No CUDA device found.")
    return cupy


def array_module(domain: str):
    """Return ``numpy`` or ``cupy`` for ``domain``."""
    if domain == HOST:
        return np
    if domain == CUDA:
        return require_cupy()
    raise ConfigurationError(f"Unknown execution domain '{domain}'.")


def synchronize(domain: str) -> None:
    """Block until every kernel queued on ``domain`` has finished."""
    if domain != CUDA:
        return
    cp = require_cupy()
    try:
        cp.cuda.Stream.null.synchronize()
    except cp.cuda.runtime.CUDARuntimeError as exc:
        raise TransferError(f"Device synchronisation failed: {exc}") from exc


class DeviceBuffer:
    """A grid-shaped float64 array resident on one execution domain.

    Parameters
    ----------
    shape : tuple[int, int]
        Padded shape ``(rows+2, cols+2)``.
    domain : str, optional
        ``"host"`` or ``"cuda"``. Default is ``"host"``.
    """

    def __init__(self, shape: Tuple[int, int], domain: str = HOST):
        self.domain = domain
        self.shape = tuple(shape)
        xp = array_module(domain)
        if domain == CUDA:
            try:
                self.array = xp.zeros(self.shape, dtype=xp.float64, order="C")
            except xp.cuda.memory.OutOfMemoryError as exc:
                raise ResourceExhaustedError(
                    f"Cannot allocate {self.shape} on the CUDA device."
                ) from exc
        else:
            try:
                self.array = np.zeros(self.shape, dtype=np.float64, order="C")
            except MemoryError as exc:
                raise ResourceExhaustedError(
                    f"Cannot allocate {self.shape} in host memory."
                ) from exc

    @classmethod
    def from_grid(cls, grid: Grid, domain: str = HOST) -> "DeviceBuffer":
        buf = cls(grid.shape, domain)
        buf.upload_from(grid)
        return buf

    def _check_shape(self, grid: Grid) -> None:
        if grid.shape != self.shape:
            raise TransferError(
                f"Shape mismatch: buffer {self.shape} vs grid {grid.shape}."
            )

    def upload_from(self, grid: Grid) -> None:
        """Copy ``grid`` into this buffer."""
        self._check_shape(grid)
        if self.domain == HOST:
            np.copyto(self.array, grid.data)
            return
        cp = require_cupy()
        try:
            self.array.set(grid.data)
        except cp.cuda.runtime.CUDARuntimeError as exc:
            raise TransferError(f"Host-to-device copy failed: {exc}") from exc

    def download_to(self, grid: Grid) -> None:
        """Copy this buffer into ``grid``."""
        self._check_shape(grid)
        if self.domain == HOST:
            np.copyto(grid.data, self.array)
            return
        cp = require_cupy()
        try:
            self.array.get(out=grid.data)
        except cp.cuda.runtime.CUDARuntimeError as exc:
            raise TransferError(f"Device-to-host copy failed: {exc}") from exc

    def to_grid(self) -> Grid:
        out = Grid(self.shape[0] - 2, self.shape[1] - 2)
        self.download_to(out)
        return out


def upload_fields(fields: FieldSet[Grid], domain: str) -> FieldSet[DeviceBuffer]:
    """Materialise all three host fields on ``domain``."""
    logger.debug("Uploading %s fields to '%s'", fields.e.shape, domain)
    return FieldSet(
        e=DeviceBuffer.from_grid(fields.e, domain),
        e_prev=DeviceBuffer.from_grid(fields.e_prev, domain),
        r=DeviceBuffer.from_grid(fields.r, domain),
    )
