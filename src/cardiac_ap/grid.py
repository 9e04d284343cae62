from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

import numpy as np

from .constants import INITIAL_LEVEL
from .errors import ConfigurationError, ResourceExhaustedError


class Grid:
    """Padded 2-D field of float64 samples in row-major order.

    The interior spans rows ``1..rows`` and columns ``1..cols``; row 0,
    row ``rows+1``, column 0 and column ``cols+1`` are ghost cells that only
    carry mirrored boundary values. Cell ``(row, col)`` lives at flat offset
    ``row * (cols + 2) + col``.

    Parameters
    ----------
    rows : int
        Interior rows ``M``.
    cols : int
        Interior columns ``N``.
    fill : float, optional
        Initial value for every cell, ghosts included. Default is 0.
    """

    def __init__(self, rows: int, cols: int, fill: float = 0.0):
        if not (rows > 0 and cols > 0):
            raise ConfigurationError("Grid rows and cols must be positive integers.")
        self.rows = rows
        self.cols = cols
        try:
            self.data = np.full((rows + 2, cols + 2), fill, dtype=np.float64, order="C")
        except MemoryError as exc:
            raise ResourceExhaustedError(
                f"Cannot allocate a {rows + 2}x{cols + 2} grid."
            ) from exc
        # View onto the same buffer for raw offset access.
        self._flat = self.data.reshape(-1)

    @property
    def shape(self):
        return self.data.shape

    @property
    def interior(self) -> np.ndarray:
        return self.data[1:-1, 1:-1]

    def flat_index(self, row: int, col: int) -> int:
        return row * (self.cols + 2) + col

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row <= self.rows + 1 and 0 <= col <= self.cols + 1):
            raise IndexError(
                f"Cell ({row}, {col}) outside padded grid {self.shape}."
            )

    def at(self, row: int, col: int) -> float:
        if __debug__:
            self._check(row, col)
        return float(self._flat[row * (self.cols + 2) + col])

    def put(self, row: int, col: int, value: float) -> None:
        if __debug__:
            self._check(row, col)
        self._flat[row * (self.cols + 2) + col] = value

    def copy(self) -> "Grid":
        out = Grid(self.rows, self.cols)
        np.copyto(out.data, self.data)
        return out

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Grid":
        """Wrap a copy of a padded ``(rows+2, cols+2)`` array."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2 or array.shape[0] < 3 or array.shape[1] < 3:
            raise ConfigurationError(
                f"Expected a padded 2-D array, got shape {array.shape}."
            )
        out = cls(array.shape[0] - 2, array.shape[1] - 2)
        np.copyto(out.data, array)
        return out

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"


T = TypeVar("T")


@dataclass
class FieldSet(Generic[T]):
    """The three simulation fields.

    ``e`` is the write target of the next step, ``e_prev`` the last computed
    excitation and ``r`` the recovery variable (updated in place).
    """

    e: T
    e_prev: T
    r: T

    def swap(self) -> None:
        """Exchange the current/previous excitation handles."""
        self.e, self.e_prev = self.e_prev, self.e


def initialize_fields(rows: int, cols: int) -> FieldSet[Grid]:
    """Return host fields holding the step-function initial condition.

    ``e_prev`` is 1 on interior columns right of the midline (every row,
    ghosts included); ``r`` is 1 on interior columns of the rows below the
    midline. ``e`` starts as a copy of ``e_prev``.

    Parameters
    ----------
    rows : int
        Interior rows.
    cols : int
        Interior columns.

    Returns
    -------
    FieldSet[Grid]
        Freshly allocated host grids.
    """
    e_prev = Grid(rows, cols)
    r = Grid(rows, cols)

    col0 = cols // 2 + 1
    e_prev.data[:, col0:cols + 1] = INITIAL_LEVEL

    row0 = rows // 2 + 1
    r.data[row0:, 1:cols + 1] = INITIAL_LEVEL

    return FieldSet(e=e_prev.copy(), e_prev=e_prev, r=r)


def zero_fields(rows: int, cols: int) -> FieldSet[Grid]:
    return FieldSet(e=Grid(rows, cols), e_prev=Grid(rows, cols), r=Grid(rows, cols))
