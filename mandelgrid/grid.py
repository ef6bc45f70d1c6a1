"""Storage for per-pixel escape scores."""

from __future__ import annotations

from typing import Optional

import numpy as np

SCORE_DTYPE = np.int32


class GridDisposedError(RuntimeError):
    """Raised when a disposed grid is accessed."""


class PixelGrid:
    """A ``height x width`` row-major buffer of integer scores.

    The buffer is a single contiguous numpy array owned by the grid. Callers
    only ever receive read-only views of it.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}.")
        self.width = int(width)
        self.height = int(height)
        self._scores: Optional[np.ndarray] = None
        self._disposed = False
        self.allocate()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def allocate(self) -> None:
        """Allocate the buffer unless it already exists."""

        if self._disposed:
            raise GridDisposedError("cannot allocate a disposed grid.")
        if self._scores is None:
            self._scores = np.zeros((self.height, self.width), dtype=SCORE_DTYPE)

    def dispose(self) -> None:
        self._scores = None
        self._disposed = True

    @property
    def buffer(self) -> np.ndarray:
        """The writable buffer, for generators operating on this grid."""

        if self._scores is None:
            raise GridDisposedError("pixel grid has been disposed.")
        return self._scores

    def view(self) -> np.ndarray:
        scores = self.buffer.view()
        scores.flags.writeable = False
        return scores

    def _check_index(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"pixel ({row}, {col}) outside {self.height}x{self.width} grid."
            )

    def get(self, row: int, col: int) -> int:
        self._check_index(row, col)
        return int(self.buffer[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        self._check_index(row, col)
        self.buffer[row, col] = value
