"""Stateful viewport, iteration bound and score grid for one fractal image."""

from __future__ import annotations

import enum
import warnings
from typing import Optional

import numpy as np

from .generator import CancelToken, GenerationStats, generate_accelerated, generate_naive
from .grid import PixelGrid
from .scoring import Coordinate, ViewportFrame, as_coordinate, compute_frame

DEFAULT_MAX_ITERATIONS = 255


class SessionState(enum.Enum):
    STALE = "stale"
    FRESH = "fresh"


class StaleScoresWarning(RuntimeWarning):
    """Scores were requested after the viewport changed without regenerating."""


class SessionDisposedError(RuntimeError):
    """Raised when a disposed session is used."""


class FractalSession:
    """Generate Mandelbrot escape scores for a fixed-size pixel viewport.

    The score grid is allocated once at construction and reused by every
    generation. Scores are only handed out while the session is ``FRESH``,
    i.e. after a full generation and before the viewport is moved.
    """

    def __init__(self, width: int, height: int, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"width and height must be positive, got {width}x{height}.")
        _check_max_iterations(max_iterations)

        self._width = int(width)
        self._height = int(height)
        self._max_iterations = int(max_iterations)
        self._grid: Optional[PixelGrid] = PixelGrid(self._width, self._height)
        self._state = SessionState.STALE

        self._center = as_coordinate(0.0, 0.0)
        self._zoom = 0
        self._frame = compute_frame(self._center, self._zoom, self._width, self._height)

    def __enter__(self) -> "FractalSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return (
            f"FractalSession(width={self._width}, height={self._height}, "
            f"center=({float(self._center.x)}, {float(self._center.y)}), zoom={self._zoom}, "
            f"max_iterations={self._max_iterations}, state={self._state.value})"
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def center(self) -> Coordinate:
        return self._center

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def frame(self) -> ViewportFrame:
        return self._frame

    @property
    def resolution(self) -> np.longdouble:
        return self._frame.resolution

    @property
    def top(self) -> np.longdouble:
        return self._frame.top

    @property
    def left(self) -> np.longdouble:
        return self._frame.left

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generated(self) -> bool:
        return self._state is SessionState.FRESH

    @property
    def disposed(self) -> bool:
        return self._grid is None

    def _require_grid(self) -> PixelGrid:
        if self._grid is None:
            raise SessionDisposedError("fractal session has been disposed.")
        return self._grid

    def set_position(self, center, zoom: int) -> None:
        """Centre the viewport on ``center`` with one pixel spanning ``1 / 2**zoom``."""

        self._require_grid()
        x, y = center
        self._center = as_coordinate(x, y)
        self._zoom = int(zoom)
        self._frame = compute_frame(self._center, self._zoom, self._width, self._height)
        self._state = SessionState.STALE

    def set_max_iterations(self, max_iterations: int) -> None:
        # Scores already generated stay readable; see DESIGN.md.
        self._require_grid()
        _check_max_iterations(max_iterations)
        self._max_iterations = int(max_iterations)

    def generate(self) -> GenerationStats:
        """Score every pixel of the viewport directly."""

        grid = self._require_grid()
        self._state = SessionState.STALE
        stats = generate_naive(grid, self._frame, self._max_iterations)
        self._state = SessionState.FRESH
        return stats

    def fast_generate(self, cancel: Optional[CancelToken] = None) -> GenerationStats:
        """Score the viewport with the Mariani/Silver accelerated generator.

        ``cancel`` may be any object with an ``is_set()`` method, such as a
        ``threading.Event``. A cancelled generation leaves the session stale.
        """

        grid = self._require_grid()
        self._state = SessionState.STALE
        stats = generate_accelerated(grid, self._frame, self._max_iterations, cancel=cancel)
        self._state = SessionState.FRESH
        return stats

    def get_scores(self) -> Optional[np.ndarray]:
        """Return a read-only ``height x width`` view of the scores, or ``None`` if stale."""

        grid = self._require_grid()
        if self._state is not SessionState.FRESH:
            warnings.warn(
                "Mandelbrot set has changed and requires regenerating.",
                StaleScoresWarning,
                stacklevel=2,
            )
            return None
        return grid.view()

    def dispose(self) -> None:
        if self._grid is not None:
            self._grid.dispose()
        self._grid = None
        self._state = SessionState.STALE


def create(width: int, height: int) -> FractalSession:
    return FractalSession(width, height)


def _check_max_iterations(max_iterations: int) -> None:
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}.")
