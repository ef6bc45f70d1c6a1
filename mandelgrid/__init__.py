"""Public API for Mandelbrot escape-score generation."""

from .generator import (
    GenerationCancelled,
    GenerationStats,
    Rect,
    generate_accelerated,
    generate_naive,
)
from .grid import GridDisposedError, PixelGrid
from .pgm import format_pgm, write_image, write_pgm
from .scoring import Coordinate, ViewportFrame, compute_frame, escape_score, pixel_to_coordinate
from .session import (
    DEFAULT_MAX_ITERATIONS,
    FractalSession,
    SessionDisposedError,
    SessionState,
    StaleScoresWarning,
    create,
)

__all__ = [
    "Coordinate",
    "DEFAULT_MAX_ITERATIONS",
    "FractalSession",
    "GenerationCancelled",
    "GenerationStats",
    "GridDisposedError",
    "PixelGrid",
    "Rect",
    "SessionDisposedError",
    "SessionState",
    "StaleScoresWarning",
    "ViewportFrame",
    "compute_frame",
    "create",
    "escape_score",
    "format_pgm",
    "generate_accelerated",
    "generate_naive",
    "pixel_to_coordinate",
    "write_image",
    "write_pgm",
]
