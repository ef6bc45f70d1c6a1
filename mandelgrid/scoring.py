"""Coordinate mapping and escape-time scoring for single pixels."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

REAL = np.longdouble
ESCAPE_RADIUS_SQ = 4

_QUARTER = REAL(0.25)
_HALF = REAL(0.5)


class Coordinate(NamedTuple):
    """A point in the fractal plane."""

    x: np.longdouble
    y: np.longdouble


class ViewportFrame(NamedTuple):
    """Pixel spacing and top-left corner of a viewport in fractal coordinates."""

    resolution: np.longdouble
    top: np.longdouble
    left: np.longdouble


def as_coordinate(x: float, y: float) -> Coordinate:
    return Coordinate(REAL(x), REAL(y))


def compute_frame(center: Coordinate, zoom: int, width: int, height: int) -> ViewportFrame:
    """Derive resolution, top and left for a viewport.

    ``resolution`` is the fractal-plane distance spanned by one pixel,
    ``1 / 2**zoom``. The three values must always be recomputed together.
    """

    resolution = np.ldexp(REAL(1), -int(zoom))

    fractal_width = REAL(width) * resolution
    fractal_height = REAL(height) * resolution

    left = REAL(center.x) - fractal_width * _HALF
    top = REAL(center.y) + fractal_height * _HALF
    return ViewportFrame(resolution=resolution, top=top, left=left)


def pixel_to_coordinate(frame: ViewportFrame, row: int, col: int) -> Coordinate:
    """Return the fractal coordinate of the centre of pixel ``(row, col)``."""

    half_resolution = frame.resolution * _HALF
    x = frame.left + (frame.resolution * col + half_resolution)
    y = frame.top - (frame.resolution * row + half_resolution)
    return Coordinate(x, y)


def in_main_cardioid(x: np.longdouble, y: np.longdouble) -> bool:
    x_shifted = x - _QUARTER
    y_sq = y * y
    q = x_shifted * x_shifted + y_sq
    return bool(q * (q + x_shifted) < _QUARTER * y_sq)


def escape_score(coord: Coordinate, max_iterations: int) -> int:
    """Count iterations until the orbit of ``coord`` leaves the escape radius.

    Points certified inside the main cardioid, and points that have not
    escaped after ``max_iterations`` steps, score ``max_iterations``.
    """

    cx = REAL(coord.x)
    cy = REAL(coord.y)
    if in_main_cardioid(cx, cy):
        return max_iterations

    score = 0
    x = y = REAL(0)
    x_sq = y_sq = REAL(0)
    while x_sq + y_sq < ESCAPE_RADIUS_SQ and score != max_iterations:
        y = 2 * x * y + cy
        x = x_sq - y_sq + cx
        x_sq = x * x
        y_sq = y * y
        score += 1
    return score


def score_pixel(frame: ViewportFrame, row: int, col: int, max_iterations: int) -> int:
    return escape_score(pixel_to_coordinate(frame, row, col), max_iterations)
