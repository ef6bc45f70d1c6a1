"""Naive and Mariani/Silver generators that fill a pixel grid with scores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Protocol

import numpy as np

from .grid import PixelGrid
from .scoring import ViewportFrame, score_pixel

# Rectangles with a side shorter than this are always evaluated pixel by pixel.
MIN_SUBDIVISION_SIZE = 3


class GenerationCancelled(RuntimeError):
    """Raised when a generation is cancelled through its token."""


class CancelToken(Protocol):
    def is_set(self) -> bool:
        ...


class Rect(NamedTuple):
    """A sub-rectangle of the grid, anchored at its top-left pixel."""

    row: int
    col: int
    width: int
    height: int

    @property
    def last_row(self) -> int:
        return self.row + self.height - 1

    @property
    def last_col(self) -> int:
        return self.col + self.width - 1

    def quadrants(self) -> tuple["Rect", "Rect", "Rect", "Rect"]:
        """Split at the midpoints; right and bottom halves take the remainder."""

        half_width = self.width // 2
        half_height = self.height // 2
        rest_width = self.width - half_width
        rest_height = self.height - half_height
        return (
            Rect(self.row, self.col, half_width, half_height),
            Rect(self.row, self.col + half_width, rest_width, half_height),
            Rect(self.row + half_height, self.col, half_width, rest_height),
            Rect(self.row + half_height, self.col + half_width, rest_width, rest_height),
        )


@dataclass(frozen=True)
class GenerationStats:
    """How much work a generation did."""

    evaluations: int = 0
    filled: int = 0

    def __add__(self, other: "GenerationStats") -> "GenerationStats":
        return GenerationStats(
            evaluations=self.evaluations + other.evaluations,
            filled=self.filled + other.filled,
        )


def _resolve_rect(grid: PixelGrid, rect: Optional[Rect]) -> Rect:
    if rect is None:
        return Rect(0, 0, grid.width, grid.height)
    rect = Rect(*rect)
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"rectangle {rect} has no pixels.")
    if rect.row < 0 or rect.col < 0 or rect.last_row >= grid.height or rect.last_col >= grid.width:
        raise ValueError(f"rectangle {rect} exceeds {grid.height}x{grid.width} grid.")
    return rect


def _fill_rect(scores: np.ndarray, frame: ViewportFrame, max_iterations: int, rect: Rect) -> int:
    for row in range(rect.row, rect.row + rect.height):
        for col in range(rect.col, rect.col + rect.width):
            scores[row, col] = score_pixel(frame, row, col, max_iterations)
    return rect.width * rect.height


def generate_naive(
    grid: PixelGrid,
    frame: ViewportFrame,
    max_iterations: int,
    rect: Optional[Rect] = None,
) -> GenerationStats:
    """Score every pixel of ``rect`` (the whole grid by default)."""

    rect = _resolve_rect(grid, rect)
    evaluations = _fill_rect(grid.buffer, frame, max_iterations, rect)
    return GenerationStats(evaluations=evaluations)


def border_pixels(rect: Rect) -> Iterator[tuple[int, int]]:
    """Trace the border clockwise from the top-left corner, corners once."""

    for col in range(rect.col, rect.last_col + 1):
        yield rect.row, col
    for row in range(rect.row + 1, rect.last_row + 1):
        yield row, rect.last_col
    for col in range(rect.last_col - 1, rect.col - 1, -1):
        yield rect.last_row, col
    for row in range(rect.last_row - 1, rect.row, -1):
        yield row, rect.col


def _trace_border(
    scores: np.ndarray,
    frame: ViewportFrame,
    max_iterations: int,
    rect: Rect,
) -> tuple[bool, int]:
    """Score the border of ``rect`` until two neighbouring pixels differ.

    Returns whether the whole border shares one score, and how many pixels
    were evaluated.
    """

    previous = None
    evaluations = 0
    for row, col in border_pixels(rect):
        score = score_pixel(frame, row, col, max_iterations)
        scores[row, col] = score
        evaluations += 1
        if previous is not None and score != previous:
            return False, evaluations
        previous = score
    return True, evaluations


def generate_accelerated(
    grid: PixelGrid,
    frame: ViewportFrame,
    max_iterations: int,
    rect: Optional[Rect] = None,
    cancel: Optional[CancelToken] = None,
) -> GenerationStats:
    """Fill ``rect`` using the Mariani/Silver border-flood-fill algorithm.

    A rectangle whose border is one uniform, nonzero score has its interior
    filled with that score; any other rectangle is split into quadrants.
    Rectangles narrower or shorter than ``MIN_SUBDIVISION_SIZE`` are scored
    pixel by pixel. Cusps narrower than one pixel may be missed.

    Quadrants never overlap, so the order in which the worklist is drained
    does not affect the result. Border pixels of a parent are rescored by
    its children, which always yields the same values.
    """

    scores = grid.buffer
    pending = [_resolve_rect(grid, rect)]
    stats = GenerationStats()

    while pending:
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled("generation cancelled.")

        current = pending.pop()
        if current.width < MIN_SUBDIVISION_SIZE or current.height < MIN_SUBDIVISION_SIZE:
            stats += GenerationStats(evaluations=_fill_rect(scores, frame, max_iterations, current))
            continue

        uniform, traced = _trace_border(scores, frame, max_iterations, current)
        stats += GenerationStats(evaluations=traced)

        corner = scores[current.row, current.col]
        if uniform and corner != 0:
            scores[current.row + 1:current.last_row, current.col + 1:current.last_col] = corner
            stats += GenerationStats(filled=(current.width - 2) * (current.height - 2))
        else:
            # reversed so the top-left quadrant is processed first
            pending.extend(reversed(current.quadrants()))

    return stats
