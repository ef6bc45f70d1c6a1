import threading

import numpy as np
import pytest

from mandelgrid.generator import (
    MIN_SUBDIVISION_SIZE,
    GenerationCancelled,
    GenerationStats,
    Rect,
    border_pixels,
    generate_accelerated,
    generate_naive,
)
from mandelgrid.grid import PixelGrid
from mandelgrid.scoring import as_coordinate, compute_frame, score_pixel


def _render(generator, width, height, center, zoom, max_iterations=255, **kwargs):
    grid = PixelGrid(width, height)
    frame = compute_frame(as_coordinate(*center), zoom, width, height)
    stats = generator(grid, frame, max_iterations, **kwargs)
    return grid, stats


def test_quadrants_give_remainder_to_right_and_bottom():
    assert Rect(0, 0, 5, 7).quadrants() == (
        Rect(0, 0, 2, 3),
        Rect(0, 2, 3, 3),
        Rect(3, 0, 2, 4),
        Rect(3, 2, 3, 4),
    )


def test_border_pixels_visit_each_border_pixel_once():
    rect = Rect(1, 2, 4, 3)
    pixels = list(border_pixels(rect))
    assert len(pixels) == len(set(pixels)) == 2 * 4 + 2 * 3 - 4
    assert pixels[0] == (1, 2)
    for row, col in pixels:
        assert row in (rect.row, rect.last_row) or col in (rect.col, rect.last_col)


def test_stats_add_up():
    assert GenerationStats(3, 4) + GenerationStats(1, 2) == GenerationStats(4, 6)


def test_naive_scores_every_pixel():
    grid, stats = _render(generate_naive, 7, 5, (-0.5, 0.0), 3)
    frame = compute_frame(as_coordinate(-0.5, 0.0), 3, 7, 5)
    assert stats == GenerationStats(evaluations=35, filled=0)
    for row in range(5):
        for col in range(7):
            assert grid.get(row, col) == score_pixel(frame, row, col, 255)


@pytest.mark.parametrize("width,height", [(2, 9), (9, 2), (1, 1), (2, 2)])
def test_thin_rectangles_are_scored_directly(width, height):
    naive, _ = _render(generate_naive, width, height, (-0.5, 0.0), 20)
    fast, stats = _render(generate_accelerated, width, height, (-0.5, 0.0), 20)
    assert stats == GenerationStats(evaluations=width * height, filled=0)
    assert np.array_equal(naive.buffer, fast.buffer)


def test_thin_sub_rectangle_is_scored_directly():
    grid = PixelGrid(10, 10)
    frame = compute_frame(as_coordinate(-0.5, 0.0), 20, 10, 10)
    stats = generate_accelerated(grid, frame, 255, rect=Rect(3, 3, MIN_SUBDIVISION_SIZE - 1, 6))
    assert stats.evaluations == 12
    assert stats.filled == 0


def test_uniform_border_fills_the_interior():
    # deep inside the main cardioid every pixel scores the bound
    grid, stats = _render(generate_accelerated, 3, 3, (-0.5, 0.0), 20, max_iterations=100)
    assert stats == GenerationStats(evaluations=8, filled=1)
    assert (grid.buffer == 100).all()


def test_large_uniform_region_is_filled_in_one_pass():
    grid, stats = _render(generate_accelerated, 40, 30, (-0.5, 0.0), 12)
    assert stats == GenerationStats(evaluations=2 * 40 + 2 * 30 - 4, filled=38 * 28)
    assert (grid.buffer == 255).all()


@pytest.mark.parametrize(
    "width,height,center,zoom,max_iterations",
    [
        (40, 32, (1.0, 1.0), 6, 255),
        (33, 17, (-2.5, 1.5), 4, 64),
        (24, 24, (-0.5, 0.0), 9, 255),
    ],
)
def test_accelerated_matches_naive(width, height, center, zoom, max_iterations):
    naive, _ = _render(generate_naive, width, height, center, zoom, max_iterations)
    fast, stats = _render(generate_accelerated, width, height, center, zoom, max_iterations)
    assert np.array_equal(naive.buffer, fast.buffer)
    assert stats.evaluations + stats.filled >= width * height


def test_accelerated_only_touches_its_rectangle():
    grid = PixelGrid(12, 12)
    frame = compute_frame(as_coordinate(-0.5, 0.0), 5, 12, 12)
    generate_accelerated(grid, frame, 255, rect=Rect(2, 4, 6, 5))
    touched = np.zeros((12, 12), dtype=bool)
    touched[2:7, 4:10] = True
    assert not grid.buffer[~touched].any()
    assert grid.buffer[touched].all()


@pytest.mark.parametrize("rect", [Rect(0, 0, 0, 3), Rect(-1, 0, 2, 2), Rect(0, 0, 5, 4), Rect(3, 3, 2, 1)])
def test_rectangles_outside_the_grid_are_rejected(rect):
    grid = PixelGrid(4, 4)
    frame = compute_frame(as_coordinate(0.0, 0.0), 2, 4, 4)
    with pytest.raises(ValueError):
        generate_naive(grid, frame, 10, rect=rect)
    with pytest.raises(ValueError):
        generate_accelerated(grid, frame, 10, rect=rect)


def test_scores_stay_within_bounds():
    grid, _ = _render(generate_accelerated, 48, 32, (-0.75, 0.0), 5, max_iterations=40)
    assert grid.buffer.min() >= 0
    assert grid.buffer.max() <= 40


def test_cancelled_generation_raises():
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(GenerationCancelled):
        _render(generate_accelerated, 16, 16, (-0.5, 0.0), 5, cancel=cancel)
