import numpy as np
import pytest

from mandelgrid.scoring import (
    REAL,
    Coordinate,
    as_coordinate,
    compute_frame,
    escape_score,
    in_main_cardioid,
    pixel_to_coordinate,
    score_pixel,
)


@pytest.mark.parametrize("max_iterations", [1, 10, 255, 1000])
def test_cardioid_center_scores_max_iterations(max_iterations):
    assert escape_score(as_coordinate(-0.5, 0.0), max_iterations) == max_iterations


def test_far_point_escapes_after_one_iteration():
    assert escape_score(as_coordinate(2.0, 2.0), 255) <= 1


def test_escape_count_on_real_axis():
    # orbit of 1 is 0, 1, 2: |2|^2 reaches the escape radius on step two
    assert escape_score(as_coordinate(1.0, 0.0), 255) == 2


def test_period_two_bulb_iterates_up_to_the_bound():
    coord = as_coordinate(-1.0, 0.0)
    assert not in_main_cardioid(coord.x, coord.y)
    assert escape_score(coord, 50) == 50


def test_cardioid_test_rejects_exterior_and_bulb_points():
    assert in_main_cardioid(REAL(0.0), REAL(0.0))
    assert not in_main_cardioid(REAL(0.3), REAL(0.0))
    assert not in_main_cardioid(REAL(-1.0), REAL(0.0))


def test_compute_frame_matches_demo_viewport():
    frame = compute_frame(as_coordinate(-0.5, 0.0), 6, 150, 150)
    assert frame.resolution == REAL(1) / 64
    assert frame.left == REAL(-0.5) - REAL(150) / 128
    assert frame.top == REAL(150) / 128
    assert isinstance(frame.resolution, np.longdouble)


def test_negative_zoom_widens_pixels():
    frame = compute_frame(as_coordinate(0.0, 0.0), -2, 2, 2)
    assert frame.resolution == 4
    assert frame.left == -4
    assert frame.top == 4


def test_pixel_to_coordinate_uses_pixel_centres():
    frame = compute_frame(as_coordinate(0.0, 0.0), 1, 4, 2)
    assert frame.left == -1
    assert frame.top == REAL(0.5)

    assert pixel_to_coordinate(frame, 0, 0) == Coordinate(REAL(-0.75), REAL(0.25))
    assert pixel_to_coordinate(frame, 1, 3) == Coordinate(REAL(0.75), REAL(-0.25))


def test_score_pixel_combines_mapping_and_scoring():
    frame = compute_frame(as_coordinate(-0.5, 0.0), 4, 3, 3)
    assert pixel_to_coordinate(frame, 1, 1) == Coordinate(REAL(-0.5), REAL(0.0))
    assert score_pixel(frame, 1, 1, 77) == 77
