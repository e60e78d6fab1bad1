import math

import numpy as np
import pytest

from fractalview.compute import (
    channel_value,
    continuous_iteration,
    escape_time,
    in_main_bulbs,
    pixel_rgba,
    plane_coordinate,
    render_columns,
    render_sequential,
)

PHASE = np.array([4.0, 2.0, 1.0])
FREQ = np.array([0.15, 0.15, 0.10])
BLACK = (0, 0, 0, 255)


def test_plane_coordinate_center_pixel():
    assert plane_coordinate(50, 50, 100, 100, -0.75, 0.0, 1.5, 1.2) == (-0.75, 0.0)


def test_plane_coordinate_top_left_is_min_corner():
    cr, ci = plane_coordinate(0, 0, 800, 600, -0.75, 0.0, 1.5, 1.2)
    assert cr == pytest.approx(-2.25)
    assert ci == pytest.approx(-1.2)


@pytest.mark.parametrize("c", [(0.0, 0.0), (-1.0, 0.0), (0.2, 0.3), (-0.1, 0.6), (-1.1, 0.1)])
def test_bulb_points_detected(c):
    assert in_main_bulbs(*c)


@pytest.mark.parametrize("c", [(2.0, 2.0), (-0.75, 0.0), (0.3, 0.0), (-2.0, 0.5), (0.4, 0.6)])
def test_points_outside_bulbs(c):
    assert not in_main_bulbs(*c)


@pytest.mark.parametrize("depth", [1, 2, 10, 500, 10000])
def test_origin_is_inside_without_iterating(depth):
    assert escape_time(0.0, 0.0, depth) == (0, 0.0, 0.0)
    assert pixel_rgba(0, 0, 1, 1, 0.5, 0.5, 0.5, 0.5, depth, PHASE, FREQ) == BLACK


@pytest.mark.parametrize("c", [(-1.0, 0.0), (0.2, 0.3), (-0.1, 0.6)])
def test_bulb_points_skip_the_loop(c):
    iterations, zr, zi = escape_time(c[0], c[1], 1000)
    assert iterations == 0
    assert (zr, zi) == (0.0, 0.0)


@pytest.mark.parametrize("depth", [2, 3, 50, 500])
def test_far_point_escapes_on_first_iteration(depth):
    iterations, zr, zi = escape_time(2.0, 2.0, depth)
    assert iterations == 1
    assert (zr, zi) == (2.0, 2.0)


def test_escape_sequence_for_c_equal_one():
    # z: 0 -> 1 -> 2 -> 5, |2|² == 4 does not escape yet
    assert escape_time(1.0, 0.0, 100) == (3, 5.0, 0.0)


def test_escape_respects_depth():
    assert escape_time(1.0, 0.0, 2)[0] == 2


@pytest.mark.parametrize("depth", [10, 200])
def test_cusp_between_bulbs_never_escapes(depth):
    assert escape_time(-0.75, 0.0, depth)[0] == depth


def test_continuous_iteration_formula():
    expected = 1 + 1 - math.log(math.log(math.sqrt(8.0)) / 2 / math.log(2)) / math.log(2)
    assert continuous_iteration(1, 2.0, 2.0) == pytest.approx(expected)


def test_continuous_iteration_grows_with_iteration_count():
    assert continuous_iteration(5, 2.0, 2.0) == pytest.approx(continuous_iteration(1, 2.0, 2.0) + 4)


def test_channel_value_range():
    assert channel_value(0.0, 0.0, math.pi / 2) == 255
    assert channel_value(0.0, 0.0, -math.pi / 2) == 1
    assert channel_value(0.0, 0.0, 0.0) == 128


def test_escaped_pixel_color():
    # pixel (0, 0) of a 1x1 raster lands on c = 2 + 2i
    r, g, b, a = pixel_rgba(0, 0, 1, 1, 2.5, 2.5, 0.5, 0.5, 100, PHASE, FREQ)
    ci = 2 - math.log(math.log(math.sqrt(8.0)) / 2 / math.log(2)) / math.log(2)
    expected = [int(math.sin(ci * f + p) * 127 + 128) for p, f in zip(PHASE, FREQ)]
    assert a == 255
    for got, want in zip((r, g, b), expected):
        assert abs(got - want) <= 1


def test_non_escaping_pixel_is_black():
    assert pixel_rgba(50, 50, 100, 100, -0.75, 0.0, 1.5, 1.2, 500, PHASE, FREQ) == BLACK


def test_depth_one_makes_everything_black():
    assert pixel_rgba(0, 0, 1, 1, 2.5, 2.5, 0.5, 0.5, 1, PHASE, FREQ) == BLACK


def _fill_sequential(width, height, depth):
    out = np.zeros((height, width, 4), dtype=np.uint8)
    render_sequential(out, -0.75, 0.0, 1.5, 1.2, depth, PHASE, FREQ)
    return out


def test_sequential_fill_matches_pixel_kernel():
    out = _fill_sequential(12, 9, 40)
    for y in range(9):
        for x in range(12):
            expected = pixel_rgba(x, y, 12, 9, -0.75, 0.0, 1.5, 1.2, 40, PHASE, FREQ)
            assert tuple(out[y, x]) == expected


def test_column_fill_touches_only_its_range():
    out = np.zeros((9, 12, 4), dtype=np.uint8)
    render_columns(out, 3, 7, -0.75, 0.0, 1.5, 1.2, 40, PHASE, FREQ)
    assert not out[:, :3].any()
    assert not out[:, 7:].any()
    assert (out[:, 3:7, 3] == 255).all()


def test_column_ranges_reassemble_sequential_image():
    expected = _fill_sequential(33, 21, 80)
    out = np.zeros_like(expected)
    for start, end in [(0, 10), (10, 20), (20, 33)]:
        render_columns(out, start, end, -0.75, 0.0, 1.5, 1.2, 80, PHASE, FREQ)
    np.testing.assert_array_equal(out, expected)
