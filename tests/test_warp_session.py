import pytest

from triwarp.models.errors import DegenerateTriangleError, SourceNotLoadedError
from triwarp.models.triangle import Triangle
from triwarp.models.warp_options import WarpOptions
from triwarp.pipeline.warp_session import WarpSession

from .helpers import WHITE, gradient_buffer


def test_recompute_returns_fresh_buffer_each_time(gradient_10, lower_left_10):
    session = WarpSession(gradient_10, lower_left_10, options=WarpOptions())

    first = session.recompute(lower_left_10)
    second = session.recompute(Triangle.from_coords([(9, 0), (0, 0), (0, 9)]))

    assert first is not second
    assert (first.width, first.height) == (10, 10)
    assert first.get_pixel(9, 0) == WHITE
    assert second.get_pixel(9, 0) != WHITE
    assert session.last_result is second


def test_recompute_honours_destination_size(gradient_10, lower_left_10):
    session = WarpSession(gradient_10, lower_left_10, width=30, height=20, options=WarpOptions())
    result = session.recompute(Triangle.from_coords([(0, 0), (0, 19), (29, 19)]))
    assert result.shape == (20, 30, 4)


def test_failed_recompute_keeps_previous_result(gradient_10, lower_left_10):
    session = WarpSession(gradient_10, lower_left_10, options=WarpOptions())
    good = session.recompute(lower_left_10)

    with pytest.raises(DegenerateTriangleError):
        session.recompute(Triangle.from_coords([(0, 0), (5, 5), (10, 10)]))

    assert session.last_result is good
    assert session.destination_triangle == lower_left_10


def test_recompute_without_source_raises(lower_left_10):
    session = WarpSession(None, lower_left_10, width=10, height=10, options=WarpOptions())
    with pytest.raises(SourceNotLoadedError):
        session.recompute(lower_left_10)


def test_update_source_is_picked_up_by_next_recompute(gradient_10, lower_left_10):
    session = WarpSession(None, lower_left_10, options=WarpOptions())
    session.update_source(gradient_10)
    before = session.recompute(lower_left_10)

    moved = gradient_buffer(10, 10)
    moved.set_pixel(0, 5, (1, 2, 3, 4))
    session.update_source(moved)
    after = session.recompute(lower_left_10)

    assert before.get_pixel(0, 5) == gradient_10.get_pixel(0, 5)
    assert after.get_pixel(0, 5) == (1, 2, 3, 4)


def test_update_source_triangle(gradient_10, lower_left_10):
    session = WarpSession(gradient_10, lower_left_10, options=WarpOptions())
    session.update_source_triangle(Triangle.from_coords([(0, 0), (0, 1), (1, 1)]))
    result = session.recompute(lower_left_10)
    assert result.get_pixel(0, 9) == gradient_10.get_pixel(0, 0)


def test_clear_drops_rasters(gradient_10, lower_left_10):
    session = WarpSession(gradient_10, lower_left_10, options=WarpOptions())
    session.recompute(lower_left_10)
    session.clear()
    assert session.source is None and session.last_result is None
