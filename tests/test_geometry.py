import numpy as np
import pytest

from mandelbarf import REFERENCE_VIEWPORT, ConfigurationError, Viewport, linear


@pytest.mark.parametrize(
    "n, lo, hi",
    [(2, -2.0, 1.0), (16, 1.0, -1.0), (6144, -2.0, 1.0), (7, 0.1, 0.3), (1000, -1e-9, 3e-9)],
)
def test_endpoints_land_exactly(n, lo, hi):
    assert linear(0, n, lo, hi) == lo
    assert linear(n - 1, n, lo, hi) == hi


def test_midpoint():
    assert linear(2, 5, -2.0, 2.0) == pytest.approx(0.0)
    assert linear(1, 3, 0.0, 10.0) == pytest.approx(5.0)


def test_array_indices_match_scalar_indices():
    n = 37
    indices = np.arange(n, dtype=np.float64)
    mapped = linear(indices, n, -2.0, 1.0)
    assert mapped.tolist() == [linear(p, n, -2.0, 1.0) for p in range(n)]


@pytest.mark.parametrize("n", [1, 0])
def test_single_pixel_axis_is_rejected(n):
    with pytest.raises(ConfigurationError):
        linear(0, n, -2.0, 1.0)


def test_reference_corners():
    cols, rows = 16, 16
    assert REFERENCE_VIEWPORT.pixel_to_complex(0, 0, cols, rows) == complex(-2.0, 1.0)
    assert REFERENCE_VIEWPORT.pixel_to_complex(cols - 1, rows - 1, cols, rows) == complex(1.0, -1.0)


def test_grid_matches_pixel_to_complex():
    cols, rows = 9, 7
    points = REFERENCE_VIEWPORT.grid(cols, rows, 2, 5)
    assert points.shape == (3, cols)
    for offset, row in enumerate(range(2, 5)):
        for col in range(cols):
            assert points[offset, col] == REFERENCE_VIEWPORT.pixel_to_complex(col, row, cols, rows)


def test_empty_grid():
    assert REFERENCE_VIEWPORT.grid(9, 7, 3, 3).shape == (0, 9)


def test_lock_aspect_keeps_imaginary_center():
    viewport = Viewport(-2.0, 1.0, -1.0, 1.0).lock_aspect(300, 100)
    assert viewport.real_min == -2.0 and viewport.real_max == 1.0
    assert viewport.imag_extent == pytest.approx(1.0)
    assert (viewport.imag_min + viewport.imag_max) / 2 == pytest.approx(0.0)


def test_reference_viewport_is_already_locked_for_three_by_two():
    viewport = REFERENCE_VIEWPORT.lock_aspect(6144, 4096)
    assert viewport.imag_min == pytest.approx(-1.0)
    assert viewport.imag_max == pytest.approx(1.0)


@pytest.mark.parametrize(
    "viewport",
    [
        Viewport(1.0, -2.0, -1.0, 1.0),
        Viewport(-2.0, 1.0, 1.0, 1.0),
        Viewport(-2.0, float("inf"), -1.0, 1.0),
        Viewport(float("nan"), 1.0, -1.0, 1.0),
    ],
)
def test_invalid_viewports(viewport):
    with pytest.raises(ConfigurationError):
        viewport.validate()
