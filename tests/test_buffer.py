import numpy as np
import PIL.Image
import pytest

from mandelbarf import SENTINEL, ConfigurationError, PixelBuffer


def test_new_buffer_has_one_entry_per_pixel():
    buffer = PixelBuffer(5, 3)
    assert buffer.bounds() == (5, 3)
    assert buffer.pixels.shape == (15, 4)
    assert buffer.pixels.dtype == np.uint8


def test_set_then_get_uses_row_major_offset():
    buffer = PixelBuffer(4, 3)
    buffer.set(2, 1, (10, 20, 30, 255))
    assert buffer.get(2, 1) == (10, 20, 30, 255)
    assert tuple(buffer.pixels[1 * 4 + 2]) == (10, 20, 30, 255)
    assert buffer.index(2, 1) == 6


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 3), (100, 100)])
def test_out_of_bounds_read_returns_sentinel(x, y):
    buffer = PixelBuffer(4, 3)
    assert buffer.get(x, y) == SENTINEL == (255, 0, 0, 255)


def test_out_of_bounds_write_is_ignored():
    buffer = PixelBuffer(4, 3)
    before = buffer.pixels.copy()
    buffer.set(4, 0, (1, 2, 3, 4))
    buffer.set(-1, 2, (1, 2, 3, 4))
    np.testing.assert_array_equal(buffer.pixels, before)


@pytest.mark.parametrize("width, height", [(0, 3), (3, 0), (-1, 2)])
def test_rejects_non_positive_dimensions(width, height):
    with pytest.raises(ConfigurationError):
        PixelBuffer(width, height)


def test_rows_view_writes_through():
    buffer = PixelBuffer(3, 4)
    band = buffer.rows(1, 3)
    assert band.shape == (2, 3, 4)
    band[...] = 7
    assert buffer.get(0, 0) == (0, 0, 0, 0)
    assert buffer.get(2, 1) == (7, 7, 7, 7)
    assert buffer.get(0, 2) == (7, 7, 7, 7)
    assert buffer.get(0, 3) == (0, 0, 0, 0)


def test_empty_rows_view():
    buffer = PixelBuffer(3, 4)
    assert buffer.rows(2, 2).shape == (0, 3, 4)


def test_from_array_and_to_image():
    array = np.zeros((2, 3, 4), dtype=np.uint8)
    array[1, 2] = (0, 128, 128, 255)
    buffer = PixelBuffer.from_array(array)
    assert buffer.bounds() == (3, 2)
    image = buffer.to_image()
    assert isinstance(image, PIL.Image.Image)
    assert image.mode == "RGBA"
    assert image.size == (3, 2)
    assert image.getpixel((2, 1)) == (0, 128, 128, 255)


def test_from_array_rejects_wrong_shape():
    with pytest.raises(ConfigurationError):
        PixelBuffer.from_array(np.zeros((2, 3), dtype=np.uint8))
