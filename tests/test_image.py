import numpy as np
import pytest

from eigenfaces.exceptions import GeometryMismatch
from eigenfaces.image import ImageBuffer, as_image


def test_from_array_sets_geometry():
    image = ImageBuffer.from_array(np.arange(12).reshape(3, 4))
    assert image.width == 4
    assert image.height == 3
    assert image.stride == 4
    assert image.size == (4, 3)
    assert image.data.dtype == np.float64
    assert len(image.data) == 12


def test_row_and_pixel_accessors():
    image = ImageBuffer.from_array(np.arange(12).reshape(3, 4))
    np.testing.assert_array_equal(image.row(1), [4, 5, 6, 7])
    assert image.pixel(2, 1) == 6.0
    with pytest.raises(IndexError):
        image.row(3)
    with pytest.raises(IndexError):
        image.pixel(4, 0)


def test_stride_padding_is_hidden():
    data = [1, 2, 99, 3, 4, 99]
    image = ImageBuffer(2, 2, data, stride=3)
    np.testing.assert_array_equal(image.pixels, [[1, 2], [3, 4]])
    np.testing.assert_array_equal(image.flatten(), [1, 2, 3, 4])
    assert image == ImageBuffer.from_array([[1, 2], [3, 4]])
    assert not image.same_geometry(ImageBuffer.from_array([[1, 2], [3, 4]]))


def test_from_array_with_stride_pads():
    image = ImageBuffer.from_array([[1, 2], [3, 4]], stride=5)
    assert image.stride == 5
    assert len(image.data) == 10
    np.testing.assert_array_equal(image.pixels, [[1, 2], [3, 4]])


def test_data_is_read_only():
    image = ImageBuffer.from_array(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        image.data[0] = 1.0


def test_source_array_is_copied():
    source = np.zeros((2, 2))
    image = ImageBuffer.from_array(source)
    source[0, 0] = 7
    assert image.pixel(0, 0) == 0.0


@pytest.mark.parametrize("width,height,stride,n", [
    (0, 2, None, 0),
    (2, 2, 1, 2),
    (2, 2, None, 3),
])
def test_invalid_geometry(width, height, stride, n):
    with pytest.raises(GeometryMismatch):
        ImageBuffer(width, height, np.zeros(n), stride=stride)


def test_from_uint8_converts_to_float():
    image = ImageBuffer.from_uint8(np.array([[0, 255]], dtype=np.uint8))
    assert image.data.dtype == np.float64
    np.testing.assert_array_equal(image.pixels, [[0.0, 255.0]])


def test_from_uint8_rejects_out_of_range():
    with pytest.raises(ValueError):
        ImageBuffer.from_uint8(np.array([[0, 256]]))


def test_as_image():
    image = ImageBuffer.from_array(np.ones((2, 2)))
    assert as_image(image) is image
    assert as_image(np.ones((2, 3))).width == 3
    assert as_image(np.full((2, 2), 9, dtype=np.uint8)).pixel(1, 1) == 9.0
    with pytest.raises(GeometryMismatch):
        as_image(np.ones(4))
