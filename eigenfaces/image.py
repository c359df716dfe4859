"""
This module defines the pixel container shared by training images, the mean
image and the eigen-images.

Pixels are stored as a flat float64 array of stride * height samples. Rows
start every `stride` samples; samples past `width` in a row are padding and
are never read by any computation.
"""

import numpy as np

from eigenfaces.exceptions import GeometryMismatch


class ImageBuffer:
    """
    Read-only grayscale image backed by a flat float64 array.

    Attributes:
        width: Number of visible pixels per row
        height: Number of rows
        stride: Number of samples per row (>= width)
        data: Flat read-only array of stride * height samples
    """

    def __init__(self, width, height, data=None, stride=None):
        """
        Initialize the buffer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            data: Optional flat sequence of stride * height samples
                  (zeros when omitted)
            stride: Samples per row, defaults to width

        Raises:
            GeometryMismatch: If the sizes are inconsistent with the data
        """
        if stride is None:
            stride = width
        if width < 1 or height < 1:
            raise GeometryMismatch(f"Invalid image size {width}x{height}")
        if stride < width:
            raise GeometryMismatch(f"Stride {stride} is smaller than width {width}")

        if data is None:
            samples = np.zeros(stride * height, dtype=np.float64)
        else:
            samples = np.array(data, dtype=np.float64).ravel()
            if samples.size != stride * height:
                raise GeometryMismatch(
                    f"Expected {stride * height} samples for {width}x{height} "
                    f"(stride {stride}), got {samples.size}"
                )
        samples.setflags(write=False)

        self._width = int(width)
        self._height = int(height)
        self._stride = int(stride)
        self._data = samples

    @classmethod
    def from_array(cls, array, stride=None):
        """Build a buffer from a 2-D (height, width) array of real values."""
        pixels = np.asarray(array, dtype=np.float64)
        if pixels.ndim != 2:
            raise GeometryMismatch(f"Expected a 2-D array, got shape {pixels.shape}")
        height, width = pixels.shape
        if stride is None or stride == width:
            return cls(width, height, pixels)

        if stride < width:
            raise GeometryMismatch(f"Stride {stride} is smaller than width {width}")
        padded = np.zeros((height, stride), dtype=np.float64)
        padded[:, :width] = pixels
        return cls(width, height, padded, stride=stride)

    @classmethod
    def from_uint8(cls, array, stride=None):
        """Build a buffer from an 8-bit grayscale array, converting to float64."""
        pixels = np.asarray(array)
        if pixels.dtype != np.uint8:
            if np.any(pixels < 0) or np.any(pixels > 255):
                raise ValueError("8-bit grayscale samples must lie in [0, 255]")
            pixels = pixels.astype(np.uint8)
        return cls.from_array(pixels.astype(np.float64), stride=stride)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def stride(self):
        return self._stride

    @property
    def data(self):
        return self._data

    @property
    def size(self):
        """(width, height) tuple."""
        return self._width, self._height

    @property
    def pixels(self):
        """Read-only (height, width) view of the visible pixels."""
        return self._data.reshape(self._height, self._stride)[:, :self._width]

    def row(self, y):
        """Visible samples of row `y`."""
        if not 0 <= y < self._height:
            raise IndexError(f"Row {y} out of range for height {self._height}")
        start = y * self._stride
        return self._data[start:start + self._width]

    def pixel(self, x, y):
        if not 0 <= x < self._width:
            raise IndexError(f"Column {x} out of range for width {self._width}")
        return float(self.row(y)[x])

    def flatten(self):
        """Visible pixels as a contiguous 1-D float64 array (row-major)."""
        return np.ascontiguousarray(self.pixels).ravel()

    def same_size(self, other):
        return self._width == other.width and self._height == other.height

    def same_geometry(self, other):
        return self.same_size(other) and self._stride == other.stride

    def __eq__(self, other):
        if not isinstance(other, ImageBuffer):
            return NotImplemented
        return self.same_size(other) and np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"ImageBuffer(width={self._width}, height={self._height}, stride={self._stride})"


def as_image(image):
    """Return `image` as an ImageBuffer, converting 2-D arrays when needed."""
    if isinstance(image, ImageBuffer):
        return image
    pixels = np.asarray(image)
    if pixels.dtype == np.uint8:
        return ImageBuffer.from_uint8(pixels)
    return ImageBuffer.from_array(pixels)
