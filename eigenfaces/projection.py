"""
Projection of images into (and back out of) an eigen space.
"""

import numpy as np

from eigenfaces.exceptions import GeometryMismatch
from eigenfaces.image import ImageBuffer, as_image


class FaceCoefficients:
    """
    Coordinates of one image in an eigen space.

    Attributes:
        values: Read-only float64 array, one entry per eigen-image
        label: Identity of the face, None for query images
    """

    def __init__(self, values, label=None):
        values = np.array(values, dtype=np.float64).ravel()
        values.setflags(write=False)
        self.values = values
        self.label = label

    def distance_to(self, other):
        """Euclidean distance between two coefficient vectors."""
        other_values = other.values if isinstance(other, FaceCoefficients) else np.asarray(other)
        if other_values.shape != self.values.shape:
            raise ValueError(
                f"Cannot compare {len(self.values)} coefficients with {len(other_values)}"
            )
        diff = self.values - other_values
        return float(np.sqrt(np.dot(diff, diff)))

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values.tolist())

    def __getitem__(self, index):
        return self.values[index]

    def __repr__(self):
        return f"FaceCoefficients(label={self.label!r}, n={len(self.values)})"


def eigen_decomposite(image, eigen_space, label=None):
    """
    Project an image onto every eigen-image of `eigen_space`.

    coefficient_i = sum over pixels of eigen_i * (image - mean)

    Args:
        image: ImageBuffer or 2-D array with the eigen space's size
        eigen_space: Target EigenSpace
        label: Optional label attached to the result

    Returns:
        FaceCoefficients: component_count coefficients

    Raises:
        GeometryMismatch: If the image size differs from the eigen space
    """
    image = as_image(image)
    if not image.same_size(eigen_space.mean):
        raise GeometryMismatch(
            f"Image is {image.width}x{image.height}, eigen space is "
            f"{eigen_space.width}x{eigen_space.height}"
        )

    centered = image.flatten() - eigen_space.mean.flatten()
    return FaceCoefficients(eigen_space.basis @ centered, label=label)


def eigen_reconstruct(coefficients, eigen_space):
    """Approximate an image as mean + sum_i coefficient_i * eigen_i."""
    values = coefficients.values if isinstance(coefficients, FaceCoefficients) \
        else np.asarray(coefficients, dtype=np.float64)
    if len(values) != eigen_space.component_count:
        raise ValueError(
            f"Expected {eigen_space.component_count} coefficients, got {len(values)}"
        )

    pixels = eigen_space.mean.flatten() + values @ eigen_space.basis
    return ImageBuffer(eigen_space.width, eigen_space.height, pixels)
