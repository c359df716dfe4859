import numpy as np

from eigenfaces.exceptions import GeometryMismatch, InsufficientTrainingData
from eigenfaces.image import ImageBuffer


def check_geometry(images):
    """
    Validate a training set.

    Args:
        images: Sequence of ImageBuffer objects

    Raises:
        InsufficientTrainingData: If fewer than 2 images are given
        GeometryMismatch: If the images differ in width, height or stride
    """
    if len(images) < 2:
        raise InsufficientTrainingData(
            f"At least 2 training images are required, got {len(images)}"
        )

    first = images[0]
    for i, image in enumerate(images[1:], 1):
        if not image.same_size(first):
            raise GeometryMismatch(
                f"Image {i} is {image.width}x{image.height}, "
                f"expected {first.width}x{first.height}"
            )
        if image.stride != first.stride:
            raise GeometryMismatch(
                f"Image {i} has stride {image.stride}, expected {first.stride}"
            )


def stack_images(images):
    """Visible pixels of every image as rows of an (n, width * height) matrix."""
    return np.vstack([image.flatten() for image in images])


def compute_mean(images):
    """Pixel-wise average of the training images."""
    check_geometry(images)
    stacked = stack_images(images)
    first = images[0]
    return ImageBuffer(first.width, first.height, stacked.mean(axis=0))


def compute_covariance(images, mean):
    """
    Raw inner products of the mean-centered training images.

    C[i][j] = sum over pixels of (image_i - mean) * (image_j - mean). The
    result is not divided by the pixel count nor by n - 1.

    Args:
        images: Sequence of n ImageBuffer objects
        mean: Mean image from compute_mean

    Returns:
        numpy.ndarray: Symmetric (n, n) float64 matrix
    """
    check_geometry(images)
    if not mean.same_size(images[0]):
        raise GeometryMismatch("Mean image size differs from the training images")

    centered = stack_images(images) - mean.flatten()
    gram = centered @ centered.T

    # upper triangle is authoritative
    upper = np.triu(gram)
    return upper + np.triu(gram, 1).T
