"""
This module builds the face space from a set of training images.

The n x n covariance of the mean-centered training images is diagonalized
with the Jacobi solver, and every retained eigenvector is turned into an
eigen-image: a weighted sum of the centered training images scaled by
1 / sqrt(eigenvalue). This avoids forming the (pixels x pixels) covariance
matrix altogether.

Key concepts:
- Mean image: pixel-wise average of the training set
- Eigen-image: one unit-norm basis vector of face space, shaped like an image
- Component count: number of eigen-images kept, at most n - 1
"""

import logging
import math

import numpy as np

import config
from eigenfaces.covariance import check_geometry, compute_covariance, compute_mean, stack_images
from eigenfaces.exceptions import GeometryMismatch, NonPositiveEigenvalue
from eigenfaces.image import ImageBuffer
from eigenfaces.jacobi import jacobi_eigens

logger = logging.getLogger(__name__)


class EigenSpace:
    """
    Immutable face space: a mean image plus ranked eigen-images.

    Attributes:
        mean: Mean ImageBuffer of the training set
        eigen_images: Tuple of eigen-image ImageBuffers, largest eigenvalue first
        eigenvalues: Read-only array with the eigenvalue of each retained
                     component (diagnostic only)
        eps: Ratio |eigenvalue[last] / eigenvalue[0]| actually reached
    """

    def __init__(self, mean, eigen_images, eigenvalues=None, eps=None):
        eigen_images = tuple(eigen_images)
        if not eigen_images:
            raise ValueError("An eigen space needs at least one eigen-image")
        for i, eigen_image in enumerate(eigen_images):
            if not eigen_image.same_size(mean):
                raise GeometryMismatch(
                    f"Eigen-image {i} is {eigen_image.width}x{eigen_image.height}, "
                    f"mean is {mean.width}x{mean.height}"
                )

        if eigenvalues is None:
            eigenvalues = np.full(len(eigen_images), np.nan)
        eigenvalues = np.array(eigenvalues, dtype=np.float64)
        eigenvalues.setflags(write=False)

        basis = stack_images(eigen_images)
        basis.setflags(write=False)

        self._mean = mean
        self._eigen_images = eigen_images
        self._eigenvalues = eigenvalues
        self._eps = eps
        self._basis = basis

    @property
    def mean(self):
        return self._mean

    @property
    def eigen_images(self):
        return self._eigen_images

    @property
    def eigenvalues(self):
        return self._eigenvalues

    @property
    def eps(self):
        return self._eps

    @property
    def basis(self):
        """(component_count, width * height) matrix, one eigen-image per row."""
        return self._basis

    @property
    def component_count(self):
        return len(self._eigen_images)

    @property
    def width(self):
        return self._mean.width

    @property
    def height(self):
        return self._mean.height

    def __len__(self):
        return self.component_count

    def __repr__(self):
        return (f"EigenSpace(components={self.component_count}, "
                f"size={self.width}x{self.height})")


def count_components(eigenvalues, max_components, eps):
    """
    Number of leading components to keep.

    Components are kept while |eigenvalues[i] / eigenvalues[0]| >= eps, up
    to min(max_components, n - 1). A max_components <= 0 or larger than n
    means n.
    """
    n = len(eigenvalues)
    if max_components <= 0 or max_components > n:
        max_components = n
    limit = min(max_components, n - 1)

    if eigenvalues[0] == 0:
        raise NonPositiveEigenvalue(0, float(eigenvalues[0]))

    count = 0
    for i in range(limit):
        if abs(eigenvalues[i] / eigenvalues[0]) < eps:
            break
        count += 1
    return count


def build_eigen_space(images, max_components=config.MAX_COMPONENTS, eps=config.EIGEN_EPS,
                      jacobi_eps=config.JACOBI_EPS):
    """
    Build an EigenSpace from training images.

    Args:
        images: Sequence of at least 2 ImageBuffer objects sharing one geometry
        max_components: Upper bound on kept components (<= 0 means all)
        eps: Eigenvalue-ratio cutoff, recommended around 0.001
        jacobi_eps: Accuracy passed to the Jacobi solver

    Returns:
        EigenSpace: Mean image and ranked eigen-images

    Raises:
        InsufficientTrainingData: If fewer than 2 images are given
        GeometryMismatch: If the images differ in width, height or stride
        NonPositiveEigenvalue: If a retained eigenvalue is <= 0
    """
    images = list(images)
    check_geometry(images)
    if eps > 1.0:
        raise ValueError(f"eps must not exceed 1, got {eps}")

    n = len(images)
    first = images[0]

    mean = compute_mean(images)
    covariance = compute_covariance(images, mean)
    eigenvalues, eigenvectors = jacobi_eigens(covariance, jacobi_eps)

    count = count_components(eigenvalues, max_components, eps)

    weights = np.empty(count)
    for i in range(count):
        if eigenvalues[i] <= 0:
            raise NonPositiveEigenvalue(i, float(eigenvalues[i]))
        weights[i] = 1.0 / math.sqrt(eigenvalues[i])

    centered = stack_images(images) - mean.flatten()
    basis = (weights[:, np.newaxis] * eigenvectors[:count]) @ centered

    eigen_images = [ImageBuffer(first.width, first.height, row) for row in basis]
    reached_eps = abs(eigenvalues[count - 1] / eigenvalues[0])

    logger.info("Built eigen space from %d images (%dx%d): %d components, eps %.3g",
                n, first.width, first.height, count, reached_eps)

    return EigenSpace(mean, eigen_images, 1.0 / (weights * weights), reached_eps)
