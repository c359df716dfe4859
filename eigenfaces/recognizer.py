"""
Nearest-neighbor face recognition in eigen space.

A recognizer holds one immutable TrainedModel (eigen space, labels,
coefficient table and rejection threshold). Training builds a complete new
model and publishes it with a single attribute assignment, so a concurrent
`recognize` call always works on either the old or the new model, never a
mix of both. A failed training leaves the previous model in place.
"""

import logging

import numpy as np

import config
from eigenfaces.eigenspace import build_eigen_space
from eigenfaces.exceptions import InsufficientTrainingData
from eigenfaces.image import as_image
from eigenfaces.projection import eigen_decomposite

logger = logging.getLogger(__name__)

NO_MATCH_DISTANCE = -1.0


class TrainedModel:
    """
    Snapshot of everything `recognize` needs.

    Attributes:
        eigen_space: EigenSpace built from the enrolled faces
        labels: Tuple of labels in enrollment order
        coefficients: Read-only (n_faces, component_count) array
        threshold: Rejection threshold, <= 0 disables rejection
    """

    def __init__(self, eigen_space, labels, coefficients, threshold):
        coefficients = np.array(coefficients, dtype=np.float64)
        coefficients.setflags(write=False)
        self.eigen_space = eigen_space
        self.labels = tuple(labels)
        self.coefficients = coefficients
        self.threshold = float(threshold)

    def with_threshold(self, threshold):
        return TrainedModel(self.eigen_space, self.labels, self.coefficients, threshold)

    def distances(self, query):
        """L2 distance from query coefficients to every enrolled face."""
        diff = self.coefficients - query.values
        return np.sqrt(np.sum(diff * diff, axis=1))

    def accepts(self, distance):
        return self.threshold <= 0 or distance < self.threshold


class EigenfaceRecognizer:
    """
    Classify faces by distance to enrolled faces in eigen space.

    Attributes:
        max_components: Upper bound on eigen-images (<= 0 means all)
        eps: Eigenvalue-ratio cutoff used when building the eigen space
    """

    def __init__(self, threshold=config.EIGEN_DISTANCE_THRESHOLD,
                 max_components=config.MAX_COMPONENTS, eps=config.EIGEN_EPS):
        self.max_components = max_components
        self.eps = eps
        self._threshold = float(threshold)
        self._model = None

    @property
    def snapshot(self):
        """Current TrainedModel, or None before the first successful train."""
        return self._model

    @property
    def is_trained(self):
        return self._model is not None

    @property
    def threshold(self):
        model = self._model
        return model.threshold if model is not None else self._threshold

    @property
    def eigen_space(self):
        model = self._model
        return model.eigen_space if model is not None else None

    @property
    def labels(self):
        model = self._model
        return model.labels if model is not None else ()

    def set_threshold(self, threshold):
        """Change the rejection threshold without retraining."""
        self._threshold = float(threshold)
        model = self._model
        if model is not None:
            self._model = model.with_threshold(threshold)

    def train(self, labeled_images, threshold=None):
        """
        Enroll a set of labeled faces, replacing any previous training.

        Args:
            labeled_images: Iterable of (label, image) pairs; images are
                            ImageBuffers or 2-D arrays of one size
            threshold: Optional new rejection threshold

        Returns:
            EigenfaceRecognizer: self

        Raises:
            InsufficientTrainingData: If fewer than 2 faces are given
            GeometryMismatch: If the faces differ in size
            NonPositiveEigenvalue: If the training set is degenerate
        """
        pairs = list(labeled_images)
        if len(pairs) < 2:
            raise InsufficientTrainingData(
                f"At least 2 training images are required, got {len(pairs)}"
            )
        if threshold is None:
            threshold = self.threshold

        labels = [label for label, _ in pairs]
        images = [as_image(image) for _, image in pairs]

        eigen_space = build_eigen_space(images, self.max_components, self.eps)
        coefficients = [eigen_decomposite(image, eigen_space).values for image in images]

        self._model = TrainedModel(eigen_space, labels, coefficients, threshold)
        self._threshold = float(threshold)

        logger.info("Trained recognizer on %d faces (%d identities), %d components, threshold %g",
                    len(labels), len(set(labels)), eigen_space.component_count, threshold)
        return self

    def get_eigen_distances(self, image):
        """Distance from `image` to every enrolled face, in enrollment order."""
        model = self._model
        if model is None:
            return np.empty(0)
        return model.distances(eigen_decomposite(image, model.eigen_space))

    def find_most_similar(self, image):
        """
        Locate the nearest enrolled face.

        Returns:
            tuple: (index, distance, label), or (-1, -1.0, None) when untrained
        """
        model = self._model
        if model is None:
            return -1, NO_MATCH_DISTANCE, None
        return self._nearest(model, image)

    def recognize(self, image):
        """
        Identify a face.

        Returns:
            tuple: (label, distance). label is None when the nearest face is
                   not closer than the threshold; distance is -1.0 when the
                   recognizer has not been trained.
        """
        model = self._model
        if model is None:
            return None, NO_MATCH_DISTANCE

        _, distance, label = self._nearest(model, image)
        if not model.accepts(distance):
            logger.debug("Rejected face: nearest %r at %.4f (threshold %g)",
                         label, distance, model.threshold)
            return None, distance
        return label, distance

    @staticmethod
    def _nearest(model, image):
        distances = model.distances(eigen_decomposite(image, model.eigen_space))
        # argmin keeps the lowest enrollment index on ties
        index = int(np.argmin(distances))
        return index, float(distances[index]), model.labels[index]
