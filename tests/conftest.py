import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from eigenfaces.image import ImageBuffer


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_faces(rng):
    """Six random 10x10 'faces' in the 0-255 range."""
    return [ImageBuffer.from_array(rng.uniform(0, 255, size=(10, 10))) for _ in range(6)]


@pytest.fixture
def gray_and_white():
    gray = ImageBuffer.from_uint8(np.full((4, 4), 128, dtype=np.uint8))
    white = ImageBuffer.from_uint8(np.full((4, 4), 255, dtype=np.uint8))
    return gray, white


@pytest.fixture
def clustered_faces(rng):
    """Two identities, six noisy shots each, as (labels, images)."""
    bases = {"alice": rng.uniform(0, 255, size=(8, 8)),
             "bob": rng.uniform(0, 255, size=(8, 8))}
    labels, images = [], []
    for label, base in bases.items():
        for _ in range(6):
            labels.append(label)
            images.append(ImageBuffer.from_array(base + rng.normal(0, 5, size=(8, 8))))
    return labels, images
