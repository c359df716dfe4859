"""
This module loads the Labeled Faces in the Wild (LFW) dataset used to
evaluate the recognizer.

It provides functionality for:
- Loading grayscale face images with configurable filtering criteria
- Bringing pixel values to the 0-255 range the engine is calibrated for
- Splitting data into enrollment (train) and query (test) sets with
  stratified sampling
- Wrapping images as (label, ImageBuffer) pairs for enrollment
"""

import numpy as np
from sklearn.model_selection import train_test_split
from sklearn.datasets import fetch_lfw_people
import config
from eigenfaces.image import ImageBuffer


class DataPreprocessor:
    """
    Data preparation pipeline for recognizer evaluation.

    Attributes:
        data_info: Dictionary containing dataset metadata
    """

    def __init__(self):
        """Initialize the preprocessor with empty state."""
        self.data_info = {}

    def load_dataset(self, min_faces=config.MIN_FACES_PER_PERSON, resize=config.RESIZE_FACTOR):
        """
        Load the LFW face dataset with specified parameters.

        Fetches the Labeled Faces in the Wild dataset from scikit-learn,
        filtering to include only individuals with a minimum number of images.

        Args:
            min_faces: Minimum number of images required per person
            resize: Scaling factor for image dimensions (0.5 = half size)

        Returns:
            tuple: (images, y, target_names) with an (n, h, w) float64 array
                   in the 0-255 range, integer labels and the class names
        """
        print(f"Loading LFW dataset (min_faces={min_faces}, resize={resize})...")

        lfw_people = fetch_lfw_people(
            min_faces_per_person=min_faces,
            resize=resize,
            color=False
        )

        images = to_gray_levels(lfw_people.images)
        y = lfw_people.target
        target_names = lfw_people.target_names

        n_samples, h, w = images.shape

        self.data_info = {
            "n_samples": n_samples,
            "n_features": h * w,
            "n_classes": len(target_names),
            "image_shape": (h, w),
            "target_names": target_names
        }

        print(f"Dataset loaded: {n_samples} samples, {len(target_names)} classes")
        print(f"Image shape: {h}x{w} = {h * w} pixels")

        return images, y, target_names

    def split_data(self, images, y, test_size=config.TEST_SIZE):
        """
        Split faces into enrollment and query sets.

        Args:
            images: Array of shape (n_samples, h, w)
            y: Label array of shape (n_samples,)
            test_size: Proportion of data to use as queries

        Returns:
            dict: Train/test images and labels
        """
        X_train, X_test, y_train, y_test = train_test_split(
            images, y, test_size=test_size, stratify=y, random_state=config.RANDOM_STATE
        )

        print(f"Enrollment set: {X_train.shape[0]} faces")
        print(f"Query set: {X_test.shape[0]} faces")

        return {
            "X_train": X_train,
            "X_test": X_test,
            "y_train": y_train,
            "y_test": y_test
        }

    def get_data_info(self):
        """
        Retrieve stored dataset metadata.

        Returns:
            dict: Dataset information including dimensions and class count
        """
        return self.data_info


def to_gray_levels(images):
    """Rescale images stored in [0, 1] to [0, 255]; others are returned as float64."""
    images = np.asarray(images, dtype=np.float64)
    if images.size and images.max() <= 1.0:
        images = images * 255.0
    return images


def to_labeled_images(images, y, target_names=None):
    """
    Pair every image with its label.

    Args:
        images: Array of shape (n_samples, h, w)
        y: Integer label array
        target_names: Optional class names used as labels instead of integers

    Returns:
        list: (label, ImageBuffer) tuples in input order
    """
    pairs = []
    for image, target in zip(images, y):
        label = str(target_names[target]) if target_names is not None else str(target)
        pairs.append((label, ImageBuffer.from_array(image)))
    return pairs


def compute_dataset_statistics(y, target_names):
    """Per-identity image counts."""
    unique, counts = np.unique(y, return_counts=True)
    return {
        "n_samples": int(len(y)),
        "n_classes": int(len(unique)),
        "per_class": {str(target_names[i]): int(c) for i, c in zip(unique, counts)},
        "min_per_class": int(counts.min()),
        "max_per_class": int(counts.max())
    }


def print_dataset_statistics(stats):
    print(f"Samples: {stats['n_samples']}, identities: {stats['n_classes']}")
    print(f"Images per identity: {stats['min_per_class']} - {stats['max_per_class']}")
    for name, count in stats["per_class"].items():
        print(f"  {name}: {count}")
