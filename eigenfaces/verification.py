"""
This module implements face verification evaluation in eigen space and uses
it to pick a rejection threshold for the recognizer.

Key concepts:
- Genuine pairs: Two images of the same person (should be close)
- Impostor pairs: Two images of different people (should be far apart)
- Equal Error Rate (EER): The point where false accept rate equals false reject rate
- ROC-AUC: Area under the ROC curve measuring verification performance

Scores are negated eigen-distances, so a larger score means "more alike" as
scikit-learn's ROC utilities expect.
"""

import numpy as np
from sklearn.metrics import roc_curve, auc
import config
from eigenfaces.projection import eigen_decomposite
from eigenfaces.utils import plot_distance_distribution


def generate_pairs(labels, n_pairs=config.VERIFICATION_N_PAIRS, random_state=config.RANDOM_STATE):
    """
    Generate genuine and impostor index pairs for verification evaluation.

    Args:
        labels: Label array indicating person identity
        n_pairs: Total number of pairs to generate (half genuine, half impostor)
        random_state: Seed for the pair sampler

    Returns:
        tuple: (indices_1, indices_2, pair_labels) where pair_labels is
               1 for genuine and 0 for impostor pairs

    Raises:
        ValueError: If no identity has two images or only one identity exists
    """
    labels = np.asarray(labels)
    rng = np.random.default_rng(random_state)
    unique_labels, counts = np.unique(labels, return_counts=True)

    repeated = unique_labels[counts >= 2]
    if len(repeated) == 0:
        raise ValueError("Genuine pairs need at least one identity with 2 images")
    if len(unique_labels) < 2:
        raise ValueError("Impostor pairs need at least 2 identities")

    indices_1, indices_2, pair_labels = [], [], []

    # Genuine pairs (same person)
    while len(pair_labels) < n_pairs // 2:
        label = rng.choice(repeated)
        idx = np.where(labels == label)[0]
        i, j = rng.choice(idx, 2, replace=False)
        indices_1.append(i)
        indices_2.append(j)
        pair_labels.append(1)

    # Impostor pairs (different people)
    while len(pair_labels) < n_pairs:
        i, j = rng.choice(len(labels), 2, replace=False)
        if labels[i] != labels[j]:
            indices_1.append(i)
            indices_2.append(j)
            pair_labels.append(0)

    return np.array(indices_1, dtype=int), np.array(indices_2, dtype=int), np.array(pair_labels)


def pair_distances(coefficients, indices_1, indices_2):
    """Euclidean distance between the coefficient rows of each pair."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    diff = coefficients[indices_1] - coefficients[indices_2]
    return np.sqrt(np.sum(diff * diff, axis=1))


def calculate_eer(fpr, tpr, thresholds):
    """
    Calculate the Equal Error Rate (EER) from ROC curve data.

    Args:
        fpr: False positive rates at different thresholds
        tpr: True positive rates at different thresholds
        thresholds: Threshold values corresponding to FPR/TPR points

    Returns:
        tuple: (eer, threshold) where eer is the equal error rate and
               threshold is the operating point that achieves this EER
    """
    fnr = 1 - tpr
    idx = np.nanargmin(np.absolute(fnr - fpr))
    return fpr[idx], thresholds[idx]


def run_verification_study(eigen_space, images, labels, n_pairs=config.VERIFICATION_N_PAIRS, plot=True):
    """
    Evaluate how well eigen-distances separate genuine from impostor pairs.

    Args:
        eigen_space: EigenSpace used to encode the images
        images: Sequence of ImageBuffers or 2-D arrays
        labels: Identity of each image
        n_pairs: Number of pairs to sample
        plot: Whether to save the distance distribution figure

    Returns:
        dict: auc, eer, and distance_threshold (the EER operating point,
              usable as the recognizer's rejection threshold)
    """
    coefficients = np.array([eigen_decomposite(image, eigen_space).values for image in images])
    idx1, idx2, y_true = generate_pairs(labels, n_pairs=n_pairs)
    distances = pair_distances(coefficients, idx1, idx2)

    fpr, tpr, thresholds = roc_curve(y_true, -distances)
    roc_auc = auc(fpr, tpr)
    eer, best_th = calculate_eer(fpr, tpr, thresholds)
    distance_threshold = float(-best_th)

    print(f"Eigen-distance AUC: {roc_auc:.4f}, EER: {eer:.4f}, threshold: {distance_threshold:.2f}")

    if plot:
        plot_distance_distribution(distances[y_true == 1], distances[y_true == 0],
                                   threshold=distance_threshold)

    return {"auc": float(roc_auc), "eer": float(eer), "distance_threshold": distance_threshold}
