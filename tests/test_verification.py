import numpy as np
import pytest

from eigenfaces.eigenspace import build_eigen_space
from eigenfaces.verification import (
    calculate_eer, generate_pairs, pair_distances, run_verification_study
)


def test_generate_pairs_is_balanced():
    labels = np.array(["a", "a", "b", "b", "c"])
    idx1, idx2, pair_labels = generate_pairs(labels, n_pairs=20)

    assert len(pair_labels) == 20
    assert pair_labels.sum() == 10
    for i, j, genuine in zip(idx1, idx2, pair_labels):
        assert i != j
        assert (labels[i] == labels[j]) == bool(genuine)


def test_generate_pairs_is_reproducible():
    labels = ["a", "a", "b", "b"]
    first = generate_pairs(labels, n_pairs=10, random_state=3)
    second = generate_pairs(labels, n_pairs=10, random_state=3)
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize("labels", [["a", "b", "c"], ["a", "a", "a"]])
def test_generate_pairs_needs_both_kinds(labels):
    with pytest.raises(ValueError):
        generate_pairs(labels, n_pairs=4)


def test_pair_distances():
    coefficients = np.array([[0.0, 0.0], [3.0, 4.0], [6.0, 8.0]])
    np.testing.assert_allclose(pair_distances(coefficients, [0, 1], [1, 2]), [5.0, 5.0])


def test_calculate_eer():
    fpr = np.array([0.0, 0.1, 0.3, 1.0])
    tpr = np.array([0.0, 0.6, 0.7, 1.0])
    thresholds = np.array([10.0, 5.0, 3.0, 1.0])
    eer, threshold = calculate_eer(fpr, tpr, thresholds)
    assert eer == pytest.approx(0.3)
    assert threshold == 3.0


def test_verification_separates_identities(clustered_faces):
    labels, images = clustered_faces
    space = build_eigen_space(images)

    result = run_verification_study(space, images, labels, n_pairs=60, plot=False)

    assert result["auc"] > 0.95
    assert result["eer"] < 0.1
    assert result["distance_threshold"] > 0
