import numpy as np

from eigenfaces.eigenspace import build_eigen_space
from eigenfaces.experiments import reconstruction_error, run_component_experiments
from eigenfaces.preprocessing import to_gray_levels, to_labeled_images


def test_reconstruction_error_of_training_faces(random_faces):
    space = build_eigen_space(random_faces, eps=1e-6)
    assert reconstruction_error(random_faces, space) < 1e-2


def test_component_experiments(clustered_faces):
    labels, images = clustered_faces
    train = [(label, image) for k, (label, image) in enumerate(zip(labels, images)) if k % 3]
    test = [(label, image) for k, (label, image) in enumerate(zip(labels, images)) if not k % 3]

    results = run_component_experiments(
        train, [image for _, image in test], [label for label, _ in test],
        components_list=[1, 3], plot=False, verbose=False
    )

    assert set(results) == {1, 3}
    assert results[1]["component_count"] == 1
    assert results[3]["component_count"] <= 3
    assert results[3]["accuracy"] == 1.0


def test_to_labeled_images_uses_target_names():
    images = np.zeros((2, 3, 4))
    pairs = to_labeled_images(images, np.array([1, 0]), np.array(["ann", "ben"]))
    assert [label for label, _ in pairs] == ["ben", "ann"]
    assert pairs[0][1].size == (4, 3)


def test_to_gray_levels_rescales_unit_range():
    np.testing.assert_allclose(to_gray_levels([[0.0, 1.0]]), [[0.0, 255.0]])
    np.testing.assert_allclose(to_gray_levels([[0.0, 200.0]]), [[0.0, 200.0]])
