from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from eigenfaces.exceptions import GeometryMismatch, InsufficientTrainingData, NonPositiveEigenvalue
from eigenfaces.image import ImageBuffer
from eigenfaces.recognizer import NO_MATCH_DISTANCE, EigenfaceRecognizer


@pytest.fixture
def trained(random_faces):
    recognizer = EigenfaceRecognizer(threshold=0, eps=1e-6)
    labels = [f"person_{i}" for i in range(len(random_faces))]
    return recognizer.train(zip(labels, random_faces))


@pytest.mark.parametrize("threshold", [1e-9, 1.0, 2000.0])
def test_gray_query_matches_gray(gray_and_white, threshold):
    gray, white = gray_and_white
    recognizer = EigenfaceRecognizer()
    recognizer.train([("A", gray), ("B", white)], threshold=threshold)

    assert recognizer.recognize(gray) == ("A", 0.0)
    assert recognizer.recognize(white)[0] == "B"


def test_untrained_recognizer_returns_sentinel(gray_and_white):
    recognizer = EigenfaceRecognizer()
    assert not recognizer.is_trained
    assert recognizer.recognize(gray_and_white[0]) == (None, NO_MATCH_DISTANCE)
    assert recognizer.find_most_similar(gray_and_white[0]) == (-1, -1.0, None)
    assert len(recognizer.get_eigen_distances(gray_and_white[0])) == 0
    assert recognizer.labels == ()
    assert recognizer.eigen_space is None


@pytest.mark.parametrize("count", [0, 1])
def test_train_needs_two_faces(gray_and_white, count):
    recognizer = EigenfaceRecognizer()
    with pytest.raises(InsufficientTrainingData):
        recognizer.train([("A", gray_and_white[0])] * count)
    assert not recognizer.is_trained


def test_self_recognition(trained, random_faces):
    for i, face in enumerate(random_faces):
        label, distance = trained.recognize(face)
        assert label == f"person_{i}"
        assert distance == pytest.approx(0.0, abs=1e-9)
        index, _, _ = trained.find_most_similar(face)
        assert index == i


def test_component_count_at_least_one(trained):
    assert trained.eigen_space.component_count >= 1


def test_recognize_is_idempotent(trained, rng):
    query = rng.uniform(0, 255, size=(10, 10))
    assert trained.recognize(query) == trained.recognize(query)


def test_threshold_boundary(trained, rng):
    query = ImageBuffer.from_array(rng.uniform(0, 255, size=(10, 10)))
    nearest, d = trained.recognize(query)
    assert nearest is not None
    assert d > 0

    trained.set_threshold(d + 1e-6)
    assert trained.recognize(query) == (nearest, d)

    trained.set_threshold(d - 1e-6)
    assert trained.recognize(query) == (None, d)

    trained.set_threshold(d)
    assert trained.recognize(query) == (None, d)

    for threshold in (0, -5.0):
        trained.set_threshold(threshold)
        assert trained.recognize(query) == (nearest, d)


def test_distances_match_recognize(trained, rng):
    query = rng.uniform(0, 255, size=(10, 10))
    distances = trained.get_eigen_distances(query)
    assert len(distances) == 6
    label, distance = trained.recognize(query)
    assert distance == distances.min()
    assert label == trained.labels[int(np.argmin(distances))]


def test_ties_go_to_first_enrolled(random_faces):
    face = random_faces[0]
    recognizer = EigenfaceRecognizer(threshold=0)
    recognizer.train([("first", face), ("second", face),
                      ("other", random_faces[1]), ("another", random_faces[2])])
    assert recognizer.recognize(face) == ("first", 0.0)


def test_duplicate_labels_are_allowed(random_faces):
    recognizer = EigenfaceRecognizer(threshold=0)
    recognizer.train([("same", random_faces[0]), ("same", random_faces[1]),
                      ("other", random_faces[2])])
    assert recognizer.recognize(random_faces[1])[0] == "same"
    assert recognizer.labels == ("same", "same", "other")


def test_failed_training_keeps_previous_model(trained, random_faces):
    before = trained.snapshot
    flat = ImageBuffer.from_array(np.full((10, 10), 3.0))

    with pytest.raises(NonPositiveEigenvalue):
        trained.train([("x", flat), ("y", flat)])
    assert trained.snapshot is before

    with pytest.raises(GeometryMismatch):
        trained.train([("x", random_faces[0]), ("y", np.zeros((5, 5)))])
    assert trained.snapshot is before

    assert trained.recognize(random_faces[3])[0] == "person_3"


def test_retraining_replaces_model(trained, gray_and_white):
    gray, white = gray_and_white
    trained.train([("A", gray), ("B", white)])
    assert trained.labels == ("A", "B")
    assert trained.eigen_space.width == 4
    assert trained.recognize(white) == ("B", 0.0)


def test_query_size_mismatch(trained):
    with pytest.raises(GeometryMismatch):
        trained.recognize(np.zeros((4, 4)))


def test_train_accepts_uint8_arrays(rng):
    faces = [rng.integers(0, 256, size=(6, 6), dtype=np.uint8) for _ in range(4)]
    recognizer = EigenfaceRecognizer(threshold=0)
    recognizer.train([(str(i), face) for i, face in enumerate(faces)])
    assert recognizer.recognize(faces[2])[0] == "2"


def test_threshold_is_part_of_snapshot(trained):
    snapshot = trained.snapshot
    trained.set_threshold(123.0)
    assert trained.threshold == 123.0
    assert snapshot.threshold == 0.0
    assert trained.snapshot.eigen_space is snapshot.eigen_space


def test_concurrent_recognize(trained, random_faces):
    expected = [trained.recognize(face) for face in random_faces]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(trained.recognize, random_faces * 4))
    assert results == expected * 4


def test_saved_model_recognizes_the_same(trained, random_faces, tmp_path, monkeypatch):
    import config
    from eigenfaces.utils import load_model, save_model

    monkeypatch.setattr(config, "MODELS_PATH", str(tmp_path))
    restored = load_model(save_model(trained, "eigenfaces_test"))

    assert restored.labels == trained.labels
    for image in random_faces:
        assert restored.recognize(image) == trained.recognize(image)
