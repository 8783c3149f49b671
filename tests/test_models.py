# tests/test_models.py
import numpy as np
import pytest

from fisherfaces.errors import (
    DimensionMismatchError, EmptyInputError, FisherfacesError,
    InsufficientClassesError, InsufficientDataError, SingularScatterError,
)
from fisherfaces.models import EigenfacesModel, FisherfacesModel, group_by_label
from fisherfaces.recognizer import FaceRecognizer


# ------------------------------------------------------------------ training inputs

def test_two_identity_toy_set(toy_model):
    recognizer = FaceRecognizer(toy_model)

    result_a = recognizer.recognize([11.0, 10.0, 10.0, 10.0], "probe_a")
    assert result_a.is_match
    assert result_a.label == "A"
    assert result_a.distance < 1.0

    result_b = recognizer.recognize([10.0, 10.0, 10.0, 49.0], "probe_b")
    assert result_b.is_match
    assert result_b.label == "B"


def test_empty_input_rejected():
    with pytest.raises(EmptyInputError):
        FisherfacesModel().train([], [])


def test_single_identity_rejected():
    vectors = [[float(i), 1.0, 2.0] for i in range(5)]
    with pytest.raises(InsufficientClassesError):
        FisherfacesModel().train(vectors, ["solo"] * 5)


def test_one_sample_per_identity_rejected():
    vectors = [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    with pytest.raises(InsufficientDataError):
        FisherfacesModel().train(vectors, ["a", "b", "c"])


def test_unequal_vector_lengths_rejected():
    vectors = [[1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0, 4.0, 5.0]]
    with pytest.raises(DimensionMismatchError):
        FisherfacesModel().train(vectors, ["a", "b"])


def test_label_count_mismatch():
    with pytest.raises(DimensionMismatchError):
        FisherfacesModel().train([[1.0, 2.0], [2.0, 1.0]], ["a"])


def test_training_errors_share_a_base():
    with pytest.raises(FisherfacesError):
        FisherfacesModel().train([], [])
    with pytest.raises(ValueError):
        FisherfacesModel().train([], [])


# ------------------------------------------------------------------ invariants

def test_dimension_bookkeeping(separated_data, separated_model):
    vectors, labels = separated_data
    n, d = vectors.shape
    c = len(set(labels))

    W = separated_model.final_projection
    assert W.shape[0] == d
    assert 1 <= W.shape[1] <= c - 1
    assert separated_model.gallery_projections.shape == (n, W.shape[1])
    assert len(separated_model.gallery_labels) == n
    assert separated_model.mean.shape == (d,)
    assert separated_model.n_components == W.shape[1]
    assert separated_model.dimension == d


def test_mean_is_arithmetic_mean(separated_data, separated_model):
    vectors, _ = separated_data
    np.testing.assert_allclose(separated_model.mean, vectors.mean(axis=0), atol=1e-9)


def test_gallery_grouped_in_first_appearance_order(separated_model):
    expected = ["person_0"] * 4 + ["person_1"] * 4 + ["person_2"] * 4
    assert list(separated_model.gallery_labels) == expected
    assert separated_model.classes == ("person_0", "person_1", "person_2")


def test_group_by_label_keeps_first_appearance():
    groups = group_by_label(["b", "a", "b", "c", "a"])
    assert list(groups) == ["b", "a", "c"]
    assert groups["a"] == [1, 4]


def test_lda_eigenvalues_descend(separated_model):
    values = separated_model.eigenvalues
    assert np.all(np.diff(values) <= 0)
    assert np.all(np.abs(values) > 1e-12)


def test_training_is_deterministic(separated_data):
    vectors, labels = separated_data
    first = FisherfacesModel().train(vectors, labels)
    second = FisherfacesModel().train(vectors, labels)

    np.testing.assert_allclose(first.final_projection, second.final_projection,
                               rtol=1e-10, atol=1e-10)
    np.testing.assert_allclose(first.gallery_projections, second.gallery_projections,
                               rtol=1e-10, atol=1e-10)
    assert first.gallery_labels == second.gallery_labels


def test_regularization_rescues_exactly_singular_scatter():
    # Identical samples within each class: Sw is exactly zero
    vectors = [[5.0, 0.0, 0.0], [5.0, 0.0, 0.0], [0.0, 5.0, 0.0], [0.0, 5.0, 0.0]]
    labels = ["A", "A", "B", "B"]

    with pytest.raises(SingularScatterError):
        FisherfacesModel(regularization=0.0).train(vectors, labels)

    model = FisherfacesModel(regularization=1e-5).train(vectors, labels)
    result = FaceRecognizer(model).recognize([5.0, 0.0, 0.0], "probe")
    assert result.is_match
    assert result.label == "A"


def test_default_ridge_survives_large_pixel_values():
    # Identity A spreads along x by ±3e5; B differs only along y and z
    vectors = [[3e5, 0.0, 0.0], [-3e5, 0.0, 0.0], [0.0, 1.0, 5.0], [0.0, -1.0, 5.0]]
    model = FisherfacesModel().train(vectors, ["A", "A", "B", "B"])
    assert model.n_components == 1

    result = FaceRecognizer(model).recognize([0.0, 1.0, 5.0], "probe")
    assert result.label == "B"


def test_model_arrays_are_read_only(toy_model):
    with pytest.raises(ValueError):
        toy_model.final_projection[0, 0] = 1.0
    with pytest.raises(ValueError):
        toy_model.mean[0] = 1.0


def test_failed_retrain_keeps_previous_model(toy_model):
    before = toy_model.final_projection
    with pytest.raises(InsufficientClassesError):
        toy_model.train([[1.0, 2.0, 3.0, 4.0], [2.0, 2.0, 3.0, 4.0]], ["x", "x"])
    assert toy_model.is_trained
    assert toy_model.final_projection is before


def test_untrained_model_accessors():
    model = FisherfacesModel()
    assert not model.is_trained
    assert model.mean is None
    assert model.final_projection is None
    assert model.n_components == 0
    assert model.gallery_labels == ()


def test_jacobi_solver_trains_same_model(separated_data):
    vectors, labels = separated_data
    lapack = FisherfacesModel(eigen_solver="numpy").train(vectors, labels)
    jacobi = FisherfacesModel(eigen_solver="jacobi").train(vectors, labels)

    for probe, label in zip(vectors, labels):
        assert FaceRecognizer(lapack).recognize(probe, "p").label == label
        assert FaceRecognizer(jacobi).recognize(probe, "p").label == label


# ------------------------------------------------------------------ eigenfaces baseline

def test_eigenfaces_single_identity():
    rng = np.random.default_rng(2)
    vectors = rng.uniform(0, 255, size=(5, 30))
    model = EigenfacesModel(n_components=3).train(vectors, ["solo"] * 5)

    assert model.final_projection.shape == (30, 3)
    assert model.gallery_projections.shape == (5, 3)
    assert model.gallery_labels == ("solo",) * 5


def test_eigenfaces_gallery_in_input_order(separated_data):
    vectors, labels = separated_data
    model = EigenfacesModel(n_components=6).train(vectors, labels)
    assert list(model.gallery_labels) == labels

    recognizer = FaceRecognizer(model)
    for probe, label in zip(vectors, labels):
        assert recognizer.recognize(probe, "p").label == label


def test_eigenfaces_validates_input():
    with pytest.raises(EmptyInputError):
        EigenfacesModel().train([], [])
    with pytest.raises(DimensionMismatchError):
        EigenfacesModel().train([[1.0, 2.0], [1.0]], ["a", "b"])
