"""
Fisherfaces and Eigenfaces - trainable face models.

╔══════════════════════════════════════════════════════════════════════════╗
║  FisherfacesModel: PCA (N - C dims) -> LDA (C - 1 dims) -> W, gallery   ║
║  EigenfacesModel:  PCA only (baseline)                                  ║
╚══════════════════════════════════════════════════════════════════════════╝

A trained model is the tuple (μ, W, gallery):
    μ        global mean face, shape (D,)
    W        final projection, shape (D, k), columns are basis faces
    gallery  training samples in the k-dim subspace + their labels

The tuple is built in local variables and published in one step at the end
of train(), so a failed train() leaves the previous state untouched. The
published arrays are read-only.

References:
  - Belhumeur, Hespanha & Kriegman (1997), "Eigenfaces vs. Fisherfaces"
  - Turk & Pentland (1991), "Eigenfaces for Recognition"
"""

import numpy as np

from fisherfaces.config import (
    PCA_EIGEN_TOL, LDA_EIGEN_TOL, SW_REGULARIZATION, EIGEN_SOLVER,
    EIGENFACES_COMPONENTS
)
from fisherfaces.errors import (
    EmptyInputError, InsufficientClassesError, InsufficientDataError,
    DimensionMismatchError
)
from fisherfaces.subspace import SnapshotPCA, FisherLDA


def _read_only(array):
    array = np.array(array, dtype=np.float64, copy=True)
    array.flags.writeable = False
    return array


def as_training_matrix(vectors, labels):
    """
    Validate a training set and stack it into an (N, D) float64 matrix.

    Raises:
        EmptyInputError: no vectors
        DimensionMismatchError: len(labels) != N, or vectors of unequal length
    """
    if vectors is None or len(vectors) == 0:
        raise EmptyInputError("No training images were given")
    if len(labels) != len(vectors):
        raise DimensionMismatchError(
            f"{len(vectors)} vectors but {len(labels)} labels"
        )

    rows = [np.asarray(v, dtype=np.float64).ravel() for v in vectors]
    dim = rows[0].shape[0]
    for i, row in enumerate(rows):
        if row.shape[0] != dim:
            raise DimensionMismatchError(
                f"Vector {i} has length {row.shape[0]}, expected {dim}"
            )
    return np.vstack(rows)


def group_by_label(labels):
    """
    {label: [sample indices]} in order of first appearance.

    The order is what later fixes the gallery order, so the same input
    always yields the same model.
    """
    groups = {}
    for i, label in enumerate(labels):
        groups.setdefault(label, []).append(i)
    return groups


class _SubspaceModel:
    """Read-only accessors shared by the trained models."""

    def __init__(self):
        self._mean = None
        self._projection = None
        self._gallery = None
        self._gallery_labels = ()
        self._eigenvalues = None
        self._classes = ()

    def _publish(self, mean, projection, gallery, gallery_labels, eigenvalues):
        self._mean = _read_only(mean)
        self._projection = _read_only(projection)
        self._gallery = _read_only(gallery)
        self._gallery_labels = tuple(gallery_labels)
        self._eigenvalues = _read_only(eigenvalues)
        self._classes = tuple(dict.fromkeys(self._gallery_labels))

    @property
    def is_trained(self):
        return self._projection is not None and self._mean is not None

    @property
    def mean(self):
        """Global mean face μ, shape (D,)."""
        return self._mean

    @property
    def final_projection(self):
        """Final projection W, shape (D, k)."""
        return self._projection

    @property
    def gallery_projections(self):
        """Training samples in the subspace, shape (N, k), in gallery order."""
        return self._gallery

    @property
    def gallery_labels(self):
        return self._gallery_labels

    @property
    def eigenvalues(self):
        return self._eigenvalues

    @property
    def classes(self):
        """Distinct labels in grouping order."""
        return self._classes

    @property
    def dimension(self):
        return None if self._mean is None else self._mean.shape[0]

    @property
    def n_components(self):
        return 0 if self._projection is None else self._projection.shape[1]


# ==============================================================================
# 1. FISHERFACES
# ==============================================================================

class FisherfacesModel(_SubspaceModel):
    """
    Fisherfaces (PCA followed by LDA).

    Training:
        1. Group samples by label (first-appearance order), C = #labels
        2. PCA, snapshot method, k_pca = N - C components
        3. Project every sample into PCA space, grouped by class
        4. LDA on the PCA coordinates, k_lda = C - 1 discriminants
        5. W = W_pca · W_lda; gallery zᵢ = W_ldaᵀ yᵢ in class order

    The intermediate W_pca, W_lda, Sw and Sb are dropped after training;
    only μ, W and the gallery are kept.

    Args:
        regularization: Ridge ε_reg added to Sw
        pca_tol: ε_pca, Gram eigenvalue cutoff
        lda_tol: ε_lda, |eigenvalue| noise floor for Sw⁻¹ Sb
        eigen_solver: "numpy" or "jacobi" for the Gram eigenproblem
        verbose: Print stage summaries
    """

    def __init__(self, regularization=SW_REGULARIZATION, pca_tol=PCA_EIGEN_TOL,
                 lda_tol=LDA_EIGEN_TOL, eigen_solver=EIGEN_SOLVER, verbose=False):
        super().__init__()
        self.regularization = regularization
        self.pca_tol = pca_tol
        self.lda_tol = lda_tol
        self.eigen_solver = eigen_solver
        self.verbose = verbose
        self.name = "Fisherfaces"

    def train(self, vectors, labels):
        """
        Train on N vectors paired index-by-index with N labels.

        Raises:
            EmptyInputError: N = 0
            DimensionMismatchError: vectors of unequal length
            InsufficientClassesError: C < 2
            InsufficientDataError: N <= C, or PCA/LDA kept no directions
            SingularScatterError: Sw not invertible after regularization
        """
        X = as_training_matrix(vectors, labels)
        n, d = X.shape
        groups = group_by_label(labels)
        c = len(groups)

        if c < 2:
            raise InsufficientClassesError(
                f"LDA needs at least 2 identities, got {c}"
            )
        if n <= c:
            raise InsufficientDataError(
                f"k_pca = N - C = {n - c}; more images than identities are "
                f"needed (N={n}, C={c})"
            )

        if self.verbose:
            print(f"\n{'='*60}")
            print(f"  Training: {self.name}")
            print(f"  Images: {n}, Identities: {c}, Pixels: {d}")
            print(f"{'='*60}", flush=True)

        # PCA: k_pca = N - C
        pca = SnapshotPCA(n_components=n - c, eigen_tol=self.pca_tol,
                          eigen_solver=self.eigen_solver)
        pca.fit(X, verbose=self.verbose)

        projected = {label: pca.transform(X[idx]) for label, idx in groups.items()}

        # LDA: k_lda = C - 1
        lda = FisherLDA(n_components=c - 1, regularization=self.regularization,
                        eigen_tol=self.lda_tol)
        lda.fit(projected, verbose=self.verbose)

        if lda.components_.shape[1] == 0:
            raise InsufficientDataError(
                "LDA retained no discriminant directions (class means coincide)"
            )

        # Finalization
        W = pca.components_ @ lda.components_
        gallery = np.vstack([lda.transform(Y) for Y in projected.values()])
        gallery_labels = [label for label, idx in groups.items() for _ in idx]

        self._publish(pca.mean_, W, gallery, gallery_labels, lda.eigenvalues_)

        if self.verbose:
            print(f"  Fisherfaces: {W.shape[1]}", flush=True)
        return self


# ==============================================================================
# 2. EIGENFACES (BASELINE)
# ==============================================================================

class EigenfacesModel(_SubspaceModel):
    """
    Standard Eigenfaces (Turk & Pentland, 1991), PCA only.

    Keeps at most n_components eigenfaces; the gallery holds the PCA
    coordinates of the training vectors in input order. Works with a single
    identity, so it is also useful as a sanity baseline.
    """

    def __init__(self, n_components=EIGENFACES_COMPONENTS, pca_tol=PCA_EIGEN_TOL,
                 eigen_solver=EIGEN_SOLVER, verbose=False):
        super().__init__()
        self.n_components_requested = n_components
        self.pca_tol = pca_tol
        self.eigen_solver = eigen_solver
        self.verbose = verbose
        self.name = "Eigenfaces"

    def train(self, vectors, labels):
        X = as_training_matrix(vectors, labels)

        pca = SnapshotPCA(n_components=self.n_components_requested,
                          eigen_tol=self.pca_tol, eigen_solver=self.eigen_solver)
        pca.fit(X, verbose=self.verbose)

        self._publish(pca.mean_, pca.components_, pca.transform(X), labels,
                      pca.eigenvalues_)
        return self
