"""
Subspace learners - snapshot PCA and Fisher LDA.

╔══════════════════════════════════════════════════════════════════════════╗
║  SnapshotPCA: global mean, N×N Gram eigenproblem, lift + normalize      ║
║  FisherLDA:   Sw / Sb scatter, ridge on Sw, eigenvectors of Sw⁻¹ Sb     ║
╚══════════════════════════════════════════════════════════════════════════╝

Both follow the fit / transform shape: fit learns a projection matrix whose
COLUMNS are basis vectors, transform maps row-stacked samples into it.

References:
  - Turk & Pentland (1991), "Eigenfaces for Recognition"
  - Belhumeur, Hespanha & Kriegman (1997), "Eigenfaces vs. Fisherfaces"
"""

import numpy as np

from fisherfaces.config import (
    PCA_EIGEN_TOL, LDA_EIGEN_TOL, SW_REGULARIZATION, ZERO_NORM_TOL,
    COMPLEX_EIGEN_TOL, EIGEN_SOLVER, LU_PIVOT_TOL
)
from fisherfaces.errors import InsufficientDataError, SingularScatterError
from fisherfaces.linalg_scratch import (
    symmetric_eigen, general_real_eigen, lu_inverse, normalize,
    outer_update, SingularMatrixError
)


# ==============================================================================
# 1. SNAPSHOT PCA
# ==============================================================================

class SnapshotPCA:
    """
    Principal Component Analysis via the snapshot (Gram matrix) method.

    With A ∈ ℝᴰˣᴺ whose j-th column is xⱼ - μ, the D×D covariance A Aᵀ is
    never formed. Instead:
        1. M = Aᵀ A                        (N×N, cheap when N ≪ D)
        2. M v = λ v                       (all eigenpairs)
        3. u = A v, u ← u / ‖u‖            (A Aᵀ u = λ u)

    Eigenvectors come out in descending eigenvalue order, ties broken by the
    ascending index in M's decomposition. Eigenvalues ≤ eigen_tol are
    dropped, as are lifted vectors shorter than zero_norm_tol.

    Attributes:
        n_components: Cap on retained components (None = all surviving)
        mean_: Mean vector (D,)
        components_: Projection W_pca (D, k), unit-norm columns
        eigenvalues_: Retained eigenvalues (k,), descending
        explained_variance_ratio_: eigenvalues_ / Σ positive Gram eigenvalues
    """

    def __init__(self, n_components=None, eigen_tol=PCA_EIGEN_TOL,
                 zero_norm_tol=ZERO_NORM_TOL, eigen_solver=EIGEN_SOLVER):
        self.n_components = n_components
        self.eigen_tol = eigen_tol
        self.zero_norm_tol = zero_norm_tol
        self.eigen_solver = eigen_solver

        self.mean_ = None
        self.components_ = None
        self.eigenvalues_ = None
        self.explained_variance_ratio_ = None

    def fit(self, X, verbose=False):
        """
        Fit on row-stacked samples.

        Args:
            X: np.ndarray shape (N, D)
            verbose: Print the retained dimension

        Returns:
            self

        Raises:
            InsufficientDataError: the cap is ≤ 0 or no eigenvector survives
        """
        X = np.asarray(X, dtype=np.float64)
        n, d = X.shape
        if self.n_components is not None and self.n_components <= 0:
            raise InsufficientDataError(
                f"PCA needs a positive component count, got {self.n_components}"
            )

        # Step 1: global mean and centered data A (D×N)
        self.mean_ = X.mean(axis=0)
        A = (X - self.mean_).T

        # Step 2: Gram matrix M = AᵀA (N×N), symmetrized against round-off
        M = A.T @ A
        M = 0.5 * (M + M.T)
        gram_values, gram_vectors = symmetric_eigen(M, method=self.eigen_solver,
                                                    verbose=verbose)

        # Step 3: descending order, stable so ties keep ascending index
        order = np.argsort(-gram_values, kind="stable")
        cap = n if self.n_components is None else self.n_components

        components = []
        eigenvalues = []
        for idx in order:
            if len(components) >= cap:
                break
            lam = gram_values[idx]
            if lam <= self.eigen_tol:
                break
            # Lift to pixel space: u = A v
            u = normalize(A @ gram_vectors[:, idx], self.zero_norm_tol)
            if u is None:
                continue
            components.append(u)
            eigenvalues.append(lam)

        if not components:
            raise InsufficientDataError(
                f"PCA retained no eigenvectors from {n} samples "
                f"(all eigenvalues <= {self.eigen_tol:g})"
            )

        self.components_ = np.column_stack(components)
        self.eigenvalues_ = np.asarray(eigenvalues, dtype=np.float64)

        total = np.sum(gram_values[gram_values > self.eigen_tol])
        self.explained_variance_ratio_ = self.eigenvalues_ / total

        if verbose:
            print(f"  PCA: {d} pixels -> {self.components_.shape[1]} components "
                  f"({np.sum(self.explained_variance_ratio_) * 100:.2f}% variance)",
                  flush=True)
        return self

    def transform(self, X):
        """
        Project samples: y = W_pcaᵀ (x - μ), row-wise.

        Args:
            X: np.ndarray shape (N, D) or (D,)

        Returns:
            np.ndarray shape (N, k) or (k,)
        """
        return (np.asarray(X, dtype=np.float64) - self.mean_) @ self.components_


# ==============================================================================
# 2. FISHER LDA
# ==============================================================================

class FisherLDA:
    """
    Linear Discriminant Analysis on already PCA-reduced samples.

    Scatter matrices (in the PCA space):
        mᵢ = mean of class i,  m̄ = mean of ALL projected samples
        Sw = Σᵢ Σ_{x∈i} (x - mᵢ)(x - mᵢ)ᵀ + ε_reg I
        Sb = Σᵢ Nᵢ (mᵢ - m̄)(mᵢ - m̄)ᵀ

    m̄ is recomputed from the projected samples even though it is
    analytically zero after centering, so it carries the same round-off as
    the class means.

    The projection keeps eigenvectors of T = Sw⁻¹ Sb with the largest real
    eigenvalues. T is not symmetric, so its eigenvectors are neither
    orthogonal nor re-orthogonalized.

    Sw is inverted with an absolute pivot cutoff (pivot_tol) well below the
    ridge, so Sw + ε_reg I is accepted however large the scatter entries are.

    Attributes:
        n_components: Cap on retained directions (normally C - 1)
        components_: Projection W_lda (k_pca, k_lda)
        eigenvalues_: Retained eigenvalues (k_lda,), descending
        class_means_: {label: mᵢ}
        global_mean_: m̄
    """

    def __init__(self, n_components=None, regularization=SW_REGULARIZATION,
                 eigen_tol=LDA_EIGEN_TOL, complex_tol=COMPLEX_EIGEN_TOL,
                 pivot_tol=LU_PIVOT_TOL):
        self.n_components = n_components
        self.regularization = regularization
        self.eigen_tol = eigen_tol
        self.complex_tol = complex_tol
        self.pivot_tol = pivot_tol

        self.components_ = None
        self.eigenvalues_ = None
        self.class_means_ = None
        self.global_mean_ = None

    def fit(self, groups, verbose=False):
        """
        Fit on class-grouped samples.

        Args:
            groups: dict {label: np.ndarray (Nᵢ, k_pca)}, iterated in order
            verbose: Print the retained dimension

        Returns:
            self

        Raises:
            SingularScatterError: Sw cannot be inverted
        """
        blocks = [np.asarray(Y, dtype=np.float64) for Y in groups.values()]
        k = blocks[0].shape[1]
        n_total = sum(Y.shape[0] for Y in blocks)

        # Means
        self.class_means_ = {label: Y.mean(axis=0) for label, Y in zip(groups, blocks)}
        self.global_mean_ = np.sum([Y.sum(axis=0) for Y in blocks], axis=0) / n_total

        # Within-class scatter, then ridge
        Sw = np.zeros((k, k), dtype=np.float64)
        for label, Y in zip(groups, blocks):
            D = Y - self.class_means_[label]
            Sw += D.T @ D
        Sw += self.regularization * np.eye(k)

        # Between-class scatter
        Sb = np.zeros((k, k), dtype=np.float64)
        for label, Y in zip(groups, blocks):
            outer_update(Sb, self.class_means_[label] - self.global_mean_,
                         weight=Y.shape[0])

        try:
            Sw_inv = lu_inverse(Sw, self.pivot_tol)
        except SingularMatrixError as e:
            raise SingularScatterError(
                f"Within-class scatter ({k}x{k}) is singular with "
                f"regularization {self.regularization:g}"
            ) from e

        T = Sw_inv @ Sb
        values, vectors = general_real_eigen(T, self.complex_tol)

        keep = np.abs(values) > self.eigen_tol
        values, vectors = values[keep], vectors[:, keep]
        order = np.argsort(-values, kind="stable")
        if self.n_components is not None:
            order = order[:self.n_components]

        self.components_ = vectors[:, order]
        self.eigenvalues_ = values[order]

        if verbose:
            print(f"  LDA: {k} PCA dims -> {self.components_.shape[1]} discriminants",
                  flush=True)
        return self

    def transform(self, Y):
        """Project PCA coordinates: z = W_ldaᵀ y, row-wise."""
        return np.asarray(Y, dtype=np.float64) @ self.components_
