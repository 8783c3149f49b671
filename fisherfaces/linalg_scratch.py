"""
Linear Algebra From Scratch - the kernel under the PCA and LDA stages.

╔══════════════════════════════════════════════════════════════════════════╗
║  Symmetric eigendecomposition (cyclic Jacobi) and LU inversion are      ║
║  implemented here from first principles.                                ║
║  numpy is used for the BLAS-level work: +, -, scaling, transpose,       ║
║  matrix-matrix and matrix-vector products.                              ║
╚══════════════════════════════════════════════════════════════════════════╝

Algorithms:
  1. Rank-1 symmetric update and safe L2 normalization
  2. Cyclic Jacobi eigendecomposition (symmetric matrices)
  3. Symmetric eigensolver dispatch (numpy/LAPACK or Jacobi)
  4. LU decomposition with partial pivoting, solve and explicit inverse
  5. General real eigendecomposition (complex pairs discarded)

Numerical policy: everything runs in IEEE 754 double precision.

References:
  - Golub & Van Loan (2013), "Matrix Computations" (4th ed.), ch. 3 and 8
  - Press et al. (2007), "Numerical Recipes" (3rd ed.), §11.1
"""

import numpy as np
from tqdm import tqdm

from fisherfaces.config import (
    EIGEN_SOLVER, JACOBI_MAX_SWEEPS, JACOBI_TOL, ZERO_NORM_TOL,
    COMPLEX_EIGEN_TOL
)


class SingularMatrixError(ArithmeticError):
    """Raised by the LU routines when a pivot vanishes."""


# ==============================================================================
# 1. RANK-1 UPDATE AND NORMALIZATION
# ==============================================================================

def outer_update(S, v, weight=1.0):
    """
    Symmetric rank-1 update, in place: S += weight * v vᵀ.

    Used to accumulate the scatter matrices
        Sw = Σ (x - mᵢ)(x - mᵢ)ᵀ
        Sb = Σ Nᵢ (mᵢ - m̄)(mᵢ - m̄)ᵀ

    Args:
        S: np.ndarray shape (k, k), float64 - accumulator
        v: np.ndarray shape (k,)
        weight: Scalar multiplier

    Returns:
        S (same object)
    """
    S += weight * np.outer(v, v)
    return S


def normalize(v, tol=ZERO_NORM_TOL):
    """
    Divide v by its L2 norm.

    Returns:
        np.ndarray unit vector, or None when ‖v‖ < tol (the vector is
        numerically zero and has no direction)
    """
    norm = np.linalg.norm(v)
    if norm < tol:
        return None
    return v / norm


# ==============================================================================
# 2. CYCLIC JACOBI EIGENDECOMPOSITION (FROM SCRATCH)
# ==============================================================================

def _jacobi_rotate(A, V, p, q):
    """
    Apply one Jacobi rotation in the (p, q) plane so that A[p, q] becomes 0.

    With θ = (a_qq - a_pp) / (2 a_pq):
        t = sgn(θ) / (|θ| + √(θ² + 1)),  c = 1 / √(t² + 1),  s = t c
    and A ← Pᵀ A P, V ← V P where P is the identity except
        P_pp = P_qq = c,  P_pq = s,  P_qp = -s
    """
    apq = A[p, q]
    theta = (A[q, q] - A[p, p]) / (2.0 * apq)
    sign = 1.0 if theta >= 0 else -1.0
    t = sign / (abs(theta) + np.hypot(theta, 1.0))
    c = 1.0 / np.sqrt(t * t + 1.0)
    s = t * c

    # A P  (columns p, q)
    col_p = A[:, p].copy()
    col_q = A[:, q].copy()
    A[:, p] = c * col_p - s * col_q
    A[:, q] = s * col_p + c * col_q

    # Pᵀ (A P)  (rows p, q)
    row_p = A[p, :].copy()
    row_q = A[q, :].copy()
    A[p, :] = c * row_p - s * row_q
    A[q, :] = s * row_p + c * row_q

    A[p, q] = 0.0
    A[q, p] = 0.0

    # Accumulate eigenvectors
    vec_p = V[:, p].copy()
    vec_q = V[:, q].copy()
    V[:, p] = c * vec_p - s * vec_q
    V[:, q] = s * vec_p + c * vec_q


def jacobi_eigen(A, max_sweeps=JACOBI_MAX_SWEEPS, tol=JACOBI_TOL, verbose=False):
    """
    Cyclic Jacobi eigendecomposition of a real symmetric matrix.

    Algorithm:
        V = I
        repeat (sweep):
            off(A) = √(Σ_{i≠j} a_ij²)
            if off(A) ≤ tol · ‖A‖_F: stop
            for p < q: rotate in plane (p, q) to annihilate a_pq
        eigenvalues  = diag(A)
        eigenvectors = columns of V

    Every rotation is orthogonal, so V stays orthonormal and A stays similar
    to the input. Convergence is quadratic once off(A) is small.

    Complexity: O(n³) per sweep, typically 6-10 sweeps.

    Args:
        A: np.ndarray shape (n, n), symmetric
        max_sweeps: Upper bound on full sweeps
        tol: Relative off-diagonal tolerance
        verbose: Show a progress bar over sweeps

    Returns:
        tuple: (eigenvalues, eigenvectors)
            - eigenvalues: np.ndarray shape (n,), in diagonal order (unsorted)
            - eigenvectors: np.ndarray shape (n, n), column i pairs with
              eigenvalue i
    """
    A = np.array(A, dtype=np.float64, copy=True)
    n = A.shape[0]
    V = np.eye(n, dtype=np.float64)

    scale = np.linalg.norm(A)
    if n < 2 or scale == 0.0:
        return np.diag(A).copy(), V

    iterator = range(max_sweeps)
    if verbose:
        iterator = tqdm(iterator, desc="  Jacobi sweeps")

    for _ in iterator:
        off = np.sqrt(max(np.sum(A * A) - np.sum(np.diag(A) ** 2), 0.0))
        if off <= tol * scale:
            break
        for p in range(n - 1):
            for q in range(p + 1, n):
                if A[p, q] != 0.0:
                    _jacobi_rotate(A, V, p, q)

    return np.diag(A).copy(), V


# ==============================================================================
# 3. SYMMETRIC EIGENSOLVER
# ==============================================================================

def symmetric_eigen(A, method=EIGEN_SOLVER, verbose=False):
    """
    All eigenpairs of a real symmetric matrix.

    Args:
        A: np.ndarray shape (n, n)
        method: "numpy" (LAPACK eigh) or "jacobi" (cyclic Jacobi above)
        verbose: Forwarded to the Jacobi progress bar

    Returns:
        tuple: (eigenvalues (n,), eigenvectors (n, n) as columns), in the
        solver's native order. Callers sort.
    """
    if method == "numpy":
        eigenvalues, eigenvectors = np.linalg.eigh(np.asarray(A, dtype=np.float64))
        return eigenvalues, eigenvectors
    if method == "jacobi":
        return jacobi_eigen(A, verbose=verbose)
    raise ValueError(f"Unknown eigen solver: {method!r} (expected 'numpy' or 'jacobi')")


# ==============================================================================
# 4. LU DECOMPOSITION WITH PARTIAL PIVOTING (FROM SCRATCH)
# ==============================================================================

def lu_decompose(A, pivot_tol=None):
    """
    Doolittle LU decomposition with partial (row) pivoting: P A = L U.

    Algorithm, for k = 0 .. n-1:
        1. Pick pivot row p = argmax_{i ≥ k} |a_ik| and swap rows k, p
        2. If |a_kk| ≤ pivot_tol: the matrix is singular
        3. l_ik = a_ik / a_kk               (i > k, stored below the diagonal)
        4. a_ij -= l_ik · a_kj              (i, j > k, Schur complement)

    L (unit lower) and U (upper) share one packed array.

    Args:
        A: np.ndarray shape (n, n)
        pivot_tol: Absolute pivot threshold. Default n · ε_machine · max|a_ij|,
            which flags exactly singular matrices while accepting ones that
            have been regularized by a small ridge.

    Returns:
        tuple: (LU packed (n, n), perm (n,) row permutation)

    Raises:
        SingularMatrixError: a pivot is (numerically) zero
    """
    LU = np.array(A, dtype=np.float64, copy=True)
    n = LU.shape[0]
    if LU.ndim != 2 or LU.shape[1] != n:
        raise ValueError(f"LU needs a square matrix, got shape {LU.shape}")

    perm = np.arange(n)
    if pivot_tol is None:
        scale = np.max(np.abs(LU)) if n else 0.0
        pivot_tol = n * np.finfo(np.float64).eps * scale

    for k in range(n):
        p = k + int(np.argmax(np.abs(LU[k:, k])))
        pivot = LU[p, k]
        if abs(pivot) <= pivot_tol:
            raise SingularMatrixError(
                f"Matrix is singular: pivot {pivot:.3e} at column {k} "
                f"(tolerance {pivot_tol:.3e})"
            )
        if p != k:
            LU[[k, p]] = LU[[p, k]]
            perm[[k, p]] = perm[[p, k]]

        LU[k + 1:, k] /= LU[k, k]
        LU[k + 1:, k + 1:] -= np.outer(LU[k + 1:, k], LU[k, k + 1:])

    return LU, perm


def lu_solve(LU, perm, B):
    """
    Solve A X = B given the packed factorization of lu_decompose.

        L Y = P B   (forward substitution, unit diagonal)
        U X = Y     (back substitution)

    Args:
        LU, perm: Output of lu_decompose
        B: np.ndarray shape (n,) or (n, m)

    Returns:
        np.ndarray with the shape of B
    """
    Y = np.array(B, dtype=np.float64, copy=True)[perm]
    n = LU.shape[0]

    for i in range(1, n):
        Y[i] -= LU[i, :i] @ Y[:i]

    X = Y
    for i in range(n - 1, -1, -1):
        X[i] = (X[i] - LU[i, i + 1:] @ X[i + 1:]) / LU[i, i]

    return X


def lu_inverse(A, pivot_tol=None):
    """
    Explicit inverse A⁻¹ via LU: solve A X = I column-block at once.

    Meant for small matrices (the k_pca × k_pca scatter, at most a few
    hundred rows).

    Raises:
        SingularMatrixError: A is not invertible
    """
    LU, perm = lu_decompose(A, pivot_tol)
    return lu_solve(LU, perm, np.eye(LU.shape[0], dtype=np.float64))


# ==============================================================================
# 5. GENERAL REAL EIGENDECOMPOSITION
# ==============================================================================

def general_real_eigen(A, complex_tol=COMPLEX_EIGEN_TOL):
    """
    Eigenpairs of a general (non-symmetric) real matrix, real ones only.

    Sw⁻¹ Sb is not symmetric, so eigh/Jacobi do not apply. LAPACK's geev
    (Hessenberg reduction + shifted QR) produces the full spectrum; an
    eigenvalue is kept as real when
        |Im λ| ≤ complex_tol · max(|Re λ|, 1)
    and its eigenvector is replaced by the real part. Genuine complex
    conjugate pairs are dropped.

    Args:
        A: np.ndarray shape (n, n)
        complex_tol: Relative imaginary-part tolerance

    Returns:
        tuple: (eigenvalues (m,), eigenvectors (n, m) as columns), m ≤ n,
        in the solver's native order
    """
    eigenvalues, eigenvectors = np.linalg.eig(np.asarray(A, dtype=np.float64))
    real_mask = np.abs(eigenvalues.imag) <= complex_tol * np.maximum(
        np.abs(eigenvalues.real), 1.0
    )
    return eigenvalues.real[real_mask], eigenvectors.real[:, real_mask]
