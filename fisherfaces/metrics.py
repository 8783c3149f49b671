"""
Distance Metrics - squared Euclidean distance for nearest-neighbour search.

The recognizer compares squared distances directly: the square root is
monotonic, so it never changes which gallery entry is nearest, and the
threshold is expressed in squared units.

    d²(a, b) = Σᵢ (aᵢ - bᵢ)² = ‖a - b‖₂²
"""

import numpy as np


def squared_euclidean_distance_to_rows(x, rows):
    """
    Squared distance from one vector to every row of a matrix.

    Args:
        x: np.ndarray shape (k,)
        rows: np.ndarray shape (n, k)

    Returns:
        np.ndarray shape (n,)
    """
    diff = np.asarray(rows, dtype=np.float64) - np.asarray(x, dtype=np.float64)
    return np.sum(diff * diff, axis=1)
