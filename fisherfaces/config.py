"""
Configuration parameters for the Fisherfaces recognition engine.
All tolerances, thresholds and paths are defined here for easy modification.
"""

import os

# ==============================================================================
# PATHS
# ==============================================================================
# Relative to the working directory the CLI is launched from
DEFAULT_DATABASE_DIR = os.path.join("data", "database_criminosos")
DEFAULT_SUSPECTS_DIR = os.path.join("data", "suspeitos")

RESULTS_DIR = "results"
FIGURES_DIR = os.path.join(RESULTS_DIR, "figures")

# ==============================================================================
# IMAGE PARAMETERS
# ==============================================================================
IMAGE_WIDTH = 100            # Resize target (pixels)
IMAGE_HEIGHT = 100
VECTOR_SIZE = IMAGE_WIDTH * IMAGE_HEIGHT
LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)   # R, G, B
HIST_BINS = 256
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

# ==============================================================================
# PCA / LDA PARAMETERS
# ==============================================================================
PCA_EIGEN_TOL = 1e-10        # Gram eigenvalues <= this are discarded
LDA_EIGEN_TOL = 1e-12        # |eigenvalue| of Sw^-1 Sb <= this is noise
SW_REGULARIZATION = 1e-5     # Ridge added to the diagonal of Sw
ZERO_NORM_TOL = 1e-12        # Lifted eigenvectors shorter than this are skipped
COMPLEX_EIGEN_TOL = 1e-8     # |imag| / max(|real|, 1) above this means complex
LU_PIVOT_TOL = 1e-11         # Absolute pivot cutoff when inverting Sw

# Symmetric eigensolver: "numpy" (LAPACK eigh) or "jacobi" (from scratch)
EIGEN_SOLVER = "numpy"
JACOBI_MAX_SWEEPS = 100
JACOBI_TOL = 1e-12

# ==============================================================================
# RECOGNITION PARAMETERS
# ==============================================================================
DEFAULT_THRESHOLD = 12.0e6   # Squared distance in LDA space
UNKNOWN_LABEL = "Unknown"
UNTRAINED_LABEL = "Untrained"
RANKING_SIZE = 3             # Candidates printed per probe in verbose mode
EIGENFACES_COMPONENTS = 50   # Baseline Eigenfaces model

# ==============================================================================
# DEBUG FIGURES
# ==============================================================================
SAVE_FIGURES = False
N_FISHERFACES_DISPLAY = 16
FIGURE_DPI = 150
