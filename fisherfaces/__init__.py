"""
Fisherfaces face recognition.

This package provides modules for:
- linalg_scratch: Jacobi eigensolver, LU inversion, general real eigenpairs
- subspace: snapshot PCA and Fisher LDA
- models: FisherfacesModel (PCA + LDA) and EigenfacesModel (PCA baseline)
- recognizer: nearest-neighbour classifier with a distance threshold
- preprocessing: resize, luminance and histogram equalization
- data_loader: reference library loading
- verification: batch recognition of probe images
- visualization: debug figures
"""

from fisherfaces.errors import (
    FisherfacesError, EmptyInputError, InsufficientClassesError,
    InsufficientDataError, DimensionMismatchError, SingularScatterError
)
from fisherfaces.models import FisherfacesModel, EigenfacesModel
from fisherfaces.recognizer import FaceRecognizer, RecognitionResult

__version__ = "1.0.0"
