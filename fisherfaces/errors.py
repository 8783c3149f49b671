"""
Exceptions raised while training and applying a Fisherfaces model.

Input problems derive from ValueError so callers that only care about
"bad training data" can catch that. Recognition before training is not an
exception: it is reported through RecognitionResult.
"""


class FisherfacesError(Exception):
    """Base class for every training failure."""


class EmptyInputError(FisherfacesError, ValueError):
    """No training samples were given."""


class InsufficientClassesError(FisherfacesError, ValueError):
    """Fewer than two distinct labels."""


class InsufficientDataError(FisherfacesError, ValueError):
    """N <= C, or a projection stage retained no eigenvectors."""


class DimensionMismatchError(FisherfacesError, ValueError):
    """Vectors (or labels) do not line up."""


class SingularScatterError(FisherfacesError, ArithmeticError):
    """The within-class scatter could not be inverted, even regularized."""
