"""Custom exceptions and warnings raised by scikit-rca.

The errors derive from the built-in exceptions scikit-learn and NumPy already raise
for the same conditions, so code catching :class:`ValueError` or
:class:`numpy.linalg.LinAlgError` keeps working.
"""

from numpy.linalg import LinAlgError


__all__ = [
    "InvalidInputError",
    "SingularMatrixError",
    "NumericalInstabilityError",
    "RankDeficientWarning",
]


class InvalidInputError(ValueError):
    """Raised when the data, the chunklet vector or ``n_components`` are malformed.

    Examples
    --------
    >>> from skrca.exceptions import InvalidInputError
    >>> issubclass(InvalidInputError, ValueError)
    True
    """


class SingularMatrixError(LinAlgError):
    """Raised when a matrix that has to be inverted is singular.

    This happens for the total covariance of the chunkleted points when a
    dimensionality reduction is requested and the chunkleted points are too few
    or collinear.
    """


class NumericalInstabilityError(LinAlgError):
    """Raised when a decomposition produces values outside of their domain,
    e.g. complex eigenvalues or negative singular values."""


class RankDeficientWarning(UserWarning):
    """Warning used to notify that the learned transformation has a smaller rank
    than the requested number of components.

    The directions without within-chunklet variance are mapped to zero.
    """
