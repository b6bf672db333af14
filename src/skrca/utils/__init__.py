"""
The :mod:`skrca.utils` module includes the chunklet validation and the numerical
building blocks of Relevant Component Analysis.
"""

from ._chunklets import (
    UNASSIGNED,
    check_chunklets,
    chunklet_sizes,
)
from ._rca_utils import (
    cfld_projection,
    chunklet_inner_covariance,
    chunklet_total_covariance,
    whitening_transform,
)

__all__ = [
    "UNASSIGNED",
    "check_chunklets",
    "chunklet_sizes",
    "chunklet_inner_covariance",
    "chunklet_total_covariance",
    "cfld_projection",
    "whitening_transform",
]
