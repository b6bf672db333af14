r"""
Relevant Component Analysis (RCA), as introduced by [BarHillel2003]_, learns a
linear transformation of feature space from *chunklets*, small groups of samples
known to share the same (unknown) class label. The transformation whitens the
average covariance of the samples around their chunklet means, so that euclidean
distances in the transformed space follow the equivalence relations expressed by
the chunklets, while the irrelevant within-class variability is suppressed.

When fewer output dimensions than features are requested, RCA is preceded by a
constrained Fisher linear discriminant (cFLD) which keeps the directions with the
largest ratio of within-chunklet to total covariance of the chunkleted samples.

The module includes:

* :func:`relevant_component_analysis` the functional form, returning the
  Mahalanobis matrix, the transformation and the transformed data at once.
* :class:`RCA` the scikit-learn transformer.
"""

from ._rca import RCA, relevant_component_analysis

__all__ = [
    "RCA",
    "relevant_component_analysis",
]
