import numbers
import warnings

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils import Bunch
from sklearn.utils.validation import FLOAT_DTYPES, check_array, check_is_fitted

from ..exceptions import InvalidInputError, RankDeficientWarning
from ..metrics import pairwise_mahalanobis_distances
from ..utils import (
    cfld_projection,
    check_chunklets,
    chunklet_inner_covariance,
    chunklet_total_covariance,
    whitening_transform,
)


def _check_data(X):
    try:
        return check_array(X, dtype=FLOAT_DTYPES, copy=True)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e


def _check_n_components(n_components, n_features):
    if n_components is None:
        return n_features
    if isinstance(n_components, bool) or not isinstance(
        n_components, numbers.Integral
    ):
        raise InvalidInputError(
            f"n_components={n_components!r} must be an integer, was of "
            f"type={type(n_components)!r}"
        )
    if not 1 <= n_components <= n_features:
        raise InvalidInputError(
            f"n_components={n_components!r} must be between 1 and "
            f"n_features={n_features}"
        )
    return int(n_components)


def relevant_component_analysis(
    X, chunks, n_components=None, *, relabel=False, tol=1e-12
):
    r"""Relevant Component Analysis (RCA) of a dataset with chunklet constraints.

    RCA learns a linear transformation of the data that whitens the average
    within-chunklet covariance (the *inner covariance*), reducing the influence of
    variability that is irrelevant to the equivalence relations encoded in the
    chunklets [BarHillel2003]_. When ``n_components`` is smaller than the number of
    features, RCA is preceded by a constrained Fisher linear discriminant (cFLD)
    projection :math:`\mathbf{A}`, the leading eigenvectors of
    :math:`\mathbf{C}_{tot}^{-1}\mathbf{C}_{in}`.

    With :math:`\mathbf{A}^T\mathbf{C}_{in}\mathbf{A} = \mathbf{U}\mathbf{S}
    \mathbf{V}^T`, the returned transformation and Mahalanobis matrix are

    .. math::
        \mathbf{R} = \mathbf{A}\mathbf{U}\mathbf{S}^{\frac{1}{2}}, \qquad
        \mathbf{B} = \mathbf{R}\mathbf{R}^T

    so that :math:`(\mathbf{x}_2 - \mathbf{x}_1)\mathbf{B}(\mathbf{x}_2 -
    \mathbf{x}_1)^T = \lVert(\mathbf{x}_2 - \mathbf{x}_1)\mathbf{R}\rVert^2`.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        Data matrix. It is not modified.
    chunks : array-like of shape (n_samples,)
        ``-1`` in the ``i``-th place says that sample ``i`` does not belong to any
        chunklet; integer ``j`` says that sample ``i`` belongs to chunklet ``j``.
        The chunklet labels must be ``1..n_chunklets`` unless ``relabel=True``.
    n_components : int, default=None
        Dimension of the transformed space. If None, RCA is done in the original
        dimension without cFLD, and ``B`` is full rank when the inner covariance is.
    relabel : bool, default=False
        Accept arbitrary hashable chunklet labels, see
        :func:`skrca.utils.check_chunklets`.
    tol : float, default=1E-12
        Relative tolerance below which singular values of the inner covariance are
        considered zero when computing the effective rank.

    Returns
    -------
    result : sklearn.utils.Bunch
        Dictionary-like object, with the following attributes:

        B : numpy.ndarray of shape (n_features, n_features) --
        The Mahalanobis matrix.

        RCA : numpy.ndarray of shape (n_features, n_components) --
        The transformation, acting on row vectors from the right.

        newX : numpy.ndarray of shape (n_samples, n_components) --
        The data after the transformation, ``X @ RCA``.

        cfld : numpy.ndarray of shape (n_features, n_components) --
        The cFLD projection, the identity when no reduction is done.

        inner_covariance : numpy.ndarray of shape (n_components, n_components) --
        The (projected) inner covariance that has been whitened.

        singular_values : numpy.ndarray of shape (n_components,) --
        Singular values of ``inner_covariance``.

        mean : numpy.ndarray of shape (n_features,) --
        Column means of ``X``.

        rank : int --
        Effective rank of ``RCA``.

        n_chunklets : int --
        Number of chunklets.

    Raises
    ------
    InvalidInputError
        If ``X``, ``chunks`` or ``n_components`` are malformed.
    SingularMatrixError
        If ``n_components < n_features`` and the total covariance of the chunkleted
        samples is singular.
    NumericalInstabilityError
        If a decomposition yields complex or negative values.

    Examples
    --------
    >>> import numpy as np
    >>> from skrca.decomposition import relevant_component_analysis
    >>> X = np.array(
    ...     [[0.0, 0.0], [1.0, 0.2], [4.0, 4.0], [5.0, 3.6], [2.0, 9.0], [2.4, 8.0]]
    ... )
    >>> result = relevant_component_analysis(X, [1, 1, 2, 2, -1, -1])
    >>> result.B.shape, result.RCA.shape, result.newX.shape
    ((2, 2), (2, 2), (6, 2))
    >>> bool(np.allclose(result.B, result.B.T))
    True
    >>> np.allclose(result.newX, X @ result.RCA)
    True

    References
    ----------
    .. [BarHillel2003] A. Bar-Hillel, T. Hertz, N. Shental, D. Weinshall,
       "Learning Distance Functions using Equivalence Relations",
       Proceedings of the 20th International Conference on Machine Learning, 2003.
    """
    X = _check_data(X)
    n_samples, n_features = X.shape
    chunklet_index, n_chunklets = check_chunklets(
        chunks, n_samples=n_samples, relabel=relabel
    )
    n_components = _check_n_components(n_components, n_features)

    mean = X.mean(axis=0)
    Xc = X - mean

    inner_cov, indices, _ = chunklet_inner_covariance(Xc, chunklet_index, n_chunklets)

    if n_components < n_features:
        total_cov = chunklet_total_covariance(Xc, indices)
        A, _ = cfld_projection(inner_cov, total_cov, n_components)
        inner_cov = A.T @ inner_cov @ A
    else:
        A = np.eye(n_features)

    U, S, rank = whitening_transform(inner_cov, tol=tol)

    RCA = (A @ U) * np.sqrt(S)
    B = RCA @ RCA.T

    # the mean is not subtracted, distances are unaffected by the shift
    newX = X @ RCA

    return Bunch(
        B=B,
        RCA=RCA,
        newX=newX,
        cfld=A,
        inner_covariance=inner_cov,
        singular_values=S,
        mean=mean,
        rank=rank,
        n_chunklets=n_chunklets,
    )


class RCA(TransformerMixin, BaseEstimator):
    r"""Relevant Component Analysis (RCA).

    Learns a Mahalanobis metric (equivalently, a linear transformation) from
    chunklets: groups of samples known to belong to the same, unknown class. The
    transformation whitens the average within-chunklet covariance, optionally after
    reducing the dimension with a constrained Fisher linear discriminant.
    See :func:`skrca.decomposition.relevant_component_analysis` for the details.

    Parameters
    ----------
    n_components : int, default=None
        Dimension of the transformed space. If None, all features are kept and no
        cFLD reduction is done.

    relabel : bool, default=False
        If True, chunklets may be labelled by any hashable value, with ``-1`` and
        ``None`` marking samples outside of any chunklet. If False, the labels must
        be ``-1`` or cover ``1..n_chunklets`` without gaps.

    tol : float, default=1E-12
        Relative tolerance below which singular values of the inner covariance are
        considered zero when computing the effective rank.

    Attributes
    ----------
    n_samples_in_ : int
        Number of samples seen during fit.

    n_features_in_ : int
        Number of features seen during fit.

    n_components_ : int
        Dimension of the transformed space.

    n_chunklets_ : int
        Number of chunklets seen during fit.

    mean_ : numpy.ndarray of shape (n_features,)
        Column means of the training data.

    cfld_ : numpy.ndarray of shape (n_features, n_components)
        The cFLD projection, the identity when ``n_components_ == n_features_in_``.

    inner_covariance_ : numpy.ndarray of shape (n_components, n_components)
        The (projected) inner covariance of the chunklets.

    singular_values_ : numpy.ndarray of shape (n_components,)
        Singular values of ``inner_covariance_``.

    rca_ : numpy.ndarray of shape (n_features, n_components)
        The learned transformation, acting from the right on row vectors.

    components_ : numpy.ndarray of shape (n_components, n_features)
        Transpose of ``rca_``.

    mahalanobis_ : numpy.ndarray of shape (n_features, n_features)
        The learned Mahalanobis matrix ``rca_ @ rca_.T``.

    rank_ : int
        Effective rank of the learned transformation.

    Examples
    --------
    >>> import numpy as np
    >>> from skrca.decomposition import RCA
    >>> X = np.array(
    ...     [[0.0, 0.0], [1.0, 0.2], [4.0, 4.0], [5.0, 3.6], [2.0, 9.0], [2.4, 8.0]]
    ... )
    >>> chunks = [1, 1, 2, 2, -1, -1]
    >>> rca = RCA(n_components=1).fit(X, chunks)
    >>> rca
    RCA(n_components=1)
    >>> rca.transform(X).shape
    (6, 1)
    >>> rca.get_mahalanobis_matrix().shape
    (2, 2)
    """

    def __init__(self, n_components=None, relabel=False, tol=1e-12):
        self.n_components = n_components
        self.relabel = relabel
        self.tol = tol

    def fit(self, X, chunks):
        """Learn the RCA transformation from the chunklets.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data.

        chunks : array-like of shape (n_samples,)
            Chunklet membership of each sample, ``-1`` for samples outside of any
            chunklet.

        Returns
        -------
        self : object
            Fitted transformer.
        """
        self._fit(X, chunks)

        return self

    def fit_transform(self, X, chunks):
        """Fit the model and return the transformed training data.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data.

        chunks : array-like of shape (n_samples,)
            Chunklet membership of each sample.

        Returns
        -------
        X_new : numpy.ndarray of shape (n_samples, n_components)
            Transformed training data.
        """
        return self._fit(X, chunks).newX

    def _fit(self, X, chunks):
        result = relevant_component_analysis(
            X,
            chunks,
            n_components=self.n_components,
            relabel=self.relabel,
            tol=self.tol,
        )

        self.n_samples_in_ = result.newX.shape[0]
        self.n_features_in_ = result.B.shape[0]
        self.n_components_ = result.RCA.shape[1]
        self.n_chunklets_ = result.n_chunklets

        self.mean_ = result.mean
        self.cfld_ = result.cfld
        self.inner_covariance_ = result.inner_covariance
        self.singular_values_ = result.singular_values
        self.rca_ = result.RCA
        self.components_ = result.RCA.T
        self.mahalanobis_ = result.B
        self.rank_ = result.rank

        if self.rank_ < self.n_components_:
            warnings.warn(
                f"The inner covariance of the chunklets has rank {self.rank_}, less "
                f"than n_components={self.n_components_}; the transformation maps "
                "the remaining directions to zero.",
                RankDeficientWarning,
                stacklevel=3,
            )

        return result

    def transform(self, X):
        """Apply the learned transformation to X.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Data to transform.

        Returns
        -------
        X_new : numpy.ndarray of shape (n_samples, n_components)
        """
        check_is_fitted(self, ["rca_", "mahalanobis_"])

        X = check_array(X, dtype=FLOAT_DTYPES)
        if X.shape[1] != self.n_features_in_:
            raise InvalidInputError(
                f"X has {X.shape[1]} features, but RCA is expecting "
                f"{self.n_features_in_} features as input."
            )
        return X @ self.rca_

    def get_mahalanobis_matrix(self):
        """Return the learned Mahalanobis matrix.

        Returns
        -------
        B : numpy.ndarray of shape (n_features, n_features)
        """
        check_is_fitted(self, ["mahalanobis_"])

        return self.mahalanobis_

    def pairwise_distances(self, X, Y=None, squared=False):
        """Mahalanobis distances between the rows of X and Y under the learned
        metric.

        Parameters
        ----------
        X : array-like of shape (n_samples_X, n_features)
        Y : array-like of shape (n_samples_Y, n_features), default=None
            If None, ``Y=X``.
        squared : bool, default=False
            Whether to return squared distances.

        Returns
        -------
        distances : numpy.ndarray of shape (n_samples_X, n_samples_Y)
        """
        check_is_fitted(self, ["mahalanobis_"])

        return pairwise_mahalanobis_distances(
            X, Y, self.mahalanobis_, squared=squared
        )
