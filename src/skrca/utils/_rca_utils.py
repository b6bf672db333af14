import numpy as np
from numpy.linalg import LinAlgError
from scipy import linalg
from sklearn.utils.extmath import svd_flip

from ..exceptions import (
    InvalidInputError,
    NumericalInstabilityError,
    SingularMatrixError,
)


def chunklet_inner_covariance(X, chunklet_index, n_chunklets):
    r"""Computes the average covariance of the samples around their chunklet means.

    .. math::
        \mathbf{C}_{in} = \frac{1}{m} \sum_{j=1}^{S} \sum_{i \in C_j}
        \left(\mathbf{x}_i - \mathbf{m}_j\right)^T
        \left(\mathbf{x}_i - \mathbf{m}_j\right)

    where :math:`\mathbf{m}_j` is the mean of chunklet :math:`C_j` and :math:`m`
    the total number of samples belonging to a chunklet. Samples outside of any
    chunklet are ignored.

    Parameters
    ----------
    X : numpy.ndarray of shape (n_samples, n_features)
        Data matrix, usually centered.
    chunklet_index : numpy.ndarray of shape (n_samples,)
        Zero-based chunklet index of each sample, -1 for unassigned samples, as
        returned by :func:`skrca.utils.check_chunklets`.
    n_chunklets : int
        Number of chunklets.

    Returns
    -------
    inner_cov : numpy.ndarray of shape (n_features, n_features)
        The inner (within-chunklet) covariance, normalized by :math:`m`.
    indices : numpy.ndarray of shape (m,)
        Rows of ``X`` belonging to a chunklet, ordered by chunklet and then by
        their position in ``X``.
    means : numpy.ndarray of shape (n_chunklets, n_features)
        The chunklet means.

    Examples
    --------
    >>> import numpy as np
    >>> from skrca.utils import chunklet_inner_covariance
    >>> X = np.array([[0.0, 0.0], [2.0, 0.0], [5.0, 5.0], [9.0, 9.0], [9.0, 11.0]])
    >>> inner_cov, indices, means = chunklet_inner_covariance(
    ...     X, np.array([0, 0, -1, 1, 1]), 2
    ... )
    >>> inner_cov
    array([[0.5, 0. ],
           [0. , 0.5]])
    >>> indices.tolist()
    [0, 1, 3, 4]
    """
    assigned = np.flatnonzero(chunklet_index >= 0)
    indices = assigned[np.argsort(chunklet_index[assigned], kind="stable")]
    labels = chunklet_index[indices]

    counts = np.bincount(labels, minlength=n_chunklets)
    if np.any(counts == 0):
        raise InvalidInputError(
            f"Every chunklet must have at least one member, chunklets "
            f"{np.flatnonzero(counts == 0).tolist()} are empty."
        )

    means = np.zeros((n_chunklets, X.shape[1]), dtype=X.dtype)
    np.add.at(means, labels, X[indices])
    means /= counts[:, np.newaxis]

    centered = X[indices] - means[labels]
    inner_cov = np.atleast_2d(np.cov(centered, rowvar=False, bias=True))

    return inner_cov, indices, means


def chunklet_total_covariance(X, indices):
    """Sample covariance (normalized by :math:`m - 1`) of the chunkleted rows of X.

    Only the rows in ``indices`` are used; the full dataset would be more accurate
    but the resulting matrix is not guaranteed to be consistent with the inner
    covariance.

    Raises
    ------
    SingularMatrixError
        If fewer than two rows are given, in which case the covariance is undefined.
    """
    if len(indices) < 2:
        raise SingularMatrixError(
            "The total covariance of the chunkleted samples requires at least two "
            f"samples, got {len(indices)}."
        )
    return np.atleast_2d(np.cov(X[indices], rowvar=False))


def cfld_projection(inner_cov, total_cov, n_components):
    r"""Constrained Fisher linear discriminant (cFLD) projection.

    Computes the eigenpairs of :math:`\mathbf{C}_{tot}^{-1} \mathbf{C}_{in}`, sorts
    them by decreasing eigenvalue and keeps the first ``n_components``
    eigenvectors as the columns of the projection.

    Parameters
    ----------
    inner_cov : numpy.ndarray of shape (n_features, n_features)
        Inner (within-chunklet) covariance.
    total_cov : numpy.ndarray of shape (n_features, n_features)
        Total covariance of the chunkleted samples.
    n_components : int
        Number of directions to keep.

    Returns
    -------
    projection : numpy.ndarray of shape (n_features, n_components)
        Unit-norm eigenvectors, acting on row vectors from the right.
    eigenvalues : numpy.ndarray of shape (n_features,)
        All eigenvalues, in decreasing order.

    Raises
    ------
    SingularMatrixError
        If the total covariance is not invertible.
    NumericalInstabilityError
        If the eigendecomposition yields non-finite or complex eigenvalues.
    """
    n_features = total_cov.shape[0]
    if not np.all(np.isfinite(total_cov)):
        raise NumericalInstabilityError(
            "The total covariance of the chunkleted samples is not finite."
        )

    rank = np.linalg.matrix_rank(total_cov)
    if rank < n_features:
        raise SingularMatrixError(
            "The total covariance of the chunkleted samples is singular "
            f"(rank {rank} < {n_features} features); provide more chunkleted "
            "samples or do not reduce the dimension."
        )

    try:
        ratio = linalg.solve(total_cov, inner_cov, assume_a="sym")
    except LinAlgError as e:
        raise SingularMatrixError(
            "Could not invert the total covariance of the chunkleted samples."
        ) from e

    eigenvalues, eigenvectors = linalg.eig(ratio)
    if not np.all(np.isfinite(eigenvalues)):
        raise NumericalInstabilityError(
            "The cFLD eigendecomposition produced non-finite eigenvalues."
        )

    scale = max(1.0, np.max(np.abs(eigenvalues)))
    if np.max(np.abs(eigenvalues.imag)) > np.sqrt(np.finfo(ratio.dtype).eps) * scale:
        raise NumericalInstabilityError(
            "The cFLD eigendecomposition produced complex eigenvalues: "
            f"{eigenvalues[np.abs(eigenvalues.imag) > 0]}."
        )
    eigenvalues = np.real(eigenvalues)
    eigenvectors = np.real(eigenvectors)

    # ties keep the order of the solver
    order = np.argsort(-eigenvalues, kind="stable")
    eigenvalues = eigenvalues[order]
    eigenvectors = eigenvectors[:, order]
    eigenvectors /= np.linalg.norm(eigenvectors, axis=0)

    # flip eigenvectors' sign to enforce deterministic output
    max_abs_rows = np.argmax(np.abs(eigenvectors), axis=0)
    eigenvectors *= np.sign(eigenvectors[max_abs_rows, range(n_features)])

    return eigenvectors[:, :n_components], eigenvalues


def whitening_transform(inner_cov, tol=1e-12):
    r"""Decomposes the inner covariance for whitening.

    .. math::
        \mathbf{C}_{in} = \mathbf{U} \mathbf{S} \mathbf{V}^T

    Parameters
    ----------
    inner_cov : numpy.ndarray of shape (k, k)
        Symmetric positive semi-definite matrix.
    tol : float, default=1E-12
        Singular values smaller than ``tol`` times the largest one do not count
        towards the rank. Matrices with an eigenvalue below ``-tol`` times the
        largest singular value are rejected.

    Returns
    -------
    U : numpy.ndarray of shape (k, k)
        Left singular vectors, with deterministic signs.
    S : numpy.ndarray of shape (k,)
        Non-negative singular values in decreasing order.
    rank : int
        Effective rank of ``inner_cov``.

    Examples
    --------
    >>> import numpy as np
    >>> from skrca.utils import whitening_transform
    >>> U, S, rank = whitening_transform(np.array([[4.0, 0.0], [0.0, 0.0]]))
    >>> S
    array([4., 0.])
    >>> rank
    1
    """
    if not np.all(np.isfinite(inner_cov)):
        raise NumericalInstabilityError("The inner covariance is not finite.")

    U, S, Vt = linalg.svd(inner_cov)

    # flip eigenvectors' sign to enforce deterministic output
    U, Vt = svd_flip(U, Vt)

    # singular values are never negative, the eigenvalues carry the sign
    min_eigenvalue = linalg.eigvalsh(inner_cov)[0]
    if min_eigenvalue < -tol * S[0]:
        raise NumericalInstabilityError(
            "The inner covariance is not positive semi-definite, smallest "
            f"eigenvalue {min_eigenvalue}."
        )

    rank = int(np.sum(S > tol * S[0])) if S[0] > 0 else 0
    return U, S, rank
