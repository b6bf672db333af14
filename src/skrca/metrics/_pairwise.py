import numpy as np
from sklearn.metrics.pairwise import check_pairwise_arrays


def pairwise_mahalanobis_distances(
    X: np.ndarray,
    Y: np.ndarray,
    B: np.ndarray,
    squared: bool = False,
):
    r"""
    Calculate the pairwise distance between two arrays under a Mahalanobis matrix.

    For the matrix :math:`\mathbf{B}` learned by RCA the distance is

    .. math::
        d_{B}(x, y)^2 = (x - y) \mathbf{B} (x - y)^T

    which equals the squared euclidean distance between the transformed samples.

    Parameters
    ----------
        X : numpy.ndarray of shape (n_samples_X, n_features)
            An array where each row is a sample and each column is a feature.
        Y : numpy.ndarray of shape (n_samples_Y, n_features)
            An array where each row is a sample and each column is a feature.
            If `None`, method uses `Y=X`.
        B : numpy.ndarray of shape (n_features, n_features)
            The symmetric positive semi-definite Mahalanobis matrix.
        squared : bool, default=False
            Whether to return the squared distance.

    Returns
    -------
    np.ndarray
        The pairwise distances, of shape `(X.shape[0], Y.shape[0])`.

    Examples
    --------
    >>> import numpy as np
    >>> from skrca.metrics import pairwise_mahalanobis_distances
    >>> B = np.array([[1.0, 0.0], [0.0, 4.0]])
    >>> X = np.array([[0, 0], [3, 2]])
    >>> Y = np.array([[0, 0]])
    >>> pairwise_mahalanobis_distances(X, Y, B)
    array([[0.],
           [5.]])
    """
    X, Y = check_pairwise_arrays(X, Y)
    B = np.asarray(B, dtype=np.float64)
    if B.ndim != 2 or B.shape[0] != B.shape[1]:
        raise ValueError(f"The Mahalanobis matrix must be square, got {B.shape}.")
    if B.shape[0] != X.shape[1]:
        raise ValueError(
            f"The Mahalanobis matrix has dimension {B.shape[0]}, but the data has "
            f"{X.shape[1]} features."
        )

    XY = X[:, np.newaxis, :] - Y[np.newaxis, :, :]
    dists = np.einsum("ijk,kl,ijl->ij", XY, B, XY)

    # round-off can make a zero distance slightly negative
    np.maximum(dists, 0.0, out=dists)
    if not squared:
        dists **= 0.5
    return dists
