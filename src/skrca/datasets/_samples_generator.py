import numbers

import numpy as np
from sklearn.utils import check_random_state
from sklearn.utils.validation import column_or_1d

from ..utils import UNASSIGNED


def make_chunklets(y, chunklet_size=2, n_chunklets=None, random_state=None):
    """Build a chunklet vector from class labels.

    Within each class the samples are shuffled and split into disjoint chunklets of
    ``chunklet_size`` samples. Samples left over, and samples of the chunklets that
    are not drawn, stay outside of any chunklet.

    Parameters
    ----------
    y : array-like of shape (n_samples,)
        Class labels.
    chunklet_size : int, default=2
        Number of samples per chunklet.
    n_chunklets : int, default=None
        Number of chunklets to draw in total, sampled uniformly among all the
        possible chunklets of all classes. If None, every class is split into as
        many chunklets as possible.
    random_state : int, RandomState instance or None, default=None
        Determines the shuffling of the samples and the choice of chunklets.

    Returns
    -------
    chunks : numpy.ndarray of shape (n_samples,)
        ``-1`` for samples outside of any chunklet, chunklet labels
        ``1..n_chunklets`` otherwise.

    Examples
    --------
    >>> from skrca.datasets import make_chunklets
    >>> chunks = make_chunklets([0, 0, 0, 1, 1], chunklet_size=2, random_state=0)
    >>> sorted(chunks.tolist())
    [-1, 1, 1, 2, 2]
    """
    y = column_or_1d(y)
    if (
        isinstance(chunklet_size, bool)
        or not isinstance(chunklet_size, numbers.Integral)
        or chunklet_size < 1
    ):
        raise ValueError(
            f"chunklet_size={chunklet_size!r} must be a positive integer."
        )
    random_state = check_random_state(random_state)

    candidates = []
    for label in np.unique(y):
        members = random_state.permutation(np.flatnonzero(y == label))
        for start in range(0, len(members) - chunklet_size + 1, chunklet_size):
            candidates.append(members[start : start + chunklet_size])

    if n_chunklets is None:
        n_chunklets = len(candidates)
    elif not 1 <= n_chunklets <= len(candidates):
        raise ValueError(
            f"n_chunklets={n_chunklets!r} must be between 1 and the number of "
            f"available chunklets ({len(candidates)})."
        )
    if n_chunklets == 0:
        raise ValueError(
            f"No class has at least chunklet_size={chunklet_size} samples."
        )

    chosen = np.sort(random_state.choice(len(candidates), n_chunklets, replace=False))

    chunks = np.full(len(y), UNASSIGNED, dtype=int)
    for label, candidate in enumerate(chosen, start=1):
        chunks[candidates[candidate]] = label
    return chunks


def make_rca_blobs(n_samples_per_class=100, random_state=None):
    """Generate three elongated gaussian classes in two dimensions.

    The classes are centered at ``(-16, 8)``, ``(0, 0)`` and ``(16, -8)`` and share
    the covariance ``[[15, 1], [1, 10]]``, so that they are separated along a
    direction that is not aligned with the axes, the classic illustration of RCA.

    Parameters
    ----------
    n_samples_per_class : int, default=100
        Number of samples in each class.
    random_state : int, RandomState instance or None, default=None
        Determines the random number generation.

    Returns
    -------
    X : numpy.ndarray of shape (3 * n_samples_per_class, 2)
        The samples, ordered by class.
    y : numpy.ndarray of shape (3 * n_samples_per_class,)
        The class labels 0, 1 and 2.

    Examples
    --------
    >>> from skrca.datasets import make_rca_blobs
    >>> X, y = make_rca_blobs(n_samples_per_class=10, random_state=0)
    >>> X.shape, y.shape
    ((30, 2), (30,))
    """
    random_state = check_random_state(random_state)

    centers = np.array([[-16.0, 8.0], [0.0, 0.0], [16.0, -8.0]])
    cov = np.array([[15.0, 1.0], [1.0, 10.0]])

    X = np.vstack(
        [
            random_state.multivariate_normal(center, cov, size=n_samples_per_class)
            for center in centers
        ]
    )
    y = np.repeat(np.arange(len(centers)), n_samples_per_class)
    return X, y
