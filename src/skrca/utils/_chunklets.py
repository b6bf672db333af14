import numpy as np

from ..exceptions import InvalidInputError


UNASSIGNED = -1


def check_chunklets(chunks, n_samples=None, relabel=False):
    """Validate a chunklet membership vector and convert it to dense indices.

    In the default (strict) mode, ``chunks[i] == -1`` (or ``None``) says that
    sample ``i`` does not belong to any chunklet, and ``chunks[i] == j`` says that it
    belongs to chunklet ``j``. The chunklet labels must cover exactly the range
    ``1..n_chunklets``.

    With ``relabel=True`` any hashable value is accepted as a chunklet label (``-1``
    and ``None`` still mark unassigned samples) and labels are numbered in order of
    first appearance.

    Parameters
    ----------
    chunks : array-like of shape (n_samples,)
        Chunklet membership of each sample.
    n_samples : int, default=None
        Expected number of samples. Not checked when None.
    relabel : bool, default=False
        Whether to map arbitrary labels to a dense range instead of requiring
        the labels to already be ``1..n_chunklets``.

    Returns
    -------
    chunklet_index : numpy.ndarray of shape (n_samples,)
        Zero-based chunklet index of each sample, ``-1`` for unassigned samples.
    n_chunklets : int
        Number of chunklets.

    Raises
    ------
    InvalidInputError
        If the vector is not 1-D, has the wrong length, contains no chunklets, or
        (in strict mode) contains labels outside of ``{-1} ∪ {1..n_chunklets}`` or
        skips a label.

    Examples
    --------
    >>> from skrca.utils import check_chunklets
    >>> index, n_chunklets = check_chunklets([1, 1, -1, 2, 2])
    >>> index.tolist(), n_chunklets
    ([0, 0, -1, 1, 1], 2)
    >>> index, n_chunklets = check_chunklets(["b", "a", None, "b"], relabel=True)
    >>> index.tolist(), n_chunklets
    ([0, 1, -1, 0], 2)
    """
    if relabel:
        chunks = np.asarray(chunks, dtype=object)
    else:
        chunks = np.asarray(chunks)

    if chunks.ndim != 1:
        raise InvalidInputError(
            f"The chunklet vector must be one-dimensional, got shape {chunks.shape}."
        )
    if len(chunks) == 0:
        raise InvalidInputError("The chunklet vector is empty.")
    if n_samples is not None and len(chunks) != n_samples:
        raise InvalidInputError(
            f"The chunklet vector has {len(chunks)} entries, but the data has "
            f"{n_samples} samples."
        )

    if relabel:
        chunklet_index, n_chunklets = _relabel_chunklets(chunks)
    else:
        chunklet_index, n_chunklets = _check_dense_chunklets(chunks)

    if n_chunklets < 1:
        raise InvalidInputError(
            "No sample is assigned to a chunklet; at least one chunklet is required."
        )
    return chunklet_index, n_chunklets


def _check_dense_chunklets(chunks):
    if chunks.dtype == object:
        chunks = np.array(
            [UNASSIGNED if c is None else c for c in chunks], dtype=object
        )
        try:
            chunks = chunks.astype(np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(
                "Chunklet labels must be integers; use relabel=True for arbitrary "
                "labels."
            ) from e

    if chunks.dtype.kind == "f":
        if not np.all(np.isfinite(chunks)) or np.any(chunks != np.round(chunks)):
            raise InvalidInputError("Chunklet labels must be integral values.")
    elif chunks.dtype.kind not in "iu":
        raise InvalidInputError(
            f"Chunklet labels must be integers, got dtype {chunks.dtype}; use "
            "relabel=True for arbitrary labels."
        )
    if np.any(chunks > np.iinfo(np.intp).max):
        raise InvalidInputError(
            f"Chunklet labels cannot exceed {np.iinfo(np.intp).max}, the number of "
            "chunklets is bounded by the number of samples."
        )
    chunks = chunks.astype(np.intp)

    invalid = (chunks != UNASSIGNED) & (chunks < 1)
    if np.any(invalid):
        raise InvalidInputError(
            "Chunklet labels must be -1 (unassigned) or positive integers, found "
            f"{np.unique(chunks[invalid]).tolist()}."
        )

    n_chunklets = int(chunks.max())
    if n_chunklets < 1:
        return chunks, 0

    n_assigned = np.count_nonzero(chunks > 0)
    if n_chunklets > n_assigned:
        raise InvalidInputError(
            f"Chunklet labels must form the contiguous range 1..{n_chunklets}, but "
            f"only {n_assigned} samples are assigned to a chunklet."
        )

    counts = np.bincount(chunks[chunks > 0], minlength=n_chunklets + 1)[1:]
    if np.any(counts == 0):
        missing = (np.flatnonzero(counts == 0) + 1).tolist()
        raise InvalidInputError(
            f"Chunklet labels must form the contiguous range 1..{n_chunklets}, but "
            f"labels {missing} have no members."
        )

    return np.where(chunks > 0, chunks - 1, UNASSIGNED), n_chunklets


def _relabel_chunklets(chunks):
    mapping = {}
    chunklet_index = np.full(len(chunks), UNASSIGNED, dtype=np.intp)
    for i, label in enumerate(chunks):
        if _is_unassigned(label):
            continue
        try:
            chunklet_index[i] = mapping.setdefault(label, len(mapping))
        except TypeError as e:
            raise InvalidInputError(
                f"Chunklet label {label!r} at position {i} is not hashable."
            ) from e
    return chunklet_index, len(mapping)


def _is_unassigned(label):
    if label is None:
        return True
    if isinstance(label, (str, bytes)):
        return False
    try:
        return bool(label == UNASSIGNED)
    except (TypeError, ValueError):
        return False


def chunklet_sizes(chunklet_index, n_chunklets):
    """Number of members of each chunklet, from the output of
    :func:`check_chunklets`."""
    return np.bincount(chunklet_index[chunklet_index >= 0], minlength=n_chunklets)
