"""Synthetic datasets and chunklet generators used for examples and testing."""

from ._samples_generator import make_chunklets, make_rca_blobs


__all__ = [
    "make_chunklets",
    "make_rca_blobs",
]
