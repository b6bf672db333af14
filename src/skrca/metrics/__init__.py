"""Distances induced by a learned Mahalanobis matrix."""

from ._pairwise import pairwise_mahalanobis_distances

__all__ = ["pairwise_mahalanobis_distances"]
