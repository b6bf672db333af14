import unittest

import numpy as np

from skrca.decomposition import relevant_component_analysis
from skrca.metrics import pairwise_mahalanobis_distances


class PairwiseMahalanobisTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.X = np.array([[1, 2], [3, 4], [5, 6]])
        cls.Y = np.array([[7, 8], [9, 10]])
        cls.B = np.array([[2.0, 0.0], [0.0, 1.0]])
        cls.distances = np.sqrt(
            np.array([[108.0, 192.0], [48.0, 108.0], [12.0, 48.0]])
        )

    def test_mahalanobis_distance(self):
        distances = pairwise_mahalanobis_distances(self.X, self.Y, self.B)
        self.assertTrue(
            np.allclose(distances, self.distances),
            f"Calculated distance does not match expected value"
            f"Calculated: {distances} Expected: {self.distances}",
        )

    def test_squared(self):
        distances = pairwise_mahalanobis_distances(
            self.X, self.Y, self.B, squared=True
        )
        self.assertTrue(np.allclose(distances, self.distances**2))

    def test_identity_is_euclidean(self):
        distances = pairwise_mahalanobis_distances(self.X, None, np.eye(2))
        expected = np.linalg.norm(self.X[:, np.newaxis] - self.X[np.newaxis], axis=-1)
        self.assertTrue(np.allclose(distances, expected))
        self.assertTrue(np.array_equal(np.diag(distances), np.zeros(3)))

    def test_learned_metric(self):
        """Checks the distances under a learned matrix against the transformed
        euclidean distances"""
        random_state = np.random.RandomState(0)
        X = random_state.normal(size=(30, 3))
        chunks = np.repeat(np.arange(1, 7), 5)
        result = relevant_component_analysis(X, chunks, n_components=2)

        distances = pairwise_mahalanobis_distances(X, None, result.B)
        T = result.newX
        expected = np.linalg.norm(T[:, np.newaxis] - T[np.newaxis], axis=-1)
        self.assertTrue(np.allclose(distances, expected, atol=1e-6))

    def test_bad_matrix(self):
        with self.assertRaises(ValueError):
            pairwise_mahalanobis_distances(self.X, self.Y, np.eye(3))
        with self.assertRaises(ValueError):
            pairwise_mahalanobis_distances(self.X, self.Y, np.ones((2, 3)))


if __name__ == "__main__":
    unittest.main(verbosity=2)
