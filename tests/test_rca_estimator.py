import unittest
import warnings

import numpy as np
from sklearn import exceptions
from sklearn.base import clone

from skrca.datasets import make_chunklets, make_rca_blobs
from skrca.decomposition import RCA, relevant_component_analysis
from skrca.exceptions import InvalidInputError, RankDeficientWarning


class RCAEstimatorBaseTest(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.error_tol = 1e-8

        self.X, self.y = make_rca_blobs(n_samples_per_class=50, random_state=0)
        self.chunks = make_chunklets(
            self.y, chunklet_size=5, n_chunklets=18, random_state=0
        )


class RCAEstimatorTest(RCAEstimatorBaseTest):
    def test_fit_matches_function(self):
        """
        This test checks that the fitted attributes are those of the functional
        form.
        """
        for n_components in [None, 1]:
            with self.subTest(n_components=n_components):
                rca = RCA(n_components=n_components).fit(self.X, self.chunks)
                result = relevant_component_analysis(
                    self.X, self.chunks, n_components=n_components
                )

                self.assertTrue(np.allclose(rca.rca_, result.RCA))
                self.assertTrue(np.allclose(rca.mahalanobis_, result.B))
                self.assertTrue(np.allclose(rca.components_, result.RCA.T))
                self.assertTrue(np.allclose(rca.cfld_, result.cfld))
                self.assertTrue(np.allclose(rca.mean_, self.X.mean(axis=0)))
                self.assertEqual(rca.n_components_, result.RCA.shape[1])
                self.assertEqual(rca.n_chunklets_, 18)
                self.assertEqual(rca.n_features_in_, 2)
                self.assertEqual(rca.n_samples_in_, len(self.X))
                self.assertEqual(rca.rank_, rca.n_components_)

    def test_fit_transform(self):
        """
        This test checks that fit_transform and transform return the transformed
        training data.
        """
        rca = RCA()
        T = rca.fit_transform(self.X, self.chunks)
        self.assertTrue(np.allclose(T, rca.transform(self.X), atol=self.error_tol))
        self.assertTrue(
            np.allclose(
                T,
                relevant_component_analysis(self.X, self.chunks).newX,
                atol=self.error_tol,
            )
        )

    def test_pairwise_distances(self):
        """
        This test checks that the learned distances are euclidean distances in the
        transformed space.
        """
        rca = RCA().fit(self.X, self.chunks)
        T = rca.transform(self.X[:10])
        expected = np.linalg.norm(T[:, np.newaxis] - T[np.newaxis], axis=-1)

        self.assertTrue(
            np.allclose(rca.pairwise_distances(self.X[:10]), expected, atol=1e-6)
        )
        self.assertTrue(
            np.allclose(
                rca.pairwise_distances(self.X[:10], self.X[:10], squared=True),
                expected**2,
                atol=1e-6,
            )
        )

    def test_get_mahalanobis_matrix(self):
        rca = RCA().fit(self.X, self.chunks)
        self.assertTrue(np.array_equal(rca.get_mahalanobis_matrix(), rca.mahalanobis_))

    def test_clone(self):
        """
        This test checks that the hyper-parameters follow the scikit-learn
        protocol.
        """
        rca = RCA(n_components=1, relabel=True, tol=1e-10)
        self.assertEqual(
            rca.get_params(), {"n_components": 1, "relabel": True, "tol": 1e-10}
        )
        clone_rca = clone(rca)
        self.assertEqual(clone_rca.get_params(), rca.get_params())
        clone_rca.set_params(n_components=2)
        self.assertEqual(clone_rca.n_components, 2)
        self.assertEqual(rca.n_components, 1)

    def test_relabel(self):
        """
        This test checks that relabel=True accepts class-like labels.
        """
        labels = np.where(self.chunks > 0, self.chunks * 10, -1)
        with self.assertRaises(InvalidInputError):
            RCA().fit(self.X, labels)

        rca = RCA(relabel=True).fit(self.X, labels)
        reference = RCA().fit(self.X, self.chunks)
        self.assertEqual(rca.n_chunklets_, 18)
        self.assertTrue(np.allclose(rca.mahalanobis_, reference.mahalanobis_))


class RCAEstimatorErrorTest(RCAEstimatorBaseTest):
    def test_not_fitted(self):
        """
        This test checks that using an unfitted transformer raises NotFittedError.
        """
        rca = RCA()
        with self.assertRaises(exceptions.NotFittedError):
            rca.transform(self.X)
        with self.assertRaises(exceptions.NotFittedError):
            rca.get_mahalanobis_matrix()

    def test_shape_inconsistent_transform(self):
        """
        This test checks that the number of features must match the training data.
        """
        rca = RCA().fit(self.X, self.chunks)
        with self.assertRaises(InvalidInputError):
            rca.transform(np.hstack([self.X, self.X]))

    def test_bad_n_components(self):
        with self.assertRaises(InvalidInputError):
            RCA(n_components=3).fit(self.X, self.chunks)

    def test_rank_deficient_warning(self):
        """
        This test checks that a transformation of lower rank than requested is
        reported with a warning.
        """
        chunks = np.arange(1, len(self.X) + 1)
        rca = RCA()
        with self.assertWarns(RankDeficientWarning):
            rca.fit(self.X, chunks)
        self.assertEqual(rca.rank_, 0)

    def test_no_warning_full_rank(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", RankDeficientWarning)
            RCA().fit(self.X, self.chunks)


if __name__ == "__main__":
    unittest.main(verbosity=2)
