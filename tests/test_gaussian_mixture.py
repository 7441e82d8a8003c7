import unittest
import math
import numpy as np
from scipy.stats import multivariate_normal
from gpmoe.mixture import GaussianMixture
from gpmoe.errors import DimensionMismatch, EmptyClusterError, LinAlgError


def two_clusters(heaviside_factor=1.0):
    weights = np.array([0.5, 0.5])
    means = np.array([[0.0, 0.0], [4.0, 4.0]])
    covariances = np.array([3.0 * np.eye(2), 3.0 * np.eye(2)])
    return GaussianMixture(weights, means, covariances, heaviside_factor)


def diagonal_probes(n=101):
    v = np.linspace(0.0, 4.0, n)
    return np.column_stack((v, v))


class TestConstruction(unittest.TestCase):
    def test_precisions(self):
        covariances = np.array([[[2.0, 0.5], [0.5, 1.0]], [[1.0, -0.3], [-0.3, 0.5]]])
        gmix = GaussianMixture([0.3, 0.7], [[0.0, 0.0], [1.0, 1.0]], covariances)
        for k in range(2):
            np.testing.assert_allclose(gmix.precisions[k], np.linalg.inv(covariances[k]), atol=1e-12)
            P = gmix.precisions_cholesky[k]
            np.testing.assert_allclose(np.tril(P.T), P.T)
            np.testing.assert_allclose(P @ P.T, gmix.precisions[k], atol=1e-12)
        self.assertEqual(gmix.n_clusters, 2)
        self.assertEqual(gmix.n_features, 2)
        self.assertEqual(gmix.heaviside_factor, 1.0)

    def test_not_positive_definite(self):
        covariances = np.array([np.eye(2), [[1.0, 2.0], [2.0, 1.0]]])
        with self.assertRaises(LinAlgError) as cm:
            GaussianMixture([0.5, 0.5], [[0.0, 0.0], [1.0, 1.0]], covariances)
        self.assertIn("covariance #1", str(cm.exception))
        self.assertIsInstance(cm.exception, np.linalg.LinAlgError)

    def test_not_symmetric(self):
        covariances = np.array([np.eye(2), [[1.0, 0.5], [0.0, 1.0]]])
        with self.assertRaises(ValueError) as cm:
            GaussianMixture([0.5, 0.5], [[0.0, 0.0], [1.0, 1.0]], covariances)
        self.assertIn("symmetric", str(cm.exception))

    def test_shapes(self):
        with self.assertRaises(ValueError):
            GaussianMixture([0.5, 0.5], [[0.0, 0.0]], np.array([np.eye(2)]))
        with self.assertRaises(ValueError):
            GaussianMixture([1.0], [[0.0, 0.0]], np.array([np.eye(3)]))

    def test_weights(self):
        with self.assertRaises(ValueError):
            GaussianMixture([1.5, -0.5], [[0.0], [1.0]], np.ones((2, 1, 1)))
        with self.assertRaises(ValueError):
            GaussianMixture([np.nan, 0.5], [[0.0], [1.0]], np.ones((2, 1, 1)))
        with self.assertLogs("gpmoe", level="WARNING"):
            gmix = GaussianMixture([1.0, 3.0], [[0.0], [1.0]], np.ones((2, 1, 1)))
        np.testing.assert_allclose(gmix.weights, [0.25, 0.75])

    def test_read_only(self):
        gmix = two_clusters()
        with self.assertRaises(ValueError):
            gmix.means[0, 0] = 1.0
        with self.assertRaises(ValueError):
            gmix.precisions_cholesky[0, 0, 0] = 1.0


class TestProbabilities(unittest.TestCase):
    def setUp(self):
        self.gmix = two_clusters()
        self.x = diagonal_probes()

    def test_log_gaussian_prob(self):
        covariances = np.array([[[2.0, 0.5], [0.5, 1.0]], [[1.0, -0.3], [-0.3, 0.5]]])
        means = np.array([[0.0, 1.0], [1.0, -1.0]])
        gmix = GaussianMixture([0.3, 0.7], means, covariances)
        x = np.random.default_rng(0).normal(size=(20, 2))
        log_prob = gmix.estimate_log_gaussian_prob(x)
        self.assertEqual(log_prob.shape, (20, 2))
        for k in range(2):
            np.testing.assert_allclose(
                log_prob[:, k], multivariate_normal.logpdf(x, means[k], covariances[k])
            )
        np.testing.assert_allclose(
            gmix.estimate_weighted_log_prob(x), log_prob + np.log([0.3, 0.7])
        )

    def test_heaviside_scales_precision(self):
        covariances = np.array([np.eye(2), 2.0 * np.eye(2)])
        means = np.array([[0.0, 0.0], [1.0, 1.0]])
        gmix = GaussianMixture([0.5, 0.5], means, covariances, heaviside_factor=4.0)
        x = np.random.default_rng(1).normal(size=(10, 2))
        log_prob = gmix.estimate_log_gaussian_prob(x)
        for k in range(2):
            np.testing.assert_allclose(
                log_prob[:, k], multivariate_normal.logpdf(x, means[k], covariances[k] / 4.0)
            )
        # stored covariances are untouched
        np.testing.assert_allclose(gmix.covariances, covariances)

    def test_responsibilities_sum_to_one(self):
        for h in [0.1, 0.99, 1.0, 10.0]:
            probas = self.gmix.with_heaviside_factor(h).predict_probas(self.x)
            self.assertEqual(probas.shape, (101, 2))
            np.testing.assert_allclose(np.sum(probas, axis=1), 1.0, atol=1e-6)

    def test_log_prob_resp(self):
        log_norm, log_resp = self.gmix.estimate_log_prob_resp(self.x)
        self.assertEqual(log_norm.shape, (101,))
        weighted = self.gmix.estimate_weighted_log_prob(self.x)
        np.testing.assert_allclose(log_norm, np.log(np.sum(np.exp(weighted), axis=1)))
        np.testing.assert_allclose(log_resp, weighted - log_norm[:, None])
        np.testing.assert_allclose(self.gmix.score_samples(self.x), log_norm)

    def test_far_away_points(self):
        x = np.array([[1e3, 1e3], [-1e3, -2e3]])
        probas = self.gmix.predict_probas(x)
        self.assertTrue(np.all(np.isfinite(probas)))
        np.testing.assert_allclose(np.sum(probas, axis=1), 1.0)
        np.testing.assert_array_equal(self.gmix.predict(x), [1, 0])

    def test_predict(self):
        labels = self.gmix.predict(self.x)
        self.assertEqual(labels.shape, (101,))
        np.testing.assert_array_equal(labels, np.argmax(self.gmix.predict_probas(self.x), axis=1))
        self.assertEqual(labels[0], 0)
        self.assertEqual(labels[-1], 1)
        # the midpoint is a tie, resolved to the first cluster
        self.assertEqual(labels[50], 0)

    def test_heaviside_sharpening(self):
        x = np.array([[1.0, 1.0]])
        peaks = [
            self.gmix.with_heaviside_factor(h).predict_probas(x)[0, 0]
            for h in [0.25, 0.5, 1.0, 2.0, 4.0]
        ]
        self.assertTrue(np.all(np.diff(peaks) > 0.0))

    def test_with_heaviside_factor_copy(self):
        sharp = self.gmix.with_heaviside_factor(3.0)
        self.assertEqual(sharp.heaviside_factor, 3.0)
        self.assertEqual(self.gmix.heaviside_factor, 1.0)
        with self.assertRaises(ValueError):
            self.gmix.with_heaviside_factor(0.0)
        with self.assertRaises(ValueError):
            self.gmix.with_heaviside_factor(-1.0)

    def test_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatch):
            self.gmix.predict(np.ones((4, 3)))


class TestScores(unittest.TestCase):
    def test_information_criteria(self):
        gmix = two_clusters()
        x = np.random.default_rng(2).normal(size=(30, 2))
        self.assertEqual(gmix.n_parameters(), 11)
        score = gmix.score(x)
        self.assertAlmostEqual(score, np.mean(gmix.score_samples(x)))
        self.assertAlmostEqual(gmix.bic(x), -2.0 * score * 30 + 11 * math.log(30))
        self.assertAlmostEqual(gmix.aic(x), -2.0 * score * 30 + 22.0)


class TestMStep(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(3)
        self.x = np.vstack((rng.normal(0.0, 1.0, (40, 2)), rng.normal(5.0, 0.5, (60, 2))))
        self.resp = np.zeros((100, 2))
        self.resp[:40, 0] = 1.0
        self.resp[40:, 1] = 1.0

    def test_hard_responsibilities(self):
        nk, means, covariances = GaussianMixture.estimate_gaussian_parameters(
            self.x, self.resp, 1e-6
        )
        np.testing.assert_allclose(nk, [40.0, 60.0])
        np.testing.assert_allclose(means[0], np.mean(self.x[:40], axis=0))
        np.testing.assert_allclose(means[1], np.mean(self.x[40:], axis=0))
        np.testing.assert_allclose(
            covariances[1], np.cov(self.x[40:].T, bias=True) + 1e-6 * np.eye(2)
        )

    def test_soft_responsibilities(self):
        resp = np.random.default_rng(4).dirichlet([1.0, 1.0, 1.0], size=100)
        nk, means, covariances = GaussianMixture.estimate_gaussian_parameters(self.x, resp, 0.0)
        np.testing.assert_allclose(np.sum(nk), 100.0)
        for k in range(3):
            w = resp[:, k]
            np.testing.assert_allclose(means[k], w @ self.x / w.sum())
            np.testing.assert_allclose(
                covariances[k], np.cov(self.x.T, aweights=w, bias=True), atol=1e-10
            )

    def test_from_responsibilities(self):
        gmix = GaussianMixture.from_responsibilities(self.x, self.resp)
        np.testing.assert_allclose(gmix.weights, [0.4, 0.6])
        np.testing.assert_array_equal(gmix.predict(self.x[:3]), [0, 0, 0])

    def test_empty_cluster(self):
        resp = np.zeros((100, 3))
        resp[:40, 0] = 1.0
        resp[40:, 2] = 1.0
        with self.assertRaises(EmptyClusterError) as cm:
            GaussianMixture.estimate_gaussian_parameters(self.x, resp, 1e-6)
        self.assertEqual(cm.exception.index, 1)
        self.assertIn("#1", str(cm.exception))

    def test_nearly_empty_cluster(self):
        resp = self.resp.copy()
        resp[:, 1] = 1e-18
        with self.assertRaises(EmptyClusterError) as cm:
            GaussianMixture.estimate_gaussian_parameters(self.x, resp, 1e-6)
        self.assertEqual(cm.exception.index, 1)


if __name__ == "__main__":
    unittest.main()
