import unittest
import math
import numpy as np
import gpmoe.num as gnp
from gpmoe.kernel import (
    exponential_kernel,
    squared_exponential_kernel,
    matern32_kernel,
    matern52_kernel,
    maternp_kernel,
    maternp_covariance,
    stationary_covariance,
)
from gpmoe.kernel.stationary import DEFAULT_NUGGET


class TestKernels(unittest.TestCase):
    def setUp(self):
        self.h = gnp.linspace(0.0, 3.0, 31)

    def test_value_at_zero(self):
        for kernel in [
            exponential_kernel,
            squared_exponential_kernel,
            matern32_kernel,
            matern52_kernel,
        ]:
            k0 = kernel(gnp.zeros((1,)))
            self.assertAlmostEqual(float(k0[0]), 1.0, places=12)

    def test_decreasing(self):
        for kernel in [
            exponential_kernel,
            squared_exponential_kernel,
            matern32_kernel,
            matern52_kernel,
        ]:
            k = kernel(self.h)
            self.assertTrue(np.all(np.diff(k) < 0.0))

    def test_closed_forms(self):
        h = self.h
        np.testing.assert_allclose(exponential_kernel(h), np.exp(-h))
        np.testing.assert_allclose(squared_exponential_kernel(h), np.exp(-(h**2)))
        t = math.sqrt(6.0) * h
        np.testing.assert_allclose(matern32_kernel(h), (1.0 + t) * np.exp(-t))
        t = math.sqrt(10.0) * h
        np.testing.assert_allclose(
            matern52_kernel(h), (1.0 + t + t**2 / 3.0) * np.exp(-t), rtol=1e-12
        )

    def test_maternp_p1_is_matern32(self):
        np.testing.assert_allclose(maternp_kernel(1, self.h), matern32_kernel(self.h))

    def test_infinite_distance(self):
        h = gnp.array([np.inf])
        self.assertEqual(float(squared_exponential_kernel(h)[0]), 0.0)
        self.assertEqual(float(exponential_kernel(h)[0]), 0.0)


class TestStationaryCovariance(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(0)
        self.x = rng.uniform(size=(8, 2))
        self.y = rng.uniform(size=(5, 2))
        self.param = gnp.array([math.log(2.0), math.log(3.0), math.log(0.5)])

    def test_covariance_matrix(self):
        K = stationary_covariance(self.x, None, squared_exponential_kernel, self.param)
        self.assertEqual(K.shape, (8, 8))
        np.testing.assert_allclose(K, K.T)
        np.testing.assert_allclose(np.diag(K), 2.0 * (1.0 + DEFAULT_NUGGET))
        self.assertTrue(np.all(np.linalg.eigvalsh(K) > 0.0))

    def test_cross_covariance(self):
        K = stationary_covariance(self.x, self.y, exponential_kernel, self.param)
        self.assertEqual(K.shape, (8, 5))
        d = np.sqrt(
            (3.0 * (self.x[0, 0] - self.y[1, 0])) ** 2
            + (0.5 * (self.x[0, 1] - self.y[1, 1])) ** 2
        )
        self.assertAlmostEqual(K[0, 1], 2.0 * math.exp(-d), places=12)

    def test_pairwise(self):
        v = stationary_covariance(self.x, None, matern32_kernel, self.param, pairwise=True)
        self.assertEqual(v.shape, (8,))
        v = stationary_covariance(self.x[:5], self.y, matern32_kernel, self.param, pairwise=True)
        K = stationary_covariance(self.x[:5], self.y, matern32_kernel, self.param)
        np.testing.assert_allclose(v, np.diag(K))

    def test_nugget(self):
        K = maternp_covariance(self.x, self.x, 2, self.param, nugget=1e-3)
        np.testing.assert_allclose(np.diag(K), 2.0 * (1.0 + 1e-3))


if __name__ == "__main__":
    unittest.main()
