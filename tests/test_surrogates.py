import os
import json
import tempfile
import unittest
import numpy as np
import gpmoe as gm
from gpmoe.errors import DimensionMismatch, FitError, SaveError
from gpmoe.surrogates import GpSurrogate, GpSurrogateParams, MeanKind, CorrelationKind
from gpmoe.misc.designs import maximinlhs, regulargrid
from gpmoe.misc.testfunctions import xsinx

BOX = [[0.0], [25.0]]


def xsinx_data():
    xi = maximinlhs(1, 10, BOX, max_iter=100, seed=0)
    xt = regulargrid(1, 100, BOX)
    return xi, xsinx(xi), xt, xsinx(xt)


def relative_error(z, zref):
    return np.linalg.norm(z - zref) / np.linalg.norm(zref)


class TestGpSurrogateParams(unittest.TestCase):
    def test_defaults(self):
        params = GpSurrogateParams(("Constant", "Matern32"))
        self.assertEqual(params.variant.mean, MeanKind.CONSTANT)
        self.assertEqual(params.variant.corr, CorrelationKind.MATERN32)
        self.assertIsNone(params.initial_theta)
        self.assertIsNone(params.kpls_dim)
        self.assertGreater(params.nugget, 0.0)

    def test_setters_chain(self):
        params = GpSurrogateParams(("Linear", "Matern52"))
        out = params.set_initial_theta([0.1, 0.2]).set_kpls_dim(2).set_nugget(1e-10)
        self.assertIs(out, params)
        self.assertEqual(params.initial_theta, [0.1, 0.2])
        self.assertEqual(params.kpls_dim, 2)
        self.assertEqual(params.nugget, 1e-10)

    def test_invalid_settings(self):
        params = GpSurrogateParams(("Linear", "Matern52"))
        with self.assertRaises(ValueError):
            params.set_kpls_dim(0)
        with self.assertRaises(ValueError):
            params.set_nugget(-1.0)
        with self.assertRaises(ValueError):
            params.set_initial_theta([])
        with self.assertRaises(ValueError):
            params.set_initial_theta([1.0, -1.0])

    def test_unknown_variant(self):
        with self.assertRaises(KeyError):
            GpSurrogateParams(("Cubic", "Matern52"))


class TestFit(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.xi, cls.zi, cls.xt, cls.zt = xsinx_data()
        cls.params = gm.params_for(("Constant", "SquaredExponential"))
        cls.surrogate = cls.params.fit(cls.xi, cls.zi)

    def test_accuracy(self):
        zpm = self.surrogate.predict_values(self.xt)
        self.assertEqual(zpm.shape, (100, 1))
        self.assertLess(relative_error(zpm.reshape(-1), self.zt), 0.2)

    def test_accuracy_matern52(self):
        surrogate = gm.params_for(("Constant", "Matern52")).fit(self.xi, self.zi)
        zpm = surrogate.predict_values(self.xt).reshape(-1)
        self.assertLess(relative_error(zpm, self.zt), 0.2)

    def test_variances(self):
        zpv = self.surrogate.predict_variances(self.xt)
        self.assertEqual(zpv.shape, (100, 1))
        self.assertTrue(np.all(zpv >= 0.0))
        zpv_i = self.surrogate.predict_variances(self.xi)
        self.assertLess(np.max(zpv_i), 1e-3 * np.var(self.zi))

    def test_interpolation(self):
        zpm = self.surrogate.predict_values(self.xi).reshape(-1)
        np.testing.assert_allclose(zpm, self.zi, atol=1e-3 * np.std(self.zi))

    def test_trained_state(self):
        s = self.surrogate
        self.assertEqual(s.theta.shape, (1,))
        self.assertTrue(np.all(s.theta > 0.0))
        self.assertEqual(s.w_star.size, 0)
        self.assertIsNone(s.kpls_dim)
        self.assertEqual(s.xtrain.shape, (10, 1))
        self.assertEqual(s.ytrain.shape, (10, 1))
        self.assertEqual(
            set(s.inner_params), {"sigma2", "beta", "gamma", "x_mean", "x_std", "y_mean", "y_std"}
        )
        self.assertEqual(str(s), "Constant_SquaredExponential")
        self.assertEqual(s.label, s.variant.key)

    def test_immutable(self):
        with self.assertRaises(ValueError):
            self.surrogate.xtrain[0, 0] = 1.0
        with self.assertRaises(ValueError):
            self.surrogate.theta[0] = 1.0
        inner = self.surrogate.inner_params
        inner["gamma"][0] = 1e6
        self.assertNotEqual(self.surrogate.inner_params["gamma"][0], 1e6)

    def test_params_reusable(self):
        other = self.params.fit(self.xi, self.zi)
        self.assertIsNone(self.params.kpls_dim)
        np.testing.assert_allclose(other.theta, self.surrogate.theta)

    def test_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatch):
            self.surrogate.predict_values(np.ones((3, 2)))
        with self.assertRaises(DimensionMismatch):
            self.surrogate.predict_variances(np.ones((3, 2)))

    def test_all_variants_fit(self):
        for variant in gm.surrogates.variants():
            surrogate = gm.params_for(variant).fit(self.xi, self.zi)
            self.assertEqual(surrogate.variant, variant)
            zpm = surrogate.predict_values(self.xt)
            self.assertTrue(np.all(np.isfinite(zpm)), msg=variant.key)


class TestFitErrors(unittest.TestCase):
    def setUp(self):
        self.params = gm.params_for(("Constant", "SquaredExponential"))
        rng = np.random.default_rng(1)
        self.x = rng.uniform(size=(8, 3))
        self.y = np.sum(self.x, axis=1, keepdims=True)

    def test_row_mismatch(self):
        with self.assertRaises(FitError):
            self.params.fit(self.x, self.y[:5])

    def test_too_few_samples(self):
        with self.assertRaises(FitError):
            self.params.fit(self.x[:1], self.y[:1])

    def test_bad_shapes(self):
        with self.assertRaises(FitError):
            self.params.fit(self.x[:, 0], self.y)
        with self.assertRaises(FitError):
            self.params.fit(self.x, np.hstack((self.y, self.y)))

    def test_non_finite(self):
        y = self.y.copy()
        y[2, 0] = np.nan
        with self.assertRaises(FitError):
            self.params.fit(self.x, y)

    def test_not_enough_samples_for_mean(self):
        params = gm.params_for(("Quadratic", "Matern32"))
        with self.assertRaises(FitError):
            params.fit(self.x, self.y)

    def test_kpls_dim_too_large(self):
        with self.assertRaises(FitError):
            self.params.set_kpls_dim(4).fit(self.x, self.y)

    def test_initial_theta_length(self):
        with self.assertRaises(FitError):
            self.params.set_initial_theta([1.0, 1.0]).fit(self.x, self.y)

    def test_initial_theta_broadcast(self):
        surrogate = self.params.set_initial_theta([1.0]).fit(self.x, self.y)
        self.assertEqual(surrogate.theta.shape, (3,))

    def test_constant_output(self):
        x = np.linspace(0.0, 1.0, 6).reshape(-1, 1)
        y = np.full((6, 1), 3.0)
        surrogate = gm.params_for(("Constant", "Matern52")).fit(x, y)
        xt = np.array([[0.25], [0.5], [2.0]])
        np.testing.assert_allclose(surrogate.predict_values(xt), 3.0, atol=1e-8)
        variances = surrogate.predict_variances(xt)
        self.assertTrue(np.all(np.isfinite(variances)))
        self.assertTrue(np.all(variances >= 0.0))


class TestPls(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        rng = np.random.default_rng(2)
        cls.x = rng.uniform(size=(20, 3))
        cls.y = np.sin(cls.x[:, 0] + 2.0 * cls.x[:, 1]) + 0.1 * cls.x[:, 2]
        cls.surrogate = gm.params_for(("Constant", "SquaredExponential"), kpls_dim=1).fit(
            cls.x, cls.y
        )

    def test_projection(self):
        s = self.surrogate
        self.assertEqual(s.kpls_dim, 1)
        self.assertEqual(s.w_star.shape, (3, 1))
        self.assertEqual(s.theta.shape, (1,))
        self.assertEqual(s.label, "Constant_SquaredExponential_PLS(1)")
        self.assertEqual(str(s), s.label)

    def test_predict(self):
        xt = np.random.default_rng(3).uniform(size=(7, 3))
        self.assertEqual(self.surrogate.predict_values(xt).shape, (7, 1))
        self.assertEqual(self.surrogate.predict_variances(xt).shape, (7, 1))
        with self.assertRaises(DimensionMismatch):
            self.surrogate.predict_values(xt[:, :1])

    def test_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "pls.json")
            self.surrogate.save(path)
            reloaded = gm.load(path)
        self.assertEqual(reloaded.label, self.surrogate.label)
        np.testing.assert_allclose(reloaded.predict_values(self.x), self.surrogate.predict_values(self.x))


class TestSaveLoad(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.xi, cls.zi, cls.xt, cls.zt = xsinx_data()

    def test_round_trip_all_variants(self):
        with tempfile.TemporaryDirectory() as tmp:
            for variant in gm.surrogates.variants():
                surrogate = gm.params_for(variant).fit(self.xi, self.zi)
                path = os.path.join(tmp, f"{variant.key}.json")
                surrogate.save(path)
                reloaded = gm.load(path)
                self.assertIsInstance(reloaded, GpSurrogate)
                self.assertEqual(reloaded.variant, variant)
                np.testing.assert_allclose(
                    reloaded.predict_values(self.xt),
                    surrogate.predict_values(self.xt),
                    rtol=1e-8,
                    atol=1e-10,
                )
                np.testing.assert_allclose(
                    reloaded.predict_variances(self.xt),
                    surrogate.predict_variances(self.xt),
                    rtol=1e-6,
                    atol=1e-10,
                )

    def test_round_trip_accuracy(self):
        surrogate = gm.params_for(("Constant", "SquaredExponential")).fit(self.xi, self.zi)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "xsinx.json")
            surrogate.save(path)
            reloaded = gm.load(path)
        zpm = reloaded.predict_values(self.xt).reshape(-1)
        self.assertLess(relative_error(zpm, self.zt), 0.2)

    def test_file_content(self):
        surrogate = gm.params_for(("Linear", "Matern32")).fit(self.xi, self.zi)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "model.json")
            surrogate.save(path)
            with open(path, "r", encoding="utf-8") as f:
                record = json.load(f)
            self.assertEqual(os.listdir(tmp), ["model.json"])
        self.assertEqual(record["mean"], "Linear")
        self.assertEqual(record["corr"], "Matern32")
        for key in ["theta", "inner_params", "w_star", "xtrain", "ytrain"]:
            self.assertIn(key, record)
        self.assertEqual(record["w_star"], [])
        self.assertEqual(len(record["xtrain"]), 10)

    def test_save_error(self):
        surrogate = gm.params_for(("Constant", "Matern52")).fit(self.xi, self.zi)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "missing", "model.json")
            with self.assertRaises(SaveError):
                surrogate.save(path)
            self.assertEqual(os.listdir(tmp), [])


if __name__ == "__main__":
    unittest.main()
