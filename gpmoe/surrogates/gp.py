# gpmoe/surrogates/gp.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
GP surrogates: training parameters and trained models.

A `GpSurrogateParams` object is bound to one `SurrogateVariant` and
trains a `gpmoe.core.Model` on standardized data (optionally projected
on PLS directions). The resulting `GpSurrogate` is immutable: it keeps
the selected inverse length scales `theta`, the kriging coefficients
(`inner_params`), the PLS rotation `w_star` and the training data, which
is everything needed to predict again after a save/load round trip.
"""
import numpy as np
from sklearn.cross_decomposition import PLSRegression

import gpmoe.num as gnp
from gpmoe.config import get_config, get_logger
from gpmoe.core import Model
from gpmoe.core.means import basis_size
from gpmoe.errors import DimensionMismatch, FitError, LinAlgError, LoadError
from gpmoe.kernel import anisotropic_parameters_initial_guess, select_parameters_with_reml
from gpmoe.kernel.stationary import stationary_covariance

from . import serialization
from .kinds import CORRELATION_KERNELS, MEAN_BASES, as_variant

_logger = get_logger()

DEFAULT_NUGGET = 100.0 * gnp.eps
MIN_SAMPLES = 2


def make_model(variant, nugget=DEFAULT_NUGGET, covparam=None):
    """Build the linear_predictor GP model of a variant."""
    kernel = CORRELATION_KERNELS[variant.corr]

    def covariance(x, y, covparam, pairwise=False):
        return stationary_covariance(x, y, kernel, covparam, pairwise, nugget)

    covariance.__name__ = f"{variant.corr.value}_covariance"
    return Model(MEAN_BASES[variant.mean], covariance, covparam=covparam)


def surrogate_label(variant, kpls_dim=None):
    """Human readable label "<Mean>_<Corr>[_PLS(<dim>)]"."""
    label = variant.key
    if kpls_dim is not None:
        label += f"_PLS({kpls_dim})"
    return label


class GpSurrogateParams:
    """Training configuration of a GP surrogate.

    Parameters
    ----------
    variant : SurrogateVariant or (mean, corr) pair
    initial_theta : sequence of float, optional
        Starting inverse length scales (one value, or one per effective
        input dimension). Defaults to a data-range heuristic.
    kpls_dim : int, optional
        Number of PLS components the inputs are projected on.
    nugget : float, optional
        Relative regularization added to the correlation matrix diagonal.

    The setters return the object itself so that they can be chained:

    >>> params = GpSurrogateParams(variant).set_nugget(1e-10).set_kpls_dim(1)
    """

    def __init__(self, variant, initial_theta=None, kpls_dim=None, nugget=DEFAULT_NUGGET):
        self._variant = as_variant(variant)
        self._initial_theta = None
        self._kpls_dim = None
        self._nugget = DEFAULT_NUGGET
        self.set_initial_theta(initial_theta)
        self.set_kpls_dim(kpls_dim)
        self.set_nugget(nugget)

    def __repr__(self):
        return (
            f"GpSurrogateParams({self._variant.key}, initial_theta={self._initial_theta}, "
            f"kpls_dim={self._kpls_dim}, nugget={self._nugget:g})"
        )

    @property
    def variant(self):
        return self._variant

    @property
    def initial_theta(self):
        return None if self._initial_theta is None else list(self._initial_theta)

    @property
    def kpls_dim(self):
        return self._kpls_dim

    @property
    def nugget(self):
        return self._nugget

    def set_initial_theta(self, theta):
        if theta is not None:
            theta = [float(t) for t in theta]
            if len(theta) == 0 or not all(np.isfinite(t) and t > 0.0 for t in theta):
                raise ValueError("initial_theta must be a non-empty sequence of positive floats")
        self._initial_theta = theta
        return self

    def set_kpls_dim(self, kpls_dim):
        if kpls_dim is not None:
            if isinstance(kpls_dim, bool) or int(kpls_dim) != kpls_dim or kpls_dim < 1:
                raise ValueError("kpls_dim must be an integer >= 1")
            kpls_dim = int(kpls_dim)
        self._kpls_dim = kpls_dim
        return self

    def set_nugget(self, nugget):
        nugget = float(nugget)
        if not np.isfinite(nugget) or nugget < 0.0:
            raise ValueError("nugget must be a finite float >= 0")
        self._nugget = nugget
        return self

    # ------------------------------------------------------------------
    def fit(self, x, y):
        """Train a surrogate on (x, y).

        Parameters
        ----------
        x : array_like, shape (n, d)
        y : array_like, shape (n, 1) or (n,)

        Returns
        -------
        GpSurrogate

        Raises
        ------
        FitError
            Inconsistent or too small data set, or failure of the GP
            engine (non positive-definite covariance, no finite REML
            value found).
        """
        x, y = _check_training_data(x, y)
        n, d = x.shape

        x_mean, x_std = gnp.mean(x, axis=0), gnp.std(x, axis=0)
        x_std = gnp.where(x_std > 0.0, x_std, 1.0)
        y_mean, y_std = float(gnp.mean(y)), float(gnp.std(y))
        y_std = y_std if y_std > 0.0 else 1.0
        xn = (x - x_mean) / x_std
        yn = (y.reshape(-1) - y_mean) / y_std

        w_star = gnp.zeros((0, 0))
        if self._kpls_dim is not None:
            w_star = _pls_rotations(xn, yn, self._kpls_dim)
            xn = gnp.matmul(xn, w_star)
        dim = xn.shape[1]

        model = make_model(self._variant, self._nugget)
        q = basis_size(model.mean, dim)
        if n <= q:
            raise FitError(
                f"{self._variant.key} needs more than {q} samples in dimension {dim}, got {n}"
            )

        loginvrho0 = None
        if self._initial_theta is not None:
            theta0 = self._initial_theta
            if len(theta0) == 1:
                theta0 = theta0 * dim
            if len(theta0) != dim:
                raise FitError(
                    f"initial_theta has {len(self._initial_theta)} values, {dim} expected"
                )
            loginvrho0 = gnp.log(gnp.asarray(theta0))

        try:
            covparam0 = anisotropic_parameters_initial_guess(model, xn, yn, loginvrho0)
            model, info = select_parameters_with_reml(model, xn, yn, covparam0=covparam0, info=True)
            if not np.isfinite(info.fun):
                raise FitError(f"{self._variant.key}: no finite REML value found")
            beta, gamma = model.kriging_coefficients(xn, yn)
        except (LinAlgError, ValueError, RuntimeError) as exc:
            raise FitError(f"{self._variant.key}: GP training failed: {exc}") from exc

        sigma2 = float(gnp.exp(model.covparam[0]))
        theta = gnp.exp(model.covparam[1:])
        _logger.debug(
            "Fitted %s on %d samples: sigma2=%.4g, theta=%s",
            surrogate_label(self._variant, self._kpls_dim),
            n,
            sigma2,
            theta,
        )
        inner_params = {
            "sigma2": sigma2,
            "beta": beta.tolist(),
            "gamma": gamma.tolist(),
            "x_mean": x_mean.tolist(),
            "x_std": x_std.tolist(),
            "y_mean": y_mean,
            "y_std": y_std,
        }
        return GpSurrogate(
            self._variant, theta, inner_params, w_star, x, y, nugget=self._nugget
        )


class GpSurrogate:
    """Trained GP surrogate of one variant.

    Instances are created by `GpSurrogateParams.fit` or by
    `gpmoe.surrogates.load` and are never modified afterwards; the
    arrays they expose are read-only.
    """

    def __init__(self, variant, theta, inner_params, w_star, xtrain, ytrain, nugget=DEFAULT_NUGGET):
        self._variant = as_variant(variant)
        self._xtrain = gnp.readonly(xtrain)
        self._ytrain = gnp.readonly(gnp.asarray(ytrain).reshape(-1, 1))
        self._w_star = gnp.readonly(w_star if gnp.asarray(w_star).size else gnp.zeros((0, 0)))
        self._theta = gnp.readonly(gnp.asarray(theta).reshape(-1))
        self._nugget = float(nugget)

        n, d = self._xtrain.shape
        if self._ytrain.shape[0] != n:
            raise ValueError("xtrain and ytrain must have the same number of rows")
        if self._w_star.size and self._w_star.shape[0] != d:
            raise ValueError(f"w_star should have {d} rows, got {self._w_star.shape[0]}")
        dim = self._w_star.shape[1] if self._w_star.size else d
        if self._theta.shape[0] != dim:
            raise ValueError(f"theta should have {dim} values, got {self._theta.shape[0]}")
        if not (gnp.all(gnp.isfinite(self._theta)) and gnp.all(self._theta > 0.0)):
            raise ValueError("theta must be positive")

        self._sigma2 = float(inner_params["sigma2"])
        self._x_mean = gnp.readonly(inner_params["x_mean"])
        self._x_std = gnp.readonly(inner_params["x_std"])
        self._y_mean = float(inner_params["y_mean"])
        self._y_std = float(inner_params["y_std"])
        self._beta = gnp.readonly(inner_params["beta"])
        self._gamma = gnp.readonly(inner_params["gamma"])
        if self._x_mean.shape != (d,) or self._x_std.shape != (d,):
            raise ValueError(f"x_mean and x_std should have {d} values")
        if self._gamma.shape != (n,):
            raise ValueError(f"gamma should have {n} values")
        if self._sigma2 <= 0.0 or self._y_std <= 0.0 or not gnp.all(self._x_std > 0.0):
            raise ValueError("sigma2, x_std and y_std must be positive")

        covparam = gnp.concatenate((gnp.log(gnp.asarray([self._sigma2])), gnp.log(self._theta)))
        self._model = make_model(self._variant, self._nugget, covparam)
        q = basis_size(self._model.mean, dim)
        if self._beta.shape != (q,):
            raise ValueError(f"beta should have {q} values")
        self._xtrain_n = self._normalize(self._xtrain)
        self._ytrain_n = (self._ytrain.reshape(-1) - self._y_mean) / self._y_std

    # ------------------------------------------------------------------
    def __str__(self):
        return self.label

    def __repr__(self):
        return f"<GpSurrogate {self.label} ntrain={self._xtrain.shape[0]}>"

    @property
    def variant(self):
        return self._variant

    @property
    def label(self):
        return surrogate_label(self._variant, self.kpls_dim)

    @property
    def kpls_dim(self):
        return self._w_star.shape[1] if self._w_star.size else None

    @property
    def theta(self):
        return self._theta

    @property
    def w_star(self):
        return self._w_star

    @property
    def xtrain(self):
        return self._xtrain

    @property
    def ytrain(self):
        return self._ytrain

    @property
    def nugget(self):
        return self._nugget

    @property
    def inner_params(self):
        return {
            "sigma2": self._sigma2,
            "beta": self._beta.tolist(),
            "gamma": self._gamma.tolist(),
            "x_mean": self._x_mean.tolist(),
            "x_std": self._x_std.tolist(),
            "y_mean": self._y_mean,
            "y_std": self._y_std,
        }

    # ------------------------------------------------------------------
    def _normalize(self, x):
        xn = (x - self._x_mean) / self._x_std
        if self._w_star.size:
            xn = gnp.matmul(xn, self._w_star)
        return xn

    def _check_input(self, x):
        x = gnp.asarray(x)
        if x.ndim != 2:
            raise ValueError(f"x should be a 2D array, got shape {x.shape}")
        if x.shape[1] != self._xtrain.shape[1]:
            raise DimensionMismatch(self._xtrain.shape[1], x.shape[1])
        return x

    def predict_values(self, x):
        """Posterior mean at the (m, d) points x, as an (m, 1) array."""
        xt = self._normalize(self._check_input(x))
        Pt = self._model.mean(xt, self._model.meanparam)
        Kti = self._model.covariance(xt, self._xtrain_n, self._model.covparam)
        yn = gnp.matmul(Pt, self._beta) + gnp.matmul(Kti, self._gamma)
        return (self._y_mean + self._y_std * yn).reshape(-1, 1)

    def predict_variances(self, x):
        """Posterior variance at the (m, d) points x, as an (m, 1) array."""
        xt = self._normalize(self._check_input(x))
        _, zt_var = self._model.predict(self._xtrain_n, self._ytrain_n, xt)
        return (self._y_std**2 * zt_var).reshape(-1, 1)

    # ------------------------------------------------------------------
    def to_dict(self):
        """Self-describing record of the surrogate (JSON compatible)."""
        return {
            "mean": self._variant.mean.value,
            "corr": self._variant.corr.value,
            "theta": self._theta.tolist(),
            "inner_params": self.inner_params,
            "w_star": self._w_star.tolist() if self._w_star.size else [],
            "kpls_dim": self.kpls_dim,
            "xtrain": self._xtrain.tolist(),
            "ytrain": self._ytrain.tolist(),
            "nugget": self._nugget,
            "version": get_config().version,
        }

    def save(self, path):
        """Save the surrogate as JSON in `path`; raises SaveError on failure."""
        serialization.write_json_atomic(path, self.to_dict())
        _logger.debug("Saved %s to %s", self.label, path)

    @classmethod
    def from_dict(cls, variant, data):
        """Rebuild a surrogate of `variant` from a persisted record."""
        decode = serialization.decode_field
        theta = decode(data, "theta", serialization.as_positive_vector)
        inner_params = decode(data, "inner_params", _as_inner_params)
        w_star = decode(data, "w_star", serialization.as_matrix)
        xtrain = decode(data, "xtrain", serialization.as_matrix)
        ytrain = decode(data, "ytrain", serialization.as_matrix)
        nugget = DEFAULT_NUGGET
        if "nugget" in data:
            nugget = decode(data, "nugget", serialization.as_float)
        if "kpls_dim" in data:
            kpls_dim = decode(data, "kpls_dim", serialization.as_optional_int)
            expected = w_star.shape[1] if w_star.size else None
            if kpls_dim != expected:
                raise LoadError(
                    f"Field 'kpls_dim' is {kpls_dim} but w_star gives {expected}", key="kpls_dim"
                )
        try:
            return cls(variant, theta, inner_params, w_star, xtrain, ytrain, nugget=nugget)
        except ValueError as exc:
            raise LoadError(f"Inconsistent {as_variant(variant).key} record: {exc}") from exc


# ----------------------------------------------------------------------
# helpers
# ----------------------------------------------------------------------
def _check_training_data(x, y):
    try:
        x = gnp.asarray(x, dtype=float)
        y = gnp.asarray(y, dtype=float)
    except (TypeError, ValueError) as exc:
        raise FitError(f"Training data cannot be converted to float arrays: {exc}") from exc
    if x.ndim != 2:
        raise FitError(f"x should be a 2D array, got shape {x.shape}")
    if y.ndim == 1:
        y = y.reshape(-1, 1)
    if y.ndim != 2 or y.shape[1] != 1:
        raise FitError(f"y should be a (n, 1) array, got shape {y.shape}")
    if x.shape[0] != y.shape[0]:
        raise FitError(f"x and y row counts differ: {x.shape[0]} != {y.shape[0]}")
    if x.shape[0] < MIN_SAMPLES:
        raise FitError(f"At least {MIN_SAMPLES} samples are needed, got {x.shape[0]}")
    if not (gnp.all(gnp.isfinite(x)) and gnp.all(gnp.isfinite(y))):
        raise FitError("Training data contains non-finite values")
    return x, y


def _pls_rotations(xn, yn, kpls_dim):
    """PLS directions (d, kpls_dim) of the standardized data."""
    d = xn.shape[1]
    if kpls_dim > d:
        raise FitError(f"kpls_dim={kpls_dim} exceeds the input dimension {d}")
    try:
        pls = PLSRegression(n_components=kpls_dim, scale=False).fit(xn, yn)
    except ValueError as exc:
        raise FitError(f"PLS projection failed: {exc}") from exc
    return gnp.asarray(pls.x_rotations_)


def _as_inner_params(value):
    if not isinstance(value, dict):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    out = {}
    for name in ("sigma2", "y_mean", "y_std"):
        out[name] = serialization.as_float(value[name])
    for name in ("beta", "gamma", "x_mean", "x_std"):
        out[name] = serialization.as_vector(value[name]).tolist()
    return out
