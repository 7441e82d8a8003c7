# gpmoe/mixture/gaussian_mixture.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian mixture with full covariances.

The mixture is built once from weights, means and covariances (for
instance the output of one EM step, see `from_responsibilities`) and is
read-only afterwards. Densities are evaluated with the Cholesky factors
of the precision matrices,

    log N(x | mu_k, Sigma_k) = -0.5 * (d log(2 pi) + ||(x - mu_k) L_k||^2)
                               + sum_j log (L_k)_jj,

where L_k L_k^T = Sigma_k^-1. The `heaviside_factor` h multiplies the
precisions (L_k is scaled by sqrt(h)) in probability evaluation only:
h > 1 sharpens the boundaries between clusters, h < 1 smooths them.
"""
import math

import gpmoe.num as gnp
from gpmoe.config import get_logger
from gpmoe.errors import DimensionMismatch, EmptyClusterError

_logger = get_logger()

DEFAULT_REG_COVAR = 1e-6
WEIGHTS_SUM_TOL = 1e-8


class GaussianMixture:
    """Gaussian mixture model.

    Parameters
    ----------
    weights : array_like, shape (K,)
        Positive mixture weights. A vector whose sum differs from 1 is
        renormalized (with a warning).
    means : array_like, shape (K, D)
    covariances : array_like, shape (K, D, D)
        Symmetric positive definite matrices.
    heaviside_factor : float, optional
        Positive sharpness factor, default 1.

    Raises
    ------
    ValueError
        Inconsistent shapes, non-symmetric covariances, invalid weights
        or heaviside factor.
    gpmoe.errors.LinAlgError
        A covariance is not positive definite.

    Examples
    --------
    >>> gmix = GaussianMixture([0.5, 0.5], [[0.0, 0.0], [4.0, 4.0]],
    ...                        [3.0 * gnp.eye(2), 3.0 * gnp.eye(2)])
    >>> labels = gmix.predict(gnp.array([[0.5, 0.2], [3.5, 4.1]]))
    """

    def __init__(self, weights, means, covariances, heaviside_factor=1.0):
        weights = gnp.array(weights, dtype=float).reshape(-1)
        means = gnp.array(means, dtype=float)
        covariances = gnp.array(covariances, dtype=float)
        _check_parameter_shapes(weights, means, covariances)
        weights = _check_weights(weights)

        precisions_chol = compute_precisions_cholesky(covariances)
        precisions = gnp.einsum("kij,klj->kil", precisions_chol, precisions_chol)

        self._weights = gnp.readonly(weights)
        self._means = gnp.readonly(means)
        self._covariances = gnp.readonly(covariances)
        self._precisions_chol = gnp.readonly(precisions_chol)
        self._precisions = gnp.readonly(precisions)
        self._heaviside_factor = _check_heaviside_factor(heaviside_factor)

    def __repr__(self):
        return (
            f"GaussianMixture(n_clusters={self.n_clusters}, n_features={self.n_features}, "
            f"heaviside_factor={self._heaviside_factor:g})"
        )

    @classmethod
    def from_responsibilities(cls, X, resp, reg_covar=DEFAULT_REG_COVAR, heaviside_factor=1.0):
        """Mixture obtained by one M-step on (X, resp).

        The weights are nk / N, see `estimate_gaussian_parameters`.
        """
        X = gnp.asarray(X, dtype=float)
        nk, means, covariances = cls.estimate_gaussian_parameters(X, resp, reg_covar)
        return cls(nk / X.shape[0], means, covariances, heaviside_factor)

    def with_heaviside_factor(self, heaviside_factor):
        """Copy of the mixture with another heaviside factor."""
        other = object.__new__(type(self))
        other.__dict__.update(self.__dict__)
        other._heaviside_factor = _check_heaviside_factor(heaviside_factor)
        return other

    # ------------------------------------------------------------------
    @property
    def weights(self):
        return self._weights

    @property
    def means(self):
        return self._means

    @property
    def covariances(self):
        return self._covariances

    @property
    def precisions(self):
        return self._precisions

    @property
    def precisions_cholesky(self):
        return self._precisions_chol

    @property
    def heaviside_factor(self):
        return self._heaviside_factor

    @property
    def n_clusters(self):
        return self._means.shape[0]

    @property
    def n_features(self):
        return self._means.shape[1]

    # ------------------------------------------------------------------
    def _check_X(self, X):
        X = gnp.asarray(X, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"X should be a 2D array, got shape {X.shape}")
        if X.shape[1] != self.n_features:
            raise DimensionMismatch(self.n_features, X.shape[1], what="X")
        return X

    def estimate_log_gaussian_prob(self, X):
        """Log densities of the components at X, shape (N, K)."""
        X = self._check_X(X)
        n_features = self.n_features
        precs = math.sqrt(self._heaviside_factor) * self._precisions_chol
        # log det of the scaled factor, half of the log det of the precision
        log_det = gnp.sum(gnp.log(gnp.einsum("kii->ki", precs)), axis=1)
        diff = X[None, :, :] - self._means[:, None, :]  # (K, N, D)
        y = gnp.einsum("knd,kde->kne", diff, precs)
        mahalanobis = gnp.sum(y**2, axis=2).T  # (N, K)
        return -0.5 * (n_features * math.log(2.0 * gnp.pi) + mahalanobis) + log_det

    def estimate_weighted_log_prob(self, X):
        """log(weights_k) + log N(x | mu_k, Sigma_k), shape (N, K)."""
        return self.estimate_log_gaussian_prob(X) + gnp.log(self._weights)

    def estimate_log_prob_resp(self, X):
        """Log normalization and log responsibilities.

        Returns
        -------
        log_norm : array, shape (N,)
            log sum_k exp(weighted_log_prob[:, k]), computed with the
            max-shifted log-sum-exp.
        log_resp : array, shape (N, K)
            weighted_log_prob - log_norm.
        """
        weighted_log_prob = self.estimate_weighted_log_prob(X)
        log_norm = gnp.logsumexp(weighted_log_prob, axis=1)
        log_resp = weighted_log_prob - log_norm[:, None]
        return log_norm, log_resp

    def predict_probas(self, X):
        """Responsibilities, shape (N, K); rows sum to 1."""
        _, log_resp = self.estimate_log_prob_resp(X)
        return gnp.exp(log_resp)

    def predict(self, X):
        """Cluster labels (first argmax of the responsibilities), shape (N,)."""
        return gnp.argmax(self.predict_probas(X), axis=1)

    def score_samples(self, X):
        """Log likelihood of each sample, shape (N,)."""
        return gnp.logsumexp(self.estimate_weighted_log_prob(X), axis=1)

    def score(self, X):
        """Average log likelihood of X."""
        return float(gnp.mean(self.score_samples(X)))

    def n_parameters(self):
        """Number of free parameters of the mixture."""
        k, d = self.n_clusters, self.n_features
        return k * d * (d + 1) // 2 + k * d + k - 1

    def bic(self, X):
        """Bayesian information criterion on X (lower is better)."""
        n = self._check_X(X).shape[0]
        return -2.0 * self.score(X) * n + self.n_parameters() * math.log(n)

    def aic(self, X):
        """Akaike information criterion on X (lower is better)."""
        n = self._check_X(X).shape[0]
        return -2.0 * self.score(X) * n + 2.0 * self.n_parameters()

    # ------------------------------------------------------------------
    @staticmethod
    def estimate_gaussian_parameters(X, resp, reg_covar=DEFAULT_REG_COVAR):
        """M-step of the EM algorithm.

        Parameters
        ----------
        X : array_like, shape (N, D)
        resp : array_like, shape (N, K)
            Responsibilities.
        reg_covar : float
            Added to the diagonal of each covariance.

        Returns
        -------
        nk : array, shape (K,)
        means : array, shape (K, D)
        covariances : array, shape (K, D, D)

        Raises
        ------
        EmptyClusterError
            When nk[k] < 10 * eps; `index` is the first such k.
        """
        X = gnp.asarray(X, dtype=float)
        resp = gnp.asarray(resp, dtype=float)
        if X.ndim != 2 or resp.ndim != 2 or X.shape[0] != resp.shape[0]:
            raise ValueError(
                f"X (N, D) and resp (N, K) should share N, got {X.shape} and {resp.shape}"
            )
        if reg_covar < 0.0:
            raise ValueError("reg_covar must be >= 0")

        nk = gnp.sum(resp, axis=0)
        empty = gnp.where(nk < 10.0 * gnp.eps)[0]
        if empty.size > 0:
            raise EmptyClusterError(int(empty[0]))

        means = gnp.matmul(resp.T, X) / nk[:, None]
        n_features = X.shape[1]
        covariances = gnp.empty((means.shape[0], n_features, n_features))
        for k in range(means.shape[0]):
            diff = X - means[k]
            covariances[k] = gnp.matmul(resp[:, k] * diff.T, diff) / nk[k]
            covariances[k] += reg_covar * gnp.eye(n_features)
        return nk, means, covariances


# ----------------------------------------------------------------------
def compute_precisions_cholesky(covariances):
    """Cholesky factors of the precisions, P_k = (chol(Sigma_k)^-1)^T.

    Raises gpmoe.errors.LinAlgError naming the first covariance which is
    not positive definite.
    """
    n_clusters, n_features, _ = covariances.shape
    precisions_chol = gnp.empty((n_clusters, n_features, n_features))
    identity = gnp.eye(n_features)
    for k in range(n_clusters):
        cov_chol = gnp.cholesky(covariances[k], what=f"covariance #{k}")
        precisions_chol[k] = gnp.solve_triangular(cov_chol, identity, lower=True).T
    return precisions_chol


def _check_parameter_shapes(weights, means, covariances):
    if means.ndim != 2:
        raise ValueError(f"means should be a (K, D) array, got shape {means.shape}")
    k, d = means.shape
    if k == 0 or d == 0:
        raise ValueError("A mixture needs at least one cluster and one feature")
    if weights.shape != (k,):
        raise ValueError(f"weights should have {k} values, got {weights.shape[0]}")
    if covariances.shape != (k, d, d):
        raise ValueError(
            f"covariances should have shape {(k, d, d)}, got {covariances.shape}"
        )
    if not gnp.allclose(covariances, covariances.transpose(0, 2, 1)):
        raise ValueError("covariances must be symmetric")


def _check_weights(weights):
    if not (gnp.all(gnp.isfinite(weights)) and gnp.all(weights > 0.0)):
        raise ValueError("Mixture weights must be finite and positive")
    total = float(gnp.sum(weights))
    if abs(total - 1.0) > WEIGHTS_SUM_TOL:
        _logger.warning("Mixture weights sum to %.10g, renormalizing", total)
        weights = weights / total
    return weights


def _check_heaviside_factor(heaviside_factor):
    h = float(heaviside_factor)
    if not math.isfinite(h) or h <= 0.0:
        raise ValueError(f"heaviside_factor must be a finite positive float, got {h}")
    return h
