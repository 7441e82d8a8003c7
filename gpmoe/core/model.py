# gpmoe/core/model.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian Process model class.
"""
import warnings
import gpmoe.num as gnp

from . import kriging
from . import likelihood
from . import utils
from .linalg import generalized_least_squares


class Model:
    """Gaussian Process (GP) Model Class.

    Attributes
    ----------
    mean : callable or None
        Basis of the linear_predictor mean, called as

        P = self.mean(x, meanparam),

        where `x` is an (n x d) array and P an (n x q) matrix whose
        columns are the basis functions evaluated at x (see
        `gpmoe.core.means`). Must be None when `meantype` is "zero".

    covariance : callable
        Returns the covariance of the GP. The function is called as

        K = self.covariance(x, y, self.covparam, pairwise),

        where x is (n x d) and y is either:
           - (m x d) array of points, or
           - None, meaning y := x.
        Pairwise indicates if an (n x m) covariance matrix
        (pairwise == False) or an (n x 1) vector (n == m, pairwise =
        True) should be returned

    meanparam : array_like, optional
        Parameter of the mean basis (unused by polynomial bases).

    covparam : array_like, optional
        Parameter for the covariance function, given as a
        one-dimensional array [log(sigma2), log(1/rho_1), ...].

    meantype : str, optional
        'zero' or 'linear_predictor' (universal kriging).

    Public API (methods)
    --------------------
    predict
        Posterior mean/variance at target points.
    kriging_coefficients
        GLS trend coefficients and dual weights.
    negative_log_restricted_likelihood
        REML criterion (linear_predictor).
    norm_k_sqrd
        Quadratic form of the contrasts (linear_predictor).

    Examples
    --------
    >>> import gpmoe as gm
    >>> import gpmoe.num as gnp
    >>> def covariance(x, y, covparam, pairwise=False):
    ...     return gm.kernel.maternp_covariance(x, y, 2, covparam, pairwise)
    >>> model = gm.core.Model(gm.core.means.constant_mean, covariance,
    ...                       covparam=gnp.array([0.0, 0.0]))
    >>> xi = gnp.array([0.0, 1.0, 2.0, 3.0, 5.0]).reshape(-1, 1)
    >>> zi = gnp.array([0.0, 1.2, 2.5, 4.2, 4.3])
    >>> xt = gnp.linspace(0.0, 5.0, 11).reshape(-1, 1)
    >>> zt_mean, zt_var = model.predict(xi, zi, xt)
    """

    def __init__(
        self,
        mean,
        covariance,
        meanparam=None,
        covparam=None,
        meantype="linear_predictor",
    ):
        utils.validate_model_mean(meantype, mean, meanparam)
        self.meantype = meantype
        self.mean = mean
        self.meanparam = meanparam
        self.covparam = covparam
        self.covariance = covariance

    def __repr__(self):
        output = str("<gpmoe.core.Model object> " + hex(id(self)))
        return output

    def __str__(self):
        if self.meantype == "zero":
            mean_desc = "Zero Mean"
        else:
            mean_desc = getattr(self.mean, "__name__", str(self.mean))
        cov_desc = getattr(self.covariance, "__name__", str(self.covariance))
        return (
            f"GP Model:\n"
            f"  Mean Type: {self.meantype}\n"
            f"  Mean Function: {mean_desc}\n"
            f"  Covariance Function: {cov_desc}\n"
            f"  Covariance Parameters: {self.covparam}"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def predict(self, xi, zi, xt, return_lambdas=False, zero_neg_variances=True):
        """Performs a prediction at target points xt given the data (xi, zi).

        Parameters
        ----------
        xi : ndarray of shape (ni, dim)
            Observation points in input space.
        zi : ndarray of shape (ni,) or (ni, 1)
            Observed values at the observation points.
        xt : ndarray of shape (nt, dim)
            Target points where predictions are to be made.
        return_lambdas : bool, optional
            Whether to return the kriging weights, by default False.
        zero_neg_variances : bool, optional
            Whether to replace negative posterior variances with zeros,
            by default True.

        Returns
        -------
        z_posterior_mean : ndarray of shape (nt,)
        z_posterior_variance : ndarray of shape (nt,)
        lambda_t : ndarray of shape (ni, nt), optional
        """
        xi, zi, xt = utils.ensure_shapes_and_type(xi=xi, zi=zi, xt=xt)
        lambda_t, zt_posterior_variance = kriging.select_predictor(self, xi, xt)
        if gnp.any(zt_posterior_variance < -1e3 * gnp.eps * gnp.exp(self.covparam[0])):
            warnings.warn(
                "Negative variances detected. Consider increasing the nugget.",
                RuntimeWarning,
            )
        if zero_neg_variances:
            zt_posterior_variance = gnp.maximum(zt_posterior_variance, 0.0)
        zt_posterior_mean = gnp.einsum("i..., i...", lambda_t, zi)
        if return_lambdas:
            return (zt_posterior_mean, zt_posterior_variance, lambda_t)
        return (zt_posterior_mean, zt_posterior_variance)

    def kriging_coefficients(self, xi, zi):
        """GLS trend coefficients and dual weights.

        Returns
        -------
        beta : ndarray, shape (q,)
        gamma : ndarray, shape (ni,)

        The posterior mean at xt is then P(xt) beta + K(xt, xi) gamma,
        which equals the one returned by `predict`.
        """
        xi, zi, _ = utils.ensure_shapes_and_type(xi=xi, zi=zi)
        K = self.covariance(xi, xi, self.covparam)
        P = self.mean(xi, self.meanparam)
        return generalized_least_squares(K, P, zi)

    def negative_log_restricted_likelihood(self, covparam, xi, zi):
        """Negative log-restricted likelihood (REML criterion).

        Parameters
        ----------
        covparam : gnp.array
            Covariance parameters.
        xi : array_like, shape (n, d)
        zi : array_like, shape (n, )

        Returns
        -------
        L : float
        """
        return likelihood.negative_log_restricted_likelihood(self, covparam, xi, zi)

    def norm_k_sqrd(self, xi, zi, covparam):
        """(Wz)' (WKW)^-1 Wz with W a matrix of contrasts."""
        return likelihood.norm_k_sqrd(self, xi, zi, covparam)
