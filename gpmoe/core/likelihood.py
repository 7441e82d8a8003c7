# gpmoe/core/likelihood.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Negative restricted log-likelihood and related quadratic forms.

This module implements the numerical routines used by `gpmoe.core.Model`
for REML evaluation in the linear_predictor case.
"""
import gpmoe.num as gnp
from gpmoe.errors import LinAlgError
from . import utils
from .linalg import compute_contrast_matrix, compute_contrast_covariance


def negative_log_restricted_likelihood(model, covparam, xi, zi):
    """Compute the negative log-restricted likelihood of the GP model.

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model providing `mean` and `covariance`.
    covparam : gnp.array
        Covariance parameters for the Gaussian Process.
    xi : array_like, shape (n, d)
        Input data points used for fitting the GP model, where n
        is the number of points and d is the dimensionality.
    zi : array_like, shape (n, )
        Output (response) values corresponding to the input data points xi.

    Returns
    -------
    L : float
        Negative log-restricted likelihood value, +inf when the
        covariance of the contrasts is not positive definite.
    """
    K = model.covariance(xi, xi, covparam)
    P = model.mean(xi, model.meanparam)
    W = compute_contrast_matrix(P)  # (n, n-q)
    Wzi = gnp.matmul(W.T, zi)  # (n-q,)
    G = compute_contrast_covariance(W, K)  # (n-q, n-q)
    try:
        WKWinv_Wzi, C = gnp.cholesky_solve(G, Wzi)
    except LinAlgError:
        return utils.return_inf()
    norm2 = gnp.einsum("i..., i...", Wzi, WKWinv_Wzi)
    ldetWKW = 2.0 * gnp.logdet_from_chol(C)
    n, q = P.shape
    L = 0.5 * ((n - q) * gnp.log(2.0 * gnp.pi) + ldetWKW + norm2)
    return L.reshape(())


def norm_k_sqrd(model, xi, zi, covparam):
    """Compute the squared norm of the residual vector after applying the contrast
    matrix W.

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model providing `mean` and `covariance`.
    xi : ndarray, shape (ni, d)
        Input data points.
    zi : ndarray, shape (ni, 1) or (ni, )
        Output values at xi.
    covparam : array_like
        Covariance parameters for the Gaussian Process.

    Returns
    -------
    float
        (Wz)' (WKW)^-1 Wz.
    """
    K = model.covariance(xi, xi, covparam)
    P = model.mean(xi, model.meanparam)
    W = compute_contrast_matrix(P)
    Wzi = gnp.matmul(W.T, zi)
    G = compute_contrast_covariance(W, K)
    WKWinv_Wzi, _ = gnp.cholesky_solve(G, Wzi)
    norm_sqrd = gnp.einsum("i..., i...", Wzi, WKWinv_Wzi)
    return norm_sqrd
