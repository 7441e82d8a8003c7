# gpmoe/kernel/init.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Initialization heuristics for GP covariance parameters.
"""
from math import log
import gpmoe.num as gnp


def _default_rho(xi):
    """Length scales proportional to the per-coordinate data range."""
    _n, d = xi.shape
    delta = gnp.max(xi, axis=0) - gnp.min(xi, axis=0)
    delta = gnp.where(delta > 0.0, delta, 1.0)
    return gnp.exp(gnp.gammaln(d / 2 + 1) / d) / (gnp.pi**0.5) * delta


def anisotropic_parameters_initial_guess(model, xi, zi, loginvrho=None):
    """Anisotropic initialization for a linear_predictor mean.

    Parameters
    ----------
    model : gpmoe.core.Model
        Model providing `norm_k_sqrd`.
    xi : array_like, shape (n, d)
    zi : array_like, shape (n,)
    loginvrho : array_like, shape (d,), optional
        Log inverse length scales to start from. When None, they are
        derived from the range of xi.

    Returns
    -------
    covparam : gnp.array, shape (1 + d,)
        [log(sigma2_GLS), log(1/rho_j)].
    """
    xi_ = gnp.asarray(xi)
    zi_ = gnp.asarray(zi).reshape(-1)
    n = xi_.shape[0]
    if loginvrho is None:
        loginvrho = -gnp.log(_default_rho(xi_))
    loginvrho = gnp.asarray(loginvrho).reshape(-1)
    covparam = gnp.concatenate((gnp.array([log(1.0)]), loginvrho))
    sigma2_GLS = (1.0 / n) * model.norm_k_sqrd(xi_, zi_, covparam)
    # constant data gives a zero quadratic form
    sigma2_GLS = gnp.maximum(sigma2_GLS, gnp.eps)
    return gnp.concatenate((gnp.log(gnp.asarray(sigma2_GLS)).reshape(1), loginvrho))
