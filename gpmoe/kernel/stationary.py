# gpmoe/kernel/stationary.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Anisotropic stationary covariances built from a radial kernel.

All covariances share the parameter layout

    param = [log(sigma2), log(1/rho_1), ..., log(1/rho_d)]

and evaluate sigma2 * k(h) where h is the distance scaled by 1/rho.
"""
import gpmoe.num as gnp

DEFAULT_NUGGET = 10.0 * gnp.eps


def stationary_covariance_ii_or_tt(x, kernel, param, pairwise=False, nugget=None):
    """Covariance between observations or predictands at x.

    .. math::
        K_{ij} = \\sigma^2 (k(h_{ij}) + \\tau \\delta_{ij})

    Parameters
    ----------
    x : gnp.array, shape (n, d)
    kernel : callable
        Radial kernel h -> k(h) with k(0) = 1.
    param : gnp.array, shape (1 + d,)
        [log(sigma2), log(1/rho_j)].
    pairwise : bool
        If True, return diag vector; else full covariance.
    nugget : float, optional
        Relative regularization tau (default 10 * eps).

    Returns
    -------
    gnp.array
        (n,n) matrix or (n,) vector if pairwise.
    """
    sigma2 = gnp.exp(param[0])
    loginvrho = param[1:]
    tau = DEFAULT_NUGGET if nugget is None else nugget
    if pairwise:
        return sigma2 * (1.0 + tau) * gnp.ones((x.shape[0],))
    D = gnp.scaled_distance(loginvrho, x, x)
    return sigma2 * (kernel(D) + tau * gnp.eye(D.shape[0]))


def stationary_covariance_it(x, y, kernel, param, pairwise=False):
    """Cross-covariance between observations x and prediction points y.

    Parameters
    ----------
    x : gnp.array, shape (nx, d)
    y : gnp.array, shape (ny, d)
    kernel : callable
    param : gnp.array, shape (1 + d,)
        [log(sigma2), log(1/rho_j)].
    pairwise : bool
        If True, return elementwise k(x_i,y_i); else (nx,ny).

    Returns
    -------
    gnp.array
        (nx,ny) matrix or (n,) vector if pairwise.
    """
    sigma2 = gnp.exp(param[0])
    loginvrho = param[1:]
    if pairwise:
        D = gnp.scaled_distance_elementwise(loginvrho, x, y)
    else:
        D = gnp.scaled_distance(loginvrho, x, y)
    return sigma2 * kernel(D)


def stationary_covariance(x, y, kernel, param, pairwise=False, nugget=None):
    """Stationary covariance wrapper.

    Parameters
    ----------
    x : gnp.array, shape (nx, d)
    y : gnp.array or None
        None (or x itself) selects the observation/predictand path,
        where the nugget is added on the diagonal.
    kernel : callable
    param : gnp.array, shape (1 + d,)
    pairwise : bool
    nugget : float, optional

    Returns
    -------
    gnp.array
    """
    if y is x or y is None:
        return stationary_covariance_ii_or_tt(x, kernel, param, pairwise, nugget)
    return stationary_covariance_it(x, y, kernel, param, pairwise)
