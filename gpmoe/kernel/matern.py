# gpmoe/kernel/matern.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
from math import sqrt
import gpmoe.num as gnp
from .stationary import stationary_covariance


def matern32_kernel(h):
    """Matérn 3/2 kernel.

    .. math::
        K(h) = (1 + 2\\sqrt{3/2}\\,h) \\exp(-2\\sqrt{3/2}\\,h)

    Parameters
    ----------
    h : gnp.array, shape (n,)
        Distances between points.

    Returns
    -------
    gnp.array, shape (n,)
        Kernel values.
    """
    nu = 3.0 / 2.0
    c = 2.0 * sqrt(nu)
    t = c * h
    return (1.0 + t) * gnp.exp(-t)


def matern52_kernel(h):
    """Matérn 5/2 kernel, i.e. `maternp_kernel` with p = 2."""
    return maternp_kernel(2, h)


def maternp_kernel(p: int, h):
    """Matérn kernel with half-integer regularity :math:`\\nu = p + 1/2`.

    Using the half-integer simplification (Watson 1922; Abramowitz & Stegun):

    .. math::
        K(h) = \\exp(-2\\sqrt{\\nu}\\,h)\\,
               \\frac{\\Gamma(p+1)}{\\Gamma(2p+1)}
               \\sum_{i=0}^{p} \\frac{(p+i)!}{i!(p-i)!}\\,(4\\sqrt{\\nu}h)^{\\,p-i}

    Parameters
    ----------
    p : int
        Nonnegative integer with :math:`\\nu = p+1/2`.
    h : gnp.array
        Distances.

    Returns
    -------
    gnp.array
        Kernel values.
    """
    gln = gnp.compute_gammaln(p)
    h = gnp.inftobigf(h)
    c = 2.0 * sqrt(p + 0.5)
    twoch = 2.0 * c * h
    polynomial = gnp.ones(h.shape)
    for i in range(p):
        exp_log_combination = gnp.exp(
            gln[p + 1] - gln[2 * p + 1] + gln[p + i + 1] - gln[i + 1] - gln[p - i + 1]
        )
        polynomial += exp_log_combination * (twoch ** (p - i))
    return gnp.exp(-c * h) * polynomial


def maternp_covariance(x, y, p, param, pairwise=False, nugget=None):
    """Matérn covariance (:math:`\\nu = p+1/2`).

    Parameters
    ----------
    x : gnp.array, shape (nx, d)
    y : gnp.array or None
    p : int
    param : gnp.array, shape (1 + d,)
        [log(sigma2), log(1/rho_j)].
    pairwise : bool
    nugget : float, optional
        Relative diagonal regularization, see `stationary_covariance`.

    Returns
    -------
    gnp.array
    """
    return stationary_covariance(
        x, y, lambda h: maternp_kernel(p, h), param, pairwise=pairwise, nugget=nugget
    )
