# gpmoe/core/means.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Polynomial bases for linear_predictor means.

Each basis is called as ``P = mean(x, meanparam)`` and returns the
(n x q) matrix of basis functions evaluated at x; `meanparam` is
ignored.
"""
import gpmoe.num as gnp


def constant_mean(x, param=None):
    """Basis {1}, q = 1."""
    return gnp.ones((x.shape[0], 1))


def linear_mean(x, param=None):
    """Basis {1, x_1, ..., x_d}, q = 1 + d."""
    return gnp.hstack((gnp.ones((x.shape[0], 1)), x))


def quadratic_mean(x, param=None):
    """Basis {1, x_i, x_i x_j (i <= j)}, q = 1 + d + d(d+1)/2."""
    n, d = x.shape
    cross = [x[:, i : i + 1] * x[:, i:] for i in range(d)]
    return gnp.hstack([gnp.ones((n, 1)), x] + cross)


def basis_size(mean, dim):
    """Number of basis functions q of `mean` in dimension `dim`."""
    return mean(gnp.zeros((1, dim))).shape[1]
