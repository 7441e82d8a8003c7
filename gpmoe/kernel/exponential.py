# gpmoe/kernel/exponential.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gpmoe.num as gnp


def exponential_kernel(h):
    """Absolute exponential kernel.

    .. math::
        k(h) = \\exp(-h)

    Parameters
    ----------
    h : gnp.array, shape (n,)
        Distances between points.

    Returns
    -------
    gnp.array, shape (n,)
        Kernel values.
    """
    return gnp.exp(-h)


def squared_exponential_kernel(h):
    """Squared exponential (Gaussian) kernel.

    .. math::
        k(h) = \\exp(-h^2)

    Parameters
    ----------
    h : gnp.array, shape (n,)
        Distances between points.

    Returns
    -------
    gnp.array, shape (n,)
        Kernel values.
    """
    h = gnp.inftobigf(h)
    return gnp.exp(-(h**2))
