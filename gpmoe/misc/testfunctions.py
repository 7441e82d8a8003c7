# coding: utf-8
## --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
## --------------------------------------------------------------
import numpy as np


def xsinx(x):
    """
    Computes the response Z of the XSinX function at X.

    The XSinX function is defined as:

       XSinX(x) = (x - 3.5) sin((x - 3.5) / pi)

    and is usually studied on [0, 25].

    Parameters
    ----------
    x : numpy.ndarray
        Input array of shape (n,) or (n, 1)

    Returns
    -------
    numpy.ndarray
        Output array of shape (n,)
    """
    x = np.asarray(x, dtype=float).reshape([-1])
    z = (x - 3.5) * np.sin((x - 3.5) / np.pi)
    return z

