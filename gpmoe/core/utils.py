# gpmoe/core/utils.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Small utilities used across `gpmoe.core` modules.

This file hosts:
- Shape/type validation & conversion helpers for (xi, zi, xt)
- Model mean validation at construction time
"""
import gpmoe.num as gnp


def ensure_shapes_and_type(
    *,
    xi=None,
    zi=None,
    xt=None,
    convert: bool = True,
):
    """Validate and adjust shapes/types of input arrays.

    Parameters
    ----------
    xi : array_like, optional
        Observation points (n, d).
    zi : array_like, optional
        Observed values (n,) or (n, 1).
    xt : array_like, optional
        Prediction points (m, d).
    convert : bool, optional
        Convert arrays to backend type (default True).

    Returns
    -------
    tuple
        (xi, zi, xt) with proper shapes and types.

    Raises
    ------
    ValueError
        If one of the dimensionality checks fails:
        * xi and xt are 2D
        * zi is 1D or a single-column 2D
        * xi.shape[0] == zi.shape[0] (when both given)
        * xi.shape[1] == xt.shape[1] (when both given)
    """
    if convert:
        if xi is not None:
            xi = gnp.asarray(xi)
        if zi is not None:
            zi = gnp.asarray(zi)
        if xt is not None:
            xt = gnp.asarray(xt)

    if xi is not None and len(xi.shape) != 2:
        raise ValueError("xi should be a 2D array")

    if zi is not None:
        if len(zi.shape) == 2:
            if zi.shape[1] != 1:
                raise ValueError("zi should only have one column if it's a 2D array")
            zi = zi.reshape(-1)  # (n,1) -> (n,)
        elif len(zi.shape) != 1:
            raise ValueError("zi should be 1D or a 2D column array")

    if xt is not None and len(xt.shape) != 2:
        raise ValueError("xt should be a 2D array")

    if xi is not None and zi is not None and xi.shape[0] != zi.shape[0]:
        raise ValueError("xi and zi must have the same number of rows")
    if xi is not None and xt is not None and xi.shape[1] != xt.shape[1]:
        raise ValueError("xi and xt must have the same number of columns")

    return xi, zi, xt


def validate_model_mean(meantype: str, mean, meanparam):
    """Validate model initialization inputs for the mean component.

    Parameters
    ----------
    meantype : {'zero','linear_predictor'}
        Type of mean to be used by the model.
    mean : callable or None
        Mean function (ignored if meantype == 'zero').
    meanparam : array_like or None
        Parameters of the mean function.

    Raises
    ------
    ValueError
        If `meantype` is invalid or inconsistent with `mean`.
    TypeError
        If a callable `mean` is required but not provided.
    """
    if meantype not in {"zero", "linear_predictor"}:
        raise ValueError("meantype must be one of 'zero' or 'linear_predictor'")

    if meantype == "zero" and mean is not None:
        raise ValueError("For meantype 'zero', mean must be None")

    if meantype == "linear_predictor" and not callable(mean):
        raise TypeError("For meantype 'linear_predictor', mean must be a callable function")


def return_inf():
    """Backend-specific +inf scalar."""
    return gnp.inf
