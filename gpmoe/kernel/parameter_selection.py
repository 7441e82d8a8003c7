# gpmoe/kernel/parameter_selection.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Kernel parameter selection criteria and optimization helpers.
"""

import time
import numpy as np
from scipy.optimize import minimize
import gpmoe.num as gnp
from gpmoe.config import get_logger

from .init import anisotropic_parameters_initial_guess

_logger = get_logger()


# ---------------------- criterion + gradient maker --------------------
def make_selection_criterion_with_gradient(model, selection_criterion, xi, zi):
    """
    Build criterion wrappers for value/gradient optimization.

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model instance passed to ``selection_criterion``.
    selection_criterion : callable
        Criterion ``f(model, covparam, xi, zi)``.
    xi, zi : array_like
        Observation arrays used for criterion evaluation.

    Returns
    -------
    evaluate : callable
    evaluate_pre_grad : callable
        Value function mapping linear-algebra failures to ``+inf``.
    evaluate_no_grad : callable
    gradient : callable or None
        None with the NumPy backend (scipy then uses finite differences).
    """

    def crit_(covparam, xi, zi):
        return selection_criterion(model, covparam, xi, zi)

    xi_ = gnp.asarray(xi)
    zi_ = gnp.asarray(zi)
    crit = gnp.DifferentiableSelectionCriterion(crit_, xi_, zi_)
    return crit.evaluate, crit.evaluate_pre_grad, crit.evaluate_no_grad, crit.gradient


# ------------------------------ optimizer -----------------------------
def autoselect_parameters(
    p0,
    criterion,
    gradient,
    bounds=None,
    bounds_auto=True,
    bounds_delta=10.0,
    silent=True,
    info=False,
    method="SLSQP",
    method_options=None,
):
    """
    Minimize a scalar selection criterion with SciPy.

    Parameters
    ----------
    p0 : array_like
        Initial parameter vector.
    criterion : callable
        Objective function ``criterion(p) -> scalar``.
    gradient : callable or None
        Gradient function ``gradient(p) -> array_like``.
    bounds : sequence of tuple, optional
        Bounds passed to SciPy.
    bounds_auto : bool, default=True
        If True and ``bounds`` is None, construct local bounds around ``p0``
        using ``bounds_delta``.
    bounds_delta : float, default=10.0
        Half-width used for automatic local bounds.
    silent : bool, default=True
        If False, enable solver output.
    info : bool, default=False
        If True, return the full SciPy result object.
    method : {"SLSQP", "L-BFGS-B"}, default="SLSQP"
        Optimization method.
    method_options : dict, optional
        Additional options passed to SciPy ``minimize``.

    Returns
    -------
    p_opt : array_like
        Best parameter vector found.
    info_ret : scipy.optimize.OptimizeResult or None
        Optimization diagnostics if ``info=True``, else None.

    Notes
    -----
    The full history of visited points is tracked. If the final SciPy
    result is worse than the best visited point, the best one is
    returned and ``best_value_returned`` is set to False.

    Criterion evaluations failing on a linear-algebra error are mapped
    to ``+inf`` so that the search can continue. Other exceptions are
    re-raised.
    """
    if method_options is None:
        method_options = {}
    tic = time.time()

    safe_lower, safe_upper = -500, 500
    if bounds is None and bounds_auto:
        bounds = [
            (
                max(param - bounds_delta, safe_lower),
                min(param + bounds_delta, safe_upper),
            )
            for param in p0
        ]

    history_params, history_criterion = [], []
    best_params, best_criterion = None, float("inf")

    def record(p, J):
        nonlocal best_params, best_criterion
        history_params.append(p.copy())
        history_criterion.append(J)
        if J < best_criterion:
            best_criterion, best_params = J, p.copy()

    def criterion_with_history(p):
        try:
            J = criterion(p)
        except Exception as exc:
            if gnp._is_linalg_exception(exc):
                J = np.inf
            else:
                raise
        if not np.isfinite(J):
            J = np.inf
        record(p, J)
        return J

    options = {"disp": not silent}
    if method == "L-BFGS-B":
        options.update(
            dict(
                maxcor=20,
                ftol=1e-6,
                gtol=1e-5,
                eps=1e-8,
                maxfun=15000,
                maxiter=15000,
                maxls=40,
            )
        )
    elif method == "SLSQP":
        options.update(dict(ftol=1e-6, eps=1e-8, maxiter=15000))
    else:
        raise ValueError("Optimization method not implemented.")
    options.update(method_options)

    r = minimize(
        criterion_with_history,
        p0,
        method=method,
        jac=gradient,
        bounds=bounds,
        options=options,
    )

    # ensure returning best seen
    if best_params is not None and not (r.fun <= best_criterion):
        r.x, r.fun, r.best_value_returned = best_params, best_criterion, False
    else:
        r.best_value_returned = True

    r.history_params = history_params
    r.history_criterion = history_criterion
    r.initial_params = p0
    r.final_params = r.x
    r.bounds = bounds
    r.total_time = time.time() - tic

    return (r.x, r) if info else (r.x, None)


# -------------------- high-level parameter selection procedures  ------------
def select_parameters_with_criterion(
    model,
    criterion,
    xi,
    zi,
    covparam0=None,
    info=False,
    *,
    bounds=None,
    bounds_auto=True,
    bounds_delta=10.0,
    method="SLSQP",
    method_options=None,
):
    """
    Optimize covariance parameters using a selection criterion.

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model whose covariance parameters are optimized.
    criterion : callable
        ``criterion(model, covparam, xi, zi)`` minimized by SciPy.
    xi, zi : array_like
        Dataset arrays.
    covparam0 : array_like, optional
        Initial covariance parameters. If None, an anisotropic initial
        guess is computed.
    info : bool, default False
        If True, return optimization diagnostics.
    bounds, bounds_auto, bounds_delta :
        Bounds configuration forwarded to ``autoselect_parameters``.
    method : str, default "SLSQP"
        Optimization method ("SLSQP" or "L-BFGS-B").
    method_options : dict, optional
        Extra options passed to SciPy ``minimize``.

    Returns
    -------
    model : gpmoe.core.Model
        Model with updated ``covparam``.
    info_ret : OptimizeResult | None
        Diagnostics if ``info=True``, else None.
    """
    tic = time.time()

    if covparam0 is None:
        covparam0 = anisotropic_parameters_initial_guess(model, xi, zi)

    crit, crit_pre_grad, crit_no_grad, crit_grad = (
        make_selection_criterion_with_gradient(model, criterion, xi, zi)
    )

    covparam_opt, info_ret = autoselect_parameters(
        covparam0,
        crit_pre_grad,
        crit_grad,
        bounds=bounds,
        bounds_auto=bounds_auto,
        bounds_delta=bounds_delta,
        info=True,
        method=method,
        method_options=method_options,
    )
    model.covparam = gnp.asarray(covparam_opt)
    _logger.debug(
        "Parameter selection: %d evaluations, criterion %.6g, %.3fs",
        len(info_ret.history_criterion),
        info_ret.fun,
        time.time() - tic,
    )

    if info:
        info_ret.covparam0 = gnp.to_np(covparam0)
        info_ret.covparam = covparam_opt
        info_ret.selection_criterion = crit
        info_ret.selection_criterion_nograd = crit_no_grad
        info_ret.time = time.time() - tic
        return model, info_ret
    return model, None


# ------------------------- objective wrappers -------------------------
def negative_log_restricted_likelihood(model, covparam, xi, zi):
    """
    Evaluate the negative restricted log-likelihood (REML criterion).

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model instance.
    covparam : array_like
        Covariance parameter vector.
    xi, zi : array_like
        Observation points and observed values.

    Returns
    -------
    scalar
        Negative restricted log-likelihood value.
    """
    return model.negative_log_restricted_likelihood(covparam, xi, zi)


# --------------------------------- REML ---------------------------------
def select_parameters_with_reml(
    model,
    xi,
    zi,
    covparam0=None,
    info=False,
    *,
    bounds=None,
    bounds_auto=True,
    bounds_delta=10.0,
    method="SLSQP",
    method_options=None,
):
    """
    Select covariance parameters with REML.

    Parameters
    ----------
    model : gpmoe.core.Model
        GP model instance with a linear_predictor mean.
    xi, zi : array_like
        Dataset arrays.
    covparam0 : array_like, optional
        Initial covariance parameters. If None, an anisotropic initial guess
        is computed.
    info : bool, default=False
        If True, return optimization diagnostics.
    bounds, bounds_auto, bounds_delta :
        Bounds configuration.
    method : {"SLSQP", "L-BFGS-B"}, default="SLSQP"
    method_options : dict, optional

    Returns
    -------
    model : gpmoe.core.Model
        Updated model.
    info_ret : OptimizeResult | None
    """
    return select_parameters_with_criterion(
        model,
        negative_log_restricted_likelihood,
        xi,
        zi,
        covparam0=covparam0,
        info=info,
        bounds=bounds,
        bounds_auto=bounds_auto,
        bounds_delta=bounds_delta,
        method=method,
        method_options=method_options,
    )
