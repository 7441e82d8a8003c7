# gpmoe/core/kriging.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Kriging predictors and posterior variance computations.

This module contains the numerical routines used by `gpmoe.core.Model`
to compute kriging weights and posterior variances for the two mean
handling modes: 'zero' and 'linear_predictor'.

Functions
---------
kriging_predictor_with_zero_mean(model, xi, xt, return_type=0)
    Compute the kriging predictor assuming a zero mean function.

kriging_predictor(model, xi, xt, return_type=0)
    Compute the kriging predictor with a linear_predictor mean
    (universal kriging). Falls back to a nullspace route if the block
    system is singular.

select_predictor(model, xi, xt)
    Helper that selects the appropriate predictor depending on
    `model.meantype`.
"""
import gpmoe.num as gnp


# --------------------------------------------------------------------------
# Public entry points
# --------------------------------------------------------------------------
def kriging_predictor_with_zero_mean(model, xi, xt, return_type=0):
    """Compute the kriging predictor with zero mean.

    Parameters
    ----------
    model : gpmoe.core.Model
        The GP model instance (provides covariance and parameters).
    xi : array_like, shape (n, d)
        Observation points.
    xt : array_like, shape (m, d)
        Prediction points.
    return_type : int, optional
        Indicator for posterior variance:
          -1: return None,
           0: return variance (default),
           1: return full covariance.

    Returns
    -------
    lambda_t : array_like, shape (n, m)
        Kriging weights.
    zt_posterior_variance : array_like
        Posterior variance (or covariance if return_type==1).
    """
    Kii = model.covariance(xi, xi, model.covparam)
    Kit = model.covariance(xi, xt, model.covparam)

    lambda_t, _ = gnp.cholesky_solve(Kii, Kit)

    zt_posterior_variance = _compute_posterior_variance(
        model, xt, lambda_t, Kit, return_type
    )
    return lambda_t, zt_posterior_variance


def kriging_predictor(model, xi, xt, return_type=0):
    """Compute the kriging predictor with a linear_predictor mean.

    Parameters
    ----------
    model : gpmoe.core.Model
        The GP model instance (provides covariance/mean and parameters).
    xi : array_like, shape (n, d)
        Observation points.
    xt : array_like, shape (m, d)
        Prediction points.
    return_type : int, optional
        -1: None, 0: variance (default), 1: full covariance.

    Returns
    -------
    lambda_t : array_like, shape (n, m)
        Kriging weights.
    zt_posterior_variance : array_like
        Posterior variance (or covariance if return_type==1).
    """
    # LHS
    Kii = model.covariance(xi, xi, model.covparam)
    Pi = model.mean(xi, model.meanparam)
    (ni, q) = Pi.shape
    LHS = gnp.vstack((gnp.hstack((Kii, Pi)), gnp.hstack((Pi.T, gnp.zeros((q, q))))))

    # RHS
    Kit = model.covariance(xi, xt, model.covparam)
    Pt = model.mean(xt, model.meanparam)
    RHS = gnp.vstack((Kit, Pt.T))

    try:
        lambdamu_t = gnp.solve(
            LHS, RHS, overwrite_a=True, overwrite_b=False, assume_a="sym"
        )
    except Exception as exc:
        if not gnp._is_linalg_exception(exc):
            raise
        return _kriging_predictor_nullspace(model, xi, xt, return_type)

    lambda_t = lambdamu_t[0:ni, :]
    zt_posterior_variance = _compute_posterior_variance(
        model, xt, lambdamu_t, RHS, return_type
    )
    return lambda_t, zt_posterior_variance


def select_predictor(model, xi, xt, return_type=0):
    """
    Select the appropriate kriging predictor based on model.meantype.

    Returns
    -------
    lambda_t : array_like, shape (n, m)
        Kriging weights.
    zt_posterior_variance : array_like
        Posterior variance.
    """
    if model.meantype == "zero":
        return kriging_predictor_with_zero_mean(model, xi, xt, return_type)
    elif model.meantype == "linear_predictor":
        return kriging_predictor(model, xi, xt, return_type)
    raise ValueError(
        f"Invalid meantype {model.meantype}. "
        "Supported types are 'zero' and 'linear_predictor'."
    )


# --------------------------------------------------------------------------
# Internal helpers
# --------------------------------------------------------------------------
def _compute_posterior_variance(model, xt, lambdamu_t, RHS, return_type=0):
    """Compute posterior variance based on return type.

    Parameters
    ----------
    model : gpmoe.core.Model
    xt : (m, d)
    lambdamu_t : array_like
        For zero-mean case, this is lambda_t (n x m).
        For universal kriging, this is [lambda_t; mu_t] (n+q x m).
    RHS : array_like
        For zero-mean, RHS = K(Xi, Xt).
        For universal,  RHS = [K(Xi, Xt); P(Xt)^T].
    return_type : int
        -1: None, 0: marginal variances (default), 1: full covariance.
    """
    if return_type == -1:
        return None
    elif return_type == 0:
        zt_prior_variance = model.covariance(xt, None, model.covparam, pairwise=True)
        return zt_prior_variance - gnp.einsum("i..., i...", lambdamu_t, RHS)
    elif return_type == 1:
        zt_prior_variance = model.covariance(xt, None, model.covparam, pairwise=False)
        return zt_prior_variance - gnp.matmul(lambdamu_t.T, RHS)
    else:
        raise ValueError("return_type must be in {-1, 0, 1}")


def _kriging_predictor_nullspace(model, xi, xt, return_type=0):
    """Universal kriging using contrasts (nullspace of Pᵀ).

    Used when the block system in `kriging_predictor` is singular.

    Parameters
    ----------
    model : gpmoe.core.Model
    xi : (n, d)
    xt : (m, d)
    return_type : int
        -1: None, 0: variances (default), 1: full covariance.

    Returns
    -------
    lambda_t : (n, m)
    zt_posterior_variance : (m,) or (m, m)
    """
    K = model.covariance(xi, xi, model.covparam)
    P = model.mean(xi, model.meanparam)
    n, q = P.shape
    Kit = model.covariance(xi, xt, model.covparam)
    Pt = model.mean(xt, model.meanparam)  # (m, q)

    Q, R = gnp.qr(P, mode="complete")
    Q1, W = Q[:, :q], Q[:, q:]  # W spans Null(Pᵀ)
    Rq = R[:q, :q]

    KW = gnp.matmul(K, W)
    G = gnp.matmul(W.T, KW)

    # alpha = G^{-1} Wᵀ (K(Xi,Xt) - K Q1 beta) enforces optimality in contrast space
    beta = gnp.solve_triangular(Rq.T, Pt.T, lower=True)
    alpha, _ = gnp.cholesky_solve(G, gnp.matmul(W.T, Kit - gnp.matmul(K, gnp.matmul(Q1, beta))))

    lambda_t = gnp.matmul(W, alpha) + gnp.matmul(Q1, beta)

    if return_type == -1:
        return lambda_t, None
    # mu_t = Rq^{-1} Q1ᵀ (K(Xi,Xt) - K lambda_t) are the Lagrange multipliers
    mu_t = gnp.solve_triangular(Rq, gnp.matmul(Q1.T, Kit - gnp.matmul(K, lambda_t)), lower=False)
    RHS = gnp.vstack((Kit, Pt.T))
    LM = gnp.vstack((lambda_t, mu_t))
    zt_posterior_variance = _compute_posterior_variance(model, xt, LM, RHS, return_type)
    return lambda_t, zt_posterior_variance
