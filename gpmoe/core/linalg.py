# gpmoe/core/linalg.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Linear-algebra utilities shared across gpmoe.core modules.

This file isolates small, backend-agnostic helpers (built on top of
`gpmoe.num as gnp`) so they can be reused by kriging and likelihood
code without import cycles.
"""
import gpmoe.num as gnp
from gpmoe.errors import LinAlgError


def compute_contrast_matrix(P):
    """Compute a matrix of contrasts W from a design matrix P.

    Parameters
    ----------
    P : array_like, shape (n, q)
        Design matrix of the linear predictor.

    Returns
    -------
    W : array_like, shape (n, n-q)
        Columns of W span Null(Pᵀ). Built from a complete QR of P.
    """
    n, q = P.shape
    Q, R = gnp.qr(P, mode="complete")
    return Q[:, q:n]


def compute_contrast_covariance(W, K):
    """Compute covariance matrix of contrasts G = Wᵀ (K W).

    Parameters
    ----------
    W : array_like, shape (n, n-q)
        Contrast matrix (columns in Null(Pᵀ)).
    K : array_like, shape (n, n)
        Covariance matrix at observation points.

    Returns
    -------
    G : array_like, shape (n-q, n-q)
        Covariance of the contrasts Wᵀ z when z ~ N(0, K).
    """
    return gnp.matmul(W.T, gnp.matmul(K, W))


def generalized_least_squares(K, P, zi):
    """GLS trend coefficients and dual weights of universal kriging.

    Parameters
    ----------
    K : array_like, shape (n, n)
        Covariance matrix at observation points.
    P : array_like, shape (n, q)
        Design matrix of the linear predictor.
    zi : array_like, shape (n,)
        Observed values.

    Returns
    -------
    beta : array_like, shape (q,)
        beta = (Pᵀ K⁻¹ P)⁻¹ Pᵀ K⁻¹ z
    gamma : array_like, shape (n,)
        gamma = K⁻¹ (z - P beta), so that the posterior mean at x reads
        p(x)ᵀ beta + k(x)ᵀ gamma.

    Notes
    -----
    With K = C Cᵀ, the whitened design C⁻¹ P is factorized by QR; a
    rank-deficient design yields a singular R and raises LinAlgError.
    """
    C = gnp.cholesky(K, what="covariance matrix")
    Pt = gnp.solve_triangular(C, P, lower=True)
    zt = gnp.solve_triangular(C, zi, lower=True)
    Q, R = gnp.qr(Pt, mode="reduced")
    rdiag = gnp.abs(gnp.diag(R))
    if gnp.min(rdiag) <= gnp.eps * gnp.max(rdiag) * max(P.shape):
        raise LinAlgError("Design matrix of the linear predictor is rank deficient")
    beta = gnp.solve_triangular(R, gnp.matmul(Q.T, zt), lower=False)
    rho = zt - gnp.matmul(Pt, beta)
    gamma = gnp.solve_triangular(C.T, rho, lower=False)
    return beta, gamma
