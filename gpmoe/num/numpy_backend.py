# gpmoe/num/numpy_backend.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""NumPy numerical backend for gpmoe.

This module defines the NumPy implementation of the gpmoe.num API.
"""

import builtins
from typing import Any, Callable, Optional, Union
from gpmoe.config import get_config, init_backend, get_logger
from gpmoe.errors import LinAlgError

Scalar = Union[int, float]
ArrayLike = Any
CriterionCallable = Callable[[ArrayLike, ArrayLike, ArrayLike], ArrayLike]

_gpmoe_backend_: str = init_backend()
_config = get_config()
_logger = get_logger()
_logger.debug("Using backend: %s", _gpmoe_backend_)

_LINALG_ERROR_KEYWORDS = (
    "singular",
    "not positive definite",
    "not positive-definite",
    "cholesky",
    "decomposition",
    "factorization",
    "matrix is not invertible",
    "ill-conditioned",
    "linalg",
    "lapack",
    "array must not contain infs or nans",
)


# -----------------------------------------------------
#
#                      NUMPY
#
# -----------------------------------------------------

import numpy
from numpy.typing import NDArray

_np_dtype = numpy.float64
_config.dtype_resolved = _np_dtype

ndarray = NDArray[numpy.floating]
from numpy import (
    copy,
    reshape,
    where,
    any,
    isscalar,
    isnan,
    isinf,
    isfinite,
    allclose,
    hstack,
    vstack,
    stack,
    concatenate,
    empty_like,
    zeros_like,
    diag,
    arange,
    abs,
    sqrt,
    exp,
    log,
    sum,
    prod,
    mean,
    std,
    var,
    sort,
    diff,
    min,
    max,
    argmin,
    argmax,
    minimum,
    maximum,
    clip,
    einsum,
    matmul,
    all,
)
from numpy.linalg import norm, qr
from numpy import pi, inf
from numpy import finfo, float64
from scipy.special import gammaln, logsumexp
from scipy.linalg import solve, solve_triangular
from scipy.spatial.distance import cdist

# ..................................................

eps = finfo(_np_dtype).eps
fmax = numpy.finfo(_np_dtype).max

# ..................................................


def _is_linalg_exception(exc: Exception) -> bool:
    if isinstance(exc, numpy.linalg.LinAlgError):
        return True
    msg = str(exc).lower()
    return builtins.any(keyword in msg for keyword in _LINALG_ERROR_KEYWORDS)


# ..................................................


def array(x, dtype=None):
    if dtype is not None:
        return numpy.array(x, dtype=dtype)
    out = numpy.array(x)
    if numpy.issubdtype(out.dtype, numpy.floating):
        return out.astype(_np_dtype, copy=False)
    return out


def asarray(x, dtype=None):
    if dtype is not None:
        return numpy.asarray(x, dtype=dtype)
    if isinstance(x, numpy.ndarray):
        if numpy.issubdtype(x.dtype, numpy.floating):
            return x.astype(_np_dtype, copy=False)
        return x
    elif isinstance(x, (int, float)):
        dt = _np_dtype if isinstance(x, float) else None
        return numpy.array([x], dtype=dt)
    else:
        out = numpy.asarray(x)
        if numpy.issubdtype(out.dtype, numpy.floating):
            return out.astype(_np_dtype, copy=False)
        return out


def empty(shape, dtype=None):
    return numpy.empty(shape, dtype=_np_dtype if dtype is None else dtype)


def zeros(shape, dtype=None):
    return numpy.zeros(shape, dtype=_np_dtype if dtype is None else dtype)


def ones(shape, dtype=None):
    return numpy.ones(shape, dtype=_np_dtype if dtype is None else dtype)


def eye(n, m=None, k=0, dtype=None):
    return numpy.eye(n, M=m, k=k, dtype=_np_dtype if dtype is None else dtype)


def linspace(start, stop, num=50, endpoint=True, dtype=None):
    return numpy.linspace(
        start,
        stop,
        num=num,
        endpoint=endpoint,
        dtype=_np_dtype if dtype is None else dtype,
    )


def to_np(x):
    return x


def readonly(x):
    """Return a read-only float array holding the values of x."""
    out = numpy.array(x, dtype=_np_dtype)
    out.setflags(write=False)
    return out


def inftobigf(a, bigf=fmax / 1000.0):
    a = where(numpy.isinf(a), numpy.full_like(a, bigf), a)
    return a


# ..................................................


class DifferentiableSelectionCriterion:
    """Criterion wrapper for scipy optimizers.

    With the NumPy backend no analytical gradient is available:
    `gradient` stays None and scipy falls back on finite differences.
    """

    def __init__(self, crit: CriterionCallable, x: ArrayLike, z: ArrayLike):
        self.crit = crit
        self.x, self.z = x, z
        self.gradient = None

    def __call__(self, p: ArrayLike) -> ArrayLike:
        return self.evaluate(p)

    def evaluate(self, p: ArrayLike) -> _np_dtype:
        return self.crit(p, self.x, self.z)

    def evaluate_no_grad(self, p: ArrayLike) -> _np_dtype:
        return self.evaluate(p)

    def evaluate_pre_grad(self, p: ArrayLike) -> _np_dtype:
        try:
            return self.crit(p, self.x, self.z)
        except Exception as exc:
            if _is_linalg_exception(exc):
                return inf
            raise


# ..................................................


def scaled_distance(loginvrho: ArrayLike, x: ArrayLike, y: ArrayLike) -> ArrayLike:
    invrho = exp(loginvrho)
    xs = invrho * x
    ys = invrho * y
    return cdist(xs, ys)


def scaled_distance_elementwise(
    loginvrho: ArrayLike, x: ArrayLike, y: Optional[ArrayLike]
) -> ArrayLike:
    if x is y or y is None:
        d = zeros((x.shape[0],))
    else:
        invrho = exp(loginvrho)
        d = sqrt(sum((invrho * (x - y)) ** 2, axis=1))
    return d


# ..................................................


def cholesky(A, what="matrix"):
    """Lower Cholesky factor of A; raises gpmoe LinAlgError on failure."""
    try:
        return numpy.linalg.cholesky(A)
    except numpy.linalg.LinAlgError as exc:
        raise LinAlgError(f"Cholesky factorization of {what} failed: {exc}") from exc


def cholesky_solve(A, b):
    L = cholesky(A)
    y = solve_triangular(L, b, lower=True)
    x = solve_triangular(L.T, y, lower=False)
    return x, L


def logdet_from_chol(C):
    """Return sum(log(diag(C))) for a triangular factor C."""
    return sum(log(diag(C)))

