# gpmoe/surrogates/kinds.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Mean and correlation model kinds of the GP surrogates.

The enum values are the names written in persisted models; a variant
is identified by the key "{mean}_{corr}".
"""
from enum import Enum
from typing import NamedTuple

from gpmoe.core import means
from gpmoe.kernel import (
    exponential_kernel,
    squared_exponential_kernel,
    matern32_kernel,
    matern52_kernel,
)


class MeanKind(Enum):
    CONSTANT = "Constant"
    LINEAR = "Linear"
    QUADRATIC = "Quadratic"


class CorrelationKind(Enum):
    SQUARED_EXPONENTIAL = "SquaredExponential"
    ABSOLUTE_EXPONENTIAL = "AbsoluteExponential"
    MATERN32 = "Matern32"
    MATERN52 = "Matern52"


class SurrogateVariant(NamedTuple):
    """(mean, correlation) pair identifying a GP surrogate family."""

    mean: MeanKind
    corr: CorrelationKind

    @property
    def key(self):
        return variant_key(self.mean.value, self.corr.value)

    def __str__(self):
        return self.key


def variant_key(mean_name, corr_name):
    """Dispatch key of persisted models."""
    return f"{mean_name}_{corr_name}"


def as_variant(variant):
    """Coerce a SurrogateVariant, a (mean, corr) pair of kinds or names."""
    if isinstance(variant, SurrogateVariant):
        return variant
    try:
        mean, corr = variant
        return SurrogateVariant(MeanKind(mean), CorrelationKind(corr))
    except (TypeError, ValueError) as exc:
        raise KeyError(f"Unknown surrogate variant {variant!r}") from exc


MEAN_BASES = {
    MeanKind.CONSTANT: means.constant_mean,
    MeanKind.LINEAR: means.linear_mean,
    MeanKind.QUADRATIC: means.quadratic_mean,
}

CORRELATION_KERNELS = {
    CorrelationKind.SQUARED_EXPONENTIAL: squared_exponential_kernel,
    CorrelationKind.ABSOLUTE_EXPONENTIAL: exponential_kernel,
    CorrelationKind.MATERN32: matern32_kernel,
    CorrelationKind.MATERN52: matern52_kernel,
}
