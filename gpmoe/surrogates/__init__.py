# gpmoe/surrogates/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
GP surrogates of the mixture of experts.

Modules
-------
kinds
    Mean and correlation kinds, surrogate variants.
gp
    Training parameters and trained GP surrogates.
serialization
    JSON persistence helpers.
registry
    The 12 registered variants, `params_for` and `load`.
"""

from .kinds import MeanKind, CorrelationKind, SurrogateVariant
from .gp import GpSurrogateParams, GpSurrogate
from .registry import register, variants, entry, params_for, load

__all__ = [
    "MeanKind",
    "CorrelationKind",
    "SurrogateVariant",
    "GpSurrogateParams",
    "GpSurrogate",
    "register",
    "variants",
    "entry",
    "params_for",
    "load",
]
