# gpmoe/surrogates/registry.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Registry of the GP surrogate variants.

Each (mean, correlation) pair is registered once with three factories:
a params builder, a constructor of trained surrogates from persisted
fields, and a display label. `load` reads a persisted surrogate, builds
the key "{mean}_{corr}" from its tag fields and dispatches on it.
"""
from functools import partial
from typing import Callable, Dict, NamedTuple

from gpmoe.config import get_logger
from gpmoe.errors import LoadError

from . import serialization
from .gp import GpSurrogate, GpSurrogateParams, surrogate_label
from .kinds import CorrelationKind, MeanKind, SurrogateVariant, as_variant, variant_key

_logger = get_logger()


class SurrogateEntry(NamedTuple):
    variant: SurrogateVariant
    params: Callable
    surrogate: Callable
    label: Callable


_REGISTRY: Dict[str, SurrogateEntry] = {}


def register(mean, corr):
    """Register the variant (mean, corr); a key is registered only once."""
    variant = SurrogateVariant(MeanKind(mean), CorrelationKind(corr))
    if variant.key in _REGISTRY:
        raise KeyError(f"Surrogate variant '{variant.key}' already registered")
    _REGISTRY[variant.key] = SurrogateEntry(
        variant,
        partial(GpSurrogateParams, variant),
        partial(GpSurrogate.from_dict, variant),
        partial(surrogate_label, variant),
    )
    return variant


register(MeanKind.CONSTANT, CorrelationKind.SQUARED_EXPONENTIAL)
register(MeanKind.CONSTANT, CorrelationKind.ABSOLUTE_EXPONENTIAL)
register(MeanKind.CONSTANT, CorrelationKind.MATERN32)
register(MeanKind.CONSTANT, CorrelationKind.MATERN52)
register(MeanKind.LINEAR, CorrelationKind.SQUARED_EXPONENTIAL)
register(MeanKind.LINEAR, CorrelationKind.ABSOLUTE_EXPONENTIAL)
register(MeanKind.LINEAR, CorrelationKind.MATERN32)
register(MeanKind.LINEAR, CorrelationKind.MATERN52)
register(MeanKind.QUADRATIC, CorrelationKind.SQUARED_EXPONENTIAL)
register(MeanKind.QUADRATIC, CorrelationKind.ABSOLUTE_EXPONENTIAL)
register(MeanKind.QUADRATIC, CorrelationKind.MATERN32)
register(MeanKind.QUADRATIC, CorrelationKind.MATERN52)


def variants():
    """Registered variants, in registration order."""
    return [e.variant for e in _REGISTRY.values()]


def entry(variant):
    """Factories registered for `variant` (a SurrogateVariant or a pair)."""
    key = as_variant(variant).key
    try:
        return _REGISTRY[key]
    except KeyError:
        raise KeyError(f"Surrogate variant '{key}' is not registered") from None


def params_for(variant, **config):
    """Return a GpSurrogateParams builder bound to `variant`.

    Keyword arguments (`initial_theta`, `kpls_dim`, `nugget`) are the
    base configuration of the builder.

    >>> params = params_for(("Constant", "Matern52"), nugget=1e-8)
    """
    return entry(variant).params(**config)


def load(path):
    """Load a surrogate saved with `GpSurrogate.save`.

    Raises
    ------
    LoadError
        Missing or unreadable file, invalid JSON, missing or unknown
        `mean`/`corr` tags (the message names the key), or a field that
        cannot be decoded (the message names the field).
    """
    data = serialization.read_json_record(path)
    key = variant_key(
        serialization.tag_field(data, "mean"), serialization.tag_field(data, "corr")
    )
    found = _REGISTRY.get(key)
    if found is None:
        raise LoadError(f"Bad mean or kernel values: {key}", key=key)
    surrogate = found.surrogate(data)
    _logger.debug("Loaded %s from %s", surrogate.label, path)
    return surrogate
