# gpmoe/surrogates/serialization.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
JSON persistence helpers for GP surrogates.

A persisted surrogate is a JSON object with (at least) the keys
``mean``, ``corr``, ``theta``, ``inner_params``, ``w_star``, ``xtrain``
and ``ytrain``. Files are parsed into a plain dict first; each field
is then decoded on its own so that a failure names the field.
"""
import contextlib
import json
import os
import tempfile

import gpmoe.num as gnp
from gpmoe.errors import LoadError, SaveError


def write_json_atomic(path, record):
    """Write `record` as JSON to `path` through a temporary file.

    The file appears under `path` only once completely written; on
    failure the temporary file is removed and SaveError is raised.
    """
    path = os.fspath(path)
    try:
        text = json.dumps(record, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SaveError(f"Cannot serialize model for {path}: {exc}") from exc

    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".gpmoe-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None:
            with contextlib.suppress(FileNotFoundError):
                os.remove(tmp_path)
        raise SaveError(f"Cannot write model to {path}: {exc}") from exc


def read_json_record(path):
    """Read `path` and return the untyped JSON object it holds."""
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as exc:
        raise LoadError(f"Cannot read model file {path}: {exc}") from exc
    try:
        data = json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        raise LoadError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LoadError(f"Model file {path} does not hold a JSON object")
    return data


def tag_field(data, name):
    """Return the string tag `name` (``mean`` or ``corr``) of a record."""
    if name not in data:
        raise LoadError(f"Missing field '{name}'", key=name)
    value = data[name]
    if not isinstance(value, str):
        raise LoadError(
            f"Field '{name}' should be a string, got {type(value).__name__}", key=name
        )
    return value


def decode_field(data, name, decoder):
    """Decode field `name` of `data`; failures raise LoadError naming it."""
    if name not in data:
        raise LoadError(f"Missing field '{name}'", key=name)
    try:
        return decoder(data[name])
    except (TypeError, ValueError, KeyError) as exc:
        raise LoadError(f"Cannot decode field '{name}': {exc}", key=name) from exc


# ---------------------------------------------------------------------
# field decoders
# ---------------------------------------------------------------------
def as_vector(value):
    v = gnp.asarray(value, dtype=float)
    if v.ndim != 1:
        raise ValueError(f"expected a sequence of floats, got shape {v.shape}")
    if not gnp.all(gnp.isfinite(v)):
        raise ValueError("non-finite values")
    return v


def as_matrix(value):
    m = gnp.asarray(value, dtype=float)
    if m.size == 0:
        return gnp.zeros((0, 0))
    if m.ndim != 2:
        raise ValueError(f"expected a matrix, got shape {m.shape}")
    if not gnp.all(gnp.isfinite(m)):
        raise ValueError("non-finite values")
    return m


def as_float(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return float(value)


def as_positive_vector(value):
    v = as_vector(value)
    if not gnp.all(v > 0.0):
        raise ValueError("values must be positive")
    return v


def as_optional_int(value):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer or null, got {type(value).__name__}")
    if value < 1:
        raise ValueError(f"expected a positive integer, got {value}")
    return value
