# gpmoe/num/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Numerical backend dispatcher for gpmoe."""

from gpmoe.config import init_backend

from . import shared as _shared

_gpmoe_backend_ = init_backend()

if _gpmoe_backend_ == "numpy":
    from . import numpy_backend as _backend
else:
    raise RuntimeError("Please set the GPMOE_BACKEND environment variable to 'numpy'.")

# Re-export backend API.
for _name in dir(_backend):
    if _name.startswith("__"):
        continue
    globals()[_name] = getattr(_backend, _name)

# Re-export backend-independent helpers from shared.py.
get_dtype = _shared.get_dtype
compute_gammaln = _shared.compute_gammaln
