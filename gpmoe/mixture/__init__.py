# gpmoe/mixture/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian mixture used to cluster the input space of the experts.
"""

from .gaussian_mixture import GaussianMixture, compute_precisions_cholesky

__all__ = ["GaussianMixture", "compute_precisions_cholesky"]
