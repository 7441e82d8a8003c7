# gpmoe/kernel/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian Process kernels and related utilities.

Modules
-------
exponential
    Absolute exponential and squared exponential kernels.
matern
    Matérn family of kernels with half-integer regularity.
stationary
    Anisotropic stationary covariance built from a radial kernel.
init
    Initialization heuristics for covariance parameters.
parameter_selection
    REML parameter selection with SciPy.
"""

from .exponential import exponential_kernel, squared_exponential_kernel
from .matern import matern32_kernel, matern52_kernel, maternp_kernel, maternp_covariance
from .stationary import stationary_covariance
from .init import anisotropic_parameters_initial_guess
from .parameter_selection import (
    make_selection_criterion_with_gradient,
    autoselect_parameters,
    select_parameters_with_criterion,
    negative_log_restricted_likelihood,
    select_parameters_with_reml,
)

__all__ = [
    # Kernels
    "exponential_kernel",
    "squared_exponential_kernel",
    "matern32_kernel",
    "matern52_kernel",
    "maternp_kernel",
    "maternp_covariance",
    "stationary_covariance",
    # Initialization
    "anisotropic_parameters_initial_guess",
    # Parameter selection
    "make_selection_criterion_with_gradient",
    "autoselect_parameters",
    "select_parameters_with_criterion",
    "negative_log_restricted_likelihood",
    "select_parameters_with_reml",
]
