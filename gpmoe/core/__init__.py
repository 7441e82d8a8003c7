# gpmoe/core/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------

"""
Core components of the gpmoe package.

This subpackage is the GP regression engine behind the surrogates:
kriging predictors, REML criterion, polynomial mean bases and
supporting linear algebra utilities.

Public API
----------
Model : class
    Gaussian Process model façade combining all core routines.
"""

from . import means
from .model import Model

__all__ = ["Model", "means"]
