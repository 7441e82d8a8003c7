# gpmoe/errors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Exception taxonomy of gpmoe.

Every failure of the surrogate and mixture layers is reported to the
caller with one of the classes below. Nothing is retried internally.

Classes
-------
MoeError
    Base class.
FitError
    The GP engine could not be trained on the given data.
LinAlgError
    A Cholesky factorization failed (matrix not positive definite).
EmptyClusterError
    A mixture component lost all of its weight during an M-step.
DimensionMismatch
    Input column count differs from the one the model was built with.
SaveError, LoadError
    Persistence failures.
"""
import numpy


class MoeError(Exception):
    """Base class for gpmoe errors."""


class FitError(MoeError):
    """Training of a GP surrogate failed."""


class LinAlgError(MoeError, numpy.linalg.LinAlgError):
    """Cholesky factorization failed on a non positive-definite matrix."""


class EmptyClusterError(MoeError):
    """A mixture component has (almost) no responsibility mass.

    Attributes
    ----------
    index : int
        Zero-based index of the collapsed component.
    """

    def __init__(self, index, message=None):
        self.index = int(index)
        if message is None:
            message = (
                f"Cluster #{self.index} has no more point. Consider decreasing "
                "number of clusters or change initialization."
            )
        super().__init__(message)


class DimensionMismatch(MoeError, ValueError):
    """Prediction input does not have the training column count."""

    def __init__(self, expected, got, what="x"):
        self.expected = int(expected)
        self.got = int(got)
        super().__init__(
            f"{what} has {self.got} columns, {self.expected} expected"
        )


class SaveError(MoeError):
    """Serialization or I/O failure while saving a model."""


class LoadError(MoeError):
    """Failure while reading a persisted model.

    Attributes
    ----------
    key : str or None
        Offending key (variant key or field name) when one is known.
    """

    def __init__(self, message, key=None):
        self.key = key
        super().__init__(message)
