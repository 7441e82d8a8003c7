## --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
## --------------------------------------------------------------
"""
Space-filling designs used to sample training points of the surrogates.
"""
import numpy as np
from scipy.stats import qmc
from scipy.spatial.distance import pdist


def mindist(sample):
    """
    Calculate the minimum distance (separation) between any pair of points in the sample.

    Parameters
    ----------
    sample : numpy.ndarray
        Array of points in the sample.

    Returns
    -------
    float
        Minimum distance between any pair of points in the sample.
    """
    D = pdist(sample)
    return np.min(D)


def scale(sample_standard, box):
    """
    Map a standard sample in [0, 1]^dim to the given box.

    Parameters
    ----------
    sample_standard : numpy.ndarray
        Array of points in the standard sample.
    box : list of lists
        List of lists containing the lower and upper bounds of the box.

    Returns
    -------
    numpy.ndarray
        Sample points mapped to the given box.
    """
    l_bounds, u_bounds = box[0], box[1]
    return qmc.scale(sample_standard, l_bounds, u_bounds)


def regulargrid(dim, n, box):
    """
    Build a regular grid in the dim-dimensional hyperrectangle.

    If n is an integer, a grid of size n^dim is built; if n is a list
    of length dim, a grid of size prod(n) is built, with n_i points on
    coordinate i.

    Parameters
    ----------
    dim : int
        Number of dimensions.
    n : int or list
        Number of points per dimension.
    box : list of lists
        [[lower bounds], [upper bounds]].

    Returns
    -------
    x : numpy.ndarray, shape (N, dim)
    """
    if not isinstance(n, list):
        n = [n for i in range(dim)]

    xmin, xmax = box[0], box[1]
    levels = [np.linspace(xmin[i], xmax[i], n[i]) for i in range(dim)]

    # full factorial design
    Xv = np.array(np.meshgrid(*levels, copy=True, sparse=False, indexing="ij"))
    N = int(np.prod(n))
    x = np.zeros((N, dim))
    for i in range(dim):
        x[:, i] = Xv[i].reshape(N)

    return x


def maximinlhs(dim, n, box, max_iter=1000, seed=None):
    """
    Generate a maximin Latin Hypercube Sample (LHS) within the specified box.

    Parameters
    ----------
    dim : int
        Number of dimensions.
    n : int
        Number of points in the sample (n >= 2).
    box : list of lists
        [[lower bounds], [upper bounds]].
    max_iter : int, optional
        Number of LHS drawn, the one with the largest minimum
        distance is kept. Default is 1000.
    seed : int or numpy.random.Generator, optional
        Seed of the sampler, for reproducible designs.

    Returns
    -------
    numpy.ndarray
        Maximin Latin Hypercube Sample within the specified box.
    """
    if n < 2:
        raise ValueError("maximinlhs needs n >= 2")
    sampler = qmc.LatinHypercube(d=dim, optimization=None, seed=seed)

    maximindist = 0
    sample_maximin = None
    for i in range(max_iter):
        sample = sampler.random(n)
        d = mindist(sample)
        if sample_maximin is None or d > maximindist:
            maximindist = d
            sample_maximin = sample

    return scale(sample_maximin, box)
