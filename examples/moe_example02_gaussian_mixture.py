'''Responsibilities of a two-component Gaussian mixture

Clusters of a mixture of experts along the diagonal between two
components, for several values of the heaviside factor.

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)

'''
import numpy as np
import gpmoe as gm


def main():
    weights = np.array([0.5, 0.5])
    means = np.array([[0.0, 0.0], [4.0, 4.0]])
    covariances = np.array([3.0 * np.eye(2), 3.0 * np.eye(2)])
    gmix = gm.GaussianMixture(weights, means, covariances)

    # -- probes on the diagonal
    v = np.linspace(0.0, 4.0, 101)
    x = np.column_stack((v, v))

    labels = gmix.predict(x)
    switch = np.argmax(labels == 1)
    print(f"Cluster switch at x = ({v[switch]:.2f}, {v[switch]:.2f})")

    for h in [0.1, 0.99, 1.0, 10.0]:
        probas = gmix.with_heaviside_factor(h).predict_probas(x)
        print(f"heaviside_factor = {h:5.2f}: p_0(x_0) = {probas[0, 0]:.4f}, "
              f"p_0(x_25) = {probas[25, 0]:.4f}")

    # -- one M-step from hard responsibilities
    rng = np.random.default_rng(0)
    xs = np.vstack((rng.normal(0.0, 1.0, (50, 2)), rng.normal(4.0, 1.0, (50, 2))))
    resp = np.zeros((100, 2))
    resp[:50, 0] = 1.0
    resp[50:, 1] = 1.0
    refit = gm.GaussianMixture.from_responsibilities(xs, resp)
    print(f"\nM-step weights: {refit.weights}")
    print(f"M-step means:\n{refit.means}")
    print(f"Average log likelihood: {refit.score(xs):.4f}")
    print(f"BIC: {refit.bic(xs):.2f}, AIC: {refit.aic(xs):.2f}")


if __name__ == "__main__":
    main()
