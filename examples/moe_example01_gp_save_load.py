'''Train a GP surrogate, save it, load it back and compare predictions

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)

'''
import os
import tempfile
import numpy as np
import gpmoe as gm

# -- dataset


def generate_data():
    '''
    Data generation
    (xt, zt): target
    (xi, zi): input dataset
    '''
    dim = 1
    box = [[0.0], [25.0]]
    nt = 200
    xt = gm.misc.designs.regulargrid(dim, nt, box)
    zt = gm.misc.testfunctions.xsinx(xt)

    ni = 10
    xi = gm.misc.designs.maximinlhs(dim, ni, box, max_iter=100, seed=0)
    zi = gm.misc.testfunctions.xsinx(xi)

    return xt, zt, xi, zi


def relative_error(z, zref):
    return np.linalg.norm(z - zref) / np.linalg.norm(zref)


def main():
    xt, zt, xi, zi = generate_data()

    # -- one builder per variant, all from the registry
    print("Registered variants:")
    for variant in gm.surrogates.variants():
        print(f"  {variant}")

    params = gm.params_for(("Constant", "SquaredExponential"))
    surrogate = params.fit(xi, zi)
    print(f"\nTrained {surrogate}: theta = {surrogate.theta}")

    zpm = surrogate.predict_values(xt).reshape(-1)
    zpv = surrogate.predict_variances(xt).reshape(-1)
    print(f"Relative L2 error: {relative_error(zpm, zt):.3e}")
    print(f"Max posterior std: {np.sqrt(zpv.max()):.3e}")

    # -- save / load round trip
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "xsinx_gp.json")
        surrogate.save(path)
        reloaded = gm.load(path)

    zpm_reloaded = reloaded.predict_values(xt).reshape(-1)
    print(f"Reloaded {reloaded}")
    print(f"Relative L2 error after reload: {relative_error(zpm_reloaded, zt):.3e}")
    print(f"Max difference with the original model: {np.max(np.abs(zpm_reloaded - zpm)):.3e}")


if __name__ == "__main__":
    main()
