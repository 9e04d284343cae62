import numpy as np
import pytest
from scipy import ndimage

from cardiac_ap import StepParams, SimulationConfig, mirror_ghosts
from cardiac_ap.kernel import stencil_reaction_numba


def assert_mirrored(f):
    m, n = f.shape[0] - 2, f.shape[1] - 2
    np.testing.assert_array_equal(f[0, 1:n + 1], f[2, 1:n + 1])
    np.testing.assert_array_equal(f[m + 1, 1:n + 1], f[m - 1, 1:n + 1])
    np.testing.assert_array_equal(f[1:m + 1, 0], f[1:m + 1, 2])
    np.testing.assert_array_equal(f[1:m + 1, n + 1], f[1:m + 1, n - 1])


@pytest.mark.parametrize("shape", [(4, 4), (7, 5), (12, 30)])
def test_mirror_ghosts(shape):
    rng = np.random.default_rng(7)
    f = rng.normal(size=shape)
    interior = f[1:-1, 1:-1].copy()
    corners = f[[0, 0, -1, -1], [0, -1, 0, -1]].copy()
    out = mirror_ghosts(f)
    assert out is f
    assert_mirrored(f)
    np.testing.assert_array_equal(f[1:-1, 1:-1], interior)
    np.testing.assert_array_equal(f[[0, 0, -1, -1], [0, -1, 0, -1]], corners)


def test_in_kernel_mirroring_refreshes_every_ghost(random_fields):
    e, e_prev, r = random_fields
    p = StepParams.from_config(SimulationConfig(n=9, m=12))
    stencil_reaction_numba(e, e_prev, r, p, block_size=5)
    assert_mirrored(e_prev)


def test_mirrored_laplacian_matches_scipy():
    rng = np.random.default_rng(3)
    f = np.zeros((10 + 2, 8 + 2))
    f[1:-1, 1:-1] = rng.uniform(size=(10, 8))
    mirror_ghosts(f)
    lap = f[1:-1, 2:] + f[1:-1, :-2] + f[:-2, 1:-1] + f[2:, 1:-1] - 4.0 * f[1:-1, 1:-1]
    expected = ndimage.laplace(f[1:-1, 1:-1], mode="mirror")
    np.testing.assert_allclose(lap, expected, rtol=1e-12, atol=1e-14)
