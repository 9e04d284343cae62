import matplotlib
import numpy as np
import pytest

from cardiac_ap import SimulationConfig, StepParams
from cardiac_ap.errors import BackendUnavailableError

matplotlib.use("Agg")



@pytest.fixture
def small_config():
    return SimulationConfig(t_final=2.0, n=16, backend="numba", block_size=4)


@pytest.fixture
def step_params():
    return StepParams.from_config(SimulationConfig(n=16))


@pytest.fixture
def random_fields():
    """Padded (e, e_prev, r) arrays with values in the physical range."""
    rng = np.random.default_rng(1234)
    shape = (12 + 2, 9 + 2)
    e = np.zeros(shape)
    e_prev = rng.uniform(0.0, 1.0, shape)
    r = rng.uniform(0.0, 1.5, shape)
    return e, e_prev, r


@pytest.fixture
def cupy_device():
    pytest.importorskip("cupy")
    from cardiac_ap.device import require_cupy

    try:
        return require_cupy()
    except BackendUnavailableError as exc:
        pytest.skip(str(exc))
