import sys

import numpy as np
import pytest

from cardiac_ap import DeviceBuffer, Grid, initialize_fields, upload_fields
from cardiac_ap.device import domain_for, synchronize
from cardiac_ap.errors import (
    BackendUnavailableError, ResourceExhaustedError, TransferError,
)


def test_backend_domains():
    assert domain_for("numpy") == "host"
    assert domain_for("numba") == "host"
    assert domain_for("cuda") == "cuda"


def test_upload_copies_rather_than_aliases():
    g = Grid(3, 3, fill=1.0)
    buf = DeviceBuffer.from_grid(g)
    g.data[...] = 5.0
    assert np.all(buf.array == 1.0)
    assert not np.shares_memory(buf.array, g.data)


def test_download_round_trip():
    g = Grid(2, 4)
    g.data[...] = np.arange(g.data.size).reshape(g.shape)
    buf = DeviceBuffer.from_grid(g)
    out = Grid(2, 4)
    buf.download_to(out)
    np.testing.assert_array_equal(out.data, g.data)
    np.testing.assert_array_equal(buf.to_grid().data, g.data)


def test_shape_mismatch_is_transfer_error():
    buf = DeviceBuffer((5, 5))
    with pytest.raises(TransferError):
        buf.upload_from(Grid(2, 2))
    with pytest.raises(TransferError):
        buf.download_to(Grid(4, 4))


def test_host_allocation_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(np, "zeros", boom)
    with pytest.raises(ResourceExhaustedError):
        DeviceBuffer((10, 10))


def test_cuda_domain_without_cupy(monkeypatch):
    monkeypatch.setitem(sys.modules, "cupy", None)
    with pytest.raises(BackendUnavailableError):
        DeviceBuffer((4, 4), domain="cuda")


def test_unknown_domain():
    with pytest.raises(ValueError):
        DeviceBuffer((4, 4), domain="tpu")


def test_host_synchronize_is_noop():
    synchronize("host")


def test_upload_fields_keeps_roles():
    host = initialize_fields(4, 4)
    dev = upload_fields(host, "host")
    np.testing.assert_array_equal(dev.e_prev.array, host.e_prev.data)
    np.testing.assert_array_equal(dev.r.array, host.r.data)
    assert dev.e.array is not dev.e_prev.array


def test_cuda_round_trip(cupy_device):
    g = Grid(3, 5)
    g.data[...] = np.random.default_rng(0).uniform(size=g.shape)
    buf = DeviceBuffer.from_grid(g, domain="cuda")
    assert isinstance(buf.array, cupy_device.ndarray)
    np.testing.assert_array_equal(buf.to_grid().data, g.data)
