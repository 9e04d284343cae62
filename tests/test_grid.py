import numpy as np
import pytest

from cardiac_ap import FieldSet, Grid, initialize_fields, zero_fields
from cardiac_ap.errors import ConfigurationError, ResourceExhaustedError


def test_grid_layout():
    g = Grid(3, 5)
    assert g.shape == (5, 7)
    assert g.data.dtype == np.float64
    assert g.data.flags["C_CONTIGUOUS"]
    assert g.interior.shape == (3, 5)


def test_flat_index_is_row_major():
    g = Grid(3, 4)
    g.data[...] = np.arange(g.data.size).reshape(g.shape)
    flat = g.data.reshape(-1)
    for row in range(g.rows + 2):
        for col in range(g.cols + 2):
            idx = g.flat_index(row, col)
            assert idx == row * 6 + col
            assert flat[idx] == g.data[row, col] == g.at(row, col)


def test_put_writes_through_to_array():
    g = Grid(2, 2)
    g.put(1, 2, 3.5)
    assert g.data[1, 2] == 3.5


@pytest.mark.parametrize("row,col", [(-1, 0), (0, 4), (4, 0), (2, -1)])
def test_accessor_bounds_checked(row, col):
    g = Grid(2, 2)
    with pytest.raises(IndexError):
        g.at(row, col)
    with pytest.raises(IndexError):
        g.put(row, col, 1.0)


def test_invalid_dimensions():
    with pytest.raises(ConfigurationError):
        Grid(0, 3)


def test_allocation_failure_is_resource_exhaustion(monkeypatch):
    def boom(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(np, "full", boom)
    with pytest.raises(ResourceExhaustedError):
        Grid(4, 4)


def test_copy_and_from_array_do_not_alias():
    g = Grid(2, 3, fill=2.0)
    c = g.copy()
    c.data[1, 1] = -1.0
    assert g.data[1, 1] == 2.0

    arr = np.ones((4, 5))
    w = Grid.from_array(arr)
    assert (w.rows, w.cols) == (2, 3)
    arr[0, 0] = 9.0
    assert w.data[0, 0] == 1.0


def test_from_array_rejects_unpadded():
    with pytest.raises(ConfigurationError):
        Grid.from_array(np.ones((2, 5)))


def test_initial_condition_small_grid():
    f = initialize_fields(4, 4)
    # Excitation: interior columns right of the midline, every row.
    expected_e = np.zeros((6, 6))
    expected_e[:, 3:5] = 1.0
    np.testing.assert_array_equal(f.e_prev.data, expected_e)
    # Recovery: interior columns of the bottom half of the rows.
    expected_r = np.zeros((6, 6))
    expected_r[3:, 1:5] = 1.0
    np.testing.assert_array_equal(f.r.data, expected_r)
    # Current starts equal to previous but in its own buffer.
    np.testing.assert_array_equal(f.e.data, f.e_prev.data)
    assert f.e is not f.e_prev
    assert not np.shares_memory(f.e.data, f.e_prev.data)


def test_initial_condition_odd_grid_includes_middle_line():
    f = initialize_fields(5, 5)
    # col > 2.5 and row > 2.5 select indices 3..5.
    expected_e = np.zeros((7, 7))
    expected_e[:, 3:6] = 1.0
    np.testing.assert_array_equal(f.e_prev.data, expected_e)
    expected_r = np.zeros((7, 7))
    expected_r[3:, 1:6] = 1.0
    np.testing.assert_array_equal(f.r.data, expected_r)
    np.testing.assert_array_equal(f.e_prev.interior[0], [0, 0, 1, 1, 1])
    np.testing.assert_array_equal(f.r.interior[:, 0], [0, 0, 1, 1, 1])


def test_initial_condition_default_size_halves():
    f = initialize_fields(200, 200)
    e = f.e_prev.interior
    r = f.r.interior
    assert e[:, :100].sum() == 0.0
    assert np.all(e[:, 100:] == 1.0)
    assert r[:100, :].sum() == 0.0
    assert np.all(r[100:, :] == 1.0)


def test_swap_exchanges_handles():
    a, b, c = Grid(2, 2), Grid(2, 2), Grid(2, 2)
    f = FieldSet(e=a, e_prev=b, r=c)
    f.swap()
    assert f.e is b and f.e_prev is a and f.r is c


def test_zero_fields():
    f = zero_fields(3, 3)
    assert all(not g.data.any() for g in (f.e, f.e_prev, f.r))
