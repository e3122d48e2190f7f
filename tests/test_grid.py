"""
Tests for the space-age lattice geometry.
"""

import numpy as np
import pytest

from ctrw_sim import InvalidParameter, build_grid
from ctrw_sim.grid import lattice_size


@pytest.mark.parametrize(
    "xrange, chi",
    [
        ((-2.0, 2.0), 0.1),  # round -> 40, bumped to 41
        ((-2.0, 2.0), 4.0 / 41),  # already odd
        ((0.0, 1.0), 0.3),
        ((-1.0, 3.0), 0.05),
        ((0.0, 10.0), 1.0),
    ],
)
def test_lattice_size_is_odd(xrange, chi):
    m = lattice_size(xrange, chi)
    assert m % 2 == 1
    expected = round((xrange[1] - xrange[0]) / chi)
    assert m in (expected, expected + 1)


def test_default_grid():
    grid = build_grid((-2.0, 2.0), chi=0.1, age_max=1.0, tau=0.01)
    assert grid.m == 41
    assert grid.n == 100
    assert grid.x[0] == -2.0 and grid.x[-1] == 2.0
    assert grid.x[grid.midpoint_index] == pytest.approx(0.0, abs=1e-12)
    assert np.allclose(np.diff(grid.x), grid.spacing)
    assert grid.ages.shape == (101,)
    assert grid.ages[-1] == pytest.approx(1.0)


def test_grid_is_read_only():
    grid = build_grid((-1.0, 1.0), chi=0.1, age_max=1.0, tau=0.1)
    with pytest.raises(ValueError):
        grid.x[0] = 5.0


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(chi=0.0),
        dict(chi=-0.1),
        dict(tau=0.0),
        dict(tau=-1.0),
        dict(xrange=(1.0, 1.0)),
        dict(age_max=0.0),
        dict(tau=0.8),  # only one age bin
        dict(chi=10.0),  # single site
    ],
)
def test_invalid_grid(kwargs):
    params = dict(xrange=(-1.0, 1.0), chi=0.1, age_max=1.0, tau=0.1)
    params.update(kwargs)
    with pytest.raises(InvalidParameter):
        build_grid(**params)
