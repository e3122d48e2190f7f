"""
Tests for the jump-probability calculator and its reflecting boundary.
"""

import numpy as np
import pytest

from ctrw_sim import InvalidParameter, jump_probs
from ctrw_sim.fields import CallableField, PolynomialField
from ctrw_sim.jumps import jump_probs_from_arrays

X = np.linspace(-2.0, 2.0, 41)


def _check_well_formed(jp):
    total = jp.left + jp.center + jp.right
    assert np.allclose(total, 1.0, atol=1e-12)
    for p in jp:
        assert np.all(p >= 0.0)
        assert np.all(p <= 1.0)
    assert jp.left[0] == 0.0
    assert jp.right[-1] == 0.0


def test_symmetric_no_drift():
    jp = jump_probs(X, 0.5, 0.9, 0.0)
    assert np.allclose(jp.left[1:], 0.45)
    assert np.allclose(jp.right[:-1], 0.45)
    assert np.allclose(jp.center[1:-1], 0.1)
    # folded boundary mass
    assert jp.center[0] == pytest.approx(0.55)
    assert jp.center[-1] == pytest.approx(0.55)
    _check_well_formed(jp)


def test_drift_tilts_probabilities():
    jp = jump_probs(X, 0.0, 0.8, 1.0)
    chi = 0.1
    assert np.allclose(jp.right[:-1], (0.8 + chi) / 2)
    assert np.allclose(jp.left[1:], (0.8 - chi) / 2)
    _check_well_formed(jp)


@pytest.mark.parametrize("t", [0.0, 0.3, 1.7])
def test_time_dependent_fields_well_formed(t):
    a = CallableField(lambda x, t: 0.5 + 0.4 * np.cos(x * t))
    b = PolynomialField([0.3, -2.0, 1.5])
    _check_well_formed(jump_probs(X, t, a, b))


def test_strong_drift_is_clamped_not_renormalised():
    jp = jump_probs(X, 0.0, 0.9, 100.0)
    assert np.all(jp.left == 0.0)
    assert np.allclose(jp.right[:-1], 1.0)
    assert np.allclose(jp.center[:-1], 0.0)
    assert jp.center[-1] == pytest.approx(1.0)
    _check_well_formed(jp)

    jp = jump_probs(X, 0.0, 0.9, -100.0)
    assert np.all(jp.right == 0.0)
    assert jp.center[0] == pytest.approx(1.0)
    _check_well_formed(jp)


def test_reflection_with_any_input():
    rng = np.random.default_rng(7)
    for _ in range(20):
        a_vec = rng.uniform(0.0, 1.0, size=X.size)
        b_vec = rng.normal(scale=20.0, size=X.size)
        jp = jump_probs_from_arrays(a_vec, b_vec, 0.1)
        assert jp.left[0] == 0.0
        assert jp.right[-1] == 0.0
        assert np.allclose(jp.left + jp.center + jp.right, 1.0)


def test_negative_diffusivity():
    with pytest.raises(InvalidParameter):
        jump_probs(X, 0.0, PolynomialField([0.1, 1.0]), 0.0)


def test_needs_two_sites():
    with pytest.raises(InvalidParameter):
        jump_probs(np.array([0.0]), 0.0, 0.9, 0.0)
