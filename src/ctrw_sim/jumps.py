from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .errors import InvalidParameter
from .fields import as_field


class JumpProbs(NamedTuple):
    """Per-site probabilities of jumping left, staying, or jumping right."""

    left: np.ndarray
    center: np.ndarray
    right: np.ndarray


def jump_probs_from_arrays(a_vec: np.ndarray, b_vec: np.ndarray, chi: float) -> JumpProbs:
    """
    Clamp-then-complement jump probabilities with reflecting ends.

    When chi * |b| > a one side gets clipped at 0 and the excess is simply
    lost to the complement; no renormalisation beyond that.
    """
    a_vec = np.asarray(a_vec, dtype=np.float64)
    b_vec = np.asarray(b_vec, dtype=np.float64)
    if not np.all(a_vec >= 0):
        raise InvalidParameter("Diffusivity can't be negative.")
    left = np.clip((a_vec - chi * b_vec) / 2.0, 0.0, 1.0)
    right = np.clip((a_vec + chi * b_vec) / 2.0, 0.0, 1.0)
    center = 1.0 - left - right

    # reflecting boundaries
    center[0] += left[0]
    left[0] = 0.0
    center[-1] += right[-1]
    right[-1] = 0.0
    return JumpProbs(left=left, center=center, right=right)


def jump_probs(x: np.ndarray, t: float, a_trans, b_trans) -> JumpProbs:
    """
    Jump probabilities at time t.

    Args:
        x: site locations (evenly spaced, at least two).
        t: current time.
        a_trans, b_trans: diffusivity and drift fields, already discounted
            by the local share.
    """
    x = np.asarray(x, dtype=np.float64)
    m = x.shape[0]
    if m < 2:
        raise InvalidParameter(f"Need at least two lattice sites, got {m}")
    chi = float(x[-1] - x[0]) / (m - 1)
    a_vec = as_field(a_trans).evaluate(x, t)
    b_vec = as_field(b_trans).evaluate(x, t)
    return jump_probs_from_arrays(a_vec, b_vec, chi)


__all__ = ["JumpProbs", "jump_probs", "jump_probs_from_arrays"]
