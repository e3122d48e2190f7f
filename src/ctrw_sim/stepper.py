"""
One DTSM time step on the space-age lattice.

Each step: population survives with probability Sprob and ages by one bin
(the last bin is absorbing in age), everything that did not survive escapes
and is redistributed to age zero at the same site or a neighbour according
to the jump probabilities.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange

from .jumps import JumpProbs


@njit(parallel=True, cache=True)
def _step_kernel(xi, sprob, left, center, right, out):
    """
    Write the next population into ``out`` (must not alias ``xi``).

    Rows are independent in the first pass; the second pass only reads
    the escaping totals completed by the first.
    """
    m, n = xi.shape
    escaping = np.empty(m, dtype=np.float64)

    for i in prange(m):
        acc = 0.0
        for j in range(n):
            surviving = xi[i, j] * sprob[i, j]
            acc += xi[i, j] - surviving
            if j < n - 1:
                out[i, j + 1] = surviving
            else:
                # oldest particles don't age any further
                out[i, n - 1] += surviving
        escaping[i] = acc

    for i in prange(m):
        mass = escaping[i] * center[i]
        if i > 0:
            mass += escaping[i - 1] * right[i - 1]
        if i < m - 1:
            mass += escaping[i + 1] * left[i + 1]
        out[i, 0] = mass


def step_xi(xi: np.ndarray, Sprob: np.ndarray, Jprob: JumpProbs) -> np.ndarray:
    """
    Evolve xi by one step and return the new (m, n) array.

    The input is left untouched.
    """
    xi = np.ascontiguousarray(xi, dtype=np.float64)
    Sprob = np.ascontiguousarray(Sprob, dtype=np.float64)
    if xi.shape != Sprob.shape:
        raise ValueError(f"Shape mismatch: xi {xi.shape} vs Sprob {Sprob.shape}")
    m = xi.shape[0]
    left = np.ascontiguousarray(Jprob.left, dtype=np.float64)
    center = np.ascontiguousarray(Jprob.center, dtype=np.float64)
    right = np.ascontiguousarray(Jprob.right, dtype=np.float64)
    if not (left.shape == center.shape == right.shape == (m,)):
        raise ValueError(f"Jump probabilities must have length {m}")

    out = np.zeros_like(xi)
    _step_kernel(xi, Sprob, left, center, right, out)
    return out


__all__ = ["step_xi"]
