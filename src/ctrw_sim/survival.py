from __future__ import annotations

from typing import Tuple

import numpy as np

from .errors import InvalidParameter, InvalidTailFunction, NegativeSurvival
from .fields import as_field
from .grid import Grid

PLACEMENTS = ("centre", "left")

# Rounding slack when checking that survival probabilities stay <= 1.
SURVIVAL_TOL = 1e-12


def initial_population(grid: Grid, where: str = "centre") -> np.ndarray:
    """Delta initial condition: mass 1/chi on one site at age zero."""
    if where not in PLACEMENTS:
        raise InvalidParameter(
            f"Unknown initial condition {where!r}; expected one of {PLACEMENTS}"
        )
    xi0 = np.zeros((grid.m, grid.n), dtype=np.float64)
    if where == "centre":
        xi0[grid.midpoint_index, 0] = 1.0 / grid.chi
    else:
        xi0[0, 0] = 1.0 / grid.chi
    return xi0


def survival_function(grid: Grid, c: float, nuTail, theta) -> np.ndarray:
    """
    Survival function h on the (m, n + 1) grid of sites and age boundaries.

    The nonlocal part is min(1, nuTail / c), discounted by the local share
    theta. The age-zero column is pinned to 1.
    """
    tail = as_field(nuTail)
    theta = np.broadcast_to(np.asarray(theta, dtype=np.float64), (grid.m,))
    with np.errstate(invalid="ignore"):
        psi_nonloc = np.minimum(1.0, tail.evaluate(grid.x[:, None], grid.ages[None, :]) / c)
    h = (1.0 - theta)[:, None] * psi_nonloc
    h[:, 0] = 1.0
    return h


def survival_probabilities(h: np.ndarray) -> np.ndarray:
    """
    One-step survival probabilities h[:, j+1] / h[:, j].

    0/0 means there is no mass left to survive; it is defined as 0.
    """
    if not np.all(h >= 0):
        raise NegativeSurvival("Survival function can't be negative (or NaN).")
    with np.errstate(divide="ignore", invalid="ignore"):
        survival_probs = h[:, 1:] / h[:, :-1]
    survival_probs[np.isnan(survival_probs)] = 0.0
    if not np.all(survival_probs >= 0):
        raise InvalidTailFunction("Make sure nuTail is decreasing in t.")
    if not np.all(survival_probs <= 1.0 + SURVIVAL_TOL):
        raise InvalidTailFunction(
            "Survival probability above 1: nuTail must be non-increasing in t."
        )
    return np.minimum(survival_probs, 1.0)


def init_delta(
    grid: Grid,
    c: float,
    nuTail,
    theta,
    where: str = "centre",
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the initial population and the survival-probability matrix.

    Args:
        grid: space-age lattice from build_grid.
        c: master scaling parameter (escape-rate normalisation).
        nuTail: space-dependent tail function of the Levy measure.
        theta: local share of the escape probability, per site, in [0, 1).
        where: "centre" or "left" placement of the initial spike.

    Returns:
        (xi0, survival_probs), both of shape (m, n).
    """
    if not c > 0:
        raise InvalidParameter(f"Scaling constant c must be positive, got {c}")
    xi0 = initial_population(grid, where)
    h = survival_function(grid, c, nuTail, theta)
    return xi0, survival_probabilities(h)


__all__ = [
    "PLACEMENTS",
    "initial_population",
    "survival_function",
    "survival_probabilities",
    "init_delta",
]
