from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameter


@dataclass(frozen=True)
class Grid:
    """Space-age lattice geometry for one run."""

    x: np.ndarray
    chi: float
    n: int
    tau: float

    @property
    def m(self) -> int:
        return int(self.x.shape[0])

    @property
    def midpoint_index(self) -> int:
        return (self.m - 1) // 2

    @property
    def spacing(self) -> float:
        """Actual distance between neighbouring sites (differs slightly from chi)."""
        return float(self.x[-1] - self.x[0]) / (self.m - 1)

    @property
    def ages(self) -> np.ndarray:
        """Age bin boundaries 0, tau, ..., n*tau."""
        return np.arange(self.n + 1, dtype=np.float64) * self.tau


def lattice_size(xrange, chi: float) -> int:
    """Number of spatial sites, forced odd so the midpoint is a site."""
    xmin, xmax = float(xrange[0]), float(xrange[1])
    m = int(round((xmax - xmin) / chi))
    if m % 2 == 0:
        m += 1
    return m


def build_grid(xrange, chi: float, age_max: float, tau: float) -> Grid:
    """
    Build the spatial coordinates and age-bin count.

    Raises InvalidParameter for non-positive spacings, an empty domain, or an
    age lattice with fewer than two bins.
    """
    if not chi > 0:
        raise InvalidParameter(f"Spatial spacing chi must be positive, got {chi}")
    if not tau > 0:
        raise InvalidParameter(f"Age spacing tau must be positive, got {tau}")
    xmin, xmax = float(xrange[0]), float(xrange[1])
    if not xmax > xmin:
        raise InvalidParameter(f"Empty domain: xrange=({xmin}, {xmax})")
    if not age_max > 0:
        raise InvalidParameter(f"age_max must be positive, got {age_max}")

    m = lattice_size((xmin, xmax), chi)
    if m < 3:
        raise InvalidParameter(
            f"Spacing chi={chi} leaves only {m} site(s) on ({xmin}, {xmax})"
        )
    n = int(round(age_max / tau))
    if n < 2:
        raise InvalidParameter(
            f"age_max={age_max} with tau={tau} gives {n} age bin(s); need at least 2"
        )

    x = np.linspace(xmin, xmax, m)
    x.setflags(write=False)
    return Grid(x=x, chi=float(chi), n=n, tau=float(tau))


__all__ = ["Grid", "build_grid", "lattice_size"]
