from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .utils import DTSMResult


@dataclass(frozen=True)
class DensityTable:
    """One row per site, one density column per snapshot."""

    x: np.ndarray
    labels: Tuple[str, ...]
    values: np.ndarray  # (m, number of snapshots)

    def column(self, label: str) -> np.ndarray:
        try:
            k = self.labels.index(label)
        except ValueError:
            raise KeyError(f"No column {label!r}; have {list(self.labels)}") from None
        return self.values[:, k]

    def as_dict(self) -> Dict[str, np.ndarray]:
        out = {"x": self.x}
        for k, label in enumerate(self.labels):
            out[label] = self.values[:, k]
        return out


def snapshot_label(index: int, time_value: float) -> str:
    """Column header, 1-based: t_2=1.0"""
    return f"t_{index}={float(time_value)}"


def rho(xi: np.ndarray) -> np.ndarray:
    """Marginal spatial density: sum over age."""
    return np.asarray(xi, dtype=np.float64).sum(axis=1)


def rho_table(result: DTSMResult) -> DensityTable:
    x = result.x
    columns = [rho(xi) for xi in result.xi_list]
    labels = tuple(
        snapshot_label(i + 1, s) for i, s in enumerate(result.snapshots)
    )
    return DensityTable(x=x, labels=labels, values=np.column_stack(columns))


def total_mass(xi: np.ndarray, chi: float) -> float:
    """Integral of the density on the lattice, sum(xi) * chi."""
    return float(np.sum(xi) * chi)


__all__ = ["DensityTable", "rho", "rho_table", "snapshot_label", "total_mass"]
