# src/ctrw_sim/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import numpy as np

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


@dataclass(frozen=True)
class DTSMResult:
    """Snapshot collection produced by one DTSM run."""

    xi_list: Tuple[np.ndarray, ...]
    xrange: Tuple[float, float]
    snapshots: Tuple[float, ...]
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        frozen = []
        for xi in self.xi_list:
            xi = np.array(xi, dtype=np.float64)
            xi.setflags(write=False)
            frozen.append(xi)
        object.__setattr__(self, "xi_list", tuple(frozen))
        object.__setattr__(self, "xrange", (float(self.xrange[0]), float(self.xrange[1])))
        object.__setattr__(self, "snapshots", tuple(float(s) for s in self.snapshots))

    @property
    def x(self) -> np.ndarray:
        """Site locations, rebuilt from xrange and the lattice size."""
        m = self.xi_list[0].shape[0]
        return np.linspace(self.xrange[0], self.xrange[1], m)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def save_result(
    path: str | os.PathLike[str], result: DTSMResult, *, overwrite: bool = True
) -> None:
    """Serialize a DTSMResult to a compressed .npz file."""
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        xi=np.stack(result.xi_list),
        xrange=np.asarray(result.xrange, dtype=np.float64),
        snapshots=np.asarray(result.snapshots, dtype=np.float64),
        meta=json.dumps(result.meta),
    )


def load_result(path: str | os.PathLike[str]) -> DTSMResult:
    """Load a .npz written by save_result."""
    with np.load(path, allow_pickle=False) as data:
        xi = data["xi"]
        xrange = tuple(data["xrange"].tolist())
        snapshots = tuple(data["snapshots"].tolist())
        meta = json.loads(str(data["meta"])) if "meta" in data else {}
    return DTSMResult(
        xi_list=tuple(xi[k] for k in range(xi.shape[0])),
        xrange=xrange,
        snapshots=snapshots,
        meta=meta,
    )


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
