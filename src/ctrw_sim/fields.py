"""
Functions of space and time used to parameterise a DTSM run.

Every field exposes ``evaluate(x, t)``, which broadcasts ``x`` against ``t``
and returns a float64 array of the broadcast shape. Spatial-only quantities
(the local rate ``d``) are fields that ignore ``t``.

Available variants:
- ConstantField: a single value everywhere.
- PolynomialField: polynomial in x (coefficients lowest order first).
- PiecewiseField: different sub-fields on consecutive x-intervals.
- CallableField: wraps a user function f(x, t) (or f(x) when spatial=True).
- PowerLawTail: the Levy-measure tail t^-alpha / Gamma(1 - alpha).
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np
from scipy.special import gamma


class SpaceTimeField:
    """Base class; subclasses implement evaluate(x, t)."""

    def evaluate(self, x, t=0.0) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, x, t=0.0):
        out = self.evaluate(x, t)
        if out.ndim == 0:
            return float(out)
        return out


class ConstantField(SpaceTimeField):
    def __init__(self, value: float):
        self.value = float(value)

    def evaluate(self, x, t=0.0) -> np.ndarray:
        x, t = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(t, dtype=np.float64))
        return np.full(x.shape, self.value, dtype=np.float64)

    def __repr__(self) -> str:
        return f"ConstantField({self.value})"


class PolynomialField(SpaceTimeField):
    """sum_k coeffs[k] * x**k, independent of time."""

    def __init__(self, coeffs: Sequence[float]):
        self.coeffs = np.asarray(coeffs, dtype=np.float64)
        if self.coeffs.ndim != 1 or self.coeffs.size == 0:
            raise ValueError("PolynomialField needs a non-empty 1D coefficient list")

    def evaluate(self, x, t=0.0) -> np.ndarray:
        x, t = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(t, dtype=np.float64))
        return np.polynomial.polynomial.polyval(x, self.coeffs)

    def __repr__(self) -> str:
        return f"PolynomialField({self.coeffs.tolist()})"


class PiecewiseField(SpaceTimeField):
    """
    Piecewise definition in space.

    ``breakpoints`` (sorted, length k) split the real line into k + 1
    intervals; interval i is [breakpoints[i-1], breakpoints[i]) and uses
    ``pieces[i]``.
    """

    def __init__(self, breakpoints: Sequence[float], pieces: Sequence):
        self.breakpoints = np.asarray(breakpoints, dtype=np.float64)
        self.pieces = [as_field(p) for p in pieces]
        if len(self.pieces) != self.breakpoints.size + 1:
            raise ValueError(
                f"PiecewiseField needs {self.breakpoints.size + 1} pieces, got {len(self.pieces)}"
            )
        if np.any(np.diff(self.breakpoints) <= 0):
            raise ValueError("PiecewiseField breakpoints must be strictly increasing")

    def evaluate(self, x, t=0.0) -> np.ndarray:
        x, t = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(t, dtype=np.float64))
        which = np.searchsorted(self.breakpoints, x, side="right")
        out = np.empty(x.shape, dtype=np.float64)
        for i, piece in enumerate(self.pieces):
            mask = which == i
            if np.any(mask):
                out[mask] = piece.evaluate(x[mask], t[mask])
        return out


class CallableField(SpaceTimeField):
    """
    Wrap a plain Python function.

    The function is called once per point with float arguments unless
    ``vectorized`` is set, in which case it receives whole arrays.
    """

    def __init__(self, func: Callable, *, spatial: bool = False, vectorized: bool = False):
        self.func = func
        self.spatial = spatial
        self.vectorized = vectorized

    def evaluate(self, x, t=0.0) -> np.ndarray:
        x, t = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(t, dtype=np.float64))
        if self.vectorized:
            res = self.func(x) if self.spatial else self.func(x, t)
            return np.broadcast_to(np.asarray(res, dtype=np.float64), x.shape).copy()
        out = np.empty(x.shape, dtype=np.float64)
        flat_x = x.ravel()
        flat_t = t.ravel()
        flat_out = out.reshape(-1)
        for k in range(flat_x.size):
            if self.spatial:
                flat_out[k] = self.func(float(flat_x[k]))
            else:
                flat_out[k] = self.func(float(flat_x[k]), float(flat_t[k]))
        return out


class PowerLawTail(SpaceTimeField):
    """
    Tail of a stable subordinator's Levy measure: t^-alpha / Gamma(1 - alpha).

    Infinite tail mass at t <= 0. The same exponent is used at every site.
    """

    def __init__(self, alpha: float = 0.7):
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"Power-law exponent must lie in (0, 1), got {alpha}")
        self.alpha = float(alpha)
        self._norm = float(gamma(1.0 - self.alpha))

    def evaluate(self, x, t=0.0) -> np.ndarray:
        x, t = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(t, dtype=np.float64))
        out = np.full(t.shape, np.inf, dtype=np.float64)
        pos = t > 0
        out[pos] = t[pos] ** (-self.alpha) / self._norm
        return out

    def __repr__(self) -> str:
        return f"PowerLawTail(alpha={self.alpha})"


def as_field(value, *, spatial: bool = False) -> SpaceTimeField:
    """Coerce numbers, coefficient lists and callables to a SpaceTimeField."""
    if isinstance(value, SpaceTimeField):
        return value
    if isinstance(value, (int, float, np.floating, np.integer)):
        if not math.isfinite(float(value)):
            raise ValueError(f"Constant field value must be finite, got {value}")
        return ConstantField(float(value))
    if isinstance(value, (list, tuple, np.ndarray)):
        return PolynomialField(value)
    if callable(value):
        return CallableField(value, spatial=spatial)
    raise TypeError(f"Cannot interpret {value!r} as a space/time field")


def field_from_spec(spec) -> SpaceTimeField:
    """
    Build a field from a parameter-file entry.

    Accepts a number, a coefficient list, or a table such as
    ``{"kind": "power_law", "alpha": 0.6}`` / ``{"kind": "polynomial",
    "coeffs": [...]}`` / ``{"kind": "constant", "value": 0.5}``.
    """
    if isinstance(spec, dict):
        kind = spec.get("kind")
        if kind == "constant":
            return ConstantField(spec["value"])
        if kind == "polynomial":
            return PolynomialField(spec["coeffs"])
        if kind == "power_law":
            return PowerLawTail(spec.get("alpha", 0.7))
        if kind == "piecewise":
            return PiecewiseField(
                spec["breakpoints"], [field_from_spec(p) for p in spec["pieces"]]
            )
        raise ValueError(f"Unknown field kind: {kind!r}")
    if callable(spec):
        raise TypeError("Parameter files cannot carry callables")
    return as_field(spec)


__all__ = [
    "SpaceTimeField",
    "ConstantField",
    "PolynomialField",
    "PiecewiseField",
    "CallableField",
    "PowerLawTail",
    "as_field",
    "field_from_spec",
]
