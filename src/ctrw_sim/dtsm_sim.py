"""
Discrete-time semi-Markov (DTSM) simulator for a CTRW with heavy-tailed
waiting times.

The walk is discretised on a joint space-age lattice: space with spacing
chi, age with spacing tau. Each step mass either survives (and ages by one
bin) or escapes and is redistributed to age zero at the same site or a
neighbour. Escape probabilities come from the tail of the waiting-time Levy
measure, nuTail, scaled by the master parameter c; jump probabilities come
from the diffusivity a and drift b.

A local (instantaneous) jump rate d(x) is converted into the local share
theta = d / (1 + d) of the escape probability; a and b are discounted by
(1 - theta) so the nonlocal mechanism only acts on what is left.

Usage:
    sim = DTSMSimulator(DTSMConfig(snapshots=(0.5, 1.0)))
    sim.run()
    result = sim.get_result()
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from . import utils
from .errors import InvalidParameter
from .fields import PowerLawTail, SpaceTimeField, as_field
from .grid import Grid, build_grid
from .jumps import JumpProbs, jump_probs_from_arrays
from .stepper import step_xi
from .survival import init_delta

PROGRESS_EVERY = 1000

# Slack when converting a snapshot time into a whole number of tau-steps.
STEP_EPS = 1e-9


@dataclass
class DTSMConfig:
    """Run parameters; None means derived from c / snapshots."""

    xrange: Tuple[float, float] = (-2.0, 2.0)
    snapshots: Sequence[float] = (0.5, 1.0, 2.0)
    age_max: Optional[float] = None
    c: float = 100.0
    chi: Optional[float] = None
    tau: Optional[float] = None
    a: Any = 0.9
    b: Any = 0.0
    nuTail: Any = field(default_factory=PowerLawTail)
    d: Any = 0.0
    initial_condition: str = "centre"
    verbose: bool = True

    def resolved(self) -> "DTSMConfig":
        """Copy with derived defaults filled in and inputs validated."""
        if not self.c > 0:
            raise InvalidParameter(f"Scaling constant c must be positive, got {self.c}")
        snapshots = validate_snapshots(self.snapshots)
        chi = 1.0 / math.sqrt(self.c) if self.chi is None else float(self.chi)
        tau = 1.0 / self.c if self.tau is None else float(self.tau)
        age_max = max(snapshots) if self.age_max is None else float(self.age_max)
        return DTSMConfig(
            xrange=(float(self.xrange[0]), float(self.xrange[1])),
            snapshots=snapshots,
            age_max=age_max,
            c=float(self.c),
            chi=chi,
            tau=tau,
            a=as_field(self.a),
            b=as_field(self.b),
            nuTail=as_field(self.nuTail),
            d=as_field(self.d, spatial=True),
            initial_condition=self.initial_condition,
            verbose=self.verbose,
        )


def validate_snapshots(snapshots) -> Tuple[float, ...]:
    """Snapshots must be a non-empty, strictly increasing list of times >= 0."""
    values = np.atleast_1d(np.asarray(snapshots, dtype=np.float64))
    if values.ndim != 1 or values.size == 0:
        raise InvalidParameter("Need at least one snapshot time")
    if not np.all(np.isfinite(values)):
        raise InvalidParameter(f"Snapshot times must be finite, got {values.tolist()}")
    if values[0] < 0:
        raise InvalidParameter(f"Snapshot times can't be negative, got {values[0]}")
    if np.any(np.diff(values) <= 0):
        raise InvalidParameter(
            f"Snapshot times must be strictly increasing, got {values.tolist()}"
        )
    return tuple(float(v) for v in values)


def steps_until(snapshot: float, tau: float) -> int:
    """Number of full tau-steps that fit in [0, snapshot]."""
    return int(math.floor(snapshot / tau + STEP_EPS))


def local_share(d_field: SpaceTimeField, x: np.ndarray) -> np.ndarray:
    """theta = d / (1 + d): local jump rate to local jump probability."""
    d_vec = d_field.evaluate(x, 0.0)
    if not np.all(d_vec >= 0):
        raise InvalidParameter("Local jump rate d can't be negative.")
    return d_vec / (1.0 + d_vec)


class DTSMSimulator:
    """
    Owns one run: builds the lattice and survival field on construction,
    then steps through the snapshot times in run().
    """

    def __init__(self, config: DTSMConfig | None = None) -> None:
        self.config = (config or DTSMConfig()).resolved()
        cfg = self.config

        self.grid: Grid = build_grid(cfg.xrange, cfg.chi, cfg.age_max, cfg.tau)
        self.theta = local_share(cfg.d, self.grid.x)
        self.xi0, self.survival_probs = init_delta(
            self.grid, cfg.c, cfg.nuTail, self.theta, where=cfg.initial_condition
        )
        # fail before stepping if the diffusivity is already negative at the first step
        self.jump_probs_at(cfg.tau)

        self.xi_list: Optional[list] = None
        self.iterations = 0
        self.elapsed = 0.0

    def jump_probs_at(self, t: float) -> JumpProbs:
        """Jump probabilities with a and b discounted by the local share."""
        x = self.grid.x
        a_trans = (1.0 - self.theta) * self.config.a.evaluate(x, t)
        b_trans = (1.0 - self.theta) * self.config.b.evaluate(x, t)
        return jump_probs_from_arrays(a_trans, b_trans, self.grid.spacing)

    def run(self) -> None:
        """Step through every snapshot time, recording xi at each."""
        cfg = self.config
        tau = self.grid.tau
        start_time = time.time()

        xi = self.xi0
        xi_list = []
        counter = 0
        total = steps_until(cfg.snapshots[-1], tau)
        if cfg.verbose:
            print(f"[dtsm] Need {total} iterations (m={self.grid.m}, n={self.grid.n}).")

        for snapshot in cfg.snapshots:
            target = steps_until(snapshot, tau)
            while counter < target:
                counter += 1
                t = counter * tau
                if cfg.verbose and counter % PROGRESS_EVERY == 0:
                    print(f"[dtsm] Finished {counter} iterations.")
                xi = step_xi(xi, self.survival_probs, self.jump_probs_at(t))
            xi_list.append(xi.copy())

        self.xi_list = xi_list
        self.iterations = counter
        self.elapsed = time.time() - start_time

    def get_result(self) -> utils.DTSMResult:
        if self.xi_list is None:
            raise RuntimeError("Simulation has not been run. Call run() first.")
        cfg = self.config
        meta = {
            "model": "dtsm",
            "c": cfg.c,
            "chi": cfg.chi,
            "tau": cfg.tau,
            "age_max": cfg.age_max,
            "m": self.grid.m,
            "n": self.grid.n,
            "initial_condition": cfg.initial_condition,
            "a": repr(cfg.a),
            "b": repr(cfg.b),
            "nuTail": repr(cfg.nuTail),
            "d": repr(cfg.d),
            "iterations": int(self.iterations),
            "time_elapsed": float(self.elapsed),
        }
        return utils.DTSMResult(
            xi_list=tuple(self.xi_list),
            xrange=cfg.xrange,
            snapshots=cfg.snapshots,
            meta=meta,
        )


def run_model(config: DTSMConfig | dict | None = None) -> utils.DTSMResult:
    """Run a simulation from a DTSMConfig or a plain dict of its fields."""
    if config is None:
        config = DTSMConfig()
    elif isinstance(config, dict):
        config = DTSMConfig(**config)
    sim = DTSMSimulator(config)
    sim.run()
    return sim.get_result()


def dtsm(
    xrange=(-2.0, 2.0),
    snapshots=(0.5, 1.0, 2.0),
    age_max=None,
    c=100.0,
    chi=None,
    tau=None,
    a=0.9,
    b=0.0,
    nuTail=None,
    d=0.0,
    initial_condition="centre",
    verbose=True,
) -> utils.DTSMResult:
    """
    Compute location-age densities at the given snapshot times.

    Args:
        xrange: (xmin, xmax) of the domain.
        snapshots: increasing times at which xi is recorded.
        age_max: age lattice cutoff (default: last snapshot).
        c: master scaling parameter.
        chi: spatial spacing (default 1/sqrt(c)).
        tau: temporal spacing (default 1/c).
        a: diffusivity a(x, t).
        b: drift b(x, t).
        nuTail: tail function of the Levy measure (default power law, 0.7).
        d: local jump rate d(x) >= 0.
        initial_condition: "centre" or "left".
    """
    return run_model(
        DTSMConfig(
            xrange=xrange,
            snapshots=snapshots,
            age_max=age_max,
            c=c,
            chi=chi,
            tau=tau,
            a=a,
            b=b,
            nuTail=PowerLawTail() if nuTail is None else nuTail,
            d=d,
            initial_condition=initial_condition,
            verbose=verbose,
        )
    )


__all__ = [
    "DTSMConfig",
    "DTSMSimulator",
    "run_model",
    "dtsm",
    "validate_snapshots",
    "steps_until",
]
