"""
CTRW Simulation Library - discrete-time semi-Markov lattice engine

This package evolves the space-age density of a continuous-time random walk
with heavy-tailed waiting times:
- DTSMSimulator / run_model / dtsm: the simulation driver
- build_grid, init_delta, jump_probs, step_xi: the lattice building blocks
- rho_table: marginal spatial densities per snapshot
"""

from .errors import DTSMError, InvalidParameter, InvalidTailFunction, NegativeSurvival
from .fields import (
    CallableField,
    ConstantField,
    PiecewiseField,
    PolynomialField,
    PowerLawTail,
    SpaceTimeField,
)
from .grid import Grid, build_grid
from .survival import init_delta
from .jumps import JumpProbs, jump_probs
from .stepper import step_xi
from .dtsm_sim import DTSMConfig, DTSMSimulator, dtsm, run_model
from .density import DensityTable, rho_table
from . import utils

__all__ = [
    # Simulator
    "DTSMSimulator",
    "DTSMConfig",
    "run_model",
    "dtsm",
    # Lattice building blocks
    "Grid",
    "build_grid",
    "init_delta",
    "JumpProbs",
    "jump_probs",
    "step_xi",
    # Fields
    "SpaceTimeField",
    "ConstantField",
    "PolynomialField",
    "PiecewiseField",
    "CallableField",
    "PowerLawTail",
    # Output
    "DensityTable",
    "rho_table",
    # Errors
    "DTSMError",
    "InvalidParameter",
    "NegativeSurvival",
    "InvalidTailFunction",
    # Utilities
    "utils",
]
