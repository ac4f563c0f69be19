"""Value Function Iteration (VFI) solver for the stochastic growth model.

This package provides:

* :class:`StochasticGrowthVFI` — orchestrator: grids, initial value,
  iteration and result packaging.
* :class:`VFIEngine` — Bellman step (maximizing or Howard) and the
  fixed-point loop.
* :class:`VFIResult` — converged (or last) iterate plus status.

Sub-packages
------------
kernels
    XLA-compiled numerical kernels (expected value, maximization,
    Howard update, feasibility, chunk accumulation).
chunking
    Memory-aware tiling of the exhaustive search.
grids
    Tauchen discretization, capital grid and initial value.

Modules
-------
protocols
    Protocol definitions for solver components.
maximizers
    Grid-search and binary-search strategies.
policies
    Policy extraction and flat formatting.
state_index
    Mapping between (capital, productivity) states and flat offsets.
"""

from growth_vfi.vfi.engine import VFIEngine, VFIResult
from growth_vfi.vfi.growth import StochasticGrowthVFI
from growth_vfi.vfi.state_index import StateIndex

__all__ = [
    "StateIndex",
    "StochasticGrowthVFI",
    "VFIEngine",
    "VFIResult",
]
