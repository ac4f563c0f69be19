# growth_vfi/vfi/grids/__init__.py
"""
Grid management for the VFI solver.

This package provides the Tauchen discretization of log productivity,
the steady-state bounded capital grid and the initial value function.
"""

from growth_vfi.vfi.grids.grid_builder import GridBuilder
from growth_vfi.vfi.grids.grid_utils import (
    check_transition_matrix,
    linear_grid,
    tauchen_discretization,
)

__all__ = [
    'GridBuilder',
    'check_transition_matrix',
    'linear_grid',
    'tauchen_discretization',
]
