"""XLA-compiled numerical kernels for the VFI solver.

Each kernel has an undecorated ``_core`` variant for nesting inside
other ``@tf.function(jit_compile=True)`` functions and a decorated
public wrapper for standalone use.

Modules
-------
bellman_kernels
    Expected value, Bellman objective, Howard update, sup-norm.
chunk_accumulate
    Running-best merge across choice tiles.
feasibility_kernels
    Largest affordable next-capital index per state.
maximize_kernels
    Exhaustive and binary-search maximization.
"""

from growth_vfi.vfi.kernels.bellman_kernels import (
    compute_ev,
    compute_ev_core,
    crra_core,
    evaluate_choice,
    evaluate_choice_core,
    gather_ev_core,
    howard_update,
    howard_update_core,
    sup_norm_diff,
    sup_norm_diff_core,
)
from growth_vfi.vfi.kernels.chunk_accumulate import (
    chunk_accumulate,
    chunk_accumulate_core,
)
from growth_vfi.vfi.kernels.feasibility_kernels import (
    check_feasible,
    feasible_upper_index,
)
from growth_vfi.vfi.kernels.maximize_kernels import (
    binary_max,
    binary_max_core,
    grid_max,
    grid_max_core,
)

__all__ = [
    "binary_max",
    "binary_max_core",
    "check_feasible",
    "chunk_accumulate",
    "chunk_accumulate_core",
    "compute_ev",
    "compute_ev_core",
    "crra_core",
    "evaluate_choice",
    "evaluate_choice_core",
    "feasible_upper_index",
    "gather_ev_core",
    "grid_max",
    "grid_max_core",
    "howard_update",
    "howard_update_core",
    "sup_norm_diff",
    "sup_norm_diff_core",
]
