"""Memory-aware tiling of the exhaustive search.

Modules
-------
tile_strategy
    Compute the choice-tile width from a memory budget.
tile_executor
    Python tiling loop over k' with kernel delegation.
"""

from growth_vfi.vfi.chunking.tile_strategy import compute_choice_chunk
from growth_vfi.vfi.chunking.tile_executor import execute_grid_tiles

__all__ = [
    "compute_choice_chunk",
    "execute_grid_tiles",
]
