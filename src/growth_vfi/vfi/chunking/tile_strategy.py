"""Compute the choice-tile width from a memory budget.

The exhaustive search materialises an ``(n_k, n_k', n_z)`` objective
tensor.  When that does not fit in the budget, the choice axis ``k'`` is
split into tiles of equal width.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# objective, consumption and feasibility mask are live together
LIVE_TENSORS = 3


def compute_choice_chunk(
    n_k: int,
    n_z: int,
    bytes_per_elem: int = 8,
    memory_limit_gb: float = 4.0,
) -> int:
    """
    Return the widest ``k'`` tile that keeps one search within budget.

    Parameters
    ----------
    n_k : int
        Number of capital grid points (states and choices).
    n_z : int
        Number of productivity grid points.
    bytes_per_elem : int, default 8
        Size of the real type (4 for float32, 8 for float64).
    memory_limit_gb : float, default 4.0
        Memory budget in GB.

    Returns
    -------
    int
        Tile width in ``[1, n_k]``; ``n_k`` means a single pass.
    """
    limit = int(memory_limit_gb * (1024 ** 3))
    per_choice = n_k * n_z * bytes_per_elem * LIVE_TENSORS
    full_bytes = per_choice * n_k

    if full_bytes <= limit:
        logger.debug(
            "Choice chunk for n_k=%d: FULL GRID (~%.2f GB)",
            n_k, full_bytes / 1e9,
        )
        return n_k

    chunk = max(min(limit // per_choice, n_k), 1)
    n_tiles = (n_k + chunk - 1) // chunk
    logger.info(
        "Choice chunk for n_k=%d: kp=%d (%d tiles, ~%.2f GB/tile)",
        n_k, chunk, n_tiles, per_choice * chunk / 1e9,
    )
    return int(chunk)
