"""Maximization strategies for the Bellman update.

Two interchangeable implementations of :class:`~growth_vfi.vfi.protocols.Maximizer`:

* :class:`GridSearchMaximizer` — exhaustive search, optionally tiled
  along next-period capital to bound memory.
* :class:`BinarySearchMaximizer` — concavity-exploiting binary search.
  Only valid when every iterate is produced by maximization, which
  :class:`~growth_vfi.config.vfi_config.GridConfig` enforces.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import tensorflow as tf

from growth_vfi.config.vfi_config import BINARY_SEARCH, GridConfig
from growth_vfi.core.types import INDEX_DTYPE
from growth_vfi.vfi.chunking import compute_choice_chunk, execute_grid_tiles
from growth_vfi.vfi.kernels.chunk_accumulate import chunk_accumulate
from growth_vfi.vfi.kernels.maximize_kernels import binary_max, grid_max
from growth_vfi.vfi.protocols import Maximizer

logger = logging.getLogger(__name__)


class GridSearchMaximizer:
    """Exhaustive search over all feasible grid points.

    Parameters
    ----------
    kp_chunk_size : int, optional
        Tile width along next-period capital.  *None* searches the whole
        choice grid in one kernel call.
    """

    requires_concavity = False

    def __init__(self, kp_chunk_size: Optional[int] = None) -> None:
        self.kp_chunk_size = kp_chunk_size

    def maximize(
        self,
        resources: tf.Tensor,
        khi: tf.Tensor,
        k_grid: tf.Tensor,
        ev: tf.Tensor,
        eta: tf.Tensor,
    ) -> Tuple[tf.Tensor, tf.Tensor]:
        n_choice = int(k_grid.shape[0])
        if self.kp_chunk_size is None or self.kp_chunk_size >= n_choice:
            return grid_max(
                resources, khi, k_grid, ev, eta,
                tf.constant(0, dtype=INDEX_DTYPE),
            )
        return execute_grid_tiles(
            self.kp_chunk_size,
            resources,
            khi,
            k_grid,
            ev,
            eta,
            grid_kernel=grid_max,
            chunk_accumulate_fn=chunk_accumulate,
        )


class BinarySearchMaximizer:
    """Binary search over the feasible grid points of a concave objective."""

    requires_concavity = True

    def maximize(
        self,
        resources: tf.Tensor,
        khi: tf.Tensor,
        k_grid: tf.Tensor,
        ev: tf.Tensor,
        eta: tf.Tensor,
    ) -> Tuple[tf.Tensor, tf.Tensor]:
        return binary_max(resources, khi, k_grid, ev, eta)


def build_maximizer(config: GridConfig, bytes_per_elem: int = 8) -> Maximizer:
    """Return the maximizer selected by ``config.maximization``."""
    if config.maximization == BINARY_SEARCH:
        logger.info("Maximization: binary search")
        return BinarySearchMaximizer()

    chunk = config.kp_chunk_size
    if chunk is None:
        chunk = compute_choice_chunk(
            config.n_capital,
            config.n_productivity,
            bytes_per_elem=bytes_per_elem,
            memory_limit_gb=config.memory_limit_gb,
        )
    logger.info("Maximization: grid search (kp chunk=%d)", chunk)
    return GridSearchMaximizer(kp_chunk_size=chunk)
