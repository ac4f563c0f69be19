"""Python tiling loop over next-period capital with kernel delegation.

Splits the exhaustive search along the choice axis ``k'``, calls the
grid-search kernel per tile and merges the per-tile results into a
running best.  The executor receives kernel and accumulator as
callables, enabling substitution with mocks in unit tests.
"""

from __future__ import annotations

from typing import Callable, Tuple

import tensorflow as tf

from growth_vfi.core.types import INDEX_DTYPE

# Type aliases for the kernel callables
GridKernelFn = Callable[..., Tuple[tf.Tensor, tf.Tensor]]
ChunkAccumulateFn = Callable[..., Tuple[tf.Tensor, tf.Tensor]]


def execute_grid_tiles(
    kp_chunk_size: int,
    resources: tf.Tensor,
    khi: tf.Tensor,
    k_grid: tf.Tensor,
    ev: tf.Tensor,
    eta: tf.Tensor,
    grid_kernel: GridKernelFn,
    chunk_accumulate_fn: ChunkAccumulateFn,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Exhaustive maximization over ``k'`` in tiles of ``kp_chunk_size``.

    Parameters
    ----------
    kp_chunk_size : int
        Tile width along the choice axis.
    resources : tf.Tensor
        ``(nk, nz)`` output plus undepreciated capital.
    khi : tf.Tensor
        ``(nk, nz)`` int32 largest feasible choice index.
    k_grid : tf.Tensor
        ``(nk,)`` capital grid.
    ev : tf.Tensor
        ``(nk, nz)`` discounted expected value over the choice grid.
    eta : tf.Tensor
        Scalar risk aversion.
    grid_kernel : callable
        Tile search kernel; signature must match ``grid_max``.
    chunk_accumulate_fn : callable
        Merge kernel; signature must match ``chunk_accumulate``.

    Returns
    -------
    v_max : tf.Tensor
        ``(nk, nz)`` maximal objective.
    policy_idx : tf.Tensor
        ``(nk, nz)`` int32 maximizing index.
    """
    n_choice = int(k_grid.shape[0])

    v_best = tf.fill(tf.shape(resources), tf.constant(float("-inf"), resources.dtype))
    idx_best = tf.zeros(tf.shape(resources), dtype=INDEX_DTYPE)

    for kp_start in range(0, n_choice, kp_chunk_size):
        kp_end = min(kp_start + kp_chunk_size, n_choice)

        v_chunk, idx_chunk = grid_kernel(
            resources,
            khi,
            k_grid[kp_start:kp_end],
            ev[kp_start:kp_end],
            eta,
            tf.constant(kp_start, dtype=INDEX_DTYPE),
        )
        v_best, idx_best = chunk_accumulate_fn(
            v_chunk, idx_chunk, v_best, idx_best
        )

    return v_best, idx_best
