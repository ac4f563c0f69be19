"""Running-best accumulation across choice tiles.

Tiles are visited in increasing next-capital order and a tile replaces
the running best only on a strict improvement, so the lowest maximizing
index wins ties exactly as in a single-pass search.
"""

from __future__ import annotations

from typing import Tuple

import tensorflow as tf


def chunk_accumulate_core(
    v_chunk: tf.Tensor,
    idx_chunk: tf.Tensor,
    v_best: tf.Tensor,
    idx_best: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Keep the better of the tile result and the running best (undecorated).

    Parameters
    ----------
    v_chunk, v_best : tf.Tensor
        ``(nk, nz)`` per-state values for the current tile and running best.
    idx_chunk, idx_best : tf.Tensor
        ``(nk, nz)`` global choice indices.

    Returns
    -------
    v_best_new : tf.Tensor
        Updated running-best values.
    idx_best_new : tf.Tensor
        Updated running-best indices.
    """
    improve = v_chunk > v_best
    v_best_new = tf.where(improve, v_chunk, v_best)
    idx_best_new = tf.where(improve, idx_chunk, idx_best)
    return v_best_new, idx_best_new


@tf.function(jit_compile=True)
def chunk_accumulate(
    v_chunk: tf.Tensor,
    idx_chunk: tf.Tensor,
    v_best: tf.Tensor,
    idx_best: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Keep the better of the tile result and the running best (XLA).

    See :func:`chunk_accumulate_core` for parameter documentation.
    """
    return chunk_accumulate_core(v_chunk, idx_chunk, v_best, idx_best)
