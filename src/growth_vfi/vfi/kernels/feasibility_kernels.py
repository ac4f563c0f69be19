"""Feasible choice set for next-period capital.

For every state the feasible next-period capital choices are the grid
points ``K[0..khi]`` with ``K[khi] <= ydepK``: consumption must be
non-negative.  The bound is constant across iterations, so it is
computed once per solve.
"""

from __future__ import annotations

import tensorflow as tf

from growth_vfi.core.errors import InfeasibleGrid
from growth_vfi.core.types import INDEX_DTYPE


def feasible_upper_index(k_grid: tf.Tensor, resources: tf.Tensor) -> tf.Tensor:
    """Largest capital index affordable at each state.

    Locates the first grid point with ``K[idx] >= ydepK`` (clamped to the
    last point) and steps back one when that point exceeds ``ydepK``.
    A state that cannot afford ``K[0]`` gets ``-1``.

    Parameters
    ----------
    k_grid : tf.Tensor
        Ascending capital grid, ``(nk,)``.
    resources : tf.Tensor
        ``(nk, nz)`` output plus undepreciated capital.

    Returns
    -------
    tf.Tensor
        ``(nk, nz)`` int32 upper index ``khi``.
    """
    nk = tf.shape(k_grid)[0]
    flat = tf.reshape(resources, [-1])
    idx = tf.searchsorted(k_grid, flat, side="left", out_type=INDEX_DTYPE)
    idx = tf.minimum(idx, nk - 1)
    khi = tf.where(tf.gather(k_grid, idx) > flat, idx - 1, idx)
    return tf.reshape(khi, tf.shape(resources))


def check_feasible(khi: tf.Tensor, resources: tf.Tensor, k_min: float) -> None:
    """Raise if any state has an empty feasible set.

    Raises
    ------
    InfeasibleGrid
        If ``K[0] > ydepK`` at some state.
    """
    infeasible = khi < 0
    if bool(tf.reduce_any(infeasible)):
        states = tf.where(infeasible).numpy()
        worst = float(tf.reduce_min(resources))
        raise InfeasibleGrid(
            f"{len(states)} state(s) cannot afford the lowest capital "
            f"grid point k_min={k_min:.6g} (min resources {worst:.6g}); "
            f"first (i, j) = {tuple(int(s) for s in states[0])}"
        )
