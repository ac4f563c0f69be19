"""Maximization XLA kernels for the Bellman update.

Both kernels search next-period capital over the feasible grid points
``K[0..khi]`` of every state at once (one lane per state) and return the
maximal objective and its grid index.  Ties go to the lowest index.

- ``grid_max``   — exhaustive search, O(nk') objective evaluations.
- ``binary_max`` — bracket halving on a concave objective, O(log nk')
  evaluations (Heer and Maussner, 2005).
"""

from __future__ import annotations

from typing import Tuple

import tensorflow as tf

from growth_vfi.core.types import INDEX_DTYPE
from growth_vfi.vfi.kernels.bellman_kernels import (
    crra_core,
    evaluate_choice_core,
)


def grid_max_core(
    resources: tf.Tensor,
    khi: tf.Tensor,
    k_choice: tf.Tensor,
    ev_choice: tf.Tensor,
    eta: tf.Tensor,
    kp_offset: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Exhaustive search over a contiguous slice of the choice grid (undecorated).

    Parameters
    ----------
    resources : tf.Tensor
        ``(nk, nz)`` output plus undepreciated capital.
    khi : tf.Tensor
        ``(nk, nz)`` int32 largest feasible global choice index.
    k_choice : tf.Tensor
        ``(ckp,)`` capital values of the slice.
    ev_choice : tf.Tensor
        ``(ckp, nz)`` discounted expected value over the slice.
    eta : tf.Tensor
        Scalar risk aversion.
    kp_offset : tf.Tensor
        Scalar int32 global index of the first slice point.

    Returns
    -------
    v_max : tf.Tensor
        ``(nk, nz)`` best objective within the slice (``-inf`` when no
        slice point is feasible).
    idx_max : tf.Tensor
        ``(nk, nz)`` int32 global index of the best choice.
    """
    ckp = tf.shape(k_choice)[0]

    consumption = resources[:, None, :] - k_choice[None, :, None]
    rhs = crra_core(consumption, eta) + ev_choice[None, :, :]

    kp_global = kp_offset + tf.range(ckp, dtype=INDEX_DTYPE)
    feasible = kp_global[None, :, None] <= khi[:, None, :]
    neg_inf = tf.constant(float("-inf"), dtype=rhs.dtype)
    rhs = tf.where(feasible, rhs, neg_inf)

    v_max = tf.reduce_max(rhs, axis=1)

    # First maximizer along k'; tf.argmax leaves ties unspecified.
    at_max = tf.equal(rhs, v_max[:, None, :])
    past_end = kp_offset + ckp
    idx_max = tf.reduce_min(
        tf.where(at_max, kp_global[None, :, None], past_end), axis=1
    )
    return v_max, idx_max


@tf.function(jit_compile=True)
def grid_max(
    resources: tf.Tensor,
    khi: tf.Tensor,
    k_choice: tf.Tensor,
    ev_choice: tf.Tensor,
    eta: tf.Tensor,
    kp_offset: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Exhaustive search over a choice slice (XLA-compiled).

    See :func:`grid_max_core` for parameter documentation.
    """
    return grid_max_core(resources, khi, k_choice, ev_choice, eta, kp_offset)


def binary_max_core(
    resources: tf.Tensor,
    khi: tf.Tensor,
    k_grid: tf.Tensor,
    ev: tf.Tensor,
    eta: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Binary search for the maximum of a concave objective (undecorated).

    Each lane keeps a bracket ``[lo, hi]`` starting at ``[0, khi]``.  While
    the bracket holds more than three points the objective is compared
    at ``mid = (lo + hi) // 2`` and ``mid + 1``: the bracket moves up to
    ``[mid, hi]`` when ``w(mid + 1) > w(mid)`` and down to
    ``[lo, mid + 1]`` otherwise.  The remaining one to three points are
    compared directly.

    Parameters
    ----------
    resources : tf.Tensor
        ``(nk, nz)`` output plus undepreciated capital.
    khi : tf.Tensor
        ``(nk, nz)`` int32 largest feasible choice index (>= 0).
    k_grid : tf.Tensor
        ``(nk,)`` capital grid.
    ev : tf.Tensor
        ``(nk, nz)`` discounted expected value.
    eta : tf.Tensor
        Scalar risk aversion.

    Returns
    -------
    v_max : tf.Tensor
        ``(nk, nz)`` maximal objective.
    idx_max : tf.Tensor
        ``(nk, nz)`` int32 maximizing index.
    """

    def objective(kp_idx: tf.Tensor) -> tf.Tensor:
        return evaluate_choice_core(kp_idx, resources, k_grid, ev, eta)

    def cond(lo: tf.Tensor, hi: tf.Tensor) -> tf.Tensor:
        return tf.reduce_any(hi - lo > 2)

    def body(lo: tf.Tensor, hi: tf.Tensor) -> Tuple[tf.Tensor, tf.Tensor]:
        active = hi - lo > 2
        mid1 = (lo + hi) // 2
        mid2 = mid1 + 1
        move_up = objective(mid2) > objective(mid1)
        lo = tf.where(active & move_up, mid1, lo)
        hi = tf.where(active & ~move_up, mid2, hi)
        return lo, hi

    lo0 = tf.zeros_like(khi)
    lo, hi = tf.while_loop(cond, body, (lo0, khi))

    best_idx = lo
    best_val = objective(lo)
    for step in (1, 2):
        cand_idx = tf.minimum(lo + step, hi)
        cand_val = objective(cand_idx)
        better = cand_val > best_val
        best_idx = tf.where(better, cand_idx, best_idx)
        best_val = tf.where(better, cand_val, best_val)

    return best_val, best_idx


@tf.function(jit_compile=True)
def binary_max(
    resources: tf.Tensor,
    khi: tf.Tensor,
    k_grid: tf.Tensor,
    ev: tf.Tensor,
    eta: tf.Tensor,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """Binary search maximization (XLA-compiled).

    See :func:`binary_max_core` for parameter documentation.
    """
    return binary_max_core(resources, khi, k_grid, ev, eta)
