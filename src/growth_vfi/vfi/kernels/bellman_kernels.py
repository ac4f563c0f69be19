"""Bellman-iteration XLA kernels shared by both maximizers.

Contains four small XLA kernels:
- ``compute_ev``       — discounted expected continuation value β · V Pᵀ
- ``evaluate_choice``  — Bellman objective at given next-capital indices
- ``howard_update``    — Bellman update at a fixed policy (no maximization)
- ``sup_norm_diff``    — ‖a − b‖∞

``_core`` variants are undecorated for nesting inside other
``@tf.function(jit_compile=True)`` kernels.
"""

from __future__ import annotations

import tensorflow as tf


def compute_ev_core(
    v_curr: tf.Tensor,
    P: tf.Tensor,
    beta: tf.Tensor,
) -> tf.Tensor:
    """Compute discounted expected continuation value (undecorated).

    Returns ``β · V @ Pᵀ``, i.e. ``ev[k', j] = β Σ_m P[j, m] V[k', m]``.

    Parameters
    ----------
    v_curr : tf.Tensor
        Current value function, ``(nk, nz)``.
    P : tf.Tensor
        Markov transition matrix, ``(nz, nz)``.
    beta : tf.Tensor
        Scalar discount factor.

    Returns
    -------
    tf.Tensor
        Discounted expected value, ``(nk, nz)``.
    """
    return beta * tf.matmul(v_curr, P, transpose_b=True)


@tf.function(jit_compile=True)
def compute_ev(
    v_curr: tf.Tensor,
    P: tf.Tensor,
    beta: tf.Tensor,
) -> tf.Tensor:
    """Compute discounted expected continuation value (XLA-compiled).

    See :func:`compute_ev_core` for parameter documentation.
    """
    return compute_ev_core(v_curr, P, beta)


def crra_core(consumption: tf.Tensor, eta: tf.Tensor) -> tf.Tensor:
    """CRRA utility ``c^(1-η) / (1-η)`` (undecorated)."""
    one = tf.ones([], dtype=consumption.dtype)
    return tf.pow(consumption, one - eta) / (one - eta)


def gather_ev_core(ev: tf.Tensor, kp_idx: tf.Tensor) -> tf.Tensor:
    """Pick ``ev[kp_idx[i, j], j]`` for every state (undecorated).

    Parameters
    ----------
    ev : tf.Tensor
        ``(nk', nz)`` continuation values over the choice grid.
    kp_idx : tf.Tensor
        ``(nk, nz)`` int32 next-capital indices.
    """
    nz = tf.shape(ev)[1]
    z_idx = tf.range(nz, dtype=kp_idx.dtype)[None, :]
    return tf.gather(tf.reshape(ev, [-1]), kp_idx * nz + z_idx)


def evaluate_choice_core(
    kp_idx: tf.Tensor,
    resources: tf.Tensor,
    k_grid: tf.Tensor,
    ev: tf.Tensor,
    eta: tf.Tensor,
) -> tf.Tensor:
    """Bellman objective ``u(y − K[k']) + β E[V(k', z')|z]`` (undecorated).

    Parameters
    ----------
    kp_idx : tf.Tensor
        ``(nk, nz)`` int32 next-capital indices, one per state.
    resources : tf.Tensor
        ``(nk, nz)`` output plus undepreciated capital.
    k_grid : tf.Tensor
        ``(nk',)`` capital grid.
    ev : tf.Tensor
        ``(nk', nz)`` discounted expected value from :func:`compute_ev_core`.
    eta : tf.Tensor
        Scalar risk aversion.

    Returns
    -------
    tf.Tensor
        ``(nk, nz)`` objective values.
    """
    consumption = resources - tf.gather(k_grid, kp_idx)
    return crra_core(consumption, eta) + gather_ev_core(ev, kp_idx)


@tf.function(jit_compile=True)
def evaluate_choice(
    kp_idx: tf.Tensor,
    resources: tf.Tensor,
    k_grid: tf.Tensor,
    ev: tf.Tensor,
    eta: tf.Tensor,
) -> tf.Tensor:
    """Bellman objective at given indices (XLA-compiled).

    See :func:`evaluate_choice_core` for parameter documentation.
    """
    return evaluate_choice_core(kp_idx, resources, k_grid, ev, eta)


def howard_update_core(
    v_curr: tf.Tensor,
    policy_idx: tf.Tensor,
    resources: tf.Tensor,
    k_grid: tf.Tensor,
    P: tf.Tensor,
    beta: tf.Tensor,
    eta: tf.Tensor,
) -> tf.Tensor:
    """Re-evaluate the Bellman equation at a fixed policy (undecorated).

    ``V[i, j] = u(y[i, j] − K[G[i, j]]) + β Σ_m P[j, m] V0[G[i, j], m]``

    Returns
    -------
    tf.Tensor
        ``(nk, nz)`` updated value function.
    """
    ev = compute_ev_core(v_curr, P, beta)
    return evaluate_choice_core(policy_idx, resources, k_grid, ev, eta)


@tf.function(jit_compile=True)
def howard_update(
    v_curr: tf.Tensor,
    policy_idx: tf.Tensor,
    resources: tf.Tensor,
    k_grid: tf.Tensor,
    P: tf.Tensor,
    beta: tf.Tensor,
    eta: tf.Tensor,
) -> tf.Tensor:
    """Bellman update at a fixed policy (XLA-compiled).

    See :func:`howard_update_core` for parameter documentation.
    """
    return howard_update_core(
        v_curr, policy_idx, resources, k_grid, P, beta, eta
    )


def sup_norm_diff_core(a: tf.Tensor, b: tf.Tensor) -> tf.Tensor:
    """Compute the sup-norm ``‖a − b‖∞`` (undecorated)."""
    return tf.reduce_max(tf.abs(a - b))


@tf.function(jit_compile=True)
def sup_norm_diff(a: tf.Tensor, b: tf.Tensor) -> tf.Tensor:
    """Compute the sup-norm ``‖a − b‖∞`` (XLA-compiled)."""
    return sup_norm_diff_core(a, b)
