"""Policy extraction and formatting for the VFI solver.

Contains pure functions that map discrete policy indices to capital
levels and lay solver arrays out in the flat ``i + j*n_k`` order of the
output contract.
"""

from __future__ import annotations

from typing import Dict

import numpy as np
import tensorflow as tf

from growth_vfi.vfi.state_index import StateIndex


def extract_policy_capital(
    k_grid: tf.Tensor,
    policy_k_idx: tf.Tensor,
) -> tf.Tensor:
    """Map discrete policy indices to next-period capital levels.

    Parameters
    ----------
    k_grid : tf.Tensor
        Capital grid, shape ``(n_k,)``.
    policy_k_idx : tf.Tensor
        Grid indices of optimal K', shape ``(n_k, n_z)``.

    Returns
    -------
    tf.Tensor
        K' values, shape ``(n_k, n_z)``.
    """
    return tf.gather(k_grid, policy_k_idx)


def flatten_solution(
    index: StateIndex,
    value: np.ndarray,
    policy_idx: np.ndarray,
    policy_k: np.ndarray,
    transition_matrix: np.ndarray,
) -> Dict[str, np.ndarray]:
    """Flat views of the solution in the ``i + j*n_k`` layout.

    Returns
    -------
    dict
        ``V_flat``, ``policy_idx_flat``, ``policy_k_flat`` (length
        ``n_k*n_z``) and ``transition_flat`` (length ``n_z*n_z``, entry
        ``P[i, j]`` at ``i + j*n_z``).
    """
    return {
        "V_flat": index.flatten(value),
        "policy_idx_flat": index.flatten(policy_idx),
        "policy_k_flat": index.flatten(policy_k),
        "transition_flat": StateIndex.flatten_transition(transition_matrix),
    }
