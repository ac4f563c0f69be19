"""Numerical engine for Value Function Iteration (VFI).

This module provides the Bellman step for the growth model (maximizing
or Howard policy evaluation, applied to every state at once) and the
fixed-point loop around it with its stopping rule.

Example::

    >>> engine = VFIEngine(params, config, k_grid, z_grid, P)
    >>> result = engine.run_vfi(v_init)
    >>> result.converged, result.iterations
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import tensorflow as tf

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig
from growth_vfi.core.errors import ConvergenceFailure, InvalidConfiguration
from growth_vfi.core.types import INDEX_DTYPE, Tensor, resolve_dtype
from growth_vfi.econ import ProductionFunctions
from growth_vfi.vfi.kernels.bellman_kernels import (
    compute_ev,
    howard_update,
    sup_norm_diff,
)
from growth_vfi.vfi.kernels.feasibility_kernels import (
    check_feasible,
    feasible_upper_index,
)
from growth_vfi.vfi.maximizers import build_maximizer
from growth_vfi.vfi.protocols import Maximizer

logger = logging.getLogger(__name__)

LOG_EVERY = 100


@dataclass
class VFIResult:
    """Outcome of a value function iteration.

    Attributes
    ----------
    value : Tensor
        Last value iterate, ``(n_k, n_z)``.
    policy_idx : Tensor
        Last capital policy as grid indices, ``(n_k, n_z)``.
    converged : bool
        Whether a maximizing step reached ``dist < tol``.
    iterations : int
        Number of Bellman steps taken.
    distance : float
        Sup-norm distance of the last step.
    distance_history : list of float
        Sup-norm distance of every step.
    maximizing_steps : list of bool
        For every step, whether it re-optimized the policy.
    """

    value: Tensor
    policy_idx: Tensor
    converged: bool
    iterations: int
    distance: float
    distance_history: List[float] = field(default_factory=list)
    maximizing_steps: List[bool] = field(default_factory=list)

    def raise_for_status(self) -> "VFIResult":
        """Raise :class:`ConvergenceFailure` if the solve did not converge."""
        if not self.converged:
            raise ConvergenceFailure(
                f"VFI did not converge after {self.iterations} iterations "
                f"(final diff={self.distance:.2e})."
            )
        return self


class VFIEngine:
    """Bellman step and fixed-point iterator for the growth model.

    Iterates :math:`V_{t+1} = T(V_t)` until
    :math:`\\|V_{t+1} - V_t\\|_\\infty < \\text{tol}` on a maximizing step.
    Each step reads a frozen snapshot ``V0`` and produces a fresh ``V``;
    the snapshot is replaced only after the whole grid has been updated
    and the distance computed.

    Parameters
    ----------
    params : GrowthParams
        Structural economic parameters.
    config : GridConfig
        Tolerance, iteration budget, maximization mode and Howard cadence.
    k_grid : Tensor
        Capital grid, shape ``(n_k,)``.
    z_grid : Tensor
        Productivity grid, shape ``(n_z,)``.
    transition_matrix : Tensor
        Markov transition matrix, shape ``(n_z, n_z)``.
    maximizer : Maximizer, optional
        Maximization strategy; built from *config* when omitted.

    Raises
    ------
    InfeasibleGrid
        If some state cannot afford the lowest capital grid point.
    InvalidConfiguration
        If a concavity-dependent maximizer is combined with Howard steps.
    ValueError
        If a grid does not use the configured precision.
    """

    def __init__(
        self,
        params: GrowthParams,
        config: GridConfig,
        k_grid: Tensor,
        z_grid: Tensor,
        transition_matrix: Tensor,
        maximizer: Optional[Maximizer] = None,
    ) -> None:
        dtype, _ = resolve_dtype(config.precision)

        self.params = params
        self.config = config
        self.dtype = dtype

        self.k_grid: tf.Tensor = self._as_float("k_grid", k_grid)
        self.z_grid: tf.Tensor = self._as_float("z_grid", z_grid)
        self.transition_matrix: tf.Tensor = self._as_float(
            "transition_matrix", transition_matrix
        )
        self.beta: tf.Tensor = tf.constant(params.beta, dtype=dtype)
        self.eta: tf.Tensor = tf.constant(params.eta, dtype=dtype)

        # Invariant across iterations: resources and feasible choice bound.
        self.resources: tf.Tensor = ProductionFunctions.resources(
            self.k_grid, self.z_grid, params
        )
        self.khi: tf.Tensor = feasible_upper_index(self.k_grid, self.resources)
        check_feasible(self.khi, self.resources, float(self.k_grid[0]))

        self.maximizer: Maximizer = maximizer or build_maximizer(
            config, bytes_per_elem=dtype.size
        )

        # A Howard iterate breaks the concavity binary search relies on.
        needs_concavity = getattr(self.maximizer, "requires_concavity", False)
        if config.use_howard and needs_concavity:
            raise InvalidConfiguration(
                f"{type(self.maximizer).__name__} cannot be combined with "
                f"Howard improvement (howard_steps={config.howard_steps})."
            )

    def _as_float(self, name: str, value: Tensor) -> tf.Tensor:
        """Convert *value* to a tensor, refusing a foreign precision."""
        tensor = tf.convert_to_tensor(value)
        if tensor.dtype != self.dtype:
            raise ValueError(
                f"{name} has dtype {tensor.dtype.name}, "
                f"expected {self.dtype.name} (precision={self.config.precision})."
            )
        return tensor

    @property
    def shape(self) -> Tuple[int, int]:
        return int(self.k_grid.shape[0]), int(self.z_grid.shape[0])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def step(
        self,
        v_curr: Tensor,
        policy_idx: Optional[Tensor] = None,
        howard: bool = False,
    ) -> Tuple[Tensor, Tensor]:
        """Apply one Bellman update to every state.

        Parameters
        ----------
        v_curr : Tensor
            Read-only snapshot ``V0``, shape ``(n_k, n_z)``.
        policy_idx : Tensor, optional
            Current policy indices; required when *howard* is True.
        howard : bool
            If True, evaluate the Bellman equation at *policy_idx*
            without re-optimizing.

        Returns
        -------
        v_next : Tensor
            Updated value function, ``(n_k, n_z)``.
        policy_idx : Tensor
            Maximizing indices (unchanged on Howard steps), int32.

        Raises
        ------
        InvalidConfiguration
            If a Howard step is requested without a policy.
        ValueError
            If *v_curr* does not use the configured precision.
        """
        v_curr = self._as_float("v_curr", v_curr)

        if howard:
            if policy_idx is None:
                raise InvalidConfiguration(
                    "A Howard step needs the policy of a previous maximizing step."
                )
            policy_idx = tf.cast(policy_idx, INDEX_DTYPE)
            v_next = howard_update(
                v_curr,
                policy_idx,
                self.resources,
                self.k_grid,
                self.transition_matrix,
                self.beta,
                self.eta,
            )
            return v_next, policy_idx

        ev = compute_ev(v_curr, self.transition_matrix, self.beta)
        return self.maximizer.maximize(
            self.resources, self.khi, self.k_grid, ev, self.eta
        )

    def run_vfi(self, v_init: Tensor) -> VFIResult:
        """Execute value function iteration until convergence.

        Parameters
        ----------
        v_init : Tensor
            Initial guess for the value function, ``(n_k, n_z)``.

        Returns
        -------
        VFIResult
            Last iterate and convergence status.  Exhausting
            ``max_iter_vfi`` is reported through ``converged=False``.

        Raises
        ------
        ValueError
            If *v_init* does not match the grid shape or precision.
        """
        v_curr = self._as_float("v_init", v_init)
        if tuple(v_curr.shape) != self.shape:
            raise ValueError(
                f"v_init has shape {tuple(v_curr.shape)}, expected {self.shape}."
            )

        policy_idx: Optional[tf.Tensor] = None
        history: List[float] = []
        maximizing: List[bool] = []
        converged = False
        diff = float("inf")

        for iteration in range(self.config.max_iter_vfi):
            maximize = self.config.is_maximizing_step(iteration)
            v_next, policy_idx = self.step(
                v_curr, policy_idx, howard=not maximize
            )
            diff = float(sup_norm_diff(v_next, v_curr))
            v_curr = v_next

            history.append(diff)
            maximizing.append(maximize)

            if iteration % LOG_EVERY == 0:
                logger.debug(
                    "VFI iteration %d (%s): diff=%.3e",
                    iteration + 1,
                    "max" if maximize else "howard",
                    diff,
                )

            if maximize and diff < self.config.tol_vfi:
                converged = True
                logger.info(
                    "VFIEngine converged in %d iterations (diff=%.2e).",
                    iteration + 1,
                    diff,
                )
                break
        else:
            logger.warning(
                "VFIEngine did not converge after %d iterations "
                "(final diff=%.2e).",
                self.config.max_iter_vfi,
                diff,
            )

        return VFIResult(
            value=v_curr,
            policy_idx=policy_idx,
            converged=converged,
            iterations=len(history),
            distance=diff,
            distance_history=history,
            maximizing_steps=maximizing,
        )
