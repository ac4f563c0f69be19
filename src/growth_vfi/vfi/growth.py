"""Value Function Iteration for the stochastic optimal growth model.

A representative household with CRRA utility owns a Cobb-Douglas
technology hit by an AR(1) productivity shock in logs.  Each period it
splits output plus undepreciated capital between consumption and
next-period capital K'.

State space : (Capital K, Productivity Z)
Choice      : Next-period capital K' on the capital grid

Architecture note
-----------------
This module is a thin orchestrator.  Grid construction is delegated to
``vfi.grids``, Bellman iteration to ``vfi.engine`` and policy
formatting to ``vfi.policies``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

import tensorflow as tf

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig
from growth_vfi.core.errors import InvalidParameter
from growth_vfi.vfi.engine import VFIEngine, VFIResult
from growth_vfi.vfi.grids.grid_builder import GridBuilder
from growth_vfi.vfi.policies import extract_policy_capital, flatten_solution
from growth_vfi.vfi.state_index import StateIndex

logger = logging.getLogger(__name__)


class StochasticGrowthVFI:
    """VFI solver for the single-capital stochastic growth model.

    Parameters
    ----------
    params : GrowthParams
        Structural economic parameters (frozen dataclass).
    config : GridConfig
        Grid sizes, tolerances, iteration limits and execution mode.
    k_bounds : tuple of (float, float), optional
        Custom ``(k_min, k_max)`` bounds for the capital grid.  When
        *None*, the grid spans 0.95 and 1.05 times the steady-state
        capital at the lowest and highest productivity.

    Raises
    ------
    InvalidParameter
        If the grids cannot be built from the parameters.
    NonPositiveConsumption
        If a steady state has non-positive consumption.
    InfeasibleGrid
        If some state cannot afford the lowest capital grid point.
    """

    def __init__(
        self,
        params: GrowthParams,
        config: GridConfig,
        k_bounds: Optional[Tuple[float, float]] = None,
    ) -> None:
        self._validate_inputs(k_bounds)

        self.params: GrowthParams = params
        self.config: GridConfig = config
        self.custom_k_bounds: Optional[Tuple[float, float]] = k_bounds

        self._initialize_grids()
        self.engine = VFIEngine(
            params, config, self.k_grid, self.z_grid, self.P
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_inputs(k_bounds: Optional[Tuple[float, float]]) -> None:
        if k_bounds is not None:
            k_lo, k_hi = k_bounds
            if k_lo >= k_hi:
                raise InvalidParameter(
                    f"k_bounds lower ({k_lo}) must be less than upper ({k_hi})."
                )
            if k_lo <= 0.0:
                raise InvalidParameter(
                    f"k_bounds lower must be positive, got {k_lo}."
                )

    # ------------------------------------------------------------------
    # Grid initialisation
    # ------------------------------------------------------------------

    def _initialize_grids(self) -> None:
        """Build the productivity grid, transition matrix and capital grid."""
        self.z_grid: tf.Tensor
        self.P: tf.Tensor
        self.z_grid, self.P, self.z_min, self.z_max = (
            GridBuilder.build_productivity_grid(self.config, self.params)
        )

        self.k_grid: tf.Tensor
        self.k_grid, self.k_min, self.k_max = GridBuilder.build_capital_grid(
            self.config,
            self.params,
            self.z_grid,
            custom_bounds=self.custom_k_bounds,
        )

        self.n_capital: int = int(self.k_grid.shape[0])
        self.n_productivity: int = int(self.z_grid.shape[0])
        self.index = StateIndex(self.n_capital, self.n_productivity)

    def initial_value(self) -> tf.Tensor:
        """Value function seeded at each productivity's steady state."""
        return GridBuilder.build_initial_value(
            self.params, self.z_grid, self.n_capital
        )

    # ------------------------------------------------------------------
    # Result packaging
    # ------------------------------------------------------------------

    def _build_result_dict(
        self,
        result: VFIResult,
        solve_seconds: float,
    ) -> Dict[str, Any]:
        """Package solver outputs into a serialisable dictionary.

        All tensors are converted to NumPy arrays so that the result can
        be saved to disk without TensorFlow dependencies.
        """
        value = result.value.numpy()
        policy_idx = result.policy_idx.numpy()
        policy_k = extract_policy_capital(self.k_grid, result.policy_idx).numpy()
        transition = self.P.numpy()

        output = {
            # Value and policy functions, (n_k, n_z)
            "V": value,
            "policy_idx": policy_idx,
            "policy_k_values": policy_k,
            # Grids
            "K": self.k_grid.numpy(),
            "Z": self.z_grid.numpy(),
            "transition_matrix": transition,
            # Convergence status
            "converged": bool(result.converged),
            "iterations": int(result.iterations),
            "distance": float(result.distance),
            "distance_history": list(result.distance_history),
            "maximizing_steps": list(result.maximizing_steps),
            "solve_seconds": float(solve_seconds),
            # Grid metadata
            "k_min": float(self.k_min),
            "k_max": float(self.k_max),
            "z_min": float(self.z_min),
            "z_max": float(self.z_max),
        }
        output.update(
            flatten_solution(self.index, value, policy_idx, policy_k, transition)
        )
        return output

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def solve_result(self, v_init: Optional[tf.Tensor] = None) -> VFIResult:
        """Run value function iteration and return the raw engine result.

        Parameters
        ----------
        v_init : tf.Tensor, optional
            Initial value function; steady-state seeding when omitted.
        """
        if v_init is None:
            v_init = self.initial_value()
        return self.engine.run_vfi(v_init)

    def solve(self, v_init: Optional[tf.Tensor] = None) -> Dict[str, Any]:
        """Solve the growth model via value function iteration.

        Returns
        -------
        dict
            ``V``, ``policy_idx``, ``policy_k_values``
                Value function, policy grid indices and policy capital
                levels, ``(n_k, n_z)``.
            ``V_flat``, ``policy_idx_flat``, ``policy_k_flat``
                The same arrays flattened with state ``(i, j)`` at
                ``i + j*n_k``.
            ``K``, ``Z``
                Capital grid ``(n_k,)`` and productivity grid ``(n_z,)``.
            ``transition_matrix``, ``transition_flat``
                ``P[i, j] = Pr(z_j | z_i)`` and its ``i + j*n_z`` flattening.
            ``converged``, ``iterations``, ``distance``
                Convergence status of the final step.
            ``distance_history``, ``maximizing_steps``
                Per-step sup-norm distance and step type.
            ``solve_seconds``
                Wall-clock time of the iteration.
            ``k_min``, ``k_max``, ``z_min``, ``z_max``
                Grid extremes.
        """
        logger.info(
            "Starting StochasticGrowthVFI.solve(): "
            "eta=%.3f, beta=%.4f, alpha=%.3f, delta=%.3f, n_k=%d, n_z=%d, "
            "maximization=%s, howard_steps=%d",
            self.params.eta,
            self.params.beta,
            self.params.alpha,
            self.params.delta,
            self.n_capital,
            self.n_productivity,
            self.config.maximization,
            self.config.howard_steps,
        )

        start = time.perf_counter()
        result = self.solve_result(v_init)
        elapsed = time.perf_counter() - start

        logger.info(
            "VFI finished in %.3f s (%d iterations, converged=%s).",
            elapsed, result.iterations, result.converged,
        )
        return self._build_result_dict(result, elapsed)
