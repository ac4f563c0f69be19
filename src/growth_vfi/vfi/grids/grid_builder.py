# growth_vfi/vfi/grids/grid_builder.py
"""
Grid construction utilities for VFI state spaces.

This module builds the productivity grid and transition matrix, the
capital grid bounded by deterministic steady states, and the initial
value function seeded at those steady states.
"""

import logging
from typing import Optional, Tuple

import tensorflow as tf

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig
from growth_vfi.core.errors import InvalidParameter, NonPositiveConsumption
from growth_vfi.core.types import Tensor, resolve_dtype
from growth_vfi.econ import CRRAUtility, SteadyStateCalculator
from growth_vfi.vfi.grids.grid_utils import (
    check_transition_matrix,
    linear_grid,
    tauchen_discretization,
)

logger = logging.getLogger(__name__)

# Capital grid spans these multiples of the steady states at z_min / z_max.
K_LOWER_SCALE = 0.95
K_UPPER_SCALE = 1.05

_ROW_SUM_ATOL = {tf.float32: 1e-5, tf.float64: 1e-9}


class GridBuilder:
    """
    Utility class for constructing VFI state space grids.

    All outputs use the real type named by ``config.precision``.
    """

    @staticmethod
    def build_productivity_grid(
        config: GridConfig,
        params: GrowthParams
    ) -> Tuple[Tensor, Tensor, float, float]:
        """
        Build productivity grid using Tauchen's method.

        Args:
            config: Grid configuration.
            params: Economic parameters with AR(1) process parameters.

        Returns:
            Tuple containing:
                - z_grid: Productivity grid tensor, ``(n_z,)``.
                - P: Transition probability matrix, ``(n_z, n_z)``.
                - z_min: Minimum productivity value.
                - z_max: Maximum productivity value.
        """
        dtype, _ = resolve_dtype(config.precision)
        z_grid, P = tauchen_discretization(
            config.n_productivity,
            params.mu,
            params.rho,
            params.sigma,
            config.tauchen_width,
            dtype=dtype,
        )
        check_transition_matrix(P, atol=_ROW_SUM_ATOL[dtype])

        z_min = float(z_grid[0])
        z_max = float(z_grid[-1])
        logger.info(
            "Productivity grid: n_z=%d, z in [%.4f, %.4f]",
            config.n_productivity, z_min, z_max,
        )
        return z_grid, P, z_min, z_max

    @staticmethod
    def capital_bounds(
        params: GrowthParams,
        z_min: float,
        z_max: float,
    ) -> Tuple[float, float]:
        """Steady-state capital at the extreme productivities, widened by 5%."""
        k_min = K_LOWER_SCALE * SteadyStateCalculator.calculate_capital(params, z_min)
        k_max = K_UPPER_SCALE * SteadyStateCalculator.calculate_capital(params, z_max)
        return float(k_min), float(k_max)

    @staticmethod
    def build_capital_grid(
        config: GridConfig,
        params: GrowthParams,
        z_grid: Tensor,
        custom_bounds: Optional[Tuple[float, float]] = None,
    ) -> Tuple[Tensor, float, float]:
        """
        Build an equally spaced capital grid.

        Args:
            config: Grid configuration.
            params: Economic parameters.
            z_grid: Ascending productivity grid.
            custom_bounds: Optional (min, max) bounds replacing the
                steady-state bounds.

        Returns:
            Tuple containing:
                - k_grid: Capital grid tensor, ``(n_k,)``.
                - k_min: Lowest grid point.
                - k_max: Highest grid point.

        Raises:
            InvalidParameter: If the bounds are degenerate.
        """
        dtype, _ = resolve_dtype(config.precision)

        if custom_bounds is None:
            k_min, k_max = GridBuilder.capital_bounds(
                params, float(z_grid[0]), float(z_grid[-1])
            )
        else:
            k_min, k_max = (float(b) for b in custom_bounds)

        if not k_min > 0:
            raise InvalidParameter(f"Capital grid minimum must be positive, got {k_min}")
        if config.n_capital > 1 and not k_max > k_min:
            raise InvalidParameter(
                f"Capital grid is degenerate: k_min={k_min}, k_max={k_max}"
            )

        k_grid = linear_grid(k_min, k_max, config.n_capital, dtype=dtype)
        logger.info(
            "Capital grid: n_k=%d, k in [%.4f, %.4f]",
            config.n_capital, k_min, float(k_grid[-1]),
        )
        return k_grid, k_min, float(k_grid[-1])

    @staticmethod
    def build_initial_value(
        params: GrowthParams,
        z_grid: Tensor,
        n_capital: int,
    ) -> Tensor:
        """
        Seed the value function at each productivity's steady state.

        V0[i, j] = c_ss(z_j)^(1 - eta) / (1 - eta) for every capital index i.

        Args:
            params: Economic parameters.
            z_grid: Productivity grid, ``(n_z,)``.
            n_capital: Number of capital grid points.

        Returns:
            Initial value function, ``(n_k, n_z)``.

        Raises:
            NonPositiveConsumption: If some steady-state consumption is <= 0.
        """
        c_ss = SteadyStateCalculator.calculate_consumption(params, z_grid)
        if bool(tf.reduce_any(c_ss <= 0)):
            raise NonPositiveConsumption(
                "Steady-state consumption is not positive for "
                f"z = {z_grid.numpy()[(c_ss <= 0).numpy()]}"
            )

        v_ss = CRRAUtility.value(c_ss, params.eta)
        return tf.tile(v_ss[None, :], [n_capital, 1])
