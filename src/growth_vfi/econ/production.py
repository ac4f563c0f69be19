# growth_vfi/econ/production.py
"""
Production function calculations.

This module implements the Cobb-Douglas technology and the resources
available for consumption and next-period capital.
"""

import tensorflow as tf

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.core.types import Tensor


class ProductionFunctions:
    """Static methods for production-related calculations."""

    @staticmethod
    def cobb_douglas(
        capital: Tensor,
        productivity: Tensor,
        params: GrowthParams
    ) -> Tensor:
        """
        Compute output using Cobb-Douglas production technology.

        Formula: Y = Z * K^alpha
        """
        return productivity * (capital ** params.alpha)

    @staticmethod
    def resources(
        k_grid: Tensor,
        z_grid: Tensor,
        params: GrowthParams
    ) -> Tensor:
        """
        Output plus undepreciated capital for every (k, z) state.

        Formula: ydepK = Z * K^alpha + (1 - delta) * K

        Args:
            k_grid: Capital grid, shape ``(n_k,)``.
            z_grid: Productivity grid, shape ``(n_z,)``.
            params: Economic parameters.

        Returns:
            Tensor of shape ``(n_k, n_z)``.
        """
        k = tf.reshape(k_grid, (-1, 1))
        z = tf.reshape(z_grid, (1, -1))
        return ProductionFunctions.cobb_douglas(k, z, params) + (
            1.0 - params.delta
        ) * k
