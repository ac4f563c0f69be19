# growth_vfi/econ/steady_state.py
"""
Steady state calculations for the growth model.

This module computes the deterministic steady state at a fixed
productivity level.  It bounds the capital grid and seeds the initial
value function.
"""

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.core.types import Numeric


class SteadyStateCalculator:
    """Static methods for steady state calculations."""

    @staticmethod
    def calculate_capital(params: GrowthParams, productivity: Numeric) -> Numeric:
        """
        Calculate deterministic steady-state capital at productivity z.

        Derived from the Euler equation 1 = beta * (alpha z k^(alpha-1) + 1 - delta):
            k_ss(z) = ((1 / (alpha z)) * (1/beta - 1 + delta))^(1 / (alpha - 1))

        Args:
            params: Economic parameters.
            productivity: Productivity level z (scalar or tensor).

        Returns:
            Steady-state capital with the shape of *productivity*.
        """
        user_cost = (1.0 / params.beta) - 1.0 + params.delta
        return ((1.0 / (params.alpha * productivity)) * user_cost) ** (
            1.0 / (params.alpha - 1.0)
        )

    @staticmethod
    def calculate_consumption(params: GrowthParams, productivity: Numeric) -> Numeric:
        """
        Calculate deterministic steady-state consumption at productivity z.

        Formula: c_ss = z k_ss^alpha - delta k_ss
        """
        k_ss = SteadyStateCalculator.calculate_capital(params, productivity)
        return productivity * k_ss ** params.alpha - params.delta * k_ss
