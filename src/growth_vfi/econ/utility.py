# growth_vfi/econ/utility.py
"""CRRA period utility."""

from growth_vfi.core.types import Numeric


class CRRAUtility:
    """Static methods for constant relative risk aversion utility."""

    @staticmethod
    def value(consumption: Numeric, eta: Numeric) -> Numeric:
        """
        Period utility u(c) = c^(1 - eta) / (1 - eta).

        Zero consumption maps to -inf for eta > 1 and to 0 for eta < 1.
        """
        return consumption ** (1.0 - eta) / (1.0 - eta)
