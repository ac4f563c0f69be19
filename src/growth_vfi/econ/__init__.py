# growth_vfi/econ/__init__.py
"""
Economic logic of the stochastic growth model.

This package provides the production technology, preferences and
deterministic steady state used by grid construction and the Bellman
kernels.
"""

from growth_vfi.econ.production import ProductionFunctions
from growth_vfi.econ.steady_state import SteadyStateCalculator
from growth_vfi.econ.utility import CRRAUtility


__all__ = [
    'CRRAUtility',
    'ProductionFunctions',
    'SteadyStateCalculator',
]
