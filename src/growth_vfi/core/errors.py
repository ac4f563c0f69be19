# growth_vfi/core/errors.py
"""
Exception hierarchy for the growth-model solver.

Construction-time problems (bad parameters, infeasible grids, an
infeasible steady state, incompatible solver modes) are raised before
any iteration starts.  Non-convergence is reported as a status on the
solver result; :class:`ConvergenceFailure` is raised only when a caller
asks for it via ``VFIResult.raise_for_status``.
"""


class GrowthVFIError(Exception):
    """Base class for all solver errors."""


class InvalidParameter(GrowthVFIError, ValueError):
    """Out-of-range or nonsensical economic or grid parameter."""


class InvalidConfiguration(GrowthVFIError, ValueError):
    """Incompatible solver settings (e.g. binary search with Howard steps)."""


class NonPositiveConsumption(GrowthVFIError, ValueError):
    """Deterministic steady-state consumption is not strictly positive."""


class InfeasibleGrid(GrowthVFIError, ValueError):
    """Some state cannot afford even the lowest capital grid point."""


class ConvergenceFailure(GrowthVFIError, RuntimeError):
    """Value iteration exhausted its budget above the tolerance."""
