"""Core utilities shared by the growth-model solver.

Provide the precision settings, type aliases and the exception
hierarchy used across configuration, grid construction and iteration.
"""

from growth_vfi.core.errors import (
    ConvergenceFailure,
    GrowthVFIError,
    InfeasibleGrid,
    InvalidConfiguration,
    InvalidParameter,
    NonPositiveConsumption,
)
from growth_vfi.core.types import (
    INDEX_DTYPE,
    NUMPY_DTYPE,
    TENSORFLOW_DTYPE,
    Array,
    Tensor,
    resolve_dtype,
)
