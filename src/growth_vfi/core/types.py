# growth_vfi/core/types.py
"""
Global type definitions for TensorFlow and NumPy precision.

This module establishes a single source of truth for numerical precision
across the solver.  Grids, transition matrices and value arrays of one
solve are all built in the same real type; ``resolve_dtype`` maps the
``precision`` setting of a :class:`GridConfig` onto the matching
TensorFlow / NumPy pair.

Example:
    >>> from growth_vfi.core.types import resolve_dtype
    >>> tf_dtype, np_dtype = resolve_dtype("float64")
"""

from typing import Tuple, Union

import numpy as np
import tensorflow as tf

from growth_vfi.core.errors import InvalidConfiguration

# -----------------------------------------------------------------------------
# Global Precision Settings
# -----------------------------------------------------------------------------
# Default is float64: value iterates of the growth model are O(10) in
# magnitude, so float32 cannot resolve sup-norm tolerances below ~1e-5.

TENSORFLOW_DTYPE = tf.float64
NUMPY_DTYPE = np.float64

INDEX_DTYPE = tf.int32

_PRECISIONS = {
    "float32": (tf.float32, np.float32),
    "float64": (tf.float64, np.float64),
}

# -----------------------------------------------------------------------------
# Type Aliases
# -----------------------------------------------------------------------------

Tensor = tf.Tensor
Array = np.ndarray
Numeric = Union[float, np.floating, tf.Tensor]


def resolve_dtype(precision: str) -> Tuple[tf.DType, type]:
    """
    Return the (TensorFlow, NumPy) dtype pair for a precision name.

    Args:
        precision: ``"float32"`` or ``"float64"``.

    Returns:
        Tuple of TensorFlow dtype and NumPy scalar type.

    Raises:
        InvalidConfiguration: If *precision* is not supported.
    """
    try:
        return _PRECISIONS[precision]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown precision '{precision}'. "
            f"Valid options: {sorted(_PRECISIONS)}"
        ) from None
