# growth_vfi/vfi/grids/grid_utils.py
"""
Grid utility functions for the VFI solver.

Contains:
    * ``tauchen_discretization``   – AR(1) log-productivity → (Z, P)
    * ``check_transition_matrix``  – row-stochastic sanity check
    * ``linear_grid``              – equally spaced grid in a given dtype

These are pure numerical routines that operate on TensorFlow tensors
and do not depend on solver state.
"""

import logging
import math
from typing import Tuple

import tensorflow as tf
import tensorflow_probability as tfp

from growth_vfi.core.errors import InvalidParameter
from growth_vfi.core.types import TENSORFLOW_DTYPE

tfd = tfp.distributions

logger = logging.getLogger(__name__)


def linear_grid(
    min_val: float,
    max_val: float,
    n_points: int,
    dtype: tf.DType = TENSORFLOW_DTYPE,
) -> tf.Tensor:
    """Build an equally spaced grid; a single point sits at *min_val*."""
    if n_points == 1:
        return tf.constant([min_val], dtype=dtype)
    return tf.linspace(
        tf.constant(min_val, dtype=dtype),
        tf.constant(max_val, dtype=dtype),
        n_points,
    )


def tauchen_discretization(
    n: int,
    mu: float,
    rho: float,
    sigma: float,
    width: float = 3.0,
    dtype: tf.DType = TENSORFLOW_DTYPE,
) -> Tuple[tf.Tensor, tf.Tensor]:
    """
    Discretize an AR(1) process for log productivity using Tauchen's method.

    The AR(1) process: ln(z') = mu + rho * ln(z) + epsilon,
    epsilon ~ N(0, sigma^2).  The grid spans ``width`` unconditional
    standard deviations around the unconditional mean ``mu / (1 - rho)``.

    Args:
        n: Number of grid points (>= 2).
        mu: Intercept of the AR(1) process.
        rho: Persistence parameter, |rho| < 1.
        sigma: Standard deviation of the innovation term, > 0.
        width: Half-width of the grid in unconditional standard deviations.
        dtype: Real type of the returned tensors.

    Returns:
        Tuple containing:
            - z: Discretized state grid (in levels, not logs), shape ``(n,)``.
            - p_matrix: Transition matrix P[i, j] = Pr(z'=z_j | z=z_i),
              shape ``(n, n)``.

    Raises:
        InvalidParameter: On n < 2, |rho| >= 1, sigma <= 0 or width <= 0.
    """
    if int(n) < 2:
        raise InvalidParameter(f"Tauchen grid needs n >= 2, got {n}")
    if not (-1.0 < rho < 1.0):
        raise InvalidParameter(f"Persistence (rho) must be in (-1, 1), got {rho}")
    if sigma <= 0:
        raise InvalidParameter(f"Volatility (sigma) must be positive, got {sigma}")
    if width <= 0:
        raise InvalidParameter(f"Tauchen width must be positive, got {width}")

    n_int = int(n)

    # Unconditional moments of log productivity
    sigma_z = sigma / math.sqrt(1.0 - rho ** 2)
    mu_z = mu / (1.0 - rho)
    x_min = mu_z - width * sigma_z
    x_max = mu_z + width * sigma_z

    x = tf.linspace(
        tf.constant(x_min, dtype=dtype), tf.constant(x_max, dtype=dtype), n_int
    )
    step = tf.constant((x_max - x_min) / (n_int - 1), dtype=dtype)

    dist = tfd.Normal(
        loc=tf.constant(0.0, dtype=dtype), scale=tf.constant(1.0, dtype=dtype)
    )
    p_matrix = _build_transition_matrix(
        x,
        tf.constant(mu, dtype=dtype),
        tf.constant(rho, dtype=dtype),
        tf.constant(sigma, dtype=dtype),
        step, dist,
    )

    logger.debug(
        "Tauchen grid: n=%d, log z in [%.4f, %.4f]", n_int, x_min, x_max
    )
    return tf.exp(x), p_matrix


def _build_transition_matrix(
    x: tf.Tensor,
    mu: tf.Tensor,
    rho: tf.Tensor,
    sigma: tf.Tensor,
    step: tf.Tensor,
    dist: tfd.Normal
) -> tf.Tensor:
    """
    Build the row-normalized Markov transition matrix.

    Every row is computed from the Normal CDF on its own; the outer
    columns absorb the tails.

    Args:
        x: Log-space grid points, shape ``(n,)``.
        mu: AR(1) intercept.
        rho: Persistence parameter.
        sigma: Innovation standard deviation.
        step: Grid spacing.
        dist: Standard normal distribution for CDF.

    Returns:
        Transition probability matrix, shape ``(n, n)``.
    """
    one = tf.ones([], dtype=x.dtype)

    # Broadcasting: x_j is next state, x_i is current state
    x_j = x[None, :]
    cond_mean = mu + rho * x[:, None]

    upper = (x_j + step / 2.0 - cond_mean) / sigma
    lower = (x_j - step / 2.0 - cond_mean) / sigma

    p_middle = dist.cdf(upper) - dist.cdf(lower)
    p_col0 = dist.cdf(upper[:, :1])
    p_coln = one - dist.cdf(lower[:, -1:])

    p_matrix = tf.concat([p_col0, p_middle[:, 1:-1], p_coln], axis=1)

    row_sums = tf.reduce_sum(p_matrix, axis=1, keepdims=True)
    return p_matrix / row_sums


def check_transition_matrix(p_matrix: tf.Tensor, atol: float = 1e-9) -> None:
    """
    Verify that *p_matrix* is square, non-negative and row-stochastic.

    Raises:
        InvalidParameter: If any check fails.
    """
    shape = p_matrix.shape
    if shape.rank != 2 or shape[0] != shape[1]:
        raise InvalidParameter(
            f"Transition matrix must be square, got shape {shape}"
        )
    if bool(tf.reduce_any(p_matrix < 0)):
        raise InvalidParameter("Transition matrix has negative entries.")

    row_error = float(
        tf.reduce_max(tf.abs(tf.reduce_sum(p_matrix, axis=1) - 1.0))
    )
    if row_error > atol:
        raise InvalidParameter(
            f"Transition matrix rows do not sum to one (max error {row_error:.2e})."
        )
