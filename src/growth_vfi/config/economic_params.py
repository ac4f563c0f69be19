# growth_vfi/config/economic_params.py
"""
Economic parameter definitions and loading utilities.

This module defines the structural parameters of the stochastic growth
model: CRRA preferences, Cobb-Douglas technology, depreciation and the
AR(1) process for log productivity.  Parameters are immutable after
initialization so that one record can be shared by every component of
a solve.

Example:
    >>> from growth_vfi.config.economic_params import load_economic_params
    >>> params = load_economic_params("config/params.json")
    >>> print(f"Discount factor: {params.beta}")
"""

from dataclasses import dataclass, fields
import logging
import math

from growth_vfi.core.errors import InvalidParameter
from growth_vfi.io.file_utils import load_json_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthParams:
    """
    Immutable container for the economic parameters of the growth model.

    Attributes:
        eta: Coefficient of relative risk aversion, positive and != 1.
        beta: Time discount factor, in (0, 1).
        alpha: Capital share in production, in (0, 1).
        delta: Depreciation rate, in [0, 1].
        mu: Intercept of the AR(1) process for log productivity.
        rho: Persistence of log productivity, |rho| < 1.
        sigma: Standard deviation of productivity innovations, > 0.

    Raises:
        InvalidParameter: If any value is outside its valid range.
    """

    eta: float = 2.0
    beta: float = 0.984
    alpha: float = 0.35
    delta: float = 0.01
    mu: float = 0.0
    rho: float = 0.95
    sigma: float = 0.005

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise InvalidParameter(f"{f.name} must be finite, got {value}")

        self._validate_preferences()
        self._validate_technology()
        self._validate_shock_process()

    def _validate_preferences(self) -> None:
        """CRRA utility with eta == 1 degenerates to log utility."""
        if self.eta <= 0 or self.eta == 1.0:
            raise InvalidParameter(
                f"Risk aversion (eta) must be positive and != 1, got {self.eta}"
            )
        if not (0 < self.beta < 1):
            raise InvalidParameter(
                f"Discount factor (beta) must be in (0, 1), got {self.beta}"
            )

    def _validate_technology(self) -> None:
        if not (0 < self.alpha < 1):
            raise InvalidParameter(
                f"Capital share (alpha) must be in (0, 1), got {self.alpha}"
            )
        if not (0 <= self.delta <= 1):
            raise InvalidParameter(
                f"Depreciation rate (delta) must be in [0, 1], got {self.delta}"
            )

    def _validate_shock_process(self) -> None:
        if not (-1 < self.rho < 1):
            raise InvalidParameter(
                f"Persistence (rho) must be in (-1, 1), got {self.rho}"
            )
        if self.sigma <= 0:
            raise InvalidParameter(
                f"Volatility (sigma) must be positive, got {self.sigma}"
            )


def load_economic_params(filename: str) -> GrowthParams:
    """
    Load economic parameters from a JSON file.

    Unknown keys (for instance grid settings stored in the same file)
    are ignored.

    Args:
        filename: Path to the JSON configuration file.

    Returns:
        Populated GrowthParams instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidParameter: If the file holds invalid values.
    """
    data = load_json_file(filename)
    valid_keys = {f.name for f in fields(GrowthParams)}
    filtered = {k: float(v) for k, v in data.items() if k in valid_keys}
    try:
        return GrowthParams(**filtered)
    except InvalidParameter as e:
        logger.error(f"Invalid economic parameters in {filename}: {e}")
        raise
