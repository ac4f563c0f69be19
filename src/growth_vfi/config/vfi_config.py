# growth_vfi/config/vfi_config.py
"""
Configuration for the Value Function Iteration (VFI) solver.

This module provides the grid specification, numerical tolerances and
execution-mode flags (maximization method, Howard improvement cadence,
precision) of a solve.

Example:
    >>> from growth_vfi.config.vfi_config import load_grid_config
    >>> config = load_grid_config("config/vfi.json", "growth")
    >>> print(f"Capital grid points: {config.n_capital}")
"""

from dataclasses import dataclass, fields
from typing import Optional
import os
import logging

from growth_vfi.core.errors import InvalidConfiguration, InvalidParameter
from growth_vfi.core.types import resolve_dtype
from growth_vfi.io.file_utils import load_json_file

logger = logging.getLogger(__name__)

GRID_SEARCH = "grid"
BINARY_SEARCH = "binary"

# Single-letter codes used by text parameter files.
_MAXIMIZATION_ALIASES = {
    "g": GRID_SEARCH,
    "grid": GRID_SEARCH,
    "exhaustive": GRID_SEARCH,
    "b": BINARY_SEARCH,
    "binary": BINARY_SEARCH,
    "binary-search": BINARY_SEARCH,
}


def normalize_maximization(name: str) -> str:
    """
    Map a maximization mode name or alias onto its canonical form.

    Raises:
        InvalidConfiguration: If *name* is not a known mode.
    """
    try:
        return _MAXIMIZATION_ALIASES[str(name).strip().lower()]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown maximization mode '{name}'. "
            f"Valid options: {GRID_SEARCH!r}, {BINARY_SEARCH!r}"
        ) from None


@dataclass(frozen=True)
class GridConfig:
    """
    Configuration for VFI computational grids and numerical tolerances.

    Attributes:
        n_capital: Number of points in the capital grid (nk).
        n_productivity: Number of points in the productivity grid (nz).
        tauchen_width: Width of the productivity grid in unconditional
            standard deviations (lambda).
        tol_vfi: Sup-norm convergence tolerance.
        max_iter_vfi: Maximum number of Bellman iterations.
        maximization: ``"grid"`` (exhaustive) or ``"binary"`` (concavity
            exploiting binary search).
        howard_steps: Number of Howard (non-maximizing) steps run between
            two maximizing steps; 0 disables Howard improvement.
        howard_warmup: Number of leading iterations that always maximize
            before Howard steps start.
        kp_chunk_size: Tile width along next-period capital for the
            exhaustive search; None derives it from ``memory_limit_gb``.
        memory_limit_gb: Memory budget of one exhaustive search.
        precision: ``"float32"`` or ``"float64"``.
    """

    n_capital: int = 100
    n_productivity: int = 4
    tauchen_width: float = 3.0

    tol_vfi: float = 1e-8
    max_iter_vfi: int = 5000

    maximization: str = GRID_SEARCH
    howard_steps: int = 0
    howard_warmup: int = 3

    kp_chunk_size: Optional[int] = None
    memory_limit_gb: float = 4.0
    precision: str = "float64"

    def __post_init__(self) -> None:
        """Validate settings and canonicalise the maximization mode."""
        object.__setattr__(
            self, "maximization", normalize_maximization(self.maximization)
        )
        resolve_dtype(self.precision)

        if self.n_capital < 1:
            raise InvalidParameter(
                f"n_capital must be >= 1, got {self.n_capital}"
            )
        if self.n_productivity < 2:
            raise InvalidParameter(
                f"n_productivity must be >= 2, got {self.n_productivity}"
            )
        if self.tauchen_width <= 0:
            raise InvalidParameter(
                f"tauchen_width must be positive, got {self.tauchen_width}"
            )
        if self.tol_vfi <= 0:
            raise InvalidParameter(f"tol_vfi must be positive, got {self.tol_vfi}")
        if self.max_iter_vfi <= 0:
            raise InvalidParameter(
                f"max_iter_vfi must be positive, got {self.max_iter_vfi}"
            )
        if self.howard_steps < 0 or self.howard_warmup < 0:
            raise InvalidParameter(
                "howard_steps and howard_warmup must be non-negative, got "
                f"{self.howard_steps} and {self.howard_warmup}"
            )
        if self.kp_chunk_size is not None and self.kp_chunk_size < 1:
            raise InvalidParameter(
                f"kp_chunk_size must be >= 1 or None, got {self.kp_chunk_size}"
            )
        if self.memory_limit_gb <= 0:
            raise InvalidParameter(
                f"memory_limit_gb must be positive, got {self.memory_limit_gb}"
            )

        # A stale policy breaks the concavity the binary search relies on.
        if self.maximization == BINARY_SEARCH and self.howard_steps > 0:
            raise InvalidConfiguration(
                "Binary-search maximization cannot be combined with Howard "
                f"improvement (howard_steps={self.howard_steps})."
            )

    @property
    def use_howard(self) -> bool:
        return self.howard_steps > 0

    def is_maximizing_step(self, iteration: int) -> bool:
        """
        Whether iteration *iteration* (0-based) re-optimizes the policy.

        The first ``howard_warmup`` iterations always maximize; after that
        one maximizing step is followed by ``howard_steps`` Howard steps.
        """
        if not self.use_howard or iteration < self.howard_warmup:
            return True
        return (iteration - self.howard_warmup) % (self.howard_steps + 1) == 0


def load_grid_config(filename: str, model_type: str = "growth") -> GridConfig:
    """
    Load grid configuration from a JSON file for a specific model key.

    Args:
        filename: Path to the JSON configuration file.
        model_type: Key in the JSON file holding the settings.

    Returns:
        Populated GridConfig instance; defaults when the file or key is
        missing.
    """
    if not os.path.exists(filename):
        logger.warning(
            f"Grid config file '{filename}' not found. Using defaults."
        )
        return GridConfig()

    full_data = load_json_file(filename)

    if model_type not in full_data:
        logger.warning(
            f"Key '{model_type}' not in {filename}. Using defaults."
        )
        return GridConfig()

    model_data = full_data[model_type]
    valid_keys = {f.name for f in fields(GridConfig)}
    filtered_data = {k: v for k, v in model_data.items() if k in valid_keys}

    try:
        return GridConfig(**filtered_data)
    except (InvalidParameter, InvalidConfiguration) as e:
        logger.error(f"Error reading grid config {filename}: {e}")
        raise
