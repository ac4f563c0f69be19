"""Immutable configuration records for the growth-model solver."""

from growth_vfi.config.economic_params import GrowthParams, load_economic_params
from growth_vfi.config.vfi_config import (
    BINARY_SEARCH,
    GRID_SEARCH,
    GridConfig,
    load_grid_config,
)

__all__ = [
    "BINARY_SEARCH",
    "GRID_SEARCH",
    "GridConfig",
    "GrowthParams",
    "load_economic_params",
    "load_grid_config",
]
