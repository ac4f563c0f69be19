# growth_vfi/io/parameter_file.py
"""
Reader for delimited text parameter files.

Each line starts with a parameter value followed by a comma and a free
text description::

    2.0, eta: coefficient of relative risk aversion
    0.984, beta: time discount factor
    ...

Values appear in the fixed order ``eta, beta, alpha, delta, mu, rho,
sigma, lambda, nk, nz, tol``.  Two optional trailing lines select the
maximization method (``g``/``b``) and the Howard improvement cadence
(number of Howard steps per maximizing step, or ``true``/``false``).
Blank lines and lines starting with ``#`` are skipped.
"""

import dataclasses
import logging
import os
from typing import List, Optional, Tuple

from growth_vfi.config.economic_params import GrowthParams
from growth_vfi.config.vfi_config import GridConfig
from growth_vfi.core.errors import InvalidParameter

logger = logging.getLogger(__name__)

ECONOMIC_FIELDS = ("eta", "beta", "alpha", "delta", "mu", "rho", "sigma")
GRID_FIELDS = ("lambda", "nk", "nz", "tol")
OPTIONAL_FIELDS = ("maxtype", "howard")

# Howard steps per maximizing step when a file only says "true".
DEFAULT_HOWARD_STEPS = 10


def _read_values(filename: str) -> List[str]:
    values = []
    with open(filename, "r") as f:
        for line in f:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            values.append(stripped.split(",", 1)[0].strip())
    return values


def _parse_int(name: str, raw: str) -> int:
    try:
        value = float(raw)
    except ValueError:
        raise InvalidParameter(f"{name} must be an integer, got '{raw}'") from None
    if not value.is_integer():
        raise InvalidParameter(f"{name} must be an integer, got '{raw}'")
    return int(value)


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise InvalidParameter(f"{name} must be a number, got '{raw}'") from None


def _parse_howard(raw: str) -> int:
    lowered = raw.lower()
    if lowered in ("true", "t", "yes"):
        return DEFAULT_HOWARD_STEPS
    if lowered in ("false", "f", "no"):
        return 0
    return _parse_int("howard", raw)


def parse_parameter_values(
    values: List[str],
    base_config: Optional[GridConfig] = None,
) -> Tuple[GrowthParams, GridConfig]:
    """
    Build parameter records from the ordered raw values of a file.

    Args:
        values: Raw value strings in file order.
        base_config: Config providing the settings the file does not
            carry (iteration budget, precision, ...).

    Returns:
        Tuple of (GrowthParams, GridConfig).

    Raises:
        InvalidParameter: If values are missing or malformed.
    """
    required = len(ECONOMIC_FIELDS) + len(GRID_FIELDS)
    if len(values) < required:
        raise InvalidParameter(
            f"Parameter file needs at least {required} values, got {len(values)}"
        )

    economic = {
        name: _parse_float(name, raw)
        for name, raw in zip(ECONOMIC_FIELDS, values)
    }
    params = GrowthParams(**economic)

    grid_raw = dict(zip(GRID_FIELDS, values[len(ECONOMIC_FIELDS):required]))
    overrides = dict(
        tauchen_width=_parse_float("lambda", grid_raw["lambda"]),
        n_capital=_parse_int("nk", grid_raw["nk"]),
        n_productivity=_parse_int("nz", grid_raw["nz"]),
        tol_vfi=_parse_float("tol", grid_raw["tol"]),
    )

    extra = dict(zip(OPTIONAL_FIELDS, values[required:]))
    if "maxtype" in extra:
        overrides["maximization"] = extra["maxtype"]
    if "howard" in extra:
        overrides["howard_steps"] = _parse_howard(extra["howard"])

    config = dataclasses.replace(base_config or GridConfig(), **overrides)
    return params, config


def load_parameter_file(
    filename: str,
    base_config: Optional[GridConfig] = None,
) -> Tuple[GrowthParams, GridConfig]:
    """
    Load economic and grid parameters from a delimited text file.

    Args:
        filename: Path to the parameter file.
        base_config: Defaults for settings the file does not carry.

    Returns:
        Tuple of (GrowthParams, GridConfig).

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidParameter: If the contents are malformed or out of range.
    """
    if not os.path.exists(filename):
        logger.error(f"Parameter file '{filename}' not found.")
        raise FileNotFoundError(filename)

    try:
        params, config = parse_parameter_values(_read_values(filename), base_config)
    except InvalidParameter as e:
        logger.error(f"Invalid parameter file {filename}: {e}")
        raise

    logger.info(
        f"Loaded parameters from {filename}: nk={config.n_capital}, "
        f"nz={config.n_productivity}, maximization={config.maximization}, "
        f"howard_steps={config.howard_steps}"
    )
    return params, config
