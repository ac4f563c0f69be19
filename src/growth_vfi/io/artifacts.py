# growth_vfi/io/artifacts.py
"""
Utilities for saving and loading numerical artifacts.

This module handles persistence of VFI results using NumPy's
``.npz`` format.  Scalars and lists in the result dictionary are stored
as 0-d and 1-d arrays.

Example:
    >>> from growth_vfi.io.artifacts import save_vfi_results, load_vfi_results
    >>> results = solver.solve()
    >>> save_vfi_results(results, "results.npz")
    >>> loaded = load_vfi_results("results.npz")
"""

import logging
import os
from typing import Any, Dict

import numpy as np

logger = logging.getLogger(__name__)


def save_vfi_results(results: Dict[str, Any], filename: str) -> None:
    """
    Save VFI results to a NumPy ``.npz`` file.

    Args:
        results: Dictionary returned by ``StochasticGrowthVFI.solve()``.
        filename: Target file path (should end with .npz). Parent
            directories are created as needed.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    arrays = {key: np.asarray(value) for key, value in results.items()}
    with open(filename, "wb") as f:
        np.savez(f, **arrays)
    logger.info(f"Saved VFI results to {filename}")


def load_vfi_results(filename: str) -> Dict[str, np.ndarray]:
    """
    Load VFI results from a NumPy ``.npz`` file.

    Args:
        filename: Path to the .npz file.

    Returns:
        Dictionary containing loaded arrays.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not os.path.exists(filename):
        logger.error(f"Results file '{filename}' not found.")
        raise FileNotFoundError(filename)

    with np.load(filename, allow_pickle=False) as data:
        return {key: data[key] for key in data.files}
