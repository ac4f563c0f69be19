# growth_vfi/io/report.py
"""
Plain-text tabulation of a solved model.

Renders the value function and the capital policy as columns: the
capital grid first, then one column per productivity state.
"""

from typing import Any, Dict, List, Sequence

import numpy as np

COLUMN_WIDTH = 14
PRECISION = 6


def _format_row(values: Sequence[float]) -> str:
    return "".join(f"{v:>{COLUMN_WIDTH}.{PRECISION}f}" for v in values)


def _format_block(
    title: str,
    k_grid: np.ndarray,
    z_grid: np.ndarray,
    table: np.ndarray,
) -> List[str]:
    header = f"{'K':>{COLUMN_WIDTH}}" + "".join(
        f"{f'z={z:.4f}':>{COLUMN_WIDTH}}" for z in z_grid
    )
    lines = [title, header]
    for i, k in enumerate(k_grid):
        lines.append(_format_row([k, *table[i]]))
    return lines


def format_solution_table(results: Dict[str, Any]) -> str:
    """
    Format the value and policy functions of a solve as text.

    Args:
        results: Dictionary with at least ``K``, ``Z``, ``V`` and
            ``policy_k_values`` (as returned by ``solve()`` or
            ``load_vfi_results``).

    Returns:
        Multi-line string with a value function block followed by a
        policy function block.

    Raises:
        KeyError: If a required entry is missing.
        ValueError: If the tables do not match the grid sizes.
    """
    k_grid = np.asarray(results["K"])
    z_grid = np.asarray(results["Z"])
    value = np.asarray(results["V"])
    policy = np.asarray(results["policy_k_values"])

    expected = (k_grid.shape[0], z_grid.shape[0])
    for name, table in (("V", value), ("policy_k_values", policy)):
        if table.shape != expected:
            raise ValueError(
                f"{name} has shape {table.shape}, expected {expected}"
            )

    lines = _format_block("Value function V(K, z)", k_grid, z_grid, value)
    lines.append("")
    lines.extend(
        _format_block("Capital policy K'(K, z)", k_grid, z_grid, policy)
    )
    return "\n".join(lines)
