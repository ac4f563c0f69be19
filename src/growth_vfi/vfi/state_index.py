"""Mapping between (capital, productivity) states and flat offsets.

The solver holds value and policy arrays as ``(n_k, n_z)`` tensors.  The
flat layout used at the output boundary stores state ``(i, j)`` at
offset ``i + j * n_k`` (capital index fastest), and the transition
matrix ``P[i, j]`` at ``i + j * n_z``.  Both are Fortran-order
flattenings of the 2-D arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class StateIndex:
    """2-D ↔ 1-D index mapping for an ``n_capital × n_productivity`` grid."""

    n_capital: int
    n_productivity: int

    @property
    def size(self) -> int:
        return self.n_capital * self.n_productivity

    def flat(self, i: int, j: int) -> int:
        """Flat offset of state ``(i, j)``."""
        if not (0 <= i < self.n_capital and 0 <= j < self.n_productivity):
            raise IndexError(
                f"State ({i}, {j}) outside grid "
                f"({self.n_capital}, {self.n_productivity})"
            )
        return i + j * self.n_capital

    def unflat(self, h: int) -> Tuple[int, int]:
        """State ``(i, j)`` stored at flat offset *h*."""
        if not 0 <= h < self.size:
            raise IndexError(f"Flat index {h} outside [0, {self.size})")
        i = h % self.n_capital
        return i, (h - i) // self.n_capital

    def flatten(self, array: np.ndarray) -> np.ndarray:
        """Flatten an ``(n_k, n_z)`` array into the ``i + j*n_k`` layout."""
        array = np.asarray(array)
        if array.shape != (self.n_capital, self.n_productivity):
            raise ValueError(
                f"Expected shape {(self.n_capital, self.n_productivity)}, "
                f"got {array.shape}"
            )
        return array.reshape(-1, order="F")

    def unflatten(self, flat: np.ndarray) -> np.ndarray:
        """Inverse of :meth:`flatten`."""
        flat = np.asarray(flat)
        if flat.shape != (self.size,):
            raise ValueError(f"Expected shape {(self.size,)}, got {flat.shape}")
        return flat.reshape((self.n_capital, self.n_productivity), order="F")

    @staticmethod
    def flatten_transition(p_matrix: np.ndarray) -> np.ndarray:
        """Flatten ``P[i, j]`` into the ``i + j*n_z`` layout."""
        return np.asarray(p_matrix).reshape(-1, order="F")
