"""Protocol definitions for VFI solver components.

Defines ``typing.Protocol`` classes that formalise the interfaces
between the engine and its components.  Contains no implementation,
only type signatures.

The engine depends only on these interfaces; in tests any protocol can
be satisfied by a lightweight stub returning pre-canned tensors.
"""

from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

import tensorflow as tf


@runtime_checkable
class Maximizer(Protocol):
    """Interface for the per-state maximization of the Bellman objective.

    Implementations that are only exact on a concave objective set a
    class attribute ``requires_concavity = True``; the engine then
    refuses to interleave them with Howard steps.
    """

    def maximize(
        self,
        resources: tf.Tensor,
        khi: tf.Tensor,
        k_grid: tf.Tensor,
        ev: tf.Tensor,
        eta: tf.Tensor,
    ) -> Tuple[tf.Tensor, tf.Tensor]:
        """Return ``(V, G)``: maximal objective and maximizing index per state."""
        ...
