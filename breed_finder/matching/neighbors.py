"""Exact k-nearest-neighbor index over normalized breed vectors."""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from breed_finder.errors import InvalidKError


@dataclass(frozen=True, eq=False)
class NeighborIndex:
    """Read-only matrix of normalized vectors keyed by population position.

    Queries are a linear scan over every row.
    """

    vectors: np.ndarray

    @property
    def size(self) -> int:
        return int(self.vectors.shape[0])

    @property
    def dim(self) -> int:
        return int(self.vectors.shape[1])


def build(normalized_vectors: np.ndarray | Sequence[Sequence[float]]) -> NeighborIndex:
    """Build an index over ``normalized_vectors``.

    Args:
        normalized_vectors: ``n x d`` matrix, one row per population member.

    Returns:
        NeighborIndex holding a read-only copy of the matrix.

    Raises:
        ValueError: If the input is not a non-empty 2D matrix.
    """
    vectors = np.array(normalized_vectors, dtype=float)
    if vectors.ndim != 2 or vectors.shape[0] == 0:
        raise ValueError(
            f"Index needs a non-empty 2D matrix, got shape {vectors.shape}"
        )
    vectors.setflags(write=False)
    return NeighborIndex(vectors=vectors)


def query(
    index: NeighborIndex,
    normalized_query: np.ndarray | Sequence[float],
    k: int,
) -> list[tuple[int, float]]:
    """Return the ``k`` stored vectors closest to ``normalized_query``.

    Args:
        index: Index returned by ``build``.
        normalized_query: Query vector in the same normalized space.
        k: Number of neighbors, between 1 and ``index.size``.

    Returns:
        ``(position, distance)`` pairs by ascending Euclidean distance.
        Equal distances keep population order.

    Raises:
        InvalidKError: If ``k`` is not an integer in ``[1, index.size]``.
        ValueError: If the query dimension does not match the index.
    """
    check_k(k, index.size)

    point = np.asarray(normalized_query, dtype=float)
    if point.shape != (index.dim,):
        raise ValueError(
            f"Query must have shape ({index.dim},), got {point.shape}"
        )

    distances = np.sqrt(((index.vectors - point) ** 2).sum(axis=1))
    # Stable sort: ties resolve to the lower position.
    order = np.argsort(distances, kind="stable")[:k]
    return [(int(position), float(distances[position])) for position in order]


def check_k(k: object, high: int) -> None:
    """Raise InvalidKError unless ``k`` is an integer in ``[1, high]``."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or not 1 <= k <= high:
        raise InvalidKError(k, 1, high)
