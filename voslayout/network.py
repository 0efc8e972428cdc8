"""Read-only view of a weighted network in compressed adjacency form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


def _frozen(values, dtype) -> np.ndarray:
    array = np.array(values, dtype=dtype, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Network:
    """Compressed sparse adjacency of an undirected weighted network.

    The neighbors of node ``i`` are
    ``neighbors[first_neighbor_indices[i]:first_neighbor_indices[i + 1]]``
    with matching ``edge_weights``. Every undirected edge is listed twice,
    once from each endpoint. Consistency of the arrays is the caller's
    responsibility.
    """

    node_weights: np.ndarray
    first_neighbor_indices: np.ndarray
    neighbors: np.ndarray
    edge_weights: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "node_weights", _frozen(self.node_weights, float))
        object.__setattr__(
            self, "first_neighbor_indices", _frozen(self.first_neighbor_indices, np.int64)
        )
        object.__setattr__(self, "neighbors", _frozen(self.neighbors, np.int64))
        object.__setattr__(self, "edge_weights", _frozen(self.edge_weights, float))

    @property
    def n_nodes(self) -> int:
        return int(self.node_weights.shape[0])

    @property
    def n_edges(self) -> int:
        return int(self.neighbors.shape[0]) // 2

    def neighbor_range(self, node: int) -> Tuple[int, int]:
        return int(self.first_neighbor_indices[node]), int(self.first_neighbor_indices[node + 1])


__all__ = ["Network"]
