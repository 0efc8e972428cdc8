"""Two-dimensional coordinate table for the nodes of a network."""

from __future__ import annotations

import logging
import math
import operator
import os
from typing import Optional, Sequence, Union

import numpy as np
from scipy.spatial.distance import pdist

from .arrays import calc_average, calc_maximum, calc_median, calc_minimum

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Layout:
    """Mutable ``(2, n_nodes)`` coordinate table.

    Row 0 holds the first coordinate of every node and row 1 the second one.
    The table is never resized and no accessor hands out the backing array:
    whatever is returned is a copy the caller may modify freely.
    """

    def __init__(self, n_nodes: int = 0, *, coordinates: Optional[Sequence[Sequence[float]]] = None):
        if coordinates is not None:
            array = np.array(coordinates, dtype=float, copy=True)
            if array.ndim != 2 or array.shape[0] != 2:
                raise ValueError(
                    f"coordinates must have shape (2, n_nodes), got {array.shape}"
                )
            self._coordinates = array
        else:
            n_nodes = operator.index(n_nodes)
            if n_nodes < 0:
                raise ValueError(f"n_nodes must be non-negative, got {n_nodes}")
            self._coordinates = np.zeros((2, n_nodes), dtype=float)

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[Sequence[float]]) -> "Layout":
        """Build a layout holding a deep copy of ``coordinates``."""

        return cls(coordinates=coordinates)

    @classmethod
    def load(cls, path: PathLike) -> "Layout":
        from .persistence import load_layout

        return load_layout(path)

    def save(self, path: PathLike) -> None:
        from .persistence import save_layout

        save_layout(self, path)

    def clone(self) -> "Layout":
        return Layout(coordinates=self._coordinates)

    __copy__ = clone

    def __deepcopy__(self, memo) -> "Layout":
        return self.clone()

    @property
    def n_nodes(self) -> int:
        return int(self._coordinates.shape[1])

    def __len__(self) -> int:
        return self.n_nodes

    def __repr__(self) -> str:
        return f"Layout(n_nodes={self.n_nodes})"

    def _check_node(self, node: int) -> int:
        node = operator.index(node)
        if not 0 <= node < self.n_nodes:
            raise IndexError(f"node {node} out of range for layout with {self.n_nodes} nodes")
        return node

    def get_coordinates(self, node: Optional[int] = None) -> np.ndarray:
        """Return a copy of all coordinates, or of the position of ``node``."""

        if node is None:
            return self._coordinates.copy()
        node = self._check_node(node)
        return self._coordinates[:, node].copy()

    def get_min_coordinates(self) -> np.ndarray:
        return np.array(
            [calc_minimum(self._coordinates[0]), calc_minimum(self._coordinates[1])]
        )

    def get_max_coordinates(self) -> np.ndarray:
        return np.array(
            [calc_maximum(self._coordinates[0]), calc_maximum(self._coordinates[1])]
        )

    def get_average_distance(self) -> float:
        """Mean Euclidean distance over all unordered pairs of nodes.

        Requires at least two nodes; with fewer the result is NaN.
        """

        n_nodes = self.n_nodes
        total = np.float64(0.0)
        if n_nodes >= 2:
            total = np.float64(np.sum(pdist(self._coordinates.T)))
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(total / np.float64(n_nodes * (n_nodes - 1) // 2))

    def set_coordinates(self, node: int, position: Sequence[float]) -> None:
        node = self._check_node(node)
        self._coordinates[0, node] = position[0]
        self._coordinates[1, node] = position[1]

    def init_random_coordinates(self, rng: Optional[np.random.Generator] = None) -> None:
        """Draw every coordinate uniformly from ``[-1, 1)``.

        Values are drawn node by node, first coordinate before second, so a
        seeded generator always yields the same layout.
        """

        if rng is None:
            rng = np.random.default_rng()
        draws = rng.random((self.n_nodes, 2))
        self._coordinates[:] = 2.0 * draws.T - 1.0

    def standardize_coordinates(self, standardize_distances: bool = True) -> None:
        """Center, rotate onto the principal axes and fix the orientation.

        Coordinates are translated to zero mean and rotated so that the
        direction of largest variance lies along the first axis. Each axis is
        then mirrored when its median is positive. With
        ``standardize_distances`` all coordinates are finally divided by the
        average distance between nodes.
        """

        coords = self._coordinates
        n_nodes = self.n_nodes

        coords[0] -= calc_average(coords[0])
        coords[1] -= calc_average(coords[1])

        # An empty layout gives NaN moments instead of raising.
        with np.errstate(divide="ignore", invalid="ignore"):
            variance1 = float(np.dot(coords[0], coords[0]) / np.float64(n_nodes))
            variance2 = float(np.dot(coords[1], coords[1]) / np.float64(n_nodes))
            covariance = float(np.dot(coords[0], coords[1]) / np.float64(n_nodes))
        discriminant = (
            variance1 * variance1
            + variance2 * variance2
            - 2 * variance1 * variance2
            + 4 * covariance * covariance
        )
        with np.errstate(invalid="ignore"):
            root = float(np.sqrt(discriminant))
        eigenvalue1 = (variance1 + variance2 - root) / 2
        eigenvalue2 = (variance1 + variance2 + root) / 2

        with np.errstate(divide="ignore", invalid="ignore"):
            vector1 = np.array(
                [variance1 + covariance - eigenvalue1, variance2 + covariance - eigenvalue1]
            )
            vector1 /= np.sqrt(np.dot(vector1, vector1))
            vector2 = np.array(
                [variance1 + covariance - eigenvalue2, variance2 + covariance - eigenvalue2]
            )
            vector2 /= np.sqrt(np.dot(vector2, vector2))

        old1 = coords[0].copy()
        old2 = coords[1].copy()
        coords[0] = vector1[0] * old1 + vector1[1] * old2
        coords[1] = vector2[0] * old1 + vector2[1] * old2

        for axis in range(2):
            if calc_median(coords[axis]) > 0:
                coords[axis] *= -1

        if standardize_distances:
            average_distance = self.get_average_distance()
            with np.errstate(divide="ignore", invalid="ignore"):
                coords /= average_distance

        logger.debug(
            "Standardized %d coordinates (eigenvalues %.6g, %.6g)", n_nodes, eigenvalue1, eigenvalue2
        )

    def rotate(self, angle: float) -> None:
        """Rotate about the origin by ``-angle`` degrees."""

        radians = -angle * math.pi / 180
        sin = math.sin(radians)
        cos = math.cos(radians)
        old1 = self._coordinates[0].copy()
        old2 = self._coordinates[1].copy()
        self._coordinates[0] = cos * old1 - sin * old2
        self._coordinates[1] = sin * old1 + cos * old2

    def flip(self, dimension: int) -> None:
        if dimension not in (0, 1):
            raise ValueError(f"dimension must be 0 or 1, got {dimension!r}")
        self._coordinates[dimension] *= -1


__all__ = ["Layout"]
