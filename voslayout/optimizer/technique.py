"""VOS quality function and the gradient descent that minimises it."""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
from scipy.spatial.distance import pdist

from ..arrays import generate_random_permutation
from ..layout import Layout
from ..logging_utils import apply_debug_logging
from ..network import Network
from .model import GradientDescentOptions
from .potentials import force, potential, power, squared_distances, weighted_sum

logger = logging.getLogger(__name__)


class LayoutOptimizer:
    """Minimises the VOS quality function of ``layout`` for ``network``.

    The quality function adds, for every edge, ``w * d**attraction /
    attraction``, subtracts, for every pair of nodes, ``m_i * m_j *
    d**repulsion / repulsion`` and, when ``edge_weight_increment`` is
    positive, adds ``edge_weight_increment * d**attraction / attraction`` for
    every pair as well. A zero exponent selects ``log(d)`` instead.

    The layout is modified in place; the network is only read.
    """

    def __init__(
        self,
        network: Network,
        layout: Optional[Layout] = None,
        attraction: int = 2,
        repulsion: int = 1,
        edge_weight_increment: float = 0.0,
        rng: Optional[np.random.Generator] = None,
    ):
        if layout is None:
            layout = Layout(network.n_nodes)
            layout.init_random_coordinates(rng)
        elif layout.n_nodes != network.n_nodes:
            raise ValueError(
                f"layout has {layout.n_nodes} nodes but network has {network.n_nodes}"
            )
        self.network = network
        self.layout = layout
        self.attraction = attraction
        self.repulsion = repulsion
        self.edge_weight_increment = edge_weight_increment
        self.last_sweep_quality: Optional[float] = None
        self.last_iterations = 0

    def __repr__(self) -> str:
        return (
            f"LayoutOptimizer(n_nodes={self.network.n_nodes}, attraction={self.attraction}, "
            f"repulsion={self.repulsion}, edge_weight_increment={self.edge_weight_increment})"
        )

    def calc_quality_function(self) -> float:
        """Evaluate the quality function exactly; lower is better."""

        network = self.network
        # Read the backing array directly; nothing here writes to it.
        coords = self.layout._coordinates

        sources = np.repeat(
            np.arange(network.n_nodes), np.diff(network.first_neighbor_indices)
        )
        # Each edge is stored from both endpoints; keep one copy of it.
        once = network.neighbors < sources
        differences = coords[:, sources[once]] - coords[:, network.neighbors[once]]
        edge_distances = np.sqrt(squared_distances(differences))
        quality = weighted_sum(
            network.edge_weights[once], potential(edge_distances, self.attraction)
        )

        if network.n_nodes < 2:
            return quality

        pair_distances = pdist(coords.T)
        first, second = np.triu_indices(network.n_nodes, k=1)
        masses = network.node_weights[first] * network.node_weights[second]
        quality -= weighted_sum(masses, potential(pair_distances, self.repulsion))

        if self.edge_weight_increment > 0:
            quality += weighted_sum(
                self.edge_weight_increment, potential(pair_distances, self.attraction)
            )

        return quality

    def run_gradient_descent(
        self,
        max_iterations: int,
        initial_step_length: float,
        min_step_length: float,
        step_length_reduction: float,
        required_improvements: int,
        rng: Optional[np.random.Generator] = None,
    ) -> float:
        """Move nodes one at a time against the gradient; return the final step length.

        Nodes are visited in one random order, fixed for the whole run. Each
        visit moves the node ``step_length`` along its unit negative gradient,
        so nodes visited later in a sweep already see the new position. The
        step length grows (division by ``step_length_reduction``) after
        ``required_improvements`` consecutive improving sweeps and shrinks
        after any sweep that does not improve. The run stops after
        ``max_iterations`` sweeps or once the step length drops below
        ``min_step_length``.

        The quality tracked between sweeps is accumulated during the sweep:
        a pair contributes when its first endpoint is visited, before either
        endpoint has moved in that sweep. It therefore measures the layout as
        it stood at the start of the sweep, one sweep behind
        :meth:`calc_quality_function` on the moved layout.
        """

        network = self.network
        attraction = self.attraction
        repulsion = self.repulsion
        increment = self.edge_weight_increment
        n_nodes = network.n_nodes
        node_weights = network.node_weights
        coords = self.layout._coordinates

        permutation = generate_random_permutation(n_nodes, rng)

        step_length = initial_step_length
        quality = math.inf
        improvements = 0
        visited = np.zeros(n_nodes, dtype=bool)
        others = np.ones(n_nodes, dtype=bool)
        iteration = 0
        while iteration < max_iterations and step_length >= min_step_length:
            quality_old = quality
            quality = 0.0
            visited[:] = False
            for k in permutation:
                position = coords[:, k]

                start, stop = network.neighbor_range(k)
                neighbors = network.neighbors[start:stop]
                edge_weights = network.edge_weights[start:stop]
                differences = position[:, None] - coords[:, neighbors]
                squared = squared_distances(differences)
                distances = np.sqrt(squared)
                powered = power(distances, attraction)
                gradient = force(edge_weights * powered, squared, differences)
                pending = ~visited[neighbors]
                quality += weighted_sum(
                    edge_weights[pending],
                    potential(distances[pending], attraction, powered[pending]),
                )

                others[k] = False
                differences = position[:, None] - coords[:, others]
                squared = squared_distances(differences)
                distances = np.sqrt(squared)
                pending = ~visited[others]

                masses = node_weights[k] * node_weights[others]
                powered = power(distances, repulsion)
                gradient -= force(masses * powered, squared, differences)
                quality -= weighted_sum(
                    masses[pending], potential(distances[pending], repulsion, powered[pending])
                )

                if increment > 0:
                    powered = power(distances, attraction)
                    gradient += force(increment * powered, squared, differences)
                    quality += weighted_sum(
                        increment, potential(distances[pending], attraction, powered[pending])
                    )
                others[k] = True

                gradient_length = np.sqrt(gradient[0] * gradient[0] + gradient[1] * gradient[1])
                # A zero gradient yields NaN coordinates, as 0 / 0 does.
                with np.errstate(divide="ignore", invalid="ignore"):
                    coords[0, k] -= step_length * gradient[0] / gradient_length
                    coords[1, k] -= step_length * gradient[1] / gradient_length

                visited[k] = True

            if quality < quality_old:
                improvements += 1
                if improvements >= required_improvements:
                    step_length /= step_length_reduction
                    improvements = 0
            else:
                step_length *= step_length_reduction
                improvements = 0

            iteration += 1
            logger.debug(
                "Sweep %d: quality estimate %.10g, step length %.6g", iteration, quality, step_length
            )

        if iteration:
            self.last_sweep_quality = quality
        self.last_iterations = iteration
        logger.info(
            "Gradient descent stopped after %d iteration(s) with step length %.6g",
            iteration,
            step_length,
        )
        return step_length

    def run_gradient_descent_with_options(
        self,
        options: Optional[GradientDescentOptions] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> float:
        options = options or GradientDescentOptions()
        return self.run_gradient_descent(
            options.max_iterations,
            options.initial_step_length,
            options.min_step_length,
            options.step_length_reduction,
            options.required_improvements,
            rng,
        )


apply_debug_logging(globals(), logger=logger)


__all__ = ["LayoutOptimizer"]
