"""Optimizer façade: multi-start layout runs on top of :class:`LayoutOptimizer`."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from ..layout import Layout
from ..logging_utils import apply_debug_logging
from ..network import Network
from .config import get_default_layout_options, set_default_layout_options
from .model import GradientDescentOptions, LayoutOptions, LayoutResult
from .technique import LayoutOptimizer

logger = logging.getLogger(__name__)


def optimize_layout(
    network: Network,
    options: Optional[LayoutOptions] = None,
    *,
    initial_layout: Optional[Layout] = None,
) -> LayoutResult:
    """Run gradient descent from ``options.random_starts`` starts and keep the best.

    Every start begins from random coordinates except the first one when
    ``initial_layout`` is given (a copy of it is used). The start with the
    lowest quality function wins; earlier starts win ties. The winner is
    standardized when ``options.standardize`` is set.
    """

    options = options or get_default_layout_options()
    if options.random_starts < 1:
        raise ValueError(f"random_starts must be at least 1, got {options.random_starts}")

    rng = np.random.default_rng(options.random_seed)
    logger.info(
        "Optimizing layout of %d nodes and %d edges with %d random start(s), random_seed=%s",
        network.n_nodes,
        network.n_edges,
        options.random_starts,
        options.random_seed,
    )

    def run_start(start: int) -> LayoutResult:
        if start == 0 and initial_layout is not None:
            layout = initial_layout.clone()
        else:
            layout = Layout(network.n_nodes)
            layout.init_random_coordinates(rng)

        optimizer = LayoutOptimizer(
            network,
            layout,
            attraction=options.attraction,
            repulsion=options.repulsion,
            edge_weight_increment=options.edge_weight_increment,
        )
        step_length = optimizer.run_gradient_descent_with_options(options.gradient_descent, rng)
        quality = optimizer.calc_quality_function()
        logger.info(
            "Start %d/%d finished with quality %.10g (step length %.6g)",
            start + 1,
            options.random_starts,
            quality,
            step_length,
        )
        return LayoutResult(
            layout=layout, quality=quality, step_length=step_length, start_index=start
        )

    best = run_start(0)
    qualities: List[float] = [best.quality]
    for start in range(1, options.random_starts):
        result = run_start(start)
        qualities.append(result.quality)
        if result.quality < best.quality:
            best = result

    best.qualities = qualities
    if options.standardize:
        best.layout.standardize_coordinates(options.standardize_distances)
    logger.info("Best layout from start %d with quality %.10g", best.start_index + 1, best.quality)
    return best


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "GradientDescentOptions",
    "LayoutOptimizer",
    "LayoutOptions",
    "LayoutResult",
    "get_default_layout_options",
    "optimize_layout",
    "set_default_layout_options",
]
