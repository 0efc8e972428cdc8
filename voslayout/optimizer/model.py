"""Option and result containers for the layout optimizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..layout import Layout


@dataclass
class GradientDescentOptions:
    """Iteration and step-length schedule of one gradient descent run."""

    max_iterations: int = 1000
    initial_step_length: float = 1.0
    min_step_length: float = 0.001
    step_length_reduction: float = 0.75
    required_improvements: int = 5


@dataclass
class LayoutOptions:
    """Quality function parameters plus the multi-start schedule."""

    attraction: int = 2
    repulsion: int = 1
    edge_weight_increment: float = 0.0
    random_starts: int = 1
    random_seed: Optional[int] = None
    standardize: bool = True
    standardize_distances: bool = True
    gradient_descent: GradientDescentOptions = field(default_factory=GradientDescentOptions)


@dataclass
class LayoutResult:
    layout: Layout
    quality: float
    step_length: float
    start_index: int
    qualities: List[float] = field(default_factory=list)


__all__ = ["GradientDescentOptions", "LayoutOptions", "LayoutResult"]
