"""Array statistics and permutation helpers."""

from __future__ import annotations

from typing import Optional

import numpy as np


def calc_sum(values: np.ndarray) -> float:
    return float(np.sum(values))


def calc_minimum(values: np.ndarray) -> float:
    return float(np.min(values))


def calc_maximum(values: np.ndarray) -> float:
    return float(np.max(values))


def calc_average(values: np.ndarray) -> float:
    return float(np.mean(values))


def calc_median(values: np.ndarray) -> float:
    """Return the median; the mean of the two middle values for even lengths."""

    return float(np.median(values))


def generate_random_permutation(n: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Return a uniformly random permutation of ``range(n)``."""

    if rng is None:
        rng = np.random.default_rng()
    return rng.permutation(n)


__all__ = [
    "calc_average",
    "calc_maximum",
    "calc_median",
    "calc_minimum",
    "calc_sum",
    "generate_random_permutation",
]
