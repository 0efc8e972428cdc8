"""Vectorised pieces of the VOS quality function and its gradient.

All helpers follow IEEE arithmetic instead of raising: ``0 ** -k`` is
``inf`` and ``log(0)`` is ``-inf``.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


def power(distances: np.ndarray, exponent: int) -> np.ndarray:
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return np.power(distances, exponent)


def log(distances: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(distances)


def potential(distances: np.ndarray, exponent: int, powered: Optional[np.ndarray] = None) -> np.ndarray:
    """Return ``d ** exponent / exponent``, or ``log(d)`` for a zero exponent.

    ``powered`` may carry ``power(distances, exponent)`` when the caller
    already has it.
    """

    if exponent == 0:
        return log(distances)
    if powered is None:
        powered = power(distances, exponent)
    return powered / exponent


def weighted_sum(weights, values: np.ndarray) -> float:
    with np.errstate(invalid="ignore", over="ignore"):
        return float(np.sum(weights * values))


def squared_distances(differences: np.ndarray) -> np.ndarray:
    return differences[0] * differences[0] + differences[1] * differences[1]


def force(coefficients: np.ndarray, squared: np.ndarray, differences: np.ndarray) -> np.ndarray:
    """Sum ``coefficient / d**2 * difference`` over pairs with ``d > 0``.

    Coincident points exert no force.
    """

    apart = squared > 0
    with np.errstate(over="ignore", invalid="ignore"):
        scale = coefficients[apart] / squared[apart]
        return differences[:, apart] @ scale


__all__ = ["force", "log", "potential", "power", "squared_distances", "weighted_sum"]
