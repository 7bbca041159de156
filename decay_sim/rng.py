"""
Process-wide random number generator.

Every stochastic decision in the simulation draws from the single generator
held here, so a run is reproducible from its seed as long as the draws happen
in the same order.
"""

from typing import Optional, Sequence

import numpy as np

_generator = np.random.default_rng()


def set_seed(seed: Optional[int]) -> np.random.Generator:
    """Replace the process-wide generator with a freshly seeded one."""
    global _generator
    _generator = np.random.default_rng(seed)
    return _generator


def get_generator() -> np.random.Generator:
    """Return the process-wide generator."""
    return _generator


def exponential(rate: float) -> float:
    """Draw from an exponential distribution with the given rate (1/mean)."""
    return float(_generator.exponential(1.0 / rate))


def uniform(low: float, high: float) -> float:
    return float(_generator.uniform(low, high))


def canonical() -> float:
    """Uniform draw from [0, 1)."""
    return float(_generator.random())


def normal(mean: float, sigma: float) -> float:
    return float(_generator.normal(mean, sigma))


def discrete(weights: Sequence[float]) -> int:
    """
    Pick an index with probability proportional to its weight.

    Args:
        weights: Non-negative weights, at least one of them positive

    Returns:
        The chosen index
    """
    cumulative = np.cumsum(weights, dtype=float)
    total = cumulative[-1]
    if not total > 0.0:
        raise ValueError(f"Cannot sample from weights summing to {total}")
    r = canonical() * total
    index = int(np.searchsorted(cumulative, r, side="right"))
    return min(index, len(cumulative) - 1)
