"""
Selection Utilities
Fitness-proportional sampling through a cumulative distribution
"""

import numpy as np
from typing import Optional, Sequence, Union


def build_cdf(scores: Sequence[int]) -> np.ndarray:
    """
    Build a cumulative distribution from fitness scores.

    Args:
        scores: Non-negative score per individual

    Returns:
        Non-decreasing array of the same length ending at 1.0. If every
        score is zero the distribution is uniform.
    """
    values = np.asarray(scores, dtype=np.float64)
    if values.size == 0:
        return values
    if np.any(values < 0):
        raise ValueError("Scores must be non-negative")

    total = values.sum()
    if total == 0:
        # No information, fall back to a uniform distribution
        return np.arange(1, values.size + 1, dtype=np.float64) / values.size

    cdf = np.cumsum(values) / total
    cdf[-1] = 1.0
    return cdf


def weighted_sample(
    cdf: Sequence[float],
    rng: Optional[np.random.Generator] = None,
    size: Optional[int] = None
) -> Union[int, np.ndarray]:
    """
    Draw an index according to a cumulative distribution.

    A uniform value in [0, 1) is drawn and the first bucket whose
    cumulative value exceeds it is found by binary search, so buckets
    with zero probability are never returned.

    Args:
        cdf: Cumulative distribution as built by build_cdf
        rng: Random generator, a fresh one is used if omitted
        size: Number of draws; if given an array of indices is returned

    Returns:
        Sampled index (or array of indices)
    """
    cdf = np.asarray(cdf, dtype=np.float64)
    if cdf.size == 0:
        raise ValueError("Cannot sample from an empty distribution")

    rng = rng if rng is not None else np.random.default_rng()
    draws = rng.random(size)
    indices = np.searchsorted(cdf, draws, side='right')
    # Guard against a distribution that does not quite reach 1.0
    indices = np.minimum(indices, cdf.size - 1)

    if size is None:
        return int(indices)
    return indices
