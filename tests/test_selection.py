"""
Tests for Selection Utilities
"""

import pytest
import numpy as np
from src.ruins.selection import build_cdf, weighted_sample


def test_cdf_all_zero_is_uniform():
    """Test zero scores give a uniform distribution."""
    cdf = build_cdf([0, 0, 0, 0])

    assert np.allclose(cdf, [0.25, 0.5, 0.75, 1.0])
    assert np.all(np.diff(cdf) > 0)
    assert cdf[-1] == 1.0


def test_cdf_weighted():
    """Test the cumulative distribution of weighted scores."""
    cdf = build_cdf([1, 3, 1, 5])

    assert np.allclose(cdf, [0.1, 0.4, 0.5, 1.0], atol=1e-4)


def test_cdf_properties():
    """Test the distribution is non-decreasing and ends at exactly 1."""
    cdf = build_cdf([3, 0, 7, 7, 1, 0, 9])

    assert len(cdf) == 7
    assert np.all(np.diff(cdf) >= 0)
    assert cdf[-1] == 1.0


def test_cdf_edge_cases():
    """Test empty and invalid scores."""
    assert len(build_cdf([])) == 0

    with pytest.raises(ValueError):
        build_cdf([1, -1, 2])


def test_sample_single_bucket():
    """Test a one-bucket distribution always returns 0."""
    rng = np.random.default_rng(0)

    for _ in range(1000):
        assert weighted_sample([1.0], rng) == 0


def test_sample_skips_empty_buckets():
    """Test buckets with no probability are never drawn."""
    rng = np.random.default_rng(1)

    samples = [weighted_sample([0.0, 0.0, 1.0], rng) for _ in range(1000)]

    assert set(samples) == {2}


def test_sample_returns_int():
    """Test a single draw is a plain integer."""
    index = weighted_sample([0.5, 1.0], np.random.default_rng(2))

    assert isinstance(index, int)


def test_sample_frequencies():
    """Test a million draws match the distribution."""
    rng = np.random.default_rng(42)

    samples = weighted_sample([0.1, 0.5, 0.9, 1.0], rng, size=10 ** 6)
    frequencies = np.bincount(samples, minlength=4) / 10 ** 6

    assert np.allclose(frequencies, [0.1, 0.4, 0.4, 0.1], atol=0.01)


def test_sample_frequencies_single_draws():
    """Test repeated single draws follow the distribution."""
    rng = np.random.default_rng(7)

    samples = [weighted_sample(build_cdf([1, 3, 1, 5]), rng) for _ in range(20000)]
    frequencies = np.bincount(samples, minlength=4) / len(samples)

    assert np.allclose(frequencies, [0.1, 0.3, 0.1, 0.5], atol=0.02)


def test_sample_empty_distribution():
    """Test sampling from nothing fails."""
    with pytest.raises(ValueError):
        weighted_sample([])


if __name__ == "__main__":
    pytest.main([__file__])
