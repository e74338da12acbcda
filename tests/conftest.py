#!/usr/bin/env python3
"""
Pytest configuration and fixtures for thermoutil tests.

This file contains shared test fixtures, configuration, and utilities
used across the test suite.
"""

import pytest
import numpy as np
import torch
import math
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def simple_data():
    """Simple test data for basic functionality tests."""
    return [5.0, 3.0, 1.0, 4.0, 2.0]


@pytest.fixture
def small_unsorted():
    """Fewer elements than the insertion sort cutoff."""
    rng = np.random.default_rng(7)
    return rng.normal(0, 1, 20)


@pytest.fixture
def large_unsorted():
    """Enough elements to go through quicksort partitioning."""
    rng = np.random.default_rng(11)
    return rng.normal(0, 10, 500)


@pytest.fixture
def duplicate_heavy():
    """Many ties, which stress the partitioning pointers."""
    rng = np.random.default_rng(3)
    return rng.integers(0, 5, 300).astype(np.float64)


@pytest.fixture
def log_weights():
    """Log-domain weights spanning many orders of magnitude."""
    rng = np.random.default_rng(42)
    return rng.uniform(-50.0, 5.0, 200)


@pytest.fixture
def state_trajectory():
    """Discrete trajectory with three runs."""
    return [0, 0, 0, 1, 1, 2, 2, 2, 2]


@pytest.fixture
def count_matrix():
    """Nonnegative matrix with unequal row sums, shape (6, 6)."""
    rng = np.random.default_rng(5)
    matrix = rng.uniform(0.0, 1.0, (6, 6))
    return matrix * rng.uniform(0.1, 2.0, (6, 1))


@pytest.fixture(params=["list", "numpy", "torch"])
def container(request):
    """Wrap a float sequence in each supported buffer type."""
    def wrap(values):
        if request.param == "list":
            return [float(v) for v in values]
        if request.param == "numpy":
            return np.array(values, dtype=np.float64)
        return torch.tensor(list(values), dtype=torch.float64)
    wrap.kind = request.param
    return wrap


class AccuracyChecker:
    """Utility class for checking numerical accuracy."""

    @staticmethod
    def relative_error(computed: float, reference: float) -> float:
        """Calculate relative error."""
        if reference == 0:
            return abs(computed)
        return abs(computed - reference) / abs(reference)

    @staticmethod
    def exact_sum(values) -> float:
        """Correctly rounded sum for reference."""
        return math.fsum(np.asarray(values, dtype=np.float64).tolist())

    @staticmethod
    def reference_logsumexp(values) -> float:
        """Log-sum-exp computed from a correctly rounded sum."""
        values = np.asarray(values, dtype=np.float64)
        shift = values.max()
        return float(shift + math.log(math.fsum(np.exp(values - shift).tolist())))


@pytest.fixture
def accuracy_checker():
    """Fixture providing accuracy checking utilities."""
    return AccuracyChecker()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark tests that take long time as slow
        if "large" in item.name or "stress" in item.name or "adversarial" in item.name:
            item.add_marker(pytest.mark.slow)


# Custom assertion helpers
def assert_arrays_close(a, b, rtol=1e-7, atol=1e-14):
    """Assert that two arrays are close with informative error messages."""
    if hasattr(a, 'numpy'):
        a = a.numpy()
    if hasattr(b, 'numpy'):
        b = b.numpy()

    a = np.asarray(a)
    b = np.asarray(b)

    assert a.shape == b.shape, f"Shape mismatch: {a.shape} vs {b.shape}"

    if not np.allclose(a, b, rtol=rtol, atol=atol):
        diff = np.abs(a - b)
        max_diff_idx = np.unravel_index(np.argmax(diff), diff.shape)
        max_diff = diff[max_diff_idx]

        raise AssertionError(
            f"Arrays not close enough:\n"
            f"Max difference: {max_diff} at index {max_diff_idx}\n"
            f"Values: {a[max_diff_idx]} vs {b[max_diff_idx]}\n"
            f"Relative tolerance: {rtol}, Absolute tolerance: {atol}"
        )


def assert_row_stochastic(matrix, atol=1e-12):
    """Assert that every row of a square matrix sums to one."""
    matrix = np.asarray(matrix, dtype=np.float64)
    n = math.isqrt(matrix.size)
    row_sums = matrix.reshape(n, n).sum(axis=1)
    worst = np.max(np.abs(row_sums - 1.0))
    assert worst <= atol, f"Row sums deviate from one by up to {worst}: {row_sums}"


@pytest.fixture
def assert_close():
    """Fixture exposing ``assert_arrays_close``."""
    return assert_arrays_close


@pytest.fixture
def assert_stochastic():
    """Fixture exposing ``assert_row_stochastic``."""
    return assert_row_stochastic
