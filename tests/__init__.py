"""
Test suite for the thermoutil kernels.

Test Structure:
- test_core.py: Sorting, Kahan step and accumulator, buffer helpers
- test_algorithms.py: Batch Kahan summation and the log-sum-exp family
- test_transitions.py: Break points and transition matrix renormalization
- conftest.py: Shared fixtures and configuration

Usage:
    # Run all tests
    pytest

    # Run tests with coverage
    pytest --cov=thermoutil

    # Run only fast tests
    pytest -m "not slow"
"""

__version__ = "1.0.0"
