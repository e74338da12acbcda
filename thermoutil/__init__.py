"""
Thermoutil Kernels

Numerically robust low-level kernels for thermodynamic and Markov state model
estimators.

This library provides:
- In-place mixed quicksort/insertion sort for ordering summands
- Kahan compensated summation (batch, single-step and accumulator forms)
- Log-sum-exp variants with sorting and compensated summation
- Run detection over discrete state trajectories
- Transition matrix renormalization to row-stochastic form
"""

from .core import KahanAccumulator, kahan_step, mixed_sort
from .algorithms import (
    kahan_sum,
    logsumexp,
    logsumexp_kahan_inplace,
    logsumexp_sort_inplace,
    logsumexp_sort_kahan_inplace,
    logsumexp_pair
)
from .transitions import (
    get_break_points,
    run_starts,
    run_lengths,
    renormalize_transition_matrix
)

__version__ = "1.0.0"
__author__ = "Thermoutil Contributors"

__all__ = [
    "KahanAccumulator",
    "kahan_step",
    "mixed_sort",
    "kahan_sum",
    "logsumexp",
    "logsumexp_kahan_inplace",
    "logsumexp_sort_inplace",
    "logsumexp_sort_kahan_inplace",
    "logsumexp_pair",
    "get_break_points",
    "run_starts",
    "run_lengths",
    "renormalize_transition_matrix"
]
