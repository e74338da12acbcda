#!/usr/bin/env python3
"""
Basic usage examples for the thermoutil kernels.

This script demonstrates compensated and log-domain summation, and the
trajectory and transition matrix helpers used by thermodynamic estimators.
"""

import numpy as np
import time

import sys
sys.path.append('..')

from thermoutil import (
    kahan_sum,
    logsumexp,
    logsumexp_sort_kahan_inplace,
    logsumexp_pair,
    mixed_sort,
    run_starts,
    run_lengths,
    renormalize_transition_matrix,
    KahanAccumulator
)


def demonstrate_precision_loss():
    """Show how standard summation loses precision."""
    print("=" * 60)
    print("DEMONSTRATION: Precision Loss in Standard Summation")
    print("=" * 60)

    # One large value followed by many values below half an ulp of it
    values = [1e8] + [1e-8] * 1000000
    exact = 1e8 + 0.01

    naive_result = 0.0
    for value in values:
        naive_result += value

    print(f"Test data: 1e8 followed by 1,000,000 x 1e-8")
    print(f"Expected result:      {exact!r}")
    print()
    print(f"Naive loop result:    {naive_result!r}")
    print(f"Error:                {abs(naive_result - exact):.2e}")
    print()

    kahan_result = kahan_sum(values)
    print(f"Kahan sum result:     {kahan_result!r}")
    print(f"Error:                {abs(kahan_result - exact):.2e}")
    print()


def demonstrate_incremental_summation():
    """Show incremental summation with KahanAccumulator."""
    print("=" * 60)
    print("DEMONSTRATION: Incremental Summation")
    print("=" * 60)

    acc = KahanAccumulator()
    values = [1e16, 1.0, 1.0, 1.0, -1e16]

    print(f"{'Value':<15} {'Running Sum':<22} {'Compensation':<15}")
    print("-" * 52)

    for value in values:
        acc.add(value)
        print(f"{value:<15.1f} {acc.get():<22.1f} {acc.err:<15.2e}")

    print()
    print(f"Final sum: {acc.get()}")
    print(f"Naive sum: {sum(values)}")
    print()


def demonstrate_logsumexp():
    """Compare log-sum-exp variants on skewed log weights."""
    print("=" * 60)
    print("DEMONSTRATION: Log-Sum-Exp")
    print("=" * 60)

    np.random.seed(42)
    log_weights = np.random.uniform(-700.0, 10.0, 10000)

    start_time = time.time()
    plain = logsumexp(log_weights)
    plain_ms = (time.time() - start_time) * 1000

    start_time = time.time()
    robust = logsumexp_sort_kahan_inplace(log_weights.copy())
    robust_ms = (time.time() - start_time) * 1000

    print(f"{'Variant':<20} {'Time (ms)':<12} {'Result':<25}")
    print("-" * 57)
    print(f"{'plain':<20} {plain_ms:8.2f}     {plain!r}")
    print(f"{'sort + kahan':<20} {robust_ms:8.2f}     {robust!r}")
    print()
    print(f"logsumexp_pair(-1000, -1001) = {logsumexp_pair(-1000.0, -1001.0)!r}")
    print()


def demonstrate_sorting():
    """Show the in-place mixed sort."""
    print("=" * 60)
    print("DEMONSTRATION: Mixed Sort")
    print("=" * 60)

    values = [3.5, -1.0, 2.0, 0.25, 8.0]
    print(f"Before: {values}")
    mixed_sort(values)
    print(f"After:  {values}")
    print()


def demonstrate_trajectory_runs():
    """Split a discrete trajectory into runs."""
    print("=" * 60)
    print("DEMONSTRATION: Trajectory Runs")
    print("=" * 60)

    trajectory = [0, 0, 0, 1, 1, 2, 2, 2, 2]
    print(f"Trajectory:  {trajectory}")
    print(f"Run starts:  {run_starts(trajectory).tolist()}")
    print(f"Run lengths: {run_lengths(trajectory).tolist()}")
    print()


def demonstrate_renormalization():
    """Repair a drifted transition matrix."""
    print("=" * 60)
    print("DEMONSTRATION: Transition Matrix Renormalization")
    print("=" * 60)

    p = np.array([[0.5, 0.5], [0.3, 0.3]])
    print("Before:")
    print(p)
    print(f"Row sums: {p.sum(axis=1)}")

    renormalize_transition_matrix(p, scratch=np.empty(2))

    print("After:")
    print(p)
    print(f"Row sums: {p.sum(axis=1)}")
    print()


def main():
    """Run all demonstrations."""
    demonstrate_precision_loss()
    demonstrate_incremental_summation()
    demonstrate_logsumexp()
    demonstrate_sorting()
    demonstrate_trajectory_runs()
    demonstrate_renormalization()


if __name__ == "__main__":
    main()
