"""
Summation algorithms built on the core kernels.

This module provides batch Kahan summation and the log-sum-exp family used
for log-domain probability arithmetic. All log-sum-exp variants compute

    max + log(sum(exp(x_i - max)))

and resolve empty or all-zero-probability input to -inf instead of raising.
Variants with an ``_inplace`` suffix overwrite the caller's buffer.
"""

import math
import numpy as np
from typing import Optional

from .core import ArrayLike, as_array, as_buffer, as_float_buffer, kahan_step, mixed_sort, resolve_size


NEG_INF = -math.inf


def kahan_sum(values: ArrayLike, size: Optional[int] = None) -> float:
    """
    Compute sum using Kahan compensated summation.

    Args:
        values: Sequence of values to sum
        size: Number of leading elements to sum (default: all)

    Returns:
        Compensated sum with reduced floating-point error
    """
    values = as_array(values)
    size = resolve_size(values, size)

    total = 0.0
    err = 0.0
    for value in values[:size].tolist():
        total, err = kahan_step(value, total, err)

    return total


def logsumexp(array: ArrayLike, size: Optional[int] = None,
              array_max: Optional[float] = None) -> float:
    """
    Stabilized log(sum(exp(x))) with plain left-to-right accumulation.

    Args:
        array: Log-domain values, left untouched
        size: Number of leading elements to use (default: all)
        array_max: Maximum of those elements; computed when not given

    Returns:
        The log-sum-exp, or -inf for empty input or an -inf maximum
    """
    values = as_array(array)
    size = resolve_size(values, size)
    if size == 0:
        return NEG_INF
    if array_max is None:
        array_max = float(values[:size].max())
    if array_max == NEG_INF:
        return NEG_INF

    with np.errstate(all="ignore"):
        total = 0.0
        for term in np.exp(values[:size] - array_max).tolist():
            total += term
        return float(array_max + np.log(total))


def logsumexp_kahan_inplace(array: ArrayLike, size: Optional[int] = None,
                            array_max: Optional[float] = None) -> float:
    """
    Log-sum-exp with compensated summation of the exponentiated terms.

    The first ``size`` elements of ``array`` are replaced by
    ``exp(x_i - array_max)``; copy the input first if you still need it.
    Nothing is written when the result is the -inf sentinel.
    Arrays and tensors must hold float64.

    Args:
        array: Log-domain values (overwritten)
        size: Number of leading elements to use (default: all)
        array_max: Maximum of those elements; computed when not given

    Returns:
        The log-sum-exp, or -inf for empty input or an -inf maximum
    """
    buffer = as_float_buffer(array)
    size = resolve_size(buffer, size)
    if size == 0:
        return NEG_INF
    if array_max is None:
        array_max = float(as_array(buffer[:size]).max())
    if array_max == NEG_INF:
        return NEG_INF

    with np.errstate(all="ignore"):
        buffer[:size] = np.exp(as_array(buffer[:size]) - array_max).tolist()
        return float(array_max + np.log(kahan_sum(buffer, size)))


def logsumexp_sort_inplace(array: ArrayLike, size: Optional[int] = None) -> float:
    """
    Log-sum-exp accumulated from the smallest term to the largest.

    Sorts the first ``size`` elements of ``array`` in place, then reads the
    maximum from the last sorted position.
    """
    buffer = as_buffer(array)
    size = resolve_size(buffer, size)
    if size == 0:
        return NEG_INF
    mixed_sort(buffer, 0, size - 1)
    return logsumexp(buffer, size, float(buffer[size - 1]))


def logsumexp_sort_kahan_inplace(array: ArrayLike, size: Optional[int] = None) -> float:
    """
    Sorted, compensated log-sum-exp.

    The most robust variant: terms are ordered ascending and the exponentiated
    values (left in ``array``) are summed with Kahan compensation.
    """
    buffer = as_float_buffer(array)
    size = resolve_size(buffer, size)
    if size == 0:
        return NEG_INF
    mixed_sort(buffer, 0, size - 1)
    return logsumexp_kahan_inplace(buffer, size, float(buffer[size - 1]))


def logsumexp_pair(a: float, b: float) -> float:
    """
    Closed-form log(exp(a) + exp(b)).

    Args:
        a: First log-domain value
        b: Second log-domain value

    Returns:
        Stabilized log-sum-exp of the two values
    """
    if a == NEG_INF and b == NEG_INF:
        return NEG_INF
    if b > a:
        return b + math.log(1.0 + math.exp(a - b))
    return a + math.log(1.0 + math.exp(b - a))
