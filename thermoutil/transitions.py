"""
Kernels for state sequences and transition matrices.

Run detection over discrete trajectories (one label per frame) and the
renormalization that turns a transition matrix drifted by an iterative
estimator back into a row-stochastic one.
"""

import math
import logging
import numpy as np
from typing import Optional

from .core import ArrayLike, as_array, as_buffer, as_float_buffer, mixed_sort, resolve_size
from .algorithms import kahan_sum


logger = logging.getLogger(__name__)


def get_break_points(labels: ArrayLike, break_points: ArrayLike,
                     length: Optional[int] = None) -> int:
    """
    Find the start index of every run of equal labels.

    Args:
        labels: Integer label sequence, e.g. one state index per frame
        break_points: Output buffer with room for ``length`` indices
        length: Number of leading labels to scan (default: all)

    Returns:
        Number of break points written; index 0 always comes first
    """
    labels = as_array(labels, dtype=None)
    length = resolve_size(labels, length)
    assert length >= 1, "label sequence must not be empty"
    buffer = as_buffer(break_points)
    assert len(buffer) >= length, "break point buffer must hold one index per label"

    sequence = labels[:length].tolist()
    current = sequence[0]
    buffer[0] = 0
    count = 1
    for i in range(1, length):
        if sequence[i] != current:
            current = sequence[i]
            buffer[count] = i
            count += 1

    return count


def run_starts(labels: ArrayLike) -> np.ndarray:
    """Start indices of the contiguous runs in ``labels``."""
    labels = as_array(labels, dtype=None)
    break_points = np.zeros(len(labels), dtype=np.intp)
    count = get_break_points(labels, break_points)
    return break_points[:count]


def run_lengths(labels: ArrayLike) -> np.ndarray:
    """Lengths of the contiguous runs in ``labels``, in order."""
    labels = as_array(labels, dtype=None)
    starts = run_starts(labels)
    return np.diff(np.append(starts, len(labels)))


def renormalize_transition_matrix(p: ArrayLike, n: Optional[int] = None,
                                  scratch: Optional[ArrayLike] = None):
    """
    Rescale a transition matrix in place so that every row sums to one.

    All entries are divided by the largest row sum, which pins the heaviest
    row to one and keeps the relative mass of the other rows. Each diagonal
    element is then recomputed as one minus its row's off-diagonal sum, so
    the diagonal absorbs whatever rounding drift is left. Row sums are taken
    over sorted copies with Kahan compensation.

    A matrix whose largest row sum is not positive is left untouched.

    Args:
        p: Row-major n*n float64 matrix, flat or as a C-contiguous (n, n)
            array/tensor; integer counts must be converted first
        n: Number of states (default: inferred from ``p``)
        scratch: Buffer of at least n elements reused for every row
            (default: allocated per call)
    """
    buffer = as_float_buffer(p)
    if isinstance(buffer, np.ndarray) and buffer.ndim == 2:
        assert buffer.shape[0] == buffer.shape[1], "transition matrix must be square"
        assert buffer.flags.c_contiguous, "transition matrix must be C-contiguous"
        if n is None:
            n = buffer.shape[0]
        buffer = buffer.reshape(-1)
    if n is None:
        n = math.isqrt(len(buffer))
    assert n > 0, "transition matrix needs at least one state"
    assert len(buffer) >= n * n, f"matrix buffer too short for {n} states"

    if scratch is None:
        logger.debug(f"Allocating scratch row for {n} states")
        scratch = np.empty(n, dtype=np.float64)
    else:
        scratch = as_float_buffer(scratch)
        assert len(scratch) >= n, f"scratch buffer too short for {n} states"

    max_sum = 0.0
    for i in range(n):
        row = i * n
        scratch[:n] = buffer[row:row + n]
        mixed_sort(scratch, 0, n - 1)
        row_sum = kahan_sum(scratch, n)
        max_sum = max_sum if max_sum > row_sum else row_sum

    if max_sum <= 0.0:
        logger.debug(f"Largest row sum is {max_sum}, skipping renormalization")
        return

    for i in range(n):
        row = i * n
        for j in range(n):
            buffer[row + j] /= max_sum
            scratch[j] = 0.0 if i == j else buffer[row + j]
        mixed_sort(scratch, 0, n - 1)
        buffer[row + i] = 1.0 - kahan_sum(scratch, n)
