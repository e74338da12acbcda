"""
Core building blocks for the thermoutil kernels.

This module contains the mixed quicksort/insertion sort used to order terms
before compensated summation, the Kahan summation step in its functional and
accumulator forms, and the helpers that turn lists, NumPy arrays and PyTorch
tensors into buffers the kernels can read or write.
"""

import torch
import numpy as np
from typing import List, Optional, Tuple, Union


# Ranges with more elements than this (right - left > cutoff) are partitioned
# by quicksort, smaller ones are finished with insertion sort.
INSERTION_SORT_CUTOFF = 25

ArrayLike = Union[List[float], np.ndarray, torch.Tensor]


def as_array(values: ArrayLike, dtype=np.float64) -> np.ndarray:
    """
    Read-only view of ``values`` as a NumPy array.

    Args:
        values: List, tuple, NumPy array or PyTorch tensor
        dtype: Target dtype, or None to keep the input's own dtype

    Returns:
        NumPy array (no copy when the input already matches)
    """
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    if dtype is None:
        return np.asarray(values)
    return np.asarray(values, dtype=dtype)


def as_buffer(array: ArrayLike):
    """
    Writable buffer sharing memory with ``array``.

    Lists and NumPy arrays are returned as they are. CPU tensors are exposed
    through their NumPy view, so writes land in the tensor's storage.

    Args:
        array: List, NumPy array or CPU PyTorch tensor

    Returns:
        Object supporting item and slice assignment
    """
    if isinstance(array, torch.Tensor):
        assert array.device.type == "cpu", "in-place kernels require a CPU tensor"
        return array.detach().numpy()
    if isinstance(array, (list, np.ndarray)):
        return array
    raise TypeError(f"Unsupported buffer type: {type(array).__name__}")


def as_float_buffer(array: ArrayLike):
    """
    Writable buffer for kernels that store float64 results in place.

    Same as ``as_buffer``, but arrays and tensors must already hold float64
    so results are neither truncated nor rounded to single precision.
    """
    buffer = as_buffer(array)
    if isinstance(buffer, np.ndarray):
        assert buffer.dtype == np.float64, (
            f"in-place kernels require a float64 buffer, got {buffer.dtype}"
        )
    return buffer


def resolve_size(values, size: Optional[int]) -> int:
    """Default ``size`` to the full length and check it against the buffer."""
    if size is None:
        return len(values)
    assert 0 <= size <= len(values), f"size {size} outside buffer of length {len(values)}"
    return size


def mixed_sort(array: ArrayLike, left: int = 0, right: Optional[int] = None):
    """
    Sort ``array[left:right + 1]`` in place, ascending.

    Large ranges are partitioned by quicksort around the last element, small
    ones are finished by insertion sort. The pivot is always the last element
    of the range, so reverse-sorted input costs O(n^2) comparisons.

    Args:
        array: Buffer to sort (list, NumPy array or CPU tensor)
        left: First index of the range
        right: Last index of the range, inclusive (default: last element)
    """
    buffer = as_buffer(array)
    if right is None:
        right = len(buffer) - 1
    assert left >= 0 and right < len(buffer), (
        f"sort range [{left}, {right}] outside buffer of length {len(buffer)}"
    )
    _mixed_sort(buffer, left, right)


def _mixed_sort(buffer, left: int, right: int):
    while right - left > INSERTION_SORT_CUTOFF:
        pivot = buffer[right]
        l, r = left - 1, right
        while True:
            l += 1
            while buffer[l] < pivot:
                l += 1
            r -= 1
            while buffer[r] > pivot and r > l:
                r -= 1
            if l >= r:
                break
            buffer[l], buffer[r] = buffer[r], buffer[l]
        buffer[l], buffer[right] = buffer[right], buffer[l]

        # Recurse into the smaller partition and keep looping on the larger one
        # so the stack stays shallow on adversarial input.
        if l - left < right - l:
            _mixed_sort(buffer, left, l - 1)
            left = l + 1
        else:
            _mixed_sort(buffer, l + 1, right)
            right = l - 1

    for l in range(left + 1, right + 1):
        value = buffer[l]
        r = l - 1
        while r >= left and value < buffer[r]:
            buffer[r + 1] = buffer[r]
            r -= 1
        buffer[r + 1] = value


def kahan_step(new_value: float, total: float, err: float) -> Tuple[float, float]:
    """
    Single compensated addition.

    Args:
        new_value: Value to add
        total: Running sum
        err: Running compensation term

    Returns:
        Tuple of (new_total, new_err)
    """
    loc = new_value - err
    tmp = total + loc
    err = (tmp - total) - loc
    return tmp, err


class KahanAccumulator:
    """
    Running Kahan sum.

    Holds the same four scalars the summation recurrence works with, so
    callers can feed values in any order they like and read the sum at the end.
    Driving it with a sequence gives the same bits as ``kahan_sum``.

    Attributes:
        sum: The accumulated sum
        err: The compensation term tracking lost low-order bits
        loc: Compensated input of the last step
        tmp: Uncorrected sum of the last step
    """

    def __init__(self):
        self.reset()

    def add(self, value: float):
        """Add ``value`` with Kahan compensation."""
        self.loc = float(value) - self.err
        self.tmp = self.sum + self.loc
        self.err = (self.tmp - self.sum) - self.loc
        self.sum = self.tmp

    def extend(self, values: ArrayLike):
        """Add every element of ``values`` in order."""
        for value in as_array(values).tolist():
            self.add(value)

    def get(self) -> float:
        """Get compensated sum."""
        return self.sum

    def reset(self):
        """Reset the accumulator to zero."""
        self.sum = 0.0
        self.err = 0.0
        self.loc = 0.0
        self.tmp = 0.0
