# firflow/core/convolution.py

"""
Direct (time-domain) linear convolution.

The kernel works on any numeric NumPy dtype (integer, float32, float64,
complex). The shorter operand always drives the accumulation, and the output
range is split into a ramp-up region (partial overlap starting at index 0)
and a steady region (clamped start index), so no per-tap bounds checks are
needed when computing a sample.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import DimensionMismatch, InvalidInput

logger = logging.getLogger(__name__)


def as_signal(data: ArrayLike, name: str = "input") -> NDArray:
    """
    Converts `data` to a 1-D NumPy array, rejecting empty or multi-dimensional input.

    Args:
        data: Sequence or array of numbers.
        name: Name used in the error message.

    Returns:
        A 1-D array (no copy if `data` already is one).

    Raises:
        InvalidInput: If `data` is empty or not one-dimensional.
    """
    arr = np.asarray(data)
    if arr.ndim != 1:
        raise InvalidInput(f"{name} must be a 1D sequence, got an array with {arr.ndim} dimensions.")
    if arr.shape[0] == 0:
        raise InvalidInput(f"{name} must contain at least one sample.")
    return arr


def order_operands(a: NDArray, b: NDArray) -> Tuple[NDArray, NDArray]:
    """Returns (short, long). On equal lengths `a` is treated as the short operand."""
    if b.shape[0] >= a.shape[0]:
        return a, b
    return b, a


def output_sample(short: NDArray, long: NDArray, n: int):
    """
    Computes output index `n` of the full convolution of `short` and `long`.

    `short` must not be longer than `long`. Both the sequential kernel and the
    parallel kernel compute every sample through this function, which is what
    makes their results identical.
    """
    len_short = short.shape[0]
    if n < len_short:
        # Ramp-up: overlap grows from 1 to len_short taps.
        start, stop = 0, n + 1
    else:
        # Steady state and ramp-down: clamp the start of the overlap.
        start = max(0, n - long.shape[0] + 1)
        stop = len_short
    # long[n - k] for k in [start, stop), i.e. a reversed contiguous slice.
    return np.dot(short[start:stop], long[n - stop + 1:n - start + 1][::-1])


def result_length(a: NDArray, b: NDArray) -> int:
    """Length of the full linear convolution of `a` and `b`."""
    return a.shape[0] + b.shape[0] - 1


def convolve(a: ArrayLike, b: ArrayLike) -> NDArray:
    """
    Full linear convolution of two 1-D sequences: out[n] = sum_k a[k] * b[n - k].

    The operation is commutative; which operand is the "signal" and which
    the "filter" does not matter.

    Args:
        a: First input sequence (length N).
        b: Second input sequence (length M).

    Returns:
        Array of length N + M - 1 with dtype `numpy.result_type(a, b)`.

    Raises:
        InvalidInput: If either input is empty or not one-dimensional.
    """
    a = as_signal(a, "a")
    b = as_signal(b, "b")
    short, long = order_operands(a, b)
    out_len = result_length(a, b)
    output = np.zeros(out_len, dtype=np.result_type(a, b))

    logger.debug(f"Direct convolution: len(short)={short.shape[0]}, len(long)={long.shape[0]}, out={out_len}")
    for n in range(out_len):
        output[n] = output_sample(short, long, n)
    return output


# --- Interleaved complex helpers ---

def interleave(samples: ArrayLike) -> NDArray[np.float64]:
    """Converts complex samples to the [re0, im0, re1, im1, ...] layout."""
    z = np.asarray(samples, dtype=np.complex128)
    out = np.empty(2 * z.shape[0], dtype=np.float64)
    out[0::2] = z.real
    out[1::2] = z.imag
    return out


def deinterleave(interleaved: ArrayLike) -> NDArray[np.complex128]:
    """
    Converts an interleaved [re, im, ...] array back to complex samples.

    Raises:
        DimensionMismatch: If the interleaved array has an odd length.
    """
    arr = np.asarray(interleaved, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidInput("Interleaved complex input must be a 1D sequence.")
    if arr.shape[0] % 2 == 1:
        raise DimensionMismatch(
            f"Interleaved complex input must have an even number of values, got {arr.shape[0]}."
        )
    return arr[0::2] + 1j * arr[1::2]


def convolve_real_complex(real: ArrayLike, interleaved: ArrayLike) -> NDArray[np.float64]:
    """
    Convolves a real sequence with a complex sequence stored interleaved.

    Args:
        real: Real-valued sequence (length N), typically filter taps.
        interleaved: Complex signal of M samples stored as 2*M reals
                     [re0, im0, re1, im1, ...].

    Returns:
        Interleaved complex result holding N + M - 1 samples (2*(N+M-1) values).

    Raises:
        DimensionMismatch: If `interleaved` has an odd length.
        InvalidInput: If either input is empty.
    """
    real_arr = as_signal(real, "real")
    if np.iscomplexobj(real_arr):
        raise InvalidInput("First operand of convolve_real_complex must be real-valued.")
    complex_samples = deinterleave(interleaved)
    return interleave(convolve(real_arr.astype(np.float64, copy=False), complex_samples))
