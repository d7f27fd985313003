# firflow/core/streaming.py

"""
Block-wise FIR filtering with carried state.

StreamingFilter keeps the last `num_taps - 1` input samples between calls so
that filtering a signal in one call or as any sequence of consecutive blocks
gives the same output. FirFilter is the stateless counterpart: it simply
convolves a whole signal with its numerator.
"""

import logging
from typing import Callable, Optional, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .convolution import convolve, convolve_real_complex, as_signal
from .design import DesignMethod, FilterCoefficients, FilterKind, design_filter, design_moving_average
from .errors import InvalidInput, InvalidParameter, UnsupportedDesign

logger = logging.getLogger(__name__)

# Signature shared by `convolve` and `ParallelConvolver.convolve`.
ConvolveFn = Callable[[ArrayLike, ArrayLike], NDArray]


class StreamingFilter:
    """
    FIR filter that processes a signal in arbitrarily sized blocks.

    On construction the filter is a moving average of `initial_num_taps` taps.
    `design_filter` replaces the coefficients and resets the history;
    `apply_filter` filters one block and advances the history.

    Instances are not thread-safe: every `apply_filter` call mutates the
    history buffer. Use one instance per independent stream.

    Args:
        initial_num_taps: Tap count of the initial moving-average design (>= 1).
        convolver: Convolution routine with the `convolve(a, b)` contract.
                   Defaults to the sequential kernel; pass
                   `ParallelConvolver(...).convolve` to use a worker pool.
    """

    def __init__(self, initial_num_taps: int, convolver: Optional[ConvolveFn] = None):
        taps = design_moving_average(initial_num_taps)
        self._convolve: ConvolveFn = convolver if convolver is not None else convolve
        self._coefficients = FilterCoefficients(numerator=taps, method=DesignMethod.MOVING_AVERAGE)
        self._history = np.zeros(initial_num_taps - 1, dtype=np.float64)
        logger.debug(f"StreamingFilter created: {initial_num_taps}-tap moving average.")

    # --- Read-only views ---

    @property
    def coefficients(self) -> FilterCoefficients:
        return self._coefficients

    @property
    def numerator(self) -> NDArray[np.float64]:
        return self._coefficients.numerator.copy()

    @property
    def denominator(self) -> NDArray[np.float64]:
        return self._coefficients.denominator.copy()

    @property
    def method(self) -> DesignMethod:
        return self._coefficients.method

    @property
    def num_taps(self) -> int:
        return self._coefficients.num_taps

    @property
    def state(self) -> NDArray[np.float64]:
        """Copy of the history buffer, oldest sample first."""
        return self._history.copy()

    # --- Operations ---

    def design_filter(
        self,
        num_num: int,
        num_den: int,
        method: Union[str, DesignMethod],
        bandwidth: Optional[float] = None,
    ) -> FilterCoefficients:
        """
        Designs a new filter and resets the history to `num_num - 1` zeros.

        Args:
            num_num: Number of numerator taps (>= 1).
            num_den: Number of denominator taps (>= 0). Only 0 (FIR) is
                     implemented; a positive value requests the reserved IIR
                     variant.
            method: Design method ('moving average', 'bartlett', 'hamming', 'hann').
            bandwidth: Normalized bandwidth for the windowed methods (0.5 = Nyquist).

        Returns:
            The new coefficient set.

        Raises:
            InvalidParameter: If `num_num` < 1, `num_den` < 0 or the bandwidth is invalid.
            UnsupportedDesign: If the method is unknown or `num_den` > 0.

        On any error the current coefficients and history are left unchanged.
        """
        if num_num < 1:
            raise InvalidParameter(f"Number numerator coefficients should be >= 1, got {num_num}.")
        if num_den < 0:
            raise InvalidParameter(f"Number denominator coefficients should be >= 0, got {num_den}.")
        design_method = DesignMethod.parse(method)
        if num_den > 0:
            raise UnsupportedDesign(
                f"{FilterKind.IIR.value.upper()} designs with {num_den} denominator taps are not implemented; "
                "only FIR designs (num_den=0) are supported."
            )

        # Build everything first, then swap, so a failure leaves the state intact.
        coefficients = design_filter(design_method, num_num, bandwidth)
        history = np.zeros(num_num - 1, dtype=np.float64)

        self._coefficients = coefficients
        self._history = history
        logger.info(f"Designed {design_method.value} filter: {num_num} taps, bandwidth={coefficients.bandwidth}")
        return coefficients

    def apply_filter(self, block: ArrayLike) -> NDArray:
        """
        Filters one block of samples, continuing from the previous block.

        The stored history is prepended to `block`, the combined buffer is
        convolved with the numerator, and the `len(block)` outputs that follow
        the first `len(history)` are returned. The history is then replaced by
        the last `len(history)` samples of the combined buffer.

        Args:
            block: 1D block of input samples (may be empty).

        Returns:
            Filtered samples, same length as `block`.

        Raises:
            InvalidInput: If `block` is not one-dimensional.
        """
        block = np.asarray(block)
        if block.ndim != 1:
            raise InvalidInput(f"Input block must be a 1D sequence, got an array with {block.ndim} dimensions.")
        if block.shape[0] == 0:
            return np.zeros(0, dtype=np.result_type(block, self._coefficients.numerator))

        n_hist = self._history.shape[0]
        combined = np.concatenate((self._history, block))
        full = self._convolve(combined, self._coefficients.numerator)
        output = np.array(full[n_hist:n_hist + block.shape[0]])

        # Explicit start index: combined[-0:] would keep the whole buffer.
        self._history = combined[combined.shape[0] - n_hist:].copy()
        logger.debug(f"Filtered block of {block.shape[0]} samples ({n_hist} history samples).")
        return output

    def reset(self) -> None:
        """Zeroes the history buffer without changing the coefficients."""
        self._history = np.zeros_like(self._history)

    def __repr__(self) -> str:
        return f"StreamingFilter(method={self.method.value}, num_taps={self.num_taps})"


class FirFilter:
    """
    Stateless filter holding numerator and denominator coefficients.

    Only the numerator is used: `filter_real` and `filter_complex` return the
    full convolution of the input with it (length N + M - 1).
    """

    def __init__(self, numerator: ArrayLike = (1.0,), denominator: ArrayLike = (1.0,)):
        self.numerator = as_signal(np.asarray(numerator, dtype=np.float64), "numerator")
        self.denominator = np.asarray(denominator, dtype=np.float64)

    @classmethod
    def from_coefficients(cls, coefficients: FilterCoefficients) -> "FirFilter":
        return cls(numerator=coefficients.numerator, denominator=(1.0,))

    def filter_real(self, samples: ArrayLike) -> NDArray:
        return convolve(self.numerator, samples)

    def filter_complex(self, interleaved: ArrayLike) -> NDArray[np.float64]:
        """Filters an interleaved [re, im, ...] complex signal; output is interleaved too."""
        return convolve_real_complex(self.numerator, interleaved)
