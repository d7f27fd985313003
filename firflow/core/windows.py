# firflow/core/windows.py

"""
Window functions used by the windowed-sinc FIR design.

Windows are evaluated on a normalized position grid centered on zero
(roughly [-0.5, 0.5)), not on sample indices, so they can be sampled at any
tap count without changing shape.
"""

import logging
from enum import Enum
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import UnsupportedDesign

logger = logging.getLogger(__name__)


class WindowType(str, Enum):
    """Supported window shapes."""
    BARTLETT = "bartlett"
    HAMMING = "hamming"
    HANN = "hann"

    @classmethod
    def parse(cls, value: Union[str, "WindowType"]) -> "WindowType":
        """Accepts a WindowType or a case-insensitive name ('HANN', 'hann', ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedDesign(
            f"Unsupported window type: {value!r}. Choose from {[m.value for m in cls]}."
        )


def bartlett(x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Triangular window: 1 - |2x|."""
    return 1.0 - np.abs(2.0 * x)


def hamming(x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hamming window: 0.54 + 0.46 cos(2 pi x)."""
    return 0.54 + 0.46 * np.cos(2.0 * np.pi * x)


def hann(x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hann window: 0.5 + 0.5 cos(2 pi x)."""
    return 0.5 + 0.5 * np.cos(2.0 * np.pi * x)


_WINDOWS = {
    WindowType.BARTLETT: bartlett,
    WindowType.HAMMING: hamming,
    WindowType.HANN: hann,
}


def compute_window(kind: Union[str, WindowType], positions: ArrayLike) -> NDArray[np.float64]:
    """
    Evaluates a window function pointwise on normalized positions.

    Args:
        kind: Window type (WindowType or its name, case-insensitive).
        positions: Normalized positions x (1D). The window peaks at x = 0.

    Returns:
        Window weights (float64), same length as `positions`.

    Raises:
        UnsupportedDesign: If `kind` is not a supported window.
    """
    window_type = WindowType.parse(kind)
    x = np.asarray(positions, dtype=np.float64)
    logger.debug(f"Computing '{window_type.value}' window on {x.shape[0] if x.ndim else 1} points.")
    return _WINDOWS[window_type](x)
