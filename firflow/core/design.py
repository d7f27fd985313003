# firflow/core/design.py

"""
FIR filter design.

Provides the moving-average (boxcar) design, the windowed-sinc lowpass design
(Bartlett, Hamming or Hann window applied to an ideal sinc response and
normalized to unity DC gain), and a square-root raised-cosine pulse design.
`design_filter` dispatches on a DesignMethod and returns a FilterCoefficients
record.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidParameter, UnsupportedDesign
from .windows import WindowType, compute_window

logger = logging.getLogger(__name__)


# --- Design identifiers ---

class DesignMethod(str, Enum):
    """Design methods understood by `design_filter`."""
    MOVING_AVERAGE = "moving_average"
    BARTLETT = "bartlett"
    HAMMING = "hamming"
    HANN = "hann"

    @classmethod
    def parse(cls, value: Union[str, "DesignMethod"]) -> "DesignMethod":
        """
        Accepts a DesignMethod or a name such as 'MOVING AVERAGE',
        'moving-average' or 'Hann'. Case, spaces, hyphens and underscores
        are not significant.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace(" ", "_").replace("-", "_")
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedDesign(
            f"Design ({value!r}) not supported. Choose from {[m.value for m in cls]}."
        )

    @property
    def window(self) -> Optional[WindowType]:
        """Window used by this method, or None for the moving average."""
        if self is DesignMethod.MOVING_AVERAGE:
            return None
        return WindowType(self.value)


class FilterKind(str, Enum):
    """
    Structure of a coefficient set.

    Only FIR is implemented. IIR is reserved for a future feedback path with
    denominator taps; requesting it raises UnsupportedDesign.
    """
    FIR = "fir"
    IIR = "iir"


@dataclass(frozen=True, eq=False)
class FilterCoefficients:
    """An immutable, designed coefficient set."""
    numerator: NDArray[np.float64]
    method: DesignMethod
    bandwidth: Optional[float] = None
    kind: FilterKind = FilterKind.FIR
    denominator: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0, dtype=np.float64))

    def __post_init__(self):
        if self.numerator.ndim != 1 or self.numerator.shape[0] < 1:
            raise InvalidParameter("A coefficient set needs at least one numerator tap.")
        # Freeze the arrays so the record cannot be mutated through them.
        self.numerator.setflags(write=False)
        self.denominator.setflags(write=False)

    @property
    def num_taps(self) -> int:
        return int(self.numerator.shape[0])


# --- Validation helpers ---

def check_count(value: int, name: str) -> None:
    """Raises InvalidParameter unless `value` is an integer >= 1 (bools are rejected)."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise InvalidParameter(f"{name} should be >= 1, got {value}.")


def _check_num_taps(num_taps: int) -> None:
    check_count(num_taps, "Number of taps")


def _check_bandwidth(bandwidth: float) -> None:
    if bandwidth is None or not math.isfinite(bandwidth) or bandwidth <= 0:
        raise InvalidParameter(f"Normalized bandwidth must be a positive finite number, got {bandwidth!r}.")
    if bandwidth > 0.5:
        logger.warning(f"Normalized bandwidth {bandwidth} exceeds 0.5 (Nyquist); the design will alias.")


# --- Designs ---

def window_positions(num_taps: int) -> NDArray[np.float64]:
    """
    Normalized sample grid for a windowed design.

    The grid has `num_taps` points spaced 1/num_taps apart. For odd tap counts
    it is symmetric about zero and contains zero; for even tap counts it is
    offset by half a step so zero falls between the two middle points. In
    both cases the first point is -(num_taps - 1) / (2 * num_taps).
    """
    _check_num_taps(num_taps)
    # Offsets from the center in samples; exact in floating point, so the
    # grid is exactly symmetric and hits 0.0 for odd tap counts.
    offsets = np.arange(num_taps, dtype=np.float64) - (num_taps - 1) / 2.0
    return offsets / num_taps


def design_moving_average(num_taps: int) -> NDArray[np.float64]:
    """
    Designs a moving-average (boxcar) filter.

    Args:
        num_taps: Number of taps (>= 1).

    Returns:
        `num_taps` coefficients, each equal to 1/num_taps.

    Raises:
        InvalidParameter: If `num_taps` < 1.
    """
    _check_num_taps(num_taps)
    logger.debug(f"Designing {num_taps}-tap moving average.")
    return np.full(num_taps, 1.0 / num_taps, dtype=np.float64)


def design_windowed_sinc(
    num_taps: int,
    window: Union[str, WindowType],
    normalized_bandwidth: float,
) -> NDArray[np.float64]:
    """
    Designs a lowpass FIR filter with the window method.

    An ideal lowpass (sinc) response of the requested bandwidth is sampled on
    the normalized grid, multiplied by the window and scaled so the taps sum
    to one (unity DC gain).

    Args:
        num_taps: Number of taps (>= 1).
        window: Window type: 'bartlett', 'hamming' or 'hann'.
        normalized_bandwidth: Cutoff as a fraction of the sampling rate
                              (0.5 = Nyquist).

    Returns:
        The designed taps (float64, length `num_taps`).

    Raises:
        InvalidParameter: If `num_taps` < 1, the bandwidth is not positive,
                          or the windowed taps sum to zero.
        UnsupportedDesign: If `window` is not a supported window.
    """
    _check_num_taps(num_taps)
    window_type = WindowType.parse(window)
    _check_bandwidth(normalized_bandwidth)

    logger.debug(
        f"Designing {num_taps}-tap windowed-sinc lowpass: window={window_type.value}, "
        f"bandwidth={normalized_bandwidth}"
    )
    x = window_positions(num_taps)
    win = compute_window(window_type, x)
    # np.sinc(u) = sin(pi u) / (pi u), and 1 at u == 0.
    response = np.sinc(normalized_bandwidth * x * num_taps)
    taps = response * win

    total = taps.sum()
    if total == 0 or not np.isfinite(total):
        raise InvalidParameter(
            f"Cannot normalize design: taps sum to {total} "
            f"(num_taps={num_taps}, bandwidth={normalized_bandwidth})."
        )
    return taps / total


def design_root_raised_cosine(
    num_taps: int,
    sample_rate: float,
    baud: float,
    rolloff: float,
) -> NDArray[np.float64]:
    """
    Designs a square-root raised-cosine (SRRC) pulse-shaping filter.

    Args:
        num_taps: Number of taps (>= 1). Taps are centered on (num_taps - 1) / 2.
        sample_rate: Sampling rate (Hz).
        baud: Symbol rate (symbols per second).
        rolloff: Excess bandwidth factor, 0 <= rolloff <= 1.

    Returns:
        The SRRC taps (float64). They are not normalized.

    Raises:
        InvalidParameter: On non-positive rates or a rolloff outside [0, 1].
    """
    _check_num_taps(num_taps)
    if sample_rate <= 0 or baud <= 0:
        raise InvalidParameter(f"sample_rate and baud must be positive, got {sample_rate} and {baud}.")
    if not 0.0 <= rolloff <= 1.0:
        raise InvalidParameter(f"rolloff must be within [0, 1], got {rolloff}.")

    logger.debug(f"Designing {num_taps}-tap SRRC: fs={sample_rate}, baud={baud}, rolloff={rolloff}")
    pi = np.pi
    four_beta = 4.0 * rolloff
    t = (np.arange(num_taps, dtype=np.float64) - (num_taps - 1) / 2.0) / sample_rate
    taps = np.empty(num_taps, dtype=np.float64)

    # Singular point of the closed form: |t| == 1 / (4 * baud * rolloff)
    singular_t = 1.0 / (baud * four_beta) if rolloff > 0 else math.inf
    for i, ti in enumerate(t):
        if ti == 0:
            taps[i] = baud * (1.0 + rolloff * (4.0 / pi - 1.0))
        elif math.isclose(abs(ti), singular_t, rel_tol=1e-12):
            taps[i] = rolloff * baud / math.sqrt(2.0) * (
                (1.0 + 2.0 / pi) * math.sin(pi / four_beta)
                + (1.0 - 2.0 / pi) * math.cos(pi / four_beta)
            )
        else:
            tb = ti * baud
            taps[i] = baud * (
                math.sin(pi * tb * (1.0 - rolloff)) + four_beta * tb * math.cos(pi * tb * (1.0 + rolloff))
            ) / (pi * tb * (1.0 - (four_beta * tb) ** 2))
    return taps


def design_filter(
    method: Union[str, DesignMethod],
    num_taps: int,
    bandwidth: Optional[float] = None,
) -> FilterCoefficients:
    """
    Designs an FIR filter with the requested method.

    Args:
        method: DesignMethod or its name ('moving average', 'bartlett',
                'hamming', 'hann').
        num_taps: Number of taps (>= 1).
        bandwidth: Normalized bandwidth; required for the windowed methods,
                   ignored by the moving average.

    Returns:
        A FilterCoefficients record (FIR, empty denominator).

    Raises:
        InvalidParameter: On invalid tap count or bandwidth.
        UnsupportedDesign: On an unknown method.
    """
    design_method = DesignMethod.parse(method)
    if design_method is DesignMethod.MOVING_AVERAGE:
        taps = design_moving_average(num_taps)
        return FilterCoefficients(numerator=taps, method=design_method)

    taps = design_windowed_sinc(num_taps, design_method.window, bandwidth)
    return FilterCoefficients(numerator=taps, method=design_method, bandwidth=float(bandwidth))
