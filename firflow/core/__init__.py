# firflow/core/__init__.py

"""
Core filtering package for firflow.

Contains modules for:
- Direct linear convolution (sequential and thread-pool kernels)
- Window functions
- FIR filter design (moving average, windowed sinc, root raised cosine)
- Streaming (block-wise) filtering with carried state
- The shared error taxonomy
"""

from . import errors
from . import convolution
from . import parallel
from . import windows
from . import design
from . import streaming

from .errors import FirflowError, InvalidParameter, UnsupportedDesign, DimensionMismatch, InvalidInput
from .convolution import convolve, convolve_real_complex
from .parallel import ParallelConvolver
from .windows import WindowType, compute_window
from .design import (
    DesignMethod, FilterKind, FilterCoefficients,
    design_filter, design_moving_average, design_windowed_sinc, design_root_raised_cosine,
)
from .streaming import StreamingFilter, FirFilter

__all__ = [
    "errors",
    "convolution",
    "parallel",
    "windows",
    "design",
    "streaming",
    "FirflowError",
    "InvalidParameter",
    "UnsupportedDesign",
    "DimensionMismatch",
    "InvalidInput",
    "convolve",
    "convolve_real_complex",
    "ParallelConvolver",
    "WindowType",
    "compute_window",
    "DesignMethod",
    "FilterKind",
    "FilterCoefficients",
    "design_filter",
    "design_moving_average",
    "design_windowed_sinc",
    "design_root_raised_cosine",
    "StreamingFilter",
    "FirFilter",
]
