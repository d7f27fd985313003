# firflow/__init__.py

"""
firflow: streaming FIR filter design and direct-form convolution.
"""

from .version import __version__

__all__ = ["__version__"]
