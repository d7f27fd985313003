# firflow/core/errors.py

"""
Exception taxonomy shared by the filtering core.

All errors derive from ValueError as well as FirflowError, so callers that
already guard numeric routines with `except ValueError` keep working.
"""


class FirflowError(Exception):
    """Base class for all firflow errors."""


class InvalidParameter(FirflowError, ValueError):
    """A design or construction parameter is out of range (e.g. tap count < 1)."""


class UnsupportedDesign(FirflowError, ValueError):
    """The requested design method or window type is not implemented."""


class DimensionMismatch(FirflowError, ValueError):
    """Operand lengths do not satisfy the shape contract of an operation."""


class InvalidInput(FirflowError, ValueError):
    """An input sequence is empty or not one-dimensional."""
