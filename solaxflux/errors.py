"""
Exceptions raised by the flux integrators and table helpers.
"""


class SolaxfluxError(Exception):
    """Base class for all solaxflux errors."""


class RangeError(SolaxfluxError, ValueError):
    """Requested bounds fall outside a table's or model's valid domain."""


class NumericalFailure(SolaxfluxError, ArithmeticError):
    """Catastrophic numerical failure, e.g. a non-finite integrand."""


class IOFailure(SolaxfluxError, OSError):
    """A table file could not be read or written."""


__all__ = ['SolaxfluxError', 'RangeError', 'NumericalFailure', 'IOFailure']
