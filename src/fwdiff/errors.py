"""
#############################
Errors (:mod:`fwdiff.errors`)
#############################

.. currentmodule:: fwdiff.errors

Exceptions raised by dual-number arithmetic and the function library. Each one
also derives from the closest builtin exception, so ``except ValueError`` and
friends keep working.

.. autosummary::
    :toctree: generated/

    DualNumberError
    DivisionByZero
    DomainError
    IndexOutOfRange
    DimensionMismatch

"""


class DualNumberError(Exception):
    """Base class of the exceptions raised by :mod:`fwdiff`."""


class DivisionByZero(DualNumberError, ZeroDivisionError):
    """The real part of a divisor is zero."""


class DomainError(DualNumberError, ValueError):
    """An argument lies outside the domain of a function or of its derivative."""


class IndexOutOfRange(DualNumberError, IndexError):
    """A derivative index is not in ``range(n)``."""


class DimensionMismatch(DualNumberError, ValueError):
    """Derivative vectors of different lengths were combined."""
