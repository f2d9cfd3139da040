"""
###############################################
Mathematical functions (:mod:`fwdiff.function`)
###############################################

.. currentmodule:: fwdiff.function

This module provides elementary functions. Each one accepts plain scalars as well
as :class:`~fwdiff.dual.DualNumber`, in which case the derivatives are propagated by
the chain rule.

Trigonometric functions
=======================

.. autosummary::
    :toctree: generated/

    sin
    cos
    tan
    arcsin
    arccos
    arctan

Power, exponents, and logarithmic functions
===========================================

.. autosummary::
    :toctree: generated/

    abs
    exp
    log
    pow
    sqrt

"""

import builtins
import math
import numbers
from typing import Any, overload

import mpmath
import mpmath.ctx_mp_python
import numpy as np

from fwdiff.autodiff import _defderiv, _primitive
from fwdiff.dual import DualNumber, realpart
from fwdiff.errors import DomainError
from fwdiff.logger import fwdiff_logger


def _domainerror(name: str, x: Any, reason: str) -> DomainError:
    fwdiff_logger.debug("%s rejected %r: %s", name, x, reason)
    return DomainError(f"{name}: {reason} (got {x})")


def _isinteger(value: Any) -> bool:
    match value:
        case numbers.Integral():
            return True

        case mpmath.ctx_mp_python.mpnumeric():
            return bool(mpmath.isint(value))

        case numbers.Real():
            return float(value).is_integer()

    return False


@overload
def sin[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def sin(x: float | int, /) -> float: ...


@overload
def sin(x: Any, /) -> Any: ...


@_primitive
def sin(x, /):
    """Sine.

    Examples
    --------
    >>> print(format(sin(1.0), ".6f"))
    0.841471
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sin(x)

        case np.generic():
            return np.sin(x)

        case numbers.Real():
            return math.sin(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def cos[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def cos(x: float | int, /) -> float: ...


@overload
def cos(x: Any, /) -> Any: ...


@_primitive
def cos(x, /):
    """Cosine.

    Examples
    --------
    >>> print(format(cos(1.0), ".6f"))
    0.540302
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.cos(x)

        case np.generic():
            return np.cos(x)

        case numbers.Real():
            return math.cos(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def tan[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def tan(x: float | int, /) -> float: ...


@overload
def tan(x: Any, /) -> Any: ...


@_primitive
def tan(x, /):
    """Tangent.

    Raises
    ------
    DomainError
        If the cosine of `x` is exactly zero.
    """
    if cos(x) == 0:
        raise _domainerror("tan", x, "cosine of the argument is zero")

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.tan(x)

        case np.generic():
            return np.tan(x)

        case numbers.Real():
            return math.tan(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def arcsin[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def arcsin(x: float | int, /) -> float: ...


@overload
def arcsin(x: Any, /) -> Any: ...


@_primitive
def arcsin(x, /):
    """Inverse sine.

    Raises
    ------
    DomainError
        If `x` is not in :math:`[-1, 1]`. For a dual number, also if its value is
        :math:`\\pm 1`, where the derivative is unbounded.

    Examples
    --------
    >>> x = arcsin(DualNumber(0.5, [1.0]))
    >>> print(format(x, ".6f"))
    Value: 0.523599, Derivatives: [1.154701]
    """
    if not -1 <= x <= 1:
        raise _domainerror("arcsin", x, "argument must lie in [-1, 1]")

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.asin(x)

        case np.generic():
            return np.arcsin(x)

        case numbers.Real():
            return math.asin(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def arccos[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def arccos(x: float | int, /) -> float: ...


@overload
def arccos(x: Any, /) -> Any: ...


@_primitive
def arccos(x, /):
    """Inverse cosine.

    Raises
    ------
    DomainError
        If `x` is not in :math:`[-1, 1]`. For a dual number, also if its value is
        :math:`\\pm 1`, where the derivative is unbounded.
    """
    if not -1 <= x <= 1:
        raise _domainerror("arccos", x, "argument must lie in [-1, 1]")

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.acos(x)

        case np.generic():
            return np.arccos(x)

        case numbers.Real():
            return math.acos(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def arctan[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def arctan(x: float | int, /) -> float: ...


@overload
def arctan(x: Any, /) -> Any: ...


@_primitive
def arctan(x, /):
    """Inverse tangent."""
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.atan(x)

        case np.generic():
            return np.arctan(x)

        case numbers.Real():
            return math.atan(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def abs[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def abs[T: numbers.Real](x: T, /) -> T: ...


@overload
def abs(x: Any, /) -> Any: ...


@_primitive
def abs(x, /):
    """Absolute value.

    The derivative is the sign of the value, so it does not exist at zero.

    Raises
    ------
    DomainError
        If `x` is a dual number whose value is zero.

    Examples
    --------
    >>> print(abs(DualNumber(-3.0, [-4.0])))
    Value: 3.0, Derivatives: [4.0]
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric() | numbers.Number():
            return builtins.abs(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def exp[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def exp(x: float | int, /) -> float: ...


@overload
def exp(x: Any, /) -> Any: ...


@_primitive
def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    """
    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.exp(x)

        case np.generic():
            return np.exp(x)

        case numbers.Real():
            return math.exp(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def log[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def log(x: float | int, /) -> float: ...


@overload
def log(x: Any, /) -> Any: ...


@_primitive
def log(x, /):
    """Natural logarithm.

    Raises
    ------
    DomainError
        If `x` is not positive.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    """
    if x <= 0:
        raise _domainerror("log", x, "argument must be positive")

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.log(x)

        case np.generic():
            return np.log(x)

        case numbers.Real():
            return math.log(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


@overload
def pow[T](x: DualNumber[T], y: T | int | float, /) -> DualNumber[T]: ...


@overload
def pow(x: int, y: int, /) -> int | float: ...


@overload
def pow(x: float | int, y: float | int, /) -> float: ...


@overload
def pow(x: Any, y: Any, /) -> Any: ...


@_primitive
def pow(x, y, /):
    """`x` raised to the power `y`.

    Only `x` may be a dual number; the exponent is a fixed scalar. An integer
    exponent on an integer or fraction is computed exactly.

    Raises
    ------
    DomainError
        If `x` is negative and `y` is not an integer, or `x` is zero and `y` is
        negative. For a dual number, also if its value is zero and ``0 < y < 1``
        or ``y < 0``, where the derivative is unbounded.
    TypeError
        If `y` is a dual number.

    Examples
    --------
    >>> print(pow(DualNumber(5, 1), 2))
    Value: 25, Derivatives: [10]
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    if x < 0 and not _isinteger(y):
        raise _domainerror("pow", x, f"negative base with non-integer exponent {y}")

    if x == 0 and y < 0:
        raise _domainerror("pow", x, f"zero base with negative exponent {y}")

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mpmath.power(x, y)

        case (np.integer(), numbers.Integral()) | (
            numbers.Integral(),
            np.integer(),
        ) if y < 0:
            # numpy refuses negative powers of integers
            return np.power(np.float64(x), y)

        case (np.generic(), _) | (_, np.generic()):
            return np.power(x, y)

        case (numbers.Rational(), numbers.Integral()):
            return x**y

        case (numbers.Real(), numbers.Real()):
            return math.pow(x, y)

        case _:
            raise TypeError(
                f"unsupported operand types: {type(x).__name__!r}, {type(y).__name__!r}"
            )


@overload
def sqrt[T](x: DualNumber[T], /) -> DualNumber[T]: ...


@overload
def sqrt(x: float | int, /) -> float: ...


@overload
def sqrt(x: Any, /) -> Any: ...


@_primitive
def sqrt(x, /):
    """Square root.

    Raises
    ------
    DomainError
        If `x` is negative. For a dual number, also if its value is zero.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    if x < 0:
        raise _domainerror("sqrt", x, "argument must be non-negative")

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mpmath.sqrt(x)

        case np.generic():
            return np.sqrt(x)

        case numbers.Real():
            return math.sqrt(x)

        case _:
            raise TypeError(f"unsupported operand type: {type(x).__name__!r}")


def _abs_deriv(x):
    if (r := realpart(x)) == 0:
        raise _domainerror("abs", x, "derivative does not exist at zero")

    ONE = x * 0 + 1
    return ONE if r > 0 else -ONE


def _arcsin_deriv(x):
    if builtins.abs(realpart(x)) == 1:
        raise _domainerror("arcsin", x, "derivative is unbounded at +-1")

    return 1 / sqrt(1 - x**2)


def _arccos_deriv(x):
    if builtins.abs(realpart(x)) == 1:
        raise _domainerror("arccos", x, "derivative is unbounded at +-1")

    return -1 / sqrt(1 - x**2)


def _pow_deriv(x, y):
    if y == 0:
        return x * 0

    if realpart(x) == 0 and y < 1:
        raise _domainerror("pow", x, f"derivative is unbounded for exponent {y}")

    return y * pow(x, y - 1)


def _sqrt_deriv(x):
    if realpart(x) == 0:
        raise _domainerror("sqrt", x, "derivative is unbounded at zero")

    return 1 / (2 * sqrt(x))


_defderiv(sin, cos)
_defderiv(cos, lambda x: -sin(x))
_defderiv(tan, lambda x: 1 / cos(x) ** 2)
_defderiv(arcsin, _arcsin_deriv)
_defderiv(arccos, _arccos_deriv)
_defderiv(arctan, lambda x: 1 / (1 + x**2))
_defderiv(abs, _abs_deriv)
_defderiv(exp, exp)
_defderiv(log, lambda x: 1 / x)
_defderiv(pow, _pow_deriv)
_defderiv(sqrt, _sqrt_deriv)
