"""
##################################################
Automatic differentiation (:mod:`fwdiff.autodiff`)
##################################################

.. currentmodule:: fwdiff.autodiff

This module provides forward-mode differential operators built on
:class:`~fwdiff.dual.DualNumber`.

.. autosummary::
    :toctree: generated/

    deriv
    grad

"""

import functools
from collections.abc import Callable
from typing import Any

from fwdiff.dual import DualNumber
from fwdiff.logger import fwdiff_logger


def deriv[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Return a function that evaluates the derivative of the univariate scalar-valued
    function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.

    Returns
    -------
    Callable
        Derivative of `fun`.

    Warnings
    --------
    Branches of `fun` that compare dual numbers follow the lexicographic order of
    :class:`~fwdiff.dual.DualNumber`, so the derivative is that of the branch taken.

    Examples
    --------
    This example computes a value of the derivative.

    >>> from fwdiff import function as fdf
    >>> f = lambda x: x**2 + fdf.sqrt(x + 3)
    >>> df = deriv(f)
    >>> print(format(df(1.2), ".6g"))
    2.64398

    The second-order derivative can be obtained in the same manner.

    >>> ddf = deriv(df)
    >>> print(format(ddf(1.2), ".6g"))
    1.97096
    """

    def result(*args, **kwargs):
        seeds = _seed(fun, args)
        tmp: Any = fun(*seeds, **kwargs)  # type: ignore

        if _isconstant(tmp, seeds[0]):
            fwdiff_logger.warning("%s does not depend on its argument", fun)
            return args[0] * 0

        return tmp.derivatives[0]

    return result


def grad[T, **P](fun: Callable[P, T]) -> Callable[P, tuple[T, ...]]:
    """Return a function that evaluates the gradient of the multivariate scalar-valued
    function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.

    Returns
    -------
    Callable
        Gradient of `fun`.

    Examples
    --------
    >>> from fwdiff import function as fdf
    >>> f = lambda x, y: fdf.sqrt(x * y + 3)
    >>> df = grad(f)
    >>> c0 = df(0.5, 1.0)
    >>> print(format(c0[0], ".6g"), format(c0[1], ".6g"))
    0.267261 0.133631
    """

    def result(*args, **kwargs):
        seeds = _seed(fun, args)
        tmp: Any = fun(*seeds, **kwargs)  # type: ignore

        if _isconstant(tmp, seeds[0]):
            fwdiff_logger.warning("%s does not depend on its arguments", fun)
            return tuple(x * 0 for x in args)

        return tmp.derivatives

    return result


def _seed(fun: Callable, args: tuple) -> tuple[DualNumber, ...]:
    if not args:
        raise TypeError(f"{fun} needs at least one argument to differentiate")

    return DualNumber.variables(*args)


def _isconstant(value: Any, seed: DualNumber) -> bool:
    return not isinstance(value, DualNumber) or value.level < seed.level


def _defderiv[**P](fun: Callable[P, Any], deriv: Callable[P, Any]) -> None:
    if "_fwdiff_is_primitive" not in fun.__dict__:
        raise ValueError(f"{fun.__name__} is not a primitive")

    fun.__dict__["_fwdiff_deriv"] = deriv


def _primitive[T, **P](fun: Callable[P, T]) -> Callable[P, T]:
    """Lift a scalar function of its first argument to dual numbers.

    The derivative must be registered afterwards with :func:`_defderiv`. It is
    evaluated at the value of the argument and may itself raise when the derivative
    does not exist there.
    """

    @functools.wraps(fun)
    def wrapper(x, /, *args):
        if any(isinstance(arg, DualNumber) for arg in args):
            raise TypeError(f"{fun.__name__}() is differentiable in x only")

        if not isinstance(x, DualNumber):
            return fun(x, *args)

        real = wrapper(x.value, *args)
        slope = wrapper.__dict__["_fwdiff_deriv"](x.value, *args)
        return DualNumber(real, (slope * dx for dx in x.derivatives))

    wrapper.__dict__["_fwdiff_is_primitive"] = True
    return wrapper  # type: ignore
