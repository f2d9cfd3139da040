"""
#################################
Dual numbers (:mod:`fwdiff.dual`)
#################################

.. currentmodule:: fwdiff.dual

This module provides the dual number type used for forward-mode automatic
differentiation.

Dual number
===========

.. autosummary::
    :toctree: generated/

    DualNumber
    realpart

Context
=======

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

"""

import contextlib
import contextvars
import numbers
import operator
from collections.abc import Iterable
from typing import Any, Self

import mpmath.ctx_mp_python

from fwdiff import function as fdf
from fwdiff.errors import DimensionMismatch, DivisionByZero, IndexOutOfRange
from fwdiff.logger import fwdiff_logger
from fwdiff.typing import ComparableScalar


class Context:
    """Create a new context.

    The context holds the tolerances used by :meth:`DualNumber.isclose` when they
    are not passed explicitly. Exact comparison (``==``) never reads it.

    Parameters
    ----------
    rel_tol : default=0.0
        Relative tolerance.
    abs_tol : default=1e-9
        Absolute tolerance.
    """

    __slots__ = ("_rel_tol", "_abs_tol")
    _rel_tol: Any
    _abs_tol: Any

    def __init__(self, rel_tol: Any = 0.0, abs_tol: Any = 1e-9):
        if rel_tol < 0 or abs_tol < 0:
            raise ValueError("tolerances must be non-negative")

        self._rel_tol = rel_tol
        self._abs_tol = abs_tol

    @property
    def rel_tol(self) -> Any:
        return self._rel_tol

    @property
    def abs_tol(self) -> Any:
        return self._abs_tol

    def copy(self) -> Self:
        return self.__class__(self._rel_tol, self._abs_tol)

    def __str__(self):
        return f"{type(self).__name__}(rel_tol={self._rel_tol}, abs_tol={self._abs_tol})"

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("fwdiff")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None, *, rel_tol: Any = None, abs_tol: Any = None
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> x = DualNumber(1.0, [2.0])
    >>> x.isclose(DualNumber(1.001, [2.0]))
    False
    >>> with localcontext(abs_tol=1e-2):
    ...     x.isclose(DualNumber(1.001, [2.0]))
    True
    """
    if ctx is None:
        ctx = getcontext()

    if rel_tol is None:
        rel_tol = ctx._rel_tol

    if abs_tol is None:
        abs_tol = ctx._abs_tol

    ctx = Context(rel_tol, abs_tol)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)


def realpart(x: Any) -> Any:
    """Return the innermost value of `x`, descending through nested dual numbers.

    Plain scalars are returned as they are. Domain checks of the function library
    look at this value.
    """
    while isinstance(x, DualNumber):
        x = x.value

    return x


def _isscalar(value: object) -> bool:
    return isinstance(value, numbers.Number | mpmath.ctx_mp_python.mpnumeric)


def _isclose(x: Any, y: Any, rel_tol: Any, abs_tol: Any) -> bool:
    if isinstance(x, DualNumber):
        return x.isclose(y, rel_tol=rel_tol, abs_tol=abs_tol)

    if isinstance(y, DualNumber):
        return y.isclose(x, rel_tol=rel_tol, abs_tol=abs_tol)

    if x == y:
        return True

    return abs(x - y) <= max(rel_tol * max(abs(x), abs(y)), abs_tol)


class DualNumber[T: ComparableScalar]:
    r"""Dual number carrying a value and its partial derivatives.

    Parameters
    ----------
    value : T, default=0
    derivatives : Iterable[T] | T | None, default=None
        Either the whole derivative vector, or a single derivative that is stored at
        index 0 while the remaining components are zero. If omitted, all derivatives
        are zero.
    n : int | None, default=None
        Number of variables. Required only when `derivatives` is not a vector and
        more than one variable is tracked.

    Attributes
    ----------
    value : T
    derivatives : tuple[T, ...]
    n : int
    level : int

    Raises
    ------
    DimensionMismatch
        If `n` disagrees with the length of `derivatives`, or no derivative is
        tracked at all.

    Notes
    -----
    Instances behave like elements of the ring

    .. math::

        T[\varepsilon_1,\dotsc,\varepsilon_n]/(\varepsilon_i\varepsilon_j\mid
        i,j\in\{1,\dotsc,n\}).

    If `value` is itself a dual number, the instance is one level deeper than
    `value`, and dual numbers of a lower level are treated as scalars. Nesting is
    how higher-order derivatives are computed (cf. :func:`fwdiff.autodiff.deriv`).

    Operators never modify their operands. Equality is exact, component by
    component; use :meth:`isclose` to compare with a tolerance. Ordering is
    lexicographic over ``(value, derivatives[0], ..., derivatives[n - 1])``.

    Examples
    --------
    >>> x, y = DualNumber.variables(2, 3)
    >>> z = x * y + x
    >>> print(z)
    Value: 8, Derivatives: [4, 2]
    """

    __slots__ = ("_value", "_derivatives", "_level")
    _value: T
    _derivatives: tuple[T, ...]
    _level: int

    def __init__(
        self,
        value: T = 0,  # type: ignore
        derivatives: Iterable[T] | T | None = None,
        *,
        n: int | None = None,
    ):
        if n is not None and n < 1:
            raise DimensionMismatch("at least one derivative must be tracked")

        zero = value * 0

        if derivatives is None:
            imag = (zero,) * (1 if n is None else n)
        elif isinstance(derivatives, Iterable):
            imag = tuple(derivatives)

            if n is not None and len(imag) != n:
                raise DimensionMismatch(
                    f"expected {n} derivatives, got {len(imag)}"
                )
        else:
            imag = (derivatives,) + (zero,) * ((1 if n is None else n) - 1)

        if len(imag) == 0:
            raise DimensionMismatch("at least one derivative must be tracked")

        self._value = value
        self._derivatives = imag
        self._level = (value._level + 1) if isinstance(value, DualNumber) else 1

    @classmethod
    def constant(cls, value: T, n: int = 1) -> Self:
        """Return a dual number whose derivatives are all zero."""
        return cls(value, n=n)

    @classmethod
    def variable(cls, value: T, index: int, n: int) -> Self:
        """Return the `index`-th of `n` independent variables.

        Raises
        ------
        IndexOutOfRange
            If `index` is not in ``range(n)``.
        """
        if not 0 <= index < n:
            raise IndexOutOfRange(f"variable index {index} is out of range for n={n}")

        ZERO = value * 0
        ONE = ZERO + 1
        return cls(value, (ONE if i == index else ZERO for i in range(n)))

    @classmethod
    def variables(cls, *args: T) -> tuple[Self, ...]:
        """Return independent variables, one per argument.

        Examples
        --------
        >>> x, y = DualNumber.variables(1.0, 2.0)
        >>> x.derivatives, y.derivatives
        ((1.0, 0.0), (0.0, 1.0))
        """
        result: list[Self] = []

        for argnum, arg in enumerate(args):
            ZERO = arg * 0
            ONE = ZERO + 1
            imag = (ONE if i == argnum else ZERO for i in range(len(args)))
            result.append(cls(arg, imag))

        return tuple(result)

    @property
    def value(self) -> T:
        return self._value

    @property
    def derivatives(self) -> tuple[T, ...]:
        return self._derivatives

    @property
    def n(self) -> int:
        """Number of tracked variables."""
        return len(self._derivatives)

    @property
    def level(self) -> int:
        """Nesting depth; 1 unless `value` is itself a dual number."""
        return self._level

    def get_value(self) -> T:
        return self._value

    def get_derivative(self, index: int = 0) -> T:
        """Return the partial derivative with respect to the `index`-th variable.

        Raises
        ------
        IndexOutOfRange
            If `index` is not in ``range(n)``.
        """
        return self._derivatives[self._checkindex(index)]

    def set_value(self, value: T) -> None:
        self._value = value
        self._level = (value._level + 1) if isinstance(value, DualNumber) else 1

    def set_derivative(self, index: int, value: T) -> None:
        """Replace the `index`-th derivative.

        Raises
        ------
        IndexOutOfRange
            If `index` is not in ``range(n)``.
        """
        index = self._checkindex(index)
        imag = list(self._derivatives)
        imag[index] = value
        self._derivatives = tuple(imag)

    def set_all_derivatives(self, derivatives: Iterable[T]) -> None:
        """Replace the whole derivative vector.

        Raises
        ------
        DimensionMismatch
            If the length of `derivatives` differs from `n`.
        """
        imag = tuple(derivatives)

        if len(imag) != len(self._derivatives):
            raise DimensionMismatch(
                f"expected {len(self._derivatives)} derivatives, got {len(imag)}"
            )

        self._derivatives = imag

    def isclose(
        self, other: Self | T | int, *, rel_tol: Any = None, abs_tol: Any = None
    ) -> bool:
        """Return ``True`` if every component is close to the one of `other`.

        Tolerances that are not given are taken from :func:`getcontext`.
        """
        ctx = getcontext()
        rel_tol = ctx.rel_tol if rel_tol is None else rel_tol
        abs_tol = ctx.abs_tol if abs_tol is None else abs_tol

        if (rhs := self._coerce(other)) is None:
            raise TypeError(f"cannot compare with {type(other).__name__!r}")

        pairs = zip(self._components(), rhs._components())
        return all(_isclose(x, y, rel_tol, abs_tol) for x, y in pairs)

    def _checkindex(self, index: int) -> int:
        index = operator.index(index)

        if not 0 <= index < len(self._derivatives):
            fwdiff_logger.debug("derivative index %d rejected (n=%d)", index, self.n)
            raise IndexOutOfRange(
                f"derivative index {index} is out of range for n={self.n}"
            )

        return index

    def _coerce(self, other: object) -> Self | None:
        if isinstance(other, DualNumber):
            if other._level > self._level:
                return None

            if other._level == self._level:
                if len(other._derivatives) != len(self._derivatives):
                    raise DimensionMismatch(
                        f"cannot combine n={self.n} with n={other.n}"
                    )

                return other  # type: ignore
        elif not _isscalar(other):
            return None

        ZERO = self._value * 0
        value = other if self._level == 1 else ZERO + other
        return self.__class__(value, (ZERO,) * len(self._derivatives))  # type: ignore

    def _components(self) -> tuple:
        return (self._value, *self._derivatives)

    def __repr__(self) -> str:
        imag = list(self._derivatives)
        return f"{type(self).__name__}(value={self._value!r}, derivatives={imag!r})"

    def __str__(self) -> str:
        imag = (", ").join(str(x) for x in self._derivatives)
        return f"Value: {self._value}, Derivatives: [{imag}]"

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)

        imag = (", ").join(format(x, format_spec) for x in self._derivatives)
        return f"Value: {format(self._value, format_spec)}, Derivatives: [{imag}]"

    def __eq__(self, other: object) -> bool:
        try:
            rhs = self._coerce(other)
        except DimensionMismatch:
            return False

        if rhs is None:
            return NotImplemented

        return self._components() == rhs._components()

    def __lt__(self, rhs: Self | T | int) -> bool:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        return self._components() < tmp._components()

    def __le__(self, rhs: Self | T | int) -> bool:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        return self._components() <= tmp._components()

    def __gt__(self, rhs: Self | T | int) -> bool:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        return self._components() > tmp._components()

    def __ge__(self, rhs: Self | T | int) -> bool:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        return self._components() >= tmp._components()

    __hash__ = None  # type: ignore

    def __add__(self, rhs: Self | T | int) -> Self:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        imag = (x + y for x, y in zip(self._derivatives, tmp._derivatives))
        return self.__class__(self._value + tmp._value, imag)

    def __sub__(self, rhs: Self | T | int) -> Self:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        imag = (x - y for x, y in zip(self._derivatives, tmp._derivatives))
        return self.__class__(self._value - tmp._value, imag)

    def __mul__(self, rhs: Self | T | int) -> Self:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        a, b = self._value, tmp._value
        imag = (a * y + x * b for x, y in zip(self._derivatives, tmp._derivatives))
        return self.__class__(a * b, imag)

    def __truediv__(self, rhs: Self | T | int) -> Self:
        if (tmp := self._coerce(rhs)) is None:
            return NotImplemented

        a, b = self._value, tmp._value

        if realpart(b) == 0:
            fwdiff_logger.debug("division of %s by a zero-valued dual number", self)
            raise DivisionByZero(f"divisor has value {b}")

        s = b**2
        imag = ((x * b - y * a) / s for x, y in zip(self._derivatives, tmp._derivatives))
        return self.__class__(a / b, imag)

    def __pow__(self, rhs: T | int) -> Self:
        if isinstance(rhs, DualNumber) or not _isscalar(rhs):
            return NotImplemented

        return fdf.pow(self, rhs)

    def __neg__(self) -> Self:
        return self.__class__(-self._value, (-x for x in self._derivatives))

    def __pos__(self) -> Self:
        return self.__class__(+self._value, (+x for x in self._derivatives))

    def __abs__(self) -> Self:
        return fdf.abs(self)

    def __radd__(self, lhs: Self | T | int) -> Self:
        if (tmp := self._coerce(lhs)) is None:
            return NotImplemented

        return tmp.__add__(self)

    def __rsub__(self, lhs: Self | T | int) -> Self:
        if (tmp := self._coerce(lhs)) is None:
            return NotImplemented

        return tmp.__sub__(self)

    def __rmul__(self, lhs: Self | T | int) -> Self:
        if (tmp := self._coerce(lhs)) is None:
            return NotImplemented

        return tmp.__mul__(self)

    def __rtruediv__(self, lhs: Self | T | int) -> Self:
        if (tmp := self._coerce(lhs)) is None:
            return NotImplemented

        return tmp.__truediv__(self)
