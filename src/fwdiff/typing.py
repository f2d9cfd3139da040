"""
#############################
Typing (:mod:`fwdiff.typing`)
#############################

This module provides the protocols that bound the coefficient type of
:class:`~fwdiff.dual.DualNumber`.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self, SupportsAbs


class Scalar(Protocol):
    """Field-like coefficient.

    The product and quotient rules need the four arithmetic operations, in both
    operand orders, mixed with integers (derivative seeds are built as ``x * 0 + 1``).
    Integer powers are used by the quotient rule and :func:`fwdiff.function.pow`.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __pow__(self, rhs: int) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...

    @abstractmethod
    def __pos__(self) -> Self: ...


class ComparableScalar(Scalar, SupportsAbs, Protocol):
    """Totally ordered :class:`Scalar`, like a real number.

    Ordering drives the lexicographic comparison of dual numbers, the zero-divisor
    check and the domain checks of the function library; ``abs`` is needed by
    :meth:`~fwdiff.dual.DualNumber.isclose`.
    """

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self | int) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self | int) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self | int) -> bool: ...

    @abstractmethod
    def __ge__(self, rhs: Self | int) -> bool: ...
