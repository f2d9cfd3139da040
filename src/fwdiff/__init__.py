from . import function
from .autodiff import deriv, grad
from .dual import Context, DualNumber, getcontext, localcontext, setcontext
from .errors import (
    DimensionMismatch,
    DivisionByZero,
    DomainError,
    DualNumberError,
    IndexOutOfRange,
)
from .function import (
    abs,
    arccos,
    arcsin,
    arctan,
    cos,
    exp,
    log,
    pow,
    sin,
    sqrt,
    tan,
)

__all__ = [
    "function",
    "deriv",
    "grad",
    "Context",
    "DualNumber",
    "getcontext",
    "localcontext",
    "setcontext",
    "DimensionMismatch",
    "DivisionByZero",
    "DomainError",
    "DualNumberError",
    "IndexOutOfRange",
    "abs",
    "arccos",
    "arcsin",
    "arctan",
    "cos",
    "exp",
    "log",
    "pow",
    "sin",
    "sqrt",
    "tan",
]
