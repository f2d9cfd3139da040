import logging
import operator
import threading

import pytest

from fwdiff.dual import Context, DualNumber, getcontext, localcontext, setcontext
from fwdiff.errors import (
    DimensionMismatch,
    DivisionByZero,
    DualNumberError,
    IndexOutOfRange,
)

OPERATORS = [operator.add, operator.sub, operator.mul, operator.truediv]


def test_construction():
    x = DualNumber()
    assert x.value == 0 and x.derivatives == (0,)

    x = DualNumber(3.0)
    assert x.value == 3.0 and x.derivatives == (0.0,)

    x = DualNumber(3.0, 2.0, n=3)
    assert x.derivatives == (2.0, 0.0, 0.0)

    x = DualNumber(2, [3, 4, 5])
    assert x.n == 3 and x.level == 1

    x = DualNumber.constant(1.5, 2)
    assert x.derivatives == (0.0, 0.0)


def test_construction_rejects_bad_lengths():
    with pytest.raises(DimensionMismatch):
        DualNumber(1.0, [1.0, 2.0], n=3)

    with pytest.raises(DimensionMismatch):
        DualNumber(1.0, [])

    with pytest.raises(DimensionMismatch):
        DualNumber(1.0, n=0)


def test_variables():
    x = DualNumber.variable(2.0, 1, 3)
    assert x.derivatives == (0.0, 1.0, 0.0)

    with pytest.raises(IndexOutOfRange):
        DualNumber.variable(2.0, 3, 3)

    x, y, z = DualNumber.variables(1, 2, 3)
    assert x.derivatives == (1, 0, 0)
    assert y.derivatives == (0, 1, 0)
    assert z.derivatives == (0, 0, 1)


def test_accessors():
    x = DualNumber(2.0, [3.0, 4.0, 5.0])
    assert x.get_value() == 2.0
    assert x.get_derivative() == 3.0
    assert x.get_derivative(2) == 5.0

    with pytest.raises(IndexOutOfRange):
        x.get_derivative(3)

    with pytest.raises(IndexOutOfRange):
        x.get_derivative(-1)

    with pytest.raises(TypeError):
        x.get_derivative(1.0)  # type: ignore


def test_mutators():
    x = DualNumber(2.0, [3.0, 4.0, 5.0])
    x.set_value(1.0)
    x.set_derivative(1, 7.0)
    assert x == DualNumber(1.0, [3.0, 7.0, 5.0])

    with pytest.raises(IndexOutOfRange):
        x.set_derivative(5, 0.0)

    x.set_all_derivatives([0.0, 0.0, 1.0])
    assert x.derivatives == (0.0, 0.0, 1.0)

    with pytest.raises(DimensionMismatch):
        x.set_all_derivatives([1.0, 2.0])

    assert x.derivatives == (0.0, 0.0, 1.0)


def test_arithmetic():
    a = DualNumber(5.0, 1.0)
    b = DualNumber(3.0, 1.0)

    assert a + b == DualNumber(8.0, 2.0)
    assert a - b == DualNumber(2.0, 0.0)
    assert a * b == DualNumber(15.0, 8.0)

    c = a / b
    assert c.value == 5.0 / 3.0
    assert c.get_derivative() == -2.0 / 9.0


def test_arithmetic_multivariate():
    x, y = DualNumber.variables(2.0, 3.0)
    z = x * y / (x + y) - 1
    assert z.value == pytest.approx(0.2)
    assert z.get_derivative(0) == pytest.approx(9 / 25)
    assert z.get_derivative(1) == pytest.approx(4 / 25)


def test_operands_are_not_modified():
    a = DualNumber(5.0, [1.0, 2.0])
    b = DualNumber(3.0, [0.5, 0.0])
    _ = a * b, a / b, -a, a - 2

    assert a == DualNumber(5.0, [1.0, 2.0])
    assert b == DualNumber(3.0, [0.5, 0.0])


@pytest.mark.parametrize("op", OPERATORS)
@pytest.mark.parametrize("s", [0.7, -2, 3.25])
def test_scalar_promotion(op, s):
    a = DualNumber(1.5, [2.0, -0.5, 3.0])
    promoted = DualNumber.constant(s, 3)

    assert op(a, s) == op(a, promoted)
    assert op(s, a) == op(promoted, a)


def test_linearity():
    a = DualNumber(0.3, [1.25, -4.0, 0.1])
    b = DualNumber(-2.0, [0.5, 3.5, 0.7])
    c = a + b

    for i in range(3):
        assert c.derivatives[i] == a.derivatives[i] + b.derivatives[i]


def test_division_by_zero():
    a = DualNumber(1.0, [1.0, 2.0])

    with pytest.raises(DivisionByZero):
        a / DualNumber(0.0, [5.0, 1.0])

    with pytest.raises(DivisionByZero):
        a / 0

    with pytest.raises(ZeroDivisionError):
        3 / DualNumber(0.0, [1.0, 1.0])


def test_division_by_zero_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="fwdiff"):
        with pytest.raises(DualNumberError):
            DualNumber(1.0) / DualNumber(0.0)

    assert any("zero-valued" in r.getMessage() for r in caplog.records)


def test_dimension_mismatch():
    a = DualNumber(1.0, [1.0, 2.0])
    b = DualNumber(1.0, [1.0, 2.0, 3.0])

    with pytest.raises(DimensionMismatch):
        a + b

    with pytest.raises(DimensionMismatch):
        a < b

    assert a != b


def test_unsupported_operand():
    with pytest.raises(TypeError):
        DualNumber(1.0) + "a"  # type: ignore

    with pytest.raises(TypeError):
        DualNumber(2.0) ** DualNumber(1.0)  # type: ignore


def test_comparison():
    d1 = DualNumber(1.0, 2.0)
    d2 = DualNumber(1.0, 2.0)
    d3 = DualNumber(2.0, 3.0)
    d4 = DualNumber(2.0, 3.0)

    assert d1 == d2
    assert d1 != d3
    assert d1 < d3 and d3 > d1
    assert d3 >= d4 and d4 <= d3
    assert d3 <= d4 and d4 >= d3


def test_lexicographic_ordering():
    assert DualNumber(2, [3, 4, 5]) < DualNumber(2, [4, 4, 5])
    assert DualNumber(2, [3, 4, 5]) < DualNumber(3, [0, 0, 0])
    assert not DualNumber(2, [3, 4, 5]) < DualNumber(2, [3, 4, 5])

    xs = [DualNumber(2, [1, 0]), DualNumber(1, [9, 9]), DualNumber(2, [0, 5])]
    assert sorted(xs) == [xs[1], xs[2], xs[0]]


def test_comparison_with_scalar():
    assert DualNumber(2.0, [0.0, 0.0]) == 2
    assert DualNumber(2.0, [1.0, 0.0]) != 2
    assert DualNumber(2.0, [1.0, 0.0]) > 2
    assert 1 < DualNumber(1.0, [0.0, 1.0])


def test_unhashable():
    with pytest.raises(TypeError):
        hash(DualNumber(1.0))


def test_format():
    assert str(DualNumber(2, [3, 4, 5])) == "Value: 2, Derivatives: [3, 4, 5]"
    assert str(DualNumber(2.5, 1.0)) == "Value: 2.5, Derivatives: [1.0]"

    x = DualNumber(1.0, [0.5, 0.25])
    assert format(x, ".2f") == "Value: 1.00, Derivatives: [0.50, 0.25]"
    assert format(x) == str(x)
    assert repr(x) == "DualNumber(value=1.0, derivatives=[0.5, 0.25])"


def test_isclose():
    x = DualNumber(1.0, [2.0])
    y = DualNumber(1.0 + 1e-12, [2.0])

    assert x != y
    assert x.isclose(y)
    assert x.isclose(y, abs_tol=0.0, rel_tol=1e-6)
    assert not x.isclose(DualNumber(1.001, [2.0]))


def test_localcontext():
    x = DualNumber(1.0, [2.0])
    y = DualNumber(1.001, [2.0])

    with localcontext(abs_tol=1e-2) as ctx:
        assert ctx.abs_tol == 1e-2
        assert x.isclose(y)

    assert getcontext().abs_tol == 1e-9
    assert not x.isclose(y)

    with pytest.raises(ValueError):
        with localcontext(abs_tol=-1.0):
            pass


def test_context_is_per_thread():
    seen = []

    with localcontext(abs_tol=1.0):
        thread = threading.Thread(target=lambda: seen.append(getcontext().abs_tol))
        thread.start()
        thread.join()

    assert seen == [1e-9]


def test_nested():
    x = DualNumber(DualNumber(2.0, [1.0]), [DualNumber(1.0, [0.0])])
    assert x.level == 2

    y = x * x
    assert y.value == DualNumber(4.0, [4.0])
    assert y.derivatives[0] == DualNumber(4.0, [2.0])

    z = 3 + x
    assert z.value == DualNumber(5.0, [1.0])
    assert (DualNumber(1.0, [0.0]) + x).value == DualNumber(3.0, [1.0])


def test_nested_equality_with_other_length():
    x = DualNumber(DualNumber(2.0, [1.0]), [DualNumber(1.0, [0.0])])
    y = DualNumber(2.0, [1.0, 0.0])

    assert not x == y
    assert x != y
    assert y != x


def test_setcontext():
    x = DualNumber(1.0, [2.0])
    y = DualNumber(1.001, [2.0])
    previous = getcontext()

    try:
        setcontext(Context(abs_tol=1e-2))
        assert getcontext().abs_tol == 1e-2
        assert x.isclose(y)
    finally:
        setcontext(previous)

    assert getcontext() is previous
    assert not x.isclose(y)
