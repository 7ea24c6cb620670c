"""Tests for the SymPy bridge."""

import pytest
import sympy

from mathengine import expression as ex
from mathengine.errors import MalformedOperator
from mathengine.evaluator import evaluate
from mathengine.expression import BinaryOperation, BinaryOperator, UnsetExpression
from mathengine.real import Rational
from mathengine.sympy_bridge import to_sympy

x_sym, y_sym = sympy.symbols("x y")


def test_constants_and_variables() -> None:
    assert to_sympy(ex.const(3)) == sympy.Integer(3)
    assert to_sympy(ex.const(Rational(2, 3))) == sympy.Rational(2, 3)
    assert to_sympy(ex.var("x")) == x_sym


def test_structure_is_not_simplified() -> None:
    result = to_sympy(ex.add(ex.const(1), ex.const(2)))
    assert isinstance(result, sympy.Add)
    assert result.doit() == 3


@pytest.mark.parametrize(
    "tree,expected",
    [
        (ex.sub(ex.var("x"), ex.var("y")), x_sym - y_sym),
        (ex.div(ex.var("x"), ex.const(2)), x_sym / 2),
        (ex.power(ex.group(ex.add(ex.var("x"), ex.const(1))), ex.const(2)), (x_sym + 1) ** 2),
        (ex.neg(ex.mul(ex.const(2), ex.var("y"), implicit=True)), -2 * y_sym),
        (ex.pos(ex.var("x")), x_sym),
        (ex.sqrt(ex.var("x")), sympy.sqrt(x_sym)),
    ],
)
def test_simplifies_to_expected(tree, expected) -> None:
    assert sympy.simplify(to_sympy(tree) - expected) == 0


def test_equation_becomes_eq() -> None:
    result = to_sympy(ex.equation(ex.var("x"), ex.const(2)))
    assert isinstance(result, sympy.Eq)
    assert result.lhs == x_sym
    assert result.rhs == 2


def test_numeric_value_agrees_with_evaluator() -> None:
    tree = ex.add(ex.div(ex.const(1), ex.const(2)),
                  ex.power(ex.const(2), ex.neg(ex.const(3))))
    assert to_sympy(tree).doit() == evaluate(tree).to_sympy()


@pytest.mark.parametrize(
    "tree",
    [
        BinaryOperation(BinaryOperator.UNSPECIFIED, ex.var("x"), ex.const(1)),
        ex.sqrt(UnsetExpression()),
    ],
)
def test_malformed_raises(tree) -> None:
    with pytest.raises(MalformedOperator):
        to_sympy(tree)
