"""Conversion of expression trees into SymPy objects (no simplification)."""

import sympy
from sympy import Add, Eq, Mul, Pow, Symbol

from mathengine.errors import MalformedOperator
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Equation, Expression,
    ExpressionOrEquation, FunctionCall, FunctionType, Group, UnaryOperation,
    UnaryOperator, Variable,
)


def to_sympy(expr: ExpressionOrEquation):
    """Return an unevaluated SymPy expression (``Eq`` for equations).

    The result keeps the tree's shape, so callers can apply ``expand`` or
    ``simplify`` themselves when cross-checking engine results.
    """
    if isinstance(expr, Equation):
        return Eq(_convert(expr.left_side), _convert(expr.right_side), evaluate=False)
    return _convert(expr)


def _convert(expr: Expression):
    if isinstance(expr, Constant):
        return expr.value.to_sympy()
    if isinstance(expr, Variable):
        return Symbol(expr.name)
    if isinstance(expr, Group):
        return _convert(expr.inner)
    if isinstance(expr, BinaryOperation):
        lhs, rhs = _convert(expr.left), _convert(expr.right)
        if expr.operator is BinaryOperator.ADD:
            return Add(lhs, rhs, evaluate=False)
        if expr.operator is BinaryOperator.SUBTRACT:
            return Add(lhs, Mul(-1, rhs, evaluate=False), evaluate=False)
        if expr.operator is BinaryOperator.MULTIPLY:
            return Mul(lhs, rhs, evaluate=False)
        if expr.operator is BinaryOperator.DIVIDE:
            return Mul(lhs, Pow(rhs, -1, evaluate=False), evaluate=False)
        if expr.operator is BinaryOperator.EXPONENTIATE:
            return Pow(lhs, rhs, evaluate=False)
        raise MalformedOperator(f"Unknown binary operator: {expr.operator}",
                                details={"node": expr})
    if isinstance(expr, UnaryOperation):
        operand = _convert(expr.operand)
        if expr.operator is UnaryOperator.NEGATE:
            return Mul(-1, operand, evaluate=False)
        if expr.operator is UnaryOperator.POSITIVE:
            return operand
        raise MalformedOperator(f"Unknown unary operator: {expr.operator}",
                                details={"node": expr})
    if isinstance(expr, FunctionCall):
        if expr.function_type is FunctionType.SQUARE_ROOT:
            return sympy.sqrt(_convert(expr.argument), evaluate=False)
        raise MalformedOperator(f"Unknown function: {expr.function_type}",
                                details={"node": expr})
    raise MalformedOperator(f"Expression type not set: {expr!r}", details={"node": expr})
