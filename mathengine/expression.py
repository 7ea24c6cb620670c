"""
Expression and equation trees.

Trees arrive from an external parser already well formed.  Every node is a
frozen dataclass, so a tree is never edited after construction; transforms
such as ``strip_groups`` build a new tree bottom-up.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from mathengine.real import Number, Real


class BinaryOperator(enum.Enum):
    UNSPECIFIED = 0
    ADD = 1
    SUBTRACT = 2
    MULTIPLY = 3
    DIVIDE = 4
    EXPONENTIATE = 5


class UnaryOperator(enum.Enum):
    UNSPECIFIED = 0
    NEGATE = 1
    POSITIVE = 2


class FunctionType(enum.Enum):
    UNSPECIFIED = 0
    SQUARE_ROOT = 1


class Expression:
    """Base class for expression nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class Constant(Expression):
    value: Real


@dataclass(frozen=True)
class Variable(Expression):
    name: str


@dataclass(frozen=True)
class BinaryOperation(Expression):
    operator: BinaryOperator
    left: Expression
    right: Expression
    # Multiplication written without an operator (e.g. ``2x``); display only.
    is_implicit: bool = False


@dataclass(frozen=True)
class UnaryOperation(Expression):
    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class FunctionCall(Expression):
    function_type: FunctionType
    argument: Expression


@dataclass(frozen=True)
class Group(Expression):
    """Explicit parentheses: transparent to math, visible to renderers."""

    inner: Expression


@dataclass(frozen=True)
class UnsetExpression(Expression):
    """A node whose expression type was never set by the parser."""


@dataclass(frozen=True)
class Equation:
    left_side: Expression
    right_side: Expression


ExpressionOrEquation = Union[Expression, Equation]


# ── Builders ─────────────────────────────────────────────────────────────

def const(value: Number) -> Constant:
    return Constant(Real.of(value))


def var(name: str) -> Variable:
    return Variable(name)


def add(left: Expression, right: Expression) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.ADD, left, right)


def sub(left: Expression, right: Expression) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.SUBTRACT, left, right)


def mul(left: Expression, right: Expression, implicit: bool = False) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.MULTIPLY, left, right, is_implicit=implicit)


def div(left: Expression, right: Expression) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.DIVIDE, left, right)


def power(base: Expression, exponent: Expression) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.EXPONENTIATE, base, exponent)


def neg(operand: Expression) -> UnaryOperation:
    return UnaryOperation(UnaryOperator.NEGATE, operand)


def pos(operand: Expression) -> UnaryOperation:
    return UnaryOperation(UnaryOperator.POSITIVE, operand)


def sqrt(argument: Expression) -> FunctionCall:
    return FunctionCall(FunctionType.SQUARE_ROOT, argument)


def group(inner: Expression) -> Group:
    return Group(inner)


def equation(left_side: Expression, right_side: Expression) -> Equation:
    return Equation(left_side, right_side)


# ── Tree helpers ─────────────────────────────────────────────────────────

def strip_groups(expr: Expression) -> Expression:
    """Return a copy of *expr* with every ``Group`` wrapper removed."""
    if isinstance(expr, Group):
        return strip_groups(expr.inner)
    if isinstance(expr, BinaryOperation):
        return BinaryOperation(expr.operator, strip_groups(expr.left),
                               strip_groups(expr.right), expr.is_implicit)
    if isinstance(expr, UnaryOperation):
        return UnaryOperation(expr.operator, strip_groups(expr.operand))
    if isinstance(expr, FunctionCall):
        return FunctionCall(expr.function_type, strip_groups(expr.argument))
    return expr


def is_single_term(expr: Expression) -> bool:
    """Constants, variables and function calls read as one term."""
    if isinstance(expr, (Constant, Variable, FunctionCall)):
        return True
    if isinstance(expr, Group):
        return is_single_term(expr.inner)
    return False


def variables(expr: ExpressionOrEquation) -> set[str]:
    """Names of all variables appearing in *expr*."""
    if isinstance(expr, Equation):
        return variables(expr.left_side) | variables(expr.right_side)
    if isinstance(expr, Variable):
        return {expr.name}
    if isinstance(expr, BinaryOperation):
        return variables(expr.left) | variables(expr.right)
    if isinstance(expr, UnaryOperation):
        return variables(expr.operand)
    if isinstance(expr, FunctionCall):
        return variables(expr.argument)
    if isinstance(expr, Group):
        return variables(expr.inner)
    return set()
