"""
Canonical (comparable) form of expression trees.

``canonicalize`` turns an expression into a tree in which every chain of
additions or multiplications is flattened into one node holding its
operands in sorted order.  Two expressions that differ only by the order or
nesting of ``+`` and ``*`` operands therefore produce equal canonical trees,
and equivalence becomes plain ``==``.

Subtraction, division and exponentiation keep their operand order; their
operands are canonicalized in place.  ``Group`` nodes are dropped.

Sorting uses a fixed total order:

  1. node kind: constant < variable < function call < unary < binary
     (binary nodes further ranked by operator)
  2. value for constants, name for variables
  3. child keys, recursively
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Expression, FunctionCall,
    FunctionType, Group, UnaryOperation, UnaryOperator, Variable,
)
from mathengine.real import Real

logger = logging.getLogger(__name__)

_COMMUTATIVE_OPERATORS = (BinaryOperator.ADD, BinaryOperator.MULTIPLY)
_NON_COMMUTATIVE_OPERATORS = (
    BinaryOperator.SUBTRACT, BinaryOperator.DIVIDE, BinaryOperator.EXPONENTIATE,
)

# Kind ranks used as the first element of every sort key.
_RANK_CONSTANT = 0
_RANK_VARIABLE = 1
_RANK_FUNCTION_CALL = 2
_RANK_UNARY = 3
_RANK_BINARY = 4       # + operator value
_RANK_INVALID = 99


class ComparableOperationList:
    """Base class for canonical tree nodes."""

    __slots__ = ()

    def sort_key(self) -> tuple:
        raise NotImplementedError


@dataclass(frozen=True)
class CanonicalConstant(ComparableOperationList):
    value: Real

    def sort_key(self) -> tuple:
        return (_RANK_CONSTANT, self.value.sort_key())


@dataclass(frozen=True)
class CanonicalVariable(ComparableOperationList):
    name: str

    def sort_key(self) -> tuple:
        return (_RANK_VARIABLE, self.name)


@dataclass(frozen=True)
class CommutativeAccumulation(ComparableOperationList):
    """A flattened ``+`` or ``*`` chain; *operands* are always sorted."""

    operator: BinaryOperator
    operands: tuple

    def sort_key(self) -> tuple:
        return (_RANK_BINARY + self.operator.value,
                tuple(operand.sort_key() for operand in self.operands))


@dataclass(frozen=True)
class NonCommutativeOperation(ComparableOperationList):
    operator: BinaryOperator
    left: ComparableOperationList
    right: ComparableOperationList

    def sort_key(self) -> tuple:
        return (_RANK_BINARY + self.operator.value,
                self.left.sort_key(), self.right.sort_key())


@dataclass(frozen=True)
class CanonicalUnaryOperation(ComparableOperationList):
    operator: UnaryOperator
    operand: ComparableOperationList

    def sort_key(self) -> tuple:
        return (_RANK_UNARY, self.operator.value, self.operand.sort_key())


@dataclass(frozen=True)
class CanonicalFunctionCall(ComparableOperationList):
    function_type: FunctionType
    argument: ComparableOperationList

    def sort_key(self) -> tuple:
        return (_RANK_FUNCTION_CALL, self.function_type.value, self.argument.sort_key())


@dataclass(frozen=True, eq=False)
class InvalidOperation(ComparableOperationList):
    """Marker for an unset or unrecognized node.  Never equal to anything."""

    reason: str

    def __eq__(self, other) -> bool:
        return False

    def __ne__(self, other) -> bool:
        return True

    def __hash__(self) -> int:
        return id(self)

    def sort_key(self) -> tuple:
        return (_RANK_INVALID, self.reason)


CanonicalInput = Union[Expression, ComparableOperationList]


# ── Public API ───────────────────────────────────────────────────────────

def canonicalize(expr: CanonicalInput) -> ComparableOperationList:
    """Return the canonical form of *expr*.

    Already-canonical trees are accepted and re-normalized, so
    ``canonicalize(canonicalize(e)) == canonicalize(e)``.
    """
    result = _canonicalize(expr)
    logger.debug("Canonicalized %r to %r", expr, result)
    return result


def contains_invalid(node: ComparableOperationList) -> bool:
    if isinstance(node, InvalidOperation):
        return True
    if isinstance(node, CommutativeAccumulation):
        return any(contains_invalid(operand) for operand in node.operands)
    if isinstance(node, NonCommutativeOperation):
        return contains_invalid(node.left) or contains_invalid(node.right)
    if isinstance(node, CanonicalUnaryOperation):
        return contains_invalid(node.operand)
    if isinstance(node, CanonicalFunctionCall):
        return contains_invalid(node.argument)
    return False


def are_equivalent(first: CanonicalInput, second: CanonicalInput) -> bool:
    """True when both trees share a canonical form; always False for malformed trees."""
    first_canonical = canonicalize(first)
    second_canonical = canonicalize(second)
    if contains_invalid(first_canonical) or contains_invalid(second_canonical):
        return False
    return first_canonical == second_canonical


# ── Conversion ───────────────────────────────────────────────────────────

def _canonicalize(expr: CanonicalInput) -> ComparableOperationList:
    if isinstance(expr, ComparableOperationList):
        return _renormalize(expr)
    if isinstance(expr, Group):
        return _canonicalize(expr.inner)
    if isinstance(expr, Constant):
        return CanonicalConstant(expr.value)
    if isinstance(expr, Variable):
        return CanonicalVariable(expr.name)
    if isinstance(expr, BinaryOperation):
        if expr.operator in _COMMUTATIVE_OPERATORS:
            operands = [_canonicalize(operand)
                        for operand in _flatten(expr, expr.operator)]
            return _accumulate(expr.operator, operands)
        if expr.operator in _NON_COMMUTATIVE_OPERATORS:
            return NonCommutativeOperation(
                expr.operator, _canonicalize(expr.left), _canonicalize(expr.right))
        return InvalidOperation(f"binary operator {expr.operator}")
    if isinstance(expr, UnaryOperation):
        if expr.operator in (UnaryOperator.NEGATE, UnaryOperator.POSITIVE):
            return CanonicalUnaryOperation(expr.operator, _canonicalize(expr.operand))
        return InvalidOperation(f"unary operator {expr.operator}")
    if isinstance(expr, FunctionCall):
        if expr.function_type is FunctionType.SQUARE_ROOT:
            return CanonicalFunctionCall(expr.function_type, _canonicalize(expr.argument))
        return InvalidOperation(f"function {expr.function_type}")
    return InvalidOperation("expression type not set")


def _flatten(expr: Expression, operator: BinaryOperator) -> list:
    """Collect operands reachable through *operator* nodes, looking through groups."""
    while isinstance(expr, Group):
        expr = expr.inner
    if isinstance(expr, BinaryOperation) and expr.operator is operator:
        return _flatten(expr.left, operator) + _flatten(expr.right, operator)
    return [expr]


def _accumulate(operator: BinaryOperator, operands: list) -> CommutativeAccumulation:
    flattened = []
    for operand in operands:
        # Canonical operands may themselves be accumulations of the same operator
        # (e.g. when re-normalizing hand-built canonical trees).
        if isinstance(operand, CommutativeAccumulation) and operand.operator is operator:
            flattened.extend(operand.operands)
        else:
            flattened.append(operand)
    return CommutativeAccumulation(
        operator, tuple(sorted(flattened, key=lambda node: node.sort_key())))


def _renormalize(node: ComparableOperationList) -> ComparableOperationList:
    if isinstance(node, CommutativeAccumulation):
        return _accumulate(node.operator, [_renormalize(operand) for operand in node.operands])
    if isinstance(node, NonCommutativeOperation):
        return NonCommutativeOperation(
            node.operator, _renormalize(node.left), _renormalize(node.right))
    if isinstance(node, CanonicalUnaryOperation):
        return CanonicalUnaryOperation(node.operator, _renormalize(node.operand))
    if isinstance(node, CanonicalFunctionCall):
        return CanonicalFunctionCall(node.function_type, _renormalize(node.argument))
    return node
