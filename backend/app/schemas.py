"""
JSON schema for expression trees sent to the HTTP API.

A tree is a nested ``ExpressionNode``; ``type`` selects the node kind:

  constant  : ``value`` (int/float) or ``numerator`` + ``denominator``
  variable  : ``name``
  binary    : ``operator`` (add, subtract, multiply, divide, exponentiate),
              ``left``, ``right``, optional ``implicit``
  unary     : ``operator`` (negate, positive), ``operand``
  function  : ``function`` (square_root), ``argument``
  group     : ``inner``

Unknown operator names map to the ``UNSPECIFIED`` members so the engine
reports them as malformed; an unknown ``type`` becomes ``UnsetExpression``.
"""

from typing import Optional, Union

from pydantic import BaseModel

from mathengine.canonical import (
    CanonicalConstant, CanonicalFunctionCall, CanonicalUnaryOperation,
    CanonicalVariable, CommutativeAccumulation, ComparableOperationList,
    NonCommutativeOperation,
)
from mathengine.errors import MalformedOperator
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Equation, Expression,
    FunctionCall, FunctionType, Group, UnaryOperation, UnaryOperator,
    UnsetExpression, Variable,
)
from mathengine.polynomial import Polynomial
from mathengine.real import Integer, Rational, Real


class ExpressionNode(BaseModel):
    type: str
    value: Optional[Union[int, float]] = None
    numerator: Optional[int] = None
    denominator: Optional[int] = None
    name: Optional[str] = None
    operator: Optional[str] = None
    function: Optional[str] = None
    implicit: bool = False
    left: Optional["ExpressionNode"] = None
    right: Optional["ExpressionNode"] = None
    operand: Optional["ExpressionNode"] = None
    argument: Optional["ExpressionNode"] = None
    inner: Optional["ExpressionNode"] = None


ExpressionNode.model_rebuild()


class EquationNode(BaseModel):
    left: ExpressionNode
    right: ExpressionNode


# ── Requests ─────────────────────────────────────────────────────────────

class ExpressionRequest(BaseModel):
    expression: ExpressionNode


class EquivalenceRequest(BaseModel):
    first: ExpressionNode
    second: ExpressionNode


class RenderRequest(BaseModel):
    expression: Optional[ExpressionNode] = None
    equation: Optional[EquationNode] = None
    divide_as_fraction: Optional[bool] = None
    language: Optional[str] = None


class ToleranceRequest(BaseModel):
    value: ExpressionNode
    expected: ExpressionNode
    tolerance: Optional[float] = None


# ── JSON -> tree ─────────────────────────────────────────────────────────

def _enum_member(enum_type, name: Optional[str]):
    if not name:
        return enum_type.UNSPECIFIED
    return enum_type.__members__.get(name.upper(), enum_type.UNSPECIFIED)


def _require(node: Optional[ExpressionNode], field: str, parent: ExpressionNode) -> Expression:
    if node is None:
        raise MalformedOperator(f"'{parent.type}' node is missing '{field}'.")
    return to_expression(node)


def to_expression(node: ExpressionNode) -> Expression:
    kind = node.type.lower()
    if kind == "constant":
        if node.numerator is not None:
            denominator = 1 if node.denominator is None else node.denominator
            return Constant(Rational.of(node.numerator, denominator))
        if node.value is None:
            raise MalformedOperator("'constant' node is missing 'value'.")
        return Constant(Real.of(node.value))
    if kind == "variable":
        if not node.name:
            raise MalformedOperator("'variable' node is missing 'name'.")
        return Variable(node.name)
    if kind == "binary":
        return BinaryOperation(
            _enum_member(BinaryOperator, node.operator),
            _require(node.left, "left", node),
            _require(node.right, "right", node),
            is_implicit=node.implicit,
        )
    if kind == "unary":
        return UnaryOperation(_enum_member(UnaryOperator, node.operator),
                              _require(node.operand, "operand", node))
    if kind == "function":
        return FunctionCall(_enum_member(FunctionType, node.function),
                            _require(node.argument, "argument", node))
    if kind == "group":
        return Group(_require(node.inner, "inner", node))
    return UnsetExpression()


def to_equation(node: EquationNode) -> Equation:
    return Equation(to_expression(node.left), to_expression(node.right))


# ── Results -> JSON ──────────────────────────────────────────────────────

def real_to_json(value: Real) -> dict:
    if isinstance(value, Integer):
        return {"type": "integer", "value": value.value, "display": str(value)}
    if isinstance(value, Rational):
        return {"type": "rational", "numerator": value.numerator,
                "denominator": value.denominator, "display": str(value)}
    return {"type": "irrational", "value": value.to_float(), "display": str(value)}


def polynomial_to_json(polynomial: Polynomial) -> dict:
    return {
        "text": str(polynomial),
        "degree": polynomial.degree(),
        "terms": [
            {"coefficient": real_to_json(term.coefficient),
             "exponents": term.exponent_map()}
            for term in polynomial.terms
        ],
    }


def canonical_to_json(node: ComparableOperationList) -> dict:
    if isinstance(node, CanonicalConstant):
        return {"type": "constant", "value": real_to_json(node.value)}
    if isinstance(node, CanonicalVariable):
        return {"type": "variable", "name": node.name}
    if isinstance(node, CommutativeAccumulation):
        return {"type": "accumulation", "operator": node.operator.name.lower(),
                "operands": [canonical_to_json(operand) for operand in node.operands]}
    if isinstance(node, NonCommutativeOperation):
        return {"type": "binary", "operator": node.operator.name.lower(),
                "left": canonical_to_json(node.left),
                "right": canonical_to_json(node.right)}
    if isinstance(node, CanonicalUnaryOperation):
        return {"type": "unary", "operator": node.operator.name.lower(),
                "operand": canonical_to_json(node.operand)}
    if isinstance(node, CanonicalFunctionCall):
        return {"type": "function", "function": node.function_type.name.lower(),
                "argument": canonical_to_json(node.argument)}
    return {"type": "invalid"}
