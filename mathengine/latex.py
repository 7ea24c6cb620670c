"""
LaTeX rendering of expression and equation trees.

Rendering is precedence driven: a child whose operator binds more loosely
than its position requires is wrapped in ``\\left(...\\right)``, the same
wrapper used for explicit ``Group`` nodes.
"""

import logging

from mathengine.errors import MalformedOperator
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Equation, Expression,
    ExpressionOrEquation, FunctionCall, FunctionType, Group, UnaryOperation,
    UnaryOperator, Variable,
)

logger = logging.getLogger(__name__)

# ── Precedence levels (higher binds tighter) ─────────────────────────────
_PREC_SUM = 1
_PREC_PRODUCT = 2
_PREC_UNARY = 3
_PREC_POWER = 4
_PREC_ATOM = 5

_BINARY_PRECEDENCE = {
    BinaryOperator.ADD: _PREC_SUM,
    BinaryOperator.SUBTRACT: _PREC_SUM,
    BinaryOperator.MULTIPLY: _PREC_PRODUCT,
    BinaryOperator.DIVIDE: _PREC_PRODUCT,
    BinaryOperator.EXPONENTIATE: _PREC_POWER,
}

_UNARY_SYMBOLS = {
    UnaryOperator.NEGATE: "-",
    UnaryOperator.POSITIVE: "+",
}


def render_latex(expr: ExpressionOrEquation, divide_as_fraction: bool = False) -> str:
    """Render *expr* as raw LaTeX.

    With *divide_as_fraction* every division becomes ``\\frac{a}{b}``;
    otherwise it is written inline with ``\\div``.
    """
    if isinstance(expr, Equation):
        latex = (f"{_render(expr.left_side, divide_as_fraction)} = "
                 f"{_render(expr.right_side, divide_as_fraction)}")
    else:
        latex = _render(expr, divide_as_fraction)
    logger.debug("Rendered LaTeX %r", latex)
    return latex


def _precedence(expr: Expression) -> int:
    if isinstance(expr, BinaryOperation):
        return _BINARY_PRECEDENCE.get(expr.operator, _PREC_ATOM)
    if isinstance(expr, UnaryOperation):
        return _PREC_UNARY
    if isinstance(expr, Constant) and expr.value.is_negative():
        # A negative literal reads like a unary minus.
        return _PREC_UNARY
    return _PREC_ATOM


def _wrap(latex: str) -> str:
    return f"\\left({latex}\\right)"


def _render_child(expr: Expression, divide_as_fraction: bool, needs_wrap: bool) -> str:
    latex = _render(expr, divide_as_fraction)
    return _wrap(latex) if needs_wrap else latex


def _render(expr: Expression, divide_as_fraction: bool) -> str:
    if isinstance(expr, Constant):
        return expr.value.to_plain_string()
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, BinaryOperation):
        return _render_binary(expr, divide_as_fraction)
    if isinstance(expr, UnaryOperation):
        symbol = _UNARY_SYMBOLS.get(expr.operator)
        if symbol is None:
            raise MalformedOperator(f"Unknown unary operator: {expr.operator}",
                                    details={"node": expr})
        operand = _render_child(expr.operand, divide_as_fraction,
                                _precedence(expr.operand) <= _PREC_UNARY)
        return f"{symbol}{operand}"
    if isinstance(expr, FunctionCall):
        if expr.function_type is FunctionType.SQUARE_ROOT:
            return f"\\sqrt{{{_render(expr.argument, divide_as_fraction)}}}"
        raise MalformedOperator(f"Unknown function: {expr.function_type}",
                                details={"node": expr})
    if isinstance(expr, Group):
        return _wrap(_render(expr.inner, divide_as_fraction))
    raise MalformedOperator(f"Expression type not set: {expr!r}", details={"node": expr})


def _render_binary(expr: BinaryOperation, divide_as_fraction: bool) -> str:
    operator = expr.operator
    precedence = _BINARY_PRECEDENCE.get(operator)
    if precedence is None:
        raise MalformedOperator(f"Unknown binary operator: {operator}", details={"node": expr})

    if operator is BinaryOperator.DIVIDE and divide_as_fraction:
        return (f"\\frac{{{_render(expr.left, divide_as_fraction)}}}"
                f"{{{_render(expr.right, divide_as_fraction)}}}")

    left_prec = _precedence(expr.left)
    right_prec = _precedence(expr.right)

    if operator is BinaryOperator.EXPONENTIATE:
        # Right-associative; the exponent sits in braces and never needs wrapping.
        base = _render_child(expr.left, divide_as_fraction, left_prec <= _PREC_POWER)
        return f"{base}^{{{_render(expr.right, divide_as_fraction)}}}"

    left = _render_child(expr.left, divide_as_fraction, left_prec < precedence)
    # Left-associative: an equal-precedence right child only regroups safely
    # under the associative operators.
    right_needs_wrap = right_prec < precedence or (
        right_prec == precedence
        and operator in (BinaryOperator.SUBTRACT, BinaryOperator.DIVIDE))
    if right_prec == _PREC_UNARY and (
            operator in (BinaryOperator.ADD, BinaryOperator.SUBTRACT) or expr.is_implicit):
        right_needs_wrap = True
    right = _render_child(expr.right, divide_as_fraction, right_needs_wrap)

    if operator is BinaryOperator.ADD:
        return f"{left} + {right}"
    if operator is BinaryOperator.SUBTRACT:
        return f"{left} - {right}"
    if operator is BinaryOperator.MULTIPLY:
        if expr.is_implicit:
            return f"{left}{right}"
        return f"{left} \\times {right}"
    return f"{left} \\div {right}"
