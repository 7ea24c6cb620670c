"""Numeric evaluation of variable-free expression trees."""

import logging

from mathengine import real
from mathengine.errors import MalformedOperator, UnboundVariable
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Expression, FunctionCall,
    FunctionType, Group, UnaryOperation, UnaryOperator, Variable,
)
from mathengine.real import Real

logger = logging.getLogger(__name__)

_BINARY_ARITHMETIC = {
    BinaryOperator.ADD: real.add,
    BinaryOperator.SUBTRACT: real.subtract,
    BinaryOperator.MULTIPLY: real.multiply,
    BinaryOperator.DIVIDE: real.divide,
    BinaryOperator.EXPONENTIATE: real.power,
}


def evaluate(expr: Expression) -> Real:
    """Reduce *expr* to a single ``Real``.

    Raises ``UnboundVariable`` when the tree contains a variable,
    ``DivisionByZero`` / ``UndefinedResult`` / ``NonRealResult`` when the
    arithmetic has no real value, and ``MalformedOperator`` for unset nodes.
    """
    try:
        result = _evaluate(expr)
    except Exception as e:
        logger.debug("Evaluation failed for %r: %s", expr, e)
        raise
    logger.debug("Evaluated %r to %r", expr, result)
    return result


def _evaluate(expr: Expression) -> Real:
    if isinstance(expr, Constant):
        return expr.value
    if isinstance(expr, Variable):
        raise UnboundVariable(expr.name)
    if isinstance(expr, BinaryOperation):
        operation = _BINARY_ARITHMETIC.get(expr.operator)
        if operation is None:
            raise MalformedOperator(f"Unknown binary operator: {expr.operator}",
                                    details={"node": expr})
        return operation(_evaluate(expr.left), _evaluate(expr.right))
    if isinstance(expr, UnaryOperation):
        if expr.operator is UnaryOperator.NEGATE:
            return real.negate(_evaluate(expr.operand))
        if expr.operator is UnaryOperator.POSITIVE:
            return _evaluate(expr.operand)
        raise MalformedOperator(f"Unknown unary operator: {expr.operator}",
                                details={"node": expr})
    if isinstance(expr, FunctionCall):
        if expr.function_type is FunctionType.SQUARE_ROOT:
            return real.square_root(_evaluate(expr.argument))
        raise MalformedOperator(f"Unknown function: {expr.function_type}",
                                details={"node": expr})
    if isinstance(expr, Group):
        return _evaluate(expr.inner)
    raise MalformedOperator(f"Expression type not set: {expr!r}", details={"node": expr})
