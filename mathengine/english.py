"""
Natural-language (English) reading of expression and equation trees.

Only English is supported; any other language yields ``None``.  Rendering is
all-or-nothing: if any node cannot be read (unset operator or node type) the
whole call returns ``None`` rather than a partial sentence.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

from mathengine.errors import MalformedOperator, UnsupportedLanguage
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Equation, Expression,
    ExpressionOrEquation, FunctionCall, FunctionType, Group, UnaryOperation,
    UnaryOperator, Variable, is_single_term,
)
from mathengine.real import Integer

logger = logging.getLogger(__name__)


class Language(enum.Enum):
    LANGUAGE_UNSPECIFIED = 0
    ENGLISH = 1
    ARABIC = 2
    HINDI = 3
    HINGLISH = 4
    PORTUGUESE = 5
    BRAZILIAN_PORTUGUESE = 6


# ── Lookup tables ────────────────────────────────────────────────────────

_NUMBER_WORDS = {
    0: "zero", 1: "one", 2: "two", 3: "three", 4: "four", 5: "five",
    6: "six", 7: "seven", 8: "eight", 9: "nine", 10: "ten",
}

_SINGULAR_ORDINALS = {
    1: "oneth", 2: "half", 3: "third", 4: "fourth", 5: "fifth",
    6: "sixth", 7: "seventh", 8: "eighth", 9: "ninth", 10: "tenth",
}

_PLURAL_ORDINALS = {
    1: "oneths", 2: "halves", 3: "thirds", 4: "fourths", 5: "fifths",
    6: "sixths", 7: "sevenths", 8: "eighths", 9: "ninths", 10: "tenths",
}

_VARIABLE_NAMES = {"z": "zed", "Z": "Zed"}


def render_english(expr: ExpressionOrEquation, language: Language = Language.ENGLISH,
                   divide_as_fraction: bool = False) -> Optional[str]:
    """Read *expr* aloud in *language*.

    Returns ``None`` when *language* is not supported or when the tree
    contains a node that cannot be read.
    """
    if language is not Language.ENGLISH:
        logger.debug("Language %s is not supported for reading", language)
        return None
    if isinstance(expr, Equation):
        lhs = _read(expr.left_side, divide_as_fraction)
        rhs = _read(expr.right_side, divide_as_fraction)
        text = f"{lhs} equals {rhs}" if lhs is not None and rhs is not None else None
    else:
        text = _read(expr, divide_as_fraction)
    if text is None:
        logger.debug("Could not read %r", expr)
    return text


def _read(expr: Expression, divide_as_fraction: bool) -> Optional[str]:
    if isinstance(expr, Constant):
        return expr.value.to_display_string()
    if isinstance(expr, Variable):
        return _VARIABLE_NAMES.get(expr.name, expr.name)
    if isinstance(expr, BinaryOperation):
        return _read_binary(expr, divide_as_fraction)
    if isinstance(expr, UnaryOperation):
        operand = _read(expr.operand, divide_as_fraction)
        if operand is None:
            return None
        if expr.operator is UnaryOperator.NEGATE:
            return f"negative {operand}"
        if expr.operator is UnaryOperator.POSITIVE:
            return f"positive {operand}"
        return None
    if isinstance(expr, FunctionCall):
        argument = _read(expr.argument, divide_as_fraction)
        if argument is None or expr.function_type is not FunctionType.SQUARE_ROOT:
            return None
        if is_single_term(expr.argument):
            return f"square root of {argument}"
        return f"start square root {argument} end square root"
    if isinstance(expr, Group):
        inner = _read(expr.inner, divide_as_fraction)
        if inner is None:
            return None
        return inner if is_single_term(expr) else f"open parenthesis {inner} close parenthesis"
    return None


def _read_binary(expr: BinaryOperation, divide_as_fraction: bool) -> Optional[str]:
    lhs = _read(expr.left, divide_as_fraction)
    rhs = _read(expr.right, divide_as_fraction)
    if lhs is None or rhs is None:
        return None

    operator = expr.operator
    if operator is BinaryOperator.ADD:
        return f"{lhs} plus {rhs}"
    if operator is BinaryOperator.SUBTRACT:
        return f"{lhs} minus {rhs}"
    if operator is BinaryOperator.MULTIPLY:
        if _reads_as_implicit_multiplication(expr):
            return f"{lhs} {rhs}"
        return f"{lhs} times {rhs}"
    if operator is BinaryOperator.DIVIDE:
        if divide_as_fraction and _is_integer_constant(expr.left) \
                and _is_integer_constant(expr.right):
            small = _read_small_fraction(expr.left.value.value, expr.right.value.value)
            return small if small is not None else f"{lhs} over {rhs}"
        if divide_as_fraction:
            return f"the fraction with numerator {lhs} and denominator {rhs}"
        return f"{lhs} divided by {rhs}"
    if operator is BinaryOperator.EXPONENTIATE:
        return f"{lhs} raised to the power of {rhs}"
    return None


def _read_small_fraction(numerator: int, denominator: int) -> Optional[str]:
    """Ordinal reading for ratios like 2/3 ("two thirds"); None when out of range."""
    if not (0 <= numerator <= 10 and 1 <= denominator <= 10 and denominator >= numerator):
        return None
    if numerator == 1:
        ordinal = _SINGULAR_ORDINALS[denominator]
        return ordinal if denominator == 2 else f"one {ordinal}"
    return f"{_NUMBER_WORDS[numerator]} {_PLURAL_ORDINALS[denominator]}"


def _reads_as_implicit_multiplication(expr: BinaryOperation) -> bool:
    # Exponentiation binds tighter than multiplication, so a term like 2x^4 has
    # the shape constant * (x ^ 4) rather than constant * variable.
    if not expr.is_implicit or not isinstance(expr.left, Constant):
        return False
    right = expr.right
    return isinstance(right, Variable) or (
        isinstance(right, BinaryOperation) and right.operator is BinaryOperator.EXPONENTIATE)


def _is_integer_constant(expr: Expression) -> bool:
    return isinstance(expr, Constant) and isinstance(expr.value, Integer)


def render_english_strict(expr: ExpressionOrEquation, language: Language = Language.ENGLISH,
                          divide_as_fraction: bool = False) -> str:
    """Like ``render_english`` but raises instead of returning ``None``.

    ``UnsupportedLanguage`` for a language other than English,
    ``MalformedOperator`` when some node cannot be read.
    """
    if language is not Language.ENGLISH:
        raise UnsupportedLanguage(language)
    text = render_english(expr, language, divide_as_fraction)
    if text is None:
        raise MalformedOperator("Expression contains a node that cannot be read.",
                                details={"node": expr})
    return text
