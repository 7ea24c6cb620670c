"""
Polynomial reduction.

``reduce_to_polynomial`` expands an expression built from ``+``, ``-``,
``*``, ``^`` (nonnegative whole exponents) and unary signs into a sum of
monomials, merges like terms, drops zero terms and sorts what is left:

  - descending total degree
  - ties: variable names ascending, then higher powers first
  - the constant term (degree 0) last

Two polynomials in this form are equal exactly when their term tuples are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mathengine import real
from mathengine.errors import MalformedOperator, NonPolynomialConstruct
from mathengine.expression import (
    BinaryOperation, BinaryOperator, Constant, Expression, FunctionCall,
    FunctionType, Group, UnaryOperation, UnaryOperator, Variable,
)
from mathengine.real import Integer, Real

logger = logging.getLogger(__name__)

# Largest exponent the reducer expands; higher powers are rejected rather
# than multiplied out term by term.
MAX_EXPONENT = 64


@dataclass(frozen=True)
class Term:
    """A coefficient times a product of variable powers.

    *exponents* is a tuple of ``(name, power)`` pairs sorted by name, every
    power >= 1.  An empty tuple makes this a constant term.
    """

    coefficient: Real
    exponents: tuple = ()

    def degree(self) -> int:
        return sum(power for _, power in self.exponents)

    def is_constant(self) -> bool:
        return not self.exponents

    def exponent_map(self) -> dict[str, int]:
        return dict(self.exponents)

    def sort_key(self) -> tuple:
        return (-self.degree(), tuple((name, -power) for name, power in self.exponents))

    def __str__(self) -> str:
        return _format_term(self, include_sign=True)


@dataclass(frozen=True)
class Polynomial:
    terms: tuple = ()

    def degree(self) -> int:
        """Highest total degree (0 for constants and the zero polynomial)."""
        return max((term.degree() for term in self.terms), default=0)

    def is_constant(self) -> bool:
        return all(term.is_constant() for term in self.terms)

    def is_zero(self) -> bool:
        return not self.terms

    def variables(self) -> set[str]:
        return {name for term in self.terms for name, _ in term.exponents}

    def __str__(self) -> str:
        if not self.terms:
            return "0"
        parts = [_format_term(self.terms[0], include_sign=True)]
        for term in self.terms[1:]:
            sign = " - " if term.coefficient.is_negative() else " + "
            parts.append(sign + _format_term(term, include_sign=False))
        return "".join(parts)


# ── Public API ───────────────────────────────────────────────────────────

def reduce_to_polynomial(expr: Expression) -> Polynomial:
    """Expand *expr* into a normalized ``Polynomial``.

    Raises ``NonPolynomialConstruct`` for division, function calls, and
    exponents that are not constant whole numbers in ``0..MAX_EXPONENT``, and
    ``MalformedOperator`` for unset nodes.
    """
    try:
        polynomial = Polynomial(_normalize(_expand(expr)))
    except Exception as e:
        logger.debug("Polynomial reduction failed for %r: %s", expr, e)
        raise
    logger.debug("Reduced %r to %s", expr, polynomial)
    return polynomial


# ── Expansion ────────────────────────────────────────────────────────────

_ONE = (Term(Integer(1)),)


def _expand(expr: Expression) -> tuple:
    if isinstance(expr, Constant):
        return (Term(expr.value),)
    if isinstance(expr, Variable):
        return (Term(Integer(1), ((expr.name, 1),)),)
    if isinstance(expr, Group):
        return _expand(expr.inner)
    if isinstance(expr, BinaryOperation):
        return _expand_binary(expr)
    if isinstance(expr, UnaryOperation):
        if expr.operator is UnaryOperator.NEGATE:
            return _negate(_expand(expr.operand))
        if expr.operator is UnaryOperator.POSITIVE:
            return _expand(expr.operand)
        raise MalformedOperator(f"Unknown unary operator: {expr.operator}",
                                details={"node": expr})
    if isinstance(expr, FunctionCall):
        if expr.function_type is FunctionType.SQUARE_ROOT:
            raise NonPolynomialConstruct("Square roots cannot appear in a polynomial.",
                                         details={"node": expr})
        raise MalformedOperator(f"Unknown function: {expr.function_type}",
                                details={"node": expr})
    raise MalformedOperator(f"Expression type not set: {expr!r}", details={"node": expr})


def _expand_binary(expr: BinaryOperation) -> tuple:
    operator = expr.operator
    if operator is BinaryOperator.ADD:
        return _expand(expr.left) + _expand(expr.right)
    if operator is BinaryOperator.SUBTRACT:
        return _expand(expr.left) + _negate(_expand(expr.right))
    if operator is BinaryOperator.MULTIPLY:
        return _multiply(_expand(expr.left), _expand(expr.right))
    if operator is BinaryOperator.EXPONENTIATE:
        base = _expand(expr.left)
        result = _ONE
        for _ in range(_exponent_value(expr.right)):
            # Merge as we go so repeated products stay small.
            result = _normalize(_multiply(result, base))
        return result
    if operator is BinaryOperator.DIVIDE:
        raise NonPolynomialConstruct("Division cannot appear in a polynomial.",
                                     details={"node": expr})
    raise MalformedOperator(f"Unknown binary operator: {operator}", details={"node": expr})


def _exponent_value(expr: Expression) -> int:
    terms = _normalize(_expand(expr))
    if not terms:
        return 0
    if len(terms) == 1 and terms[0].is_constant():
        value = terms[0].coefficient
        if isinstance(value, Integer) and value.value > MAX_EXPONENT:
            raise NonPolynomialConstruct(
                f"Exponent {value.value} is larger than the supported maximum of {MAX_EXPONENT}.",
                details={"exponent": expr},
            )
        if isinstance(value, Integer) and value.value >= 0:
            return value.value
    raise NonPolynomialConstruct(
        "Exponents in a polynomial must be nonnegative whole numbers.",
        details={"exponent": expr},
    )


def _negate(terms: tuple) -> tuple:
    return tuple(Term(real.negate(term.coefficient), term.exponents) for term in terms)


def _multiply(left: tuple, right: tuple) -> tuple:
    return tuple(
        Term(real.multiply(lhs.coefficient, rhs.coefficient),
             _merge_exponents(lhs.exponents, rhs.exponents))
        for lhs in left
        for rhs in right
    )


def _merge_exponents(left: tuple, right: tuple) -> tuple:
    merged = dict(left)
    for name, power in right:
        merged[name] = merged.get(name, 0) + power
    return tuple(sorted(merged.items()))


def _normalize(terms: tuple) -> tuple:
    """Merge like terms, drop zeros, and sort."""
    combined: dict[tuple, Real] = {}
    for term in terms:
        if term.exponents in combined:
            combined[term.exponents] = real.add(combined[term.exponents], term.coefficient)
        else:
            combined[term.exponents] = term.coefficient
    merged = [Term(coefficient, exponents)
              for exponents, coefficient in combined.items()
              if not coefficient.is_zero()]
    return tuple(sorted(merged, key=Term.sort_key))


# ── Display ──────────────────────────────────────────────────────────────

def _format_term(term: Term, include_sign: bool) -> str:
    coefficient = term.coefficient
    magnitude = abs(coefficient)
    sign = "-" if include_sign and coefficient.is_negative() else ""
    if term.is_constant():
        return sign + magnitude.to_plain_string()

    single_letters = all(len(name) == 1 for name, _ in term.exponents)
    factors = [name if power == 1 else f"{name}^{power}" for name, power in term.exponents]
    body = ("" if single_letters else "*").join(factors)
    if magnitude == Integer(1):
        return sign + body
    joiner = "" if single_letters else "*"
    return f"{sign}{magnitude.to_plain_string()}{joiner}{body}"
