"""
mathengine — evaluate, canonicalize, reduce and render math expression trees.

Trees come from an external parser (see ``mathengine.expression``); every
entry point is a pure function of its input tree.

Example Usage:
    from mathengine import expression as ex
    from mathengine import canonicalize, evaluate, render_english

    answer = ex.add(ex.mul(ex.const(3), ex.var("x"), implicit=True), ex.const(2))
    reference = ex.add(ex.const(2), ex.mul(ex.var("x"), ex.const(3)))
    assert canonicalize(answer) == canonicalize(reference)
    render_english(answer)   # "3 x plus 2"
"""

from mathengine.canonical import (
    ComparableOperationList, are_equivalent, canonicalize, contains_invalid,
)
from mathengine.english import Language, render_english, render_english_strict
from mathengine.errors import (
    DivisionByZero, EvaluationError, MalformedOperator, MathEngineError,
    NonPolynomialConstruct, NonRealResult, UnboundVariable, UndefinedResult,
    UnsupportedLanguage,
)
from mathengine.evaluator import evaluate
from mathengine.expression import Equation, Expression, strip_groups
from mathengine.latex import render_latex
from mathengine.polynomial import Polynomial, Term, reduce_to_polynomial
from mathengine.real import Integer, Irrational, Rational, Real, is_within_tolerance
from mathengine.sympy_bridge import to_sympy

__all__ = [
    "ComparableOperationList", "are_equivalent", "canonicalize", "contains_invalid",
    "Language", "render_english", "render_english_strict",
    "DivisionByZero", "EvaluationError", "MalformedOperator", "MathEngineError",
    "NonPolynomialConstruct", "NonRealResult", "UnboundVariable", "UndefinedResult",
    "UnsupportedLanguage",
    "evaluate",
    "Equation", "Expression", "strip_groups",
    "render_latex",
    "Polynomial", "Term", "reduce_to_polynomial",
    "Integer", "Irrational", "Rational", "Real", "is_within_tolerance",
    "to_sympy",
]
