"""Tests for polynomial reduction."""

import pytest
import sympy

from mathengine import expression as ex
from mathengine.errors import MalformedOperator, NonPolynomialConstruct
from mathengine.expression import BinaryOperation, BinaryOperator, UnsetExpression
from mathengine.polynomial import MAX_EXPONENT, Polynomial, Term, reduce_to_polynomial
from mathengine.real import Integer, Irrational, Rational
from mathengine.sympy_bridge import to_sympy

x, y = ex.var("x"), ex.var("y")


# ── Like terms and ordering ──────────────────────────────────────────────

def test_like_terms_merge() -> None:
    assert reduce_to_polynomial(ex.add(x, x)) == Polynomial((Term(Integer(2), (("x", 1),)),))


def test_operand_order_does_not_matter() -> None:
    first = reduce_to_polynomial(ex.add(ex.mul(ex.const(3), x, implicit=True), ex.const(2)))
    second = reduce_to_polynomial(ex.add(ex.const(2), ex.mul(x, ex.const(3))))
    assert first == second
    assert first.terms == (Term(Integer(3), (("x", 1),)), Term(Integer(2)))


def test_terms_cancel_to_zero_polynomial() -> None:
    polynomial = reduce_to_polynomial(ex.sub(ex.mul(ex.const(2), x), ex.add(x, x)))
    assert polynomial.is_zero()
    assert polynomial.terms == ()
    assert str(polynomial) == "0"


def test_terms_sorted_by_degree_then_name() -> None:
    tree = ex.add(ex.add(ex.add(ex.const(1), y), ex.mul(x, y)),
                  ex.add(ex.power(x, ex.const(2)), x))
    polynomial = reduce_to_polynomial(tree)
    assert [term.exponents for term in polynomial.terms] == [
        (("x", 2),),
        (("x", 1), ("y", 1)),
        (("x", 1),),
        (("y", 1),),
        (),
    ]


def test_constant_term_is_last() -> None:
    polynomial = reduce_to_polynomial(ex.add(ex.const(7), ex.mul(x, ex.const(2))))
    assert polynomial.terms[-1].is_constant()


# ── Expansion ────────────────────────────────────────────────────────────

class TestExpansion:
    def test_square_of_binomial(self):
        tree = ex.power(ex.group(ex.add(x, ex.const(1))), ex.const(2))
        polynomial = reduce_to_polynomial(tree)
        assert polynomial.terms == (
            Term(Integer(1), (("x", 2),)),
            Term(Integer(2), (("x", 1),)),
            Term(Integer(1)),
        )
        assert str(polynomial) == "x^2 + 2x + 1"

    def test_difference_of_squares(self):
        tree = ex.mul(ex.group(ex.add(x, y)), ex.group(ex.sub(x, y)))
        assert str(reduce_to_polynomial(tree)) == "x^2 - y^2"

    def test_zeroth_power_is_one(self):
        assert reduce_to_polynomial(ex.power(x, ex.const(0))).terms == (Term(Integer(1)),)

    def test_largest_supported_exponent(self):
        tree = ex.power(x, ex.const(MAX_EXPONENT))
        assert reduce_to_polynomial(tree).terms == (Term(Integer(1), (("x", MAX_EXPONENT),)),)
        with pytest.raises(NonPolynomialConstruct, match="maximum"):
            reduce_to_polynomial(ex.power(x, ex.const(MAX_EXPONENT + 1)))

    def test_exponent_may_be_a_constant_expression(self):
        tree = ex.power(x, ex.add(ex.const(1), ex.const(2)))
        assert reduce_to_polynomial(tree).terms == (Term(Integer(1), (("x", 3),)),)

    def test_negation_and_positive_sign(self):
        tree = ex.add(ex.neg(ex.mul(ex.const(2), x)), ex.pos(ex.const(5)))
        assert str(reduce_to_polynomial(tree)) == "-2x + 5"

    def test_rational_coefficients_stay_exact(self):
        tree = ex.add(ex.mul(ex.const(Rational(1, 2)), x), ex.mul(ex.const(Rational(1, 3)), x))
        assert reduce_to_polynomial(tree).terms == (Term(Rational(5, 6), (("x", 1),)),)

    def test_irrational_coefficient(self):
        tree = ex.mul(ex.const(0.5), x)
        assert reduce_to_polynomial(tree).terms == (Term(Irrational(0.5), (("x", 1),)),)

    @pytest.mark.parametrize(
        "tree",
        [
            ex.power(ex.group(ex.add(x, ex.const(1))), ex.const(3)),
            ex.mul(ex.group(ex.sub(ex.mul(ex.const(2), x), y)), ex.group(ex.add(x, ex.const(4)))),
            ex.sub(ex.power(ex.group(ex.add(x, y)), ex.const(2)), ex.mul(x, y)),
        ],
    )
    def test_matches_sympy_expansion(self, tree):
        polynomial = reduce_to_polynomial(tree)
        expected = sympy.Poly(sympy.expand(to_sympy(tree).doit()), *sympy.symbols("x y"))
        ours = sympy.Poly(
            sum((term.coefficient.to_sympy()
                 * sympy.Mul(*[sympy.Symbol(name) ** power for name, power in term.exponents])
                 for term in polynomial.terms), sympy.Integer(0)),
            *sympy.symbols("x y"),
        )
        assert ours == expected


# ── Rejections ───────────────────────────────────────────────────────────

class TestRejections:
    @pytest.mark.parametrize(
        "tree",
        [
            ex.div(x, ex.const(2)),
            ex.sqrt(x),
            ex.add(ex.const(1), ex.sqrt(ex.const(4))),
            ex.power(x, ex.const(Rational(1, 2))),
            ex.power(x, ex.neg(ex.const(1))),
            ex.power(x, y),
            ex.power(x, ex.const(2.5)),
            ex.power(x, ex.const(10 ** 9)),
        ],
    )
    def test_non_polynomial(self, tree):
        with pytest.raises(NonPolynomialConstruct):
            reduce_to_polynomial(tree)

    @pytest.mark.parametrize(
        "tree",
        [
            BinaryOperation(BinaryOperator.UNSPECIFIED, x, y),
            ex.add(x, UnsetExpression()),
            ex.UnaryOperation(ex.UnaryOperator.UNSPECIFIED, x),
        ],
    )
    def test_malformed(self, tree):
        with pytest.raises(MalformedOperator):
            reduce_to_polynomial(tree)


# ── Polynomial helpers ───────────────────────────────────────────────────

def test_polynomial_queries() -> None:
    polynomial = reduce_to_polynomial(ex.add(ex.mul(ex.power(x, ex.const(2)), y), ex.const(3)))
    assert polynomial.degree() == 3
    assert polynomial.variables() == {"x", "y"}
    assert not polynomial.is_constant()
    assert polynomial.terms[0].exponent_map() == {"x": 2, "y": 1}

    constant = reduce_to_polynomial(ex.mul(ex.const(2), ex.const(3)))
    assert constant.is_constant()
    assert constant.degree() == 0
    assert str(constant) == "6"


@pytest.mark.parametrize(
    "tree,expected",
    [
        (ex.mul(ex.const(3), ex.mul(x, y)), "3xy"),
        (ex.neg(x), "-x"),
        (ex.sub(ex.const(1), ex.mul(ex.const(4), x)), "-4x + 1"),
        (ex.mul(ex.const(2), ex.power(ex.var("rate"), ex.const(2))), "2*rate^2"),
        (ex.mul(ex.var("a"), ex.var("rate")), "a*rate"),
    ],
)
def test_string_form(tree, expected) -> None:
    assert str(reduce_to_polynomial(tree)) == expected
