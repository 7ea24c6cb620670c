"""Tests for the Real number model and its arithmetic."""

from fractions import Fraction

import pytest

from mathengine import real
from mathengine.errors import DivisionByZero, NonRealResult, UndefinedResult
from mathengine.real import Integer, Irrational, Rational, Real


# ── Construction ─────────────────────────────────────────────────────────

class TestConstruction:
    def test_of_int(self):
        assert Real.of(3) == Integer(3)

    def test_of_whole_float_is_integer(self):
        assert Real.of(2.0) == Integer(2)

    def test_of_fractional_float_is_irrational(self):
        assert Real.of(0.25) == Irrational(0.25)

    def test_of_fraction_reduces(self):
        assert Real.of(Fraction(6, 4)) == Rational(3, 2)
        assert Real.of(Fraction(8, 4)) == Integer(2)

    def test_of_rejects_bool_and_non_finite(self):
        with pytest.raises(TypeError):
            Real.of(True)
        with pytest.raises(UndefinedResult):
            Real.of(float("inf"))

    @pytest.mark.parametrize(
        "numerator,denominator,expected",
        [
            (2, 4, Rational(1, 2)),
            (3, -6, Rational(-1, 2)),
            (-3, -6, Rational(1, 2)),
            (4, 2, Integer(2)),
            (0, 5, Integer(0)),
        ],
    )
    def test_rational_of_normalizes(self, numerator, denominator, expected):
        assert Rational.of(numerator, denominator) == expected

    def test_rational_of_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            Rational.of(1, 0)

    def test_rational_constructor_rejects_unreduced(self):
        with pytest.raises(ValueError, match="lowest terms"):
            Rational(2, 4)
        with pytest.raises(ValueError, match="greater than 1"):
            Rational(3, 1)


# ── Arithmetic and promotion ─────────────────────────────────────────────

class TestArithmetic:
    def test_integer_addition(self):
        assert real.add(Integer(2), Integer(3)) == Integer(5)

    def test_rational_sum_is_exact(self):
        assert real.add(Rational(1, 2), Rational(1, 3)) == Rational(5, 6)

    def test_rational_sum_collapses_to_integer(self):
        assert real.add(Rational(1, 2), Rational(1, 2)) == Integer(1)

    def test_integer_division_produces_rational(self):
        assert real.divide(Integer(1), Integer(3)) == Rational(1, 3)
        assert real.divide(Integer(6), Integer(3)) == Integer(2)

    def test_irrational_is_contagious(self):
        assert real.add(Irrational(0.5), Integer(1)) == Irrational(1.5)
        assert real.multiply(Rational(1, 2), Irrational(3.0)) == Irrational(1.5)

    def test_negate(self):
        assert real.negate(Integer(4)) == Integer(-4)
        assert real.negate(Rational(1, 2)) == Rational(-1, 2)
        assert real.negate(Irrational(0.5)) == Irrational(-0.5)

    def test_operator_overloads(self):
        assert Integer(1) + 2 == Integer(3)
        assert 1 - Integer(3) == Integer(-2)
        assert Integer(3) * Rational(1, 3) == Integer(1)
        assert Integer(1) / 4 == Rational(1, 4)
        assert -Rational(1, 2) == Rational(-1, 2)
        assert abs(Rational(-1, 2)) == Rational(1, 2)

    @pytest.mark.parametrize("zero", [Integer(0), Irrational(0.0)])
    def test_division_by_zero(self, zero):
        with pytest.raises(DivisionByZero):
            real.divide(Integer(5), zero)

    def test_division_by_zero_is_a_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            Integer(5) / 0

    def test_overflow_is_an_error_not_infinity(self):
        with pytest.raises(UndefinedResult):
            real.multiply(Irrational(1e308), Integer(10))


class TestPower:
    @pytest.mark.parametrize(
        "base,exponent,expected",
        [
            (Integer(2), Integer(10), Integer(1024)),
            (Integer(2), Integer(-2), Rational(1, 4)),
            (Rational(2, 3), Integer(2), Rational(4, 9)),
            (Integer(4), Rational(1, 2), Integer(2)),
            (Integer(-8), Rational(1, 3), Integer(-2)),
            (Integer(0), Integer(3), Integer(0)),
            (Irrational(2.5), Integer(2), Irrational(6.25)),
        ],
    )
    def test_power(self, base, exponent, expected):
        assert real.power(base, exponent) == expected

    def test_inexact_root_becomes_irrational(self):
        result = real.power(Integer(2), Rational(1, 2))
        assert isinstance(result, Irrational)
        assert abs(result.value - 2 ** 0.5) < 1e-12

    def test_zero_to_zero_is_undefined(self):
        with pytest.raises(UndefinedResult):
            real.power(Integer(0), Integer(0))

    def test_zero_to_negative_divides_by_zero(self):
        with pytest.raises(DivisionByZero):
            real.power(Integer(0), Integer(-1))

    def test_even_root_of_negative(self):
        with pytest.raises(NonRealResult):
            real.power(Integer(-4), Rational(1, 2))
        with pytest.raises(NonRealResult):
            real.power(Irrational(-2.5), Irrational(0.5))


class TestSquareRoot:
    def test_perfect_squares_stay_exact(self):
        assert real.square_root(Integer(9)) == Integer(3)
        assert real.square_root(Rational(9, 4)) == Rational(3, 2)

    def test_non_square_is_irrational(self):
        assert real.square_root(Integer(2)) == Irrational(1.4142135623730951)

    def test_negative_argument(self):
        with pytest.raises(NonRealResult):
            real.square_root(Integer(-1))


# ── Comparison and display ───────────────────────────────────────────────

def test_compare_and_sort_key() -> None:
    assert real.compare(Rational(1, 3), Irrational(0.3)) == 1
    assert real.compare(Integer(2), Irrational(2.0)) == 0
    values = [Irrational(0.5), Integer(1), Rational(1, 3)]
    assert sorted(values, key=Real.sort_key) == [Rational(1, 3), Irrational(0.5), Integer(1)]


@pytest.mark.parametrize(
    "value,expected",
    [
        (Integer(1234567), "1,234,567"),
        (Integer(-1000), "-1,000"),
        (Integer(12), "12"),
        (Rational(1, 2), "0.5"),
        (Rational(1, 3), "0.3333333333333333"),
        (Irrational(2.5), "2.5"),
        (Irrational(1e-7), "0.0000001"),
    ],
)
def test_display_string(value: Real, expected: str) -> None:
    assert str(value) == expected


def test_plain_string_has_no_grouping() -> None:
    assert Integer(1234567).to_plain_string() == "1234567"


class TestTolerance:
    def test_within_tolerance(self):
        assert real.is_within_tolerance(Real.of(2.5), Real.of(3.5), 1.5)

    def test_outside_tolerance(self):
        assert not real.is_within_tolerance(Real.of(1.5), Real.of(3.5), 1.5)

    def test_boundary_is_inclusive(self):
        assert real.is_within_tolerance(Real.of(2.5), Real.of(3.5), 1)
        assert real.is_within_tolerance(Real.of(-2.5), Real.of(-3.5), 1)

    def test_exact_values(self):
        assert real.is_within_tolerance(Rational(1, 3), Integer(0), Rational(1, 3))
        assert not real.is_within_tolerance(Rational(1, 3), Integer(0), Rational(1, 4))

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError, match="must not be negative"):
            real.is_within_tolerance(Integer(1), Integer(1), -1)


class TestSixtyFourBitRange:
    def test_integer_constructor_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="64-bit"):
            Integer(2 ** 63)
        with pytest.raises(ValueError, match="64-bit"):
            Rational(1, 2 ** 70)

    def test_large_values_become_irrational(self):
        assert Real.of(2 ** 70) == Irrational(float(2 ** 70))
        assert Real.of(1e20) == Irrational(1e20)
        assert Rational.of(1, 2 ** 70) == Irrational(2.0 ** -70)

    def test_unrepresentable_values_are_undefined(self):
        with pytest.raises(UndefinedResult):
            Real.of(10 ** 400)

    def test_arithmetic_leaving_the_range(self):
        assert real.add(Integer(real.INT64_MAX), Integer(1)) == Irrational(float(2 ** 63))
        assert real.negate(Integer(real.INT64_MIN)) == Irrational(float(2 ** 63))
        assert real.multiply(Integer(2 ** 62), Integer(-2)) == Integer(real.INT64_MIN)

    def test_power_stays_exact_inside_the_range(self):
        assert real.power(Integer(2), Integer(62)) == Integer(2 ** 62)
        assert real.power(Integer(2), Integer(64)) == Irrational(float(2 ** 64))

    def test_huge_exponents_do_not_build_huge_integers(self):
        with pytest.raises(UndefinedResult):
            real.power(Integer(10), Integer(10 ** 11))
        with pytest.raises(UndefinedResult):
            real.power(Integer(-3), Rational(10 ** 12 + 1, 3))
        assert real.power(Rational(1, 2), Integer(1000)) == Irrational(0.5 ** 1000)

    def test_unit_bases_with_huge_exponents(self):
        assert real.power(Integer(1), Integer(10 ** 11)) == Integer(1)
        assert real.power(Integer(-1), Integer(10 ** 11 + 1)) == Integer(-1)
