"""
Real numbers for the expression engine.

A ``Real`` is one of three variants:

  - ``Integer``    : an exact whole number
  - ``Rational``   : an exact fraction, always in lowest terms with a
                     positive denominator other than 1
  - ``Irrational`` : an inexact IEEE-754 double

Exact arithmetic is carried out with SymPy numbers and mapped back onto the
variants, so a result that reduces to a whole number always comes back as
``Integer``.  As soon as an ``Irrational`` takes part in an operation the
result is ``Irrational`` as well (NumPy does the floating-point work).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Union

import numpy as np
import sympy

from mathengine.errors import DivisionByZero, NonRealResult, UndefinedResult

Number = Union["Real", int, float, Fraction]

# Exact values are kept within the signed 64-bit range; anything larger is
# carried as an Irrational.
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Real:
    """Base class for the three numeric variants."""

    __slots__ = ()

    # ── Construction ─────────────────────────────────────────────────────

    @staticmethod
    def of(value: Number) -> "Real":
        """Wrap a Python number.

        ``int`` becomes ``Integer``, ``Fraction`` is reduced to ``Integer``
        or ``Rational``, and ``float`` becomes ``Integer`` when it is a
        whole number, otherwise ``Irrational``.  Exact values outside the
        64-bit range come back as ``Irrational``.
        """
        if isinstance(value, Real):
            return value
        if isinstance(value, bool):
            raise TypeError("bool is not a real number")
        if isinstance(value, int):
            return _from_sympy(sympy.Integer(value))
        if isinstance(value, Fraction):
            return Rational.of(value.numerator, value.denominator)
        if isinstance(value, float):
            if not math.isfinite(value):
                raise UndefinedResult(f"Not a finite number: {value}")
            if value.is_integer() and _in_int64_range(int(value)):
                return Integer(int(value))
            return Irrational(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to a Real")

    # ── Queries ──────────────────────────────────────────────────────────

    def to_sympy(self):
        raise NotImplementedError

    def to_float(self) -> float:
        raise NotImplementedError

    def is_zero(self) -> bool:
        return self.to_float() == 0

    def is_negative(self) -> bool:
        return self.to_float() < 0

    def is_integer(self) -> bool:
        return isinstance(self, Integer)

    def is_exact(self) -> bool:
        return not isinstance(self, Irrational)

    def sort_key(self) -> tuple:
        """Key ordering reals by value, then by variant (exact first)."""
        return (self._sort_value(), _VARIANT_RANK[type(self)])

    def _sort_value(self):
        return self.to_sympy()

    # ── Display ──────────────────────────────────────────────────────────

    def to_plain_string(self) -> str:
        """Plain decimal form without thousands separators."""
        raise NotImplementedError

    def to_display_string(self) -> str:
        """Human-facing form: grouped integers, decimal expansions otherwise."""
        return self.to_plain_string()

    def __str__(self) -> str:
        return self.to_display_string()

    # ── Operators ────────────────────────────────────────────────────────

    def __add__(self, other: Number) -> "Real":
        return add(self, Real.of(other))

    def __radd__(self, other: Number) -> "Real":
        return add(Real.of(other), self)

    def __sub__(self, other: Number) -> "Real":
        return subtract(self, Real.of(other))

    def __rsub__(self, other: Number) -> "Real":
        return subtract(Real.of(other), self)

    def __mul__(self, other: Number) -> "Real":
        return multiply(self, Real.of(other))

    def __rmul__(self, other: Number) -> "Real":
        return multiply(Real.of(other), self)

    def __truediv__(self, other: Number) -> "Real":
        return divide(self, Real.of(other))

    def __rtruediv__(self, other: Number) -> "Real":
        return divide(Real.of(other), self)

    def __pow__(self, other: Number) -> "Real":
        return power(self, Real.of(other))

    def __neg__(self) -> "Real":
        return negate(self)

    def __abs__(self) -> "Real":
        return negate(self) if self.is_negative() else self


@dataclass(frozen=True)
class Integer(Real):
    value: int

    def __post_init__(self):
        if not _in_int64_range(self.value):
            raise ValueError(
                f"Integer {self.value} is outside the 64-bit range. Use Real.of() to convert."
            )

    def to_sympy(self):
        return sympy.Integer(self.value)

    def to_float(self) -> float:
        return float(self.value)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_negative(self) -> bool:
        return self.value < 0

    def to_plain_string(self) -> str:
        return str(self.value)

    def to_display_string(self) -> str:
        return f"{self.value:,}"


@dataclass(frozen=True)
class Rational(Real):
    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator <= 1:
            raise ValueError(
                f"Rational denominator must be greater than 1, got {self.denominator}. "
                f"Use Rational.of() to normalize."
            )
        if math.gcd(self.numerator, self.denominator) != 1:
            raise ValueError(
                f"Rational {self.numerator}/{self.denominator} is not in lowest terms. "
                f"Use Rational.of() to normalize."
            )
        if not (_in_int64_range(self.numerator) and _in_int64_range(self.denominator)):
            raise ValueError(
                f"Rational {self.numerator}/{self.denominator} is outside the 64-bit range. "
                f"Use Rational.of() to convert."
            )

    @staticmethod
    def of(numerator: int, denominator: int) -> Real:
        """Reduce ``numerator/denominator``; whole results come back as Integer."""
        if denominator == 0:
            raise DivisionByZero(f"Cannot build a fraction over zero: {numerator}/0")
        return _from_sympy(sympy.Rational(numerator, denominator))

    def to_sympy(self):
        return sympy.Rational(self.numerator, self.denominator)

    def to_float(self) -> float:
        return self.numerator / self.denominator

    def is_zero(self) -> bool:
        return False

    def is_negative(self) -> bool:
        return self.numerator < 0

    def to_plain_string(self) -> str:
        return _fmt_float(self.to_float())


@dataclass(frozen=True)
class Irrational(Real):
    value: float

    def __post_init__(self):
        if not math.isfinite(self.value):
            raise UndefinedResult(f"Result is not a finite number: {self.value}")

    def to_sympy(self):
        return sympy.Float(self.value)

    def to_float(self) -> float:
        return self.value

    def to_plain_string(self) -> str:
        return _fmt_float(self.value)


_VARIANT_RANK = {Integer: 0, Rational: 1, Irrational: 2}


def _fmt_float(value: float) -> str:
    """Plain positional decimal string (no exponent notation, no trailing zeros)."""
    return np.format_float_positional(value, trim="-")


def _in_int64_range(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def _from_sympy(value) -> Real:
    """Map a SymPy number onto a variant; exact values past 64 bits become Irrational."""
    if value.is_Integer and _in_int64_range(int(value)):
        return Integer(int(value))
    if value.is_Rational and not value.is_Integer \
            and _in_int64_range(int(value.p)) and _in_int64_range(int(value.q)):
        return Rational(int(value.p), int(value.q))
    return _irrational(value)


def _irrational(value) -> Irrational:
    try:
        value = float(value)
    except OverflowError:
        raise UndefinedResult("Result is too large to represent.")
    if not math.isfinite(value):
        raise UndefinedResult(f"Result is not a finite number: {value}")
    return Irrational(value)


def _either_irrational(lhs: Real, rhs: Real) -> bool:
    return isinstance(lhs, Irrational) or isinstance(rhs, Irrational)


def _power_exceeds_int64(base: Real, exponent: Real) -> bool:
    """True when ``|base| ** exponent`` certainly needs more than 64 bits.

    ``|b| >= 2 ** (bit_length - 1)``, so the exact power has at least
    ``(bit_length - 1) * |exponent|`` bits in its numerator or denominator.
    """
    if isinstance(base, Integer):
        bits = abs(base.value).bit_length()
    else:
        bits = max(abs(base.numerator).bit_length(), base.denominator.bit_length())
    return (bits - 1) * abs(exponent.to_float()) > 64


# ── Arithmetic ───────────────────────────────────────────────────────────

def add(lhs: Real, rhs: Real) -> Real:
    if _either_irrational(lhs, rhs):
        return _irrational(lhs.to_float() + rhs.to_float())
    return _from_sympy(lhs.to_sympy() + rhs.to_sympy())


def subtract(lhs: Real, rhs: Real) -> Real:
    if _either_irrational(lhs, rhs):
        return _irrational(lhs.to_float() - rhs.to_float())
    return _from_sympy(lhs.to_sympy() - rhs.to_sympy())


def multiply(lhs: Real, rhs: Real) -> Real:
    if _either_irrational(lhs, rhs):
        return _irrational(lhs.to_float() * rhs.to_float())
    return _from_sympy(lhs.to_sympy() * rhs.to_sympy())


def divide(lhs: Real, rhs: Real) -> Real:
    if rhs.is_zero():
        raise DivisionByZero(
            f"Division by zero: {lhs.to_plain_string()} / {rhs.to_plain_string()}",
            details={"numerator": lhs},
        )
    if _either_irrational(lhs, rhs):
        return _irrational(lhs.to_float() / rhs.to_float())
    return _from_sympy(lhs.to_sympy() / rhs.to_sympy())


def negate(value: Real) -> Real:
    if isinstance(value, Irrational):
        return Irrational(-value.value)
    # -INT64_MIN leaves the 64-bit range, so go through the mapping.
    return _from_sympy(-value.to_sympy())


def power(base: Real, exponent: Real) -> Real:
    """Raise *base* to *exponent*.

    Integer exponents on exact bases stay exact (``2 ^ -2`` is ``1/4``), and
    rational exponents stay exact when the root is exact (``4 ^ (1/2)`` is
    ``2``).  Results that cannot fit the 64-bit range are computed in
    floating point up front, so huge exponents never build huge integers;
    a float overflow then fails with ``UndefinedResult``.
    """
    if base.is_zero():
        if exponent.is_zero():
            raise UndefinedResult("Zero raised to the power of zero is undefined.")
        if exponent.is_negative():
            raise DivisionByZero("Zero raised to a negative power divides by zero.")
        return base if base.is_exact() and exponent.is_exact() else Irrational(0.0)

    if _either_irrational(base, exponent):
        exp_value = exponent.to_float()
        if base.is_negative() and not exp_value.is_integer():
            raise NonRealResult(
                f"Negative base {base.to_plain_string()} with non-integer exponent "
                f"{exponent.to_plain_string()} has no real value."
            )
        return _irrational(np.power(base.to_float(), exp_value))

    if isinstance(exponent, Integer):
        if _power_exceeds_int64(base, exponent):
            return _irrational(np.power(base.to_float(), exponent.to_float()))
        return _from_sympy(base.to_sympy() ** exponent.to_sympy())

    # Rational exponent p/q: take the real q-th root.
    if base.is_negative() and exponent.denominator % 2 == 0:
        raise NonRealResult(
            f"Even root of negative number {base.to_plain_string()} has no real value."
        )
    if _power_exceeds_int64(base, exponent):
        magnitude = _irrational(np.power(abs(base).to_float(), exponent.to_float()))
    else:
        magnitude = _from_sympy(abs(base).to_sympy() ** exponent.to_sympy())
    if base.is_negative() and exponent.numerator % 2 != 0:
        return negate(magnitude)
    return magnitude


def square_root(value: Real) -> Real:
    """Non-negative square root; exact for perfect squares."""
    if value.is_negative():
        raise NonRealResult(
            f"Square root of negative number {value.to_plain_string()} has no real value."
        )
    if isinstance(value, Irrational):
        return _irrational(np.sqrt(value.value))
    return _from_sympy(sympy.sqrt(value.to_sympy()))


def compare(lhs: Real, rhs: Real) -> int:
    """Return -1, 0 or 1 as *lhs* is less than, equal to, or greater than *rhs*."""
    left, right = lhs._sort_value(), rhs._sort_value()
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def is_within_tolerance(value: Real, expected: Real, tolerance: Number) -> bool:
    """True when ``|value - expected| <= tolerance`` (inclusive)."""
    tolerance = Real.of(tolerance)
    if tolerance.is_negative():
        raise ValueError("Tolerance must not be negative.")
    return compare(abs(subtract(value, expected)), tolerance) <= 0
