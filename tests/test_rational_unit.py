"""Tests for the exact Rational value type."""

import copy
import itertools
import pickle

import pytest
import sympy

from matrix_tutor.errors import DivideByZeroError, InvalidOperandError, LinAlgError
from matrix_tutor.rational import Rational


# ── Construction and normalisation ──────────────────────────────────────

class TestConstruction:
    def test_reduces_to_lowest_terms(self):
        assert Rational(6, 4) == Rational(3, 2)
        assert Rational(6, 4).numerator == 3
        assert Rational(6, 4).denominator == 2

    def test_sign_moves_to_numerator(self):
        r = Rational(3, -6)
        assert r.numerator == -1
        assert r.denominator == 2
        assert Rational(-3, -6) == Rational(1, 2)

    def test_zero_is_unique(self):
        for den in (1, -5, 17):
            z = Rational(0, den)
            assert (z.numerator, z.denominator) == (0, 1)

    def test_zero_denominator_fails(self):
        with pytest.raises(DivideByZeroError):
            Rational(1, 0)

    def test_error_is_a_value_error_and_zero_division(self):
        with pytest.raises(ValueError):
            Rational(5, 0)
        with pytest.raises(ZeroDivisionError):
            Rational(5, 0)

    def test_non_integer_parts_rejected(self):
        with pytest.raises(InvalidOperandError):
            Rational(1.5, 2)

    def test_immutable(self):
        r = Rational(1, 2)
        with pytest.raises(AttributeError):
            r.foo = 3


# ── Arithmetic ───────────────────────────────────────────────────────────

class TestArithmetic:
    def test_named_operations(self):
        a, b = Rational(1, 2), Rational(1, 3)
        assert a.add(b) == Rational(5, 6)
        assert a.subtract(b) == Rational(1, 6)
        assert a.multiply(b) == Rational(1, 6)
        assert a.divide(b) == Rational(3, 2)

    def test_operators_with_ints(self):
        a = Rational(1, 2)
        assert a + 1 == Rational(3, 2)
        assert 1 - a == Rational(1, 2)
        assert 3 * a == Rational(3, 2)
        assert 1 / a == Rational(2)
        assert -a == Rational(-1, 2)
        assert abs(Rational(-2, 3)) == Rational(2, 3)

    def test_divide_by_zero(self):
        with pytest.raises(DivideByZeroError):
            Rational(3, 4).divide(Rational(0))
        with pytest.raises(DivideByZeroError):
            Rational(3, 4) / 0
        with pytest.raises(DivideByZeroError):
            Rational(0).reciprocal()

    def test_returns_new_instances(self):
        a = Rational(2, 5)
        b = a.add(Rational(0))
        assert a == b
        assert a.to_display_form() == "2/5"

    def test_exactness_property(self):
        values = [Rational(n, d) for n in range(-4, 5) for d in (1, 2, 3, 7)]
        for a, b in itertools.product(values, repeat=2):
            if b.is_zero():
                continue
            assert (a / b) * b == a


# ── Predicates and conversions ──────────────────────────────────────────

class TestPredicatesAndDisplay:
    def test_is_zero_and_is_one(self):
        assert Rational(0, 3).is_zero()
        assert Rational(4, 4).is_one()
        assert not Rational(1, 2).is_one()

    def test_equals_is_structural(self):
        assert Rational(2, 4).equals(Rational(1, 2))
        assert not Rational(1, 2).equals(Rational(-1, 2))
        assert hash(Rational(2, 4)) == hash(Rational(1, 2))

    def test_hash_agrees_with_equal_ints(self):
        assert Rational(2) == 2
        assert hash(Rational(2)) == hash(2)
        assert hash(Rational(-6, 3)) == hash(-2)
        assert len({Rational(2), 2, Rational(4, 2)}) == 1
        assert {3: "three"}[Rational(3)] == "three"
        assert hash(Rational(1, 2)) == hash(sympy.Rational(1, 2))

    def test_copy_and_pickle(self):
        r = Rational(-1, 2)
        assert copy.copy(r) == r
        assert copy.deepcopy([r])[0] == r
        assert pickle.loads(pickle.dumps(r)) == r

    @pytest.mark.parametrize(
        "num,den,expected",
        [(4, 2, "2"), (1, 3, "1/3"), (-5, 10, "-1/2"), (0, 9, "0"), (7, -1, "-7")],
    )
    def test_display_form(self, num, den, expected):
        assert Rational(num, den).to_display_form() == expected
        assert str(Rational(num, den)) == expected

    def test_to_decimal_is_informational(self):
        assert Rational(1, 4).to_decimal() == 0.25
        assert float(Rational(-3, 2)) == -1.5

    def test_repr(self):
        assert repr(Rational(3)) == "Rational(3)"
        assert repr(Rational(-1, 2)) == "Rational(-1, 2)"

    def test_to_sympy(self):
        assert Rational(3, 9).to_sympy() == sympy.Rational(1, 3)


# ── Coercion ─────────────────────────────────────────────────────────────

class TestCoerce:
    def test_accepts_exact_values(self):
        assert Rational.coerce(3) == Rational(3)
        assert Rational.coerce(4.0) == Rational(4)
        assert Rational.coerce(sympy.Rational(2, 6)) == Rational(1, 3)
        r = Rational(5, 7)
        assert Rational.coerce(r) is r

    def test_rejects_inexact_float(self):
        with pytest.raises(InvalidOperandError, match="from_number"):
            Rational.coerce(0.1)

    def test_rejects_strings(self):
        with pytest.raises(LinAlgError):
            Rational.coerce("1/2")

    def test_from_number_approximates(self):
        assert Rational.from_number(0.5) == Rational(1, 2)
        assert Rational.from_number(0.125) == Rational(1, 8)
        assert Rational.from_number(7) == Rational(7)
        assert Rational.from_number(1 / 3) == Rational(333333, 1000000)

    def test_equality_with_unrelated_types(self):
        assert Rational(1, 2) != "1/2"
        assert Rational(1, 2) != 0.5
