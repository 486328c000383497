"""Exact fraction value type used by every matrix cell.

A ``Rational`` is always stored in lowest terms with a positive
denominator; zero is ``0/1``.  Instances are immutable: every arithmetic
operation returns a new value.  Reduction and sign normalisation are done by
SymPy's own ``Rational``, which this type wraps.
"""

import numbers

import sympy

from matrix_tutor.errors import DivideByZeroError, InvalidOperandError

# Precision used by ``Rational.from_number`` (six decimal places).
_FLOAT_PRECISION = 1_000_000


def _as_int(value, name: str) -> int:
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidOperandError(
        f"{name} must be an integer, got {value!r}."
    )


class Rational:
    """Immutable exact fraction ``numerator / denominator``."""

    __slots__ = ("_value",)

    def __init__(self, numerator=0, denominator=1):
        num = _as_int(numerator, "Numerator")
        den = _as_int(denominator, "Denominator")
        if den == 0:
            raise DivideByZeroError("Cannot build a fraction with denominator 0.")
        object.__setattr__(self, "_value", sympy.Rational(num, den))

    # ── Construction helpers ─────────────────────────────────────────

    @classmethod
    def _wrap(cls, value) -> "Rational":
        # ``value`` is already a reduced SymPy Rational.
        obj = cls.__new__(cls)
        object.__setattr__(obj, "_value", value)
        return obj

    @classmethod
    def coerce(cls, value) -> "Rational":
        """Turn *value* into a Rational without any loss of precision.

        Accepts Rationals, integers, integral floats and SymPy rationals.
        A non-integral float is rejected; use ``from_number`` when an
        approximation is really wanted.
        """
        if isinstance(value, Rational):
            return value
        if isinstance(value, sympy.Rational):
            return cls._wrap(value)
        if isinstance(value, bool):
            return cls(int(value))
        if isinstance(value, numbers.Integral):
            return cls(int(value))
        if isinstance(value, float):
            if value.is_integer():
                return cls(int(value))
            raise InvalidOperandError(
                f"{value!r} is not an exact value. "
                f"Use Rational.from_number() for a decimal approximation."
            )
        raise InvalidOperandError(f"Cannot use {value!r} as a fraction.")

    @classmethod
    def from_number(cls, value) -> "Rational":
        """Approximate a decimal number by a fraction (six decimal places)."""
        if isinstance(value, numbers.Integral):
            return cls(int(value))
        scaled = round(float(value) * _FLOAT_PRECISION)
        return cls(scaled, _FLOAT_PRECISION)

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def numerator(self) -> int:
        return int(self._value.p)

    @property
    def denominator(self) -> int:
        return int(self._value.q)

    def __setattr__(self, name, value):
        raise AttributeError("Rational values are immutable.")

    # ── Arithmetic ───────────────────────────────────────────────────

    def add(self, other) -> "Rational":
        other = Rational.coerce(other)
        return Rational._wrap(self._value + other._value)

    def subtract(self, other) -> "Rational":
        other = Rational.coerce(other)
        return Rational._wrap(self._value - other._value)

    def multiply(self, other) -> "Rational":
        other = Rational.coerce(other)
        return Rational._wrap(self._value * other._value)

    def divide(self, other) -> "Rational":
        other = Rational.coerce(other)
        if other.is_zero():
            raise DivideByZeroError("Cannot divide by zero.")
        return Rational._wrap(self._value / other._value)

    def negate(self) -> "Rational":
        return Rational._wrap(-self._value)

    def reciprocal(self) -> "Rational":
        return Rational(1).divide(self)

    # ── Predicates ───────────────────────────────────────────────────

    def equals(self, other) -> bool:
        other = Rational.coerce(other)
        return (self.numerator == other.numerator
                and self.denominator == other.denominator)

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_one(self) -> bool:
        return self.numerator == 1 and self.denominator == 1

    def is_negative(self) -> bool:
        return self.numerator < 0

    def is_integer(self) -> bool:
        return self.denominator == 1

    # ── Conversions ──────────────────────────────────────────────────

    def to_decimal(self) -> float:
        """Lossy float value, for display only."""
        return self.numerator / self.denominator

    def to_display_form(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def to_sympy(self) -> sympy.Rational:
        return self._value

    # ── Python protocol ──────────────────────────────────────────────

    def __add__(self, other):
        try:
            return self.add(other)
        except InvalidOperandError:
            return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        try:
            return self.subtract(other)
        except InvalidOperandError:
            return NotImplemented

    def __rsub__(self, other):
        try:
            return Rational.coerce(other).subtract(self)
        except InvalidOperandError:
            return NotImplemented

    def __mul__(self, other):
        try:
            return self.multiply(other)
        except InvalidOperandError:
            return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        try:
            other = Rational.coerce(other)
        except InvalidOperandError:
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        try:
            other = Rational.coerce(other)
        except InvalidOperandError:
            return NotImplemented
        return other.divide(self)

    def __neg__(self):
        return self.negate()

    def __abs__(self):
        return self.negate() if self.is_negative() else self

    def __eq__(self, other):
        try:
            other = Rational.coerce(other)
        except InvalidOperandError:
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        # Equal ints and SymPy rationals hash the same.
        return hash(self._value)

    def __reduce__(self):
        return Rational, (self.numerator, self.denominator)

    def __bool__(self):
        return not self.is_zero()

    def __float__(self):
        return self.to_decimal()

    def __str__(self):
        return self.to_display_form()

    def __repr__(self):
        if self.denominator == 1:
            return f"Rational({self.numerator})"
        return f"Rational({self.numerator}, {self.denominator})"


ZERO = Rational(0)
ONE = Rational(1)
MINUS_ONE = Rational(-1)
