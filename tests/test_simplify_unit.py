"""Tests for the simplify-then-evaluate determinant flow."""

import numpy as np
import pytest

from matrix_tutor.determinant import determinant
from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.matrix import Matrix
from matrix_tutor.rational import Rational
from matrix_tutor.simplify import DeterminantSimplifier


def test_multiplier_tracks_operations() -> None:
    s = DeterminantSimplifier([[2, 4], [1, 3]])
    assert s.scale_row(0, Rational(1, 2)) == Rational(1, 2)
    assert s.swap_rows(0, 1) == Rational(-1, 2)
    assert s.add_scaled_row(1, 0, -1) == Rational(-1, 2)
    assert s.determinant() == Rational(2)
    assert s.original == Matrix.from_rows([[2, 4], [1, 3]])


def test_same_row_swap_not_counted() -> None:
    s = DeterminantSimplifier([[1, 2], [3, 4]], required_operations=("swap",))
    s.swap_rows(1, 1)
    assert s.multiplier == Rational(1)
    assert s.missing_operations() == ["swap"]


def test_required_operations() -> None:
    s = DeterminantSimplifier([[1, 2], [3, 4]], required_operations=("swap", "add"))
    assert not s.requirements_met()
    s.add_scaled_row(1, 0, -3)
    assert s.missing_operations() == ["swap"]
    s.swap_rows(0, 1)
    assert s.requirements_met()
    assert s.determinant() == Rational(-2)


def test_undo() -> None:
    s = DeterminantSimplifier([[1, 2], [3, 4]])
    s.scale_row(0, 3)
    assert s.undo() is True
    assert s.multiplier == Rational(1)
    assert s.operations_used["scale"] == 0
    assert s.matrix == s.original
    assert s.undo() is False


def test_rejects_bad_input() -> None:
    with pytest.raises(DimensionMismatchError):
        DeterminantSimplifier([[1, 2, 3]])
    with pytest.raises(InvalidOperandError):
        DeterminantSimplifier([[1]], required_operations=("transpose",))


def test_recovered_determinant_matches_direct() -> None:
    rng = np.random.default_rng(11)
    for _ in range(20):
        rows = rng.integers(-5, 6, size=(3, 3)).tolist()
        s = DeterminantSimplifier(rows)
        s.swap_rows(0, 2)
        s.scale_row(1, Rational(-3, 4))
        s.add_scaled_row(2, 1, Rational(5, 2))
        assert s.determinant() == determinant(rows)
