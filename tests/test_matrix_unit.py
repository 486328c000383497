"""Tests for Matrix construction, row operations and structural predicates."""

import numpy as np
import pytest

from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.matrix import Matrix, RowOperation
from matrix_tutor.rational import Rational


def _m(rows) -> Matrix:
    return Matrix.from_rows(rows)


# ── Construction ─────────────────────────────────────────────────────────

class TestConstruction:
    def test_from_rows_and_get(self):
        m = _m([[1, 2], [3, 4]])
        assert m.shape == (2, 2)
        assert m.get(1, 0) == Rational(3)
        assert isinstance(m.get(0, 0), Rational)

    def test_from_rows_accepts_rationals_and_numpy(self):
        m = _m([[Rational(1, 2), 3]])
        assert m.get(0, 0) == Rational(1, 2)
        n = Matrix.from_rows(np.array([[1, 2], [3, 4]]))
        assert n == _m([[1, 2], [3, 4]])

    def test_ragged_rows_rejected(self):
        with pytest.raises(DimensionMismatchError):
            _m([[1, 2], [3]])

    def test_empty_rejected(self):
        with pytest.raises(DimensionMismatchError):
            _m([])
        with pytest.raises(DimensionMismatchError):
            Matrix(0, 3)

    def test_inexact_cells_rejected(self):
        with pytest.raises(InvalidOperandError):
            _m([[0.5, 1]])

    def test_identity_and_zeros(self):
        assert Matrix.identity(2) == _m([[1, 0], [0, 1]])
        assert Matrix(2, 3) == _m([[0, 0, 0], [0, 0, 0]])

    def test_clone_is_independent(self):
        m = _m([[1, 2], [3, 4]])
        c = m.clone()
        c.swap_rows(0, 1)
        assert m.get(0, 0) == Rational(1)
        assert c.get(0, 0) == Rational(3)

    def test_out_of_range_index(self):
        m = _m([[1, 2]])
        with pytest.raises(InvalidOperandError):
            m.get(1, 0)
        with pytest.raises(InvalidOperandError):
            m.swap_rows(0, 3)


# ── Row operations ───────────────────────────────────────────────────────

class TestRowOperations:
    def test_swap_rows(self):
        m = _m([[1, 2], [3, 4]])
        m.swap_rows(0, 1)
        assert m == _m([[3, 4], [1, 2]])

    def test_swap_same_row_is_noop(self):
        m = _m([[1, 2], [3, 4]])
        m.swap_rows(1, 1)
        assert m == _m([[1, 2], [3, 4]])

    def test_swap_twice_restores(self):
        m = _m([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        original = m.clone()
        m.swap_rows(0, 2)
        m.swap_rows(0, 2)
        assert m == original

    def test_scale_row(self):
        m = _m([[2, 4, 6]])
        m.scale_row(0, Rational(1, 2))
        assert m.row(0) == [Rational(1), Rational(2), Rational(3)]

    def test_scale_then_inverse_scale_restores(self):
        m = _m([[3, -1, 5], [2, 7, 1]])
        original = m.clone()
        k = Rational(-4, 3)
        m.scale_row(1, k)
        m.scale_row(1, k.reciprocal())
        assert m == original

    def test_scale_by_zero_fails(self):
        m = _m([[1, 2]])
        with pytest.raises(InvalidOperandError):
            m.scale_row(0, 0)

    def test_add_scaled_row(self):
        m = _m([[1, 2, 3], [2, 5, 8]])
        m.add_scaled_row(1, 0, -2)
        assert m == _m([[1, 2, 3], [0, 1, 2]])

    def test_add_row_to_itself_fails(self):
        m = _m([[1, 2], [3, 4]])
        with pytest.raises(InvalidOperandError):
            m.add_scaled_row(0, 0, 1)

    def test_apply_row_operation(self):
        m = _m([[0, 1, 2], [1, 1, 3]])
        m.apply(RowOperation.swap(0, 1))
        m.apply(RowOperation.add(1, 0, 0))
        m.apply(RowOperation.scale(1, 2))
        assert m == _m([[1, 1, 3], [0, 2, 4]])

    def test_describe(self):
        assert RowOperation.swap(0, 2).describe() == "R1 ↔ R3"
        assert RowOperation.scale(1, Rational(1, 2)).describe() == "R2 → (1/2)·R2"
        assert RowOperation.add(1, 0, -2).describe() == "R2 → R2 + (-2)·R1"

    def test_determinant_multiplier(self):
        assert RowOperation.swap(0, 1).determinant_multiplier() == -1
        assert RowOperation.scale(0, 5).determinant_multiplier() == 5
        assert RowOperation.add(0, 1, 7).determinant_multiplier() == 1


# ── Structural predicates ───────────────────────────────────────────────

class TestPredicates:
    def test_row_echelon_form(self):
        assert _m([[1, 2, 5], [0, 1, 1]]).is_row_echelon_form()
        assert not _m([[2, 2, 5], [0, 1, 1]]).is_row_echelon_form()
        assert not _m([[1, 2, 5], [1, 1, 1]]).is_row_echelon_form()
        assert not _m([[0, 1, 5], [1, 0, 1]]).is_row_echelon_form()

    def test_zero_rows_are_skipped(self):
        m = _m([[1, 2, 3, 4], [0, 0, 0, 0], [0, 0, 1, 2]])
        assert m.is_row_echelon_form()

    def test_zero_row_does_not_reset_last_pivot(self):
        m = _m([[0, 1, 3], [0, 0, 0], [1, 0, 2]])
        assert not m.is_row_echelon_form()

    def test_reduced_row_echelon_form(self):
        assert _m([[1, 0, 3], [0, 1, 1]]).is_reduced_row_echelon_form()
        ref_only = _m([[1, 2, 5], [0, 1, 1]])
        assert ref_only.is_row_echelon_form()
        assert not ref_only.is_reduced_row_echelon_form()

    def test_has_no_solution(self):
        assert _m([[1, 1, 2], [0, 0, 3]]).has_no_solution()
        assert not _m([[1, 1, 2], [0, 0, 0]]).has_no_solution()

    def test_has_infinite_solutions(self):
        assert _m([[1, 1, 2], [0, 0, 0]]).has_infinite_solutions()
        assert not _m([[1, 1, 2], [0, 1, 0]]).has_infinite_solutions()
        # A contradiction wins over a zero row.
        assert not _m([[0, 0, 0], [0, 0, 1]]).has_infinite_solutions()

    def test_find_pivot_columns(self):
        m = _m([[0, 2, 1], [0, 0, 5], [3, 0, 0]])
        assert m.find_pivot_columns() == [1, None, 0]

    def test_constants_column_is_not_a_pivot(self):
        assert _m([[0, 0, 7]]).find_pivot_columns() == [None]

    def test_left_block_identity(self):
        assert _m([[1, 0, 5, 6], [0, 1, 7, 8]]).is_left_block_identity(2)
        assert not _m([[1, 1, 5, 6], [0, 1, 7, 8]]).is_left_block_identity(2)

    def test_cell_states(self):
        m = _m([[1, 2, 5], [0, 3, 1]])
        states = m.cell_states()
        assert states[0] == ["correct", "default", "result"]
        assert states[1] == ["correct", "pivot", "result"]


# ── Derived matrices and display ────────────────────────────────────────

class TestDerived:
    def test_minor_is_fresh(self):
        m = _m([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        minor = m.minor(0, 1)
        assert minor == _m([[4, 6], [7, 9]])
        minor.set(0, 0, 100)
        assert m.get(1, 0) == Rational(4)

    def test_replace_column(self):
        m = _m([[1, 2], [3, 4]])
        replaced = m.replace_column(1, [9, 8])
        assert replaced == _m([[1, 9], [3, 8]])
        assert m == _m([[1, 2], [3, 4]])
        with pytest.raises(DimensionMismatchError):
            m.replace_column(0, [1, 2, 3])

    def test_augment_and_blocks(self):
        a = _m([[1, 2], [3, 4]])
        aug = a.augment(Matrix.identity(2))
        assert aug.shape == (2, 4)
        assert aug.left_block() == a
        assert aug.right_block() == Matrix.identity(2)
        assert a.augment([5, 6]) == _m([[1, 2, 5], [3, 4, 6]])

    def test_multiply_vector(self):
        a = _m([[1, 2], [3, 4]])
        assert a.multiply_vector([1, Rational(1, 2)]) == [Rational(2), Rational(5)]
        with pytest.raises(DimensionMismatchError):
            a.multiply_vector([1])

    def test_equations(self):
        m = _m([[2, -1, 0, 3], [1, 0, Rational(-1, 2), 0], [0, 0, 0, 4]])
        assert m.equations("xyz") == ["2x - y = 3", "x - 1/2z = 0", "0 = 4"]

    def test_str_marks_constants_column(self):
        text = str(_m([[1, 2, 5]]))
        assert "|" in text
        assert text.startswith("[")

    def test_numeric_views(self):
        m = _m([[1, Rational(1, 2)]])
        arr = m.to_decimal_array()
        assert arr.shape == (1, 2)
        assert np.allclose(arr, [[1.0, 0.5]])
        assert m.to_sympy().shape == (1, 2)
