"""Rectangular matrix of exact Rational cells.

The matrix is row-major and mutated in place by the three elementary row
operations.  When used for Gaussian elimination it is *augmented*: the last
column holds the right-hand-side constants and the remaining columns hold
the coefficients.
"""

import logging
from typing import NamedTuple, Optional

import numpy as np
import sympy

from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.rational import Rational, ZERO, ONE

LOG = logging.getLogger(__name__)

SWAP = "swap"
SCALE = "scale"
ADD = "add"


class RowOperation(NamedTuple):
    """One elementary row operation.

    ``swap``:  exchange rows *target* and *source*.
    ``scale``: multiply row *target* by *factor*.
    ``add``:   row[target] <- row[target] + factor * row[source].
    """
    kind: str
    target: int
    source: Optional[int] = None
    factor: Optional[Rational] = None

    @classmethod
    def swap(cls, row1: int, row2: int) -> "RowOperation":
        return cls(SWAP, row1, row2, None)

    @classmethod
    def scale(cls, row: int, factor) -> "RowOperation":
        return cls(SCALE, row, None, Rational.coerce(factor))

    @classmethod
    def add(cls, target: int, source: int, factor) -> "RowOperation":
        return cls(ADD, target, source, Rational.coerce(factor))

    def determinant_multiplier(self) -> Rational:
        """Factor by which this operation multiplies a determinant."""
        if self.kind == SWAP:
            return Rational(-1) if self.target != self.source else ONE
        if self.kind == SCALE:
            return self.factor
        return ONE

    def describe(self) -> str:
        """Short notation with 1-based row labels, e.g. ``R2 → R2 + (-2)·R1``."""
        t = f"R{self.target + 1}"
        if self.kind == SWAP:
            return f"{t} ↔ R{self.source + 1}"
        f = self.factor.to_display_form()
        if self.kind == SCALE:
            return f"{t} → ({f})·{t}"
        return f"{t} → {t} + ({f})·R{self.source + 1}"


def _coerce_row(values) -> list:
    return [Rational.coerce(v) for v in values]


class Matrix:
    """``rows x cols`` grid of Rationals with row operations and predicates."""

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise DimensionMismatchError(
                f"A matrix needs at least one row and one column, got {rows}x{cols}."
            )
        self.rows = rows
        self.cols = cols
        self.data = [[ZERO for _ in range(cols)] for _ in range(rows)]

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def from_rows(cls, rows) -> "Matrix":
        """Build a matrix from a nested sequence of numbers or Rationals."""
        if isinstance(rows, Matrix):
            return rows.clone()
        if isinstance(rows, np.ndarray):
            rows = rows.tolist()
        rows = [list(r) for r in rows]
        if not rows or not rows[0]:
            raise DimensionMismatchError("A matrix needs at least one row and one column.")
        width = len(rows[0])
        for i, r in enumerate(rows):
            if len(r) != width:
                raise DimensionMismatchError(
                    f"Row {i + 1} has {len(r)} entries, expected {width}."
                )
        matrix = cls(len(rows), width)
        matrix.data = [_coerce_row(r) for r in rows]
        return matrix

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        matrix = cls(n, n)
        for i in range(n):
            matrix.data[i][i] = ONE
        return matrix

    def clone(self) -> "Matrix":
        copy = Matrix(self.rows, self.cols)
        # Rationals are immutable, copying the row lists is enough.
        copy.data = [list(r) for r in self.data]
        return copy

    # ── Cell access ──────────────────────────────────────────────────

    def _check_row(self, i: int) -> None:
        if not isinstance(i, int) or not 0 <= i < self.rows:
            raise InvalidOperandError(
                f"Row index {i!r} is out of range for a matrix with {self.rows} rows."
            )

    def _check_col(self, j: int) -> None:
        if not isinstance(j, int) or not 0 <= j < self.cols:
            raise InvalidOperandError(
                f"Column index {j!r} is out of range for a matrix with {self.cols} columns."
            )

    def get(self, row: int, col: int) -> Rational:
        self._check_row(row)
        self._check_col(col)
        return self.data[row][col]

    def set(self, row: int, col: int, value) -> None:
        self._check_row(row)
        self._check_col(col)
        self.data[row][col] = Rational.coerce(value)

    def row(self, i: int) -> list:
        self._check_row(i)
        return list(self.data[i])

    def column(self, j: int) -> list:
        self._check_col(j)
        return [r[j] for r in self.data]

    def to_rows(self) -> list:
        return [list(r) for r in self.data]

    @property
    def shape(self) -> tuple:
        return self.rows, self.cols

    @property
    def coefficient_count(self) -> int:
        """Number of coefficient columns (all but the constants column)."""
        return self.cols - 1

    def is_square(self) -> bool:
        return self.rows == self.cols

    # ── Row operations ───────────────────────────────────────────────

    def swap_rows(self, i: int, j: int) -> None:
        self._check_row(i)
        self._check_row(j)
        if i == j:
            return
        self.data[i], self.data[j] = self.data[j], self.data[i]
        LOG.debug("swap R%d <-> R%d", i + 1, j + 1)

    def scale_row(self, i: int, factor) -> None:
        self._check_row(i)
        factor = Rational.coerce(factor)
        if factor.is_zero():
            raise InvalidOperandError("Cannot scale a row by zero.")
        self.data[i] = [cell.multiply(factor) for cell in self.data[i]]
        LOG.debug("scale R%d by %s", i + 1, factor)

    def add_scaled_row(self, target: int, source: int, factor) -> None:
        self._check_row(target)
        self._check_row(source)
        if target == source:
            raise InvalidOperandError("Cannot add a row to itself.")
        factor = Rational.coerce(factor)
        src = self.data[source]
        self.data[target] = [
            cell.add(src[j].multiply(factor))
            for j, cell in enumerate(self.data[target])
        ]
        LOG.debug("R%d += %s * R%d", target + 1, factor, source + 1)

    def apply(self, op: RowOperation) -> None:
        """Apply a ``RowOperation`` to this matrix."""
        if op.kind == SWAP:
            self.swap_rows(op.target, op.source)
        elif op.kind == SCALE:
            self.scale_row(op.target, op.factor)
        elif op.kind == ADD:
            self.add_scaled_row(op.target, op.source, op.factor)
        else:
            raise InvalidOperandError(f"Unknown row operation {op.kind!r}.")

    # ── Pivots and structural predicates ─────────────────────────────

    def _pivot_of(self, i: int) -> Optional[int]:
        for j in range(self.cols - 1):
            if not self.data[i][j].is_zero():
                return j
        return None

    def find_pivot_columns(self) -> list:
        """Pivot column of every row, ``None`` for rows without a pivot."""
        return [self._pivot_of(i) for i in range(self.rows)]

    def _is_echelon(self, reduced: bool) -> bool:
        last_pivot = -1
        for i in range(self.rows):
            p = self._pivot_of(i)
            if p is None:
                continue
            if p <= last_pivot:
                return False
            if not self.data[i][p].is_one():
                return False
            for k in range(i + 1, self.rows):
                if not self.data[k][p].is_zero():
                    return False
            if reduced:
                for k in range(i):
                    if not self.data[k][p].is_zero():
                        return False
            last_pivot = p
        return True

    def is_row_echelon_form(self) -> bool:
        return self._is_echelon(reduced=False)

    def is_reduced_row_echelon_form(self) -> bool:
        return self._is_echelon(reduced=True)

    def has_no_solution(self) -> bool:
        """True if some row reads ``0 = c`` with ``c != 0``."""
        for i in range(self.rows):
            if self._pivot_of(i) is None and not self.data[i][-1].is_zero():
                return True
        return False

    def has_infinite_solutions(self) -> bool:
        """True if there is no contradiction and at least one all-zero row."""
        if self.has_no_solution():
            return False
        return any(all(c.is_zero() for c in r) for r in self.data)

    def is_left_block_identity(self, n: Optional[int] = None) -> bool:
        """True if the leading ``n x n`` block is exactly the identity."""
        if n is None:
            n = self.rows
        if n > self.rows or n > self.cols:
            return False
        for i in range(n):
            for j in range(n):
                cell = self.data[i][j]
                if i == j and not cell.is_one():
                    return False
                if i != j and not cell.is_zero():
                    return False
        return True

    def are_all_below_zero(self, start_row: int, col: int) -> bool:
        return all(self.data[k][col].is_zero() for k in range(start_row + 1, self.rows))

    def cell_states(self) -> list:
        """Classify each cell for progress rendering.

        ``result`` for the constants column, ``correct`` for a pivot equal to
        one with zeros beneath it and for zeros where the echelon form wants
        them, ``pivot`` for any other leading entry, ``default`` otherwise.
        """
        pivots = self.find_pivot_columns()
        states = []
        for i in range(self.rows):
            row_states = []
            p = pivots[i]
            for j in range(self.cols):
                cell = self.data[i][j]
                if j == self.cols - 1:
                    state = "result"
                elif p is not None and j == p:
                    if cell.is_one() and self.are_all_below_zero(i, j):
                        state = "correct"
                    else:
                        state = "pivot"
                elif p is not None and j < p:
                    state = "correct" if cell.is_zero() else "default"
                elif j in pivots[:i]:
                    state = "correct" if cell.is_zero() else "default"
                else:
                    state = "default"
                row_states.append(state)
            states.append(row_states)
        return states

    # ── Derived matrices ─────────────────────────────────────────────

    def submatrix(self, rows, cols) -> "Matrix":
        rows, cols = list(rows), list(cols)
        out = Matrix(len(rows), len(cols))
        out.data = [[self.data[i][j] for j in cols] for i in rows]
        return out

    def minor(self, row: int, col: int) -> "Matrix":
        """Fresh matrix with *row* and *col* deleted."""
        self._check_row(row)
        self._check_col(col)
        if self.rows < 2 or self.cols < 2:
            raise DimensionMismatchError("A 1-wide matrix has no minors.")
        return self.submatrix(
            (i for i in range(self.rows) if i != row),
            (j for j in range(self.cols) if j != col),
        )

    def replace_column(self, col: int, values) -> "Matrix":
        """Fresh matrix with column *col* replaced by *values*."""
        self._check_col(col)
        values = _coerce_row(values)
        if len(values) != self.rows:
            raise DimensionMismatchError(
                f"Expected {self.rows} values for the column, got {len(values)}."
            )
        out = self.clone()
        for i, v in enumerate(values):
            out.data[i][col] = v
        return out

    def augment(self, other) -> "Matrix":
        """Fresh ``[self | other]``; *other* may be a Matrix or a vector."""
        if not isinstance(other, Matrix):
            other = Matrix.from_rows([[v] for v in other])
        if other.rows != self.rows:
            raise DimensionMismatchError(
                f"Cannot augment {self.rows} rows with {other.rows} rows."
            )
        out = Matrix(self.rows, self.cols + other.cols)
        out.data = [list(a) + list(b) for a, b in zip(self.data, other.data)]
        return out

    def left_block(self, width: Optional[int] = None) -> "Matrix":
        width = self.rows if width is None else width
        return self.submatrix(range(self.rows), range(width))

    def right_block(self, width: Optional[int] = None) -> "Matrix":
        width = self.rows if width is None else width
        return self.submatrix(range(self.rows), range(self.cols - width, self.cols))

    def multiply_vector(self, vector) -> list:
        """Exact product ``M · v``."""
        vector = _coerce_row(vector)
        if len(vector) != self.cols:
            raise DimensionMismatchError(
                f"Vector has {len(vector)} entries, matrix has {self.cols} columns."
            )
        result = []
        for r in self.data:
            total = ZERO
            for a, v in zip(r, vector):
                total = total.add(a.multiply(v))
            result.append(total)
        return result

    # ── Conversions and display ──────────────────────────────────────

    def to_sympy(self) -> sympy.Matrix:
        return sympy.Matrix([[c.to_sympy() for c in r] for r in self.data])

    def to_decimal_array(self) -> np.ndarray:
        """Float view of the cells, informational only."""
        return np.array([[c.to_decimal() for c in r] for r in self.data], dtype=float)

    def equations(self, variables) -> list:
        """Render each row of an augmented matrix as a linear equation."""
        variables = list(variables)
        if len(variables) < self.cols - 1:
            raise DimensionMismatchError(
                f"Need {self.cols - 1} variable names, got {len(variables)}."
            )
        lines = []
        for r in self.data:
            eq = ""
            for j in range(self.cols - 1):
                coef = r[j]
                if coef.is_zero():
                    continue
                if eq:
                    eq += " - " if coef.is_negative() else " + "
                elif coef.is_negative():
                    eq += "-"
                mag = abs(coef)
                if not mag.is_one():
                    eq += mag.to_display_form()
                eq += variables[j]
            lines.append(f"{eq or '0'} = {r[-1].to_display_form()}")
        return lines

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self.data == other.data

    __hash__ = None

    def __repr__(self):
        body = ", ".join(
            "[" + ", ".join(c.to_display_form() for c in r) + "]" for r in self.data
        )
        return f"Matrix([{body}])"

    def __str__(self):
        lines = []
        for r in self.data:
            cells = []
            for j, c in enumerate(r):
                if j == self.cols - 1 and self.cols > 1:
                    cells.append("|")
                cells.append(c.to_display_form().rjust(4))
            lines.append("[ " + " ".join(cells) + " ]")
        return "\n".join(lines)


def as_matrix(value) -> Matrix:
    """Accept a Matrix or a nested sequence of numbers."""
    if isinstance(value, Matrix):
        return value
    return Matrix.from_rows(value)
