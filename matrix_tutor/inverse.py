"""Gauss-Jordan inversion on an augmented ``[A | I]`` matrix.

The player chooses every row operation; the ``GaussJordanInverter`` only
applies what it is asked to and reports its state:

``reducing``          the left block is not the identity yet
``identity-reached``  the left block is exactly ``I``; the right block is A⁻¹
``extracted``         the inverse has been read out; no further operations

``gauss_jordan_solve`` drives the same machine with tutor hints for callers
that just want the answer.
"""

import logging
from typing import Optional

from matrix_tutor import hints
from matrix_tutor.determinant import determinant
from matrix_tutor.errors import (
    DimensionMismatchError, InvalidOperandError, SingularMatrixError,
)
from matrix_tutor.matrix import Matrix, RowOperation, as_matrix
from matrix_tutor.rational import Rational

LOG = logging.getLogger(__name__)

REDUCING = "reducing"
IDENTITY_REACHED = "identity-reached"
EXTRACTED = "extracted"


def build_augmented(coefficients) -> Matrix:
    """``[A | I]`` for a square ``A``."""
    a = as_matrix(coefficients)
    if not a.is_square():
        raise DimensionMismatchError(
            f"Only square matrices can be inverted, got {a.rows}x{a.cols}."
        )
    return a.augment(Matrix.identity(a.rows))


def multiply_by_constants(inverse, constants) -> list:
    """``X = A⁻¹ · b`` with exact arithmetic."""
    inv = as_matrix(inverse)
    b = [Rational.coerce(v) for v in constants]
    if len(b) != inv.cols:
        raise DimensionMismatchError(
            f"Expected {inv.cols} constants, got {len(b)}."
        )
    return inv.multiply_vector(b)


class GaussJordanInverter:
    """Caller-stepped reduction of ``[A | I]`` to ``[I | A⁻¹]``."""

    def __init__(self, coefficients, constants=None):
        self.coefficients = as_matrix(coefficients).clone()
        self.augmented = build_augmented(self.coefficients)
        self.size = self.coefficients.rows
        self.constants = None
        if constants is not None:
            self.constants = [Rational.coerce(v) for v in constants]
            if len(self.constants) != self.size:
                raise DimensionMismatchError(
                    f"Expected {self.size} constants, got {len(self.constants)}."
                )
        self.history = []
        self.operation_count = 0
        self.inverse = None
        self._state = REDUCING
        self._refresh_state()

    @property
    def state(self) -> str:
        return self._state

    def is_left_block_identity(self) -> bool:
        return self.augmented.is_left_block_identity(self.size)

    def _refresh_state(self) -> None:
        previous = self._state
        self._state = IDENTITY_REACHED if self.is_left_block_identity() else REDUCING
        if previous != self._state:
            LOG.debug("inverter state %s -> %s", previous, self._state)

    # ── Row operations ───────────────────────────────────────────────

    def apply(self, op: RowOperation) -> str:
        """Apply *op* to the augmented matrix and return the new state."""
        if self._state == EXTRACTED:
            raise InvalidOperandError("The inverse has already been extracted.")
        snapshot = self.augmented.clone()
        self.augmented.apply(op)
        self.history.append(snapshot)
        self.operation_count += 1
        self._refresh_state()
        return self._state

    def swap_rows(self, row1: int, row2: int) -> str:
        return self.apply(RowOperation.swap(row1, row2))

    def scale_row(self, row: int, factor) -> str:
        return self.apply(RowOperation.scale(row, factor))

    def add_scaled_row(self, target: int, source: int, factor) -> str:
        return self.apply(RowOperation.add(target, source, factor))

    def undo(self) -> bool:
        """Restore the matrix before the last operation.  False if none."""
        if self._state == EXTRACTED or not self.history:
            return False
        self.augmented = self.history.pop()
        self.operation_count -= 1
        self._refresh_state()
        return True

    def hint(self) -> Optional[RowOperation]:
        return hints.next_operation(self.augmented, reduced=True,
                                    coefficient_columns=self.size)

    # ── Results ──────────────────────────────────────────────────────

    def extract_inverse(self) -> Matrix:
        if self._state == EXTRACTED:
            return self.inverse.clone()
        if self._state != IDENTITY_REACHED:
            raise InvalidOperandError(
                "The left block is not the identity yet; keep reducing."
            )
        self.inverse = self.augmented.right_block(self.size)
        self._state = EXTRACTED
        LOG.debug("inverse extracted after %d operation(s)", self.operation_count)
        return self.inverse.clone()

    def solve(self, constants=None) -> list:
        """``A⁻¹ · b`` using the extracted inverse."""
        if self.inverse is None:
            self.extract_inverse()
        if constants is None:
            constants = self.constants
        if constants is None:
            raise DimensionMismatchError("No constants vector was given.")
        return multiply_by_constants(self.inverse, constants)


def _require_invertible(a: Matrix) -> None:
    if not a.is_square():
        raise DimensionMismatchError(
            f"Only square matrices can be inverted, got {a.rows}x{a.cols}."
        )
    det = determinant(a)
    if det.is_zero():
        raise SingularMatrixError(
            "det(A) = 0: the matrix has no inverse.", determinant=det
        )


def run_to_identity(inverter: GaussJordanInverter) -> list:
    """Apply hints until the left block is ``I``; return the operations."""
    applied = []
    while inverter.state == REDUCING:
        op = inverter.hint()
        if op is None:
            raise SingularMatrixError("The left block cannot be reduced to I.")
        inverter.apply(op)
        applied.append(op)
    return applied


def invert(coefficients) -> Matrix:
    """Exact inverse of a non-singular square matrix."""
    a = as_matrix(coefficients)
    _require_invertible(a)
    inverter = GaussJordanInverter(a)
    run_to_identity(inverter)
    return inverter.extract_inverse()


def gauss_jordan_solve(coefficients, constants) -> list:
    """Solve ``A x = b`` through ``[A | I] -> [I | A⁻¹]`` and ``x = A⁻¹ b``."""
    a = as_matrix(coefficients)
    _require_invertible(a)
    inverter = GaussJordanInverter(a, constants)
    run_to_identity(inverter)
    inverter.extract_inverse()
    return inverter.solve()
