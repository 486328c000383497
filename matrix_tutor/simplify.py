"""Simplify-then-evaluate flow for determinants.

Row operations change a determinant in a known way: a swap flips its sign,
scaling a row by ``k`` multiplies it by ``k`` and adding a multiple of one
row to another leaves it unchanged.  ``DeterminantSimplifier`` applies
operations to a working copy while keeping the running multiplier, so

    det(original) = det(working) / multiplier
"""

import logging

from matrix_tutor.determinant import determinant
from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.matrix import ADD, SCALE, SWAP, RowOperation, as_matrix
from matrix_tutor.rational import Rational, ONE

LOG = logging.getLogger(__name__)

OPERATION_KINDS = (SWAP, SCALE, ADD)


class DeterminantSimplifier:
    """Working copy of a square matrix plus the determinant multiplier."""

    def __init__(self, matrix, required_operations=()):
        original = as_matrix(matrix)
        if not original.is_square():
            raise DimensionMismatchError(
                f"Only square matrices have a determinant, got "
                f"{original.rows}x{original.cols}."
            )
        unknown = [k for k in required_operations if k not in OPERATION_KINDS]
        if unknown:
            raise InvalidOperandError(f"Unknown operation kind(s): {', '.join(unknown)}")
        self.original = original.clone()
        self.matrix = original.clone()
        self.multiplier = ONE
        self.operations_used = {kind: 0 for kind in OPERATION_KINDS}
        self.required_operations = tuple(required_operations)
        self.history = []

    def apply(self, op: RowOperation) -> Rational:
        """Apply *op* and return the updated multiplier."""
        snapshot = (self.matrix.clone(), self.multiplier, dict(self.operations_used))
        self.matrix.apply(op)
        self.history.append(snapshot)
        if op.kind == SWAP and op.target == op.source:
            return self.multiplier
        self.multiplier = self.multiplier.multiply(op.determinant_multiplier())
        self.operations_used[op.kind] += 1
        LOG.debug("simplifier %s, multiplier now %s", op.describe(), self.multiplier)
        return self.multiplier

    def swap_rows(self, row1: int, row2: int) -> Rational:
        return self.apply(RowOperation.swap(row1, row2))

    def scale_row(self, row: int, factor) -> Rational:
        return self.apply(RowOperation.scale(row, factor))

    def add_scaled_row(self, target: int, source: int, factor) -> Rational:
        return self.apply(RowOperation.add(target, source, factor))

    def undo(self) -> bool:
        if not self.history:
            return False
        self.matrix, self.multiplier, self.operations_used = self.history.pop()
        return True

    def missing_operations(self) -> list:
        """Required operation kinds that have not been demonstrated yet."""
        return [k for k in self.required_operations if self.operations_used[k] == 0]

    def requirements_met(self) -> bool:
        return not self.missing_operations()

    def working_determinant(self) -> Rational:
        return determinant(self.matrix)

    def determinant(self) -> Rational:
        """Determinant of the original matrix, recovered from the working copy."""
        return self.working_determinant().divide(self.multiplier)
