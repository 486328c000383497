"""Tutor hints: the next row operation towards (reduced) row-echelon form.

The search is stateless; it reads the current matrix and walks the
coefficient columns left to right, keeping track of the row that should
receive the next pivot.  For each column the first unmet goal produces the
hint:

1. the pivot cell is zero but a lower row has a non-zero entry -> swap,
2. the pivot cell is not one -> scale by its reciprocal,
3. a cell below the pivot is not zero -> add a multiple of the pivot row,
4. (Gauss-Jordan only) a cell above the pivot is not zero -> same.
"""

import logging
from typing import Optional

from matrix_tutor.matrix import Matrix, RowOperation

LOG = logging.getLogger(__name__)


def next_operation(matrix: Matrix, reduced: bool = False,
                   coefficient_columns: Optional[int] = None) -> Optional[RowOperation]:
    """Suggest one row operation, or ``None`` when nothing is left to do.

    *coefficient_columns* defaults to every column but the last (the
    constants of an augmented system).  Use ``n`` for an ``[A | I]`` matrix.
    """
    width = matrix.cols - 1 if coefficient_columns is None else coefficient_columns
    data = matrix.data
    r = 0
    for col in range(width):
        if r >= matrix.rows:
            break
        pivot = data[r][col]
        if pivot.is_zero():
            for i in range(r + 1, matrix.rows):
                if not data[i][col].is_zero():
                    return RowOperation.swap(r, i)
            # Nothing to pivot on in this column.
            continue
        if not pivot.is_one():
            return RowOperation.scale(r, pivot.reciprocal())
        for i in range(r + 1, matrix.rows):
            if not data[i][col].is_zero():
                return RowOperation.add(i, r, -data[i][col])
        if reduced:
            for i in range(r):
                if not data[i][col].is_zero():
                    return RowOperation.add(i, r, -data[i][col])
        r += 1
    return None


def auto_reduce(matrix: Matrix, reduced: bool = False,
                coefficient_columns: Optional[int] = None) -> list:
    """Apply hints in place until none remain; return the operations used."""
    applied = []
    while True:
        op = next_operation(matrix, reduced, coefficient_columns)
        if op is None:
            break
        matrix.apply(op)
        applied.append(op)
    LOG.debug("auto_reduce finished after %d operation(s)", len(applied))
    return applied
