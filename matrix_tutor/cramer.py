"""Cramer's Rule.

For ``A x = b`` with ``det(A) != 0`` each unknown is ``det(A_k) / det(A)``
where ``A_k`` is ``A`` with column *k* replaced by ``b``.
"""

import logging

from matrix_tutor.determinant import determinant
from matrix_tutor.errors import DimensionMismatchError, SingularMatrixError
from matrix_tutor.matrix import Matrix, as_matrix
from matrix_tutor.rational import Rational

LOG = logging.getLogger(__name__)


def _check_system(a: Matrix, constants) -> list:
    if not a.is_square():
        raise DimensionMismatchError(
            f"Cramer's Rule needs a square coefficient matrix, got {a.rows}x{a.cols}."
        )
    b = [Rational.coerce(v) for v in constants]
    if len(b) != a.rows:
        raise DimensionMismatchError(
            f"Expected {a.rows} constants, got {len(b)}."
        )
    return b


def cramer_matrix(coefficients, constants, column: int) -> Matrix:
    """``A`` with *column* replaced by the constants (``A`` is untouched)."""
    a = as_matrix(coefficients)
    b = _check_system(a, constants)
    return a.replace_column(column, b)


def cramer_determinants(coefficients, constants) -> tuple:
    """Return ``(det(A), [det(A_1), ..., det(A_n)])``."""
    a = as_matrix(coefficients)
    b = _check_system(a, constants)
    det_a = determinant(a)
    det_k = [determinant(a.replace_column(k, b)) for k in range(a.cols)]
    return det_a, det_k


def cramer_solve(coefficients, constants) -> list:
    """Solve ``A x = b`` exactly.  Raises ``SingularMatrixError`` if det(A) is 0."""
    a = as_matrix(coefficients)
    b = _check_system(a, constants)
    det_a = determinant(a)
    if det_a.is_zero():
        LOG.debug("Cramer: singular %dx%d system", a.rows, a.cols)
        raise SingularMatrixError(
            "det(A) = 0: the system has no unique solution.", determinant=det_a
        )
    return [determinant(a.replace_column(k, b)).divide(det_a) for k in range(a.cols)]
