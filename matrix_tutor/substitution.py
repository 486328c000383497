"""Back-substitution and solution checking.

``back_substitute`` reads an augmented matrix that is already in
row-echelon shape (pivot columns strictly increasing) and recovers the
unknowns from the last pivot row upwards.  Unknowns that cannot be pinned
down are reported as ``UNRESOLVED``.
"""

import logging

from matrix_tutor.errors import (
    DimensionMismatchError, InvalidOperandError, UnresolvedVariableError,
)
from matrix_tutor.matrix import as_matrix
from matrix_tutor.rational import Rational


LOG = logging.getLogger(__name__)


class Unresolved:
    """Marker for a variable back-substitution could not determine."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNRESOLVED"

    def __bool__(self):
        return False


UNRESOLVED = Unresolved()


def back_substitute(matrix) -> list:
    """Values of the unknowns of an echelon-form augmented matrix.

    Returns one entry per coefficient column: a ``Rational`` or
    ``UNRESOLVED``.  A variable is unresolved when no row pivots on it (a
    free variable) or when its row depends on an unresolved variable.

    Raises ``InvalidOperandError`` if the pivots do not strictly increase or
    if a row reads ``0 = c`` with ``c != 0``.
    """
    m = as_matrix(matrix)
    if m.cols < 2:
        raise DimensionMismatchError("An augmented matrix needs a constants column.")
    pivots = m.find_pivot_columns()
    last = -1
    for p in pivots:
        if p is None:
            continue
        if p <= last:
            raise InvalidOperandError(
                "Matrix is not in row-echelon form: pivot columns must increase."
            )
        last = p
    if m.has_no_solution():
        raise InvalidOperandError("The system is inconsistent (a row reads 0 = c).")

    n_vars = m.cols - 1
    values = [UNRESOLVED] * n_vars
    for i in range(m.rows - 1, -1, -1):
        p = pivots[i]
        if p is None:
            continue
        row = m.data[i]
        rhs = row[-1]
        depends_on_free = False
        for j in range(p + 1, n_vars):
            if row[j].is_zero():
                continue
            if values[j] is UNRESOLVED:
                depends_on_free = True
                break
            rhs = rhs.subtract(row[j].multiply(values[j]))
        if depends_on_free:
            continue
        values[p] = rhs.divide(row[p])
    LOG.debug("back-substitution: %s", values)
    return values


def require_resolved(values) -> list:
    """Return *values* unchanged, or raise if any entry is ``UNRESOLVED``."""
    missing = [i for i, v in enumerate(values) if v is UNRESOLVED]
    if missing:
        labels = ", ".join(str(i + 1) for i in missing)
        raise UnresolvedVariableError(
            f"The system is underdetermined: variable(s) {labels} are free.",
            indices=missing,
        )
    return list(values)


def verify_solution(coefficients, constants, solution) -> bool:
    """Substitute *solution* into ``A x = b`` and check every equation."""
    a = as_matrix(coefficients)
    b = [Rational.coerce(v) for v in constants]
    if len(b) != a.rows:
        raise DimensionMismatchError(f"Expected {a.rows} constants, got {len(b)}.")
    lhs = a.multiply_vector(solution)
    return all(l.equals(r) for l, r in zip(lhs, b))
