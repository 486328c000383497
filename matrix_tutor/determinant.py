"""Determinant evaluation for square matrices of any order.

Orders 1-3 use closed forms (the single cell, ``ad - bc`` and the rule of
Sarrus).  Larger orders use Laplace expansion along the first row, recursing
into freshly built minors until a closed form applies.
"""

import logging

from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.matrix import Matrix, as_matrix
from matrix_tutor.rational import Rational, ZERO

LOG = logging.getLogger(__name__)

ROW = "row"
COLUMN = "col"

# Largest order accepted unless the caller passes its own bound.
DEFAULT_MAX_ORDER = 8


def _require_square(matrix: Matrix) -> None:
    if not matrix.is_square():
        raise DimensionMismatchError(
            f"Determinant needs a square matrix, got {matrix.rows}x{matrix.cols}."
        )


def _sign(power: int) -> Rational:
    return Rational(1) if power % 2 == 0 else Rational(-1)


def _det2(m: Matrix) -> Rational:
    a, b = m.data[0]
    c, d = m.data[1]
    return a.multiply(d).subtract(b.multiply(c))


def sarrus_terms(matrix) -> dict:
    """Diagonal products of the 3x5 Sarrus extension.

    Returns ``{"down": [aei, bfg, cdh], "up": [ceg, afh, bdi]}``.
    """
    m = as_matrix(matrix)
    if m.shape != (3, 3):
        raise DimensionMismatchError("The rule of Sarrus only applies to 3x3 matrices.")
    (a, b, c), (d, e, f), (g, h, i) = m.data
    down = [a * e * i, b * f * g, c * d * h]
    up = [c * e * g, a * f * h, b * d * i]
    return {"down": down, "up": up}


def extend_for_sarrus(matrix) -> Matrix:
    """The 3x5 matrix with columns 1 and 2 repeated after column 3."""
    m = as_matrix(matrix)
    if m.shape != (3, 3):
        raise DimensionMismatchError("The rule of Sarrus only applies to 3x3 matrices.")
    return m.submatrix(range(3), [0, 1, 2, 0, 1])


def _det3(m: Matrix) -> Rational:
    terms = sarrus_terms(m)
    down = terms["down"][0] + terms["down"][1] + terms["down"][2]
    up = terms["up"][0] + terms["up"][1] + terms["up"][2]
    return down - up


def _det(m: Matrix, closed_forms: bool) -> Rational:
    n = m.rows
    if n == 1:
        return m.data[0][0]
    if closed_forms and n == 2:
        return _det2(m)
    if closed_forms and n == 3:
        return _det3(m)
    total = ZERO
    for j in range(n):
        a = m.data[0][j]
        if a.is_zero():
            continue
        total = total + _sign(j) * a * _det(m.minor(0, j), closed_forms)
    return total


def determinant(matrix, closed_forms: bool = True,
                max_order: int = DEFAULT_MAX_ORDER) -> Rational:
    """Exact determinant of a square matrix.

    With ``closed_forms=False`` every order goes through cofactor
    expansion, which is handy for checking the Sarrus fast path.
    ``max_order`` bounds the recursion depth; callers that honour the
    user settings pass the ``max_order`` setting in.
    """
    m = as_matrix(matrix)
    _require_square(m)
    if m.rows > max_order:
        raise DimensionMismatchError(
            f"Matrix order {m.rows} exceeds the maximum of {max_order}."
        )
    result = _det(m, closed_forms)
    LOG.debug("det of %dx%d matrix = %s", m.rows, m.cols, result)
    return result


def cofactor_terms(matrix, line: str = ROW, index: int = 0) -> list:
    """Laplace expansion along one row or column, term by term.

    Each entry is a dict with ``row``, ``col``, ``element``, ``sign``
    (+1/-1 as a Rational), ``minor`` (the fresh minor Matrix, ``None`` for
    a 1x1 input), ``minor_determinant`` and ``contribution``.  The
    contributions sum to the determinant.
    """
    m = as_matrix(matrix)
    _require_square(m)
    if line not in (ROW, COLUMN):
        raise InvalidOperandError(f"Expansion line must be 'row' or 'col', got {line!r}.")
    n = m.rows
    if not 0 <= index < n:
        raise InvalidOperandError(f"Expansion index {index} is out of range for order {n}.")
    terms = []
    for k in range(n):
        r, c = (index, k) if line == ROW else (k, index)
        element = m.data[r][c]
        sign = _sign(r + c)
        if n == 1:
            minor, minor_det = None, Rational(1)
        else:
            minor = m.minor(r, c)
            minor_det = ZERO if element.is_zero() else determinant(minor, max_order=n)
        terms.append({
            "row": r,
            "col": c,
            "element": element,
            "sign": sign,
            "minor": minor,
            "minor_determinant": minor_det,
            "contribution": sign * element * minor_det,
        })
    return terms


def best_expansion_line(matrix) -> tuple:
    """Row or column with the most zeros, as ``(line, index)``.

    Rows win ties against columns and lower indices win ties.
    """
    m = as_matrix(matrix)
    _require_square(m)
    best = (ROW, 0)
    most = -1
    for i in range(m.rows):
        zeros = sum(1 for c in m.data[i] if c.is_zero())
        if zeros > most:
            best, most = (ROW, i), zeros
    for j in range(m.cols):
        zeros = sum(1 for r in m.data if r[j].is_zero())
        if zeros > most:
            best, most = (COLUMN, j), zeros
    return best
