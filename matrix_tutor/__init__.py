"""MatrixTutor — exact-rational linear algebra for the tutor games."""

from matrix_tutor.cramer import cramer_determinants, cramer_matrix, cramer_solve
from matrix_tutor.determinant import (
    best_expansion_line, cofactor_terms, determinant, extend_for_sarrus,
    sarrus_terms,
)
from matrix_tutor.errors import (
    DimensionMismatchError, DivideByZeroError, InvalidOperandError, LinAlgError,
    SingularMatrixError, UnresolvedVariableError,
)
from matrix_tutor.hints import auto_reduce, next_operation
from matrix_tutor.inverse import (
    EXTRACTED, IDENTITY_REACHED, REDUCING, GaussJordanInverter, build_augmented,
    gauss_jordan_solve, invert, multiply_by_constants,
)
from matrix_tutor.matrix import Matrix, RowOperation
from matrix_tutor.rational import Rational
from matrix_tutor.simplify import DeterminantSimplifier
from matrix_tutor.substitution import (
    UNRESOLVED, back_substitute, require_resolved, verify_solution,
)

__all__ = [
    "Rational", "Matrix", "RowOperation",
    "determinant", "sarrus_terms", "extend_for_sarrus", "cofactor_terms",
    "best_expansion_line",
    "cramer_solve", "cramer_matrix", "cramer_determinants",
    "GaussJordanInverter", "build_augmented", "multiply_by_constants",
    "gauss_jordan_solve", "invert", "REDUCING", "IDENTITY_REACHED", "EXTRACTED",
    "back_substitute", "require_resolved", "verify_solution", "UNRESOLVED",
    "next_operation", "auto_reduce", "DeterminantSimplifier",
    "LinAlgError", "DivideByZeroError", "InvalidOperandError",
    "DimensionMismatchError", "SingularMatrixError", "UnresolvedVariableError",
]
