"""Error kinds raised by the exact-rational engine.

Every kind derives from ``LinAlgError`` which is itself a ``ValueError``,
so callers that already catch ``ValueError`` keep working.
"""


class LinAlgError(ValueError):
    """Base class for all engine errors."""


class DivideByZeroError(LinAlgError, ZeroDivisionError):
    """A Rational was built or divided with a zero denominator."""


class InvalidOperandError(LinAlgError):
    """A row operation was requested with an argument it cannot accept."""


class DimensionMismatchError(LinAlgError):
    """Matrix or vector shapes do not fit the requested operation."""


class SingularMatrixError(LinAlgError):
    """The coefficient matrix has a zero determinant."""

    def __init__(self, message: str = "Matrix is singular (determinant is 0).",
                 determinant=None):
        super().__init__(message)
        self.determinant = determinant


class UnresolvedVariableError(LinAlgError):
    """Back-substitution left at least one variable without a value."""

    def __init__(self, message: str, indices=None):
        super().__init__(message)
        self.indices = list(indices or [])
