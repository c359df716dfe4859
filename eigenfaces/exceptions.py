"""
Errors raised by the eigenface engine.

All of them derive from EigenObjectError, itself a ValueError, so callers
that only care about "bad input" can catch ValueError as they would for the
rest of the scientific stack.
"""


class EigenObjectError(ValueError):
    """Base class for eigen-space construction and projection errors."""


class InsufficientTrainingData(EigenObjectError):
    """Fewer than two training images were supplied."""


class GeometryMismatch(EigenObjectError):
    """Images differ in width, height or stride."""


class DegenerateMatrix(EigenObjectError):
    """The eigenproblem has a zero, negative or non-square size."""


class NonPositiveEigenvalue(EigenObjectError):
    """A retained component has an eigenvalue <= 0, so its weight is undefined."""

    def __init__(self, index, eigenvalue):
        self.index = index
        self.eigenvalue = eigenvalue
        super().__init__(
            f"Eigenvalue {index} is {eigenvalue!r}; cannot weight a component "
            "with a non-positive eigenvalue"
        )
