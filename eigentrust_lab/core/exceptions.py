"""
Engine exceptions.

ValidationError and DimensionMismatch are raised synchronously before any
result is produced. Non-convergence is not an error: the solver returns a
result with converged=False and callers may opt into NonConvergenceWarning.
"""

from __future__ import annotations


class EigenTrustError(Exception):
    """Base class for engine errors; error_code is stable for API responses."""

    error_code = "eigentrust_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"detail": self.message, "error_code": self.error_code}


class ValidationError(EigenTrustError, ValueError):
    """Graph or parameter is invalid (unknown node id, negative weight, alpha out of range...)."""

    error_code = "validation_error"


class DimensionMismatch(EigenTrustError, ValueError):
    """Vector or matrix size disagrees with the node count."""

    error_code = "dimension_mismatch"


class NonConvergenceWarning(UserWarning):
    """Power iteration hit max_iterations before the delta dropped below epsilon."""
