"""
Core cross-cutting pieces shared by the engine, API server and CLI.
"""

from eigentrust_lab.core.exceptions import (
    DimensionMismatch,
    EigenTrustError,
    NonConvergenceWarning,
    ValidationError,
)

__all__ = [
    "EigenTrustError",
    "ValidationError",
    "DimensionMismatch",
    "NonConvergenceWarning",
]
