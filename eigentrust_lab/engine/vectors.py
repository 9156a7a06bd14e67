"""
Trusted-set normalization and initial-state strategies.

normalize_trust_vector is the single place where an all-zero weight vector
turns into the uniform distribution over its own length.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import numpy as np

from eigentrust_lab.core.exceptions import ValidationError


def as_vector(values: Sequence[float] | np.ndarray, what: str = "vector") -> np.ndarray:
    """Copy values into a 1-D float array; ValidationError on wrong shape, NaN or infinity."""
    arr = np.array(values, dtype=float)
    if arr.ndim != 1:
        raise ValidationError(f"{what} must be one-dimensional, got shape {arr.shape}")
    if np.isnan(arr).any():
        raise ValidationError(f"{what} contains NaN")
    if np.isinf(arr).any():
        raise ValidationError(f"{what} contains an infinite value")
    return arr


def normalize_trust_vector(weights: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Scale non-negative weights to sum to 1.

    All-zero input yields 1/N for each of its N entries. An empty input
    returns an empty vector.
    """
    vec = as_vector(weights, "trust weights")
    if (vec < 0).any():
        raise ValidationError("trust weights must be non-negative")
    n = vec.shape[0]
    if n == 0:
        return vec
    total = vec.sum()
    if total > 0:
        return vec / total
    return np.full(n, 1.0 / n)


def _first_node(trusted_set: np.ndarray) -> np.ndarray:
    vec = np.zeros(trusted_set.shape[0])
    if vec.shape[0]:
        vec[0] = 1.0
    return vec


def _uniform(trusted_set: np.ndarray) -> np.ndarray:
    n = trusted_set.shape[0]
    return np.full(n, 1.0 / n) if n else np.zeros(0)


def _trust_weights(trusted_set: np.ndarray) -> np.ndarray:
    return trusted_set.copy()


class InitialStateStrategy(str, Enum):
    """Where the power iteration starts."""

    FIRST_NODE = "FirstNode"
    UNIFORM = "Uniform"
    INITIAL_TRUST_WEIGHTS = "InitialTrustWeights"

    @property
    def label(self) -> str:
        return _INITIAL_STATE_LABELS[self]

    def vector(self, trusted_set: Sequence[float] | np.ndarray) -> np.ndarray:
        """Initial state for a normalized trusted-set vector."""
        p = as_vector(trusted_set, "trusted set")
        if self is InitialStateStrategy.FIRST_NODE:
            return _first_node(p)
        if self is InitialStateStrategy.UNIFORM:
            return _uniform(p)
        return _trust_weights(p)

    @classmethod
    def from_name(cls, name: "str | InitialStateStrategy") -> "InitialStateStrategy":
        """Resolve a member from its value, member name or display label."""
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for member in cls:
            if key in (member.value, member.name, member.label):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValidationError(f"Unknown initial state strategy {name!r}; expected one of: {choices}")


_INITIAL_STATE_LABELS = {
    InitialStateStrategy.FIRST_NODE: "First Node",
    InitialStateStrategy.UNIFORM: "Uniform",
    InitialStateStrategy.INITIAL_TRUST_WEIGHTS: "Initial Trust Weights",
}
