"""
EigenTrust power iteration.

    t0 = initial_state (default p)
    repeat
        step = M^T . t_{k-1}
        t_k  = (1 - alpha) * step + alpha * p
        delta = || t_k - t_{k-1} ||_2
    until delta < epsilon or k == max_iterations

M is row-stochastic and p sums to 1, so every t_k is a non-negative vector
summing to 1. Hitting max_iterations is reported through converged=False,
never by raising.
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from eigentrust_lab.core.exceptions import DimensionMismatch, NonConvergenceWarning, ValidationError
from eigentrust_lab.engine.vectors import as_vector
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)

DEFAULT_ALPHA = 0.15
DEFAULT_EPSILON = 1e-6
DEFAULT_MAX_ITERATIONS = 1000


@dataclass
class SolverResult:
    """
    Outcome of one power-iteration run.

    history[0] is the initial state; history[k] is t_k. final_vector is the
    last snapshot. delta is the L2 distance of the last step (inf when no
    step was taken).
    """

    final_vector: np.ndarray
    history: list[np.ndarray] = field(default_factory=list)
    iterations: int = 0
    converged: bool = False
    delta: float = math.inf

    def warn_if_not_converged(self) -> None:
        """Emit NonConvergenceWarning when the run stopped on max_iterations."""
        if not self.converged:
            warnings.warn(
                f"EigenTrust did not converge within {self.iterations} iterations "
                f"(last delta {self.delta:.3g})",
                NonConvergenceWarning,
                stacklevel=2,
            )

    def to_dict(self, include_history: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "final_vector": self.final_vector.tolist(),
            "iterations": self.iterations,
            "converged": self.converged,
            "delta": self.delta if math.isfinite(self.delta) else None,
        }
        if include_history:
            out["history"] = [snapshot.tolist() for snapshot in self.history]
        return out


def _check_parameters(alpha: float, epsilon: float, max_iterations: int) -> None:
    if not 0.0 <= alpha <= 1.0:
        raise ValidationError(f"alpha must be in [0, 1], got {alpha}")
    if not epsilon > 0:
        raise ValidationError(f"epsilon must be positive, got {epsilon}")
    if max_iterations < 0:
        raise ValidationError(f"max_iterations must be >= 0, got {max_iterations}")


def eigentrust(
    matrix: Sequence[Sequence[float]] | np.ndarray,
    trusted_set: Sequence[float] | np.ndarray,
    alpha: float = DEFAULT_ALPHA,
    initial_state: Sequence[float] | np.ndarray | None = None,
    epsilon: float = DEFAULT_EPSILON,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> SolverResult:
    """
    Run damped power iteration to a fixed point.

    Args:
        matrix: Row-stochastic N x N trust matrix.
        trusted_set: Normalized pre-trust vector p (length N); also the damping anchor.
        alpha: Weight of p in each step, in [0, 1].
        initial_state: Starting vector (length N); defaults to p.
        epsilon: Stop once the L2 step delta drops below this.
        max_iterations: Hard cap on steps.

    Returns:
        SolverResult with the full iteration history.

    Raises:
        DimensionMismatch: matrix not square or vectors of the wrong length.
        ValidationError: alpha, epsilon or max_iterations out of range.
    """
    _check_parameters(alpha, epsilon, max_iterations)
    m = np.array(matrix, dtype=float)
    p = as_vector(trusted_set, "trusted set")
    n = p.shape[0]
    if m.shape != (n, n):
        raise DimensionMismatch(f"trust matrix shape {m.shape} does not match trusted set length {n}")
    t_prev = p.copy() if initial_state is None else as_vector(initial_state, "initial state")
    if t_prev.shape[0] != n:
        raise DimensionMismatch(f"initial state has {t_prev.shape[0]} entries, expected {n}")

    transposed = m.T
    history = [t_prev.copy()]
    delta = math.inf
    iterations = 0
    while iterations < max_iterations:
        t_next = (1.0 - alpha) * (transposed @ t_prev) + alpha * p
        delta = float(np.linalg.norm(t_next - t_prev))
        history.append(t_next)
        t_prev = t_next
        iterations += 1
        if delta < epsilon:
            break

    converged = delta < epsilon
    if not converged:
        logger.warning(
            "eigentrust_not_converged",
            nodes=n,
            iterations=iterations,
            delta=delta,
            epsilon=epsilon,
        )
    else:
        logger.debug("eigentrust_converged", nodes=n, iterations=iterations, delta=delta)
    return SolverResult(
        final_vector=t_prev.copy(),
        history=history,
        iterations=iterations,
        converged=converged,
        delta=delta,
    )
