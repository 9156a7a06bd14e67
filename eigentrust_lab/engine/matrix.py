"""
Row-stochastic trust matrix from a GraphModel.

Row i holds node i's outgoing trust: the summed weight of every link i -> j,
divided by the row total. A dangling row (total 0) is replaced by the
selected FallbackRowStrategy, so every row of the result sums to 1.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import numpy as np

from eigentrust_lab.core.exceptions import DimensionMismatch, ValidationError
from eigentrust_lab.engine.graph import GraphModel
from eigentrust_lab.engine.vectors import as_vector
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)


class FallbackRowStrategy(str, Enum):
    """Distribution used for a node that trusts nobody."""

    TRUST_SET = "TrustSet"
    UNIFORM = "Uniform"
    SELF_TRUST = "SelfTrust"

    @property
    def label(self) -> str:
        return _FALLBACK_LABELS[self]

    def row(self, row_index: int, trusted_set: Sequence[float] | np.ndarray) -> np.ndarray:
        """Fallback row for node row_index given the normalized trusted set."""
        p = as_vector(trusted_set, "trusted set")
        n = p.shape[0]
        if self is FallbackRowStrategy.TRUST_SET:
            return p.copy()
        if self is FallbackRowStrategy.UNIFORM:
            return np.full(n, 1.0 / n)
        if not 0 <= row_index < n:
            raise DimensionMismatch(f"row index {row_index} outside 0..{n - 1}")
        identity = np.zeros(n)
        identity[row_index] = 1.0
        return identity

    @classmethod
    def from_name(cls, name: "str | FallbackRowStrategy") -> "FallbackRowStrategy":
        """Resolve a member from its value, member name or display label."""
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for member in cls:
            if key in (member.value, member.name, member.label):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValidationError(f"Unknown fallback strategy {name!r}; expected one of: {choices}")


_FALLBACK_LABELS = {
    FallbackRowStrategy.TRUST_SET: "TrustSet",
    FallbackRowStrategy.UNIFORM: "Uniform (PageRank)",
    FallbackRowStrategy.SELF_TRUST: "Self-Trust",
}


def raw_weight_matrix(graph: GraphModel) -> np.ndarray:
    """N x N matrix of summed link weights; parallel links on one pair add up."""
    n = len(graph)
    raw = np.zeros((n, n))
    for link in graph.links:
        raw[graph.index_of(link.source), graph.index_of(link.target)] += link.weight
    return raw


def build_trust_matrix(
    graph: GraphModel,
    trusted_set: Sequence[float] | np.ndarray,
    fallback: "str | FallbackRowStrategy" = FallbackRowStrategy.TRUST_SET,
) -> np.ndarray:
    """
    Normalize each node's outgoing weights into a row-stochastic matrix.

    Args:
        graph: Validated graph; node order defines row/column order.
        trusted_set: Normalized trusted-set vector, one entry per node.
        fallback: Strategy (or its name) for rows with zero out-weight.

    Returns:
        N x N float array whose rows each sum to 1.

    Raises:
        DimensionMismatch: trusted_set length differs from the node count.
        ValidationError: unknown fallback name.
    """
    strategy = FallbackRowStrategy.from_name(fallback)
    p = as_vector(trusted_set, "trusted set")
    n = len(graph)
    if p.shape[0] != n:
        raise DimensionMismatch(
            f"trusted set has {p.shape[0]} entries but graph has {n} nodes"
        )
    matrix = raw_weight_matrix(graph)
    sums = matrix.sum(axis=1)
    dangling = 0
    for i in range(n):
        if sums[i] > 0:
            matrix[i] /= sums[i]
        else:
            matrix[i] = strategy.row(i, p)
            dangling += 1
    if dangling:
        logger.debug(
            "trust_matrix_fallback_rows",
            nodes=n,
            dangling_rows=dangling,
            fallback=strategy.value,
        )
    return matrix
