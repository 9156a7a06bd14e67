"""
Before-vs-after comparisons for graph transforms.

Joining nodes or collapsing communities should ideally leave the total trust
of the affected nodes unchanged. These helpers run the solver on both graphs
with the same parameters and report the combined score before, the score of
the replacement node after, and the relative difference.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from eigentrust_lab.config import get_settings
from eigentrust_lab.engine.graph import GraphModel, NodeId
from eigentrust_lab.engine.matrix import FallbackRowStrategy
from eigentrust_lab.engine.service import compute_trust
from eigentrust_lab.engine.transforms import aggregate_by_community, community_id, merge_nodes, merged_id
from eigentrust_lab.engine.vectors import InitialStateStrategy
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrustParameters:
    """Solver parameters shared by both sides of a comparison."""

    alpha: float = 0.15
    fallback: FallbackRowStrategy = FallbackRowStrategy.TRUST_SET
    initial_state: InitialStateStrategy = InitialStateStrategy.INITIAL_TRUST_WEIGHTS
    epsilon: float = 1e-6
    max_iterations: int = 1000

    @classmethod
    def from_settings(cls, **overrides: Any) -> "TrustParameters":
        """Defaults from settings; None-valued overrides are ignored."""
        settings = get_settings()
        values: dict[str, Any] = {
            "alpha": settings.alpha,
            "fallback": settings.fallback,
            "initial_state": settings.initial_state,
            "epsilon": settings.epsilon,
            "max_iterations": settings.max_iterations,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(
            alpha=float(values["alpha"]),
            fallback=FallbackRowStrategy.from_name(values["fallback"]),
            initial_state=InitialStateStrategy.from_name(values["initial_state"]),
            epsilon=float(values["epsilon"]),
            max_iterations=int(values["max_iterations"]),
        )

    def scores(self, graph: GraphModel) -> np.ndarray:
        """Converged scores of graph under these parameters."""
        return compute_trust(
            graph,
            alpha=self.alpha,
            fallback=self.fallback,
            initial_state=self.initial_state,
            epsilon=self.epsilon,
            max_iterations=self.max_iterations,
        ).final_vector


def percent_difference(before: float, after: float) -> float:
    """(after - before) / before in percent; 0 when before is 0."""
    if before > 0:
        return (after - before) / before * 100.0
    return 0.0


@dataclass(frozen=True)
class MergeComparison:
    merged_id: NodeId
    before: float
    after: float
    percent_diff: float
    original: GraphModel
    merged: GraphModel

    def to_dict(self) -> dict[str, Any]:
        return {
            "merged_id": self.merged_id,
            "before": self.before,
            "after": self.after,
            "percent_diff": self.percent_diff,
            "merged_graph": self.merged.to_dict(),
        }


@dataclass(frozen=True)
class CommunityComparison:
    group: int
    community_id: str
    before: float
    after: float
    percent_diff: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "community_id": self.community_id,
            "before": self.before,
            "after": self.after,
            "percent_diff": self.percent_diff,
        }


def compare_split(
    joined: GraphModel,
    split: GraphModel,
    joined_id: NodeId,
    split_ids: Sequence[NodeId],
    params: TrustParameters | None = None,
) -> tuple[float, float, float]:
    """
    Score of joined_id in joined vs. summed scores of split_ids in split.

    Returns (score_joined, score_split, percent_diff) with the joined score
    as the reference.
    """
    params = params or TrustParameters.from_settings()
    joined_scores = params.scores(joined)
    split_scores = params.scores(split)
    score_joined = float(joined_scores[joined.index_of(joined_id)])
    score_split = float(sum(split_scores[split.index_of(i)] for i in split_ids))
    return score_joined, score_split, percent_difference(score_joined, score_split)


def compare_merge(
    graph: GraphModel,
    id1: NodeId,
    id2: NodeId,
    params: TrustParameters | None = None,
) -> MergeComparison:
    """Combined score of id1 and id2 before the merge vs. the merged node after."""
    params = params or TrustParameters.from_settings()
    merged = merge_nodes(graph, id1, id2)
    original_scores = params.scores(graph)
    if id1 == id2:
        # nothing merged: the node compares against itself
        new_id: NodeId = id1
        before = float(original_scores[graph.index_of(id1)])
    else:
        new_id = merged_id(id1, id2)
        before = float(original_scores[graph.index_of(id1)] + original_scores[graph.index_of(id2)])
    merged_scores = params.scores(merged)
    after = float(merged_scores[merged.index_of(new_id)])
    comparison = MergeComparison(
        merged_id=new_id,
        before=before,
        after=after,
        percent_diff=percent_difference(before, after),
        original=graph,
        merged=merged,
    )
    logger.info(
        "merge_compared",
        merged_id=new_id,
        before=round(before, 6),
        after=round(after, 6),
        percent_diff=round(comparison.percent_diff, 4),
    )
    return comparison


def compare_communities(
    graph: GraphModel,
    importance_weights: Mapping[int, Sequence[float]] | None = None,
    params: TrustParameters | None = None,
    original_scores: np.ndarray | None = None,
) -> list[CommunityComparison]:
    """
    Per-group comparison of summed member scores vs. the community node score.

    original_scores may be passed in to skip re-solving the original graph
    (the optimizer does this on every loss evaluation).
    """
    params = params or TrustParameters.from_settings()
    aggregated = aggregate_by_community(graph, importance_weights)
    if original_scores is None:
        original_scores = params.scores(graph)
    aggregated_scores = params.scores(aggregated)

    comparisons: list[CommunityComparison] = []
    for group in graph.groups():
        before = float(
            sum(original_scores[i] for i, node in enumerate(graph.nodes) if node.group == group)
        )
        cid = community_id(group)
        after = float(aggregated_scores[aggregated.index_of(cid)])
        comparisons.append(
            CommunityComparison(
                group=group,
                community_id=cid,
                before=before,
                after=after,
                percent_diff=percent_difference(before, after),
            )
        )
    return comparisons


def community_loss(comparisons: Sequence[CommunityComparison]) -> float:
    """Sum of squared (after - before) over all communities."""
    return float(sum((c.after - c.before) ** 2 for c in comparisons))
