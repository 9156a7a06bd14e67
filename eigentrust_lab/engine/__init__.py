"""
Trust-propagation engine.

GraphModel -> trusted-set normalization -> row-stochastic trust matrix ->
damped power iteration, plus graph transforms (community aggregation, node
merge) and before/after comparisons of converged scores.
"""

from eigentrust_lab.engine.graph import GraphModel, Link, Node, NodeId
from eigentrust_lab.engine.vectors import InitialStateStrategy, normalize_trust_vector
from eigentrust_lab.engine.matrix import FallbackRowStrategy, build_trust_matrix, raw_weight_matrix
from eigentrust_lab.engine.solver import SolverResult, eigentrust
from eigentrust_lab.engine.transforms import community_id, merged_id, segment_lengths
from eigentrust_lab.engine.service import aggregate_by_community, compute_trust, merge_nodes
from eigentrust_lab.engine.comparison import (
    CommunityComparison,
    MergeComparison,
    TrustParameters,
    community_loss,
    compare_communities,
    compare_merge,
    compare_split,
)
from eigentrust_lab.engine.optimizer import (
    OptimizationResult,
    OptimizerConfig,
    initial_sliders,
    optimize_importance_weights,
)

__all__ = [
    "GraphModel",
    "Link",
    "Node",
    "NodeId",
    "InitialStateStrategy",
    "normalize_trust_vector",
    "FallbackRowStrategy",
    "build_trust_matrix",
    "raw_weight_matrix",
    "SolverResult",
    "eigentrust",
    "community_id",
    "merged_id",
    "segment_lengths",
    "aggregate_by_community",
    "compute_trust",
    "merge_nodes",
    "CommunityComparison",
    "MergeComparison",
    "TrustParameters",
    "community_loss",
    "compare_communities",
    "compare_merge",
    "compare_split",
    "OptimizationResult",
    "OptimizerConfig",
    "initial_sliders",
    "optimize_importance_weights",
]
