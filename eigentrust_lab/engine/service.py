"""
Engine operations exposed to the exploration tool and the API server.

compute_trust wires GraphModel -> normalized trusted set -> trust matrix ->
initial state -> power iteration. Omitted parameters come from settings.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from eigentrust_lab.config import get_settings
from eigentrust_lab.core.exceptions import ValidationError
from eigentrust_lab.engine import transforms
from eigentrust_lab.engine.graph import GraphModel, NodeId
from eigentrust_lab.engine.matrix import FallbackRowStrategy, build_trust_matrix
from eigentrust_lab.engine.solver import SolverResult, eigentrust
from eigentrust_lab.engine.vectors import InitialStateStrategy, normalize_trust_vector
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)


def compute_trust(
    graph: GraphModel,
    alpha: float | None = None,
    fallback: "str | FallbackRowStrategy | None" = None,
    initial_state: "str | InitialStateStrategy | None" = None,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> SolverResult:
    """
    Compute global trust scores for every node of graph.

    Scores are indexed like graph.nodes. The caller's graph is not modified.

    Raises:
        ValidationError: empty graph, unknown strategy name, out-of-range parameter.
        DimensionMismatch: propagated from the matrix builder / solver.
    """
    settings = get_settings()
    if len(graph) == 0:
        raise ValidationError("cannot compute trust for a graph without nodes")
    alpha = settings.alpha if alpha is None else alpha
    epsilon = settings.epsilon if epsilon is None else epsilon
    max_iterations = settings.max_iterations if max_iterations is None else max_iterations
    fallback_strategy = FallbackRowStrategy.from_name(settings.fallback if fallback is None else fallback)
    initial_strategy = InitialStateStrategy.from_name(
        settings.initial_state if initial_state is None else initial_state
    )

    trusted_set = normalize_trust_vector(graph.pre_trust_weights())
    matrix = build_trust_matrix(graph, trusted_set, fallback_strategy)
    start = initial_strategy.vector(trusted_set)
    result = eigentrust(
        matrix,
        trusted_set,
        alpha=alpha,
        initial_state=start,
        epsilon=epsilon,
        max_iterations=max_iterations,
    )
    logger.info(
        "trust_computed",
        nodes=len(graph),
        links=len(graph.links),
        alpha=alpha,
        fallback=fallback_strategy.value,
        initial_state=initial_strategy.value,
        iterations=result.iterations,
        converged=result.converged,
    )
    return result


def aggregate_by_community(
    graph: GraphModel,
    importance_weights: Mapping[int, Sequence[float]] | None = None,
) -> GraphModel:
    """One node per group; see transforms.aggregate_by_community."""
    return transforms.aggregate_by_community(graph, importance_weights)


def merge_nodes(graph: GraphModel, id1: NodeId, id2: NodeId) -> GraphModel:
    """Join two nodes into "id1+id2"; see transforms.merge_nodes."""
    return transforms.merge_nodes(graph, id1, id2)
