"""
FastAPI server: stateless HTTP surface over the trust engine.

Every request carries its graph; nothing is stored between calls. Engine
errors (ValidationError, DimensionMismatch) are returned as 422 with
{"detail", "error_code"}.
"""

from __future__ import annotations

from typing import Any, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from eigentrust_lab import __version__
from eigentrust_lab.core.exceptions import EigenTrustError
from eigentrust_lab.engine import (
    FallbackRowStrategy,
    GraphModel,
    InitialStateStrategy,
    TrustParameters,
    aggregate_by_community,
    community_loss,
    compare_communities,
    compare_merge,
    compute_trust,
    merge_nodes,
)
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)

NodeIdField = Union[str, int]


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------

class NodeModel(BaseModel):
    id: NodeIdField = Field(..., description="Unique node id")
    group: int = Field(1, description="Community tag; only used by aggregation")
    score: float = Field(0.0, ge=0, description="Pre-trust weight (un-normalized)")


class LinkModel(BaseModel):
    source: NodeIdField
    target: NodeIdField
    value: float = Field(1.0, ge=0, description="Trust weight source -> target")


class GraphPayload(BaseModel):
    nodes: list[NodeModel] = Field(default_factory=list)
    links: list[LinkModel] = Field(default_factory=list)

    def to_graph(self) -> GraphModel:
        return GraphModel.from_dict(self.model_dump())


class SolverParams(BaseModel):
    """Optional solver parameters; omitted values come from settings."""

    alpha: float | None = Field(None, ge=0, le=1, description="Damping weight of the trusted set")
    fallback: str | None = Field(None, description="TrustSet | Uniform | SelfTrust")
    initial_state: str | None = Field(None, description="FirstNode | Uniform | InitialTrustWeights")
    epsilon: float | None = Field(None, gt=0, description="Convergence threshold (L2 delta)")
    max_iterations: int | None = Field(None, ge=0, description="Iteration cap")

    def to_parameters(self) -> TrustParameters:
        return TrustParameters.from_settings(
            alpha=self.alpha,
            fallback=self.fallback,
            initial_state=self.initial_state,
            epsilon=self.epsilon,
            max_iterations=self.max_iterations,
        )


class ComputeRequest(SolverParams):
    graph: GraphPayload
    include_history: bool = Field(False, description="Return every iteration snapshot")


class ScoredNode(BaseModel):
    id: NodeIdField
    group: int
    score: float


class ComputeResponse(BaseModel):
    nodes: list[ScoredNode]
    final_vector: list[float]
    iterations: int
    converged: bool
    delta: float | None = None
    history: list[list[float]] | None = None


class AggregateRequest(BaseModel):
    graph: GraphPayload
    importance_weights: dict[int, list[float]] | None = Field(
        None, description="group -> one weight per member, in node order"
    )


class MergeRequest(BaseModel):
    graph: GraphPayload
    id1: NodeIdField
    id2: NodeIdField


class CompareMergeRequest(SolverParams):
    graph: GraphPayload
    id1: NodeIdField
    id2: NodeIdField


class CompareCommunitiesRequest(SolverParams):
    graph: GraphPayload
    importance_weights: dict[int, list[float]] | None = None


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="EigenTrust Lab API",
    description="Stateless EigenTrust computation and graph transforms.",
    version=__version__,
)


@app.exception_handler(EigenTrustError)
async def eigentrust_error_handler(request: Request, exc: EigenTrustError) -> JSONResponse:
    logger.info("api_engine_error", path=request.url.path, error_code=exc.error_code, error=exc.message)
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.get("/strategies")
def strategies() -> dict[str, list[str]]:
    """Names accepted for fallback and initial_state."""
    return {
        "fallback": [s.value for s in FallbackRowStrategy],
        "initial_state": [s.value for s in InitialStateStrategy],
    }


@app.post("/trust/compute", response_model=ComputeResponse)
def trust_compute(body: ComputeRequest) -> ComputeResponse:
    """Run EigenTrust on the posted graph; scores are in node order."""
    graph = body.graph.to_graph()
    params = body.to_parameters()
    result = compute_trust(
        graph,
        alpha=params.alpha,
        fallback=params.fallback,
        initial_state=params.initial_state,
        epsilon=params.epsilon,
        max_iterations=params.max_iterations,
    )
    payload: dict[str, Any] = result.to_dict(include_history=body.include_history)
    scored = [
        ScoredNode(id=node.id, group=node.group, score=float(score))
        for node, score in zip(graph.nodes, result.final_vector)
    ]
    return ComputeResponse(nodes=scored, **payload)


@app.post("/graph/aggregate")
def graph_aggregate(body: AggregateRequest) -> dict[str, Any]:
    """Collapse each group into a single community node."""
    return aggregate_by_community(body.graph.to_graph(), body.importance_weights).to_dict()


@app.post("/graph/merge")
def graph_merge(body: MergeRequest) -> dict[str, Any]:
    """Join id1 and id2 into one node."""
    return merge_nodes(body.graph.to_graph(), body.id1, body.id2).to_dict()


@app.post("/compare/merge")
def compare_merge_route(body: CompareMergeRequest) -> dict[str, Any]:
    """Combined trust of two nodes before vs. after merging them."""
    comparison = compare_merge(body.graph.to_graph(), body.id1, body.id2, body.to_parameters())
    return comparison.to_dict()


@app.post("/compare/communities")
def compare_communities_route(body: CompareCommunitiesRequest) -> dict[str, Any]:
    """Per-community trust before vs. after aggregation, plus the squared-error loss."""
    comparisons = compare_communities(
        body.graph.to_graph(), body.importance_weights, body.to_parameters()
    )
    return {
        "communities": [c.to_dict() for c in comparisons],
        "loss": community_loss(comparisons),
    }
