"""
Compute EigenTrust scores for a graph JSON file and print the result as JSON.

The file holds {"nodes": [{"id", "group", "score"}], "links": [{"source", "target", "value"}]}.
Optionally merge two nodes or aggregate communities before solving.

Usage:
    python -m eigentrust_lab.cli graph.json
    python -m eigentrust_lab.cli graph.json --alpha 0.2 --fallback SelfTrust --history
    python -m eigentrust_lab.cli graph.json --merge Alice Bob --compare
    python -m eigentrust_lab.cli graph.json --aggregate
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from eigentrust_lab.core.exceptions import EigenTrustError
from eigentrust_lab.engine import (
    FallbackRowStrategy,
    GraphModel,
    InitialStateStrategy,
    TrustParameters,
    aggregate_by_community,
    compare_communities,
    compare_merge,
    community_loss,
    compute_trust,
    merge_nodes,
)


def _parse_node_id(raw: str) -> str | int:
    """Ids in JSON may be integers; accept "3" as 3 when the graph uses ints."""
    try:
        return int(raw)
    except ValueError:
        return raw


def _resolve_id(graph: GraphModel, raw: str) -> str | int:
    if graph.has_node(raw):
        return raw
    return _parse_node_id(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute EigenTrust scores for a graph JSON file")
    parser.add_argument("graph", type=Path, help="Path to graph JSON")
    parser.add_argument("--alpha", type=float, default=None, help="Damping weight of the trusted set [0, 1]")
    parser.add_argument(
        "--fallback",
        choices=[s.value for s in FallbackRowStrategy],
        default=None,
        help="Row used for nodes without outgoing trust",
    )
    parser.add_argument(
        "--initial-state",
        choices=[s.value for s in InitialStateStrategy],
        default=None,
        help="Starting vector of the power iteration",
    )
    parser.add_argument("--epsilon", type=float, default=None, help="Convergence threshold")
    parser.add_argument("--max-iterations", type=int, default=None, help="Iteration cap")
    parser.add_argument("--history", action="store_true", help="Include every iteration snapshot")
    transform = parser.add_mutually_exclusive_group()
    transform.add_argument("--merge", nargs=2, metavar=("ID1", "ID2"), help="Merge two nodes first")
    transform.add_argument("--aggregate", action="store_true", help="Aggregate nodes by group first")
    parser.add_argument(
        "--compare",
        action="store_true",
        help="With --merge/--aggregate: report scores before vs. after the transform",
    )
    return parser


def run(args: argparse.Namespace) -> dict[str, Any]:
    data = json.loads(args.graph.read_text(encoding="utf-8"))
    graph = GraphModel.from_dict(data)
    params = TrustParameters.from_settings(
        alpha=args.alpha,
        fallback=args.fallback,
        initial_state=args.initial_state,
        epsilon=args.epsilon,
        max_iterations=args.max_iterations,
    )

    if args.merge and args.compare:
        id1, id2 = (_resolve_id(graph, raw) for raw in args.merge)
        return compare_merge(graph, id1, id2, params).to_dict()
    if args.aggregate and args.compare:
        comparisons = compare_communities(graph, None, params)
        return {"communities": [c.to_dict() for c in comparisons], "loss": community_loss(comparisons)}

    if args.merge:
        id1, id2 = (_resolve_id(graph, raw) for raw in args.merge)
        graph = merge_nodes(graph, id1, id2)
    elif args.aggregate:
        graph = aggregate_by_community(graph)

    result = compute_trust(
        graph,
        alpha=params.alpha,
        fallback=params.fallback,
        initial_state=params.initial_state,
        epsilon=params.epsilon,
        max_iterations=params.max_iterations,
    )
    out = result.to_dict(include_history=args.history)
    out["nodes"] = [
        {"id": node.id, "group": node.group, "score": float(score)}
        for node, score in zip(graph.nodes, result.final_vector)
    ]
    return out


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.compare and not (args.merge or args.aggregate):
        parser.error("--compare requires --merge or --aggregate")
    try:
        out = run(args)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read graph: {e}", file=sys.stderr)
        return 2
    except EigenTrustError as e:
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        return 2
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
