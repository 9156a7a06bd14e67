"""
Graph transforms: community aggregation and node merge.

Both are pure: they read a validated GraphModel and return a new one that
feeds straight back into build_trust_matrix / eigentrust for before-vs-after
comparisons. Trust mass is preserved in the sense that pre-trust of the
replaced nodes is summed onto the replacement node.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from eigentrust_lab.core.exceptions import DimensionMismatch, ValidationError
from eigentrust_lab.engine.graph import GraphModel, Link, Node, NodeId
from eigentrust_lab.lab_logging import get_logger

logger = get_logger(__name__)

COMMUNITY_ID_TEMPLATE = "Community {group}"


def community_id(group: int) -> str:
    """Id of the synthetic node that stands for a whole group."""
    return COMMUNITY_ID_TEMPLATE.format(group=group)


def merged_id(id1: NodeId, id2: NodeId) -> str:
    """Id of the node that replaces id1 and id2."""
    return f"{id1}+{id2}"


def segment_lengths(slider_values: Sequence[float]) -> list[float]:
    """
    Turn n-1 slider positions on [0, 1] into n importance weights.

    Sliders are sorted and bounded by 0 and 1; the weights are the segment
    lengths between consecutive positions, so they always sum to 1.
    """
    if not slider_values:
        return [1.0]
    for value in slider_values:
        if not 0.0 <= value <= 1.0:
            raise ValidationError(f"slider position must be in [0, 1], got {value}")
    positions = [0.0, *sorted(float(v) for v in slider_values), 1.0]
    return [positions[i] - positions[i - 1] for i in range(1, len(positions))]


def _importance_by_node(
    graph: GraphModel,
    importance_weights: Mapping[int, Sequence[float]] | None,
) -> dict[NodeId, float]:
    weights = dict(importance_weights or {})
    groups = graph.groups()
    unknown = [g for g in weights if g not in groups]
    if unknown:
        raise ValidationError(f"importance weights given for unknown groups: {unknown}")

    importance: dict[NodeId, float] = {}
    for group in groups:
        members = graph.members(group)
        group_weights = weights.get(group)
        if group_weights is None:
            group_weights = [1.0 / len(members)] * len(members)
        if len(group_weights) != len(members):
            raise DimensionMismatch(
                f"group {group} has {len(members)} nodes but {len(group_weights)} importance weights"
            )
        for node, weight in zip(members, group_weights):
            if weight < 0:
                raise ValidationError(f"importance weight for node {node.id!r} must be non-negative")
            importance[node.id] = float(weight)
    return importance


def aggregate_by_community(
    graph: GraphModel,
    importance_weights: Mapping[int, Sequence[float]] | None = None,
) -> GraphModel:
    """
    Collapse every group into one community node.

    Community pre-trust is the plain sum of member pre-trust. A link's weight
    is scaled by its source node's importance and added to the
    (source_group, target_group) total; intra-group links become a self-loop.

    Args:
        graph: Graph whose nodes carry group tags.
        importance_weights: group -> one weight per member, in node order.
            Groups left out default to 1/group_size per member.

    Raises:
        DimensionMismatch: a weight list does not match its group size.
        ValidationError: weights for a group the graph does not have.
    """
    importance = _importance_by_node(graph, importance_weights)
    node_group = {node.id: node.group for node in graph.nodes}

    nodes = [
        Node(
            id=community_id(group),
            group=group,
            pre_trust=sum(float(n.pre_trust) for n in graph.members(group)),
        )
        for group in graph.groups()
    ]

    pair_weights: dict[tuple[int, int], float] = {}
    for link in graph.links:
        key = (node_group[link.source], node_group[link.target])
        pair_weights[key] = pair_weights.get(key, 0.0) + link.weight * importance[link.source]

    links = [
        Link(source=community_id(src), target=community_id(dst), weight=weight)
        for (src, dst), weight in pair_weights.items()
    ]
    logger.debug(
        "graph_aggregated_by_community",
        nodes_before=len(graph),
        communities=len(nodes),
        links_before=len(graph.links),
        links_after=len(links),
    )
    return GraphModel(nodes=tuple(nodes), links=tuple(links))


def merge_nodes(graph: GraphModel, id1: NodeId, id2: NodeId) -> GraphModel:
    """
    Replace id1 and id2 with a single node "id1+id2".

    The merged node is appended after the untouched nodes, takes the group of
    id1 and the summed pre-trust of both. Links touching either id are
    remapped; links that land on the same (source, target) pair are summed,
    keeping first-appearance order. Merging a node with itself returns an
    unchanged copy.

    Raises:
        ValidationError: id1 or id2 is not in the graph.
    """
    first = graph.node(id1)
    second = graph.node(id2)
    if id1 == id2:
        return GraphModel(nodes=graph.nodes, links=graph.links)

    new_id = merged_id(id1, id2)
    joined = {id1, id2}
    if new_id in graph.node_ids:
        raise ValidationError(f"merged id {new_id!r} collides with an existing node")

    nodes = [n for n in graph.nodes if n.id not in joined]
    nodes.append(
        Node(
            id=new_id,
            group=first.group,
            pre_trust=float(first.pre_trust) + float(second.pre_trust),
        )
    )

    pair_weights: dict[tuple[NodeId, NodeId], float] = {}
    for link in graph.links:
        source = new_id if link.source in joined else link.source
        target = new_id if link.target in joined else link.target
        pair_weights[(source, target)] = pair_weights.get((source, target), 0.0) + link.weight

    links = [Link(source=s, target=t, weight=w) for (s, t), w in pair_weights.items()]
    logger.debug(
        "graph_nodes_merged",
        merged=new_id,
        nodes_before=len(graph),
        nodes_after=len(nodes),
        links_after=len(links),
    )
    return GraphModel(nodes=tuple(nodes), links=tuple(links))
