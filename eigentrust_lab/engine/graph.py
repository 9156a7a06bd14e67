"""
Trust graph model: nodes with pre-trust and a group tag, weighted directed links.

GraphModel is immutable; transforms build new instances. Node order defines the
index of every derived vector and matrix row. The dict shape used by the
exploration tool ({"nodes": [{id, group, score}], "links": [{source, target, value}]})
is accepted by from_dict and produced by to_dict.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from eigentrust_lab.core.exceptions import ValidationError

NodeId = Union[str, int]


def _check_amount(value: Any, what: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(amount):
        raise ValidationError(f"{what} must be finite, got {value!r}")
    if amount < 0:
        raise ValidationError(f"{what} must be non-negative, got {value!r}")
    return amount


@dataclass(frozen=True)
class Node:
    """Peer in the trust network. group only matters for community aggregation."""

    id: NodeId
    group: int = 1
    pre_trust: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "pre_trust", _check_amount(self.pre_trust, f"pre_trust of node {self.id!r}"))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "group": self.group, "score": self.pre_trust}


@dataclass(frozen=True)
class Link:
    """Directed trust rating source -> target."""

    source: NodeId
    target: NodeId
    weight: float = 1.0

    def __post_init__(self) -> None:
        what = f"weight of link {self.source!r}->{self.target!r}"
        object.__setattr__(self, "weight", _check_amount(self.weight, what))

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "value": self.weight}


@dataclass(frozen=True)
class GraphModel:
    """
    Ordered nodes plus links. Construction validates that node ids are unique
    and that every link references an existing node id. Node and Link coerce
    pre_trust and weight to finite non-negative floats themselves.
    """

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()
    _index: dict[NodeId, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))
        index: dict[NodeId, int] = {}
        for i, node in enumerate(self.nodes):
            if node.id in index:
                raise ValidationError(f"Duplicate node id: {node.id!r}")
            index[node.id] = i
        for link in self.links:
            for end in (link.source, link.target):
                if end not in index:
                    raise ValidationError(
                        f"Link {link.source!r}->{link.target!r} references unknown node {end!r}"
                    )
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def node_ids(self) -> list[NodeId]:
        return [n.id for n in self.nodes]

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._index

    def index_of(self, node_id: NodeId) -> int:
        """Position of node_id in node order; ValidationError if absent."""
        try:
            return self._index[node_id]
        except KeyError:
            raise ValidationError(f"Unknown node id: {node_id!r}") from None

    def node(self, node_id: NodeId) -> Node:
        return self.nodes[self.index_of(node_id)]

    def pre_trust_weights(self) -> list[float]:
        """Raw (un-normalized) pre-trust in node order."""
        return [float(n.pre_trust) for n in self.nodes]

    def groups(self) -> list[int]:
        """Distinct groups in order of first appearance."""
        return list(dict.fromkeys(n.group for n in self.nodes))

    def members(self, group: int) -> list[Node]:
        return [n for n in self.nodes if n.group == group]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GraphModel":
        """
        Build a graph from the interchange dict.

        Node keys: id, group (default 1), score | preTrust | pre_trust (default 0).
        Link keys: source, target, value | weight (default 1).
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Graph must be a mapping with 'nodes' and 'links'")
        nodes = [_node_from_dict(raw) for raw in data.get("nodes") or []]
        links = [_link_from_dict(raw) for raw in data.get("links") or []]
        return cls(nodes=tuple(nodes), links=tuple(links))

    @classmethod
    def build(cls, nodes: Iterable[Node], links: Iterable[Link] = ()) -> "GraphModel":
        return cls(nodes=tuple(nodes), links=tuple(links))


def _first_present(raw: Mapping[str, Any], keys: tuple[str, ...], default: Any) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _node_from_dict(raw: Mapping[str, Any]) -> Node:
    if "id" not in raw:
        raise ValidationError(f"Node without id: {dict(raw)!r}")
    group = raw.get("group", 1)
    try:
        group = int(group)
    except (TypeError, ValueError):
        raise ValidationError(f"Node {raw['id']!r} group must be an integer, got {group!r}") from None
    pre_trust = _first_present(raw, ("score", "preTrust", "pre_trust"), 0.0)
    return Node(id=raw["id"], group=group, pre_trust=pre_trust)


def _link_from_dict(raw: Mapping[str, Any]) -> Link:
    if "source" not in raw or "target" not in raw:
        raise ValidationError(f"Link needs source and target: {dict(raw)!r}")
    weight = _first_present(raw, ("value", "weight"), 1.0)
    return Link(source=raw["source"], target=raw["target"], weight=weight)
