"""
Pytest fixtures for EigenTrust Lab tests: sample graphs, clean settings, API client.
"""

from __future__ import annotations

import os

import pytest

from eigentrust_lab.config import reset_settings_cache
from eigentrust_lab.engine import GraphModel, Link, Node


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop EIGENTRUST_* overrides so every test starts from the default settings."""
    for key in list(os.environ):
        if key.startswith("EIGENTRUST_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def cycle_graph() -> GraphModel:
    """A -> B -> C -> D -> A, weight 1, all pre-trust on A."""
    ids = ["A", "B", "C", "D"]
    nodes = [Node(id=i, group=1, pre_trust=1.0 if i == "A" else 0.0) for i in ids]
    links = [Link(source=ids[k], target=ids[(k + 1) % 4], weight=1.0) for k in range(4)]
    return GraphModel.build(nodes, links)


@pytest.fixture
def diamond_graph() -> GraphModel:
    """A fans out to B and C, both feed D; D trusts nobody."""
    return GraphModel.from_dict(
        {
            "nodes": [
                {"id": "A", "group": 1, "score": 10},
                {"id": "B", "group": 1, "score": 0},
                {"id": "C", "group": 1, "score": 0},
                {"id": "D", "group": 1, "score": 0},
            ],
            "links": [
                {"source": "A", "target": "B", "value": 0.5},
                {"source": "A", "target": "C", "value": 0.5},
                {"source": "B", "target": "D", "value": 1.0},
                {"source": "C", "target": "D", "value": 1.0},
            ],
        }
    )


@pytest.fixture
def sybil_graph() -> GraphModel:
    """Honest clique (group 1) plus a sybil star (group 2) with no pre-trust."""
    return GraphModel.from_dict(
        {
            "nodes": [
                {"id": "Alice", "group": 1, "score": 10},
                {"id": "Bob", "group": 1, "score": 15},
                {"id": "Carol", "group": 1, "score": 20},
                {"id": "Dave", "group": 1, "score": 0},
                {"id": "Sybil", "group": 2, "score": 0},
                {"id": "Sybil-1", "group": 2, "score": 0},
                {"id": "Sybil-2", "group": 2, "score": 0},
                {"id": "Sybil-3", "group": 2, "score": 0},
                {"id": "Sybil-4", "group": 2, "score": 0},
                {"id": "Sybil-5", "group": 2, "score": 0},
            ],
            "links": [
                {"source": "Alice", "target": "Alice", "value": 0.2},
                {"source": "Alice", "target": "Bob", "value": 0.3},
                {"source": "Alice", "target": "Carol", "value": 0.5},
                {"source": "Bob", "target": "Alice", "value": 0.4},
                {"source": "Bob", "target": "Bob", "value": 0.4},
                {"source": "Bob", "target": "Carol", "value": 0.2},
                {"source": "Carol", "target": "Alice", "value": 0.2},
                {"source": "Carol", "target": "Bob", "value": 0.1},
                {"source": "Carol", "target": "Carol", "value": 0.3},
                {"source": "Carol", "target": "Dave", "value": 0.4},
                {"source": "Sybil-1", "target": "Sybil", "value": 1},
                {"source": "Sybil-2", "target": "Sybil", "value": 1},
                {"source": "Sybil-3", "target": "Sybil", "value": 1},
                {"source": "Sybil-4", "target": "Sybil", "value": 1},
                {"source": "Sybil-5", "target": "Sybil", "value": 1},
            ],
        }
    )


@pytest.fixture
def symmetric_communities() -> GraphModel:
    """
    Two fully symmetric communities.

    a1 <-> a2 with pre-trust 1 each; every a trusts every b; b1 <-> b2 with no
    pre-trust. Each member of a group has the same out-distribution, so
    uniform aggregation is exact.
    """
    nodes = [
        Node(id="a1", group=1, pre_trust=1.0),
        Node(id="a2", group=1, pre_trust=1.0),
        Node(id="b1", group=2, pre_trust=0.0),
        Node(id="b2", group=2, pre_trust=0.0),
    ]
    links = [
        Link("a1", "a2", 1.0),
        Link("a2", "a1", 1.0),
        Link("a1", "b1", 1.0),
        Link("a1", "b2", 1.0),
        Link("a2", "b1", 1.0),
        Link("a2", "b2", 1.0),
        Link("b1", "b2", 1.0),
        Link("b2", "b1", 1.0),
    ]
    return GraphModel.build(nodes, links)


@pytest.fixture
def client():
    """FastAPI TestClient over the stateless API."""
    from fastapi.testclient import TestClient

    from eigentrust_lab.api_server.server import app

    return TestClient(app)
