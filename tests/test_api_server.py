"""
Tests for the FastAPI endpoints (stateless; every request posts its graph).
"""

from __future__ import annotations

import pytest

CYCLE = {
    "nodes": [{"id": i, "group": 1, "score": 1} for i in ("A", "B", "C", "D")],
    "links": [
        {"source": "A", "target": "B", "value": 1},
        {"source": "B", "target": "C", "value": 1},
        {"source": "C", "target": "D", "value": 1},
        {"source": "D", "target": "A", "value": 1},
    ],
}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_strategies(client):
    data = client.get("/strategies").json()
    assert data["fallback"] == ["TrustSet", "Uniform", "SelfTrust"]
    assert data["initial_state"] == ["FirstNode", "Uniform", "InitialTrustWeights"]


def test_compute_uniform_cycle(client):
    r = client.post("/trust/compute", json={"graph": CYCLE})
    assert r.status_code == 200
    data = r.json()
    assert data["converged"] is True
    assert [n["id"] for n in data["nodes"]] == ["A", "B", "C", "D"]
    for node in data["nodes"]:
        assert node["score"] == pytest.approx(0.25)
    assert data["history"] is None


def test_compute_with_history_and_params(client):
    body = {"graph": CYCLE, "alpha": 0.3, "initial_state": "FirstNode", "include_history": True}
    data = client.post("/trust/compute", json=body).json()
    assert data["history"][0] == [1.0, 0.0, 0.0, 0.0]
    assert len(data["history"]) == data["iterations"] + 1


def test_compute_soft_non_convergence(client):
    body = {"graph": CYCLE, "initial_state": "FirstNode", "max_iterations": 2}
    r = client.post("/trust/compute", json=body)
    assert r.status_code == 200
    assert r.json()["converged"] is False
    assert r.json()["iterations"] == 2


def test_compute_unknown_link_endpoint(client):
    graph = {"nodes": [{"id": "A"}], "links": [{"source": "A", "target": "Z", "value": 1}]}
    r = client.post("/trust/compute", json={"graph": graph})
    assert r.status_code == 422
    assert r.json()["error_code"] == "validation_error"
    assert "unknown node" in r.json()["detail"]


def test_compute_unknown_strategy(client):
    r = client.post("/trust/compute", json={"graph": CYCLE, "fallback": "Nearest"})
    assert r.status_code == 422
    assert r.json()["error_code"] == "validation_error"


def test_compute_alpha_out_of_range(client):
    r = client.post("/trust/compute", json={"graph": CYCLE, "alpha": 1.5})
    assert r.status_code == 422


def test_aggregate(client):
    graph = {
        "nodes": [{"id": "a", "group": 1, "score": 2}, {"id": "b", "group": 2}, {"id": "c", "group": 2}],
        "links": [{"source": "a", "target": "b", "value": 1}, {"source": "b", "target": "c", "value": 1}],
    }
    r = client.post("/graph/aggregate", json={"graph": graph, "importance_weights": {"2": [0.25, 0.75]}})
    assert r.status_code == 200
    data = r.json()
    assert [n["id"] for n in data["nodes"]] == ["Community 1", "Community 2"]
    assert data["nodes"][0]["score"] == 2.0
    assert data["links"] == [
        {"source": "Community 1", "target": "Community 2", "value": 1.0},
        {"source": "Community 2", "target": "Community 2", "value": 0.25},
    ]


def test_aggregate_weight_mismatch(client):
    graph = {"nodes": [{"id": "a", "group": 1}, {"id": "b", "group": 1}], "links": []}
    r = client.post("/graph/aggregate", json={"graph": graph, "importance_weights": {"1": [1.0]}})
    assert r.status_code == 422
    assert r.json()["error_code"] == "dimension_mismatch"


def test_merge(client):
    r = client.post("/graph/merge", json={"graph": CYCLE, "id1": "A", "id2": "B"})
    assert r.status_code == 200
    data = r.json()
    assert [n["id"] for n in data["nodes"]] == ["C", "D", "A+B"]
    assert data["nodes"][-1]["score"] == 2.0
    assert {"source": "A+B", "target": "A+B", "value": 1.0} in data["links"]


def test_compare_merge(client):
    r = client.post("/compare/merge", json={"graph": CYCLE, "id1": "A", "id2": "B"})
    assert r.status_code == 200
    data = r.json()
    assert data["merged_id"] == "A+B"
    assert data["before"] == pytest.approx(0.5)
    assert "merged_graph" in data


def test_compare_communities(client):
    r = client.post("/compare/communities", json={"graph": CYCLE})
    assert r.status_code == 200
    data = r.json()
    assert len(data["communities"]) == 1
    community = data["communities"][0]
    assert community["community_id"] == "Community 1"
    assert community["before"] == pytest.approx(1.0)
    assert community["after"] == pytest.approx(1.0)
    assert data["loss"] == pytest.approx(0.0, abs=1e-10)


def test_compute_rejects_infinite_weight(client):
    """An infinite link weight is a 422, never a 200 with null scores."""
    body = (
        '{"graph": {"nodes": [{"id": "A", "score": 1}, {"id": "B"}],'
        ' "links": [{"source": "A", "target": "B", "value": Infinity}]}}'
    )
    r = client.post("/trust/compute", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 422
