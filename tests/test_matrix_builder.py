"""
Tests for the trust matrix builder and fallback row strategies.
"""

from __future__ import annotations

import numpy as np
import pytest

from eigentrust_lab.core.exceptions import DimensionMismatch, ValidationError
from eigentrust_lab.engine import (
    FallbackRowStrategy,
    GraphModel,
    Link,
    Node,
    build_trust_matrix,
    normalize_trust_vector,
    raw_weight_matrix,
)


def _trusted(graph: GraphModel) -> np.ndarray:
    return normalize_trust_vector(graph.pre_trust_weights())


@pytest.mark.parametrize("fallback", list(FallbackRowStrategy))
def test_every_row_sums_to_one(sybil_graph, fallback):
    matrix = build_trust_matrix(sybil_graph, _trusted(sybil_graph), fallback)
    assert matrix.shape == (10, 10)
    np.testing.assert_allclose(matrix.sum(axis=1), np.ones(10))
    assert (matrix >= 0).all()


def test_row_with_out_degree_is_normalized(sybil_graph):
    matrix = build_trust_matrix(sybil_graph, _trusted(sybil_graph))
    np.testing.assert_allclose(matrix[0, :3], [0.2, 0.3, 0.5])
    np.testing.assert_allclose(matrix[5], [0, 0, 0, 0, 1, 0, 0, 0, 0, 0])


def test_trust_set_fallback_copies_trusted_set(sybil_graph):
    p = _trusted(sybil_graph)
    matrix = build_trust_matrix(sybil_graph, p, FallbackRowStrategy.TRUST_SET)
    dave = sybil_graph.index_of("Dave")
    np.testing.assert_allclose(matrix[dave], p)


def test_uniform_fallback(sybil_graph):
    matrix = build_trust_matrix(sybil_graph, _trusted(sybil_graph), "Uniform")
    np.testing.assert_allclose(matrix[sybil_graph.index_of("Sybil")], np.full(10, 0.1))


def test_self_trust_fallback_is_identity_row(sybil_graph):
    matrix = build_trust_matrix(sybil_graph, _trusted(sybil_graph), FallbackRowStrategy.SELF_TRUST)
    dave = sybil_graph.index_of("Dave")
    expected = np.zeros(10)
    expected[dave] = 1.0
    np.testing.assert_array_equal(matrix[dave], expected)


def test_parallel_links_are_summed():
    """Two ratings on the same pair add up before normalization."""
    graph = GraphModel.build(
        [Node("A", pre_trust=1), Node("B"), Node("C")],
        [Link("A", "B", 1.0), Link("A", "B", 1.0), Link("A", "C", 2.0)],
    )
    assert raw_weight_matrix(graph)[0, 1] == 2.0
    matrix = build_trust_matrix(graph, _trusted(graph))
    np.testing.assert_allclose(matrix[0], [0.0, 0.5, 0.5])


def test_trusted_set_length_mismatch(sybil_graph):
    with pytest.raises(DimensionMismatch, match="10 nodes"):
        build_trust_matrix(sybil_graph, [0.5, 0.5])


def test_fallback_names_and_labels():
    assert FallbackRowStrategy.from_name("TrustSet") is FallbackRowStrategy.TRUST_SET
    assert FallbackRowStrategy.from_name("Uniform (PageRank)") is FallbackRowStrategy.UNIFORM
    assert FallbackRowStrategy.from_name("Self-Trust") is FallbackRowStrategy.SELF_TRUST
    assert FallbackRowStrategy.from_name("SELF_TRUST") is FallbackRowStrategy.SELF_TRUST
    with pytest.raises(ValidationError, match="Unknown fallback strategy"):
        FallbackRowStrategy.from_name("Nearest")


def test_input_graph_untouched(diamond_graph):
    before = diamond_graph.to_dict()
    build_trust_matrix(diamond_graph, _trusted(diamond_graph), "SelfTrust")
    assert diamond_graph.to_dict() == before
