"""
Tests for EIGENTRUST_* settings loading and validation.
"""

from __future__ import annotations

import pytest

from eigentrust_lab.config import Settings, get_settings, reset_settings_cache
from eigentrust_lab.core.exceptions import ValidationError
from eigentrust_lab.engine import compute_trust


def test_defaults():
    settings = get_settings()
    assert settings == Settings()
    assert settings.alpha == 0.15
    assert settings.epsilon == 1e-6
    assert settings.max_iterations == 1000
    assert settings.fallback == "TrustSet"
    assert settings.initial_state == "InitialTrustWeights"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("EIGENTRUST_ALPHA", "0.4")
    monkeypatch.setenv("EIGENTRUST_MAX_ITERATIONS", "50")
    monkeypatch.setenv("EIGENTRUST_FALLBACK", "Uniform (PageRank)")
    monkeypatch.setenv("EIGENTRUST_API_PORT", "9001")
    settings = get_settings()
    assert settings.alpha == 0.4
    assert settings.max_iterations == 50
    assert settings.fallback == "Uniform (PageRank)"
    assert settings.api_port == 9001


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("EIGENTRUST_ALPHA", "0.9")
    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().alpha == 0.9


def test_compute_trust_uses_settings(monkeypatch, cycle_graph):
    monkeypatch.setenv("EIGENTRUST_MAX_ITERATIONS", "2")
    result = compute_trust(cycle_graph)
    assert result.iterations == 2
    assert not result.converged


@pytest.mark.parametrize(
    "name,value,match",
    [
        ("EIGENTRUST_ALPHA", "abc", "must be a number"),
        ("EIGENTRUST_ALPHA", "2", "alpha"),
        ("EIGENTRUST_EPSILON", "0", "epsilon"),
        ("EIGENTRUST_MAX_ITERATIONS", "1.5", "integer"),
        ("EIGENTRUST_FALLBACK", "Nearest", "Unknown fallback"),
        ("EIGENTRUST_INITIAL_STATE", "Random", "Unknown initial state"),
        ("EIGENTRUST_API_PORT", "70000", "api_port"),
    ],
)
def test_invalid_env_rejected(monkeypatch, name, value, match):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError, match=match):
        get_settings()
