"""
Application settings.

Solver defaults (alpha, epsilon, max_iterations, strategy names) and API
host/port, read from EIGENTRUST_* environment variables with a .env fallback.
Values are validated once when settings are built.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from eigentrust_lab.config.env import env_float, env_int, env_str, load_lab_env
from eigentrust_lab.core.exceptions import ValidationError

DEFAULT_ALPHA = 0.15
DEFAULT_EPSILON = 1e-6
DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_FALLBACK = "TrustSet"
DEFAULT_INITIAL_STATE = "InitialTrustWeights"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000


@dataclass(frozen=True)
class Settings:
    """Resolved configuration; engine calls fall back to these when a parameter is omitted."""

    alpha: float = DEFAULT_ALPHA
    epsilon: float = DEFAULT_EPSILON
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    fallback: str = DEFAULT_FALLBACK
    initial_state: str = DEFAULT_INITIAL_STATE
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT

    def validate(self) -> "Settings":
        from eigentrust_lab.engine.matrix import FallbackRowStrategy
        from eigentrust_lab.engine.vectors import InitialStateStrategy

        if not 0.0 <= self.alpha <= 1.0:
            raise ValidationError(f"alpha must be in [0, 1], got {self.alpha}")
        if self.epsilon <= 0:
            raise ValidationError(f"epsilon must be positive, got {self.epsilon}")
        if self.max_iterations < 0:
            raise ValidationError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if not 0 < self.api_port < 65536:
            raise ValidationError(f"api_port out of range: {self.api_port}")
        FallbackRowStrategy.from_name(self.fallback)
        InitialStateStrategy.from_name(self.initial_state)
        return self


def load_settings() -> Settings:
    """Build settings from the environment (after loading .env)."""
    load_lab_env()
    return Settings(
        alpha=env_float("ALPHA", DEFAULT_ALPHA),
        epsilon=env_float("EPSILON", DEFAULT_EPSILON),
        max_iterations=env_int("MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS),
        fallback=env_str("FALLBACK", DEFAULT_FALLBACK),
        initial_state=env_str("INITIAL_STATE", DEFAULT_INITIAL_STATE),
        api_host=env_str("API_HOST", DEFAULT_API_HOST),
        api_port=env_int("API_PORT", DEFAULT_API_PORT),
    ).validate()


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (built on first call)."""
    return load_settings()


def reset_settings_cache() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
