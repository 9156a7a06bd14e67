"""
Importance-weight tuning for community aggregation.

Each group of n nodes is described by n-1 slider positions on [0, 1]; the
segment lengths between them are the members' importance weights. A
finite-difference gradient descent moves the sliders to minimize the
community loss (squared gap between summed member scores and the community
node score).

Runs many solver calls, so it takes an optional threading.Event that is
checked once per outer step for cooperative cancellation.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from eigentrust_lab.core.exceptions import ValidationError
from eigentrust_lab.engine.comparison import TrustParameters, community_loss, compare_communities
from eigentrust_lab.engine.graph import GraphModel
from eigentrust_lab.engine.transforms import segment_lengths
from eigentrust_lab.lab_logging import bind_run, clear_run, get_logger

logger = get_logger(__name__)

DEFAULT_LEARNING_RATE = 0.01
DEFAULT_FINITE_DIFF_EPSILON = 0.001
DEFAULT_MIN_SLIDER_GAP = 0.02
DEFAULT_MAX_STEPS = 100

Sliders = dict[int, list[float]]
StepCallback = Callable[[int, float, dict[int, list[float]]], None]


@dataclass
class OptimizerConfig:
    """Gradient-descent knobs."""

    learning_rate: float = DEFAULT_LEARNING_RATE
    epsilon: float = DEFAULT_FINITE_DIFF_EPSILON
    """Finite-difference perturbation applied to one slider at a time."""
    min_gap: float = DEFAULT_MIN_SLIDER_GAP
    """Minimum distance kept between consecutive sliders of one group."""
    max_steps: int = DEFAULT_MAX_STEPS

    def validate(self) -> None:
        if self.learning_rate <= 0:
            raise ValidationError("learning_rate must be positive")
        if self.epsilon <= 0:
            raise ValidationError("epsilon must be positive")
        if self.min_gap < 0:
            raise ValidationError("min_gap must be non-negative")
        if self.max_steps < 0:
            raise ValidationError("max_steps must be >= 0")


@dataclass
class OptimizationResult:
    sliders: Sliders
    weights: dict[int, list[float]]
    losses: list[float] = field(default_factory=list)
    """Loss before the first step, then after every completed step."""
    steps: int = 0
    cancelled: bool = False

    @property
    def final_loss(self) -> float | None:
        return self.losses[-1] if self.losses else None


def initial_sliders(graph: GraphModel) -> Sliders:
    """Evenly spaced sliders: group of n nodes -> [(i + 1) / n for i < n - 1]."""
    sliders: Sliders = {}
    for group in graph.groups():
        count = len(graph.members(group))
        sliders[group] = [(i + 1) / count for i in range(count - 1)]
    return sliders


def weights_from_sliders(sliders: Sliders) -> dict[int, list[float]]:
    return {group: segment_lengths(values) for group, values in sliders.items()}


def optimize_importance_weights(
    graph: GraphModel,
    params: TrustParameters | None = None,
    config: OptimizerConfig | None = None,
    sliders: Sliders | None = None,
    cancel_event: threading.Event | None = None,
    on_step: StepCallback | None = None,
) -> OptimizationResult:
    """
    Tune per-group importance weights so aggregation preserves community trust.

    Args:
        graph: Original graph with group tags.
        params: Solver parameters used for both graphs.
        config: Learning rate, perturbation, slider gap, step cap.
        sliders: Starting slider positions per group (default: evenly spaced).
        cancel_event: Checked before each step; when set, stop and return.
        on_step: Called after each step with (step, loss, weights).

    Log lines emitted during the run carry an optimizer_run id.

    Returns:
        OptimizationResult with the final sliders and their weights.
    """
    params = params or TrustParameters.from_settings()
    config = config or OptimizerConfig()
    config.validate()
    bind_run(optimizer_run=uuid.uuid4().hex[:12])
    try:
        current: Sliders = {g: list(v) for g, v in (sliders or initial_sliders(graph)).items()}
        original_scores = params.scores(graph)

        def loss_for(candidate: Sliders) -> float:
            comparisons = compare_communities(
                graph,
                weights_from_sliders(candidate),
                params,
                original_scores=original_scores,
            )
            return community_loss(comparisons)

        result = OptimizationResult(sliders=current, weights=weights_from_sliders(current))
        result.losses.append(loss_for(current))
        logger.info(
            "importance_optimization_started",
            groups=len(current),
            sliders=sum(len(v) for v in current.values()),
            loss=result.losses[0],
        )

        for step in range(1, config.max_steps + 1):
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                logger.info("importance_optimization_cancelled", step=step - 1)
                break
            current_loss = loss_for(current)
            for group, values in current.items():
                for idx, value in enumerate(values):
                    perturbed = {g: list(v) for g, v in current.items()}
                    perturbed[group][idx] = min(1.0, value + config.epsilon)
                    gradient = (loss_for(perturbed) - current_loss) / config.epsilon

                    new_value = max(0.0, min(1.0, value - config.learning_rate * gradient))
                    if idx > 0:
                        new_value = max(new_value, values[idx - 1] + config.min_gap)
                    if idx < len(values) - 1:
                        new_value = min(new_value, values[idx + 1] - config.min_gap)
                    values[idx] = max(0.0, min(1.0, new_value))
            loss = loss_for(current)
            result.losses.append(loss)
            result.steps = step
            if on_step is not None:
                on_step(step, loss, weights_from_sliders(current))

        result.weights = weights_from_sliders(current)
        logger.info(
            "importance_optimization_finished",
            steps=result.steps,
            cancelled=result.cancelled,
            loss=result.final_loss,
        )
        return result
    finally:
        clear_run("optimizer_run")
