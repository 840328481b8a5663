"""Memory predictor abstraction and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from memadvisor.predictors.base import (
    ConfigError,
    FormatError,
    MemadvisorError,
    MemoryPredictor,
    Observation,
    ObservationError,
)
from memadvisor.predictors.constant import ConstantPredictor
from memadvisor.predictors.history import ObservationHistory
from memadvisor.predictors.none import NonePredictor

if TYPE_CHECKING:
    from memadvisor.config import MemadvisorConfig

__all__ = [
    "ConfigError",
    "ConstantPredictor",
    "FormatError",
    "MemadvisorError",
    "MemoryPredictor",
    "NonePredictor",
    "Observation",
    "ObservationError",
    "ObservationHistory",
    "create_predictor",
]


def create_predictor(config: MemadvisorConfig | None = None) -> MemoryPredictor:
    """Create the predictor strategy named in *config*.

    Defaults to the constant-target strategy.
    """
    from memadvisor.config import MemadvisorConfig

    cfg = config if config is not None else MemadvisorConfig()
    history = ObservationHistory(history_length=cfg.history.history_length)
    if cfg.predictor.algorithm == "none":
        return NonePredictor(history=history)
    return ConstantPredictor(
        decay_factor=cfg.predictor.decay_factor,
        growth_factor=cfg.predictor.growth_factor,
        history=history,
    )
