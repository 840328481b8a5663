"""Baseline strategy: keep history, never suggest."""

from __future__ import annotations

from typing import TYPE_CHECKING

from memadvisor.predictors.base import MemoryPredictor, Observation, ObservationError
from memadvisor.predictors.history import ObservationHistory

if TYPE_CHECKING:
    from memadvisor.task_identity import TaskLike


class NonePredictor(MemoryPredictor):
    """Records observations but leaves every task at its static request."""

    def __init__(self, history: ObservationHistory | None = None) -> None:
        self._history = history if history is not None else ObservationHistory()

    @property
    def history(self) -> ObservationHistory:
        return self._history

    def add_observation(self, observation: Observation) -> None:
        if not isinstance(observation, Observation):
            raise ObservationError(
                f"expected Observation, got {type(observation).__name__}"
            )
        self._history.append(observation)

    def query_suggestion(self, task: TaskLike) -> str | None:
        return None
