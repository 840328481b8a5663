"""Shared test fixtures for memadvisor tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest

from memadvisor.formatting import parse_bytes
from memadvisor.predictors import ConstantPredictor
from memadvisor.predictors.base import MemoryPredictor
from memadvisor.task_identity import Task
from tests.fixtures.observations import make_observation


@pytest.fixture()
def predictor() -> ConstantPredictor:
    """A constant-target predictor with default factors."""
    return ConstantPredictor()


@pytest.fixture()
def task() -> Task:
    """A retry instance of the ``taskName`` step."""
    return Task(name="taskName (1)")


@pytest.fixture()
def observe_and_query(
    predictor: ConstantPredictor, task: Task
) -> Callable[..., Decimal]:
    """Ingest one observation for ``taskName`` and return the new suggestion.

    Mirrors how the scheduler uses the predictor: the next attempt is
    submitted with the previous suggestion as its request and limit.
    """

    def _run(
        requested: Decimal,
        peak: Decimal,
        *,
        success: bool = True,
        target: MemoryPredictor | None = None,
    ) -> Decimal:
        p = target if target is not None else predictor
        p.add_observation(
            make_observation(requested=requested, peak=peak, success=success)
        )
        suggestion = p.query_suggestion(task)
        assert suggestion is not None
        return parse_bytes(suggestion)

    return _run
