"""Tests for predictor selection and the baseline strategy."""

from __future__ import annotations

from decimal import Decimal

import pytest

from memadvisor.config import MemadvisorConfig
from memadvisor.predictors import (
    ConstantPredictor,
    MemoryPredictor,
    NonePredictor,
    create_predictor,
)
from memadvisor.predictors.base import ObservationError
from memadvisor.task_identity import Task
from tests.fixtures.observations import make_observation


class TestCreatePredictor:
    def test_default_is_constant(self) -> None:
        predictor = create_predictor()
        assert isinstance(predictor, ConstantPredictor)
        assert predictor.decay_factor == Decimal("0.8")
        assert predictor.growth_factor == Decimal("1.5")

    def test_factors_from_config(self) -> None:
        cfg = MemadvisorConfig(
            predictor={"decay_factor": "0.6", "growth_factor": "2.0"},
            history={"history_length": 7},
        )
        predictor = create_predictor(cfg)
        assert isinstance(predictor, ConstantPredictor)
        assert predictor.decay_factor == Decimal("0.6")
        assert predictor.growth_factor == Decimal("2.0")
        assert predictor.history.history_length == 7

    def test_none_algorithm(self) -> None:
        cfg = MemadvisorConfig(predictor={"algorithm": "none"})
        assert isinstance(create_predictor(cfg), NonePredictor)


class TestNonePredictor:
    def test_never_suggests(self) -> None:
        predictor: MemoryPredictor = NonePredictor()
        predictor.add_observation(make_observation())
        assert predictor.query_suggestion(Task(name="taskName (1)")) is None

    def test_keeps_history(self) -> None:
        predictor = NonePredictor()
        obs = make_observation()
        predictor.add_observation(obs)
        assert predictor.history.observations("taskName") == (obs,)
        assert predictor.groups() == ("taskName",)

    def test_rejects_non_observation(self) -> None:
        with pytest.raises(ObservationError):
            NonePredictor().add_observation("nope")  # type: ignore[arg-type]
