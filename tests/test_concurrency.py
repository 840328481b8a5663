"""Thread-safety tests for the constant-target predictor."""

from __future__ import annotations

import threading
from decimal import Decimal

from memadvisor.predictors import ConstantPredictor
from memadvisor.task_identity import Task
from tests.fixtures.observations import make_observation

_THREADS = 8
_PER_THREAD = 25


def _hammer(predictor: ConstantPredictor, group: str, success: bool) -> list[threading.Thread]:
    barrier = threading.Barrier(_THREADS)

    def worker() -> None:
        barrier.wait()
        for _ in range(_PER_THREAD):
            predictor.add_observation(
                make_observation(group=group, success=success, requested=1, peak=1)
            )

    return [threading.Thread(target=worker) for _ in range(_THREADS)]


class TestConcurrentIngest:
    def test_no_lost_updates_same_group(self) -> None:
        """Concurrent failures for one group compound exactly as if sequential."""
        predictor = ConstantPredictor()
        threads = _hammer(predictor, "taskName", success=False)
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        sequential = ConstantPredictor()
        for _ in range(_THREADS * _PER_THREAD):
            sequential.add_observation(
                make_observation(success=False, requested=1, peak=1)
            )

        task = Task(name="taskName")
        assert predictor.query_suggestion(task) == sequential.query_suggestion(task)
        assert predictor.observation_count("taskName") == _THREADS * _PER_THREAD
        assert predictor.history.count("taskName") == _THREADS * _PER_THREAD

    def test_many_groups_in_parallel(self) -> None:
        predictor = ConstantPredictor()
        threads: list[threading.Thread] = []
        for i in range(4):
            threads.extend(_hammer(predictor, f"group{i}", success=True))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(predictor.groups()) == 4
        for i in range(4):
            assert predictor.observation_count(f"group{i}") == _THREADS * _PER_THREAD

    def test_other_group_not_blocked(self) -> None:
        """Holding one group's lock does not stall ingest or query for another."""
        predictor = ConstantPredictor()
        predictor.add_observation(make_observation(group="busy"))
        busy = predictor._states["busy"]

        done = threading.Event()

        def worker() -> None:
            predictor.add_observation(make_observation(group="idle"))
            predictor.query_suggestion(Task(name="busy"))
            done.set()

        with busy.lock:
            t = threading.Thread(target=worker)
            t.start()
            assert done.wait(timeout=5.0)
        t.join()
        assert predictor.query_suggestion(Task(name="idle")) is not None

    def test_query_during_ingest_sees_valid_value(self) -> None:
        predictor = ConstantPredictor()
        predictor.add_observation(make_observation())
        stop = threading.Event()
        seen: list[str | None] = []

        def reader() -> None:
            while not stop.is_set():
                seen.append(predictor.query_suggestion(Task(name="taskName (3)")))

        t = threading.Thread(target=reader)
        t.start()
        for _ in range(200):
            predictor.add_observation(make_observation())
        stop.set()
        t.join()

        assert seen
        assert all(s is not None and Decimal(s) > 0 for s in seen)
