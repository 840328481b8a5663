"""Per-group, append-only observation history."""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memadvisor.predictors.base import Observation


class _GroupRecords:
    __slots__ = ("lock", "records")

    def __init__(self, maxlen: int) -> None:
        self.lock = threading.Lock()
        self.records: deque[Observation] = deque(maxlen=maxlen)


class ObservationHistory:
    """Ordered observations keyed by task group.

    Thread-safe. The registry lock is held only while a new group is
    created; appends and snapshots lock the single group they touch. Each
    group keeps at most ``history_length`` records, oldest dropped first.
    """

    def __init__(self, history_length: int = 1000) -> None:
        if history_length < 1:
            msg = "history_length must be >= 1"
            raise ValueError(msg)
        self.history_length = history_length
        self._registry_lock = threading.Lock()
        self._groups: dict[str, _GroupRecords] = {}

    def _records_for(self, group: str) -> _GroupRecords:
        entry = self._groups.get(group)
        if entry is not None:
            return entry
        with self._registry_lock:
            entry = self._groups.get(group)
            if entry is None:
                entry = _GroupRecords(self.history_length)
                self._groups[group] = entry
            return entry

    def append(self, observation: Observation) -> None:
        entry = self._records_for(observation.group)
        with entry.lock:
            entry.records.append(observation)

    def observations(self, group: str) -> tuple[Observation, ...]:
        """Return a snapshot of *group*'s records, oldest first."""
        entry = self._groups.get(group)
        if entry is None:
            return ()
        with entry.lock:
            return tuple(entry.records)

    def count(self, group: str) -> int:
        entry = self._groups.get(group)
        if entry is None:
            return 0
        with entry.lock:
            return len(entry.records)

    def groups(self) -> tuple[str, ...]:
        with self._registry_lock:
            return tuple(self._groups)

    def __contains__(self, group: object) -> bool:
        return group in self._groups

    def __len__(self) -> int:
        return sum(self.count(group) for group in self.groups())
