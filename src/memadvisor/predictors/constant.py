"""Constant-target convergence: one learned memory value per task group.

Key design principles:
- An under-estimate (OOM kill, recomputation) costs far more than an
  over-estimate, so failures jump up multiplicatively while successes only
  decay geometrically toward the observed peak.
- After a success the suggestion stays above the observed peak whenever
  anything larger than the peak proved sufficient, and never drops below it.
- Exact decimal arithmetic throughout; suggestions are byte quantities the
  scheduler parses back without loss.
- Contention is scoped to one group: each group's state has its own lock.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal, localcontext
from typing import TYPE_CHECKING

from memadvisor.formatting import format_bytes
from memadvisor.predictors.base import MemoryPredictor, Observation, ObservationError
from memadvisor.predictors.history import ObservationHistory
from memadvisor.task_identity import resolve_group

if TYPE_CHECKING:
    from memadvisor.task_identity import TaskLike

logger = logging.getLogger(__name__)

DEFAULT_DECAY_FACTOR = Decimal("0.8")
DEFAULT_GROWTH_FACTOR = Decimal("1.5")

# Headroom over the default 28 digits so long success streaks keep
# resolving the gap between suggestion and peak.
_PRECISION = 60


class _GroupState:
    """Estimator state for one group: current suggestion and counter."""

    __slots__ = ("lock", "suggestion", "observations")

    def __init__(self, suggestion: Decimal) -> None:
        self.lock = threading.Lock()
        self.suggestion = suggestion
        self.observations = 0


class ConstantPredictor(MemoryPredictor):
    """Per-group estimator converging on a single memory value.

    Rules:
    1. First observation seeds the state at the observed request, then
       applies rule 2 or 3 once.
    2. Success: ``peak + (current - peak) * decay_factor``.
    3. Failure: ``max(current, limit, peak) * growth_factor``.
    4. Cold start (no observation for the group) suggests nothing.
    """

    def __init__(
        self,
        decay_factor: Decimal | str | int = DEFAULT_DECAY_FACTOR,
        growth_factor: Decimal | str | int = DEFAULT_GROWTH_FACTOR,
        history: ObservationHistory | None = None,
    ) -> None:
        decay = Decimal(decay_factor)
        growth = Decimal(growth_factor)
        if not (0 < decay < 1):
            msg = f"decay_factor must be between 0 and 1 (exclusive), got {decay}"
            raise ValueError(msg)
        if not growth > 1:
            msg = f"growth_factor must be > 1, got {growth}"
            raise ValueError(msg)
        self.decay_factor = decay
        self.growth_factor = growth

        self._history = history if history is not None else ObservationHistory()
        self._registry_lock = threading.Lock()
        self._states: dict[str, _GroupState] = {}

    @property
    def history(self) -> ObservationHistory:
        return self._history

    # -- ingest --

    def add_observation(self, observation: Observation) -> None:
        """Fold one execution outcome into its group's suggestion.

        Raises :class:`ObservationError` for anything that is not a valid
        Observation; existing state is left untouched.
        """
        if not isinstance(observation, Observation):
            raise ObservationError(
                f"expected Observation, got {type(observation).__name__}"
            )

        state, created = self._state_for(observation)
        with state.lock:
            previous = state.suggestion
            if observation.success:
                updated = self._decay(previous, observation)
            else:
                updated = self._grow(previous, observation)
            state.suggestion = updated
            state.observations += 1
            self._history.append(observation)

        if created:
            logger.info(
                "Seeded group %r at %s bytes from %s",
                observation.group,
                format_bytes(updated),
                observation.instance_label or "<unlabelled>",
            )
        else:
            logger.debug(
                "Group %r %s: %s -> %s bytes",
                observation.group,
                "success" if observation.success else "failure",
                format_bytes(previous),
                format_bytes(updated),
            )

    def _state_for(self, observation: Observation) -> tuple[_GroupState, bool]:
        """Return the group's state, creating it at the observed request."""
        state = self._states.get(observation.group)
        if state is not None:
            return state, False
        with self._registry_lock:
            state = self._states.get(observation.group)
            if state is not None:
                return state, False
            state = _GroupState(observation.requested_bytes)
            self._states[observation.group] = state
            return state, True

    def _decay(self, current: Decimal, observation: Observation) -> Decimal:
        peak = observation.peak_usage_bytes
        # Succeeded above the suggestion: whatever it ran under proved
        # sufficient, so decay from there instead of from below peak.
        if current > peak:
            anchor = current
        else:
            anchor = max(current, observation.limit_bytes, peak)
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            proposed = peak + (anchor - peak) * self.decay_factor
        if proposed <= peak < anchor or proposed > anchor:
            # Rounded onto the peak or past the anchor; hold instead.
            return anchor
        return proposed

    def _grow(self, current: Decimal, observation: Observation) -> Decimal:
        base = max(current, observation.limit_bytes, observation.peak_usage_bytes)
        if base.is_zero():
            # A zero limit failed; nothing to scale, step one byte above it.
            return Decimal(1)
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            return base * self.growth_factor

    # -- query --

    def query_suggestion(self, task: TaskLike) -> str | None:
        group = resolve_group(task)
        if group is None:
            return None
        state = self._states.get(group)
        if state is None:
            return None
        return format_bytes(state.suggestion)

    def observation_count(self, group: str) -> int:
        """Number of observations folded into *group*'s estimate."""
        state = self._states.get(group)
        return state.observations if state is not None else 0
