"""Core data types and predictor ABC."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from memadvisor.exceptions import (  # noqa: F401
    ConfigError,
    FormatError,
    MemadvisorError,
    ObservationError,
)
from memadvisor.task_identity import canonical_group

if TYPE_CHECKING:
    from memadvisor.predictors.history import ObservationHistory
    from memadvisor.task_identity import TaskLike

# --- Data Types (frozen, slotted) ---


def _to_decimal(name: str, value: object) -> Decimal:
    if isinstance(value, bool):
        raise ObservationError(f"{name} must be a number, got bool")
    if isinstance(value, float):
        # Floats would smuggle binary rounding into the estimate.
        raise ObservationError(f"{name} must be Decimal, int or str, got float")
    try:
        result = value if isinstance(value, Decimal) else Decimal(value)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ObservationError(f"{name} is not a decimal number: {value!r}") from exc
    if not result.is_finite():
        raise ObservationError(f"{name} must be finite, got {result}")
    if result < 0:
        raise ObservationError(f"{name} must be >= 0, got {result}")
    return result


@dataclass(frozen=True, slots=True)
class Observation:
    """One completed execution attempt of a task instance.

    ``success=False`` means the attempt was terminated for exceeding
    ``limit_bytes``; the reported peak may be capped at the limit.
    """

    group: str
    instance_label: str
    success: bool
    input_size: int
    requested_bytes: Decimal
    limit_bytes: Decimal
    peak_usage_bytes: Decimal

    def __post_init__(self) -> None:
        group = canonical_group(self.group)
        if group is None:
            raise ObservationError(f"group must be a non-empty string, got {self.group!r}")
        if not isinstance(self.success, bool):
            raise ObservationError(f"success must be a bool, got {self.success!r}")
        if isinstance(self.input_size, bool) or not isinstance(self.input_size, int):
            raise ObservationError(f"input_size must be an int, got {self.input_size!r}")
        if self.input_size < 0:
            raise ObservationError(f"input_size must be >= 0, got {self.input_size}")

        requested = _to_decimal("requested_bytes", self.requested_bytes)
        limit = _to_decimal("limit_bytes", self.limit_bytes)
        peak = _to_decimal("peak_usage_bytes", self.peak_usage_bytes)
        if limit < requested:
            raise ObservationError(
                f"limit_bytes ({limit}) must be >= requested_bytes ({requested})"
            )

        object.__setattr__(self, "group", group)
        object.__setattr__(self, "requested_bytes", requested)
        object.__setattr__(self, "limit_bytes", limit)
        object.__setattr__(self, "peak_usage_bytes", peak)


# --- Predictor ABC ---


class MemoryPredictor(ABC):
    """Abstract base class for memory estimation strategies.

    The scheduler depends on this interface only, so strategies can be
    swapped without touching call sites.
    """

    @property
    @abstractmethod
    def history(self) -> ObservationHistory:
        """Observations ingested so far, per group."""

    @abstractmethod
    def add_observation(self, observation: Observation) -> None:
        """Ingest one completed execution attempt."""

    @abstractmethod
    def query_suggestion(self, task: TaskLike) -> str | None:
        """Return the suggested memory in bytes, or None on cold start."""

    def groups(self) -> tuple[str, ...]:
        """Return the groups that have at least one observation."""
        return self.history.groups()
