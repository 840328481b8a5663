"""Replay recorded execution attempts through a predictor."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from memadvisor.predictors.base import Observation, ObservationError
from memadvisor.task_identity import Task

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from memadvisor.predictors.base import MemoryPredictor

logger = logging.getLogger(__name__)

_TRUE = frozenset({"1", "true", "yes", "y", "t"})
_FALSE = frozenset({"0", "false", "no", "n", "f"})

# surrogateescape maps undecodable bytes to lone surrogates U+DC80..U+DCFF
_UNDECODABLE_RE = re.compile("[\udc80-\udcff]")


@dataclass(frozen=True, slots=True)
class ReplayStep:
    """One ingested observation and the suggestion right after it."""

    observation: Observation
    suggestion: str | None


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ObservationError(f"success must be a boolean, got {raw!r}")


def observation_from_row(row: dict[str, str]) -> Observation:
    """Build an Observation from one CSV row; raises ObservationError."""
    try:
        return Observation(
            group=row["group"].strip(),
            instance_label=(row.get("instance_label") or "").strip(),
            success=_parse_bool(row["success"]),
            input_size=int((row.get("input_size") or "0").strip()),
            requested_bytes=row["requested_bytes"].strip(),
            limit_bytes=row["limit_bytes"].strip(),
            peak_usage_bytes=row["peak_usage_bytes"].strip(),
        )
    except ObservationError:
        raise
    except (KeyError, AttributeError) as exc:
        raise ObservationError(f"missing column: {exc}") from exc
    except ValueError as exc:
        raise ObservationError(str(exc)) from exc


def _check_decoded(row: dict[str, str]) -> None:
    for key, value in row.items():
        for text in (key, value):
            if isinstance(text, str) and _UNDECODABLE_RE.search(text):
                raise ObservationError(f"invalid UTF-8 in column {key!r}")


def read_observations(path: Path) -> Iterator[Observation]:
    """Yield Observations from a CSV file, skipping malformed rows.

    Rows with bytes that are not valid UTF-8 count as malformed.
    """
    with path.open(newline="", encoding="utf-8", errors="surrogateescape") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                _check_decoded(row)
                yield observation_from_row(row)
            except ObservationError as exc:
                logger.warning("Skipping %s line %d: %s", path, line_no, exc)


def replay(
    predictor: MemoryPredictor,
    observations: Iterable[Observation],
) -> Iterator[ReplayStep]:
    """Feed *observations* in order and yield the suggestion after each."""
    for observation in observations:
        predictor.add_observation(observation)
        task = Task(name=observation.instance_label, group=observation.group)
        yield ReplayStep(observation, predictor.query_suggestion(task))
