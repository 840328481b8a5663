"""CSV export — append one row per ingested observation."""

from __future__ import annotations

import csv
import logging
import threading
from typing import TYPE_CHECKING

from memadvisor.formatting import format_bytes

if TYPE_CHECKING:
    import io
    from pathlib import Path

    from memadvisor.replay import ReplayStep

logger = logging.getLogger(__name__)

_CSV_COLUMNS = [
    "group",
    "instance_label",
    "success",
    "requested_bytes",
    "limit_bytes",
    "peak_usage_bytes",
    "suggestion_bytes",
]


class SuggestionCSVLogger:
    """Appends observation/suggestion rows to a CSV file.

    Thread-safe: writes are guarded by a lock.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._file: io.TextIOWrapper | None = None
        self._writer: csv.DictWriter[str] | None = None

    # -- lifecycle --

    def start(self) -> None:
        """Open the CSV file and write the header row."""
        with self._lock:
            if self._file is not None:
                return
            self._file = self._path.open("a", newline="", encoding="utf-8")
            self._writer = csv.DictWriter(self._file, fieldnames=_CSV_COLUMNS)
            # Write header only if file is empty / newly created.
            if self._file.tell() == 0:
                self._writer.writeheader()
                self._file.flush()
            logger.debug("Writing suggestion trace to %s", self._path)

    def stop(self) -> None:
        """Flush and close the file."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None
                self._writer = None

    # -- data --

    def write_step(self, step: ReplayStep) -> None:
        """Append the row for one ingested observation."""
        obs = step.observation
        with self._lock:
            if self._writer is None or self._file is None:
                return
            self._writer.writerow(
                {
                    "group": obs.group,
                    "instance_label": obs.instance_label,
                    "success": "true" if obs.success else "false",
                    "requested_bytes": format_bytes(obs.requested_bytes),
                    "limit_bytes": format_bytes(obs.limit_bytes),
                    "peak_usage_bytes": format_bytes(obs.peak_usage_bytes),
                    "suggestion_bytes": step.suggestion or "",
                }
            )
            self._file.flush()
