"""Export module — CSV suggestion trace."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from memadvisor.config import ExportConfig
    from memadvisor.replay import ReplayStep

from memadvisor.export.csv_logger import SuggestionCSVLogger


class ExportManager:
    """Manages export backends.

    Currently supports CSV logging. Call ``record`` after each ingest to
    push the step to all active exporters. An explicit *csv_path*
    overrides the configured one.
    """

    def __init__(self, config: ExportConfig, csv_path: Path | None = None) -> None:
        self._csv: SuggestionCSVLogger | None = None
        path = csv_path if csv_path is not None else config.csv_path
        if path is not None:
            self._csv = SuggestionCSVLogger(path)

    def start(self) -> None:
        if self._csv is not None:
            self._csv.start()

    def stop(self) -> None:
        if self._csv is not None:
            self._csv.stop()

    def record(self, step: ReplayStep) -> None:
        if self._csv is not None:
            self._csv.write_step(step)

    def __enter__(self) -> ExportManager:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()
