"""CLI entry point for memadvisor."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from memadvisor import __version__
from memadvisor.config import load_config
from memadvisor.export import ExportManager
from memadvisor.formatting import humanize_bytes, parse_bytes
from memadvisor.predictors import create_predictor
from memadvisor.predictors.base import ConfigError, MemoryPredictor
from memadvisor.replay import read_observations, replay
from memadvisor.sanitize import sanitize_task_name
from memadvisor.task_identity import Task


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memadvisor",
        description="Learn per-task memory reservations from execution history.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"memadvisor {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_cmd = subparsers.add_parser(
        "replay", help="Replay observations and show learned suggestions"
    )
    _add_replay_args(replay_cmd)
    replay_cmd.add_argument(
        "--export-csv",
        type=Path,
        default=None,
        metavar="FILE",
        help="Append every observation and resulting suggestion to a CSV file",
    )

    suggest_cmd = subparsers.add_parser(
        "suggest", help="Replay observations, then print one task's suggestion"
    )
    _add_replay_args(suggest_cmd)
    suggest_cmd.add_argument("task", help="Task instance or group name")

    return parser


def _add_replay_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by replaying subcommands."""
    parser.add_argument(
        "observations",
        type=Path,
        metavar="FILE",
        help="CSV of completed execution attempts",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to config TOML file",
    )
    parser.add_argument(
        "--algorithm",
        choices=["constant", "none"],
        default=None,
        help="Override the configured predictor strategy",
    )


def _load_predictor(args: argparse.Namespace) -> tuple[MemoryPredictor, ExportManager]:
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from None

    # Override config with CLI args
    if args.algorithm is not None:
        config.predictor.algorithm = args.algorithm

    if not args.observations.is_file():
        print(f"Error: no such file: {args.observations}", file=sys.stderr)
        raise SystemExit(2)

    exporter = ExportManager(config.export, csv_path=getattr(args, "export_csv", None))
    return create_predictor(config), exporter


def _replay_file(args: argparse.Namespace) -> MemoryPredictor:
    predictor, exporter = _load_predictor(args)
    try:
        with exporter:
            for step in replay(predictor, read_observations(args.observations)):
                exporter.record(step)
    except (OSError, csv.Error) as exc:
        print(f"Error: cannot read {args.observations}: {exc}", file=sys.stderr)
        raise SystemExit(2) from None
    return predictor


def _run_replay(args: argparse.Namespace) -> None:
    """Replay the file and print a table of per-group suggestions."""
    predictor = _replay_file(args)

    table = Table(title="Memory suggestions")
    table.add_column("Group")
    table.add_column("Observations", justify="right")
    table.add_column("Suggestion (bytes)", justify="right")
    table.add_column("Suggestion", justify="right")
    for group in sorted(predictor.groups()):
        suggestion = predictor.query_suggestion(Task(name=group, group=group))
        table.add_row(
            sanitize_task_name(group),
            str(predictor.history.count(group)),
            suggestion or "-",
            humanize_bytes(parse_bytes(suggestion)) if suggestion else "-",
        )
    Console().print(table)


def _run_suggest(args: argparse.Namespace) -> None:
    """Print the raw suggestion for one task; exit 1 on cold start."""
    predictor = _replay_file(args)

    suggestion = predictor.query_suggestion(Task(name=args.task))
    if suggestion is None:
        print(f"No suggestion for {args.task!r}", file=sys.stderr)
        raise SystemExit(1)
    print(suggestion)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the memadvisor CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "suggest":
        _run_suggest(args)
    else:
        _run_replay(args)
