"""Session log analysis commands for rtlab CLI."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError

from rtlab.cli.display import console, history_table, ranking_table, summary_table
from rtlab.cli.utils import format_output, print_error, print_info
from rtlab.engine.recorder import SessionLog
from rtlab.errors import RTLabError
from rtlab.stats import StatsAggregator
from rtlab.stimuli import StimulusCatalog


@click.group()
def stats() -> None:
    r"""Analyze session logs.

    \b
    Examples:
        $ rtlab stats summary log.jsonl
        $ rtlab stats summary log.jsonl --format json
        $ rtlab stats history log.jsonl --limit 10
    """


def _load_log(path: Path) -> SessionLog:
    try:
        return SessionLog.from_jsonl(path)
    except (RTLabError, PydanticValidationError) as e:
        print_error(f"Invalid session log {path}: {e}")
        raise


@stats.command()
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--top", type=int, default=5, help="Entries in each ranking (default: 5)")
@click.option(
    "--format",
    "-f",
    "format_type",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
def summary(log_file: Path, top: int, format_type: str) -> None:
    r"""Summarize a session log.

    Shows overall reaction-time statistics and the fastest and slowest
    stimuli by average reaction time.

    \b
    Examples:
        $ rtlab stats summary log.jsonl --top 3
        $ rtlab stats summary log.jsonl --format yaml
    """
    log = _load_log(log_file)
    catalog = StimulusCatalog.from_records(log.records)
    aggregator = StatsAggregator()
    session_summary = aggregator.session_summary(log)
    fastest = aggregator.rank(catalog, ascending=True, limit=top)
    slowest = aggregator.rank(catalog, ascending=False, limit=top)

    if format_type == "table":
        console.print(summary_table(session_summary))
        console.print(ranking_table("Fastest", fastest))
        console.print(ranking_table("Slowest", slowest))
        return

    data = {
        "session_id": str(log.session_id),
        "summary": session_summary.model_dump(mode="json"),
        "fastest": [entry.model_dump(mode="json") for entry in fastest],
        "slowest": [entry.model_dump(mode="json") for entry in slowest],
    }
    click.echo(format_output(data, format_type))  # type: ignore[arg-type]


@stats.command()
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--limit", type=int, default=None, help="Show only the latest N responses")
def history(log_file: Path, limit: int | None) -> None:
    r"""Show the responses in a session log, newest first.

    \b
    Examples:
        $ rtlab stats history log.jsonl --limit 10
    """
    log = _load_log(log_file)
    if len(log) == 0:
        print_info("No responses recorded")
        return
    console.print(history_table(log.history(newest_first=True, limit=limit)))
