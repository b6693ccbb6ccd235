"""Rich tables for session results.

Examples
--------
>>> from rtlab.stats import SessionSummary
>>> console.print(summary_table(SessionSummary()))  # doctest: +SKIP
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from rtlab.engine.recorder import TrialRecord
from rtlab.stats import RankedStimulus, SessionSummary

# Shared console instance
console = Console()


def summary_table(summary: SessionSummary, planned: int | None = None) -> Table:
    """Build a metric/value table for a session summary.

    Parameters
    ----------
    summary : SessionSummary
        Summary to display.
    planned : int | None
        Number of planned trials, shown when given.

    Returns
    -------
    Table
        Rich table.
    """
    table = Table(title="Session Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    if planned is not None:
        table.add_row("Trials", str(planned))
    table.add_row("Stimuli Tested", str(summary.tested_item_count))
    table.add_row("Measurements", str(summary.total_measurements))
    table.add_row("Mean RT (ms)", str(summary.mean_reaction_time_ms))
    if summary.median_reaction_time_ms is not None:
        table.add_row("Median RT (ms)", f"{summary.median_reaction_time_ms:.1f}")
        table.add_row("SD (ms)", f"{summary.sd_reaction_time_ms:.1f}")
        table.add_row(
            "Range (ms)",
            f"{summary.min_reaction_time_ms}-{summary.max_reaction_time_ms}",
        )
    return table


def ranking_table(title: str, ranking: list[RankedStimulus]) -> Table:
    """Build a table of ranked stimuli."""
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Stimulus", style="cyan")
    table.add_column("Average (ms)", style="green", justify="right")
    table.add_column("N", justify="right")

    for entry in ranking:
        table.add_row(
            str(entry.rank),
            entry.label,
            str(entry.average_reaction_ms),
            str(entry.measurement_count),
        )
    return table


def history_table(records: list[TrialRecord]) -> Table:
    """Build a table of trial records in the given order."""
    table = Table(title="Response History")
    table.add_column("Trial", style="dim", justify="right")
    table.add_column("Time", style="white")
    table.add_column("Stimulus", style="cyan")
    table.add_column("RT (ms)", style="green", justify="right")

    for record in records:
        table.add_row(
            str(record.trial_index + 1),
            record.timestamp.strftime("%H:%M:%S"),
            record.stimulus_label,
            str(record.reaction_time_ms),
        )
    return table
