"""Simulation commands for rtlab CLI.

This module runs complete reaction-time sessions with a simulated subject
and reports the results.
"""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError

from rtlab.cli.display import console, ranking_table, summary_table
from rtlab.cli.utils import load_config_for_cli, print_error, print_info, print_success
from rtlab.engine.session import coerce_configuration
from rtlab.errors import RTLabError
from rtlab.simulation import SimulationRunner
from rtlab.stats import StatsAggregator
from rtlab.stimuli import StimulusCatalog, sample_catalog


@click.group()
def simulate() -> None:
    r"""Run simulated reaction-time sessions.

    \b
    Examples:
        $ rtlab simulate run --sample --seed 1
        $ rtlab simulate run --catalog catalog.yaml --repetitions 5 \\
            --output log.jsonl
    """


@simulate.command()
@click.option(
    "--catalog",
    "catalog_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Catalog file to test",
)
@click.option(
    "--sample",
    is_flag=True,
    default=False,
    help="Test the built-in sample stimuli",
)
@click.option("--display-time", type=int, default=None, help="Display time (ms)")
@click.option("--repetitions", type=int, default=None, help="Repetitions per stimulus")
@click.option("--response-key", type=str, default=None, help="Response key")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the session log to this JSONL file",
)
@click.option("--top", type=int, default=5, help="Entries in each ranking (default: 5)")
@click.pass_context
def run(
    ctx: click.Context,
    catalog_file: Path | None,
    sample: bool,
    display_time: int | None,
    repetitions: int | None,
    response_key: str | None,
    seed: int | None,
    output: Path | None,
    top: int,
) -> None:
    r"""Run one session with a simulated subject.

    Options given here override the test section of the configuration.
    Without --catalog the sample stimuli are used.

    \b
    Examples:
        $ rtlab simulate run --sample --display-time 300 --repetitions 2
        $ rtlab --profile test simulate run --catalog catalog.yaml \\
            --seed 7 --output log.jsonl
    """
    if catalog_file is not None and sample:
        print_error("Use either --catalog or --sample, not both")

    config_file = ctx.obj.get("config_file")
    cfg = load_config_for_cli(
        config_file=str(config_file) if config_file else None,
        profile=ctx.obj.get("profile", "default"),
        verbose=ctx.obj.get("verbose", False),
        quiet=ctx.obj.get("quiet", False),
    )

    options: dict[str, object] = {}
    if display_time is not None:
        options["display_time_ms"] = display_time
    if repetitions is not None:
        options["repetitions"] = repetitions
    if response_key is not None:
        options["response_key"] = response_key

    try:
        cfg.test = coerce_configuration(options, cfg.test)
    except RTLabError as e:
        print_error(str(e))

    if seed is not None:
        cfg.simulation.random_seed = seed
    if output is not None:
        cfg.simulation.save_path = output

    try:
        if catalog_file is not None:
            stimuli = StimulusCatalog.from_yaml(catalog_file)
        else:
            print_info("Using the sample stimuli")
            stimuli = sample_catalog()
    except (RTLabError, PydanticValidationError) as e:
        print_error(f"Invalid catalog {catalog_file}: {e}")

    try:
        log = SimulationRunner(cfg).run(stimuli)
    except RTLabError as e:
        print_error(f"Simulation failed: {e}")

    aggregator = StatsAggregator()
    planned = len(stimuli) * cfg.test.repetitions
    console.print(summary_table(aggregator.session_summary(log), planned=planned))
    console.print(
        ranking_table("Fastest", aggregator.rank(stimuli, ascending=True, limit=top))
    )
    console.print(
        ranking_table("Slowest", aggregator.rank(stimuli, ascending=False, limit=top))
    )

    if output is not None:
        print_success(f"Saved {len(log)} records to {output}")
