"""Main CLI entry point for rtlab.

This module provides the top-level command group. Subcommand groups are
imported only when invoked.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import click

from rtlab import __version__


@click.group()
@click.version_option(version=__version__, prog_name="rtlab")
@click.option(
    "--config-file",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: use profile defaults)",
)
@click.option(
    "--profile",
    "-p",
    type=click.Choice(["default", "dev", "test"], case_sensitive=False),
    default="default",
    help="Configuration profile to use",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress all output except errors",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    profile: str,
    verbose: bool,
    quiet: bool,
) -> None:
    r"""Reaction-time testing toolkit.

    Builds stimulus catalogs, runs simulated reaction-time sessions and
    summarizes session logs.

    \b
    Examples:
        # Show version
        $ rtlab --version

        # Use custom config file
        $ rtlab --config-file my-config.yaml config show

        # Scan a directory of images into a catalog
        $ rtlab catalog scan images/ --output catalog.yaml

        # Simulate a session on the sample stimuli
        $ rtlab simulate run --sample --seed 1 --output log.jsonl

        # Summarize a session log
        $ rtlab stats summary log.jsonl
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


class LazyGroup(click.Group):
    """Click group that lazily loads subcommands."""

    def __init__(
        self,
        name: str | None = None,
        lazy_subcommands: dict[str, tuple[str, str]] | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(name=name, **kwargs)  # type: ignore[arg-type]
        self._lazy_subcommands: dict[str, tuple[str, str]] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(base + lazy)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command, loading it lazily if needed."""
        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)
        return super().get_command(ctx, cmd_name)

    def _lazy_load(self, cmd_name: str) -> click.Command:
        module_path, attr_name = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)
        return getattr(module, attr_name)  # type: ignore[no-any-return]


cli = LazyGroup(
    name="rtlab",
    help=cli.help,
    params=cli.params,
    callback=cli.callback,
    lazy_subcommands={
        "catalog": ("rtlab.cli.catalog", "catalog"),
        "config": ("rtlab.cli.config", "config"),
        "simulate": ("rtlab.cli.simulate", "simulate"),
        "stats": ("rtlab.cli.stats", "stats"),
    },
)
