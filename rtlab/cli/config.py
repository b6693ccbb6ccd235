"""Configuration commands for rtlab CLI.

This module provides commands for viewing, validating and exporting
configuration.
"""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from rtlab.cli.utils import (
    format_output,
    get_nested_value,
    load_config_for_cli,
    print_error,
    print_info,
    print_success,
)


@click.group()
def config() -> None:
    r"""Manage configuration.

    \b
    Examples:
        $ rtlab config show
        $ rtlab config show --format json
        $ rtlab config show --key test.display_time_ms
        $ rtlab config validate --config-file rtlab.yaml
        $ rtlab config export --output my-config.yaml
        $ rtlab config profiles
    """


@config.command()
@click.option(
    "--format",
    "-f",
    "format_type",
    type=click.Choice(["yaml", "json", "table"], case_sensitive=False),
    default="yaml",
    help="Output format (default: yaml)",
)
@click.option(
    "--key",
    "-k",
    type=str,
    default=None,
    help="Show specific config value (e.g., test.display_time_ms)",
)
@click.pass_context
def show(ctx: click.Context, format_type: str, key: str | None) -> None:
    r"""Display current configuration.

    Shows the merged configuration from profile, file and environment
    variables.

    \b
    Examples:
        $ rtlab config show
        $ rtlab config show --format table
        $ rtlab config show --key timing.mask_duration_ms
    """
    config_file = ctx.obj.get("config_file")
    cfg = load_config_for_cli(
        config_file=str(config_file) if config_file else None,
        profile=ctx.obj.get("profile", "default"),
        verbose=ctx.obj.get("verbose", False),
        quiet=ctx.obj.get("quiet", False),
    )
    config_dict = cfg.model_dump(mode="json")

    if key:
        try:
            click.echo(get_nested_value(config_dict, key))
        except KeyError as e:
            print_error(f"Configuration key not found: {e}")
        return

    try:
        click.echo(format_output(config_dict, format_type))  # type: ignore[arg-type]
    except ValueError as e:
        print_error(f"Failed to format output: {e}")


@config.command()
@click.option(
    "--config-file",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file to validate",
)
@click.pass_context
def validate(ctx: click.Context, config_file: Path | None) -> None:
    r"""Validate a configuration file.

    Checks YAML syntax, the configuration schema, and cross-field
    consistency such as a mask longer than the display time.

    \b
    Exit codes:
        0 - Configuration is valid
        1 - Configuration is invalid
    """
    if config_file is None:
        config_file = ctx.obj.get("config_file")

    if config_file is None:
        print_error("No configuration file specified. Use --config-file or -c.")
        return

    from rtlab.config import load_config, validate_config  # noqa: PLC0415

    try:
        cfg = load_config(
            config_path=config_file, profile=ctx.obj.get("profile", "default")
        )
    except ValidationError as e:
        print_error("Configuration validation failed:", exit_code=0)
        for error in e.errors():
            location = " → ".join(str(loc) for loc in error["loc"])
            click.echo(f"  • {location}: {error['msg']}", err=True)
        ctx.exit(1)
    except Exception as e:
        print_error(f"Failed to validate configuration: {e}")

    errors = validate_config(cfg)
    if errors:
        print_error("Configuration validation failed:", exit_code=0)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        ctx.exit(1)

    print_success(f"Configuration is valid: {config_file}")


@config.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "--include-defaults",
    is_flag=True,
    default=False,
    help="Write every field, not only those differing from defaults",
)
@click.pass_context
def export(ctx: click.Context, output: Path | None, include_defaults: bool) -> None:
    r"""Export current configuration to YAML.

    \b
    Examples:
        $ rtlab config export
        $ rtlab --profile dev config export --output dev.yaml
        $ rtlab config export --include-defaults
    """
    from rtlab.config import save_yaml, to_yaml  # noqa: PLC0415

    config_file = ctx.obj.get("config_file")
    cfg = load_config_for_cli(
        config_file=str(config_file) if config_file else None,
        profile=ctx.obj.get("profile", "default"),
        verbose=ctx.obj.get("verbose", False),
        quiet=ctx.obj.get("quiet", False),
    )

    if output is None:
        click.echo(to_yaml(cfg, include_defaults=include_defaults))
        return

    try:
        save_yaml(cfg, output, include_defaults=include_defaults)
    except OSError as e:
        print_error(f"Failed to export configuration: {e}")
    print_success(f"Configuration exported to: {output}")


@config.command()
def profiles() -> None:
    r"""List available configuration profiles.

    \b
    Examples:
        $ rtlab config profiles
    """
    from rtlab.config import list_profiles  # noqa: PLC0415

    print_info("Available configuration profiles:")
    click.echo()
    for profile_name in list_profiles():
        click.echo(f"  • {profile_name}")
    click.echo()
    print_info("Use --profile to select a profile:")
    click.echo("  $ rtlab --profile dev config show")
