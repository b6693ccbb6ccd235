"""CLI utility functions for rtlab.

This module provides helpers for configuration loading, output formatting
and status messages shared by the command groups.
"""

from __future__ import annotations

import json
import sys
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import yaml
from rich.console import Console
from rich.table import Table

from rtlab.data.base import JsonValue

if TYPE_CHECKING:
    from rtlab.config import RTLabConfig

console = Console()


def load_config_for_cli(
    config_file: str | None,
    profile: str,
    verbose: bool = False,
    quiet: bool = False,
) -> RTLabConfig:
    """Load configuration with CLI options and set up logging from it.

    Parameters
    ----------
    config_file : str | None
        Path to configuration file (None to use profile defaults).
    profile : str
        Configuration profile name (default, dev, test).
    verbose : bool
        Log at DEBUG level and report where the configuration came from.
    quiet : bool
        Log errors only.

    Returns
    -------
    RTLabConfig
        Loaded configuration object.
    """
    from rtlab.config import configure_logging, load_config  # noqa: PLC0415

    config_path = Path(config_file) if config_file else None

    try:
        config = load_config(config_path=config_path, profile=profile)
    except FileNotFoundError:
        print_error(f"Configuration file not found: {config_file}", exit_code=1)
        raise  # unreachable, print_error exits
    except Exception as e:
        print_error(f"Failed to load configuration: {e}", exit_code=1)
        raise

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    elif quiet:
        logging_config = logging_config.model_copy(update={"level": "ERROR"})
    configure_logging(logging_config)

    if verbose:
        console.print(f"[green]✓[/green] Loaded configuration from profile: {profile}")
        if config_file:
            console.print(f"[green]✓[/green] Applied overrides from: {config_file}")

    return config


def format_output(
    data: dict[str, JsonValue] | list[JsonValue],
    format_type: Literal["yaml", "json", "table"],
) -> str:
    """Format data for CLI output.

    Parameters
    ----------
    data : dict[str, JsonValue] | list[JsonValue]
        Data to format.
    format_type : {"yaml", "json", "table"}
        Output format type.

    Returns
    -------
    str
        Formatted output string.

    Raises
    ------
    ValueError
        If format_type is invalid or data cannot be formatted.
    """
    if format_type == "yaml":
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
    elif format_type == "json":
        return json.dumps(data, indent=2, default=str)
    elif format_type == "table":
        if not isinstance(data, dict):
            raise ValueError("Table format requires dict data")
        return _dict_to_table(data)
    else:
        raise ValueError(f"Invalid format type: {format_type}")


def _dict_to_table(data: dict[str, JsonValue], title: str | None = None) -> str:
    """Render a dictionary as a two-column rich table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Key", style="yellow", no_wrap=True)
    table.add_column("Value", style="white")

    for key, value in data.items():
        if isinstance(value, dict):
            value_str = _format_nested_dict(value)
        elif isinstance(value, list):
            value_str = "\n".join(str(item) for item in value)
        else:
            value_str = str(value)
        table.add_row(key, value_str)

    string_io = StringIO()
    temp_console = Console(file=string_io, force_terminal=True, width=120)
    temp_console.print(table)
    return string_io.getvalue()


def _format_nested_dict(data: dict[str, JsonValue], indent: int = 0) -> str:
    lines: list[str] = []
    for key, value in data.items():
        prefix = "  " * indent
        if isinstance(value, dict):
            lines.append(f"{prefix}{key}:")
            lines.append(_format_nested_dict(value, indent + 1))
        else:
            lines.append(f"{prefix}{key}: {value}")
    return "\n".join(lines)


def print_error(message: str, exit_code: int = 1) -> None:
    """Print error message and exit.

    Parameters
    ----------
    message : str
        Error message to display.
    exit_code : int
        Exit code (default: 1). Pass 0 to not exit.
    """
    console.print(f"[red]✗ Error:[/red] {message}")
    if exit_code != 0:
        sys.exit(exit_code)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {message}[/green]")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]ℹ Info:[/blue] {message}")


def get_nested_value(data: dict[str, JsonValue], key_path: str) -> JsonValue:
    """Get nested dictionary value using dot notation.

    Parameters
    ----------
    data : dict[str, JsonValue]
        Dictionary to search.
    key_path : str
        Dot-separated key path (e.g., "test.display_time_ms").

    Returns
    -------
    JsonValue
        Value at key path.

    Raises
    ------
    KeyError
        If key path doesn't exist.

    Examples
    --------
    >>> data = {"a": {"b": {"c": 42}}}
    >>> get_nested_value(data, "a.b.c")
    42
    """
    current: JsonValue = data
    for key in key_path.split("."):
        if not isinstance(current, dict):
            raise KeyError(
                f"Cannot access key '{key}' in non-dict value at path '{key_path}'"
            )
        if key not in current:
            raise KeyError(f"Key '{key}' not found in path '{key_path}'")
        current = current[key]
    return current
