"""Stimulus catalog commands for rtlab CLI."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from rtlab.cli.utils import print_error, print_info, print_success
from rtlab.errors import RTLabError
from rtlab.stimuli import IMAGE_EXTENSIONS, StimulusCatalog

console = Console()


@click.group()
def catalog() -> None:
    r"""Build and inspect stimulus catalogs.

    \b
    Examples:
        $ rtlab catalog scan images/ --output catalog.yaml
        $ rtlab catalog show catalog.yaml
    """


@catalog.command()
@click.argument(
    "directory", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Catalog file to write",
)
@click.option("--name", type=str, default=None, help="Catalog name (default: dir name)")
def scan(directory: Path, output: Path, name: str | None) -> None:
    r"""Create a catalog from the image files in DIRECTORY.

    Files are added in name order. Recognized extensions are png, jpg,
    jpeg, bmp, gif, svg and webp.

    \b
    Examples:
        $ rtlab catalog scan stimuli/ -o catalog.yaml --name faces
    """
    stimuli = StimulusCatalog.from_directory(directory, name=name)
    if len(stimuli) == 0:
        print_error(
            f"No images found in {directory} "
            f"(extensions: {', '.join(sorted(IMAGE_EXTENSIONS))})"
        )

    stimuli.to_yaml(output)
    print_success(f"Wrote {len(stimuli)} stimuli to {output}")


@catalog.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(path: Path) -> None:
    r"""Display the stimuli in a catalog file.

    \b
    Examples:
        $ rtlab catalog show catalog.yaml
    """
    try:
        stimuli = StimulusCatalog.from_yaml(path)
    except (RTLabError, PydanticValidationError) as e:
        print_error(f"Invalid catalog {path}: {e}")

    if len(stimuli) == 0:
        print_info(f"Catalog '{stimuli.name}' is empty")
        return

    table = Table(title=f"Catalog: {stimuli.name}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Label", style="cyan")
    table.add_column("Display", style="white")
    table.add_column("Id", style="dim")

    for position, item in enumerate(stimuli.items, start=1):
        table.add_row(str(position), item.label, item.display_ref, str(item.id))

    console.print(table)
