"""Path configuration models for the rtlab package."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class PathsConfig(BaseModel):
    """Configuration for file system paths.

    Parameters
    ----------
    output_dir : Path
        Directory for exported session logs.
    create_dirs : bool
        Whether to create output_dir when it is first needed.

    Examples
    --------
    >>> config = PathsConfig()
    >>> config.output_dir
    PosixPath('output')
    """

    output_dir: Path = Field(default=Path("output"), description="Output directory")
    create_dirs: bool = Field(default=True, description="Create missing directories")
