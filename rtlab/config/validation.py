"""Semantic validation of loaded configurations.

Pydantic enforces field types and ranges. The checks here cover
combinations of fields that are individually valid but suspicious.
"""

from __future__ import annotations

from rtlab.config.config import RTLabConfig


def validate_config(config: RTLabConfig) -> list[str]:
    """Check a configuration for inconsistent settings.

    Parameters
    ----------
    config : RTLabConfig
        Configuration to check.

    Returns
    -------
    list[str]
        Error messages. Empty if the configuration is consistent.

    Examples
    --------
    >>> from rtlab.config import get_default_config
    >>> validate_config(get_default_config())
    []
    """
    errors: list[str] = []

    if config.timing.mask_duration_ms > config.test.display_time_ms:
        errors.append(
            f"mask_duration_ms ({config.timing.mask_duration_ms}) is longer than "
            f"display_time_ms ({config.test.display_time_ms})"
        )

    timeout = config.timing.response_timeout_ms
    if timeout is not None and timeout < config.simulation.subject.min_rt_ms:
        errors.append(
            f"response_timeout_ms ({timeout}) is shorter than the simulated "
            f"subject's min_rt_ms ({config.simulation.subject.min_rt_ms})"
        )

    output_dir = config.paths.output_dir
    if (
        not config.paths.create_dirs
        and output_dir.is_absolute()
        and not output_dir.exists()
    ):
        errors.append(f"output_dir does not exist: {output_dir}")

    if config.logging.file is not None and not config.logging.file.parent.exists():
        errors.append(
            f"logging file parent directory does not exist: {config.logging.file.parent}"
        )

    return errors
