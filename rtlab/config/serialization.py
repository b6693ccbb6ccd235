"""Configuration serialization to YAML format."""

from pathlib import Path
from typing import Any

import yaml

from rtlab.config.config import RTLabConfig
from rtlab.config.defaults import get_default_config


def config_to_dict(
    config: RTLabConfig, include_defaults: bool = False
) -> dict[str, Any]:
    """Convert RTLabConfig to dictionary for YAML serialization.

    Parameters
    ----------
    config : RTLabConfig
        Configuration to convert.
    include_defaults : bool
        Whether to include values equal to the defaults.

    Returns
    -------
    dict[str, Any]
        JSON-compatible dictionary (paths as strings).
    """
    config_dict: dict[str, Any] = config.model_dump(mode="json")

    if not include_defaults:
        default_dict: dict[str, Any] = get_default_config().model_dump(mode="json")
        config_dict = _remove_defaults(config_dict, default_dict)

    return config_dict


def _remove_defaults(
    config_dict: dict[str, Any], default_dict: dict[str, Any]
) -> dict[str, Any]:
    """Remove values that match defaults from config dictionary."""
    result: dict[str, Any] = {}
    for key, value in config_dict.items():
        if key not in default_dict:
            result[key] = value
        elif isinstance(value, dict) and isinstance(default_dict[key], dict):
            nested_result = _remove_defaults(value, default_dict[key])  # type: ignore[arg-type]
            if nested_result:
                result[key] = nested_result
        elif value != default_dict[key]:
            result[key] = value
    return result


def to_yaml(config: RTLabConfig, include_defaults: bool = False) -> str:
    """Serialize configuration to YAML string.

    The profile name is always written, even when it is the default.

    Parameters
    ----------
    config : RTLabConfig
        Configuration to serialize.
    include_defaults : bool
        If True, include all fields even if they have default values.

    Returns
    -------
    str
        YAML representation of configuration.

    Examples
    --------
    >>> from rtlab.config import get_default_config
    >>> 'profile: default' in to_yaml(get_default_config())
    True
    """
    config_dict = {"profile": config.profile}
    config_dict.update(config_to_dict(config, include_defaults=include_defaults))

    return yaml.dump(
        config_dict,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
        indent=2,
    )


def save_yaml(
    config: RTLabConfig,
    path: Path | str,
    include_defaults: bool = False,
    create_dirs: bool = True,
) -> None:
    """Save configuration to YAML file.

    Parameters
    ----------
    config : RTLabConfig
        Configuration to save.
    path : Path | str
        Path where YAML file should be saved.
    include_defaults : bool
        If True, include all fields even if they have default values.
    create_dirs : bool
        If True, create parent directories if they don't exist.

    Raises
    ------
    FileNotFoundError
        If create_dirs is False and parent directory doesn't exist.
    OSError
        If file cannot be written.
    """
    path = Path(path) if isinstance(path, str) else path

    if create_dirs:
        path.parent.mkdir(parents=True, exist_ok=True)
    elif not path.parent.exists():
        raise FileNotFoundError(
            f"Parent directory does not exist: {path.parent}. "
            f"Set create_dirs=True to create it automatically."
        )

    yaml_str = to_yaml(config, include_defaults=include_defaults)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(yaml_str)
    except OSError as e:
        raise OSError(f"Failed to write YAML file {path}: {e}") from e
