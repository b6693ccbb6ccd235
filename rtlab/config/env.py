"""Environment variable support for configuration.

Variables named ``RTLAB_<SECTION>__<FIELD>`` override configuration values,
e.g. ``RTLAB_TEST__DISPLAY_TIME_MS=800``.
"""

import os
from pathlib import Path
from typing import Any

ENV_PREFIX = "RTLAB_"


def parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate Python type.

    Handles: bool, int, float, Path, string. Only the words true/false,
    yes/no and on/off are treated as booleans, so numeric values such as
    ``1`` stay integers.

    Parameters
    ----------
    value : str
        Raw environment variable value.

    Returns
    -------
    Any
        Parsed value with appropriate type.

    Examples
    --------
    >>> parse_env_value("true")
    True
    >>> parse_env_value("800")
    800
    >>> parse_env_value("/tmp/rt.log")
    PosixPath('/tmp/rt.log')
    """
    # handle boolean words
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    # handle numeric values; try int first
    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    # handle path-like strings
    if value.startswith(("/", "./", "~/", "../")):
        return Path(value).expanduser()

    return value


def env_to_nested_dict(env_vars: dict[str, str], prefix: str) -> dict[str, Any]:
    """Convert flat environment variables to nested dictionary.

    Parameters
    ----------
    env_vars : dict[str, str]
        Environment variables to convert.
    prefix : str
        Prefix to strip from variable names.

    Returns
    -------
    dict[str, Any]
        Nested configuration dictionary.

    Examples
    --------
    >>> env_to_nested_dict({"RTLAB_LOGGING__LEVEL": "DEBUG"}, "RTLAB_")
    {'logging': {'level': 'DEBUG'}}
    """
    result: dict[str, Any] = {}

    for key, value in env_vars.items():
        if not key.startswith(prefix):
            continue

        # split on double underscore for nesting
        parts = [part.lower() for part in key[len(prefix) :].split("__")]
        parsed_value = parse_env_value(value)

        # values are strings for the response key even when they look numeric
        if parts[-1] == "response_key":
            parsed_value = value

        current = result
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = parsed_value

    return result


def load_from_env(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Load configuration values from environment variables.

    Parameters
    ----------
    prefix : str
        Environment variable prefix to filter on.

    Returns
    -------
    dict[str, Any]
        Nested configuration dictionary from environment.
    """
    env_vars = {k: v for k, v in os.environ.items() if k.startswith(prefix)}
    return env_to_nested_dict(env_vars, prefix)
