"""Default configuration for the rtlab package."""

from __future__ import annotations

from rtlab.config.config import RTLabConfig

DEFAULT_CONFIG = RTLabConfig(profile="default")
"""Default configuration instance.

Uses the default value of every config model. It's the base configuration
used when no config file is provided.

Examples
--------
>>> from rtlab.config.defaults import DEFAULT_CONFIG
>>> DEFAULT_CONFIG.test.repetitions
3
"""


def get_default_config() -> RTLabConfig:
    """Get a copy of the default configuration.

    Returns
    -------
    RTLabConfig
        A deep copy of the default configuration.

    Examples
    --------
    >>> config = get_default_config()
    >>> config.profile
    'default'
    """
    return DEFAULT_CONFIG.model_copy(deep=True)
