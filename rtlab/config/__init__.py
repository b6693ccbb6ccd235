"""Configuration system for the rtlab package.

This module provides configuration models, default settings and profiles.

Examples
--------
>>> from rtlab.config import RTLabConfig, get_default_config, get_profile
>>> config = get_default_config()
>>> config.profile
'default'
>>> get_profile("dev").logging.level
'DEBUG'
>>> custom = RTLabConfig(test=TestConfiguration(repetitions=5))
"""

from __future__ import annotations

from rtlab.config.config import RTLabConfig
from rtlab.config.defaults import DEFAULT_CONFIG, get_default_config
from rtlab.config.env import load_from_env
from rtlab.config.loader import load_config, load_yaml_file, merge_configs
from rtlab.config.logging import LoggingConfig, configure_logging
from rtlab.config.paths import PathsConfig
from rtlab.config.profiles import (
    DEV_CONFIG,
    PROFILES,
    TEST_CONFIG,
    get_profile,
    list_profiles,
)
from rtlab.config.serialization import save_yaml, to_yaml
from rtlab.config.session import TestConfiguration, TimingConfig
from rtlab.config.simulation import SimulationConfig, SubjectConfig
from rtlab.config.validation import validate_config

__all__ = [
    # Main config
    "RTLabConfig",
    # Config sections
    "TestConfiguration",
    "TimingConfig",
    "SimulationConfig",
    "SubjectConfig",
    "PathsConfig",
    "LoggingConfig",
    # Defaults
    "DEFAULT_CONFIG",
    "get_default_config",
    # Profiles
    "DEV_CONFIG",
    "TEST_CONFIG",
    "PROFILES",
    "get_profile",
    "list_profiles",
    # Loading
    "load_config",
    "load_yaml_file",
    "merge_configs",
    "load_from_env",
    # Validation
    "validate_config",
    # Serialization
    "to_yaml",
    "save_yaml",
    # Logging
    "configure_logging",
]
