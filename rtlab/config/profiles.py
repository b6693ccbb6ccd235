"""Configuration profiles for the rtlab package.

Profiles are complete configurations tuned for a use case: the default
for running tests with subjects, ``dev`` for working on a host
integration, ``test`` for fast deterministic automated runs.
"""

from __future__ import annotations

from pathlib import Path
from tempfile import gettempdir

from rtlab.config.config import RTLabConfig
from rtlab.config.defaults import DEFAULT_CONFIG
from rtlab.config.logging import LoggingConfig
from rtlab.config.paths import PathsConfig
from rtlab.config.session import TimingConfig
from rtlab.config.simulation import SimulationConfig

# development profile: verbose logging, short pauses between trials
DEV_CONFIG = RTLabConfig(
    profile="dev",
    timing=TimingConfig(
        start_delay_ms=300,
        inter_trial_delay_ms=300,
    ),
    paths=PathsConfig(output_dir=Path("output")),
    logging=LoggingConfig(level="DEBUG", console=True),
)
"""Development configuration profile.

Examples
--------
>>> DEV_CONFIG.logging.level
'DEBUG'
>>> DEV_CONFIG.timing.start_delay_ms
300
"""

# test profile: no pauses, fixed seed, quiet logging, temp directories
TEST_CONFIG = RTLabConfig(
    profile="test",
    timing=TimingConfig(
        start_delay_ms=0,
        inter_trial_delay_ms=0,
    ),
    simulation=SimulationConfig(random_seed=42),
    paths=PathsConfig(output_dir=Path(gettempdir()) / "rtlab_test" / "output"),
    logging=LoggingConfig(level="CRITICAL", console=False),
)
"""Test configuration profile.

Examples
--------
>>> TEST_CONFIG.logging.level
'CRITICAL'
>>> TEST_CONFIG.simulation.random_seed
42
"""

PROFILES: dict[str, RTLabConfig] = {
    "default": DEFAULT_CONFIG,
    "dev": DEV_CONFIG,
    "test": TEST_CONFIG,
}


def get_profile(name: str) -> RTLabConfig:
    """Get configuration profile by name.

    Parameters
    ----------
    name : str
        Profile name. Must be one of: 'default', 'dev', 'test'.

    Returns
    -------
    RTLabConfig
        Deep copy of the profile configuration.

    Raises
    ------
    ValueError
        If profile name is not found in the registry.

    Examples
    --------
    >>> get_profile("dev").profile
    'dev'
    >>> try:
    ...     get_profile("invalid")
    ... except ValueError as e:
    ...     print(str(e))
    Profile 'invalid' not found. Available profiles: default, dev, test
    """
    if name not in PROFILES:
        available = ", ".join(sorted(PROFILES.keys()))
        msg = f"Profile {name!r} not found. Available profiles: {available}"
        raise ValueError(msg)

    return PROFILES[name].model_copy(deep=True)


def list_profiles() -> list[str]:
    """Return list of available profile names, sorted alphabetically.

    Returns
    -------
    list[str]
        Profile names.
    """
    return sorted(PROFILES.keys())
