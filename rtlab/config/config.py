"""Main configuration model for the rtlab package."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from rtlab.config.logging import LoggingConfig
from rtlab.config.paths import PathsConfig
from rtlab.config.session import TestConfiguration, TimingConfig
from rtlab.config.simulation import SimulationConfig


class RTLabConfig(BaseModel):
    """Main configuration for the rtlab package.

    Parameters
    ----------
    profile : str
        Configuration profile name.
    test : TestConfiguration
        Display time, repetitions and response key.
    timing : TimingConfig
        Fixed phase timings.
    simulation : SimulationConfig
        Simulated subject settings.
    paths : PathsConfig
        Paths configuration.
    logging : LoggingConfig
        Logging configuration.

    Examples
    --------
    >>> config = RTLabConfig()
    >>> config.profile
    'default'
    >>> config.test.display_time_ms
    500
    >>> config.timing.mask_duration_ms
    100
    """

    profile: str = Field(default="default", description="Configuration profile name")
    test: TestConfiguration = Field(
        default_factory=TestConfiguration, description="Test configuration"
    )
    timing: TimingConfig = Field(
        default_factory=TimingConfig, description="Phase timing configuration"
    )
    simulation: SimulationConfig = Field(
        default_factory=SimulationConfig, description="Simulation configuration"
    )
    paths: PathsConfig = Field(
        default_factory=PathsConfig, description="Paths configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns
        -------
        dict[str, Any]
            Configuration as a dictionary.

        Examples
        --------
        >>> config = RTLabConfig()
        >>> d = config.to_dict()
        >>> d["profile"]
        'default'
        """
        return self.model_dump()

    def to_yaml(self) -> str:
        """Convert configuration to YAML string.

        Returns
        -------
        str
            Configuration as YAML string, omitting default values.

        Examples
        --------
        >>> config = RTLabConfig(profile="custom")
        >>> 'profile: custom' in config.to_yaml()
        True
        """
        from rtlab.config.serialization import to_yaml  # noqa: PLC0415

        return to_yaml(self, include_defaults=False)
