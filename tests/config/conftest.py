"""Pytest fixtures for config module tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture
def sample_yaml_file(tmp_path: Path) -> Path:
    """Create a sample YAML config file for testing.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory path provided by pytest.

    Returns
    -------
    Path
        Path to the created YAML config file.
    """
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        """
profile: test
test:
  display_time_ms: 800
  repetitions: 4
timing:
  inter_trial_delay_ms: 500
logging:
  level: DEBUG
"""
    )
    return config_file


@pytest.fixture
def malformed_yaml_file(tmp_path: Path) -> Path:
    """Create a malformed YAML file for testing.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory path provided by pytest.

    Returns
    -------
    Path
        Path to the malformed file.
    """
    config_file = tmp_path / "malformed.yaml"
    config_file.write_text("test:\n  repetitions: [1, 2\n")
    return config_file


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove RTLAB_ variables from the environment.

    Parameters
    ----------
    monkeypatch : pytest.MonkeyPatch
        Pytest monkeypatch fixture.

    Returns
    -------
    pytest.MonkeyPatch
        The same fixture, for setting variables in the test.
    """
    for key in list(os.environ):
        if key.startswith("RTLAB_"):
            monkeypatch.delenv(key)
    return monkeypatch
