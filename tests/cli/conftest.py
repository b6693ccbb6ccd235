"""Test fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from rtlab.config.session import TestConfiguration
from rtlab.engine.recorder import SessionLog, TrialRecord
from rtlab.stimuli import StimulusCatalog, StimulusItem


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Click CLI test runner.

    Returns
    -------
    CliRunner
        Click test runner.
    """
    return CliRunner()


@pytest.fixture
def mock_config_file(tmp_path: Path) -> Path:
    """Create an rtlab.yaml config file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.

    Returns
    -------
    Path
        Path to the config file.
    """
    config_file = tmp_path / "rtlab.yaml"
    config_file.write_text(
        """
profile: default
test:
  display_time_ms: 300
  repetitions: 2
logging:
  level: CRITICAL
  console: false
"""
    )
    return config_file


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Create a directory with three image files and one text file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.

    Returns
    -------
    Path
        Directory path.
    """
    directory = tmp_path / "images"
    directory.mkdir()
    for name in ("b.png", "a.jpg", "c.svg", "notes.txt"):
        (directory / name).write_text("x")
    return directory


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Write a two-item catalog file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.

    Returns
    -------
    Path
        Catalog YAML path.
    """
    path = tmp_path / "catalog.yaml"
    catalog = StimulusCatalog(name="pair")
    catalog.add(StimulusItem(display_ref="left.png", label="left"))
    catalog.add(StimulusItem(display_ref="right.png", label="right"))
    catalog.to_yaml(path)
    return path


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Write a session log with four records over two stimuli.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.

    Returns
    -------
    Path
        JSONL log path.
    """
    catalog = StimulusCatalog(name="pair")
    left = catalog.add(StimulusItem(display_ref="left.png", label="left"))
    right = catalog.add(StimulusItem(display_ref="right.png", label="right"))
    key = TestConfiguration().response_key

    log = SessionLog()
    for index, (item, reaction_ms) in enumerate(
        [(left, 210), (right, 340), (left, 230), (right, 360)]
    ):
        log.append(
            TrialRecord(
                session_id=log.session_id,
                trial_index=index,
                stimulus_id=item.id,
                stimulus_label=item.label,
                reaction_time_ms=reaction_ms,
                response_key=key,
            )
        )

    path = tmp_path / "log.jsonl"
    log.to_jsonl(path)
    return path
