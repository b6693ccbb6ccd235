"""Root pytest configuration for rtlab tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from rtlab.config.session import TestConfiguration, TimingConfig
from rtlab.engine.planner import SequencePlanner
from rtlab.engine.scheduler import ManualScheduler
from rtlab.engine.session import ReactionTimeSession
from rtlab.stimuli.catalog import StimulusCatalog, StimulusItem


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Get tests directory path.

    Returns
    -------
    Path
        Path to tests directory
    """
    return Path(__file__).parent


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Provide a virtual-time scheduler starting at 0 ms.

    Returns
    -------
    ManualScheduler
        Fresh scheduler.
    """
    return ManualScheduler()


@pytest.fixture
def two_item_catalog() -> StimulusCatalog:
    """Provide a catalog with two stimuli, A and B.

    Returns
    -------
    StimulusCatalog
        Catalog with items labelled "A" and "B".
    """
    catalog = StimulusCatalog(name="ab")
    catalog.add(StimulusItem(display_ref="stimuli/a.png", label="A"))
    catalog.add(StimulusItem(display_ref="stimuli/b.png", label="B"))
    return catalog


@pytest.fixture
def timing() -> TimingConfig:
    """Provide the default phase timings.

    Returns
    -------
    TimingConfig
        Start delay 1000 ms, mask 100 ms, inter-trial delay 800 ms.
    """
    return TimingConfig()


@pytest.fixture
def session(scheduler: ManualScheduler, timing: TimingConfig) -> ReactionTimeSession:
    """Provide a seeded session on the manual scheduler.

    Parameters
    ----------
    scheduler : ManualScheduler
        Scheduler fixture.
    timing : TimingConfig
        Timing fixture.

    Returns
    -------
    ReactionTimeSession
        Session with display time 500 ms and 2 repetitions.
    """
    return ReactionTimeSession(
        scheduler,
        timing=timing,
        planner=SequencePlanner(seed=0),
        config=TestConfiguration(display_time_ms=500, repetitions=2),
    )
