"""Tests for the simulated subject."""

from __future__ import annotations

from uuid import uuid4

import pytest

from rtlab.config.simulation import SubjectConfig
from rtlab.engine.phases import StimulusRef
from rtlab.simulation import Press, SimulatedSubject


@pytest.fixture
def stimulus() -> StimulusRef:
    """Provide a stimulus labelled "A"."""
    return StimulusRef(stimulus_id=uuid4(), display_ref="a.png", label="A")


def test_sample_without_noise(stimulus: StimulusRef) -> None:
    """Test that zero SD returns the mean plus the label offset."""
    config = SubjectConfig(base_rt_ms=300.0, rt_sd_ms=0.0, item_offsets_ms={"A": 40.0})
    assert SimulatedSubject(config).sample_reaction_ms(stimulus) == 340.0


def test_sample_floor(stimulus: StimulusRef) -> None:
    """Test that samples never fall below min_rt_ms."""
    config = SubjectConfig(
        base_rt_ms=150.0, rt_sd_ms=0.0, min_rt_ms=200.0, item_offsets_ms={"A": -100.0}
    )
    assert SimulatedSubject(config).sample_reaction_ms(stimulus) == 200.0


def test_seeded_samples_repeat(stimulus: StimulusRef) -> None:
    """Test that equal seeds give equal samples."""
    config = SubjectConfig()
    first = SimulatedSubject(config, random_state=7)
    second = SimulatedSubject(config, random_state=7)

    assert [first.sample_reaction_ms(stimulus) for _ in range(20)] == [
        second.sample_reaction_ms(stimulus) for _ in range(20)
    ]


def test_samples_respect_floor_with_noise(stimulus: StimulusRef) -> None:
    """Test the floor under heavy noise."""
    config = SubjectConfig(base_rt_ms=150.0, rt_sd_ms=200.0, min_rt_ms=100.0)
    subject = SimulatedSubject(config, random_state=0)
    assert min(subject.sample_reaction_ms(stimulus) for _ in range(200)) >= 100.0


def test_respond_single_press(stimulus: StimulusRef) -> None:
    """Test a trial with no wrong or double presses."""
    config = SubjectConfig(
        rt_sd_ms=0.0, wrong_key_rate=0.0, double_press_rate=0.0
    )
    presses = SimulatedSubject(config).respond(stimulus, "Space")
    assert presses == [Press(350.0, "Space")]


def test_respond_wrong_and_double_press(stimulus: StimulusRef) -> None:
    """Test that both extra presses are planned in time order."""
    config = SubjectConfig(
        rt_sd_ms=0.0,
        min_rt_ms=100.0,
        wrong_key_rate=1.0,
        double_press_rate=1.0,
        wrong_key="KeyQ",
    )
    presses = SimulatedSubject(config).respond(stimulus, "Space")

    assert presses == [
        Press(175.0, "KeyQ"),
        Press(350.0, "Space"),
        Press(450.0, "Space"),
    ]
    assert [p.after_ms for p in presses] == sorted(p.after_ms for p in presses)


def test_respond_skips_wrong_key_matching_response(stimulus: StimulusRef) -> None:
    """Test that a wrong key equal to the response key is never pressed."""
    config = SubjectConfig(
        rt_sd_ms=0.0, wrong_key_rate=1.0, double_press_rate=0.0, wrong_key="KeyX"
    )
    presses = SimulatedSubject(config).respond(stimulus, "x")
    assert presses == [Press(350.0, "x")]
