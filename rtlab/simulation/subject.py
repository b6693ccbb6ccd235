"""Simulated test subject."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from rtlab.config.simulation import SubjectConfig
from rtlab.engine.keys import keys_match
from rtlab.engine.phases import StimulusRef


class Press(NamedTuple):
    """A key press planned by a simulated subject.

    Attributes
    ----------
    after_ms : float
        Time of the press relative to the reaction origin.
    code : str
        Key code pressed.
    """

    after_ms: float
    code: str


class SimulatedSubject:
    """Generates human-like key presses for trials.

    Reaction times are gaussian around ``base_rt_ms`` plus any per-label
    offset, floored at ``min_rt_ms``. Some trials start with a press of the
    wrong key, and some end with a second press of the response key.

    Parameters
    ----------
    config : SubjectConfig
        Subject parameters.
    random_state : int | None
        Random seed.

    Examples
    --------
    >>> from uuid import uuid4
    >>> subject = SimulatedSubject(SubjectConfig(rt_sd_ms=0.0), random_state=1)
    >>> ref = StimulusRef(stimulus_id=uuid4(), display_ref="a.png", label="a.png")
    >>> subject.sample_reaction_ms(ref)
    350.0
    """

    def __init__(self, config: SubjectConfig, random_state: int | None = None) -> None:
        self.config = config
        self.random_state = random_state
        self.rng = np.random.RandomState(random_state)

    def sample_reaction_ms(self, stimulus: StimulusRef) -> float:
        """Draw a reaction time for a stimulus.

        Parameters
        ----------
        stimulus : StimulusRef
            Stimulus of the trial; its label selects the offset.

        Returns
        -------
        float
            Reaction time in ms, at least ``min_rt_ms``.
        """
        mean = self.config.base_rt_ms + self.config.item_offsets_ms.get(stimulus.label, 0.0)
        if self.config.rt_sd_ms == 0.0:
            sample = mean
        else:
            sample = float(self.rng.normal(mean, self.config.rt_sd_ms))
        return max(sample, self.config.min_rt_ms)

    def respond(self, stimulus: StimulusRef, response_key: str) -> list[Press]:
        """Plan the presses for one trial, in time order.

        Parameters
        ----------
        stimulus : StimulusRef
            Stimulus of the trial.
        response_key : str
            Configured response key.

        Returns
        -------
        list[Press]
            Presses relative to the reaction origin.
        """
        reaction_ms = self.sample_reaction_ms(stimulus)
        presses = [Press(reaction_ms, response_key)]

        wrong = self.rng.random_sample() < self.config.wrong_key_rate
        if wrong and not keys_match(response_key, self.config.wrong_key):
            presses.insert(0, Press(reaction_ms / 2, self.config.wrong_key))
        if self.rng.random_sample() < self.config.double_press_rate:
            presses.append(Press(reaction_ms + self.config.min_rt_ms, response_key))

        return presses
