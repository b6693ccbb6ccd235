"""Session configuration models.

TestConfiguration holds the parameters a subject-facing host exposes
(display time, repetitions, response key). TimingConfig holds the fixed
phase timings of the trial state machine.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_DISPLAY_TIME_MS = 100
MAX_DISPLAY_TIME_MS = 2000
MIN_REPETITIONS = 1
MAX_REPETITIONS = 10


class TestConfiguration(BaseModel):
    """Parameters of a reaction-time test.

    The model is frozen; a running session keeps the copy it was started
    with, so later calls to ``configure`` only affect the next session.
    Fields accept both snake_case names and the camelCase aliases used by
    host UIs.

    Parameters
    ----------
    display_time_ms : int
        How long each stimulus is shown, in [100, 2000] ms.
    repetitions : int
        How many times each stimulus appears in the plan, in [1, 10].
    response_key : str
        Key that counts as a response. Matched through the key alias table,
        so ``"Space"``, ``"space"`` and ``" "`` are equivalent.

    Examples
    --------
    >>> config = TestConfiguration(displayTimeMs=800)
    >>> config.display_time_ms
    800
    >>> config.response_key
    'Space'
    """

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    display_time_ms: int = Field(
        default=500,
        ge=MIN_DISPLAY_TIME_MS,
        le=MAX_DISPLAY_TIME_MS,
        alias="displayTimeMs",
        description="Stimulus display duration (ms)",
    )
    repetitions: int = Field(
        default=3,
        ge=MIN_REPETITIONS,
        le=MAX_REPETITIONS,
        description="Repetitions per stimulus",
    )
    response_key: str = Field(
        default="Space", alias="responseKey", description="Response key"
    )

    @field_validator("response_key")
    @classmethod
    def validate_response_key(cls, v: str) -> str:
        """Validate the response key is non-empty.

        A single space is a valid key (the literal space character), so
        only the empty string is rejected.

        Parameters
        ----------
        v : str
            Key to validate.

        Returns
        -------
        str
            The key, unchanged.

        Raises
        ------
        ValueError
            If the key is empty.
        """
        if v == "":
            raise ValueError("response_key must be non-empty")
        return v


class TimingConfig(BaseModel):
    """Fixed phase timings for the trial state machine.

    Parameters
    ----------
    start_delay_ms : int
        Armed delay before the first trial.
    rearm_delay_ms : int
        Armed delay before every later trial.
    mask_duration_ms : int
        Blank interval after the stimulus is removed.
    inter_trial_delay_ms : int
        Hold time after a response before the next trial is armed.
    response_timeout_ms : int | None
        Optional limit on the response window. None waits indefinitely.
    reaction_origin : {"mask", "window"}
        Timestamp reaction times are measured from: stimulus offset at mask
        entry, or the opening of the response window.

    Examples
    --------
    >>> timing = TimingConfig()
    >>> timing.start_delay_ms, timing.mask_duration_ms, timing.inter_trial_delay_ms
    (1000, 100, 800)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_delay_ms: int = Field(default=1000, ge=0, description="First armed delay")
    rearm_delay_ms: int = Field(default=0, ge=0, description="Later armed delays")
    mask_duration_ms: int = Field(default=100, ge=0, description="Mask duration")
    inter_trial_delay_ms: int = Field(
        default=800, ge=0, description="Delay after a response"
    )
    response_timeout_ms: int | None = Field(
        default=None, gt=0, description="Response window limit"
    )
    reaction_origin: Literal["mask", "window"] = Field(
        default="mask", description="Reaction time origin"
    )
