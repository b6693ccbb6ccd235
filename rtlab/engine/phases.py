"""Trial phases and phase-change events."""

from __future__ import annotations

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Phase(StrEnum):
    """Phases of the trial state machine.

    A session runs ``IDLE -> ARMED -> PRESENTING -> MASKING ->
    RESPONSE_WINDOW -> RECORDED`` once per trial, then returns to ``ARMED``
    for the next trial or ends in ``COMPLETE``.
    """

    IDLE = "idle"
    ARMED = "armed"
    PRESENTING = "presenting"
    MASKING = "masking"
    RESPONSE_WINDOW = "response_window"
    RECORDED = "recorded"
    COMPLETE = "complete"

    @property
    def is_running(self) -> bool:
        """Whether a session in this phase is still in progress."""
        return self not in (Phase.IDLE, Phase.COMPLETE)


class StimulusRef(BaseModel):
    """Reference to a stimulus occurrence in a trial plan.

    Attributes
    ----------
    stimulus_id : UUID
        Id of the stimulus in the catalog.
    display_ref : str
        Display handle for the presentation layer.
    label : str
        Human-readable label.
    """

    model_config = ConfigDict(frozen=True)

    stimulus_id: UUID = Field(..., description="Stimulus id")
    display_ref: str = Field(..., description="Display handle")
    label: str = Field(..., description="Stimulus label")


class PhaseChange(BaseModel):
    """Event emitted by the trial clock on every phase transition.

    Attributes
    ----------
    phase : Phase
        Phase just entered.
    previous : Phase
        Phase just left.
    trial_index : int
        Index of the current trial in the plan (0 before the first trial).
    stimulus : StimulusRef | None
        Stimulus of the current trial, None in IDLE and COMPLETE.
    timestamp_ms : float
        Scheduler time of the transition.
    generation : int
        Session generation the event belongs to.
    """

    model_config = ConfigDict(frozen=True)

    phase: Phase
    previous: Phase
    trial_index: int = Field(..., ge=0)
    stimulus: StimulusRef | None = None
    timestamp_ms: float
    generation: int = Field(..., ge=0)
