"""Trial sequencing and response timing.

The engine plans a randomized sequence of trials, runs each trial through
its timed phases on a scheduler, and records reaction times from key
presses made during the response window.
"""

from rtlab.engine.clock import PhaseListener, SessionState, TrialClock
from rtlab.engine.keys import KEY_ALIASES, keys_match, normalize_key
from rtlab.engine.phases import Phase, PhaseChange, StimulusRef
from rtlab.engine.planner import SequencePlanner, TrialPlan
from rtlab.engine.recorder import ResponseRecorder, SessionLog, TrialRecord
from rtlab.engine.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
)
from rtlab.engine.session import ReactionTimeSession, coerce_configuration

__all__ = [
    "KEY_ALIASES",
    "AsyncioScheduler",
    "ManualScheduler",
    "Phase",
    "PhaseChange",
    "PhaseListener",
    "ReactionTimeSession",
    "ResponseRecorder",
    "Scheduler",
    "SequencePlanner",
    "SessionLog",
    "SessionState",
    "StimulusRef",
    "TimerHandle",
    "TrialClock",
    "TrialPlan",
    "TrialRecord",
    "coerce_configuration",
    "keys_match",
    "normalize_key",
]
