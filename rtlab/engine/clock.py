"""Trial clock: the timer-driven state machine that runs a trial plan.

The clock owns the session state. It advances each trial through
ARMED, PRESENTING, MASKING and RESPONSE_WINDOW on scheduler timers, waits
in RESPONSE_WINDOW until the recorder reports a response (or the optional
timeout fires), holds in RECORDED, then arms the next trial or completes.

Every timer callback captures the session generation, the trial index and
the phase it was scheduled from. When it fires it checks all three against
the current state, so a timer left over from a stopped session or an
earlier phase does nothing. Exceptions raised by timer actions or by
listeners are logged and never escape into the scheduler.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from uuid import UUID

from pydantic import BaseModel, Field

from rtlab.config.session import TestConfiguration, TimingConfig
from rtlab.engine.phases import Phase, PhaseChange, StimulusRef
from rtlab.engine.planner import TrialPlan
from rtlab.engine.scheduler import Scheduler, TimerHandle
from rtlab.errors import StateError, ValidationError

logger = logging.getLogger(__name__)

type PhaseListener = Callable[[PhaseChange], None]


class SessionState(BaseModel):
    """State of the session a TrialClock is running.

    Only the clock mutates this model; ``TrialClock.state`` hands out copies.

    Attributes
    ----------
    phase : Phase
        Current phase.
    trial_index : int
        Index of the current trial in the plan.
    plan : TrialPlan | None
        Plan being run, None before the first start.
    config : TestConfiguration | None
        Configuration the session was started with.
    session_id : UUID | None
        Id of the session being run.
    running : bool
        Whether a session is in progress.
    generation : int
        Incremented on every start and stop.
    onset_ms : float | None
        Scheduler time the current stimulus was removed (mask entry).
    window_opened_ms : float | None
        Scheduler time the current response window opened.
    missed_trials : int
        Trials that ended by response timeout.
    discarded_trials : int
        Trials whose response was dropped.
    """

    phase: Phase = Phase.IDLE
    trial_index: int = Field(default=0, ge=0)
    plan: TrialPlan | None = None
    config: TestConfiguration | None = None
    session_id: UUID | None = None
    running: bool = False
    generation: int = Field(default=0, ge=0)
    onset_ms: float | None = None
    window_opened_ms: float | None = None
    missed_trials: int = Field(default=0, ge=0)
    discarded_trials: int = Field(default=0, ge=0)


class TrialClock:
    """Runs a trial plan through its timed phases.

    Parameters
    ----------
    scheduler : Scheduler
        Source of time and timers.
    timing : TimingConfig | None
        Fixed phase timings. Defaults to TimingConfig().

    Examples
    --------
    >>> from rtlab.config import TestConfiguration
    >>> from rtlab.engine.planner import SequencePlanner
    >>> from rtlab.engine.scheduler import ManualScheduler
    >>> from rtlab.stimuli import sample_catalog
    >>> scheduler = ManualScheduler()
    >>> clock = TrialClock(scheduler)
    >>> plan = SequencePlanner(seed=0).plan(sample_catalog(), 1)
    >>> clock.start(plan, TestConfiguration(display_time_ms=500))
    >>> clock.phase
    <Phase.ARMED: 'armed'>
    >>> scheduler.advance(1000 + 500 + 100)
    >>> clock.phase
    <Phase.RESPONSE_WINDOW: 'response_window'>
    """

    def __init__(self, scheduler: Scheduler, timing: TimingConfig | None = None) -> None:
        self._scheduler = scheduler
        self._timing = timing if timing is not None else TimingConfig()
        self._state = SessionState()
        self._handles: set[TimerHandle] = set()
        self._listeners: list[PhaseListener] = []
        self._outbox: deque[PhaseChange] = deque()
        self._dispatching = False

    # queries

    @property
    def scheduler(self) -> Scheduler:
        """Scheduler the clock runs on."""
        return self._scheduler

    @property
    def timing(self) -> TimingConfig:
        """Phase timings."""
        return self._timing

    @property
    def state(self) -> SessionState:
        """Copy of the current session state."""
        return self._state.model_copy()

    @property
    def phase(self) -> Phase:
        """Current phase."""
        return self._state.phase

    @property
    def trial_index(self) -> int:
        """Index of the current trial."""
        return self._state.trial_index

    @property
    def generation(self) -> int:
        """Current session generation."""
        return self._state.generation

    @property
    def running(self) -> bool:
        """Whether a session is in progress."""
        return self._state.running

    @property
    def plan(self) -> TrialPlan | None:
        """Plan of the current or last session."""
        return self._state.plan

    @property
    def plan_length(self) -> int:
        """Number of trials in the current plan, 0 if none."""
        return len(self._state.plan) if self._state.plan is not None else 0

    @property
    def onset_ms(self) -> float | None:
        """Stimulus onset timestamp of the current trial."""
        return self._state.onset_ms

    @property
    def reaction_origin_ms(self) -> float | None:
        """Timestamp reaction times of the current trial are measured from."""
        if self._timing.reaction_origin == "window":
            return self._state.window_opened_ms
        return self._state.onset_ms

    @property
    def current_stimulus(self) -> StimulusRef | None:
        """Stimulus of the current trial, None when no trial is active."""
        if not self._state.phase.is_running or self._state.plan is None:
            return None
        return self._state.plan[self._state.trial_index]

    def now_ms(self) -> float:
        """Return the scheduler's current time."""
        return self._scheduler.now_ms()

    def subscribe(self, listener: PhaseListener) -> Callable[[], None]:
        """Register a phase-change listener.

        Listeners are called in registration order, one event at a time and
        in transition order, even when a listener triggers a further
        transition.

        Parameters
        ----------
        listener : PhaseListener
            Called with each PhaseChange.

        Returns
        -------
        Callable[[], None]
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # control

    def start(
        self,
        plan: TrialPlan,
        config: TestConfiguration,
        session_id: UUID | None = None,
    ) -> None:
        """Start running a plan.

        Parameters
        ----------
        plan : TrialPlan
            Plan to run. Must not be empty.
        config : TestConfiguration
            Configuration for the session.
        session_id : UUID | None
            Id to associate with the session.

        Raises
        ------
        StateError
            If a session is already running.
        ValidationError
            If the plan has no trials.
        """
        if self._state.phase.is_running:
            raise StateError(
                f"Cannot start a session while in phase {self._state.phase.value}",
                phase=self._state.phase.value,
            )
        if not plan.entries:
            raise ValidationError("Trial plan is empty", field="plan")

        self._cancel_timers()
        self._state = SessionState(
            phase=self._state.phase,
            plan=plan,
            config=config,
            session_id=session_id,
            running=True,
            generation=self._state.generation + 1,
        )
        logger.info(
            "Session %s started: %d trials, display %d ms",
            session_id,
            len(plan),
            config.display_time_ms,
        )
        self._enter_armed(0)

    def stop(self) -> None:
        """Stop the session, cancelling every pending timer.

        Stopping an idle clock does nothing.
        """
        if self._state.phase is Phase.IDLE:
            return

        self._cancel_timers()
        self._state.generation += 1
        self._state.running = False
        logger.info(
            "Session %s stopped at trial %d", self._state.session_id, self._state.trial_index
        )
        self._emit(self._set_phase(Phase.IDLE))

    def mark_recorded(self) -> None:
        """End the response window after a qualifying response.

        Raises
        ------
        StateError
            If the clock is not in RESPONSE_WINDOW.
        """
        self._require_window("mark_recorded")
        self._cancel_timers()
        self._enter_recorded()

    def discard_trial(self) -> None:
        """End the response window without a record.

        Used when the response could not be recorded, e.g. because the
        stimulus was removed from the catalog mid-session.

        Raises
        ------
        StateError
            If the clock is not in RESPONSE_WINDOW.
        """
        self._require_window("discard_trial")
        self._cancel_timers()
        self._state.discarded_trials += 1
        self._enter_recorded()

    # transitions
    #
    # Each step updates the state and schedules its follow-up timer before
    # notifying listeners, so a listener that ends the trial synchronously
    # cancels that timer instead of racing it.

    def _enter_armed(self, index: int) -> None:
        self._state.trial_index = index
        self._state.onset_ms = None
        self._state.window_opened_ms = None
        delay = self._timing.start_delay_ms if index == 0 else self._timing.rearm_delay_ms
        event = self._set_phase(Phase.ARMED)
        self._schedule(delay, self._enter_presenting)
        self._emit(event)

    def _enter_presenting(self) -> None:
        assert self._state.config is not None
        event = self._set_phase(Phase.PRESENTING)
        self._schedule(self._state.config.display_time_ms, self._enter_masking)
        self._emit(event)

    def _enter_masking(self) -> None:
        self._state.onset_ms = self._scheduler.now_ms()
        event = self._set_phase(Phase.MASKING)
        self._schedule(self._timing.mask_duration_ms, self._enter_window)
        self._emit(event)

    def _enter_window(self) -> None:
        self._state.window_opened_ms = self._scheduler.now_ms()
        event = self._set_phase(Phase.RESPONSE_WINDOW)
        if self._timing.response_timeout_ms is not None:
            self._schedule(self._timing.response_timeout_ms, self._on_timeout)
        self._emit(event)

    def _on_timeout(self) -> None:
        logger.info("Trial %d timed out without a response", self._state.trial_index)
        self._state.missed_trials += 1
        self._enter_recorded()

    def _enter_recorded(self) -> None:
        event = self._set_phase(Phase.RECORDED)
        self._schedule(self._timing.inter_trial_delay_ms, self._advance)
        self._emit(event)

    def _advance(self) -> None:
        next_index = self._state.trial_index + 1
        if next_index >= self.plan_length:
            self._complete()
        else:
            self._enter_armed(next_index)

    def _complete(self) -> None:
        self._state.running = False
        logger.info(
            "Session %s complete after %d trials (%d missed, %d discarded)",
            self._state.session_id,
            self.plan_length,
            self._state.missed_trials,
            self._state.discarded_trials,
        )
        self._emit(self._set_phase(Phase.COMPLETE))

    # plumbing

    def _require_window(self, operation: str) -> None:
        if self._state.phase is not Phase.RESPONSE_WINDOW:
            raise StateError(
                f"{operation} is only valid in the response window, "
                f"not in phase {self._state.phase.value}",
                phase=self._state.phase.value,
            )

    def _schedule(self, delay_ms: float, action: Callable[[], None]) -> None:
        generation = self._state.generation
        trial_index = self._state.trial_index
        phase = self._state.phase
        handle: TimerHandle | None = None

        def fire() -> None:
            if handle is not None:
                self._handles.discard(handle)
            if (
                generation != self._state.generation
                or trial_index != self._state.trial_index
                or phase is not self._state.phase
            ):
                logger.debug(
                    "Ignoring stale timer from generation %d, trial %d, phase %s",
                    generation,
                    trial_index,
                    phase.value,
                )
                return
            try:
                action()
            except Exception:
                logger.exception(
                    "Timer action failed in phase %s of trial %d", phase.value, trial_index
                )

        handle = self._scheduler.call_later(delay_ms, fire)
        self._handles.add(handle)

    def _cancel_timers(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    def _set_phase(self, phase: Phase) -> PhaseChange:
        previous = self._state.phase
        self._state.phase = phase
        logger.debug(
            "Trial %d: %s -> %s", self._state.trial_index, previous.value, phase.value
        )
        return PhaseChange(
            phase=phase,
            previous=previous,
            trial_index=self._state.trial_index,
            stimulus=self.current_stimulus,
            timestamp_ms=self._scheduler.now_ms(),
            generation=self._state.generation,
        )

    def _emit(self, event: PhaseChange) -> None:
        self._outbox.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._outbox:
                pending = self._outbox.popleft()
                for listener in list(self._listeners):
                    try:
                        listener(pending)
                    except Exception:
                        logger.exception(
                            "Phase listener failed on %s", pending.phase.value
                        )
        finally:
            self._dispatching = False
