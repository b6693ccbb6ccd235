"""High-level reaction-time session.

ReactionTimeSession wires a SequencePlanner, a TrialClock and a
ResponseRecorder together behind the operations a host needs: configure,
start, stop, feed key presses, observe phases and read results.

Examples
--------
>>> from rtlab.engine.scheduler import ManualScheduler
>>> from rtlab.stimuli import sample_catalog
>>> scheduler = ManualScheduler()
>>> session = ReactionTimeSession(scheduler)
>>> session.configure({"displayTimeMs": 300, "repetitions": 1}).display_time_ms
300
>>> _ = session.start(sample_catalog())
>>> session.plan_length()
3
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from rtlab.config.session import TestConfiguration, TimingConfig
from rtlab.engine.clock import PhaseListener, SessionState, TrialClock
from rtlab.engine.phases import Phase, PhaseChange
from rtlab.engine.planner import SequencePlanner
from rtlab.engine.recorder import ResponseRecorder, SessionLog, TrialRecord
from rtlab.engine.scheduler import Scheduler
from rtlab.errors import StateError, ValidationError
from rtlab.stats.aggregator import RankedStimulus, SessionSummary, StatsAggregator
from rtlab.stimuli.catalog import StimulusCatalog

logger = logging.getLogger(__name__)

type CompletionCallback = Callable[[SessionLog], None]

_FIELD_ALIASES = {
    field.alias: name
    for name, field in TestConfiguration.model_fields.items()
    if field.alias is not None
}


def coerce_configuration(
    options: Mapping[str, Any] | TestConfiguration,
    base: TestConfiguration | None = None,
) -> TestConfiguration:
    """Build a TestConfiguration from partial options.

    Parameters
    ----------
    options : Mapping[str, Any] | TestConfiguration
        Options keyed by field name or camelCase alias. Missing options
        keep the value from ``base``.
    base : TestConfiguration | None
        Configuration to start from (default: TestConfiguration()).

    Returns
    -------
    TestConfiguration
        Validated configuration.

    Raises
    ------
    ValidationError
        If an option is unknown or out of range.
    """
    if isinstance(options, TestConfiguration):
        return options

    current = base if base is not None else TestConfiguration()
    normalized = {_FIELD_ALIASES.get(key, key): value for key, value in options.items()}
    try:
        return TestConfiguration.model_validate({**current.model_dump(), **normalized})
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = str(first["loc"][0]) if first["loc"] else None
        field = _FIELD_ALIASES.get(loc, loc) if loc is not None else None
        detail = f"{field}: {first['msg']}" if field else first["msg"]
        raise ValidationError(f"Invalid test configuration: {detail}", field=field) from e


class ReactionTimeSession:
    """A reaction-time test run on a scheduler.

    Parameters
    ----------
    scheduler : Scheduler
        Time source and timer service.
    timing : TimingConfig | None
        Fixed phase timings (default: TimingConfig()).
    planner : SequencePlanner | None
        Trial planner (default: an unseeded SequencePlanner).
    config : TestConfiguration | None
        Initial test configuration (default: TestConfiguration()).
    """

    def __init__(
        self,
        scheduler: Scheduler,
        timing: TimingConfig | None = None,
        planner: SequencePlanner | None = None,
        config: TestConfiguration | None = None,
    ) -> None:
        self._clock = TrialClock(scheduler, timing)
        self._planner = planner if planner is not None else SequencePlanner()
        self._config = config if config is not None else TestConfiguration()
        self._stats = StatsAggregator()
        self._catalog: StimulusCatalog | None = None
        self._log = SessionLog()
        self._recorder: ResponseRecorder | None = None
        self._completion_callbacks: list[CompletionCallback] = []
        self._clock.subscribe(self._on_phase_change)

    # configuration

    @property
    def config(self) -> TestConfiguration:
        """Configuration the next session will use."""
        return self._config

    def configure(
        self, options: Mapping[str, Any] | TestConfiguration
    ) -> TestConfiguration:
        """Update the test configuration.

        A running session keeps the configuration it was started with; the
        update applies from the next ``start``.

        Parameters
        ----------
        options : Mapping[str, Any] | TestConfiguration
            Options to change, keyed by snake_case name or camelCase alias.

        Returns
        -------
        TestConfiguration
            The new configuration.

        Raises
        ------
        ValidationError
            If an option is unknown or out of range. The stored
            configuration is unchanged.
        """
        self._config = coerce_configuration(options, self._config)
        logger.debug("Configured %s", self._config)
        return self._config

    # control

    def start(
        self,
        catalog: StimulusCatalog,
        config: Mapping[str, Any] | TestConfiguration | None = None,
    ) -> UUID:
        """Plan and start a session.

        Parameters
        ----------
        catalog : StimulusCatalog
            Stimuli to test. Reaction times are recorded into it.
        config : Mapping[str, Any] | TestConfiguration | None
            Options applied with ``configure`` before starting.

        Returns
        -------
        UUID
            Id of the new session.

        Raises
        ------
        ValidationError
            If the catalog is empty or the options are invalid.
        StateError
            If a session is already running.
        """
        if self._clock.phase.is_running:
            raise StateError(
                f"A session is already running (phase {self._clock.phase.value})",
                phase=self._clock.phase.value,
            )

        resolved = (
            self._config if config is None else coerce_configuration(config, self._config)
        )
        plan = self._planner.plan(catalog, resolved.repetitions)

        log = SessionLog()
        self._config = resolved
        self._catalog = catalog
        self._log = log
        self._recorder = ResponseRecorder(self._clock, catalog, log, resolved)
        self._clock.start(plan, resolved, session_id=log.session_id)
        return log.session_id

    def stop(self) -> None:
        """Stop the running session. Records made so far are kept."""
        self._clock.stop()

    def response_key(self, code: str, timestamp: float | None = None) -> TrialRecord | None:
        """Deliver a key press.

        Parameters
        ----------
        code : str
            Key code or name reported by the host.
        timestamp : float | None
            Scheduler-time timestamp of the press (default: now).

        Returns
        -------
        TrialRecord | None
            Record created by the press, or None if it was ignored.
        """
        if self._recorder is None:
            return None
        return self._recorder.on_input(code, timestamp)

    # observation

    @property
    def clock(self) -> TrialClock:
        """Underlying trial clock."""
        return self._clock

    @property
    def state(self) -> SessionState:
        """Snapshot of the session state."""
        return self._clock.state

    @property
    def log(self) -> SessionLog:
        """Log of the current or last session."""
        return self._log

    @property
    def catalog(self) -> StimulusCatalog | None:
        """Catalog of the current or last session."""
        return self._catalog

    def current_phase(self) -> Phase:
        """Return the current phase."""
        return self._clock.phase

    def current_trial_index(self) -> int:
        """Return the index of the current trial."""
        return self._clock.trial_index

    def plan_length(self) -> int:
        """Return the number of trials in the plan."""
        return self._clock.plan_length

    def progress(self) -> float:
        """Return session progress as a percentage.

        Progress is the current trial index over the plan length, so it
        reads 0 during the first trial and 100 once the session completes.
        """
        total = self._clock.plan_length
        if total == 0:
            return 0.0
        if self._clock.phase is Phase.COMPLETE:
            return 100.0
        return self._clock.trial_index / total * 100

    def subscribe(self, listener: PhaseListener) -> Callable[[], None]:
        """Register a phase-change listener; returns an unsubscribe function."""
        return self._clock.subscribe(listener)

    def on_session_complete(self, callback: CompletionCallback) -> Callable[[], None]:
        """Register a callback run with the final log when a session completes.

        Parameters
        ----------
        callback : CompletionCallback
            Called with the SessionLog.

        Returns
        -------
        Callable[[], None]
            Function that removes the callback.
        """
        self._completion_callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._completion_callbacks:
                self._completion_callbacks.remove(callback)

        return unsubscribe

    # results

    def session_summary(self) -> SessionSummary:
        """Summarize the current or last session's log."""
        return self._stats.session_summary(self._log)

    def rank(self, ascending: bool = True, limit: int | None = None) -> list[RankedStimulus]:
        """Rank the session catalog's stimuli by average reaction time."""
        if self._catalog is None:
            return []
        return self._stats.rank(self._catalog, ascending=ascending, limit=limit)

    def _on_phase_change(self, event: PhaseChange) -> None:
        if event.phase is not Phase.COMPLETE:
            return
        for callback in list(self._completion_callbacks):
            try:
                callback(self._log)
            except Exception:
                logger.exception("Session completion callback failed")
