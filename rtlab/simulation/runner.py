"""Simulation runner for complete reaction-time sessions."""

from __future__ import annotations

import logging
from functools import partial

from rtlab.config.config import RTLabConfig
from rtlab.engine.phases import Phase, PhaseChange
from rtlab.engine.planner import SequencePlanner
from rtlab.engine.recorder import SessionLog
from rtlab.engine.scheduler import ManualScheduler
from rtlab.engine.session import ReactionTimeSession
from rtlab.errors import StateError
from rtlab.simulation.subject import SimulatedSubject
from rtlab.stimuli.catalog import StimulusCatalog

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs sessions with a simulated subject on virtual time.

    Each run builds a ManualScheduler and a ReactionTimeSession from the
    configuration, lets the subject press keys whenever a response window
    opens, and drives the scheduler until the session completes. Runs take
    no wall-clock time.

    Parameters
    ----------
    config : RTLabConfig | None
        Configuration supplying the test, timing and simulation sections
        (default: RTLabConfig()).

    Examples
    --------
    >>> from rtlab.stimuli import sample_catalog
    >>> config = RTLabConfig()
    >>> config.simulation.random_seed = 3
    >>> log = SimulationRunner(config).run(sample_catalog())
    >>> len(log) <= 9
    True
    """

    def __init__(self, config: RTLabConfig | None = None) -> None:
        self.config = config if config is not None else RTLabConfig()
        simulation = self.config.simulation
        self.subject = SimulatedSubject(
            simulation.subject, random_state=simulation.random_seed
        )
        self.planner = SequencePlanner(seed=simulation.random_seed)
        self.last_session: ReactionTimeSession | None = None

    def run(self, catalog: StimulusCatalog) -> SessionLog:
        """Run one session over a catalog.

        Parameters
        ----------
        catalog : StimulusCatalog
            Stimuli to test. Reaction times are recorded into it.

        Returns
        -------
        SessionLog
            Log of the completed session.

        Raises
        ------
        ValidationError
            If the catalog is empty.
        StateError
            If the session did not complete.
        """
        scheduler = ManualScheduler()
        session = ReactionTimeSession(
            scheduler,
            timing=self.config.timing,
            planner=self.planner,
            config=self.config.test,
        )
        session.subscribe(partial(self._on_phase_change, scheduler, session))
        self.last_session = session

        session.start(catalog)
        scheduler.run_until_idle()

        if session.current_phase() is not Phase.COMPLETE:
            raise StateError(
                "Simulated session stopped before completion",
                phase=session.current_phase().value,
            )

        log = session.log
        logger.info(
            "Simulated %d trials, %d recorded", session.plan_length(), len(log)
        )

        if self.config.simulation.save_path is not None:
            self.save_log(log)
        return log

    def save_log(self, log: SessionLog) -> None:
        """Write a log to the configured save path as JSONL.

        Parameters
        ----------
        log : SessionLog
            Log to save.

        Raises
        ------
        ValueError
            If no save path is configured.
        """
        save_path = self.config.simulation.save_path
        if save_path is None:
            msg = "save_path not configured"
            raise ValueError(msg)

        count = log.to_jsonl(save_path)
        logger.info("Wrote %d records to %s", count, save_path)

    def _on_phase_change(
        self,
        scheduler: ManualScheduler,
        session: ReactionTimeSession,
        event: PhaseChange,
    ) -> None:
        if event.phase is not Phase.RESPONSE_WINDOW or event.stimulus is None:
            return

        origin = session.clock.reaction_origin_ms
        if origin is None:
            origin = event.timestamp_ms
        for press in self.subject.respond(event.stimulus, session.config.response_key):
            # presses due before the window opened land on its first tick
            delay = max(0.0, origin + press.after_ms - scheduler.now_ms())
            scheduler.call_later(delay, partial(session.response_key, press.code))
