"""Fixtures for engine tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from rtlab.engine.phases import Phase, PhaseChange
from rtlab.engine.scheduler import ManualScheduler
from rtlab.engine.session import ReactionTimeSession

type Driver = Callable[[Phase], None]


@pytest.fixture
def drive(scheduler: ManualScheduler, session: ReactionTimeSession) -> Driver:
    """Provide a function that advances virtual time until a phase is entered.

    Parameters
    ----------
    scheduler : ManualScheduler
        Scheduler fixture.
    session : ReactionTimeSession
        Session fixture.

    Returns
    -------
    Driver
        Callable taking the target phase.
    """

    def advance_until(phase: Phase) -> None:
        for _ in range(1000):
            if session.current_phase() is phase:
                return
            due = scheduler.next_due_ms()
            if due is None:
                raise AssertionError(
                    f"No timers left before reaching {phase}; "
                    f"stuck in {session.current_phase()}"
                )
            scheduler.advance(due - scheduler.now_ms())
        raise AssertionError(f"Never reached {phase}")

    return advance_until


@pytest.fixture
def events(session: ReactionTimeSession) -> list[PhaseChange]:
    """Collect every phase change emitted by the session fixture.

    Parameters
    ----------
    session : ReactionTimeSession
        Session fixture.

    Returns
    -------
    list[PhaseChange]
        List that fills up as the session runs.
    """
    collected: list[PhaseChange] = []
    session.subscribe(collected.append)
    return collected
