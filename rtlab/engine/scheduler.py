"""Timer scheduling for the trial clock.

The trial clock never sleeps or polls; it asks a Scheduler to call it back
after a delay and cancels the returned handles when a session stops.
Two schedulers are provided:

- ``ManualScheduler``: a virtual clock advanced explicitly. Used by tests
  and by simulated sessions, where phases must run deterministically and
  faster than real time.
- ``AsyncioScheduler``: delegates to an asyncio event loop for hosts that
  present stimuli in real time.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

type TimerCallback = Callable[[], None]


class TimerHandle(ABC):
    """Handle to a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Whether cancel() was called."""


class Scheduler(ABC):
    """Abstract source of time and delayed callbacks.

    All times are in milliseconds on the scheduler's own monotonic clock.
    """

    @abstractmethod
    def now_ms(self) -> float:
        """Return the current time in milliseconds.

        Returns
        -------
        float
            Monotonic time in milliseconds.
        """

    @abstractmethod
    def call_later(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        """Schedule a callback after a delay.

        Parameters
        ----------
        delay_ms : float
            Delay in milliseconds. Negative delays are treated as zero.
        callback : TimerCallback
            Function to call with no arguments.

        Returns
        -------
        TimerHandle
            Handle that can cancel the callback.
        """


class _ManualTimer(TimerHandle):
    def __init__(self, due_ms: float, callback: TimerCallback) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler driven by an explicitly advanced virtual clock.

    Timers fire in due-time order; timers due at the same time fire in the
    order they were scheduled. Callbacks run synchronously inside
    ``advance`` and may schedule further timers, which also fire if they
    fall due within the advanced interval.

    Parameters
    ----------
    start_ms : float
        Initial clock value.

    Examples
    --------
    >>> scheduler = ManualScheduler()
    >>> fired = []
    >>> _ = scheduler.call_later(100, lambda: fired.append(scheduler.now_ms()))
    >>> scheduler.advance(50)
    >>> fired
    []
    >>> scheduler.advance(50)
    >>> fired
    [100.0]
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._counter = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        timer = _ManualTimer(self._now + max(0.0, float(delay_ms)), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of scheduled timers that have not fired or been cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def next_due_ms(self) -> float | None:
        """Return the due time of the earliest live timer.

        Returns
        -------
        float | None
            Due time, or None if nothing is scheduled.
        """
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward, firing every timer that falls due.

        Parameters
        ----------
        delta_ms : float
            Milliseconds to advance. Must be non-negative.

        Raises
        ------
        ValueError
            If delta_ms is negative.
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot advance by a negative delta: {delta_ms}")

        target = self._now + delta_ms
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            due, _, timer = heapq.heappop(self._queue)
            self._now = due
            timer.callback()
        self._now = target

    def run_until_idle(self, max_timers: int = 100_000) -> None:
        """Fire timers in order until none are left.

        Parameters
        ----------
        max_timers : int
            Safety limit on the number of timers fired.

        Raises
        ------
        RuntimeError
            If more than max_timers timers fire.
        """
        fired = 0
        while (due := self.next_due_ms()) is not None:
            if fired >= max_timers:
                raise RuntimeError(f"Scheduler did not go idle after {max_timers} timers")
            self.advance(due - self._now)
            fired += 1

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop | None
        Loop to schedule on. Defaults to the running loop, so the scheduler
        must then be created from inside a coroutine.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The event loop callbacks run on."""
        return self._loop

    def now_ms(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        handle = self._loop.call_later(max(0.0, float(delay_ms)) / 1000.0, callback)
        return _AsyncioTimer(handle)
