"""Response recording and the per-session trial log.

This module provides TrialRecord (one completed trial), SessionLog (the
append-only log of a session, with JSONL I/O and pandas/polars DataFrame
conversion) and ResponseRecorder, which turns key presses delivered during
the response window into reaction times.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Literal
from uuid import UUID, uuid4

import pandas as pd
import polars as pl
from pydantic import ConfigDict, Field

from rtlab.config.session import TestConfiguration
from rtlab.data.base import RTLabBaseModel, utc_now
from rtlab.data.serialization import read_jsonlines, write_jsonlines
from rtlab.engine.clock import TrialClock
from rtlab.engine.keys import keys_match
from rtlab.engine.phases import Phase
from rtlab.errors import NotFoundError, ValidationError
from rtlab.stimuli.catalog import StimulusCatalog, round_half_up

logger = logging.getLogger(__name__)

DataFrame = pd.DataFrame | pl.DataFrame

RECORD_COLUMNS = [
    "session_id",
    "trial_index",
    "timestamp",
    "stimulus_id",
    "stimulus_label",
    "reaction_time_ms",
    "response_key",
]


class TrialRecord(RTLabBaseModel):
    """A completed trial.

    Attributes
    ----------
    session_id : UUID
        Session the trial belongs to.
    trial_index : int
        Position of the trial in the plan.
    timestamp : datetime
        Wall-clock time of the response (UTC).
    stimulus_id : UUID
        Stimulus shown in the trial.
    stimulus_label : str
        Stimulus label at record time.
    reaction_time_ms : int
        Reaction time in whole milliseconds.
    response_key : str
        Configured response key the press matched.
    """

    model_config = ConfigDict(frozen=True)

    session_id: UUID = Field(..., description="Session id")
    trial_index: int = Field(..., ge=0, description="Trial position in plan")
    timestamp: datetime = Field(default_factory=utc_now, description="Response time")
    stimulus_id: UUID = Field(..., description="Stimulus id")
    stimulus_label: str = Field(default="", description="Stimulus label")
    reaction_time_ms: int = Field(..., ge=0, description="Reaction time (ms)")
    response_key: str = Field(..., description="Configured response key")


def _empty_record_list() -> list[TrialRecord]:
    """Return empty record list."""
    return []


class SessionLog(RTLabBaseModel):
    """Append-only log of the trials of one session.

    Attributes
    ----------
    session_id : UUID
        Id shared by every record in the log.
    records : list[TrialRecord]
        Records in the order they were appended.

    Examples
    --------
    >>> log = SessionLog()
    >>> len(log)
    0
    >>> log.history()
    []
    """

    session_id: UUID = Field(default_factory=uuid4, description="Session id")
    records: list[TrialRecord] = Field(
        default_factory=_empty_record_list, description="Trial records"
    )

    def __len__(self) -> int:
        """Return number of records."""
        return len(self.records)

    def append(self, record: TrialRecord) -> None:
        """Append a record.

        Parameters
        ----------
        record : TrialRecord
            Record to append. Must belong to this session.

        Raises
        ------
        ValidationError
            If the record's session_id differs from the log's.
        """
        if record.session_id != self.session_id:
            raise ValidationError(
                f"Record belongs to session {record.session_id}, "
                f"not {self.session_id}",
                field="session_id",
            )
        self.records.append(record)
        self.update_modified_time()

    def history(
        self, newest_first: bool = True, limit: int | None = None
    ) -> list[TrialRecord]:
        """Return records for display.

        Parameters
        ----------
        newest_first : bool
            Order from latest to earliest response (default: True).
        limit : int | None
            Maximum number of records to return.

        Returns
        -------
        list[TrialRecord]
            Records in the requested order.
        """
        ordered = list(reversed(self.records)) if newest_first else list(self.records)
        return ordered if limit is None else ordered[:limit]

    def reaction_times(self) -> list[int]:
        """Return every reaction time in the log, in trial order."""
        return [record.reaction_time_ms for record in self.records]

    # JSONL I/O

    def to_jsonl(self, path: Path | str) -> int:
        """Write the records to a JSONL file.

        Parameters
        ----------
        path : Path | str
            Output path.

        Returns
        -------
        int
            Number of records written.
        """
        return write_jsonlines(self.records, path)

    @classmethod
    def from_jsonl(cls, path: Path | str) -> SessionLog:
        """Load a log written by ``to_jsonl``.

        Parameters
        ----------
        path : Path | str
            JSONL file of TrialRecords.

        Returns
        -------
        SessionLog
            Log with the file's records. An empty file yields an empty log
            with a fresh session id.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ValidationError
            If the records come from more than one session.
        """
        records = read_jsonlines(path, TrialRecord)
        if not records:
            return cls()

        session_ids = {record.session_id for record in records}
        if len(session_ids) > 1:
            raise ValidationError(
                f"{path} mixes records from {len(session_ids)} sessions",
                field="session_id",
            )
        return cls(session_id=records[0].session_id, records=records)

    # DataFrame conversion

    def to_dataframe(self, backend: Literal["pandas", "polars"] = "pandas") -> DataFrame:
        """Convert the records to a pandas or polars DataFrame.

        Parameters
        ----------
        backend : Literal["pandas", "polars"]
            DataFrame backend to use (default: "pandas").

        Returns
        -------
        DataFrame
            One row per record with the columns in ``RECORD_COLUMNS``. Ids
            are strings and timestamps ISO 8601 strings.
        """
        if not self.records:
            if backend == "pandas":
                return pd.DataFrame(columns=RECORD_COLUMNS)
            schema: dict[str, type[pl.Utf8]] = dict.fromkeys(RECORD_COLUMNS, pl.Utf8)
            return pl.DataFrame(schema=schema)

        rows = [
            {
                "session_id": str(record.session_id),
                "trial_index": record.trial_index,
                "timestamp": record.timestamp.isoformat(),
                "stimulus_id": str(record.stimulus_id),
                "stimulus_label": record.stimulus_label,
                "reaction_time_ms": record.reaction_time_ms,
                "response_key": record.response_key,
            }
            for record in self.records
        ]
        if backend == "pandas":
            return pd.DataFrame(rows, columns=RECORD_COLUMNS)
        return pl.DataFrame(rows)


class ResponseRecorder:
    """Turns key presses into trial records.

    A press counts only when the clock is in RESPONSE_WINDOW, the key
    matches the configured response key, the trial has not yet been
    answered, and the press is not timestamped before the reaction origin.
    The first qualifying press is recorded in the catalog and the log, and
    the clock is told to move on.

    Parameters
    ----------
    clock : TrialClock
        Clock running the session.
    catalog : StimulusCatalog
        Catalog receiving reaction times.
    log : SessionLog
        Log receiving trial records.
    config : TestConfiguration
        Session configuration; supplies the response key.
    wall_clock : Callable[[], datetime]
        Source of record timestamps (default: current UTC time).
    """

    def __init__(
        self,
        clock: TrialClock,
        catalog: StimulusCatalog,
        log: SessionLog,
        config: TestConfiguration,
        wall_clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._clock = clock
        self._catalog = catalog
        self._log = log
        self._config = config
        self._wall_clock = wall_clock
        self._answered: tuple[int, int] | None = None
        self.dropped_responses = 0

    @property
    def log(self) -> SessionLog:
        """Log the recorder appends to."""
        return self._log

    def on_input(self, code: str, now_ms: float | None = None) -> TrialRecord | None:
        """Handle a key press.

        Parameters
        ----------
        code : str
            Key code or key name reported by the host.
        now_ms : float | None
            Scheduler-time timestamp of the press. Defaults to the
            scheduler's current time.

        Returns
        -------
        TrialRecord | None
            The new record, or None if the press was ignored or dropped.
        """
        clock = self._clock
        if clock.phase is not Phase.RESPONSE_WINDOW:
            logger.debug("Ignoring %r in phase %s", code, clock.phase.value)
            return None
        if not keys_match(self._config.response_key, code):
            logger.debug("Ignoring %r, expecting %r", code, self._config.response_key)
            return None

        trial = (clock.generation, clock.trial_index)
        if self._answered == trial:
            return None

        now = clock.now_ms() if now_ms is None else now_ms
        origin = clock.reaction_origin_ms
        if origin is None or now < origin:
            logger.debug("Ignoring %r at %.1f ms, before origin %s", code, now, origin)
            return None

        stimulus = clock.current_stimulus
        assert stimulus is not None
        self._answered = trial
        reaction_ms = round_half_up(now - origin)

        try:
            self._catalog.record_reaction(stimulus.stimulus_id, reaction_ms)
            label = self._catalog.get(stimulus.stimulus_id).label
        except NotFoundError as e:
            logger.warning("Dropping response for trial %d: %s", clock.trial_index, e)
            self.dropped_responses += 1
            clock.discard_trial()
            return None

        record = TrialRecord(
            session_id=self._log.session_id,
            trial_index=clock.trial_index,
            timestamp=self._wall_clock(),
            stimulus_id=stimulus.stimulus_id,
            stimulus_label=label,
            reaction_time_ms=reaction_ms,
            response_key=self._config.response_key,
        )
        self._log.append(record)
        logger.debug(
            "Trial %d: %s answered in %d ms", record.trial_index, label, reaction_ms
        )
        clock.mark_recorded()
        return record
