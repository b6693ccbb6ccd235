"""Summary statistics over session logs and catalog histories.

Reaction-time means are reported in whole milliseconds rounded half-up.
The descriptive statistics beyond the mean (median, standard deviation,
range) are computed with numpy and are None when there is no data.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal
from uuid import UUID

import numpy as np
import pandas as pd
import polars as pl
from pydantic import BaseModel, Field

from rtlab.stimuli.catalog import NO_DATA, StimulusCatalog, round_half_up

if TYPE_CHECKING:
    from rtlab.engine.recorder import SessionLog

logger = logging.getLogger(__name__)

DataFrame = pd.DataFrame | pl.DataFrame


class Distribution(BaseModel):
    """Descriptive statistics of a set of reaction times.

    Attributes
    ----------
    count : int
        Number of measurements.
    mean_ms : int
        Mean rounded half-up, NO_DATA when empty.
    median_ms : float | None
        Median.
    sd_ms : float | None
        Sample standard deviation; 0.0 for a single measurement.
    min_ms : int | None
        Fastest reaction.
    max_ms : int | None
        Slowest reaction.
    """

    count: int = Field(default=0, ge=0, description="Number of measurements")
    mean_ms: int = Field(default=NO_DATA, ge=0, description="Rounded mean (ms)")
    median_ms: float | None = Field(default=None, description="Median (ms)")
    sd_ms: float | None = Field(default=None, description="Sample SD (ms)")
    min_ms: int | None = Field(default=None, description="Minimum (ms)")
    max_ms: int | None = Field(default=None, description="Maximum (ms)")

    @classmethod
    def of(cls, values: Sequence[int]) -> Distribution:
        """Describe a sequence of reaction times."""
        if not values:
            return cls()

        data = np.asarray(values, dtype=float)
        return cls(
            count=len(values),
            mean_ms=round_half_up(float(data.mean())),
            median_ms=float(np.median(data)),
            sd_ms=float(data.std(ddof=1)) if len(values) > 1 else 0.0,
            min_ms=int(data.min()),
            max_ms=int(data.max()),
        )


_SUMMARY_SCHEMA: dict[str, type[pl.DataType]] = {
    "stimulus_id": pl.Utf8,
    "label": pl.Utf8,
    "count": pl.Int64,
    "mean_ms": pl.Int64,
    "median_ms": pl.Float64,
    "sd_ms": pl.Float64,
    "min_ms": pl.Int64,
    "max_ms": pl.Int64,
}


class SessionSummary(BaseModel):
    """Aggregate results of a session.

    Attributes
    ----------
    tested_item_count : int
        Distinct stimuli with at least one record.
    total_measurements : int
        Number of records.
    mean_reaction_time_ms : int
        Mean over all records, rounded half-up; 0 when empty.
    median_reaction_time_ms : float | None
        Median over all records.
    sd_reaction_time_ms : float | None
        Sample standard deviation over all records.
    min_reaction_time_ms : int | None
        Fastest record.
    max_reaction_time_ms : int | None
        Slowest record.
    """

    tested_item_count: int = Field(default=0, ge=0)
    total_measurements: int = Field(default=0, ge=0)
    mean_reaction_time_ms: int = Field(default=NO_DATA, ge=0)
    median_reaction_time_ms: float | None = None
    sd_reaction_time_ms: float | None = None
    min_reaction_time_ms: int | None = None
    max_reaction_time_ms: int | None = None


class RankedStimulus(BaseModel):
    """A stimulus's place in a ranking by average reaction time."""

    rank: int = Field(..., ge=1, description="1-based position")
    stimulus_id: UUID
    label: str
    display_ref: str
    average_reaction_ms: int = Field(..., ge=0)
    measurement_count: int = Field(..., ge=1)


class ItemSummary(BaseModel):
    """Per-stimulus statistics over a catalog history."""

    stimulus_id: UUID
    label: str
    display_ref: str
    stats: Distribution


class StatsAggregator:
    """Computes session summaries and stimulus rankings.

    Examples
    --------
    >>> from rtlab.stimuli import sample_catalog
    >>> catalog = sample_catalog()
    >>> first, second, _ = catalog.ids()
    >>> catalog.record_reaction(first, 300)
    >>> catalog.record_reaction(second, 250)
    >>> [r.label for r in StatsAggregator().rank(catalog)]
    ['Image 2', 'Image 1']
    """

    def session_summary(self, log: SessionLog) -> SessionSummary:
        """Summarize a session log.

        Parameters
        ----------
        log : SessionLog
            Log to summarize.

        Returns
        -------
        SessionSummary
            Counts and reaction-time statistics.
        """
        dist = Distribution.of(log.reaction_times())
        return SessionSummary(
            tested_item_count=len({record.stimulus_id for record in log.records}),
            total_measurements=dist.count,
            mean_reaction_time_ms=dist.mean_ms,
            median_reaction_time_ms=dist.median_ms,
            sd_reaction_time_ms=dist.sd_ms,
            min_reaction_time_ms=dist.min_ms,
            max_reaction_time_ms=dist.max_ms,
        )

    def rank(
        self,
        catalog: StimulusCatalog,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[RankedStimulus]:
        """Rank stimuli by rounded average reaction time.

        Only stimuli with at least one measurement are ranked. Ties keep
        catalog order in both directions.

        Parameters
        ----------
        catalog : StimulusCatalog
            Catalog with reaction histories.
        ascending : bool
            Fastest first when True, slowest first otherwise.
        limit : int | None
            Keep only the first ``limit`` entries.

        Returns
        -------
        list[RankedStimulus]
            Ranked stimuli.
        """
        measured = [item for item in catalog.items if item.reactions]
        ordered = sorted(
            measured,
            key=lambda item: item.average_reaction_ms,
            reverse=not ascending,
        )
        if limit is not None:
            ordered = ordered[:limit]

        return [
            RankedStimulus(
                rank=position,
                stimulus_id=item.id,
                label=item.label,
                display_ref=item.display_ref,
                average_reaction_ms=item.average_reaction_ms,
                measurement_count=item.measurement_count,
            )
            for position, item in enumerate(ordered, start=1)
        ]

    def item_summaries(self, catalog: StimulusCatalog) -> list[ItemSummary]:
        """Describe the history of every catalog item, in catalog order."""
        return [
            ItemSummary(
                stimulus_id=item.id,
                label=item.label,
                display_ref=item.display_ref,
                stats=Distribution.of(item.reactions),
            )
            for item in catalog.items
        ]

    def item_summary_frame(
        self,
        catalog: StimulusCatalog,
        backend: Literal["pandas", "polars"] = "pandas",
    ) -> DataFrame:
        """Return ``item_summaries`` as a pandas or polars DataFrame.

        Parameters
        ----------
        catalog : StimulusCatalog
            Catalog with reaction histories.
        backend : Literal["pandas", "polars"]
            DataFrame backend to use (default: "pandas").

        Returns
        -------
        DataFrame
            One row per item with ``stimulus_id``, ``label`` and the
            Distribution fields as columns.
        """
        rows = [
            {
                "stimulus_id": str(summary.stimulus_id),
                "label": summary.label,
                **summary.stats.model_dump(),
            }
            for summary in self.item_summaries(catalog)
        ]
        if backend == "pandas":
            return pd.DataFrame(rows, columns=list(_SUMMARY_SCHEMA))
        return pl.DataFrame(rows, schema=_SUMMARY_SCHEMA)
