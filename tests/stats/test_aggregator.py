"""Tests for session summaries and stimulus rankings."""

from __future__ import annotations

from uuid import uuid4

import pandas as pd
import polars as pl
import pytest

from rtlab.engine.recorder import SessionLog, TrialRecord
from rtlab.stats import Distribution, StatsAggregator
from rtlab.stimuli import NO_DATA, StimulusCatalog, StimulusItem


def _catalog(**histories: list[int]) -> StimulusCatalog:
    catalog = StimulusCatalog(name="test")
    for label, reactions in histories.items():
        catalog.add(
            StimulusItem(display_ref=f"{label}.png", label=label, reactions=reactions)
        )
    return catalog


def _log(*entries: tuple[StimulusItem, int]) -> SessionLog:
    log = SessionLog()
    for index, (item, reaction_ms) in enumerate(entries):
        log.append(
            TrialRecord(
                session_id=log.session_id,
                trial_index=index,
                stimulus_id=item.id,
                stimulus_label=item.label,
                reaction_time_ms=reaction_ms,
                response_key="Space",
            )
        )
    return log


class TestDistribution:
    """Tests for Distribution.of."""

    def test_empty(self) -> None:
        """Test that no data gives NO_DATA and None statistics."""
        dist = Distribution.of([])
        assert dist.count == 0
        assert dist.mean_ms == NO_DATA
        assert dist.median_ms is None
        assert dist.sd_ms is None
        assert dist.min_ms is None

    def test_single_value(self) -> None:
        """Test a single measurement has zero spread."""
        dist = Distribution.of([240])
        assert dist.mean_ms == 240
        assert dist.sd_ms == 0.0
        assert dist.min_ms == dist.max_ms == 240

    def test_statistics(self) -> None:
        """Test the descriptive statistics of several values."""
        dist = Distribution.of([200, 300, 400])
        assert dist.count == 3
        assert dist.mean_ms == 300
        assert dist.median_ms == 300.0
        assert dist.sd_ms == pytest.approx(100.0)
        assert (dist.min_ms, dist.max_ms) == (200, 400)

    def test_mean_rounds_half_up(self) -> None:
        """Test that a .5 mean rounds up."""
        assert Distribution.of([200, 201]).mean_ms == 201


class TestSessionSummary:
    """Tests for StatsAggregator.session_summary."""

    def test_empty_log(self) -> None:
        """Test the summary of a log with no records."""
        summary = StatsAggregator().session_summary(SessionLog())
        assert summary.tested_item_count == 0
        assert summary.total_measurements == 0
        assert summary.mean_reaction_time_ms == 0
        assert summary.median_reaction_time_ms is None
        assert summary.max_reaction_time_ms is None

    def test_counts_distinct_items(self) -> None:
        """Test that repeated stimuli count once."""
        catalog = _catalog(A=[], B=[], C=[])
        a, b, _ = catalog.items
        log = _log((a, 200), (b, 300), (a, 250), (b, 301))

        summary = StatsAggregator().session_summary(log)

        assert summary.tested_item_count == 2
        assert summary.total_measurements == 4
        assert summary.mean_reaction_time_ms == 263  # 262.75
        assert summary.min_reaction_time_ms == 200
        assert summary.max_reaction_time_ms == 301

    def test_mean_rounds_half_up(self) -> None:
        """Test half-up rounding of the session mean."""
        catalog = _catalog(A=[])
        (a,) = catalog.items
        summary = StatsAggregator().session_summary(_log((a, 100), (a, 101)))
        assert summary.mean_reaction_time_ms == 101


class TestRank:
    """Tests for StatsAggregator.rank."""

    def test_fastest_first(self) -> None:
        """Test ascending order by average reaction time."""
        catalog = _catalog(A=[300, 320], B=[200], C=[250, 260])
        ranking = StatsAggregator().rank(catalog)

        assert [r.label for r in ranking] == ["B", "C", "A"]
        assert [r.rank for r in ranking] == [1, 2, 3]
        assert [r.average_reaction_ms for r in ranking] == [200, 255, 310]
        assert [r.measurement_count for r in ranking] == [1, 2, 2]

    def test_slowest_first(self) -> None:
        """Test descending order."""
        catalog = _catalog(A=[300], B=[200], C=[250])
        ranking = StatsAggregator().rank(catalog, ascending=False)
        assert [r.label for r in ranking] == ["A", "C", "B"]

    def test_unmeasured_items_excluded(self) -> None:
        """Test that items without history are not ranked."""
        catalog = _catalog(A=[], B=[200], C=[])
        assert [r.label for r in StatsAggregator().rank(catalog)] == ["B"]

    def test_empty_catalog(self) -> None:
        """Test ranking an empty catalog."""
        assert StatsAggregator().rank(StimulusCatalog()) == []

    def test_ties_keep_catalog_order(self) -> None:
        """Test that equal averages keep insertion order both ways."""
        catalog = _catalog(A=[250], B=[200], C=[250])
        aggregator = StatsAggregator()

        assert [r.label for r in aggregator.rank(catalog)] == ["B", "A", "C"]
        assert [r.label for r in aggregator.rank(catalog, ascending=False)] == [
            "A",
            "C",
            "B",
        ]

    def test_ties_on_rounded_average(self) -> None:
        """Test that ranking uses the rounded average."""
        catalog = _catalog(A=[200, 201], B=[201])
        ranking = StatsAggregator().rank(catalog)
        assert [r.label for r in ranking] == ["A", "B"]
        assert ranking[0].average_reaction_ms == ranking[1].average_reaction_ms == 201

    def test_limit(self) -> None:
        """Test truncation to the top entries."""
        catalog = _catalog(A=[300], B=[200], C=[250])
        ranking = StatsAggregator().rank(catalog, limit=2)
        assert [r.label for r in ranking] == ["B", "C"]


class TestItemSummaries:
    """Tests for per-item summaries."""

    def test_item_summaries(self) -> None:
        """Test summaries follow catalog order and include empty items."""
        catalog = _catalog(A=[200, 300], B=[])
        summaries = StatsAggregator().item_summaries(catalog)

        assert [s.label for s in summaries] == ["A", "B"]
        assert summaries[0].stats.mean_ms == 250
        assert summaries[1].stats.count == 0

    def test_frame_pandas(self) -> None:
        """Test the pandas summary frame."""
        catalog = _catalog(A=[200, 300], B=[400])
        frame = StatsAggregator().item_summary_frame(catalog)

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == [
            "stimulus_id",
            "label",
            "count",
            "mean_ms",
            "median_ms",
            "sd_ms",
            "min_ms",
            "max_ms",
        ]
        assert frame["mean_ms"].tolist() == [250, 400]

    def test_frame_polars(self) -> None:
        """Test the polars summary frame."""
        catalog = _catalog(A=[200, 300], B=[400])
        frame = StatsAggregator().item_summary_frame(catalog, backend="polars")

        assert isinstance(frame, pl.DataFrame)
        assert frame["label"].to_list() == ["A", "B"]
        assert frame["count"].to_list() == [2, 1]

    def test_frame_empty_catalog(self) -> None:
        """Test frames for a catalog with no items."""
        aggregator = StatsAggregator()
        empty = StimulusCatalog()

        assert len(aggregator.item_summary_frame(empty)) == 0
        polars_frame = aggregator.item_summary_frame(empty, backend="polars")
        assert polars_frame.height == 0
        assert polars_frame.schema["label"] == pl.Utf8
        assert polars_frame.schema["count"] == pl.Int64
        assert polars_frame.schema["mean_ms"] == pl.Int64
        assert polars_frame.schema["sd_ms"] == pl.Float64

    def test_frame_schemas_agree(self) -> None:
        """Test that empty and filled polars frames share one schema."""
        catalog = _catalog(A=[200, 300], B=[])
        aggregator = StatsAggregator()
        filled = aggregator.item_summary_frame(catalog, backend="polars")
        empty = aggregator.item_summary_frame(StimulusCatalog(), backend="polars")
        assert filled.schema == empty.schema

    def test_unknown_id_in_log(self) -> None:
        """Test that summaries do not need the catalog."""
        log = SessionLog()
        log.append(
            TrialRecord(
                session_id=log.session_id,
                trial_index=0,
                stimulus_id=uuid4(),
                reaction_time_ms=180,
                response_key="Space",
            )
        )
        assert StatsAggregator().session_summary(log).tested_item_count == 1
