"""Reaction-time statistics."""

from rtlab.stats.aggregator import (
    Distribution,
    ItemSummary,
    RankedStimulus,
    SessionSummary,
    StatsAggregator,
)

__all__ = [
    "Distribution",
    "ItemSummary",
    "RankedStimulus",
    "SessionSummary",
    "StatsAggregator",
]
