"""Reaction-time testing engine for timed visual stimulus presentation.

The package sequences trials over a catalog of stimuli, advances each trial
through timed presentation phases, captures the first qualifying key press
and aggregates reaction times per stimulus and per session.
"""

from __future__ import annotations

__version__ = "0.1.0"
