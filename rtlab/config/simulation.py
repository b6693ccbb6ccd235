"""Simulation configuration models for the rtlab package."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


def _empty_offsets() -> dict[str, float]:
    """Return empty offset dict."""
    return {}


class SubjectConfig(BaseModel):
    """Configuration for a simulated subject.

    Attributes
    ----------
    base_rt_ms : float
        Mean reaction time.
    rt_sd_ms : float
        Standard deviation of gaussian reaction-time noise.
    min_rt_ms : float
        Floor applied to every sampled reaction time.
    item_offsets_ms : dict[str, float]
        Per-stimulus shifts of the mean, keyed by stimulus label.
    wrong_key_rate : float
        Probability of pressing a non-matching key before responding.
    double_press_rate : float
        Probability of pressing the response key a second time.
    wrong_key : str
        Key used for wrong presses.

    Examples
    --------
    >>> config = SubjectConfig(base_rt_ms=300.0, item_offsets_ms={"Image 1": 50.0})
    >>> config.item_offsets_ms["Image 1"]
    50.0
    """

    base_rt_ms: float = Field(default=350.0, gt=0.0, description="Mean reaction time")
    rt_sd_ms: float = Field(default=60.0, ge=0.0, description="Reaction time SD")
    min_rt_ms: float = Field(default=120.0, ge=0.0, description="Reaction time floor")
    item_offsets_ms: dict[str, float] = Field(
        default_factory=_empty_offsets, description="Per-stimulus mean offsets"
    )
    wrong_key_rate: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Wrong key probability"
    )
    double_press_rate: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Double press probability"
    )
    wrong_key: str = Field(default="KeyX", description="Key used for wrong presses")


class SimulationConfig(BaseModel):
    """Configuration for running a simulated session.

    Attributes
    ----------
    subject : SubjectConfig
        Simulated subject parameters.
    random_seed : int | None
        Seed for both the trial plan and the subject.
    save_path : Path | None
        Where to write the session log (JSONL). None skips saving.
    """

    subject: SubjectConfig = Field(
        default_factory=SubjectConfig, description="Simulated subject"
    )
    random_seed: int | None = Field(default=None, description="Random seed")
    save_path: Path | None = Field(default=None, description="Session log path")
