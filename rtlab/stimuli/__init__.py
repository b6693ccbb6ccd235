"""Stimulus items and the catalog that accumulates their measurements."""

from rtlab.stimuli.catalog import (
    IMAGE_EXTENSIONS,
    NO_DATA,
    StimulusCatalog,
    StimulusItem,
    round_half_up,
    sample_catalog,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "NO_DATA",
    "StimulusCatalog",
    "StimulusItem",
    "round_half_up",
    "sample_catalog",
]
