"""Stimulus catalog data models.

This module provides the StimulusItem model and the StimulusCatalog that
holds items in insertion order together with their recorded reaction times.
The catalog has a single append point for measurements, ``record_reaction``,
and computes averages on demand rather than storing them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import UUID

import yaml
from pydantic import Field, computed_field, model_validator

from rtlab.data.base import RTLabBaseModel
from rtlab.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from rtlab.engine.recorder import TrialRecord

logger = logging.getLogger(__name__)

NO_DATA = 0
"""Average reported for an item with no recorded reactions."""

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".gif", ".svg", ".webp"})


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up.

    Parameters
    ----------
    value : float
        Value to round.

    Returns
    -------
    int
        Rounded value.

    Examples
    --------
    >>> round_half_up(2.5)
    3
    >>> round_half_up(2.4)
    2
    """
    return int(math.floor(value + 0.5))


def _empty_reactions() -> list[int]:
    """Return empty reaction list."""
    return []


def _empty_item_list() -> list[StimulusItem]:
    """Return empty item list."""
    return []


class StimulusItem(RTLabBaseModel):
    """A single visual stimulus and its reaction-time history.

    Attributes
    ----------
    id : UUID
        Stable identifier (inherited).
    display_ref : str
        Handle the presentation layer uses to show the stimulus
        (file path, URI, asset key).
    label : str
        Human-readable name. Defaults to the file name of display_ref.
    reactions : list[int]
        Recorded reaction times in milliseconds, in recording order.

    Examples
    --------
    >>> item = StimulusItem(display_ref="stimuli/cat.png")
    >>> item.label
    'cat.png'
    >>> item.average_reaction_ms
    0
    """

    display_ref: str = Field(..., description="Display handle or URI")
    label: str = Field(default="", description="Human-readable label")
    reactions: list[int] = Field(
        default_factory=_empty_reactions, description="Reaction times (ms)"
    )

    @model_validator(mode="after")
    def default_label(self) -> StimulusItem:
        """Derive the label from display_ref when none was given.

        Returns
        -------
        StimulusItem
            Item with a label set.
        """
        if not self.label.strip() and self.display_ref.strip():
            # object.__setattr__ avoids re-running validation on assignment
            object.__setattr__(self, "label", Path(self.display_ref).name)
        return self

    @computed_field
    @property
    def measurement_count(self) -> int:
        """Number of recorded reactions."""
        return len(self.reactions)

    @computed_field
    @property
    def average_reaction_ms(self) -> int:
        """Mean reaction time rounded to the nearest ms, or NO_DATA."""
        if not self.reactions:
            return NO_DATA
        return round_half_up(sum(self.reactions) / len(self.reactions))


class StimulusCatalog(RTLabBaseModel):
    """Ordered collection of stimulus items.

    Items keep their insertion order, which the stats layer relies on to
    break ties deterministically.

    Attributes
    ----------
    name : str
        Catalog name.
    items : list[StimulusItem]
        Items in insertion order.

    Examples
    --------
    >>> catalog = StimulusCatalog(name="demo")
    >>> item = catalog.add(StimulusItem(display_ref="a.png"))
    >>> catalog.record_reaction(item.id, 300)
    >>> catalog.record_reaction(item.id, 301)
    >>> catalog.average_reaction(item.id)
    301
    """

    name: str = Field(default="catalog", description="Catalog name")
    items: list[StimulusItem] = Field(
        default_factory=_empty_item_list, description="Stimulus items"
    )

    def __len__(self) -> int:
        """Return number of items."""
        return len(self.items)

    def __contains__(self, item_id: object) -> bool:
        """Check whether an id is in the catalog."""
        return any(item.id == item_id for item in self.items)

    def ids(self) -> list[UUID]:
        """Return item ids in insertion order.

        Returns
        -------
        list[UUID]
            Item ids.
        """
        return [item.id for item in self.items]

    def get(self, item_id: UUID) -> StimulusItem:
        """Look up an item by id.

        Parameters
        ----------
        item_id : UUID
            Item id.

        Returns
        -------
        StimulusItem
            The matching item.

        Raises
        ------
        NotFoundError
            If no item has this id.
        """
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError(item_id)

    def add(self, item: StimulusItem) -> StimulusItem:
        """Append an item with an empty measurement history.

        Parameters
        ----------
        item : StimulusItem
            Item to add. Any reactions it carries are discarded.

        Returns
        -------
        StimulusItem
            The stored item.

        Raises
        ------
        ValidationError
            If display_ref is empty or the id is already present.
        """
        if not item.display_ref or not item.display_ref.strip():
            raise ValidationError(
                "Stimulus display reference must be non-empty", field="display_ref"
            )
        if item.id in self:
            raise ValidationError(f"Stimulus {item.id} is already in the catalog")

        stored = item.model_copy(update={"reactions": []}, deep=True)
        self.items.append(stored)
        self.update_modified_time()
        logger.debug("Added stimulus %s (%s)", stored.id, stored.label)
        return stored

    def remove(self, item_id: UUID) -> StimulusItem:
        """Remove an item.

        Already logged trial records are left untouched.

        Parameters
        ----------
        item_id : UUID
            Item id.

        Returns
        -------
        StimulusItem
            The removed item.

        Raises
        ------
        NotFoundError
            If no item has this id.
        """
        item = self.get(item_id)
        self.items.remove(item)
        self.update_modified_time()
        logger.debug("Removed stimulus %s (%s)", item.id, item.label)
        return item

    def record_reaction(self, item_id: UUID, reaction_ms: int) -> None:
        """Append a reaction time to an item's history.

        Parameters
        ----------
        item_id : UUID
            Item id.
        reaction_ms : int
            Reaction time in milliseconds.

        Raises
        ------
        NotFoundError
            If the item was removed or never added.
        ValidationError
            If reaction_ms is negative.
        """
        if reaction_ms < 0:
            raise ValidationError(
                f"Reaction time must be >= 0, got {reaction_ms}", field="reaction_ms"
            )
        self.get(item_id).reactions.append(int(reaction_ms))

    def average_reaction(self, item_id: UUID) -> int:
        """Return an item's mean reaction time, rounded to the nearest ms.

        Parameters
        ----------
        item_id : UUID
            Item id.

        Returns
        -------
        int
            Rounded mean, or NO_DATA if the item has no history.

        Raises
        ------
        NotFoundError
            If no item has this id.
        """
        return self.get(item_id).average_reaction_ms

    # construction helpers

    @classmethod
    def from_directory(
        cls, directory: Path | str, name: str | None = None
    ) -> StimulusCatalog:
        """Build a catalog from the image files in a directory.

        Files are added sorted by file name. Non-image files are skipped.

        Parameters
        ----------
        directory : Path | str
            Directory to scan (not recursive).
        name : str | None
            Catalog name. Defaults to the directory name.

        Returns
        -------
        StimulusCatalog
            Catalog with one item per image file.

        Raises
        ------
        FileNotFoundError
            If the directory doesn't exist.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Stimulus directory not found: {directory}")

        catalog = cls(name=name or directory.name)
        paths = sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
        )
        for path in paths:
            catalog.add(StimulusItem(display_ref=str(path), label=path.name))
        return catalog

    @classmethod
    def from_records(
        cls, records: Iterable[TrialRecord], name: str = "session"
    ) -> StimulusCatalog:
        """Rebuild a catalog with histories from logged trial records.

        Items appear in order of first appearance in the records.

        Parameters
        ----------
        records : Iterable[TrialRecord]
            Trial records, typically from a session log.
        name : str
            Catalog name.

        Returns
        -------
        StimulusCatalog
            Catalog whose histories reproduce the records.
        """
        catalog = cls(name=name)
        for record in records:
            if record.stimulus_id not in catalog:
                catalog.add(
                    StimulusItem(
                        id=record.stimulus_id,
                        display_ref=record.stimulus_label or str(record.stimulus_id),
                        label=record.stimulus_label,
                    )
                )
            catalog.record_reaction(record.stimulus_id, record.reaction_time_ms)
        return catalog

    # YAML I/O

    def to_dict(self) -> dict[str, Any]:
        """Convert the catalog to a plain dictionary.

        Returns
        -------
        dict[str, Any]
            Dictionary with ``name`` and ``items`` keys.
        """
        return {
            "name": self.name,
            "items": [
                {
                    "id": str(item.id),
                    "label": item.label,
                    "display_ref": item.display_ref,
                }
                for item in self.items
            ],
        }

    def to_yaml(self, path: Path | str) -> None:
        """Write the catalog to a YAML file.

        Parameters
        ----------
        path : Path | str
            Output path. Parent directories are created.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.to_dict(),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    @classmethod
    def from_yaml(cls, path: Path | str) -> StimulusCatalog:
        """Load a catalog from a YAML file.

        Each entry needs a ``display_ref``; ``id`` and ``label`` are optional.

        Parameters
        ----------
        path : Path | str
            Path to the YAML file.

        Returns
        -------
        StimulusCatalog
            Loaded catalog.

        Raises
        ------
        FileNotFoundError
            If the file doesn't exist.
        ValidationError
            If the file is not a mapping with an ``items`` list.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}

        if not isinstance(content, dict) or not isinstance(
            content.get("items", []), list
        ):
            raise ValidationError(f"Catalog file {path} must map 'items' to a list")

        catalog = cls(name=str(content.get("name", path.stem)))
        for entry in content.get("items", []):
            catalog.add(StimulusItem.model_validate(entry))
        return catalog


def sample_catalog() -> StimulusCatalog:
    """Return a catalog of three placeholder stimuli.

    Returns
    -------
    StimulusCatalog
        Catalog named ``sample`` with items ``Image 1`` to ``Image 3``.

    Examples
    --------
    >>> [item.label for item in sample_catalog().items]
    ['Image 1', 'Image 2', 'Image 3']
    """
    catalog = StimulusCatalog(name="sample")
    for n in range(1, 4):
        catalog.add(StimulusItem(display_ref="/placeholder.svg", label=f"Image {n}"))
    return catalog
