"""Trial plan construction.

A plan contains every catalog item exactly ``repetitions`` times, in a
uniformly random order. The order is produced with ``random.Random.shuffle``,
a Fisher-Yates shuffle, so every arrangement of the multiset is equally
likely. Sorting with a random comparator is not uniform and is not used.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rtlab.engine.phases import StimulusRef
from rtlab.errors import ValidationError
from rtlab.stimuli.catalog import StimulusCatalog

logger = logging.getLogger(__name__)


class TrialPlan(BaseModel):
    """Immutable, ordered sequence of stimulus occurrences for one session.

    Attributes
    ----------
    entries : tuple[StimulusRef, ...]
        One entry per trial, in presentation order.
    repetitions : int
        Repetitions per stimulus used to build the plan.
    seed : int | None
        Seed the order was shuffled with, if any.

    Examples
    --------
    >>> from rtlab.stimuli import sample_catalog
    >>> plan = SequencePlanner(seed=1).plan(sample_catalog(), repetitions=2)
    >>> len(plan)
    6
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[StimulusRef, ...] = Field(..., description="Trials in order")
    repetitions: int = Field(..., ge=1, description="Repetitions per stimulus")
    seed: int | None = Field(default=None, description="Shuffle seed")

    def __len__(self) -> int:
        """Return number of trials."""
        return len(self.entries)

    def __getitem__(self, index: int) -> StimulusRef:
        """Return the stimulus of a trial."""
        return self.entries[index]

    def stimulus_ids(self) -> list[UUID]:
        """Return the stimulus id of every trial, in order.

        Returns
        -------
        list[UUID]
            Stimulus ids.
        """
        return [entry.stimulus_id for entry in self.entries]

    def counts(self) -> Counter[UUID]:
        """Count occurrences of each stimulus in the plan.

        Returns
        -------
        Counter[UUID]
            Occurrences per stimulus id.
        """
        return Counter(self.stimulus_ids())


class SequencePlanner:
    """Builds randomized trial plans from a catalog.

    Parameters
    ----------
    seed : int | None
        Seed for reproducible plans. None draws fresh entropy.
    rng : random.Random | None
        Random source to use instead of a seeded one. Mainly for tests that
        need a shared generator across many plans.

    Examples
    --------
    >>> from rtlab.stimuli import sample_catalog
    >>> catalog = sample_catalog()
    >>> a = SequencePlanner(seed=7).plan(catalog, 3)
    >>> b = SequencePlanner(seed=7).plan(catalog, 3)
    >>> a.stimulus_ids() == b.stimulus_ids()
    True
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)

    def plan(self, catalog: StimulusCatalog, repetitions: int) -> TrialPlan:
        """Build a shuffled plan.

        Parameters
        ----------
        catalog : StimulusCatalog
            Stimuli to plan. Not modified.
        repetitions : int
            Occurrences of each stimulus.

        Returns
        -------
        TrialPlan
            Plan of length ``len(catalog) * repetitions``.

        Raises
        ------
        ValidationError
            If the catalog is empty or repetitions is below 1.
        """
        if len(catalog) == 0:
            raise ValidationError("Cannot plan a session from an empty catalog")
        if repetitions < 1:
            raise ValidationError(
                f"repetitions must be >= 1, got {repetitions}", field="repetitions"
            )

        refs = [
            StimulusRef(stimulus_id=item.id, display_ref=item.display_ref, label=item.label)
            for item in catalog.items
        ]
        entries = [ref for ref in refs for _ in range(repetitions)]
        self._rng.shuffle(entries)

        logger.debug(
            "Planned %d trials (%d stimuli x %d repetitions)",
            len(entries),
            len(refs),
            repetitions,
        )
        return TrialPlan(entries=tuple(entries), repetitions=repetitions, seed=self.seed)
