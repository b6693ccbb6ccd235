"""Tests for the stimulus catalog."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

import pytest

from rtlab.errors import NotFoundError, ValidationError
from rtlab.stimuli import (
    NO_DATA,
    StimulusCatalog,
    StimulusItem,
    round_half_up,
    sample_catalog,
)


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_rounds_halves_up(self) -> None:
        """Test that .5 rounds away from the lower integer."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_rounds_to_nearest(self) -> None:
        """Test ordinary rounding."""
        assert round_half_up(2.49) == 2
        assert round_half_up(2.51) == 3
        assert round_half_up(0.0) == 0


class TestStimulusItem:
    """Tests for StimulusItem."""

    def test_label_defaults_to_file_name(self) -> None:
        """Test that an empty label is derived from display_ref."""
        item = StimulusItem(display_ref="images/cat.png")
        assert item.label == "cat.png"

    def test_explicit_label_kept(self) -> None:
        """Test that an explicit label is not overridden."""
        item = StimulusItem(display_ref="images/cat.png", label="Cat")
        assert item.label == "Cat"

    def test_average_of_empty_history(self) -> None:
        """Test that an empty history averages to NO_DATA."""
        item = StimulusItem(display_ref="a.png")
        assert item.average_reaction_ms == NO_DATA
        assert item.measurement_count == 0


class TestStimulusCatalog:
    """Tests for StimulusCatalog."""

    def test_add_keeps_insertion_order(self) -> None:
        """Test that items are stored in insertion order."""
        catalog = StimulusCatalog()
        first = catalog.add(StimulusItem(display_ref="b.png"))
        second = catalog.add(StimulusItem(display_ref="a.png"))
        assert catalog.ids() == [first.id, second.id]
        assert len(catalog) == 2

    def test_add_resets_history(self) -> None:
        """Test that reactions carried by a new item are discarded."""
        catalog = StimulusCatalog()
        stored = catalog.add(StimulusItem(display_ref="a.png", reactions=[100, 200]))
        assert stored.reactions == []

    @pytest.mark.parametrize("display_ref", ["", "   "])
    def test_add_rejects_blank_display_ref(self, display_ref: str) -> None:
        """Test that a blank display reference is rejected."""
        catalog = StimulusCatalog()
        with pytest.raises(ValidationError) as exc_info:
            catalog.add(StimulusItem(display_ref=display_ref, label="x"))
        assert exc_info.value.field == "display_ref"
        assert len(catalog) == 0

    def test_add_rejects_duplicate_id(self) -> None:
        """Test that an id can only be added once."""
        catalog = StimulusCatalog()
        item = catalog.add(StimulusItem(display_ref="a.png"))
        with pytest.raises(ValidationError):
            catalog.add(StimulusItem(id=item.id, display_ref="b.png"))

    def test_remove(self) -> None:
        """Test removing an item."""
        catalog = sample_catalog()
        target = catalog.ids()[1]
        removed = catalog.remove(target)
        assert removed.id == target
        assert target not in catalog
        assert len(catalog) == 2

    def test_remove_missing_raises(self) -> None:
        """Test that removing an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            StimulusCatalog().remove(uuid4())
        assert "not found" in str(exc_info.value)

    def test_record_and_average(self) -> None:
        """Test that averages are means rounded half-up."""
        catalog = sample_catalog()
        item_id = catalog.ids()[0]
        catalog.record_reaction(item_id, 300)
        catalog.record_reaction(item_id, 301)
        assert catalog.average_reaction(item_id) == 301  # 300.5 rounds up
        assert catalog.get(item_id).measurement_count == 2

    def test_average_without_history(self) -> None:
        """Test that an item without history reports NO_DATA."""
        catalog = sample_catalog()
        assert catalog.average_reaction(catalog.ids()[0]) == NO_DATA

    def test_record_reaction_unknown_id(self) -> None:
        """Test recording for an absent item."""
        with pytest.raises(NotFoundError):
            sample_catalog().record_reaction(uuid4(), 100)

    def test_record_reaction_negative(self) -> None:
        """Test that negative reaction times are rejected."""
        catalog = sample_catalog()
        with pytest.raises(ValidationError):
            catalog.record_reaction(catalog.ids()[0], -1)

    def test_average_unknown_id(self) -> None:
        """Test that averaging an absent item raises NotFoundError."""
        with pytest.raises(NotFoundError):
            sample_catalog().average_reaction(uuid4())


class TestCatalogIO:
    """Tests for catalog construction helpers and YAML I/O."""

    def test_sample_catalog(self) -> None:
        """Test the built-in placeholder stimuli."""
        catalog = sample_catalog()
        assert [item.label for item in catalog.items] == ["Image 1", "Image 2", "Image 3"]
        assert all(item.display_ref == "/placeholder.svg" for item in catalog.items)

    def test_from_directory(self, tmp_path: Path) -> None:
        """Test that image files are ingested in name order."""
        for name in ["b.png", "a.JPG", "notes.txt", "c.svg"]:
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "nested.png").mkdir()

        catalog = StimulusCatalog.from_directory(tmp_path, name="imgs")

        assert catalog.name == "imgs"
        assert [item.label for item in catalog.items] == ["a.JPG", "b.png", "c.svg"]

    def test_from_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            StimulusCatalog.from_directory(tmp_path / "missing")

    def test_yaml_round_trip_keeps_ids(self, tmp_path: Path) -> None:
        """Test that ids and labels survive a YAML round trip."""
        catalog = sample_catalog()
        path = tmp_path / "out" / "catalog.yaml"
        catalog.to_yaml(path)

        loaded = StimulusCatalog.from_yaml(path)

        assert loaded.name == "sample"
        assert loaded.ids() == catalog.ids()
        assert [item.label for item in loaded.items] == ["Image 1", "Image 2", "Image 3"]

    def test_from_yaml_minimal_entries(self, tmp_path: Path) -> None:
        """Test entries that only give a display reference."""
        path = tmp_path / "catalog.yaml"
        path.write_text("items:\n  - display_ref: img/one.png\n  - display_ref: two.png\n")

        loaded = StimulusCatalog.from_yaml(path)

        assert loaded.name == "catalog"
        assert [item.label for item in loaded.items] == ["one.png", "two.png"]

    def test_from_yaml_rejects_non_list_items(self, tmp_path: Path) -> None:
        """Test that 'items' must be a list."""
        path = tmp_path / "catalog.yaml"
        path.write_text("items: nope\n")
        with pytest.raises(ValidationError):
            StimulusCatalog.from_yaml(path)

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            StimulusCatalog.from_yaml(tmp_path / "nope.yaml")
