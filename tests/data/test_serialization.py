"""Tests for JSON Lines serialization."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import BaseModel, ValidationError

from rtlab.data.serialization import read_jsonlines, write_jsonlines


class Row(BaseModel):
    """Row model for serialization tests."""

    name: str
    value: int


def test_write_then_read(tmp_path: Path) -> None:
    """Test writing rows and reading them back in order."""
    path = tmp_path / "out" / "rows.jsonl"
    rows = [Row(name="a", value=1), Row(name="b", value=2)]

    assert write_jsonlines(rows, path) == 2
    assert read_jsonlines(path, Row) == rows
    assert len(path.read_text().splitlines()) == 2


def test_write_empty(tmp_path: Path) -> None:
    """Test that writing nothing creates an empty file."""
    path = tmp_path / "empty.jsonl"
    assert write_jsonlines([], path) == 0
    assert path.read_text() == ""
    assert read_jsonlines(path, Row) == []


def test_blank_lines_skipped(tmp_path: Path) -> None:
    """Test that blank lines are ignored."""
    path = tmp_path / "rows.jsonl"
    path.write_text('{"name": "a", "value": 1}\n\n   \n{"name": "b", "value": 2}\n')
    assert [row.name for row in read_jsonlines(path, Row)] == ["a", "b"]


def test_missing_file(tmp_path: Path) -> None:
    """Test reading a file that doesn't exist."""
    with pytest.raises(FileNotFoundError):
        read_jsonlines(tmp_path / "missing.jsonl", Row)


def test_invalid_line(tmp_path: Path) -> None:
    """Test that a line not matching the model raises."""
    path = tmp_path / "rows.jsonl"
    path.write_text('{"name": "a"}\n')
    with pytest.raises(ValidationError):
        read_jsonlines(path, Row)
