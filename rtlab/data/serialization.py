"""JSON Lines reading and writing for pydantic models."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel


def write_jsonlines[T: BaseModel](records: Iterable[T], path: Path | str) -> int:
    """Write models to a JSON Lines file, one model per line.

    Parameters
    ----------
    records : Iterable[T]
        Models to write.
    path : Path | str
        Output file path. Parent directories are created.

    Returns
    -------
    int
        Number of lines written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(record.model_dump_json() + "\n")
            count += 1
    return count


def read_jsonlines[T: BaseModel](path: Path | str, model_type: type[T]) -> list[T]:
    """Read a JSON Lines file into a list of models.

    Blank lines are skipped.

    Parameters
    ----------
    path : Path | str
        Input file path.
    model_type : type[T]
        Model class used to validate each line.

    Returns
    -------
    list[T]
        Parsed models in file order.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    pydantic.ValidationError
        If a line doesn't validate against model_type.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JSONL file not found: {path}")

    results: list[T] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            results.append(model_type.model_validate_json(line))
    return results
