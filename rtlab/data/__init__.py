"""Base models and serialization helpers shared across rtlab."""

from rtlab.data.base import JsonValue, RTLabBaseModel, utc_now
from rtlab.data.serialization import read_jsonlines, write_jsonlines

__all__ = [
    "JsonValue",
    "RTLabBaseModel",
    "read_jsonlines",
    "utc_now",
    "write_jsonlines",
]
