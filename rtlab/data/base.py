"""Base model for rtlab records.

Every persisted or logged record carries a UUID and creation/modification
timestamps so that records can be referenced by id and ordered in time.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

type JsonValue = (
    str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime.

    Returns
    -------
    datetime
        Current UTC time.
    """
    return datetime.now(UTC)


class RTLabBaseModel(BaseModel):
    """Base class for rtlab data models.

    Attributes
    ----------
    id : UUID
        Unique identifier.
    created_at : datetime
        When the record was created (UTC).
    modified_at : datetime
        When the record was last modified (UTC).

    Examples
    --------
    >>> record = RTLabBaseModel()
    >>> record.created_at <= record.modified_at
    True
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    modified_at: datetime = Field(
        default_factory=utc_now, description="Last modification time"
    )

    def update_modified_time(self) -> None:
        """Set modified_at to the current time."""
        self.modified_at = utc_now()
