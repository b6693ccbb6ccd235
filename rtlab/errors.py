"""Exceptions raised by the rtlab engine."""

from __future__ import annotations

from uuid import UUID


class RTLabError(Exception):
    """Base exception for rtlab errors."""

    pass


class ValidationError(RTLabError, ValueError):
    """Exception raised when input fails validation.

    Raised for empty catalogs, out-of-range configuration values and
    malformed stimulus items.

    Parameters
    ----------
    message
        Error message describing the invalid input.
    field
        Name of the offending field. None if not field-specific.

    Attributes
    ----------
    field : str | None
        Name of the offending field.

    Examples
    --------
    >>> try:
    ...     raise ValidationError("must be >= 100", field="display_time_ms")
    ... except ValidationError as e:
    ...     print(e.field)
    display_time_ms
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class StateError(RTLabError, RuntimeError):
    """Exception raised when an operation is invalid for the current phase.

    Parameters
    ----------
    message
        Error message.
    phase
        Name of the phase the session was in. None if unknown.

    Attributes
    ----------
    phase : str | None
        Phase the session was in when the call was rejected.
    """

    def __init__(self, message: str, phase: str | None = None) -> None:
        self.phase = phase
        super().__init__(message)


class NotFoundError(RTLabError, KeyError):
    """Exception raised when a stimulus id is not in the catalog.

    Parameters
    ----------
    item_id
        The id that could not be found.
    message
        Optional error message. Defaults to a message naming the id.

    Attributes
    ----------
    item_id : UUID | str
        The missing id.

    Examples
    --------
    >>> from uuid import UUID
    >>> err = NotFoundError(UUID(int=1))
    >>> str(err)
    'Stimulus 00000000-0000-0000-0000-000000000001 not found in catalog'
    """

    def __init__(self, item_id: UUID | str, message: str | None = None) -> None:
        self.item_id = item_id
        self.message = message or f"Stimulus {item_id} not found in catalog"
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the message without KeyError quoting."""
        return self.message
