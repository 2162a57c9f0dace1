"""Immutable value objects for the catalog bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from tunebox.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class TrackId:
    """Opaque catalog identifier; the songs API and the local library both use integers."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def from_raw(cls, raw: object) -> TrackId:
        """Build an id from a JSON or database value (int or str)."""
        if isinstance(raw, TrackId):
            return raw
        if isinstance(raw, bool) or not isinstance(raw, (int, str)):
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)
        return cls(str(raw))


# Pydantic-compatible type alias for TrackId fields.
# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(TrackId.from_raw),
    PlainSerializer(lambda v: v.value, return_type=str),
]

OptionalTrackIdField = Annotated[
    TrackId | None,
    PlainValidator(lambda v: None if v is None else TrackId.from_raw(v)),
    PlainSerializer(lambda v: v.value if v is not None else None, return_type=str | None),
]
