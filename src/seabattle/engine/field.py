"""Single cell of the battlefield grid."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from .errors import FieldAlreadyMarkedError, UnmarkedFieldSerializationError
from .position import Position
from .schemas import FieldPayload

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ship import Ship


class FieldStatus(Enum):
    """Attack marker stamped on a field."""

    UNMARKED = "unmarked"
    HIT = "hit"
    MISSED = "missed"


class Field:
    """A materialised grid cell: its attack marker and the ships covering it.

    Occupants are stored by ship id in insertion order. The owning
    battlefield resolves ids back to ships, so a field never holds a
    reference to a ship object.
    """

    def __init__(self, position: Position) -> None:
        self.position = position
        self.status = FieldStatus.UNMARKED
        self._ship_ids: dict[str, None] = {}

    def __repr__(self) -> str:
        return f"Field(position={self.position!s}, status={self.status.value}, ships={list(self._ship_ids)})"

    def __len__(self) -> int:
        return len(self._ship_ids)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._ship_ids))

    @property
    def is_unmarked(self) -> bool:
        return self.status is FieldStatus.UNMARKED

    @property
    def is_hit(self) -> bool:
        return self.status is FieldStatus.HIT

    @property
    def is_missed(self) -> bool:
        return self.status is FieldStatus.MISSED

    def mark_as_hit(self) -> None:
        self._mark(FieldStatus.HIT)

    def mark_as_missed(self) -> None:
        self._mark(FieldStatus.MISSED)

    def _mark(self, status: FieldStatus) -> None:
        if not self.is_unmarked:
            raise FieldAlreadyMarkedError(
                f"Field {self.position} is already marked as {self.status.value}."
            )
        self.status = status

    def add_ship(self, ship: Ship) -> None:
        self._ship_ids[ship.id] = None

    def remove_ship(self, ship: Ship) -> None:
        self._ship_ids.pop(ship.id, None)

    def has_ship(self, ship: Ship) -> bool:
        return ship.id in self._ship_ids

    def get_ship_ids(self) -> tuple[str, ...]:
        return tuple(self._ship_ids)

    def get_first_ship_id(self) -> str | None:
        """Return the earliest-added occupant, or ``None`` for an empty field."""
        return next(iter(self._ship_ids), None)

    def to_json(self) -> dict[str, Any]:
        if self.is_unmarked:
            raise UnmarkedFieldSerializationError(
                f"Field {self.position} has no marker to serialize."
            )
        payload = FieldPayload(position=(self.position.x, self.position.y), status=self.status.value)
        return payload.to_json()
