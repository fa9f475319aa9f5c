"""Ship entity for the battlefield engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import PositionNotOnShipError
from .position import Position
from .schemas import ShipPayload


def _new_ship_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class Ship:
    """A ship of fixed length anchored at its head position.

    Unrotated ships extend along +x from the head, rotated ships along +y.
    An unplaced ship (``position is None``) covers no cells. Ships compare by
    identity; the battlefield registry keys them by ``id``.
    """

    length: int
    position: Position | None = None
    is_rotated: bool = False
    id: str = field(default_factory=_new_ship_id)
    has_collision: bool = field(default=False, init=False)
    hit_fields: list[bool] = field(init=False)

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("Ship length must be a positive integer.")
        self.id = str(self.id)
        self.hit_fields = [False] * self.length

    def coordinates(self) -> list[Position]:
        """Return the ordered cells covered by the ship, head first."""
        if self.position is None:
            return []
        x, y = self.position.x, self.position.y
        if self.is_rotated:
            return [Position(x, y + offset) for offset in range(self.length)]
        return [Position(x + offset, y) for offset in range(self.length)]

    def tail(self) -> Position | None:
        coords = self.coordinates()
        return coords[-1] if coords else None

    def is_sunk(self) -> bool:
        return all(self.hit_fields)

    def hit(self, position: Position) -> None:
        """Record damage on the cell at ``position``."""
        try:
            index = self.coordinates().index(position)
        except ValueError:
            raise PositionNotOnShipError(
                f"Ship {self.id} has no field on position {position}."
            ) from None
        self.hit_fields[index] = True

    def rotate(self) -> None:
        self.is_rotated = not self.is_rotated

    def reset(self) -> None:
        """Unplace the ship and clear its orientation, collision flag and damage."""
        self.position = None
        self.is_rotated = False
        self.has_collision = False
        self.hit_fields = [False] * self.length

    def to_payload(self) -> ShipPayload:
        return ShipPayload(
            id=self.id,
            length=self.length,
            position=(self.position.x, self.position.y) if self.position else None,
            is_rotated=self.is_rotated,
        )

    def to_json(self) -> dict[str, Any]:
        return self.to_payload().to_json()

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | ShipPayload) -> Ship:
        payload = data if isinstance(data, ShipPayload) else ShipPayload.model_validate(data)
        position = Position.from_json(payload.position) if payload.position else None
        return cls(
            id=payload.id,
            length=payload.length,
            position=position,
            is_rotated=payload.is_rotated,
        )
