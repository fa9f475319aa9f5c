"""Battlefield: the sparse field grid plus the registry of managed ships."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, TypeVar

from seabattle.telemetry import get_meter, get_tracer

from .errors import (
    FieldExistsError,
    FieldNotFoundError,
    ShipAlreadyAddedError,
    ShipNotFoundError,
    ShipTooLongError,
)
from .events import (
    BattlefieldReset,
    EventBus,
    FieldHit,
    FieldMissed,
    ShipMoved,
    ShipRemoved,
    Subscription,
)
from .field import Field
from .position import Position
from .schemas import ShipPayload, parse_ships_schema
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.battlefield")
meter = get_meter("seabattle.engine.battlefield")

SHIP_MOVE_COUNTER = meter.create_counter(
    "seabattle_engine_ship_moves",
    unit="1",
    description="Number of ship placements applied to a battlefield",
)

TEvent = TypeVar("TEvent")


class BattlefieldCore(Protocol):
    """The field/ship contract the collision, placement and shot mixins rely on."""

    size: int
    is_locked: bool
    rng: random.Random

    def has_field(self, position: Position) -> bool: ...

    def get_field(self, position: Position) -> Field | None: ...

    def get_ship(self, ship_id: str) -> Ship: ...

    def get_ships(self) -> list[Ship]: ...

    def get_field_ships(self, position: Position) -> list[Ship]: ...

    def move_ship(self, ship: Ship, position: Position, is_rotated: bool | None = None) -> None: ...

    def mark_as_hit(self, position: Position) -> Field: ...

    def mark_as_missed(self, position: Position) -> Field: ...

    def reset(self) -> None: ...

    def publish(self, event: object) -> int: ...


class Battlefield:
    """Stores the ships placed on a square grid and keeps fields consistent with them.

    Fields are materialised lazily, the first time a ship covers a cell or a
    marker is stamped on it. Both fields and ships live in flat maps owned
    by the battlefield; a field only records the ids of the ships covering it.
    """

    def __init__(
        self,
        size: int,
        ships_schema: Mapping[Any, Any] | None = None,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        owner: str = "unknown",
    ) -> None:
        if size < 1:
            raise ValueError("Battlefield size must be a positive integer.")
        self.size = size
        self.ships_schema = parse_ships_schema(ships_schema or {})
        self.is_locked = False
        self.owner = owner
        self.rng = rng or random.Random()
        self.events = event_bus or EventBus()
        self._subscriptions: list[Subscription] = []
        self._ships: dict[str, Ship] = {}
        self._fields: dict[Position, Field] = {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}, owner={self.owner!r}, "
            f"ships={len(self._ships)}, fields={len(self._fields)})"
        )

    @property
    def settings(self) -> dict[str, Any]:
        return {"size": self.size, "shipsSchema": dict(self.ships_schema)}

    @property
    def has_collision(self) -> bool:
        """``True`` while any managed ship is flagged as colliding."""
        return any(ship.has_collision for ship in self._ships.values())

    # Fields

    def create_field(self, position: Position) -> Field:
        if position in self._fields:
            raise FieldExistsError(f"Field {position} already exists.")
        field = Field(position)
        self._fields[position] = field
        return field

    def has_field(self, position: Position) -> bool:
        return position in self._fields

    def get_field(self, position: Position) -> Field | None:
        return self._fields.get(position)

    def remove_field(self, position: Position) -> None:
        if position not in self._fields:
            raise FieldNotFoundError(f"Cannot remove not existing field {position}.")
        del self._fields[position]

    def get_fields(self) -> list[Field]:
        return list(self._fields.values())

    def get_fields_with_markers(self) -> list[Field]:
        return [field for field in self._fields.values() if not field.is_unmarked]

    def get_field_ships(self, position: Position) -> list[Ship]:
        """Return the ships covering ``position`` in the order they arrived."""
        field = self._fields.get(position)
        if field is None:
            return []
        return [self._ships[ship_id] for ship_id in field]

    def mark_as_hit(self, position: Position) -> Field:
        field = self._ensure_field(position)
        field.mark_as_hit()
        self.publish(FieldHit(position))
        return field

    def mark_as_missed(self, position: Position) -> Field:
        field = self._ensure_field(position)
        field.mark_as_missed()
        self.publish(FieldMissed(position))
        return field

    def _ensure_field(self, position: Position) -> Field:
        field = self._fields.get(position)
        if field is None:
            field = self.create_field(position)
        return field

    # Ships

    def add_ship(self, ship: Ship) -> None:
        """Register ``ship``; a ship that already has a position is placed immediately."""
        if ship.id in self._ships:
            raise ShipAlreadyAddedError(f"Ship {ship.id} already added to the battlefield.")
        if ship.length > self.size:
            raise ShipTooLongError(
                f"Ship {ship.id} of length {ship.length} does not fit a {self.size}x{self.size} grid."
            )
        self._ships[ship.id] = ship
        if ship.position is not None:
            self._place_ship(ship, ship.position, ship.is_rotated)

    def remove_ship(self, ship: Ship) -> None:
        """Unregister ``ship`` and free its fields. The ship keeps its own position."""
        self._require_ship(ship)
        self._detach_ship(ship)
        del self._ships[ship.id]
        ship.has_collision = False
        self.publish(ShipRemoved(ship))

    def has_ship(self, ship: Ship) -> bool:
        return self._ships.get(ship.id) is ship

    def get_ship(self, ship_id: str) -> Ship:
        try:
            return self._ships[ship_id]
        except KeyError:
            raise ShipNotFoundError(f"Ship {ship_id} is not on the battlefield.") from None

    def get_ships(self) -> list[Ship]:
        return list(self._ships.values())

    def move_ship(self, ship: Ship, position: Position, is_rotated: bool | None = None) -> None:
        """Place ``ship`` with its head at ``position``, keeping it inside the grid.

        Does nothing while the battlefield is locked. ``is_rotated`` defaults
        to the ship's current orientation.
        """
        if self.is_locked:
            logger.debug("move_ship_ignored_locked", extra={"owner": self.owner, "ship_id": ship.id})
            return
        self._require_ship(ship)
        if is_rotated is None:
            is_rotated = ship.is_rotated
        with tracer.start_as_current_span("battlefield.move_ship") as span:
            span.set_attribute("battlefield.owner", self.owner)
            span.set_attribute("ship.id", ship.id)
            span.set_attribute("ship.length", ship.length)
            span.set_attribute("target.x", position.x)
            span.set_attribute("target.y", position.y)
            span.set_attribute("ship.rotated", is_rotated)
            self._place_ship(ship, position, is_rotated)

    def rotate_ship(self, ship: Ship) -> None:
        """Toggle the orientation of ``ship`` around its head."""
        if ship.position is None:
            if self.is_locked:
                return
            self._require_ship(ship)
            ship.rotate()
            return
        self.move_ship(ship, ship.position, not ship.is_rotated)

    def reset(self) -> None:
        """Drop every field and return every managed ship to its unplaced default."""
        self._fields.clear()
        for ship in self._ships.values():
            ship.reset()
        logger.debug("battlefield_reset", extra={"owner": self.owner})
        self.publish(BattlefieldReset())

    def _require_ship(self, ship: Ship) -> None:
        if not self.has_ship(ship):
            raise ShipNotFoundError(f"Ship {ship.id} is not on the battlefield.")

    def _clamp_head(self, ship: Ship, position: Position, is_rotated: bool) -> Position:
        last = self.size - 1
        x = min(max(position.x, 0), last)
        y = min(max(position.y, 0), last)
        max_head = self.size - ship.length
        if is_rotated:
            y = min(y, max_head)
        else:
            x = min(x, max_head)
        return Position(x, y)

    def _detach_ship(self, ship: Ship) -> None:
        # Empty fields without a marker are pruned to keep the grid sparse.
        for position in ship.coordinates():
            field = self._fields.get(position)
            if field is None or not field.has_ship(ship):
                continue
            field.remove_ship(ship)
            if len(field) == 0 and field.is_unmarked:
                del self._fields[position]

    def _place_ship(self, ship: Ship, position: Position, is_rotated: bool) -> None:
        target = self._clamp_head(ship, position, is_rotated)

        # Old cells must be released before the ship's orientation changes.
        self._detach_ship(ship)
        ship.is_rotated = is_rotated
        ship.position = target
        for cell in ship.coordinates():
            self._ensure_field(cell).add_ship(ship)

        SHIP_MOVE_COUNTER.add(1, attributes={"owner": self.owner})
        logger.debug(
            "ship_moved",
            extra={
                "owner": self.owner,
                "ship_id": ship.id,
                "x": target.x,
                "y": target.y,
                "rotated": is_rotated,
            },
        )
        self.publish(ShipMoved(ship))

    # Notifications

    def on(self, event_type: type[TEvent], handler: Callable[[TEvent], None]) -> Subscription:
        subscription = self.events.subscribe(event_type, handler)
        self._subscriptions.append(subscription)
        return subscription

    def off(self, subscription: Subscription) -> None:
        self.events.unsubscribe(subscription)
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, event: object) -> int:
        return self.events.publish(event)

    def destroy(self) -> None:
        """Drop every subscription registered through :meth:`on`."""
        for subscription in self._subscriptions:
            self.events.unsubscribe(subscription)
        self._subscriptions.clear()

    # Fleet construction

    @staticmethod
    def create_ships_from_schema(schema: Mapping[Any, Any]) -> list[Ship]:
        """Create unplaced ships for every ``{length: count}`` entry of ``schema``."""
        ships: list[Ship] = []
        for length, count in parse_ships_schema(schema).items():
            ships.extend(Ship(length=length) for _ in range(count))
        return ships

    @staticmethod
    def create_ships_from_json(payloads: Iterable[Mapping[str, Any] | ShipPayload]) -> list[Ship]:
        return [Ship.from_json(payload) for payload in payloads]
