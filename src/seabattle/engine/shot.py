"""Attack resolution against a battlefield."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from seabattle.telemetry import get_meter, get_tracer, record_game_metric

from .battlefield import BattlefieldCore
from .errors import PositionOutOfBoundsError
from .events import ShipSunk
from .position import Position
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.shot")
meter = get_meter("seabattle.engine.shot")

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots",
    unit="1",
    description="Shots resolved by a battlefield",
)


class ShotType(Enum):
    HIT = "hit"
    MISSED = "missed"


@dataclass(frozen=True)
class ShotResult:
    """Outcome of a single shot; ``sunken_ship`` is set only by the sinking hit."""

    position: Position
    type: ShotType
    sunken_ship: Ship | None = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"position": self.position.to_json(), "type": self.type.value}
        if self.sunken_ship is not None:
            data["sunkenShip"] = self.sunken_ship.to_json()
        return data


class ShotMixin:
    """Resolves shots for battlefields implementing :class:`BattlefieldCore`."""

    def shot(self: BattlefieldCore, position: Position) -> ShotResult:
        """Fire at ``position``.

        Shooting an already resolved cell replays its result without touching
        any state, so a ship is never damaged twice.
        """
        if not position.is_within(self.size):
            raise PositionOutOfBoundsError(f"Shot at {position} is outside the battlefield.")

        with tracer.start_as_current_span("battlefield.shot") as span:
            span.set_attribute("shot.x", position.x)
            span.set_attribute("shot.y", position.y)

            result = _resolve(self, position)

            span.set_attribute("shot.outcome", result.type.value)
            span.set_attribute("shot.sunk", result.sunken_ship is not None)
            SHOT_COUNTER.add(1, attributes={"outcome": result.type.value})
            logger.info(
                "shot_resolved",
                extra={"x": position.x, "y": position.y, "outcome": result.type.value},
            )
            return result


def _resolve(battlefield: BattlefieldCore, position: Position) -> ShotResult:
    field = battlefield.get_field(position)

    if field is None:
        battlefield.mark_as_missed(position)
        return ShotResult(position, ShotType.MISSED)
    if field.is_missed:
        return ShotResult(position, ShotType.MISSED)
    if field.is_hit:
        return ShotResult(position, ShotType.HIT)

    ship_id = field.get_first_ship_id()
    if ship_id is None:
        battlefield.mark_as_missed(position)
        return ShotResult(position, ShotType.MISSED)

    ship = battlefield.get_ship(ship_id)
    ship.hit(position)
    battlefield.mark_as_hit(position)
    if not ship.is_sunk():
        return ShotResult(position, ShotType.HIT)

    record_game_metric("seabattle_ships_sunk_total", 1, {"length": ship.length})
    logger.info("ship_sunk", extra={"ship_id": ship.id, "length": ship.length})
    battlefield.publish(ShipSunk(ship))
    return ShotResult(position, ShotType.HIT, sunken_ship=ship)
