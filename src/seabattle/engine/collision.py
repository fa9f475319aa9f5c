"""Collision detection between ships that overlap or touch."""

from __future__ import annotations

import logging

from .battlefield import BattlefieldCore
from .position import Position
from .ship import Ship

logger = logging.getLogger(__name__)


class CollisionMixin:
    """Maintains ``Ship.has_collision`` for battlefields implementing :class:`BattlefieldCore`.

    Two ships collide when they share a cell or when any of their cells are
    edge or corner neighbours.
    """

    def check_collision(self: BattlefieldCore, ship: Ship) -> bool:
        """Re-evaluate ``ship`` and every ship currently flagged as colliding.

        Re-checking flagged ships lets stale flags clear once the ship that
        caused them has moved away. Returns the collision flag of ``ship``.
        """
        rechecked = _flagged_ships(self, exclude=ship)
        _check_ship_collision(self, ship)
        for other in rechecked:
            _check_ship_collision(self, other)

        logger.debug(
            "collision_checked",
            extra={
                "ship_id": ship.id,
                "has_collision": ship.has_collision,
                "rechecked": len(rechecked),
            },
        )
        return ship.has_collision

    def recheck_collisions(self: BattlefieldCore) -> bool:
        """Re-evaluate every flagged ship, e.g. after a ship left the battlefield.

        Returns ``True`` while any ship is still colliding.
        """
        flagged = _flagged_ships(self)
        for ship in flagged:
            _check_ship_collision(self, ship)
        logger.debug("collisions_rechecked", extra={"rechecked": len(flagged)})
        return any(ship.has_collision for ship in self.get_ships())


def _flagged_ships(battlefield: BattlefieldCore, exclude: Ship | None = None) -> list[Ship]:
    return [
        ship for ship in battlefield.get_ships() if ship.has_collision and ship is not exclude
    ]


def _check_ship_collision(battlefield: BattlefieldCore, ship: Ship) -> bool:
    """Flag ``ship`` and every ship on or around its cells."""
    positions: dict[Position, None] = {}
    for position in ship.coordinates():
        positions[position] = None
        for neighbour in position.surrounding_positions():
            positions[neighbour] = None

    has_collision = False
    for position in positions:
        for other in battlefield.get_field_ships(position):
            if other is not ship:
                other.has_collision = True
                has_collision = True

    ship.has_collision = has_collision
    return has_collision
