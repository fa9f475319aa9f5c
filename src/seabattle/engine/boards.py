"""Player and opponent battlefields."""

from __future__ import annotations

import random
from typing import Any, Mapping

from .battlefield import Battlefield
from .config import BattlefieldConfig
from .events import EventBus, ShipMoved, ShipRemoved
from .placement import RandomPlacementMixin
from .shot import ShotMixin


class PlayerBattlefield(RandomPlacementMixin, Battlefield):
    """The local player's board.

    Starts with an unplaced fleet built from ``ships_schema`` and re-checks
    collisions every time a ship moves or leaves the board.
    """

    def __init__(
        self,
        size: int,
        ships_schema: Mapping[Any, Any] | None = None,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        owner: str = "player",
    ) -> None:
        super().__init__(size, ships_schema, event_bus=event_bus, rng=rng, owner=owner)
        for ship in self.create_ships_from_schema(self.ships_schema):
            self.add_ship(ship)
        self.on(ShipMoved, self._handle_ship_moved)
        self.on(ShipRemoved, self._handle_ship_removed)

    @classmethod
    def from_config(
        cls,
        config: BattlefieldConfig,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        owner: str = "player",
    ) -> PlayerBattlefield:
        battlefield = cls(
            config.size, config.ships_schema, event_bus=event_bus, rng=rng, owner=owner
        )
        battlefield.max_placement_attempts = config.max_placement_attempts
        return battlefield

    def _handle_ship_moved(self, event: ShipMoved) -> None:
        # A shared bus may carry moves from other boards.
        if self.has_ship(event.ship):
            self.check_collision(event.ship)

    def _handle_ship_removed(self, event: ShipRemoved) -> None:
        # Neighbours of the removed ship may still carry its flag.
        self.recheck_collisions()


class OpponentBattlefield(ShotMixin, Battlefield):
    """The board being attacked. Its ships are never randomized or collision-checked here."""

    def __init__(
        self,
        size: int,
        ships_schema: Mapping[Any, Any] | None = None,
        *,
        event_bus: EventBus | None = None,
        owner: str = "opponent",
    ) -> None:
        super().__init__(size, ships_schema, event_bus=event_bus, owner=owner)

    @classmethod
    def from_config(
        cls,
        config: BattlefieldConfig,
        *,
        event_bus: EventBus | None = None,
        owner: str = "opponent",
    ) -> OpponentBattlefield:
        return cls(config.size, config.ships_schema, event_bus=event_bus, owner=owner)

    def all_ships_sunk(self) -> bool:
        ships = self.get_ships()
        return bool(ships) and all(ship.is_sunk() for ship in ships)
