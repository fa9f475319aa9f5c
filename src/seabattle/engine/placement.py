"""Random fleet placement."""

from __future__ import annotations

import logging
import random
from typing import Protocol

from seabattle.telemetry import get_meter, get_tracer

from .battlefield import BattlefieldCore
from .collision import CollisionMixin
from .position import Position
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.placement")
meter = get_meter("seabattle.engine.placement")

PLACEMENT_ATTEMPT_COUNTER = meter.create_counter(
    "seabattle_engine_placement_attempts",
    unit="1",
    description="Number of random placement attempts",
)

MAX_PLACEMENT_ATTEMPTS = 100


class _PlacementHost(BattlefieldCore, Protocol):
    owner: str
    max_placement_attempts: int

    @property
    def has_collision(self) -> bool: ...

    def check_collision(self, ship: Ship) -> bool: ...


class RandomPlacementMixin(CollisionMixin):
    """Scatters a battlefield's ships into random positions.

    Each ship gets at most ``max_placement_attempts`` tries to land without a
    collision. After that the last attempt is kept as it is, still flagged,
    so the call always terminates even for fleets that cannot fit the grid.
    """

    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS

    def random(self: _PlacementHost, rng: random.Random | None = None) -> bool:
        """Re-place every ship at random.

        Returns ``True`` when the resulting layout is free of collisions.
        Does nothing while the battlefield is locked.
        """
        if self.is_locked:
            return not self.has_collision

        rng = rng or self.rng
        with tracer.start_as_current_span("battlefield.random") as span:
            span.set_attribute("battlefield.owner", self.owner)
            span.set_attribute("battlefield.size", self.size)
            self.reset()

            last = self.size - 1
            for ship in reversed(self.get_ships()):
                attempts = 0
                while True:
                    attempts += 1
                    is_rotated = rng.choice((True, False))
                    position = Position(rng.randint(0, last), rng.randint(0, last))
                    self.move_ship(ship, position, is_rotated)
                    if not self.check_collision(ship):
                        break
                    if attempts >= self.max_placement_attempts:
                        logger.warning(
                            "random_placement_exhausted",
                            extra={"owner": self.owner, "ship_id": ship.id, "attempts": attempts},
                        )
                        break
                PLACEMENT_ATTEMPT_COUNTER.add(attempts, attributes={"owner": self.owner})
                logger.debug(
                    "random_ship_placed",
                    extra={"owner": self.owner, "ship_id": ship.id, "attempts": attempts},
                )

            clean = not self.has_collision
            span.set_attribute("placement.clean", clean)
            return clean
