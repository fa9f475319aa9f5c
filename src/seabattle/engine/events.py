"""Battlefield notifications and the in-process bus that delivers them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from .position import Position

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ship import Ship

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True)
class ShipMoved:
    ship: Ship


@dataclass(frozen=True)
class ShipRemoved:
    ship: Ship


@dataclass(frozen=True)
class FieldHit:
    position: Position


@dataclass(frozen=True)
class FieldMissed:
    position: Position


@dataclass(frozen=True)
class ShipSunk:
    ship: Ship


@dataclass(frozen=True)
class BattlefieldReset:
    pass


@dataclass(frozen=True)
class Subscription:
    """Opaque subscription token."""

    id: int


class EventBus:
    """Synchronous pub/sub keyed by event type.

    Handlers run in subscription order before ``publish`` returns. Exceptions
    raised by a handler propagate to the publisher.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._subscriptions: dict[int, tuple[type[object], EventHandler]] = {}

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        sub_id = self._next_id
        self._next_id += 1
        self._subscriptions[sub_id] = (event_type, handler)
        return Subscription(sub_id)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions.pop(subscription.id, None)

    def publish(self, event: object) -> int:
        """Deliver ``event`` and return the number of invoked handlers."""
        invoked = 0
        for subscribed_type, handler in tuple(self._subscriptions.values()):
            if isinstance(event, subscribed_type):
                handler(event)
                invoked += 1
        return invoked
