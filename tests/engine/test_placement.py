"""Tests for random fleet placement."""

from __future__ import annotations

import random

from seabattle.engine.boards import PlayerBattlefield
from seabattle.engine.events import ShipMoved
from seabattle.engine.position import Position


def _layout(battlefield: PlayerBattlefield) -> list[tuple[Position | None, bool]]:
    return [(ship.position, ship.is_rotated) for ship in battlefield.get_ships()]


def test_random_places_default_fleet_without_collisions() -> None:
    battlefield = PlayerBattlefield(10, {1: 4, 2: 3, 3: 2, 4: 1}, rng=random.Random(123))
    assert battlefield.random() is True

    assert battlefield.has_collision is False
    for ship in battlefield.get_ships():
        coords = ship.coordinates()
        assert len(coords) == ship.length
        assert all(coord.is_within(battlefield.size) for coord in coords)
        assert not ship.has_collision

    cells = [coord for ship in battlefield.get_ships() for coord in ship.coordinates()]
    assert len(cells) == len(set(cells))


def test_random_is_reproducible_with_seeded_rng() -> None:
    first = PlayerBattlefield(10, {1: 2, 3: 2})
    second = PlayerBattlefield(10, {1: 2, 3: 2})
    first.random(random.Random(9))
    second.random(random.Random(9))
    assert _layout(first) == _layout(second)


def test_random_terminates_when_fleet_cannot_fit() -> None:
    battlefield = PlayerBattlefield(1, {1: 2}, rng=random.Random(0))
    battlefield.max_placement_attempts = 3
    moves: list[ShipMoved] = []
    battlefield.on(ShipMoved, moves.append)

    assert battlefield.random() is False
    assert all(ship.has_collision for ship in battlefield.get_ships())
    assert battlefield.has_collision is True
    assert len(moves) == 1 + 3


def test_random_resets_previous_damage_and_markers() -> None:
    battlefield = PlayerBattlefield(10, {2: 1}, rng=random.Random(4))
    ship = battlefield.get_ships()[0]
    battlefield.move_ship(ship, Position(0, 0))
    ship.hit(Position(0, 0))
    battlefield.mark_as_missed(Position(9, 9))

    battlefield.random()
    assert ship.hit_fields == [False, False]
    assert battlefield.get_fields_with_markers() == []
    assert ship.position is not None


def test_locked_battlefield_ignores_random() -> None:
    battlefield = PlayerBattlefield(10, {1: 2, 2: 1}, rng=random.Random(1))
    battlefield.random()
    before = _layout(battlefield)
    battlefield.is_locked = True

    battlefield.random()
    assert _layout(battlefield) == before
