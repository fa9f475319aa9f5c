"""Tests for Battlefield field/ship bookkeeping."""

from __future__ import annotations

import pytest

from seabattle.engine.battlefield import Battlefield
from seabattle.engine.errors import (
    FieldAlreadyMarkedError,
    FieldExistsError,
    FieldNotFoundError,
    ShipAlreadyAddedError,
    ShipNotFoundError,
    ShipTooLongError,
)
from seabattle.engine.events import BattlefieldReset, FieldHit, FieldMissed, ShipMoved, ShipRemoved
from seabattle.engine.position import Position
from seabattle.engine.ship import Ship


def _occupied(battlefield: Battlefield) -> dict[Position, tuple[str, ...]]:
    return {field.position: field.get_ship_ids() for field in battlefield.get_fields() if len(field)}


def test_field_crud() -> None:
    battlefield = Battlefield(10)
    position = Position(1, 1)
    field = battlefield.create_field(position)
    assert battlefield.has_field(position)
    assert battlefield.get_field(position) is field

    with pytest.raises(FieldExistsError):
        battlefield.create_field(position)

    battlefield.remove_field(position)
    assert battlefield.get_field(position) is None
    with pytest.raises(FieldNotFoundError):
        battlefield.remove_field(position)


def test_ship_registry() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2, id="a")
    battlefield.add_ship(ship)
    assert battlefield.get_ships() == [ship]
    assert battlefield.get_ship("a") is ship

    with pytest.raises(ShipAlreadyAddedError):
        battlefield.add_ship(ship)

    battlefield.remove_ship(ship)
    assert battlefield.get_ships() == []
    with pytest.raises(ShipNotFoundError):
        battlefield.remove_ship(ship)
    with pytest.raises(ShipNotFoundError):
        battlefield.get_ship("a")


def test_ship_longer_than_board_is_rejected() -> None:
    battlefield = Battlefield(3)
    with pytest.raises(ShipTooLongError):
        battlefield.add_ship(Ship(length=4))
    assert battlefield.get_ships() == []


def test_adding_placed_ship_occupies_its_fields() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=3, position=Position(2, 2), is_rotated=True, id="a")
    battlefield.add_ship(ship)
    assert _occupied(battlefield) == {
        Position(2, 2): ("a",),
        Position(2, 3): ("a",),
        Position(2, 4): ("a",),
    }


def test_move_ship_releases_old_fields() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2, id="a")
    battlefield.add_ship(ship)

    battlefield.move_ship(ship, Position(1, 1))
    assert ship.coordinates() == [Position(1, 1), Position(2, 1)]

    battlefield.move_ship(ship, Position(5, 5), is_rotated=True)
    assert ship.is_rotated is True
    assert _occupied(battlefield) == {Position(5, 5): ("a",), Position(5, 6): ("a",)}
    assert not battlefield.has_field(Position(1, 1))
    assert not battlefield.has_field(Position(2, 1))


def test_move_ship_keeps_marked_fields() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=1, id="a")
    battlefield.add_ship(ship)
    battlefield.move_ship(ship, Position(0, 0))
    battlefield.mark_as_missed(Position(0, 0))

    battlefield.move_ship(ship, Position(4, 4))
    field = battlefield.get_field(Position(0, 0))
    assert field is not None
    assert field.is_missed
    assert len(field) == 0


def test_overlapping_ships_share_a_field() -> None:
    battlefield = Battlefield(10)
    first = Ship(length=1, id="a")
    second = Ship(length=1, id="b")
    battlefield.add_ship(first)
    battlefield.add_ship(second)
    battlefield.move_ship(first, Position(3, 3))
    battlefield.move_ship(second, Position(3, 3))
    assert battlefield.get_field_ships(Position(3, 3)) == [first, second]

    battlefield.move_ship(first, Position(0, 0))
    assert battlefield.get_field_ships(Position(3, 3)) == [second]


@pytest.mark.parametrize(
    ("target", "is_rotated", "expected"),
    [
        (Position(4, 1), False, Position(3, 1)),
        (Position(1, 4), True, Position(1, 3)),
        (Position(-2, 7), False, Position(0, 4)),
        (Position(9, -1), True, Position(4, 0)),
    ],
)
def test_move_ship_clamps_into_bounds(target: Position, is_rotated: bool, expected: Position) -> None:
    battlefield = Battlefield(5)
    ship = Ship(length=2)
    battlefield.add_ship(ship)
    battlefield.move_ship(ship, target, is_rotated)
    assert ship.position == expected
    assert all(coord.is_within(battlefield.size) for coord in ship.coordinates())


def test_move_unregistered_ship_fails() -> None:
    battlefield = Battlefield(10)
    with pytest.raises(ShipNotFoundError):
        battlefield.move_ship(Ship(length=1), Position(0, 0))


def test_locked_battlefield_ignores_moves() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2, position=Position(1, 1))
    battlefield.add_ship(ship)
    moves: list[ShipMoved] = []
    battlefield.on(ShipMoved, moves.append)
    battlefield.is_locked = True

    battlefield.move_ship(ship, Position(6, 6), is_rotated=True)
    battlefield.rotate_ship(ship)

    assert ship.position == Position(1, 1)
    assert ship.is_rotated is False
    assert moves == []
    assert battlefield.get_field_ships(Position(1, 1)) == [ship]


def test_rotate_ship_moves_around_head_and_clamps() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=3, position=Position(2, 8))
    battlefield.add_ship(ship)

    battlefield.rotate_ship(ship)
    assert ship.is_rotated is True
    assert ship.position == Position(2, 7)
    assert ship.coordinates() == [Position(2, 7), Position(2, 8), Position(2, 9)]
    assert not battlefield.has_field(Position(3, 8))


def test_rotate_unplaced_ship_only_flips_orientation() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2)
    battlefield.add_ship(ship)
    battlefield.rotate_ship(ship)
    assert ship.is_rotated is True
    assert ship.position is None
    assert battlefield.get_fields() == []


def test_mark_as_hit_twice_fails() -> None:
    battlefield = Battlefield(10)
    hits: list[FieldHit] = []
    battlefield.on(FieldHit, hits.append)

    battlefield.mark_as_hit(Position(2, 2))
    with pytest.raises(FieldAlreadyMarkedError):
        battlefield.mark_as_hit(Position(2, 2))
    assert hits == [FieldHit(Position(2, 2))]


def test_mark_as_missed_creates_field_lazily() -> None:
    battlefield = Battlefield(10)
    missed: list[FieldMissed] = []
    battlefield.on(FieldMissed, missed.append)

    field = battlefield.mark_as_missed(Position(7, 1))
    assert field.is_missed
    assert battlefield.get_fields_with_markers() == [field]
    assert missed == [FieldMissed(Position(7, 1))]


def test_remove_ship_detaches_it_from_fields() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2, position=Position(0, 0))
    battlefield.add_ship(ship)
    ship.has_collision = True
    removed: list[ShipRemoved] = []
    battlefield.on(ShipRemoved, removed.append)

    battlefield.remove_ship(ship)
    assert battlefield.get_fields() == []
    assert ship.has_collision is False
    assert removed == [ShipRemoved(ship)]


def test_reset_clears_fields_and_ships() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2, position=Position(0, 0), is_rotated=True)
    battlefield.add_ship(ship)
    battlefield.mark_as_hit(Position(0, 0))
    resets: list[BattlefieldReset] = []
    battlefield.on(BattlefieldReset, resets.append)

    battlefield.reset()
    assert battlefield.get_fields() == []
    assert ship.position is None
    assert ship.is_rotated is False
    assert battlefield.get_ships() == [ship]
    assert len(resets) == 1


def test_ship_moved_listeners_see_final_state() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=2)
    battlefield.add_ship(ship)
    seen: list[list[Ship]] = []
    battlefield.on(ShipMoved, lambda event: seen.append(battlefield.get_field_ships(event.ship.position)))

    battlefield.move_ship(ship, Position(4, 4))
    assert seen == [[ship]]


def test_destroy_drops_subscriptions() -> None:
    battlefield = Battlefield(10)
    ship = Ship(length=1)
    battlefield.add_ship(ship)
    moves: list[ShipMoved] = []
    battlefield.on(ShipMoved, moves.append)

    battlefield.destroy()
    battlefield.move_ship(ship, Position(1, 1))
    assert moves == []


def test_has_collision_aggregates_ship_flags() -> None:
    battlefield = Battlefield(10)
    first = Ship(length=1)
    second = Ship(length=1)
    battlefield.add_ship(first)
    battlefield.add_ship(second)
    assert battlefield.has_collision is False
    second.has_collision = True
    assert battlefield.has_collision is True


def test_settings_and_schema_fleet() -> None:
    battlefield = Battlefield(10, {"1": 2, "3": 1})
    assert battlefield.settings == {"size": 10, "shipsSchema": {1: 2, 3: 1}}

    ships = Battlefield.create_ships_from_schema(battlefield.ships_schema)
    assert [ship.length for ship in ships] == [1, 1, 3]
    assert all(ship.position is None for ship in ships)


def test_create_ships_from_json() -> None:
    ships = Battlefield.create_ships_from_json(
        [
            {"id": "a", "length": 2, "position": [1, 1], "isRotated": False},
            {"id": "b", "length": 1, "isRotated": True},
        ]
    )
    assert [ship.id for ship in ships] == ["a", "b"]
    assert ships[0].coordinates() == [Position(1, 1), Position(2, 1)]
    assert ships[1].position is None


def test_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Battlefield(0)
