"""Tests for the Position value type."""

from seabattle.engine.position import Position


def test_positions_compare_and_hash_by_value() -> None:
    assert Position(1, 2) == Position(1, 2)
    assert Position(1, 2) != Position(2, 1)
    assert len({Position(1, 2), Position(1, 2)}) == 1


def test_surrounding_positions_are_clockwise_from_top() -> None:
    assert Position(5, 5).surrounding_positions() == [
        Position(5, 4),
        Position(6, 4),
        Position(6, 5),
        Position(6, 6),
        Position(5, 6),
        Position(4, 6),
        Position(4, 5),
        Position(4, 4),
    ]


def test_shifted_positions_do_not_mutate_origin() -> None:
    origin = Position(0, 0)
    assert origin.shifted_left() == Position(-1, 0)
    assert origin.shifted_bottom_right() == Position(1, 1)
    assert origin == Position(0, 0)


def test_is_within() -> None:
    assert Position(0, 9).is_within(10)
    assert not Position(10, 0).is_within(10)
    assert not Position(-1, 3).is_within(10)


def test_json_pair() -> None:
    assert Position(3, 7).to_json() == [3, 7]
    assert Position.from_json([3, 7]) == Position(3, 7)
    assert str(Position(3, 7)) == "3x7"
