"""Grid coordinate value type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

PositionJSON = list[int]


@dataclass(frozen=True)
class Position:
    """Immutable ``(x, y)`` cell coordinate.

    ``x`` grows to the right and ``y`` grows downwards, so "top" means
    ``y - 1``.
    """

    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x}x{self.y}"

    def shifted_top(self) -> Position:
        return Position(self.x, self.y - 1)

    def shifted_top_right(self) -> Position:
        return Position(self.x + 1, self.y - 1)

    def shifted_right(self) -> Position:
        return Position(self.x + 1, self.y)

    def shifted_bottom_right(self) -> Position:
        return Position(self.x + 1, self.y + 1)

    def shifted_bottom(self) -> Position:
        return Position(self.x, self.y + 1)

    def shifted_bottom_left(self) -> Position:
        return Position(self.x - 1, self.y + 1)

    def shifted_left(self) -> Position:
        return Position(self.x - 1, self.y)

    def shifted_top_left(self) -> Position:
        return Position(self.x - 1, self.y - 1)

    def surrounding_positions(self) -> list[Position]:
        """Return the eight neighbours clockwise, starting from the top."""
        return [
            self.shifted_top(),
            self.shifted_top_right(),
            self.shifted_right(),
            self.shifted_bottom_right(),
            self.shifted_bottom(),
            self.shifted_bottom_left(),
            self.shifted_left(),
            self.shifted_top_left(),
        ]

    def is_within(self, size: int) -> bool:
        """Check whether the position lies on a ``size`` x ``size`` grid."""
        return 0 <= self.x < size and 0 <= self.y < size

    def to_json(self) -> PositionJSON:
        return [self.x, self.y]

    @classmethod
    def from_json(cls, data: Sequence[int]) -> Position:
        x, y = data
        return cls(int(x), int(y))
