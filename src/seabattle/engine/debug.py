"""Read-only projections of a battlefield for console inspection."""

from __future__ import annotations

from .battlefield import Battlefield
from .position import Position

SerializedRow = dict[int, str]
SerializedBattlefield = dict[int, SerializedRow]


def serialize_battlefield(battlefield: Battlefield) -> SerializedBattlefield:
    """Map ``{row: {column: "shipId,shipId"}}``; cells without a field are ``""``."""
    result: SerializedBattlefield = {}
    for y in range(battlefield.size):
        row: SerializedRow = {}
        for x in range(battlefield.size):
            field = battlefield.get_field(Position(x, y))
            row[x] = ",".join(field.get_ship_ids()) if field is not None else ""
        result[y] = row
    return result


def format_battlefield(battlefield: Battlefield) -> str:
    """Render :func:`serialize_battlefield` as an aligned text table."""
    serialized = serialize_battlefield(battlefield)
    width = max(
        [1, *(len(cell) for row in serialized.values() for cell in row.values())]
    )
    header = "   " + " ".join(f"{x:>{width}}" for x in range(battlefield.size))
    lines = [header]
    for y, row in serialized.items():
        cells = " ".join(f"{cell or '.':>{width}}" for cell in row.values())
        lines.append(f"{y:>2} {cells}")
    return "\n".join(lines)
