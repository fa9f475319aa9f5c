"""Command-line driver: randomize a fleet and sink a hidden one."""

from __future__ import annotations

import argparse
import random
import string
from typing import Sequence

from pydantic import ValidationError

from seabattle.engine.battlefield import Battlefield
from seabattle.engine.boards import OpponentBattlefield, PlayerBattlefield
from seabattle.engine.config import BattlefieldConfig, load_battlefield_config
from seabattle.engine.debug import format_battlefield
from seabattle.engine.position import Position
from seabattle.engine.shot import ShotResult
from seabattle.telemetry import init_telemetry

ROW_LABELS = string.ascii_uppercase


def _position_from_input(text: str, size: int) -> Position:
    """Parse ``B4`` (row letter, 1-based column) or ``x y`` (0-based)."""
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        y = ROW_LABELS.find(cleaned[0])
        try:
            x = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {size}.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like B4 or '3 7'.")
        x, y = map(int, parts)
    position = Position(x, y)
    if not position.is_within(size):
        raise ValueError(f"Coordinates must be within the {size}x{size} board.")
    return position


def _label(position: Position) -> str:
    return f"{ROW_LABELS[position.y]}{position.x + 1}"


def _format_board(battlefield: Battlefield, show_ships: bool) -> str:
    header = "    " + " ".join(f"{x + 1:>2}" for x in range(battlefield.size))
    rows = [header]
    for y in range(battlefield.size):
        symbols = []
        for x in range(battlefield.size):
            field = battlefield.get_field(Position(x, y))
            if field is None:
                symbol = "."
            elif field.is_hit:
                symbol = "X"
            elif field.is_missed:
                symbol = "o"
            elif show_ships and len(field):
                symbol = "S"
            else:
                symbol = "."
            symbols.append(f"{symbol:>2}")
        rows.append(f"{ROW_LABELS[y]} |" + " ".join(symbols))
    return "\n".join(rows)


def _describe_shot(result: ShotResult) -> str:
    outcome = result.type.value
    if result.sunken_ship is not None:
        outcome = f"sank a ship of length {result.sunken_ship.length}!"
    return f"Fired at {_label(result.position)}: {outcome}"


def _build_boards(config: BattlefieldConfig, seed: int | None) -> tuple[PlayerBattlefield, OpponentBattlefield]:
    rng = random.Random(seed)
    player = PlayerBattlefield.from_config(config, rng=rng)
    player.random()

    # The opponent fleet only ever reaches us as ship JSON, as it would from a peer.
    hidden = PlayerBattlefield.from_config(config, rng=rng, owner="hidden")
    hidden.random()
    opponent = OpponentBattlefield.from_config(config)
    for ship in Battlefield.create_ships_from_json(ship.to_json() for ship in hidden.get_ships()):
        opponent.add_ship(ship)
    hidden.destroy()

    player.is_locked = True
    return player, opponent


def _prompt_for_position(size: int) -> Position:
    while True:
        raw = input("Enter target coordinate (e.g., B4) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            return _position_from_input(raw, size)
        except ValueError as exc:
            print(f"Invalid input: {exc}")


def play_game(config: BattlefieldConfig, seed: int | None = None, show_only: bool = False) -> None:
    player, opponent = _build_boards(config, seed)

    print("Your fleet:")
    print(_format_board(player, show_ships=True))
    if player.has_collision:
        print("\nWarning: the fleet did not fit without touching ships.")
    if show_only:
        print("\nShip ids per cell:")
        print(format_battlefield(player))
        return

    shots = 0
    while not opponent.all_ships_sunk():
        print("\nEnemy waters:")
        print(_format_board(opponent, show_ships=False))
        result = opponent.shot(_prompt_for_position(opponent.size))
        shots += 1
        print(_describe_shot(result))

    print(f"\nEvery enemy ship sunk in {shots} shots.")


def _config_problem(config: BattlefieldConfig) -> str | None:
    """Describe why ``config`` cannot be played in the console, if it cannot."""
    if config.size > len(ROW_LABELS):
        return f"Board size is limited to {len(ROW_LABELS)} rows."
    lengths = [length for length, count in config.ships_schema.items() if count]
    if not lengths:
        return "The fleet needs at least one ship."
    if max(lengths) > config.size:
        return f"A ship of length {max(lengths)} does not fit a {config.size}x{config.size} board."
    return None


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play a game of sea battle in the console.")
    parser.add_argument("--size", type=int, default=None, help="Board size (overrides env).")
    parser.add_argument(
        "--schema",
        type=str,
        default=None,
        help='Fleet as JSON {length: count}, e.g. \'{"1": 4, "2": 3}\'.',
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--show", action="store_true", help="Print a randomized fleet and exit."
    )
    args = parser.parse_args(argv)

    init_telemetry()
    overrides: dict[str, object] = {}
    if args.size is not None:
        overrides["size"] = args.size
    if args.schema is not None:
        overrides["ships_schema"] = args.schema
    try:
        config = load_battlefield_config()
        if overrides:
            config = BattlefieldConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as exc:
        parser.error(f"Invalid board configuration: {exc}")

    problem = _config_problem(config)
    if problem:
        parser.error(problem)
    play_game(config, seed=args.seed, show_only=args.show)


if __name__ == "__main__":
    main()
