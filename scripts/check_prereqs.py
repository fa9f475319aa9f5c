#!/usr/bin/env python3
"""
Prerequisite checker for seabattle.

Run from repo root (after activating your venv):

    python3 scripts/check_prereqs.py
"""

import sys
import traceback
from pathlib import Path


def add_src_to_syspath() -> None:
    """Ensure `src/` is on sys.path so `import seabattle` works from a checkout."""
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def header(title: str) -> None:
    print("\n" + "=" * 72)
    print(title)
    print("=" * 72)


def check_python_version() -> bool:
    header("1) Python version")
    v = sys.version_info
    print(f"Detected Python: {v.major}.{v.minor}.{v.micro}")
    ok = v >= (3, 10)
    print("OK: Python 3.10 or newer is available." if ok else "FAIL: Python 3.10+ required.")
    return ok


def check_core_imports() -> bool:
    header("2) Library imports (pydantic, opentelemetry)")
    libs = ["pydantic", "opentelemetry.sdk", "opentelemetry.exporter.otlp.proto.grpc"]
    all_ok = True
    for name in libs:
        try:
            __import__(name)
            print(f"OK: imported {name}")
        except ImportError as exc:
            all_ok = False
            print(f"FAIL: could not import {name}: {exc}")
    return all_ok


def check_placement_smoke_test() -> bool:
    header("3) Random placement smoke test (default fleet on 10x10)")
    add_src_to_syspath()
    try:
        from seabattle.engine.boards import PlayerBattlefield
        from seabattle.engine.config import BattlefieldConfig

        battlefield = PlayerBattlefield.from_config(BattlefieldConfig())
        clean = battlefield.random()
        placed = sum(1 for ship in battlefield.get_ships() if ship.position is not None)
        print(f"OK: placed {placed} ships, collision-free={clean}")
        return clean
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: placement smoke test failed: {exc}")
        traceback.print_exc(limit=1)
        return False


def check_shot_smoke_test() -> bool:
    header("4) Shot smoke test (sink a single ship)")
    add_src_to_syspath()
    try:
        from seabattle.engine.boards import OpponentBattlefield
        from seabattle.engine.position import Position
        from seabattle.engine.ship import Ship

        battlefield = OpponentBattlefield(5)
        ship = Ship(length=2, position=Position(1, 1))
        battlefield.add_ship(ship)
        first = battlefield.shot(Position(1, 1))
        second = battlefield.shot(Position(2, 1))
        ok = first.sunken_ship is None and second.sunken_ship is ship
        print(f"{'OK' if ok else 'FAIL'}: {first.to_json()} then {second.type.value}")
        return ok
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: shot smoke test failed: {exc}")
        traceback.print_exc(limit=1)
        return False


def main() -> None:
    checks = [
        ("Python version", check_python_version),
        ("Core imports", check_core_imports),
        ("Placement smoke test", check_placement_smoke_test),
        ("Shot smoke test", check_shot_smoke_test),
    ]

    results = [(name, fn()) for name, fn in checks]

    header("Summary")
    for name, ok in results:
        print(f"{'OK  ' if ok else 'FAIL'} - {name}")

    print("\n" + "=" * 72)
    if all(ok for _, ok in results):
        print("ALL CHECKS PASSED. Try a game with:")
        print("    seabattle --seed 7")
    else:
        print("Some checks FAILED. Review the messages above.")
    print("=" * 72)


if __name__ == "__main__":
    main()
