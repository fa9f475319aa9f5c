"""Battlefield configuration."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, PositiveInt, field_validator

from .schemas import parse_ships_schema

DEFAULT_SHIPS_SCHEMA = {1: 4, 2: 3, 3: 2, 4: 1}


class BattlefieldConfig(BaseModel):
    """Grid size, fleet composition and placement budget."""

    size: PositiveInt = 10
    ships_schema: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_SHIPS_SCHEMA))
    max_placement_attempts: PositiveInt = 100

    @field_validator("ships_schema", mode="before")
    @classmethod
    def _parse_schema(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = json.loads(value)
        return parse_ships_schema(value)

    @classmethod
    def from_env(cls, **overrides: Any) -> "BattlefieldConfig":
        """Construct config from ``SEABATTLE_*`` env vars; ``overrides`` win."""

        data: Dict[str, Any] = {}
        env_names = {
            "size": "SEABATTLE_BOARD_SIZE",
            "ships_schema": "SEABATTLE_SHIPS_SCHEMA",
            "max_placement_attempts": "SEABATTLE_MAX_PLACEMENT_ATTEMPTS",
        }
        for name, env_name in env_names.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[name] = value.strip()
        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_battlefield_config() -> BattlefieldConfig:
    """Load and cache battlefield config from the environment."""

    return BattlefieldConfig.from_env()
