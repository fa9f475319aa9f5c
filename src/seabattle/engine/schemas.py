"""Wire payload models for ships, fields and fleet schemas."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    TypeAdapter,
    field_validator,
)

ShipsSchema = dict[PositiveInt, NonNegativeInt]

_SHIPS_SCHEMA_ADAPTER: TypeAdapter[dict[int, int]] = TypeAdapter(ShipsSchema)


class ShipPayload(BaseModel):
    """``{id, length, position?, isRotated}`` as exchanged with a peer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    length: PositiveInt
    position: tuple[int, int] | None = None
    is_rotated: bool = Field(default=False, alias="isRotated")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FieldPayload(BaseModel):
    """A marked field: ``{position: [x, y], status: "hit" | "missed"}``."""

    model_config = ConfigDict(frozen=True)

    position: tuple[int, int]
    status: Literal["hit", "missed"]

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def parse_ships_schema(raw: Mapping[Any, Any]) -> dict[int, int]:
    """Validate a ``{length: count}`` mapping; string keys such as ``"1"`` are accepted."""
    return _SHIPS_SCHEMA_ADAPTER.validate_python(dict(raw))
