import datetime as dt
import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

COMMAND_ALIAS_RE = re.compile(r"[a-z0-9-]+")

# Known activity types; used for filtering and bot choices, not enforced.
ACTIVITY_TYPES = (
    "Solo PvP",
    "Group PvP",
    "Ganking",
    "Gathering",
    "Avalon",
    "Farming",
)

NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    """snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WeaponPiece(CamelModel):
    name: NonEmptyStr
    tier: NonEmptyStr
    quality: str | None = None
    image_url: str | None = None


class EquipmentPiece(CamelModel):
    name: str | None = None
    tier: str | None = None
    quality: str | None = None
    image_url: str | None = None


class Equipment(CamelModel):
    weapon: WeaponPiece
    off_hand: EquipmentPiece | None = None
    head: EquipmentPiece | None = None
    chest: EquipmentPiece | None = None
    shoes: EquipmentPiece | None = None
    cape: EquipmentPiece | None = None
    food: EquipmentPiece | None = None
    potion: EquipmentPiece | None = None
    mount: EquipmentPiece | None = None


class AlternativeOption(CamelModel):
    name: NonEmptyStr
    description: str | None = None


class Alternatives(CamelModel):
    weapons: list[AlternativeOption] | None = None
    armor: list[AlternativeOption] | None = None
    consumables: list[AlternativeOption] | None = None


def _check_command_alias(value: str | None) -> str | None:
    if value is not None and not COMMAND_ALIAS_RE.fullmatch(value):
        raise PydanticCustomError(
            "command_alias_format",
            "Command alias can only contain lowercase letters, numbers, and hyphens",
        )
    return value


class BuildCreate(CamelModel):
    name: NonEmptyStr
    description: str | None = None
    activity_type: NonEmptyStr
    command_alias: NonEmptyStr
    tier: NonEmptyStr = "T8"
    img_url: str | None = None
    estimated_cost: str | None = None
    equipment: Equipment
    alternatives: Alternatives | None = None
    is_meta: bool = False
    tags: list[str] | None = None

    @field_validator("command_alias")
    @classmethod
    def _command_alias_format(cls, value):
        return _check_command_alias(value)


# Fields that must hold a value once a build exists
_NOT_NULLABLE = ("name", "activity_type", "command_alias", "tier", "equipment", "is_meta")


class BuildUpdate(CamelModel):
    """Partial update. Only fields present in the payload are applied."""

    name: NonEmptyStr | None = None
    description: str | None = None
    activity_type: NonEmptyStr | None = None
    command_alias: NonEmptyStr | None = None
    tier: NonEmptyStr | None = None
    img_url: str | None = None
    estimated_cost: str | None = None
    equipment: Equipment | None = None
    alternatives: Alternatives | None = None
    is_meta: bool | None = None
    tags: list[str] | None = None

    @field_validator(*_NOT_NULLABLE, mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise PydanticCustomError("not_nullable", "Field may not be null")
        return value

    @field_validator("command_alias")
    @classmethod
    def _command_alias_format(cls, value):
        return _check_command_alias(value)

    def changes(self) -> dict:
        """Supplied fields mapped to their validated values."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class BuildOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    activity_type: str
    command_alias: str
    tier: str = "T8"
    img_url: str | None = None
    estimated_cost: str | None = None
    equipment: Equipment
    alternatives: Alternatives | None = None
    is_meta: bool = False
    tags: list[str] | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class WeaponCount(CamelModel):
    name: str
    count: int


class BuildStatsOut(CamelModel):
    total_builds: int
    meta_builds: int
    by_activity_type: dict[str, int]
    top_weapons: list[WeaponCount]
