from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .enums import Sport
from betnorm.utils.misc_utils import generate_canonical_id


class CanonicalEntity(BaseModel):
    """A canonical identity plus the alternate spellings known to refer to it."""

    canonical: str = Field(..., min_length=1)
    sport: Sport
    aliases: List[str] = Field(default_factory=list)
    disabled: bool = False

    @field_validator("canonical")
    @classmethod
    def _strip_canonical(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("canonical must not be blank")
        return stripped

    @field_validator("aliases")
    @classmethod
    def _drop_blank_aliases(cls, value: List[str]) -> List[str]:
        return [alias for alias in value if alias and alias.strip()]

    def match_names(self) -> List[str]:
        """Every string this entity can be matched by (canonical first)."""
        return [self.canonical, *self.aliases]


class TeamData(CanonicalEntity):
    """Represents a team. Teams belong to exactly one sport."""

    id: Optional[str] = None
    abbreviations: List[str] = Field(default_factory=list)

    @field_validator("abbreviations")
    @classmethod
    def _drop_blank_abbreviations(cls, value: List[str]) -> List[str]:
        return [abbr for abbr in value if abbr and abbr.strip()]

    @model_validator(mode="after")
    def _ensure_id(self) -> "TeamData":
        if not self.id:
            anchor = self.abbreviations[0] if self.abbreviations else self.canonical
            self.id = generate_canonical_id(self.sport.value, anchor)
        return self

    def match_names(self) -> List[str]:
        return [self.canonical, *self.aliases, *self.abbreviations]


class PlayerData(CanonicalEntity):
    """Represents a player, scoped by sport to keep same-name players apart."""

    team: Optional[str] = None  # Canonical team name, used to narrow collisions


class BetTypeData(CanonicalEntity):
    """Represents a bet/stat type such as "Reb" or "3pt"."""

    description: str = ""


def _is_valid(model: type[BaseModel], data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    try:
        model.model_validate(data)
    except ValidationError:
        return False
    return True


def is_valid_team_data(data: Any) -> bool:
    return _is_valid(TeamData, data)


def is_valid_player_data(data: Any) -> bool:
    return _is_valid(PlayerData, data)


def is_valid_bet_type_data(data: Any) -> bool:
    return _is_valid(BetTypeData, data)
