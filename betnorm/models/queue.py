from datetime import datetime, timezone
from typing import Any, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import EntityType
from betnorm.normalization.lookup_key import to_lookup_key


def generate_unresolved_item_id(
    raw_value: str, bet_id: str, leg_index: Optional[int] = None
) -> str:
    """Deterministic queue id so re-importing the same bet leg never duplicates."""
    parts = [to_lookup_key(raw_value), bet_id]
    if leg_index is not None:
        parts.append(str(leg_index))
    return "::".join(parts)


class UnresolvedItem(BaseModel):
    """A raw mention that failed resolution and awaits human review.

    Persisted with camelCase keys; ``raw_value`` keeps its original casing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    raw_value: str = Field(..., alias="rawValue")
    entity_type: EntityType = Field(..., alias="entityType")
    encountered_at: datetime = Field(..., alias="encounteredAt")
    book: str
    bet_id: str = Field(..., alias="betId")
    leg_index: Optional[int] = Field(None, alias="legIndex")
    market: Optional[str] = None
    sport: Optional[str] = None  # Free text on purpose; imports may carry unknown sports
    context: Optional[str] = None

    @field_validator("encountered_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps from older payloads are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def is_valid_unresolved_item(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    try:
        UnresolvedItem.model_validate(data)
    except ValidationError:
        return False
    return True


class SampleContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    book: str
    market: Optional[str] = None
    bet_id: str


class GroupedQueueItem(BaseModel):
    """Read-side view merging queue items that share (type, sport, lookup key)."""

    group_key: str
    raw_value: str  # Casing of the first item seen
    entity_type: EntityType
    sport: Optional[str] = None
    count: int = 0
    last_seen_at: datetime
    sample_contexts: List[SampleContext] = Field(default_factory=list)
    item_ids: Set[str] = Field(default_factory=set)


class RawEntityMentions(BaseModel):
    """Entity strings the import layer attached to one bet leg."""

    entities: List[str] = Field(default_factory=list)
    entity_type: EntityType = EntityType.UNKNOWN
    market: str = ""
