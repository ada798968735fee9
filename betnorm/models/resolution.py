from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import ResolverStatus, Sport


class ResolutionContext(BaseModel):
    """Optional hints narrowing a lookup: the bet's sport and a team affiliation."""

    model_config = ConfigDict(frozen=True)

    sport: Optional[Union[Sport, str]] = None
    team: Optional[str] = None


class Collision(BaseModel):
    """Several canonicals matched the same input under the current context."""

    model_config = ConfigDict(frozen=True)

    input: str
    candidates: List[str] = Field(default_factory=list)


class NormalizationResult(BaseModel):
    """Raw answer from the registry, before the resolver assigns a status."""

    model_config = ConfigDict(frozen=True)

    canonical: str
    matched: bool = False
    collision: Optional[Collision] = None

    @property
    def is_ambiguous(self) -> bool:
        return self.collision is not None and len(self.collision.candidates) > 1


class ResolverResult(BaseModel):
    """Tri-state outcome of a resolver call.

    ``canonical`` is the resolved name, the raw value when unresolved, or the
    provisional first candidate when ambiguous.
    """

    model_config = ConfigDict(frozen=True)

    status: ResolverStatus
    canonical: str
    raw: str
    collision: Optional[Collision] = None

    @model_validator(mode="after")
    def _check_collision(self) -> "ResolverResult":
        if self.status == ResolverStatus.AMBIGUOUS and (
            self.collision is None or len(self.collision.candidates) < 2
        ):
            raise ValueError("ambiguous results need at least two candidates")
        return self

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolverStatus.RESOLVED

    @property
    def is_unresolved(self) -> bool:
        return self.status == ResolverStatus.UNRESOLVED

    @property
    def is_ambiguous(self) -> bool:
        return self.status == ResolverStatus.AMBIGUOUS

    @property
    def candidates(self) -> List[str]:
        return list(self.collision.candidates) if self.collision else []
