"""Resolver chokepoint.

All code that needs a canonical team, player or bet type, or an aggregation
key for one, goes through ``Resolver``. Every call is read-only: nothing here
writes to the reference store or the unresolved queue, so the functions are
safe on render and aggregation paths.

Outcomes:
- ``resolved``: exactly one canonical matched
- ``unresolved``: nothing matched (``canonical`` echoes the input)
- ``ambiguous``: several canonicals matched; ``collision.candidates`` lists them
"""

from datetime import datetime
from typing import Iterable, List, Optional

from loguru import logger

from betnorm.config.settings import settings
from betnorm.models.enums import AmbiguityPolicy, EntityCategory, EntityType, ResolverStatus
from betnorm.models.queue import RawEntityMentions, UnresolvedItem, generate_unresolved_item_id
from betnorm.models.resolution import NormalizationResult, ResolutionContext, ResolverResult
from betnorm.normalization.reference_store import ReferenceSnapshot
from betnorm.normalization.registry import NormalizationRegistry, SportLike, sport_value
from betnorm.utils.misc_utils import utc_now


def _to_result(raw: Optional[str], normalized: NormalizationResult) -> ResolverResult:
    original = raw or ""
    if not original.strip():
        return ResolverResult(status=ResolverStatus.UNRESOLVED, canonical=original, raw=original)

    trimmed = original.strip()
    if normalized.is_ambiguous:
        # canonical carries the first candidate as a provisional value only
        return ResolverResult(
            status=ResolverStatus.AMBIGUOUS,
            canonical=normalized.canonical,
            raw=trimmed,
            collision=normalized.collision,
        )
    if normalized.matched:
        return ResolverResult(status=ResolverStatus.RESOLVED, canonical=normalized.canonical, raw=trimmed)
    return ResolverResult(status=ResolverStatus.UNRESOLVED, canonical=trimmed, raw=trimmed)


class Resolver:
    """The single sanctioned entry point for canonical identities."""

    def __init__(
        self,
        registry: Optional[NormalizationRegistry] = None,
        ambiguity_policy: Optional[AmbiguityPolicy] = None,
        unresolved_bucket: Optional[str] = None,
    ):
        self._registry = registry or NormalizationRegistry()
        self.ambiguity_policy = ambiguity_policy or settings.ambiguity_policy
        self.unresolved_bucket = unresolved_bucket or settings.unresolved_bucket

    @property
    def registry(self) -> NormalizationRegistry:
        return self._registry

    def rebuild(self, snapshot: ReferenceSnapshot) -> NormalizationRegistry:
        """Swaps in a registry built from ``snapshot``. Required after every store mutation."""
        self._registry = self._registry.rebuild(snapshot)
        logger.debug(f"Resolver now using registry v{self._registry.version}")
        return self._registry

    # --- Resolution ---

    def resolve_team(self, raw: Optional[str], sport: SportLike = None) -> ResolverResult:
        return _to_result(raw, self._registry.normalize_team(raw, sport))

    def resolve_player(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> ResolverResult:
        return _to_result(raw, self._registry.normalize_player(raw, sport, team))

    def resolve_bet_type(self, raw: Optional[str], sport: SportLike = None) -> ResolverResult:
        return _to_result(raw, self._registry.normalize_bet_type(raw, sport))

    def resolve(
        self,
        entity_type: EntityType,
        raw: Optional[str],
        context: Optional[ResolutionContext] = None,
    ) -> ResolverResult:
        return _to_result(raw, self._registry.normalize(entity_type, raw, context))

    def is_team_resolved(self, raw: Optional[str], sport: SportLike = None) -> bool:
        return self.resolve_team(raw, sport).is_resolved

    def is_player_resolved(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> bool:
        return self.resolve_player(raw, sport, team).is_resolved

    def is_bet_type_resolved(self, raw: Optional[str], sport: SportLike = None) -> bool:
        return self.resolve_bet_type(raw, sport).is_resolved

    def classify(self, raw: Optional[str], sport: SportLike = None) -> EntityCategory:
        return self._registry.classify_entity(raw, sport)

    # --- Aggregation keys ---

    def _aggregation_key(
        self,
        result: ResolverResult,
        unresolved_bucket: Optional[str],
        policy: Optional[AmbiguityPolicy],
    ) -> str:
        bucket = unresolved_bucket if unresolved_bucket is not None else self.unresolved_bucket
        if result.is_resolved:
            return result.canonical
        if result.is_ambiguous and (policy or self.ambiguity_policy) == AmbiguityPolicy.FIRST_CANDIDATE:
            return result.candidates[0]
        return bucket

    def get_team_aggregation_key(
        self,
        raw: Optional[str],
        unresolved_bucket: Optional[str] = None,
        sport: SportLike = None,
        policy: Optional[AmbiguityPolicy] = None,
    ) -> str:
        return self._aggregation_key(self.resolve_team(raw, sport), unresolved_bucket, policy)

    def get_player_aggregation_key(
        self,
        raw: Optional[str],
        unresolved_bucket: Optional[str] = None,
        sport: SportLike = None,
        team: Optional[str] = None,
        policy: Optional[AmbiguityPolicy] = None,
    ) -> str:
        return self._aggregation_key(self.resolve_player(raw, sport, team), unresolved_bucket, policy)

    def get_bet_type_aggregation_key(
        self,
        raw: Optional[str],
        unresolved_bucket: Optional[str] = None,
        sport: SportLike = None,
        policy: Optional[AmbiguityPolicy] = None,
    ) -> str:
        return self._aggregation_key(self.resolve_bet_type(raw, sport), unresolved_bucket, policy)

    def get_aggregation_key(
        self,
        entity_type: EntityType,
        raw: Optional[str],
        unresolved_bucket: Optional[str] = None,
        sport: SportLike = None,
        team: Optional[str] = None,
        policy: Optional[AmbiguityPolicy] = None,
    ) -> str:
        result = self.resolve(entity_type, raw, ResolutionContext(sport=sport, team=team))
        return self._aggregation_key(result, unresolved_bucket, policy)

    # --- Import support ---

    def collect_unresolved(
        self,
        mentions: Iterable[RawEntityMentions],
        book: str,
        bet_id: str,
        sport: SportLike = None,
        leg_index: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[UnresolvedItem]:
        """Builds queue items for every mention that does not resolve.

        Mentions of unknown type are classified first. Nothing is enqueued;
        the caller decides what to do with the returned items.
        """
        encountered_at = now or utc_now()
        scoped = sport_value(sport)
        items: List[UnresolvedItem] = []
        seen_ids = set()
        for leg in mentions:
            for raw in leg.entities:
                if not raw or not raw.strip():
                    continue
                entity_type = leg.entity_type
                if entity_type == EntityType.UNKNOWN:
                    entity_type = EntityType(self.classify(raw, scoped).value)
                result = self.resolve(entity_type, raw, ResolutionContext(sport=scoped))
                if result.is_resolved:
                    continue
                item_id = generate_unresolved_item_id(raw, bet_id, leg_index)
                if item_id in seen_ids:
                    continue
                seen_ids.add(item_id)
                items.append(
                    UnresolvedItem(
                        id=item_id,
                        raw_value=raw.strip(),
                        entity_type=entity_type,
                        encountered_at=encountered_at,
                        book=book,
                        bet_id=bet_id,
                        leg_index=leg_index,
                        market=leg.market or None,
                        sport=scoped,
                        context=f"ambiguous: {', '.join(result.candidates)}" if result.is_ambiguous else None,
                    )
                )
        if items:
            logger.debug(f"Bet {bet_id} ({book}): {len(items)} unresolved mention(s)")
        return items
