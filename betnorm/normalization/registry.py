from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from loguru import logger

from betnorm.models.entities import BetTypeData, CanonicalEntity, PlayerData, TeamData
from betnorm.models.enums import EntityCategory, EntityType, Sport
from betnorm.models.resolution import Collision, NormalizationResult, ResolutionContext
from betnorm.normalization.lookup_key import to_lookup_key
from betnorm.normalization.reference_store import ReferenceSnapshot

E = TypeVar("E", bound=CanonicalEntity)
SportLike = Optional[Union[Sport, str]]

# Checked in order; NFL precedes Soccer so "football" means American football
SPORT_KEYWORDS: Tuple[Tuple[Sport, Tuple[str, ...]], ...] = (
    (Sport.NBA, ("nba", "basketball")),
    (Sport.NFL, ("nfl", "football")),
    (Sport.MLB, ("mlb", "baseball")),
    (Sport.NHL, ("nhl", "hockey")),
    (Sport.NCAAB, ("ncaab", "college basketball", "march madness")),
    (Sport.NCAAF, ("ncaaf", "college football")),
    (Sport.UFC, ("ufc", "mma", "mixed martial arts")),
    (Sport.SOCCER, ("soccer", "premier league", "champions league", "mls")),
    (Sport.TENNIS, ("tennis", "wimbledon", "us open", "french open", "australian open")),
)


def sport_value(sport: SportLike) -> Optional[str]:
    """Canonical string for a sport context; unknown sports pass through as given."""
    if sport is None:
        return None
    if isinstance(sport, Sport):
        return sport.value
    text = str(sport).strip()
    if not text:
        return None
    for member in Sport:
        if member.value.lower() == text.lower():
            return member.value
    return text


def _build_index(entities: Sequence[E]) -> Mapping[str, Tuple[E, ...]]:
    index: Dict[str, List[E]] = {}
    for entity in entities:
        for name in entity.match_names():
            key = to_lookup_key(name)
            if not key:
                continue
            bucket = index.setdefault(key, [])
            if not any(existing is entity for existing in bucket):
                bucket.append(entity)
    return MappingProxyType({key: tuple(bucket) for key, bucket in index.items()})


def _distinct_by_canonical(entities: Iterable[E]) -> List[E]:
    seen = set()
    distinct: List[E] = []
    for entity in entities:
        if entity.canonical not in seen:
            seen.add(entity.canonical)
            distinct.append(entity)
    return distinct


class NormalizationRegistry:
    """Immutable lookup maps derived from one reference snapshot.

    A registry never changes after construction. ``rebuild`` returns a new
    registry; holders swap their reference to observe store mutations.
    Disabled entities are left out of every map.
    """

    def __init__(self, snapshot: Optional[ReferenceSnapshot] = None):
        snapshot = snapshot or ReferenceSnapshot()
        self.version = snapshot.version
        self._teams: Tuple[TeamData, ...] = tuple(t for t in snapshot.teams if not t.disabled)
        self._players: Tuple[PlayerData, ...] = tuple(p for p in snapshot.players if not p.disabled)
        self._bet_types: Tuple[BetTypeData, ...] = tuple(b for b in snapshot.bet_types if not b.disabled)
        self._team_index = _build_index(self._teams)
        self._player_index = _build_index(self._players)
        self._bet_type_index = _build_index(self._bet_types)
        logger.debug(
            f"Built normalization registry v{self.version}: {len(self._teams)} teams, "
            f"{len(self._players)} players, {len(self._bet_types)} bet types."
        )

    @classmethod
    def build(cls, snapshot: ReferenceSnapshot) -> "NormalizationRegistry":
        return cls(snapshot)

    def rebuild(self, snapshot: ReferenceSnapshot) -> "NormalizationRegistry":
        return type(self)(snapshot)

    # --- Matching ---

    @staticmethod
    def _exact(
        index: Mapping[str, Tuple[E, ...]], key: str, sport: Optional[str]
    ) -> List[E]:
        matches = index.get(key, ())
        if sport is not None:
            matches = tuple(m for m in matches if m.sport.value == sport)
        return _distinct_by_canonical(matches)

    def _compound_team(self, raw: str, sport: Optional[str]) -> Optional[TeamData]:
        """Matches "PHO Suns" style values: an abbreviation token plus a nickname token."""
        tokens = raw.split()
        if len(tokens) < 2:
            return None
        token_keys = [to_lookup_key(token) for token in tokens]
        for team in self._teams:
            if sport is not None and team.sport.value != sport:
                continue
            for abbr in team.abbreviations:
                abbr_key = to_lookup_key(abbr)
                if token_keys[0] != abbr_key and token_keys[-1] != abbr_key:
                    continue
                for part_key in token_keys:
                    if part_key == abbr_key:
                        continue
                    for alias in team.aliases:
                        alias_key = to_lookup_key(alias)
                        if part_key in alias_key or alias_key in part_key:
                            return team
        return None

    def match_teams(self, raw: Optional[str], sport: SportLike = None) -> List[TeamData]:
        """All teams matching ``raw`` (store order); compound heuristic when none match exactly."""
        key = to_lookup_key(raw)
        if not key:
            return []
        scoped = sport_value(sport)
        matches = self._exact(self._team_index, key, scoped)
        if matches:
            return matches
        compound = self._compound_team(raw.strip(), scoped)
        return [compound] if compound else []

    def match_players(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> List[PlayerData]:
        key = to_lookup_key(raw)
        if not key:
            return []
        scoped = sport_value(sport)
        matches = self._exact(self._player_index, key, scoped)
        if len(matches) > 1 and team:
            team_keys = {to_lookup_key(team)}
            team_matches = self.match_teams(team, scoped)
            if len(team_matches) == 1:
                team_keys.add(to_lookup_key(team_matches[0].canonical))
            narrowed = [p for p in matches if p.team and to_lookup_key(p.team) in team_keys]
            if narrowed:
                return narrowed
        return matches

    def match_bet_types(self, raw: Optional[str], sport: SportLike = None) -> List[BetTypeData]:
        key = to_lookup_key(raw)
        if not key:
            return []
        return self._exact(self._bet_type_index, key, sport_value(sport))

    @staticmethod
    def _result(raw: Optional[str], matches: Sequence[CanonicalEntity]) -> NormalizationResult:
        trimmed = (raw or "").strip()
        if len(matches) > 1:
            candidates = [m.canonical for m in matches]
            return NormalizationResult(
                canonical=candidates[0],
                matched=True,
                collision=Collision(input=trimmed, candidates=candidates),
            )
        if len(matches) == 1:
            return NormalizationResult(canonical=matches[0].canonical, matched=True)
        # Unmatched values come back trimmed; callers treat this as the unresolved sentinel
        return NormalizationResult(canonical=trimmed)

    def normalize_team(self, raw: Optional[str], sport: SportLike = None) -> NormalizationResult:
        return self._result(raw, self.match_teams(raw, sport))

    def normalize_player(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> NormalizationResult:
        return self._result(raw, self.match_players(raw, sport, team))

    def normalize_bet_type(self, raw: Optional[str], sport: SportLike = None) -> NormalizationResult:
        return self._result(raw, self.match_bet_types(raw, sport))

    def normalize(
        self,
        entity_type: EntityType,
        raw: Optional[str],
        context: Optional[ResolutionContext] = None,
    ) -> NormalizationResult:
        context = context or ResolutionContext()
        if entity_type == EntityType.TEAM:
            return self.normalize_team(raw, context.sport)
        if entity_type == EntityType.PLAYER:
            return self.normalize_player(raw, context.sport, context.team)
        if entity_type == EntityType.STAT:
            return self.normalize_bet_type(raw, context.sport)
        return NormalizationResult(canonical=(raw or "").strip())

    # --- Queries ---

    def is_known_team(self, raw: Optional[str], sport: SportLike = None) -> bool:
        return bool(self.match_teams(raw, sport))

    def is_known_player(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> bool:
        return bool(self.match_players(raw, sport, team))

    def is_known_bet_type(self, raw: Optional[str], sport: SportLike = None) -> bool:
        return bool(self.match_bet_types(raw, sport))

    def get_team_info(self, raw: Optional[str], sport: SportLike = None) -> Optional[TeamData]:
        matches = self.match_teams(raw, sport)
        return matches[0] if len(matches) == 1 else None

    def get_player_info(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> Optional[PlayerData]:
        matches = self.match_players(raw, sport, team)
        return matches[0] if len(matches) == 1 else None

    def get_bet_type_info(self, raw: Optional[str], sport: SportLike = None) -> Optional[BetTypeData]:
        matches = self.match_bet_types(raw, sport)
        return matches[0] if len(matches) == 1 else None

    def get_player_collision(
        self, raw: Optional[str], sport: SportLike = None, team: Optional[str] = None
    ) -> Optional[List[PlayerData]]:
        matches = self.match_players(raw, sport, team)
        return matches if len(matches) > 1 else None

    def get_sport_for_team(self, raw: Optional[str]) -> Optional[Sport]:
        info = self.get_team_info(raw)
        return info.sport if info else None

    def get_sports_for_bet_type(self, raw: Optional[str]) -> List[Sport]:
        sports: List[Sport] = []
        for bet_type in self._bet_type_index.get(to_lookup_key(raw), ()):
            if bet_type.sport not in sports:
                sports.append(bet_type.sport)
        return sports

    def infer_sport_from_context(
        self,
        team: Optional[str] = None,
        stat_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Sport]:
        """Best-effort sport guess: team first, then a single-sport stat, then keywords."""
        if team:
            sport = self.get_sport_for_team(team)
            if sport:
                return sport
        if stat_type:
            sports = self.get_sports_for_bet_type(stat_type)
            if len(sports) == 1:
                return sports[0]
        if description:
            lowered = to_lookup_key(description)
            for sport, keywords in SPORT_KEYWORDS:
                if any(keyword in lowered for keyword in keywords):
                    return sport
        return None

    def classify_entity(self, raw: Optional[str], sport: SportLike = None) -> EntityCategory:
        """Known team first; any other non-empty value is assumed to be a player."""
        if not to_lookup_key(raw):
            return EntityCategory.UNKNOWN
        if self.is_known_team(raw, sport):
            return EntityCategory.TEAM
        return EntityCategory.PLAYER

    # --- Introspection ---

    def teams(self) -> Tuple[TeamData, ...]:
        return self._teams

    def players(self) -> Tuple[PlayerData, ...]:
        return self._players

    def bet_types(self) -> Tuple[BetTypeData, ...]:
        return self._bet_types
