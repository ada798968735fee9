from typing import Callable, Generic, List, Optional, Tuple, TypeVar, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict

from betnorm.data.reference_data import BET_TYPES, TEAMS
from betnorm.models.entities import BetTypeData, CanonicalEntity, PlayerData, TeamData
from betnorm.models.enums import EntityType, Sport
from betnorm.normalization.lookup_key import to_lookup_key

E = TypeVar("E", bound=CanonicalEntity)
EntityKey = Tuple[str, ...]


class ReferenceDataError(Exception):
    """Base exception for reference data mutations."""

    pass


class DuplicateEntityError(ReferenceDataError):
    """An enabled entity with the same key already exists."""

    pass


class EntityNotFoundError(ReferenceDataError):
    """No entity exists under the requested key."""

    pass


class ReferenceSnapshot(BaseModel):
    """Immutable copy of the store contents, used to build a registry."""

    model_config = ConfigDict(frozen=True)

    teams: Tuple[TeamData, ...] = ()
    players: Tuple[PlayerData, ...] = ()
    bet_types: Tuple[BetTypeData, ...] = ()
    version: int = 0


def _team_key(canonical: str, sport: Optional[Union[Sport, str]] = None) -> EntityKey:
    # Teams are sport-exclusive, so the canonical alone identifies them
    return (to_lookup_key(canonical),)


def _scoped_key(canonical: str, sport: Optional[Union[Sport, str]] = None) -> EntityKey:
    sport_value = sport.value if isinstance(sport, Sport) else (sport or "")
    return (to_lookup_key(canonical), sport_value)


class _EntityCollection(Generic[E]):
    """Ordered records of one entity type. Insertion order is resolution order."""

    def __init__(self, label: str, key_fn: Callable[..., EntityKey]):
        self.label = label
        self._key_fn = key_fn
        self._records: List[E] = []

    def key_of(self, entity: E) -> EntityKey:
        return self._key_fn(entity.canonical, entity.sport)

    def _index(self, key: EntityKey) -> Optional[int]:
        for index, record in enumerate(self._records):
            if self.key_of(record) == key:
                return index
        return None

    def _require(self, key: EntityKey) -> int:
        index = self._index(key)
        if index is None:
            raise EntityNotFoundError(f"No {self.label} found for key {key}")
        return index

    def get(self, key: EntityKey) -> Optional[E]:
        index = self._index(key)
        return self._records[index] if index is not None else None

    def add(self, entity: E) -> None:
        index = self._index(self.key_of(entity))
        if index is None:
            self._records.append(entity)
            return
        if not self._records[index].disabled:
            raise DuplicateEntityError(
                f"{self.label} '{entity.canonical}' ({entity.sport.value}) already exists"
            )
        # A disabled record under the same key is replaced in place
        self._records[index] = entity

    def update(self, key: EntityKey, entity: E) -> None:
        index = self._require(key)
        new_key = self.key_of(entity)
        if new_key != key:
            clash = self._index(new_key)
            if clash is not None and not self._records[clash].disabled:
                raise DuplicateEntityError(
                    f"{self.label} '{entity.canonical}' ({entity.sport.value}) already exists"
                )
            if clash is not None:
                del self._records[clash]
                index = self._require(key)
        self._records[index] = entity

    def remove(self, key: EntityKey) -> E:
        return self._records.pop(self._require(key))

    def set_disabled(self, key: EntityKey, disabled: bool) -> E:
        index = self._require(key)
        self._records[index] = self._records[index].model_copy(update={"disabled": disabled})
        return self._records[index]

    def add_alias(self, key: EntityKey, alias: str) -> bool:
        index = self._require(key)
        record = self._records[index]
        alias_key = to_lookup_key(alias)
        if not alias_key or alias_key in {to_lookup_key(name) for name in record.match_names()}:
            return False
        self._records[index] = record.model_copy(update={"aliases": [*record.aliases, alias.strip()]})
        return True

    def all(self, include_disabled: bool = False) -> List[E]:
        return [r for r in self._records if include_disabled or not r.disabled]

    def snapshot(self) -> Tuple[E, ...]:
        return tuple(record.model_copy(deep=True) for record in self._records)

    def replace(self, records: Tuple[E, ...]) -> None:
        self._records = [record.model_copy(deep=True) for record in records]

    def __len__(self) -> int:
        return len(self._records)


class ReferenceDataStore:
    """Owns every canonical team, player and bet type.

    Mutations do not reach resolution until the resolver is rebuilt from a
    fresh ``snapshot()``.
    """

    def __init__(
        self,
        teams: Optional[List[TeamData]] = None,
        players: Optional[List[PlayerData]] = None,
        bet_types: Optional[List[BetTypeData]] = None,
    ):
        self._teams: _EntityCollection[TeamData] = _EntityCollection("team", _team_key)
        self._players: _EntityCollection[PlayerData] = _EntityCollection("player", _scoped_key)
        self._bet_types: _EntityCollection[BetTypeData] = _EntityCollection("bet type", _scoped_key)
        self.version = 0
        self._load(self._teams, teams)
        self._load(self._players, players)
        self._load(self._bet_types, bet_types)

    @staticmethod
    def _load(collection: _EntityCollection[E], records: Optional[List[E]]) -> None:
        for record in records or []:
            try:
                collection.add(record)
            except DuplicateEntityError as e:
                logger.warning(f"Skipping duplicate record while loading: {e}")

    @classmethod
    def with_defaults(cls) -> "ReferenceDataStore":
        """Store seeded with the built-in teams and bet types."""
        store = cls(
            teams=[TeamData.model_validate(record) for record in TEAMS],
            bet_types=[BetTypeData.model_validate(record) for record in BET_TYPES],
        )
        logger.debug(
            f"Seeded reference store with {len(store._teams)} teams and {len(store._bet_types)} bet types."
        )
        return store

    def _touch(self, action: str, label: str, canonical: str) -> None:
        self.version += 1
        logger.info(f"Reference data: {action} {label} '{canonical}' (version {self.version})")

    def snapshot(self) -> ReferenceSnapshot:
        return ReferenceSnapshot(
            teams=self._teams.snapshot(),
            players=self._players.snapshot(),
            bet_types=self._bet_types.snapshot(),
            version=self.version,
        )

    def restore(self, snapshot: ReferenceSnapshot) -> None:
        """Puts the store back to ``snapshot``, version included."""
        self._teams.replace(snapshot.teams)
        self._players.replace(snapshot.players)
        self._bet_types.replace(snapshot.bet_types)
        self.version = snapshot.version
        logger.warning(f"Reference data restored to version {self.version}")

    # --- Teams ---

    def add_team(self, team: TeamData) -> None:
        self._teams.add(team)
        self._touch("added", "team", team.canonical)

    def update_team(self, canonical: str, team: TeamData) -> None:
        self._teams.update(_team_key(canonical), team)
        self._touch("updated", "team", team.canonical)

    def remove_team(self, canonical: str) -> TeamData:
        removed = self._teams.remove(_team_key(canonical))
        self._touch("removed", "team", removed.canonical)
        return removed

    def disable_team(self, canonical: str) -> None:
        self._teams.set_disabled(_team_key(canonical), True)
        self._touch("disabled", "team", canonical)

    def enable_team(self, canonical: str) -> None:
        self._teams.set_disabled(_team_key(canonical), False)
        self._touch("enabled", "team", canonical)

    def get_team(self, canonical: str) -> Optional[TeamData]:
        return self._teams.get(_team_key(canonical))

    def list_teams(self, include_disabled: bool = False) -> List[TeamData]:
        return self._teams.all(include_disabled)

    def add_team_alias(self, canonical: str, alias: str) -> bool:
        added = self._teams.add_alias(_team_key(canonical), alias)
        if added:
            self._touch(f"aliased '{alias}' to", "team", canonical)
        return added

    # --- Players ---

    def add_player(self, player: PlayerData) -> None:
        self._players.add(player)
        self._touch("added", "player", player.canonical)

    def update_player(self, canonical: str, sport: Union[Sport, str], player: PlayerData) -> None:
        self._players.update(_scoped_key(canonical, sport), player)
        self._touch("updated", "player", player.canonical)

    def remove_player(self, canonical: str, sport: Union[Sport, str]) -> PlayerData:
        removed = self._players.remove(_scoped_key(canonical, sport))
        self._touch("removed", "player", removed.canonical)
        return removed

    def disable_player(self, canonical: str, sport: Union[Sport, str]) -> None:
        self._players.set_disabled(_scoped_key(canonical, sport), True)
        self._touch("disabled", "player", canonical)

    def enable_player(self, canonical: str, sport: Union[Sport, str]) -> None:
        self._players.set_disabled(_scoped_key(canonical, sport), False)
        self._touch("enabled", "player", canonical)

    def get_player(self, canonical: str, sport: Union[Sport, str]) -> Optional[PlayerData]:
        return self._players.get(_scoped_key(canonical, sport))

    def list_players(self, include_disabled: bool = False) -> List[PlayerData]:
        return self._players.all(include_disabled)

    def add_player_alias(self, canonical: str, sport: Union[Sport, str], alias: str) -> bool:
        added = self._players.add_alias(_scoped_key(canonical, sport), alias)
        if added:
            self._touch(f"aliased '{alias}' to", "player", canonical)
        return added

    # --- Bet types ---

    def add_bet_type(self, bet_type: BetTypeData) -> None:
        self._bet_types.add(bet_type)
        self._touch("added", "bet type", bet_type.canonical)

    def update_bet_type(self, canonical: str, sport: Union[Sport, str], bet_type: BetTypeData) -> None:
        self._bet_types.update(_scoped_key(canonical, sport), bet_type)
        self._touch("updated", "bet type", bet_type.canonical)

    def remove_bet_type(self, canonical: str, sport: Union[Sport, str]) -> BetTypeData:
        removed = self._bet_types.remove(_scoped_key(canonical, sport))
        self._touch("removed", "bet type", removed.canonical)
        return removed

    def disable_bet_type(self, canonical: str, sport: Union[Sport, str]) -> None:
        self._bet_types.set_disabled(_scoped_key(canonical, sport), True)
        self._touch("disabled", "bet type", canonical)

    def enable_bet_type(self, canonical: str, sport: Union[Sport, str]) -> None:
        self._bet_types.set_disabled(_scoped_key(canonical, sport), False)
        self._touch("enabled", "bet type", canonical)

    def get_bet_type(self, canonical: str, sport: Union[Sport, str]) -> Optional[BetTypeData]:
        return self._bet_types.get(_scoped_key(canonical, sport))

    def list_bet_types(self, include_disabled: bool = False) -> List[BetTypeData]:
        return self._bet_types.all(include_disabled)

    def add_bet_type_alias(self, canonical: str, sport: Union[Sport, str], alias: str) -> bool:
        added = self._bet_types.add_alias(_scoped_key(canonical, sport), alias)
        if added:
            self._touch(f"aliased '{alias}' to", "bet type", canonical)
        return added

    # --- Dispatch by queue entity type ---

    def get_entity(
        self, entity_type: EntityType, canonical: str, sport: Optional[Union[Sport, str]] = None
    ) -> Optional[CanonicalEntity]:
        if entity_type == EntityType.TEAM:
            return self.get_team(canonical)
        if entity_type == EntityType.PLAYER:
            return self.get_player(canonical, sport or "")
        if entity_type == EntityType.STAT:
            return self.get_bet_type(canonical, sport or "")
        return None

    def add_alias(
        self,
        entity_type: EntityType,
        canonical: str,
        alias: str,
        sport: Optional[Union[Sport, str]] = None,
    ) -> bool:
        if entity_type == EntityType.TEAM:
            return self.add_team_alias(canonical, alias)
        if entity_type == EntityType.PLAYER:
            return self.add_player_alias(canonical, sport or "", alias)
        if entity_type == EntityType.STAT:
            return self.add_bet_type_alias(canonical, sport or "", alias)
        raise ReferenceDataError(f"Entity type '{entity_type.value}' has no reference collection")

    def add_entity(self, entity: CanonicalEntity) -> None:
        if isinstance(entity, TeamData):
            self.add_team(entity)
        elif isinstance(entity, PlayerData):
            self.add_player(entity)
        elif isinstance(entity, BetTypeData):
            self.add_bet_type(entity)
        else:
            raise ReferenceDataError(f"Unsupported entity model: {type(entity).__name__}")
