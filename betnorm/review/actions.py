"""Review actions that drain grouped queue items.

Each action checks all of its preconditions before touching anything, so a
failed action leaves both the reference store and the queue as they were.
After a successful store mutation the resolver is rebuilt, which is what
makes the new alias or entity visible to resolution. A failure while saving
the store or draining the queue rolls the store back.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from loguru import logger
from pydantic import ValidationError

from betnorm.models.entities import BetTypeData, CanonicalEntity, PlayerData, TeamData
from betnorm.models.enums import EntityType, Sport
from betnorm.models.queue import GroupedQueueItem
from betnorm.normalization.lookup_key import to_lookup_key
from betnorm.normalization.reference_store import (
    DuplicateEntityError,
    EntityNotFoundError,
    ReferenceDataStore,
)
from betnorm.normalization.registry import sport_value
from betnorm.resolution.resolver import Resolver
from betnorm.storage.base_store import CollectionStore
from betnorm.storage.persistence import save_reference_collection

from .queue import UnresolvedQueue


class ReviewActionError(Exception):
    """Base exception for review actions that were rejected."""

    pass


class UnsupportedEntityTypeError(ReviewActionError):
    """The group's entity type has no reference collection."""

    pass


class InvalidSportError(ReviewActionError):
    """A sport is required but missing or unknown."""

    pass


class InvalidEntityError(ReviewActionError):
    """The requested canonical entity failed validation."""

    pass


_SUPPORTED = (EntityType.TEAM, EntityType.PLAYER, EntityType.STAT)


def _require_supported(group: GroupedQueueItem) -> None:
    if group.entity_type not in _SUPPORTED:
        raise UnsupportedEntityTypeError(
            f"Cannot resolve '{group.raw_value}': entity type '{group.entity_type.value}' "
            "has no reference collection."
        )


def _require_sport(value: Optional[str], group: GroupedQueueItem) -> Sport:
    resolved = sport_value(value)
    try:
        return Sport(resolved)
    except ValueError:
        raise InvalidSportError(
            f"'{group.raw_value}' needs a known sport to be registered, got {value!r}."
        ) from None


def _merge_aliases(raw_value: str, additional: Iterable[str]) -> List[str]:
    aliases = [raw_value]
    seen = {to_lookup_key(raw_value)}
    for alias in additional:
        key = to_lookup_key(alias)
        if key and key not in seen:
            seen.add(key)
            aliases.append(alias.strip())
    return aliases


class QueueReviewService:
    """Applies map / create / ignore decisions to grouped queue items."""

    def __init__(
        self,
        store: ReferenceDataStore,
        queue: UnresolvedQueue,
        resolver: Resolver,
        persistence: Optional[CollectionStore] = None,
    ):
        self.store = store
        self.queue = queue
        self.resolver = resolver
        self.persistence = persistence

    def _apply(self, group: GroupedQueueItem, mutate: Callable[[], None]) -> int:
        """Runs ``mutate`` on the store, saves it and drains the group as one unit.

        If the save or the queue removal fails, the store is restored to its
        previous snapshot (and re-saved when it had already been written) and
        the error is re-raised. The queue saves before it changes, so it is
        untouched by a failed removal.
        """
        before = self.store.snapshot()
        saved = False
        try:
            mutate()
            if self.persistence is not None:
                save_reference_collection(self.persistence, self.store, group.entity_type)
                saved = True
            drained = self.queue.remove(group.item_ids)
        except Exception:
            self.store.restore(before)
            if saved:
                try:
                    save_reference_collection(self.persistence, self.store, group.entity_type)
                except Exception as e:
                    logger.error(f"Could not roll back stored {group.entity_type.value} collection: {e}")
            raise
        self.resolver.rebuild(self.store.snapshot())
        return drained

    def map_to_existing(self, group: GroupedQueueItem, target_canonical: str) -> int:
        """Adds the group's raw value as an alias of an existing entity.

        Players and bet types are looked up in the group's sport. Returns the
        number of queue items drained.
        """
        _require_supported(group)
        target = self.store.get_entity(
            group.entity_type, target_canonical, sport_value(group.sport)
        )
        if target is None:
            raise EntityNotFoundError(
                f"No {group.entity_type.value} '{target_canonical}' for sport "
                f"'{group.sport or 'any'}'."
            )
        if target.disabled:
            raise EntityNotFoundError(f"'{target.canonical}' is disabled and cannot take aliases.")
        scoped = sport_value(group.sport)
        if scoped in {s.value for s in Sport} and target.sport.value != scoped:
            raise EntityNotFoundError(
                f"'{target.canonical}' is a {target.sport.value} {group.entity_type.value}, "
                f"not {scoped}."
            )

        if to_lookup_key(group.raw_value) in {to_lookup_key(n) for n in target.match_names()}:
            logger.debug(f"'{group.raw_value}' already matches '{target.canonical}'.")
        drained = self._apply(
            group,
            lambda: self.store.add_alias(
                group.entity_type, target.canonical, group.raw_value, target.sport
            ),
        )
        logger.success(f"Mapped '{group.raw_value}' -> '{target.canonical}' ({drained} item(s)).")
        return drained

    def create_canonical(
        self,
        group: GroupedQueueItem,
        canonical: str,
        sport: Optional[str] = None,
        additional_aliases: Sequence[str] = (),
        abbreviations: Sequence[str] = (),
        team: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Registers a new canonical entity whose first alias is the group's raw value."""
        _require_supported(group)
        entity_sport = _require_sport(sport or group.sport, group)
        aliases = _merge_aliases(group.raw_value, additional_aliases)

        try:
            entity: CanonicalEntity
            if group.entity_type == EntityType.TEAM:
                entity = TeamData(
                    canonical=canonical,
                    sport=entity_sport,
                    aliases=aliases,
                    abbreviations=[a.strip() for a in abbreviations if a and a.strip()],
                )
            elif group.entity_type == EntityType.PLAYER:
                entity = PlayerData(canonical=canonical, sport=entity_sport, aliases=aliases, team=team)
            else:
                entity = BetTypeData(
                    canonical=canonical,
                    sport=entity_sport,
                    aliases=aliases,
                    description=description or "",
                )
        except ValidationError as e:
            raise InvalidEntityError(f"Invalid canonical '{canonical}': {e}") from e

        existing = self.store.get_entity(group.entity_type, entity.canonical, entity.sport)
        if existing is not None and not existing.disabled:
            raise DuplicateEntityError(
                f"{group.entity_type.value} '{entity.canonical}' ({entity.sport.value}) already exists."
            )

        drained = self._apply(group, lambda: self.store.add_entity(entity))
        logger.success(
            f"Created {group.entity_type.value} '{entity.canonical}' from '{group.raw_value}' "
            f"({drained} item(s))."
        )
        return drained

    def ignore(self, group: GroupedQueueItem) -> int:
        """Drops the group's items without touching reference data."""
        drained = self.queue.remove(group.item_ids)
        logger.info(f"Ignored '{group.raw_value}' ({drained} item(s)).")
        return drained

    def ignore_all(self, groups: Iterable[GroupedQueueItem]) -> int:
        ids = set()
        for group in groups:
            ids.update(group.item_ids)
        drained = self.queue.remove(ids)
        logger.info(f"Ignored {drained} queued item(s).")
        return drained
