"""Loading and saving the normalization collections through a CollectionStore.

Stored records are validated one by one; an invalid record is logged and
skipped so a single bad entry never blocks the rest of the collection.
"""

from typing import Any, Iterable, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from betnorm.config.settings import settings
from betnorm.data.reference_data import BET_TYPES, TEAMS
from betnorm.models.entities import BetTypeData, PlayerData, TeamData
from betnorm.models.enums import EntityType
from betnorm.models.queue import UnresolvedItem
from betnorm.normalization.reference_store import ReferenceDataStore
from betnorm.utils.misc_utils import utc_now

from .base_store import CollectionStore

TEAMS_KEY = "bettracker-normalization-teams"
PLAYERS_KEY = "bettracker-normalization-players"
BET_TYPES_KEY = "bettracker-normalization-bettypes"
UNRESOLVED_QUEUE_KEY = "bettracker-unresolved-queue"
QUEUE_FORMAT_VERSION = 1

M = TypeVar("M", bound=BaseModel)


def _validate_records(records: Iterable[Any], model: Type[M], key: str) -> List[M]:
    valid: List[M] = []
    for position, record in enumerate(records):
        try:
            valid.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid {model.__name__} record #{position} in '{key}': "
                f"{e.error_count()} validation error(s)"
            )
    return valid


def _load_collection(store: CollectionStore, key: str, model: Type[M]) -> Optional[List[M]]:
    """Returns None when nothing was ever stored under ``key``."""
    raw = store.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning(f"Stored collection '{key}' is not a list. Ignoring it.")
        return []
    return _validate_records(raw, model, key)


def load_reference_store(
    store: CollectionStore, seed: Optional[bool] = None
) -> ReferenceDataStore:
    """Builds a ReferenceDataStore from persisted collections.

    Teams and bet types missing from storage fall back to the built-in seed
    data when seeding is enabled; players start empty.
    """
    seed = settings.seed_reference_data if seed is None else seed

    teams = _load_collection(store, TEAMS_KEY, TeamData)
    if teams is None:
        teams = _validate_records(TEAMS, TeamData, "seed:teams") if seed else []
    players = _load_collection(store, PLAYERS_KEY, PlayerData) or []
    bet_types = _load_collection(store, BET_TYPES_KEY, BetTypeData)
    if bet_types is None:
        bet_types = _validate_records(BET_TYPES, BetTypeData, "seed:bettypes") if seed else []

    reference = ReferenceDataStore(teams=teams, players=players, bet_types=bet_types)
    logger.info(
        f"Loaded reference data: {len(reference.list_teams(True))} teams, "
        f"{len(reference.list_players(True))} players, "
        f"{len(reference.list_bet_types(True))} bet types."
    )
    return reference


def save_reference_collection(
    store: CollectionStore, reference: ReferenceDataStore, entity_type: EntityType
) -> None:
    """Writes the one collection backing ``entity_type``, disabled records included."""
    if entity_type == EntityType.TEAM:
        store.set(TEAMS_KEY, [t.model_dump(mode="json") for t in reference.list_teams(True)])
    elif entity_type == EntityType.PLAYER:
        store.set(PLAYERS_KEY, [p.model_dump(mode="json") for p in reference.list_players(True)])
    elif entity_type == EntityType.STAT:
        store.set(BET_TYPES_KEY, [b.model_dump(mode="json") for b in reference.list_bet_types(True)])
    else:
        raise ValueError(f"Entity type '{entity_type.value}' has no stored collection")


def save_reference_store(store: CollectionStore, reference: ReferenceDataStore) -> None:
    """Writes all three collections."""
    for entity_type in (EntityType.TEAM, EntityType.PLAYER, EntityType.STAT):
        save_reference_collection(store, reference, entity_type)
    logger.debug(f"Saved reference data (version {reference.version}).")


def load_unresolved_items(store: CollectionStore) -> List[UnresolvedItem]:
    """Reads the queue envelope. A bare list of items is accepted too."""
    raw = store.get(UNRESOLVED_QUEUE_KEY)
    if raw is None:
        return []
    if isinstance(raw, dict):
        if raw.get("version") != QUEUE_FORMAT_VERSION:
            logger.warning(
                f"Unexpected unresolved queue version {raw.get('version')!r}. Loading items anyway."
            )
        raw = raw.get("items", [])
    if not isinstance(raw, list):
        logger.warning("Stored unresolved queue has no item list. Starting empty.")
        return []

    items: List[UnresolvedItem] = []
    seen_ids = set()
    for item in _validate_records(raw, UnresolvedItem, UNRESOLVED_QUEUE_KEY):
        if item.id in seen_ids:
            logger.warning(f"Skipping duplicate unresolved item '{item.id}'.")
            continue
        seen_ids.add(item.id)
        items.append(item)
    return items


def save_unresolved_items(store: CollectionStore, items: Iterable[UnresolvedItem]) -> None:
    payload = {
        "version": QUEUE_FORMAT_VERSION,
        "updatedAt": utc_now().isoformat(),
        "items": [item.to_record() for item in items],
    }
    store.set(UNRESOLVED_QUEUE_KEY, payload)
