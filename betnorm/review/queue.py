from typing import Iterable, List, Optional, Union

from loguru import logger

from betnorm.models.enums import EntityType
from betnorm.models.queue import GroupedQueueItem, UnresolvedItem
from betnorm.storage.base_store import CollectionStore
from betnorm.storage.persistence import load_unresolved_items, save_unresolved_items

from .grouping import group_queue_items


class UnresolvedQueue:
    """Ordered, id-unique collection of unresolved mentions awaiting review.

    When a ``CollectionStore`` is given the queue loads from it on init and
    saves after every mutation. A failed save leaves the in-memory queue as
    it was before the call.
    """

    def __init__(
        self,
        items: Optional[Iterable[UnresolvedItem]] = None,
        store: Optional[CollectionStore] = None,
    ):
        self._store = store
        if items is not None:
            loaded = list(items)
        elif store is not None:
            loaded = load_unresolved_items(store)
        else:
            loaded = []

        self._items: List[UnresolvedItem] = []
        seen = set()
        for item in loaded:
            if item.id not in seen:
                seen.add(item.id)
                self._items.append(item)

    def _commit(self, items: List[UnresolvedItem]) -> None:
        if self._store is not None:
            save_unresolved_items(self._store, items)
        self._items = items

    def enqueue(self, items: Union[UnresolvedItem, Iterable[UnresolvedItem]]) -> int:
        """Appends items whose id is not queued yet. Returns how many were added."""
        if isinstance(items, UnresolvedItem):
            items = [items]
        known = {item.id for item in self._items}
        added: List[UnresolvedItem] = []
        for item in items:
            if item.id in known:
                continue
            known.add(item.id)
            added.append(item)
        if added:
            self._commit([*self._items, *added])
            logger.info(f"Queued {len(added)} unresolved item(s); {len(self._items)} pending.")
        return len(added)

    def remove(self, ids: Iterable[str]) -> int:
        """Drops items by id. Unknown ids are ignored."""
        doomed = set(ids)
        kept = [item for item in self._items if item.id not in doomed]
        removed = len(self._items) - len(kept)
        if removed:
            self._commit(kept)
            logger.info(f"Removed {removed} item(s) from the unresolved queue.")
        return removed

    def clear(self) -> int:
        removed = len(self._items)
        if removed:
            self._commit([])
        return removed

    def list(self) -> List[UnresolvedItem]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def filter(
        self, entity_type: Optional[EntityType] = None, sport: Optional[str] = None
    ) -> List[UnresolvedItem]:
        """Items matching the given type and sport (sport compared case-insensitively)."""
        wanted_sport = sport.lower() if sport else None
        return [
            item
            for item in self._items
            if (entity_type is None or item.entity_type == entity_type)
            and (wanted_sport is None or (item.sport or "").lower() == wanted_sport)
        ]

    def grouped(
        self, entity_type: Optional[EntityType] = None, sport: Optional[str] = None
    ) -> List[GroupedQueueItem]:
        return group_queue_items(self.filter(entity_type, sport))

    def find_group(self, group_key: str) -> Optional[GroupedQueueItem]:
        for group in self.grouped():
            if group.group_key == group_key:
                return group
        return None

    def __len__(self) -> int:
        return len(self._items)
