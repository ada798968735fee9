"""Shared fixtures for normalization and review tests."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from betnorm.models.entities import PlayerData
from betnorm.models.enums import AmbiguityPolicy, EntityType, Sport
from betnorm.models.queue import UnresolvedItem, generate_unresolved_item_id
from betnorm.normalization.reference_store import ReferenceDataStore
from betnorm.normalization.registry import NormalizationRegistry
from betnorm.resolution.resolver import Resolver

BASE_TIME = datetime(2026, 3, 1, 19, 30, tzinfo=timezone.utc)


@pytest.fixture
def reference_store() -> ReferenceDataStore:
    """Seeded store plus two players sharing the "Melo" alias."""
    store = ReferenceDataStore.with_defaults()
    store.add_player(
        PlayerData(
            canonical="Carmelo Anthony",
            sport=Sport.NBA,
            aliases=["Melo", "C. Anthony"],
            team="New York Knicks",
        )
    )
    store.add_player(
        PlayerData(
            canonical="LaMelo Ball",
            sport=Sport.NBA,
            aliases=["Melo", "L. Ball"],
            team="Charlotte Hornets",
        )
    )
    store.add_player(
        PlayerData(canonical="Jalen Brunson", sport=Sport.NBA, aliases=["J. Brunson"], team="New York Knicks")
    )
    return store


@pytest.fixture
def registry(reference_store: ReferenceDataStore) -> NormalizationRegistry:
    return NormalizationRegistry(reference_store.snapshot())


@pytest.fixture
def resolver(registry: NormalizationRegistry) -> Resolver:
    return Resolver(
        registry,
        ambiguity_policy=AmbiguityPolicy.UNRESOLVED_BUCKET,
        unresolved_bucket="[Unresolved]",
    )


@pytest.fixture
def make_item() -> Callable[..., UnresolvedItem]:
    """Factory for queue items; ``minutes`` offsets the encounter time."""

    def _make(
        raw_value: str,
        bet_id: str,
        entity_type: EntityType = EntityType.TEAM,
        sport: Optional[str] = "NBA",
        book: str = "FanDuel",
        market: Optional[str] = "Moneyline",
        minutes: int = 0,
        leg_index: Optional[int] = None,
    ) -> UnresolvedItem:
        return UnresolvedItem(
            id=generate_unresolved_item_id(raw_value, bet_id, leg_index),
            raw_value=raw_value,
            entity_type=entity_type,
            encountered_at=BASE_TIME + timedelta(minutes=minutes),
            book=book,
            bet_id=bet_id,
            leg_index=leg_index,
            market=market,
            sport=sport,
        )

    return _make
