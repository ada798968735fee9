"""Tests for map / create / ignore review actions."""

import pytest

from betnorm.models.enums import EntityType, Sport
from betnorm.normalization.reference_store import DuplicateEntityError, EntityNotFoundError
from betnorm.review.actions import (
    InvalidSportError,
    QueueReviewService,
    UnsupportedEntityTypeError,
)
from betnorm.review.queue import UnresolvedQueue
from betnorm.storage.base_store import MemoryStore, StorageError
from betnorm.storage.persistence import TEAMS_KEY, UNRESOLVED_QUEUE_KEY, load_reference_store


@pytest.fixture
def queue(make_item) -> UnresolvedQueue:
    return UnresolvedQueue(
        [
            make_item("PHO Sunz", "bet-1", minutes=0),
            make_item("pho sunz", "bet-2", minutes=1),
            make_item("PHO SUNZ", "bet-3", minutes=2),
            make_item("Mystery Man", "bet-4", entity_type=EntityType.PLAYER, minutes=3),
            make_item("Spooky Stat", "bet-5", entity_type=EntityType.STAT, minutes=4),
            make_item("???", "bet-6", entity_type=EntityType.UNKNOWN, minutes=5),
        ]
    )


@pytest.fixture
def service(reference_store, queue, resolver) -> QueueReviewService:
    return QueueReviewService(reference_store, queue, resolver)


class TestMapToExisting:
    """Tests for mapping a group onto an existing entity."""

    def test_map_drains_group_and_adds_alias(self, service, reference_store, resolver):
        group = service.queue.find_group("team::NBA::pho sunz")
        assert resolver.resolve_team("pho sunz").is_unresolved

        drained = service.map_to_existing(group, "Phoenix Suns")

        assert drained == 3
        assert service.queue.find_group("team::NBA::pho sunz") is None
        assert service.queue.count() == 3
        assert "PHO Sunz" in reference_store.get_team("Phoenix Suns").aliases
        assert resolver.resolve_team("Pho  Sunz").canonical == "Phoenix Suns"

    def test_map_player_uses_group_sport(self, service, reference_store, resolver):
        group = service.queue.find_group("player::NBA::mystery man")
        service.map_to_existing(group, "Jalen Brunson")

        assert "Mystery Man" in reference_store.get_player("Jalen Brunson", Sport.NBA).aliases
        assert resolver.resolve_player("mystery man", Sport.NBA).canonical == "Jalen Brunson"

    def test_map_to_missing_target_changes_nothing(self, service, reference_store):
        group = service.queue.find_group("team::NBA::pho sunz")
        version = reference_store.version

        with pytest.raises(EntityNotFoundError):
            service.map_to_existing(group, "Phoenix Sunz FC")

        assert reference_store.version == version
        assert service.queue.count() == 6

    def test_map_to_disabled_target_is_rejected(self, service, reference_store):
        reference_store.disable_team("Phoenix Suns")
        group = service.queue.find_group("team::NBA::pho sunz")
        with pytest.raises(EntityNotFoundError):
            service.map_to_existing(group, "Phoenix Suns")
        assert service.queue.count() == 6

    def test_map_unknown_type_is_rejected(self, service):
        group = service.queue.find_group("unknown::NBA::???")
        with pytest.raises(UnsupportedEntityTypeError):
            service.map_to_existing(group, "Phoenix Suns")
        assert service.queue.count() == 6

    def test_map_existing_alias_still_drains(self, service, make_item, reference_store):
        service.queue.enqueue(make_item("Suns", "bet-7"))
        group = service.queue.find_group("team::NBA::suns")
        aliases = list(reference_store.get_team("Phoenix Suns").aliases)

        assert service.map_to_existing(group, "Phoenix Suns") == 1
        assert reference_store.get_team("Phoenix Suns").aliases == aliases

    def test_map_team_across_sports_is_rejected(self, service, make_item, reference_store, resolver):
        """Test that an NFL group cannot become an alias of an NBA team."""
        service.queue.enqueue(make_item("Gridiron Suns", "bet-x", sport="NFL"))
        group = service.queue.find_group("team::NFL::gridiron suns")
        version = reference_store.version

        with pytest.raises(EntityNotFoundError):
            service.map_to_existing(group, "Phoenix Suns")

        assert reference_store.version == version
        assert "Gridiron Suns" not in reference_store.get_team("Phoenix Suns").aliases
        assert service.queue.count() == 7
        assert resolver.resolve_team("Gridiron Suns").is_unresolved

    def test_map_team_within_group_sport(self, service, make_item, reference_store):
        service.queue.enqueue(make_item("Gridiron Hawks", "bet-y", sport="nfl"))
        group = service.queue.find_group("team::NFL::gridiron hawks")

        assert service.map_to_existing(group, "Seattle Seahawks") == 1
        assert "Gridiron Hawks" in reference_store.get_team("Seattle Seahawks").aliases

    def test_map_team_without_sport_is_allowed(self, service, make_item, reference_store):
        service.queue.enqueue(make_item("Sunz Nation", "bet-z", sport=None))
        group = service.queue.find_group("team::Unknown::sunz nation")

        assert service.map_to_existing(group, "Phoenix Suns") == 1
        assert "Sunz Nation" in reference_store.get_team("Phoenix Suns").aliases


class TestCreateCanonical:
    """Tests for creating a new entity from a group."""

    def test_create_player(self, service, reference_store, resolver):
        group = service.queue.find_group("player::NBA::mystery man")

        drained = service.create_canonical(
            group, "Mystery Man Jr.", additional_aliases=["M. Man", "mystery  man", ""], team="Phoenix Suns"
        )

        assert drained == 1
        player = reference_store.get_player("Mystery Man Jr.", Sport.NBA)
        assert player.aliases == ["Mystery Man", "M. Man"]
        assert player.team == "Phoenix Suns"
        assert resolver.resolve_player("M. Man", "NBA").canonical == "Mystery Man Jr."

    def test_create_team_with_abbreviations(self, service, reference_store, resolver):
        group = service.queue.find_group("team::NBA::pho sunz")
        service.create_canonical(group, "Phoenix Sunz", abbreviations=["PSZ"])

        team = reference_store.get_team("Phoenix Sunz")
        assert team.sport == Sport.NBA
        assert team.abbreviations == ["PSZ"]
        assert resolver.resolve_team("PSZ").canonical == "Phoenix Sunz"

    def test_create_bet_type_with_description(self, service, reference_store):
        group = service.queue.find_group("stat::NBA::spooky stat")
        service.create_canonical(group, "Spooky", description="Spooky stat line")
        assert reference_store.get_bet_type("Spooky", Sport.NBA).description == "Spooky stat line"

    def test_create_duplicate_is_rejected(self, service, reference_store):
        group = service.queue.find_group("team::NBA::pho sunz")
        version = reference_store.version
        with pytest.raises(DuplicateEntityError):
            service.create_canonical(group, "phoenix suns")
        assert reference_store.version == version
        assert service.queue.count() == 6

    def test_create_without_known_sport_is_rejected(self, service, make_item):
        service.queue.enqueue(make_item("Cricket Team", "bet-8", sport="Cricket"))
        group = service.queue.find_group("team::Cricket::cricket team")
        with pytest.raises(InvalidSportError):
            service.create_canonical(group, "Cricket Team")
        assert service.queue.count() == 7

    def test_sport_override(self, service, make_item, reference_store):
        service.queue.enqueue(make_item("Gridiron Guy", "bet-9", entity_type=EntityType.PLAYER, sport=None))
        group = service.queue.find_group("player::Unknown::gridiron guy")
        service.create_canonical(group, "Gridiron Guy", sport="nfl")
        assert reference_store.get_player("Gridiron Guy", Sport.NFL) is not None


class TestIgnore:
    """Tests for ignoring groups."""

    def test_ignore_only_touches_queue(self, service, reference_store):
        version = reference_store.version
        group = service.queue.find_group("team::NBA::pho sunz")
        assert service.ignore(group) == 3
        assert service.queue.count() == 3
        assert reference_store.version == version

    def test_ignore_all(self, service):
        assert service.ignore_all(service.queue.grouped()) == 6
        assert service.queue.count() == 0


class TestPersistedReview:
    """Tests that actions write through to storage when configured."""

    def test_map_persists_reference_data_and_queue(self, reference_store, resolver, make_item):
        store = MemoryStore()
        queue = UnresolvedQueue(store=store)
        queue.enqueue([make_item("PHO Sunz", "bet-1"), make_item("Other Thing", "bet-2")])
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)

        service.map_to_existing(queue.find_group("team::NBA::pho sunz"), "Phoenix Suns")

        assert any(t["canonical"] == "Phoenix Suns" and "PHO Sunz" in t["aliases"] for t in store.get(TEAMS_KEY))
        assert len(UnresolvedQueue(store=store)) == 1
        reloaded = load_reference_store(store)
        assert "PHO Sunz" in reloaded.get_team("Phoenix Suns").aliases


class FailingStore(MemoryStore):
    """MemoryStore whose writes fail for keys starting with ``prefix``."""

    def __init__(self, prefix: str):
        super().__init__()
        self.prefix = prefix
        self.armed = True

    def set(self, key, value):
        if self.armed and key.startswith(self.prefix):
            raise StorageError(f"write to '{key}' refused")
        super().set(key, value)


class TestActionRollback:
    """Tests that a failed save or drain leaves store, resolver and queue as they were."""

    @pytest.fixture
    def items(self, make_item):
        return [
            make_item("PHO Sunz", "bet-1", minutes=0),
            make_item("pho sunz", "bet-2", minutes=1),
            make_item("Mystery Man", "bet-3", entity_type=EntityType.PLAYER, minutes=2),
        ]

    def test_failed_reference_save_rolls_back_map(self, reference_store, resolver, items):
        store = FailingStore("bettracker-normalization-")
        queue = UnresolvedQueue(items, store=store)
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)
        group = queue.find_group("team::NBA::pho sunz")
        version = reference_store.version

        with pytest.raises(StorageError):
            service.map_to_existing(group, "Phoenix Suns")

        assert "PHO Sunz" not in reference_store.get_team("Phoenix Suns").aliases
        assert reference_store.version == version
        assert queue.count() == 3
        assert resolver.resolve_team("PHO Sunz").is_unresolved
        assert store.get(TEAMS_KEY) is None

    def test_failed_reference_save_rolls_back_create(self, reference_store, resolver, items):
        store = FailingStore("bettracker-normalization-")
        queue = UnresolvedQueue(items, store=store)
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)
        group = queue.find_group("player::NBA::mystery man")
        version = reference_store.version

        with pytest.raises(StorageError):
            service.create_canonical(group, "Mystery Man Jr.")

        assert reference_store.get_player("Mystery Man Jr.", Sport.NBA) is None
        assert reference_store.version == version
        assert queue.count() == 3
        assert resolver.resolve_player("Mystery Man", Sport.NBA).is_unresolved

    def test_failed_queue_save_restores_persisted_collection(self, reference_store, resolver, items):
        """Test that the stored teams are rewritten without the alias when draining fails."""
        store = FailingStore(UNRESOLVED_QUEUE_KEY)
        queue = UnresolvedQueue(items, store=store)
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)
        group = queue.find_group("team::NBA::pho sunz")
        version = reference_store.version

        with pytest.raises(StorageError):
            service.map_to_existing(group, "Phoenix Suns")

        assert reference_store.version == version
        assert "PHO Sunz" not in reference_store.get_team("Phoenix Suns").aliases
        assert queue.count() == 3
        assert resolver.resolve_team("PHO Sunz").is_unresolved
        assert "PHO Sunz" not in load_reference_store(store).get_team("Phoenix Suns").aliases

    def test_failed_queue_save_rolls_back_create(self, reference_store, resolver, items):
        store = FailingStore(UNRESOLVED_QUEUE_KEY)
        queue = UnresolvedQueue(items, store=store)
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)
        group = queue.find_group("player::NBA::mystery man")

        with pytest.raises(StorageError):
            service.create_canonical(group, "Mystery Man Jr.")

        assert reference_store.get_player("Mystery Man Jr.", Sport.NBA) is None
        assert load_reference_store(store).get_player("Mystery Man Jr.", Sport.NBA) is None
        assert queue.count() == 3

    def test_action_succeeds_once_storage_recovers(self, reference_store, resolver, items):
        store = FailingStore("bettracker-normalization-")
        queue = UnresolvedQueue(items, store=store)
        service = QueueReviewService(reference_store, queue, resolver, persistence=store)
        group = queue.find_group("team::NBA::pho sunz")

        with pytest.raises(StorageError):
            service.map_to_existing(group, "Phoenix Suns")
        store.armed = False

        assert service.map_to_existing(group, "Phoenix Suns") == 2
        assert resolver.resolve_team("PHO Sunz").canonical == "Phoenix Suns"
        assert "PHO Sunz" in load_reference_store(store).get_team("Phoenix Suns").aliases
