"""Tests for the Resolver chokepoint."""

from datetime import datetime, timezone

import pytest

from betnorm.models.enums import AmbiguityPolicy, EntityCategory, EntityType, ResolverStatus, Sport
from betnorm.models.queue import RawEntityMentions
from betnorm.models.resolution import ResolverResult
from betnorm.resolution.resolver import Resolver
from betnorm.review.queue import UnresolvedQueue
from betnorm.storage.base_store import MemoryStore
from betnorm.storage.persistence import UNRESOLVED_QUEUE_KEY


class TestResolverStatus:
    """Tests for the tri-state resolver result."""

    def test_resolved(self, resolver):
        result = resolver.resolve_team("  phx  suns ")
        assert result.status == ResolverStatus.RESOLVED
        assert result.canonical == "Phoenix Suns"
        assert result.raw == "phx  suns"

    def test_unresolved_echoes_trimmed_input(self, resolver):
        result = resolver.resolve_team(" Springfield Isotopes ")
        assert result.is_unresolved
        assert result.canonical == "Springfield Isotopes"
        assert result.candidates == []

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input_is_unresolved(self, resolver, raw):
        result = resolver.resolve_player(raw)
        assert result.is_unresolved
        assert result.canonical == (raw or "")

    def test_ambiguous_lists_candidates(self, resolver):
        result = resolver.resolve_player("Melo", Sport.NBA)
        assert result.is_ambiguous
        assert result.candidates == ["Carmelo Anthony", "LaMelo Ball"]
        assert result.canonical == "Carmelo Anthony"

    def test_ambiguous_requires_two_candidates(self):
        with pytest.raises(ValueError):
            ResolverResult(status=ResolverStatus.AMBIGUOUS, canonical="A", raw="A")

    def test_status_helpers(self, resolver):
        assert resolver.is_team_resolved("Suns") is True
        assert resolver.is_team_resolved("Hawks") is False
        assert resolver.is_player_resolved("Melo", Sport.NBA, "Hornets") is True
        assert resolver.is_bet_type_resolved("Pts") is True
        assert resolver.classify("Knicks") == EntityCategory.TEAM


class TestAggregationKeys:
    """Tests for aggregation key policies."""

    def test_resolved_key_is_canonical(self, resolver):
        assert resolver.get_team_aggregation_key("PHO Suns") == "Phoenix Suns"
        assert resolver.get_bet_type_aggregation_key("Rebounds", sport=Sport.NBA) == "Reb"

    def test_unresolved_key_is_bucket(self, resolver):
        assert resolver.get_team_aggregation_key("Springfield Isotopes") == "[Unresolved]"
        assert resolver.get_team_aggregation_key("Springfield Isotopes", "Other") == "Other"

    def test_ambiguous_uses_bucket_by_default(self, resolver):
        assert resolver.get_player_aggregation_key("Melo", sport=Sport.NBA) == "[Unresolved]"

    def test_first_candidate_policy(self, resolver):
        key = resolver.get_player_aggregation_key(
            "Melo", sport=Sport.NBA, policy=AmbiguityPolicy.FIRST_CANDIDATE
        )
        assert key == "Carmelo Anthony"

    def test_first_candidate_policy_on_resolver(self, registry):
        resolver = Resolver(registry, ambiguity_policy=AmbiguityPolicy.FIRST_CANDIDATE)
        assert resolver.get_team_aggregation_key("Hawks") == "Atlanta Hawks"
        assert resolver.get_team_aggregation_key("Nowhere") == resolver.unresolved_bucket

    def test_generic_dispatch(self, resolver):
        assert resolver.get_aggregation_key(EntityType.PLAYER, "Melo", sport="NBA", team="Knicks") == "Carmelo Anthony"
        assert resolver.get_aggregation_key(EntityType.UNKNOWN, "Melo") == "[Unresolved]"

    @pytest.mark.parametrize(
        "raw", ["Phoenix Suns", "phoenix suns", " Phoenix   Suns ", "PHOENIX SUNS", "PHO Suns"]
    )
    def test_whitespace_variants_share_one_key(self, resolver, raw):
        assert resolver.get_team_aggregation_key(raw) == "Phoenix Suns"


class TestPurity:
    """Tests that resolution never writes."""

    def test_repeated_calls_leave_store_and_registry_untouched(self, reference_store, resolver):
        version = reference_store.version
        registry = resolver.registry
        for _ in range(1000):
            resolver.resolve_team("Springfield Isotopes")
            resolver.get_player_aggregation_key("Unknown Guy")
            resolver.resolve_bet_type("Hawks")
        assert reference_store.version == version
        assert resolver.registry is registry
        assert len(reference_store.list_teams()) == len(registry.teams())

    def test_aggregation_never_enqueues(self, reference_store, resolver, make_item):
        """Test that resolving an unknown team leaves the persisted queue as it was."""
        store = MemoryStore()
        queue = UnresolvedQueue(store=store)
        queue.enqueue(make_item("PHO Sunz", "bet-1"))
        count = queue.count()
        payload = store.get(UNRESOLVED_QUEUE_KEY)
        version = reference_store.version

        for _ in range(1000):
            assert resolver.get_team_aggregation_key("Springfield Isotopes") == "[Unresolved]"

        assert queue.count() == count
        assert store.get(UNRESOLVED_QUEUE_KEY) == payload
        assert UnresolvedQueue(store=store).count() == count
        assert reference_store.version == version

    def test_rebuild_makes_mutation_visible(self, reference_store, resolver):
        assert resolver.resolve_team("The Valley").is_unresolved
        reference_store.add_team_alias("Phoenix Suns", "The Valley")
        assert resolver.resolve_team("The Valley").is_unresolved

        resolver.rebuild(reference_store.snapshot())
        assert resolver.resolve_team("The Valley").canonical == "Phoenix Suns"


class TestCollectUnresolved:
    """Tests for building queue items from import mentions."""

    def test_only_unresolved_mentions_become_items(self, resolver):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        mentions = [
            RawEntityMentions(entities=["Suns", "Devin Bookr"], market="Player Points"),
            RawEntityMentions(entities=["Pts", "Pts Scored"], entity_type=EntityType.STAT, market="Player Points"),
        ]
        items = resolver.collect_unresolved(mentions, book="DraftKings", bet_id="bet-1", sport="nba", now=now)

        assert [(i.raw_value, i.entity_type) for i in items] == [
            ("Devin Bookr", EntityType.PLAYER),
            ("Pts Scored", EntityType.STAT),
        ]
        assert items[0].id == "devin bookr::bet-1"
        assert items[0].sport == "NBA"
        assert items[0].encountered_at == now
        assert items[0].market == "Player Points"

    def test_ambiguous_mentions_carry_candidates(self, resolver):
        mentions = [RawEntityMentions(entities=["Melo"], entity_type=EntityType.PLAYER)]
        items = resolver.collect_unresolved(mentions, book="FanDuel", bet_id="bet-2", sport=Sport.NBA, leg_index=1)

        assert len(items) == 1
        assert items[0].id == "melo::bet-2::1"
        assert items[0].context == "ambiguous: Carmelo Anthony, LaMelo Ball"
        assert items[0].market is None

    def test_repeated_mentions_are_deduped(self, resolver):
        mentions = [RawEntityMentions(entities=["Nobody", " nobody "], entity_type=EntityType.PLAYER)]
        assert len(resolver.collect_unresolved(mentions, book="FanDuel", bet_id="bet-3")) == 1
