"""Tests for unified player stats across offense, offensive line and defense."""

import asyncio
import time

import pytest

from conftest import TEAM, FakeAnalyticsStore
from gridiron_analytics.analytics.service import AdvancedAnalyticsService
from gridiron_analytics.analytics.unified import UnifiedPlayerStats
from gridiron_analytics.config.settings import Settings
from gridiron_analytics.core.exceptions import TierFeatureDisabledError


def _seed_two_way_team(store):
    """RB who also plays LB, a guard, a safety, and a few plays on each side."""
    store.add_player("rb1", "RB", jersey_number="21", position_depths={"RB": 1, "LB": 2})
    store.add_player("g1", "LG", jersey_number="64")
    store.add_player("s1", "SS", jersey_number="3")

    store.add_play(play_type="run", ball_carrier_id="rb1", yards_gained=7, lg_id="g1", lg_block_result="win")
    store.add_play(play_type="run", ball_carrier_id="rb1", result="touchdown", yards_gained=12,
                   lg_id="g1", lg_block_result="loss")

    tackle = store.add_play(is_opponent_play=True, play_type="run", yards_gained=3)
    store.add_play(is_opponent_play=True, play_type="pass", yards_gained=0)
    store.add_participation(tackle, "rb1", "primary_tackle")
    store.add_participation(tackle, "s1", "assist_tackle")


def test_plus_tier_end_to_end(store, service):
    store.set_tier(TEAM, "plus")
    _seed_two_way_team(store)

    unified = asyncio.run(service.get_unified_player_stats(TEAM))

    assert [u.player_id for u in unified] == ["rb1"]
    record = unified[0].to_dict()
    assert record["offense"]["carries"] == 2
    assert record["offensiveLine"] is None
    assert record["defense"] is None

    with pytest.raises(TierFeatureDisabledError):
        asyncio.run(service.get_offensive_line_stats(TEAM))
    with pytest.raises(TierFeatureDisabledError):
        asyncio.run(service.get_defensive_stats(TEAM))


def test_basic_tier_unified_is_empty(store, service):
    store.set_tier(TEAM, "basic")
    _seed_two_way_team(store)

    assert asyncio.run(service.get_unified_player_stats(TEAM)) == []


def test_premium_merges_every_category(store, service, premium_team):
    _seed_two_way_team(store)

    unified = asyncio.run(service.get_unified_player_stats(TEAM))
    by_id = {u.player_id: u for u in unified}

    # Sorted by jersey number
    assert [u.player_id for u in unified] == ["s1", "rb1", "g1"]

    rb = by_id["rb1"]
    assert rb.offense is not None and rb.defense is not None
    assert rb.offensive_line is None
    assert rb.positions == ("LB", "RB")
    assert rb.total_snaps == 2 + 2  # two carries plus two defensive snaps
    assert rb.total_touchdowns == 1

    guard = by_id["g1"].to_dict()
    assert guard["offense"] is None
    assert guard["defense"] is None
    assert guard["offensiveLine"]["blockWinRate"] == pytest.approx(50.0)
    assert guard["totalSnaps"] == 0

    safety = by_id["s1"]
    assert safety.defense.total_tackles == 1
    assert safety.offense is None


def test_explicit_null_keys_are_present():
    record = UnifiedPlayerStats(player_id="p", player_name="P", jersey_number="1").to_dict()

    assert {"offense", "offensiveLine", "defense"} <= record.keys()
    assert record["offense"] is None


def test_slow_defense_times_out_without_losing_offense():
    store = FakeAnalyticsStore()
    store.set_tier(TEAM, "premium")
    _seed_two_way_team(store)
    store.delays["tackle_counts"] = 1.0
    service = AdvancedAnalyticsService(store, Settings(defensive_stats_timeout=0.1, category_timeout=5))

    started = time.perf_counter()
    unified = asyncio.run(service.get_unified_player_stats(TEAM))
    elapsed = time.perf_counter() - started

    assert elapsed < 0.9
    assert all(u.defense is None for u in unified)
    assert {u.player_id for u in unified} == {"rb1", "g1"}
    assert next(u for u in unified if u.player_id == "g1").offensive_line is not None


def test_defensive_fan_out_is_sublinear_in_roster_size():
    store = FakeAnalyticsStore(latency=0.05)
    store.set_tier(TEAM, "premium")
    for i in range(20):
        store.add_player(f"db{i}", "CB")
    store.add_play(is_opponent_play=True, play_type="pass")
    service = AdvancedAnalyticsService(store, Settings(defensive_stats_timeout=5, category_timeout=5))

    started = time.perf_counter()
    unified = asyncio.run(service.get_unified_player_stats(TEAM))
    elapsed = time.perf_counter() - started

    assert len(unified) == 20
    # 20 players x 3 primitives x 50ms would be 3s sequentially
    assert elapsed < 1.0
    assert store.max_in_flight == 60


def test_one_failing_defender_does_not_drop_the_others():
    store = FakeAnalyticsStore()
    store.set_tier(TEAM, "premium")
    for i in range(5):
        store.add_player(f"lb{i}", "LB")
    store.add_play(is_opponent_play=True, play_type="run")
    store.failing_players.add("lb2")

    unified = asyncio.run(AdvancedAnalyticsService(store).get_unified_player_stats(TEAM))

    assert sorted(u.player_id for u in unified) == ["lb0", "lb1", "lb3", "lb4"]


def test_player_in_every_category_gets_all_three(store, service, premium_team):
    store.add_player("x1", "RB", jersey_number="30", position_depths={"RB": 1, "LG": 2, "LB": 2})
    store.add_play(play_type="run", ball_carrier_id="x1", yards_gained=4, lg_id="x1", lg_block_result="win")
    tackle = store.add_play(is_opponent_play=True, play_type="run")
    store.add_play(is_opponent_play=True, play_type="pass")
    store.add_participation(tackle, "x1", "primary_tackle")

    (record,) = asyncio.run(service.get_unified_player_stats(TEAM))

    assert record.offense.carries == 1
    assert record.offensive_line.block_wins == 1
    assert record.defense.primary_tackles == 1
    # one carry plus two defensive snaps
    assert record.total_snaps == 3
    body = record.to_dict()
    assert all(body[key] is not None for key in ("offense", "offensiveLine", "defense"))


def test_jersey_zero_is_kept_and_sorts_first(store, service):
    store.add_player("a1", "RB", jersey_number=12)
    store.add_player("z0", "WR", jersey_number=0)
    store.add_play(play_type="run", ball_carrier_id="a1", yards_gained=2)
    store.add_play(play_type="pass", target_id="z0", result="pass_complete", yards_gained=8)

    unified = asyncio.run(service.get_unified_player_stats(TEAM))

    assert [(u.player_id, u.jersey_number) for u in unified] == [("z0", "0"), ("a1", "12")]
