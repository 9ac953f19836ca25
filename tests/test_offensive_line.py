"""Tests for offensive line block grading."""

import asyncio

import pytest

from conftest import TEAM, FakeAnalyticsStore
from gridiron_analytics.analytics.service import AdvancedAnalyticsService


def _line_play(store, grades, **fields):
    """One play with the given {slot: (player_id, grade)} assignments."""
    for slot, (player_id, grade) in grades.items():
        fields[f"{slot}_id"] = player_id
        fields[f"{slot}_block_result"] = grade
    return store.add_play(play_type="run", **fields)


def test_block_grades_across_slots(store, service, premium_team):
    store.add_player("g1", "LG", position_depths={"LG": 1, "RT": 2}, jersey_number="66")
    _line_play(store, {"lg": ("g1", "win")})
    _line_play(store, {"lg": ("g1", "loss")})
    _line_play(store, {"rt": ("g1", "win")})
    _line_play(store, {"lg": ("g1", "neutral")}, ol_penalty_player_id="g1")

    (stats,) = asyncio.run(service.get_offensive_line_stats(TEAM))

    assert stats.total_assignments == 4
    assert (stats.block_wins, stats.block_losses, stats.block_neutral) == (2, 1, 1)
    assert stats.block_win_rate == pytest.approx(50.0)
    assert stats.penalties == 1
    assert stats.position == "LG"


def test_multi_position_player_found_by_any_line_slot(store, service, premium_team):
    store.add_player("te1", "TE", position_depths={"TE": 1, "RT": 2})
    store.add_player("wr1", "WR")

    stats = asyncio.run(service.get_offensive_line_stats(TEAM))

    assert [s.player_id for s in stats] == ["te1"]


def test_lineman_without_snaps_gets_zero_record(store, service, premium_team):
    store.add_player("c1", "C")

    (stats,) = asyncio.run(service.get_offensive_line_stats(TEAM))

    assert stats.total_assignments == 0
    assert stats.block_win_rate == 0.0
    assert stats.penalties == 0


def test_one_failing_lineman_does_not_sink_the_rest(store, service, premium_team):
    for player_id in ("lt1", "lg1", "c1"):
        store.add_player(player_id, player_id[:-1].upper())
    store.failing_players.add("lg1")

    stats = asyncio.run(service.get_offensive_line_stats(TEAM))

    assert sorted(s.player_id for s in stats) == ["c1", "lt1"]


def test_linemen_are_graded_concurrently():
    slow = FakeAnalyticsStore(latency=0.05)
    slow.set_tier(TEAM, "premium")
    for i in range(5):
        slow.add_player(f"ol{i}", "LT")

    asyncio.run(AdvancedAnalyticsService(slow).get_offensive_line_stats(TEAM))

    # Both primitives for every lineman were in flight together
    assert slow.max_in_flight == 10
    assert slow.calls["block_win_rate"] == 5
