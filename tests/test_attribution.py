"""Tests for ball carrier / QB / target attribution."""

import asyncio

import pytest

from conftest import TEAM
from gridiron_analytics.analytics.attribution import calculate_player_attribution
from gridiron_analytics.analytics.records import PlayerRecord, PlayRecord


def _play(**fields):
    return PlayRecord.from_row({"id": fields.pop("id", "p"), "team_id": TEAM, **fields})


def test_rush_success_rate_uses_pre_tagged_success():
    plays = [_play(play_type="run", ball_carrier_id="rb1", yards_gained=4, success=i < 2) for i in range(5)]

    (stats,) = calculate_player_attribution(plays, {})

    assert stats.carries == 5
    assert stats.rush_success == 2
    assert stats.rush_success_rate == pytest.approx(40.0)
    assert stats.rush_avg == pytest.approx(4.0)


def test_qb_passing_line():
    plays = [
        _play(play_type="pass", qb_id="qb1", target_id="wr1", result="pass_complete", yards_gained=12),
        _play(play_type="pass", qb_id="qb1", target_id="wr1", result="pass_incomplete"),
        _play(play_type="pass", qb_id="qb1", target_id="wr2", result="touchdown", yards_gained=30),
        _play(play_type="pass", qb_id="qb1", result="interception"),
    ]
    players = {"qb1": PlayerRecord(id="qb1", first_name="Sam", last_name="Arm", primary_position="QB")}

    by_id = {s.player_id: s for s in calculate_player_attribution(plays, players)}
    qb = by_id["qb1"]

    assert qb.player_name == "Sam Arm"
    assert qb.pass_attempts == qb.dropbacks == 4
    assert qb.completions == 2  # the touchdown pass counts as a completion
    assert qb.completion_pct == pytest.approx(50.0)
    assert qb.pass_yards == 42
    assert qb.pass_touchdowns == 1
    assert qb.interceptions == 1

    assert by_id["wr1"].targets == 2
    assert by_id["wr1"].receptions == 1
    assert by_id["wr1"].catch_rate == pytest.approx(50.0)
    assert by_id["wr2"].rec_touchdowns == 1
    assert by_id["wr2"].rec_yards == 30


def test_roles_are_not_exclusive():
    plays = [
        _play(play_type="pass", qb_id="qb1", ball_carrier_id="qb1", result="scramble", yards_gained=8),
    ]

    (qb,) = calculate_player_attribution(plays, {})

    assert qb.pass_attempts == 1
    assert qb.carries == 1
    assert qb.rush_yards == 8


def test_players_missing_from_roster_get_placeholder_identity():
    plays = [_play(play_type="run", ball_carrier_id="ghost", yards_gained=3)]

    (stats,) = calculate_player_attribution(plays, {})

    assert stats.player_name == "Unknown Player"
    assert stats.player_id == "ghost"


def test_qb_on_run_plays_only_is_dropped():
    plays = [_play(play_type="run", qb_id="qb1", ball_carrier_id="rb1", yards_gained=5)]

    stats = calculate_player_attribution(plays, {})

    assert [s.player_id for s in stats] == ["rb1"]


def test_most_involved_players_first():
    plays = [_play(play_type="run", ball_carrier_id="rb1")] + [
        _play(play_type="run", ball_carrier_id="rb2") for _ in range(3)
    ]

    stats = calculate_player_attribution(plays, {})

    assert [s.player_id for s in stats] == ["rb2", "rb1"]


def test_service_fetches_identities_for_referenced_players_only(store, service):
    store.add_player("rb1", "RB", jersey_number="22")
    store.add_player("bench", "WR")
    store.add_play(play_type="run", ball_carrier_id="rb1", yards_gained=6)

    (stats,) = asyncio.run(service.get_player_attribution_stats(TEAM))

    assert stats.jersey_number == "22"
    assert stats.to_dict()["rushYards"] == 6


def test_game_without_film_yields_no_plays(store, service):
    store.add_play(play_type="run", ball_carrier_id="rb1", video_id="v1")
    store.add_video("game-1", "v1")

    assert asyncio.run(service.get_player_attribution_stats(TEAM, game_id="game-9")) == []
    assert len(asyncio.run(service.get_player_attribution_stats(TEAM, game_id="game-1"))) == 1
