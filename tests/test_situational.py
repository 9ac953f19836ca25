"""Tests for situational splits."""

import asyncio

import pytest

from conftest import TEAM


def test_only_conditions_that_occurred_are_returned(store, service, premium_team):
    store.add_play(play_type="pass", has_motion=True, yards_gained=10, success=True)
    store.add_play(play_type="run", has_motion=True, yards_gained=2)
    store.add_play(play_type="pass", facing_blitz=True, yards_gained=25, explosive=True, success=True)
    store.add_play(play_type="run", is_opponent_play=True, is_play_action=True)

    splits = asyncio.run(service.get_situational_splits(TEAM))

    assert [s.situation for s in splits] == ["With Motion", "vs Blitz"]
    motion, blitz = splits
    assert motion.plays == 2
    assert motion.yards_per_play == pytest.approx(6.0)
    assert motion.success_rate == pytest.approx(50.0)
    assert blitz.explosive_rate == pytest.approx(100.0)
    assert blitz.to_dict()["situation"] == "vs Blitz"


def test_no_plays_no_splits(store, service, premium_team):
    assert asyncio.run(service.get_situational_splits(TEAM)) == []


def test_game_filter_without_film_skips_primitives(store, service, premium_team):
    store.add_play(play_type="pass", has_motion=True)

    assert asyncio.run(service.get_situational_splits(TEAM, game_id="no-film")) == []
    assert store.calls["situational_split"] == 0
