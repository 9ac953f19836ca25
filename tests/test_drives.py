"""Tests for offensive and defensive drive analytics."""

import asyncio

import pytest

from conftest import TEAM
from gridiron_analytics.analytics.drives import (
    DriveAnalytics,
    calculate_defensive_drive_analytics,
    calculate_drive_analytics,
)
from gridiron_analytics.analytics.records import DriveRecord


def _drive(**fields):
    return DriveRecord.from_row({"id": "d", "team_id": TEAM, **fields})


def test_empty_drive_list_gives_zero_record():
    assert calculate_drive_analytics([]) == DriveAnalytics()
    assert calculate_drive_analytics([]).to_dict()["pointsPerDrive"] == 0


def test_drive_rates():
    drives = [
        _drive(points=7, plays_count=8, yards_gained=75, result="touchdown",
               reached_red_zone=True, scoring_drive=True),
        _drive(points=3, plays_count=10, yards_gained=55, result="field_goal",
               reached_red_zone=True, scoring_drive=True),
        _drive(points=0, plays_count=3, yards_gained=2, result="punt", three_and_out=True),
        _drive(points=0, plays_count=5, yards_gained=20, result="turnover"),
    ]

    stats = calculate_drive_analytics(drives)

    assert stats.total_drives == 4
    assert stats.points_per_drive == pytest.approx(2.5)
    assert stats.avg_plays_per_drive == pytest.approx(6.5)
    assert stats.avg_yards_per_drive == pytest.approx(38.0)
    assert stats.three_and_out_rate == pytest.approx(25.0)
    assert stats.red_zone_touchdown_rate == pytest.approx(50.0)
    assert stats.scoring_drive_rate == pytest.approx(50.0)
    assert (stats.touchdowns, stats.field_goals, stats.punts, stats.turnovers) == (1, 1, 1, 1)


def test_red_zone_rate_is_zero_without_red_zone_trips():
    stats = calculate_drive_analytics([_drive(result="punt")])
    assert stats.red_zone_touchdown_rate == 0.0


def test_defensive_drive_rates():
    drives = [
        _drive(is_offensive_drive=False, points=7, result="touchdown", reached_red_zone=True, scoring_drive=True),
        _drive(is_offensive_drive=False, result="downs", reached_red_zone=True),
        _drive(is_offensive_drive=False, result="punt", three_and_out=True),
        _drive(is_offensive_drive=False, result="turnover"),
    ]

    stats = calculate_defensive_drive_analytics(drives)

    assert stats.points_allowed_per_drive == pytest.approx(1.75)
    assert stats.red_zone_stop_rate == pytest.approx(50.0)
    assert stats.stops == 3
    assert stats.stop_rate == pytest.approx(75.0)
    assert stats.touchdowns_allowed == 1


def test_service_splits_offensive_and_defensive_drives(store, service):
    store.add_drive(points=7, result="touchdown", is_offensive_drive=True)
    store.add_drive(points=3, result="field_goal", is_offensive_drive=False)
    store.add_drive(points=0, result="punt", is_offensive_drive=False, game_id="game-2")

    offense = asyncio.run(service.get_drive_analytics(TEAM))
    defense = asyncio.run(service.get_defensive_drive_analytics(TEAM))
    one_game = asyncio.run(service.get_defensive_drive_analytics(TEAM, game_id="game-2"))

    assert offense.total_drives == 1 and offense.points_per_drive == 7
    assert defense.total_drives == 2
    assert one_game.total_drives == 1 and one_game.stops == 1
