"""Shared fixtures: an in-memory AnalyticsDataStore and service builders.

FakeAnalyticsStore holds plain dict rows and answers every store call from
them, including the reduction primitives. It can also:

- sleep before answering each primitive (latency, or per primitive via
  delays), to observe concurrency and timeouts
- fail the primitives for chosen players (failing_players)
- count calls and the peak number of primitives in flight
"""

import asyncio
import itertools
from collections import Counter

import pytest

from gridiron_analytics.analytics.service import AdvancedAnalyticsService
from gridiron_analytics.analytics.tiers import TeamAnalyticsConfig
from gridiron_analytics.config.settings import Settings
from gridiron_analytics.core.exceptions import DataServiceError
from gridiron_analytics.database.store import (
    COVERAGE_TYPES,
    COVERAGE_WIN_RESULTS,
    OL_SLOTS,
    SPLIT_CONDITIONS,
    AnalyticsDataStore,
)

TEAM = "team-1"

_ids = itertools.count(1)


def _rate(numerator, denominator):
    return round(numerator / denominator * 100, 1) if denominator else 0.0


class FakeAnalyticsStore(AnalyticsDataStore):
    def __init__(self, latency: float = 0.0):
        self.latency = latency
        self.delays: dict[str, float] = {}
        self.failing_players: set[str] = set()

        self.configs: dict[str, dict] = {}
        self.videos: dict[str, list[str]] = {}
        self.plays: list[dict] = []
        self.drives: list[dict] = []
        self.players: list[dict] = []
        self.participation: list[dict] = []

        self.calls: Counter = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    # ---- builders -------------------------------------------------------

    def set_tier(self, team_id: str, tier: str) -> None:
        self.configs[team_id] = TeamAnalyticsConfig.for_tier(team_id, tier).to_row()

    def add_video(self, game_id: str, video_id: str) -> None:
        self.videos.setdefault(game_id, []).append(video_id)

    def add_player(self, player_id: str, position: str, team_id: str = TEAM, **extra) -> dict:
        row = {
            "id": player_id,
            "team_id": team_id,
            "first_name": extra.pop("first_name", player_id.title()),
            "last_name": extra.pop("last_name", "Player"),
            "jersey_number": extra.pop("jersey_number", None),
            "primary_position": position,
            "position_group": extra.pop("position_group", None),
            "position_depths": extra.pop("position_depths", {position: 1}),
            "is_active": extra.pop("is_active", True),
            **extra,
        }
        self.players.append(row)
        return row

    def add_play(self, team_id: str = TEAM, **fields) -> dict:
        row = {
            "id": fields.pop("id", f"play-{next(_ids)}"),
            "team_id": team_id,
            "video_id": fields.pop("video_id", None),
            "is_opponent_play": fields.pop("is_opponent_play", False),
            **fields,
        }
        self.plays.append(row)
        return row

    def add_drive(self, team_id: str = TEAM, **fields) -> dict:
        row = {"id": f"drive-{next(_ids)}", "team_id": team_id, "game_id": "game-1", **fields}
        self.drives.append(row)
        return row

    def add_participation(self, play: dict, player_id: str, participation_type: str, result=None) -> None:
        self.participation.append(
            {
                "play_instance_id": play["id"],
                "player_id": player_id,
                "team_id": play["team_id"],
                "participation_type": participation_type,
                "result": result,
            }
        )

    # ---- instrumentation -------------------------------------------------

    async def _primitive(self, name: str, player_id: str | None = None):
        self.calls[name] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(name, self.latency)
            if delay:
                await asyncio.sleep(delay)
            if player_id in self.failing_players:
                raise DataServiceError(f"{name} failed for {player_id}")
        finally:
            self.in_flight -= 1

    @staticmethod
    def _in_videos(play: dict, video_ids) -> bool:
        return video_ids is None or play.get("video_id") in video_ids

    # ---- record fetches ----------------------------------------------------

    async def get_team_config(self, team_id):
        self.calls["get_team_config"] += 1
        row = self.configs.get(team_id)
        return dict(row) if row else None

    async def upsert_team_config(self, values):
        self.calls["upsert_team_config"] += 1
        self.configs[values["team_id"]] = dict(values)

    async def list_game_video_ids(self, game_id):
        self.calls["list_game_video_ids"] += 1
        return list(self.videos.get(game_id, []))

    async def list_play_instances(self, team_id, *, is_opponent_play, video_ids=None):
        self.calls["list_play_instances"] += 1
        return [
            p
            for p in self.plays
            if p["team_id"] == team_id
            and bool(p["is_opponent_play"]) == is_opponent_play
            and self._in_videos(p, video_ids)
        ]

    async def list_player_plays(self, player_id, *, video_ids=None):
        self.calls["list_player_plays"] += 1
        return [
            p
            for p in self.plays
            if not p["is_opponent_play"]
            and player_id in (p.get("qb_id"), p.get("ball_carrier_id"), p.get("target_id"))
            and self._in_videos(p, video_ids)
        ]

    async def list_drives(self, team_id, *, game_id=None, is_offensive_drive=None):
        self.calls["list_drives"] += 1
        return [
            d
            for d in self.drives
            if d["team_id"] == team_id
            and (game_id is None or d.get("game_id") == game_id)
            and (is_offensive_drive is None or d.get("is_offensive_drive", True) == is_offensive_drive)
        ]

    async def list_players(self, team_id):
        self.calls["list_players"] += 1
        return [p for p in self.players if p["team_id"] == team_id and p.get("is_active", True)]

    async def get_players(self, player_ids):
        self.calls["get_players"] += 1
        wanted = set(player_ids)
        return [p for p in self.players if p["id"] in wanted]

    # ---- reduction primitives ------------------------------------------------

    async def block_win_rate(self, player_id, team_id, *, video_ids=None):
        await self._primitive("block_win_rate", player_id)
        counts = Counter()
        for play in self.plays:
            if play["team_id"] != team_id or not self._in_videos(play, video_ids):
                continue
            grades = [play.get(f"{s}_block_result") for s in OL_SLOTS if play.get(f"{s}_id") == player_id]
            if grades:
                counts["assignments"] += 1
                for grade in ("win", "loss", "neutral"):
                    if grade in grades:
                        counts[grade] += 1
        return {
            "assignments": counts["assignments"],
            "wins": counts["win"],
            "losses": counts["loss"],
            "neutral": counts["neutral"],
            "win_rate": _rate(counts["win"], counts["assignments"]),
        }

    async def count_penalty_plays(self, player_id, team_id, *, video_ids=None):
        await self._primitive("count_penalty_plays", player_id)
        return sum(
            1
            for p in self.plays
            if p["team_id"] == team_id
            and p.get("ol_penalty_player_id") == player_id
            and self._in_videos(p, video_ids)
        )

    def _participation_for(self, player_id, team_id, video_ids):
        plays = {p["id"]: p for p in self.plays if p["is_opponent_play"] and self._in_videos(p, video_ids)}
        return [
            r
            for r in self.participation
            if r["player_id"] == player_id and r["team_id"] == team_id and r["play_instance_id"] in plays
        ]

    async def tackle_counts(self, player_id, team_id, *, video_ids=None):
        await self._primitive("tackle_counts", player_id)
        kinds = Counter(r["participation_type"] for r in self._participation_for(player_id, team_id, video_ids))
        return {
            "primary_tackles": kinds["primary_tackle"],
            "assist_tackles": kinds["assist_tackle"],
            "missed_tackles": kinds["missed_tackle"],
        }

    async def pressure_counts(self, player_id, team_id, *, video_ids=None):
        await self._primitive("pressure_counts", player_id)
        rows = [
            r for r in self._participation_for(player_id, team_id, video_ids)
            if r["participation_type"] == "pressure"
        ]
        return {"pressures": len(rows), "sacks": sum(1 for r in rows if r["result"] == "sack")}

    async def coverage_counts(self, player_id, team_id, *, video_ids=None):
        await self._primitive("coverage_counts", player_id)
        rows = [
            r for r in self._participation_for(player_id, team_id, video_ids)
            if r["participation_type"] in COVERAGE_TYPES
        ]
        return {
            "targets": len(rows),
            "wins": sum(1 for r in rows if r["result"] in COVERAGE_WIN_RESULTS),
        }

    async def situational_split(self, team_id, situation, value, *, video_ids=None):
        await self._primitive("situational_split")
        if situation not in SPLIT_CONDITIONS:
            raise ValueError(f"Unknown situational split condition: {situation}")
        plays = [
            p
            for p in self.plays
            if p["team_id"] == team_id
            and not p["is_opponent_play"]
            and bool(p.get(situation)) == value
            and self._in_videos(p, video_ids)
        ]
        yards = sum(p.get("yards_gained") or 0 for p in plays)
        return {
            "plays": len(plays),
            "yards": yards,
            "yards_per_play": round(yards / len(plays), 1) if plays else 0.0,
            "success_rate": _rate(sum(1 for p in plays if p.get("success")), len(plays)),
            "explosive_rate": _rate(sum(1 for p in plays if p.get("explosive")), len(plays)),
        }


@pytest.fixture
def store():
    return FakeAnalyticsStore()


@pytest.fixture
def fast_settings():
    """Settings with short timeouts so timeout tests finish quickly."""
    return Settings(defensive_stats_timeout=0.2, category_timeout=0.2)


@pytest.fixture
def service(store, fast_settings):
    return AdvancedAnalyticsService(store, fast_settings)


@pytest.fixture
def premium_team(store):
    """Team on premium (every category enabled)."""
    store.set_tier(TEAM, "premium")
    return TEAM
