"""Data-access handle for the analytics engine.

AnalyticsDataStore is the boundary between the engine and the hosted data
service. The engine receives one explicitly (dependency injection) instead of
reaching for a global client, which also lets tests swap in an in-memory fake.

Two kinds of calls live here:
1. Record fetches: plain filtered reads returning plain dict rows
2. Reduction primitives: per-player/per-team aggregates computed by the
   database in one query (block win rate, tackle/pressure/coverage counts,
   situational split). The engine treats them as black boxes returning
   pre-shaped rows.

Video filter convention: `video_ids=None` means "no game filter"; a list
(possibly empty) restricts plays to those videos.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import and_, case, func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.exceptions import DataServiceError
from .connection import get_session_context
from .models import (
    Drive,
    PlayerParticipation,
    PlayInstance,
    Player,
    TeamAnalyticsConfig,
    Video,
)

logger = logging.getLogger(__name__)

Row = dict[str, Any]

# Participation vocabulary understood by the defensive primitives
TACKLE_TYPES = ("primary_tackle", "assist_tackle", "missed_tackle")
COVERAGE_TYPES = ("coverage_assignment", "lb_pass_coverage", "db_pass_coverage")
COVERAGE_WIN_RESULTS = ("win", "success", "incompletion", "interception", "pass_breakup")

# Boolean play conditions the situational split primitive accepts
SPLIT_CONDITIONS = ("has_motion", "is_play_action", "facing_blitz")

OL_SLOTS = ("lt", "lg", "c", "rg", "rt")


class AnalyticsDataStore(ABC):
    """Async, read-mostly interface to the analytics data service."""

    # ========== RECORD FETCHES ==========

    @abstractmethod
    async def get_team_config(self, team_id: str) -> Row | None:
        """Return the team_analytics_config row or None."""

    @abstractmethod
    async def upsert_team_config(self, values: Row) -> None:
        """Insert or replace the team_analytics_config row keyed by values['team_id']."""

    @abstractmethod
    async def list_game_video_ids(self, game_id: str) -> list[str]:
        """IDs of the videos filmed for a game."""

    @abstractmethod
    async def list_play_instances(
        self, team_id: str, *, is_opponent_play: bool, video_ids: list[str] | None = None
    ) -> list[Row]:
        """Plays for one side of the ball."""

    @abstractmethod
    async def list_player_plays(
        self, player_id: str, *, video_ids: list[str] | None = None
    ) -> list[Row]:
        """Own-team plays where the player is QB, ball carrier or target."""

    @abstractmethod
    async def list_drives(
        self,
        team_id: str,
        *,
        game_id: str | None = None,
        is_offensive_drive: bool | None = None,
    ) -> list[Row]:
        """Pre-aggregated drives for a team."""

    @abstractmethod
    async def list_players(self, team_id: str) -> list[Row]:
        """Active roster."""

    @abstractmethod
    async def get_players(self, player_ids: list[str]) -> list[Row]:
        """Player identity rows for exactly these IDs."""

    # ========== REDUCTION PRIMITIVES ==========

    @abstractmethod
    async def block_win_rate(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        """{assignments, wins, losses, neutral, win_rate} across all five OL slots."""

    @abstractmethod
    async def count_penalty_plays(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> int:
        """Plays whose OL penalty is attributed to the player."""

    @abstractmethod
    async def tackle_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        """{primary_tackles, assist_tackles, missed_tackles} from participation rows."""

    @abstractmethod
    async def pressure_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        """{pressures, sacks} from participation rows."""

    @abstractmethod
    async def coverage_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        """{targets, wins} from coverage-assignment participation rows."""

    @abstractmethod
    async def situational_split(
        self, team_id: str, situation: str, value: bool, *, video_ids: list[str] | None = None
    ) -> Row:
        """{plays, yards, yards_per_play, success_rate, explosive_rate} for own-team plays."""


def _to_dict(obj) -> Row:
    """Convert an ORM instance to a plain dict keyed by column name."""
    mapper = inspect(obj).mapper
    return {attr.columns[0].name: getattr(obj, attr.key) for attr in mapper.column_attrs}


def _count_if(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _rate(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return round(numerator / denominator * 100, 1)


class SqlAlchemyAnalyticsStore(AnalyticsDataStore):
    """AnalyticsDataStore backed by an async session factory.

    Each query runs in its own short session so the engine can keep many
    queries in flight at once.

    Every SQLAlchemy failure is re-raised as DataServiceError so the engine
    and the API layer see one error type for "the request failed".
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _all(self, stmt, what: str, convert=None) -> list:
        try:
            async with get_session_context(self.session_factory) as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
                # Convert before commit so expired attributes are never touched
                return [convert(r) for r in rows] if convert else list(rows)
        except SQLAlchemyError as e:
            logger.error(f"Query failed while fetching {what}: {e}")
            raise DataServiceError(f"Failed to fetch {what}: {e}") from e

    async def _one(self, stmt, what: str):
        try:
            async with get_session_context(self.session_factory) as session:
                result = await session.execute(stmt)
                return result.one()
        except SQLAlchemyError as e:
            logger.error(f"Query failed while computing {what}: {e}")
            raise DataServiceError(f"Failed to compute {what}: {e}") from e

    @staticmethod
    def _video_filter(stmt, video_ids: list[str] | None):
        if video_ids is not None:
            stmt = stmt.where(PlayInstance.video_id.in_(video_ids))
        return stmt

    # ========== RECORD FETCHES ==========

    async def get_team_config(self, team_id: str) -> Row | None:
        stmt = select(TeamAnalyticsConfig).where(TeamAnalyticsConfig.team_id == team_id)
        rows = await self._all(stmt, "team analytics config", _to_dict)
        return rows[0] if rows else None

    async def upsert_team_config(self, values: Row) -> None:
        try:
            async with get_session_context(self.session_factory) as session:
                await session.merge(TeamAnalyticsConfig(**values))
        except SQLAlchemyError as e:
            logger.error(f"Tier update failed for team {values.get('team_id')}: {e}")
            raise DataServiceError(f"Failed to update tier: {e}") from e

    async def list_game_video_ids(self, game_id: str) -> list[str]:
        stmt = select(Video.id).where(Video.game_id == game_id)
        return await self._all(stmt, "game videos")

    async def list_play_instances(
        self, team_id: str, *, is_opponent_play: bool, video_ids: list[str] | None = None
    ) -> list[Row]:
        stmt = select(PlayInstance).where(
            PlayInstance.team_id == team_id,
            PlayInstance.is_opponent_play == is_opponent_play,
        )
        stmt = self._video_filter(stmt, video_ids)
        return await self._all(stmt, "play instances", _to_dict)

    async def list_player_plays(
        self, player_id: str, *, video_ids: list[str] | None = None
    ) -> list[Row]:
        stmt = select(PlayInstance).where(
            PlayInstance.is_opponent_play.is_(False),
            or_(
                PlayInstance.qb_id == player_id,
                PlayInstance.ball_carrier_id == player_id,
                PlayInstance.target_id == player_id,
            ),
        )
        stmt = self._video_filter(stmt, video_ids)
        return await self._all(stmt, "player plays", _to_dict)

    async def list_drives(
        self,
        team_id: str,
        *,
        game_id: str | None = None,
        is_offensive_drive: bool | None = None,
    ) -> list[Row]:
        stmt = select(Drive).where(Drive.team_id == team_id)
        if game_id:
            stmt = stmt.where(Drive.game_id == game_id)
        if is_offensive_drive is not None:
            stmt = stmt.where(Drive.is_offensive_drive == is_offensive_drive)
        return await self._all(stmt, "drives", _to_dict)

    async def list_players(self, team_id: str) -> list[Row]:
        stmt = select(Player).where(Player.team_id == team_id, Player.is_active.is_(True))
        return await self._all(stmt, "players", _to_dict)

    async def get_players(self, player_ids: list[str]) -> list[Row]:
        if not player_ids:
            return []
        stmt = select(Player).where(Player.id.in_(player_ids))
        return await self._all(stmt, "players", _to_dict)

    # ========== REDUCTION PRIMITIVES ==========

    async def block_win_rate(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        # One pass over the plays where the player holds any slot
        assigned = or_(*(getattr(PlayInstance, f"{slot}_id") == player_id for slot in OL_SLOTS))

        def graded(grade: str):
            return or_(
                *(
                    and_(
                        getattr(PlayInstance, f"{slot}_id") == player_id,
                        getattr(PlayInstance, f"{slot}_block_result") == grade,
                    )
                    for slot in OL_SLOTS
                )
            )

        stmt = select(
            func.count(),
            _count_if(graded("win")),
            _count_if(graded("loss")),
            _count_if(graded("neutral")),
        ).where(PlayInstance.team_id == team_id, assigned)
        stmt = self._video_filter(stmt, video_ids)
        assignments, wins, losses, neutral = await self._one(stmt, "block win rate")
        return {
            "assignments": int(assignments),
            "wins": int(wins),
            "losses": int(losses),
            "neutral": int(neutral),
            "win_rate": _rate(int(wins), int(assignments)),
        }

    async def count_penalty_plays(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> int:
        stmt = select(func.count()).where(
            PlayInstance.team_id == team_id,
            PlayInstance.ol_penalty_player_id == player_id,
        )
        stmt = self._video_filter(stmt, video_ids)
        (count,) = await self._one(stmt, "penalty count")
        return int(count)

    def _participation_counts(self, player_id: str, team_id: str, video_ids, *columns):
        stmt = (
            select(*columns)
            .select_from(PlayerParticipation)
            .join(PlayInstance, PlayInstance.id == PlayerParticipation.play_instance_id)
            .where(
                PlayerParticipation.player_id == player_id,
                PlayerParticipation.team_id == team_id,
                PlayInstance.is_opponent_play.is_(True),
            )
        )
        return self._video_filter(stmt, video_ids)

    async def tackle_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        kind = PlayerParticipation.participation_type
        stmt = self._participation_counts(
            player_id,
            team_id,
            video_ids,
            _count_if(kind == "primary_tackle"),
            _count_if(kind == "assist_tackle"),
            _count_if(kind == "missed_tackle"),
        ).where(kind.in_(TACKLE_TYPES))
        primary, assist, missed = await self._one(stmt, "tackle participation")
        return {
            "primary_tackles": int(primary),
            "assist_tackles": int(assist),
            "missed_tackles": int(missed),
        }

    async def pressure_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        stmt = self._participation_counts(
            player_id,
            team_id,
            video_ids,
            func.count(),
            _count_if(PlayerParticipation.result == "sack"),
        ).where(PlayerParticipation.participation_type == "pressure")
        pressures, sacks = await self._one(stmt, "pressure rate")
        return {"pressures": int(pressures), "sacks": int(sacks)}

    async def coverage_counts(
        self, player_id: str, team_id: str, *, video_ids: list[str] | None = None
    ) -> Row:
        stmt = self._participation_counts(
            player_id,
            team_id,
            video_ids,
            func.count(),
            _count_if(PlayerParticipation.result.in_(COVERAGE_WIN_RESULTS)),
        ).where(PlayerParticipation.participation_type.in_(COVERAGE_TYPES))
        targets, wins = await self._one(stmt, "coverage success")
        return {"targets": int(targets), "wins": int(wins)}

    async def situational_split(
        self, team_id: str, situation: str, value: bool, *, video_ids: list[str] | None = None
    ) -> Row:
        if situation not in SPLIT_CONDITIONS:
            raise ValueError(f"Unknown situational split condition: {situation}")

        condition = getattr(PlayInstance, situation)
        stmt = select(
            func.count(),
            func.coalesce(func.sum(PlayInstance.yards_gained), 0),
            _count_if(PlayInstance.success.is_(True)),
            _count_if(PlayInstance.explosive.is_(True)),
        ).where(
            PlayInstance.team_id == team_id,
            PlayInstance.is_opponent_play.is_(False),
            condition.is_(value),
        )
        stmt = self._video_filter(stmt, video_ids)
        plays, yards, successes, explosives = await self._one(stmt, "situational split")
        plays, yards = int(plays), int(yards)
        return {
            "plays": plays,
            "yards": yards,
            "yards_per_play": round(yards / plays, 1) if plays else 0.0,
            "success_rate": _rate(int(successes), plays),
            "explosive_rate": _rate(int(explosives), plays),
        }
