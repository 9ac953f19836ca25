"""Play record fetching scoped to a team and, optionally, a single game.

Plays have no game foreign key; they belong to videos, and videos belong to
games. A game filter therefore resolves the game's video IDs first and then
filters plays by membership in that set. A game with no film yields no plays.

Zero matching rows is a normal answer (empty list). Store failures propagate
as DataServiceError.
"""

import logging

from ..database.store import AnalyticsDataStore
from .records import DriveRecord, PlayerRecord, PlayRecord

logger = logging.getLogger(__name__)


class PlayRecordFetcher:
    """Turns store rows into typed records for the calculators."""

    def __init__(self, store: AnalyticsDataStore):
        self.store = store

    async def resolve_game_video_ids(self, game_id: str | None) -> list[str] | None:
        """Video IDs for a game, or None when no game filter applies."""
        if not game_id:
            return None
        video_ids = await self.store.list_game_video_ids(game_id)
        logger.debug(f"Game {game_id} resolved to {len(video_ids)} videos")
        return video_ids

    async def fetch_plays(
        self, team_id: str, *, opponent: bool, video_ids: list[str] | None
    ) -> list[PlayRecord]:
        """Plays for one side of the ball, with the game already resolved to video IDs."""
        if video_ids == []:
            return []
        rows = await self.store.list_play_instances(
            team_id, is_opponent_play=opponent, video_ids=video_ids
        )
        return [PlayRecord.from_row(row) for row in rows]

    async def fetch_offensive_plays(self, team_id: str, game_id: str | None = None) -> list[PlayRecord]:
        """Own-team plays (is_opponent_play = false)."""
        video_ids = await self.resolve_game_video_ids(game_id)
        return await self.fetch_plays(team_id, opponent=False, video_ids=video_ids)

    async def fetch_opponent_plays(self, team_id: str, game_id: str | None = None) -> list[PlayRecord]:
        """Opponent plays, i.e. the team's defensive snaps (is_opponent_play = true)."""
        video_ids = await self.resolve_game_video_ids(game_id)
        return await self.fetch_plays(team_id, opponent=True, video_ids=video_ids)

    async def fetch_player_plays(self, player_id: str, game_id: str | None = None) -> list[PlayRecord]:
        """Own-team plays where the player is QB, ball carrier or target."""
        video_ids = await self.resolve_game_video_ids(game_id)
        if video_ids == []:
            return []
        rows = await self.store.list_player_plays(player_id, video_ids=video_ids)
        return [PlayRecord.from_row(row) for row in rows]

    async def fetch_drives(
        self, team_id: str, game_id: str | None = None, offensive: bool | None = None
    ) -> list[DriveRecord]:
        rows = await self.store.list_drives(team_id, game_id=game_id, is_offensive_drive=offensive)
        return [DriveRecord.from_row(row) for row in rows]

    async def fetch_players(self, team_id: str) -> list[PlayerRecord]:
        """Active roster."""
        return [PlayerRecord.from_row(row) for row in await self.store.list_players(team_id)]

    async def fetch_players_by_ids(self, player_ids) -> dict[str, PlayerRecord]:
        """Identity records keyed by ID for exactly the given IDs."""
        ids = sorted(set(player_ids))
        if not ids:
            return {}
        rows = await self.store.get_players(ids)
        return {str(row["id"]): PlayerRecord.from_row(row) for row in rows}

    async def fetch_player(self, player_id: str) -> PlayerRecord | None:
        return (await self.fetch_players_by_ids([player_id])).get(player_id)
