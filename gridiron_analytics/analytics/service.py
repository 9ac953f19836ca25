"""AdvancedAnalyticsService: tier-gated football film analytics.

The service is a thin facade over the tier resolver, the record fetcher and
the calculators. Every gated operation follows the same shape:

1. resolver.require_feature(team_id, feature)   (no data is fetched before this)
2. resolve the optional game filter to video IDs
3. fetch records, run the calculator, return records

Unified player stats are the one composite operation: offense, offensive line
and defense run concurrently, a category the tier disables contributes
nothing, and the per-player fan-outs are bounded by timeouts from Settings.
"""

import asyncio
import logging
from typing import Any, Mapping

from ..config.settings import Settings, settings as default_settings
from ..core.concurrency import with_timeout
from ..core.exceptions import PlayerNotFoundError, TierFeatureDisabledError
from ..database.store import AnalyticsDataStore
from .attribution import PlayerAttributionStats, calculate_player_attribution, referenced_player_ids
from .defense import DefensiveContext, DefensivePlayerStats, calculate_defensive_stats
from .drives import (
    DefensiveDriveAnalytics,
    DriveAnalytics,
    calculate_defensive_drive_analytics,
    calculate_drive_analytics,
)
from .fetcher import PlayRecordFetcher
from .offensive_line import OffensiveLineStats, calculate_offensive_line_stats
from .position_stats import (
    DownBreakdown,
    QBStats,
    RBStats,
    WRTEStats,
    calculate_down_breakdown,
    calculate_qb_stats,
    calculate_rb_stats,
    calculate_wrte_stats,
)
from .situational import SituationalSplit, calculate_situational_splits
from .tiers import AnalyticsTier, TeamAnalyticsConfig, TierCapabilities, TierResolver
from .unified import UnifiedPlayerStats, merge_player_stats

logger = logging.getLogger(__name__)


class AdvancedAnalyticsService:
    """Tier-gated analytics for one data store."""

    def __init__(self, store: AnalyticsDataStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or default_settings
        self.resolver = TierResolver(store)
        self.fetcher = PlayRecordFetcher(store)

    # ---- tier ----------------------------------------------------------

    async def get_team_tier(self, team_id: str) -> TeamAnalyticsConfig:
        return await self.resolver.get_team_tier(team_id)

    async def update_team_tier(
        self, team_id: str, changes: Mapping[str, Any], *, caller_id: str | None
    ) -> TeamAnalyticsConfig:
        return await self.resolver.update_team_tier(team_id, changes, caller_id=caller_id)

    @staticmethod
    def get_tier_capabilities(tier: "str | AnalyticsTier") -> TierCapabilities:
        return TierResolver.get_tier_capabilities(tier)

    # ---- drives --------------------------------------------------------

    async def get_drive_analytics(self, team_id: str, game_id: str | None = None) -> DriveAnalytics:
        await self.resolver.require_feature(team_id, "drive_analytics")
        drives = await self.fetcher.fetch_drives(team_id, game_id, offensive=True)
        return calculate_drive_analytics(drives)

    async def get_defensive_drive_analytics(
        self, team_id: str, game_id: str | None = None
    ) -> DefensiveDriveAnalytics:
        await self.resolver.require_feature(team_id, "drive_analytics")
        drives = await self.fetcher.fetch_drives(team_id, game_id, offensive=False)
        return calculate_defensive_drive_analytics(drives)

    async def get_defensive_down_breakdown(
        self, team_id: str, game_id: str | None = None
    ) -> list[DownBreakdown]:
        await self.resolver.require_feature(team_id, "drive_analytics")
        plays = await self.fetcher.fetch_opponent_plays(team_id, game_id)
        return calculate_down_breakdown(plays)

    # ---- per-category player stats ---------------------------------------

    async def get_player_attribution_stats(
        self, team_id: str, game_id: str | None = None
    ) -> list[PlayerAttributionStats]:
        await self.resolver.require_feature(team_id, "player_attribution")
        return await self._player_attribution(team_id, game_id)

    async def _player_attribution(self, team_id: str, game_id: str | None) -> list[PlayerAttributionStats]:
        plays = await self.fetcher.fetch_offensive_plays(team_id, game_id)
        if not plays:
            return []
        players = await self.fetcher.fetch_players_by_ids(referenced_player_ids(plays))
        return calculate_player_attribution(plays, players)

    async def get_offensive_line_stats(
        self, team_id: str, game_id: str | None = None
    ) -> list[OffensiveLineStats]:
        await self.resolver.require_feature(team_id, "ol_tracking")
        return await self._offensive_line(team_id, game_id)

    async def _offensive_line(self, team_id: str, game_id: str | None) -> list[OffensiveLineStats]:
        # A game with no film still lists its linemen, all at zero
        video_ids = await self.fetcher.resolve_game_video_ids(game_id)
        roster = await self.fetcher.fetch_players(team_id)
        return await calculate_offensive_line_stats(self.store, roster, team_id, video_ids)

    async def get_defensive_stats(
        self, team_id: str, game_id: str | None = None
    ) -> list[DefensivePlayerStats]:
        await self.resolver.require_feature(team_id, "defensive_tracking")
        return await self._defense(team_id, game_id)

    async def _defense(self, team_id: str, game_id: str | None) -> list[DefensivePlayerStats]:
        video_ids = await self.fetcher.resolve_game_video_ids(game_id)
        if video_ids == []:
            return []
        opponent_plays, roster = await asyncio.gather(
            self.fetcher.fetch_plays(team_id, opponent=True, video_ids=video_ids),
            self.fetcher.fetch_players(team_id),
        )
        context = DefensiveContext.from_plays(opponent_plays)
        return await calculate_defensive_stats(self.store, roster, team_id, context, video_ids)

    async def get_situational_splits(
        self, team_id: str, game_id: str | None = None
    ) -> list[SituationalSplit]:
        await self.resolver.require_feature(team_id, "situational_splits")
        video_ids = await self.fetcher.resolve_game_video_ids(game_id)
        if video_ids == []:
            return []
        return await calculate_situational_splits(self.store, team_id, video_ids)

    # ---- unified ---------------------------------------------------------

    async def _category(self, team_id: str, feature: str, compute):
        """Run one category if the tier allows it, else contribute []."""
        try:
            await self.resolver.require_feature(team_id, feature)
        except TierFeatureDisabledError:
            logger.debug(f"{feature} disabled for team {team_id}; skipping category")
            return []
        return await compute()

    async def get_unified_player_stats(
        self, team_id: str, game_id: str | None = None
    ) -> list[UnifiedPlayerStats]:
        """One merged record per player across all enabled categories."""
        offense, line, defense = await asyncio.gather(
            self._category(
                team_id, "player_attribution", lambda: self._player_attribution(team_id, game_id)
            ),
            self._category(
                team_id,
                "ol_tracking",
                lambda: with_timeout(
                    self._offensive_line(team_id, game_id),
                    self.settings.category_timeout,
                    [],
                    label="OL stats",
                ),
            ),
            self._category(
                team_id,
                "defensive_tracking",
                lambda: with_timeout(
                    self._defense(team_id, game_id),
                    self.settings.defensive_stats_timeout,
                    [],
                    label="defensive stats",
                ),
            ),
        )

        ids = {s.player_id for s in offense} | {s.player_id for s in line} | {s.player_id for s in defense}
        if not ids:
            return []
        identities = await self.fetcher.fetch_players_by_ids(ids)
        unified = merge_player_stats(offense, line, defense, identities)
        logger.info(
            f"Unified stats for team {team_id}: {len(unified)} players "
            f"(offense={len(offense)}, ol={len(line)}, defense={len(defense)})"
        )
        return unified

    # ---- single-player profiles ----------------------------------------------

    async def _player_profile(self, player_id: str, game_id: str | None):
        player = await self.fetcher.fetch_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        await self.resolver.require_feature(player.team_id, "player_attribution")
        plays = await self.fetcher.fetch_player_plays(player_id, game_id)
        return player, plays

    async def get_qb_stats(self, player_id: str, game_id: str | None = None) -> QBStats | None:
        player, plays = await self._player_profile(player_id, game_id)
        return calculate_qb_stats(player, plays, self.settings.red_zone_yard_line)

    async def get_rb_stats(self, player_id: str, game_id: str | None = None) -> RBStats | None:
        player, plays = await self._player_profile(player_id, game_id)
        return calculate_rb_stats(player, plays)

    async def get_wrte_stats(self, player_id: str, game_id: str | None = None) -> WRTEStats | None:
        player, plays = await self._player_profile(player_id, game_id)
        return calculate_wrte_stats(player, plays, self.settings.red_zone_yard_line)
