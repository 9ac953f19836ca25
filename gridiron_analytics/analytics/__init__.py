"""Tier-gated film analytics: resolver, fetcher, calculators and the service facade."""

from .attribution import PlayerAttributionStats, calculate_player_attribution
from .defense import DefensiveContext, DefensivePlayerStats, calculate_defensive_stats
from .drives import (
    DefensiveDriveAnalytics,
    DriveAnalytics,
    calculate_defensive_drive_analytics,
    calculate_drive_analytics,
)
from .fetcher import PlayRecordFetcher
from .offensive_line import OffensiveLineStats, calculate_offensive_line_stats
from .position_stats import DownBreakdown, QBStats, RBStats, WRTEStats
from .records import DriveRecord, PlayerRecord, PlayRecord
from .service import AdvancedAnalyticsService
from .situational import SituationalSplit, calculate_situational_splits
from .tiers import (
    AnalyticsTier,
    TeamAnalyticsConfig,
    TierCapabilities,
    TierResolver,
    capabilities_for_tier,
)
from .unified import UnifiedPlayerStats, merge_player_stats

__all__ = [
    "AdvancedAnalyticsService",
    "AnalyticsTier",
    "DefensiveContext",
    "DefensiveDriveAnalytics",
    "DefensivePlayerStats",
    "DownBreakdown",
    "DriveAnalytics",
    "DriveRecord",
    "OffensiveLineStats",
    "PlayRecord",
    "PlayRecordFetcher",
    "PlayerAttributionStats",
    "PlayerRecord",
    "QBStats",
    "RBStats",
    "SituationalSplit",
    "TeamAnalyticsConfig",
    "TierCapabilities",
    "TierResolver",
    "UnifiedPlayerStats",
    "WRTEStats",
    "calculate_defensive_drive_analytics",
    "calculate_defensive_stats",
    "calculate_drive_analytics",
    "calculate_offensive_line_stats",
    "calculate_player_attribution",
    "calculate_situational_splits",
    "capabilities_for_tier",
    "merge_player_stats",
]
