"""Tier resolution and feature gating.

Every tier-gated statistic goes through TierResolver.require_feature before a
single row is fetched. That is the only place tier eligibility is decided, and
it looks at the stored feature flags, never at the tier name: flags are a pure
function of the tier, written once when the tier changes.

Tier ladder (ordered):

    basic < plus < premium < ai_powered

Older tier names are still accepted on input:

    little_league -> basic, hs_basic -> plus, hs_advanced -> premium
"""

import logging
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from ..core.exceptions import (
    AuthenticationRequiredError,
    InvalidTierError,
    TierFeatureDisabledError,
)
from ..database.store import AnalyticsDataStore

logger = logging.getLogger(__name__)


class AnalyticsTier(Enum):
    """Subscription tiers gating which analytics categories a team may query."""

    BASIC = "basic"
    PLUS = "plus"
    PREMIUM = "premium"
    AI_POWERED = "ai_powered"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other: "AnalyticsTier") -> bool:
        if not isinstance(other, AnalyticsTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "AnalyticsTier") -> bool:
        if not isinstance(other, AnalyticsTier):
            return NotImplemented
        return self.rank <= other.rank

    @classmethod
    def parse(cls, value: "str | AnalyticsTier") -> "AnalyticsTier":
        """Parse a tier name, accepting legacy names and any letter case."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = LEGACY_TIER_NAMES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            valid = [t.value for t in cls] + list(LEGACY_TIER_NAMES)
            raise InvalidTierError(f"Unknown analytics tier '{value}'. Valid: {valid}") from None


_TIER_ORDER = list(AnalyticsTier)

LEGACY_TIER_NAMES = {
    "little_league": "basic",
    "hs_basic": "plus",
    "hs_advanced": "premium",
}

# Feature keys understood by require_feature, mapped to config attributes
FEATURE_FLAGS = {
    "drive_analytics": "enable_drive_analytics",
    "player_attribution": "enable_player_attribution",
    "ol_tracking": "enable_ol_tracking",
    "defensive_tracking": "enable_defensive_tracking",
    "situational_splits": "enable_situational_splits",
}


@dataclass(frozen=True)
class TierCapabilities:
    """What a tier unlocks."""

    max_fields: int
    drive_analytics: bool
    player_attribution: bool
    ol_tracking: bool
    defensive_tracking: bool
    situational_splits: bool
    default_tagging_mode: str  # quick, standard, advanced

    def to_dict(self) -> dict:
        return asdict(self)


_CAPABILITIES = {
    AnalyticsTier.BASIC: TierCapabilities(8, False, False, False, False, False, "quick"),
    AnalyticsTier.PLUS: TierCapabilities(20, True, True, False, False, False, "standard"),
    AnalyticsTier.PREMIUM: TierCapabilities(40, True, True, True, True, True, "advanced"),
    AnalyticsTier.AI_POWERED: TierCapabilities(40, True, True, True, True, True, "advanced"),
}


def capabilities_for_tier(tier: "str | AnalyticsTier") -> TierCapabilities:
    """Deterministic capability table lookup."""
    return _CAPABILITIES[AnalyticsTier.parse(tier)]


@dataclass(frozen=True)
class TeamAnalyticsConfig:
    """A team's tier plus the feature flags written when the tier was set."""

    team_id: str
    tier: AnalyticsTier
    enable_drive_analytics: bool
    enable_player_attribution: bool
    enable_ol_tracking: bool
    enable_defensive_tracking: bool
    enable_situational_splits: bool
    default_tagging_mode: str = "standard"
    updated_at: datetime | None = None
    updated_by: str | None = None

    def is_enabled(self, feature: str) -> bool:
        try:
            return bool(getattr(self, FEATURE_FLAGS[feature]))
        except KeyError:
            raise InvalidTierError(f"Unknown analytics feature '{feature}'") from None

    @classmethod
    def for_tier(cls, team_id: str, tier: "str | AnalyticsTier", **extra) -> "TeamAnalyticsConfig":
        tier = AnalyticsTier.parse(tier)
        caps = capabilities_for_tier(tier)
        return cls(
            team_id=team_id,
            tier=tier,
            enable_drive_analytics=caps.drive_analytics,
            enable_player_attribution=caps.player_attribution,
            enable_ol_tracking=caps.ol_tracking,
            enable_defensive_tracking=caps.defensive_tracking,
            enable_situational_splits=caps.situational_splits,
            default_tagging_mode=caps.default_tagging_mode,
            **extra,
        )

    @classmethod
    def default(cls, team_id: str) -> "TeamAnalyticsConfig":
        """Configuration used for teams that have never had a tier stored."""
        return cls.for_tier(team_id, AnalyticsTier.PLUS)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TeamAnalyticsConfig":
        return cls(
            team_id=str(row["team_id"]),
            tier=AnalyticsTier.parse(row.get("tier") or AnalyticsTier.PLUS),
            enable_drive_analytics=bool(row.get("enable_drive_analytics")),
            enable_player_attribution=bool(row.get("enable_player_attribution")),
            enable_ol_tracking=bool(row.get("enable_ol_tracking")),
            enable_defensive_tracking=bool(row.get("enable_defensive_tracking")),
            enable_situational_splits=bool(row.get("enable_situational_splits")),
            default_tagging_mode=row.get("default_tagging_mode") or "standard",
            updated_at=row.get("updated_at"),
            updated_by=row.get("updated_by"),
        )

    def to_row(self) -> dict:
        row = asdict(self)
        row["tier"] = self.tier.value
        return row

    def to_dict(self) -> dict:
        row = self.to_row()
        row["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return row


# Keys a caller may pass to update_team_tier. Feature flags are not among
# them: they only ever change as a consequence of a tier change.
_UPDATABLE_KEYS = {"tier", "default_tagging_mode"}
_TAGGING_MODES = {"quick", "standard", "advanced"}


class TierResolver:
    """Loads, gates on, and updates a team's analytics configuration."""

    def __init__(self, store: AnalyticsDataStore):
        self.store = store

    async def get_team_tier(self, team_id: str) -> TeamAnalyticsConfig:
        """Stored configuration, or the default when the team has none."""
        row = await self.store.get_team_config(team_id)
        if row is None:
            logger.debug(f"No analytics config for team {team_id}; using default tier")
            return TeamAnalyticsConfig.default(team_id)
        return TeamAnalyticsConfig.from_row(row)

    async def require_feature(self, team_id: str, feature: str) -> TeamAnalyticsConfig:
        """Raise TierFeatureDisabledError unless the team's flags enable the feature."""
        config = await self.get_team_tier(team_id)
        if not config.is_enabled(feature):
            raise TierFeatureDisabledError(feature, config.tier.value)
        return config

    @staticmethod
    def get_tier_capabilities(tier: "str | AnalyticsTier") -> TierCapabilities:
        return capabilities_for_tier(tier)

    async def update_team_tier(
        self, team_id: str, changes: Mapping[str, Any], *, caller_id: str | None
    ) -> TeamAnalyticsConfig:
        """Merge changes into the team's configuration and persist it.

        A tier change rewrites every feature flag and the tagging mode from the
        capability table; an explicit default_tagging_mode in the same call is
        applied afterwards. Fails before reading or writing anything when no
        caller is present.
        """
        if not caller_id:
            raise AuthenticationRequiredError("Not authenticated")

        unknown = set(changes) - _UPDATABLE_KEYS
        if unknown:
            raise InvalidTierError(
                f"Unknown analytics config keys: {sorted(unknown)}. Updatable: {sorted(_UPDATABLE_KEYS)}"
            )
        mode = changes.get("default_tagging_mode")
        if mode is not None and mode not in _TAGGING_MODES:
            raise InvalidTierError(f"Unknown tagging mode '{mode}'. Valid: {sorted(_TAGGING_MODES)}")

        stamp = {"updated_at": datetime.now(timezone.utc), "updated_by": caller_id}
        if "tier" in changes:
            merged = TeamAnalyticsConfig.for_tier(team_id, changes["tier"], **stamp)
        else:
            merged = replace(await self.get_team_tier(team_id), **stamp)
        if mode is not None:
            merged = replace(merged, default_tagging_mode=mode)

        await self.store.upsert_team_config(merged.to_row())
        logger.info(f"Team {team_id} analytics tier set to {merged.tier.value} by {caller_id}")
        return merged
