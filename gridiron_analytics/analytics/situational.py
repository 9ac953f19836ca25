"""Offensive efficiency split by pre-snap and defensive conditions."""

import logging
from dataclasses import dataclass

from ..database.store import AnalyticsDataStore
from .stats import to_camel_dict

logger = logging.getLogger(__name__)

# (play column, display label), in output order
SPLITS = (
    ("has_motion", "With Motion"),
    ("is_play_action", "Play Action"),
    ("facing_blitz", "vs Blitz"),
)


@dataclass(frozen=True)
class SituationalSplit:
    situation: str
    plays: int = 0
    yards: int = 0
    yards_per_play: float = 0.0
    success_rate: float = 0.0
    explosive_rate: float = 0.0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


async def calculate_situational_splits(
    store: AnalyticsDataStore, team_id: str, video_ids: list[str] | None = None
) -> list[SituationalSplit]:
    """One split per condition that actually occurred; empty splits are dropped."""
    splits = []
    for column, label in SPLITS:
        row = await store.situational_split(team_id, column, True, video_ids=video_ids)
        plays = int(row.get("plays") or 0)
        if plays == 0:
            continue
        splits.append(
            SituationalSplit(
                situation=label,
                plays=plays,
                yards=int(row.get("yards") or 0),
                yards_per_play=float(row.get("yards_per_play") or 0.0),
                success_rate=float(row.get("success_rate") or 0.0),
                explosive_rate=float(row.get("explosive_rate") or 0.0),
            )
        )
    logger.debug(f"{len(splits)} situational splits for team {team_id}")
    return splits
