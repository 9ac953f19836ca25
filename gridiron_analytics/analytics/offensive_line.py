"""Offensive line block grading.

Candidates are roster players holding any of the five line slots (LT, LG, C,
RG, RT), found by set membership so a guard who also plays tackle is found by
either slot. For each candidate two independent store calls run at once (block
win rate primitive and penalty count), and all candidates fan out together.

A lineman with no graded snaps yet still gets an all-zero record: line play is
structural, so "no data" is shown rather than hidden.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from ..core.concurrency import settle_all
from ..database.store import AnalyticsDataStore
from .records import PlayerRecord
from .stats import to_camel_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OffensiveLineStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    total_assignments: int = 0
    block_wins: int = 0
    block_losses: int = 0
    block_neutral: int = 0
    block_win_rate: float = 0.0
    penalties: int = 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


async def _lineman_stats(
    store: AnalyticsDataStore,
    player: PlayerRecord,
    team_id: str,
    video_ids: list[str] | None,
) -> OffensiveLineStats:
    blocks, penalties = await asyncio.gather(
        store.block_win_rate(player.id, team_id, video_ids=video_ids),
        store.count_penalty_plays(player.id, team_id, video_ids=video_ids),
    )
    return OffensiveLineStats(
        player_id=player.id,
        player_name=player.name,
        jersey_number=player.jersey_number,
        position=player.primary_position,
        total_assignments=int(blocks.get("assignments") or 0),
        block_wins=int(blocks.get("wins") or 0),
        block_losses=int(blocks.get("losses") or 0),
        block_neutral=int(blocks.get("neutral") or 0),
        block_win_rate=float(blocks.get("win_rate") or 0.0),
        penalties=int(penalties or 0),
    )


async def calculate_offensive_line_stats(
    store: AnalyticsDataStore,
    roster: Sequence[PlayerRecord],
    team_id: str,
    video_ids: list[str] | None = None,
) -> list[OffensiveLineStats]:
    """Block grades for every lineman on the roster.

    Per-player failures are logged and that player is left out.
    """
    linemen = [p for p in roster if p.is_offensive_lineman]
    if not linemen:
        return []

    results, failures = await settle_all(
        (p.id, _lineman_stats(store, p, team_id, video_ids)) for p in linemen
    )
    for player_id, error in failures.items():
        logger.warning(f"OL stats failed for player {player_id}: {error}")

    logger.info(f"OL stats computed for {len(results)}/{len(linemen)} linemen on team {team_id}")
    return list(results.values())
