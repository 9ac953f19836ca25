"""Defensive player grading from the normalized participation join.

Counts come from player_participation rows (one row per play/player/role),
never from scanning player-ID arrays on plays. Team context is computed once
per call:

- defensive snaps: opponent plays in scope
- pass snaps: opponent plays with play_type == "pass"

Rates use team context as the denominator:

    tackleParticipation = totalTackles / defensiveSnaps * 100
    pressureRate        = pressures    / passSnaps      * 100
    sackRate            = sacks        / passSnaps      * 100

Havoc fields (TFL, forced fumble, interception, pass breakup) are zero-filled:
the participation schema does not attribute them to players yet.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from ..core.concurrency import settle_all
from ..database.store import AnalyticsDataStore
from .records import PlayerRecord, PlayRecord
from .stats import pct, to_camel_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefensiveContext:
    """Team-level denominators shared by every defender in one calculation."""

    defensive_snaps: int = 0
    pass_snaps: int = 0

    @classmethod
    def from_plays(cls, opponent_plays: Sequence[PlayRecord]) -> "DefensiveContext":
        return cls(
            defensive_snaps=len(opponent_plays),
            pass_snaps=sum(1 for p in opponent_plays if p.is_pass),
        )


@dataclass(frozen=True)
class DefensivePlayerStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    # Tackles
    defensive_snaps: int = 0
    primary_tackles: int = 0
    assist_tackles: int = 0
    total_tackles: int = 0
    missed_tackles: int = 0
    tackle_participation: float = 0.0
    missed_tackle_rate: float = 0.0

    # Pass rush
    pressures: int = 0
    sacks: int = 0
    pressure_rate: float = 0.0
    sack_rate: float = 0.0

    # Coverage
    targets: int = 0
    coverage_wins: int = 0
    coverage_losses: int = 0
    coverage_success_rate: float = 0.0

    # Havoc (zero-filled until participation rows carry these events)
    tfls: int = 0
    forced_fumbles: int = 0
    interceptions: int = 0
    pbus: int = 0
    havoc_rate: float = 0.0

    # Defensive scores (pick-six, scoop-and-score); not tagged yet
    defensive_touchdowns: int = 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


def build_defensive_stats(
    player: PlayerRecord,
    context: DefensiveContext,
    tackles: dict,
    pressure: dict,
    coverage: dict,
) -> DefensivePlayerStats:
    """Combine one player's participation counts with team context."""
    primary = int(tackles.get("primary_tackles") or 0)
    assist = int(tackles.get("assist_tackles") or 0)
    missed = int(tackles.get("missed_tackles") or 0)
    total = primary + assist

    pressures = int(pressure.get("pressures") or 0)
    sacks = int(pressure.get("sacks") or 0)

    targets = int(coverage.get("targets") or 0)
    wins = int(coverage.get("wins") or 0)

    tfls = forced_fumbles = interceptions = pbus = 0
    havoc = tfls + forced_fumbles + interceptions + pbus + sacks

    return DefensivePlayerStats(
        player_id=player.id,
        player_name=player.name,
        jersey_number=player.jersey_number,
        position=player.primary_position,
        defensive_snaps=context.defensive_snaps,
        primary_tackles=primary,
        assist_tackles=assist,
        total_tackles=total,
        missed_tackles=missed,
        tackle_participation=pct(total, context.defensive_snaps),
        missed_tackle_rate=pct(missed, total + missed),
        pressures=pressures,
        sacks=sacks,
        pressure_rate=pct(pressures, context.pass_snaps),
        sack_rate=pct(sacks, context.pass_snaps),
        targets=targets,
        coverage_wins=wins,
        coverage_losses=targets - wins,
        coverage_success_rate=pct(wins, targets),
        tfls=tfls,
        forced_fumbles=forced_fumbles,
        interceptions=interceptions,
        pbus=pbus,
        havoc_rate=pct(havoc, context.defensive_snaps),
    )


async def _defender_stats(
    store: AnalyticsDataStore,
    player: PlayerRecord,
    team_id: str,
    context: DefensiveContext,
    video_ids: list[str] | None,
) -> DefensivePlayerStats:
    tackles, pressure, coverage = await asyncio.gather(
        store.tackle_counts(player.id, team_id, video_ids=video_ids),
        store.pressure_counts(player.id, team_id, video_ids=video_ids),
        store.coverage_counts(player.id, team_id, video_ids=video_ids),
    )
    return build_defensive_stats(player, context, tackles, pressure, coverage)


async def calculate_defensive_stats(
    store: AnalyticsDataStore,
    roster: Sequence[PlayerRecord],
    team_id: str,
    context: DefensiveContext,
    video_ids: list[str] | None = None,
) -> list[DefensivePlayerStats]:
    """Defensive grades for every defender on the roster.

    Returns [] when the team has no defensive snaps in scope. Per-player
    failures are logged and that player is left out of the result.
    """
    if context.defensive_snaps == 0:
        return []

    defenders = [p for p in roster if p.is_defender]
    if not defenders:
        return []

    results, failures = await settle_all(
        (p.id, _defender_stats(store, p, team_id, context, video_ids)) for p in defenders
    )
    for player_id, error in failures.items():
        logger.warning(f"Defensive stats failed for player {player_id}: {error}")

    logger.info(
        f"Defensive stats computed for {len(results)}/{len(defenders)} defenders on team {team_id} "
        f"({context.defensive_snaps} snaps)"
    )
    return list(results.values())
