"""Single-player position profiles and the defensive down breakdown.

The profiles are per-player deep dives (QB, RB, WR/TE) built from the plays a
player appears in. All outcome flags were settled on PlayRecord; explosive
plays are whatever was tagged explosive on film.
"""

from dataclasses import dataclass
from typing import Sequence

from .records import PlayerRecord, PlayRecord
from .stats import pct, ratio, to_camel_dict

RED_ZONE_YARD_LINE = 80

# Incompletions that are not on the receiver
_UNCATCHABLE_RESULTS = ("throwaway", "batted")


def _converted(play: PlayRecord) -> bool:
    return play.resulted_in_first_down or play.is_touchdown


@dataclass(frozen=True)
class QBStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    dropbacks: int = 0
    completions: int = 0
    attempts: int = 0
    completion_pct: float = 0.0
    pass_yards: int = 0
    yards_per_attempt: float = 0.0
    pass_touchdowns: int = 0
    interceptions: int = 0
    sacks: int = 0

    rush_attempts: int = 0
    rush_yards: int = 0
    rush_avg: float = 0.0
    rush_touchdowns: int = 0

    third_down_attempts: int = 0
    third_down_conversions: int = 0
    third_down_pct: float = 0.0
    red_zone_attempts: int = 0
    red_zone_touchdowns: int = 0
    red_zone_touchdown_pct: float = 0.0
    pressured_dropbacks: int = 0
    completions_under_pressure: int = 0
    pressure_completion_pct: float = 0.0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


@dataclass(frozen=True)
class RBStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    carries: int = 0
    rush_yards: int = 0
    rush_avg: float = 0.0
    rush_touchdowns: int = 0
    rush_success: int = 0
    rush_success_rate: float = 0.0
    explosive_runs: int = 0
    explosive_rate: float = 0.0

    targets: int = 0
    receptions: int = 0
    rec_yards: int = 0
    rec_avg: float = 0.0
    rec_touchdowns: int = 0
    catch_rate: float = 0.0

    total_touches: int = 0
    total_yards: int = 0
    total_touchdowns: int = 0
    yards_per_touch: float = 0.0

    third_down_rushes: int = 0
    third_down_conversions: int = 0
    third_down_pct: float = 0.0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


@dataclass(frozen=True)
class WRTEStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    targets: int = 0
    receptions: int = 0
    rec_yards: int = 0
    rec_avg: float = 0.0
    yards_per_target: float = 0.0
    rec_touchdowns: int = 0
    catch_rate: float = 0.0
    explosive_catches: int = 0
    explosive_rate: float = 0.0
    drops: int = 0
    drop_rate: float = 0.0

    third_down_targets: int = 0
    third_down_conversions: int = 0
    third_down_pct: float = 0.0
    red_zone_targets: int = 0
    red_zone_touchdowns: int = 0
    red_zone_touchdown_pct: float = 0.0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


@dataclass(frozen=True)
class DownBreakdown:
    down: int
    plays: int = 0
    yards_allowed: int = 0
    yards_allowed_per_play: float = 0.0
    defensive_success_rate: float = 0.0
    stop_rate: float = 0.0
    turnovers: int = 0
    turnover_rate: float = 0.0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


def _identity(player: PlayerRecord) -> dict:
    return {
        "player_id": player.id,
        "player_name": player.name,
        "jersey_number": player.jersey_number,
        "position": player.primary_position,
    }


def calculate_qb_stats(
    player: PlayerRecord, plays: Sequence[PlayRecord], red_zone_yard_line: int = RED_ZONE_YARD_LINE
) -> QBStats | None:
    """Passing, scrambling and situational profile for a quarterback.

    Returns None when the player has no plays as QB.
    """
    qb_plays = [p for p in plays if p.qb_id == player.id]
    if not qb_plays:
        return None

    passes = [p for p in qb_plays if p.is_pass]
    rushes = [p for p in plays if p.ball_carrier_id == player.id and p.is_run]

    completions = sum(1 for p in passes if p.is_completion)
    pass_yards = sum(p.yards_gained for p in passes)
    rush_yards = sum(p.yards_gained for p in rushes)

    third_down = [p for p in passes if p.down == 3]
    third_down_conversions = sum(1 for p in third_down if _converted(p))
    red_zone = [p for p in passes if p.yard_line >= red_zone_yard_line]
    red_zone_tds = sum(1 for p in red_zone if p.is_touchdown)
    pressured = [p for p in passes if p.facing_blitz or p.is_sack]
    pressured_completions = sum(1 for p in pressured if p.is_completion)

    return QBStats(
        **_identity(player),
        dropbacks=len(passes),
        completions=completions,
        attempts=len(passes),
        completion_pct=pct(completions, len(passes)),
        pass_yards=pass_yards,
        yards_per_attempt=ratio(pass_yards, len(passes)),
        pass_touchdowns=sum(1 for p in passes if p.is_touchdown),
        interceptions=sum(1 for p in passes if p.is_interception),
        sacks=sum(1 for p in passes if p.is_sack),
        rush_attempts=len(rushes),
        rush_yards=rush_yards,
        rush_avg=ratio(rush_yards, len(rushes)),
        rush_touchdowns=sum(1 for p in rushes if p.is_touchdown),
        third_down_attempts=len(third_down),
        third_down_conversions=third_down_conversions,
        third_down_pct=pct(third_down_conversions, len(third_down)),
        red_zone_attempts=len(red_zone),
        red_zone_touchdowns=red_zone_tds,
        red_zone_touchdown_pct=pct(red_zone_tds, len(red_zone)),
        pressured_dropbacks=len(pressured),
        completions_under_pressure=pressured_completions,
        pressure_completion_pct=pct(pressured_completions, len(pressured)),
    )


def calculate_rb_stats(player: PlayerRecord, plays: Sequence[PlayRecord]) -> RBStats | None:
    """Rushing and receiving profile for a running back."""
    rushes = [p for p in plays if p.ball_carrier_id == player.id and p.is_run]
    targets = [p for p in plays if p.target_id == player.id]
    if not rushes and not targets:
        return None

    rush_yards = sum(p.yards_gained for p in rushes)
    rush_tds = sum(1 for p in rushes if p.is_touchdown)
    rush_success = sum(1 for p in rushes if p.success)
    explosive = sum(1 for p in rushes if p.explosive)

    caught = [p for p in targets if p.is_completion]
    rec_yards = sum(p.yards_gained for p in caught)
    rec_tds = sum(1 for p in targets if p.is_touchdown)

    touches = len(rushes) + len(caught)
    third_down = [p for p in rushes if p.down == 3]
    third_down_conversions = sum(1 for p in third_down if _converted(p))

    return RBStats(
        **_identity(player),
        carries=len(rushes),
        rush_yards=rush_yards,
        rush_avg=ratio(rush_yards, len(rushes)),
        rush_touchdowns=rush_tds,
        rush_success=rush_success,
        rush_success_rate=pct(rush_success, len(rushes)),
        explosive_runs=explosive,
        explosive_rate=pct(explosive, len(rushes)),
        targets=len(targets),
        receptions=len(caught),
        rec_yards=rec_yards,
        rec_avg=ratio(rec_yards, len(caught)),
        rec_touchdowns=rec_tds,
        catch_rate=pct(len(caught), len(targets)),
        total_touches=touches,
        total_yards=rush_yards + rec_yards,
        total_touchdowns=rush_tds + rec_tds,
        yards_per_touch=ratio(rush_yards + rec_yards, touches),
        third_down_rushes=len(third_down),
        third_down_conversions=third_down_conversions,
        third_down_pct=pct(third_down_conversions, len(third_down)),
    )


def calculate_wrte_stats(
    player: PlayerRecord, plays: Sequence[PlayRecord], red_zone_yard_line: int = RED_ZONE_YARD_LINE
) -> WRTEStats | None:
    """Receiving profile for a wide receiver or tight end.

    A drop is an incompletion on a catchable ball: sacks, throwaways and
    batted passes are excluded from the drop denominator.
    """
    targets = [p for p in plays if p.target_id == player.id]
    if not targets:
        return None

    caught = [p for p in targets if p.is_completion]
    rec_yards = sum(p.yards_gained for p in caught)
    explosive = sum(1 for p in caught if p.explosive)

    catchable = [
        p for p in targets
        if not p.is_sack and not any(r in p.result for r in _UNCATCHABLE_RESULTS)
    ]
    drops = sum(1 for p in catchable if not p.is_completion)

    third_down = [p for p in targets if p.down == 3]
    third_down_conversions = sum(1 for p in third_down if p.is_completion and _converted(p))
    red_zone = [p for p in targets if p.yard_line >= red_zone_yard_line]
    red_zone_tds = sum(1 for p in red_zone if p.is_touchdown)

    return WRTEStats(
        **_identity(player),
        targets=len(targets),
        receptions=len(caught),
        rec_yards=rec_yards,
        rec_avg=ratio(rec_yards, len(caught)),
        yards_per_target=ratio(rec_yards, len(targets)),
        rec_touchdowns=sum(1 for p in targets if p.is_touchdown),
        catch_rate=pct(len(caught), len(targets)),
        explosive_catches=explosive,
        explosive_rate=pct(explosive, len(caught)),
        drops=drops,
        drop_rate=pct(drops, len(catchable)),
        third_down_targets=len(third_down),
        third_down_conversions=third_down_conversions,
        third_down_pct=pct(third_down_conversions, len(third_down)),
        red_zone_targets=len(red_zone),
        red_zone_touchdowns=red_zone_tds,
        red_zone_touchdown_pct=pct(red_zone_tds, len(red_zone)),
    )


def calculate_down_breakdown(opponent_plays: Sequence[PlayRecord]) -> list[DownBreakdown]:
    """Opponent efficiency on downs 1-4, downs with no plays omitted."""
    breakdown = []
    for down in (1, 2, 3, 4):
        plays = [p for p in opponent_plays if p.down == down]
        if not plays:
            continue
        total = len(plays)
        yards = sum(p.yards_gained for p in plays)
        turnovers = sum(1 for p in plays if p.is_turnover)
        breakdown.append(
            DownBreakdown(
                down=down,
                plays=total,
                yards_allowed=yards,
                yards_allowed_per_play=ratio(yards, total),
                defensive_success_rate=pct(sum(1 for p in plays if not p.success), total),
                stop_rate=pct(sum(1 for p in plays if not p.resulted_in_first_down), total),
                turnovers=turnovers,
                turnover_rate=pct(turnovers, total),
            )
        )
    return breakdown
