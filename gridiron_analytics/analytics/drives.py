"""Drive-level rate statistics.

Drives are pre-aggregated possessions; this module only reduces a list of them
into rates. Both reductions return an explicit all-zero record for an empty
list instead of dividing by zero.
"""

from dataclasses import dataclass
from typing import Sequence

from .records import DriveRecord
from .stats import pct, ratio, to_camel_dict

STOP_RESULTS = ("punt", "downs", "turnover")


@dataclass(frozen=True)
class DriveAnalytics:
    """Offensive possession efficiency."""

    total_drives: int = 0
    points_per_drive: float = 0.0
    avg_plays_per_drive: float = 0.0
    avg_yards_per_drive: float = 0.0
    three_and_out_rate: float = 0.0
    red_zone_touchdown_rate: float = 0.0
    scoring_drive_rate: float = 0.0

    touchdowns: int = 0
    field_goals: int = 0
    punts: int = 0
    turnovers: int = 0
    turnovers_on_downs: int = 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


@dataclass(frozen=True)
class DefensiveDriveAnalytics:
    """Opponent possession efficiency, i.e. what the defense allowed."""

    total_drives: int = 0
    points_allowed_per_drive: float = 0.0
    avg_plays_per_drive: float = 0.0
    avg_yards_allowed_per_drive: float = 0.0
    three_and_out_rate: float = 0.0
    red_zone_stop_rate: float = 0.0
    scoring_drive_allowed_rate: float = 0.0
    stop_rate: float = 0.0

    touchdowns_allowed: int = 0
    field_goals_allowed: int = 0
    stops: int = 0
    turnovers: int = 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


def _count(drives: Sequence[DriveRecord], predicate) -> int:
    return sum(1 for d in drives if predicate(d))


def calculate_drive_analytics(drives: Sequence[DriveRecord]) -> DriveAnalytics:
    """Reduce offensive drives into rate statistics.

    Red-zone touchdown rate is touchdowns among drives that reached the red
    zone, not among all drives.
    """
    total = len(drives)
    if total == 0:
        return DriveAnalytics()

    red_zone = [d for d in drives if d.reached_red_zone]

    return DriveAnalytics(
        total_drives=total,
        points_per_drive=ratio(sum(d.points for d in drives), total),
        avg_plays_per_drive=ratio(sum(d.plays_count for d in drives), total),
        avg_yards_per_drive=ratio(sum(d.yards_gained for d in drives), total),
        three_and_out_rate=pct(_count(drives, lambda d: d.three_and_out), total),
        red_zone_touchdown_rate=pct(_count(red_zone, lambda d: d.result == "touchdown"), len(red_zone)),
        scoring_drive_rate=pct(_count(drives, lambda d: d.scoring_drive), total),
        touchdowns=_count(drives, lambda d: d.result == "touchdown"),
        field_goals=_count(drives, lambda d: d.result == "field_goal"),
        punts=_count(drives, lambda d: d.result == "punt"),
        turnovers=_count(drives, lambda d: d.result == "turnover"),
        turnovers_on_downs=_count(drives, lambda d: d.result == "downs"),
    )


def calculate_defensive_drive_analytics(drives: Sequence[DriveRecord]) -> DefensiveDriveAnalytics:
    """Reduce opponent drives into points/yards allowed and stop rates."""
    total = len(drives)
    if total == 0:
        return DefensiveDriveAnalytics()

    red_zone = [d for d in drives if d.reached_red_zone]
    stops = _count(drives, lambda d: d.result in STOP_RESULTS)

    return DefensiveDriveAnalytics(
        total_drives=total,
        points_allowed_per_drive=ratio(sum(d.points for d in drives), total),
        avg_plays_per_drive=ratio(sum(d.plays_count for d in drives), total),
        avg_yards_allowed_per_drive=ratio(sum(d.yards_gained for d in drives), total),
        three_and_out_rate=pct(_count(drives, lambda d: d.three_and_out), total),
        red_zone_stop_rate=pct(_count(red_zone, lambda d: d.result != "touchdown"), len(red_zone)),
        scoring_drive_allowed_rate=pct(_count(drives, lambda d: d.scoring_drive), total),
        stop_rate=pct(stops, total),
        touchdowns_allowed=_count(drives, lambda d: d.result == "touchdown"),
        field_goals_allowed=_count(drives, lambda d: d.result == "field_goal"),
        stops=stops,
        turnovers=_count(drives, lambda d: d.result == "turnover"),
    )
