"""Offensive player attribution (ball carriers, quarterbacks, targets).

This calculator is a reducer, not a play grader. "Success", "touchdown",
"completion" and "interception" were settled when the play record was built
(see PlayRecord.from_row); here they are only counted.

Algorithm:
1. Collect every player ID referenced as ball carrier, QB or target
2. Index each play under those IDs in three role buckets (carries,
   dropbacks, targets). Buckets are not exclusive: a QB who scrambled is in
   both dropbacks and carries
3. Reduce each bucket into yardage, touchdown, success and rate metrics
4. Drop players with no carries, no pass attempts and no targets
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Mapping, Sequence

from .records import PlayerRecord, PlayRecord
from .stats import pct, ratio, to_camel_dict


@dataclass(frozen=True)
class PlayerAttributionStats:
    player_id: str
    player_name: str
    jersey_number: str
    position: str

    # As ball carrier
    carries: int = 0
    rush_yards: int = 0
    rush_avg: float = 0.0
    rush_touchdowns: int = 0
    rush_success: int = 0
    rush_success_rate: float = 0.0

    # As QB
    dropbacks: int = 0
    completions: int = 0
    pass_attempts: int = 0
    completion_pct: float = 0.0
    pass_yards: int = 0
    pass_touchdowns: int = 0
    interceptions: int = 0

    # As target
    targets: int = 0
    receptions: int = 0
    rec_yards: int = 0
    rec_avg: float = 0.0
    rec_touchdowns: int = 0
    catch_rate: float = 0.0

    @property
    def offensive_plays(self) -> int:
        return self.carries + self.pass_attempts + self.targets

    @property
    def total_touchdowns(self) -> int:
        return self.rush_touchdowns + self.pass_touchdowns + self.rec_touchdowns

    @property
    def is_active(self) -> bool:
        return self.carries > 0 or self.pass_attempts > 0 or self.targets > 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


def referenced_player_ids(plays: Sequence[PlayRecord]) -> set[str]:
    """Every player ID that appears as ball carrier, QB or target."""
    ids = set()
    for play in plays:
        ids.update(pid for pid in (play.ball_carrier_id, play.qb_id, play.target_id) if pid)
    return ids


def _reduce(player: PlayerRecord, carries, dropbacks, targets) -> PlayerAttributionStats:
    rush_yards = sum(p.yards_gained for p in carries)
    rush_success = sum(1 for p in carries if p.success)

    completions = sum(1 for p in dropbacks if p.is_completion)
    pass_yards = sum(p.yards_gained for p in dropbacks)

    caught = [p for p in targets if p.is_completion]
    rec_yards = sum(p.yards_gained for p in caught)

    return PlayerAttributionStats(
        player_id=player.id,
        player_name=player.name,
        jersey_number=player.jersey_number,
        position=player.primary_position,
        carries=len(carries),
        rush_yards=rush_yards,
        rush_avg=ratio(rush_yards, len(carries)),
        rush_touchdowns=sum(1 for p in carries if p.is_touchdown),
        rush_success=rush_success,
        rush_success_rate=pct(rush_success, len(carries)),
        dropbacks=len(dropbacks),
        completions=completions,
        pass_attempts=len(dropbacks),
        completion_pct=pct(completions, len(dropbacks)),
        pass_yards=pass_yards,
        pass_touchdowns=sum(1 for p in dropbacks if p.is_touchdown),
        interceptions=sum(1 for p in dropbacks if p.is_interception),
        targets=len(targets),
        receptions=len(caught),
        rec_yards=rec_yards,
        rec_avg=ratio(rec_yards, len(caught)),
        rec_touchdowns=sum(1 for p in targets if p.is_touchdown and p.is_pass),
        catch_rate=pct(len(caught), len(targets)),
    )


def calculate_player_attribution(
    plays: Sequence[PlayRecord], players: Mapping[str, PlayerRecord]
) -> list[PlayerAttributionStats]:
    """Per-player offensive stats for every player the plays reference.

    Args:
        plays: Own-team plays
        players: Identity records keyed by player ID. IDs missing from the
            mapping still get stats under a placeholder identity.

    Returns:
        One record per active player, ordered by offensive involvement
    """
    carries = defaultdict(list)
    dropbacks = defaultdict(list)
    targets = defaultdict(list)

    for play in plays:
        if play.ball_carrier_id:
            carries[play.ball_carrier_id].append(play)
        if play.qb_id and play.is_pass:
            dropbacks[play.qb_id].append(play)
        if play.target_id:
            targets[play.target_id].append(play)

    stats = []
    for player_id in sorted(referenced_player_ids(plays)):
        player = players.get(player_id) or PlayerRecord.placeholder(player_id)
        record = _reduce(player, carries[player_id], dropbacks[player_id], targets[player_id])
        if record.is_active:
            stats.append(record)

    stats.sort(key=lambda s: (-s.offensive_plays, s.player_name))
    return stats
