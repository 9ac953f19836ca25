"""One row per player across offense, offensive line and defense."""

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .attribution import PlayerAttributionStats
from .defense import DefensivePlayerStats
from .offensive_line import OffensiveLineStats
from .records import PlayerRecord
from .stats import to_camel_dict


@dataclass(frozen=True)
class UnifiedPlayerStats:
    player_id: str
    player_name: str
    jersey_number: str
    positions: tuple[str, ...] = field(default_factory=tuple)
    primary_position: str = ""

    # None when the player has no data in that category
    offense: PlayerAttributionStats | None = None
    offensive_line: OffensiveLineStats | None = None
    defense: DefensivePlayerStats | None = None

    total_snaps: int = 0
    total_touchdowns: int = 0

    def to_dict(self) -> dict:
        return to_camel_dict(self)


def _jersey_key(jersey: str):
    # Numeric jerseys sort numerically and ahead of anything else
    return (0, int(jersey), "") if jersey.isdigit() else (1, 0, jersey)


def merge_player_stats(
    offense: Sequence[PlayerAttributionStats],
    offensive_line: Sequence[OffensiveLineStats],
    defense: Sequence[DefensivePlayerStats],
    identities: Mapping[str, PlayerRecord],
) -> list[UnifiedPlayerStats]:
    """Merge the three category lists by player ID.

    Identity comes from the identity mapping; a player missing from it falls
    back to the name and jersey the category record carries.
    """
    by_offense = {s.player_id: s for s in offense}
    by_line = {s.player_id: s for s in offensive_line}
    by_defense = {s.player_id: s for s in defense}

    merged = []
    for player_id in set(by_offense) | set(by_line) | set(by_defense):
        off = by_offense.get(player_id)
        ol = by_line.get(player_id)
        dfn = by_defense.get(player_id)
        fallback = off or ol or dfn

        player = identities.get(player_id)
        if player is None:
            player = PlayerRecord(
                id=player_id,
                jersey_number=fallback.jersey_number,
                primary_position=fallback.position,
                positions=frozenset({fallback.position}) if fallback.position else frozenset(),
            )
            name = fallback.player_name
        else:
            name = player.name

        total_snaps = (off.offensive_plays if off else 0) + (dfn.defensive_snaps if dfn else 0)
        total_tds = (off.total_touchdowns if off else 0) + (dfn.defensive_touchdowns if dfn else 0)

        merged.append(
            UnifiedPlayerStats(
                player_id=player_id,
                player_name=name,
                jersey_number=player.jersey_number,
                positions=tuple(sorted(player.positions)),
                primary_position=player.primary_position,
                offense=off,
                offensive_line=ol,
                defense=dfn,
                total_snaps=total_snaps,
                total_touchdowns=total_tds,
            )
        )

    merged.sort(key=lambda u: (_jersey_key(u.jersey_number), u.player_name))
    return merged
