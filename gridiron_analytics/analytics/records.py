"""Typed records built from raw data-store rows.

Rows arrive from the store as loosely typed dicts with optional fields. Every
"is this field present" decision is made once, here, when the record is built:
missing numbers become 0, missing flags become False, and free-text results
("pass_complete", "touchdown", ...) are folded into boolean outcome fields.
Calculators downstream read plain attributes and never second-guess them.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

OL_POSITIONS = frozenset({"LT", "LG", "C", "RG", "RT"})
DEFENSIVE_POSITIONS = frozenset(
    {"DL", "DE", "DT", "NT", "LB", "MLB", "OLB", "ILB", "WLB", "SLB", "DB", "CB", "S", "FS", "SS"}
)


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


def _flag(value: Any) -> bool:
    return bool(value) if value is not None else False


def _text(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def _jersey(value: Any) -> str:
    # 0 is a legal jersey number
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class PlayRecord:
    """One tagged play."""

    id: str
    team_id: str
    video_id: str | None = None
    drive_id: str | None = None
    is_opponent_play: bool = False

    play_type: str = ""
    formation: str = ""
    direction: str = ""
    result: str = ""
    down: int = 0
    distance: int = 0
    yard_line: int = 0
    quarter: int = 0

    yards_gained: int = 0
    resulted_in_first_down: bool = False
    is_turnover: bool = False
    is_touchdown: bool = False
    is_completion: bool = False
    is_interception: bool = False
    is_sack: bool = False
    is_pbu: bool = False
    is_tfl: bool = False
    is_forced_fumble: bool = False
    success: bool = False
    explosive: bool = False

    qb_id: str | None = None
    ball_carrier_id: str | None = None
    target_id: str | None = None
    ol_penalty_player_id: str | None = None

    has_motion: bool = False
    is_play_action: bool = False
    facing_blitz: bool = False

    @property
    def is_pass(self) -> bool:
        return self.play_type == "pass"

    @property
    def is_run(self) -> bool:
        return self.play_type == "run"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PlayRecord":
        result = _text(row.get("result"))
        play_type = _text(row.get("play_type"))

        is_touchdown = _flag(row.get("is_touchdown")) or "touchdown" in result
        is_completion = ("complete" in result and "incomplete" not in result) or (
            is_touchdown and play_type == "pass"
        )
        is_interception = _flag(row.get("is_interception")) or "interception" in result
        is_sack = _flag(row.get("is_sack")) or "sack" in result

        return cls(
            id=str(row["id"]),
            team_id=str(row.get("team_id") or ""),
            video_id=row.get("video_id"),
            drive_id=row.get("drive_id"),
            is_opponent_play=_flag(row.get("is_opponent_play")),
            play_type=play_type,
            formation=row.get("formation") or "",
            direction=_text(row.get("direction")),
            result=result,
            down=_int(row.get("down")),
            distance=_int(row.get("distance")),
            yard_line=_int(row.get("yard_line")),
            quarter=_int(row.get("quarter")),
            yards_gained=_int(row.get("yards_gained")),
            resulted_in_first_down=_flag(row.get("resulted_in_first_down")),
            is_turnover=_flag(row.get("is_turnover")) or is_interception,
            is_touchdown=is_touchdown,
            is_completion=is_completion,
            is_interception=is_interception,
            is_sack=is_sack,
            is_pbu=_flag(row.get("is_pbu")),
            is_tfl=_flag(row.get("is_tfl")),
            is_forced_fumble=_flag(row.get("is_forced_fumble")),
            success=_flag(row.get("success")),
            explosive=_flag(row.get("explosive")),
            qb_id=row.get("qb_id") or None,
            ball_carrier_id=row.get("ball_carrier_id") or None,
            target_id=row.get("target_id") or None,
            ol_penalty_player_id=row.get("ol_penalty_player_id") or None,
            has_motion=_flag(row.get("has_motion")),
            is_play_action=_flag(row.get("is_play_action")),
            facing_blitz=_flag(row.get("facing_blitz")),
        )


@dataclass(frozen=True)
class DriveRecord:
    """One pre-aggregated possession."""

    id: str
    team_id: str
    game_id: str = ""
    is_offensive_drive: bool = True
    plays_count: int = 0
    yards_gained: int = 0
    points: int = 0
    result: str = ""
    three_and_out: bool = False
    reached_red_zone: bool = False
    scoring_drive: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DriveRecord":
        is_offensive = row.get("is_offensive_drive")
        return cls(
            id=str(row["id"]),
            team_id=str(row.get("team_id") or ""),
            game_id=str(row.get("game_id") or ""),
            is_offensive_drive=True if is_offensive is None else bool(is_offensive),
            plays_count=_int(row.get("plays_count")),
            yards_gained=_int(row.get("yards_gained")),
            points=_int(row.get("points")),
            result=_text(row.get("result")),
            three_and_out=_flag(row.get("three_and_out")),
            reached_red_zone=_flag(row.get("reached_red_zone")),
            scoring_drive=_flag(row.get("scoring_drive")),
        )


@dataclass(frozen=True)
class PlayerRecord:
    """Player identity plus the set of position slots the player holds."""

    id: str
    team_id: str = ""
    first_name: str = ""
    last_name: str = ""
    jersey_number: str = ""
    primary_position: str = ""
    position_group: str = ""
    positions: frozenset[str] = field(default_factory=frozenset)
    is_active: bool = True

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or "Unknown Player"

    def holds_any(self, slots: frozenset[str]) -> bool:
        return not self.positions.isdisjoint(slots)

    @property
    def is_offensive_lineman(self) -> bool:
        return self.holds_any(OL_POSITIONS)

    @property
    def is_defender(self) -> bool:
        return self.position_group == "defense" or self.holds_any(DEFENSIVE_POSITIONS)

    @classmethod
    def placeholder(cls, player_id: str) -> "PlayerRecord":
        """Identity for an ID referenced by plays but missing from the roster."""
        return cls(id=player_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PlayerRecord":
        depths = row.get("position_depths") or {}
        positions = {str(p).upper() for p in depths}
        if not positions:
            positions = {
                str(p).upper()
                for p in (row.get("primary_position"), row.get("secondary_position"))
                if p
            }
        is_active = row.get("is_active")
        return cls(
            id=str(row["id"]),
            team_id=str(row.get("team_id") or ""),
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            jersey_number=_jersey(row.get("jersey_number")),
            primary_position=(row.get("primary_position") or "").upper(),
            position_group=_text(row.get("position_group")),
            positions=frozenset(positions),
            is_active=True if is_active is None else bool(is_active),
        )
