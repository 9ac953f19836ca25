"""SQLAlchemy database models for the film analytics store.

This file defines the read model the analytics engine queries: team analytics
configuration, players, videos, tagged plays, the normalized player
participation join, and pre-aggregated drives.

The engine treats these tables as an external data service. Apart from
team_analytics_config (written by the explicit tier update) it only reads
them; tagging forms own every other write path.

Design Decisions:
- String primary keys: identifiers are opaque keys issued by the hosted store
- No play -> game foreign key: a play belongs to a video, a video to a game
- player_participation replaces player-ID arrays on play_instances
  (one row per play/player/role triple, B-tree indexed by player and role)
- JSON columns for flexible per-role metadata and per-position depth charts
"""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

# Base class for all database models
Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class TeamAnalyticsConfig(Base):
    """One row per team: analytics tier plus the feature flags derived from it.

    Flags are written only at tier-change time (see TierResolver.update_team_tier).
    A team without a row is valid; the resolver substitutes a default.
    """

    __tablename__ = "team_analytics_config"

    team_id = Column(String(64), primary_key=True)
    tier = Column(String(32), nullable=False, default="plus")

    enable_drive_analytics = Column(Boolean, nullable=False, default=True)
    enable_player_attribution = Column(Boolean, nullable=False, default=True)
    enable_ol_tracking = Column(Boolean, nullable=False, default=False)
    enable_defensive_tracking = Column(Boolean, nullable=False, default=False)
    enable_situational_splits = Column(Boolean, nullable=False, default=False)
    default_tagging_mode = Column(String(16), nullable=False, default="standard")

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = Column(String(64))


class Player(Base):
    """Roster entry.

    position_depths maps each position slot a player holds to a depth
    ({"LT": 1, "DE": 2}); multi-position players have several keys.
    """

    __tablename__ = "players"

    id = Column(String(64), primary_key=True, default=_new_id)
    team_id = Column(String(64), nullable=False, index=True)
    first_name = Column(String(64), nullable=False, default="")
    last_name = Column(String(64), nullable=False, default="")
    jersey_number = Column(String(8))
    primary_position = Column(String(8))
    secondary_position = Column(String(8))
    position_group = Column(String(16))  # offense, defense, special_teams
    position_depths = Column(JSON)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_players_team_active", "team_id", "is_active"),)


class Video(Base):
    """Game film. The only link between plays and games."""

    __tablename__ = "videos"

    id = Column(String(64), primary_key=True, default=_new_id)
    game_id = Column(String(64), nullable=False, index=True)
    team_id = Column(String(64), index=True)

    plays = relationship("PlayInstance", back_populates="video")


class PlayInstance(Base):
    """One tagged play with situational, outcome and attribution detail.

    Exactly one of own-team play / opponent play holds (is_opponent_play).
    Offensive attribution (qb/ball carrier/target/OL slots) is filled on
    own-team plays; defensive participation lives in player_participation.
    """

    __tablename__ = "play_instances"

    id = Column(String(64), primary_key=True, default=_new_id)
    team_id = Column(String(64), nullable=False, index=True)
    video_id = Column(String(64), ForeignKey("videos.id"), index=True)
    drive_id = Column(String(64), index=True)
    is_opponent_play = Column(Boolean, nullable=False, default=False)

    # Classification
    play_type = Column(String(16))  # run, pass, screen, rpo, trick, kick, pat, two_point
    formation = Column(String(64))
    direction = Column(String(8))
    result = Column(String(32))  # rush_gain, pass_complete, touchdown, ...
    down = Column(Integer)
    distance = Column(Integer)
    yard_line = Column(Integer)
    quarter = Column(Integer)

    # Outcome
    yards_gained = Column(Integer)
    resulted_in_first_down = Column(Boolean)
    is_turnover = Column(Boolean)
    is_touchdown = Column(Boolean)
    is_sack = Column(Boolean)
    is_interception = Column(Boolean)
    is_pbu = Column(Boolean)
    is_tfl = Column(Boolean)
    is_forced_fumble = Column(Boolean)
    success = Column(Boolean)  # pre-tagged by the tagging pipeline
    explosive = Column(Boolean)  # pre-tagged by the tagging pipeline

    # Offensive attribution
    qb_id = Column(String(64), index=True)
    ball_carrier_id = Column(String(64), index=True)
    target_id = Column(String(64), index=True)

    # Offensive line slots
    lt_id = Column(String(64))
    lt_block_result = Column(String(8))  # win, loss, neutral
    lg_id = Column(String(64))
    lg_block_result = Column(String(8))
    c_id = Column(String(64))
    c_block_result = Column(String(8))
    rg_id = Column(String(64))
    rg_block_result = Column(String(8))
    rt_id = Column(String(64))
    rt_block_result = Column(String(8))
    ol_penalty_player_id = Column(String(64), index=True)

    # Situational
    has_motion = Column(Boolean)
    is_play_action = Column(Boolean)
    facing_blitz = Column(Boolean)

    video = relationship("Video", back_populates="plays")
    participations = relationship(
        "PlayerParticipation", back_populates="play", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_play_instances_team_side", "team_id", "is_opponent_play"),)


class PlayerParticipation(Base):
    """Normalized (play, player, role) join record.

    participation_type: primary_tackle, assist_tackle, missed_tackle, pressure,
    coverage_assignment, lb_pass_coverage, db_pass_coverage, ol_lt ... ol_rt,
    ol_penalty, ...
    result: made, missed, win, loss, sack, hurry, hit, completion_allowed,
    incompletion, interception, pass_breakup, ...
    """

    __tablename__ = "player_participation"

    id = Column(String(64), primary_key=True, default=_new_id)
    play_instance_id = Column(
        String(64), ForeignKey("play_instances.id", ondelete="CASCADE"), nullable=False, index=True
    )
    player_id = Column(String(64), nullable=False)
    team_id = Column(String(64), nullable=False, index=True)
    participation_type = Column(String(32), nullable=False)
    result = Column(String(32))
    # "metadata" is reserved on declarative classes, so the attribute is named details
    details = Column("metadata", JSON)

    play = relationship("PlayInstance", back_populates="participations")

    __table_args__ = (
        Index("idx_player_participation_player_type", "player_id", "participation_type"),
        Index("idx_player_participation_team_player", "team_id", "player_id"),
    )


class Drive(Base):
    """Pre-aggregated possession. Built outside the analytics engine."""

    __tablename__ = "drives"

    id = Column(String(64), primary_key=True, default=_new_id)
    game_id = Column(String(64), nullable=False, index=True)
    team_id = Column(String(64), nullable=False, index=True)
    is_offensive_drive = Column(Boolean, nullable=False, default=True)
    drive_number = Column(Integer)
    quarter = Column(Integer)
    plays_count = Column(Integer, nullable=False, default=0)
    yards_gained = Column(Integer, nullable=False, default=0)
    first_downs = Column(Integer, nullable=False, default=0)
    result = Column(String(16))  # touchdown, field_goal, punt, turnover, downs, end_half, end_game, safety
    points = Column(Integer, nullable=False, default=0)
    three_and_out = Column(Boolean, nullable=False, default=False)
    reached_red_zone = Column(Boolean, nullable=False, default=False)
    scoring_drive = Column(Boolean, nullable=False, default=False)
