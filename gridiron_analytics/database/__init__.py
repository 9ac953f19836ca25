"""Database package initialization."""

from .connection import SessionLocal, create_engine_from_url, engine, get_session_context
from .models import Base, Drive, PlayerParticipation, PlayInstance, Player, TeamAnalyticsConfig, Video
from .store import AnalyticsDataStore, SqlAlchemyAnalyticsStore

__all__ = [
    "AnalyticsDataStore",
    "Base",
    "Drive",
    "PlayInstance",
    "Player",
    "PlayerParticipation",
    "SessionLocal",
    "SqlAlchemyAnalyticsStore",
    "TeamAnalyticsConfig",
    "Video",
    "create_engine_from_url",
    "engine",
    "get_session_context",
]
